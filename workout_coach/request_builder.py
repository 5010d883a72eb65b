"""
Builds the Claude prompt for a workout plan from the user's form selection.
"""

import base64
import io
from PIL import Image
from workout_coach.config import DEFAULT_PLAN_SETTINGS
from workout_coach.errors import InvalidSelectionError
from workout_coach.models import (
    MAX_TRAINING_DAYS,
    MIN_TRAINING_DAYS,
    WORKOUT_TYPES,
    PromptPayload,
)


MAX_PHOTO_BYTES = 5 * 1024 * 1024
MAX_PHOTO_SIDE = 2048
PIL_FORMAT_MEDIA_TYPES = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "GIF": "image/gif",
    "WEBP": "image/webp",
}

SYSTEM_PROMPT = """You are a knowledgeable fitness coach. Build safe, practical workout plans from the user's selections and, when provided, the gym equipment shown in their photo.

Respond with a single JSON object and nothing else. No markdown, no code fences, no commentary before or after the object."""

EQUIPMENT_WITH_PHOTO = (
    "The user has uploaded a photo of their available equipment. "
    "Only program exercises that can be done with the equipment in the photo."
)

EQUIPMENT_WITHOUT_PHOTO = {
    "Gym": "The user hasn't uploaded a photo of their equipment. Assume a standard commercial gym.",
    "Home": "The user hasn't uploaded a photo of their equipment. Assume a pair of dumbbells, a bench and resistance bands.",
    "Calisthenics": "The user hasn't uploaded a photo of their equipment. Use bodyweight exercises only, with a pull-up bar and parallel bars allowed.",
}


def _open_photo(photo):
    """
    Open and fully decode the photo with Pillow.

    verify() catches corrupt PNG chunks; load() catches truncated pixel data.
    """
    try:
        with Image.open(io.BytesIO(photo.data)) as img:
            img.verify()
        img = Image.open(io.BytesIO(photo.data))
        img.load()
        return img
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        raise InvalidSelectionError(
            f"Equipment photo {photo.filename} could not be read as an image ({e})."
        ) from e


def _read_photo(photo):
    """
    Check the photo and prepare it for the API.

    Returns:
        Tuple of (media_type, image bytes), downscaled when larger than MAX_PHOTO_SIDE
    """
    img = _open_photo(photo)
    with img:
        image_format = img.format
        media_type = PIL_FORMAT_MEDIA_TYPES.get(image_format)
        if media_type is None:
            raise InvalidSelectionError(
                f"Equipment photo {photo.filename} must be a JPEG, PNG, GIF or WebP image, got {image_format}."
            )

        if img.width <= MAX_PHOTO_SIDE and img.height <= MAX_PHOTO_SIDE:
            return media_type, photo.data

        if img.mode not in ['RGB', 'RGBA']:
            img = img.convert('RGB')
        img.thumbnail((MAX_PHOTO_SIDE, MAX_PHOTO_SIDE), Image.Resampling.LANCZOS)

        img_buffer = io.BytesIO()
        if image_format == 'JPEG':
            img.convert('RGB').save(img_buffer, format='JPEG', quality=85)
        else:
            img.save(img_buffer, format=image_format)
        return media_type, img_buffer.getvalue()


def validate_selection(selection):
    """Reject selections that cannot produce a meaningful prompt."""
    if not selection.muscle_groups:
        raise InvalidSelectionError("Select at least one muscle group.")

    if selection.workout_type not in WORKOUT_TYPES:
        raise InvalidSelectionError(
            f"Unknown workout type {selection.workout_type!r}. Choose one of: {', '.join(WORKOUT_TYPES)}."
        )

    days = selection.training_days
    if isinstance(days, bool) or not isinstance(days, int):
        raise InvalidSelectionError(f"Training days must be a whole number, got {days!r}.")
    if not MIN_TRAINING_DAYS <= days <= MAX_TRAINING_DAYS:
        raise InvalidSelectionError(
            f"Training days must be between {MIN_TRAINING_DAYS} and {MAX_TRAINING_DAYS}, got {days}."
        )

    photo = selection.equipment_photo
    if photo is not None:
        if not photo.data:
            raise InvalidSelectionError(f"Equipment photo {photo.filename} is empty.")
        if len(photo.data) > MAX_PHOTO_BYTES:
            raise InvalidSelectionError(
                f"Equipment photo {photo.filename} is larger than {MAX_PHOTO_BYTES // (1024 * 1024)} MB."
            )


def _encode_photo(photo):
    media_type, data = _read_photo(photo)
    return {
        "media_type": media_type,
        "data": base64.b64encode(data).decode("utf-8"),
    }


def _format_output_example(training_days):
    day_lines = []
    for day in range(1, training_days + 1):
        day_lines.append(
            f'    "{day}": [\n'
            f'      {{"name": "Exercise Name", "sets": 3, "reps": "8-10", "instructions": "Brief instructions"}}\n'
            f'    ]'
        )
    return "{\n  \"days\": {\n" + ",\n".join(day_lines) + "\n  }\n}"


def build_prompt_payload(selection, config=None):
    """
    Build the prompt payload for one submission.

    Args:
        selection: UserSelection collected by the form
        config: Optional configuration dictionary (uses the 'plan' section)

    Returns:
        PromptPayload with system instruction, user text and optional inlined photo
    """
    validate_selection(selection)

    plan_settings = {**DEFAULT_PLAN_SETTINGS, **((config or {}).get('plan') or {})}
    min_exercises = plan_settings['exercises_per_day_min']
    max_exercises = plan_settings['exercises_per_day_max']

    days = selection.training_days
    day_word = "day" if days == 1 else "days"
    muscle_groups = ", ".join(selection.muscle_groups)
    goals = ", ".join(selection.goals) if selection.goals else "general fitness"

    image = None
    if selection.equipment_photo is not None:
        image = _encode_photo(selection.equipment_photo)
        equipment_block = EQUIPMENT_WITH_PHOTO
    else:
        equipment_block = EQUIPMENT_WITHOUT_PHOTO[selection.workout_type]

    text = f"""Create a {days}-day {selection.workout_type.lower()} workout plan.

MUSCLE GROUPS: {muscle_groups}
GOALS: {goals}
WORKOUT TYPE: {selection.workout_type}
TRAINING DAYS: {days}
EQUIPMENT: {equipment_block}

RULES:
- Cover exactly {days} training {day_word}, numbered 1 to {days}. No other day numbers.
- Give {min_exercises}-{max_exercises} exercises per day.
- Spread the selected muscle groups across the days and train each of them at least once.
- Every exercise has "name" (text), "sets" (whole number above 0), "reps" (text, e.g. "8-12" or "30 seconds") and "instructions" (one or two sentences).

OUTPUT FORMAT:
Return one JSON object with exactly this structure. Field names and nesting must match exactly:
{_format_output_example(days)}"""

    return PromptPayload(
        system=SYSTEM_PROMPT,
        text=text,
        training_days=days,
        image=image,
    )
