"""
Generate Plan page - form for preferences and the resulting day-by-day plan
"""

import streamlit as st
import traceback
from workout_coach.errors import (
    CoachError,
    ConfigError,
    InvalidSelectionError,
    ParseError,
    ShapeError,
    TransportError,
)
from workout_coach.models import (
    GOALS,
    MAX_TRAINING_DAYS,
    MIN_TRAINING_DAYS,
    MUSCLE_GROUPS,
    WORKOUT_TYPES,
    EquipmentPhoto,
    UserSelection,
)
from workout_coach.ui_utils import render_page_header, render_workout_plan

PHOTO_TYPES = ["jpg", "jpeg", "png", "gif", "webp"]

ERROR_MESSAGES = {
    TransportError: "Couldn't reach the coaching service. Please try again in a moment.",
    ParseError: "The coach returned something we couldn't read. Please try again.",
    ShapeError: "The coach returned an incomplete plan. Please try again.",
}


def is_submit_enabled(all_inputs_filled, in_progress):
    """Only one generation may run at a time, and only with a complete form."""
    return bool(all_inputs_filled and not in_progress)


def selection_from_form(muscle_groups, goals, workout_type, training_days, uploaded_photo=None):
    """
    Turn raw widget values into a UserSelection.

    Args:
        muscle_groups: Selected muscle group names
        goals: Selected goal names
        workout_type: Selected workout type
        training_days: Slider value
        uploaded_photo: Streamlit UploadedFile or None

    Returns:
        UserSelection
    """
    photo = None
    if uploaded_photo is not None:
        photo = EquipmentPhoto(
            data=uploaded_photo.getvalue(),
            filename=uploaded_photo.name,
            media_type=uploaded_photo.type,
        )

    return UserSelection(
        muscle_groups=tuple(muscle_groups or ()),
        goals=tuple(goals or ()),
        workout_type=workout_type,
        training_days=int(training_days),
        equipment_photo=photo,
    )


def error_message_for(error):
    for error_type, message in ERROR_MESSAGES.items():
        if isinstance(error, error_type):
            return message
    return str(error)


def _streamlit_secrets():
    try:
        return dict(st.secrets)
    except FileNotFoundError:
        return None


def _generate(selection):
    # Import after user clicks to avoid loading the SDK on page load
    from workout_coach.config import get_api_key, load_config
    from workout_coach.plan_generator import PlanGenerator
    from workout_coach.request_builder import build_prompt_payload

    config = load_config()
    api_key = get_api_key(config, secrets=_streamlit_secrets())

    payload = build_prompt_payload(selection, config)
    plan_gen = PlanGenerator(api_key=api_key, config=config)
    return plan_gen.generate_plan(payload)


def _emoji_label(catalog):
    emojis = {item["value"]: item["emoji"] for item in catalog}
    return lambda value: f"{emojis.get(value, '')} {value}".strip()


def show():
    """Render the generate plan page"""

    render_page_header("AI Gym Coach", "Your personal fitness architect", "🏋️")

    if 'plan_generation_in_progress' not in st.session_state:
        st.session_state.plan_generation_in_progress = False
    if 'workout_plan' not in st.session_state:
        st.session_state.workout_plan = None

    st.markdown("### 🎯 What do you want to train?")
    muscle_groups = st.multiselect(
        "Muscle groups",
        options=[item["value"] for item in MUSCLE_GROUPS],
        format_func=_emoji_label(MUSCLE_GROUPS),
        key="muscle_groups",
    )
    goals = st.multiselect(
        "Goals",
        options=[item["value"] for item in GOALS],
        format_func=_emoji_label(GOALS),
        key="goals",
    )

    st.markdown("### 🗓️ How do you train?")
    workout_type = st.radio(
        "Workout type",
        options=WORKOUT_TYPES,
        index=None,
        horizontal=True,
        key="workout_type",
    )
    training_days = st.slider(
        "Training days per week",
        min_value=MIN_TRAINING_DAYS,
        max_value=MAX_TRAINING_DAYS,
        value=3,
        key="training_days",
    )
    uploaded_photo = st.file_uploader(
        "Equipment photo (optional)",
        type=PHOTO_TYPES,
        help="The coach will only use equipment it can see in the photo.",
        key="equipment_photo",
    )

    all_inputs_filled = bool(muscle_groups and goals and workout_type)
    if not all_inputs_filled:
        st.info("Pick at least one muscle group, one goal and a workout type to continue.")

    def _start_plan_generation():
        st.session_state.plan_generation_in_progress = True

    generate_button = st.button(
        "🚀 Get My Workout Plan",
        type="primary",
        disabled=not is_submit_enabled(all_inputs_filled, st.session_state.plan_generation_in_progress),
        on_click=_start_plan_generation,
    )

    if generate_button:
        with st.spinner("🤖 Building your workout plan..."):
            try:
                selection = selection_from_form(
                    muscle_groups, goals, workout_type, training_days, uploaded_photo
                )
                st.session_state.workout_plan = _generate(selection)
                st.toast("✅ Your workout plan is ready!")
            except (InvalidSelectionError, ConfigError) as e:
                st.error(f"❌ {e}")
            except CoachError as e:
                st.session_state.workout_plan = None
                st.error(f"❌ {error_message_for(e)}")
                with st.expander("View Error Details"):
                    st.code(str(e))
            except Exception as e:
                st.session_state.workout_plan = None
                st.error(f"❌ Error: {str(e)}")
                with st.expander("View Error Details"):
                    st.code(traceback.format_exc())
            finally:
                st.session_state.plan_generation_in_progress = False

    plan = st.session_state.workout_plan
    if plan is not None:
        st.markdown("---")
        st.markdown("### 💪 Your Workout Plan")
        render_workout_plan(plan)
