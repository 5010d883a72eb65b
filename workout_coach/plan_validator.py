"""
Validation utilities for generated workout plans.
"""

import re
from workout_coach.models import Exercise, WorkoutPlan


DAY_KEY_RE = re.compile(r"^\s*(\d+)\s*$")


def _add_violation(violations, code, message, day=None, exercise=None):
    violations.append(
        {
            "code": code,
            "message": message,
            "day": day or "",
            "exercise": exercise or "",
        }
    )


def _parse_day_key(key):
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key
    match = DAY_KEY_RE.match(str(key))
    if match:
        return int(match.group(1))
    return None


def _validate_exercise(raw, day, position, violations):
    """Check one exercise object. Returns an Exercise or None."""
    label = f"#{position}"

    if not isinstance(raw, dict):
        _add_violation(
            violations,
            "exercise_not_object",
            f"Day {day} exercise {label} is not an object.",
            day=day,
            exercise=label,
        )
        return None

    ok = True
    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        _add_violation(
            violations,
            "missing_name",
            f"Day {day} exercise {label} has no name.",
            day=day,
            exercise=label,
        )
        ok = False
    else:
        label = name.strip()

    sets = raw.get("sets")
    if isinstance(sets, bool) or not isinstance(sets, int) or sets <= 0:
        _add_violation(
            violations,
            "invalid_sets",
            f"Day {day} exercise {label} has invalid sets: {sets!r} (expected a whole number above 0).",
            day=day,
            exercise=label,
        )
        ok = False

    # Models sometimes answer a bare number for reps; keep it as text.
    reps = raw.get("reps")
    if isinstance(reps, int) and not isinstance(reps, bool):
        reps = str(reps)
    if not isinstance(reps, str) or not reps.strip():
        _add_violation(
            violations,
            "invalid_reps",
            f"Day {day} exercise {label} has invalid reps: {raw.get('reps')!r}.",
            day=day,
            exercise=label,
        )
        ok = False

    instructions = raw.get("instructions")
    if not isinstance(instructions, str):
        _add_violation(
            violations,
            "invalid_instructions",
            f"Day {day} exercise {label} has no instructions text.",
            day=day,
            exercise=label,
        )
        ok = False

    if not ok:
        return None
    return Exercise(
        name=name.strip(),
        sets=sets,
        reps=reps.strip(),
        instructions=instructions.strip(),
    )


def validate_plan(data, training_days):
    """
    Validate a decoded plan object against the day-indexed plan shape.

    Args:
        data: Decoded JSON object from the model
        training_days: Number of days the plan must cover

    Returns:
        dict with keys: plan (WorkoutPlan, or None when violations exist),
        violations, summary
    """
    violations = []
    days = {}

    raw_days = data.get("days") if isinstance(data, dict) else None
    if not isinstance(raw_days, dict):
        _add_violation(
            violations,
            "missing_days",
            'Plan has no "days" object.',
        )
        raw_days = {}

    for key, raw_exercises in raw_days.items():
        day = _parse_day_key(key)
        if day is None:
            _add_violation(
                violations,
                "invalid_day_key",
                f"Day key {key!r} is not a day number.",
                day=str(key),
            )
            continue

        if not 1 <= day <= training_days:
            _add_violation(
                violations,
                "day_out_of_range",
                f"Day {day} is outside 1-{training_days}.",
                day=day,
            )
            continue

        if day in days:
            _add_violation(
                violations,
                "duplicate_day",
                f"Day {day} appears more than once.",
                day=day,
            )
            continue

        if not isinstance(raw_exercises, list):
            _add_violation(
                violations,
                "day_not_list",
                f"Day {day} is not a list of exercises.",
                day=day,
            )
            continue

        exercises = []
        for position, raw in enumerate(raw_exercises, start=1):
            exercise = _validate_exercise(raw, day, position, violations)
            if exercise is not None:
                exercises.append(exercise)
        days[day] = exercises

    if raw_days or not violations:
        for day in range(1, training_days + 1):
            if day not in days and not any(v["day"] == day for v in violations):
                _add_violation(
                    violations,
                    "missing_day",
                    f"Day {day} is missing from the plan.",
                    day=day,
                )

    exercise_count = sum(len(exercises) for exercises in days.values())
    summary = (
        f"Validation: {len(days)} day(s), {exercise_count} exercises checked, {len(violations)} violation(s)."
        if days
        else "Validation: no days parsed from plan."
    )

    plan = None
    if not violations:
        plan = WorkoutPlan(days={day: days[day] for day in sorted(days)})

    return {
        "plan": plan,
        "violations": violations,
        "summary": summary,
    }
