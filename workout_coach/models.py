"""
Data model for the workout plan exchange and the option catalogs shown in the form.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


MUSCLE_GROUPS = [
    {"value": "Back", "emoji": "🏋️"},
    {"value": "Shoulders", "emoji": "🤷‍♀️"},
    {"value": "Abs", "emoji": "🏆"},
    {"value": "Glutes", "emoji": "🍑"},
    {"value": "Legs", "emoji": "🦵"},
    {"value": "Arms", "emoji": "💪"},
    {"value": "Chest", "emoji": "🫁"},
]

GOALS = [
    {"value": "Burn fat", "emoji": "🔥"},
    {"value": "Build muscle", "emoji": "🏗️"},
    {"value": "Boost strength", "emoji": "🦾"},
    {"value": "Enhance flexibility", "emoji": "🤸"},
]

WORKOUT_TYPES = ["Gym", "Home", "Calisthenics"]

MIN_TRAINING_DAYS = 1
MAX_TRAINING_DAYS = 7


def _dedupe(values):
    seen = []
    for value in values or []:
        cleaned = str(value).strip()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return tuple(seen)


@dataclass(frozen=True)
class EquipmentPhoto:
    """A single equipment photo held fully in memory."""

    data: bytes
    filename: str = "equipment"
    media_type: Optional[str] = None


@dataclass(frozen=True)
class UserSelection:
    """Everything the form collected for one submission."""

    muscle_groups: Tuple[str, ...]
    goals: Tuple[str, ...]
    workout_type: str
    training_days: int
    equipment_photo: Optional[EquipmentPhoto] = None

    def __post_init__(self):
        # Keep selection order for a stable prompt, drop blanks and repeats.
        object.__setattr__(self, "muscle_groups", _dedupe(self.muscle_groups))
        object.__setattr__(self, "goals", _dedupe(self.goals))


@dataclass(frozen=True)
class PromptPayload:
    """Prompt text plus optional inlined image, ready for the Messages API."""

    system: str
    text: str
    training_days: int
    image: Optional[Dict[str, str]] = None

    def to_messages(self):
        content = [{"type": "text", "text": self.text}]
        if self.image:
            content.append(
                {
                    "type": "image",
                    "source": {
                        "type": "base64",
                        "media_type": self.image["media_type"],
                        "data": self.image["data"],
                    },
                }
            )
        return [{"role": "user", "content": content}]


@dataclass
class Exercise:
    name: str
    sets: int
    reps: str
    instructions: str

    def to_dict(self):
        return {
            "name": self.name,
            "sets": self.sets,
            "reps": self.reps,
            "instructions": self.instructions,
        }


@dataclass
class WorkoutPlan:
    """Day-indexed workout plan. Day keys run from 1 to the number of training days."""

    days: Dict[int, List[Exercise]] = field(default_factory=dict)

    @property
    def day_numbers(self):
        return sorted(self.days)

    def exercises_for(self, day):
        return self.days.get(day, [])

    @property
    def total_exercises(self):
        return sum(len(exercises) for exercises in self.days.values())

    def to_dict(self):
        return {
            "days": {
                str(day): [exercise.to_dict() for exercise in self.days[day]]
                for day in self.day_numbers
            }
        }
