"""
Core data model for Spotter.

Immutable value types shared by every stage of the generation pipeline:
catalog exercises, split templates, and the prescribed workout output.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, Union

from .normalizer import normalize_terms


class ExperienceLevel(Enum):
    """Training experience of the user."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class FitnessGoal(Enum):
    """Primary training goal."""
    MUSCLE_GAIN = "muscle_gain"
    STRENGTH = "strength"
    ENDURANCE = "endurance"
    WEIGHT_LOSS = "weight_loss"
    ATHLETIC_PERFORMANCE = "athletic_performance"
    GENERAL_FITNESS = "general_fitness"
    FLEXIBILITY = "flexibility"
    MAINTENANCE = "maintenance"


class StressLevel(Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class ActivityLevel(Enum):
    """Everyday activity level outside of planned training."""
    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    EXTREME = "extreme"


class Gender(Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class Demand(Enum):
    """Qualitative low/moderate/high scale (volume, recovery demand)."""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class Classification(Enum):
    """Training taxonomy of an exercise."""
    COMPOUND = "compound"
    AUXILIARY = "auxiliary"
    ISOLATION = "isolation"
    CARDIO = "cardio"


@dataclass(frozen=True)
class Exercise:
    """
    A catalog exercise.

    Muscle, body part and equipment lists keep catalog order: the first
    target muscle and first equipment entry are treated as primary. They are
    lowercased on construction, so every rule comparison sees one spelling.
    """
    exercise_id: str
    name: str
    target_muscles: Tuple[str, ...] = ()
    secondary_muscles: Tuple[str, ...] = ()
    body_parts: Tuple[str, ...] = ()
    equipment: Tuple[str, ...] = ()
    media_url: Optional[str] = None

    def __post_init__(self):
        for name in ("target_muscles", "secondary_muscles", "body_parts", "equipment"):
            object.__setattr__(self, name, normalize_terms(getattr(self, name)))

    @property
    def all_muscles(self) -> FrozenSet[str]:
        """Distinct primary and secondary muscles."""
        return frozenset(self.target_muscles) | frozenset(self.secondary_muscles)

    @property
    def primary_muscle(self) -> Optional[str]:
        return self.target_muscles[0] if self.target_muscles else None

    @property
    def primary_equipment(self) -> Optional[str]:
        return self.equipment[0] if self.equipment else None


@dataclass(frozen=True)
class WorkoutDay:
    """One training day inside a split template."""
    day_name: str
    suggested_day_of_week: str
    focus_areas: Tuple[str, ...]
    workout_type: str
    muscle_groups: Tuple[str, ...]
    compound_focus: bool


@dataclass(frozen=True)
class WorkoutSplit:
    """A weekly training split template."""
    split_id: str
    name: str
    description: str
    ideal_frequency: Tuple[int, int]
    workout_days: Tuple[WorkoutDay, ...]
    rest_days: Tuple[str, ...]
    experience_levels: FrozenSet[ExperienceLevel]
    fitness_goals: FrozenSet[FitnessGoal]
    minimum_equipment: Tuple[str, ...]
    volume_per_muscle: Demand
    recovery_demand: Demand
    time_per_session: int

    @property
    def days_per_week(self) -> int:
        return len(self.workout_days)


@dataclass(frozen=True)
class WorkoutExercise:
    """A fully prescribed exercise: the final output unit."""
    exercise_id: str
    name: str
    sets: int
    reps: Union[int, str]
    rest_seconds: int
    tempo: Optional[str] = None
    notes: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "exerciseId": self.exercise_id,
            "name": self.name,
            "sets": self.sets,
            "reps": self.reps,
            "restSeconds": self.rest_seconds,
        }
        if self.tempo is not None:
            result["tempo"] = self.tempo
        if self.notes is not None:
            result["notes"] = self.notes
        return result


@dataclass(frozen=True)
class StructuredWorkout:
    """One session with warmup, main work, cooldown and coaching text."""
    title: str
    description: str
    total_duration: int
    difficulty: ExperienceLevel
    estimated_calories: int
    exercises: Tuple[WorkoutExercise, ...]
    warmup: Tuple[WorkoutExercise, ...] = ()
    cooldown: Tuple[WorkoutExercise, ...] = ()
    coaching_tips: Tuple[str, ...] = ()
    progression_notes: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "totalDuration": self.total_duration,
            "difficulty": self.difficulty.value,
            "estimatedCalories": self.estimated_calories,
            "warmup": [w.to_dict() for w in self.warmup],
            "exercises": [e.to_dict() for e in self.exercises],
            "cooldown": [c.to_dict() for c in self.cooldown],
            "coachingTips": list(self.coaching_tips),
            "progressionNotes": self.progression_notes,
        }


@dataclass(frozen=True)
class ScheduledWorkout:
    """A structured workout pinned to a weekday."""
    day_of_week: str
    workout: StructuredWorkout

    def to_dict(self) -> Dict[str, Any]:
        return {"dayOfWeek": self.day_of_week, "workout": self.workout.to_dict()}


@dataclass(frozen=True)
class ExcludedExercise:
    """An exercise removed by the safety filter, with every reason found."""
    exercise: Exercise
    reasons: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exerciseId": self.exercise.exercise_id,
            "name": self.exercise.name,
            "reasons": list(self.reasons),
        }


def ordered_unique(items: List[str]) -> List[str]:
    """Drop repeated strings, keeping first occurrence order."""
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result
