"""
Exercise Classification

Tags each exercise as compound, auxiliary, isolation or cardio, with a
complexity score from 1 to 10.

Name patterns are checked before muscle-count heuristics: naming convention
is the stronger training signal. Order of checks:

1. Cardio (body part, muscle or name keyword)
2. Compound (major lift pattern AND 3+ distinct muscles)
3. Auxiliary (secondary pattern or exactly 2 muscles, never a compound pattern)
4. Isolation (single-joint pattern or exactly 1 muscle)
5. Muscle-count fallback
"""

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from ..biomechanics import ExerciseSafetyMetadata
from ..models import Classification, Exercise
from ..normalizer import contains_any

CARDIO_NAME_KEYWORDS = (
    "treadmill", "rowing machine", "elliptical", "stationary bike",
    "jump rope", "battle rope", "burpee", "mountain climber",
)

COMPOUND_PATTERNS = (
    # Squat
    "squat", "front squat", "back squat", "overhead squat",
    # Deadlift
    "deadlift", "romanian deadlift", "sumo deadlift", "trap bar deadlift",
    # Barbell pressing
    "bench press", "overhead press", "shoulder press", "military press",
    "incline press", "decline press",
    # Heavy pulling
    "bent over row", "pendlay row", "t-bar row", "barbell row",
    # Olympic
    "clean", "snatch", "jerk", "power clean",
    # Bodyweight
    "pull up", "pull-up", "chin up", "chin-up", "dip", "muscle up",
    # Legs
    "leg press", "hack squat", "lunge",
)

AUXILIARY_PATTERNS = (
    "dumbbell press", "dumbbell bench", "dumbbell shoulder",
    "cable row", "seated row", "cable pull", "lat pulldown",
    "dumbbell row",
    "step up", "step-up", "walking lunge", "reverse lunge",
    "cable press", "cable fly",
    "lever press", "machine press", "smith",
    "incline dumbbell", "decline dumbbell",
    "romanian", "rdl",
    "hip thrust", "glute bridge",
)

ISOLATION_PATTERNS = (
    "curl", "bicep",
    "tricep extension", "tricep pushdown", "kickback", "skullcrusher",
    "lateral raise", "front raise", "rear delt fly", "face pull",
    "leg extension", "leg curl", "calf raise", "hamstring curl",
    "pec deck", "cable fly", "dumbbell fly",
    "pullover", "shrug",
    "crunch", "sit up", "russian twist", "leg raise",
)


@dataclass(frozen=True)
class ClassifiedExercise:
    """An exercise with its safety metadata, classification and complexity."""
    exercise: Exercise
    metadata: ExerciseSafetyMetadata
    classification: Classification
    complexity_score: int

    @property
    def exercise_id(self) -> str:
        return self.exercise.exercise_id

    @property
    def name(self) -> str:
        return self.exercise.name


def classify_exercise(exercise: Exercise, metadata: ExerciseSafetyMetadata) -> ClassifiedExercise:
    """
    Classify one exercise.

    Args:
        exercise: Catalog exercise
        metadata: Resolved safety metadata (drives cardio complexity)

    Returns:
        ClassifiedExercise with complexity in [1, 10]
    """
    classification, complexity = _classify(exercise, metadata)
    return ClassifiedExercise(
        exercise=exercise,
        metadata=metadata,
        classification=classification,
        complexity_score=max(1, min(10, complexity)),
    )


def _classify(exercise: Exercise, metadata: ExerciseSafetyMetadata) -> Tuple[Classification, int]:
    name = exercise.name
    equipment = exercise.equipment
    total_muscles = len(exercise.all_muscles)

    if (
        "cardio" in exercise.body_parts
        or "cardiovascular system" in exercise.target_muscles
        or contains_any(name, CARDIO_NAME_KEYWORDS)
    ):
        return Classification.CARDIO, 7 if metadata.is_high_impact else 4

    is_compound_pattern = contains_any(name, COMPOUND_PATTERNS)

    if is_compound_pattern and total_muscles >= 3:
        if contains_any(name, ("olympic", "clean", "snatch")):
            return Classification.COMPOUND, 10
        if contains_any(name, ("deadlift", "squat")):
            return Classification.COMPOUND, 9
        if "barbell" in equipment or "olympic barbell" in equipment:
            return Classification.COMPOUND, 8
        return Classification.COMPOUND, 7

    if (contains_any(name, AUXILIARY_PATTERNS) or total_muscles == 2) and not is_compound_pattern:
        if "barbell" in equipment:
            return Classification.AUXILIARY, 6
        if "dumbbell" in equipment:
            return Classification.AUXILIARY, 5
        if "cable" in equipment or "machine" in equipment:
            return Classification.AUXILIARY, 4
        return Classification.AUXILIARY, 5

    if contains_any(name, ISOLATION_PATTERNS) or total_muscles == 1:
        if "cable" in equipment or "machine" in equipment:
            return Classification.ISOLATION, 2
        if "dumbbell" in equipment:
            return Classification.ISOLATION, 3
        if "body weight" in equipment:
            return Classification.ISOLATION, 4
        return Classification.ISOLATION, 3

    if total_muscles >= 3:
        return Classification.COMPOUND, 7
    if total_muscles == 2:
        return Classification.AUXILIARY, 5
    return Classification.ISOLATION, 3


def classify_all(
    exercises: Iterable[Exercise],
    metadata_for
) -> List[ClassifiedExercise]:
    """Classify a pool, preserving order. metadata_for maps an exercise to its metadata."""
    return [classify_exercise(ex, metadata_for(ex)) for ex in exercises]
