"""
Exercise Selection

Picks the exercises for every day of a split from the safe, classified pool.

Per day:
1. Keep exercises whose body parts or muscles hit the day's targets
2. Bucket by classification (cardio joins auxiliaries on cardio days)
3. Split the day's exercise target into per-bucket quotas
4. Fill each quota with variety, rotating the bucket by mesocycle week
5. Backfill shortfalls (auxiliaries first)
6. Drop user-excluded exercise ids

Selection never fails: a narrow pool yields a short day, which is logged.
"""

import logging
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..models import Classification, ExperienceLevel, WorkoutDay, WorkoutSplit
from ..normalizer import normalize_terms
from ..profile import UserProfile
from .classification import ClassifiedExercise
from .periodization import rotation_offset

logger = logging.getLogger(__name__)

# Minutes per exercise including sets and rest
MINUTES_PER_EXERCISE: Mapping[ExperienceLevel, int] = MappingProxyType({
    ExperienceLevel.BEGINNER: 8,
    ExperienceLevel.INTERMEDIATE: 7,
    ExperienceLevel.ADVANCED: 6,
})

EXERCISE_COUNT_BOUNDS: Mapping[ExperienceLevel, Tuple[int, int]] = MappingProxyType({
    ExperienceLevel.BEGINNER: (5, 8),
    ExperienceLevel.INTERMEDIATE: (6, 10),
    ExperienceLevel.ADVANCED: (7, 12),
})

WARMUP_COOLDOWN_MINUTES = 10
MIN_WORKING_MINUTES = 15
HIGH_FREQUENCY_DAYS = 5

# (experience, compound focus) ->
#   (compound cap, compound share, auxiliary cap, auxiliary share, isolation floor, isolation share)
DISTRIBUTION_RULES: Mapping[Tuple[ExperienceLevel, bool], Tuple[int, float, int, float, int, float]] = MappingProxyType({
    (ExperienceLevel.BEGINNER, True): (3, 0.5, 3, 0.3, 1, 0.2),
    (ExperienceLevel.BEGINNER, False): (2, 0.3, 3, 0.4, 2, 0.3),
    (ExperienceLevel.INTERMEDIATE, True): (4, 0.5, 3, 0.3, 2, 0.2),
    (ExperienceLevel.INTERMEDIATE, False): (3, 0.35, 3, 0.35, 2, 0.3),
    (ExperienceLevel.ADVANCED, True): (5, 0.5, 4, 0.3, 2, 0.2),
    (ExperienceLevel.ADVANCED, False): (4, 0.4, 4, 0.35, 3, 0.25),
})

PREFERRED_EQUIPMENT_BONUS = 10
POSITION_TIEBREAK = 0.1

MAJOR_MUSCLES = ("pecs", "lats", "quads", "hamstrings", "delts")
MIN_WEEKLY_HITS = 2


@dataclass(frozen=True)
class ExerciseDistribution:
    """Exercise counts per classification."""
    compound: int = 0
    auxiliary: int = 0
    isolation: int = 0
    cardio: int = 0

    @property
    def total(self) -> int:
        return self.compound + self.auxiliary + self.isolation + self.cardio

    @classmethod
    def count(cls, exercises: Iterable[ClassifiedExercise]) -> "ExerciseDistribution":
        counts = {c: 0 for c in Classification}
        for ex in exercises:
            counts[ex.classification] += 1
        return cls(
            compound=counts[Classification.COMPOUND],
            auxiliary=counts[Classification.AUXILIARY],
            isolation=counts[Classification.ISOLATION],
            cardio=counts[Classification.CARDIO],
        )

    def to_dict(self) -> Dict[str, int]:
        return {
            "compound": self.compound,
            "auxiliary": self.auxiliary,
            "isolation": self.isolation,
            "cardio": self.cardio,
        }


@dataclass(frozen=True)
class WorkoutDayExercises:
    """Selected exercises for one training day, in prescription order."""
    day: WorkoutDay
    exercises: Tuple[ClassifiedExercise, ...]
    distribution: ExerciseDistribution
    target: int

    @property
    def day_name(self) -> str:
        return self.day.day_name

    @property
    def workout_type(self) -> str:
        return self.day.workout_type

    @property
    def total_exercises(self) -> int:
        return len(self.exercises)

    def to_dict(self) -> Dict:
        return {
            "dayName": self.day_name,
            "workoutType": self.workout_type,
            "exerciseIds": [ex.exercise_id for ex in self.exercises],
            "totalExercises": self.total_exercises,
            "distribution": self.distribution.to_dict(),
        }


@dataclass(frozen=True)
class WeeklyExercisePlan:
    """Exercise selection for every day of a split in one program week."""
    week_number: int
    workouts: Tuple[WorkoutDayExercises, ...]
    exercises_per_workout: int

    @property
    def total_exercises_per_week(self) -> int:
        return sum(w.total_exercises for w in self.workouts)

    def to_dict(self) -> Dict:
        return {
            "weekNumber": self.week_number,
            "exercisesPerWorkout": self.exercises_per_workout,
            "totalExercisesPerWeek": self.total_exercises_per_week,
            "workouts": [w.to_dict() for w in self.workouts],
        }


def exercises_per_workout(
    duration_minutes: int,
    experience: ExperienceLevel,
    days_per_week: int,
    reserved_minutes: int = WARMUP_COOLDOWN_MINUTES
) -> int:
    """
    Number of exercises that fit in a session.

    Args:
        duration_minutes: Session length including warmup and cooldown
        experience: Experience level (sets the minutes per exercise and bounds)
        days_per_week: Training days in the split
        reserved_minutes: Minutes kept for warmup and cooldown

    Returns:
        Exercise count within the experience bounds, one lower for 5+ day splits
    """
    working_minutes = max(MIN_WORKING_MINUTES, duration_minutes - reserved_minutes)
    count = working_minutes // MINUTES_PER_EXERCISE[experience]

    low, high = EXERCISE_COUNT_BOUNDS[experience]
    count = max(low, min(high, count))

    if days_per_week >= HIGH_FREQUENCY_DAYS:
        count = max(low, count - 1)
    return count


def exercise_distribution(experience: ExperienceLevel, compound_focus: bool, total: int) -> ExerciseDistribution:
    """
    Split a day's exercise target into classification quotas.

    Shares are capped (compound, auxiliary) or floored (isolation) per
    experience level. When the quotas overshoot the total they are trimmed
    one at a time, isolation first, never below one per bucket.

    Args:
        experience: Experience level
        compound_focus: Whether the day is built around compound lifts
        total: Day's exercise target

    Returns:
        ExerciseDistribution (cardio is always 0 here)
    """
    c_cap, c_share, a_cap, a_share, i_floor, i_share = DISTRIBUTION_RULES[(experience, compound_focus)]
    quotas = {
        Classification.COMPOUND: min(c_cap, math.ceil(total * c_share)),
        Classification.AUXILIARY: min(a_cap, math.ceil(total * a_share)),
        Classification.ISOLATION: max(i_floor, math.floor(total * i_share)),
    }

    trim_order = (Classification.ISOLATION, Classification.AUXILIARY, Classification.COMPOUND)
    while sum(quotas.values()) > total and any(quotas[c] > 1 for c in trim_order):
        for classification in trim_order:
            if sum(quotas.values()) <= total:
                break
            if quotas[classification] > 1:
                quotas[classification] -= 1

    return ExerciseDistribution(
        compound=quotas[Classification.COMPOUND],
        auxiliary=quotas[Classification.AUXILIARY],
        isolation=quotas[Classification.ISOLATION],
    )


def select_with_variety(
    pool: Sequence[ClassifiedExercise],
    count: int,
    offset: int,
    user_equipment: Iterable[str]
) -> List[ClassifiedExercise]:
    """
    Pick up to count exercises from a bucket, favouring variety.

    The bucket is rotated left by offset, then ranked by equipment fit,
    complexity and position. Candidates are accepted greedily when they add
    a new primary muscle or a new primary equipment; remaining slots are
    filled from the top of the ranking.

    Args:
        pool: Bucket of classified exercises
        count: Quota for the bucket
        offset: Weekly rotation offset
        user_equipment: Equipment the user has

    Returns:
        At most count exercises, in selection order
    """
    if not pool or count <= 0:
        return []

    shift = offset % len(pool)
    rotated = list(pool[shift:]) + list(pool[:shift])
    equipment = set(normalize_terms(user_equipment))

    scored = []
    for index, ex in enumerate(rotated):
        score = float(ex.complexity_score) + index * POSITION_TIEBREAK
        if any(eq in equipment for eq in ex.exercise.equipment):
            score += PREFERRED_EQUIPMENT_BONUS
        scored.append((score, ex))
    ranked = [ex for _, ex in sorted(scored, key=lambda pair: -pair[0])]

    selected: List[ClassifiedExercise] = []
    used_muscles = set()
    used_equipment = set()
    for ex in ranked:
        if len(selected) >= count:
            break
        primary_muscle = ex.exercise.primary_muscle
        primary_equipment = ex.exercise.primary_equipment
        if not selected or primary_muscle not in used_muscles or primary_equipment not in used_equipment:
            selected.append(ex)
            if primary_muscle:
                used_muscles.add(primary_muscle)
            if primary_equipment:
                used_equipment.add(primary_equipment)

    if len(selected) < count:
        chosen = {ex.exercise_id for ex in selected}
        for ex in ranked:
            if len(selected) >= count:
                break
            if ex.exercise_id not in chosen:
                selected.append(ex)
                chosen.add(ex.exercise_id)

    return selected[:count]


def is_relevant(exercise: ClassifiedExercise, day: WorkoutDay) -> bool:
    """True if the exercise trains one of the day's body parts or muscle groups."""
    body_parts = set(normalize_terms(day.focus_areas))
    muscles = set(normalize_terms(day.muscle_groups))
    ex = exercise.exercise
    return (
        any(bp in body_parts for bp in ex.body_parts)
        or any(m in muscles for m in ex.target_muscles)
        or any(m in muscles for m in ex.secondary_muscles)
    )


def select_exercises_for_day(
    pool: Sequence[ClassifiedExercise],
    day: WorkoutDay,
    profile: UserProfile,
    target: int,
    week_number: int = 1,
    exclude_ids: Iterable[str] = ()
) -> WorkoutDayExercises:
    """
    Select the exercises for one workout day.

    Args:
        pool: Safe, classified exercises (catalog order)
        day: Split day to fill
        profile: User profile (experience level, equipment)
        target: Exercise count target for the day
        week_number: 1-based program week
        exclude_ids: Exercise ids the user never wants

    Returns:
        WorkoutDayExercises with at most target exercises
    """
    offset = rotation_offset(week_number)
    relevant = [ex for ex in pool if is_relevant(ex, day)]

    buckets: Dict[Classification, List[ClassifiedExercise]] = {c: [] for c in Classification}
    for ex in relevant:
        buckets[ex.classification].append(ex)

    if "cardio" in normalize_terms(day.focus_areas):
        buckets[Classification.AUXILIARY].extend(buckets[Classification.CARDIO])

    logger.debug(
        f"{day.day_name}: {len(relevant)}/{len(pool)} relevant "
        f"(C={len(buckets[Classification.COMPOUND])}, A={len(buckets[Classification.AUXILIARY])}, "
        f"I={len(buckets[Classification.ISOLATION])})"
    )

    quotas = exercise_distribution(profile.experience_level, day.compound_focus, target)
    selected: List[ClassifiedExercise] = []
    for classification, quota in (
        (Classification.COMPOUND, quotas.compound),
        (Classification.AUXILIARY, quotas.auxiliary),
        (Classification.ISOLATION, quotas.isolation),
    ):
        selected.extend(select_with_variety(
            buckets[classification], quota, offset, profile.available_equipment
        ))

    # Backfill, auxiliaries first
    for classification in (Classification.AUXILIARY, Classification.COMPOUND, Classification.ISOLATION):
        remaining = target - len(selected)
        if remaining <= 0:
            break
        chosen = {ex.exercise_id for ex in selected}
        bucket = buckets[classification]
        ranked = select_with_variety(bucket, len(bucket), offset, profile.available_equipment)
        selected.extend([ex for ex in ranked if ex.exercise_id not in chosen][:remaining])

    excluded = set(exclude_ids)
    if excluded:
        selected = [ex for ex in selected if ex.exercise_id not in excluded]

    if len(selected) < target:
        logger.warning(f"{day.day_name}: only {len(selected)} of {target} exercises available")
    else:
        logger.debug(f"{day.day_name}: selected {len(selected)} exercises")

    return WorkoutDayExercises(
        day=day,
        exercises=tuple(selected),
        distribution=ExerciseDistribution.count(selected),
        target=target,
    )


def generate_weekly_exercise_plan(
    pool: Sequence[ClassifiedExercise],
    split: WorkoutSplit,
    profile: UserProfile,
    week_number: int = 1,
    exclude_ids: Iterable[str] = (),
    default_duration: int = 45,
    reserved_minutes: int = WARMUP_COOLDOWN_MINUTES
) -> WeeklyExercisePlan:
    """
    Select exercises for every day of a split.

    Args:
        pool: Safe, classified exercises
        split: Selected split
        profile: User profile
        week_number: 1-based program week
        exclude_ids: Exercise ids to omit
        default_duration: Session minutes when the profile has none
        reserved_minutes: Minutes kept for warmup and cooldown

    Returns:
        WeeklyExercisePlan
    """
    duration = profile.workout_duration or default_duration
    per_workout = exercises_per_workout(
        duration, profile.experience_level, split.days_per_week, reserved_minutes
    )
    exclude_ids = tuple(exclude_ids)

    logger.debug(f"Week {week_number}: {per_workout} exercises per workout for {split.name}")

    workouts = tuple(
        select_exercises_for_day(pool, day, profile, per_workout, week_number, exclude_ids)
        for day in split.workout_days
    )
    return WeeklyExercisePlan(
        week_number=week_number,
        workouts=workouts,
        exercises_per_workout=per_workout,
    )


def muscle_hits(plan: WeeklyExercisePlan) -> Dict[str, int]:
    """Weekly hit count per muscle over primary and secondary muscles."""
    hits: Dict[str, int] = {}
    for workout in plan.workouts:
        for ex in workout.exercises:
            for muscle in ex.exercise.target_muscles + ex.exercise.secondary_muscles:
                key = muscle.lower()
                hits[key] = hits.get(key, 0) + 1
    return hits


def validate_muscle_balance(plan: WeeklyExercisePlan, major_muscles: Optional[Sequence[str]] = None) -> List[str]:
    """
    Warn about major muscles trained fewer than twice in the week.

    Args:
        plan: Weekly exercise plan
        major_muscles: Muscles to check (default: pecs, lats, quads, hamstrings, delts)

    Returns:
        Warning strings (empty when balanced)
    """
    hits = muscle_hits(plan)
    warnings = []
    for muscle in major_muscles or MAJOR_MUSCLES:
        count = hits.get(muscle, 0)
        if count < MIN_WEEKLY_HITS:
            warnings.append(f"{muscle} only trained {count}x this week (recommend 2x minimum)")
    return warnings
