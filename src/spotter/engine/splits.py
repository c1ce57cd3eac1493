"""
Training Split Selection

Seven fixed weekly split templates and a 100-point scorer that matches
them to a user profile:

- Frequency match         30
- Goal alignment          20
- Equipment availability  15
- Experience level        15
- Recovery capacity       10
- Variety preference      10

The highest total wins; ties keep template declaration order.
"""

import logging
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Sequence, Tuple

from ..models import (
    ActivityLevel,
    Demand,
    ExperienceLevel,
    FitnessGoal,
    StressLevel,
    WorkoutDay,
    WorkoutSplit,
)
from ..profile import UserProfile
from ..rules import SENIOR_AGE

logger = logging.getLogger(__name__)

BEGINNER = ExperienceLevel.BEGINNER
INTERMEDIATE = ExperienceLevel.INTERMEDIATE
ADVANCED = ExperienceLevel.ADVANCED

FULL_BODY_AREAS = ("chest", "back", "legs", "shoulders", "arms", "core")
FULL_BODY_MUSCLES = ("pecs", "lats", "quads", "hamstrings", "delts", "biceps", "triceps", "abs")
UPPER_AREAS = ("chest", "back", "shoulders", "arms")
UPPER_MUSCLES = ("pecs", "lats", "delts", "biceps", "triceps", "traps")
LOWER_AREAS = ("legs", "core")
LOWER_MUSCLES = ("quads", "hamstrings", "glutes", "calves", "abs")
PUSH_AREAS = ("chest", "shoulders", "arms")
PUSH_MUSCLES = ("pecs", "delts", "triceps")
PULL_AREAS = ("back", "arms")
PULL_MUSCLES = ("lats", "traps", "biceps", "forearms")


def _day(number: int, weekday: str, areas, workout_type: str, muscles, compound: bool = True) -> WorkoutDay:
    return WorkoutDay(
        day_name=f"Day {number}",
        suggested_day_of_week=weekday,
        focus_areas=tuple(areas),
        workout_type=workout_type,
        muscle_groups=tuple(muscles),
        compound_focus=compound,
    )


FULL_BODY_3X = WorkoutSplit(
    split_id="full_body_3x",
    name="Full Body 3x/Week",
    description=(
        "Train all major muscle groups 3 times per week. Ideal for beginners and those "
        "with limited time. Maximum efficiency and recovery."
    ),
    ideal_frequency=(3, 3),
    workout_days=(
        _day(1, "monday", FULL_BODY_AREAS, "Full Body A", FULL_BODY_MUSCLES),
        _day(2, "wednesday", FULL_BODY_AREAS, "Full Body B", FULL_BODY_MUSCLES),
        _day(3, "friday", FULL_BODY_AREAS, "Full Body C", FULL_BODY_MUSCLES),
    ),
    rest_days=("tuesday", "thursday", "saturday", "sunday"),
    experience_levels=frozenset({BEGINNER, INTERMEDIATE}),
    fitness_goals=frozenset({
        FitnessGoal.GENERAL_FITNESS, FitnessGoal.STRENGTH, FitnessGoal.MUSCLE_GAIN, FitnessGoal.WEIGHT_LOSS,
    }),
    minimum_equipment=("body weight", "dumbbell"),
    volume_per_muscle=Demand.MODERATE,
    recovery_demand=Demand.LOW,
    time_per_session=45,
)

UPPER_LOWER_4X = WorkoutSplit(
    split_id="upper_lower_4x",
    name="Upper/Lower 4x/Week",
    description=(
        "Alternate between upper and lower body days. Great balance of volume, frequency, "
        "and recovery. Suitable for most intermediate lifters."
    ),
    ideal_frequency=(4, 4),
    workout_days=(
        _day(1, "monday", UPPER_AREAS, "Upper Body A", UPPER_MUSCLES),
        _day(2, "tuesday", LOWER_AREAS, "Lower Body A", LOWER_MUSCLES),
        _day(3, "thursday", UPPER_AREAS, "Upper Body B", UPPER_MUSCLES),
        _day(4, "friday", LOWER_AREAS, "Lower Body B", LOWER_MUSCLES),
    ),
    rest_days=("wednesday", "saturday", "sunday"),
    experience_levels=frozenset({INTERMEDIATE, ADVANCED}),
    fitness_goals=frozenset({FitnessGoal.MUSCLE_GAIN, FitnessGoal.STRENGTH, FitnessGoal.ATHLETIC_PERFORMANCE}),
    minimum_equipment=("dumbbell", "barbell"),
    volume_per_muscle=Demand.MODERATE,
    recovery_demand=Demand.MODERATE,
    time_per_session=50,
)

PPL_3X = WorkoutSplit(
    split_id="ppl_3x",
    name="Push/Pull/Legs 3x/Week",
    description=(
        "Classic PPL split. Push day (chest, shoulders, triceps), Pull day (back, biceps), "
        "Legs day (quads, hamstrings, glutes). Once per week frequency."
    ),
    ideal_frequency=(3, 3),
    workout_days=(
        _day(1, "monday", PUSH_AREAS, "Push", PUSH_MUSCLES),
        _day(2, "wednesday", PULL_AREAS, "Pull", PULL_MUSCLES),
        _day(3, "friday", LOWER_AREAS, "Legs", LOWER_MUSCLES),
    ),
    rest_days=("tuesday", "thursday", "saturday", "sunday"),
    experience_levels=frozenset({BEGINNER, INTERMEDIATE, ADVANCED}),
    fitness_goals=frozenset({FitnessGoal.MUSCLE_GAIN, FitnessGoal.STRENGTH, FitnessGoal.GENERAL_FITNESS}),
    minimum_equipment=("dumbbell", "barbell"),
    volume_per_muscle=Demand.MODERATE,
    recovery_demand=Demand.MODERATE,
    time_per_session=50,
)

PPL_6X = WorkoutSplit(
    split_id="ppl_6x",
    name="Push/Pull/Legs 6x/Week",
    description=(
        "High-frequency PPL. Train each muscle group twice per week. For advanced lifters "
        "with good recovery capacity. Maximum muscle growth potential."
    ),
    ideal_frequency=(6, 6),
    workout_days=(
        _day(1, "monday", PUSH_AREAS, "Push A", PUSH_MUSCLES),
        _day(2, "tuesday", PULL_AREAS, "Pull A", PULL_MUSCLES),
        _day(3, "wednesday", LOWER_AREAS, "Legs A", LOWER_MUSCLES),
        _day(4, "thursday", PUSH_AREAS, "Push B", PUSH_MUSCLES),
        _day(5, "friday", PULL_AREAS, "Pull B", PULL_MUSCLES),
        _day(6, "saturday", LOWER_AREAS, "Legs B", LOWER_MUSCLES),
    ),
    rest_days=("sunday",),
    experience_levels=frozenset({ADVANCED}),
    fitness_goals=frozenset({FitnessGoal.MUSCLE_GAIN, FitnessGoal.ATHLETIC_PERFORMANCE}),
    minimum_equipment=("dumbbell", "barbell"),
    volume_per_muscle=Demand.HIGH,
    recovery_demand=Demand.HIGH,
    time_per_session=60,
)

BRO_SPLIT_5X = WorkoutSplit(
    split_id="bro_split_5x",
    name="Bro Split 5x/Week",
    description=(
        "Classic bodybuilding split. One major muscle group per day. High volume per muscle, "
        "long recovery between sessions. Focus on isolation and pump."
    ),
    ideal_frequency=(5, 6),
    workout_days=(
        _day(1, "monday", ("chest",), "Chest", ("pecs",), compound=False),
        _day(2, "tuesday", ("back",), "Back", ("lats", "traps"), compound=False),
        _day(3, "wednesday", ("shoulders",), "Shoulders", ("delts", "traps"), compound=False),
        _day(4, "thursday", ("legs",), "Legs", ("quads", "hamstrings", "glutes", "calves")),
        _day(5, "friday", ("arms", "core"), "Arms & Abs", ("biceps", "triceps", "forearms", "abs"), compound=False),
    ),
    rest_days=("saturday", "sunday"),
    experience_levels=frozenset({INTERMEDIATE, ADVANCED}),
    fitness_goals=frozenset({FitnessGoal.MUSCLE_GAIN}),
    minimum_equipment=("dumbbell", "barbell", "cable"),
    volume_per_muscle=Demand.HIGH,
    recovery_demand=Demand.MODERATE,
    time_per_session=60,
)

HIIT_CIRCUIT_4X = WorkoutSplit(
    split_id="hiit_circuit_4x",
    name="HIIT/Circuit 4x/Week",
    description=(
        "High-intensity interval training and circuit workouts. Combines strength and cardio. "
        "Maximum calorie burn, improved conditioning. Short, intense sessions."
    ),
    ideal_frequency=(3, 4),
    workout_days=(
        _day(1, "monday", ("chest", "back", "legs", "cardio"), "Full Body HIIT",
             ("pecs", "lats", "quads", "hamstrings", "cardiovascular system")),
        _day(2, "tuesday", ("legs", "core", "cardio"), "Lower Body Circuit",
             ("quads", "hamstrings", "glutes", "abs", "cardiovascular system")),
        _day(3, "thursday", ("chest", "shoulders", "arms", "cardio"), "Upper Body Circuit",
             ("pecs", "delts", "biceps", "triceps", "cardiovascular system")),
        _day(4, "saturday", ("chest", "back", "legs", "cardio"), "Full Body Metabolic",
             ("pecs", "lats", "quads", "hamstrings", "cardiovascular system")),
    ),
    rest_days=("wednesday", "friday", "sunday"),
    experience_levels=frozenset({INTERMEDIATE, ADVANCED}),
    fitness_goals=frozenset({FitnessGoal.WEIGHT_LOSS, FitnessGoal.ENDURANCE, FitnessGoal.ATHLETIC_PERFORMANCE}),
    minimum_equipment=("body weight", "dumbbell"),
    volume_per_muscle=Demand.MODERATE,
    recovery_demand=Demand.HIGH,
    time_per_session=35,
)

ACTIVE_RECOVERY_2X = WorkoutSplit(
    split_id="active_recovery_2x",
    name="Active Recovery 2x/Week",
    description=(
        "Low-intensity, recovery-focused workouts. Mobility, flexibility, light resistance. "
        "Ideal for high stress, seniors, or those prioritizing recovery."
    ),
    ideal_frequency=(2, 3),
    workout_days=(
        _day(1, "monday", ("chest", "back", "legs", "shoulders"), "Full Body Light",
             ("pecs", "lats", "quads", "hamstrings", "delts"), compound=False),
        _day(2, "thursday", ("legs", "core", "flexibility"), "Lower Body & Mobility",
             ("quads", "hamstrings", "glutes", "abs"), compound=False),
    ),
    rest_days=("tuesday", "wednesday", "friday", "saturday", "sunday"),
    experience_levels=frozenset({BEGINNER}),
    fitness_goals=frozenset({FitnessGoal.GENERAL_FITNESS, FitnessGoal.FLEXIBILITY, FitnessGoal.MAINTENANCE}),
    minimum_equipment=("body weight", "band"),
    volume_per_muscle=Demand.LOW,
    recovery_demand=Demand.LOW,
    time_per_session=30,
)

# Declaration order is the tie-break order
ALL_SPLITS: Tuple[WorkoutSplit, ...] = (
    FULL_BODY_3X,
    UPPER_LOWER_4X,
    PPL_3X,
    PPL_6X,
    BRO_SPLIT_5X,
    HIIT_CIRCUIT_4X,
    ACTIVE_RECOVERY_2X,
)

# Partial goal credit: user goal -> split goals that earn half points
COMPATIBLE_GOALS: Mapping[FitnessGoal, FrozenSet[FitnessGoal]] = MappingProxyType({
    FitnessGoal.WEIGHT_LOSS: frozenset({FitnessGoal.ENDURANCE, FitnessGoal.GENERAL_FITNESS}),
    FitnessGoal.MUSCLE_GAIN: frozenset({FitnessGoal.STRENGTH, FitnessGoal.ATHLETIC_PERFORMANCE}),
    FitnessGoal.STRENGTH: frozenset({FitnessGoal.MUSCLE_GAIN, FitnessGoal.ATHLETIC_PERFORMANCE}),
    FitnessGoal.ENDURANCE: frozenset({FitnessGoal.WEIGHT_LOSS, FitnessGoal.ATHLETIC_PERFORMANCE}),
    FitnessGoal.FLEXIBILITY: frozenset({FitnessGoal.GENERAL_FITNESS, FitnessGoal.MAINTENANCE}),
    FitnessGoal.MAINTENANCE: frozenset({FitnessGoal.GENERAL_FITNESS, FitnessGoal.FLEXIBILITY}),
})


@dataclass(frozen=True)
class CriterionScore:
    """Points awarded for one scoring criterion."""
    criterion: str
    points: int
    max_points: int
    detail: str

    def __str__(self) -> str:
        return f"{self.detail} [+{self.points}]"


@dataclass(frozen=True)
class SplitScore:
    """A split with its total and per-criterion breakdown."""
    split: WorkoutSplit
    breakdown: Tuple[CriterionScore, ...]

    @property
    def score(self) -> int:
        return sum(c.points for c in self.breakdown)


@dataclass(frozen=True)
class SplitSelection:
    """Selected split, reasoning trace and ranked alternatives."""
    selected: SplitScore
    alternatives: Tuple[SplitScore, ...]
    ranking: Tuple[SplitScore, ...]

    @property
    def split(self) -> WorkoutSplit:
        return self.selected.split

    @property
    def score(self) -> int:
        return self.selected.score

    @property
    def reasoning(self) -> Tuple[str, ...]:
        return tuple(str(c) for c in self.selected.breakdown)

    def to_dict(self):
        return {
            "selectedSplit": self.split.split_id,
            "score": self.score,
            "reasoning": list(self.reasoning),
            "alternatives": [
                {"splitId": alt.split.split_id, "score": alt.score} for alt in self.alternatives
            ],
        }


def score_frequency(split: WorkoutSplit, workouts_per_week: int) -> CriterionScore:
    low, high = split.ideal_frequency
    if low <= workouts_per_week <= high:
        return CriterionScore("frequency", 30, 30, f"Perfect frequency match ({workouts_per_week} days/week)")
    distance = min(abs(workouts_per_week - low), abs(workouts_per_week - high))
    points = max(0, 30 - distance * 7)
    return CriterionScore("frequency", points, 30, f"Frequency close ({workouts_per_week} vs {low}-{high} days)")


def score_goal(split: WorkoutSplit, goal: FitnessGoal) -> CriterionScore:
    if goal in split.fitness_goals:
        return CriterionScore("goal", 20, 20, f"Goal alignment ({goal.value})")
    if split.fitness_goals & COMPATIBLE_GOALS.get(goal, frozenset()):
        return CriterionScore("goal", 10, 20, "Compatible goal")
    return CriterionScore("goal", 0, 20, "Goal mismatch")


def score_equipment(split: WorkoutSplit, equipment: Sequence[str]) -> CriterionScore:
    available = {e.lower() for e in equipment}
    required = [e.lower() for e in split.minimum_equipment]

    def satisfied(item: str) -> bool:
        # A barbell covers a dumbbell requirement
        return item in available or (item == "dumbbell" and "barbell" in available)

    if all(satisfied(item) for item in required):
        return CriterionScore("equipment", 15, 15, "All equipment available")

    present = sum(1 for item in required if item in available)
    points = math.floor(present / len(required) * 15)
    return CriterionScore("equipment", points, 15, f"Partial equipment ({present}/{len(required)})")


def score_experience(split: WorkoutSplit, level: ExperienceLevel) -> CriterionScore:
    if level in split.experience_levels:
        return CriterionScore("experience", 15, 15, f"Experience match ({level.value})")
    if level == BEGINNER and INTERMEDIATE in split.experience_levels:
        return CriterionScore("experience", 7, 15, "Can adapt (beginner -> intermediate)")
    if level == INTERMEDIATE and BEGINNER in split.experience_levels:
        return CriterionScore("experience", 5, 15, "Can adapt (intermediate -> beginner)")
    if level == ADVANCED:
        return CriterionScore("experience", 10, 15, "Advanced can adapt")
    return CriterionScore("experience", 0, 15, "Experience mismatch")


def score_recovery(split: WorkoutSplit, profile: UserProfile) -> CriterionScore:
    demand = split.recovery_demand
    activity = profile.effective_activity_level

    if profile.stress_level == StressLevel.HIGH or profile.age >= SENIOR_AGE:
        points = {Demand.LOW: 10, Demand.MODERATE: 5, Demand.HIGH: 0}[demand]
        detail = f"{demand.value.capitalize()} recovery demand (stress: {profile.stress_level.value}, age: {profile.age})"
    elif activity in (ActivityLevel.ACTIVE, ActivityLevel.EXTREME):
        if demand == Demand.HIGH:
            points, detail = 10, "High recovery demand matches activity level"
        else:
            points, detail = 7, "Lower recovery demand than capable"
    elif demand == Demand.MODERATE:
        points, detail = 10, "Moderate recovery demand"
    else:
        points, detail = 5, "Recovery demand mismatch"

    return CriterionScore("recovery", points, 10, detail)


def score_variety(split: WorkoutSplit, prefers_variety: bool) -> CriterionScore:
    days = split.days_per_week
    if prefers_variety:
        if days >= 4:
            return CriterionScore("variety", 10, 10, f"High variety ({days} different workouts)")
        if days == 3:
            return CriterionScore("variety", 7, 10, "Moderate variety")
        return CriterionScore("variety", 3, 10, "Lower variety")
    if days <= 3:
        return CriterionScore("variety", 10, 10, "Simple structure")
    return CriterionScore("variety", 5, 10, "More complex structure")


def score_split(split: WorkoutSplit, profile: UserProfile) -> SplitScore:
    """
    Score one split against a profile.

    Args:
        split: Split template
        profile: User profile

    Returns:
        SplitScore with a 0-100 total
    """
    return SplitScore(split=split, breakdown=(
        score_frequency(split, profile.workouts_per_week),
        score_goal(split, profile.fitness_goal),
        score_equipment(split, profile.available_equipment),
        score_experience(split, profile.experience_level),
        score_recovery(split, profile),
        score_variety(split, profile.prefers_variety),
    ))


def select_optimal_split(profile: UserProfile, splits: Sequence[WorkoutSplit] = ALL_SPLITS) -> SplitSelection:
    """
    Pick the best split for a profile.

    Args:
        profile: User profile
        splits: Candidate templates (non-empty; order breaks ties)

    Returns:
        SplitSelection with exactly one selected split and up to 3 alternatives
    """
    # sorted() is stable, so equal scores keep declaration order
    ranking = tuple(sorted((score_split(s, profile) for s in splits), key=lambda s: -s.score))
    selected = ranking[0]

    logger.info(f"Selected split {selected.split.name} (score: {selected.score})")
    for entry in ranking:
        logger.debug(f"  {entry.split.split_id}: {entry.score} | " + "; ".join(str(c) for c in entry.breakdown))

    return SplitSelection(selected=selected, alternatives=ranking[1:4], ranking=ranking)


def get_split_by_id(split_id: str) -> Optional[WorkoutSplit]:
    for split in ALL_SPLITS:
        if split.split_id == split_id:
            return split
    return None


def all_splits() -> Tuple[WorkoutSplit, ...]:
    return ALL_SPLITS
