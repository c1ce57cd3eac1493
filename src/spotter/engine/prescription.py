"""
Parameter Assignment

Turns selected exercises into prescriptions: sets, reps, rest, tempo and
coaching notes. Also builds the fixed warmup and cooldown sequences and
the calorie estimate.

Order of adjustment:
1. Base table (experience level x classification)
2. Goal multipliers and tempo override
3. Medical modifiers (cumulative, applied last)
"""

import logging
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple, Union

from ..models import Classification, ExperienceLevel, FitnessGoal, StressLevel, WorkoutExercise, ordered_unique
from ..normalizer import contains_any, normalize_text
from ..profile import UserProfile, UserSafetyProfile
from ..rules import DEFAULT_SAFETY_RULES, SafetyRules
from .classification import ClassifiedExercise
from .variation import WorkoutDayExercises

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class BaseParameters:
    sets: int
    reps: str        # "min-max"
    rest_seconds: int
    tempo: str       # eccentric-pause-concentric


@dataclass(frozen=True)
class GoalAdjustment:
    reps_multiplier: float
    sets_multiplier: float
    rest_multiplier: float
    tempo: Optional[str]
    intensity_note: str


BASE_PARAMETERS: Mapping[ExperienceLevel, Mapping[Classification, BaseParameters]] = MappingProxyType({
    ExperienceLevel.BEGINNER: MappingProxyType({
        Classification.COMPOUND: BaseParameters(3, "10-12", 90, "2-0-2"),
        Classification.AUXILIARY: BaseParameters(3, "10-12", 75, "2-0-2"),
        Classification.ISOLATION: BaseParameters(2, "12-15", 60, "2-0-2"),
    }),
    ExperienceLevel.INTERMEDIATE: MappingProxyType({
        Classification.COMPOUND: BaseParameters(4, "8-10", 120, "3-0-2"),
        Classification.AUXILIARY: BaseParameters(3, "10-12", 90, "2-0-2"),
        Classification.ISOLATION: BaseParameters(3, "12-15", 60, "2-0-2"),
    }),
    ExperienceLevel.ADVANCED: MappingProxyType({
        Classification.COMPOUND: BaseParameters(5, "6-8", 180, "3-1-2"),
        Classification.AUXILIARY: BaseParameters(4, "8-10", 120, "3-0-2"),
        Classification.ISOLATION: BaseParameters(3, "12-15", 75, "2-1-2"),
    }),
})

GOAL_ADJUSTMENTS: Mapping[FitnessGoal, GoalAdjustment] = MappingProxyType({
    FitnessGoal.MUSCLE_GAIN: GoalAdjustment(
        1.0, 1.0, 1.0, "3-1-2",
        "Focus on progressive overload. Increase weight when you can complete all sets with good form.",
    ),
    FitnessGoal.STRENGTH: GoalAdjustment(
        0.7, 1.2, 1.5, "3-1-1",
        "Prioritize heavy weight over reps. Rest fully between sets. Focus on barbell compounds.",
    ),
    FitnessGoal.ENDURANCE: GoalAdjustment(
        1.5, 0.8, 0.5, "2-0-1",
        "Maintain steady pace. Challenge cardiovascular system. Short rest periods.",
    ),
    FitnessGoal.WEIGHT_LOSS: GoalAdjustment(
        1.3, 1.0, 0.3, "2-0-1",
        "Keep heart rate elevated. Minimal rest between exercises. Focus on compound movements.",
    ),
    FitnessGoal.ATHLETIC_PERFORMANCE: GoalAdjustment(
        1.0, 1.0, 0.8, "2-0-X",
        "Focus on power and explosiveness. Train movement patterns, not just muscles.",
    ),
    FitnessGoal.GENERAL_FITNESS: GoalAdjustment(
        1.0, 1.0, 1.0, "2-0-2",
        "Balanced approach. Focus on form and consistency. Progress gradually.",
    ),
    FitnessGoal.FLEXIBILITY: GoalAdjustment(
        1.5, 0.7, 0.7, "3-2-3",
        "Prioritize full range of motion. Include dynamic stretching. Focus on movement quality.",
    ),
    FitnessGoal.MAINTENANCE: GoalAdjustment(
        1.0, 0.8, 1.0, "2-0-2",
        "Maintain current fitness level. Consistency over intensity. Enjoy your workouts.",
    ),
})

# (injury keyword, exercise name keywords, cue)
INJURY_FORM_CUES: Tuple[Tuple[str, Tuple[str, ...], str], ...] = (
    ("back", ("row", "deadlift"), "Keep spine neutral, engage core, avoid rounding"),
    ("knee", ("squat", "lunge"), "Reduce range of motion, knees behind toes"),
    ("shoulder", ("press", "raise"), "Reduce range of motion, avoid overhead if painful"),
)

MIN_MODIFIED_SETS = 2

# Calories per minute by experience, scaled to a 70 kg reference
CALORIES_PER_MINUTE: Mapping[ExperienceLevel, int] = MappingProxyType({
    ExperienceLevel.BEGINNER: 5,
    ExperienceLevel.INTERMEDIATE: 6,
    ExperienceLevel.ADVANCED: 7,
})
REFERENCE_WEIGHT_KG = 70
CALORIE_GOAL_MULTIPLIERS: Mapping[FitnessGoal, float] = MappingProxyType({
    FitnessGoal.WEIGHT_LOSS: 1.2,
    FitnessGoal.ENDURANCE: 1.2,
    FitnessGoal.STRENGTH: 0.9,
})


@dataclass(frozen=True)
class PrescribedDay:
    """Prescribed exercises for a day plus the modifier warnings raised."""
    exercises: Tuple[WorkoutExercise, ...]
    warnings: Tuple[str, ...]


def adjust_reps(reps: str, multiplier: float) -> str:
    """
    Scale a "min-max" rep range.

    Non-range values (durations, "AMRAP") pass through unchanged.

    >>> adjust_reps("10-12", 0.7)
    '7-8'
    """
    if "-" not in reps:
        return reps
    low_text, high_text = reps.split("-", 1)
    try:
        low, high = int(low_text.strip()), int(high_text.strip())
    except ValueError:
        return reps
    new_low = max(1, round_half_up(low * multiplier))
    new_high = max(new_low, round_half_up(high * multiplier))
    return f"{new_low}-{new_high}"


class ParameterAssigner:
    """
    Assigns training parameters and coaching text.

    Tables and safety rules are injected; defaults are the built-in tables.
    """

    def __init__(
        self,
        rules: SafetyRules = DEFAULT_SAFETY_RULES,
        base_parameters: Mapping[ExperienceLevel, Mapping[Classification, BaseParameters]] = BASE_PARAMETERS,
        goal_adjustments: Mapping[FitnessGoal, GoalAdjustment] = GOAL_ADJUSTMENTS
    ):
        self.rules = rules
        self.base_parameters = base_parameters
        self.goal_adjustments = goal_adjustments

    def base_for(self, experience: ExperienceLevel, classification: Classification) -> BaseParameters:
        """Base parameters; cardio uses the auxiliary row."""
        row = self.base_parameters[experience]
        return row.get(classification, row[Classification.AUXILIARY])

    def goal_for(self, goal: FitnessGoal) -> GoalAdjustment:
        return self.goal_adjustments.get(goal, self.goal_adjustments[FitnessGoal.GENERAL_FITNESS])

    def apply_medical_modifiers(
        self,
        sets: int,
        rest_seconds: int,
        safety: Optional[UserSafetyProfile]
    ) -> Tuple[int, int, List[str]]:
        """
        Apply pregnancy, heart disease, hypertension, stress and age modifiers.

        Modifiers stack. Each set reduction keeps at least 2 sets but never
        raises the count; each rest change only raises the floor.

        Args:
            sets: Goal-adjusted sets
            rest_seconds: Goal-adjusted rest
            safety: User safety profile (None means no modifiers)

        Returns:
            Tuple of (sets, rest_seconds, warnings)
        """
        warnings: List[str] = []
        if safety is None:
            return sets, rest_seconds, warnings

        def reduce(current: int, factor: float) -> int:
            return min(current, max(MIN_MODIFIED_SETS, math.floor(current * factor)))

        if safety.pregnancy_status:
            trimester = safety.effective_trimester
            if trimester == 3:
                sets = reduce(sets, 0.6)
                rest_seconds = max(rest_seconds, 120)
                warnings.append("Trimester 3: Reduced volume and longer rest periods")
            elif trimester == 2:
                sets = reduce(sets, 0.8)
                rest_seconds = max(rest_seconds, 90)
                warnings.append("Trimester 2: Moderate intensity, avoid supine positions")

        if self.rules.has_condition(safety.medical_conditions, "heart_disease"):
            sets = reduce(sets, 0.6)
            rest_seconds = max(rest_seconds, 180)
            warnings.append("⚠️ Heart disease: RPE 5-6 max, extended rest periods")

        if self.rules.has_condition(safety.medical_conditions, "hypertension"):
            rest_seconds = max(rest_seconds, 120)
            warnings.append("⚠️ Hypertension: Avoid breath-holding, monitor blood pressure")

        if safety.stress_level == StressLevel.HIGH:
            sets = reduce(sets, 0.8)
            warnings.append("High stress: Reduced volume for better recovery")

        if safety.age is not None and safety.age >= self.rules.senior_age:
            sets = reduce(sets, 0.8)
            rest_seconds = max(rest_seconds, 120)
            warnings.append("Senior modifications: Longer rest, focus on form and balance")

        return max(1, sets), max(0, rest_seconds), warnings

    def prescribe(
        self,
        exercise: ClassifiedExercise,
        profile: UserProfile,
        safety: Optional[UserSafetyProfile] = None
    ) -> Tuple[WorkoutExercise, List[str]]:
        """
        Prescribe one exercise.

        Args:
            exercise: Selected, classified exercise
            profile: User profile
            safety: User safety profile

        Returns:
            Tuple of (WorkoutExercise, modifier warnings)
        """
        base = self.base_for(profile.experience_level, exercise.classification)
        goal = self.goal_for(profile.fitness_goal)

        sets = max(1, round_half_up(base.sets * goal.sets_multiplier))
        rest_seconds = max(0, round_half_up(base.rest_seconds * goal.rest_multiplier))
        reps: Union[int, str] = adjust_reps(base.reps, goal.reps_multiplier)

        sets, rest_seconds, warnings = self.apply_medical_modifiers(sets, rest_seconds, safety)

        prescribed = WorkoutExercise(
            exercise_id=exercise.exercise_id,
            name=exercise.name,
            sets=sets,
            reps=reps,
            rest_seconds=rest_seconds,
            tempo=goal.tempo or base.tempo,
            notes=self.exercise_notes(exercise, profile, safety),
        )
        return prescribed, warnings

    def assign(
        self,
        day: WorkoutDayExercises,
        profile: UserProfile,
        safety: Optional[UserSafetyProfile] = None
    ) -> PrescribedDay:
        """Prescribe every exercise of a day, keeping selection order."""
        exercises = []
        warnings: List[str] = []
        for exercise in day.exercises:
            prescribed, exercise_warnings = self.prescribe(exercise, profile, safety)
            exercises.append(prescribed)
            warnings.extend(exercise_warnings)
        logger.debug(f"{day.day_name}: prescribed {len(exercises)} exercises")
        return PrescribedDay(exercises=tuple(exercises), warnings=tuple(ordered_unique(warnings)))

    def exercise_notes(
        self,
        exercise: ClassifiedExercise,
        profile: UserProfile,
        safety: Optional[UserSafetyProfile] = None
    ) -> Optional[str]:
        """Per-exercise coaching notes joined with '. ', or None."""
        notes = []

        if profile.experience_level == ExperienceLevel.BEGINNER and exercise.complexity_score >= 8:
            notes.append("⚠️ Complex exercise - focus on form, consider trainer guidance")

        if safety is not None:
            if safety.pregnancy_status and exercise.metadata.requires_valsalva:
                notes.append("Avoid breath-holding - breathe continuously")

            injuries = [normalize_text(i) for i in safety.all_injuries]
            for injury_keyword, name_keywords, cue in INJURY_FORM_CUES:
                if any(injury_keyword in injury for injury in injuries) and contains_any(exercise.name, name_keywords):
                    notes.append(cue)

        if exercise.classification == Classification.COMPOUND:
            notes.append("Prioritize this exercise - most effective for gains")

        return ". ".join(notes) if notes else None

    def coaching_tips(
        self,
        profile: UserProfile,
        workout_type: str,
        safety: Optional[UserSafetyProfile] = None
    ) -> List[str]:
        """Workout-level tips: goal, experience, safety conditions, workout type."""
        tips = [f"🎯 {self.goal_for(profile.fitness_goal).intensity_note}"]

        if profile.experience_level == ExperienceLevel.BEGINNER:
            tips.append("📚 Focus on learning proper form before increasing weight")
            tips.append("⏱️ Take your time between sets - recovery is important")
        elif profile.experience_level == ExperienceLevel.ADVANCED:
            tips.append("💪 Push intensity on compound lifts - you can handle it")
            tips.append("📈 Track your lifts to ensure progressive overload")

        if safety is not None:
            if safety.pregnancy_status:
                tips.append("🤰 Monitor intensity - you should be able to hold a conversation")
                tips.append("💧 Stay well-hydrated throughout workout")
            if self.rules.has_condition(safety.medical_conditions, "heart_disease"):
                tips.append("❤️ CRITICAL: Monitor heart rate, stay within prescribed limits")
                tips.append("🛑 Stop immediately if chest pain, dizziness, or shortness of breath")
            if safety.age is not None and safety.age >= self.rules.senior_age:
                tips.append("🧘 Prioritize balance and stability - use support if needed")
                tips.append("⏰ Take extra warm-up time (10-15 minutes)")

        workout_type = normalize_text(workout_type)
        if "hiit" in workout_type or "circuit" in workout_type:
            tips.append("🔥 Keep moving - minimize rest between exercises")
            tips.append("💨 Focus on breathing - don't hold your breath")
        if "legs" in workout_type:
            tips.append("🦵 Leg day is crucial - don't skip it")
            tips.append("🥤 Have protein within 30 minutes post-workout")

        return tips


def generate_warmup(workout_type: str, duration_minutes: int = 5) -> List[WorkoutExercise]:
    """
    Warmup sequence for a workout type.

    Always starts with light cardio; adds shoulder prep for upper/push days,
    squat activation for lower/leg days and band pull-aparts for pull/back days.
    """
    workout_type = normalize_text(workout_type)
    warmup = [
        WorkoutExercise(
            exercise_id="warmup_001",
            name="General Cardio (Light)",
            sets=1,
            reps=f"{duration_minutes} minutes",
            rest_seconds=0,
            notes="Treadmill, bike, or jumping jacks - get heart rate up",
        )
    ]

    if "upper" in workout_type or "push" in workout_type:
        warmup.append(WorkoutExercise(
            exercise_id="warmup_002",
            name="Arm Circles & Shoulder Rolls",
            sets=2,
            reps="10",
            rest_seconds=0,
            notes="Prepare shoulder joint for pressing movements",
        ))

    if "lower" in workout_type or "legs" in workout_type:
        warmup.append(WorkoutExercise(
            exercise_id="warmup_003",
            name="Bodyweight Squats",
            sets=2,
            reps="10-15",
            rest_seconds=30,
            notes="Activate glutes and quads, practice squat pattern",
        ))

    if "pull" in workout_type or "back" in workout_type:
        warmup.append(WorkoutExercise(
            exercise_id="warmup_004",
            name="Band Pull-Aparts",
            sets=2,
            reps="15",
            rest_seconds=30,
            notes="Activate upper back and rear delts",
        ))

    return warmup


def generate_cooldown() -> List[WorkoutExercise]:
    """Light cardio followed by full-body static stretching."""
    return [
        WorkoutExercise(
            exercise_id="cooldown_001",
            name="Light Cardio (Cool Down)",
            sets=1,
            reps="3 minutes",
            rest_seconds=0,
            notes="Walk or easy bike to bring heart rate down",
        ),
        WorkoutExercise(
            exercise_id="cooldown_002",
            name="Static Stretching (Full Body)",
            sets=1,
            reps="5-10 minutes",
            rest_seconds=0,
            notes="Hold each stretch 20-30 seconds, focus on trained muscles",
        ),
    ]


def estimate_calories(
    duration_minutes: int,
    experience: ExperienceLevel,
    weight_kg: float,
    goal: FitnessGoal
) -> int:
    """
    Estimate calories burned in a session.

    Args:
        duration_minutes: Session length
        experience: Experience level (base burn rate)
        weight_kg: Body weight
        goal: Fitness goal (intensity multiplier)

    Returns:
        Rounded calorie estimate
    """
    per_minute = CALORIES_PER_MINUTE[experience] * (weight_kg / REFERENCE_WEIGHT_KG)
    per_minute *= CALORIE_GOAL_MULTIPLIERS.get(goal, 1.0)
    return round_half_up(per_minute * duration_minutes)
