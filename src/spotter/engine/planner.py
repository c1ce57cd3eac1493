"""
Program Generator

Generates a complete, explainable weekly program for a user.

Integrates:
- Safety filtering (pregnancy, medical, injuries, age)
- Split selection (scored templates)
- Exercise selection (classification, distribution, weekly rotation)
- Parameter assignment (sets, reps, rest, tempo, coaching text)

Generation is a pure function of its inputs. When too few exercises survive
the safety filter the planner returns a fixed gentle movement program
instead of raising.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ..biomechanics import SafetyMetadataResolver
from ..config import Settings
from ..models import (
    ExcludedExercise,
    Exercise,
    ExperienceLevel,
    ScheduledWorkout,
    StructuredWorkout,
    WorkoutExercise,
    WorkoutSplit,
    ordered_unique,
)
from ..normalizer import humanize
from ..profile import UserProfile, UserSafetyProfile
from ..rules import DEFAULT_SAFETY_RULES, SafetyRules
from .classification import classify_all
from .constraints import DEFAULT_MINIMUM_EXERCISES, SafetyProfileFilter, has_minimum_exercises
from .periodization import mesocycle_phase, progression_notes, validate_week
from .prescription import (
    ParameterAssigner,
    estimate_calories,
    generate_cooldown,
    generate_warmup,
)
from .splits import ALL_SPLITS, SplitSelection, select_optimal_split
from .variation import WeeklyExercisePlan, generate_weekly_exercise_plan, validate_muscle_balance

logger = logging.getLogger(__name__)

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

WORKOUT_SAFETY_NOTES = 3
PLAN_SAFETY_NOTES = 5


@dataclass(frozen=True)
class GenerationOptions:
    """Per-call generation knobs."""
    week_number: int = 1
    exclude_exercise_ids: Tuple[str, ...] = ()
    restrict_to_equipment: bool = False
    min_safe_exercises: int = DEFAULT_MINIMUM_EXERCISES
    default_session_minutes: int = 45
    warmup_minutes: int = 5
    cooldown_minutes: int = 5

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: Any) -> "GenerationOptions":
        """Options seeded from runtime settings; keyword overrides win."""
        values = {
            "min_safe_exercises": settings.min_safe_exercises,
            "default_session_minutes": settings.default_session_minutes,
            "warmup_minutes": settings.warmup_minutes,
            "cooldown_minutes": settings.cooldown_minutes,
        }
        values.update(overrides)
        return cls(**values)


@dataclass(frozen=True)
class GeneratedProgram:
    """A week of scheduled workouts with its safety and selection trace."""
    plan_title: str
    plan_description: str
    week_number: int
    workouts: Tuple[ScheduledWorkout, ...]
    rest_days: Tuple[str, ...]
    warnings: Tuple[str, ...]
    requires_medical_clearance: bool
    is_fallback: bool = False
    split_selection: Optional[SplitSelection] = None
    exercise_plan: Optional[WeeklyExercisePlan] = None
    excluded: Tuple[ExcludedExercise, ...] = field(default_factory=tuple)

    @property
    def total_estimated_calories(self) -> int:
        return sum(w.workout.estimated_calories for w in self.workouts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "planTitle": self.plan_title,
            "planDescription": self.plan_description,
            "weekNumber": self.week_number,
            "workouts": [w.to_dict() for w in self.workouts],
            "restDays": list(self.rest_days),
            "totalEstimatedCalories": self.total_estimated_calories,
            "warnings": list(self.warnings),
            "requiresMedicalClearance": self.requires_medical_clearance,
            "isFallback": self.is_fallback,
            "splitSelection": self.split_selection.to_dict() if self.split_selection else None,
            "excludedExercises": [e.to_dict() for e in self.excluded],
        }


class WorkoutPlanner:
    """
    Generates weekly programs.

    Rule tables, the metadata resolver and the split templates are injected,
    so one planner can be built at start-up and shared between calls.
    """

    def __init__(
        self,
        rules: SafetyRules = DEFAULT_SAFETY_RULES,
        resolver: Optional[SafetyMetadataResolver] = None,
        splits: Sequence[WorkoutSplit] = ALL_SPLITS
    ):
        """
        Args:
            rules: Safety rule tables
            resolver: Safety metadata resolver (default: inference only)
            splits: Split templates to choose from
        """
        self.safety_filter = SafetyProfileFilter(rules, resolver)
        self.assigner = ParameterAssigner(rules)
        self.splits = tuple(splits)

    def generate(
        self,
        profile: UserProfile,
        catalog: Iterable[Exercise],
        options: Optional[GenerationOptions] = None
    ) -> GeneratedProgram:
        """
        Generate a program for one week.

        Args:
            profile: Validated user profile
            catalog: Exercise catalog (any iterable of exercises)
            options: Generation options (default: week 1, no exclusions)

        Returns:
            GeneratedProgram; the gentle movement program when the safe pool is too small

        Raises:
            ValueError: If options.week_number < 1
        """
        options = options or GenerationOptions()
        week = options.week_number
        validate_week(week)

        safety = UserSafetyProfile.from_profile(profile)
        result = self.safety_filter.apply(catalog, safety)
        pool = list(result.safe_exercises)

        if options.restrict_to_equipment:
            equipment = set(profile.available_equipment)
            before = len(pool)
            pool = [ex for ex in pool if any(eq in equipment for eq in ex.equipment)]
            logger.info(f"Equipment filter: {before} -> {len(pool)} exercises")

        if not has_minimum_exercises(pool, options.min_safe_exercises):
            logger.warning(
                f"Only {len(pool)} safe exercises (minimum {options.min_safe_exercises}); "
                f"using gentle movement program"
            )
            return gentle_movement_program(
                warnings=result.warnings,
                requires_medical_clearance=result.requires_medical_clearance,
                excluded=result.excluded,
                week_number=week,
            )

        selection = select_optimal_split(profile, self.splits)
        split = selection.split

        classified = classify_all(pool, result.metadata_for)
        plan = generate_weekly_exercise_plan(
            classified,
            split,
            profile,
            week_number=week,
            exclude_ids=options.exclude_exercise_ids,
            default_duration=options.default_session_minutes,
            reserved_minutes=options.warmup_minutes + options.cooldown_minutes,
        )

        balance_warnings = validate_muscle_balance(plan)
        for warning in balance_warnings:
            logger.warning(f"Muscle balance: {warning}")

        prescribed = [self.assigner.assign(day, profile, safety) for day in plan.workouts]
        prescription_warnings = [w for day in prescribed for w in day.warnings]
        warnings = tuple(ordered_unique(
            list(result.warnings) + prescription_warnings + balance_warnings
        ))

        duration = profile.workout_duration or options.default_session_minutes
        calories = estimate_calories(duration, profile.experience_level, profile.weight, profile.fitness_goal)
        notes = progression_notes(profile.fitness_goal, week)

        scheduled = []
        for index, (day_plan, day_prescription) in enumerate(zip(plan.workouts, prescribed)):
            day = day_plan.day
            workout = StructuredWorkout(
                title=f"{day.workout_type} - {split.name}",
                description=workout_description(day.workout_type, split, profile, warnings),
                total_duration=duration,
                difficulty=profile.experience_level,
                estimated_calories=calories,
                exercises=day_prescription.exercises,
                warmup=tuple(generate_warmup(day.workout_type, options.warmup_minutes)),
                cooldown=tuple(generate_cooldown()),
                coaching_tips=tuple(self.assigner.coaching_tips(profile, day.workout_type, safety)),
                progression_notes=notes,
            )
            weekday = day.suggested_day_of_week or WEEKDAYS[index % len(WEEKDAYS)]
            scheduled.append(ScheduledWorkout(day_of_week=weekday, workout=workout))

        logger.info(
            f"Generated week {week} ({mesocycle_phase(week).value}): {split.name}, "
            f"{len(scheduled)} workouts, {plan.total_exercises_per_week} exercises, "
            f"{len(warnings)} warnings"
        )

        return GeneratedProgram(
            plan_title=f"{split.name} - Week {week}",
            plan_description=plan_description(split, profile, duration, warnings),
            week_number=week,
            workouts=tuple(scheduled),
            rest_days=split.rest_days,
            warnings=warnings,
            requires_medical_clearance=result.requires_medical_clearance,
            split_selection=selection,
            exercise_plan=plan,
            excluded=result.excluded,
        )


def generate(
    profile: UserProfile,
    catalog: Iterable[Exercise],
    week_number: int = 1,
    **options: Any
) -> GeneratedProgram:
    """Generate a program with the default rule tables."""
    return WorkoutPlanner().generate(profile, catalog, GenerationOptions(week_number=week_number, **options))


def _bullets(warnings: Sequence[str], limit: int) -> List[str]:
    return [f"• {w}" for w in warnings[:limit]]


def workout_description(
    workout_type: str,
    split: WorkoutSplit,
    profile: UserProfile,
    warnings: Sequence[str]
) -> str:
    description = f"{workout_type} workout focused on {humanize(profile.fitness_goal.value)}. {split.description}"
    if warnings:
        lines = ["", "", "⚠️ SAFETY NOTES:"] + _bullets(warnings, WORKOUT_SAFETY_NOTES)
        description += "\n".join(lines)
    return description


def plan_description(
    split: WorkoutSplit,
    profile: UserProfile,
    duration: int,
    warnings: Sequence[str]
) -> str:
    lines = [
        f"{split.name}: {split.description}",
        "",
        f"🎯 Goal: {humanize(profile.fitness_goal.value)}",
        f"📊 Experience: {profile.experience_level.value}",
        f"⏱️ Duration: {duration} minutes per session",
        f"📅 Frequency: {profile.workouts_per_week}x per week",
    ]
    if warnings:
        lines.append("")
        lines.append(f"⚠️ SAFETY WARNINGS ({len(warnings)}):")
        lines.extend(_bullets(warnings, PLAN_SAFETY_NOTES))
        if len(warnings) > PLAN_SAFETY_NOTES:
            lines.append(f"• ... and {len(warnings) - PLAN_SAFETY_NOTES} more safety considerations")
    lines.append("")
    lines.append("Generated with the rule-based planner (deterministic)")
    return "\n".join(lines)


# Gentle movement program used when the safe pool is too small

GENTLE_EXERCISES = (
    WorkoutExercise(
        exercise_id="gentle_001",
        name="Walking (Light Pace)",
        sets=1,
        reps="15-20 minutes",
        rest_seconds=0,
        notes="Maintain comfortable pace, stop if any discomfort",
    ),
    WorkoutExercise(
        exercise_id="gentle_002",
        name="Gentle Full-Body Stretching",
        sets=1,
        reps="10 minutes",
        rest_seconds=0,
        notes="Hold each stretch 20-30 seconds, never force",
    ),
    WorkoutExercise(
        exercise_id="gentle_003",
        name="Seated Mobility Work",
        sets=2,
        reps="10",
        rest_seconds=30,
        notes="Arm circles, neck rolls, ankle rotations",
    ),
    WorkoutExercise(
        exercise_id="gentle_004",
        name="Diaphragmatic Breathing Exercises",
        sets=3,
        reps="5 minutes",
        rest_seconds=60,
        notes="Slow, deep breaths - improves relaxation",
    ),
)

GENTLE_DAYS = ("monday", "thursday")
GENTLE_REST_DAYS = ("tuesday", "wednesday", "friday", "saturday", "sunday")
GENTLE_SESSION_MINUTES = 30
GENTLE_SESSION_CALORIES = 100
GENTLE_PROGRESSION = (
    "Focus on consistency and comfort. Gradually increase duration as your condition improves. "
    "Work with your healthcare provider to expand your exercise options safely."
)


def gentle_movement_program(
    warnings: Sequence[str],
    requires_medical_clearance: bool,
    excluded: Sequence[ExcludedExercise] = (),
    week_number: int = 1
) -> GeneratedProgram:
    """
    Fixed low-risk program: walking, stretching, mobility and breathing.

    Args:
        warnings: Safety warnings collected so far
        requires_medical_clearance: Whether clearance was flagged
        excluded: Exclusion records from the safety filter
        week_number: Program week

    Returns:
        GeneratedProgram with is_fallback set
    """
    warnings = tuple(warnings)
    tips = (
        "⚠️ This plan is highly limited due to multiple safety constraints",
        "👨‍⚕️ Please consult your healthcare provider before starting",
        "🛑 Stop immediately if you experience any pain or discomfort",
        "💧 Stay well-hydrated",
        "🏥 MEDICAL CLEARANCE REQUIRED before exercising"
        if requires_medical_clearance
        else "📞 Consider consulting a certified fitness professional",
    )
    workout = StructuredWorkout(
        title="Gentle Movement & Mobility",
        description=(
            "⚠️ SAFETY NOTICE: Very few exercises match your current safety profile. "
            "This plan focuses on gentle, low-risk movements suitable for your constraints.\n\n"
            + "\n".join(warnings[:WORKOUT_SAFETY_NOTES])
        ),
        total_duration=GENTLE_SESSION_MINUTES,
        difficulty=ExperienceLevel.BEGINNER,
        estimated_calories=GENTLE_SESSION_CALORIES,
        exercises=GENTLE_EXERCISES,
        coaching_tips=tips,
        progression_notes=GENTLE_PROGRESSION,
    )
    description = (
        "This plan is designed for your specific safety constraints. For a comprehensive "
        "personalized program, please consult your healthcare provider, a certified prenatal "
        "fitness specialist, or a physical therapist.\n\n⚠️ CONSTRAINTS:\n"
        + "\n".join(warnings[:PLAN_SAFETY_NOTES])
    )
    return GeneratedProgram(
        plan_title="Gentle Movement Plan (Safety-Limited)",
        plan_description=description,
        week_number=week_number,
        workouts=tuple(ScheduledWorkout(day_of_week=day, workout=workout) for day in GENTLE_DAYS),
        rest_days=GENTLE_REST_DAYS,
        warnings=warnings,
        requires_medical_clearance=requires_medical_clearance,
        is_fallback=True,
        excluded=tuple(excluded),
    )


def _format_exercise(lines: List[str], number: Optional[int], ex: WorkoutExercise) -> None:
    label = f"{number}. {ex.name}" if number is not None else f"{ex.name}:"
    lines.append(f"\n{label}")
    lines.append(f"   Sets: {ex.sets} x {ex.reps}")
    if ex.rest_seconds:
        lines.append(f"   Rest: {ex.rest_seconds}s")
    if ex.tempo:
        lines.append(f"   Tempo: {ex.tempo}")
    if ex.notes:
        lines.append(f"   Notes: {ex.notes}")


def format_program_text(program: GeneratedProgram) -> str:
    """
    Format a program as readable text.

    Args:
        program: Generated program

    Returns:
        Formatted text string
    """
    lines = []

    lines.append("=" * 60)
    lines.append(program.plan_title)
    lines.append("=" * 60)
    lines.append(f"\n{program.plan_description}")

    if program.split_selection is not None:
        selection = program.split_selection
        lines.append(f"\nSplit: {selection.split.name} (score: {selection.score}/100)")
        for reason in selection.reasoning:
            lines.append(f"  • {reason}")
        if selection.alternatives:
            alternatives = ", ".join(f"{a.split.name} ({a.score})" for a in selection.alternatives)
            lines.append(f"  Alternatives: {alternatives}")

    for scheduled in program.workouts:
        workout = scheduled.workout
        lines.append(f"\n{'=' * 60}")
        lines.append(f"{scheduled.day_of_week.upper()}: {workout.title}")
        lines.append(
            f"{workout.total_duration} min | {workout.difficulty.value} | ~{workout.estimated_calories} kcal"
        )
        lines.append("=" * 60)

        if workout.warmup:
            lines.append(f"\n{'─' * 60}")
            lines.append("WARMUP")
            lines.append('─' * 60)
            for ex in workout.warmup:
                _format_exercise(lines, None, ex)

        lines.append(f"\n{'─' * 60}")
        lines.append("MAIN WORKOUT")
        lines.append('─' * 60)
        for i, ex in enumerate(workout.exercises, 1):
            _format_exercise(lines, i, ex)

        if workout.cooldown:
            lines.append(f"\n{'─' * 60}")
            lines.append("COOLDOWN")
            lines.append('─' * 60)
            for ex in workout.cooldown:
                _format_exercise(lines, None, ex)

        if workout.coaching_tips:
            lines.append(f"\n{'─' * 60}")
            lines.append("COACHING TIPS")
            lines.append('─' * 60)
            for tip in workout.coaching_tips:
                lines.append(f"  • {tip}")

        if workout.progression_notes:
            lines.append(f"\nProgression: {workout.progression_notes}")

    lines.append(f"\n{'=' * 60}")
    lines.append(f"Rest days: {', '.join(program.rest_days)}")
    lines.append(f"Total estimated calories: {program.total_estimated_calories}")
    if program.requires_medical_clearance:
        lines.append("⚠️  Medical clearance required before starting")
    lines.append("=" * 60)

    return "\n".join(lines)
