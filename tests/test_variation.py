"""Exercise counts, distribution quotas and per-day selection."""

from spotter.biomechanics import ExerciseSafetyMetadata
from spotter.engine.classification import ClassifiedExercise, classify_all
from spotter.engine.splits import HIIT_CIRCUIT_4X, PPL_3X, UPPER_LOWER_4X
from spotter.engine.variation import (
    ExerciseDistribution,
    WeeklyExercisePlan,
    WorkoutDayExercises,
    exercise_distribution,
    exercises_per_workout,
    generate_weekly_exercise_plan,
    is_relevant,
    muscle_hits,
    select_exercises_for_day,
    select_with_variety,
    validate_muscle_balance,
)
from spotter.models import Classification, Exercise, ExperienceLevel

from conftest import classified, exercise

UPPER_A = UPPER_LOWER_4X.workout_days[0]
HIIT_A = HIIT_CIRCUIT_4X.workout_days[0]


def _ce(exercise_id, muscle, equipment, complexity):
    return ClassifiedExercise(
        exercise=exercise(exercise_id, f"exercise {exercise_id}", target=(muscle,), equipment=(equipment,)),
        metadata=ExerciseSafetyMetadata(),
        classification=Classification.ISOLATION,
        complexity_score=complexity,
    )


def _ids(exercises):
    return [ex.exercise_id for ex in exercises]


def test_exercises_per_workout():
    assert exercises_per_workout(45, ExperienceLevel.BEGINNER, 3) == 5
    assert exercises_per_workout(60, ExperienceLevel.INTERMEDIATE, 4) == 7
    assert exercises_per_workout(20, ExperienceLevel.BEGINNER, 3) == 5
    # 13 clamped to 12, then one fewer for a 6-day split
    assert exercises_per_workout(90, ExperienceLevel.ADVANCED, 6) == 11


def test_distribution_never_exceeds_target():
    assert exercise_distribution(ExperienceLevel.BEGINNER, True, 5) == ExerciseDistribution(3, 1, 1)
    assert exercise_distribution(ExperienceLevel.INTERMEDIATE, True, 7) == ExerciseDistribution(4, 2, 1)
    assert exercise_distribution(ExperienceLevel.ADVANCED, False, 11) == ExerciseDistribution(4, 4, 3)


def test_rotation_changes_pick_between_weeks():
    pool = [_ce("a", "pecs", "dumbbell", 3), _ce("b", "pecs", "dumbbell", 3), _ce("c", "pecs", "dumbbell", 3)]

    assert _ids(select_with_variety(pool, 1, 0, ["dumbbell"])) == ["c"]
    assert _ids(select_with_variety(pool, 1, 1, ["dumbbell"])) == ["a"]
    assert _ids(select_with_variety(pool, 1, 3, ["dumbbell"])) == ["c"]


def test_owned_equipment_outranks_complexity():
    pool = [_ce("cable", "pecs", "cable", 2), _ce("machine", "pecs", "leverage machine", 9)]

    assert _ids(select_with_variety(pool, 1, 0, ["cable"])) == ["cable"]


def test_variety_pass_prefers_new_muscle_or_equipment():
    pool = [_ce("a", "pecs", "dumbbell", 5), _ce("b", "pecs", "dumbbell", 5), _ce("c", "lats", "cable", 4)]

    assert _ids(select_with_variety(pool, 2, 0, ["dumbbell", "cable"])) == ["b", "c"]
    assert _ids(select_with_variety(pool, 3, 0, ["dumbbell", "cable"])) == ["b", "c", "a"]
    assert _ids(select_with_variety(pool, 10, 0, ["dumbbell"])) == ["b", "c", "a"]
    assert select_with_variety([], 3, 0, ["dumbbell"]) == []


def _mixed_pool():
    return [
        classified(exercise("bench", "barbell bench press", secondary=("triceps", "delts"), equipment=("barbell",))),
        classified(exercise("burpee", "burpee", target=("cardiovascular system",),
                            secondary=("quads", "pecs", "delts"), body_parts=("cardio",),
                            equipment=("body weight",))),
        classified(exercise("climber", "mountain climber", target=("cardiovascular system",),
                            secondary=("abs",), body_parts=("cardio",), equipment=("body weight",))),
        classified(exercise("fly", "dumbbell fly")),
    ]


def test_cardio_joins_auxiliaries_on_cardio_days(make_profile):
    day = select_exercises_for_day(_mixed_pool(), HIIT_A, make_profile(), target=6)

    assert set(_ids(day.exercises)) == {"bench", "burpee", "climber", "fly"}
    assert day.distribution == ExerciseDistribution(compound=1, auxiliary=0, isolation=1, cardio=2)
    assert day.target == 6


def test_cardio_left_out_on_strength_days(make_profile):
    pool = _mixed_pool()
    day = select_exercises_for_day(pool, UPPER_A, make_profile(), target=6)

    assert is_relevant(pool[1], UPPER_A)
    assert _ids(day.exercises) == ["bench", "fly"]


def test_excluded_ids_are_dropped(make_profile):
    day = select_exercises_for_day(_mixed_pool(), HIIT_A, make_profile(), target=6, exclude_ids=["bench"])

    assert "bench" not in _ids(day.exercises)
    assert len(day.exercises) == 3


def test_full_catalog_day_fills_quotas(make_profile, catalog, resolver):
    pool = classify_all(catalog, resolver.resolve)
    day = select_exercises_for_day(pool, UPPER_A, make_profile(), target=7)

    assert day.total_exercises == 7
    assert len(set(_ids(day.exercises))) == 7
    assert day.distribution == ExerciseDistribution(compound=4, auxiliary=2, isolation=1)
    assert all(is_relevant(ex, UPPER_A) for ex in day.exercises)


def test_weekly_plan_rotates_by_week(make_profile, catalog, resolver):
    pool = classify_all(catalog, resolver.resolve)
    profile = make_profile()

    week1 = generate_weekly_exercise_plan(pool, UPPER_LOWER_4X, profile, week_number=1)
    week2 = generate_weekly_exercise_plan(pool, UPPER_LOWER_4X, profile, week_number=2)
    week5 = generate_weekly_exercise_plan(pool, UPPER_LOWER_4X, profile, week_number=5)

    assert week1.exercises_per_workout == 7
    assert week1.total_exercises_per_week == 28
    assert _ids(week1.workouts[0].exercises) != _ids(week2.workouts[0].exercises)
    assert [_ids(w.exercises) for w in week1.workouts] == [_ids(w.exercises) for w in week5.workouts]


def test_muscle_balance_warnings():
    bench = classified(exercise("bench", "barbell bench press", secondary=("triceps",), equipment=("barbell",)))
    day = WorkoutDayExercises(
        day=UPPER_A,
        exercises=(bench, bench),
        distribution=ExerciseDistribution.count([bench, bench]),
        target=2,
    )
    plan = WeeklyExercisePlan(week_number=1, workouts=(day,), exercises_per_workout=2)

    assert muscle_hits(plan) == {"pecs": 2, "triceps": 2}
    warnings = validate_muscle_balance(plan)
    assert "lats only trained 0x this week (recommend 2x minimum)" in warnings
    assert not any(w.startswith("pecs") for w in warnings)
    assert len(warnings) == 4


def test_relevance_ignores_case():
    legs = next(day for day in PPL_3X.workout_days if day.workout_type == "Legs")
    curl = classified(Exercise(exercise_id="x2", name="Seated Leg Curl", target_muscles=("Hamstrings",)))
    extension = classified(Exercise(exercise_id="x3", name="Leg Extension", target_muscles=("Quads",)))

    assert is_relevant(curl, legs)
    assert is_relevant(extension, legs)
    assert not is_relevant(extension, UPPER_A)
