"""Sets, reps, rest and tempo assignment, warmups and calorie estimates."""

from spotter.engine.classification import classify_all, classify_exercise
from spotter.engine.prescription import (
    ParameterAssigner,
    adjust_reps,
    estimate_calories,
    generate_cooldown,
    generate_warmup,
    round_half_up,
)
from spotter.engine.splits import UPPER_LOWER_4X
from spotter.engine.variation import select_exercises_for_day
from spotter.models import ExperienceLevel, FitnessGoal, StressLevel
from spotter.profile import UserSafetyProfile

from conftest import classified, exercise

BENCH = classified(exercise("bench", "barbell bench press", secondary=("triceps", "delts"), equipment=("barbell",)))
FLY = classified(exercise("fly", "dumbbell fly"))
GOBLET = classified(exercise("goblet", "goblet squat", target=("quads",), secondary=("glutes", "hamstrings"),
                             body_parts=("legs",)))
BURPEE = classified(exercise("burpee", "burpee", target=("cardiovascular system",), body_parts=("cardio",),
                             equipment=("body weight",)))


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.49) == 2


def test_adjust_reps():
    assert adjust_reps("10-12", 0.7) == "7-8"
    assert adjust_reps("12-15", 1.3) == "16-20"
    assert adjust_reps("AMRAP", 2.0) == "AMRAP"


def test_base_parameters_for_muscle_gain(make_profile):
    prescribed, warnings = ParameterAssigner().prescribe(BENCH, make_profile())

    assert (prescribed.sets, prescribed.reps, prescribed.rest_seconds) == (4, "8-10", 120)
    assert prescribed.tempo == "3-1-2"
    assert warnings == []


def test_strength_goal_adjustments(make_profile):
    prescribed, _ = ParameterAssigner().prescribe(BENCH, make_profile(fitnessGoal="strength"))

    assert (prescribed.sets, prescribed.reps, prescribed.rest_seconds, prescribed.tempo) == (5, "6-7", 180, "3-1-1")


def test_weight_loss_isolation_for_beginner(make_profile):
    profile = make_profile(fitnessGoal="weight_loss", experienceLevel="beginner")
    prescribed, _ = ParameterAssigner().prescribe(FLY, profile)

    assert (prescribed.sets, prescribed.reps, prescribed.rest_seconds, prescribed.tempo) == (2, "16-20", 18, "2-0-1")


def test_cardio_uses_auxiliary_row(make_profile):
    prescribed, _ = ParameterAssigner().prescribe(BURPEE, make_profile())

    assert (prescribed.sets, prescribed.reps, prescribed.rest_seconds) == (3, "10-12", 90)


def test_third_trimester_modifier():
    safety = UserSafetyProfile(pregnancy_status=True, pregnancy_trimester=3)
    sets, rest, warnings = ParameterAssigner().apply_medical_modifiers(4, 90, safety)

    assert (sets, rest) == (2, 120)
    assert warnings == ["Trimester 3: Reduced volume and longer rest periods"]


def test_modifiers_stack():
    safety = UserSafetyProfile(age=70, medical_conditions=("heart disease",))
    sets, rest, warnings = ParameterAssigner().apply_medical_modifiers(5, 60, safety)

    # 5 -> 3 (heart disease) -> 2 (senior)
    assert (sets, rest) == (2, 180)
    assert len(warnings) == 2


def test_modifiers_never_raise_sets():
    safety = UserSafetyProfile(stress_level=StressLevel.HIGH)

    assert ParameterAssigner().apply_medical_modifiers(1, 30, safety)[:2] == (1, 30)


def test_hypertension_only_extends_rest():
    safety = UserSafetyProfile(medical_conditions=("Hypertension",))

    assert ParameterAssigner().apply_medical_modifiers(4, 60, safety)[:2] == (4, 120)


def test_no_safety_profile_means_no_modifiers():
    assert ParameterAssigner().apply_medical_modifiers(4, 60, None) == (4, 60, [])


def test_notes_for_beginner_on_complex_lift(make_profile):
    notes = ParameterAssigner().exercise_notes(BENCH, make_profile(experienceLevel="beginner"))

    assert notes.startswith("⚠️ Complex exercise")
    assert notes.endswith("Prioritize this exercise - most effective for gains")


def test_injury_form_cues(make_profile):
    safety = UserSafetyProfile(physical_limitations=("old knee injury",))
    notes = ParameterAssigner().exercise_notes(GOBLET, make_profile(), safety)

    assert "Reduce range of motion, knees behind toes" in notes
    assert ParameterAssigner().exercise_notes(FLY, make_profile(), safety) is None


def test_pregnancy_breathing_note(make_profile, resolver):
    squat = exercise("squat", "barbell back squat", target=("quads",), secondary=("glutes", "hamstrings"),
                     body_parts=("legs",), equipment=("barbell",))
    ex = classify_exercise(squat, resolver.resolve(squat))
    notes = ParameterAssigner().exercise_notes(ex, make_profile(), UserSafetyProfile(pregnancy_status=True))

    assert "Avoid breath-holding - breathe continuously" in notes


def test_coaching_tips(make_profile):
    assigner = ParameterAssigner()
    senior = UserSafetyProfile(age=70)

    leg_tips = assigner.coaching_tips(make_profile(), "Legs A")
    hiit_tips = assigner.coaching_tips(make_profile(experienceLevel="advanced"), "Full Body HIIT", senior)

    assert leg_tips[0].startswith("🎯 Focus on progressive overload")
    assert "🦵 Leg day is crucial - don't skip it" in leg_tips
    assert "🔥 Keep moving - minimize rest between exercises" in hiit_tips
    assert "💪 Push intensity on compound lifts - you can handle it" in hiit_tips
    assert "⏰ Take extra warm-up time (10-15 minutes)" in hiit_tips


def test_assign_keeps_order_and_dedupes_warnings(make_profile, catalog, resolver):
    pool = classify_all(catalog, resolver.resolve)
    day = select_exercises_for_day(pool, UPPER_LOWER_4X.workout_days[0], make_profile(), target=7)
    safety = UserSafetyProfile(age=70)

    prescribed = ParameterAssigner().assign(day, make_profile(age=70), safety)

    assert [ex.exercise_id for ex in prescribed.exercises] == [ex.exercise_id for ex in day.exercises]
    assert prescribed.warnings == ("Senior modifications: Longer rest, focus on form and balance",)
    assert all(ex.rest_seconds >= 120 for ex in prescribed.exercises)


def test_warmup_depends_on_workout_type():
    def ids(workout_type):
        return [w.exercise_id for w in generate_warmup(workout_type)]

    assert ids("Upper Body A") == ["warmup_001", "warmup_002"]
    assert ids("Lower Body B") == ["warmup_001", "warmup_003"]
    assert ids("Pull") == ["warmup_001", "warmup_004"]
    assert ids("Full Body A") == ["warmup_001"]
    assert generate_warmup("Push", duration_minutes=8)[0].reps == "8 minutes"


def test_cooldown_is_fixed():
    assert [c.exercise_id for c in generate_cooldown()] == ["cooldown_001", "cooldown_002"]


def test_calorie_estimate():
    assert estimate_calories(45, ExperienceLevel.INTERMEDIATE, 70, FitnessGoal.MUSCLE_GAIN) == 270
    assert estimate_calories(60, ExperienceLevel.BEGINNER, 84, FitnessGoal.WEIGHT_LOSS) == 432
    assert estimate_calories(60, ExperienceLevel.ADVANCED, 70, FitnessGoal.STRENGTH) == 378
