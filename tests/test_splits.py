"""Split templates and the 100-point selection scorer."""

from spotter.engine.splits import (
    ALL_SPLITS,
    FULL_BODY_3X,
    HIIT_CIRCUIT_4X,
    UPPER_LOWER_4X,
    get_split_by_id,
    score_equipment,
    score_experience,
    score_frequency,
    score_recovery,
    score_split,
    select_optimal_split,
)
from spotter.models import ExperienceLevel
from spotter.rules import SENIOR_AGE


def test_beginner_three_days_gets_full_body(make_profile):
    profile = make_profile(
        experienceLevel="beginner",
        fitnessGoal="general_fitness",
        workoutsPerWeek=3,
        availableEquipment=["body weight", "dumbbell"],
    )
    selection = select_optimal_split(profile)

    assert selection.split.split_id == "full_body_3x"
    assert selection.score == 95
    assert len(selection.alternatives) == 3


def test_intermediate_four_days_gets_upper_lower(make_profile):
    selection = select_optimal_split(make_profile())

    assert selection.split.split_id == "upper_lower_4x"
    assert selection.score == 95
    assert selection.alternatives[0].split.split_id == "ppl_3x"


def test_advanced_six_days_gets_high_frequency_ppl(make_profile):
    profile = make_profile(experienceLevel="advanced", workoutsPerWeek=6)

    assert select_optimal_split(profile).split.split_id == "ppl_6x"


def test_ranking_is_sorted_and_complete(make_profile):
    selection = select_optimal_split(make_profile())
    scores = [entry.score for entry in selection.ranking]

    assert len(selection.ranking) == len(ALL_SPLITS)
    assert scores == sorted(scores, reverse=True)
    assert all(0 <= s <= 100 for s in scores)


def test_breakdown_sums_to_score(make_profile):
    entry = score_split(FULL_BODY_3X, make_profile())

    assert entry.score == sum(c.points for c in entry.breakdown)
    assert [c.criterion for c in entry.breakdown] == [
        "frequency", "goal", "equipment", "experience", "recovery", "variety",
    ]


def test_frequency_penalty_per_day_of_distance():
    assert score_frequency(UPPER_LOWER_4X, 4).points == 30
    assert score_frequency(UPPER_LOWER_4X, 6).points == 16
    assert score_frequency(UPPER_LOWER_4X, 1).points == 9


def test_barbell_covers_dumbbell_requirement():
    assert score_equipment(FULL_BODY_3X, ["body weight", "barbell"]).points == 15
    assert score_equipment(UPPER_LOWER_4X, ["dumbbell"]).points == 7
    assert score_equipment(UPPER_LOWER_4X, ["band"]).points == 0


def test_experience_adaptation_credit():
    assert score_experience(UPPER_LOWER_4X, ExperienceLevel.BEGINNER).points == 7
    assert score_experience(FULL_BODY_3X, ExperienceLevel.ADVANCED).points == 10


def test_high_stress_penalizes_demanding_splits(make_profile):
    stressed = make_profile(stressLevel="high")

    assert score_recovery(HIIT_CIRCUIT_4X, stressed).points == 0
    assert score_recovery(FULL_BODY_3X, stressed).points == 10


def test_senior_age_penalizes_demanding_splits(make_profile):
    assert score_recovery(HIIT_CIRCUIT_4X, make_profile(age=SENIOR_AGE)).points == 0
    assert score_recovery(HIIT_CIRCUIT_4X, make_profile(age=SENIOR_AGE - 1)).points == 5


def test_lookup_by_id():
    assert get_split_by_id("hiit_circuit_4x") is HIIT_CIRCUIT_4X
    assert get_split_by_id("nope") is None


def test_templates_are_well_formed():
    weekdays = {"monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"}
    for split in ALL_SPLITS:
        training = {d.suggested_day_of_week for d in split.workout_days}
        assert training | set(split.rest_days) == weekdays, split.split_id
        assert training.isdisjoint(split.rest_days), split.split_id
