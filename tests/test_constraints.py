"""Safety filter: pregnancy, medical, injury, senior and medication stages."""

from spotter.engine.constraints import SafetyProfileFilter, has_minimum_exercises
from spotter.models import Exercise
from spotter.normalizer import contains_any
from spotter.profile import UserSafetyProfile
from spotter.rules import PREGNANCY_ADVISORY, SENIOR_ADVISORY


def _filter(resolver, catalog, **profile):
    return SafetyProfileFilter(resolver=resolver).apply(catalog, UserSafetyProfile(**profile))


def test_no_constraints_keeps_whole_catalog(resolver, catalog):
    result = _filter(resolver, catalog, age=30)

    assert len(result.safe_exercises) == len(catalog)
    assert result.excluded == ()
    assert result.warnings == ()
    assert not result.requires_medical_clearance


def test_third_trimester_excludes_positions_and_keywords(resolver, catalog):
    result = _filter(resolver, catalog, pregnancy_status=True, pregnancy_trimester=3)

    assert result.requires_medical_clearance
    for ex in result.safe_exercises:
        md = resolver.resolve(ex)
        assert not (md.is_supine or md.is_high_impact or md.is_prone), ex.name
        assert not contains_any(ex.name, ("bench", "jump", "twist", "lying", "balance")), ex.name

    assert PREGNANCY_ADVISORY in result.warnings
    assert "Trimester 3 limits: RPE 3-5 max, heart rate below 120 bpm" in result.warnings


def test_pregnancy_without_trimester_uses_first_trimester(resolver, catalog):
    result = _filter(resolver, catalog, pregnancy_status=True)
    names = {ex.name for ex in result.safe_exercises}

    assert "barbell bench press" not in names   # supine
    assert "burpee" in names                    # high impact allowed in T1
    assert result.warnings[0].startswith("Trimester 1")


def test_exclusion_records_every_reason_once(resolver, catalog):
    result = _filter(resolver, catalog, pregnancy_status=True, pregnancy_trimester=3)
    records = [r for r in result.excluded if r.exercise.exercise_id == "0001"]

    assert len(records) == 1
    reasons = records[0].reasons
    assert "Supine position not safe during pregnancy" in reasons
    assert "Exercise type 'bench' not recommended during pregnancy" in reasons


def test_knee_injury_removes_leg_work(resolver, catalog):
    result = _filter(resolver, catalog, injuries=("Left knee pain",))

    for ex in result.safe_exercises:
        assert "legs" not in ex.body_parts, ex.name
        assert not contains_any(ex.name, ("squat", "lunge", "leg press", "jump", "burpee")), ex.name
    assert "Avoiding knee-loading exercises due to knee injury" in result.warnings
    assert not result.requires_medical_clearance


def test_physical_limitations_count_as_injuries(resolver, catalog):
    result = _filter(resolver, catalog, physical_limitations=("shoulder impingement",))
    names = {ex.name for ex in result.safe_exercises}

    assert "barbell overhead press" not in names
    assert "dumbbell lateral raise" not in names
    assert "barbell back squat" in names


def test_senior_excludes_fall_risk(resolver, catalog):
    result = _filter(resolver, catalog, age=70)
    names = {ex.name for ex in result.safe_exercises}

    assert {"pistol squat", "single leg romanian deadlift", "bulgarian split squat", "box jump"}.isdisjoint(names)
    assert "goblet squat" in names
    assert SENIOR_ADVISORY in result.warnings


def test_heart_disease_requires_clearance(resolver, catalog):
    result = _filter(resolver, catalog, medical_conditions=("Heart disease",))

    assert result.requires_medical_clearance
    assert result.warnings[0].startswith("CRITICAL: Heart disease detected")


def test_hypertension_excludes_max_effort_lifts(resolver, catalog):
    result = _filter(resolver, catalog, medical_conditions=("high blood pressure",))

    assert not any(contains_any(ex.name, ("deadlift", "squat")) for ex in result.safe_exercises)
    assert not result.requires_medical_clearance


def test_medications_only_add_advisories(resolver, catalog):
    result = _filter(resolver, catalog, medications=("metoprolol 50mg",))

    assert len(result.safe_exercises) == len(catalog)
    assert result.warnings == ("Beta-blockers: Use RPE instead of heart rate. Expect lower max HR.",)


def test_warnings_are_deduplicated(resolver, catalog):
    result = _filter(resolver, catalog, injuries=("knee pain", "knee surgery"))

    assert result.warnings.count("Avoiding knee-loading exercises due to knee injury") == 1


def test_safe_pool_preserves_catalog_order(resolver, catalog):
    result = _filter(resolver, catalog, injuries=("lower back",), age=70)
    order = [ex.exercise_id for ex in catalog]
    positions = [order.index(ex.exercise_id) for ex in result.safe_exercises]

    assert positions == sorted(positions)
    assert len(result.safe_exercises) + len(result.excluded) == len(catalog)


def test_empty_pool_is_not_an_error(resolver):
    result = _filter(resolver, [], pregnancy_status=True, pregnancy_trimester=3)

    assert result.safe_exercises == ()
    assert not has_minimum_exercises(result.safe_exercises)
    assert has_minimum_exercises(range(5), 5)


def test_capitalised_exercise_built_in_code(resolver):
    leg_extension = Exercise(
        exercise_id="x1",
        name="Leg Extension Machine",
        target_muscles=("Quads",),
        body_parts=("Upper Legs",),
        equipment=("Leverage Machine",),
    )
    result = _filter(resolver, [leg_extension], injuries=("knee pain",))

    assert result.safe_exercises == ()
    assert result.excluded[0].exercise.exercise_id == "x1"
