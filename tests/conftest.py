"""Shared fixtures: bundled catalog, manual tag resolver and profile factory."""

from typing import Any, Dict

import pytest

from spotter.biomechanics import SafetyMetadataResolver, infer_safety_metadata, load_safety_tags
from spotter.catalog import load_catalog
from spotter.config import DEFAULT_SAFETY_TAGS_PATH
from spotter.engine.classification import ClassifiedExercise, classify_exercise
from spotter.models import Exercise
from spotter.profile import UserProfile


BASE_PROFILE: Dict[str, Any] = {
    "age": 30,
    "weight": 70,
    "height": 175,
    "gender": "male",
    "fitnessGoal": "muscle_gain",
    "experienceLevel": "intermediate",
    "workoutsPerWeek": 4,
    "workoutDuration": 60,
    "availableEquipment": ["body weight", "dumbbell", "barbell", "cable"],
}


@pytest.fixture(scope="session")
def catalog():
    return load_catalog()


@pytest.fixture(scope="session")
def resolver():
    return SafetyMetadataResolver(load_safety_tags(DEFAULT_SAFETY_TAGS_PATH))


@pytest.fixture
def make_profile():
    """Build a validated profile from BASE_PROFILE plus overrides."""
    def _make(**overrides: Any) -> UserProfile:
        data = dict(BASE_PROFILE)
        data.update(overrides)
        return UserProfile.from_dict(data)
    return _make


def exercise(
    exercise_id: str,
    name: str,
    target=("pecs",),
    secondary=(),
    body_parts=("chest",),
    equipment=("dumbbell",)
) -> Exercise:
    return Exercise(
        exercise_id=exercise_id,
        name=name,
        target_muscles=tuple(target),
        secondary_muscles=tuple(secondary),
        body_parts=tuple(body_parts),
        equipment=tuple(equipment),
    )


def classified(ex: Exercise) -> ClassifiedExercise:
    return classify_exercise(ex, infer_safety_metadata(ex))
