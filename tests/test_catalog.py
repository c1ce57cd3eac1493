"""Catalog loading."""

import json

import pytest

from spotter.catalog import ExerciseCatalog, exercise_from_record, load_catalog
from spotter.exceptions import CatalogError
from spotter.models import Exercise


def test_bundled_catalog(catalog):
    ids = [ex.exercise_id for ex in catalog]

    assert len(catalog) == len(set(ids)) > 50
    assert catalog.get("0001").name == "barbell bench press"
    assert "0001" in catalog
    assert catalog.get("9999") is None


def test_record_fields_are_normalized():
    ex = exercise_from_record({
        "id": 42,
        "name": "  Push Up ",
        "targetMuscles": ["Pecs"],
        "bodyParts": ["Chest"],
        "equipments": "Body Weight",
        "gifUrl": "https://example.com/42.gif",
    })

    assert ex.exercise_id == "42"
    assert ex.name == "Push Up"
    assert ex.target_muscles == ("pecs",)
    assert ex.body_parts == ("chest",)
    assert ex.equipment == ("body weight",)
    assert ex.secondary_muscles == ()
    assert ex.media_url == "https://example.com/42.gif"


def test_record_without_name():
    with pytest.raises(CatalogError):
        exercise_from_record({"exerciseId": "1"})


def test_record_with_bad_list():
    with pytest.raises(CatalogError):
        exercise_from_record({"exerciseId": "1", "name": "x", "bodyParts": {"a": 1}})


def test_duplicate_ids():
    record = exercise_from_record({"exerciseId": "1", "name": "x"})

    with pytest.raises(CatalogError):
        ExerciseCatalog([record, record])


def test_top_level_list_layout(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps([{"exerciseId": "a", "name": "plank"}, {"exerciseId": "b", "name": "crunch"}]))

    assert [ex.name for ex in load_catalog(path)] == ["plank", "crunch"]


@pytest.mark.parametrize("content", ["{not json", '{"exercises": 3}', '[1, 2]'])
def test_malformed_files(tmp_path, content):
    path = tmp_path / "catalog.json"
    path.write_text(content)

    with pytest.raises(CatalogError):
        load_catalog(path)


def test_exercise_terms_are_lowercased_on_construction():
    ex = Exercise(exercise_id="x", name="Leg Press", target_muscles=["Quads "], body_parts=("Upper Legs",))

    assert ex.target_muscles == ("quads",)
    assert ex.body_parts == ("upper legs",)
    assert ex.name == "Leg Press"
