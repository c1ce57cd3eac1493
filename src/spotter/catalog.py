"""
Static exercise catalog.

Loads an ExerciseDB-style JSON export once per process. The resulting
ExerciseCatalog is immutable and can be shared freely between generation
calls.

Accepted layouts: a top-level list of exercise objects, or an object with an
"exercises" list. Field names follow the ExerciseDB export (camelCase).
"""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from .exceptions import CatalogError
from .models import Exercise
from .normalizer import normalize_terms

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"
DEFAULT_CATALOG_PATH = DATA_DIR / "exercises.json"


class ExerciseCatalog:
    """Read-only, id-indexed collection of exercises in catalog order."""

    def __init__(self, exercises: Iterable[Exercise]):
        ordered: List[Exercise] = []
        index: Dict[str, Exercise] = {}
        for exercise in exercises:
            if exercise.exercise_id in index:
                raise CatalogError(f"Duplicate exercise id: {exercise.exercise_id}")
            index[exercise.exercise_id] = exercise
            ordered.append(exercise)

        self._exercises: Tuple[Exercise, ...] = tuple(ordered)
        self._index: Mapping[str, Exercise] = MappingProxyType(index)

    def __len__(self) -> int:
        return len(self._exercises)

    def __iter__(self) -> Iterator[Exercise]:
        return iter(self._exercises)

    def __contains__(self, exercise_id: object) -> bool:
        return exercise_id in self._index

    @property
    def exercises(self) -> Tuple[Exercise, ...]:
        return self._exercises

    def get(self, exercise_id: str) -> Optional[Exercise]:
        return self._index.get(exercise_id)


def exercise_from_record(record: Mapping[str, Any]) -> Exercise:
    """
    Build an Exercise from one catalog record.

    Args:
        record: ExerciseDB record (exerciseId/id, name, targetMuscles,
            secondaryMuscles, bodyParts, equipments, gifUrl)

    Returns:
        Exercise

    Raises:
        CatalogError: If the id or name is missing
    """
    exercise_id = record.get("exerciseId") or record.get("id")
    name = record.get("name")
    if not exercise_id or not name:
        raise CatalogError(f"Catalog record missing id or name: {dict(record)!r}")

    def terms(*keys: str) -> Tuple[str, ...]:
        for key in keys:
            value = record.get(key)
            if value is None:
                continue
            if isinstance(value, str):
                value = [value]
            if not isinstance(value, list):
                raise CatalogError(f"Field '{key}' of exercise {exercise_id} must be a list")
            return normalize_terms(value)
        return ()

    return Exercise(
        exercise_id=str(exercise_id),
        name=str(name).strip(),
        target_muscles=terms("targetMuscles", "target_muscles"),
        secondary_muscles=terms("secondaryMuscles", "secondary_muscles"),
        body_parts=terms("bodyParts", "body_parts"),
        equipment=terms("equipments", "equipment"),
        media_url=record.get("gifUrl") or record.get("media_url"),
    )


def load_catalog(path: Optional[Union[str, Path]] = None) -> ExerciseCatalog:
    """
    Load the exercise catalog from JSON.

    Args:
        path: Catalog path (default: bundled data/exercises.json)

    Returns:
        ExerciseCatalog

    Raises:
        CatalogError: If the file is missing, malformed, or has duplicate ids
    """
    path = Path(path) if path else DEFAULT_CATALOG_PATH
    try:
        with open(path) as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogError(f"Could not read exercise catalog from {path}: {e}") from e

    records = raw.get("exercises") if isinstance(raw, dict) else raw
    if not isinstance(records, list):
        raise CatalogError(f"Exercise catalog {path} must contain a list of exercises")

    exercises = []
    for record in records:
        if not isinstance(record, dict):
            raise CatalogError(f"Catalog entries must be objects, got {type(record).__name__}")
        exercises.append(exercise_from_record(record))

    catalog = ExerciseCatalog(exercises)
    logger.info(f"Loaded {len(catalog)} exercises from {path}")
    return catalog
