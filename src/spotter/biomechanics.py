"""
Exercise Safety Metadata

Defines body position, impact and balance attributes used for safety
screening, and resolves them per exercise:

1. Exact-name lookup in a manually curated tag table
2. Heuristic inference from the exercise name and equipment (fallback)

Manual tags always win over inference.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Union

import yaml

from .exceptions import CatalogError
from .models import Exercise
from .normalizer import contains_any, tag_key

logger = logging.getLogger(__name__)


class ImpactLevel(Enum):
    """Ground reaction / landing impact of an exercise."""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class BalanceRequirement(Enum):
    """How much balance an exercise demands."""
    NONE = "none"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


@dataclass(frozen=True)
class ExerciseSafetyMetadata:
    """Safety-relevant attributes of one exercise."""
    is_supine: bool = False          # Lying flat on back
    is_high_impact: bool = False     # Jumping, plyometrics
    has_fall_risk: bool = False      # Unstable surface, single-leg
    requires_valsalva: bool = False  # Heavy lifting, breath holding
    is_prone: bool = False           # Face down
    is_inverted: bool = False        # Upside down
    impact_level: ImpactLevel = ImpactLevel.LOW
    balance_required: BalanceRequirement = BalanceRequirement.NONE

    @classmethod
    def from_tags(cls, tags: Mapping[str, Any]) -> "ExerciseSafetyMetadata":
        """
        Build metadata from a manual tag entry.

        Missing keys fall back to the conservative defaults above. Both
        camelCase (catalog export) and snake_case keys are accepted.

        Args:
            tags: Tag mapping from the manual table

        Returns:
            ExerciseSafetyMetadata

        Raises:
            ValueError: If an enum value is unknown
        """
        def flag(snake: str, camel: str) -> bool:
            return bool(tags.get(snake, tags.get(camel, False)))

        impact = tags.get("impact_level", tags.get("impactLevel", ImpactLevel.LOW.value))
        balance = tags.get("balance_required", tags.get("balanceRequired", BalanceRequirement.NONE.value))

        return cls(
            is_supine=flag("is_supine", "isSupine"),
            is_high_impact=flag("is_high_impact", "isHighImpact"),
            has_fall_risk=flag("has_fall_risk", "hasFallRisk"),
            requires_valsalva=flag("requires_valsalva", "requiresValsalva"),
            is_prone=flag("is_prone", "isProne"),
            is_inverted=flag("is_inverted", "isInverted"),
            impact_level=ImpactLevel(str(impact).lower()),
            balance_required=BalanceRequirement(str(balance).lower()),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isSupine": self.is_supine,
            "isHighImpact": self.is_high_impact,
            "hasFallRisk": self.has_fall_risk,
            "requiresValsalva": self.requires_valsalva,
            "isProne": self.is_prone,
            "isInverted": self.is_inverted,
            "impactLevel": self.impact_level.value,
            "balanceRequired": self.balance_required.value,
        }


# Name keywords used by the inference fallback
SUPINE_KEYWORDS = ("lying", "bench press", "supine", "lying back")
HIGH_IMPACT_KEYWORDS = ("jump", "hop", "burpee", "box", "plyometric")
FALL_RISK_KEYWORDS = ("single leg", "pistol", "balance", "bosu")
VALSALVA_KEYWORDS = ("deadlift", "squat")
PRONE_KEYWORDS = ("prone", "lying face down", "superman")
INVERTED_KEYWORDS = ("handstand", "invert", "headstand")


def infer_safety_metadata(exercise: Exercise) -> ExerciseSafetyMetadata:
    """
    Infer safety metadata from exercise name and equipment.

    Conservative defaults for exercises without a manual tag.

    Args:
        exercise: Catalog exercise

    Returns:
        Inferred ExerciseSafetyMetadata
    """
    name = exercise.name
    equipment = exercise.equipment

    is_high_impact = contains_any(name, HIGH_IMPACT_KEYWORDS)
    has_fall_risk = contains_any(name, FALL_RISK_KEYWORDS)

    # Barbell presses count as Valsalva lifts, other presses do not
    requires_valsalva = (
        contains_any(name, VALSALVA_KEYWORDS)
        or (contains_any(name, ("press",)) and "barbell" in equipment)
    )

    return ExerciseSafetyMetadata(
        is_supine=contains_any(name, SUPINE_KEYWORDS),
        is_high_impact=is_high_impact,
        has_fall_risk=has_fall_risk,
        requires_valsalva=requires_valsalva,
        is_prone=contains_any(name, PRONE_KEYWORDS),
        is_inverted=contains_any(name, INVERTED_KEYWORDS),
        impact_level=ImpactLevel.HIGH if is_high_impact else ImpactLevel.LOW,
        balance_required=BalanceRequirement.HIGH if has_fall_risk else BalanceRequirement.NONE,
    )


class SafetyMetadataResolver:
    """
    Two-tier metadata lookup: manual tags first, inference second.

    Both tiers are injected, so alternate tag tables or inference functions
    can be swapped in for testing.
    """

    def __init__(
        self,
        manual_tags: Optional[Mapping[str, ExerciseSafetyMetadata]] = None,
        infer: Callable[[Exercise], ExerciseSafetyMetadata] = infer_safety_metadata
    ):
        """
        Args:
            manual_tags: Exact exercise-name key -> metadata (keys as produced by tag_key)
            infer: Fallback inference function
        """
        self._manual_tags = MappingProxyType(dict(manual_tags or {}))
        self._infer = infer

    @property
    def tagged_count(self) -> int:
        return len(self._manual_tags)

    def is_manually_tagged(self, exercise: Exercise) -> bool:
        return tag_key(exercise.name) in self._manual_tags

    def resolve(self, exercise: Exercise) -> ExerciseSafetyMetadata:
        """
        Resolve metadata for an exercise.

        Args:
            exercise: Catalog exercise

        Returns:
            Manual metadata if tagged, otherwise inferred metadata
        """
        manual = self._manual_tags.get(tag_key(exercise.name))
        if manual is not None:
            return manual
        return self._infer(exercise)


def load_safety_tags(path: Union[str, Path]) -> Mapping[str, ExerciseSafetyMetadata]:
    """
    Load the manual safety tag table from YAML.

    Expected layout::

        exercise_metadata:
          barbell bench press:
            is_supine: true
            requires_valsalva: true

    Keys starting with "_" are treated as comments and skipped.

    Args:
        path: YAML file path

    Returns:
        Read-only mapping of tag key -> metadata

    Raises:
        CatalogError: If the file is missing or malformed
    """
    path = Path(path)
    try:
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise CatalogError(f"Could not read safety tags from {path}: {e}") from e

    entries = raw.get("exercise_metadata", raw) if isinstance(raw, dict) else None
    if not isinstance(entries, dict):
        raise CatalogError(f"Safety tag file {path} must contain a mapping of exercise names")

    tags: Dict[str, ExerciseSafetyMetadata] = {}
    for name, entry in entries.items():
        if str(name).startswith("_"):
            continue
        if not isinstance(entry, dict):
            raise CatalogError(f"Safety tags for '{name}' must be a mapping")
        try:
            tags[tag_key(str(name))] = ExerciseSafetyMetadata.from_tags(entry)
        except ValueError as e:
            raise CatalogError(f"Invalid safety tag for '{name}': {e}") from e

    logger.info(f"Loaded {len(tags)} manual safety tags from {path}")
    return MappingProxyType(tags)
