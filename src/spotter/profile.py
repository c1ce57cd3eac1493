"""User profile parsing and validation.

Profiles arrive as plain mappings (YAML file, JSON request body). Both the
camelCase keys of the mobile client and snake_case keys are accepted.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Tuple, Type, TypeVar, Union

import yaml

from .exceptions import ProfileValidationError
from .models import ActivityLevel, ExperienceLevel, FitnessGoal, Gender, StressLevel
from .normalizer import normalize_terms

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

DEFAULT_EQUIPMENT = ("body weight",)
DEFAULT_WORKOUTS_PER_WEEK = 4


@dataclass(frozen=True)
class UserProfile:
    """Validated user profile."""
    age: int
    weight: float                       # kg
    height: float                       # cm
    gender: Gender
    fitness_goal: FitnessGoal
    experience_level: ExperienceLevel
    available_equipment: Tuple[str, ...] = DEFAULT_EQUIPMENT
    target_body_parts: Tuple[str, ...] = ()
    workout_duration: Optional[int] = None    # minutes; None uses the configured default
    workouts_per_week: int = DEFAULT_WORKOUTS_PER_WEEK
    injuries: Tuple[str, ...] = ()
    physical_limitations: Tuple[str, ...] = ()
    medical_conditions: Tuple[str, ...] = ()
    medications: Tuple[str, ...] = ()
    pregnancy_status: bool = False
    pregnancy_trimester: Optional[int] = None
    breastfeeding_status: bool = False
    stress_level: StressLevel = StressLevel.MODERATE
    activity_level: Optional[ActivityLevel] = None
    prefers_variety: bool = False

    @property
    def effective_activity_level(self) -> ActivityLevel:
        """Declared activity level, or one derived from training frequency."""
        if self.activity_level is not None:
            return self.activity_level
        if self.workouts_per_week <= 2:
            return ActivityLevel.LIGHT
        if self.workouts_per_week <= 4:
            return ActivityLevel.MODERATE
        if self.workouts_per_week == 5:
            return ActivityLevel.ACTIVE
        return ActivityLevel.EXTREME

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserProfile":
        """
        Validate and build a profile.

        Args:
            data: Raw profile mapping

        Returns:
            UserProfile

        Raises:
            ProfileValidationError: On a missing, out-of-range or unknown value
        """
        if not isinstance(data, Mapping):
            raise ProfileValidationError("profile", "must be a mapping")

        reader = _FieldReader(data)

        equipment = reader.terms("availableEquipment", "available_equipment")
        if equipment == ():
            raise ProfileValidationError("availableEquipment", "must list at least one item")

        duration = reader.number(
            "workoutDuration", "workout_duration", "workoutDurationMinutes",
            minimum=10, maximum=180, integer=True, default=None,
        )

        return cls(
            age=int(reader.number("age", minimum=13, maximum=120, integer=True)),
            weight=reader.number("weight", minimum=30, maximum=300),
            height=reader.number("height", minimum=100, maximum=250),
            gender=reader.enum(Gender, "gender"),
            fitness_goal=reader.enum(FitnessGoal, "fitnessGoal", "fitness_goal"),
            experience_level=reader.enum(ExperienceLevel, "experienceLevel", "experience_level"),
            available_equipment=equipment if equipment is not None else DEFAULT_EQUIPMENT,
            target_body_parts=reader.terms("targetBodyParts", "target_body_parts") or (),
            workout_duration=int(duration) if duration is not None else None,
            workouts_per_week=int(reader.number(
                "workoutsPerWeek", "workouts_per_week",
                minimum=1, maximum=7, integer=True, default=DEFAULT_WORKOUTS_PER_WEEK,
            )),
            injuries=reader.text_list("injuries"),
            physical_limitations=reader.text_list("physicalLimitations", "physical_limitations", "restrictions"),
            medical_conditions=reader.text_list("medicalConditions", "medical_conditions"),
            medications=reader.text_list("medications"),
            pregnancy_status=reader.flag("pregnancyStatus", "pregnancy_status"),
            pregnancy_trimester=reader.trimester(),
            breastfeeding_status=reader.flag("breastfeedingStatus", "breastfeeding_status"),
            stress_level=reader.enum(
                StressLevel, "stressLevel", "stress_level", default=StressLevel.MODERATE
            ),
            activity_level=reader.enum(
                ActivityLevel, "activityLevel", "activity_level", default=None
            ),
            prefers_variety=reader.flag("prefersVariety", "prefers_variety"),
        )


@dataclass(frozen=True)
class UserSafetyProfile:
    """The subset of a profile the safety filter and modifiers read."""
    age: Optional[int] = None
    injuries: Tuple[str, ...] = ()
    physical_limitations: Tuple[str, ...] = ()
    medical_conditions: Tuple[str, ...] = ()
    medications: Tuple[str, ...] = ()
    pregnancy_status: bool = False
    pregnancy_trimester: Optional[int] = None
    breastfeeding_status: bool = False
    stress_level: Optional[StressLevel] = None

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "UserSafetyProfile":
        return cls(
            age=profile.age,
            injuries=profile.injuries,
            physical_limitations=profile.physical_limitations,
            medical_conditions=profile.medical_conditions,
            medications=profile.medications,
            pregnancy_status=profile.pregnancy_status,
            pregnancy_trimester=profile.pregnancy_trimester,
            breastfeeding_status=profile.breastfeeding_status,
            stress_level=profile.stress_level,
        )

    @property
    def all_injuries(self) -> Tuple[str, ...]:
        """Injuries followed by physical limitations."""
        return self.injuries + self.physical_limitations

    @property
    def effective_trimester(self) -> int:
        """Trimester used for rules; defaults to 1 when pregnant without one."""
        if self.pregnancy_trimester in (1, 2, 3):
            return self.pregnancy_trimester
        return 1


def load_profile(path: Union[str, Path]) -> UserProfile:
    """
    Load and validate a profile from a YAML (or JSON) file.

    Args:
        path: Profile file path

    Returns:
        UserProfile

    Raises:
        ProfileValidationError: If the file cannot be read or fails validation
    """
    path = Path(path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ProfileValidationError("profile", f"could not read {path}: {e}") from e

    if isinstance(data, dict) and isinstance(data.get("profile"), dict):
        data = data["profile"]

    profile = UserProfile.from_dict(data or {})
    logger.debug(f"Loaded profile from {path}: {profile.experience_level.value} / {profile.fitness_goal.value}")
    return profile


class _FieldReader:
    """Typed accessors over a raw mapping, accepting several key spellings."""

    _MISSING = object()

    def __init__(self, data: Mapping[str, Any]):
        self._data = data

    def _get(self, keys: Iterable[str]) -> Tuple[str, Any]:
        keys = tuple(keys)
        for key in keys:
            if key in self._data and self._data[key] is not None:
                return key, self._data[key]
        return keys[0], self._MISSING

    def number(
        self,
        *keys: str,
        minimum: float,
        maximum: float,
        integer: bool = False,
        default: Any = _MISSING,
    ) -> float:
        key, value = self._get(keys)
        if value is self._MISSING:
            if default is self._MISSING:
                raise ProfileValidationError(key, "is required")
            return default
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ProfileValidationError(key, f"must be a number, got {value!r}")
        if integer and value != int(value):
            raise ProfileValidationError(key, f"must be a whole number, got {value!r}")
        if not minimum <= value <= maximum:
            raise ProfileValidationError(key, f"must be between {minimum} and {maximum}, got {value}")
        return value

    def enum(self, enum_cls: Type[E], *keys: str, default: Any = _MISSING) -> Optional[E]:
        key, value = self._get(keys)
        if value is self._MISSING:
            if default is self._MISSING:
                raise ProfileValidationError(key, "is required")
            return default
        try:
            return enum_cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(member.value for member in enum_cls)
            raise ProfileValidationError(key, f"must be one of {allowed}, got {value!r}") from None

    def flag(self, *keys: str) -> bool:
        key, value = self._get(keys)
        if value is self._MISSING:
            return False
        if not isinstance(value, bool):
            raise ProfileValidationError(key, f"must be true or false, got {value!r}")
        return value

    def _list(self, keys: Iterable[str]) -> Optional[Tuple[str, Any]]:
        key, value = self._get(keys)
        if value is self._MISSING:
            return None
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
            raise ProfileValidationError(key, "must be a list of strings")
        return key, value

    def terms(self, *keys: str) -> Optional[Tuple[str, ...]]:
        """Normalized term list, or None when absent."""
        found = self._list(keys)
        if found is None:
            return None
        return normalize_terms(found[1])

    def text_list(self, *keys: str) -> Tuple[str, ...]:
        """Free-text entries with blanks dropped; original casing kept."""
        found = self._list(keys)
        if found is None:
            return ()
        return tuple(v.strip() for v in found[1] if v.strip())

    def trimester(self) -> Optional[int]:
        key, value = self._get(("pregnancyTrimester", "pregnancy_trimester"))
        if value is self._MISSING:
            return None
        if isinstance(value, str) and value.strip() in ("1", "2", "3"):
            return int(value.strip())
        if isinstance(value, int) and not isinstance(value, bool) and value in (1, 2, 3):
            return value
        raise ProfileValidationError(key, f"must be 1, 2 or 3, got {value!r}")
