"""
Safety Profile Filter

Removes catalog exercises that are unsafe for a user's pregnancy, medical,
injury and age profile, and collects advisory warnings.

Stages run in strict priority order:
1. Pregnancy (trimester rule set)
2. Medical conditions
3. Injuries and physical limitations
4. Breastfeeding advisory
5. Age 65+ (fall risk)
6. Medication advisories (never exclude)

The filter never raises. An empty pool is a valid result; callers check
has_minimum_exercises() and switch to the gentle fallback program.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from ..biomechanics import BalanceRequirement, ExerciseSafetyMetadata, SafetyMetadataResolver
from ..models import ExcludedExercise, Exercise, ordered_unique
from ..normalizer import matching_keywords
from ..profile import UserSafetyProfile
from ..rules import (
    BREASTFEEDING_ADVISORY,
    DEFAULT_SAFETY_RULES,
    InjuryRule,
    PREGNANCY_ADVISORY,
    SENIOR_ADVISORY,
    SafetyRules,
)

logger = logging.getLogger(__name__)

DEFAULT_MINIMUM_EXERCISES = 5

# exercise -> exclusion reasons (empty means keep)
_ReasonCheck = Callable[[Exercise, ExerciseSafetyMetadata], List[str]]


@dataclass(frozen=True)
class SafetyFilterResult:
    """Outcome of one filter pass."""
    safe_exercises: Tuple[Exercise, ...]
    excluded: Tuple[ExcludedExercise, ...]
    warnings: Tuple[str, ...]
    requires_medical_clearance: bool
    metadata: Mapping[str, ExerciseSafetyMetadata]

    def metadata_for(self, exercise: Exercise) -> ExerciseSafetyMetadata:
        return self.metadata.get(exercise.exercise_id, ExerciseSafetyMetadata())


def has_minimum_exercises(exercises: Iterable[Exercise], minimum: int = DEFAULT_MINIMUM_EXERCISES) -> bool:
    """True if the pool is large enough to build a normal program."""
    return len(tuple(exercises)) >= minimum


class SafetyProfileFilter:
    """
    Applies the safety rule tables to an exercise pool.

    Rules and the metadata resolver are injected, so alternate tables or tag
    sets can be used without touching module state.
    """

    def __init__(
        self,
        rules: SafetyRules = DEFAULT_SAFETY_RULES,
        resolver: Optional[SafetyMetadataResolver] = None
    ):
        """
        Args:
            rules: Safety rule tables
            resolver: Safety metadata resolver (default: inference only)
        """
        self.rules = rules
        self.resolver = resolver or SafetyMetadataResolver()

    def apply(self, exercises: Iterable[Exercise], profile: UserSafetyProfile) -> SafetyFilterResult:
        """
        Filter an exercise pool for a user.

        Args:
            exercises: Candidate exercises (catalog order is preserved)
            profile: User safety profile

        Returns:
            SafetyFilterResult; safe_exercises is always a subset of the input
        """
        pool = list(exercises)
        metadata = {ex.exercise_id: self.resolver.resolve(ex) for ex in pool}
        run = _FilterRun(metadata)
        warnings: List[str] = []
        clearance = False

        # 1. Pregnancy
        if profile.pregnancy_status:
            clearance = True
            pool = self._apply_pregnancy(run, pool, profile, warnings)

        # 2. Medical conditions
        for condition in profile.medical_conditions:
            for rule in self.rules.medical_conditions:
                if not rule.matches(condition):
                    continue
                warnings.append(rule.warning_message)
                clearance = clearance or rule.requires_medical_clearance
                if rule.exclude_exercise_keywords:
                    pool = run.exclude(
                        pool,
                        lambda ex, _md, rule=rule, condition=condition: [
                            f"{condition}: Exercise type '{kw}' not recommended"
                            for kw in matching_keywords(ex.name, rule.exclude_exercise_keywords)
                        ],
                        label=rule.name,
                    )

        # 3. Injuries and physical limitations
        for injury in profile.all_injuries:
            for rule in self.rules.injuries:
                if not rule.matches(injury):
                    continue
                warnings.append(rule.warning_message)
                pool = run.exclude(
                    pool,
                    lambda ex, _md, rule=rule, injury=injury: self._injury_reasons(ex, rule, injury),
                    label=f"{injury} ({rule.name})",
                )

        # 4. Breastfeeding
        if profile.breastfeeding_status:
            warnings.append(BREASTFEEDING_ADVISORY)

        # 5. Seniors
        if profile.age is not None and profile.age >= self.rules.senior_age:
            warnings.append(SENIOR_ADVISORY)
            pool = run.exclude(
                pool,
                lambda _ex, md: (
                    ["High fall risk not recommended for seniors"]
                    if md.balance_required == BalanceRequirement.HIGH or md.has_fall_risk
                    else []
                ),
                label="Senior modifications",
            )

        # 6. Medications
        for medication in profile.medications:
            for rule in self.rules.medications:
                if rule.matches(medication):
                    warnings.append(rule.warning_message)

        excluded = tuple(run.excluded)
        logger.info(
            f"Safety filter: {len(metadata)} -> {len(pool)} exercises "
            f"({len(excluded)} excluded, clearance={'yes' if clearance else 'no'})"
        )

        return SafetyFilterResult(
            safe_exercises=tuple(pool),
            excluded=excluded,
            warnings=tuple(ordered_unique(warnings)),
            requires_medical_clearance=clearance,
            metadata=MappingProxyType({ex.exercise_id: metadata[ex.exercise_id] for ex in pool}),
        )

    def _apply_pregnancy(
        self,
        run: "_FilterRun",
        pool: List[Exercise],
        profile: UserSafetyProfile,
        warnings: List[str]
    ) -> List[Exercise]:
        rule = self.rules.pregnancy_rule(profile.effective_trimester)

        warnings.append(rule.warning_message)
        warnings.append(PREGNANCY_ADVISORY)
        warnings.append(
            f"Trimester {rule.trimester} limits: {rule.intensity_cap}, "
            f"heart rate below {rule.heart_rate_cap} bpm"
        )

        def reasons(exercise: Exercise, md: ExerciseSafetyMetadata) -> List[str]:
            found = []
            if rule.exclude_supine and md.is_supine:
                found.append("Supine position not safe during pregnancy")
            if rule.exclude_high_impact and md.is_high_impact:
                found.append("High-impact exercises not recommended during pregnancy")
            if rule.exclude_prone and md.is_prone:
                found.append("Prone position (face down) not safe during pregnancy")
            for kw in matching_keywords(exercise.name, rule.exclude_exercise_keywords):
                found.append(f"Exercise type '{kw}' not recommended during pregnancy")
            return found

        return run.exclude(pool, reasons, label=f"Pregnancy T{rule.trimester}")

    @staticmethod
    def _injury_reasons(exercise: Exercise, rule: InjuryRule, injury: str) -> List[str]:
        found = []
        for body_part in rule.exclude_body_parts:
            if any(body_part in bp for bp in exercise.body_parts):
                found.append(f"{injury}: Targets {body_part} (injured area)")
        for kw in matching_keywords(exercise.name, rule.exclude_exercise_keywords):
            found.append(f"{injury}: Exercise type '{kw}' not safe")
        return found


class _FilterRun:
    """Per-call exclusion bookkeeping."""

    def __init__(self, metadata: Dict[str, ExerciseSafetyMetadata]):
        self.metadata = metadata
        self.excluded: List[ExcludedExercise] = []

    def exclude(self, pool: List[Exercise], check: _ReasonCheck, label: str) -> List[Exercise]:
        """Drop exercises with at least one reason, recording them once."""
        kept = []
        for exercise in pool:
            reasons = check(exercise, self.metadata[exercise.exercise_id])
            if reasons:
                self.excluded.append(ExcludedExercise(exercise=exercise, reasons=tuple(reasons)))
            else:
                kept.append(exercise)

        if len(kept) != len(pool):
            logger.info(f"{label}: {len(pool)} -> {len(kept)} exercises")
        return kept
