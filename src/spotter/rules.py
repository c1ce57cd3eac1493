"""
Safety Rule Tables

Keyword rule tables for injuries, medical conditions, pregnancy trimesters
and medications. Tables are immutable and bundled into a SafetyRules value
that is passed explicitly to the safety filter and parameter assigner, so
alternate rule sets can be supplied without touching module state.

Matching is case-insensitive substring matching on free text.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from .normalizer import contains_any


@dataclass(frozen=True)
class InjuryRule:
    """Injury keyword group -> body parts and exercise names to avoid."""
    name: str
    keywords: Tuple[str, ...]
    exclude_body_parts: Tuple[str, ...]
    exclude_exercise_keywords: Tuple[str, ...]
    warning_message: str

    def matches(self, injury_text: str) -> bool:
        return contains_any(injury_text, self.keywords)


@dataclass(frozen=True)
class MedicalConditionRule:
    """Medical condition keyword group -> exclusions and advisory."""
    name: str
    keywords: Tuple[str, ...]
    exclude_high_intensity: bool
    exclude_exercise_keywords: Tuple[str, ...]
    requires_medical_clearance: bool
    warning_message: str
    intensity_cap: Optional[str] = None

    def matches(self, condition_text: str) -> bool:
        return contains_any(condition_text, self.keywords)


@dataclass(frozen=True)
class PregnancyRule:
    """Per-trimester position and keyword exclusions."""
    trimester: int
    exclude_supine: bool
    exclude_high_impact: bool
    exclude_prone: bool
    exclude_exercise_keywords: Tuple[str, ...]
    intensity_cap: str
    heart_rate_cap: int
    warning_message: str


@dataclass(frozen=True)
class MedicationRule:
    """Medication keyword group -> advisory (never an exclusion)."""
    name: str
    keywords: Tuple[str, ...]
    modify_heart_rate_monitoring: bool
    warning_message: str

    def matches(self, medication_text: str) -> bool:
        return contains_any(medication_text, self.keywords)


INJURY_RULES: Tuple[InjuryRule, ...] = (
    InjuryRule(
        name="back_pain",
        keywords=("back", "spine", "spinal", "lumbar", "disc"),
        exclude_body_parts=("waist", "back", "lower back"),
        exclude_exercise_keywords=("deadlift", "row", "good morning", "hyperextension", "romanian"),
        warning_message="Avoiding exercises with spinal loading due to back injury",
    ),
    InjuryRule(
        name="knee_problems",
        keywords=("knee", "patella", "acl", "mcl", "meniscus"),
        exclude_body_parts=("upper legs", "lower legs", "legs"),
        exclude_exercise_keywords=("squat", "lunge", "leg press", "jump", "burpee", "step up"),
        warning_message="Avoiding knee-loading exercises due to knee injury",
    ),
    InjuryRule(
        name="shoulder_issues",
        keywords=("shoulder", "rotator cuff", "impingement"),
        exclude_body_parts=("shoulders", "upper arms"),
        exclude_exercise_keywords=("overhead press", "lateral raise", "pull up", "pullup", "dip", "shoulder press"),
        warning_message="Avoiding overhead and shoulder-intensive exercises",
    ),
    InjuryRule(
        name="neck_problems",
        keywords=("neck", "cervical"),
        exclude_body_parts=("neck",),
        exclude_exercise_keywords=("barbell row", "neck", "shrug", "upright row"),
        warning_message="Avoiding neck-stressing exercises",
    ),
    InjuryRule(
        name="wrist_problems",
        keywords=("wrist", "carpal"),
        exclude_body_parts=("lower arms",),
        exclude_exercise_keywords=("barbell curl", "front squat", "clean", "push up", "pushup", "plank"),
        warning_message="Avoiding wrist-bearing exercises, preferring supported alternatives",
    ),
    InjuryRule(
        name="ankle_foot",
        keywords=("ankle", "foot", "achilles", "plantar"),
        exclude_body_parts=("lower legs",),
        exclude_exercise_keywords=("jump", "run", "calf", "hop", "skip", "plyometric"),
        warning_message="Avoiding high-impact and ankle-stressing exercises",
    ),
    InjuryRule(
        name="balance_issues",
        keywords=("balance", "vertigo", "dizzy"),
        exclude_body_parts=(),
        exclude_exercise_keywords=("single leg", "pistol", "balance", "bosu"),
        warning_message="Avoiding balance-dependent exercises, use wall support",
    ),
    InjuryRule(
        name="hip_groin",
        keywords=("hip", "groin", "adductor"),
        exclude_body_parts=("upper legs",),
        exclude_exercise_keywords=("squat", "lunge", "split", "wide stance", "sumo"),
        warning_message="Avoiding hip-stressing exercises",
    ),
    InjuryRule(
        name="elbow_issues",
        keywords=("elbow", "tennis elbow", "golfer"),
        exclude_body_parts=("upper arms", "lower arms"),
        exclude_exercise_keywords=("curl", "extension", "close grip"),
        warning_message="Avoiding elbow-intensive exercises",
    ),
)


MEDICAL_CONDITION_RULES: Tuple[MedicalConditionRule, ...] = (
    MedicalConditionRule(
        name="pregnancy",
        keywords=("pregnant", "pregnancy"),
        exclude_high_intensity=True,
        exclude_exercise_keywords=(),  # trimester rules handle exclusions
        requires_medical_clearance=True,
        warning_message="Pregnancy-specific exercise restrictions applied",
    ),
    MedicalConditionRule(
        name="heart_disease",
        keywords=("heart", "cardiac", "cardiovascular disease", "heart disease"),
        exclude_high_intensity=True,
        exclude_exercise_keywords=("hiit", "sprint", "max effort"),
        intensity_cap="RPE 5-6 max",
        requires_medical_clearance=True,
        warning_message="CRITICAL: Heart disease detected. RPE capped at 5-6. Consult physician before exercise.",
    ),
    MedicalConditionRule(
        name="hypertension",
        keywords=("hypertension", "high blood pressure", "blood pressure"),
        exclude_high_intensity=True,
        exclude_exercise_keywords=("max effort", "deadlift", "squat"),
        intensity_cap="RPE 7 max",
        requires_medical_clearance=False,
        warning_message="Hypertension: Avoid max effort lifts and Valsalva maneuvers. Monitor blood pressure.",
    ),
    MedicalConditionRule(
        name="diabetes",
        keywords=("diabetes", "diabetic", "blood sugar"),
        exclude_high_intensity=False,
        exclude_exercise_keywords=(),
        requires_medical_clearance=False,
        warning_message="Diabetes: Monitor blood sugar before/after exercise. Have glucose tablets available.",
    ),
    MedicalConditionRule(
        name="asthma",
        keywords=("asthma", "respiratory"),
        exclude_high_intensity=False,
        exclude_exercise_keywords=(),
        requires_medical_clearance=False,
        warning_message="Asthma: Ensure inhaler is nearby. Longer warm-up (10+ min) recommended.",
    ),
    MedicalConditionRule(
        name="arthritis",
        keywords=("arthritis", "osteoarthritis", "rheumatoid"),
        exclude_high_intensity=False,
        exclude_exercise_keywords=("jump", "high impact", "heavy"),
        requires_medical_clearance=False,
        warning_message="Arthritis: Low-impact exercises only. Longer warm-up recommended.",
    ),
    MedicalConditionRule(
        name="pcos",
        keywords=("pcos", "polycystic ovary"),
        exclude_high_intensity=False,
        exclude_exercise_keywords=(),
        requires_medical_clearance=False,
        warning_message="PCOS: Resistance training prioritized. Limit cardio to <45min.",
    ),
    MedicalConditionRule(
        name="osteoporosis",
        keywords=("osteoporosis", "bone density"),
        exclude_high_intensity=False,
        exclude_exercise_keywords=("jump", "high impact"),
        requires_medical_clearance=False,
        warning_message="Osteoporosis: Avoid high-impact exercises. Focus on bone-strengthening resistance work.",
    ),
)


PREGNANCY_TRIMESTER_RULES: Mapping[int, PregnancyRule] = MappingProxyType({
    1: PregnancyRule(
        trimester=1,
        exclude_supine=True,
        exclude_high_impact=False,
        exclude_prone=False,
        exclude_exercise_keywords=("contact", "fall risk"),
        intensity_cap="RPE 5-7 max",
        heart_rate_cap=140,
        warning_message="Trimester 1: Reduce supine positions and high-impact exercises. Focus on pelvic floor.",
    ),
    2: PregnancyRule(
        trimester=2,
        exclude_supine=True,
        exclude_high_impact=True,
        exclude_prone=False,
        exclude_exercise_keywords=("supine", "lying back", "bench", "crunch", "sit up", "overhead", "twist"),
        intensity_cap="RPE 4-6 max",
        heart_rate_cap=130,
        warning_message=(
            "Trimester 2: NO supine exercises. Avoid overhead lifts and twisting. "
            "Use incline positions (30+ degrees)."
        ),
    ),
    3: PregnancyRule(
        trimester=3,
        exclude_supine=True,
        exclude_high_impact=True,
        exclude_prone=True,
        exclude_exercise_keywords=("supine", "prone", "jump", "twist", "balance", "lying", "bench"),
        intensity_cap="RPE 3-5 max",
        heart_rate_cap=120,
        warning_message=(
            "Trimester 3: GENTLE MOVEMENTS ONLY. Walking, prenatal yoga, pelvic floor work, "
            "breathing exercises."
        ),
    ),
})


MEDICATION_RULES: Tuple[MedicationRule, ...] = (
    MedicationRule(
        name="beta_blockers",
        keywords=("beta blocker", "metoprolol", "atenolol", "propranolol"),
        modify_heart_rate_monitoring=True,
        warning_message="Beta-blockers: Use RPE instead of heart rate. Expect lower max HR.",
    ),
    MedicationRule(
        name="blood_thinners",
        keywords=("warfarin", "blood thinner", "anticoagulant"),
        modify_heart_rate_monitoring=False,
        warning_message="Blood thinners: Avoid high fall-risk exercises and contact sports.",
    ),
)


PREGNANCY_ADVISORY = "PREGNANCY: Consult your healthcare provider before starting any exercise program."
BREASTFEEDING_ADVISORY = (
    "Breastfeeding: Moderate intensity recommended. Stay well-hydrated. "
    "Avoid excessive upper body compression."
)
SENIOR_ADVISORY = (
    "Senior (65+): Focus on balance, fall prevention, and functional movements. "
    "Longer warm-ups recommended."
)
SENIOR_AGE = 65


@dataclass(frozen=True)
class SafetyRules:
    """Complete, immutable rule set consumed by the engine."""
    injuries: Tuple[InjuryRule, ...] = INJURY_RULES
    medical_conditions: Tuple[MedicalConditionRule, ...] = MEDICAL_CONDITION_RULES
    pregnancy_trimesters: Mapping[int, PregnancyRule] = field(default_factory=lambda: PREGNANCY_TRIMESTER_RULES)
    medications: Tuple[MedicationRule, ...] = MEDICATION_RULES
    senior_age: int = SENIOR_AGE

    def pregnancy_rule(self, trimester: Optional[int]) -> PregnancyRule:
        """Rule set for a trimester; unknown or missing trimester uses trimester 1."""
        return self.pregnancy_trimesters.get(trimester or 1, self.pregnancy_trimesters[1])

    def medical_rule(self, name: str) -> Optional[MedicalConditionRule]:
        for rule in self.medical_conditions:
            if rule.name == name:
                return rule
        return None

    def has_condition(self, conditions: Tuple[str, ...], rule_name: str) -> bool:
        """True if any condition string matches the named medical rule."""
        rule = self.medical_rule(rule_name)
        if rule is None:
            return False
        return any(rule.matches(condition) for condition in conditions)


DEFAULT_SAFETY_RULES = SafetyRules()
