"""Rule table bundle: defaults and substitution."""

from dataclasses import replace
from types import MappingProxyType

from spotter.rules import DEFAULT_SAFETY_RULES, PREGNANCY_TRIMESTER_RULES, SafetyRules


def test_default_rules():
    rules = SafetyRules()

    assert rules.pregnancy_trimesters is PREGNANCY_TRIMESTER_RULES
    assert rules.pregnancy_rule(3).trimester == 3
    assert rules.pregnancy_rule(None).trimester == 1
    assert rules.pregnancy_rule(7).trimester == 1
    assert rules == DEFAULT_SAFETY_RULES


def test_custom_trimester_table():
    gentle = replace(PREGNANCY_TRIMESTER_RULES[1], exclude_high_impact=True, exclude_exercise_keywords=("row",))
    rules = SafetyRules(pregnancy_trimesters=MappingProxyType({1: gentle}))

    assert rules.pregnancy_rule(2) is gentle
    assert rules.pregnancy_rule(1).exclude_exercise_keywords == ("row",)
    assert PREGNANCY_TRIMESTER_RULES[1].exclude_high_impact is False


def test_condition_lookup():
    rules = SafetyRules()

    assert rules.has_condition(("High Blood Pressure",), "hypertension")
    assert not rules.has_condition(("asthma",), "hypertension")
    assert not rules.has_condition(("asthma",), "no such rule")
    assert rules.medical_rule("no such rule") is None
