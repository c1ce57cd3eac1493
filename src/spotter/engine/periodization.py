"""
Mesocycle Logic

Programs run in fixed 4-week mesocycles. The week number drives two
things: the rotation offset used for exercise variety and the progression
note attached to every workout.

    Week 1: technique
    Week 2: load increase
    Week 3: peak intensity
    Week 4: deload
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping

from ..models import FitnessGoal

MESOCYCLE_WEEKS = 4


class MesocyclePhase(Enum):
    """Training phase of a week inside the mesocycle."""
    TECHNIQUE = "Technique"      # Week 1: conservative loads
    LOADING = "Loading"          # Week 2: +5-10% load
    PEAK = "Peak"                # Week 3: RPE 7-8
    DELOAD = "Deload"            # Week 4: -20% load, -30% volume


PHASE_BY_WEEK: Mapping[int, MesocyclePhase] = MappingProxyType({
    1: MesocyclePhase.TECHNIQUE,
    2: MesocyclePhase.LOADING,
    3: MesocyclePhase.PEAK,
    4: MesocyclePhase.DELOAD,
})

WEEK_NOTES: Mapping[MesocyclePhase, str] = MappingProxyType({
    MesocyclePhase.TECHNIQUE: (
        "Week 1: Focus on form and technique. Use conservative weights to learn movement patterns."
    ),
    MesocyclePhase.LOADING: (
        "Week 2: Increase weight by 5-10% if form was good last week. Maintain proper technique."
    ),
    MesocyclePhase.PEAK: (
        "Week 3: Push intensity - aim for RPE 7-8 on main lifts. This is your peak week."
    ),
    MesocyclePhase.DELOAD: (
        "Week 4: Deload week - reduce weight by 20% and volume by 30%. Focus on recovery."
    ),
})

GOAL_PROGRESSION_RULES: Mapping[FitnessGoal, str] = MappingProxyType({
    FitnessGoal.STRENGTH: "For strength: Add 2.5-5kg to barbell lifts when you complete all sets.",
    FitnessGoal.MUSCLE_GAIN: "For muscle gain: Increase weight when you can do 2+ extra reps beyond target range.",
    FitnessGoal.WEIGHT_LOSS: "For weight loss: Reduce rest periods by 5-10s each week to increase metabolic demand.",
})


def validate_week(week_number: int) -> None:
    """Reject week numbers below 1 (and non-integers) with ValueError."""
    if isinstance(week_number, bool) or not isinstance(week_number, int) or week_number < 1:
        raise ValueError(f"week_number must be an integer >= 1, got {week_number!r}")


def rotation_offset(week_number: int) -> int:
    """
    Exercise rotation offset for a program week.

    Args:
        week_number: 1-based program week

    Returns:
        (week_number - 1) mod 4, so weeks 1, 5, 9... share an offset

    Raises:
        ValueError: If week_number < 1
    """
    validate_week(week_number)
    return (week_number - 1) % MESOCYCLE_WEEKS


def mesocycle_week(week_number: int) -> int:
    """Position (1-4) of a program week inside its mesocycle."""
    return rotation_offset(week_number) + 1


def mesocycle_phase(week_number: int) -> MesocyclePhase:
    return PHASE_BY_WEEK[mesocycle_week(week_number)]


def progression_notes(goal: FitnessGoal, week_number: int) -> str:
    """
    Progression note for a week: the phase note plus a goal-specific rule.

    Args:
        goal: User's fitness goal
        week_number: 1-based program week

    Returns:
        Note text
    """
    note = WEEK_NOTES[mesocycle_phase(week_number)]
    rule = GOAL_PROGRESSION_RULES.get(goal)
    if rule:
        note = f"{note} {rule}"
    return note
