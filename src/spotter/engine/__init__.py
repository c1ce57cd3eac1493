"""
Workout generation engine.

Deterministic pipeline that turns a user profile and an exercise catalog
into a weekly program:
- Safety filtering (pregnancy, medical conditions, injuries, age)
- Split selection (scored weekly templates)
- Exercise classification and selection with weekly rotation
- Set, rep, rest and tempo assignment with medical modifiers
"""

from .constraints import SafetyProfileFilter, SafetyFilterResult, has_minimum_exercises
from .splits import SplitSelection, select_optimal_split, get_split_by_id, all_splits
from .classification import ClassifiedExercise, classify_exercise
from .variation import WeeklyExercisePlan, WorkoutDayExercises, generate_weekly_exercise_plan, validate_muscle_balance
from .prescription import ParameterAssigner
from .planner import GeneratedProgram, GenerationOptions, WorkoutPlanner, format_program_text, generate

__all__ = [
    'SafetyProfileFilter',
    'SafetyFilterResult',
    'has_minimum_exercises',
    'SplitSelection',
    'select_optimal_split',
    'get_split_by_id',
    'all_splits',
    'ClassifiedExercise',
    'classify_exercise',
    'WeeklyExercisePlan',
    'WorkoutDayExercises',
    'generate_weekly_exercise_plan',
    'validate_muscle_balance',
    'ParameterAssigner',
    'GeneratedProgram',
    'GenerationOptions',
    'WorkoutPlanner',
    'format_program_text',
    'generate',
]
