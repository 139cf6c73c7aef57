"""
Weekly training plan compiler.

This package turns a runner profile into a scheduled training week:
- Runner classification (fatigue exponent, archetype, ability band)
- Heart rate zones and per-workout targets
- Slot allocation (which workout types fill the week)
- Training load from workout descriptions
- Day-of-week assignment
- Multi-week plan layout
"""

# Shared records
from .workouts import (
    WorkoutType,
    RaceDistance,
    RunnerType,
    TrainingPhase,
    FitnessLevel,
    Workout,
    WorkoutLoad,
    QUALITY_TYPES,
)

# Configuration
from .config import (
    FitnessLimits,
    PlannerConfig,
    DEFAULT_CONFIG,
    load_config,
)

# Runner classification
from .profile import (
    PersonalBests,
    RunnerClassification,
    calculate_fatigue_exponent,
    get_runner_type,
    classify_runner,
    get_ability_band,
    infer_level,
)

# Heart rate zones
from .zones import (
    HRProfile,
    HRZones,
    HRTarget,
    calculate_zones,
    get_workout_hr_target,
)

# Slot allocation
from .slots import (
    SlotContext,
    SlotAllocation,
    generate_ordered_run_slots,
    is_quality_session,
)

# Load
from .load import (
    parse_duration_minutes,
    calculate_workout_load,
    apply_workout_load,
)

# Scheduling
from .scheduling import (
    DayOfWeek,
    ScheduleWarning,
    assign_days,
    is_hard_workout,
    check_consecutive_hard_days,
    move_workout_to_day,
    format_weekly_schedule,
)

# Templates and engine
from .templates import instantiate_slots
from .plan_engine import (
    PlanEngine,
    RunnerProfile,
    CommuteConfig,
    RecurringActivity,
    Week,
    initialize_weeks,
)

__all__ = [
    # Records
    'WorkoutType',
    'RaceDistance',
    'RunnerType',
    'TrainingPhase',
    'FitnessLevel',
    'Workout',
    'WorkoutLoad',
    'QUALITY_TYPES',
    # Config
    'FitnessLimits',
    'PlannerConfig',
    'DEFAULT_CONFIG',
    'load_config',
    # Profile
    'PersonalBests',
    'RunnerClassification',
    'calculate_fatigue_exponent',
    'get_runner_type',
    'classify_runner',
    'get_ability_band',
    'infer_level',
    # Zones
    'HRProfile',
    'HRZones',
    'HRTarget',
    'calculate_zones',
    'get_workout_hr_target',
    # Slots
    'SlotContext',
    'SlotAllocation',
    'generate_ordered_run_slots',
    'is_quality_session',
    # Load
    'parse_duration_minutes',
    'calculate_workout_load',
    'apply_workout_load',
    # Scheduling
    'DayOfWeek',
    'ScheduleWarning',
    'assign_days',
    'is_hard_workout',
    'check_consecutive_hard_days',
    'move_workout_to_day',
    'format_weekly_schedule',
    # Engine
    'instantiate_slots',
    'PlanEngine',
    'RunnerProfile',
    'CommuteConfig',
    'RecurringActivity',
    'Week',
    'initialize_weeks',
]
