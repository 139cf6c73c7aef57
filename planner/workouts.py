"""
Workout Records: Shared types for slot allocation, load and scheduling.

A Workout is an immutable record. Each stage of the weekly pipeline
(load calculation, HR targets, day assignment) returns new records via
dataclasses.replace rather than editing the caller's objects.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Dict, Any
import math


class WorkoutType(str, Enum):
    """Closed set of session types."""
    EASY = "easy"
    LONG = "long"
    THRESHOLD = "threshold"
    VO2 = "vo2"
    RACE_PACE = "race_pace"
    MARATHON_PACE = "marathon_pace"
    INTERVALS = "intervals"
    MIXED = "mixed"
    PROGRESSIVE = "progressive"
    HILL_REPEATS = "hill_repeats"
    CROSS = "cross"
    STRENGTH = "strength"
    REST = "rest"
    TEST_RUN = "test_run"
    GYM = "gym"


class RaceDistance(str, Enum):
    """Goal race distance."""
    FIVE_K = "5k"
    TEN_K = "10k"
    HALF = "half"
    MARATHON = "marathon"


class RunnerType(str, Enum):
    """Runner archetype from the fatigue exponent."""
    SPEED = "Speed"
    BALANCED = "Balanced"
    ENDURANCE = "Endurance"


class TrainingPhase(str, Enum):
    """Periodization phase of a week."""
    BASE = "base"
    BUILD = "build"
    PEAK = "peak"
    TAPER = "taper"


class FitnessLevel(str, Enum):
    """Experience tier, least to most experienced."""
    TOTAL_BEGINNER = "total_beginner"
    BEGINNER = "beginner"
    NOVICE = "novice"
    INTERMEDIATE = "intermediate"
    RETURNING = "returning"
    HYBRID = "hybrid"
    ADVANCED = "advanced"
    COMPETITIVE = "competitive"


QUALITY_TYPES = (
    WorkoutType.THRESHOLD,
    WorkoutType.VO2,
    WorkoutType.RACE_PACE,
    WorkoutType.MARATHON_PACE,
    WorkoutType.INTERVALS,
    WorkoutType.MIXED,
    WorkoutType.HILL_REPEATS,
    WorkoutType.PROGRESSIVE,
)

NON_RUN_TYPES = (
    WorkoutType.CROSS,
    WorkoutType.STRENGTH,
    WorkoutType.REST,
    WorkoutType.GYM,
)

DAY_NAMES = (
    'Monday', 'Tuesday', 'Wednesday', 'Thursday',
    'Friday', 'Saturday', 'Sunday',
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class WorkoutLoad:
    """Calibrated training load of one session."""
    aerobic: int
    anaerobic: int
    total: int


@dataclass(frozen=True)
class Workout:
    """
    A single training session.

    day_of_week is None until the scheduler places it (0=Monday).
    Loads are None until the load calculator has run.
    """
    type: WorkoutType
    name: str
    description: str = ""
    target_rpe: float = 3.0

    day_of_week: Optional[int] = None
    day_name: Optional[str] = None

    aerobic_load: Optional[int] = None
    anaerobic_load: Optional[int] = None
    total_load: Optional[int] = None
    hr_target: Optional[Any] = None  # zones.HRTarget

    commute: bool = False
    status: str = "planned"
    skipped: bool = False
    skip_count: int = 0
    original_name: Optional[str] = None
    workout_id: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.type, WorkoutType):
            object.__setattr__(self, 'type', WorkoutType(self.type))

    @property
    def is_quality(self) -> bool:
        return self.type in QUALITY_TYPES

    @property
    def is_run(self) -> bool:
        return self.type not in NON_RUN_TYPES

    def on_day(self, day: int) -> 'Workout':
        """Copy of this workout placed on a day (0=Monday)."""
        if not 0 <= day <= 6:
            raise ValueError(f"Day must be 0-6, got {day}")
        return replace(self, day_of_week=day, day_name=DAY_NAMES[day])

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        hr = self.hr_target
        return {
            'id': self.workout_id,
            'type': self.type.value,
            'name': self.name,
            'description': self.description,
            'target_rpe': self.target_rpe,
            'day_of_week': self.day_of_week,
            'day_name': self.day_name,
            'aerobic_load': self.aerobic_load,
            'anaerobic_load': self.anaerobic_load,
            'total_load': self.total_load,
            'hr_target': hr.to_dict() if hr is not None else None,
            'commute': self.commute,
            'status': self.status,
        }
