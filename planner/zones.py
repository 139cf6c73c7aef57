"""
Heart Rate Zones: Five-zone model from whatever HR data is available.

Based on:
- Friel, J. (2009). Lactate-threshold zones
- Karvonen, M. (1957). Heart rate reserve method
- Fox, S. (1971). HRmax = 220 - age

Priority cascade (first match wins):
    1. Lactate threshold HR (most accurate)
    2. Heart rate reserve (max + resting HR)
    3. Max HR only
    4. Age-estimated max HR
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any, Tuple

from .workouts import WorkoutType, round_half_up


LTHR_ZONE_PCT: Tuple[Tuple[float, float], ...] = (
    (0.65, 0.80),
    (0.80, 0.89),
    (0.89, 0.95),
    (0.95, 1.00),
    (1.00, 1.10),
)

RESERVE_ZONE_PCT: Tuple[Tuple[float, float], ...] = (
    (0.50, 0.60),
    (0.60, 0.70),
    (0.70, 0.80),
    (0.80, 0.90),
    (0.90, 1.00),
)


@dataclass(frozen=True)
class HRProfile:
    """Heart rate data for a runner; any field may be missing."""
    lthr: Optional[float] = None
    max_hr: Optional[float] = None
    resting_hr: Optional[float] = None
    age: Optional[int] = None


@dataclass(frozen=True)
class ZoneRange:
    """BPM range of one zone."""
    min: int
    max: int


@dataclass(frozen=True)
class HRZones:
    """
    Five contiguous heart rate zones.

    Zone system:
        Z1: Recovery
        Z2: Aerobic / easy
        Z3: Tempo
        Z4: Threshold
        Z5: VO2max+
    """
    method: str  # 'lthr' | 'karvonen' | 'maxhr' | 'age'
    z1: ZoneRange
    z2: ZoneRange
    z3: ZoneRange
    z4: ZoneRange
    z5: ZoneRange

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary of zone name -> (min, max)."""
        return {
            'method': self.method,
            'z1': (self.z1.min, self.z1.max),
            'z2': (self.z2.min, self.z2.max),
            'z3': (self.z3.min, self.z3.max),
            'z4': (self.z4.min, self.z4.max),
            'z5': (self.z5.min, self.z5.max),
        }


@dataclass(frozen=True)
class HRTarget:
    """Heart rate target attached to a workout."""
    zone: str
    min: int
    max: int
    label: str

    def to_dict(self) -> Dict[str, Any]:
        return {'zone': self.zone, 'min': self.min, 'max': self.max, 'label': self.label}


def _build_zones(method: str, bpm, bands) -> HRZones:
    ranges = [ZoneRange(bpm(lo), bpm(hi)) for lo, hi in bands]
    return HRZones(method, *ranges)


def lthr_zones(lthr: float) -> HRZones:
    """
    Zones as percentages of lactate threshold HR.

    Z1 65-80%, Z2 80-89%, Z3 89-95%, Z4 95-100%, Z5 100-110%.
    """
    return _build_zones('lthr', lambda pct: round_half_up(lthr * pct), LTHR_ZONE_PCT)


def karvonen_zones(max_hr: float, resting_hr: float) -> HRZones:
    """
    Heart rate reserve zones.

    Formula:
        bpm = HR_rest + (HR_max - HR_rest) × pct
    """
    reserve = max_hr - resting_hr
    return _build_zones(
        'karvonen',
        lambda pct: round_half_up(resting_hr + reserve * pct),
        RESERVE_ZONE_PCT,
    )


def max_hr_zones(max_hr: float, method: str = 'maxhr') -> HRZones:
    """Zones as 50-100% of max HR in 10% bands."""
    return _build_zones(method, lambda pct: round_half_up(max_hr * pct), RESERVE_ZONE_PCT)


def calculate_zones(profile: HRProfile) -> Optional[HRZones]:
    """
    Calculate HR zones using the best available method.

    Args:
        profile: Heart rate profile

    Returns:
        HRZones, or None when no usable data exists
    """
    if profile.lthr and profile.lthr > 100:
        return lthr_zones(profile.lthr)

    if profile.max_hr and profile.resting_hr and profile.max_hr > profile.resting_hr:
        return karvonen_zones(profile.max_hr, profile.resting_hr)

    if profile.max_hr and profile.max_hr > 100:
        return max_hr_zones(profile.max_hr)

    if profile.age and 10 < profile.age < 100:
        return max_hr_zones(220 - profile.age, method='age')

    return None


def _make_target(zone: str, low: int, high: int) -> HRTarget:
    return HRTarget(zone=zone, min=low, max=high, label=f"{low}-{high} bpm ({zone})")


def get_workout_hr_target(
    workout_type: str,
    zones: Optional[HRZones]
) -> Optional[HRTarget]:
    """
    Heart rate target for a workout type.

    Args:
        workout_type: Workout type (WorkoutType or its string value)
        zones: Runner's zones (may be None)

    Returns:
        HRTarget, or None for unmapped types or missing zones
    """
    if zones is None:
        return None

    try:
        wtype = WorkoutType(workout_type)
    except ValueError:
        return None

    if wtype == WorkoutType.EASY:
        return _make_target('Z2', zones.z2.min, zones.z2.max)
    if wtype == WorkoutType.LONG:
        # Upper Z2, never spilling into Z3
        return _make_target('Z2', zones.z2.min, min(zones.z2.max, zones.z3.min))
    if wtype in (WorkoutType.THRESHOLD, WorkoutType.MARATHON_PACE):
        return _make_target('Z4', zones.z4.min, zones.z4.max)
    if wtype in (WorkoutType.VO2, WorkoutType.INTERVALS):
        return _make_target('Z5', zones.z5.min, zones.z5.max)
    if wtype in (WorkoutType.RACE_PACE, WorkoutType.MIXED, WorkoutType.PROGRESSIVE):
        return _make_target('Z3-4', zones.z3.min, zones.z4.max)
    if wtype == WorkoutType.HILL_REPEATS:
        return _make_target('Z4-5', zones.z4.min, zones.z5.max)

    return None
