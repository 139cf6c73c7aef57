"""
Runner Profile Classification: Fatigue exponent, archetype and ability band.

Based on:
- Riegel, P. (1981). Athletic records and human endurance
- Daniels, J. (2013). Daniels' Running Formula (VDOT bands)

The fatigue exponent b is the slope of the power law T = a × D^b fitted
to a runner's personal bests in log-log space. It drives the runner
archetype used to bias slot allocation.
"""

from dataclasses import dataclass
from typing import Optional, List, Tuple
import math

import numpy as np
from scipy import stats

from .workouts import RunnerType


DEFAULT_FATIGUE_EXPONENT = 1.06

SPEED_THRESHOLD = 1.06
ENDURANCE_THRESHOLD = 1.12

# Race distances in metres
PB_DISTANCES = {
    'k5': 5000.0,
    'k10': 10000.0,
    'half': 21097.0,
    'marathon': 42195.0,
}


@dataclass(frozen=True)
class PersonalBests:
    """Personal best times in seconds; None when not raced."""
    k5: Optional[float] = None
    k10: Optional[float] = None
    half: Optional[float] = None
    marathon: Optional[float] = None

    def available(self) -> List[Tuple[float, float]]:
        """(distance_m, time_s) pairs for every recorded PB."""
        pairs = []
        for attr, distance in PB_DISTANCES.items():
            seconds = getattr(self, attr)
            if seconds:
                pairs.append((distance, float(seconds)))
        return pairs


@dataclass(frozen=True)
class RunnerClassification:
    """Result of classifying a runner from personal bests."""
    fatigue_exponent: float
    runner_type: RunnerType
    r_squared: Optional[float]
    n_points: int


def _log_pairs(personal_bests: PersonalBests) -> Tuple[np.ndarray, np.ndarray]:
    pairs = personal_bests.available()
    ln_d = np.log([d for d, _ in pairs]) if pairs else np.array([])
    ln_t = np.log([t for _, t in pairs]) if pairs else np.array([])
    return ln_d, ln_t


def calculate_fatigue_exponent(personal_bests: PersonalBests) -> float:
    """
    Calculate the Riegel fatigue exponent from personal bests.

    Formula:
        b = Σ(x - x̄)(y - ȳ) / Σ(x - x̄)²   with x = ln D, y = ln T

    Args:
        personal_bests: Recorded PB times

    Returns:
        Fatigue exponent b, or 1.06 when fewer than two PBs exist or
        all PBs share one distance
    """
    ln_d, ln_t = _log_pairs(personal_bests)

    if len(ln_d) < 2:
        return DEFAULT_FATIGUE_EXPONENT

    if np.sum((ln_d - ln_d.mean()) ** 2) == 0:
        return DEFAULT_FATIGUE_EXPONENT

    return float(stats.linregress(ln_d, ln_t).slope)


def get_runner_type(b: Optional[float]) -> RunnerType:
    """
    Map a fatigue exponent to a runner archetype.

    Thresholds:
        b < 1.06        → Speed
        b > 1.12        → Endurance
        otherwise       → Balanced

    A low exponent (little slowdown with distance) is labelled Speed.
    That direction is kept as-is; see DESIGN.md.

    Args:
        b: Fatigue exponent

    Returns:
        RunnerType (Balanced for missing or non-finite input)
    """
    if not b or not math.isfinite(b):
        return RunnerType.BALANCED
    if b < SPEED_THRESHOLD:
        return RunnerType.SPEED
    if b > ENDURANCE_THRESHOLD:
        return RunnerType.ENDURANCE
    return RunnerType.BALANCED


def classify_runner(personal_bests: PersonalBests) -> RunnerClassification:
    """
    Fit the fatigue exponent and classify the runner in one call.

    Args:
        personal_bests: Recorded PB times

    Returns:
        RunnerClassification with fit quality (None below three points)
    """
    ln_d, ln_t = _log_pairs(personal_bests)
    b = calculate_fatigue_exponent(personal_bests)

    r_squared = None
    if len(ln_d) >= 3:
        r_squared = float(stats.linregress(ln_d, ln_t).rvalue ** 2)

    return RunnerClassification(
        fatigue_exponent=b,
        runner_type=get_runner_type(b),
        r_squared=r_squared,
        n_points=len(ln_d),
    )


def get_ability_band(vdot: float) -> str:
    """
    Band an aerobic-capacity score (VDOT).

    ≥60 elite, ≥52 advanced, ≥45 intermediate, ≥38 novice, else beginner.
    """
    if vdot >= 60:
        return 'elite'
    if vdot >= 52:
        return 'advanced'
    if vdot >= 45:
        return 'intermediate'
    if vdot >= 38:
        return 'novice'
    return 'beginner'


def infer_level(vdot: float) -> str:
    """Athlete level for expected-gain lookups (no beginner tier)."""
    if vdot >= 60:
        return 'elite'
    if vdot >= 52:
        return 'advanced'
    if vdot >= 45:
        return 'intermediate'
    return 'novice'
