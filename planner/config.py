"""
Planner Configuration: Lookup tables driving slot allocation and load.

All fixed tables used by the equations live here so they can be swapped
per deployment or tested independently of the algorithms that read them.

Tables:
- Fitness-tier caps on quality sessions
- Base priority order of workout types per race distance
- Phase multipliers on slot scores
- Aerobic/anaerobic load split per workout type
- Load-per-minute by RPE (calibrated to a Garmin-like scale)
- Pace multipliers relative to easy pace
"""

from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any, List, Tuple
import json


@dataclass(frozen=True)
class FitnessLimits:
    """Per-tier weekly caps on quality sessions."""
    max_quality: int
    max_vo2: int
    max_hills: int


# ═══════════════════════════════════════════════════════════════════════════
# SLOT ALLOCATION TABLES
# ═══════════════════════════════════════════════════════════════════════════

FITNESS_LIMITS: Dict[str, FitnessLimits] = {
    'total_beginner': FitnessLimits(max_quality=1, max_vo2=0, max_hills=0),
    'beginner': FitnessLimits(max_quality=1, max_vo2=0, max_hills=0),
    'novice': FitnessLimits(max_quality=1, max_vo2=1, max_hills=1),
    'intermediate': FitnessLimits(max_quality=2, max_vo2=1, max_hills=1),
    'returning': FitnessLimits(max_quality=2, max_vo2=1, max_hills=1),
    'hybrid': FitnessLimits(max_quality=2, max_vo2=1, max_hills=1),
    'advanced': FitnessLimits(max_quality=2, max_vo2=2, max_hills=1),
    'competitive': FitnessLimits(max_quality=3, max_vo2=2, max_hills=2),
}

DEFAULT_FITNESS_LEVEL = 'intermediate'

MIN_RUNS_REQUIRED: Dict[str, int] = {
    '5k': 2,
    '10k': 3,
    'half': 3,
    'marathon': 4,
}

BASE_PRIORITY_ORDER: Dict[str, List[str]] = {
    'marathon': ['long', 'marathon_pace', 'threshold', 'easy', 'vo2',
                 'hill_repeats', 'progressive', 'race_pace', 'mixed', 'intervals'],
    'half': ['long', 'threshold', 'race_pace', 'easy', 'vo2',
             'hill_repeats', 'progressive', 'mixed', 'intervals', 'marathon_pace'],
    '10k': ['threshold', 'vo2', 'long', 'race_pace', 'easy',
            'hill_repeats', 'progressive', 'mixed', 'intervals', 'marathon_pace'],
    '5k': ['vo2', 'threshold', 'race_pace', 'long', 'easy',
           'hill_repeats', 'progressive', 'mixed', 'intervals', 'marathon_pace'],
}

PHASE_MULTIPLIERS: Dict[str, Dict[str, float]] = {
    'base': {'threshold': 1.2, 'easy': 1.3, 'long': 1.1, 'vo2': 0.7,
             'race_pace': 0.5, 'marathon_pace': 0.6},
    'build': {'threshold': 1.1, 'race_pace': 1.2, 'marathon_pace': 1.1,
              'vo2': 1.0, 'progressive': 1.1},
    'peak': {'race_pace': 1.3, 'mixed': 1.2, 'progressive': 1.2,
             'vo2': 1.1, 'threshold': 0.9},
    'taper': {'easy': 1.5, 'race_pace': 1.1, 'threshold': 0.7, 'vo2': 0.5,
              'long': 0.8, 'marathon_pace': 0.7},
}

# ═══════════════════════════════════════════════════════════════════════════
# LOAD TABLES
# ═══════════════════════════════════════════════════════════════════════════

LOAD_PROFILES: Dict[str, Tuple[float, float]] = {
    'easy': (0.95, 0.05),
    'long': (0.90, 0.10),
    'threshold': (0.70, 0.30),
    'vo2': (0.50, 0.50),
    'race_pace': (0.65, 0.35),
    'marathon_pace': (0.75, 0.25),
    'intervals': (0.45, 0.55),
    'hill_repeats': (0.40, 0.60),
    'mixed': (0.60, 0.40),
    'progressive': (0.70, 0.30),
}

DEFAULT_LOAD_PROFILE: Tuple[float, float] = (0.80, 0.20)

# Load units per minute, keyed by RPE
LOAD_PER_MIN_BY_INTENSITY: Dict[int, float] = {
    1: 0.5,
    2: 0.8,
    3: 1.2,
    4: 1.5,
    5: 2.0,
    6: 2.5,
    7: 3.5,
    8: 4.5,
    9: 5.5,
    10: 6.0,
}

DEFAULT_LOAD_RATE = 2.0

# Pace as a fraction of easy pace (lower = faster)
PACE_MULTIPLIERS: Dict[str, float] = {
    'easy': 1.00,
    'long': 1.03,
    'threshold': 0.82,
    'vo2': 0.73,
    'race_pace': 0.78,
    'marathon_pace': 0.87,
}

DEFAULT_DURATIONS: Dict[str, float] = {
    'long': 120.0,
    'threshold': 45.0,
    'vo2': 45.0,
}

FALLBACK_DURATION = 40.0
DEFAULT_EASY_PACE_MIN_PER_KM = 5.5
ANAEROBIC_WEIGHT = 1.15


@dataclass
class PlannerConfig:
    """
    Tunable tables for the weekly plan compiler.

    Defaults reproduce the calibrated values above. A deployment can
    override any table via from_dict() or load_config().
    """

    fitness_limits: Dict[str, FitnessLimits] = field(
        default_factory=lambda: dict(FITNESS_LIMITS))
    default_fitness_level: str = DEFAULT_FITNESS_LEVEL
    min_runs_required: Dict[str, int] = field(
        default_factory=lambda: dict(MIN_RUNS_REQUIRED))
    base_priority_order: Dict[str, List[str]] = field(
        default_factory=lambda: {k: list(v) for k, v in BASE_PRIORITY_ORDER.items()})
    phase_multipliers: Dict[str, Dict[str, float]] = field(
        default_factory=lambda: {k: dict(v) for k, v in PHASE_MULTIPLIERS.items()})

    load_profiles: Dict[str, Tuple[float, float]] = field(
        default_factory=lambda: dict(LOAD_PROFILES))
    default_load_profile: Tuple[float, float] = DEFAULT_LOAD_PROFILE
    load_per_min_by_intensity: Dict[int, float] = field(
        default_factory=lambda: dict(LOAD_PER_MIN_BY_INTENSITY))
    default_load_rate: float = DEFAULT_LOAD_RATE
    pace_multipliers: Dict[str, float] = field(
        default_factory=lambda: dict(PACE_MULTIPLIERS))
    default_durations: Dict[str, float] = field(
        default_factory=lambda: dict(DEFAULT_DURATIONS))
    fallback_duration: float = FALLBACK_DURATION
    default_easy_pace_min_per_km: float = DEFAULT_EASY_PACE_MIN_PER_KM
    anaerobic_weight: float = ANAEROBIC_WEIGHT

    def get_fitness_limits(self, level: Optional[str]) -> FitnessLimits:
        """Caps for a fitness tier; unknown tiers get the default tier."""
        if level is not None and level in self.fitness_limits:
            return self.fitness_limits[level]
        return self.fitness_limits[self.default_fitness_level]

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a JSON-friendly dictionary."""
        d = asdict(self)
        d['load_profiles'] = {k: list(v) for k, v in self.load_profiles.items()}
        d['default_load_profile'] = list(self.default_load_profile)
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'PlannerConfig':
        """
        Create configuration from a (possibly partial) dictionary.

        Missing keys keep their defaults. JSON round-trips turn integer
        keys into strings and tuples into lists, so both are normalised.
        """
        kwargs = dict(d)

        if 'fitness_limits' in kwargs:
            kwargs['fitness_limits'] = {
                level: limits if isinstance(limits, FitnessLimits) else FitnessLimits(**limits)
                for level, limits in kwargs['fitness_limits'].items()
            }
        if 'load_profiles' in kwargs:
            kwargs['load_profiles'] = {
                k: tuple(v) for k, v in kwargs['load_profiles'].items()
            }
        if 'default_load_profile' in kwargs:
            kwargs['default_load_profile'] = tuple(kwargs['default_load_profile'])
        if 'load_per_min_by_intensity' in kwargs:
            kwargs['load_per_min_by_intensity'] = {
                int(k): float(v) for k, v in kwargs['load_per_min_by_intensity'].items()
            }

        return cls(**kwargs)

    def validate(self) -> Tuple[bool, str]:
        """Validate table constraints."""
        issues = []

        if self.default_fitness_level not in self.fitness_limits:
            issues.append(f"Default fitness level '{self.default_fitness_level}' has no limits")

        for level, limits in self.fitness_limits.items():
            if limits.max_vo2 > limits.max_quality:
                issues.append(f"{level}: max_vo2 exceeds max_quality")
            if limits.max_hills > limits.max_quality:
                issues.append(f"{level}: max_hills exceeds max_quality")
            if min(limits.max_quality, limits.max_vo2, limits.max_hills) < 0:
                issues.append(f"{level}: limits must be non-negative")

        for distance, order in self.base_priority_order.items():
            if len(order) != 10 or len(set(order)) != 10:
                issues.append(f"{distance}: priority order must list ten distinct types")
            if distance not in self.min_runs_required:
                issues.append(f"{distance}: missing minimum run count")

        for wtype, (aerobic, anaerobic) in self.load_profiles.items():
            if aerobic < 0 or anaerobic < 0 or abs(aerobic + anaerobic - 1.0) > 1e-6:
                issues.append(f"{wtype}: load split must be non-negative and sum to 1")

        if any(rate < 0 for rate in self.load_per_min_by_intensity.values()):
            issues.append("Load rates must be non-negative")

        if self.default_easy_pace_min_per_km <= 0:
            issues.append("Default easy pace must be positive")

        if issues:
            return False, "; ".join(issues)
        return True, "Valid"


DEFAULT_CONFIG = PlannerConfig()


def load_config(path: str) -> PlannerConfig:
    """
    Load a configuration override from a JSON file.

    Args:
        path: Path to a JSON object with any subset of PlannerConfig fields

    Returns:
        Validated PlannerConfig
    """
    with open(path) as f:
        data = json.load(f)

    config = PlannerConfig.from_dict(data)
    valid, message = config.validate()
    if not valid:
        raise ValueError(f"Invalid planner configuration in {path}: {message}")

    return config
