"""
Slot Allocation: Which workout types fill a week's run slots.

Each run of the week is a "slot" tagged with a workout type before any
day or description is attached. Allocation balances:
- Race distance (what the goal race demands)
- Runner archetype (train the weakness)
- Training phase (base → build → peak → taper emphasis)
- Fitness tier (caps on quality sessions)

Algorithm:
    1. Warn if the run count is below the distance minimum
    2. Score each type: position × runner bias × phase multiplier
    3. Place mandatory sessions (long run, marathon pace)
    4. Fill greedily by score, respecting quality caps
    5. Pad with easy runs
    6. Order as quality, easy, quality, easy, ..., long
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, List, Tuple, Union

from .config import PlannerConfig, FitnessLimits, DEFAULT_CONFIG
from .workouts import (
    WorkoutType,
    RaceDistance,
    RunnerType,
    TrainingPhase,
    FitnessLevel,
    QUALITY_TYPES,
)


@dataclass(frozen=True)
class SlotContext:
    """
    Allocation request for one week.

    fitness_level takes a FitnessLevel or its string value; unrecognised
    tiers fall back to the intermediate caps.
    """
    runs_per_week: int
    race_distance: RaceDistance
    runner_type: RunnerType = RunnerType.BALANCED
    phase: TrainingPhase = TrainingPhase.BASE
    fitness_level: Union[FitnessLevel, str] = FitnessLevel.INTERMEDIATE

    def __post_init__(self):
        if self.runs_per_week < 1:
            raise ValueError(f"runs_per_week must be >= 1, got {self.runs_per_week}")
        # Coerce plain strings; unknown values raise ValueError
        object.__setattr__(self, 'race_distance', RaceDistance(self.race_distance))
        object.__setattr__(self, 'runner_type', RunnerType(self.runner_type))
        object.__setattr__(self, 'phase', TrainingPhase(self.phase))
        level = self.fitness_level
        if isinstance(level, Enum):
            level = level.value
        object.__setattr__(self, 'fitness_level', str(level))


@dataclass
class SlotAllocation:
    """Ordered slot types plus non-fatal warnings."""
    slots: List[WorkoutType] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def quality_count(self) -> int:
        return sum(1 for s in self.slots if is_quality_session(s))

    def to_dict(self):
        return {
            'slots': [s.value for s in self.slots],
            'warnings': list(self.warnings),
            'quality_count': self.quality_count,
        }


def is_quality_session(slot: WorkoutType) -> bool:
    """Quality = any run type harder than easy, other than the long run."""
    return slot in QUALITY_TYPES


def min_runs_required(
    race_distance: RaceDistance,
    config: Optional[PlannerConfig] = None
) -> int:
    """Minimum recommended runs per week for a race distance."""
    config = config or DEFAULT_CONFIG
    return config.min_runs_required[RaceDistance(race_distance).value]


def base_priority_order(
    race_distance: RaceDistance,
    config: Optional[PlannerConfig] = None
) -> List[WorkoutType]:
    """Ten slot types, most important first, for a race distance."""
    config = config or DEFAULT_CONFIG
    return [WorkoutType(t) for t in config.base_priority_order[RaceDistance(race_distance).value]]


def runner_type_bias(
    race_distance: RaceDistance,
    runner_type: RunnerType,
    config: Optional[PlannerConfig] = None
) -> Dict[WorkoutType, float]:
    """
    Score multipliers that train the runner's weakness.

    Speed runners get endurance work nudged up, Endurance runners get
    speed work nudged up. Balanced runners are unbiased.
    """
    race_distance = RaceDistance(race_distance)
    bias = {t: 1.0 for t in base_priority_order(race_distance, config)}

    if runner_type == RunnerType.SPEED:
        bias[WorkoutType.THRESHOLD] *= 1.10
        bias[WorkoutType.LONG] *= 1.15
        bias[WorkoutType.MARATHON_PACE] *= 1.10
        bias[WorkoutType.VO2] *= 0.90
        bias[WorkoutType.INTERVALS] *= 0.90
    elif runner_type == RunnerType.ENDURANCE:
        bias[WorkoutType.VO2] *= 1.10
        bias[WorkoutType.INTERVALS] *= 1.10
        bias[WorkoutType.HILL_REPEATS] *= 1.05
        bias[WorkoutType.THRESHOLD] *= 0.95
        if race_distance in (RaceDistance.HALF, RaceDistance.MARATHON):
            bias[WorkoutType.LONG] *= 1.05

    return bias


def fitness_level_limits(
    level: Optional[str],
    config: Optional[PlannerConfig] = None
) -> FitnessLimits:
    """Quality-session caps for a fitness tier."""
    config = config or DEFAULT_CONFIG
    if isinstance(level, Enum):
        level = level.value
    return config.get_fitness_limits(level)


def phase_multipliers(
    phase: TrainingPhase,
    config: Optional[PlannerConfig] = None
) -> Dict[WorkoutType, float]:
    """Per-phase boosts and demotions of slot types (missing = 1.0)."""
    config = config or DEFAULT_CONFIG
    table = config.phase_multipliers.get(TrainingPhase(phase).value, {})
    return {WorkoutType(t): m for t, m in table.items()}


def score_slot_types(
    context: SlotContext,
    config: Optional[PlannerConfig] = None
) -> List[Tuple[WorkoutType, float]]:
    """
    Score each slot type and sort best first.

    Formula:
        score = (N - index) / N × runner_bias × phase_multiplier

    Ties keep base priority order.
    """
    order = base_priority_order(context.race_distance, config)
    bias = runner_type_bias(context.race_distance, context.runner_type, config)
    phase_mult = phase_multipliers(context.phase, config)

    n = len(order)
    scores = []
    for idx, slot in enumerate(order):
        position_score = (n - idx) / n
        score = position_score * bias.get(slot, 1.0) * phase_mult.get(slot, 1.0)
        scores.append((slot, score))

    return sorted(scores, key=lambda item: item[1], reverse=True)


def _needs_long_run(race_distance: RaceDistance, runs_per_week: int) -> bool:
    if race_distance in (RaceDistance.HALF, RaceDistance.MARATHON):
        return runs_per_week >= 2
    if race_distance == RaceDistance.TEN_K:
        return runs_per_week >= 3
    return runs_per_week >= 4


def _needs_marathon_pace(context: SlotContext) -> bool:
    return (
        context.race_distance == RaceDistance.MARATHON
        and context.runs_per_week >= 4
        and context.phase in (TrainingPhase.BUILD, TrainingPhase.PEAK)
    )


def generate_ordered_run_slots(
    context: SlotContext,
    config: Optional[PlannerConfig] = None
) -> SlotAllocation:
    """
    Allocate workout types to a week's run slots.

    Guarantees len(slots) == runs_per_week, at most one long run and no
    more quality sessions than the fitness tier allows.

    Args:
        context: Allocation request
        config: Table overrides (optional)

    Returns:
        SlotAllocation in canonical weekly order
    """
    runs = context.runs_per_week
    warnings = []

    min_runs = min_runs_required(context.race_distance, config)
    if runs < min_runs:
        warnings.append(
            f"{runs} runs/week is below recommended minimum of {min_runs} "
            f"for {context.race_distance.value}. Plan quality may be limited."
        )

    scores = score_slot_types(context, config)
    limits = fitness_level_limits(context.fitness_level, config)

    slots: List[WorkoutType] = []
    quality_count = 0
    vo2_count = 0
    hill_count = 0
    has_long = False

    # Mandatory placements
    if _needs_long_run(context.race_distance, runs):
        slots.append(WorkoutType.LONG)
        has_long = True

    if _needs_marathon_pace(context) and len(slots) < runs:
        slots.append(WorkoutType.MARATHON_PACE)
        quality_count += 1

    # Greedy fill, each type at most once from the scored list
    for slot, _ in scores:
        if len(slots) >= runs:
            break
        if slot in slots:
            continue

        if slot == WorkoutType.LONG:
            if not has_long:
                slots.append(slot)
                has_long = True
            continue

        if slot == WorkoutType.EASY:
            slots.append(slot)
            continue

        if is_quality_session(slot):
            if quality_count >= limits.max_quality:
                continue
            if slot == WorkoutType.VO2 and vo2_count >= limits.max_vo2:
                continue
            if slot == WorkoutType.HILL_REPEATS and hill_count >= limits.max_hills:
                continue

            slots.append(slot)
            quality_count += 1
            if slot == WorkoutType.VO2:
                vo2_count += 1
            elif slot == WorkoutType.HILL_REPEATS:
                hill_count += 1

    while len(slots) < runs:
        slots.append(WorkoutType.EASY)

    return SlotAllocation(slots=order_weekly_pattern(slots), warnings=warnings)


def order_weekly_pattern(slots: List[WorkoutType]) -> List[WorkoutType]:
    """
    Order slots as quality, easy, quality, easy, ..., long.

    Leftover easy runs follow the interleaved block; the long run is
    always last.
    """
    long_runs = [s for s in slots if s == WorkoutType.LONG]
    quality = [s for s in slots if is_quality_session(s)]
    easy = [s for s in slots if s == WorkoutType.EASY]

    ordered = []
    qi = ei = 0
    while qi < len(quality) or ei < len(easy):
        if qi < len(quality):
            ordered.append(quality[qi])
            qi += 1
        if ei < len(easy):
            ordered.append(easy[ei])
            ei += 1

    ordered.extend(long_runs)
    return ordered
