"""
Plan Engine: Compiling runner profiles into scheduled training weeks.

This module ties the individual components together:
- Phase layout of a multi-week plan
- Slot allocation and template instantiation
- Makeup, commute and cross-training additions
- Load, heart rate targets and day assignment

Weekly pipeline:
    allocate slots → instantiate → add extras → load → HR target →
    assign days → adapt (optional hook) → stable ids

The engine holds no per-runner state; the same profile and phase always
compile to the same week.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Dict, Any, List, Callable, Sequence, Union
import math

from .config import PlannerConfig, DEFAULT_CONFIG, DEFAULT_FITNESS_LEVEL
from .load import apply_workout_load
from .profile import PersonalBests, classify_runner
from .scheduling import (
    ScheduleWarning,
    assign_days,
    check_consecutive_hard_days,
    format_weekly_schedule,
)
from .slots import SlotContext, generate_ordered_run_slots
from .templates import instantiate_slots
from .workouts import (
    Workout,
    FitnessLevel,
    WorkoutType,
    RaceDistance,
    RunnerType,
    TrainingPhase,
    round_half_up,
)
from .zones import HRProfile, calculate_zones, get_workout_hr_target


TAPER_FRACTION = 0.12
BASE_FRACTION = 0.45
BUILD_FRACTION = 0.40

ACTIVITY_INTENSITY_RPE = {
    'easy': 3,
    'moderate': 5,
    'hard': 7,
}
DEFAULT_ACTIVITY_RPE = 5
COMMUTE_RPE = 3


@dataclass(frozen=True)
class CommuteConfig:
    """Run-commute settings."""
    enabled: bool = False
    distance_km: float = 0.0
    commute_days_per_week: int = 0
    is_bidirectional: bool = False

    @property
    def run_distance_km(self) -> float:
        return self.distance_km * 2 if self.is_bidirectional else self.distance_km


@dataclass(frozen=True)
class RecurringActivity:
    """A non-running sport done every week."""
    sport: str
    duration_min: float
    frequency: int = 1
    intensity: str = 'moderate'  # 'easy' | 'moderate' | 'hard'


@dataclass
class RunnerProfile:
    """
    Everything the engine needs to know about a runner.

    runner_type is derived from personal_bests when not given.
    """
    race_distance: RaceDistance
    runs_per_week: int
    fitness_level: Union[FitnessLevel, str] = DEFAULT_FITNESS_LEVEL
    runner_type: Optional[RunnerType] = None
    personal_bests: Optional[PersonalBests] = None
    hr_profile: Optional[HRProfile] = None
    easy_pace_sec_per_km: Optional[float] = None
    commute: Optional[CommuteConfig] = None
    recurring_activities: List[RecurringActivity] = field(default_factory=list)

    def resolve_runner_type(self) -> RunnerType:
        """Runner type as given, else classified from PBs, else Balanced."""
        if self.runner_type is not None:
            return RunnerType(self.runner_type)
        if self.personal_bests is not None:
            return classify_runner(self.personal_bests).runner_type
        return RunnerType.BALANCED


@dataclass
class Week:
    """
    One week of a training plan.

    workouts is empty until the engine compiles the week.
    """
    week_number: int
    phase: TrainingPhase
    workouts: List[Workout] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    schedule_warnings: List[ScheduleWarning] = field(default_factory=list)

    @property
    def total_aerobic(self) -> int:
        return sum(w.aerobic_load or 0 for w in self.workouts)

    @property
    def total_anaerobic(self) -> int:
        return sum(w.anaerobic_load or 0 for w in self.workouts)

    @property
    def total_load(self) -> int:
        return sum(w.total_load or 0 for w in self.workouts)

    @property
    def run_count(self) -> int:
        return sum(1 for w in self.workouts if w.is_run)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'week_number': self.week_number,
            'phase': self.phase.value,
            'workouts': [w.to_dict() for w in self.workouts],
            'warnings': list(self.warnings),
            'schedule_warnings': [w.message for w in self.schedule_warnings],
            'total_aerobic': self.total_aerobic,
            'total_anaerobic': self.total_anaerobic,
            'total_load': self.total_load,
        }


def initialize_weeks(total_weeks: int) -> List[Week]:
    """
    Lay out the phases of a plan.

    Phase boundaries:
        taper = last ceil(12%) of weeks (at least 1)
        base  = 45% of the remaining weeks (at least 1)
        build = 40% of the remaining weeks (at least 1)
        peak  = whatever is left before the taper

    Args:
        total_weeks: Plan length in weeks

    Returns:
        Empty Week records numbered from 1
    """
    if total_weeks < 1:
        raise ValueError(f"total_weeks must be >= 1, got {total_weeks}")

    taper_weeks = max(1, math.ceil(total_weeks * TAPER_FRACTION))
    taper_start = total_weeks - taper_weeks + 1
    pre_taper = taper_start - 1
    base_end = max(1, round_half_up(pre_taper * BASE_FRACTION))
    build_end = base_end + max(1, round_half_up(pre_taper * BUILD_FRACTION))

    weeks = []
    for number in range(1, total_weeks + 1):
        if number >= taper_start:
            phase = TrainingPhase.TAPER
        elif number > build_end:
            phase = TrainingPhase.PEAK
        elif number > base_end:
            phase = TrainingPhase.BUILD
        else:
            phase = TrainingPhase.BASE
        weeks.append(Week(week_number=number, phase=phase))

    return weeks


def makeup_workouts(previous_skips: Sequence[Workout]) -> List[Workout]:
    """Carry skipped sessions into the next week under a makeup name."""
    makeups = []
    for skipped in previous_skips:
        makeups.append(replace(
            skipped,
            name=f"[Makeup] {skipped.name}",
            skipped=True,
            skip_count=skipped.skip_count or 1,
            original_name=skipped.name,
            day_of_week=None,
            day_name=None,
            workout_id=None,
            status='planned',
        ))
    return makeups


def commute_workouts(commute: Optional[CommuteConfig]) -> List[Workout]:
    """Easy commute runs, one per commute day."""
    if commute is None or not commute.enabled or commute.commute_days_per_week <= 0:
        return []

    distance = commute.run_distance_km
    distance_text = f"{distance:g}km"
    return [
        Workout(
            type=WorkoutType.EASY,
            name=f"Commute {i + 1}",
            description=distance_text,
            target_rpe=COMMUTE_RPE,
            commute=True,
        )
        for i in range(commute.commute_days_per_week)
    ]


def cross_training_workouts(activities: Sequence[RecurringActivity]) -> List[Workout]:
    """Cross-training sessions for a runner's recurring sports."""
    workouts = []
    for activity in activities:
        rpe = ACTIVITY_INTENSITY_RPE.get(activity.intensity, DEFAULT_ACTIVITY_RPE)
        for i in range(activity.frequency):
            suffix = f" {i + 1}" if activity.frequency > 1 else ""
            workouts.append(Workout(
                type=WorkoutType.CROSS,
                name=f"{activity.sport}{suffix}",
                description=f"{activity.duration_min:g}min {activity.sport.lower()}",
                target_rpe=rpe,
            ))
    return workouts


def assign_workout_ids(workouts: List[Workout], week_number: int) -> List[Workout]:
    """Stable ids W{week}-{type}-{index}, counted per type in list order."""
    counts: Dict[str, int] = {}
    result = []
    for w in workouts:
        key = w.type.value
        idx = counts.get(key, 0)
        counts[key] = idx + 1
        result.append(replace(w, workout_id=f"W{week_number}-{key}-{idx}"))
    return result


class PlanEngine:
    """
    Compiles runner profiles into scheduled weeks.

    The optional adapt hook receives the scheduled workouts and returns a
    (possibly modified) list; it runs before ids are assigned.
    """

    def __init__(
        self,
        config: Optional[PlannerConfig] = None,
        adapt: Optional[Callable[[List[Workout]], List[Workout]]] = None,
        verbose: bool = False
    ):
        """
        Initialize the plan engine.

        Args:
            config: Table overrides (optional)
            adapt: Post-scheduling adaptation hook (optional)
            verbose: Print progress and allocation warnings
        """
        self.config = config or DEFAULT_CONFIG
        self.adapt = adapt
        self.verbose = verbose

    def generate_week(
        self,
        profile: RunnerProfile,
        phase: TrainingPhase,
        week_number: int = 1,
        previous_skips: Sequence[Workout] = ()
    ) -> Week:
        """
        Compile one week of training.

        Args:
            profile: Runner profile
            phase: Training phase of the week
            week_number: Week number used in workout ids
            previous_skips: Workouts skipped last week

        Returns:
            Week with scheduled workouts and warnings
        """
        phase = TrainingPhase(phase)
        runner_type = profile.resolve_runner_type()

        allocation = generate_ordered_run_slots(
            SlotContext(
                runs_per_week=profile.runs_per_week,
                race_distance=profile.race_distance,
                runner_type=runner_type,
                phase=phase,
                fitness_level=profile.fitness_level or DEFAULT_FITNESS_LEVEL,
            ),
            self.config,
        )

        if self.verbose:
            print(f"Week {week_number} ({phase.value}): "
                  f"{', '.join(s.value for s in allocation.slots)}")
            for warning in allocation.warnings:
                print(f"  Warning: {warning}")

        workouts = instantiate_slots(
            allocation.slots, profile.race_distance, runner_type, phase
        )
        workouts += makeup_workouts(previous_skips)
        workouts += commute_workouts(profile.commute)
        workouts += cross_training_workouts(profile.recurring_activities)

        workouts = [
            apply_workout_load(w, profile.easy_pace_sec_per_km, self.config)
            for w in workouts
        ]

        if profile.hr_profile is not None:
            zones = calculate_zones(profile.hr_profile)
            if zones is not None:
                workouts = [self._with_hr_target(w, zones) for w in workouts]

        workouts = assign_days(workouts)

        if self.adapt is not None:
            workouts = list(self.adapt(workouts))

        workouts = assign_workout_ids(workouts, week_number)

        schedule_warnings = check_consecutive_hard_days(workouts)
        if self.verbose:
            for warning in schedule_warnings:
                print(f"  Schedule: {warning.message}")

        return Week(
            week_number=week_number,
            phase=phase,
            workouts=workouts,
            warnings=list(allocation.warnings),
            schedule_warnings=schedule_warnings,
        )

    @staticmethod
    def _with_hr_target(workout: Workout, zones) -> Workout:
        target = get_workout_hr_target(workout.type, zones)
        if target is None:
            return workout
        return replace(workout, hr_target=target)

    def generate_plan(self, profile: RunnerProfile, total_weeks: int) -> List[Week]:
        """
        Compile every week of a plan.

        Args:
            profile: Runner profile
            total_weeks: Plan length in weeks

        Returns:
            List of compiled weeks
        """
        plan = []
        for week in initialize_weeks(total_weeks):
            plan.append(self.generate_week(profile, week.phase, week.week_number))

        if self.verbose:
            print(f"Generated {len(plan)}-week plan for {RaceDistance(profile.race_distance).value}")

        return plan

    def format_week(self, week: Week) -> str:
        """
        Format a compiled week as readable text.

        Args:
            week: Compiled week

        Returns:
            Formatted string
        """
        lines = [
            f"Week {week.week_number} - {week.phase.value.title()}",
            "=" * 50,
            f"Runs: {week.run_count}",
            f"Load: {week.total_aerobic} aerobic / {week.total_anaerobic} anaerobic / {week.total_load} total",
            "",
            format_weekly_schedule(week.workouts),
        ]

        for warning in week.warnings:
            lines.append(f"Warning: {warning}")
        for warning in week.schedule_warnings:
            lines.append(f"Schedule: {warning.message}")

        return "\n".join(lines)
