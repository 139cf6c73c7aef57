"""
Scheduling and Day Assignment: Placing a week's workouts on the calendar.

Based on:
- Hard/easy sequencing (at least one easy day between hard efforts)
- Long run at the end of the week
- Commute runs on working days

Workouts are placed by category, hardest first:
    1. Hard (long run + quality sessions)
    2. Commute runs (weekdays)
    3. Easy runs (any free day)
    4. Cross-training, strength, rest and gym sessions

A repair pass then spreads out double-booked days while free days
remain, moving the least important workout first.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, List, Union

from .workouts import Workout, WorkoutType, QUALITY_TYPES, DAY_NAMES


class DayOfWeek(Enum):
    """Days of the week."""
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6


WEEKDAYS = (0, 1, 2, 3, 4)

# Hard-day layouts
SPACED_HARD_DAYS = (0, 2, 4, 6)      # Mon/Wed/Fri/Sun
SPACED_OVERFLOW_DAYS = (1, 3, 5)
QUALITY_DAYS = (1, 3)                # Tue/Thu
QUALITY_OVERFLOW_DAYS = (5,)         # Sat
LONG_RUN_DAY = 6
SPACED_THRESHOLD = 4

# Lower rank moves first; hard workouts never move
MOVABILITY = {
    'cross': 0,
    'gym': 1,
    'easy': 2,
    'commute': 3,
}

MAX_WORKOUTS_FOR_REPAIR = 7


@dataclass(frozen=True)
class ScheduleWarning:
    """A spacing problem found in a scheduled week."""
    level: str
    message: str


def is_hard_workout(workout_type: Union[WorkoutType, str]) -> bool:
    """Long runs and quality sessions count as hard."""
    try:
        wtype = WorkoutType(workout_type)
    except ValueError:
        return False
    return wtype == WorkoutType.LONG or wtype in QUALITY_TYPES


def workout_category(workout: Workout) -> str:
    """
    Scheduling category of a workout.

    Returns:
        One of 'hard', 'commute', 'easy', 'gym', 'cross'
    """
    if is_hard_workout(workout.type):
        return 'hard'
    if workout.commute:
        return 'commute'
    if workout.type == WorkoutType.GYM:
        return 'gym'
    if workout.type in (WorkoutType.CROSS, WorkoutType.STRENGTH, WorkoutType.REST):
        return 'cross'
    return 'easy'


class _WeekGrid:
    """Tracks which workouts sit on which day during assignment."""

    def __init__(self, n_workouts: int):
        self.days: List[Optional[int]] = [None] * n_workouts
        self.occupancy: Dict[int, List[int]] = {d: [] for d in range(7)}
        self.last_used: Dict[int, int] = {}
        self._clock = 0

    def place(self, idx: int, day: int):
        previous = self.days[idx]
        if previous is not None:
            self.occupancy[previous].remove(idx)
        self.days[idx] = day
        self.occupancy[day].append(idx)
        self.last_used[day] = self._clock
        self._clock += 1

    def free_days(self, candidates=range(7)) -> List[int]:
        return [d for d in candidates if not self.occupancy[d]]


def _place_hard(grid: _WeekGrid, workouts: List[Workout], hard_idx: List[int]):
    long_idx = next(
        (i for i in hard_idx if workouts[i].type == WorkoutType.LONG), None
    )
    quality_idx = [i for i in hard_idx if i != long_idx]

    if len(hard_idx) >= SPACED_THRESHOLD:
        # Guarantees an easy day between any two hard sessions
        if long_idx is not None:
            grid.place(long_idx, LONG_RUN_DAY)
            primary = [d for d in SPACED_HARD_DAYS if d != LONG_RUN_DAY]
        else:
            primary = list(SPACED_HARD_DAYS)
        overflow = SPACED_OVERFLOW_DAYS
    else:
        if long_idx is not None:
            grid.place(long_idx, LONG_RUN_DAY)
        primary = list(QUALITY_DAYS)
        overflow = QUALITY_OVERFLOW_DAYS

    for k, idx in enumerate(quality_idx):
        if k < len(primary):
            grid.place(idx, primary[k])
        else:
            grid.place(idx, overflow[(k - len(primary)) % len(overflow)])


def _place_commutes(grid: _WeekGrid, commute_idx: List[int], hard_days: set):
    for idx in commute_idx:
        free = grid.free_days(WEEKDAYS)
        if free:
            grid.place(idx, free[0])
            continue

        candidates = [d for d in WEEKDAYS if d not in hard_days] or list(WEEKDAYS)
        grid.place(idx, min(candidates, key=lambda d: grid.last_used.get(d, -1)))


def _place_easy(grid: _WeekGrid, easy_idx: List[int], hard_days: set):
    originally_free = grid.free_days()
    stacked = 0

    for idx in easy_idx:
        free = grid.free_days()
        if free:
            grid.place(idx, free[0])
            continue

        pool = (
            originally_free
            or [d for d in range(7) if d not in hard_days]
            or list(range(7))
        )
        grid.place(idx, pool[stacked % len(pool)])
        stacked += 1


def _place_other(grid: _WeekGrid, other_idx: List[int], hard_days: set):
    for idx in other_idx:
        free = grid.free_days()
        if free:
            grid.place(idx, free[0])
            continue

        pool = [d for d in range(7) if d not in hard_days] or list(range(7))
        grid.place(idx, min(pool, key=lambda d: len(grid.occupancy[d])))


def _deconflict(grid: _WeekGrid, categories: List[str]):
    """
    Move workouts off double-booked days onto free days.

    Each pass moves one workout into a free day, so the loop runs at most
    once per free day.
    """
    while True:
        free = grid.free_days()
        if not free:
            return

        moved = False
        for day in range(7):
            if len(grid.occupancy[day]) < 2:
                continue

            movable = [i for i in grid.occupancy[day] if categories[i] in MOVABILITY]
            if not movable:
                continue

            # Ties go to the most recently placed workout
            idx = min(reversed(movable), key=lambda i: MOVABILITY[categories[i]])
            grid.place(idx, free[0])
            moved = True
            break

        if not moved:
            return


def assign_days(workouts: List[Workout]) -> List[Workout]:
    """
    Assign a day of the week to every workout.

    Algorithm:
        1. Hard sessions: with 4+ hard sessions use Mon/Wed/Fri/Sun (long
           run Sunday); otherwise long run Sunday, quality Tue/Thu,
           extra quality Saturday
        2. Commutes: free weekdays, then least recently used weekday
        3. Easy runs: free days, then stack cyclically
        4. Cross-training/gym: free days, then non-hard days
        5. With 7 or fewer workouts, repair double-booked days

    Args:
        workouts: The week's workouts (days may be unset)

    Returns:
        New Workout records, in input order, with day_of_week and day_name set
    """
    grid = _WeekGrid(len(workouts))
    categories = [workout_category(w) for w in workouts]

    def indices(category):
        return [i for i, c in enumerate(categories) if c == category]

    _place_hard(grid, workouts, indices('hard'))
    hard_days = {grid.days[i] for i in indices('hard')}

    _place_commutes(grid, indices('commute'), hard_days)
    _place_easy(grid, indices('easy'), hard_days)
    _place_other(grid, indices('gym') + indices('cross'), hard_days)

    if len(workouts) <= MAX_WORKOUTS_FOR_REPAIR:
        _deconflict(grid, categories)

    return [
        w.on_day(grid.days[i] if grid.days[i] is not None else DayOfWeek.MONDAY.value)
        for i, w in enumerate(workouts)
    ]


def move_workout_to_day(workout: Workout, day: Union[int, DayOfWeek]) -> Workout:
    """Copy of a workout moved to another day."""
    if isinstance(day, DayOfWeek):
        day = day.value
    return workout.on_day(day)


def check_consecutive_hard_days(workouts: List[Workout]) -> List[ScheduleWarning]:
    """
    Find hard sessions on back-to-back days or stacked on one day.

    Sunday → Monday counts as consecutive.

    Args:
        workouts: Scheduled workouts

    Returns:
        List of critical ScheduleWarning entries
    """
    warnings = []

    by_day: Dict[int, List[Workout]] = {d: [] for d in range(7)}
    for w in workouts:
        if w.day_of_week is not None:
            by_day[w.day_of_week].append(w)

    for day in range(7):
        tomorrow = (day + 1) % 7
        hard_today = [w for w in by_day[day] if is_hard_workout(w.type)]
        hard_tomorrow = [w for w in by_day[tomorrow] if is_hard_workout(w.type)]

        if hard_today and hard_tomorrow:
            today_names = ', '.join(w.name for w in hard_today)
            tomorrow_names = ', '.join(w.name for w in hard_tomorrow)
            warnings.append(ScheduleWarning(
                level='critical',
                message=(
                    f"Hard workouts on consecutive days: {today_names} "
                    f"({DAY_NAMES[day]}) → {tomorrow_names} ({DAY_NAMES[tomorrow]})"
                ),
            ))

        if len(hard_today) > 1:
            names = ', '.join(w.name for w in hard_today)
            warnings.append(ScheduleWarning(
                level='critical',
                message=f"Multiple hard workouts on {DAY_NAMES[day]}: {names}",
            ))

    return warnings


def format_weekly_schedule(workouts: List[Workout]) -> str:
    """
    Format a scheduled week as a readable string.

    Args:
        workouts: Scheduled workouts

    Returns:
        Formatted string representation
    """
    lines = ["Weekly Schedule:", "=" * 40]

    for day in DayOfWeek:
        todays = [w for w in workouts if w.day_of_week == day.value]
        if not todays:
            lines.append(f"{day.name:10s}: REST")
            continue
        for i, w in enumerate(todays):
            label = day.name if i == 0 else ''
            lines.append(f"{label:10s}: {w.type.value:15s} {w.name} ({w.description})")

    return "\n".join(lines)
