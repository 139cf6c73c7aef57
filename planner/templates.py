"""
Workout Templates: Turning slot types into concrete sessions.

The library holds named sessions per race distance, runner archetype and
workout category. Categories a runner has no entry for fall back to an
easy run.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from .workouts import (
    Workout,
    WorkoutType,
    RaceDistance,
    RunnerType,
    TrainingPhase,
    round_half_up,
)


@dataclass(frozen=True)
class LibraryEntry:
    """A named session in the workout library."""
    name: str
    description: str
    rpe: float


def _entry(name, description, rpe):
    return LibraryEntry(name, description, rpe)


WORKOUT_LIBRARY: Dict[str, Dict[str, Dict[str, Tuple[LibraryEntry, ...]]]] = {
    '5k': {
        'Speed': {
            'vo2': (_entry('800m', '8×800 @ 5K, 90s', 9),),
            'threshold': (_entry('Tempo', '20min @ threshold', 7),),
        },
        'Balanced': {
            'vo2': (_entry('1K', '6×1K @ 5K, 2-3min', 9),),
            'threshold': (_entry('Tempo', '22min @ threshold', 7),),
        },
        'Endurance': {
            'vo2': (_entry('1200m', '5×1200 @ 5K, 3min', 9),),
            'threshold': (_entry('Long Tempo', '25min @ threshold', 7),),
        },
    },
    '10k': {
        'Speed': {
            'vo2': (_entry('800m', '8×800 @ 5K, 90s', 9),),
            'threshold': (_entry('Tempo', '22min @ tempo', 7),),
            'race_pace': (_entry('Mile', '4×1mi @ 10K, 2min', 8),),
        },
        'Balanced': {
            'vo2': (_entry('1K', '6×1K @ 5K, 2-3min', 9),),
            'threshold': (_entry('Tempo', '25min @ tempo', 7),),
            'race_pace': (_entry('Mile', '4×1mi @ 10K, 2min', 8),),
        },
        'Endurance': {
            'vo2': (_entry('1200m', '5×1200 @ 5K, 3min', 8),),
            'threshold': (_entry('Long Tempo', '30min @ tempo', 7),),
            'race_pace': (_entry('2K', '3×2K @ 10K, 3min', 8),),
        },
    },
    'half': {
        'Speed': {
            'vo2': (_entry('1200m', '4×1200 @ 5K, 3min', 9),),
            'threshold': (_entry('Tempo', '35min @ threshold', 7),),
            'race_pace': (
                _entry('800m@HM', '8×800 @ HM, 90s', 8),
                _entry('Jack Fultz', '20×400 @ HM, 200m', 8),
            ),
            'progressive': (_entry('Fast Finish', '21km: last 5 @ HM', 7),),
        },
        'Balanced': {
            'vo2': (_entry('1200m', '4×1200 @ 5K, 3min', 9),),
            'threshold': (_entry('Long Tempo', '40min @ threshold', 7),),
            'race_pace': (_entry('Jack Fultz', '20×400 @ HM, 200m', 8),),
            'mixed': (_entry('Nell Rojas', '6.5@MP, 2.5@10K, 3@HM', 8),),
            'progressive': (_entry('Fast Finish', '21km: last 5 @ HM', 7),),
        },
        'Endurance': {
            'vo2': (_entry('1K', '5×1K @ 5K, 3min', 8),),
            'threshold': (_entry('Long Tempo', '45min @ threshold', 7),),
            'race_pace': (_entry('Jack Fultz', '20×400 @ HM, 200m', 8),),
            'progressive': (_entry('Fast Finish', '23km: last 8 @ HM', 8),),
        },
    },
    'marathon': {
        'Speed': {
            'threshold': (_entry('Tempo Int', '3×10min @ threshold, 2min', 7),),
            'marathon_pace': (
                _entry('MP Intro', '3×10min @ MP, 3min', 5),
                _entry('MP', '2×10km @ MP, 2min', 6),
            ),
            'progressive': (_entry('Progressive', '26km: last 8 @ MP', 7),),
        },
        'Balanced': {
            'threshold': (_entry('Long Tempo', '2×12km @ threshold, 3min', 7),),
            'marathon_pace': (
                _entry('MP Intro', '3×12min @ MP, 3min', 5),
                _entry('MP', '2×12km @ MP, 2min', 6),
            ),
            'mixed': (_entry('Nell Rojas', '10@MP, 4@10K, 5@HM', 8),),
            'progressive': (_entry('Progressive', '29km: last 10 @ MP', 7),),
        },
        'Endurance': {
            'threshold': (_entry('Long Tempo', '2×15km @ threshold, 3min', 7),),
            'marathon_pace': (
                _entry('MP Intro', '3×15min @ MP, 3min', 5),
                _entry('Long MP', '20km @ MP', 6),
            ),
            'progressive': (_entry('Race Sim', '32km: last 12 @ MP', 8),),
        },
    },
}

LONG_RUN_DISTANCES_KM = {
    '5k': 12,
    '10k': 16,
    'half': 20,
    'marathon': 26,
}

LONG_RUN_PHASE_SCALE = {
    TrainingPhase.TAPER: 0.7,
    TrainingPhase.PEAK: 1.1,
}

EASY_RPE = 3


def long_run_km(race_distance: RaceDistance, phase: TrainingPhase) -> int:
    """Long run distance for a race and phase (shorter in taper, longer at peak)."""
    base = LONG_RUN_DISTANCES_KM[RaceDistance(race_distance).value]
    return round_half_up(base * LONG_RUN_PHASE_SCALE.get(TrainingPhase(phase), 1.0))


def library_for(
    race_distance: RaceDistance,
    runner_type: RunnerType
) -> Dict[str, Tuple[LibraryEntry, ...]]:
    """Library categories available to a runner (empty if none)."""
    by_type = WORKOUT_LIBRARY.get(RaceDistance(race_distance).value, {})
    return by_type.get(RunnerType(runner_type).value, {})


def _entry_index(slot: WorkoutType, phase: TrainingPhase, n_entries: int) -> int:
    # Later-phase variants sit second in the library
    if n_entries < 2:
        return 0
    if slot == WorkoutType.MARATHON_PACE and phase in (TrainingPhase.PEAK, TrainingPhase.TAPER):
        return 1
    if slot == WorkoutType.RACE_PACE and phase == TrainingPhase.PEAK:
        return 1
    return 0


def instantiate_slots(
    slots: List[WorkoutType],
    race_distance: RaceDistance,
    runner_type: RunnerType,
    phase: TrainingPhase
) -> List[Workout]:
    """
    Build concrete workouts for an ordered list of slot types.

    Rules:
        long  → "Long Run", distance scaled 0.7 in taper, 1.1 at peak
        easy  → "Easy i", 6 + 2(i-1) km
        other → library entry; easy run if the runner has none

    Args:
        slots: Slot types in weekly order
        race_distance: Goal race
        runner_type: Runner archetype
        phase: Training phase

    Returns:
        Unscheduled Workout records, one per slot
    """
    phase = TrainingPhase(phase)
    library = library_for(race_distance, runner_type)

    workouts = []
    easy_count = 0

    def easy_run():
        nonlocal easy_count
        distance = 6 + easy_count * 2
        easy_count += 1
        return Workout(
            type=WorkoutType.EASY,
            name=f"Easy {easy_count}",
            description=f"{distance}km",
            target_rpe=EASY_RPE,
        )

    for slot in slots:
        slot = WorkoutType(slot)

        if slot == WorkoutType.LONG:
            workouts.append(Workout(
                type=WorkoutType.LONG,
                name="Long Run",
                description=f"{long_run_km(race_distance, phase)}km",
                target_rpe=EASY_RPE,
            ))
            continue

        if slot == WorkoutType.EASY:
            workouts.append(easy_run())
            continue

        entries = library.get(slot.value, ())
        if not entries:
            workouts.append(easy_run())
            continue

        entry = entries[_entry_index(slot, phase, len(entries))]
        workouts.append(Workout(
            type=slot,
            name=entry.name,
            description=entry.description,
            target_rpe=entry.rpe,
        ))

    return workouts
