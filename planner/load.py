"""
Workout Load: Aerobic/anaerobic training load from a workout description.

Load is calibrated against a Garmin-like training-effect scale:

    total_load = duration × rate(RPE)
    aerobic    = total_load × aerobic_ratio(type)
    anaerobic  = total_load × anaerobic_ratio(type)
    total      = aerobic + anaerobic × 1.15

Duration comes from free text. Recognised formats (first match wins):
    (a) Multi-line "warm up / main set / cool down" descriptions
    (b) Interval reps: "5×3min @ 5K, 2min recovery"
    (c) Time at pace: "20min @ threshold"
    (d) Distance: "10km" (converted at a per-type pace)
    (e) Bare time: "45min"
    (f) Type default when nothing parses
"""

from dataclasses import replace
from typing import Optional, Union
import re

from .config import PlannerConfig, DEFAULT_CONFIG
from .workouts import Workout, WorkoutLoad, round_half_up


_NUM = r'(\d+(?:\.\d+)?)'

_REPS_RE = re.compile(rf'(\d+)\s*[×x]\s*{_NUM}\s*min', re.IGNORECASE)
_RECOVERY_RE = re.compile(
    rf'{_NUM}\s*min(?:ute)?s?\s+(?:easy\s+)?(?:recovery|rest|jog|break)',
    re.IGNORECASE,
)
_TRAILING_REST_RE = re.compile(
    rf'[×x]\s*{_NUM}\s*min[^,\n]*,\s*{_NUM}\s*min(?:ute)?s?\b(?!\s*(?:easy\s+)?(?:warm|cool))',
    re.IGNORECASE,
)
_WARMUP_RE = re.compile(
    rf'{_NUM}\s*min(?:ute)?s?\s+(?:easy\s+)?warm[\s-]?up', re.IGNORECASE)
_COOLDOWN_RE = re.compile(
    rf'{_NUM}\s*min(?:ute)?s?\s+(?:easy\s+)?cool[\s-]?down', re.IGNORECASE)
_TIME_AT_PACE_RE = re.compile(rf'{_NUM}\s*min\s*@', re.IGNORECASE)
_KM_RE = re.compile(rf'{_NUM}\s*km', re.IGNORECASE)
_MIN_RE = re.compile(rf'{_NUM}\s*min', re.IGNORECASE)


def _type_key(workout_type) -> str:
    return getattr(workout_type, 'value', workout_type) or ''


def _easy_pace(easy_pace_sec_per_km: Optional[float], config: PlannerConfig) -> float:
    """Reference easy pace in min/km."""
    if easy_pace_sec_per_km:
        return easy_pace_sec_per_km / 60.0
    return config.default_easy_pace_min_per_km


def default_duration(workout_type, config: Optional[PlannerConfig] = None) -> float:
    """Fallback duration in minutes when a description cannot be parsed."""
    config = config or DEFAULT_CONFIG
    return config.default_durations.get(_type_key(workout_type), config.fallback_duration)


def _warmup_cooldown_minutes(text: str) -> float:
    extra = 0.0
    for pattern in (_WARMUP_RE, _COOLDOWN_RE):
        match = pattern.search(text)
        if match:
            extra += float(match.group(1))
    return extra


def _segment_minutes(line: str, base_pace: float) -> float:
    """Minutes for a warm-up or cool-down line at easy pace."""
    km = _KM_RE.search(line)
    if km:
        return float(km.group(1)) * base_pace
    minutes = _MIN_RE.search(line)
    if minutes:
        return float(minutes.group(1))
    return 0.0


def _parse_single(
    workout_type: str,
    text: str,
    base_pace: float,
    config: PlannerConfig
) -> Optional[float]:
    """Formats (b)-(e) on a single description; None if nothing matches."""
    reps = _REPS_RE.search(text)
    if reps:
        n_reps = int(reps.group(1))
        rep_minutes = float(reps.group(2))

        recovery_minutes = 0.0
        recovery = _RECOVERY_RE.search(text, reps.end())
        if recovery:
            recovery_minutes = float(recovery.group(1))
        else:
            trailing = _TRAILING_REST_RE.search(text, reps.start())
            if trailing:
                recovery_minutes = float(trailing.group(2))

        work = n_reps * rep_minutes + max(0, n_reps - 1) * recovery_minutes
        return work + _warmup_cooldown_minutes(text)

    at_pace = _TIME_AT_PACE_RE.search(text)
    if at_pace:
        return float(at_pace.group(1)) + _warmup_cooldown_minutes(text)

    km = _KM_RE.search(text)
    if km:
        multiplier = config.pace_multipliers.get(workout_type, 1.0)
        return float(km.group(1)) * base_pace * multiplier

    minutes = _MIN_RE.search(text)
    if minutes:
        return float(minutes.group(1))

    return None


def _is_warmup_line(line: str) -> bool:
    normalised = line.lower().replace('-', ' ')
    return 'warm up' in normalised or 'warmup' in normalised


def parse_duration_minutes(
    workout_type,
    duration_desc: Union[int, float, str, None],
    easy_pace_sec_per_km: Optional[float] = None,
    config: Optional[PlannerConfig] = None
) -> float:
    """
    Parse a workout description into a duration in minutes.

    Args:
        workout_type: Workout type (selects pace multiplier and default)
        duration_desc: Minutes as a number, or free-text description
        easy_pace_sec_per_km: Runner's easy pace (default 5.5 min/km)
        config: Table overrides (optional)

    Returns:
        Duration in minutes (always positive)
    """
    config = config or DEFAULT_CONFIG
    wtype = _type_key(workout_type)
    base_pace = _easy_pace(easy_pace_sec_per_km, config)

    duration = None

    if isinstance(duration_desc, (int, float)) and not isinstance(duration_desc, bool):
        # Non-positive minutes ignore the type default
        if duration_desc <= 0:
            return config.fallback_duration
        duration = float(duration_desc)

    elif isinstance(duration_desc, str) and duration_desc.strip():
        lines = [line.strip() for line in duration_desc.splitlines() if line.strip()]

        if len(lines) >= 2 and _is_warmup_line(lines[0]):
            main_lines = lines[1:-1] if len(lines) >= 3 else lines[1:]
            main = _parse_single(wtype, ' '.join(main_lines), base_pace, config)
            if main is None:
                main = default_duration(wtype, config)

            duration = main + _segment_minutes(lines[0], base_pace)
            if len(lines) >= 3:
                duration += _segment_minutes(lines[-1], base_pace)
        else:
            duration = _parse_single(wtype, duration_desc, base_pace, config)

    if duration is None or duration <= 0:
        duration = default_duration(wtype, config)

    return duration


def load_rate(rpe: float, config: Optional[PlannerConfig] = None) -> float:
    """Load units per minute at an RPE (rounded to the nearest table key)."""
    config = config or DEFAULT_CONFIG
    return config.load_per_min_by_intensity.get(round_half_up(rpe), config.default_load_rate)


def calculate_workout_load(
    workout_type,
    duration_desc: Union[int, float, str, None],
    intensity_pct: Optional[float],
    easy_pace_sec_per_km: Optional[float] = None,
    config: Optional[PlannerConfig] = None
) -> WorkoutLoad:
    """
    Calculate expected aerobic and anaerobic load for a workout.

    Args:
        workout_type: Workout type (unknown types use an 80/20 split)
        duration_desc: Minutes, or a free-text description
        intensity_pct: Intensity 0-100 (about RPE × 10; None = 50)
        easy_pace_sec_per_km: Runner's easy pace (optional)
        config: Table overrides (optional)

    Returns:
        WorkoutLoad with integer aerobic, anaerobic and total
    """
    config = config or DEFAULT_CONFIG
    wtype = _type_key(workout_type)

    if isinstance(duration_desc, str) and 'replaced' in duration_desc.lower():
        return WorkoutLoad(aerobic=0, anaerobic=0, total=0)

    aerobic_ratio, anaerobic_ratio = config.load_profiles.get(
        wtype, config.default_load_profile
    )

    duration = parse_duration_minutes(wtype, duration_desc, easy_pace_sec_per_km, config)

    estimated_rpe = (intensity_pct if intensity_pct is not None else 50) / 10
    total_load = duration * load_rate(estimated_rpe, config)

    aerobic_raw = total_load * aerobic_ratio
    anaerobic_raw = total_load * anaerobic_ratio

    return WorkoutLoad(
        aerobic=round_half_up(aerobic_raw),
        anaerobic=round_half_up(anaerobic_raw),
        total=round_half_up(aerobic_raw + anaerobic_raw * config.anaerobic_weight),
    )


def apply_workout_load(
    workout: Workout,
    easy_pace_sec_per_km: Optional[float] = None,
    config: Optional[PlannerConfig] = None
) -> Workout:
    """Copy of a workout with aerobic/anaerobic load filled in."""
    load = calculate_workout_load(
        workout.type,
        workout.description,
        (workout.target_rpe or 5) * 10,
        easy_pace_sec_per_km,
        config,
    )
    return replace(
        workout,
        aerobic_load=load.aerobic,
        anaerobic_load=load.anaerobic,
        total_load=load.total,
    )
