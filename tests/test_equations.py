"""
Tests for the weekly plan equations.

Tests cover:
1. Runner classification (fatigue exponent, archetype, ability band)
2. Heart rate zones and workout targets
3. Slot allocation
4. Workout load and duration parsing
5. Day assignment

Run with: python -m pytest tests/test_equations.py -v
"""

import itertools
import math

import pytest

from planner.config import DEFAULT_CONFIG
from planner.profile import (
    PersonalBests,
    calculate_fatigue_exponent,
    get_runner_type,
    classify_runner,
    get_ability_band,
    infer_level,
)
from planner.zones import (
    HRProfile,
    calculate_zones,
    lthr_zones,
    get_workout_hr_target,
)
from planner.slots import (
    SlotContext,
    generate_ordered_run_slots,
    order_weekly_pattern,
    runner_type_bias,
    score_slot_types,
)
from planner.load import (
    parse_duration_minutes,
    calculate_workout_load,
    apply_workout_load,
)
from planner.scheduling import (
    DayOfWeek,
    assign_days,
    check_consecutive_hard_days,
    move_workout_to_day,
    is_hard_workout,
    format_weekly_schedule,
)
from planner.workouts import (
    Workout,
    WorkoutType,
    RaceDistance,
    RunnerType,
    TrainingPhase,
    FitnessLevel,
    QUALITY_TYPES,
)


def riegel_bests(b, t5k=1200.0):
    """Personal bests that follow T = a × D^b exactly."""
    def t(d):
        return t5k * (d / 5000.0) ** b
    return PersonalBests(k5=t5k, k10=t(10000), half=t(21097), marathon=t(42195))


def make(wtype, name=None, **kwargs):
    return Workout(type=wtype, name=name or str(wtype.value), **kwargs)


# =============================================================================
# Runner Classification Tests
# =============================================================================

class TestFatigueExponent:
    """Tests for the Riegel fatigue exponent fit."""

    def test_no_pbs_defaults(self):
        """No PBs gives the default exponent."""
        assert calculate_fatigue_exponent(PersonalBests()) == 1.06

    def test_single_pb_defaults(self):
        """One PB cannot define a slope."""
        assert calculate_fatigue_exponent(PersonalBests(k10=2500)) == 1.06

    def test_two_points(self):
        """Two PBs give the exact log-log slope."""
        b = calculate_fatigue_exponent(PersonalBests(k5=1200, k10=2500))
        assert b == pytest.approx(math.log(2500 / 1200) / math.log(2))

    def test_recovers_power_law(self):
        """PBs generated from a power law recover its exponent."""
        b = calculate_fatigue_exponent(riegel_bests(1.08))
        assert b == pytest.approx(1.08, abs=1e-9)

    def test_classification_fit_quality(self):
        """A perfect power law fits with r² = 1."""
        result = classify_runner(riegel_bests(1.15))
        assert result.n_points == 4
        assert result.r_squared == pytest.approx(1.0)
        assert result.runner_type == RunnerType.ENDURANCE

    def test_classification_two_points_no_r_squared(self):
        """Fit quality needs at least three points."""
        result = classify_runner(PersonalBests(k5=1200, k10=2500))
        assert result.r_squared is None


class TestRunnerType:
    """Tests for the archetype thresholds."""

    @pytest.mark.parametrize("b,expected", [
        (1.00, RunnerType.SPEED),
        (1.059, RunnerType.SPEED),
        (1.06, RunnerType.BALANCED),
        (1.09, RunnerType.BALANCED),
        (1.12, RunnerType.BALANCED),
        (1.15, RunnerType.ENDURANCE),
    ])
    def test_thresholds(self, b, expected):
        """Speed below 1.06, Endurance above 1.12."""
        assert get_runner_type(b) == expected

    @pytest.mark.parametrize("b", [None, 0, float('nan'), float('inf'), float('-inf')])
    def test_bad_input_is_balanced(self, b):
        """Missing or non-finite exponents are Balanced."""
        assert get_runner_type(b) == RunnerType.BALANCED


class TestAbilityBand:
    """Tests for VDOT banding."""

    @pytest.mark.parametrize("vdot,band", [
        (65, 'elite'),
        (60, 'elite'),
        (59.9, 'advanced'),
        (52, 'advanced'),
        (45, 'intermediate'),
        (38, 'novice'),
        (37.9, 'beginner'),
    ])
    def test_bands(self, vdot, band):
        assert get_ability_band(vdot) == band

    def test_infer_level_has_no_beginner(self):
        """Expected-gain levels bottom out at novice."""
        assert infer_level(30) == 'novice'
        assert infer_level(61) == 'elite'


# =============================================================================
# Heart Rate Zone Tests
# =============================================================================

class TestZones:
    """Tests for the zone cascade."""

    def test_lthr_zones(self):
        """LTHR 160 gives the documented bounds."""
        zones = lthr_zones(160)
        assert zones.method == 'lthr'
        assert (zones.z1.min, zones.z1.max) == (104, 128)
        assert (zones.z2.min, zones.z2.max) == (128, 142)
        assert (zones.z3.min, zones.z3.max) == (142, 152)
        assert (zones.z4.min, zones.z4.max) == (152, 160)
        assert (zones.z5.min, zones.z5.max) == (160, 176)

    def test_lthr_takes_priority(self):
        """LTHR wins over max/resting HR."""
        zones = calculate_zones(HRProfile(lthr=160, max_hr=190, resting_hr=50, age=40))
        assert zones.method == 'lthr'

    def test_low_lthr_falls_through_to_karvonen(self):
        """LTHR of 100 or less is ignored."""
        zones = calculate_zones(HRProfile(lthr=90, max_hr=190, resting_hr=50))
        assert zones.method == 'karvonen'
        assert (zones.z1.min, zones.z1.max) == (120, 134)
        assert (zones.z5.min, zones.z5.max) == (176, 190)

    def test_max_hr_only(self):
        """Max HR alone gives 50-100% bands."""
        zones = calculate_zones(HRProfile(max_hr=190))
        assert zones.method == 'maxhr'
        assert (zones.z1.min, zones.z1.max) == (95, 114)
        assert (zones.z3.min, zones.z3.max) == (133, 152)

    def test_resting_above_max_skips_karvonen(self):
        """Karvonen needs max above resting."""
        zones = calculate_zones(HRProfile(max_hr=190, resting_hr=200))
        assert zones.method == 'maxhr'

    def test_age_estimate(self):
        """Age uses 220 - age."""
        zones = calculate_zones(HRProfile(age=40))
        assert zones.method == 'age'
        assert (zones.z5.min, zones.z5.max) == (162, 180)

    @pytest.mark.parametrize("profile", [
        HRProfile(),
        HRProfile(age=10),
        HRProfile(age=100),
        HRProfile(max_hr=90),
    ])
    def test_no_usable_data(self, profile):
        assert calculate_zones(profile) is None

    @pytest.mark.parametrize("profile", [
        HRProfile(lthr=172),
        HRProfile(max_hr=195, resting_hr=48),
        HRProfile(max_hr=183),
        HRProfile(age=33),
    ])
    def test_zones_contiguous(self, profile):
        """Each zone starts where the previous one ends."""
        zones = calculate_zones(profile)
        bands = [zones.z1, zones.z2, zones.z3, zones.z4, zones.z5]
        for lower, upper in zip(bands, bands[1:]):
            assert lower.max == upper.min
        for band in bands:
            assert band.min <= band.max


class TestHRTargets:
    """Tests for per-workout HR targets."""

    @pytest.fixture
    def zones(self):
        return lthr_zones(160)

    def test_easy(self, zones):
        target = get_workout_hr_target('easy', zones)
        assert (target.zone, target.min, target.max) == ('Z2', 128, 142)
        assert target.label == "128-142 bpm (Z2)"

    def test_long_capped_at_z3(self, zones):
        target = get_workout_hr_target(WorkoutType.LONG, zones)
        assert target.zone == 'Z2'
        assert target.max == min(zones.z2.max, zones.z3.min)

    @pytest.mark.parametrize("wtype,zone,low,high", [
        ('threshold', 'Z4', 152, 160),
        ('marathon_pace', 'Z4', 152, 160),
        ('vo2', 'Z5', 160, 176),
        ('intervals', 'Z5', 160, 176),
        ('race_pace', 'Z3-4', 142, 160),
        ('mixed', 'Z3-4', 142, 160),
        ('progressive', 'Z3-4', 142, 160),
        ('hill_repeats', 'Z4-5', 152, 176),
    ])
    def test_table(self, zones, wtype, zone, low, high):
        target = get_workout_hr_target(wtype, zones)
        assert (target.zone, target.min, target.max) == (zone, low, high)

    @pytest.mark.parametrize("wtype", ['cross', 'gym', 'rest', 'test_run', 'bogus'])
    def test_unmapped(self, zones, wtype):
        assert get_workout_hr_target(wtype, zones) is None

    def test_no_zones(self):
        assert get_workout_hr_target('easy', None) is None


# =============================================================================
# Slot Allocation Tests
# =============================================================================

class TestSlotAllocation:
    """Tests for run slot allocation."""

    def test_half_build_example(self):
        """Balanced intermediate half runner, 5 runs in build."""
        allocation = generate_ordered_run_slots(SlotContext(
            runs_per_week=5,
            race_distance='half',
            runner_type='Balanced',
            phase='build',
            fitness_level='intermediate',
        ))
        assert allocation.slots == [
            WorkoutType.THRESHOLD, WorkoutType.EASY, WorkoutType.RACE_PACE,
            WorkoutType.EASY, WorkoutType.LONG,
        ]
        assert allocation.warnings == []
        assert allocation.quality_count == 2

    def test_marathon_pace_mandatory(self):
        """Marathon build weeks with 4+ runs include marathon pace and a long run."""
        allocation = generate_ordered_run_slots(SlotContext(
            runs_per_week=4, race_distance='marathon', phase='build',
        ))
        assert WorkoutType.MARATHON_PACE in allocation.slots
        assert allocation.slots[-1] == WorkoutType.LONG

    def test_below_minimum_warns(self):
        """Too few runs for the distance produces a warning."""
        allocation = generate_ordered_run_slots(SlotContext(
            runs_per_week=3, race_distance='marathon',
        ))
        assert len(allocation.slots) == 3
        assert len(allocation.warnings) == 1
        assert "below recommended minimum of 4" in allocation.warnings[0]

    def test_single_run(self):
        allocation = generate_ordered_run_slots(SlotContext(
            runs_per_week=1, race_distance='5k',
        ))
        assert len(allocation.slots) == 1
        assert allocation.warnings

    def test_unknown_fitness_level_uses_intermediate(self):
        """Unrecognised tiers get intermediate caps."""
        base = dict(runs_per_week=6, race_distance='10k', phase='peak')
        unknown = generate_ordered_run_slots(SlotContext(fitness_level='wizard', **base))
        intermediate = generate_ordered_run_slots(SlotContext(fitness_level='intermediate', **base))
        assert unknown.slots == intermediate.slots

    def test_fitness_level_enum(self):
        base = dict(runs_per_week=6, race_distance='5k', phase='peak')
        context = SlotContext(fitness_level=FitnessLevel.COMPETITIVE, **base)
        assert context.fitness_level == 'competitive'
        assert (generate_ordered_run_slots(context).slots
                == generate_ordered_run_slots(SlotContext(fitness_level='competitive', **base)).slots)

    def test_beginner_single_quality(self):
        allocation = generate_ordered_run_slots(SlotContext(
            runs_per_week=6, race_distance='5k', phase='peak', fitness_level='beginner',
        ))
        assert allocation.quality_count == 1
        assert WorkoutType.VO2 not in allocation.slots

    def test_invalid_context(self):
        """Malformed requests are rejected at construction."""
        with pytest.raises(ValueError):
            SlotContext(runs_per_week=0, race_distance='5k')
        with pytest.raises(ValueError):
            SlotContext(runs_per_week=4, race_distance='ultra')
        with pytest.raises(ValueError):
            SlotContext(runs_per_week=4, race_distance='5k', phase='offseason')

    def test_speed_bias_favours_endurance_work(self):
        bias = runner_type_bias(RaceDistance.HALF, RunnerType.SPEED)
        assert bias[WorkoutType.LONG] == pytest.approx(1.15)
        assert bias[WorkoutType.VO2] == pytest.approx(0.90)

    def test_scores_sorted(self):
        scores = score_slot_types(SlotContext(runs_per_week=5, race_distance='10k'))
        values = [s for _, s in scores]
        assert values == sorted(values, reverse=True)
        assert len(scores) == 10

    def test_weekly_pattern(self):
        """Quality and easy alternate, long run last."""
        ordered = order_weekly_pattern([
            WorkoutType.LONG, WorkoutType.EASY, WorkoutType.EASY,
            WorkoutType.EASY, WorkoutType.THRESHOLD, WorkoutType.VO2,
        ])
        assert ordered == [
            WorkoutType.THRESHOLD, WorkoutType.EASY, WorkoutType.VO2,
            WorkoutType.EASY, WorkoutType.EASY, WorkoutType.LONG,
        ]

    def test_invariants_across_inputs(self):
        """Length, long-run, cap and ordering rules hold for every input."""
        levels = ['total_beginner', 'beginner', 'novice', 'intermediate',
                  'advanced', 'competitive']
        for distance, runner, phase, level, runs in itertools.product(
            RaceDistance, RunnerType, TrainingPhase, levels, range(1, 8)
        ):
            allocation = generate_ordered_run_slots(SlotContext(
                runs_per_week=runs,
                race_distance=distance,
                runner_type=runner,
                phase=phase,
                fitness_level=level,
            ))
            slots = allocation.slots
            limits = DEFAULT_CONFIG.get_fitness_limits(level)

            assert len(slots) == runs
            assert slots.count(WorkoutType.LONG) <= 1
            if WorkoutType.LONG in slots:
                assert slots[-1] == WorkoutType.LONG

            assert sum(1 for s in slots if s in QUALITY_TYPES) <= limits.max_quality
            assert slots.count(WorkoutType.VO2) <= limits.max_vo2
            assert slots.count(WorkoutType.HILL_REPEATS) <= limits.max_hills

            for slot in set(slots) - {WorkoutType.EASY}:
                assert slots.count(slot) == 1


# =============================================================================
# Load Tests
# =============================================================================

class TestDurationParsing:
    """Tests for duration parsing from descriptions."""

    def test_intervals_with_recovery(self):
        assert parse_duration_minutes('vo2', '5×3min @ 5K, 2min recovery') == 23

    def test_leading_jog_is_not_recovery(self):
        """Only a recovery after the reps counts between them."""
        desc = '15min easy jog, 5×3min @ 5K, 2min recovery'
        assert parse_duration_minutes('vo2', desc) == 23

    def test_intervals_with_trailing_rest(self):
        assert parse_duration_minutes('threshold', '3×10min @ threshold, 2min') == 34

    def test_intervals_with_warmup_cooldown(self):
        desc = '10min warm up, 3×8min @ threshold w/ 2min recovery, 10min cool down'
        assert parse_duration_minutes('threshold', desc) == 48

    def test_time_at_pace(self):
        assert parse_duration_minutes('threshold', '20min @ threshold') == 20

    def test_distance_uses_pace_multiplier(self):
        assert parse_duration_minutes('long', '20km') == pytest.approx(20 * 5.5 * 1.03)

    def test_distance_with_runner_pace(self):
        assert parse_duration_minutes('easy', '10km', easy_pace_sec_per_km=300) == pytest.approx(50)

    def test_bare_minutes(self):
        assert parse_duration_minutes('cross', '45min cycling') == 45

    def test_numeric_input(self):
        assert parse_duration_minutes('easy', 37) == 37

    def test_multiline_distance_segments(self):
        desc = "2km warm up\n20min @ threshold\n2km cool down"
        assert parse_duration_minutes('threshold', desc) == pytest.approx(42)

    def test_multiline_minute_segments(self):
        desc = "10min warm-up\n5×3min @ 5K, 90s jog\n10min cool-down"
        assert parse_duration_minutes('vo2', desc) == pytest.approx(35)

    @pytest.mark.parametrize("wtype,desc,expected", [
        ('long', '', 120),
        ('threshold', None, 45),
        ('vo2', 'track session', 45),
        ('gym', 'strength circuit', 40),
        ('easy', 0, 40),
        ('easy', -5, 40),
        ('long', 0, 40),
        ('threshold', -10, 40),
    ])
    def test_defaults(self, wtype, desc, expected):
        assert parse_duration_minutes(wtype, desc) == expected


class TestWorkoutLoad:
    """Tests for the calibrated load model."""

    def test_easy_10km(self):
        """Documented example: easy 10km at 50% → 105/6/111."""
        load = calculate_workout_load('easy', '10km', 50)
        assert (load.aerobic, load.anaerobic, load.total) == (105, 6, 111)

    def test_replaced_is_zero(self):
        load = calculate_workout_load('threshold', 'Replaced by cycling', 70)
        assert (load.aerobic, load.anaerobic, load.total) == (0, 0, 0)

    def test_numeric_threshold(self):
        load = calculate_workout_load(WorkoutType.THRESHOLD, 30, 70)
        assert (load.aerobic, load.anaerobic, load.total) == (74, 32, 110)

    def test_unknown_type_default_split(self):
        load = calculate_workout_load('gym', '30min', 50)
        assert (load.aerobic, load.anaerobic, load.total) == (48, 12, 62)

    def test_missing_intensity_is_fifty(self):
        assert calculate_workout_load('easy', 40, None) == calculate_workout_load('easy', 40, 50)

    def test_out_of_table_intensity_uses_default_rate(self):
        assert calculate_workout_load('easy', 40, 150) == calculate_workout_load('easy', 40, 50)

    def test_loads_non_negative(self):
        for wtype in WorkoutType:
            load = calculate_workout_load(wtype, 'something odd', 0)
            assert load.aerobic >= 0
            assert load.anaerobic >= 0
            assert load.total >= 0

    def test_apply_returns_copy(self):
        workout = Workout(type='easy', name='Easy 1', description='10km', target_rpe=5)
        loaded = apply_workout_load(workout)
        assert (loaded.aerobic_load, loaded.anaerobic_load, loaded.total_load) == (105, 6, 111)
        assert workout.aerobic_load is None


# =============================================================================
# Scheduling Tests
# =============================================================================

class TestScheduling:
    """Tests for day assignment."""

    def test_typical_week(self):
        """Quality Tue/Thu, long Sunday, easy on free days."""
        workouts = [
            make(WorkoutType.THRESHOLD),
            make(WorkoutType.EASY, 'Easy 1'),
            make(WorkoutType.RACE_PACE),
            make(WorkoutType.EASY, 'Easy 2'),
            make(WorkoutType.LONG),
        ]
        scheduled = assign_days(workouts)
        assert [w.day_of_week for w in scheduled] == [1, 0, 3, 2, 6]
        assert scheduled[4].day_name == 'Sunday'
        assert check_consecutive_hard_days(scheduled) == []

    def test_spaced_hard_days(self):
        """Four hard sessions go Mon/Wed/Fri/Sun."""
        workouts = [
            make(WorkoutType.VO2),
            make(WorkoutType.THRESHOLD),
            make(WorkoutType.RACE_PACE),
            make(WorkoutType.LONG),
        ]
        scheduled = assign_days(workouts)
        assert [w.day_of_week for w in scheduled] == [0, 2, 4, 6]

    def test_spaced_overflow(self):
        """Extra quality sessions cycle through Tue/Thu/Sat."""
        workouts = [make(WorkoutType.LONG)] + [
            make(t) for t in (WorkoutType.VO2, WorkoutType.THRESHOLD,
                              WorkoutType.RACE_PACE, WorkoutType.MIXED,
                              WorkoutType.PROGRESSIVE)
        ]
        scheduled = assign_days(workouts)
        assert [w.day_of_week for w in scheduled] == [6, 0, 2, 4, 1, 3]

    def test_three_quality_no_long(self):
        workouts = [make(t) for t in (WorkoutType.THRESHOLD, WorkoutType.VO2,
                                      WorkoutType.RACE_PACE)]
        assert [w.day_of_week for w in assign_days(workouts)] == [1, 3, 5]

    def test_commutes_on_weekdays(self):
        workouts = [
            make(WorkoutType.THRESHOLD),
            make(WorkoutType.RACE_PACE),
            make(WorkoutType.LONG),
            make(WorkoutType.EASY, 'Commute 1', commute=True),
            make(WorkoutType.EASY, 'Commute 2', commute=True),
            make(WorkoutType.EASY, 'Commute 3', commute=True),
            make(WorkoutType.EASY, 'Easy 1'),
        ]
        scheduled = assign_days(workouts)
        assert [w.day_of_week for w in scheduled] == [1, 3, 6, 0, 2, 4, 5]

    def test_deconfliction_moves_commute(self):
        """A stacked commute moves to the free weekend day."""
        workouts = [
            make(WorkoutType.VO2),
            make(WorkoutType.THRESHOLD),
            make(WorkoutType.RACE_PACE),
            make(WorkoutType.LONG),
            make(WorkoutType.EASY, 'Commute 1', commute=True),
            make(WorkoutType.EASY, 'Commute 2', commute=True),
            make(WorkoutType.EASY, 'Commute 3', commute=True),
        ]
        scheduled = assign_days(workouts)
        assert sorted(w.day_of_week for w in scheduled) == list(range(7))
        assert scheduled[6].day_of_week == 5

    def test_no_double_booking_up_to_seven(self):
        """Weeks of seven or fewer workouts never share a day."""
        pool = [
            make(WorkoutType.LONG),
            make(WorkoutType.THRESHOLD),
            make(WorkoutType.EASY, 'Commute', commute=True),
            make(WorkoutType.CROSS, 'Bike'),
            make(WorkoutType.GYM, 'Gym'),
            make(WorkoutType.EASY, 'Easy'),
            make(WorkoutType.VO2),
        ]
        for n in range(1, 8):
            for combo in itertools.combinations(pool, n):
                days = [w.day_of_week for w in assign_days(list(combo))]
                assert len(set(days)) == len(days)

    def test_overfull_week(self):
        """More than seven workouts still all get a valid day."""
        workouts = [make(WorkoutType.LONG), make(WorkoutType.THRESHOLD)] + [
            make(WorkoutType.EASY, f'Easy {i}') for i in range(7)
        ]
        scheduled = assign_days(workouts)
        assert all(0 <= w.day_of_week <= 6 for w in scheduled)
        assert scheduled[0].day_of_week == 6

    def test_cross_avoids_hard_days_when_full(self):
        workouts = [
            make(WorkoutType.THRESHOLD),
            make(WorkoutType.RACE_PACE),
            make(WorkoutType.LONG),
        ] + [make(WorkoutType.EASY, f'Easy {i}') for i in range(4)] + [
            make(WorkoutType.CROSS, 'Swim'),
        ]
        scheduled = assign_days(workouts)
        hard_days = {w.day_of_week for w in scheduled if is_hard_workout(w.type)}
        assert scheduled[-1].day_of_week not in hard_days

    def test_input_not_mutated(self):
        workouts = [make(WorkoutType.EASY), make(WorkoutType.LONG)]
        assign_days(workouts)
        assert all(w.day_of_week is None for w in workouts)

    def test_empty_week(self):
        assert assign_days([]) == []

    def test_consecutive_warning_wraps_week(self):
        """Sunday long run followed by Monday intervals is flagged."""
        workouts = [
            make(WorkoutType.LONG, 'Long Run').on_day(6),
            make(WorkoutType.VO2, '1K').on_day(0),
        ]
        warnings = check_consecutive_hard_days(workouts)
        assert len(warnings) == 1
        assert warnings[0].level == 'critical'
        assert 'Long Run (Sunday)' in warnings[0].message

    def test_stacked_hard_warning(self):
        workouts = [
            make(WorkoutType.THRESHOLD, 'Tempo').on_day(2),
            make(WorkoutType.VO2, '800m').on_day(2),
        ]
        messages = [w.message for w in check_consecutive_hard_days(workouts)]
        assert any('Multiple hard workouts on Wednesday' in m for m in messages)

    def test_move_workout(self):
        moved = move_workout_to_day(make(WorkoutType.EASY), DayOfWeek.FRIDAY)
        assert (moved.day_of_week, moved.day_name) == (4, 'Friday')
        with pytest.raises(ValueError):
            move_workout_to_day(make(WorkoutType.EASY), 7)

    def test_hard_types(self):
        assert is_hard_workout('hill_repeats')
        assert is_hard_workout(WorkoutType.LONG)
        assert not is_hard_workout('easy')
        assert not is_hard_workout('bogus')

    def test_format(self):
        scheduled = assign_days([make(WorkoutType.LONG, 'Long Run', description='20km')])
        text = format_weekly_schedule(scheduled)
        assert 'SUNDAY' in text
        assert 'Long Run' in text
        assert 'REST' in text


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
