#!/usr/bin/env python3
"""
Weekly Plan Compiler - CLI Entry Point

Usage:
    python main.py plan --distance half --runs 5 [--phase build] [--weeks N] [--plot PATH]
    python main.py zones [--lthr L] [--max-hr M] [--resting-hr R] [--age A]
    python main.py load --type easy --desc "10km" [--intensity 50]
    python main.py slots --distance marathon --runs 5 [--phase build]
"""

import argparse
import json

from planner.config import DEFAULT_CONFIG, load_config
from planner.plan_engine import PlanEngine, RunnerProfile, CommuteConfig
from planner.profile import PersonalBests, classify_runner
from planner.load import calculate_workout_load
from planner.slots import SlotContext, generate_ordered_run_slots
from planner.workouts import (
    FitnessLevel,
    RaceDistance,
    RunnerType,
    TrainingPhase,
    WorkoutType,
)
from planner.zones import HRProfile, calculate_zones
from analysis.reports import generate_week_report, plan_to_dataframe


def parse_time(text):
    """Parse 'h:mm:ss', 'mm:ss' or plain seconds into seconds."""
    if text is None:
        return None
    seconds = 0.0
    for part in text.split(':'):
        seconds = seconds * 60 + float(part)
    return seconds


def build_profile(args) -> RunnerProfile:
    """Runner profile from command-line arguments."""
    pbs = PersonalBests(
        k5=parse_time(args.pb_5k),
        k10=parse_time(args.pb_10k),
        half=parse_time(args.pb_half),
        marathon=parse_time(args.pb_marathon),
    )

    commute = None
    if args.commute_days:
        commute = CommuteConfig(
            enabled=True,
            distance_km=args.commute_km,
            commute_days_per_week=args.commute_days,
            is_bidirectional=args.commute_both_ways,
        )

    return RunnerProfile(
        race_distance=RaceDistance(args.distance),
        runs_per_week=args.runs,
        fitness_level=args.level,
        runner_type=RunnerType(args.runner_type) if args.runner_type else None,
        personal_bests=pbs if pbs.available() else None,
        hr_profile=HRProfile(
            lthr=args.lthr, max_hr=args.max_hr,
            resting_hr=args.resting_hr, age=args.age,
        ),
        easy_pace_sec_per_km=args.easy_pace,
        commute=commute,
    )


def run_plan(args):
    """Compile a week (or a whole plan) and print it."""
    config = load_config(args.config) if args.config else DEFAULT_CONFIG
    engine = PlanEngine(config=config, verbose=args.verbose)
    profile = build_profile(args)

    if profile.personal_bests is not None:
        result = classify_runner(profile.personal_bests)
        print(f"Fatigue exponent: {result.fatigue_exponent:.3f} → {result.runner_type.value}")

    if args.weeks:
        plan = engine.generate_plan(profile, args.weeks)
        print(plan_to_dataframe(plan).to_string(index=False))

        if args.plot:
            from analysis.visualizations import plot_plan_load
            fig = plot_plan_load(plan)
            fig.savefig(args.plot, dpi=150, bbox_inches='tight')
            print(f"\nChart saved to: {args.plot}")
        return plan

    week = engine.generate_week(profile, TrainingPhase(args.phase), week_number=1)
    print(engine.format_week(week))

    if args.report:
        print(generate_week_report(week.workouts))

    if args.plot:
        from analysis.visualizations import plot_weekly_load
        fig = plot_weekly_load(week.workouts, title=f"Week 1 ({args.phase})")
        fig.savefig(args.plot, dpi=150, bbox_inches='tight')
        print(f"\nChart saved to: {args.plot}")

    if args.json:
        print(json.dumps(week.to_dict(), indent=2))

    return week


def run_zones(args):
    """Print heart rate zones."""
    zones = calculate_zones(HRProfile(
        lthr=args.lthr, max_hr=args.max_hr,
        resting_hr=args.resting_hr, age=args.age,
    ))
    if zones is None:
        print("Not enough heart rate data to calculate zones.")
        return None

    print(f"Method: {zones.method}")
    for name in ('z1', 'z2', 'z3', 'z4', 'z5'):
        zone = getattr(zones, name)
        print(f"  {name.upper()}: {zone.min}-{zone.max} bpm")
    return zones


def run_load(args):
    """Print the load of one workout description."""
    load = calculate_workout_load(
        WorkoutType(args.type), args.desc, args.intensity, args.easy_pace
    )
    print(f"Aerobic:   {load.aerobic}")
    print(f"Anaerobic: {load.anaerobic}")
    print(f"Total:     {load.total}")
    return load


def run_slots(args):
    """Print the slot allocation for a week."""
    allocation = generate_ordered_run_slots(SlotContext(
        runs_per_week=args.runs,
        race_distance=args.distance,
        runner_type=args.runner_type or RunnerType.BALANCED,
        phase=args.phase,
        fitness_level=args.level,
    ))
    for i, slot in enumerate(allocation.slots, 1):
        print(f"  {i}. {slot.value}")
    print(f"Quality sessions: {allocation.quality_count}")
    for warning in allocation.warnings:
        print(f"Warning: {warning}")
    return allocation


def _add_runner_args(parser):
    parser.add_argument('--distance', choices=[d.value for d in RaceDistance],
                        default='half', help='Goal race distance')
    parser.add_argument('--runs', type=int, default=4, help='Runs per week')
    parser.add_argument('--phase', choices=[p.value for p in TrainingPhase],
                        default='base', help='Training phase')
    parser.add_argument('--level', choices=[f.value for f in FitnessLevel],
                        default=FitnessLevel.INTERMEDIATE.value, help='Fitness level')
    parser.add_argument('--runner-type', choices=[t.value for t in RunnerType],
                        help='Runner type (derived from PBs if omitted)')


def _add_hr_args(parser):
    parser.add_argument('--lthr', type=float, help='Lactate threshold HR')
    parser.add_argument('--max-hr', type=float, help='Max HR')
    parser.add_argument('--resting-hr', type=float, help='Resting HR')
    parser.add_argument('--age', type=int, help='Age')


def main():
    parser = argparse.ArgumentParser(description='Weekly Plan Compiler')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Plan command
    plan_parser = subparsers.add_parser('plan', help='Compile a training week')
    _add_runner_args(plan_parser)
    _add_hr_args(plan_parser)
    plan_parser.add_argument('--pb-5k', help='5K PB (mm:ss)')
    plan_parser.add_argument('--pb-10k', help='10K PB (mm:ss)')
    plan_parser.add_argument('--pb-half', help='Half marathon PB (h:mm:ss)')
    plan_parser.add_argument('--pb-marathon', help='Marathon PB (h:mm:ss)')
    plan_parser.add_argument('--easy-pace', type=float, help='Easy pace (sec/km)')
    plan_parser.add_argument('--commute-days', type=int, default=0, help='Commute runs per week')
    plan_parser.add_argument('--commute-km', type=float, default=5.0, help='Commute distance')
    plan_parser.add_argument('--commute-both-ways', action='store_true', help='Run both ways')
    plan_parser.add_argument('--weeks', type=int, help='Compile a whole plan of N weeks')
    plan_parser.add_argument('--config', help='JSON config override file')
    plan_parser.add_argument('--plot', help='Save load chart to PATH')
    plan_parser.add_argument('--report', action='store_true', help='Print full report')
    plan_parser.add_argument('--json', action='store_true', help='Print week as JSON')
    plan_parser.add_argument('--verbose', action='store_true', help='Print progress')

    # Zones command
    zones_parser = subparsers.add_parser('zones', help='Print heart rate zones')
    _add_hr_args(zones_parser)

    # Load command
    load_parser = subparsers.add_parser('load', help='Calculate workout load')
    load_parser.add_argument('--type', choices=[t.value for t in WorkoutType],
                             default='easy', help='Workout type')
    load_parser.add_argument('--desc', required=True, help='Workout description')
    load_parser.add_argument('--intensity', type=float, default=50, help='Intensity 0-100')
    load_parser.add_argument('--easy-pace', type=float, help='Easy pace (sec/km)')

    # Slots command
    slots_parser = subparsers.add_parser('slots', help='Print slot allocation')
    _add_runner_args(slots_parser)

    args = parser.parse_args()

    if args.command == 'plan':
        run_plan(args)
    elif args.command == 'zones':
        run_zones(args)
    elif args.command == 'load':
        run_load(args)
    elif args.command == 'slots':
        run_slots(args)
    else:
        parser.print_help()


if __name__ == '__main__':
    main()
