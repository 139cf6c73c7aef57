"""
Report generation utilities for compiled training weeks.

Generates tabular summaries, plan overviews and formatted text reports.
"""

from typing import List, Optional
from datetime import datetime

import pandas as pd

from planner.plan_engine import Week
from planner.scheduling import check_consecutive_hard_days
from planner.slots import SlotAllocation
from planner.workouts import Workout, DAY_NAMES


WEEK_COLUMNS = [
    'id', 'day_of_week', 'day_name', 'type', 'name', 'description',
    'target_rpe', 'aerobic_load', 'anaerobic_load', 'total_load',
    'commute', 'hr_zone',
]


def week_to_dataframe(workouts: List[Workout]) -> pd.DataFrame:
    """
    One row per workout, ordered by day.

    Workouts sharing a day keep their input order.

    Args:
        workouts: Scheduled workouts

    Returns:
        DataFrame with WEEK_COLUMNS
    """
    rows = []
    for w in workouts:
        aerobic = w.aerobic_load or 0
        anaerobic = w.anaerobic_load or 0
        rows.append({
            'id': w.workout_id,
            'day_of_week': w.day_of_week,
            'day_name': w.day_name,
            'type': w.type.value,
            'name': w.name,
            'description': w.description,
            'target_rpe': w.target_rpe,
            'aerobic_load': aerobic,
            'anaerobic_load': anaerobic,
            'total_load': w.total_load or 0,
            'commute': w.commute,
            'hr_zone': w.hr_target.zone if w.hr_target is not None else None,
        })

    df = pd.DataFrame(rows, columns=WEEK_COLUMNS)
    if df.empty:
        return df
    return df.sort_values('day_of_week', kind='mergesort').reset_index(drop=True)


def daily_load_summary(workouts: List[Workout]) -> pd.DataFrame:
    """
    Per-day session count and load for all seven days.

    Args:
        workouts: Scheduled workouts

    Returns:
        DataFrame indexed 0-6 (Monday first) with day_name, sessions,
        aerobic, anaerobic and total columns; empty days are zero
    """
    df = week_to_dataframe(workouts)
    df = df[df['day_of_week'].notna()]

    grouped = df.groupby('day_of_week').agg(
        sessions=('name', 'count'),
        aerobic=('aerobic_load', 'sum'),
        anaerobic=('anaerobic_load', 'sum'),
        total=('total_load', 'sum'),
    )
    grouped.index = grouped.index.astype(int)

    summary = grouped.reindex(range(7), fill_value=0).astype(int)
    summary.insert(0, 'day_name', list(DAY_NAMES))
    summary.index.name = 'day_of_week'
    return summary


def plan_to_dataframe(plan: List[Week]) -> pd.DataFrame:
    """
    One row per week of a plan.

    Args:
        plan: Compiled weeks

    Returns:
        DataFrame with week, phase, runs, sessions and load totals
    """
    rows = [
        {
            'week': week.week_number,
            'phase': week.phase.value,
            'runs': week.run_count,
            'sessions': len(week.workouts),
            'aerobic': week.total_aerobic,
            'anaerobic': week.total_anaerobic,
            'total': week.total_load,
            'warnings': len(week.warnings) + len(week.schedule_warnings),
        }
        for week in plan
    ]
    return pd.DataFrame(rows)


def generate_week_report(
    workouts: List[Workout],
    allocation: Optional[SlotAllocation] = None,
    title: str = "Weekly Training Report"
) -> str:
    """
    Generate a text report for one scheduled week.

    Args:
        workouts: Scheduled workouts
        allocation: Slot allocation behind the week (optional)
        title: Report title

    Returns:
        Formatted report string
    """
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    summary = daily_load_summary(workouts)
    df = week_to_dataframe(workouts)

    report = f"""
{'='*70}
{title}
{'='*70}
Generated: {timestamp}
Sessions: {len(workouts)}
Runs: {sum(1 for w in workouts if w.is_run)}
Quality sessions: {sum(1 for w in workouts if w.is_quality)}

LOAD
----
Aerobic:                   {int(summary['aerobic'].sum()):>8d}
Anaerobic:                 {int(summary['anaerobic'].sum()):>8d}
Total:                     {int(summary['total'].sum()):>8d}
Peak day:                  {int(summary['total'].max()):>8d}
"""

    report += f"""
SCHEDULE
--------
{'Day':<10} {'Type':<14} {'Name':<22} {'Aero':>5} {'Anaer':>6} {'HR':>6}
"""
    report += "-" * 70 + "\n"

    for _, row in df.iterrows():
        zone = row['hr_zone'] if isinstance(row['hr_zone'], str) else '-'
        report += (f"{str(row['day_name'])[:10]:<10} "
                   f"{row['type']:<14} "
                   f"{str(row['name'])[:22]:<22} "
                   f"{int(row['aerobic_load']):>5d} "
                   f"{int(row['anaerobic_load']):>6d} "
                   f"{zone:>6}\n")

    rest_days = [summary.loc[d, 'day_name'] for d in range(7) if summary.loc[d, 'sessions'] == 0]
    report += f"\nRest days: {', '.join(rest_days) if rest_days else 'none'}\n"

    notes = []
    if allocation is not None:
        notes.extend(allocation.warnings)
    notes.extend(w.message for w in check_consecutive_hard_days(workouts))

    if notes:
        report += "\nWARNINGS\n--------\n"
        for note in notes:
            report += f"- {note}\n"

    report += f"\n{'='*70}\n"
    return report


def export_week_csv(workouts: List[Workout], filepath: str) -> None:
    """
    Export a scheduled week to CSV.

    Args:
        workouts: Scheduled workouts
        filepath: Output file path
    """
    week_to_dataframe(workouts).to_csv(filepath, index=False)
