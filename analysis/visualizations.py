"""
Visualization utilities for compiled training weeks.

Provides charts for:
- Daily aerobic/anaerobic load
- Weekly load across a plan, coloured by phase
- Heart rate zone bands
"""

from typing import List, Optional, Tuple
import numpy as np

import matplotlib.pyplot as plt
from matplotlib.patches import Patch

from planner.plan_engine import Week
from planner.scheduling import is_hard_workout
from planner.workouts import Workout, TrainingPhase, DAY_NAMES
from planner.zones import HRZones

from .reports import daily_load_summary, plan_to_dataframe


PHASE_COLORS = {
    TrainingPhase.BASE.value: 'steelblue',
    TrainingPhase.BUILD.value: 'seagreen',
    TrainingPhase.PEAK.value: 'darkorange',
    TrainingPhase.TAPER.value: 'mediumpurple',
}

ZONE_COLORS = ['lightgray', 'lightblue', 'lightgreen', 'orange', 'red']


def plot_weekly_load(
    workouts: List[Workout],
    title: str = "Daily Training Load",
    figsize: Tuple[int, int] = (10, 5),
    ax: Optional[plt.Axes] = None
) -> plt.Figure:
    """
    Stacked aerobic/anaerobic load per day.

    Days holding a hard session are outlined.

    Args:
        workouts: Scheduled workouts
        title: Plot title
        figsize: Figure size
        ax: Optional existing axes

    Returns:
        Matplotlib figure
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.get_figure()

    summary = daily_load_summary(workouts)
    x = np.arange(7)

    aerobic = summary['aerobic'].to_numpy()
    anaerobic = summary['anaerobic'].to_numpy()

    ax.bar(x, aerobic, color='steelblue', label='Aerobic')
    ax.bar(x, anaerobic, bottom=aerobic, color='indianred', label='Anaerobic')

    hard_days = {
        w.day_of_week for w in workouts
        if w.day_of_week is not None and is_hard_workout(w.type)
    }
    for day in hard_days:
        ax.bar(x[day], aerobic[day] + anaerobic[day], fill=False,
               edgecolor='black', linewidth=2)

    ax.set_xticks(x)
    ax.set_xticklabels([name[:3] for name in DAY_NAMES])
    ax.set_ylabel('Load')
    ax.set_title(title)

    handles = ax.get_legend_handles_labels()[0]
    handles.append(Patch(facecolor='none', edgecolor='black', label='Hard session'))
    ax.legend(handles=handles, loc='upper left')
    ax.grid(True, axis='y', alpha=0.3)

    return fig


def plot_plan_load(
    plan: List[Week],
    title: str = "Weekly Load Across Plan",
    figsize: Tuple[int, int] = (12, 5),
    ax: Optional[plt.Axes] = None
) -> plt.Figure:
    """
    Total weekly load for each week of a plan, coloured by phase.

    Args:
        plan: Compiled weeks
        title: Plot title
        figsize: Figure size
        ax: Optional existing axes

    Returns:
        Matplotlib figure
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.get_figure()

    df = plan_to_dataframe(plan)
    if df.empty:
        ax.set_title(title)
        return fig

    colors = [PHASE_COLORS.get(phase, 'gray') for phase in df['phase']]
    ax.bar(df['week'], df['total'], color=colors)
    ax.plot(df['week'], df['aerobic'], 'k--', linewidth=1, label='Aerobic')

    ax.set_xlabel('Week')
    ax.set_ylabel('Load')
    ax.set_title(title)
    ax.set_xticks(df['week'])

    legend_elements = [
        Patch(facecolor=color, label=phase.title())
        for phase, color in PHASE_COLORS.items()
        if phase in set(df['phase'])
    ]
    ax.legend(handles=ax.get_legend_handles_labels()[0] + legend_elements,
              loc='upper left')
    ax.grid(True, axis='y', alpha=0.3)

    plt.tight_layout()
    return fig


def plot_hr_zones(
    zones: HRZones,
    title: str = "Heart Rate Zones",
    figsize: Tuple[int, int] = (8, 4),
    ax: Optional[plt.Axes] = None
) -> plt.Figure:
    """
    Horizontal bands for the five heart rate zones.

    Args:
        zones: Runner's zones
        title: Plot title
        figsize: Figure size
        ax: Optional existing axes

    Returns:
        Matplotlib figure
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.get_figure()

    bands = [zones.z1, zones.z2, zones.z3, zones.z4, zones.z5]
    labels = ['Z1', 'Z2', 'Z3', 'Z4', 'Z5']

    for i, (band, color) in enumerate(zip(bands, ZONE_COLORS)):
        ax.barh(i, band.max - band.min, left=band.min, color=color, edgecolor='black')
        ax.text(band.max + 1, i, f'{band.min}-{band.max}', va='center')

    ax.set_yticks(range(len(labels)))
    ax.set_yticklabels(labels)
    ax.set_xlabel('Heart rate (bpm)')
    ax.set_title(f"{title} ({zones.method})")

    return fig
