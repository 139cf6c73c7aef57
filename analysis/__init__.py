"""Analysis and visualization utilities."""

from .visualizations import (
    plot_weekly_load,
    plot_plan_load,
    plot_hr_zones,
)
from .reports import (
    week_to_dataframe,
    daily_load_summary,
    plan_to_dataframe,
    generate_week_report,
    export_week_csv,
)

__all__ = [
    'plot_weekly_load',
    'plot_plan_load',
    'plot_hr_zones',
    'week_to_dataframe',
    'daily_load_summary',
    'plan_to_dataframe',
    'generate_week_report',
    'export_week_csv',
]
