"""Reporting windows shared by the dashboard and multi-location endpoints."""

DASHBOARD_PERIODS = (30, 60, 90)
DEFAULT_DASHBOARD_PERIOD = 30
MULTI_LOCATION_WINDOW_DAYS = 30
TOP_ITEMS_LIMIT = 5
TREND_POINTS = 10


def normalize_period(raw) -> int:
    if raw in (None, ''):
        return DEFAULT_DASHBOARD_PERIOD
    try:
        period = int(raw)
    except (TypeError, ValueError):
        raise ValueError('period must be int')
    if period not in DASHBOARD_PERIODS:
        raise ValueError(f'period must be one of {list(DASHBOARD_PERIODS)}')
    return period
