from __future__ import annotations
"""Waste aggregation for the location dashboard and the multi-location view.

Functions take already-loaded WasteLog / Location rows (or any objects with
the same attributes) so they stay free of query concerns.
"""
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

from saveplate.config.reporting import TOP_ITEMS_LIMIT, TREND_POINTS
from saveplate.constants.waste import LBS_PER_UNIT


def to_lbs(quantity: float, unit: str) -> Optional[float]:
    """Convert a logged quantity to pounds; None for count units ('items')."""
    factor = LBS_PER_UNIT.get(unit)
    if factor is None:
        return None
    return quantity * factor


def as_utc(dt: datetime) -> datetime:
    # SQLite hands back naive datetimes; stored values are UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _cost(log) -> float:
    return log.estimated_cost or 0.0


def _total_lbs(logs) -> float:
    total = 0.0
    for log in logs:
        lbs = to_lbs(log.quantity, log.unit)
        if lbs is not None:
            total += lbs
    return total


def percent_change(current: float, previous: float) -> float:
    if previous <= 0:
        return 0.0
    return (current - previous) / previous * 100


def summarize_dashboard(logs: Iterable[Any], period_days: int, now: Optional[datetime] = None) -> Dict[str, Any]:
    now = as_utc(now or datetime.now(timezone.utc))
    window = timedelta(days=period_days)
    current_start = now - window
    previous_start = now - 2 * window

    current: List[Any] = []
    previous: List[Any] = []
    for log in logs:
        ts = as_utc(log.timestamp)
        if current_start < ts <= now:
            current.append(log)
        elif previous_start < ts <= current_start:
            previous.append(log)

    total_cost = sum(_cost(l) for l in current)
    previous_cost = sum(_cost(l) for l in previous)

    by_category: Dict[str, float] = defaultdict(float)
    by_item: Dict[str, float] = defaultdict(float)
    by_day: Dict[str, float] = defaultdict(float)
    for log in current:
        by_category[log.waste_category] += _cost(log)
        by_item[log.food_item] += _cost(log)
        by_day[as_utc(log.timestamp).date().isoformat()] += _cost(log)

    top_items = sorted(by_item.items(), key=lambda kv: (-kv[1], kv[0]))[:TOP_ITEMS_LIMIT]
    trend = sorted(by_day.items())[-TREND_POINTS:]

    return {
        'period_days': period_days,
        'log_count': len(current),
        'total_waste_lbs': round(_total_lbs(current), 2),
        'total_cost': round(total_cost, 2),
        'by_category': [{'name': k, 'value': round(v, 2)} for k, v in sorted(by_category.items())],
        'top_items': [{'name': k, 'cost': round(v, 2)} for k, v in top_items],
        'trend': [{'date': d, 'cost': round(v, 2)} for d, v in trend],
        'previous_cost': round(previous_cost, 2),
        'percent_change': round(percent_change(total_cost, previous_cost), 1),
    }


def summarize_locations(locations: Iterable[Any], logs: Iterable[Any], days: int) -> Dict[str, Any]:
    """Per-location totals over the window plus comparison against the network average."""
    logs_by_location: Dict[int, List[Any]] = defaultdict(list)
    for log in logs:
        logs_by_location[log.location_id].append(log)

    rows: List[Dict[str, Any]] = []
    for loc in locations:
        loc_logs = logs_by_location.get(loc.id, [])
        total_cost = sum(_cost(l) for l in loc_logs)
        rows.append({
            'location_id': loc.id,
            'location_name': loc.location_name,
            'total_waste_lbs': round(_total_lbs(loc_logs), 2),
            'total_cost': round(total_cost, 2),
            'waste_count': len(loc_logs),
            'avg_cost_per_day': round(total_cost / days, 2) if days else 0.0,
            '_raw_cost': total_cost,
        })

    network_total = sum(r['_raw_cost'] for r in rows)
    average_cost = network_total / (len(rows) or 1)
    max_cost = max((r['_raw_cost'] for r in rows), default=0.0)
    for r in rows:
        raw = r.pop('_raw_cost')
        # negative means the location wastes less than average
        r['vs_average_pct'] = round(percent_change(raw, average_cost), 1)
        r['share_of_max_pct'] = round(raw / max_cost * 100, 1) if max_cost > 0 else 0.0

    return {
        'window_days': days,
        'location_count': len(rows),
        'total_cost': round(network_total, 2),
        'average_cost': round(average_cost, 2),
        'locations': rows,
    }


__all__ = ['to_lbs', 'as_utc', 'percent_change', 'summarize_dashboard', 'summarize_locations']
