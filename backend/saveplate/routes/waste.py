from __future__ import annotations
from datetime import datetime, timedelta, timezone
from flask import Blueprint, request, abort, current_app
from sqlalchemy import select
from saveplate import get_db
from saveplate.config.reporting import normalize_period
from saveplate.constants.waste import WASTE_CATEGORIES, ROOT_CAUSES, UNITS, DEFAULT_UNIT
from saveplate.models.location import Location
from saveplate.models.waste_log import WasteLog
from saveplate.decorators.auth import require_roles
from saveplate.decorators.audit import audit_log
from saveplate.services.policy import (
    assert_location_access, current_location_id, current_user_id, filter_query_by_location,
    resolve_target_location,
)
from saveplate.services.reporting import summarize_dashboard
from saveplate.utils.filters import apply_filters
from saveplate.utils.listing import cached_list, cached_item
from saveplate.utils.sorting import apply_multi_sort
from saveplate.utils.validation import ValidationError, coerce_number, json_object

waste_bp = Blueprint('waste', __name__)


def _parse_timestamp(value: str) -> datetime:
    if not isinstance(value, str):
        raise ValueError('timestamp must be an ISO-8601 string')
    dt = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    # stored as UTC; SQLite drops the offset
    return dt.astimezone(timezone.utc)


@waste_bp.get('/options')
@require_roles()
def waste_options():
    """Enumerations offered by the waste logging form."""
    return {
        'categories': list(WASTE_CATEGORIES),
        'root_causes': list(ROOT_CAUSES),
        'units': list(UNITS),
        'default_unit': DEFAULT_UNIT,
    }


@waste_bp.post('/logs')
@require_roles()
@audit_log('WASTE.LOG', entity='WasteLog', entity_id_key='id', meta_keys=['location_id', 'waste_category', 'quantity', 'unit'])
def create_waste_log():
    session = get_db()
    data = json_object()
    for field in ('waste_category', 'food_item', 'quantity'):
        if data.get(field) in (None, ''):
            abort(400, description='waste_category, food_item and quantity required')
    location_id = resolve_target_location(data.get('location_id'))
    try:
        timestamp = _parse_timestamp(data['timestamp']) if data.get('timestamp') else datetime.now(timezone.utc)
    except (TypeError, ValueError):
        abort(400, description='timestamp invalid')
    try:
        log = WasteLog(
            location_id=location_id,
            logged_by=current_user_id(),
            timestamp=timestamp,
            waste_category=data['waste_category'],
            food_item=data['food_item'],
            quantity=coerce_number(data['quantity'], 'quantity'),
            unit=data.get('unit') or DEFAULT_UNIT,
            estimated_cost=coerce_number(data.get('estimated_cost'), 'estimated_cost', optional=True),
            photo_url=data.get('photo_url') or None,
            root_cause=data.get('root_cause') or None,
            notes=data.get('notes') or None,
        )
    except ValidationError as e:
        abort(400, description=str(e))
    session.add(log); session.commit()
    current_app.logger.info('waste logged: location=%s category=%s item=%s', location_id, log.waste_category, log.food_item)
    return _waste_log_json(log), 201


@waste_bp.get('/logs')
@require_roles()
def list_waste_logs():
    session = get_db()
    q = filter_query_by_location(session.query(WasteLog), WasteLog.location_id)
    filter_specs = {
        'location_id': {'coerce': int, 'op': lambda qu, v: qu.filter(WasteLog.location_id == v)},
        'category': {'choices': WASTE_CATEGORIES, 'op': lambda qu, v: qu.filter(WasteLog.waste_category == v)},
        'root_cause': {'choices': ROOT_CAUSES, 'op': lambda qu, v: qu.filter(WasteLog.root_cause == v)},
        'food_item': {'op': lambda qu, v: qu.filter(WasteLog.food_item.ilike(f'%{v}%'))},
        'since': {'coerce': _parse_timestamp, 'op': lambda qu, v: qu.filter(WasteLog.timestamp >= v)},
        'until': {'coerce': _parse_timestamp, 'op': lambda qu, v: qu.filter(WasteLog.timestamp <= v)},
    }
    q = apply_filters(q, filter_specs, request.args)
    allowed = {
        'timestamp': WasteLog.timestamp,
        'estimated_cost': WasteLog.estimated_cost,
        'quantity': WasteLog.quantity,
        'food_item': WasteLog.food_item,
        'id': WasteLog.id,
    }
    q = apply_multi_sort(q, request.args.get('sort'), allowed, WasteLog.id, default='-timestamp')
    return cached_list(q, _waste_log_json, 'created_at')


@waste_bp.get('/logs/<int:log_id>')
@require_roles()
def get_waste_log(log_id: int):
    session = get_db()
    log = session.execute(select(WasteLog).where(WasteLog.id == log_id)).scalar_one_or_none()
    if not log:
        abort(404)
    assert_location_access(log.location_id)
    return cached_item(_waste_log_json(log), log.created_at)


@waste_bp.get('/dashboard')
@require_roles()
def dashboard():
    """Waste totals, category split, top items and trend for one location."""
    session = get_db()
    try:
        period = normalize_period(request.args.get('period'))
    except ValueError as e:
        abort(400, description=str(e))
    raw_loc = request.args.get('location_id')
    if raw_loc:
        try:
            location_id = int(raw_loc)
        except ValueError:
            abort(400, description='location_id invalid')
    else:
        location_id = current_location_id()
        if location_id is None:
            abort(400, description='location_id required')
    assert_location_access(location_id)
    if not session.execute(select(Location.id).where(Location.id == location_id)).scalar_one_or_none():
        abort(404)
    now = datetime.now(timezone.utc)
    # two windows: the current period and the one before it for comparison
    since = now - timedelta(days=2 * period)
    logs = session.execute(
        select(WasteLog).where(WasteLog.location_id == location_id, WasteLog.timestamp > since)
    ).scalars().all()
    summary = summarize_dashboard(logs, period, now)
    summary['location_id'] = location_id
    return summary


def _waste_log_json(log: WasteLog):
    return {
        'id': log.id,
        'location_id': log.location_id,
        'logged_by': log.logged_by,
        'timestamp': log.timestamp.isoformat() if log.timestamp else None,
        'waste_category': log.waste_category,
        'food_item': log.food_item,
        'quantity': log.quantity,
        'unit': log.unit,
        'estimated_cost': log.estimated_cost,
        'photo_url': log.photo_url,
        'root_cause': log.root_cause,
        'notes': log.notes,
    }
