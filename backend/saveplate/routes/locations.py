from __future__ import annotations
from datetime import datetime, timedelta, timezone
from flask import Blueprint, request, abort, current_app
from sqlalchemy import select
from saveplate import get_db
from saveplate.config.reporting import MULTI_LOCATION_WINDOW_DAYS
from saveplate.constants.roles import ROLE_ADMIN, ROLE_MANAGER
from saveplate.models.location import Location
from saveplate.models.waste_log import WasteLog
from saveplate.decorators.auth import require_roles
from saveplate.decorators.audit import audit_log
from saveplate.services.policy import assert_location_access, current_location_id, filter_query_by_location
from saveplate.services.reporting import summarize_locations
from saveplate.utils.filters import apply_filters
from saveplate.utils.listing import cached_list, cached_item
from saveplate.utils.sorting import apply_multi_sort
from saveplate.utils.validation import coerce_number, json_object, require_non_negative, validate_or_400

locations_bp = Blueprint('locations', __name__)

EDITABLE_FIELDS = (
    'location_name', 'restaurant_id', 'address', 'city', 'state', 'zip_code', 'country',
    'phone', 'email', 'manager_contact', 'monthly_target_waste_percentage',
)


def _as_bool(v: str) -> bool:
    lowered = v.lower()
    if lowered in ('true', '1', 'yes'):
        return True
    if lowered in ('false', '0', 'no'):
        return False
    raise ValueError(v)


@locations_bp.get('')
@require_roles()
def list_locations():
    session = get_db()
    q = filter_query_by_location(session.query(Location), Location.id)
    filter_specs = {
        'name': {'op': lambda qu, v: qu.filter(Location.location_name.ilike(f'%{v}%'))},
        'restaurant_id': {'coerce': int, 'op': lambda qu, v: qu.filter(Location.restaurant_id == v)},
        'is_active': {'coerce': _as_bool, 'op': lambda qu, v: qu.filter(Location.is_active.is_(v))},
    }
    params = dict(request.args)
    params.setdefault('is_active', 'true')
    q = apply_filters(q, filter_specs, params)
    allowed = {
        'location_name': Location.location_name,
        'updated_at': Location.updated_at,
        'id': Location.id,
    }
    q = apply_multi_sort(q, request.args.get('sort'), allowed, Location.id, default='location_name')
    return cached_list(q, _location_json, 'updated_at')


@locations_bp.get('/mine')
@require_roles()
def my_location():
    """Location attached to the caller's account."""
    loc_id = current_location_id()
    if loc_id is None:
        abort(404, description='No location associated with your account')
    return get_location(loc_id)


@locations_bp.get('/summary')
@require_roles(ROLE_MANAGER, ROLE_ADMIN)
def locations_summary():
    """Cost and weight per active location over the trailing window, benchmarked against the average."""
    session = get_db()
    try:
        days = int(request.args.get('days') or MULTI_LOCATION_WINDOW_DAYS)
    except ValueError:
        abort(400, description='days must be int')
    if days < 1:
        abort(400, description='days must be positive')
    since = datetime.now(timezone.utc) - timedelta(days=days)
    locations = session.execute(
        select(Location).where(Location.is_active.is_(True)).order_by(Location.location_name.asc(), Location.id.asc())
    ).scalars().all()
    logs = session.execute(select(WasteLog).where(WasteLog.timestamp >= since)).scalars().all()
    return summarize_locations(locations, logs, days)


@locations_bp.get('/<int:location_id>')
@require_roles()
def get_location(location_id: int):
    session = get_db()
    loc = session.execute(select(Location).where(Location.id == location_id)).scalar_one_or_none()
    if not loc:
        abort(404)
    assert_location_access(loc.id)
    return cached_item(_location_json(loc), loc.updated_at)


@locations_bp.post('')
@require_roles(ROLE_ADMIN)
@audit_log('LOCATION.CREATE', entity='Location', entity_id_key='id', meta_keys=['location_name'])
def create_location():
    session = get_db()
    data = json_object()
    if not data.get('location_name'):
        abort(400, description='location_name required')
    loc = Location(country='US', is_active=True)
    _apply_fields(loc, data)
    session.add(loc); session.commit()
    current_app.logger.info('location created: %s (%s)', loc.location_name, loc.id)
    return _location_json(loc), 201


@locations_bp.put('/<int:location_id>')
@require_roles(ROLE_ADMIN)
@audit_log('LOCATION.UPDATE', entity='Location', entity_id_key='id', diff_keys=EDITABLE_FIELDS,
           pre_fetch=lambda a, kw: _prefetch_location(kw.get('location_id')))
def update_location(location_id: int):
    session = get_db()
    loc = session.execute(select(Location).where(Location.id == location_id)).scalar_one_or_none()
    if not loc:
        abort(404)
    data = json_object()
    if 'location_name' in data and not data['location_name']:
        abort(400, description='location_name cannot be empty')
    _apply_fields(loc, data)
    session.commit()
    return _location_json(loc)


@locations_bp.post('/<int:location_id>/deactivate')
@require_roles(ROLE_ADMIN)
@audit_log('LOCATION.DEACTIVATE', entity='Location', entity_id_key='id', meta_keys=['is_active'])
def deactivate_location(location_id: int):
    """Soft delete: the location disappears from default listings but keeps its history."""
    session = get_db()
    loc = session.execute(select(Location).where(Location.id == location_id)).scalar_one_or_none()
    if not loc:
        abort(404)
    if not loc.is_active:
        abort(400, description='already inactive')
    loc.is_active = False
    session.commit()
    current_app.logger.info('location deactivated: %s', loc.id)
    return _location_json(loc)


def _apply_fields(loc: Location, data: dict):
    for key in EDITABLE_FIELDS:
        if key not in data:
            continue
        value = data[key]
        if key == 'monthly_target_waste_percentage':
            value = validate_or_400(coerce_number, value, key, optional=True)
            validate_or_400(require_non_negative, value, key, optional=True)
        elif key == 'restaurant_id' and value is not None:
            try:
                value = int(value)
            except (TypeError, ValueError):
                abort(400, description='restaurant_id invalid')
        elif key == 'country' and value:
            value = str(value).upper()[:2]
        setattr(loc, key, value)


def _location_json(loc: Location):
    return {
        'id': loc.id,
        'restaurant_id': loc.restaurant_id,
        'location_name': loc.location_name,
        'address': loc.address,
        'city': loc.city,
        'state': loc.state,
        'zip_code': loc.zip_code,
        'country': loc.country,
        'phone': loc.phone,
        'email': loc.email,
        'manager_contact': loc.manager_contact,
        'monthly_target_waste_percentage': loc.monthly_target_waste_percentage,
        'is_active': loc.is_active,
    }


def _prefetch_location(location_id: int):
    session = get_db()
    loc = session.execute(select(Location).where(Location.id == location_id)).scalar_one_or_none()
    if not loc:
        return {}
    return _location_json(loc)
