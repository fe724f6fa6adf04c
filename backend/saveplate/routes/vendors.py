from __future__ import annotations
from flask import Blueprint, request, abort, current_app
from sqlalchemy import select
from saveplate import get_db
from saveplate.constants.roles import ROLE_ADMIN, ROLE_MANAGER
from saveplate.models.vendor import Vendor
from saveplate.decorators.auth import require_roles
from saveplate.decorators.audit import audit_log
from saveplate.services.policy import current_user_id
from saveplate.utils.filters import apply_filters
from saveplate.utils.listing import cached_list, cached_item
from saveplate.utils.sorting import apply_multi_sort
from saveplate.utils.validation import coerce_number, json_object, require_non_negative, validate_or_400

vendors_bp = Blueprint('vendors', __name__)

EDITABLE_FIELDS = (
    'name', 'contact_name', 'email', 'phone', 'address', 'city', 'state', 'zip_code', 'country',
    'rating', 'delivery_time_avg', 'payment_terms', 'tax_id', 'website', 'notes', 'categories',
)
NUMERIC_FIELDS = ('rating', 'delivery_time_avg')


def _as_bool(v: str) -> bool:
    lowered = v.lower()
    if lowered in ('true', '1', 'yes'):
        return True
    if lowered in ('false', '0', 'no'):
        return False
    raise ValueError(v)


def _get_vendor_or_404(vendor_id: int) -> Vendor:
    v = get_db().execute(select(Vendor).where(Vendor.id == vendor_id)).scalar_one_or_none()
    if not v:
        abort(404)
    return v


@vendors_bp.get('')
@require_roles()
def list_vendors():
    session = get_db()
    q = session.query(Vendor)
    filter_specs = {
        'name': {'op': lambda qu, v: qu.filter(Vendor.name.ilike(f'%{v}%'))},
        'is_active': {'coerce': _as_bool, 'op': lambda qu, v: qu.filter(Vendor.is_active.is_(v))},
    }
    params = dict(request.args)
    params.setdefault('is_active', 'true')
    q = apply_filters(q, filter_specs, params)
    allowed = {
        'name': Vendor.name,
        'rating': Vendor.rating,
        'delivery_time_avg': Vendor.delivery_time_avg,
        'updated_at': Vendor.updated_at,
        'id': Vendor.id,
    }
    q = apply_multi_sort(q, request.args.get('sort'), allowed, Vendor.id, default='name')
    return cached_list(q, _vendor_json, 'updated_at')


@vendors_bp.get('/<int:vendor_id>')
@require_roles()
def get_vendor(vendor_id: int):
    v = _get_vendor_or_404(vendor_id)
    return cached_item(_vendor_json(v), v.updated_at)


@vendors_bp.post('')
@require_roles(ROLE_MANAGER, ROLE_ADMIN)
@audit_log('VENDOR.CREATE', entity='Vendor', entity_id_key='id', meta_keys=['name', 'email'])
def create_vendor():
    session = get_db()
    data = json_object()
    if not data.get('name') or not data.get('phone'):
        abort(400, description='name and phone required')
    _ensure_unique_name(data['name'])
    v = Vendor(country='US', rating=0, delivery_time_avg=0, is_active=True, created_by=current_user_id())
    _apply_fields(v, data)
    session.add(v); session.commit()
    current_app.logger.info('vendor created: %s (%s)', v.name, v.id)
    return _vendor_json(v), 201


@vendors_bp.put('/<int:vendor_id>')
@require_roles(ROLE_MANAGER, ROLE_ADMIN)
@audit_log('VENDOR.UPDATE', entity='Vendor', entity_id_key='id', diff_keys=EDITABLE_FIELDS,
           pre_fetch=lambda a, kw: _prefetch_vendor(kw.get('vendor_id')))
def update_vendor(vendor_id: int):
    session = get_db()
    v = _get_vendor_or_404(vendor_id)
    data = json_object()
    if 'name' in data:
        _ensure_unique_name(data['name'], exclude_id=v.id)
    _apply_fields(v, data)
    session.commit()
    return _vendor_json(v)


@vendors_bp.post('/<int:vendor_id>/activate')
@require_roles(ROLE_MANAGER, ROLE_ADMIN)
@audit_log('VENDOR.ACTIVATE', entity='Vendor', entity_id_key='id', diff_keys=['is_active'],
           pre_fetch=lambda a, kw: _prefetch_vendor(kw.get('vendor_id')))
def activate_vendor(vendor_id: int):
    session = get_db()
    v = _get_vendor_or_404(vendor_id)
    if v.is_active:
        abort(400, description='already active')
    v.is_active = True
    session.commit()
    return _vendor_json(v)


@vendors_bp.post('/<int:vendor_id>/deactivate')
@require_roles(ROLE_MANAGER, ROLE_ADMIN)
@audit_log('VENDOR.DEACTIVATE', entity='Vendor', entity_id_key='id', diff_keys=['is_active'],
           pre_fetch=lambda a, kw: _prefetch_vendor(kw.get('vendor_id')))
def deactivate_vendor(vendor_id: int):
    """Soft delete: existing purchase orders keep pointing at the vendor."""
    session = get_db()
    v = _get_vendor_or_404(vendor_id)
    if not v.is_active:
        abort(400, description='already inactive')
    v.is_active = False
    session.commit()
    current_app.logger.info('vendor deactivated: %s', v.id)
    return _vendor_json(v)


def _ensure_unique_name(name, exclude_id=None):
    if not isinstance(name, str) or not name.strip():
        abort(400, description='name cannot be empty')
    q = select(Vendor.id).where(Vendor.name == name.strip())
    if exclude_id is not None:
        q = q.where(Vendor.id != exclude_id)
    if get_db().execute(q).first():
        abort(400, description='vendor name exists')


def _apply_fields(v: Vendor, data: dict):
    for key in EDITABLE_FIELDS:
        if key not in data:
            continue
        value = data[key]
        if key in NUMERIC_FIELDS:
            value = validate_or_400(coerce_number, value, key)
            validate_or_400(require_non_negative, value, key)
            if key == 'delivery_time_avg':
                if not float(value).is_integer():
                    abort(400, description='delivery_time_avg must be a whole number of days')
                value = int(value)
        elif key == 'categories':
            if not isinstance(value, list) or not all(isinstance(c, str) for c in value):
                abort(400, description='categories must be a list of strings')
            value = sorted({c.strip() for c in value if c.strip()})
        elif key == 'country':
            value = str(value or 'US').upper()[:2]
        validate_or_400(setattr, v, key, value)


def _vendor_json(v: Vendor):
    return {
        'id': v.id,
        'name': v.name,
        'contact_name': v.contact_name,
        'email': v.email,
        'phone': v.phone,
        'address': v.address,
        'city': v.city,
        'state': v.state,
        'zip_code': v.zip_code,
        'country': v.country,
        'rating': v.rating,
        'delivery_time_avg': v.delivery_time_avg,
        'payment_terms': v.payment_terms,
        'tax_id': v.tax_id,
        'website': v.website,
        'notes': v.notes,
        'categories': list(v.categories or []),
        'is_active': v.is_active,
    }


def _prefetch_vendor(vendor_id: int):
    v = get_db().execute(select(Vendor).where(Vendor.id == vendor_id)).scalar_one_or_none()
    if not v:
        return {}
    return _vendor_json(v)
