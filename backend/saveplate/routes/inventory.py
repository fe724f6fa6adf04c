from __future__ import annotations
from flask import Blueprint, request, abort, current_app
from sqlalchemy import select, or_
from saveplate import get_db
from saveplate.models.inventory import InventoryItem
from saveplate.models.purchase_order import PurchaseOrderItem
from saveplate.models.vendor import Vendor
from saveplate.decorators.auth import require_roles
from saveplate.decorators.audit import audit_log
from saveplate.services.inventory import DEFAULT_SAFETY_STOCK_DAYS, reorder_recommendation
from saveplate.services.policy import (
    assert_location_access, current_user_id, filter_query_by_location, resolve_target_location,
)
from saveplate.utils.filters import apply_filters
from saveplate.utils.listing import cached_list, cached_item
from saveplate.utils.sorting import apply_multi_sort
from saveplate.utils.validation import (
    coerce_date, coerce_number, json_object, require_non_negative, validate_or_400,
)

inventory_bp = Blueprint('inventory', __name__)

EDITABLE_FIELDS = (
    'name', 'category', 'current_stock', 'unit', 'reorder_point', 'reorder_quantity', 'cost_per_unit',
    'expiration_date', 'barcode', 'sku', 'supplier_id', 'notes',
)
NUMERIC_FIELDS = ('current_stock', 'reorder_point', 'reorder_quantity', 'cost_per_unit')
REQUIRED_FIELDS = ('name', 'category', 'unit')


def _as_bool(v: str) -> bool:
    lowered = v.lower()
    if lowered in ('true', '1', 'yes'):
        return True
    if lowered in ('false', '0', 'no'):
        return False
    raise ValueError(v)


def _get_item_or_404(item_id: int) -> InventoryItem:
    item = get_db().execute(select(InventoryItem).where(InventoryItem.id == item_id)).scalar_one_or_none()
    if not item:
        abort(404)
    assert_location_access(item.location_id)
    return item


@inventory_bp.get('/items')
@require_roles()
def list_items():
    session = get_db()
    q = filter_query_by_location(session.query(InventoryItem), InventoryItem.location_id)
    filter_specs = {
        'location_id': {'coerce': int, 'op': lambda qu, v: qu.filter(InventoryItem.location_id == v)},
        'category': {'op': lambda qu, v: qu.filter(InventoryItem.category == v)},
        'supplier_id': {'coerce': int, 'op': lambda qu, v: qu.filter(InventoryItem.supplier_id == v)},
        'q': {'op': lambda qu, v: qu.filter(or_(
            InventoryItem.name.ilike(f'%{v}%'),
            InventoryItem.sku.ilike(f'%{v}%'),
            InventoryItem.barcode.ilike(f'%{v}%'),
        ))},
        'low_stock': {'coerce': _as_bool, 'op': lambda qu, v: qu.filter(
            (InventoryItem.current_stock < InventoryItem.reorder_point) if v
            else (InventoryItem.current_stock >= InventoryItem.reorder_point)
        )},
    }
    q = apply_filters(q, filter_specs, request.args)
    allowed = {
        'name': InventoryItem.name,
        'category': InventoryItem.category,
        'current_stock': InventoryItem.current_stock,
        'expiration_date': InventoryItem.expiration_date,
        'updated_at': InventoryItem.updated_at,
        'id': InventoryItem.id,
    }
    q = apply_multi_sort(q, request.args.get('sort'), allowed, InventoryItem.id, default='name')
    return cached_list(q, _item_json, 'updated_at')


@inventory_bp.get('/items/low-stock')
@require_roles()
def low_stock_items():
    """Items below their reorder point, lowest stock first."""
    session = get_db()
    q = filter_query_by_location(session.query(InventoryItem), InventoryItem.location_id)
    rows = (
        q.filter(InventoryItem.current_stock < InventoryItem.reorder_point)
        .order_by(InventoryItem.current_stock.asc(), InventoryItem.id.asc())
        .all()
    )
    return {'data': [_item_json(i) for i in rows]}


@inventory_bp.get('/items/<int:item_id>')
@require_roles()
def get_item(item_id: int):
    item = _get_item_or_404(item_id)
    return cached_item(_item_json(item), item.updated_at)


@inventory_bp.post('/items')
@require_roles()
@audit_log('INVENTORY.CREATE', entity='InventoryItem', entity_id_key='id', meta_keys=['name', 'location_id'])
def create_item():
    session = get_db()
    data = json_object()
    for field in REQUIRED_FIELDS:
        if data.get(field) in (None, ''):
            abort(400, description='name, category and unit required')
    location_id = resolve_target_location(data.get('location_id'))
    item = InventoryItem(
        location_id=location_id, current_stock=0, reorder_point=0, reorder_quantity=0, cost_per_unit=0,
        updated_by=current_user_id(),
    )
    _apply_fields(item, data)
    session.add(item); session.commit()
    current_app.logger.info('inventory item created: %s at location %s', item.name, location_id)
    return _item_json(item), 201


@inventory_bp.put('/items/<int:item_id>')
@require_roles()
@audit_log('INVENTORY.UPDATE', entity='InventoryItem', entity_id_key='id', diff_keys=EDITABLE_FIELDS,
           pre_fetch=lambda a, kw: _prefetch_item(kw.get('item_id')))
def update_item(item_id: int):
    session = get_db()
    item = _get_item_or_404(item_id)
    _apply_fields(item, json_object())
    item.updated_by = current_user_id()
    session.commit()
    return _item_json(item)


@inventory_bp.post('/items/<int:item_id>/stock')
@require_roles()
@audit_log('INVENTORY.STOCK', entity='InventoryItem', entity_id_key='id', diff_keys=['current_stock'],
           pre_fetch=lambda a, kw: _prefetch_item(kw.get('item_id')))
def set_stock(item_id: int):
    """Record a stock count."""
    session = get_db()
    item = _get_item_or_404(item_id)
    data = json_object()
    if 'current_stock' not in data:
        abort(400, description='current_stock required')
    value = validate_or_400(coerce_number, data['current_stock'], 'current_stock')
    item.current_stock = validate_or_400(require_non_negative, value, 'current_stock')
    item.updated_by = current_user_id()
    session.commit()
    return _item_json(item)


@inventory_bp.delete('/items/<int:item_id>')
@require_roles()
@audit_log('INVENTORY.DELETE', entity='InventoryItem', entity_id_arg='item_id')
def delete_item(item_id: int):
    session = get_db()
    item = _get_item_or_404(item_id)
    referenced = session.execute(
        select(PurchaseOrderItem.id).where(PurchaseOrderItem.inventory_item_id == item.id)
    ).first()
    if referenced:
        abort(400, description='item is referenced by purchase orders')
    session.delete(item)
    session.commit()
    current_app.logger.info('inventory item deleted: %s', item_id)
    return '', 204


@inventory_bp.get('/items/<int:item_id>/reorder')
@require_roles()
def reorder_advice(item_id: int):
    """Whether to reorder now, given average daily usage and supplier lead time.

    lead_time_days defaults to the supplier's average delivery time.
    """
    item = _get_item_or_404(item_id)
    args = request.args
    avg_daily_sales = validate_or_400(coerce_number, args.get('avg_daily_sales'), 'avg_daily_sales')
    validate_or_400(require_non_negative, avg_daily_sales, 'avg_daily_sales')
    lead_time = args.get('lead_time_days')
    if lead_time in (None, '') and item.supplier_id is not None:
        vendor = get_db().execute(select(Vendor).where(Vendor.id == item.supplier_id)).scalar_one_or_none()
        lead_time = vendor.delivery_time_avg if vendor else None
    lead_time = validate_or_400(coerce_number, lead_time, 'lead_time_days')
    validate_or_400(require_non_negative, lead_time, 'lead_time_days')
    safety = validate_or_400(coerce_number, args.get('safety_stock_days'), 'safety_stock_days', optional=True)
    if safety is None:
        safety = DEFAULT_SAFETY_STOCK_DAYS
    validate_or_400(require_non_negative, safety, 'safety_stock_days')
    advice = reorder_recommendation(item.current_stock, avg_daily_sales, lead_time, safety)
    return dict(advice.to_dict(), item_id=item.id, current_stock=item.current_stock,
                lead_time_days=lead_time, safety_stock_days=safety)


def _apply_fields(item: InventoryItem, data: dict):
    for key in EDITABLE_FIELDS:
        if key not in data:
            continue
        value = data[key]
        if key in NUMERIC_FIELDS:
            value = validate_or_400(coerce_number, value, key)
        elif key == 'expiration_date':
            value = validate_or_400(coerce_date, value, key, optional=True)
        elif key == 'supplier_id' and value is not None:
            try:
                value = int(value)
            except (TypeError, ValueError):
                abort(400, description='supplier_id invalid')
            if not get_db().execute(select(Vendor.id).where(Vendor.id == value)).first():
                abort(400, description='supplier not found')
        validate_or_400(setattr, item, key, value)


def _item_json(item: InventoryItem):
    return {
        'id': item.id,
        'location_id': item.location_id,
        'name': item.name,
        'category': item.category,
        'current_stock': item.current_stock,
        'unit': item.unit,
        'reorder_point': item.reorder_point,
        'reorder_quantity': item.reorder_quantity,
        'cost_per_unit': item.cost_per_unit,
        'expiration_date': item.expiration_date.isoformat() if item.expiration_date else None,
        'barcode': item.barcode,
        'sku': item.sku,
        'supplier_id': item.supplier_id,
        'notes': item.notes,
        'is_low_stock': item.is_low_stock,
    }


def _prefetch_item(item_id: int):
    item = get_db().execute(select(InventoryItem).where(InventoryItem.id == item_id)).scalar_one_or_none()
    if not item:
        return {}
    return _item_json(item)
