from __future__ import annotations
from datetime import datetime, timezone
from flask import Blueprint, request, abort, current_app
from sqlalchemy import select
from saveplate import get_db
from saveplate.constants.roles import ROLE_ADMIN, ROLE_MANAGER
from saveplate.models.inventory import InventoryItem
from saveplate.models.purchase_order import PurchaseOrder, PurchaseOrderItem
from saveplate.models.vendor import Vendor
from saveplate.decorators.auth import require_roles
from saveplate.decorators.audit import audit_log
from saveplate.services.policy import (
    assert_location_access, current_role, current_user_id, filter_query_by_location, resolve_target_location,
)
from saveplate.services.purchasing import (
    PO_FSM, can_approve_order, line_total, next_order_status, next_po_number, order_totals,
)
from saveplate.utils.filters import apply_filters
from saveplate.utils.listing import cached_list, cached_item
from saveplate.utils.sorting import apply_multi_sort
from saveplate.utils.validation import (
    coerce_date, coerce_number, json_object, require_non_negative, validate_or_400,
)

po_bp = Blueprint('purchase_orders', __name__)

TERMINAL_STATUSES = (PurchaseOrder.STATUS_RECEIVED, PurchaseOrder.STATUS_CANCELLED)


def _today():
    return datetime.now(timezone.utc).date()


def _get_po_or_404(po_id: int) -> PurchaseOrder:
    po = get_db().execute(select(PurchaseOrder).where(PurchaseOrder.id == po_id)).scalar_one_or_none()
    if not po:
        abort(404)
    assert_location_access(po.location_id)
    return po


def _prefetch_status(po_id: int):
    po = get_db().execute(select(PurchaseOrder).where(PurchaseOrder.id == po_id)).scalar_one_or_none()
    if not po:
        return {}
    return {'status': po.status}


def _status_audit(action: str):
    return audit_log(action, entity='PurchaseOrder', entity_id_key='id', diff_keys=['status'],
                     pre_fetch=lambda a, kw: _prefetch_status(kw.get('po_id')), meta_keys=['po_number'])


@po_bp.get('')
@require_roles()
def list_purchase_orders():
    session = get_db()
    q = filter_query_by_location(session.query(PurchaseOrder), PurchaseOrder.location_id)
    filter_specs = {
        'status': {'choices': PurchaseOrder.ALL_STATUSES, 'op': lambda qu, v: qu.filter(PurchaseOrder.status == v)},
        'vendor_id': {'coerce': int, 'op': lambda qu, v: qu.filter(PurchaseOrder.vendor_id == v)},
        'location_id': {'coerce': int, 'op': lambda qu, v: qu.filter(PurchaseOrder.location_id == v)},
    }
    q = apply_filters(q, filter_specs, request.args)
    allowed = {
        'order_date': PurchaseOrder.order_date,
        'po_number': PurchaseOrder.po_number,
        'status': PurchaseOrder.status,
        'total': PurchaseOrder.total,
        'updated_at': PurchaseOrder.updated_at,
        'id': PurchaseOrder.id,
    }
    q = apply_multi_sort(q, request.args.get('sort'), allowed, PurchaseOrder.id, default='-order_date')
    return cached_list(q, _po_json, 'updated_at')


@po_bp.get('/<int:po_id>')
@require_roles()
def get_purchase_order(po_id: int):
    po = _get_po_or_404(po_id)
    return cached_item(_po_json(po, with_items=True), po.updated_at)


@po_bp.post('')
@require_roles()
@audit_log('PO.CREATE', entity='PurchaseOrder', entity_id_key='id', meta_keys=['po_number', 'vendor_id', 'total'])
def create_purchase_order():
    """Draft a purchase order; totals include 8% tax."""
    session = get_db()
    data = json_object()
    vendor_id = data.get('vendor_id')
    if vendor_id is None:
        abort(400, description='vendor_id required')
    try:
        vendor_id = int(vendor_id)
    except (TypeError, ValueError):
        abort(400, description='vendor_id invalid')
    vendor = session.execute(select(Vendor).where(Vendor.id == vendor_id)).scalar_one_or_none()
    if not vendor or not vendor.is_active:
        abort(400, description='vendor not found or inactive')
    location_id = resolve_target_location(data.get('location_id'))
    order_date = validate_or_400(coerce_date, data.get('order_date'), 'order_date', optional=True) or _today()
    expected = validate_or_400(coerce_date, data.get('expected_delivery_date'), 'expected_delivery_date', optional=True)
    lines = _parse_lines(session, data.get('items'), location_id)
    shipping = validate_or_400(coerce_number, data.get('shipping'), 'shipping', optional=True) or 0.0
    validate_or_400(require_non_negative, shipping, 'shipping')
    totals = order_totals([(l.quantity, l.unit_price) for l in lines], shipping)
    last = session.execute(select(PurchaseOrder.po_number).order_by(PurchaseOrder.id.desc()).limit(1)).scalar_one_or_none()
    po = PurchaseOrder(
        po_number=next_po_number(last),
        vendor_id=vendor.id,
        location_id=location_id,
        status=PurchaseOrder.STATUS_DRAFT,
        order_date=order_date,
        expected_delivery_date=expected,
        subtotal=totals.subtotal,
        tax=totals.tax,
        shipping=totals.shipping,
        total=totals.total,
        notes=data.get('notes') or None,
        created_by=current_user_id(),
        items=lines,
    )
    session.add(po); session.commit()
    current_app.logger.info('purchase order drafted: %s vendor=%s total=%.2f', po.po_number, vendor.id, po.total)
    return _po_json(po, with_items=True), 201


@po_bp.put('/<int:po_id>')
@require_roles()
@audit_log('PO.UPDATE', entity='PurchaseOrder', entity_id_key='id', meta_keys=['po_number'])
def update_purchase_order(po_id: int):
    """Edit notes and the expected delivery date; closed orders are read-only."""
    session = get_db()
    po = _get_po_or_404(po_id)
    if po.status in TERMINAL_STATUSES:
        abort(400, description=f'purchase order is {po.status}')
    data = json_object()
    if 'expected_delivery_date' in data:
        po.expected_delivery_date = validate_or_400(
            coerce_date, data['expected_delivery_date'], 'expected_delivery_date', optional=True)
    if 'notes' in data:
        po.notes = data['notes'] or None
    session.commit()
    return _po_json(po, with_items=True)


@po_bp.post('/<int:po_id>/submit')
@require_roles()
@_status_audit('PO.SUBMIT')
def submit_purchase_order(po_id: int):
    session = get_db()
    po = _get_po_or_404(po_id)
    PO_FSM.assert_can_transition(po.status, PurchaseOrder.STATUS_PENDING_MANAGER)
    po.status = PurchaseOrder.STATUS_PENDING_MANAGER
    session.commit()
    return _po_json(po)


@po_bp.post('/<int:po_id>/approve')
@require_roles(ROLE_MANAGER, ROLE_ADMIN)
@_status_audit('PO.APPROVE')
def approve_purchase_order(po_id: int):
    """Managers forward pending orders to an admin; admins approve them outright."""
    session = get_db()
    po = _get_po_or_404(po_id)
    role = current_role()
    if po.status not in (PurchaseOrder.STATUS_PENDING_MANAGER, PurchaseOrder.STATUS_PENDING_ADMIN):
        abort(400, description=f'purchase order is {po.status}, not pending approval')
    if not can_approve_order(role, po.status):
        abort(403, description='Role may not approve at this step')
    target = next_order_status(po.status, role)
    PO_FSM.assert_can_transition(po.status, target)
    po.status = target
    if target == PurchaseOrder.STATUS_APPROVED:
        po.approved_by = current_user_id()
    session.commit()
    current_app.logger.info('purchase order %s moved to %s by %s', po.po_number, target, role)
    return _po_json(po)


@po_bp.post('/<int:po_id>/place')
@require_roles(ROLE_MANAGER, ROLE_ADMIN)
@_status_audit('PO.PLACE')
def place_purchase_order(po_id: int):
    """Mark an approved order as sent to the vendor."""
    session = get_db()
    po = _get_po_or_404(po_id)
    PO_FSM.assert_can_transition(po.status, PurchaseOrder.STATUS_ORDERED)
    po.status = PurchaseOrder.STATUS_ORDERED
    session.commit()
    return _po_json(po)


@po_bp.post('/<int:po_id>/receive')
@require_roles()
@_status_audit('PO.RECEIVE')
def receive_purchase_order(po_id: int):
    """Record a delivery and add received quantities to linked inventory.

    Body: {"items": [{"id": <line id>, "received_quantity": n}]}; lines not
    listed are received in full.
    """
    session = get_db()
    po = _get_po_or_404(po_id)
    PO_FSM.assert_can_transition(po.status, PurchaseOrder.STATUS_RECEIVED)
    received = _parse_received(json_object().get('items'), po)
    for line in po.items:
        line.received_quantity = received.get(line.id, line.quantity)
        if line.inventory_item_id is not None and line.received_quantity:
            stock = session.execute(
                select(InventoryItem).where(InventoryItem.id == line.inventory_item_id)
            ).scalar_one_or_none()
            if stock is not None:
                stock.current_stock = (stock.current_stock or 0) + line.received_quantity
                stock.updated_by = current_user_id()
    po.status = PurchaseOrder.STATUS_RECEIVED
    po.actual_delivery_date = _today()
    session.commit()
    current_app.logger.info('purchase order received: %s', po.po_number)
    return _po_json(po, with_items=True)


@po_bp.post('/<int:po_id>/cancel')
@require_roles(ROLE_MANAGER, ROLE_ADMIN)
@_status_audit('PO.CANCEL')
def cancel_purchase_order(po_id: int):
    session = get_db()
    po = _get_po_or_404(po_id)
    PO_FSM.assert_can_transition(po.status, PurchaseOrder.STATUS_CANCELLED)
    po.status = PurchaseOrder.STATUS_CANCELLED
    session.commit()
    return _po_json(po)


def _parse_lines(session, raw, location_id: int):
    if not isinstance(raw, list) or not raw:
        abort(400, description='items must be a non-empty list')
    lines = []
    for entry in raw:
        if not isinstance(entry, dict):
            abort(400, description='each item must be an object')
        quantity = validate_or_400(coerce_number, entry.get('quantity'), 'quantity')
        unit_price = validate_or_400(coerce_number, entry.get('unit_price'), 'unit_price')
        if quantity <= 0:
            abort(400, description='quantity must be positive')
        inventory_item_id = entry.get('inventory_item_id')
        if inventory_item_id is not None:
            try:
                inventory_item_id = int(inventory_item_id)
            except (TypeError, ValueError):
                abort(400, description='inventory_item_id invalid')
            stock = session.execute(
                select(InventoryItem).where(InventoryItem.id == inventory_item_id)
            ).scalar_one_or_none()
            if not stock or stock.location_id != location_id:
                abort(400, description='inventory item not found at this location')
        line = validate_or_400(
            PurchaseOrderItem,
            inventory_item_id=inventory_item_id,
            item_name=entry.get('item_name'),
            quantity=quantity,
            unit=entry.get('unit'),
            unit_price=unit_price,
            received_quantity=0,
            notes=entry.get('notes') or None,
        )
        line.total_price = line_total(quantity, unit_price)
        lines.append(line)
    return lines


def _parse_received(raw, po: PurchaseOrder):
    if raw is None:
        return {}
    if not isinstance(raw, list):
        abort(400, description='items must be a list')
    line_ids = {line.id for line in po.items}
    received = {}
    for entry in raw:
        if not isinstance(entry, dict):
            abort(400, description='each item must be an object')
        try:
            line_id = int(entry.get('id'))
        except (TypeError, ValueError):
            abort(400, description='item id invalid')
        if line_id not in line_ids:
            abort(400, description=f'item {line_id} is not on this purchase order')
        qty = validate_or_400(coerce_number, entry.get('received_quantity'), 'received_quantity')
        received[line_id] = validate_or_400(require_non_negative, qty, 'received_quantity')
    return received


def _line_json(line: PurchaseOrderItem):
    return {
        'id': line.id,
        'inventory_item_id': line.inventory_item_id,
        'item_name': line.item_name,
        'quantity': line.quantity,
        'unit': line.unit,
        'unit_price': line.unit_price,
        'total_price': line.total_price,
        'received_quantity': line.received_quantity,
        'notes': line.notes,
    }


def _po_json(po: PurchaseOrder, with_items: bool = False):
    body = {
        'id': po.id,
        'po_number': po.po_number,
        'vendor_id': po.vendor_id,
        'location_id': po.location_id,
        'status': po.status,
        'order_date': po.order_date.isoformat() if po.order_date else None,
        'expected_delivery_date': po.expected_delivery_date.isoformat() if po.expected_delivery_date else None,
        'actual_delivery_date': po.actual_delivery_date.isoformat() if po.actual_delivery_date else None,
        'subtotal': po.subtotal,
        'tax': po.tax,
        'shipping': po.shipping,
        'total': po.total,
        'notes': po.notes,
        'created_by': po.created_by,
        'approved_by': po.approved_by,
    }
    if with_items:
        body['items'] = [_line_json(line) for line in po.items]
    return body
