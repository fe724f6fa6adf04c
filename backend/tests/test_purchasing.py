import pytest
from saveplate.models.purchase_order import PurchaseOrder
from saveplate.services.inventory import reorder_recommendation
from saveplate.services.purchasing import (
    PO_FSM, can_approve_order, next_order_status, next_po_number, order_totals,
)

DRAFT = PurchaseOrder.STATUS_DRAFT
PENDING_MANAGER = PurchaseOrder.STATUS_PENDING_MANAGER
PENDING_ADMIN = PurchaseOrder.STATUS_PENDING_ADMIN
APPROVED = PurchaseOrder.STATUS_APPROVED


@pytest.mark.parametrize('role,status,expected', [
    ('operator', PENDING_MANAGER, False),
    ('operator', PENDING_ADMIN, False),
    ('manager', PENDING_MANAGER, True),
    ('manager', PENDING_ADMIN, False),
    ('admin', PENDING_MANAGER, True),
    ('admin', PENDING_ADMIN, True),
    ('admin', 'unknown_status', False),
    ('admin', DRAFT, False),
    (None, PENDING_MANAGER, False),
])
def test_can_approve_order(role, status, expected):
    assert can_approve_order(role, status) is expected


@pytest.mark.parametrize('status,role,expected', [
    (DRAFT, 'operator', PENDING_MANAGER),
    (DRAFT, 'manager', PENDING_MANAGER),
    (PENDING_MANAGER, 'manager', PENDING_ADMIN),
    (PENDING_MANAGER, 'admin', APPROVED),
    (PENDING_ADMIN, 'admin', APPROVED),
    (PENDING_ADMIN, 'manager', PENDING_ADMIN),
    (PENDING_MANAGER, 'operator', PENDING_MANAGER),
    (APPROVED, 'admin', APPROVED),
])
def test_next_order_status(status, role, expected):
    assert next_order_status(status, role) == expected


def test_every_forward_step_is_an_allowed_transition():
    for status in (DRAFT, PENDING_MANAGER, PENDING_ADMIN):
        for role in ('operator', 'manager', 'admin'):
            target = next_order_status(status, role)
            if target != status:
                assert PO_FSM.can_transition(status, target)


def test_closed_orders_cannot_move():
    for status in (PurchaseOrder.STATUS_RECEIVED, PurchaseOrder.STATUS_CANCELLED):
        assert PO_FSM.is_terminal(status)
    assert not PO_FSM.can_transition(PurchaseOrder.STATUS_ORDERED, PurchaseOrder.STATUS_CANCELLED)


def test_order_totals_apply_tax():
    totals = order_totals([(2, 10.0), (3, 1.5)])
    assert totals.subtotal == 24.5
    assert totals.tax == 1.96
    assert totals.shipping == 0
    assert totals.total == 26.46
    assert order_totals([(1, 100)], shipping=5).total == 113.0


@pytest.mark.parametrize('last,expected', [
    (None, 'PO-000001'),
    ('PO-000041', 'PO-000042'),
    ('PO-999999', 'PO-1000000'),
    ('legacy-7', 'PO-000001'),
])
def test_next_po_number(last, expected):
    assert next_po_number(last) == expected


def test_reorder_when_below_reorder_point():
    advice = reorder_recommendation(10, 5, 3)
    assert advice.reorder_point == 30
    assert advice.should_reorder is True
    assert advice.recommended_quantity == 55


def test_no_reorder_above_reorder_point():
    advice = reorder_recommendation(100, 5, 3)
    assert advice.should_reorder is False
    assert advice.recommended_quantity == 0


def test_recommended_quantity_covers_an_extra_week():
    assert reorder_recommendation(0, 10, 5, 2).recommended_quantity == 140


def test_zero_daily_sales_with_stock():
    assert reorder_recommendation(100, 0, 5).should_reorder is False
