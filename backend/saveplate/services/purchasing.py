"""Purchase order approval flow, totals and numbering.

A draft is submitted for manager review. A manager's approval forwards the
order to an admin; an admin's approval (at either pending step) approves it.
Approved orders are placed with the vendor, then received or cancelled.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Optional

from saveplate.constants.roles import ROLE_ADMIN, ROLE_MANAGER, normalize_role
from saveplate.models.purchase_order import PurchaseOrder
from saveplate.utils.fsm import TransitionValidator

TAX_RATE = 0.08
PO_NUMBER_PREFIX = 'PO-'
PO_NUMBER_DIGITS = 6

PO_FSM = TransitionValidator({
    PurchaseOrder.STATUS_DRAFT: {PurchaseOrder.STATUS_PENDING_MANAGER, PurchaseOrder.STATUS_CANCELLED},
    PurchaseOrder.STATUS_PENDING_MANAGER: {
        PurchaseOrder.STATUS_PENDING_ADMIN, PurchaseOrder.STATUS_APPROVED, PurchaseOrder.STATUS_CANCELLED,
    },
    PurchaseOrder.STATUS_PENDING_ADMIN: {PurchaseOrder.STATUS_APPROVED, PurchaseOrder.STATUS_CANCELLED},
    PurchaseOrder.STATUS_APPROVED: {PurchaseOrder.STATUS_ORDERED, PurchaseOrder.STATUS_CANCELLED},
    PurchaseOrder.STATUS_ORDERED: {PurchaseOrder.STATUS_RECEIVED},
    PurchaseOrder.STATUS_RECEIVED: set(),
    PurchaseOrder.STATUS_CANCELLED: set(),
})

# who may act on each pending step
APPROVERS = {
    PurchaseOrder.STATUS_PENDING_MANAGER: (ROLE_MANAGER, ROLE_ADMIN),
    PurchaseOrder.STATUS_PENDING_ADMIN: (ROLE_ADMIN,),
}


def can_approve_order(role: Optional[str], status: str) -> bool:
    return normalize_role(role) in APPROVERS.get(status, ())


def next_order_status(status: str, role: Optional[str]) -> str:
    """Status the order moves to when `role` pushes it forward; unchanged when it cannot."""
    role = normalize_role(role)
    if status == PurchaseOrder.STATUS_DRAFT:
        return PurchaseOrder.STATUS_PENDING_MANAGER
    if status == PurchaseOrder.STATUS_PENDING_MANAGER:
        if role == ROLE_ADMIN:
            return PurchaseOrder.STATUS_APPROVED
        if role == ROLE_MANAGER:
            return PurchaseOrder.STATUS_PENDING_ADMIN
    if status == PurchaseOrder.STATUS_PENDING_ADMIN and role == ROLE_ADMIN:
        return PurchaseOrder.STATUS_APPROVED
    return status


@dataclass(frozen=True)
class OrderTotals:
    subtotal: float
    tax: float
    shipping: float
    total: float


def line_total(quantity: float, unit_price: float) -> float:
    return round(quantity * unit_price, 2)


def order_totals(lines: Iterable[tuple], shipping: float = 0.0) -> OrderTotals:
    """lines: (quantity, unit_price) pairs."""
    subtotal = round(sum(line_total(q, p) for q, p in lines), 2)
    tax = round(subtotal * TAX_RATE, 2)
    return OrderTotals(subtotal, tax, shipping, round(subtotal + tax + shipping, 2))


def next_po_number(last: Optional[str]) -> str:
    """PO-000001, PO-000002, ... following the most recent number."""
    seq = 0
    if last and last.startswith(PO_NUMBER_PREFIX):
        try:
            seq = int(last[len(PO_NUMBER_PREFIX):])
        except ValueError:
            seq = 0
    return f'{PO_NUMBER_PREFIX}{seq + 1:0{PO_NUMBER_DIGITS}d}'


__all__ = [
    'TAX_RATE', 'PO_FSM', 'APPROVERS', 'can_approve_order', 'next_order_status',
    'OrderTotals', 'line_total', 'order_totals', 'next_po_number',
]
