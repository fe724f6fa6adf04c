"""Allowed status transitions for lifecycle models.

    PO_FSM = TransitionValidator({
        'draft': {'pending_manager', 'cancelled'},
        'pending_manager': {'pending_admin', 'approved', 'cancelled'},
        ...
    })
    PO_FSM.assert_can_transition(po.status, target)

`can_transition` is a plain check usable from services and tests;
`assert_can_transition` aborts the request with 400.
"""
from __future__ import annotations
from typing import Dict, FrozenSet, Iterable, Mapping
from flask import abort


class TransitionValidator:
    def __init__(self, graph: Mapping[str, Iterable[str]], field_name: str = 'status'):
        self.graph: Dict[str, FrozenSet[str]] = {state: frozenset(targets) for state, targets in graph.items()}
        self.field_name = field_name

    @property
    def states(self):
        return tuple(self.graph)

    def targets(self, current: str) -> FrozenSet[str]:
        return self.graph.get(current, frozenset())

    def is_terminal(self, current: str) -> bool:
        return not self.targets(current)

    def can_transition(self, current: str, target: str) -> bool:
        return target in self.targets(current)

    def assert_can_transition(self, current: str, target: str):
        if not self.can_transition(current, target):
            abort(400, description=f"Invalid {self.field_name} transition {current} -> {target}")
        return True


__all__ = ['TransitionValidator']
