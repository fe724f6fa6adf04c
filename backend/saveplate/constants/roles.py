"""Closed role set used for navigation visibility and route gating.
Ordered lowest to highest privilege; roles are assigned at provisioning time and never transition.
"""
from __future__ import annotations
from typing import Optional

ROLE_OPERATOR = 'operator'
ROLE_MANAGER = 'manager'
ROLE_ADMIN = 'admin'

ROLES = (ROLE_OPERATOR, ROLE_MANAGER, ROLE_ADMIN)

# Unknown or missing roles collapse to the lowest-privilege role
DEFAULT_ROLE = ROLE_OPERATOR

# Roles that see every location instead of only their own
MULTI_LOCATION_ROLES = (ROLE_MANAGER, ROLE_ADMIN)


def normalize_role(value: Optional[str]) -> str:
    if isinstance(value, str) and value in ROLES:
        return value
    return DEFAULT_ROLE


def sees_all_locations(role: Optional[str]) -> bool:
    return normalize_role(role) in MULTI_LOCATION_ROLES
