"""Role-scoped navigation.

Each entry lists the roles allowed to see it; an empty tuple means every
role. Resolution is a pure filter: entries keep their declared order and
are only ever dropped for a role mismatch.
"""
from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Dict, Iterable, List, Optional, Tuple

from saveplate.constants.roles import ROLE_MANAGER, ROLE_ADMIN, normalize_role

# Closed set of icon keys the front-end knows how to render
ICON_KEYS = (
    'plus-circle',
    'layout-dashboard',
    'book-open',
    'building-2',
    'file-text',
    'settings',
    'users',
    'shopping-cart',
)


@dataclass(frozen=True)
class NavigationEntry:
    id: str
    label: str
    icon: str
    roles: Tuple[str, ...] = ()

    def __post_init__(self):
        if self.icon not in ICON_KEYS:
            raise ValueError(f"unknown icon key {self.icon!r} for nav entry {self.id!r}")

    def visible_to(self, role: Optional[str]) -> bool:
        return not self.roles or normalize_role(role) in self.roles

    def to_dict(self) -> Dict[str, object]:
        data = asdict(self)
        data['roles'] = list(self.roles)
        return data


_STAFF = ()
_MANAGERS = (ROLE_MANAGER, ROLE_ADMIN)
_ADMINS = (ROLE_ADMIN,)

MOBILE_NAV: Tuple[NavigationEntry, ...] = (
    NavigationEntry('log', 'Log', 'plus-circle', _STAFF),
    NavigationEntry('dashboard', 'Dashboard', 'layout-dashboard', _STAFF),
    NavigationEntry('knowledge-base', 'Help', 'book-open', _STAFF),
    NavigationEntry('multi-location', 'Locations', 'building-2', _MANAGERS),
    NavigationEntry('esg', 'Reports', 'file-text', _ADMINS),
    NavigationEntry('settings', 'Settings', 'settings', _ADMINS),
)

DESKTOP_NAV: Tuple[NavigationEntry, ...] = (
    NavigationEntry('log', 'Log Waste', 'plus-circle', _STAFF),
    NavigationEntry('dashboard', 'Dashboard', 'layout-dashboard', _STAFF),
    NavigationEntry('knowledge-base', 'Help', 'book-open', _STAFF),
    NavigationEntry('multi-location', 'All Locations', 'building-2', _MANAGERS),
    NavigationEntry('vendors', 'Vendors', 'users', _MANAGERS),
    NavigationEntry('purchase-orders', 'Purchase Orders', 'shopping-cart', _MANAGERS),
    NavigationEntry('esg', 'ESG Reports', 'file-text', _ADMINS),
    NavigationEntry('settings', 'Settings', 'settings', _ADMINS),
)

NAV_VARIANTS: Dict[str, Tuple[NavigationEntry, ...]] = {
    'mobile': MOBILE_NAV,
    'desktop': DESKTOP_NAV,
}
DEFAULT_VARIANT = 'desktop'


def resolve_navigation(entries: Iterable[NavigationEntry], role: Optional[str]) -> List[NavigationEntry]:
    """Return the entries `role` may see, in declaration order.

    Absent or unknown roles resolve as the lowest-privilege role.
    """
    current = normalize_role(role)
    return [entry for entry in entries if entry.visible_to(current)]


def resolve_variant(variant: Optional[str], role: Optional[str]) -> List[NavigationEntry]:
    """Resolve one of the declared nav lists; raises KeyError for unknown variants."""
    return resolve_navigation(NAV_VARIANTS[variant or DEFAULT_VARIANT], role)


__all__ = [
    'ICON_KEYS', 'NavigationEntry', 'MOBILE_NAV', 'DESKTOP_NAV', 'NAV_VARIANTS', 'DEFAULT_VARIANT',
    'resolve_navigation', 'resolve_variant',
]
