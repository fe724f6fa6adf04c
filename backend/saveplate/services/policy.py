from __future__ import annotations
from typing import Optional
from flask import abort
from flask_jwt_extended import get_jwt, get_jwt_identity
from sqlalchemy import select

from saveplate.constants.roles import normalize_role, sees_all_locations


def current_role() -> str:
    claims = get_jwt()
    return normalize_role(claims.get('role'))


def current_user_id() -> int:
    return int(get_jwt_identity())


def current_location_id() -> Optional[int]:
    loc = get_jwt().get('location_id')
    return int(loc) if loc is not None else None


def has_role(*roles: str) -> bool:
    return current_role() in roles


def scoped_location_id() -> Optional[int]:
    """Location an operator is pinned to; None when the role sees every location."""
    if sees_all_locations(current_role()):
        return None
    loc = current_location_id()
    if loc is None:
        abort(403, description='No location associated with your account')
    return loc


def assert_location_access(location_id: int):
    pinned = scoped_location_id()
    if pinned is not None and pinned != location_id:
        abort(403, description='Location access denied')


def filter_query_by_location(query, model_location_column):
    """Restrict a query to the caller's location when the role is location-scoped."""
    pinned = scoped_location_id()
    if pinned is not None:
        return query.filter(model_location_column == pinned)
    return query


def build_claims(user) -> dict:
    return {
        'role': normalize_role(user.role),
        'location_id': user.location_id,
        'restaurant_id': user.restaurant_id,
    }


def resolve_target_location(requested) -> int:
    """Location a new record is filed under.

    Operators default to (and are held to) their own location; managers and
    admins may name any active one. The location must exist and be active.
    """
    from saveplate import get_db
    from saveplate.models.location import Location
    if requested is not None:
        try:
            loc_id = int(requested)
        except (TypeError, ValueError):
            abort(400, description='location_id invalid')
        assert_location_access(loc_id)
    else:
        loc_id = current_location_id()
        if loc_id is None:
            abort(400, description='No location associated with your account')
    loc = get_db().execute(select(Location).where(Location.id == loc_id)).scalar_one_or_none()
    if not loc or not loc.is_active:
        abort(400, description='location not found or inactive')
    return loc_id
