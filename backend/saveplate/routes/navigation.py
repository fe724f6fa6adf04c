from flask import Blueprint, request, abort
from saveplate.decorators.auth import require_roles
from saveplate.services.navigation import resolve_variant, NAV_VARIANTS, DEFAULT_VARIANT
from saveplate.services.policy import current_role

nav_bp = Blueprint('navigation', __name__)


@nav_bp.get('')
@require_roles()
def get_navigation():
    """Navigation entries visible to the caller's role."""
    variant = request.args.get('variant') or DEFAULT_VARIANT
    if variant not in NAV_VARIANTS:
        abort(400, description=f'variant must be one of {sorted(NAV_VARIANTS)}')
    role = current_role()
    return {
        'variant': variant,
        'role': role,
        'items': [e.to_dict() for e in resolve_variant(variant, role)],
    }
