from functools import wraps
from flask import abort
from flask_jwt_extended import verify_jwt_in_request
from saveplate.services.policy import has_role


def require_roles(*roles: str):
    """Require a valid JWT and, when roles are given, one of those roles.

    With no roles any authenticated user passes. The accepted roles are
    exposed on the view as `required_roles` for the OpenAPI builder.
    """
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            if roles and not has_role(*roles):
                abort(403, description='Role not permitted')
            return fn(*args, **kwargs)
        wrapper.required_roles = list(roles)
        return wrapper
    return outer


def public(fn):
    """Mark a view as reachable without a JWT (documentation only)."""
    fn.public = True
    return fn
