from flask import Blueprint, request, abort, current_app
from flask_jwt_extended import create_access_token
from sqlalchemy import select
from saveplate import get_db
from saveplate.models.user import User
from saveplate.decorators.auth import require_roles, public
from saveplate.services.navigation import resolve_variant, NAV_VARIANTS, DEFAULT_VARIANT
from saveplate.services.policy import build_claims, current_user_id, current_role
from saveplate.utils.validation import json_object

auth_bp = Blueprint('auth', __name__)


@auth_bp.post('/login')
@public
def login():
    """Exchange email and password for an access token."""
    data = json_object()
    email = data.get('email'); password = data.get('password')
    if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
        abort(400, description='email & password required')
    session = get_db()
    user = session.execute(select(User).where(User.email == email.strip().lower())).scalar_one_or_none()
    if not user or not user.is_active or not user.verify_password(password):
        current_app.logger.info('login rejected for %s', email)
        abort(401, description='invalid credentials')
    claims = build_claims(user)
    # JWT identity must be a string (flask-jwt-extended v4)
    token = create_access_token(identity=str(user.id), additional_claims=claims)
    return {'access_token': token, 'role': claims['role']}


@auth_bp.get('/me')
@require_roles()
def me():
    """Current user profile with the navigation visible to its role."""
    session = get_db()
    user = session.execute(select(User).where(User.id == current_user_id())).scalar_one_or_none()
    if not user:
        abort(404)
    variant = request.args.get('variant') or DEFAULT_VARIANT
    if variant not in NAV_VARIANTS:
        abort(400, description=f'variant must be one of {sorted(NAV_VARIANTS)}')
    role = current_role()
    return {
        'id': user.id,
        'email': user.email,
        'full_name': user.full_name,
        'role': role,
        'location_id': user.location_id,
        'restaurant_id': user.restaurant_id,
        'navigation': [e.to_dict() for e in resolve_variant(variant, role)],
    }
