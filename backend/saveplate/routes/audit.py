from __future__ import annotations
from flask import Blueprint, request
from saveplate import get_db
from saveplate.constants.roles import ROLE_ADMIN
from saveplate.models.audit import AuditLog
from saveplate.decorators.auth import require_roles
from saveplate.utils.filters import apply_filters
from saveplate.utils.listing import cached_list, iso_z

audit_bp = Blueprint('audit', __name__)


@audit_bp.get('/logs')
@require_roles(ROLE_ADMIN)
def list_audit_logs():
    session = get_db()
    q = session.query(AuditLog)
    filter_specs = {
        'action': {'op': lambda qu, v: qu.filter(AuditLog.action == v)},
        'entity': {'op': lambda qu, v: qu.filter(AuditLog.entity == v)},
        'actor_user_id': {'coerce': int, 'op': lambda qu, v: qu.filter(AuditLog.actor_user_id == v)},
    }
    q = apply_filters(q, filter_specs, request.args)
    q = q.order_by(AuditLog.id.desc())
    return cached_list(q, _audit_json, 'created_at')


def _audit_json(a: AuditLog):
    return {
        'id': a.id,
        'actor_user_id': a.actor_user_id,
        'actor_role': a.actor_role,
        'action': a.action,
        'entity': a.entity,
        'entity_id': a.entity_id,
        'meta': a.meta or {},
        'created_at': iso_z(a.created_at) if a.created_at else None,
    }
