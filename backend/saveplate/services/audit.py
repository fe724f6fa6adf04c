from __future__ import annotations
from typing import Any, Dict, Optional
from flask_jwt_extended import get_jwt_identity, get_jwt
from saveplate import get_db
from saveplate.models.audit import AuditLog


def add_audit(action: str, entity: Optional[str] = None, entity_id: Optional[str] = None, meta: Optional[Dict[str, Any]] = None):
    """Stage an audit row in the current DB session.

    Parameters:
      action: short action code e.g. WASTE.LOG, LOCATION.CREATE, CONSENT.SAVE
      entity: optional entity name (WasteLog, Location, ...)
      entity_id: optional primary key string
      meta: JSON-safe dictionary

    Anonymous callers (consent banner) are recorded as actor 0.
    """
    session = get_db()
    claims: Dict[str, Any] = {}
    actor = None
    try:
        claims = get_jwt() or {}
        ident = get_jwt_identity()
        actor = int(ident) if ident is not None else None
    except RuntimeError:
        # no verified JWT in this request
        pass
    log = AuditLog(
        actor_user_id=actor or 0,
        actor_role=claims.get('role'),
        action=action,
        entity=entity,
        entity_id=str(entity_id) if entity_id is not None else None,
        meta=meta or {},
    )
    session.add(log)
    # caller's transaction boundary controls durability
    return log
