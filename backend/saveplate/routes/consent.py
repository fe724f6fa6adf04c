from __future__ import annotations
import uuid
from flask import Blueprint, request, abort, current_app
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity
from sqlalchemy import select
from saveplate import get_db
from saveplate.models.consent import CookieConsentRecord
from saveplate.decorators.auth import require_roles, public
from saveplate.decorators.audit import audit_log
from saveplate.services.consent import (
    CONSENT_STORAGE_KEY, CONSENT_BANNER_DISMISSED_KEY, DEFAULT_CONSENT, CookieConsent, consent_from_payload,
)
from saveplate.services.policy import current_user_id
from saveplate.utils.validation import json_object

consent_bp = Blueprint('consent', __name__)


@consent_bp.get('/defaults')
@public
def consent_defaults():
    """Preferences applied before the visitor makes a choice."""
    return {
        'consent': DEFAULT_CONSENT.to_dict(),
        'storage_key': CONSENT_STORAGE_KEY,
        'banner_dismissed_key': CONSENT_BANNER_DISMISSED_KEY,
    }


@consent_bp.post('')
@public
@audit_log('CONSENT.SAVE', entity='CookieConsent', entity_id_key='id',
           meta_keys=['analytics', 'marketing', 'third_party'])
def save_consent():
    """Record a consent choice. Signed-in users are linked; anonymous visitors get a session id."""
    verify_jwt_in_request(optional=True)
    payload = json_object()
    try:
        consent = consent_from_payload(payload)
    except ValueError as e:
        abort(400, description=str(e))
    identity = get_jwt_identity()
    user_id = int(identity) if identity is not None else None
    session_id = None
    if user_id is None:
        session_id = payload.get('session_id') or uuid.uuid4().hex
    session = get_db()
    record = CookieConsentRecord(
        user_id=user_id,
        session_id=str(session_id)[:64] if session_id else None,
        ip_address=request.remote_addr,
        user_agent=(request.headers.get('User-Agent') or '')[:512] or None,
        **consent.to_dict(),
    )
    session.add(record); session.commit()
    current_app.logger.info('consent saved: user=%s analytics=%s marketing=%s third_party=%s',
                            user_id, consent.analytics, consent.marketing, consent.third_party)
    return dict(consent.to_dict(), id=record.id, session_id=record.session_id, storage_key=CONSENT_STORAGE_KEY), 201


@consent_bp.get('/me')
@require_roles()
def my_consent():
    """Latest consent stored for the caller, or the defaults when none was saved."""
    session = get_db()
    record = session.execute(
        select(CookieConsentRecord)
        .where(CookieConsentRecord.user_id == current_user_id())
        .order_by(CookieConsentRecord.id.desc())
        .limit(1)
    ).scalar_one_or_none()
    if record is None:
        return {'consent': DEFAULT_CONSENT.to_dict(), 'stored': False}
    return {'consent': CookieConsent.from_record(record).to_dict(), 'stored': True}
