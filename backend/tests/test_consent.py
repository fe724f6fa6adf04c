import pytest
from saveplate import get_db
from saveplate.models.consent import CookieConsentRecord
from saveplate.services.consent import (
    CookieConsent, DEFAULT_CONSENT, ACCEPT_ALL, consent_from_payload, CONSENT_STORAGE_KEY,
)
from tests.test_utils_seed import ensure_user, jwt_headers


def test_default_consent_is_necessary_only():
    assert DEFAULT_CONSENT.to_dict() == {
        'necessary': True, 'analytics': False, 'marketing': False, 'third_party': False,
    }


def test_necessary_cannot_be_declined():
    assert CookieConsent(necessary=False).necessary is True
    assert CookieConsent.from_dict({'necessary': False, 'analytics': True}).necessary is True


def test_presets_and_flags():
    assert consent_from_payload({'preset': 'accept_all'}) == ACCEPT_ALL
    assert consent_from_payload({'preset': 'reject_all'}) == DEFAULT_CONSENT
    assert consent_from_payload({'marketing': True}).marketing is True
    assert consent_from_payload(None) == DEFAULT_CONSENT


@pytest.mark.parametrize('payload', [{'preset': 'maybe'}, {'analytics': 'yes'}])
def test_bad_payloads(payload):
    with pytest.raises(ValueError):
        consent_from_payload(payload)


def test_defaults_endpoint_is_public(client):
    resp = client.get('/consent/defaults')
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['consent'] == DEFAULT_CONSENT.to_dict()
    assert body['storage_key'] == CONSENT_STORAGE_KEY


def test_anonymous_consent_gets_session_id(client):
    resp = client.post('/consent', json={'analytics': True}, headers={'User-Agent': 'pytest-browser'})
    assert resp.status_code == 201
    body = resp.get_json()
    assert body['analytics'] is True and body['necessary'] is True
    assert body['session_id']
    record = get_db().query(CookieConsentRecord).filter_by(id=body['id']).one()
    assert record.user_id is None
    assert record.user_agent == 'pytest-browser'


def test_signed_in_consent_round_trip(app_instance, client):
    user = ensure_user('consent_user@example.com')
    headers = jwt_headers(app_instance, user)
    resp = client.get('/consent/me', headers=headers)
    assert resp.get_json() == {'consent': DEFAULT_CONSENT.to_dict(), 'stored': False}
    resp = client.post('/consent', json={'preset': 'accept_all'}, headers=headers)
    assert resp.status_code == 201
    assert resp.get_json()['session_id'] is None
    resp = client.get('/consent/me', headers=headers)
    assert resp.get_json() == {'consent': ACCEPT_ALL.to_dict(), 'stored': True}


def test_invalid_consent_payload(client):
    resp = client.post('/consent', json={'third_party': 1})
    assert resp.status_code == 400


def test_array_body_rejected(app_instance, client):
    assert client.post('/consent', json=['x']).status_code == 400
    headers = jwt_headers(app_instance, ensure_user('consent_array@example.com'))
    assert client.post('/consent', json=['analytics'], headers=headers).status_code == 400
    with pytest.raises(ValueError):
        consent_from_payload(['preset'])
