from datetime import datetime, timedelta, timezone
from saveplate import get_db
from saveplate.models.audit import AuditLog
from tests.test_utils_seed import ensure_location, ensure_user, jwt_headers, create_waste_log


def _admin():
    return ensure_user('loc_admin@example.com', role='admin')


def test_admin_location_lifecycle(app_instance, client):
    headers = jwt_headers(app_instance, _admin())
    resp = client.post('/locations', json={
        'location_name': 'Lifecycle Grill', 'restaurant_id': 7, 'city': 'Austin', 'state': 'TX',
        'country': 'us', 'monthly_target_waste_percentage': 3.5,
    }, headers=headers)
    assert resp.status_code == 201
    loc = resp.get_json()
    assert loc['country'] == 'US'
    assert loc['is_active'] is True
    lid = loc['id']

    resp = client.put(f'/locations/{lid}', json={'city': 'Dallas'}, headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()['city'] == 'Dallas'
    update_audit = get_db().query(AuditLog).filter_by(action='LOCATION.UPDATE', entity_id=str(lid)).one()
    assert update_audit.meta['changes']['city'] == {'before': 'Austin', 'after': 'Dallas'}

    resp = client.post(f'/locations/{lid}/deactivate', headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()['is_active'] is False
    assert client.post(f'/locations/{lid}/deactivate', headers=headers).status_code == 400

    listed = client.get('/locations?name=Lifecycle', headers=headers).get_json()['data']
    assert listed == []
    listed = client.get('/locations?name=Lifecycle&is_active=false', headers=headers).get_json()['data']
    assert [l['id'] for l in listed] == [lid]


def test_location_validation(app_instance, client):
    headers = jwt_headers(app_instance, _admin())
    assert client.post('/locations', json={}, headers=headers).status_code == 400
    resp = client.post('/locations', json={'location_name': 'Bad Target', 'monthly_target_waste_percentage': -2},
                       headers=headers)
    assert resp.status_code == 400
    assert client.put('/locations/999999', json={'city': 'X'}, headers=headers).status_code == 404


def test_non_admin_cannot_manage_locations(app_instance, client):
    loc = ensure_location('Managed Elsewhere')
    manager = ensure_user('loc_manager@example.com', role='manager', location=loc)
    resp = client.post('/locations', json={'location_name': 'Sneaky'}, headers=jwt_headers(app_instance, manager))
    assert resp.status_code == 403
    assert resp.get_json()['error']['detail'] == 'Role not permitted'


def test_operator_sees_only_own_location(app_instance, client):
    home = ensure_location('Scope Home')
    away = ensure_location('Scope Away')
    operator = ensure_user('loc_op@example.com', role='operator', location=home)
    headers = jwt_headers(app_instance, operator)
    listed = client.get('/locations?limit=200', headers=headers).get_json()['data']
    assert [l['id'] for l in listed] == [home.id]
    assert client.get(f'/locations/{away.id}', headers=headers).status_code == 403
    mine = client.get('/locations/mine', headers=headers)
    assert mine.status_code == 200
    assert mine.get_json()['location_name'] == 'Scope Home'


def test_mine_without_location(app_instance, client):
    resp = client.get('/locations/mine', headers=jwt_headers(app_instance, _admin()))
    assert resp.status_code == 404


def test_summary_restricted_to_managers(app_instance, client):
    loc = ensure_location('Summary North')
    ensure_location('Summary South')
    operator = ensure_user('sum_op@example.com', role='operator', location=loc)
    manager = ensure_user('sum_mgr@example.com', role='manager', location=loc)
    create_waste_log(loc, operator, food_item='Summary Kale', estimated_cost=40,
                     timestamp=datetime.now(timezone.utc) - timedelta(days=3))
    assert client.get('/locations/summary', headers=jwt_headers(app_instance, operator)).status_code == 403
    resp = client.get('/locations/summary', headers=jwt_headers(app_instance, manager))
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['window_days'] == 30
    rows = {r['location_name']: r for r in body['locations']}
    assert rows['Summary North']['total_cost'] >= 40
    assert rows['Summary South']['total_cost'] == 0
    assert client.get('/locations/summary?days=0', headers=jwt_headers(app_instance, manager)).status_code == 400


def test_location_body_must_be_object(app_instance, client):
    headers = jwt_headers(app_instance, _admin())
    assert client.post('/locations', json=['Array Grill'], headers=headers).status_code == 400
    loc = ensure_location('Object Body Bistro')
    assert client.put(f'/locations/{loc.id}', json=[{'city': 'Reno'}], headers=headers).status_code == 400
