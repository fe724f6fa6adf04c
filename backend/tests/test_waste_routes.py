import pytest
from flask import Flask
from saveplate import get_db
from saveplate.models.audit import AuditLog
from tests.test_utils_seed import ensure_location, ensure_user, jwt_headers, create_waste_log


@pytest.fixture()
def app_context(app_instance):
    with app_instance.app_context():
        yield app_instance


def _setup():
    home = ensure_location('Waste Home Kitchen')
    other = ensure_location('Waste Other Kitchen')
    operator = ensure_user('waste_op@example.com', role='operator', location=home)
    manager = ensure_user('waste_mgr@example.com', role='manager', location=home)
    return home, other, operator, manager


def test_options_lists_enumerations(app_context: Flask):
    client = app_context.test_client()
    _, _, operator, _ = _setup()
    resp = client.get('/waste/options', headers=jwt_headers(app_context, operator))
    assert resp.status_code == 200
    body = resp.get_json()
    assert 'Spoilage' in body['categories']
    assert 'Over-ordering' in body['root_causes']
    assert body['default_unit'] == 'lbs'


def test_operator_logs_against_own_location(app_context: Flask):
    client = app_context.test_client()
    home, _, operator, _ = _setup()
    headers = jwt_headers(app_context, operator)
    resp = client.post('/waste/logs', json={
        'waste_category': 'Prep Waste', 'food_item': 'Onion peel', 'quantity': '2.5',
        'unit': 'kg', 'estimated_cost': 3.75, 'root_cause': 'Preparation errors',
    }, headers=headers)
    assert resp.status_code == 201
    body = resp.get_json()
    assert body['location_id'] == home.id
    assert body['logged_by'] == operator.id
    assert body['quantity'] == 2.5
    audit = get_db().query(AuditLog).filter_by(action='WASTE.LOG', entity_id=str(body['id'])).one_or_none()
    assert audit is not None
    assert audit.actor_user_id == operator.id
    assert audit.meta['waste_category'] == 'Prep Waste'


def test_default_unit_applied(app_context: Flask):
    client = app_context.test_client()
    _, _, operator, _ = _setup()
    resp = client.post('/waste/logs', json={'waste_category': 'Other', 'food_item': 'Napkins', 'quantity': 0},
                       headers=jwt_headers(app_context, operator))
    assert resp.status_code == 201
    assert resp.get_json()['unit'] == 'lbs'


@pytest.mark.parametrize('payload', [
    {'food_item': 'Bread', 'quantity': 1},
    {'waste_category': 'Spoilage', 'food_item': 'Bread', 'quantity': -1},
    {'waste_category': 'Not A Category', 'food_item': 'Bread', 'quantity': 1},
    {'waste_category': 'Spoilage', 'food_item': 'Bread', 'quantity': 1, 'unit': 'bushel'},
    {'waste_category': 'Spoilage', 'food_item': 'Bread', 'quantity': 'some'},
    {'waste_category': 'Spoilage', 'food_item': 'Bread', 'quantity': 1, 'timestamp': 'yesterday'},
])
def test_invalid_payloads_rejected(app_context: Flask, payload):
    client = app_context.test_client()
    _, _, operator, _ = _setup()
    resp = client.post('/waste/logs', json=payload, headers=jwt_headers(app_context, operator))
    assert resp.status_code == 400
    assert resp.get_json()['error']['status'] == 400


def test_operator_cannot_log_for_other_location(app_context: Flask):
    client = app_context.test_client()
    _, other, operator, _ = _setup()
    resp = client.post('/waste/logs', json={
        'waste_category': 'Spoilage', 'food_item': 'Milk', 'quantity': 1, 'location_id': other.id,
    }, headers=jwt_headers(app_context, operator))
    assert resp.status_code == 403


def test_manager_may_log_for_any_location(app_context: Flask):
    client = app_context.test_client()
    _, other, _, manager = _setup()
    resp = client.post('/waste/logs', json={
        'waste_category': 'Spoilage', 'food_item': 'Milk', 'quantity': 1, 'location_id': other.id,
    }, headers=jwt_headers(app_context, manager))
    assert resp.status_code == 201
    assert resp.get_json()['location_id'] == other.id


def test_user_without_location_must_name_one(app_context: Flask):
    client = app_context.test_client()
    floating = ensure_user('waste_floating_admin@example.com', role='admin')
    resp = client.post('/waste/logs', json={'waste_category': 'Spoilage', 'food_item': 'Milk', 'quantity': 1},
                       headers=jwt_headers(app_context, floating))
    assert resp.status_code == 400


def test_list_is_scoped_for_operator(app_context: Flask):
    client = app_context.test_client()
    home, other, operator, manager = _setup()
    create_waste_log(home, operator, food_item='Scoped Carrot')
    create_waste_log(other, manager, food_item='Scoped Beet')
    resp = client.get('/waste/logs?food_item=Scoped&limit=200', headers=jwt_headers(app_context, operator))
    assert resp.status_code == 200
    items = {r['food_item'] for r in resp.get_json()['data']}
    assert 'Scoped Carrot' in items
    assert 'Scoped Beet' not in items
    resp = client.get('/waste/logs?food_item=Scoped&limit=200', headers=jwt_headers(app_context, manager))
    items = {r['food_item'] for r in resp.get_json()['data']}
    assert {'Scoped Carrot', 'Scoped Beet'} <= items


def test_list_sort_and_filters(app_context: Flask):
    client = app_context.test_client()
    home, _, operator, _ = _setup()
    create_waste_log(home, operator, food_item='Sorted Apple', estimated_cost=5)
    create_waste_log(home, operator, food_item='Sorted Pear', estimated_cost=9)
    headers = jwt_headers(app_context, operator)
    resp = client.get('/waste/logs?food_item=Sorted&sort=-estimated_cost', headers=headers)
    assert resp.status_code == 200
    names = [r['food_item'] for r in resp.get_json()['data']]
    assert names[:2] == ['Sorted Pear', 'Sorted Apple']
    assert client.get('/waste/logs?sort=-bogus', headers=headers).status_code == 400
    assert client.get('/waste/logs?category=Nope', headers=headers).status_code == 400


def test_get_single_log_enforces_location(app_context: Flask):
    client = app_context.test_client()
    home, other, operator, manager = _setup()
    foreign = create_waste_log(other, manager, food_item='Foreign Fig')
    resp = client.get(f'/waste/logs/{foreign.id}', headers=jwt_headers(app_context, operator))
    assert resp.status_code == 403
    resp = client.get(f'/waste/logs/{foreign.id}', headers=jwt_headers(app_context, manager))
    assert resp.status_code == 200
    assert resp.headers.get('ETag')
    assert client.get('/waste/logs/999999', headers=jwt_headers(app_context, manager)).status_code == 404


def test_numeric_timestamp_rejected(app_context: Flask):
    client = app_context.test_client()
    _, _, operator, _ = _setup()
    resp = client.post('/waste/logs', json={
        'waste_category': 'Spoilage', 'food_item': 'Bread', 'quantity': 1, 'timestamp': 1700000000,
    }, headers=jwt_headers(app_context, operator))
    assert resp.status_code == 400
    assert resp.get_json()['error']['detail'] == 'timestamp invalid'


@pytest.mark.parametrize('body', [['x'], 'spoilage', 42])
def test_non_object_body_rejected(app_context: Flask, body):
    client = app_context.test_client()
    _, _, operator, _ = _setup()
    resp = client.post('/waste/logs', json=body, headers=jwt_headers(app_context, operator))
    assert resp.status_code == 400
    assert resp.get_json()['error']['detail'] == 'request body must be a JSON object'
