from tests.test_utils_seed import ensure_location, ensure_user


def test_login_and_me_flow(client):
    loc = ensure_location('Auth Bistro')
    ensure_user('auth_manager@example.com', role='manager', location=loc, password='secret')
    resp = client.post('/auth/login', json={'email': 'Auth_Manager@Example.com', 'password': 'secret'})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['role'] == 'manager'
    token = body['access_token']
    me = client.get('/auth/me?variant=mobile', headers={'Authorization': f'Bearer {token}'})
    assert me.status_code == 200
    profile = me.get_json()
    assert profile['email'] == 'auth_manager@example.com'
    assert profile['location_id'] == loc.id
    assert [n['id'] for n in profile['navigation']] == ['log', 'dashboard', 'knowledge-base', 'multi-location']


def test_login_rejects_bad_credentials(client):
    ensure_user('auth_wrong@example.com', password='right')
    assert client.post('/auth/login', json={'email': 'auth_wrong@example.com', 'password': 'nope'}).status_code == 401
    assert client.post('/auth/login', json={'email': 'ghost@example.com', 'password': 'x'}).status_code == 401
    assert client.post('/auth/login', json={'email': 'auth_wrong@example.com'}).status_code == 400


def test_inactive_user_cannot_login(client):
    from saveplate import get_db
    u = ensure_user('auth_inactive@example.com', password='pw')
    u.is_active = False
    get_db().commit()
    assert client.post('/auth/login', json={'email': 'auth_inactive@example.com', 'password': 'pw'}).status_code == 401


def test_me_requires_token(client):
    assert client.get('/auth/me').status_code == 401
    assert client.get('/auth/me', headers={'Authorization': 'Bearer garbage'}).status_code == 422


def test_login_rejects_malformed_bodies(client):
    ensure_user('auth_shape@example.com', password='pw')
    assert client.post('/auth/login', json=['auth_shape@example.com', 'pw']).status_code == 400
    assert client.post('/auth/login', json={'email': 42, 'password': 'pw'}).status_code == 400
    assert client.post('/auth/login', json={'email': 'auth_shape@example.com', 'password': ['pw']}).status_code == 400
