from tests.test_utils_seed import ensure_location, ensure_user, jwt_headers, create_waste_log


def _operator():
    loc = ensure_location('ETag Eatery')
    user = ensure_user('etag_op@example.com', role='operator', location=loc)
    return loc, user


def test_etag_conditional_waste_logs(app_instance, client):
    loc, user = _operator()
    create_waste_log(loc, user, food_item='ETag Rice')
    headers = jwt_headers(app_instance, user)
    first = client.get('/waste/logs?limit=5', headers=headers)
    assert first.status_code == 200
    etag = first.headers.get('ETag')
    assert etag
    second = client.get('/waste/logs?limit=5', headers={**headers, 'If-None-Match': etag})
    assert second.status_code == 304
    assert second.headers.get('ETag') == etag
    lm = first.headers.get('Last-Modified')
    if lm:
        third = client.get('/waste/logs?limit=5', headers={**headers, 'If-Modified-Since': lm})
        assert third.status_code == 304


def test_stale_etag_gets_full_response(app_instance, client):
    _, user = _operator()
    headers = jwt_headers(app_instance, user)
    resp = client.get('/waste/logs?limit=5', headers={**headers, 'If-None-Match': 'deadbeef'})
    assert resp.status_code == 200


def test_pagination_meta(app_instance, client):
    loc, user = _operator()
    for i in range(3):
        create_waste_log(loc, user, food_item=f'Paged {i}')
    headers = jwt_headers(app_instance, user)
    body = client.get('/waste/logs?food_item=Paged&limit=2&offset=1', headers=headers).get_json()
    assert body['pagination'] == {'total': 3, 'limit': 2, 'offset': 1, 'returned': 2}
    assert client.get('/waste/logs?limit=abc', headers=headers).status_code == 400
    capped = client.get('/waste/logs?limit=10000', headers=headers).get_json()
    assert capped['pagination']['limit'] == 200


def test_audit_log_listing_admin_only(app_instance, client):
    loc, user = _operator()
    admin = ensure_user('etag_admin@example.com', role='admin')
    assert client.get('/audit/logs', headers=jwt_headers(app_instance, user)).status_code == 403
    resp = client.get('/audit/logs?limit=5', headers=jwt_headers(app_instance, admin))
    assert resp.status_code == 200
    assert 'pagination' in resp.get_json()
