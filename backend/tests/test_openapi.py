def test_openapi_spec_available(client):
    resp = client.get('/openapi.json')
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['openapi'].startswith('3.')
    assert '/auth/login' in body['paths']
    assert '/waste/logs/{log_id}' in body['paths']


def test_docs_page(client):
    resp = client.get('/docs')
    assert resp.status_code == 200
    assert b'redoc' in resp.data


def test_roles_documented(client):
    paths = client.get('/openapi.json').get_json()['paths']
    assert paths['/locations']['post']['x-required-roles'] == ['admin']
    assert paths['/locations/summary']['get']['x-required-roles'] == ['manager', 'admin']
    assert paths['/waste/logs']['post']['x-required-roles'] == []
    assert paths['/auth/login']['post']['security'] == []
    assert paths['/kb/categories']['get']['security'] == []
    assert 'x-required-roles' not in paths['/healthz']['get']


def test_list_caching_headers_documented(client):
    paths = client.get('/openapi.json').get_json()['paths']
    for p in ['/waste/logs', '/locations', '/reports/esg', '/audit/logs']:
        hdrs = paths[p]['get']['responses']['200'].get('headers', {})
        for h in ['ETag', 'Last-Modified', 'X-Last-Modified-ISO']:
            assert h in hdrs, f"{p} missing header doc {h}"


def test_openapi_deterministic(client):
    first = client.get('/openapi.json').get_data()
    second = client.get('/openapi.json').get_data()
    assert first == second


def test_purchasing_endpoints_documented(client):
    paths = client.get('/openapi.json').get_json()['paths']
    assert paths['/vendors']['post']['x-required-roles'] == ['manager', 'admin']
    assert paths['/purchase-orders/{po_id}/approve']['post']['x-required-roles'] == ['manager', 'admin']
    assert paths['/inventory/items']['post']['x-required-roles'] == []
    for p in ['/vendors', '/inventory/items', '/purchase-orders']:
        hdrs = paths[p]['get']['responses']['200'].get('headers', {})
        assert 'ETag' in hdrs, f"{p} missing header doc ETag"
