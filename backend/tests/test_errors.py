def test_unknown_path_returns_error_json(client):
    resp = client.get('/non-existent-path')
    # Flask default 404 should be wrapped by error handler
    assert resp.status_code == 404
    body = resp.get_json()
    assert body['error']['status'] == 404
    assert body['error']['title'] == 'Not Found'
    assert 'detail' in body['error']


def test_internal_error_shape(client, monkeypatch):
    import saveplate.routes.marketing as marketing_mod

    def boom(bracket):
        raise RuntimeError('explode')

    monkeypatch.setattr(marketing_mod, 'estimate_savings', boom)
    resp = client.get('/marketing/roi')
    assert resp.status_code == 500
    body = resp.get_json()
    assert body['error'] == {'status': 500, 'title': 'Internal Server Error', 'detail': 'Unexpected error'}


def test_healthz(client):
    assert client.get('/healthz').get_json() == {'status': 'ok'}
