import pytest
from saveplate.services.roi import estimate_savings


def test_default_bracket_matches_base():
    assert estimate_savings() == {'waste': 26000, 'vendor': 16000, 'tax': 2800, 'total': 44800}


def test_single_location_scaled_down():
    assert estimate_savings('1') == {'waste': 10400, 'vendor': 6400, 'tax': 1120, 'total': 17920}


def test_unknown_bracket():
    with pytest.raises(ValueError):
        estimate_savings('500')


def test_roi_endpoint(client):
    resp = client.get('/marketing/roi?locations=11%2B')
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['locations'] == '11+'
    assert body['savings']['total'] == 224000
    assert client.get('/marketing/roi?locations=many').status_code == 400
