from datetime import date
import pytest
from saveplate import get_db
from saveplate.models.reporting import ESGReport, Benchmark
from saveplate.utils.validation import ValidationError
from tests.test_utils_seed import ensure_location, ensure_user, jwt_headers


def _seed_reports():
    session = get_db()
    loc = ensure_location('Report Kitchen')
    if not session.query(ESGReport).filter_by(location_id=loc.id).count():
        session.add_all([
            ESGReport(location_id=loc.id, restaurant_id=1, report_type='monthly',
                      report_period_start=date(2024, 1, 1), report_period_end=date(2024, 1, 31),
                      food_waste_kg=120.5, food_waste_cost=890.0, carbon_impact_kg=301.25,
                      report_data={'diverted_kg': 40}),
            ESGReport(location_id=loc.id, restaurant_id=1, report_type='quarterly',
                      report_period_start=date(2024, 1, 1), report_period_end=date(2024, 3, 31),
                      food_waste_kg=300.0, food_waste_cost=2100.0),
            Benchmark(location_id=loc.id, period_start=date(2024, 1, 1), period_end=date(2024, 1, 31),
                      total_waste_lbs=265.0, total_waste_cost=890.0, waste_percentage_of_sales=2.4,
                      top_wasted_items=[{'name': 'Bread', 'cost': 120.0}]),
        ])
        session.commit()
    return loc


def test_report_type_validated():
    with pytest.raises(ValidationError):
        ESGReport(report_type='weekly')


def test_esg_reports_admin_only(app_instance, client):
    loc = _seed_reports()
    manager = ensure_user('rpt_mgr@example.com', role='manager', location=loc)
    admin = ensure_user('rpt_admin@example.com', role='admin')
    assert client.get('/reports/esg', headers=jwt_headers(app_instance, manager)).status_code == 403
    resp = client.get(f'/reports/esg?location_id={loc.id}&report_type=quarterly', headers=jwt_headers(app_instance, admin))
    assert resp.status_code == 200
    data = resp.get_json()['data']
    assert [r['report_type'] for r in data] == ['quarterly']
    assert data[0]['report_period_end'] == '2024-03-31'


def test_esg_report_detail(app_instance, client):
    loc = _seed_reports()
    admin = ensure_user('rpt_admin@example.com', role='admin')
    headers = jwt_headers(app_instance, admin)
    listed = client.get(f'/reports/esg?location_id={loc.id}&report_type=monthly', headers=headers).get_json()['data']
    rid = listed[0]['id']
    resp = client.get(f'/reports/esg/{rid}', headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()['report_data'] == {'diverted_kg': 40}
    assert client.get('/reports/esg/999999', headers=headers).status_code == 404
    assert client.get('/reports/esg?start=not-a-date', headers=headers).status_code == 400


def test_benchmarks_for_managers(app_instance, client):
    loc = _seed_reports()
    manager = ensure_user('rpt_mgr@example.com', role='manager', location=loc)
    operator = ensure_user('rpt_op@example.com', role='operator', location=loc)
    assert client.get('/reports/benchmarks', headers=jwt_headers(app_instance, operator)).status_code == 403
    resp = client.get(f'/reports/benchmarks?location_id={loc.id}', headers=jwt_headers(app_instance, manager))
    assert resp.status_code == 200
    rows = resp.get_json()['data']
    assert rows[0]['top_wasted_items'] == [{'name': 'Bread', 'cost': 120.0}]
