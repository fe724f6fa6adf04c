from __future__ import annotations
from datetime import date
from flask import Blueprint, request, abort
from sqlalchemy import select
from saveplate import get_db
from saveplate.constants.roles import ROLE_ADMIN, ROLE_MANAGER
from saveplate.models.reporting import ESGReport, Benchmark
from saveplate.decorators.auth import require_roles
from saveplate.services.policy import assert_location_access
from saveplate.utils.filters import apply_filters
from saveplate.utils.listing import cached_list, cached_item
from saveplate.utils.sorting import apply_multi_sort

reports_bp = Blueprint('reports', __name__)


def _parse_date(value: str) -> date:
    return date.fromisoformat(value[:10])


def _iso(d):
    return d.isoformat() if d else None


@reports_bp.get('/esg')
@require_roles(ROLE_ADMIN)
def list_esg_reports():
    """Generated ESG reports, newest period first."""
    session = get_db()
    q = session.query(ESGReport)
    filter_specs = {
        'location_id': {'coerce': int, 'op': lambda qu, v: qu.filter(ESGReport.location_id == v)},
        'restaurant_id': {'coerce': int, 'op': lambda qu, v: qu.filter(ESGReport.restaurant_id == v)},
        'report_type': {'choices': ESGReport.ALL_TYPES, 'op': lambda qu, v: qu.filter(ESGReport.report_type == v)},
        'start': {'coerce': _parse_date, 'op': lambda qu, v: qu.filter(ESGReport.report_period_start >= v)},
        'end': {'coerce': _parse_date, 'op': lambda qu, v: qu.filter(ESGReport.report_period_end <= v)},
    }
    q = apply_filters(q, filter_specs, request.args)
    allowed = {
        'report_period_start': ESGReport.report_period_start,
        'generated_at': ESGReport.generated_at,
        'food_waste_cost': ESGReport.food_waste_cost,
        'id': ESGReport.id,
    }
    q = apply_multi_sort(q, request.args.get('sort'), allowed, ESGReport.id, default='-report_period_start')
    return cached_list(q, _esg_json, 'generated_at')


@reports_bp.get('/esg/<int:report_id>')
@require_roles(ROLE_ADMIN)
def get_esg_report(report_id: int):
    session = get_db()
    report = session.execute(select(ESGReport).where(ESGReport.id == report_id)).scalar_one_or_none()
    if not report:
        abort(404)
    payload = _esg_json(report)
    payload['report_data'] = report.report_data or {}
    payload['notes'] = report.notes
    return cached_item(payload, report.generated_at)


@reports_bp.get('/benchmarks')
@require_roles(ROLE_MANAGER, ROLE_ADMIN)
def list_benchmarks():
    session = get_db()
    q = session.query(Benchmark)
    raw_loc = request.args.get('location_id')
    if raw_loc:
        try:
            assert_location_access(int(raw_loc))
        except ValueError:
            abort(400, description='location_id invalid')
    filter_specs = {
        'location_id': {'coerce': int, 'op': lambda qu, v: qu.filter(Benchmark.location_id == v)},
        'start': {'coerce': _parse_date, 'op': lambda qu, v: qu.filter(Benchmark.period_start >= v)},
        'end': {'coerce': _parse_date, 'op': lambda qu, v: qu.filter(Benchmark.period_end <= v)},
    }
    q = apply_filters(q, filter_specs, request.args)
    allowed = {
        'period_start': Benchmark.period_start,
        'total_waste_cost': Benchmark.total_waste_cost,
        'waste_percentage_of_sales': Benchmark.waste_percentage_of_sales,
        'id': Benchmark.id,
    }
    q = apply_multi_sort(q, request.args.get('sort'), allowed, Benchmark.id, default='-period_start')
    return cached_list(q, _benchmark_json, 'created_at')


def _esg_json(r: ESGReport):
    return {
        'id': r.id,
        'restaurant_id': r.restaurant_id,
        'location_id': r.location_id,
        'report_type': r.report_type,
        'report_period_start': _iso(r.report_period_start),
        'report_period_end': _iso(r.report_period_end),
        'food_waste_kg': r.food_waste_kg,
        'food_waste_cost': r.food_waste_cost,
        'total_waste_reduction_percentage': r.total_waste_reduction_percentage,
        'carbon_impact_kg': r.carbon_impact_kg,
        'generated_by': r.generated_by,
    }


def _benchmark_json(b: Benchmark):
    return {
        'id': b.id,
        'location_id': b.location_id,
        'period_start': _iso(b.period_start),
        'period_end': _iso(b.period_end),
        'total_waste_lbs': b.total_waste_lbs,
        'total_waste_cost': b.total_waste_cost,
        'waste_percentage_of_sales': b.waste_percentage_of_sales,
        'top_wasted_items': b.top_wasted_items or [],
    }
