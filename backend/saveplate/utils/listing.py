from __future__ import annotations
"""Paginated list responses with ETag / Last-Modified validators.

List endpoints call cached_list(query, serialize, timestamp_attr); it
paginates from the request args, builds the standard payload and answers
304 when If-None-Match or If-Modified-Since says the client is current.
"""
from typing import Any, Callable, Iterable, Optional, Tuple
from flask import request, abort, make_response
from saveplate.config.pagination import normalize_pagination
import hashlib
from datetime import datetime, timezone, timedelta
from email.utils import parsedate_to_datetime, format_datetime

TIMESTAMP_TOLERANCE = timedelta(seconds=1)


def canonicalize_timestamp(dt: datetime) -> datetime:
    """UTC, tz-aware, whole seconds."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).replace(microsecond=0)


def iso_z(dt: datetime) -> str:
    return canonicalize_timestamp(dt).isoformat().replace('+00:00', 'Z')


def apply_pagination(q) -> Tuple[Any, int, int, int]:
    try:
        limit, offset = normalize_pagination(request.args.get('limit'), request.args.get('offset'))
    except ValueError as e:
        abort(400, description=str(e))
    total = q.count()
    return q.offset(offset).limit(limit), total, limit, offset


def compute_etag(ids: Iterable[Any], total: int, limit: int, offset: int, latest_iso: str = '') -> str:
    seed = f"{list(ids)}|{total}|{limit}|{offset}|{latest_iso}"
    return hashlib.sha256(seed.encode()).hexdigest()[:32]


def build_list_payload(rows: list, total: int, limit: int, offset: int):
    return {
        'data': rows,
        'pagination': {
            'total': total,
            'limit': limit,
            'offset': offset,
            'returned': len(rows)
        }
    }


def _set_validators(resp, etag: str, latest: Optional[datetime]):
    resp.headers['ETag'] = etag
    if latest is not None:
        resp.headers['Last-Modified'] = format_datetime(canonicalize_timestamp(latest), usegmt=True)
        resp.headers['X-Last-Modified-ISO'] = iso_z(latest)
    return resp


def _parse_if_modified_since(header_val: str) -> Optional[datetime]:
    try:
        dt = datetime.fromisoformat(header_val.replace('Z', '+00:00'))
    except ValueError:
        try:
            dt = parsedate_to_datetime(header_val)
        except (TypeError, ValueError):
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def handle_conditional(etag_value: str, latest_ts: Optional[datetime]):
    """Return a 304 response when the client copy is current, else None.

    If-None-Match takes precedence over If-Modified-Since.
    """
    inm = request.headers.get('If-None-Match')
    if inm:
        if inm.strip('"') == etag_value:
            return _set_validators(make_response('', 304), etag_value, latest_ts)
        return None
    ims_raw = request.headers.get('If-Modified-Since')
    if ims_raw and latest_ts is not None:
        ims_dt = _parse_if_modified_since(ims_raw)
        if ims_dt and canonicalize_timestamp(latest_ts) <= canonicalize_timestamp(ims_dt) + TIMESTAMP_TOLERANCE:
            return _set_validators(make_response('', 304), etag_value, latest_ts)
    return None


def cached_list(q, serialize: Callable[[Any], dict], timestamp_attr: Optional[str] = None):
    paged_q, total, limit, offset = apply_pagination(q)
    rows = paged_q.all()
    data = [serialize(r) for r in rows]
    stamps = [getattr(r, timestamp_attr) for r in rows if timestamp_attr and getattr(r, timestamp_attr, None)]
    latest = max((canonicalize_timestamp(s) for s in stamps), default=None)
    etag = compute_etag([d.get('id') for d in data], total, limit, offset, iso_z(latest) if latest else '')
    cond = handle_conditional(etag, latest)
    if cond is not None:
        return cond
    return _set_validators(make_response(build_list_payload(data, total, limit, offset)), etag, latest)


def cached_item(payload: dict, latest_ts: Optional[datetime]):
    etag = compute_etag([payload.get('id')], 1, 1, 0, iso_z(latest_ts) if latest_ts else '')
    cond = handle_conditional(etag, latest_ts)
    if cond is not None:
        return cond
    return _set_validators(make_response(payload), etag, latest_ts)
