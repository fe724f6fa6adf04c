from __future__ import annotations
"""Audit logging decorator for state-changing route handlers.

Usage:

@audit_log('LOCATION.CREATE', entity='Location', entity_id_key='id', meta_keys=['location_name'])
def create_location():
    ... return _location_json(loc), 201

Parameters:
  action: audit action code (e.g. WASTE.LOG)
  entity: optional entity label (WasteLog, Location, KBArticle)
  entity_id_key: key in the returned JSON object whose value becomes entity_id
  entity_id_arg: view kwarg used as entity_id when entity_id_key is absent
  meta_keys: keys projected from the returned JSON into meta
  meta_builder: callable(data, rv, args, kwargs) -> dict; overrides meta_keys
  diff_keys / pre_fetch: record before/after values for the listed keys

Only successful responses (status < 400) are audited. Views return either a
dict or a (dict, status) tuple; the first element is inspected.
"""

from functools import wraps
from typing import Any, Callable, Iterable, Optional, Dict

from flask import current_app
from saveplate.services.audit import add_audit
from saveplate import get_db


def _extract_payload(rv: Any):
    if isinstance(rv, tuple) and rv:
        status = rv[1] if len(rv) > 1 and isinstance(rv[1], int) else 200
        return rv[0], status
    return rv, 200


def _diff(before: Dict[str, Any], after: Dict[str, Any], keys: Iterable[str]) -> Dict[str, Any]:
    changes = {}
    for k in keys:
        if k in before and k in after and before[k] != after[k]:
            changes[k] = {'before': before[k], 'after': after[k]}
    return changes


def audit_log(
    action: str,
    *,
    entity: Optional[str] = None,
    entity_id_key: Optional[str] = None,
    entity_id_arg: Optional[str] = None,
    meta_keys: Optional[Iterable[str]] = None,
    meta_builder: Optional[Callable[[dict, Any, tuple, dict], dict]] = None,
    diff_keys: Optional[Iterable[str]] = None,
    pre_fetch: Optional[Callable[[tuple, dict], Dict[str, Any]]] = None,
):
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            before = pre_fetch(args, kwargs) if (diff_keys and pre_fetch) else None
            rv = fn(*args, **kwargs)
            data, status = _extract_payload(rv)
            if status >= 400:
                return rv
            if not isinstance(data, dict):
                add_audit(action, entity, kwargs.get(entity_id_arg) if entity_id_arg else None, None)
            else:
                entity_id = None
                if entity_id_key and entity_id_key in data:
                    entity_id = data.get(entity_id_key)
                elif entity_id_arg and entity_id_arg in kwargs:
                    entity_id = kwargs.get(entity_id_arg)
                meta = None
                if meta_builder:
                    meta = meta_builder(data, rv, args, kwargs)
                elif meta_keys:
                    meta = {k: data.get(k) for k in meta_keys if k in data}
                if diff_keys and isinstance(before, dict):
                    changes = _diff(before, data, diff_keys)
                    if changes:
                        meta = dict(meta or {}, changes=changes)
                add_audit(action, entity, entity_id, meta)
            get_db().commit()
            current_app.logger.debug('audit %s recorded', action)
            return rv
        return wrapper
    return outer
