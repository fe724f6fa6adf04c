from __future__ import annotations
from typing import Any, Dict
from flask import abort


def apply_filters(query, specs: Dict[str, Dict[str, Any]], params: Dict[str, Any]):
    """Apply query-string filters declared per endpoint.

    specs: { param_name: { 'op': callable(query, value)->query,
                           'coerce': callable(raw)->value (optional),
                           'choices': iterable of allowed values (optional) } }
    Blank parameters are ignored; bad values abort with 400.
    """
    for name, meta in specs.items():
        raw = params.get(name)
        if raw is None or raw == '':
            continue
        val = raw
        if 'coerce' in meta:
            try:
                val = meta['coerce'](raw)
            except (TypeError, ValueError):
                abort(400, description=f'{name} invalid')
        if 'choices' in meta and val not in tuple(meta['choices']):
            abort(400, description=f'{name} invalid')
        query = meta['op'](query, val)
    return query
