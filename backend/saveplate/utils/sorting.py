from __future__ import annotations
from flask import abort


def apply_multi_sort(query, sort_expr: str | None, allowed: dict, tie_breaker, default: str | None = None):
    """Order a query by a comma-separated sort expression.

    Tokens name keys of `allowed` (key -> column), '-' prefix for descending.
    `default` is used when the client sends nothing; tie_breaker keeps paging stable.
    """
    sort_expr = sort_expr or default
    clauses = []
    for raw in (sort_expr or '').split(','):
        token = raw.strip()
        if not token:
            continue
        desc = token.startswith('-')
        key = token[1:] if desc else token
        col = allowed.get(key)
        if col is None:
            abort(400, description=f'Invalid sort field {key}')
        clauses.append(col.desc() if desc else col.asc())
    clauses.append(tie_breaker.asc())
    return query.order_by(*clauses)
