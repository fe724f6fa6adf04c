"""Deterministic OpenAPI document built from the registered routes.

Every blueprint view is decorated with either `require_roles` (exposes
`required_roles`) or `public`; the builder turns those into
`x-required-roles` or `security: []`. App-level routes (healthz, docs)
are public. Paths and methods are emitted in sorted order so the
document only changes when routes do.
"""
import re
from typing import Any, Dict

__all__ = ["build_openapi_spec", "LIST_ENDPOINTS"]

_RULE_ARG = re.compile(r'<(?:(?P<conv>\w+)(?:\([^)]*\))?:)?(?P<name>\w+)>')
_DOCUMENTED_METHODS = ('get', 'post', 'put', 'delete', 'patch')

# views answering with cached_list: paginated, ETag / Last-Modified
LIST_ENDPOINTS = (
    'waste.list_waste_logs',
    'locations.list_locations',
    'reports.list_esg_reports',
    'reports.list_benchmarks',
    'vendors.list_vendors',
    'inventory.list_items',
    'purchase_orders.list_purchase_orders',
    'knowledge_base.list_articles',
    'audit.list_audit_logs',
)
SORTABLE_ENDPOINTS = LIST_ENDPOINTS[:7]
# single-resource views answering with cached_item
ITEM_ENDPOINTS = (
    'waste.get_waste_log',
    'locations.get_location',
    'reports.get_esg_report',
    'vendors.get_vendor',
    'inventory.get_item',
    'purchase_orders.get_purchase_order',
)


def caching_headers() -> Dict[str, Any]:
    return {
        "ETag": {"schema": {"type": "string"}},
        "Last-Modified": {"schema": {"type": "string"}},
        "X-Last-Modified-ISO": {"schema": {"type": "string"}},
    }


def _openapi_path(rule: str):
    params = []

    def repl(m):
        conv = m.group('conv')
        params.append({
            "name": m.group('name'),
            "in": "path",
            "required": True,
            "schema": {"type": "integer" if conv == 'int' else "string"},
        })
        return '{' + m.group('name') + '}'

    return _RULE_ARG.sub(repl, rule), params


def _summary(view) -> str:
    doc = (view.__doc__ or '').strip()
    if doc:
        return doc.splitlines()[0]
    return view.__name__.replace('_', ' ').capitalize()


def build_openapi_spec(app) -> Dict[str, Any]:
    components: Dict[str, Any] = {
        "schemas": {
            "Pagination": {
                "type": "object",
                "properties": {
                    "total": {"type": "integer"},
                    "limit": {"type": "integer"},
                    "offset": {"type": "integer"},
                    "returned": {"type": "integer"},
                },
                "required": ["total", "limit", "offset", "returned"],
            },
            "Error": {
                "type": "object",
                "properties": {
                    "error": {
                        "type": "object",
                        "properties": {
                            "status": {"type": "integer"},
                            "title": {"type": "string"},
                            "detail": {"type": "string"},
                        },
                    }
                },
                "required": ["error"],
            },
        },
        "securitySchemes": {"BearerAuth": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}},
        "parameters": {
            "LimitParam": {"name": "limit", "in": "query", "schema": {"type": "integer", "default": 50}},
            "OffsetParam": {"name": "offset", "in": "query", "schema": {"type": "integer", "default": 0}},
            "SortParam": {"name": "sort", "in": "query", "schema": {"type": "string"},
                          "description": "Comma-separated fields, '-' prefix for descending"},
        },
    }

    paths: Dict[str, Any] = {}
    tags = set()
    for rule in sorted(app.url_map.iter_rules(), key=lambda r: r.rule):
        if rule.endpoint == 'static':
            continue
        view = app.view_functions[rule.endpoint]
        path, path_params = _openapi_path(rule.rule)
        blueprint = rule.endpoint.split('.')[0] if '.' in rule.endpoint else None
        tag = path.split('/')[1].capitalize() or 'Ops'
        for method in sorted(m.lower() for m in rule.methods):
            if method not in _DOCUMENTED_METHODS:
                continue
            op: Dict[str, Any] = {
                "summary": _summary(view),
                "operationId": f"{method}_{rule.endpoint.replace('.', '_')}",
                "tags": [tag],
                "responses": {"200": {"description": "OK"}},
            }
            if path_params:
                op["parameters"] = list(path_params)
            required = getattr(view, 'required_roles', None)
            if blueprint is None or getattr(view, 'public', False) or required is None:
                op["security"] = []
            else:
                op["x-required-roles"] = list(required)
                op["responses"]["401"] = {"description": "Missing or invalid token"}
                op["responses"]["403"] = {"description": "Role or location not permitted"}
            if rule.endpoint in LIST_ENDPOINTS and method == 'get':
                op.setdefault("parameters", []).extend([
                    {"$ref": "#/components/parameters/LimitParam"},
                    {"$ref": "#/components/parameters/OffsetParam"},
                ])
                if rule.endpoint in SORTABLE_ENDPOINTS:
                    op["parameters"].append({"$ref": "#/components/parameters/SortParam"})
                op["responses"]["200"]["headers"] = caching_headers()
                op["responses"]["304"] = {"description": "Not Modified"}
            elif rule.endpoint in ITEM_ENDPOINTS and method == 'get':
                op["responses"]["200"]["headers"] = caching_headers()
                op["responses"]["304"] = {"description": "Not Modified"}
                op["responses"]["404"] = {"description": "Not Found"}
            paths.setdefault(path, {})[method] = op
            tags.add(tag)

    return {
        "openapi": "3.0.3",
        "info": {"title": "SavePlate API", "version": "0.1.0"},
        "paths": paths,
        "components": components,
        "security": [{"BearerAuth": []}],
        "tags": [{"name": n, "description": f"{n} endpoints"} for n in sorted(tags)],
    }
