from __future__ import annotations
"""Reusable validation helpers for domain models and request payloads.

Model-level checks raise ValidationError so they work outside a request
(seed scripts, tests). Routes call validate_or_400 to turn them into the
standard 400 error shape.
"""
from datetime import date
from numbers import Real
from typing import Any, Callable, Iterable, Optional, TypeVar
from flask import abort, request

T = TypeVar('T')


class ValidationError(ValueError):
    """Raised when a value falls outside its allowed domain."""


def require_choice(value: Any, allowed: Iterable[str], field_name: str, optional: bool = False):
    if value is None and optional:
        return None
    if value not in tuple(allowed):
        raise ValidationError(f"{field_name} invalid: {value!r}")
    return value


def require_non_negative(value: Any, field_name: str, optional: bool = False):
    if value is None and optional:
        return None
    # bool is a Real subclass; a checkbox value is never a quantity
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ValidationError(f"{field_name} must be a number")
    if value != value or value < 0:
        raise ValidationError(f"{field_name} must be non-negative")
    return value


def require_text(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} required")
    return value.strip()


def coerce_number(value: Any, field_name: str, optional: bool = False) -> Optional[float]:
    """Accept JSON numbers or numeric strings (form posts send both)."""
    if value is None or value == '':
        if optional:
            return None
        raise ValidationError(f"{field_name} required")
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    if isinstance(value, Real):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")


def coerce_date(value: Any, field_name: str, optional: bool = False) -> Optional[date]:
    """ISO calendar date (YYYY-MM-DD)."""
    if value is None or value == '':
        if optional:
            return None
        raise ValidationError(f"{field_name} required")
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be an ISO date")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO date")


def json_object() -> dict:
    """Request body as a dict. A missing or unparsable body reads as {}; any other JSON type is a 400."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        abort(400, description='request body must be a JSON object')
    return data


def validate_or_400(fn: Callable[..., T], *args, **kwargs) -> T:
    try:
        return fn(*args, **kwargs)
    except ValidationError as e:
        abort(400, description=str(e))


__all__ = [
    'ValidationError', 'require_choice', 'require_non_negative', 'require_text',
    'coerce_number', 'coerce_date', 'json_object', 'validate_or_400',
]
