"""Closed enumerations for waste logging.
Values are stored verbatim in the database and shown in the logging form; never rename silently.
"""
from __future__ import annotations
from typing import Dict

WASTE_CATEGORIES = (
    'Prep Waste',
    'Spoilage',
    'Plate Waste',
    'Other',
)

ROOT_CAUSES = (
    'Over-ordering',
    'Poor storage',
    'Over-portioning',
    'Quality issues',
    'Customer returns',
    'Preparation errors',
    'Equipment failure',
    'Staff training',
    'Other',
)

UNITS = (
    'lbs',
    'kg',
    'items',
    'oz',
    'g',
)

DEFAULT_UNIT = 'lbs'

# Weight units only; 'items' is a count and has no pound equivalent
LBS_PER_UNIT: Dict[str, float] = {
    'lbs': 1.0,
    'kg': 2.20462,
    'oz': 1 / 16,
    'g': 0.00220462,
}
