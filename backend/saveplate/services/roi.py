"""Savings estimate shown by the marketing site's ROI calculator."""
from __future__ import annotations
from typing import Dict

BASE_SAVINGS = {
    'waste': 26000,
    'vendor': 16000,
    'tax': 2800,
}

LOCATION_MULTIPLIERS = {
    '1': 0.4,
    '2-5': 1.0,
    '6-10': 2.5,
    '11+': 5.0,
}
DEFAULT_BRACKET = '2-5'


def estimate_savings(bracket: str = DEFAULT_BRACKET) -> Dict[str, int]:
    try:
        multiplier = LOCATION_MULTIPLIERS[bracket]
    except KeyError:
        raise ValueError(f'locations must be one of {list(LOCATION_MULTIPLIERS)}')
    out = {k: int(round(v * multiplier)) for k, v in BASE_SAVINGS.items()}
    out['total'] = sum(out.values())
    return out
