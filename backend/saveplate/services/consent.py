"""Cookie consent preferences.

`necessary` cookies cannot be declined, so every constructor path forces it
to True. Unknown keys in client payloads are ignored.
"""
from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Dict, Mapping, Optional

CONSENT_STORAGE_KEY = 'saveplate_cookie_consent'
CONSENT_BANNER_DISMISSED_KEY = 'saveplate_consent_banner_dismissed'

OPTIONAL_FLAGS = ('analytics', 'marketing', 'third_party')


@dataclass(frozen=True)
class CookieConsent:
    necessary: bool = True
    analytics: bool = False
    marketing: bool = False
    third_party: bool = False

    def __post_init__(self):
        if self.necessary is not True:
            object.__setattr__(self, 'necessary', True)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'CookieConsent':
        data = data or {}
        flags = {}
        for name in OPTIONAL_FLAGS:
            value = data.get(name, False)
            if not isinstance(value, bool):
                raise ValueError(f'{name} must be a boolean')
            flags[name] = value
        return cls(necessary=True, **flags)

    @classmethod
    def from_record(cls, record) -> 'CookieConsent':
        return cls(
            necessary=True,
            analytics=bool(record.analytics),
            marketing=bool(record.marketing),
            third_party=bool(record.third_party),
        )

    def to_dict(self) -> Dict[str, bool]:
        return asdict(self)


DEFAULT_CONSENT = CookieConsent()
ACCEPT_ALL = CookieConsent(analytics=True, marketing=True, third_party=True)

PRESETS = {
    'accept_all': ACCEPT_ALL,
    'reject_all': DEFAULT_CONSENT,
}


def consent_from_payload(payload: Optional[Mapping[str, Any]]) -> CookieConsent:
    """Build consent from a request body: either {"preset": ...} or explicit flags."""
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise ValueError('consent must be a JSON object')
    preset = payload.get('preset')
    if preset is not None:
        if preset not in PRESETS:
            raise ValueError(f'preset must be one of {sorted(PRESETS)}')
        return PRESETS[preset]
    return CookieConsent.from_dict(payload)


__all__ = [
    'CONSENT_STORAGE_KEY', 'CONSENT_BANNER_DISMISSED_KEY', 'CookieConsent',
    'DEFAULT_CONSENT', 'ACCEPT_ALL', 'PRESETS', 'consent_from_payload',
]
