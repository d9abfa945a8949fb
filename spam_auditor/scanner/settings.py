"""
Audit settings — thresholds and performance knobs for a network scan.

The scanner never reads settings from global state: the boundary layer loads
them once per run (see services.settings_store) and passes an AuditSettings in.
Out-of-range input is clamped here rather than rejected.
"""
import math
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Iterable, Tuple

DEFAULT_KEYWORDS = (
    'viagra, casino, porn, loan, bitcoin, telegram, whatsapp, seo, escort, '
    'forex, hack, payday, win money, replica, xxx'
)


def parse_keywords(raw) -> Tuple[str, ...]:
    """
    Normalize a keyword list: lowercase, trimmed, empty entries dropped,
    duplicates removed (first occurrence wins).

    Accepts the comma-separated boundary form or any iterable of strings.
    """
    if raw is None:
        return ()
    if isinstance(raw, str):
        parts: Iterable[str] = raw.split(',')
    else:
        parts = raw

    seen = []
    for part in parts:
        term = str(part).strip().lower()
        if term and term not in seen:
            seen.append(term)
    return tuple(seen)


@dataclass(frozen=True)
class AuditSettings:
    lookback_days: int = 14
    spam_threshold: int = 25
    pending_threshold: int = 20
    spam_ratio_threshold: float = 0.40
    link_threshold: int = 2            # links per comment considered suspicious
    light_mode: bool = True            # SQL-only heuristics
    batch_size: int = 50               # sites per batch
    heuristics_cutoff: int = 5000      # skip keyword/link checks at or above this many candidates
    keywords: Tuple[str, ...] = field(default_factory=lambda: parse_keywords(DEFAULT_KEYWORDS))

    @property
    def keyword_list(self) -> str:
        """Comma-separated form used at the storage/UI boundary."""
        return ', '.join(self.keywords)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d.pop('keywords')
        d['keyword_list'] = self.keyword_list
        return d


def default_settings() -> Dict[str, Any]:
    return AuditSettings().to_dict()


def _as_int(value, fallback):
    """Numeric input as int; unparseable, infinite or NaN input gives the fallback."""
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return fallback


def _as_float(value, fallback):
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return fallback
    return fallback if math.isnan(number) else number


def _as_flag(value) -> bool:
    """Checkbox semantics: missing, empty, 0, '0', 'false', 'off' are all off."""
    if isinstance(value, str):
        return value.strip().lower() not in ('', '0', 'false', 'off', 'no')
    return bool(value)


def sanitize_settings(raw: Dict[str, Any]) -> AuditSettings:
    """
    Build AuditSettings from untrusted input, clamping every field to its bounds.

    Missing keys take their defaults. `light_mode` is off unless present and
    truthy, matching how an unchecked checkbox is simply absent from a form.
    """
    raw = raw or {}
    defaults = default_settings()

    def pick(key):
        value = raw.get(key)
        return defaults[key] if value is None else value

    return AuditSettings(
        lookback_days=max(1, _as_int(pick('lookback_days'), defaults['lookback_days'])),
        spam_threshold=max(1, _as_int(pick('spam_threshold'), defaults['spam_threshold'])),
        pending_threshold=max(0, _as_int(pick('pending_threshold'), defaults['pending_threshold'])),
        spam_ratio_threshold=min(1.0, max(0.0, _as_float(
            pick('spam_ratio_threshold'), defaults['spam_ratio_threshold']))),
        link_threshold=max(1, _as_int(pick('link_threshold'), defaults['link_threshold'])),
        light_mode=_as_flag(raw.get('light_mode')),
        batch_size=max(5, _as_int(pick('batch_size'), defaults['batch_size'])),
        heuristics_cutoff=max(0, _as_int(pick('heuristics_cutoff'), defaults['heuristics_cutoff'])),
        keywords=parse_keywords(pick('keyword_list')),
    )
