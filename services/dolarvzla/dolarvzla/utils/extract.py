"""
Rate extraction from free-form model output.

Stages run in a fixed order and the first one that yields both a positive
USD and EUR value wins:

1. strict JSON: the whole text is a JSON object
2. braced JSON: the substring between the first "{" and the last "}"
3. regex: fragments like "usd: 36,85" / "Dólar: 36.85" / "euro 40,1"

Each stage returns a dict {"usd": Decimal, "eur": Decimal} or None.
"""
from __future__ import annotations

import json
import re
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Tuple

from .payload import first_defined, positive_decimal

USD_KEYS = ("usd", "dolar", "dólar", "bcv.usd")
EUR_KEYS = ("eur", "euro", "bcv.eur")

_NUM = r"(\d+[,.]\d+)"
USD_PATTERNS = (
    re.compile(r"usd[:\s]+" + _NUM, re.IGNORECASE),
    re.compile(r"d[óo]lar[:\s]+" + _NUM, re.IGNORECASE),
)
EUR_PATTERNS = (
    re.compile(r"eur[:\s]+" + _NUM, re.IGNORECASE),
    re.compile(r"euro[:\s]+" + _NUM, re.IGNORECASE),
)

Rates = Dict[str, Decimal]


def _rates_from_mapping(obj: Any) -> Optional[Rates]:
    if not isinstance(obj, dict):
        return None
    lowered = {str(k).lower(): v for k, v in obj.items()}
    usd = positive_decimal(first_defined(lowered, USD_KEYS))
    eur = positive_decimal(first_defined(lowered, EUR_KEYS))
    if usd is None or eur is None:
        return None
    return {"usd": usd, "eur": eur}


def parse_strict_json(text: str) -> Optional[Rates]:
    try:
        obj = json.loads((text or "").strip())
    except (ValueError, TypeError):
        return None
    return _rates_from_mapping(obj)


def parse_braced_json(text: str) -> Optional[Rates]:
    s = text or ""
    start = s.find("{")
    end = s.rfind("}")
    if start < 0 or end <= start:
        return None
    try:
        obj = json.loads(s[start:end + 1])
    except ValueError:
        return None
    return _rates_from_mapping(obj)


def _first_match(text: str, patterns) -> Optional[Decimal]:
    for pat in patterns:
        m = pat.search(text)
        if m:
            return positive_decimal(m.group(1))
    return None


def parse_regex(text: str) -> Optional[Rates]:
    s = text or ""
    usd = _first_match(s, USD_PATTERNS)
    eur = _first_match(s, EUR_PATTERNS)
    if usd is None or eur is None:
        return None
    return {"usd": usd, "eur": eur}


STAGES: List[Tuple[str, Callable[[str], Optional[Rates]]]] = [
    ("strict_json", parse_strict_json),
    ("braced_json", parse_braced_json),
    ("regex", parse_regex),
]


def extract_rates(text: str) -> Tuple[Optional[Rates], Optional[str]]:
    """Run every stage in order. Returns (rates, stage_name) or (None, None)."""
    for name, stage in STAGES:
        rates = stage(text)
        if rates is not None:
            return rates, name
    return None, None
