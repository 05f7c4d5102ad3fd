"""
Calculator arithmetic and market analysis over a MarketSnapshot.

All rates are bolivares per unit; VES itself has rate 1.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Dict, List, Optional

from ..models import MarketSnapshot

TREND_EPSILON = Decimal("0.01")
HUNDRED = Decimal("100")


class CurrencyKey(str, Enum):
    VES = "VES"
    USD_BCV = "USD_BCV"
    EUR_BCV = "EUR_BCV"
    USDT = "USDT"


@dataclass(frozen=True)
class Comparison:
    label: str
    diff: Decimal
    trend: str


@dataclass(frozen=True)
class Conversion:
    amount: Decimal
    from_currency: CurrencyKey
    to_currency: CurrencyKey
    result: Decimal
    comparison: Comparison


def rate_of(key: CurrencyKey, snapshot: MarketSnapshot) -> Decimal:
    if key is CurrencyKey.USD_BCV:
        return snapshot.usd_official.price
    if key is CurrencyKey.EUR_BCV:
        return snapshot.eur_official.price
    if key is CurrencyKey.USDT:
        return snapshot.usdt_market.price
    return Decimal("1")


def pct_diff(a: Decimal, b: Decimal) -> Decimal:
    """(a - b) / b * 100, or 0 when b is unavailable."""
    if b <= 0:
        return Decimal("0")
    return (a - b) / b * HUNDRED


def trend_of(diff: Decimal) -> str:
    if diff > TREND_EPSILON:
        return "up"
    if diff < -TREND_EPSILON:
        return "down"
    return "neutral"


def _round(x: Decimal, q: str = "0.01") -> Decimal:
    return x.quantize(Decimal(q), rounding=ROUND_HALF_UP)


def compare(from_key: CurrencyKey, to_key: CurrencyKey, snapshot: MarketSnapshot) -> Comparison:
    usd = snapshot.usd_official.price
    eur = snapshot.eur_official.price
    usdt = snapshot.usdt_market.price

    diff = Decimal("0")
    label = ""
    if from_key is not CurrencyKey.VES and to_key is not CurrencyKey.VES and from_key is not to_key:
        diff = pct_diff(rate_of(from_key, snapshot), rate_of(to_key, snapshot))
        label = f"vs {to_key.value.split('_')[0]}"
    elif from_key is CurrencyKey.VES or to_key is CurrencyKey.VES:
        foreign = to_key if from_key is CurrencyKey.VES else from_key
        if foreign is CurrencyKey.USD_BCV:
            diff, label = pct_diff(usd, usdt), "Brecha vs USDT"
        elif foreign is CurrencyKey.USDT:
            diff, label = pct_diff(usdt, usd), "Brecha vs BCV"
        elif foreign is CurrencyKey.EUR_BCV:
            diff, label = pct_diff(eur, usd), "vs Dólar BCV"

    return Comparison(label=label, diff=_round(diff), trend=trend_of(diff))


def convert(amount: Decimal, from_key: CurrencyKey, to_key: CurrencyKey, snapshot: MarketSnapshot) -> Conversion:
    if amount < 0:
        raise ValueError("amount must be non-negative")
    from_rate = rate_of(from_key, snapshot)
    to_rate = rate_of(to_key, snapshot)
    for key, rate in ((from_key, from_rate), (to_key, to_rate)):
        if rate <= 0:
            raise ValueError(f"rate unavailable for {key.value}")

    raw = amount * from_rate / to_rate
    result = _round(raw, "0.0001") if 0 < raw < Decimal("0.1") else _round(raw)
    return Conversion(
        amount=amount,
        from_currency=from_key,
        to_currency=to_key,
        result=result,
        comparison=compare(from_key, to_key, snapshot),
    )


def spread_pct(snapshot: MarketSnapshot) -> Optional[Decimal]:
    """Gap between the USDT market and the official dollar, in percent."""
    usd = snapshot.usd_official.price
    usdt = snapshot.usdt_market.price
    if usd <= 0 or usdt <= 0:
        return None
    return _round(pct_diff(usdt, usd))


def chart_series(snapshot: MarketSnapshot) -> List[Dict[str, object]]:
    return [
        {"name": "USD BCV", "value": snapshot.usd_official.price, "color": "#4f46e5"},
        {"name": "Euro BCV", "value": snapshot.eur_official.price, "color": "#7c3aed"},
        {"name": "USDT Yadio", "value": snapshot.usdt_market.price, "color": "#10b981"},
    ]
