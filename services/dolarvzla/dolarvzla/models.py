"""Pydantic models and result types for the dolarvzla service."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


# Common envelope
class ErrorCode(str, Enum):
    BAD_INPUT = "BAD_INPUT"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    INTERNAL = "INTERNAL"


class ErrorBody(BaseModel):
    code: ErrorCode
    message: str
    source: Literal["dolarvzla", "dolarapi", "yadio", "openai"] = "dolarvzla"
    retriable: bool = False
    details: Optional[Dict[str, Any]] = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OkEnvelope(BaseModel):
    ok: Literal[True] = True
    data: Dict[str, Any]
    ts: datetime = Field(default_factory=_utcnow)


class ErrEnvelope(BaseModel):
    ok: Literal[False] = False
    error: ErrorBody
    ts: datetime = Field(default_factory=_utcnow)


# Market data
UNAVAILABLE = Decimal("0")


class Attribution(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    uri: str


class CurrencyRate(BaseModel):
    """One card on the dashboard. price == 0 means the rate could not be determined."""

    model_config = ConfigDict(frozen=True)

    price: Decimal = Field(default=UNAVAILABLE, ge=0)
    label: str
    symbol: str
    icon_ref: str
    color_tag: str

    @property
    def available(self) -> bool:
        return self.price > 0


class MarketSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    usd_official: CurrencyRate
    eur_official: CurrencyRate
    usdt_market: CurrencyRate
    last_update_label: str
    attributions: List[Attribution] = Field(default_factory=list)
    fetched_at: datetime = Field(default_factory=_utcnow)


# Presentation defaults for the three cards
USD_OFFICIAL = CurrencyRate(label="Dólar BCV", symbol="$", icon_ref="fa-building-columns", color_tag="blue")
EUR_OFFICIAL = CurrencyRate(label="Euro BCV", symbol="€", icon_ref="fa-euro-sign", color_tag="indigo")
USDT_MARKET = CurrencyRate(label="USDT Binance", symbol="₮", icon_ref="fa-circle-dollar-to-slot", color_tag="emerald")


@dataclass(slots=True)
class SourceResult:
    """Official USD/EUR pair produced by one adapter during a single resolution run."""
    usd: Decimal
    eur: Decimal
    origin_label: str
    attributions: List[Attribution] = field(default_factory=list)


# Request bodies
class AssistantQuery(BaseModel):
    question: str = Field(..., max_length=2000)
