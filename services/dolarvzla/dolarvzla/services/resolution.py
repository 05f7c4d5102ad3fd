"""
Rate resolution pipeline.

Official rates come from an ordered chain of sources where the first
success wins; the USDT rate comes from a single source. Both feed one
MarketSnapshot, which is always fully populated: rates that could not be
determined carry the 0 sentinel.
"""
from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import List, Optional, Protocol, Sequence

from ..clients import AiRatesClient, DolarApiClient, DolarVzlaClient, YadioClient
from ..clients.ai_rates import BCV_ATTRIBUTION
from ..clients.yadio import YADIO_ATTRIBUTION
from ..models import (
    EUR_OFFICIAL,
    UNAVAILABLE,
    USD_OFFICIAL,
    USDT_MARKET,
    Attribution,
    CurrencyRate,
    MarketSnapshot,
    SourceResult,
)
from ..settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)

SYNC_ERROR_LABEL = "Error de sincronización"


class OfficialRateSource(Protocol):
    name: str

    async def fetch(self) -> Optional[SourceResult]: ...


class UsdtRateSource(Protocol):
    name: str

    async def fetch(self) -> Optional[Decimal]: ...


async def first_success(sources: Sequence[OfficialRateSource]) -> Optional[SourceResult]:
    """Await each source in order and return the first non-None result."""
    for source in sources:
        result = await source.fetch()
        if result is not None:
            logger.debug(f"official rates resolved by {source.name}")
            return result
        logger.info(f"{source.name} unavailable, trying next source")
    return None


def qd(x: Optional[Decimal], q: str = "0.01") -> Decimal:
    if x is None or x <= 0:
        return UNAVAILABLE
    try:
        return x.quantize(Decimal(q), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        logger.warning(f"cannot quantize rate {x}, treating as unavailable")
        return UNAVAILABLE


def _priced(card: CurrencyRate, value: Optional[Decimal]) -> CurrencyRate:
    return card.model_copy(update={"price": qd(value)})


def fallback_snapshot(label: str = SYNC_ERROR_LABEL) -> MarketSnapshot:
    return MarketSnapshot(
        usd_official=USD_OFFICIAL,
        eur_official=EUR_OFFICIAL,
        usdt_market=USDT_MARKET,
        last_update_label=label,
        attributions=[BCV_ATTRIBUTION],
    )


def compose_snapshot(official: Optional[SourceResult], usdt: Optional[Decimal]) -> MarketSnapshot:
    attributions: List[Attribution] = []
    if official is not None:
        attributions.extend(official.attributions or [BCV_ATTRIBUTION])
    if usdt is not None:
        attributions.append(YADIO_ATTRIBUTION)
    if not attributions:
        attributions.append(BCV_ATTRIBUTION)

    return MarketSnapshot(
        usd_official=_priced(USD_OFFICIAL, official.usd if official else None),
        eur_official=_priced(EUR_OFFICIAL, official.eur if official else None),
        usdt_market=_priced(USDT_MARKET, usdt),
        last_update_label=f"Fuente: {official.origin_label}" if official else SYNC_ERROR_LABEL,
        attributions=attributions,
    )


class RateResolver:
    def __init__(self, official: Sequence[OfficialRateSource], usdt: UsdtRateSource):
        self.official = list(official)
        self.usdt = usdt

    async def resolve(self) -> MarketSnapshot:
        try:
            official = await first_success(self.official)
            usdt = await self.usdt.fetch()
            snapshot = compose_snapshot(official, usdt)
        except Exception:
            logger.exception("rate resolution failed, serving sentinel snapshot")
            return fallback_snapshot()
        logger.info(
            f"snapshot: usd={snapshot.usd_official.price} eur={snapshot.eur_official.price} "
            f"usdt={snapshot.usdt_market.price} ({snapshot.last_update_label})"
        )
        return snapshot


def build_resolver(settings: Settings = default_settings) -> RateResolver:
    """Default source chain: DolarVzla, DolarApi, then the AI fallback when a key is set."""
    official: List[OfficialRateSource] = [DolarVzlaClient(settings), DolarApiClient(settings)]
    if settings.has_ai_credential:
        official.append(AiRatesClient(settings))
    return RateResolver(official, YadioClient(settings))
