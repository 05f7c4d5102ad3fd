from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

import httpx

from ..models import Attribution
from ..settings import Settings, settings as default_settings
from ..utils.payload import plausible_rate, positive_decimal

logger = logging.getLogger(__name__)

YADIO_ATTRIBUTION = Attribution(title="Yadio", uri="https://yadio.io")


def invert(rate: Decimal) -> Decimal:
    return Decimal("1") / rate


def normalize_direction(rate: Decimal, threshold: Decimal = Decimal("1")) -> Decimal:
    """
    Express a USD/VES quote as bolivares per 1 USD.

    Yadio has been seen answering with the inverse quote (USD per 1 VES,
    e.g. 0.018); any positive rate below `threshold` is read that way and
    inverted. Rates at or above the threshold pass through unchanged.
    """
    if Decimal("0") < rate < threshold:
        return invert(rate)
    return rate


class YadioClient:
    """Single source for the USDT (parallel market) rate."""

    name = "Yadio"

    def __init__(self, settings: Settings = default_settings):
        self.url = settings.YADIO_URL
        self.timeout = settings.HTTP_TIMEOUT_SEC
        self.threshold = Decimal(str(settings.USDT_INVERT_BELOW))

    async def fetch(self) -> Optional[Decimal]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                r = await client.get(self.url)
            if r.status_code != 200:
                logger.warning(f"{self.name}: HTTP {r.status_code}")
                return None
            rate = positive_decimal(r.json().get("rate"))
            if rate is None:
                logger.warning(f"{self.name}: rate missing in payload")
                return None
            normalized = plausible_rate(normalize_direction(rate, self.threshold))
            if normalized is None:
                logger.warning(f"{self.name}: implausible rate {rate}")
            return normalized
        except Exception as e:
            logger.warning(f"{self.name}: request failed: {e!r}")
            return None
