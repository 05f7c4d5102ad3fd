from __future__ import annotations

import logging
from typing import Optional

import httpx

from ..models import Attribution, SourceResult
from ..settings import Settings, settings as default_settings
from ..utils.payload import first_defined, positive_decimal

logger = logging.getLogger(__name__)

# Provider has shipped several payload shapes; try keys in this order.
USD_PATHS = ("usd", "bcv.usd", "dolar", "current.usd")
EUR_PATHS = ("eur", "bcv.eur", "euro", "current.eur")


class DolarVzlaClient:
    """Primary source for the official BCV USD/EUR rates."""

    name = "DolarVzla"
    homepage = "https://www.dolarvzla.com"

    def __init__(self, settings: Settings = default_settings):
        self.url = settings.DOLARVZLA_URL
        self.timeout = settings.HTTP_TIMEOUT_SEC

    async def fetch(self) -> Optional[SourceResult]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                r = await client.get(self.url, headers={"Accept": "application/json"})
            if r.status_code != 200:
                logger.warning(f"{self.name}: HTTP {r.status_code}")
                return None
            data = r.json()
            usd = positive_decimal(first_defined(data, USD_PATHS))
            eur = positive_decimal(first_defined(data, EUR_PATHS))
            if usd is None or eur is None:
                logger.warning(f"{self.name}: usd/eur missing in payload")
                return None
            return SourceResult(
                usd=usd,
                eur=eur,
                origin_label=self.name,
                attributions=[Attribution(title=self.name, uri=self.homepage)],
            )
        except Exception as e:
            logger.warning(f"{self.name}: request failed: {e!r}")
            return None
