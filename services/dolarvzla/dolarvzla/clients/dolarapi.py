from __future__ import annotations

import asyncio
import logging
from typing import Optional

import httpx

from ..models import Attribution, SourceResult
from ..settings import Settings, settings as default_settings
from ..utils.payload import positive_decimal

logger = logging.getLogger(__name__)


class DolarApiClient:
    """
    Backup source for the official rates. The dollar and euro legs are
    separate endpoints on the same provider; both are requested concurrently
    and both must succeed.
    """

    name = "DolarApi"
    homepage = "https://ve.dolarapi.com"

    def __init__(self, settings: Settings = default_settings):
        self.base_url = settings.DOLARAPI_BASE_URL.rstrip("/")
        self.timeout = settings.HTTP_TIMEOUT_SEC

    async def fetch(self) -> Optional[SourceResult]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                ru, re_ = await asyncio.gather(
                    client.get(f"{self.base_url}/dolares/oficial"),
                    client.get(f"{self.base_url}/euros/oficial"),
                )
            if ru.status_code != 200 or re_.status_code != 200:
                logger.warning(f"{self.name}: HTTP {ru.status_code}/{re_.status_code}")
                return None
            usd = positive_decimal(ru.json().get("promedio"))
            eur = positive_decimal(re_.json().get("promedio"))
            if usd is None or eur is None:
                logger.warning(f"{self.name}: promedio missing in payload")
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
