from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..models import Attribution, SourceResult
from ..settings import Settings, settings as default_settings
from ..utils.extract import extract_rates
from .llm import ClientFactory, make_openai_client, response_text, url_citations

logger = logging.getLogger(__name__)

BCV_ATTRIBUTION = Attribution(title="BCV", uri="https://www.bcv.org.ve")

PROMPT = (
    "Busca la tasa oficial actual del BCV para el dólar y el euro en Venezuela hoy. "
    "Responde solo con los valores numéricos en bolívares por unidad, "
    'en formato JSON: {"usd": <número>, "eur": <número>}.'
)

RATES_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "usd": {"type": "number", "description": "Bs. per 1 USD, BCV official"},
        "eur": {"type": "number", "description": "Bs. per 1 EUR, BCV official"},
    },
    "required": ["usd", "eur"],
    "additionalProperties": False,
}


class AiRatesClient:
    """
    Last-resort source: ask an LLM with web search enabled for today's BCV
    rates. Only consulted when a credential is configured.
    """

    name = "BCV (Búsqueda web)"

    def __init__(self, settings: Settings = default_settings, client_factory: ClientFactory = make_openai_client):
        self.settings = settings
        self.client_factory = client_factory

    def _request_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {
            "model": self.settings.OPENAI_MODEL,
            "input": PROMPT,
            "tools": [{"type": self.settings.OPENAI_WEB_SEARCH_TOOL}],
        }
        if self.settings.AI_STRUCTURED_OUTPUT:
            kwargs["text"] = {
                "format": {
                    "type": "json_schema",
                    "name": "bcv_rates",
                    "schema": RATES_SCHEMA,
                    "strict": True,
                }
            }
        return kwargs

    async def fetch(self) -> Optional[SourceResult]:
        if not self.settings.has_ai_credential:
            return None
        try:
            client = self.client_factory(self.settings)
            response = await client.responses.create(**self._request_kwargs())
        except Exception as e:
            logger.warning(f"{self.name}: model call failed: {e!r}")
            return None

        try:
            rates, stage = extract_rates(response_text(response))
            if rates is None:
                logger.warning(f"{self.name}: could not parse rates from model output")
                return None
            attributions = url_citations(response) or [BCV_ATTRIBUTION]
        except Exception as e:
            logger.warning(f"{self.name}: unusable model output: {e!r}")
            return None
        logger.info(f"{self.name}: rates parsed via {stage}")
        return SourceResult(
            usd=rates["usd"],
            eur=rates["eur"],
            origin_label=self.name,
            attributions=attributions,
        )
