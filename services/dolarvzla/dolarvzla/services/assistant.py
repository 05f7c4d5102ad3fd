from __future__ import annotations

import logging

from ..clients.llm import ClientFactory, make_openai_client, response_text
from ..models import MarketSnapshot
from ..settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)

NO_CREDENTIAL_MESSAGE = (
    "⚠️ El asistente no está disponible: falta configurar la API Key de la IA "
    "(OPENAI_API_KEY) en el servidor."
)
CALL_FAILED_MESSAGE = "⚠️ Lo siento, no pude consultar a la IA en este momento. Intenta de nuevo más tarde."
EMPTY_ANSWER_MESSAGE = "No hay respuesta."


def system_instruction(snapshot: MarketSnapshot) -> str:
    return (
        "Eres un asistente financiero venezolano. "
        f"Datos actuales: Dólar BCV: {snapshot.usd_official.price}, "
        f"Euro BCV: {snapshot.eur_official.price}, "
        f"USDT: {snapshot.usdt_market.price}. "
        "Un valor 0 significa que la tasa no está disponible. "
        "Responde con amabilidad y precisión."
    )


class Assistant:
    """One-shot question answering over the current snapshot. Keeps no history."""

    def __init__(self, settings: Settings = default_settings, client_factory: ClientFactory = make_openai_client):
        self.settings = settings
        self.client_factory = client_factory

    async def ask(self, question: str, snapshot: MarketSnapshot) -> str:
        if not self.settings.has_ai_credential:
            return NO_CREDENTIAL_MESSAGE
        try:
            client = self.client_factory(self.settings)
            response = await client.responses.create(
                model=self.settings.OPENAI_MODEL,
                instructions=system_instruction(snapshot),
                input=question,
            )
        except Exception as e:
            logger.error(f"assistant call failed: {e!r}")
            return CALL_FAILED_MESSAGE
        return response_text(response) or EMPTY_ANSWER_MESSAGE
