"""Thin helpers around the OpenAI async client (Responses API)."""
from __future__ import annotations

from typing import Any, Callable, List

from openai import AsyncOpenAI

from ..models import Attribution
from ..settings import Settings

ClientFactory = Callable[[Settings], Any]


def make_openai_client(settings: Settings) -> AsyncOpenAI:
    return AsyncOpenAI(api_key=settings.OPENAI_API_KEY, timeout=settings.OPENAI_TIMEOUT_SEC)


def response_text(response: Any) -> str:
    return (getattr(response, "output_text", None) or "").strip()


def url_citations(response: Any) -> List[Attribution]:
    """
    Collect web-search grounding citations (url_citation annotations) from a
    Responses API result, in order, without duplicates.
    """
    out: List[Attribution] = []
    seen = set()
    for item in getattr(response, "output", None) or []:
        if getattr(item, "type", None) != "message":
            continue
        for part in getattr(item, "content", None) or []:
            for ann in getattr(part, "annotations", None) or []:
                if getattr(ann, "type", None) != "url_citation":
                    continue
                uri = getattr(ann, "url", None)
                if not uri or uri in seen:
                    continue
                seen.add(uri)
                out.append(Attribution(title=getattr(ann, "title", None) or uri, uri=uri))
    return out
