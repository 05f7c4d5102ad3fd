from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .settings import Settings

ALLOWED_METHODS = ["GET", "POST", "OPTIONS"]
ALLOWED_HEADERS = ["Authorization", "Content-Type"]


def add_cors(app: FastAPI, settings: Settings) -> None:
    """
    Explicit origins and the origin regex are both honoured; a request
    origin is allowed when it matches either. With neither configured the
    request Origin is echoed so the dashboard works from any host.
    """
    allowed_origins = settings.cors_origin_list() or []
    origin_regex = (settings.CORS_ALLOW_ORIGIN_REGEX or "").strip()
    if not allowed_origins and not origin_regex:
        origin_regex = r"https?://.*"

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_origin_regex=origin_regex or None,
        allow_methods=ALLOWED_METHODS,
        allow_headers=ALLOWED_HEADERS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        max_age=600,
    )
