"""FastAPI application entrypoint."""
from __future__ import annotations

import logging
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api import router as api_router
from .cors import add_cors
from .models import ErrEnvelope, ErrorBody, ErrorCode
from .services.board import board
from .settings import settings

logger = logging.getLogger(settings.APP_NAME)

app = FastAPI(title=settings.APP_NAME)

add_cors(app, settings)


@app.on_event("startup")
async def startup() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if not settings.has_ai_credential:
        logger.warning("OPENAI_API_KEY not set: AI fallback and assistant disabled")
    if settings.AUTO_REFRESH:
        board.start()


@app.on_event("shutdown")
async def shutdown() -> None:
    await board.stop()


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_: Request, exc: RequestValidationError):
    payload = ErrEnvelope(
        error=ErrorBody(
            code=ErrorCode.BAD_INPUT,
            message="invalid input",
            details={"errors": exc.errors()},
        )
    )
    return JSONResponse(status_code=400, content=jsonable_encoder(payload))


@app.get("/health")
async def health():
    return {"ok": True, "data": {"status": "healthy"}, "ts": datetime.now(timezone.utc).isoformat()}


app.include_router(api_router)


if __name__ == "__main__":
    uvicorn.run(
        "dolarvzla.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=False,
    )
