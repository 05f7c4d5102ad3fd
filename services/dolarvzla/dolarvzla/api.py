from __future__ import annotations

import logging
from decimal import Decimal

from fastapi import APIRouter, Depends, Query

from .models import AssistantQuery, ErrEnvelope, ErrorBody, ErrorCode, MarketSnapshot, OkEnvelope
from .services.assistant import Assistant
from .services.board import SnapshotBoard, get_board
from .services.conversion import CurrencyKey, chart_series, convert, spread_pct
from .settings import settings

logger = logging.getLogger(__name__)

router = APIRouter()

_assistant = Assistant(settings)


def get_assistant() -> Assistant:
    return _assistant


def ok(data: dict) -> OkEnvelope:
    return OkEnvelope(data=data)


def err(code: ErrorCode, message: str, retriable: bool = False, details=None) -> ErrEnvelope:
    return ErrEnvelope(error=ErrorBody(code=code, message=message, retriable=retriable, details=details))


def _snapshot_data(snapshot: MarketSnapshot) -> dict:
    return {"snapshot": snapshot.model_dump(mode="json")}


@router.get("/rates", response_model=OkEnvelope | ErrEnvelope)
async def rates(board: SnapshotBoard = Depends(get_board)):
    try:
        snapshot = await board.latest()
        return ok(_snapshot_data(snapshot))
    except Exception as e:
        logger.exception("GET /rates failed")
        return err(ErrorCode.INTERNAL, str(e))


@router.post("/rates/refresh", response_model=OkEnvelope | ErrEnvelope)
async def refresh(board: SnapshotBoard = Depends(get_board)):
    try:
        snapshot = await board.refresh()
        return ok(_snapshot_data(snapshot))
    except Exception as e:
        logger.exception("POST /rates/refresh failed")
        return err(ErrorCode.INTERNAL, str(e))


@router.get("/convert", response_model=OkEnvelope | ErrEnvelope)
async def convert_amount(
    amount: Decimal = Query(..., ge=0, description="Amount in the source currency"),
    from_currency: CurrencyKey = Query(CurrencyKey.USD_BCV),
    to_currency: CurrencyKey = Query(CurrencyKey.VES),
    board: SnapshotBoard = Depends(get_board),
):
    try:
        snapshot = await board.latest()
        conv = convert(amount, from_currency, to_currency, snapshot)
        return ok({
            "amount": str(conv.amount),
            "from": conv.from_currency.value,
            "to": conv.to_currency.value,
            "result": str(conv.result),
            "comparison": {
                "label": conv.comparison.label,
                "diff": str(conv.comparison.diff),
                "trend": conv.comparison.trend,
            },
        })
    except ValueError as ve:
        return err(ErrorCode.BAD_INPUT, str(ve))
    except Exception as e:
        logger.exception("GET /convert failed")
        return err(ErrorCode.INTERNAL, str(e))


@router.get("/analysis", response_model=OkEnvelope | ErrEnvelope)
async def analysis(board: SnapshotBoard = Depends(get_board)):
    try:
        snapshot = await board.latest()
        spread = spread_pct(snapshot)
        chart = [{**p, "value": str(p["value"])} for p in chart_series(snapshot)]
        return ok({
            "spread_pct": str(spread) if spread is not None else None,
            "chart": chart,
        })
    except Exception as e:
        logger.exception("GET /analysis failed")
        return err(ErrorCode.INTERNAL, str(e))


@router.post("/assistant", response_model=OkEnvelope | ErrEnvelope)
async def assistant(
    body: AssistantQuery,
    board: SnapshotBoard = Depends(get_board),
    helper: Assistant = Depends(get_assistant),
):
    question = body.question.strip()
    if not question:
        return err(ErrorCode.BAD_INPUT, "question required")
    try:
        snapshot = await board.latest()
        answer = await helper.ask(question, snapshot)
        return ok({"answer": answer})
    except Exception as e:
        logger.exception("POST /assistant failed")
        return err(ErrorCode.INTERNAL, str(e))
