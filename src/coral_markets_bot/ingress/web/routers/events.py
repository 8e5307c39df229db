# -*- coding: utf-8 -*-
"""Market event intake: legacy /webhooks/* envelopes, /bot/events/* payloads and direct messages."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from coral_markets_bot.events.market_events import MarketEventReceived
from coral_markets_bot.exceptions import DeliveryError
from coral_markets_bot.ingress.events.decoders import (
    DecodedEvent,
    PayloadDecodeError,
    decode_event,
    decode_legacy_webhook,
)
from coral_markets_bot.ingress.events.schemas import DirectMessageRequest
from coral_markets_bot.ingress.web.dependencies import (
    get_delivery,
    get_dispatcher,
    get_event_bus,
    get_renderer,
    get_request_logger,
    require_api_auth,
)
from coral_markets_bot.models.market import MarketEventKind

router = APIRouter(dependencies=[Depends(require_api_auth)])

# Legacy route segment == expected event_type.
LEGACY_ROUTES: dict[str, MarketEventKind] = {
    "new_market": MarketEventKind.NEW_MARKET,
    "market_update": MarketEventKind.MARKET_UPDATE,
    "trading_started": MarketEventKind.TRADING_START,
    "trading_ended": MarketEventKind.TRADING_END,
    "market_resolved": MarketEventKind.MARKET_RESOLVED,
}

EVENT_ROUTES: dict[str, MarketEventKind] = {
    "new-market": MarketEventKind.NEW_MARKET,
    "market-update": MarketEventKind.MARKET_UPDATE,
    "trading-start": MarketEventKind.TRADING_START,
    "trading-end": MarketEventKind.TRADING_END,
    "market-resolved": MarketEventKind.MARKET_RESOLVED,
    "market-buy": MarketEventKind.MARKET_BUY,
}


def _publish(event_bus: Any, logger: Any, decoded: DecodedEvent) -> None:
    event_bus.dispatch(
        MarketEventReceived(kind=decoded.kind, market=decoded.market, buy=decoded.buy)
    )
    logger.info("market_event_received", kind=decoded.kind.value, market_id=decoded.market.id)


@router.post("/webhooks/{event_type}")
async def legacy_webhook(
    event_type: str,
    payload: dict[str, Any] = Body(...),
    event_bus: Any = Depends(get_event_bus),
    logger: Any = Depends(get_request_logger),
) -> dict[str, bool]:
    """Full-market envelope {"event_type", "market"}; event_type must match the path."""
    kind = LEGACY_ROUTES.get(event_type)
    if kind is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown event type")
    try:
        market = decode_legacy_webhook(payload, event_type)
    except PayloadDecodeError as e:
        logger.warning("legacy_webhook_rejected", event_type=event_type, error_message=str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    _publish(event_bus, logger, DecodedEvent(kind, market))
    return {"ok": True}


@router.post("/bot/events/{event_name}", status_code=status.HTTP_202_ACCEPTED)
async def bot_event(
    event_name: str,
    payload: dict[str, Any] = Body(...),
    event_bus: Any = Depends(get_event_bus),
    logger: Any = Depends(get_request_logger),
) -> dict[str, bool]:
    """Per-kind event payload. Fan-out runs on the event bus after the response."""
    kind = EVENT_ROUTES.get(event_name)
    if kind is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown event")
    try:
        decoded = decode_event(kind, payload)
    except PayloadDecodeError as e:
        logger.warning("bot_event_rejected", event_name=event_name, error_message=str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    _publish(event_bus, logger, decoded)
    return {"accepted": True}


@router.post("/bot/notifications/dm", status_code=status.HTTP_202_ACCEPTED)
async def direct_message(
    request_body: DirectMessageRequest,
    delivery: Any = Depends(get_delivery),
    renderer: Any = Depends(get_renderer),
    dispatcher: Any = Depends(get_dispatcher),
    logger: Any = Depends(get_request_logger),
) -> Any:
    """Render one message from {type, payload} and send it to a single user."""
    if not delivery.is_running:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Delivery not ready")
    try:
        kind = MarketEventKind(request_body.type)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unsupported type") from None
    try:
        decoded = decode_event(kind, request_body.payload)
    except PayloadDecodeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    message = renderer.render(decoded.kind, decoded.market, decoded.buy)
    try:
        await dispatcher.send_direct(request_body.user_id, message)
    except DeliveryError as e:
        logger.warning(
            "direct_message_failed",
            user_id=request_body.user_id,
            error_stage=e.stage,
            error_message=str(e),
        )
        detail = (
            "Failed to open direct chat"
            if e.stage == "open_direct_channel"
            else "Failed to send direct message"
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": detail},
        )
    return {"accepted": True}
