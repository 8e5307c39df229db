# -*- coding: utf-8 -*-
"""FastAPI dependencies: collaborators from app.state and the shared-secret check."""

from __future__ import annotations

import hmac
from typing import TYPE_CHECKING, Any, Optional

from fastapi import Header, HTTPException, Request, status

if TYPE_CHECKING:
    from coral_markets_bot.config import Settings
    from coral_markets_bot.notifications.strategies.base import BaseDeliveryStrategy
    from coral_markets_bot.services.dispatch.fanout_dispatcher import FanoutDispatcher
    from coral_markets_bot.services.rendering.market_renderer import MarketMessageRenderer
    from coral_markets_bot.services.subscriptions.subscription_service import (
        SubscriptionService,
    )


def get_app_settings(request: Request) -> "Settings":
    return request.app.state.settings


def get_subscription_service(request: Request) -> "SubscriptionService":
    return request.app.state.subscription_service


def get_event_bus(request: Request) -> Any:
    return request.app.state.event_bus


def get_renderer(request: Request) -> "MarketMessageRenderer":
    return request.app.state.renderer


def get_dispatcher(request: Request) -> "FanoutDispatcher":
    return request.app.state.dispatcher


def get_delivery(request: Request) -> "BaseDeliveryStrategy":
    return request.app.state.delivery


def _matches(provided: Optional[str], expected: Optional[str]) -> bool:
    if not provided or not expected:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


async def require_api_auth(
    request: Request,
    x_api_key: Optional[str] = Header(default=None),
    authorization: Optional[str] = Header(default=None),
) -> None:
    """Accept X-API-Key == WEB__API_KEY or Authorization: Bearer == WEB__TOKEN.

    With neither secret configured every request passes.
    """
    web = request.app.state.settings.web
    if not web.auth_required:
        return
    if _matches(x_api_key, web.api_key):
        return
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer" and _matches(token.strip(), web.token):
            return
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


def get_request_logger(request: Request) -> Any:
    return request.app.state.logger
