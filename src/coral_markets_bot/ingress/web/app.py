# -*- coding: utf-8 -*-
"""FastAPI application factory for event intake and administration."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from coral_markets_bot.ingress.web.routers import admin, events, health

if TYPE_CHECKING:
    from coral_markets_bot.config import Settings
    from coral_markets_bot.notifications.strategies.base import BaseDeliveryStrategy
    from coral_markets_bot.services.dispatch.fanout_dispatcher import FanoutDispatcher
    from coral_markets_bot.services.rendering.market_renderer import MarketMessageRenderer
    from coral_markets_bot.services.subscriptions.subscription_service import (
        SubscriptionService,
    )


def create_app(
    settings: "Settings",
    subscription_service: "SubscriptionService",
    event_bus: Any,
    renderer: "MarketMessageRenderer",
    dispatcher: "FanoutDispatcher",
    delivery: "BaseDeliveryStrategy",
    *,
    get_logger: Callable[[str], Any] = structlog.get_logger,
    logger_name: str = "WebApp",
) -> FastAPI:
    """Build the app. Collaborators are exposed to routes through app.state."""
    app = FastAPI(
        title=settings.app.app_name,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.subscription_service = subscription_service
    app.state.event_bus = event_bus
    app.state.renderer = renderer
    app.state.dispatcher = dispatcher
    app.state.delivery = delivery
    app.state.logger = get_logger(logger_name)

    register_exception_handlers(app)
    app.include_router(health.router)
    app.include_router(events.router)
    app.include_router(admin.router)
    return app


def register_exception_handlers(app: FastAPI) -> None:
    """Malformed bodies (invalid JSON, missing or mistyped fields) answer 400."""

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        app.state.logger.warning(
            "http_request_invalid",
            path=request.url.path,
            errors=len(exc.errors()),
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Invalid request body"},
        )
