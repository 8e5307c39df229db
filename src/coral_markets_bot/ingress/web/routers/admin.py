# -*- coding: utf-8 -*-
"""Administrative API: user subscriptions, channel feed settings and webhook registrations."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from coral_markets_bot.exceptions import IdentifierGenerationError
from coral_markets_bot.ingress.web.dependencies import (
    get_request_logger,
    get_subscription_service,
    require_api_auth,
)
from coral_markets_bot.ingress.web.schemas import (
    CategoriesRequest,
    CreatorSubscriptionRequest,
    FeedToggleRequest,
    FrequencyRequest,
    MarketSubscriptionRequest,
    RegisterWebhookRequest,
    UnregisterWebhookRequest,
    channel_config_to_dict,
    subscriber_to_dict,
)
from coral_markets_bot.services.subscriptions.subscription_service import SubscriptionService

router = APIRouter(prefix="/bot", dependencies=[Depends(require_api_auth)])


# ---- user subscriptions ----


@router.post("/subscribe/market")
async def subscribe_market(
    body: MarketSubscriptionRequest,
    service: SubscriptionService = Depends(get_subscription_service),
) -> dict[str, bool]:
    await service.subscribe_market(body.user_id, body.market_id)
    return {"subscribed": True}


@router.post("/unsubscribe/market")
async def unsubscribe_market(
    body: MarketSubscriptionRequest,
    service: SubscriptionService = Depends(get_subscription_service),
) -> dict[str, bool]:
    await service.unsubscribe_market(body.user_id, body.market_id)
    return {"subscribed": False}


@router.post("/subscribe/creator")
async def subscribe_creator(
    body: CreatorSubscriptionRequest,
    service: SubscriptionService = Depends(get_subscription_service),
) -> dict[str, bool]:
    await service.subscribe_creator(body.user_id, body.creator_id)
    return {"subscribed": True}


@router.post("/unsubscribe/creator")
async def unsubscribe_creator(
    body: CreatorSubscriptionRequest,
    service: SubscriptionService = Depends(get_subscription_service),
) -> dict[str, bool]:
    await service.unsubscribe_creator(body.user_id, body.creator_id)
    return {"subscribed": False}


@router.get("/subscriptions/{user_id}")
async def get_subscriptions(
    user_id: str,
    service: SubscriptionService = Depends(get_subscription_service),
) -> dict[str, Any]:
    return subscriber_to_dict(await service.get_user_subscriptions(user_id))


# ---- channel feed ----


@router.post("/channel/feed/new_markets")
async def channel_feed_new_markets(
    body: FeedToggleRequest,
    service: SubscriptionService = Depends(get_subscription_service),
) -> dict[str, Any]:
    return channel_config_to_dict(await service.set_feed_enabled(body.channel_id, body.enabled))


@router.post("/channel/feed/categories")
async def channel_feed_categories(
    body: CategoriesRequest,
    service: SubscriptionService = Depends(get_subscription_service),
) -> dict[str, Any]:
    config = await service.set_allowed_categories(body.channel_id, body.allowed_categories)
    return channel_config_to_dict(config)


@router.post("/channel/feed/frequency")
async def channel_feed_frequency(
    body: FrequencyRequest,
    service: SubscriptionService = Depends(get_subscription_service),
) -> dict[str, Any]:
    try:
        config = await service.set_frequency(body.channel_id, body.frequency)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return channel_config_to_dict(config)


@router.get("/channel/settings/{channel_id}")
async def channel_settings(
    channel_id: str,
    service: SubscriptionService = Depends(get_subscription_service),
) -> dict[str, Any]:
    return channel_config_to_dict(await service.get_channel_config(channel_id))


# ---- webhook registrations ----
# /webhooks/register and /webhooks/unregister are declared before /webhooks/{webhook_id}.


@router.post("/webhooks/register", status_code=status.HTTP_201_CREATED)
async def register_webhook(
    body: RegisterWebhookRequest,
    service: SubscriptionService = Depends(get_subscription_service),
    logger: Any = Depends(get_request_logger),
) -> dict[str, Any]:
    if not body.channel_id or not body.webhook_url:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="channel_id and webhook_url are required",
        )
    try:
        stored = await service.register_webhook(
            body.channel_id,
            body.webhook_url,
            events=body.events,
            frequency=body.frequency,
            allowed_categories=body.allowed_categories,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except IdentifierGenerationError as e:
        logger.error("webhook_register_failed", channel_id=body.channel_id, error_message=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to register webhook",
        ) from e
    return stored.to_dict()


@router.api_route("/webhooks/unregister", methods=["POST", "DELETE"])
async def unregister_webhook(
    body: UnregisterWebhookRequest,
    service: SubscriptionService = Depends(get_subscription_service),
) -> dict[str, bool]:
    if not body.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="id is required")
    await service.unregister_webhook(body.id)
    return {"ok": True}


@router.get("/webhooks")
async def list_webhooks(
    channel_id: Optional[str] = None,
    service: SubscriptionService = Depends(get_subscription_service),
) -> list[dict[str, Any]]:
    return [r.to_dict() for r in await service.list_webhooks(channel_id)]


@router.get("/webhooks/{webhook_id}")
async def get_webhook(
    webhook_id: str,
    service: SubscriptionService = Depends(get_subscription_service),
) -> dict[str, Any]:
    registration = await service.get_webhook(webhook_id)
    if registration is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Webhook not found")
    return registration.to_dict()


@router.delete("/webhooks/{webhook_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_webhook(
    webhook_id: str,
    service: SubscriptionService = Depends(get_subscription_service),
) -> Response:
    await service.unregister_webhook(webhook_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
