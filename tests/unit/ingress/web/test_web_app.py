# -*- coding: utf-8 -*-
"""HTTP tests for the FastAPI app (httpx ASGITransport, no network)."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from typing import Any

import httpx
import pytest
from fastapi import FastAPI

from coral_markets_bot.events.market_events import MarketEventReceived
from coral_markets_bot.ingress.web.app import create_app
from coral_markets_bot.models.market import MarketEventKind, MarketStatus
from coral_markets_bot.persistence.repositories.in_memory import InMemorySubscriptionStore
from coral_markets_bot.services.subscriptions.subscription_service import SubscriptionService


class _FakeEventBus:
    """Records dispatched events instead of running handlers."""

    def __init__(self) -> None:
        self.dispatched: list[Any] = []

    def dispatch(self, event: Any) -> Any:
        self.dispatched.append(event)
        return event


@pytest.fixture
def fake_bus() -> _FakeEventBus:
    return _FakeEventBus()


@pytest.fixture
def app_factory(
    settings_factory, subscription_service, fake_bus, renderer, dispatcher, delivery
) -> Callable[..., FastAPI]:
    def _build(service: SubscriptionService | None = None, **settings_overrides: Any) -> FastAPI:
        return create_app(
            settings_factory(**settings_overrides),
            service or subscription_service,
            fake_bus,
            renderer,
            dispatcher,
            delivery,
        )

    return _build


@pytest.fixture
async def client(app_factory) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app_factory(web={"api_key": None, "token": None}))
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def test_health_is_public(app_factory) -> None:
    app = app_factory(web={"api_key": "secret"})
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as c:
        response = await c.get("/bot/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "time" in response.json()


async def test_auth_accepts_api_key_or_bearer_token(app_factory) -> None:
    app = app_factory(web={"api_key": "key-1", "token": "token-1"})
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as c:
        missing = await c.get("/bot/subscriptions/u1")
        wrong = await c.get("/bot/subscriptions/u1", headers={"X-API-Key": "nope"})
        by_key = await c.get("/bot/subscriptions/u1", headers={"X-API-Key": "key-1"})
        by_token = await c.get("/bot/subscriptions/u1", headers={"Authorization": "Bearer token-1"})
        key_as_token = await c.get("/bot/subscriptions/u1", headers={"Authorization": "Bearer key-1"})

    assert missing.status_code == 401
    assert wrong.status_code == 401
    assert by_key.status_code == 200
    assert by_token.status_code == 200
    assert key_as_token.status_code == 401


async def test_event_routes_require_auth(app_factory, fake_bus) -> None:
    app = app_factory(web={"token": "t"})
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as c:
        response = await c.post("/bot/events/new-market", json={"market_id": "m1"})

    assert response.status_code == 401
    assert fake_bus.dispatched == []


async def test_bot_event_is_accepted_and_published(client: httpx.AsyncClient, fake_bus) -> None:
    response = await client.post(
        "/bot/events/trading-end",
        json={
            "market_id": "m1",
            "title": "Rain?",
            "outcomes": [{"id": "o1", "name": "Yes", "pct": 80}],
            "final_pool": 100,
        },
    )

    assert response.status_code == 202
    assert response.json() == {"accepted": True}
    assert len(fake_bus.dispatched) == 1
    event = fake_bus.dispatched[0]
    assert isinstance(event, MarketEventReceived)
    assert event.kind == MarketEventKind.TRADING_END
    assert event.market.status == MarketStatus.CLOSED
    assert event.market.percentages == (80.0,)


async def test_bot_event_rejections(client: httpx.AsyncClient, fake_bus) -> None:
    unknown = await client.post("/bot/events/market-exploded", json={})
    bad_types = await client.post("/bot/events/market-buy", json={"market_id": "m1", "amount": "lots"})
    bad_json = await client.post(
        "/bot/events/new-market",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert unknown.status_code == 404
    assert bad_types.status_code == 400
    assert bad_json.status_code == 400
    assert fake_bus.dispatched == []


class _RecordingLogger:
    """Keeps structlog's call shape: the event name is the first positional argument."""

    def __init__(self) -> None:
        self.records: list[tuple[str, dict[str, Any]]] = []

    def _record(self, event: str, **kw: Any) -> None:
        self.records.append((event, kw))

    debug = info = warning = error = exception = _record


async def test_bot_event_rejection_is_logged(
    settings_factory, subscription_service, fake_bus, renderer, dispatcher, delivery
) -> None:
    logger = _RecordingLogger()
    app = create_app(
        settings_factory(web={"api_key": None, "token": None}),
        subscription_service,
        fake_bus,
        renderer,
        dispatcher,
        delivery,
        get_logger=lambda _name: logger,
    )
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        response = await c.post("/bot/events/market-buy", json={"market_id": "m1", "amount": "lots"})

    assert response.status_code == 400
    rejected = [kw for event, kw in logger.records if event == "bot_event_rejected"]
    assert len(rejected) == 1
    assert rejected[0]["event_name"] == "market-buy"
    assert fake_bus.dispatched == []


async def test_legacy_webhook_checks_event_type(client: httpx.AsyncClient, fake_bus) -> None:
    ok = await client.post(
        "/webhooks/new_market",
        json={"event_type": "new_market", "market": {"market_id": "m1", "title": "Rain?"}},
    )
    mismatch = await client.post(
        "/webhooks/market_update",
        json={"event_type": "new_market", "market": {"market_id": "m1"}},
    )
    unknown = await client.post("/webhooks/market_buy", json={"event_type": "market_buy"})

    assert ok.status_code == 200
    assert ok.json() == {"ok": True}
    assert mismatch.status_code == 400
    assert unknown.status_code == 404
    assert [e.kind for e in fake_bus.dispatched] == [MarketEventKind.NEW_MARKET]


async def test_direct_message_is_rendered_and_sent(client: httpx.AsyncClient, delivery) -> None:
    response = await client.post(
        "/bot/notifications/dm",
        json={"user_id": 42, "type": "market_buy", "payload": {"market_id": "m1", "amount": 3}},
    )

    assert response.status_code == 202
    assert len(delivery.direct_messages) == 1
    user_id, text = delivery.direct_messages[0]
    assert user_id == "42"
    assert "Buyer: Anonymous" in text


async def test_direct_message_accepts_numeric_market_id(
    client: httpx.AsyncClient, delivery
) -> None:
    response = await client.post(
        "/bot/notifications/dm",
        json={"user_id": 7, "type": "market_buy", "payload": {"market_id": 42, "amount": 5}},
    )

    assert response.status_code == 202
    assert len(delivery.direct_messages) == 1
    user_id, text = delivery.direct_messages[0]
    assert user_id == "7"
    assert "Amount: $5.00" in text


async def test_direct_message_errors(client: httpx.AsyncClient, delivery) -> None:
    unsupported = await client.post(
        "/bot/notifications/dm", json={"user_id": "u1", "type": "poke", "payload": {}}
    )
    missing_user = await client.post("/bot/notifications/dm", json={"type": "new_market"})
    delivery.fail_open_users.add("u1")
    open_failed = await client.post(
        "/bot/notifications/dm", json={"user_id": "u1", "type": "new_market", "payload": {}}
    )
    delivery.fail_send_users.add("u2")
    send_failed = await client.post(
        "/bot/notifications/dm", json={"user_id": "u2", "type": "new_market", "payload": {}}
    )

    assert unsupported.status_code == 400
    assert missing_user.status_code == 400
    assert open_failed.status_code == 500
    assert open_failed.json()["detail"] == "Failed to open direct chat"
    assert send_failed.status_code == 500
    assert send_failed.json()["detail"] == "Failed to send direct message"


async def test_direct_message_unavailable_before_delivery_starts(
    client: httpx.AsyncClient, delivery
) -> None:
    delivery.running = False

    response = await client.post(
        "/bot/notifications/dm", json={"user_id": "u1", "type": "new_market", "payload": {}}
    )

    assert response.status_code == 503
    assert delivery.direct_messages == []


async def test_subscription_admin_round_trip(client: httpx.AsyncClient) -> None:
    await client.post("/bot/subscribe/market", json={"user_id": "u1", "market_id": "m1"})
    await client.post("/bot/subscribe/market", json={"user_id": "u1", "market_id": "m2"})
    await client.post("/bot/subscribe/creator", json={"user_id": "u1", "creator_id": "alice"})
    unsubscribed = await client.post("/bot/unsubscribe/market", json={"user_id": "u1", "market_id": "m1"})

    response = await client.get("/bot/subscriptions/u1")

    assert unsubscribed.json() == {"subscribed": False}
    assert response.json() == {"user_id": "u1", "markets": ["m2"], "creators": ["alice"]}


async def test_channel_settings_endpoints(client: httpx.AsyncClient) -> None:
    await client.post("/bot/channel/feed/new_markets", json={"channel_id": "c1", "enabled": False})
    await client.post(
        "/bot/channel/feed/categories",
        json={"channel_id": "c1", "allowed_categories": ["Sports"]},
    )
    invalid = await client.post("/bot/channel/feed/frequency", json={"channel_id": "c1", "frequency": "often"})
    valid = await client.post("/bot/channel/feed/frequency", json={"channel_id": "c1", "frequency": "low"})

    settings = (await client.get("/bot/channel/settings/c1")).json()

    assert invalid.status_code == 400
    assert valid.status_code == 200
    assert settings == {
        "channel_id": "c1",
        "feed_enabled": False,
        "allowed_categories": ["Sports"],
        "frequency": "low",
        "last_update": None,
    }


async def test_webhook_registration_lifecycle(client: httpx.AsyncClient) -> None:
    created = await client.post(
        "/bot/webhooks/register",
        json={"channel_id": "c1", "webhook_url": "https://example.com/hook", "events": ["new_market"]},
    )
    assert created.status_code == 201
    registration = created.json()
    assert registration["id"].startswith("wh_")
    assert registration["frequency"] == "medium"

    listed = await client.get("/bot/webhooks", params={"channel_id": "c1"})
    fetched = await client.get(f"/bot/webhooks/{registration['id']}")
    assert listed.json() == [registration]
    assert fetched.json() == registration

    deleted = await client.request(
        "DELETE", "/bot/webhooks/unregister", json={"id": registration["id"]}
    )
    assert deleted.status_code == 200
    assert (await client.get(f"/bot/webhooks/{registration['id']}")).status_code == 404


async def test_webhook_register_validation(client: httpx.AsyncClient) -> None:
    missing_url = await client.post("/bot/webhooks/register", json={"channel_id": "c1", "webhook_url": ""})
    bad_frequency = await client.post(
        "/bot/webhooks/register",
        json={"channel_id": "c1", "webhook_url": "https://x", "frequency": "sometimes"},
    )
    missing_id = await client.post("/bot/webhooks/unregister", json={})

    assert missing_url.status_code == 400
    assert bad_frequency.status_code == 400
    assert missing_id.status_code == 400


async def test_delete_webhook_by_id_returns_no_content(client: httpx.AsyncClient) -> None:
    created = (
        await client.post(
            "/bot/webhooks/register", json={"channel_id": "c1", "webhook_url": "https://x"}
        )
    ).json()

    response = await client.delete(f"/bot/webhooks/{created['id']}")

    assert response.status_code == 204
    assert (await client.get("/bot/webhooks")).json() == []


async def test_webhook_id_failure_answers_500(app_factory) -> None:
    def _broken() -> str:
        raise OSError("no entropy")

    service = SubscriptionService(InMemorySubscriptionStore(id_factory=_broken))
    app = app_factory(service, web={"api_key": None, "token": None})
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as c:
        response = await c.post(
            "/bot/webhooks/register", json={"channel_id": "c1", "webhook_url": "https://x"}
        )
        listed = await c.get("/bot/webhooks")

    assert response.status_code == 500
    assert listed.json() == []
