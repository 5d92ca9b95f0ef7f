import asyncio
import json

import pytest

from wazapin_wa import EventHandlerRegistry, MessageEvent, StatusEvent, WebhookReceiver
from wazapin_wa.exceptions import WhatsAppError
from wazapin_wa.types import ValidationMode, WebhookEventKind
from wazapin_wa.validation import Validator
from wazapin_wa.webhook import (
    WebhookChallengeError,
    WebhookError,
    WebhookHandlerError,
    WebhookSignatureError,
    verify_subscription_challenge,
    verify_subscription_query,
)
from wazapin_wa.webhook.security import sign_payload

_APP_SECRET = "app-secret"


def _body(change_value: dict) -> bytes:
    value = {
        "messaging_product": "whatsapp",
        "metadata": {"display_phone_number": "15550001111", "phone_number_id": "PNID"},
    }
    value.update(change_value)
    return json.dumps(
        {
            "object": "whatsapp_business_account",
            "entry": [{"id": "WABA_ID", "changes": [{"field": "messages", "value": value}]}],
        }
    ).encode("utf-8")


_MESSAGE_BODY = _body(
    {
        "contacts": [{"profile": {"name": "Ana"}, "wa_id": "15551234567"}],
        "messages": [
            {
                "from": "15551234567",
                "id": "wamid.IN",
                "timestamp": "1700000000",
                "type": "interactive",
                "interactive": {"type": "button_reply", "button_reply": {"id": "yes", "title": "Yes"}},
            }
        ],
    }
)

_STATUS_BODY = _body(
    {
        "statuses": [
            {"id": "wamid.OUT", "status": "delivered", "timestamp": "1700000001", "recipient_id": "15551234567"}
        ]
    }
)


def _headers(body: bytes) -> dict:
    return {"X-Hub-Signature-256": sign_payload(body, _APP_SECRET), "Content-Type": "application/json"}


def test_signed_message_webhook_is_dispatched():
    received: list[str] = []
    registry = EventHandlerRegistry().on_message(
        lambda event: received.extend(message.text or "" for message in event.messages())
    )
    receiver = WebhookReceiver(registry, app_secret=_APP_SECRET)

    response = receiver.handle(_headers(_MESSAGE_BODY), _MESSAGE_BODY)

    assert response == {"status": "ok"}
    assert received == ["Yes"]


def test_status_webhook_goes_to_status_handler_with_strict_validation():
    seen: list[object] = []
    registry = EventHandlerRegistry()
    registry.on_message(lambda event: seen.append("message"))
    registry.on_status(lambda event: {"status": "ok", "count": len(event.statuses())})
    receiver = WebhookReceiver(registry, app_secret=_APP_SECRET, validator=Validator(ValidationMode.STRICT))

    response = receiver.handle(_headers(_STATUS_BODY), _STATUS_BODY)

    assert response == {"status": "ok", "count": 1}
    assert seen == []


def test_bad_signature_is_rejected_before_parsing():
    registry = EventHandlerRegistry().on_message(lambda event: pytest.fail("handler must not run"))
    receiver = WebhookReceiver(registry, app_secret=_APP_SECRET)

    with pytest.raises(WebhookSignatureError):
        receiver.handle({"X-Hub-Signature-256": "sha256=" + "0" * 64}, _MESSAGE_BODY)

    with pytest.raises(WebhookSignatureError):
        receiver.handle({}, _MESSAGE_BODY)


def test_body_tampered_after_signing_is_rejected():
    receiver = WebhookReceiver(EventHandlerRegistry(), app_secret=_APP_SECRET)
    headers = _headers(_MESSAGE_BODY)

    with pytest.raises(WebhookSignatureError):
        receiver.handle(headers, _MESSAGE_BODY.replace(b"Yes", b"No!"))


def test_invalid_json_after_valid_signature_raises_validation_error():
    body = b"{broken"
    receiver = WebhookReceiver(EventHandlerRegistry(), app_secret=_APP_SECRET)

    with pytest.raises(WhatsAppError) as exc_info:
        receiver.handle(_headers(body), body)

    assert exc_info.value.is_validation_error


def test_receiver_requires_secret_when_verifying():
    with pytest.raises(WebhookError):
        WebhookReceiver(EventHandlerRegistry())

    receiver = WebhookReceiver(EventHandlerRegistry(), verify_signatures=False)
    assert receiver.handle({}, _STATUS_BODY) == {"status": "ok"}


def test_default_handler_and_bad_handler_result():
    registry = EventHandlerRegistry()
    registry.register_default(lambda event: "not a mapping")
    receiver = WebhookReceiver(registry, verify_signatures=False)

    with pytest.raises(WebhookHandlerError):
        receiver.handle({}, _STATUS_BODY)


def test_async_receiver_awaits_async_handlers():
    received: list[str] = []

    async def on_message(event: MessageEvent) -> None:
        received.extend(message.message_id or "" for message in event.messages())

    async def on_status(event: StatusEvent) -> dict:
        return {"status": "ok", "kind": event.kind.value}

    registry = EventHandlerRegistry().on_message(on_message).on_status(on_status)
    receiver = WebhookReceiver(registry, app_secret=_APP_SECRET)

    async def run() -> tuple:
        first = await receiver.ahandle(_headers(_MESSAGE_BODY), _MESSAGE_BODY)
        second = await receiver.ahandle(_headers(_STATUS_BODY), _STATUS_BODY)
        return first, second

    first, second = asyncio.run(run())

    assert first == {"status": "ok"}
    assert second == {"status": "ok", "kind": "status"}
    assert received == ["wamid.IN"]


def test_sync_dispatch_rejects_async_handler():
    async def on_status(event: StatusEvent) -> None:
        return None

    receiver = WebhookReceiver(EventHandlerRegistry().on_status(on_status), verify_signatures=False)

    with pytest.raises(RuntimeError):
        receiver.handle({}, _STATUS_BODY)


def test_subscription_challenge():
    assert verify_subscription_challenge("subscribe", "verify-me", "1158201444", "verify-me") == "1158201444"
    assert (
        verify_subscription_query(
            {"hub.mode": "subscribe", "hub.verify_token": "verify-me", "hub.challenge": "42"},
            "verify-me",
        )
        == "42"
    )

    with pytest.raises(WebhookChallengeError):
        verify_subscription_challenge("subscribe", "wrong", "1", "verify-me")
    with pytest.raises(WebhookChallengeError):
        verify_subscription_challenge("unsubscribe", "verify-me", "1", "verify-me")
    with pytest.raises(WebhookChallengeError):
        verify_subscription_challenge("subscribe", "verify-me", "1", None)


def test_every_subscriber_runs_and_last_result_is_the_response():
    calls: list[str] = []
    registry = EventHandlerRegistry()
    registry.on_status(lambda event: calls.append("audit"))
    registry.on_status(lambda event: {"status": "ok", "stored": True})
    registry.on_status(lambda event: calls.append("metrics"))
    registry.register_default(lambda event: pytest.fail("fallback must not run"))
    receiver = WebhookReceiver(registry, verify_signatures=False)

    assert receiver.handle({}, _STATUS_BODY) == {"status": "ok", "stored": True}
    assert calls == ["audit", "metrics"]


def test_unsubscribe_falls_back_to_default():
    def store(event: StatusEvent) -> dict:
        return {"status": "ok", "by": "store"}

    registry = EventHandlerRegistry().on_status(store)
    registry.register_default(lambda event: {"status": "ok", "by": "default"})
    receiver = WebhookReceiver(registry, verify_signatures=False)

    assert receiver.handle({}, _STATUS_BODY)["by"] == "store"

    registry.unsubscribe("status", store)
    assert receiver.handle({}, _STATUS_BODY)["by"] == "default"

    registry.on_status(store).on_status(store)
    registry.unsubscribe("status")
    assert receiver.handle({}, _STATUS_BODY)["by"] == "default"
    assert len(registry.callbacks_for(WebhookEventKind.STATUS)) == 1
