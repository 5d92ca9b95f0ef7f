from .challenge import verify_subscription_challenge, verify_subscription_query
from .errors import WebhookChallengeError, WebhookError, WebhookHandlerError, WebhookSignatureError
from .events import (
    AccountEvent,
    InboundMessage,
    MessageEvent,
    MessageStatus,
    StatusEvent,
    WebhookChange,
    WebhookEvent,
)
from .handlers import EventHandlerRegistry
from .parser import decode_webhook_body, parse_webhook
from .receiver import WebhookReceiver
from .security import (
    compute_signature,
    constant_time_equals,
    extract_signature_header,
    sign_payload,
    verify_signature,
    verify_webhook_signature,
)

__all__ = [
    "AccountEvent",
    "EventHandlerRegistry",
    "InboundMessage",
    "MessageEvent",
    "MessageStatus",
    "StatusEvent",
    "WebhookChallengeError",
    "WebhookChange",
    "WebhookError",
    "WebhookEvent",
    "WebhookHandlerError",
    "WebhookReceiver",
    "WebhookSignatureError",
    "compute_signature",
    "constant_time_equals",
    "decode_webhook_body",
    "extract_signature_header",
    "parse_webhook",
    "sign_payload",
    "verify_signature",
    "verify_subscription_challenge",
    "verify_subscription_query",
    "verify_webhook_signature",
]
