from typing import Any, Dict, Mapping, Optional

from ..log import get_logger
from ..validation.validator import SchemaValidator
from .errors import WebhookError, WebhookHandlerError, WebhookSignatureError
from .events import WebhookEvent
from .handlers import EventHandlerRegistry
from .parser import decode_webhook_body, parse_webhook
from .security import extract_signature_header, verify_signature

logger = get_logger(__name__)

_ACK = {"status": "ok"}


class WebhookReceiver:
    def __init__(
        self,
        handler_registry: EventHandlerRegistry,
        *,
        app_secret: Optional[str] = None,
        verify_signatures: bool = True,
        validator: Optional[SchemaValidator] = None,
    ) -> None:
        if verify_signatures and not app_secret:
            raise WebhookError("app_secret is required when signature verification is enabled")
        self._handlers = handler_registry
        self._app_secret = app_secret
        self._verify_signatures = verify_signatures
        self._validator = validator

    def handle(self, headers: Mapping[str, str], raw_body: bytes) -> Dict[str, Any]:
        event = self._authenticate_and_parse(headers, raw_body)
        return _normalize_handler_result(self._handlers.dispatch(event))

    async def ahandle(self, headers: Mapping[str, str], raw_body: bytes) -> Dict[str, Any]:
        event = self._authenticate_and_parse(headers, raw_body)
        return _normalize_handler_result(await self._handlers.adispatch(event))

    def _authenticate_and_parse(self, headers: Mapping[str, str], raw_body: bytes) -> WebhookEvent:
        self._validate_signature(headers, raw_body)
        payload = decode_webhook_body(raw_body)
        event = parse_webhook(payload, self._validator)
        logger.debug("received %s webhook event with %d entries", event.kind.value, len(event.entry))
        return event

    def _validate_signature(self, headers: Mapping[str, str], raw_body: bytes) -> None:
        if not self._verify_signatures:
            return
        signature = extract_signature_header(headers)
        if not signature:
            raise WebhookSignatureError("missing X-Hub-Signature-256 header")
        if not verify_signature(raw_body, signature, self._app_secret or ""):
            logger.warning("rejected webhook with invalid signature")
            raise WebhookSignatureError("signature verification failed")


def _normalize_handler_result(result: Any) -> Dict[str, Any]:
    if result is None:
        return dict(_ACK)
    if isinstance(result, Mapping):
        return {str(k): v for k, v in result.items()}
    raise WebhookHandlerError("webhook handler result must be a mapping or None")
