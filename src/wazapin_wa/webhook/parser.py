import json
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel

from ..exceptions import WhatsAppError
from ..validation.validator import SchemaValidator
from ..validation.webhooks import WebhookPayload
from .events import BUSINESS_ACCOUNT_OBJECT, WebhookEvent, _build_event


def decode_webhook_body(raw_body: Union[bytes, bytearray, str]) -> Dict[str, Any]:
    try:
        text = raw_body.decode("utf-8") if isinstance(raw_body, (bytes, bytearray)) else raw_body
        data = json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise WhatsAppError.validation("Webhook body is not valid JSON", field="payload") from exc
    if not isinstance(data, Mapping):
        raise WhatsAppError.validation("Webhook payload must be an object", field="payload")
    return {str(key): value for key, value in data.items()}


def _as_payload(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, exclude_unset=True)
    return value


def _check_shape(payload: Any) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise WhatsAppError.validation("Webhook payload must be an object", field="payload")
    if payload.get("object") != BUSINESS_ACCOUNT_OBJECT:
        raise WhatsAppError.validation(
            f'Invalid webhook object type. Expected "{BUSINESS_ACCOUNT_OBJECT}"',
            field="object",
        )
    if not isinstance(payload.get("entry"), list):
        raise WhatsAppError.validation('Webhook payload must have an "entry" array', field="entry")
    return payload


def parse_webhook(payload: Any, validator: Optional[SchemaValidator] = None) -> WebhookEvent:
    """Turn an already-decoded webhook body into a typed event.

    Only the shape is checked here. Authenticity is the caller's business:
    verify the signature over the raw body before trusting the result.
    """
    if not isinstance(payload, Mapping):
        raise WhatsAppError.validation("Webhook payload must be an object", field="payload")
    if validator is not None:
        payload = _as_payload(validator.validate(WebhookPayload, payload))
    return _build_event(_check_shape(payload))
