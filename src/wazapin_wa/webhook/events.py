from dataclasses import dataclass, field
from typing import Any, Iterator, List, Mapping, Optional, Sequence

from ..types import WebhookEventKind

BUSINESS_ACCOUNT_OBJECT = "whatsapp_business_account"


def _as_mapping(value: Any) -> Mapping[str, Any]:
    if isinstance(value, Mapping):
        return value
    return {}


def _as_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return str(value)


def _as_mapping_list(value: Any) -> List[Mapping[str, Any]]:
    if not isinstance(value, list):
        return []
    return [dict(item) for item in value if isinstance(item, Mapping)]


@dataclass(frozen=True)
class WebhookChange:
    entry_id: Optional[str]
    field_name: Optional[str]
    value: Mapping[str, Any] = field(default_factory=dict)

    @property
    def phone_number_id(self) -> Optional[str]:
        return _as_optional_str(_as_mapping(self.value.get("metadata")).get("phone_number_id"))


@dataclass(frozen=True)
class InboundMessage:
    message_id: Optional[str]
    sender: Optional[str]
    timestamp: Optional[str]
    message_type: Optional[str]
    text: Optional[str]
    reply_to: Optional[str]
    phone_number_id: Optional[str]
    raw: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, payload: Mapping[str, Any], *, phone_number_id: Optional[str] = None) -> "InboundMessage":
        message_type = _as_optional_str(payload.get("type"))
        return cls(
            message_id=_as_optional_str(payload.get("id")),
            sender=_as_optional_str(payload.get("from")),
            timestamp=_as_optional_str(payload.get("timestamp")),
            message_type=message_type,
            text=_extract_text(payload, message_type),
            reply_to=_as_optional_str(_as_mapping(payload.get("context")).get("id")),
            phone_number_id=phone_number_id,
            raw=dict(payload),
        )


@dataclass(frozen=True)
class MessageStatus:
    message_id: Optional[str]
    status: Optional[str]
    timestamp: Optional[str]
    recipient_id: Optional[str]
    error_codes: List[int]
    phone_number_id: Optional[str]
    raw: Mapping[str, Any] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def from_raw(cls, payload: Mapping[str, Any], *, phone_number_id: Optional[str] = None) -> "MessageStatus":
        codes: List[int] = []
        for error in _as_mapping_list(payload.get("errors")):
            code = error.get("code")
            if isinstance(code, int) and not isinstance(code, bool):
                codes.append(code)
        return cls(
            message_id=_as_optional_str(payload.get("id")),
            status=_as_optional_str(payload.get("status")),
            timestamp=_as_optional_str(payload.get("timestamp")),
            recipient_id=_as_optional_str(payload.get("recipient_id")),
            error_codes=codes,
            phone_number_id=phone_number_id,
            raw=dict(payload),
        )


@dataclass(frozen=True)
class WebhookEvent:
    entry: Sequence[Mapping[str, Any]]
    object: str = BUSINESS_ACCOUNT_OBJECT
    raw: Mapping[str, Any] = field(default_factory=dict)

    kind = WebhookEventKind.ACCOUNT

    def changes(self) -> Iterator[WebhookChange]:
        for entry in self.entry:
            entry_map = _as_mapping(entry)
            entry_id = _as_optional_str(entry_map.get("id"))
            for change in _as_mapping_list(entry_map.get("changes")):
                yield WebhookChange(
                    entry_id=entry_id,
                    field_name=_as_optional_str(change.get("field")),
                    value=_as_mapping(change.get("value")),
                )

    def messages(self) -> List[InboundMessage]:
        result: List[InboundMessage] = []
        for change in self.changes():
            for item in _as_mapping_list(change.value.get("messages")):
                result.append(InboundMessage.from_raw(item, phone_number_id=change.phone_number_id))
        return result

    def statuses(self) -> List[MessageStatus]:
        result: List[MessageStatus] = []
        for change in self.changes():
            for item in _as_mapping_list(change.value.get("statuses")):
                result.append(MessageStatus.from_raw(item, phone_number_id=change.phone_number_id))
        return result

    def contacts(self) -> List[Mapping[str, Any]]:
        result: List[Mapping[str, Any]] = []
        for change in self.changes():
            result.extend(_as_mapping_list(change.value.get("contacts")))
        return result


@dataclass(frozen=True)
class MessageEvent(WebhookEvent):
    kind = WebhookEventKind.MESSAGE


@dataclass(frozen=True)
class StatusEvent(WebhookEvent):
    kind = WebhookEventKind.STATUS


@dataclass(frozen=True)
class AccountEvent(WebhookEvent):
    kind = WebhookEventKind.ACCOUNT

    def account_events(self) -> List[str]:
        names: List[str] = []
        for change in self.changes():
            name = _as_optional_str(change.value.get("event"))
            if name:
                names.append(name)
        return names


def classify_event_kind(entry: Sequence[Mapping[str, Any]]) -> WebhookEventKind:
    has_messages = False
    has_statuses = False
    for entry_item in entry:
        for change in _as_mapping_list(_as_mapping(entry_item).get("changes")):
            if change.get("field") != "messages":
                continue
            value = _as_mapping(change.get("value"))
            if _as_mapping_list(value.get("messages")):
                has_messages = True
            if _as_mapping_list(value.get("statuses")):
                has_statuses = True
    if has_messages:
        return WebhookEventKind.MESSAGE
    if has_statuses:
        return WebhookEventKind.STATUS
    return WebhookEventKind.ACCOUNT


_EVENT_TYPES = {
    WebhookEventKind.MESSAGE: MessageEvent,
    WebhookEventKind.STATUS: StatusEvent,
    WebhookEventKind.ACCOUNT: AccountEvent,
}


def _build_event(payload: Mapping[str, Any]) -> WebhookEvent:
    entry = [dict(item) if isinstance(item, Mapping) else item for item in payload.get("entry") or []]
    event_type = _EVENT_TYPES[classify_event_kind(entry)]
    return event_type(
        entry=entry,
        object=str(payload.get("object") or BUSINESS_ACCOUNT_OBJECT),
        raw=dict(payload),
    )


def _extract_text(payload: Mapping[str, Any], message_type: Optional[str]) -> Optional[str]:
    if message_type == "text":
        return _as_optional_str(_as_mapping(payload.get("text")).get("body"))
    if message_type == "button":
        return _as_optional_str(_as_mapping(payload.get("button")).get("text"))
    if message_type == "interactive":
        interactive = _as_mapping(payload.get("interactive"))
        reply = _as_mapping(interactive.get("button_reply") or interactive.get("list_reply"))
        return _as_optional_str(reply.get("title"))
    if message_type in {"image", "video", "document"}:
        return _as_optional_str(_as_mapping(payload.get(message_type)).get("caption"))
    return None
