from typing import Any, Dict, Mapping, Optional, Sequence, Union

from ..types import MediaType, TypingAction

MESSAGING_PRODUCT = "whatsapp"


def compact(value: Any) -> Any:
    if isinstance(value, Mapping):
        result = {}
        for key, item in value.items():
            cleaned = compact(item)
            if cleaned is None or cleaned == [] or cleaned == {}:
                continue
            result[str(key)] = cleaned
        return result
    if isinstance(value, (list, tuple)):
        return [compact(item) for item in value]
    return value


def _message(to: str, message_type: str, body: Mapping[str, Any], reply_to: Optional[str] = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "messaging_product": MESSAGING_PRODUCT,
        "recipient_type": "individual",
        "to": to,
        "type": message_type,
        message_type: dict(body),
    }
    if reply_to:
        payload["context"] = {"message_id": reply_to}
    return payload


def build_text_payload(
    *,
    to: str,
    text: str,
    preview_url: bool = False,
    reply_to: Optional[str] = None,
) -> Dict[str, Any]:
    return _message(to, "text", {"preview_url": preview_url, "body": text}, reply_to)


def build_media_payload(
    media_type: Union[MediaType, str],
    *,
    to: str,
    media: Mapping[str, Any],
    caption: Optional[str] = None,
    filename: Optional[str] = None,
    reply_to: Optional[str] = None,
) -> Dict[str, Any]:
    kind = MediaType(media_type).value
    body = compact(dict(media))
    if caption:
        body["caption"] = caption
    if filename:
        body["filename"] = filename
    return _message(to, kind, body, reply_to)


def build_location_payload(
    *,
    to: str,
    latitude: float,
    longitude: float,
    name: Optional[str] = None,
    address: Optional[str] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"latitude": latitude, "longitude": longitude}
    if name:
        body["name"] = name
    if address:
        body["address"] = address
    return _message(to, "location", body)


def build_contacts_payload(*, to: str, contacts: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
    payload = _message(to, "contacts", {})
    payload["contacts"] = [compact(contact) for contact in contacts]
    return payload


def build_reaction_payload(*, to: str, message_id: str, emoji: str) -> Dict[str, Any]:
    # an empty emoji removes the reaction
    return _message(to, "reaction", {"message_id": message_id, "emoji": emoji})


def build_read_receipt_payload(*, message_id: str) -> Dict[str, Any]:
    return {
        "messaging_product": MESSAGING_PRODUCT,
        "status": "read",
        "message_id": message_id,
    }


def build_typing_payload(*, to: str, action: Union[TypingAction, str] = TypingAction.TYPING) -> Dict[str, Any]:
    return {
        "messaging_product": MESSAGING_PRODUCT,
        "recipient_type": "individual",
        "to": to,
        "type": "chat_state",
        "chat_state": {"action": TypingAction(action).value},
    }


def build_template_payload(
    *,
    to: str,
    name: str,
    language: str,
    components: Optional[Sequence[Mapping[str, Any]]] = None,
) -> Dict[str, Any]:
    template: Dict[str, Any] = {"name": name, "language": {"code": language}}
    if components:
        formatted = []
        for component in components:
            item = compact(dict(component))
            if "index" in item:
                item["index"] = str(item["index"])
            item.setdefault("parameters", [])
            formatted.append(item)
        template["components"] = formatted
    return _message(to, "template", template)


def _interactive_header(header: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    if not header:
        return None
    header_type = str(header.get("type") or "text")
    return {"type": header_type, header_type: compact(header.get(header_type))}


def _interactive(
    interactive_type: str,
    body: str,
    action: Mapping[str, Any],
    header: Optional[Mapping[str, Any]],
    footer: Optional[str],
) -> Dict[str, Any]:
    interactive: Dict[str, Any] = {"type": interactive_type, "body": {"text": body}, "action": dict(action)}
    header_payload = _interactive_header(header)
    if header_payload is not None:
        interactive["header"] = header_payload
    if footer:
        interactive["footer"] = {"text": footer}
    return interactive


def build_interactive_buttons_payload(
    *,
    to: str,
    body: str,
    buttons: Sequence[Mapping[str, str]],
    header: Optional[Mapping[str, Any]] = None,
    footer: Optional[str] = None,
) -> Dict[str, Any]:
    action = {
        "buttons": [
            {"type": "reply", "reply": {"id": button["id"], "title": button["title"]}}
            for button in buttons
        ]
    }
    return _message(to, "interactive", _interactive("button", body, action, header, footer))


def build_interactive_list_payload(
    *,
    to: str,
    body: str,
    button_text: str,
    sections: Sequence[Mapping[str, Any]],
    header: Optional[Mapping[str, Any]] = None,
    footer: Optional[str] = None,
) -> Dict[str, Any]:
    action = {
        "button": button_text,
        "sections": [
            {
                "title": section["title"],
                "rows": [compact(dict(row)) for row in section.get("rows") or []],
            }
            for section in sections
        ],
    }
    return _message(to, "interactive", _interactive("list", body, action, header, footer))
