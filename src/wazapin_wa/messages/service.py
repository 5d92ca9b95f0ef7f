from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Sequence, Union

from ..types import MediaType, TypingAction
from ..validation.messages import (
    ContactsMessageParams,
    InteractiveButtonsParams,
    InteractiveListParams,
    LocationMessageParams,
    MediaMessageParams,
    ReactionMessageParams,
    TemplateMessageParams,
    TextMessageParams,
)
from .builders import (
    build_contacts_payload,
    build_interactive_buttons_payload,
    build_interactive_list_payload,
    build_location_payload,
    build_media_payload,
    build_reaction_payload,
    build_read_receipt_payload,
    build_template_payload,
    build_text_payload,
    build_typing_payload,
    compact,
)

if TYPE_CHECKING:
    from ..client import AsyncWhatsAppClient, WhatsAppClient


@dataclass(frozen=True)
class SendMessageResult:
    message_id: Optional[str]
    wa_id: Optional[str]
    input: Optional[str]
    raw: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_response(cls, response: Mapping[str, Any]) -> "SendMessageResult":
        contacts = _first(response.get("contacts"))
        messages = _first(response.get("messages"))
        return cls(
            message_id=_as_optional_str(messages.get("id")),
            wa_id=_as_optional_str(contacts.get("wa_id")),
            input=_as_optional_str(contacts.get("input")),
            raw=dict(response),
        )


def _first(value: Any) -> Mapping[str, Any]:
    if isinstance(value, list) and value and isinstance(value[0], Mapping):
        return value[0]
    return {}


def _as_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _messages_endpoint(phone_number_id: str) -> str:
    return f"{phone_number_id}/messages"


class _MessageRequests:
    """Validates call arguments and builds the outbound body for each message kind.

    Shared by the sync and async services so both send identical payloads.
    """

    def __init__(self, validate: Any) -> None:
        self._validate = validate

    def text(self, *, to: str, text: str, preview_url: bool, reply_to: Optional[str]) -> Dict[str, Any]:
        self._validate(
            TextMessageParams,
            compact({"to": to, "text": text, "preview_url": preview_url, "reply_to": reply_to}),
        )
        return build_text_payload(to=to, text=text, preview_url=preview_url, reply_to=reply_to)

    def media(
        self,
        media_type: Union[MediaType, str],
        *,
        to: str,
        media: Mapping[str, Any],
        caption: Optional[str],
        filename: Optional[str],
        reply_to: Optional[str],
    ) -> Dict[str, Any]:
        kind = MediaType(media_type)
        self._validate(
            MediaMessageParams,
            compact(
                {
                    "to": to,
                    "media_type": kind.value,
                    "media": dict(media),
                    "caption": caption,
                    "filename": filename,
                    "reply_to": reply_to,
                }
            ),
        )
        return build_media_payload(
            kind,
            to=to,
            media=media,
            caption=caption,
            filename=filename,
            reply_to=reply_to,
        )

    def location(
        self,
        *,
        to: str,
        latitude: float,
        longitude: float,
        name: Optional[str],
        address: Optional[str],
    ) -> Dict[str, Any]:
        self._validate(
            LocationMessageParams,
            compact(
                {"to": to, "latitude": latitude, "longitude": longitude, "name": name, "address": address}
            ),
        )
        return build_location_payload(
            to=to,
            latitude=latitude,
            longitude=longitude,
            name=name,
            address=address,
        )

    def contacts(self, *, to: str, contacts: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
        self._validate(ContactsMessageParams, {"to": to, "contacts": [compact(item) for item in contacts]})
        return build_contacts_payload(to=to, contacts=contacts)

    def reaction(self, *, to: str, message_id: str, emoji: str) -> Dict[str, Any]:
        self._validate(ReactionMessageParams, {"to": to, "message_id": message_id, "emoji": emoji})
        return build_reaction_payload(to=to, message_id=message_id, emoji=emoji)

    def template(
        self,
        *,
        to: str,
        name: str,
        language: str,
        components: Optional[Sequence[Mapping[str, Any]]],
    ) -> Dict[str, Any]:
        self._validate(
            TemplateMessageParams,
            compact(
                {
                    "to": to,
                    "name": name,
                    "language": language,
                    "components": [dict(item) for item in components or []],
                }
            ),
        )
        return build_template_payload(to=to, name=name, language=language, components=components)

    def buttons(
        self,
        *,
        to: str,
        body: str,
        buttons: Sequence[Mapping[str, str]],
        header: Optional[Mapping[str, Any]],
        footer: Optional[str],
    ) -> Dict[str, Any]:
        self._validate(
            InteractiveButtonsParams,
            compact(
                {
                    "to": to,
                    "body": body,
                    "buttons": [dict(item) for item in buttons],
                    "header": dict(header) if header else None,
                    "footer": footer,
                }
            ),
        )
        return build_interactive_buttons_payload(to=to, body=body, buttons=buttons, header=header, footer=footer)

    def list_message(
        self,
        *,
        to: str,
        body: str,
        button_text: str,
        sections: Sequence[Mapping[str, Any]],
        header: Optional[Mapping[str, Any]],
        footer: Optional[str],
    ) -> Dict[str, Any]:
        self._validate(
            InteractiveListParams,
            compact(
                {
                    "to": to,
                    "body": body,
                    "button_text": button_text,
                    "sections": [dict(item) for item in sections],
                    "header": dict(header) if header else None,
                    "footer": footer,
                }
            ),
        )
        return build_interactive_list_payload(
            to=to,
            body=body,
            button_text=button_text,
            sections=sections,
            header=header,
            footer=footer,
        )


class MessageService:
    def __init__(self, whatsapp_client: "WhatsAppClient") -> None:
        self._client = whatsapp_client
        self._requests = _MessageRequests(whatsapp_client.validate)

    def send(self, payload: Mapping[str, Any]) -> SendMessageResult:
        response = self._client.request_json(
            "POST",
            _messages_endpoint(self._client.config.phone_number_id),
            payload=payload,
        )
        return SendMessageResult.from_response(response)

    def send_text(
        self,
        *,
        to: str,
        text: str,
        preview_url: bool = False,
        reply_to: Optional[str] = None,
    ) -> SendMessageResult:
        return self.send(self._requests.text(to=to, text=text, preview_url=preview_url, reply_to=reply_to))

    def send_media(
        self,
        media_type: Union[MediaType, str],
        *,
        to: str,
        media: Mapping[str, Any],
        caption: Optional[str] = None,
        filename: Optional[str] = None,
        reply_to: Optional[str] = None,
    ) -> SendMessageResult:
        return self.send(
            self._requests.media(
                media_type,
                to=to,
                media=media,
                caption=caption,
                filename=filename,
                reply_to=reply_to,
            )
        )

    def send_image(
        self,
        *,
        to: str,
        media: Mapping[str, Any],
        caption: Optional[str] = None,
        reply_to: Optional[str] = None,
    ) -> SendMessageResult:
        return self.send_media(MediaType.IMAGE, to=to, media=media, caption=caption, reply_to=reply_to)

    def send_video(
        self,
        *,
        to: str,
        media: Mapping[str, Any],
        caption: Optional[str] = None,
        reply_to: Optional[str] = None,
    ) -> SendMessageResult:
        return self.send_media(MediaType.VIDEO, to=to, media=media, caption=caption, reply_to=reply_to)

    def send_audio(self, *, to: str, media: Mapping[str, Any], reply_to: Optional[str] = None) -> SendMessageResult:
        return self.send_media(MediaType.AUDIO, to=to, media=media, reply_to=reply_to)

    def send_document(
        self,
        *,
        to: str,
        media: Mapping[str, Any],
        caption: Optional[str] = None,
        filename: Optional[str] = None,
        reply_to: Optional[str] = None,
    ) -> SendMessageResult:
        return self.send_media(
            MediaType.DOCUMENT,
            to=to,
            media=media,
            caption=caption,
            filename=filename,
            reply_to=reply_to,
        )

    def send_sticker(self, *, to: str, media: Mapping[str, Any], reply_to: Optional[str] = None) -> SendMessageResult:
        return self.send_media(MediaType.STICKER, to=to, media=media, reply_to=reply_to)

    def send_location(
        self,
        *,
        to: str,
        latitude: float,
        longitude: float,
        name: Optional[str] = None,
        address: Optional[str] = None,
    ) -> SendMessageResult:
        return self.send(
            self._requests.location(to=to, latitude=latitude, longitude=longitude, name=name, address=address)
        )

    def send_contacts(self, *, to: str, contacts: Sequence[Mapping[str, Any]]) -> SendMessageResult:
        return self.send(self._requests.contacts(to=to, contacts=contacts))

    def send_reaction(self, *, to: str, message_id: str, emoji: str) -> SendMessageResult:
        return self.send(self._requests.reaction(to=to, message_id=message_id, emoji=emoji))

    def remove_reaction(self, *, to: str, message_id: str) -> SendMessageResult:
        return self.send_reaction(to=to, message_id=message_id, emoji="")

    def send_template(
        self,
        *,
        to: str,
        name: str,
        language: str,
        components: Optional[Sequence[Mapping[str, Any]]] = None,
    ) -> SendMessageResult:
        return self.send(self._requests.template(to=to, name=name, language=language, components=components))

    def send_buttons(
        self,
        *,
        to: str,
        body: str,
        buttons: Sequence[Mapping[str, str]],
        header: Optional[Mapping[str, Any]] = None,
        footer: Optional[str] = None,
    ) -> SendMessageResult:
        return self.send(self._requests.buttons(to=to, body=body, buttons=buttons, header=header, footer=footer))

    def send_list(
        self,
        *,
        to: str,
        body: str,
        button_text: str,
        sections: Sequence[Mapping[str, Any]],
        header: Optional[Mapping[str, Any]] = None,
        footer: Optional[str] = None,
    ) -> SendMessageResult:
        return self.send(
            self._requests.list_message(
                to=to,
                body=body,
                button_text=button_text,
                sections=sections,
                header=header,
                footer=footer,
            )
        )

    def mark_as_read(self, message_id: str) -> Mapping[str, Any]:
        return self._client.request_json(
            "POST",
            _messages_endpoint(self._client.config.phone_number_id),
            payload=build_read_receipt_payload(message_id=message_id),
        )

    def send_typing(
        self,
        *,
        to: str,
        action: Union[TypingAction, str] = TypingAction.TYPING,
    ) -> Mapping[str, Any]:
        return self._client.request_json(
            "POST",
            _messages_endpoint(self._client.config.phone_number_id),
            payload=build_typing_payload(to=to, action=action),
        )


class AsyncMessageService:
    def __init__(self, whatsapp_client: "AsyncWhatsAppClient") -> None:
        self._client = whatsapp_client
        self._requests = _MessageRequests(whatsapp_client.validate)

    async def send(self, payload: Mapping[str, Any]) -> SendMessageResult:
        response = await self._client.request_json(
            "POST",
            _messages_endpoint(self._client.config.phone_number_id),
            payload=payload,
        )
        return SendMessageResult.from_response(response)

    async def send_text(
        self,
        *,
        to: str,
        text: str,
        preview_url: bool = False,
        reply_to: Optional[str] = None,
    ) -> SendMessageResult:
        return await self.send(self._requests.text(to=to, text=text, preview_url=preview_url, reply_to=reply_to))

    async def send_media(
        self,
        media_type: Union[MediaType, str],
        *,
        to: str,
        media: Mapping[str, Any],
        caption: Optional[str] = None,
        filename: Optional[str] = None,
        reply_to: Optional[str] = None,
    ) -> SendMessageResult:
        return await self.send(
            self._requests.media(
                media_type,
                to=to,
                media=media,
                caption=caption,
                filename=filename,
                reply_to=reply_to,
            )
        )

    async def send_image(
        self,
        *,
        to: str,
        media: Mapping[str, Any],
        caption: Optional[str] = None,
        reply_to: Optional[str] = None,
    ) -> SendMessageResult:
        return await self.send_media(MediaType.IMAGE, to=to, media=media, caption=caption, reply_to=reply_to)

    async def send_video(
        self,
        *,
        to: str,
        media: Mapping[str, Any],
        caption: Optional[str] = None,
        reply_to: Optional[str] = None,
    ) -> SendMessageResult:
        return await self.send_media(MediaType.VIDEO, to=to, media=media, caption=caption, reply_to=reply_to)

    async def send_audio(
        self,
        *,
        to: str,
        media: Mapping[str, Any],
        reply_to: Optional[str] = None,
    ) -> SendMessageResult:
        return await self.send_media(MediaType.AUDIO, to=to, media=media, reply_to=reply_to)

    async def send_document(
        self,
        *,
        to: str,
        media: Mapping[str, Any],
        caption: Optional[str] = None,
        filename: Optional[str] = None,
        reply_to: Optional[str] = None,
    ) -> SendMessageResult:
        return await self.send_media(
            MediaType.DOCUMENT,
            to=to,
            media=media,
            caption=caption,
            filename=filename,
            reply_to=reply_to,
        )

    async def send_sticker(
        self,
        *,
        to: str,
        media: Mapping[str, Any],
        reply_to: Optional[str] = None,
    ) -> SendMessageResult:
        return await self.send_media(MediaType.STICKER, to=to, media=media, reply_to=reply_to)

    async def send_location(
        self,
        *,
        to: str,
        latitude: float,
        longitude: float,
        name: Optional[str] = None,
        address: Optional[str] = None,
    ) -> SendMessageResult:
        return await self.send(
            self._requests.location(to=to, latitude=latitude, longitude=longitude, name=name, address=address)
        )

    async def send_contacts(self, *, to: str, contacts: Sequence[Mapping[str, Any]]) -> SendMessageResult:
        return await self.send(self._requests.contacts(to=to, contacts=contacts))

    async def send_reaction(self, *, to: str, message_id: str, emoji: str) -> SendMessageResult:
        return await self.send(self._requests.reaction(to=to, message_id=message_id, emoji=emoji))

    async def remove_reaction(self, *, to: str, message_id: str) -> SendMessageResult:
        return await self.send_reaction(to=to, message_id=message_id, emoji="")

    async def send_template(
        self,
        *,
        to: str,
        name: str,
        language: str,
        components: Optional[Sequence[Mapping[str, Any]]] = None,
    ) -> SendMessageResult:
        return await self.send(self._requests.template(to=to, name=name, language=language, components=components))

    async def send_buttons(
        self,
        *,
        to: str,
        body: str,
        buttons: Sequence[Mapping[str, str]],
        header: Optional[Mapping[str, Any]] = None,
        footer: Optional[str] = None,
    ) -> SendMessageResult:
        return await self.send(
            self._requests.buttons(to=to, body=body, buttons=buttons, header=header, footer=footer)
        )

    async def send_list(
        self,
        *,
        to: str,
        body: str,
        button_text: str,
        sections: Sequence[Mapping[str, Any]],
        header: Optional[Mapping[str, Any]] = None,
        footer: Optional[str] = None,
    ) -> SendMessageResult:
        return await self.send(
            self._requests.list_message(
                to=to,
                body=body,
                button_text=button_text,
                sections=sections,
                header=header,
                footer=footer,
            )
        )

    async def mark_as_read(self, message_id: str) -> Mapping[str, Any]:
        return await self._client.request_json(
            "POST",
            _messages_endpoint(self._client.config.phone_number_id),
            payload=build_read_receipt_payload(message_id=message_id),
        )

    async def send_typing(
        self,
        *,
        to: str,
        action: Union[TypingAction, str] = TypingAction.TYPING,
    ) -> Mapping[str, Any]:
        return await self._client.request_json(
            "POST",
            _messages_endpoint(self._client.config.phone_number_id),
            payload=build_typing_payload(to=to, action=action),
        )


