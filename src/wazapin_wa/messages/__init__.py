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
)
from .service import AsyncMessageService, MessageService, SendMessageResult

__all__ = [
    "AsyncMessageService",
    "MessageService",
    "SendMessageResult",
    "build_contacts_payload",
    "build_interactive_buttons_payload",
    "build_interactive_list_payload",
    "build_location_payload",
    "build_media_payload",
    "build_reaction_payload",
    "build_read_receipt_payload",
    "build_template_payload",
    "build_text_payload",
    "build_typing_payload",
]
