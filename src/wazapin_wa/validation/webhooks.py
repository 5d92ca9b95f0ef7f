from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class WebhookMetadata(_WireModel):
    display_phone_number: str
    phone_number_id: str


class WebhookProfile(_WireModel):
    name: str


class WebhookContact(_WireModel):
    profile: WebhookProfile
    wa_id: str
    identity_key_hash: Optional[str] = None


class WebhookMedia(_WireModel):
    id: str
    mime_type: str
    sha256: Optional[str] = None
    caption: Optional[str] = None
    filename: Optional[str] = None


class WebhookLocation(_WireModel):
    latitude: float
    longitude: float
    name: Optional[str] = None
    address: Optional[str] = None


class WebhookReply(_WireModel):
    id: str
    title: str
    description: Optional[str] = None


class WebhookInteractive(_WireModel):
    type: Literal["button_reply", "list_reply"]
    button_reply: Optional[WebhookReply] = None
    list_reply: Optional[WebhookReply] = None


class WebhookErrorData(_WireModel):
    details: str


class WebhookErrorDetail(_WireModel):
    code: int
    title: str
    message: Optional[str] = None
    error_data: Optional[WebhookErrorData] = None


class WebhookMessageContext(_WireModel):
    from_: str = Field(alias="from")
    id: str


class WebhookText(_WireModel):
    body: str


class WebhookButton(_WireModel):
    text: str
    payload: str


class WebhookReaction(_WireModel):
    message_id: str
    emoji: str


class WebhookMessage(_WireModel):
    id: str
    from_: str = Field(alias="from")
    timestamp: str
    type: Literal[
        "text",
        "image",
        "video",
        "audio",
        "document",
        "sticker",
        "location",
        "contacts",
        "button",
        "interactive",
        "order",
        "reaction",
        "system",
        "unsupported",
        "unknown",
    ]
    context: Optional[WebhookMessageContext] = None
    errors: Optional[List[WebhookErrorDetail]] = None
    text: Optional[WebhookText] = None
    image: Optional[WebhookMedia] = None
    video: Optional[WebhookMedia] = None
    audio: Optional[WebhookMedia] = None
    document: Optional[WebhookMedia] = None
    sticker: Optional[WebhookMedia] = None
    location: Optional[WebhookLocation] = None
    contacts: Optional[List[Dict[str, Any]]] = None
    button: Optional[WebhookButton] = None
    interactive: Optional[WebhookInteractive] = None
    reaction: Optional[WebhookReaction] = None


class WebhookConversationOrigin(_WireModel):
    type: str


class WebhookConversation(_WireModel):
    id: str
    origin: Optional[WebhookConversationOrigin] = None


class WebhookPricing(_WireModel):
    pricing_model: str
    billable: bool
    category: str


class WebhookStatus(_WireModel):
    id: str
    status: Literal["sent", "delivered", "read", "failed"]
    timestamp: str
    recipient_id: str
    conversation: Optional[WebhookConversation] = None
    pricing: Optional[WebhookPricing] = None
    errors: Optional[List[WebhookErrorDetail]] = None


class MessagesChangeValue(_WireModel):
    messaging_product: Literal["whatsapp"]
    metadata: WebhookMetadata
    contacts: Optional[List[WebhookContact]] = None
    messages: Optional[List[WebhookMessage]] = None
    statuses: Optional[List[WebhookStatus]] = None
    errors: Optional[List[WebhookErrorDetail]] = None


class MessagesChange(_WireModel):
    field: Literal["messages"]
    value: MessagesChangeValue


class AccountChangeValue(_WireModel):
    event: str


class AccountChange(_WireModel):
    field: str
    value: AccountChangeValue


class WebhookEntry(_WireModel):
    id: str
    changes: List[Union[MessagesChange, AccountChange]]


class WebhookPayload(_WireModel):
    object: Literal["whatsapp_business_account"]
    entry: List[WebhookEntry]
