from .account import BusinessProfileResponse, BusinessProfileUpdate, MessagingLimitResponse, SuccessResponse
from .messages import (
    ContactsMessageParams,
    InteractiveButtonsParams,
    InteractiveListParams,
    LocationMessageParams,
    MediaMessageParams,
    ReactionMessageParams,
    TemplateMessageParams,
    TextMessageParams,
)
from .validator import SchemaValidator, Validator
from .webhooks import WebhookPayload

__all__ = [
    "BusinessProfileResponse",
    "BusinessProfileUpdate",
    "ContactsMessageParams",
    "InteractiveButtonsParams",
    "InteractiveListParams",
    "LocationMessageParams",
    "MediaMessageParams",
    "MessagingLimitResponse",
    "ReactionMessageParams",
    "SchemaValidator",
    "SuccessResponse",
    "TemplateMessageParams",
    "TextMessageParams",
    "Validator",
    "WebhookPayload",
]
