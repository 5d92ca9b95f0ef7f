from enum import Enum


class ErrorKind(str, Enum):
    GENERIC = "generic"
    API = "api"
    VALIDATION = "validation"
    NETWORK = "network"
    RATE_LIMIT = "rate_limit"


class ValidationMode(str, Enum):
    OFF = "off"
    RELAXED = "relaxed"
    STRICT = "strict"


class WebhookEventKind(str, Enum):
    MESSAGE = "message"
    STATUS = "status"
    ACCOUNT = "account"


class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    DOCUMENT = "document"
    STICKER = "sticker"


class TypingAction(str, Enum):
    TYPING = "typing"
    STOP_TYPING = "stop_typing"
