from .account import AccountService, AsyncAccountService
from .client import AsyncWhatsAppClient, WebhookTools, WhatsAppClient
from .config import DEFAULT_API_VERSION, DEFAULT_BASE_URL, WhatsAppConfig
from .exceptions import ConfigurationError, SDKError, WhatsAppError
from .http_client import AsyncJsonHttpClient, JsonHttpClient, error_from_response
from .log import RedactingFilter, configure_logging, get_logger
from .media import AsyncMediaService, MediaDownload, MediaService, MediaUrl
from .messages import AsyncMessageService, MessageService, SendMessageResult
from .metadata import SDKMetadata, clear_metadata_cache, get_sdk_metadata
from .retry import RetryConfig, backoff_schedule, resolve_retry_config, with_retry, with_retry_sync
from .types import ErrorKind, MediaType, TypingAction, ValidationMode, WebhookEventKind
from .validation import SchemaValidator, Validator
from .webhook import (
    AccountEvent,
    EventHandlerRegistry,
    MessageEvent,
    StatusEvent,
    WebhookEvent,
    WebhookReceiver,
    compute_signature,
    parse_webhook,
    verify_signature,
    verify_subscription_challenge,
    verify_webhook_signature,
)

__all__ = [
    "AccountEvent",
    "AccountService",
    "AsyncAccountService",
    "AsyncJsonHttpClient",
    "AsyncMediaService",
    "AsyncMessageService",
    "AsyncWhatsAppClient",
    "ConfigurationError",
    "DEFAULT_API_VERSION",
    "DEFAULT_BASE_URL",
    "ErrorKind",
    "EventHandlerRegistry",
    "JsonHttpClient",
    "MediaDownload",
    "MediaService",
    "MediaType",
    "MediaUrl",
    "MessageEvent",
    "MessageService",
    "RedactingFilter",
    "RetryConfig",
    "SDKError",
    "SDKMetadata",
    "SchemaValidator",
    "SendMessageResult",
    "StatusEvent",
    "TypingAction",
    "ValidationMode",
    "Validator",
    "WebhookEvent",
    "WebhookEventKind",
    "WebhookReceiver",
    "WebhookTools",
    "WhatsAppClient",
    "WhatsAppConfig",
    "WhatsAppError",
    "backoff_schedule",
    "clear_metadata_cache",
    "compute_signature",
    "configure_logging",
    "error_from_response",
    "get_logger",
    "get_sdk_metadata",
    "parse_webhook",
    "resolve_retry_config",
    "verify_signature",
    "verify_subscription_challenge",
    "verify_webhook_signature",
    "with_retry",
    "with_retry_sync",
]
