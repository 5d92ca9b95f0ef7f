from dataclasses import dataclass
from typing import Optional

from .exceptions import ConfigurationError
from .retry import RetryConfig, RetryConfigInput, resolve_retry_config
from .types import ValidationMode

DEFAULT_BASE_URL = "https://graph.facebook.com"
DEFAULT_API_VERSION = "v18.0"


@dataclass(frozen=True)
class WhatsAppConfig:
    access_token: str
    phone_number_id: str
    api_version: str = DEFAULT_API_VERSION
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = 30.0
    validation: ValidationMode = ValidationMode.OFF
    retry: RetryConfigInput = None

    def __post_init__(self) -> None:
        if not self.access_token:
            raise ConfigurationError("access_token is required")
        if not self.phone_number_id:
            raise ConfigurationError("phone_number_id is required")
        if self.timeout_seconds <= 0:
            raise ConfigurationError("timeout_seconds must be > 0")
        raw_mode = self.validation.value if isinstance(self.validation, ValidationMode) else self.validation
        try:
            mode = ValidationMode(str(raw_mode or "off").strip().lower())
        except ValueError as exc:
            raise ConfigurationError("validation must be one of 'off', 'relaxed', 'strict'") from exc
        object.__setattr__(self, "validation", mode)
        object.__setattr__(self, "base_url", str(self.base_url or DEFAULT_BASE_URL).rstrip("/"))
        object.__setattr__(self, "api_version", str(self.api_version or DEFAULT_API_VERSION).strip("/"))
        if self.retry is not None:
            object.__setattr__(self, "retry", resolve_retry_config(self.retry))

    @property
    def retry_config(self) -> Optional[RetryConfig]:
        if isinstance(self.retry, RetryConfig):
            return self.retry
        return None
