from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, TypeVar

from .account import AccountService, AsyncAccountService
from .config import WhatsAppConfig
from .http_client import AsyncJsonHttpClient, JsonHttpClient
from .media import AsyncMediaService, MediaService
from .messages.service import AsyncMessageService, MessageService
from .retry import with_retry, with_retry_sync
from .types import ValidationMode
from .validation.validator import SchemaValidator, Validator
from .webhook.challenge import verify_subscription_challenge
from .webhook.events import WebhookEvent
from .webhook.parser import parse_webhook
from .webhook.security import RawBody, verify_signature, verify_webhook_signature

T = TypeVar("T")


def _build_validator(config: WhatsAppConfig, validator: Optional[SchemaValidator]) -> Optional[SchemaValidator]:
    if validator is not None:
        return validator
    if config.validation == ValidationMode.OFF:
        return None
    return Validator(config.validation)


class WebhookTools:
    def __init__(self, validator: Optional[SchemaValidator] = None) -> None:
        self._validator = validator

    def parse(self, payload: Any) -> WebhookEvent:
        return parse_webhook(payload, self._validator)

    def verify(self, raw_body: RawBody, signature: Optional[str], app_secret: str) -> bool:
        return verify_signature(raw_body, signature, app_secret)

    async def averify(self, raw_body: RawBody, signature: Optional[str], app_secret: str) -> bool:
        return await verify_webhook_signature(raw_body, signature, app_secret)

    def verify_challenge(
        self,
        mode: Optional[str],
        verify_token: Optional[str],
        challenge: Optional[str],
        expected_token: Optional[str],
    ) -> str:
        return verify_subscription_challenge(mode, verify_token, challenge, expected_token)


class WhatsAppClient:
    def __init__(
        self,
        config: WhatsAppConfig,
        *,
        http_client: Optional[JsonHttpClient] = None,
        validator: Optional[SchemaValidator] = None,
        sleeper: Optional[Callable[[float], Any]] = None,
    ) -> None:
        self._config = config
        self._http = http_client or JsonHttpClient(
            access_token=config.access_token,
            base_url=config.base_url,
            api_version=config.api_version,
            timeout_seconds=config.timeout_seconds,
        )
        self._validator = _build_validator(config, validator)
        self._sleeper = sleeper
        self.messages = MessageService(self)
        self.media = MediaService(self)
        self.account = AccountService(self)
        self.webhooks = WebhookTools(self._validator)

    @property
    def config(self) -> WhatsAppConfig:
        return self._config

    @property
    def validator(self) -> Optional[SchemaValidator]:
        return self._validator

    def validate(self, schema: Any, value: Any) -> Any:
        if self._validator is None:
            return value
        return self._validator.validate(schema, value)

    def request_json(
        self,
        method: str,
        endpoint: str,
        *,
        payload: Optional[Mapping[str, object]] = None,
        params: Optional[Mapping[str, object]] = None,
    ) -> Dict[str, Any]:
        return self._call(lambda: self._http.request_json(method, endpoint, payload=payload, params=params))

    def request_multipart(
        self,
        endpoint: str,
        *,
        data: Mapping[str, str],
        files: Mapping[str, Any],
    ) -> Dict[str, Any]:
        return self._call(lambda: self._http.request_multipart(endpoint, data=data, files=files))

    def request_bytes(self, url: str) -> bytes:
        return self._call(lambda: self._http.request_bytes(url))

    def close(self) -> None:
        self._http.close()

    def _call(self, operation: Callable[[], T]) -> T:
        retry_config = self._config.retry_config
        if retry_config is None:
            return operation()
        return with_retry_sync(operation, retry_config, sleeper=self._sleeper)


class AsyncWhatsAppClient:
    def __init__(
        self,
        config: WhatsAppConfig,
        *,
        http_client: Optional[AsyncJsonHttpClient] = None,
        validator: Optional[SchemaValidator] = None,
        sleeper: Optional[Callable[[float], Awaitable[Any]]] = None,
    ) -> None:
        self._config = config
        self._http = http_client or AsyncJsonHttpClient(
            access_token=config.access_token,
            base_url=config.base_url,
            api_version=config.api_version,
            timeout_seconds=config.timeout_seconds,
        )
        self._validator = _build_validator(config, validator)
        self._sleeper = sleeper
        self.messages = AsyncMessageService(self)
        self.media = AsyncMediaService(self)
        self.account = AsyncAccountService(self)
        self.webhooks = WebhookTools(self._validator)

    @property
    def config(self) -> WhatsAppConfig:
        return self._config

    @property
    def validator(self) -> Optional[SchemaValidator]:
        return self._validator

    def validate(self, schema: Any, value: Any) -> Any:
        if self._validator is None:
            return value
        return self._validator.validate(schema, value)

    async def request_json(
        self,
        method: str,
        endpoint: str,
        *,
        payload: Optional[Mapping[str, object]] = None,
        params: Optional[Mapping[str, object]] = None,
    ) -> Dict[str, Any]:
        return await self._call(lambda: self._http.request_json(method, endpoint, payload=payload, params=params))

    async def request_multipart(
        self,
        endpoint: str,
        *,
        data: Mapping[str, str],
        files: Mapping[str, Any],
    ) -> Dict[str, Any]:
        return await self._call(lambda: self._http.request_multipart(endpoint, data=data, files=files))

    async def request_bytes(self, url: str) -> bytes:
        return await self._call(lambda: self._http.request_bytes(url))

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _call(self, operation: Callable[[], Awaitable[T]]) -> T:
        retry_config = self._config.retry_config
        if retry_config is None:
            return await operation()
        return await with_retry(operation, retry_config, sleeper=self._sleeper)
