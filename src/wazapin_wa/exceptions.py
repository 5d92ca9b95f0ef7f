from typing import Any, Optional

from .types import ErrorKind

RATE_LIMIT_STATUS_CODE = 429
RATE_LIMIT_ERROR_CODE = 4


class SDKError(RuntimeError):
    pass


class ConfigurationError(SDKError):
    pass


class WhatsAppError(SDKError):
    """Single failure type for every request-side error.

    ``kind`` tells the variant apart; the remaining fields are only populated
    for the kinds that carry them. A rate-limit error is also an API error
    with status 429, so ``is_api_error`` holds for both.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: ErrorKind = ErrorKind.GENERIC,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        error_code: Optional[int] = None,
        error_subcode: Optional[int] = None,
        trace_id: Optional[str] = None,
        field: Optional[str] = None,
        cause: Optional[BaseException] = None,
        retry_after_seconds: Optional[int] = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = ErrorKind(kind)
        self.code = code
        self.status_code = status_code
        self.error_code = error_code
        self.error_subcode = error_subcode
        self.trace_id = trace_id
        self.field = field
        self.cause = cause
        self.retry_after_seconds = retry_after_seconds
        self.details = details
        if cause is not None:
            self.__cause__ = cause

    @classmethod
    def generic(cls, message: str, *, code: Optional[str] = None) -> "WhatsAppError":
        return cls(message, kind=ErrorKind.GENERIC, code=code)

    @classmethod
    def api(
        cls,
        message: str,
        *,
        status_code: int,
        error_code: int = 0,
        error_subcode: Optional[int] = None,
        trace_id: Optional[str] = None,
    ) -> "WhatsAppError":
        return cls(
            message,
            kind=ErrorKind.API,
            code=f"API_ERROR_{error_code}",
            status_code=status_code,
            error_code=error_code,
            error_subcode=error_subcode,
            trace_id=trace_id,
        )

    @classmethod
    def validation(
        cls,
        message: str,
        *,
        field: Optional[str] = None,
        details: Any = None,
    ) -> "WhatsAppError":
        return cls(
            message,
            kind=ErrorKind.VALIDATION,
            code="VALIDATION_ERROR",
            field=field,
            details=details,
        )

    @classmethod
    def network(cls, message: str, *, cause: Optional[BaseException] = None) -> "WhatsAppError":
        return cls(message, kind=ErrorKind.NETWORK, code="NETWORK_ERROR", cause=cause)

    @classmethod
    def rate_limit(
        cls,
        message: str,
        *,
        retry_after_seconds: Optional[int] = None,
        trace_id: Optional[str] = None,
    ) -> "WhatsAppError":
        return cls(
            message,
            kind=ErrorKind.RATE_LIMIT,
            code=f"API_ERROR_{RATE_LIMIT_ERROR_CODE}",
            status_code=RATE_LIMIT_STATUS_CODE,
            error_code=RATE_LIMIT_ERROR_CODE,
            trace_id=trace_id,
            retry_after_seconds=retry_after_seconds,
        )

    @property
    def is_api_error(self) -> bool:
        return self.kind in {ErrorKind.API, ErrorKind.RATE_LIMIT}

    @property
    def is_rate_limit(self) -> bool:
        return self.kind == ErrorKind.RATE_LIMIT

    @property
    def is_validation_error(self) -> bool:
        return self.kind == ErrorKind.VALIDATION

    @property
    def is_network_error(self) -> bool:
        return self.kind == ErrorKind.NETWORK

    @property
    def is_retryable(self) -> bool:
        return self.kind != ErrorKind.VALIDATION

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "code": self.code,
            "status_code": self.status_code,
            "error_code": self.error_code,
            "error_subcode": self.error_subcode,
            "trace_id": self.trace_id,
            "field": self.field,
            "retry_after_seconds": self.retry_after_seconds,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})"
