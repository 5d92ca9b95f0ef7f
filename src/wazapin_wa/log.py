import logging
from collections.abc import Mapping
from typing import Any, Optional, Union

LOGGER_NAME = "wazapin_wa"
REDACTED = "[REDACTED]"

_SENSITIVE_KEYS = (
    "accesstoken",
    "access_token",
    "password",
    "secret",
    "token",
    "apikey",
    "api_key",
    "authorization",
    "auth",
)

_FORMAT = "[wazapin-wa] [%(levelname)s] %(message)s"
_TIMESTAMP_FORMAT = "[%(asctime)s] " + _FORMAT


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if not name or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def is_sensitive_key(key: str) -> bool:
    lowered = str(key).lower()
    return any(lowered == marker or lowered.endswith(marker) for marker in _SENSITIVE_KEYS)


def redact(value: Any) -> Any:
    if isinstance(value, BaseException):
        return {"name": type(value).__name__, "message": str(value)}
    if isinstance(value, Mapping):
        return {
            str(key): (REDACTED if is_sensitive_key(str(key)) else redact(item))
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact(item) for item in value]
    return value


class RedactingFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.args, Mapping):
            record.args = redact(record.args)
        elif isinstance(record.args, tuple):
            record.args = tuple(
                redact(arg) if isinstance(arg, (Mapping, list)) else arg for arg in record.args
            )
        return True


def configure_logging(
    level: Union[int, str] = logging.INFO,
    *,
    timestamp: bool = False,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    for existing in list(logger.handlers):
        if getattr(existing, "_wazapin_managed", False):
            logger.removeHandler(existing)
    target = handler or logging.StreamHandler()
    target.setFormatter(logging.Formatter(_TIMESTAMP_FORMAT if timestamp else _FORMAT))
    target.addFilter(RedactingFilter())
    setattr(target, "_wazapin_managed", True)
    logger.addHandler(target)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger


logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())
