import logging

from wazapin_wa import metadata
from wazapin_wa.log import REDACTED, RedactingFilter, configure_logging, get_logger, is_sensitive_key, redact
from wazapin_wa.metadata import build_user_agent, clear_metadata_cache, get_sdk_metadata


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.lines: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.lines.append(self.format(record))


def test_sensitive_keys_are_detected_by_name_and_suffix():
    assert is_sensitive_key("access_token")
    assert is_sensitive_key("Authorization")
    assert is_sensitive_key("appSecret")
    assert is_sensitive_key("verify_token")
    assert not is_sensitive_key("phone_number_id")


def test_redact_masks_nested_values():
    value = {
        "access_token": "EAAG",
        "payload": {"to": "+1555", "app_secret": "s"},
        "items": [{"password": "p"}],
    }

    assert redact(value) == {
        "access_token": REDACTED,
        "payload": {"to": "+1555", "app_secret": REDACTED},
        "items": [{"password": REDACTED}],
    }


def test_redact_summarizes_exceptions():
    assert redact(ValueError("boom")) == {"name": "ValueError", "message": "boom"}


def test_configure_logging_formats_and_redacts():
    handler = _ListHandler()
    logger = configure_logging(logging.DEBUG, handler=handler)
    try:
        get_logger("tests").info("config %s", {"access_token": "EAAG", "phone_number_id": "PNID"})
    finally:
        logger.removeHandler(handler)

    assert handler.lines == ["[wazapin-wa] [INFO] config {'access_token': '[REDACTED]', 'phone_number_id': 'PNID'}"]


def test_configure_logging_replaces_previous_managed_handler():
    first = _ListHandler()
    second = _ListHandler()
    logger = configure_logging(handler=first)
    configure_logging(handler=second)
    try:
        assert first not in logger.handlers
        assert second in logger.handlers
    finally:
        logger.removeHandler(second)


def test_redacting_filter_keeps_plain_args():
    record = logging.LogRecord("wazapin_wa", logging.INFO, __file__, 1, "%s %d", ("text", 3), None)

    assert RedactingFilter().filter(record)
    assert record.args == ("text", 3)


def test_get_logger_namespaces_under_package():
    assert get_logger().name == "wazapin_wa"
    assert get_logger("wazapin_wa.retry").name == "wazapin_wa.retry"
    assert get_logger("custom").name == "wazapin_wa.custom"


def test_sdk_metadata_is_cached_until_cleared(monkeypatch):
    clear_metadata_cache()
    calls: list[int] = []

    def fake_version() -> str:
        calls.append(1)
        return "9.9.9"

    monkeypatch.setattr(metadata, "get_sdk_version", fake_version)

    first = get_sdk_metadata()
    second = get_sdk_metadata()
    assert first is second
    assert first.version == "9.9.9"
    assert first.user_agent.startswith("wazapin-wa/9.9.9 (Python/")
    assert calls == [1]

    clear_metadata_cache()
    get_sdk_metadata()
    assert calls == [1, 1]
    clear_metadata_cache()


def test_build_user_agent_format():
    info = metadata.PlatformInfo(python_version="3.12.1", platform="linux", arch="x86_64")

    assert build_user_agent("1.2.3", info) == "wazapin-wa/1.2.3 (Python/3.12.1; linux; x86_64)"
