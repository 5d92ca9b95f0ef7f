import asyncio
import hashlib
import hmac

from wazapin_wa.webhook.security import (
    compute_signature,
    constant_time_equals,
    extract_signature_header,
    sign_payload,
    verify_signature,
    verify_webhook_signature,
)

_SECRET = "s3cr3t"
_BODY = b'{"object":"whatsapp_business_account","entry":[]}'


def _header(body: bytes = _BODY, secret: str = _SECRET) -> str:
    return "sha256=" + hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


def test_compute_signature_is_lowercase_hex_hmac_sha256():
    digest = compute_signature(_BODY, _SECRET)

    assert digest == hmac.new(b"s3cr3t", _BODY, hashlib.sha256).hexdigest()
    assert len(digest) == 64
    assert digest == digest.lower()


_KNOWN_BODY = '{"object":"whatsapp_business_account"}'
_KNOWN_DIGEST = "6e8ddfd7f9da1721f11cfdf13893594c5ffed70a767c5b5b193960dee6dec37e"


def test_known_digest_for_fixed_payload():
    assert compute_signature(_KNOWN_BODY, _SECRET) == _KNOWN_DIGEST
    assert verify_signature(_KNOWN_BODY, "sha256=" + _KNOWN_DIGEST, _SECRET) is True
    assert verify_signature(_KNOWN_BODY.encode("utf-8"), _KNOWN_DIGEST, _SECRET) is True


def test_known_digest_with_last_character_flipped_is_rejected():
    flipped = _KNOWN_DIGEST[:-1] + "f"

    assert verify_signature(_KNOWN_BODY, "sha256=" + flipped, _SECRET) is False


def test_valid_signature_is_accepted():
    assert verify_signature(_BODY, _header(), _SECRET) is True
    assert verify_signature(_BODY.decode("utf-8"), _header(), _SECRET) is True


def test_signature_without_prefix_is_accepted():
    assert verify_signature(_BODY, compute_signature(_BODY, _SECRET), _SECRET) is True


def test_changed_last_hex_character_is_rejected():
    header = _header()
    tampered = header[:-1] + ("0" if header[-1] != "0" else "1")

    assert verify_signature(_BODY, tampered, _SECRET) is False


def test_mutated_body_is_rejected():
    header = _header()
    mutated = bytearray(_BODY)
    mutated[10] ^= 0x01

    assert verify_signature(bytes(mutated), header, _SECRET) is False


def test_reformatted_json_is_rejected():
    reformatted = b'{"object": "whatsapp_business_account", "entry": []}'

    assert verify_signature(reformatted, _header(), _SECRET) is False


def test_wrong_secret_is_rejected():
    assert verify_signature(_BODY, _header(secret="other"), _SECRET) is False


def test_malformed_input_returns_false_instead_of_raising():
    assert verify_signature(_BODY, "", _SECRET) is False
    assert verify_signature(_BODY, None, _SECRET) is False
    assert verify_signature(_BODY, "sha256=", _SECRET) is False
    assert verify_signature(_BODY, "sha256=zz", _SECRET) is False
    assert verify_signature(_BODY, _header(), "") is False
    assert verify_signature(object(), _header(), _SECRET) is False  # type: ignore[arg-type]
    assert verify_signature(_BODY, 12345, _SECRET) is False  # type: ignore[arg-type]
    assert verify_signature(_BODY, _header(), _SECRET, digestmod="no-such-digest") is False


def test_non_ascii_signature_is_rejected():
    assert verify_signature(_BODY, "sha256=" + "é" * 32, _SECRET) is False


def test_constant_time_equals():
    assert constant_time_equals("abc", "abc") is True
    assert constant_time_equals("abc", "abd") is False
    assert constant_time_equals("abc", "abcd") is False
    assert constant_time_equals("", "") is True


def test_extract_signature_header_is_case_insensitive():
    assert extract_signature_header({"X-Hub-Signature-256": "sha256=ab"}) == "sha256=ab"
    assert extract_signature_header({"x-hub-signature-256": "sha256=cd"}) == "sha256=cd"
    assert extract_signature_header({"Content-Type": "application/json"}) is None


def test_sign_payload_round_trips_through_verifier():
    header = sign_payload(_BODY, _SECRET)

    assert header.startswith("sha256=")
    assert verify_signature(_BODY, header, _SECRET) is True


def test_async_verifier_matches_sync_result():
    async def run() -> tuple:
        ok = await verify_webhook_signature(_BODY, _header(), _SECRET)
        bad = await verify_webhook_signature(_BODY, "sha256=00", _SECRET)
        return ok, bad

    assert asyncio.run(run()) == (True, False)
