from typing import Mapping, Optional

from .errors import WebhookChallengeError
from .security import constant_time_equals

SUBSCRIBE_MODE = "subscribe"


def verify_subscription_challenge(
    mode: Optional[str],
    verify_token: Optional[str],
    challenge: Optional[str],
    expected_token: Optional[str],
) -> str:
    if not expected_token:
        raise WebhookChallengeError("verify token is not configured")
    if mode != SUBSCRIBE_MODE or not verify_token or not constant_time_equals(verify_token, expected_token):
        raise WebhookChallengeError("webhook verification failed")
    return challenge or ""


def verify_subscription_query(query: Mapping[str, str], expected_token: Optional[str]) -> str:
    return verify_subscription_challenge(
        query.get("hub.mode"),
        query.get("hub.verify_token"),
        query.get("hub.challenge"),
        expected_token,
    )
