from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence

from .exceptions import WhatsAppError
from .messages.builders import MESSAGING_PRODUCT, compact
from .validation.account import (
    BusinessProfileResponse,
    BusinessProfileUpdate,
    MessagingLimitResponse,
    SuccessResponse,
)

if TYPE_CHECKING:
    from .client import AsyncWhatsAppClient, WhatsAppClient

MESSAGING_LIMIT_FIELD = "whatsapp_business_manager_messaging_limit"

DEFAULT_PROFILE_FIELDS = (
    "about",
    "address",
    "description",
    "email",
    "messaging_product",
    "profile_picture_url",
    "vertical",
    "websites",
)


def _profile_fields(fields: Optional[Sequence[str]]) -> str:
    return ",".join(fields or DEFAULT_PROFILE_FIELDS)


def _profile_endpoint(phone_number_id: str) -> str:
    return f"{phone_number_id}/whatsapp_business_profile"


def _subscription_endpoint(waba_id: str) -> str:
    if not waba_id:
        raise WhatsAppError.validation("waba_id is required", field="waba_id")
    return f"{waba_id}/subscribed_apps"


def _profile_update_payload(
    *,
    about: Optional[str],
    address: Optional[str],
    description: Optional[str],
    email: Optional[str],
    profile_picture_handle: Optional[str],
    vertical: Optional[str],
    websites: Optional[List[str]],
) -> Dict[str, Any]:
    payload = compact(
        {
            "about": about,
            "address": address,
            "description": description,
            "email": email,
            "profile_picture_handle": profile_picture_handle,
            "vertical": vertical,
            "websites": websites,
        }
    )
    payload["messaging_product"] = MESSAGING_PRODUCT
    return payload


class AccountService:
    def __init__(self, whatsapp_client: "WhatsAppClient") -> None:
        self._client = whatsapp_client

    def get_messaging_limit(self) -> Mapping[str, Any]:
        response = self._client.request_json(
            "GET",
            self._client.config.phone_number_id,
            params={"fields": MESSAGING_LIMIT_FIELD},
        )
        self._client.validate(MessagingLimitResponse, response)
        return response

    def get_business_profile(self, fields: Optional[Sequence[str]] = None) -> Mapping[str, Any]:
        response = self._client.request_json(
            "GET",
            _profile_endpoint(self._client.config.phone_number_id),
            params={"fields": _profile_fields(fields)},
        )
        self._client.validate(BusinessProfileResponse, response)
        return response

    def update_business_profile(
        self,
        *,
        about: Optional[str] = None,
        address: Optional[str] = None,
        description: Optional[str] = None,
        email: Optional[str] = None,
        profile_picture_handle: Optional[str] = None,
        vertical: Optional[str] = None,
        websites: Optional[List[str]] = None,
    ) -> Mapping[str, Any]:
        payload = _profile_update_payload(
            about=about,
            address=address,
            description=description,
            email=email,
            profile_picture_handle=profile_picture_handle,
            vertical=vertical,
            websites=websites,
        )
        self._client.validate(BusinessProfileUpdate, payload)
        response = self._client.request_json(
            "POST",
            _profile_endpoint(self._client.config.phone_number_id),
            payload=payload,
        )
        self._client.validate(SuccessResponse, response)
        return response

    def subscribe_app(self, waba_id: str) -> Mapping[str, Any]:
        return self._client.request_json("POST", _subscription_endpoint(waba_id))

    def unsubscribe_app(self, waba_id: str) -> Mapping[str, Any]:
        return self._client.request_json("DELETE", _subscription_endpoint(waba_id))


class AsyncAccountService:
    def __init__(self, whatsapp_client: "AsyncWhatsAppClient") -> None:
        self._client = whatsapp_client

    async def get_messaging_limit(self) -> Mapping[str, Any]:
        response = await self._client.request_json(
            "GET",
            self._client.config.phone_number_id,
            params={"fields": MESSAGING_LIMIT_FIELD},
        )
        self._client.validate(MessagingLimitResponse, response)
        return response

    async def get_business_profile(self, fields: Optional[Sequence[str]] = None) -> Mapping[str, Any]:
        response = await self._client.request_json(
            "GET",
            _profile_endpoint(self._client.config.phone_number_id),
            params={"fields": _profile_fields(fields)},
        )
        self._client.validate(BusinessProfileResponse, response)
        return response

    async def update_business_profile(
        self,
        *,
        about: Optional[str] = None,
        address: Optional[str] = None,
        description: Optional[str] = None,
        email: Optional[str] = None,
        profile_picture_handle: Optional[str] = None,
        vertical: Optional[str] = None,
        websites: Optional[List[str]] = None,
    ) -> Mapping[str, Any]:
        payload = _profile_update_payload(
            about=about,
            address=address,
            description=description,
            email=email,
            profile_picture_handle=profile_picture_handle,
            vertical=vertical,
            websites=websites,
        )
        self._client.validate(BusinessProfileUpdate, payload)
        response = await self._client.request_json(
            "POST",
            _profile_endpoint(self._client.config.phone_number_id),
            payload=payload,
        )
        self._client.validate(SuccessResponse, response)
        return response

    async def subscribe_app(self, waba_id: str) -> Mapping[str, Any]:
        return await self._client.request_json("POST", _subscription_endpoint(waba_id))

    async def unsubscribe_app(self, waba_id: str) -> Mapping[str, Any]:
        return await self._client.request_json("DELETE", _subscription_endpoint(waba_id))
