from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

MessagingLimitTier = Literal["TIER_250", "TIER_2000", "TIER_10K", "TIER_100K", "TIER_UNLIMITED"]

BusinessVertical = Literal[
    "AUTOMOTIVE",
    "BEAUTY",
    "APPAREL",
    "EDU",
    "ENTERTAIN",
    "EVENT_PLAN",
    "FINANCE",
    "GROCERY",
    "GOVT",
    "HOTEL",
    "HEALTH",
    "NONPROFIT",
    "PROF_SERVICES",
    "RETAIL",
    "TRAVEL",
    "RESTAURANT",
    "OTHER",
]

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
_URL_PATTERN = r"^https?://\S+$"


class MessagingLimitResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    whatsapp_business_manager_messaging_limit: MessagingLimitTier
    id: str


class BusinessProfile(BaseModel):
    model_config = ConfigDict(extra="allow")

    messaging_product: str
    about: Optional[str] = Field(default=None, max_length=139)
    address: Optional[str] = Field(default=None, max_length=256)
    description: Optional[str] = Field(default=None, max_length=512)
    email: Optional[str] = Field(default=None, max_length=128, pattern=_EMAIL_PATTERN)
    profile_picture_url: Optional[str] = None
    vertical: Optional[BusinessVertical] = None
    websites: Optional[List[str]] = Field(default=None, max_length=2)


class BusinessProfileResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    data: List[BusinessProfile]


class BusinessProfileUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    messaging_product: Literal["whatsapp"] = "whatsapp"
    about: Optional[str] = Field(default=None, max_length=139)
    address: Optional[str] = Field(default=None, max_length=256)
    description: Optional[str] = Field(default=None, max_length=512)
    email: Optional[str] = Field(default=None, max_length=128, pattern=_EMAIL_PATTERN)
    profile_picture_handle: Optional[str] = None
    vertical: Optional[BusinessVertical] = None
    websites: Optional[List[str]] = Field(default=None, max_length=2)


class SuccessResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    success: bool
