from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

PHONE_NUMBER_PATTERN = r"^\+[1-9]\d{1,14}$"
_URL_PATTERN = r"^https?://\S+$"


class _ParamsModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class MediaInput(_ParamsModel):
    id: Optional[str] = Field(default=None, min_length=1)
    link: Optional[str] = Field(default=None, pattern=_URL_PATTERN)

    @model_validator(mode="after")
    def _exactly_one_source(self) -> "MediaInput":
        if (self.id is None) == (self.link is None):
            raise ValueError("media requires exactly one of 'id' or 'link'")
        return self


class TextMessageParams(_ParamsModel):
    to: str = Field(pattern=PHONE_NUMBER_PATTERN)
    text: str = Field(min_length=1, max_length=4096)
    preview_url: bool = False
    reply_to: Optional[str] = Field(default=None, min_length=1)


class MediaMessageParams(_ParamsModel):
    to: str = Field(pattern=PHONE_NUMBER_PATTERN)
    media_type: Literal["image", "video", "audio", "document", "sticker"]
    media: MediaInput
    caption: Optional[str] = Field(default=None, max_length=1024)
    filename: Optional[str] = None
    reply_to: Optional[str] = Field(default=None, min_length=1)

    @model_validator(mode="after")
    def _caption_allowed(self) -> "MediaMessageParams":
        if self.caption is not None and self.media_type not in {"image", "video", "document"}:
            raise ValueError(f"{self.media_type} messages do not support captions")
        if self.filename is not None and self.media_type != "document":
            raise ValueError("filename is only supported for document messages")
        return self


class LocationMessageParams(_ParamsModel):
    to: str = Field(pattern=PHONE_NUMBER_PATTERN)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    name: Optional[str] = None
    address: Optional[str] = None


class ContactName(_ParamsModel):
    formatted_name: str = Field(min_length=1)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    middle_name: Optional[str] = None
    suffix: Optional[str] = None
    prefix: Optional[str] = None


class ContactPhone(_ParamsModel):
    phone: str = Field(min_length=1)
    type: Optional[Literal["CELL", "MAIN", "IPHONE", "HOME", "WORK"]] = None
    wa_id: Optional[str] = None


class ContactEmail(_ParamsModel):
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    type: Optional[Literal["HOME", "WORK"]] = None


class ContactUrl(_ParamsModel):
    url: str = Field(pattern=_URL_PATTERN)
    type: Optional[Literal["HOME", "WORK"]] = None


class ContactAddress(_ParamsModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None
    country_code: Optional[str] = None
    type: Optional[Literal["HOME", "WORK"]] = None


class ContactOrg(_ParamsModel):
    company: Optional[str] = None
    department: Optional[str] = None
    title: Optional[str] = None


class ContactCard(_ParamsModel):
    name: ContactName
    phones: Optional[List[ContactPhone]] = None
    emails: Optional[List[ContactEmail]] = None
    urls: Optional[List[ContactUrl]] = None
    addresses: Optional[List[ContactAddress]] = None
    org: Optional[ContactOrg] = None
    birthday: Optional[str] = None


class ContactsMessageParams(_ParamsModel):
    to: str = Field(pattern=PHONE_NUMBER_PATTERN)
    contacts: List[ContactCard] = Field(min_length=1)


class ReactionMessageParams(_ParamsModel):
    to: str = Field(pattern=PHONE_NUMBER_PATTERN)
    message_id: str = Field(min_length=1)
    emoji: str


class InteractiveHeader(_ParamsModel):
    type: Literal["text", "image", "video", "document"]
    text: Optional[str] = Field(default=None, min_length=1, max_length=60)
    image: Optional[MediaInput] = None
    video: Optional[MediaInput] = None
    document: Optional[MediaInput] = None

    @model_validator(mode="after")
    def _content_matches_type(self) -> "InteractiveHeader":
        if getattr(self, self.type) is None:
            raise ValueError(f"header of type {self.type!r} requires a {self.type!r} value")
        return self


class InteractiveButton(_ParamsModel):
    id: str = Field(min_length=1, max_length=256)
    title: str = Field(min_length=1, max_length=20)


class InteractiveButtonsParams(_ParamsModel):
    to: str = Field(pattern=PHONE_NUMBER_PATTERN)
    body: str = Field(min_length=1, max_length=1024)
    buttons: List[InteractiveButton] = Field(min_length=1, max_length=3)
    header: Optional[InteractiveHeader] = None
    footer: Optional[str] = Field(default=None, max_length=60)


class InteractiveRow(_ParamsModel):
    id: str = Field(min_length=1, max_length=200)
    title: str = Field(min_length=1, max_length=24)
    description: Optional[str] = Field(default=None, max_length=72)


class InteractiveSection(_ParamsModel):
    title: str = Field(min_length=1, max_length=24)
    rows: List[InteractiveRow] = Field(min_length=1, max_length=10)


class InteractiveListParams(_ParamsModel):
    to: str = Field(pattern=PHONE_NUMBER_PATTERN)
    body: str = Field(min_length=1, max_length=1024)
    button_text: str = Field(min_length=1, max_length=20)
    sections: List[InteractiveSection] = Field(min_length=1, max_length=10)
    header: Optional[InteractiveHeader] = None
    footer: Optional[str] = Field(default=None, max_length=60)


class TemplateComponent(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Literal["header", "body", "button"]
    parameters: List[Dict[str, Any]] = Field(default_factory=list)
    sub_type: Optional[str] = None
    index: Optional[int] = None


class TemplateMessageParams(_ParamsModel):
    to: str = Field(pattern=PHONE_NUMBER_PATTERN)
    name: str = Field(min_length=1)
    language: str = Field(min_length=1)
    components: Optional[List[TemplateComponent]] = None
