import mimetypes
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping, Optional, Tuple

from .exceptions import WhatsAppError
from .messages.builders import MESSAGING_PRODUCT
from .types import MediaType

if TYPE_CHECKING:
    from .client import AsyncWhatsAppClient, WhatsAppClient

_KB = 1024
_MB = 1024 * 1024

MAX_FILE_SIZES = {
    MediaType.IMAGE: 5 * _MB,
    MediaType.VIDEO: 16 * _MB,
    MediaType.AUDIO: 16 * _MB,
    MediaType.DOCUMENT: 100 * _MB,
    MediaType.STICKER: 500 * _KB,
}


@dataclass(frozen=True)
class MediaUrl:
    url: str
    mime_type: Optional[str]
    sha256: Optional[str]
    file_size: Optional[int]
    media_id: Optional[str] = None

    @classmethod
    def from_response(cls, response: Mapping[str, Any]) -> "MediaUrl":
        url = response.get("url")
        if not isinstance(url, str) or not url:
            raise WhatsAppError.generic("media url response has no url", code="MEDIA_URL_MISSING")
        file_size = response.get("file_size")
        return cls(
            url=url,
            mime_type=_as_optional_str(response.get("mime_type")),
            sha256=_as_optional_str(response.get("sha256")),
            file_size=int(file_size) if isinstance(file_size, (int, str)) and str(file_size).isdigit() else None,
            media_id=_as_optional_str(response.get("id")),
        )


@dataclass(frozen=True)
class MediaDownload:
    content: bytes
    mime_type: Optional[str]
    sha256: Optional[str]
    file_size: Optional[int]


def _as_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def media_type_for_mime(mime_type: str) -> MediaType:
    normalized = mime_type.strip().lower()
    if normalized == "image/webp":
        return MediaType.STICKER
    if normalized.startswith("image/"):
        return MediaType.IMAGE
    if normalized.startswith("video/"):
        return MediaType.VIDEO
    if normalized.startswith("audio/"):
        return MediaType.AUDIO
    return MediaType.DOCUMENT


def check_upload_size(content: bytes, mime_type: str) -> MediaType:
    media_type = media_type_for_mime(mime_type)
    max_size = MAX_FILE_SIZES[media_type]
    size = len(content)
    if size > max_size:
        raise WhatsAppError.validation(
            f"File size ({size} bytes) exceeds maximum allowed size for {media_type.value} ({max_size} bytes)",
            field="file",
        )
    return media_type


def _upload_parts(
    content: bytes,
    mime_type: str,
    filename: str,
) -> Tuple[Mapping[str, str], Mapping[str, Any]]:
    check_upload_size(content, mime_type)
    data = {"messaging_product": MESSAGING_PRODUCT, "type": mime_type}
    files = {"file": (filename, content, mime_type)}
    return data, files


def _read_file(path: str, mime_type: Optional[str]) -> Tuple[str, bytes, str]:
    filename = os.path.basename(path)
    guessed = mime_type or mimetypes.guess_type(filename)[0] or "application/octet-stream"
    with open(path, "rb") as file_obj:
        return filename, file_obj.read(), guessed


def _media_endpoint(phone_number_id: str) -> str:
    return f"{phone_number_id}/media"


class MediaService:
    def __init__(self, whatsapp_client: "WhatsAppClient") -> None:
        self._client = whatsapp_client

    def upload(self, content: bytes, mime_type: str, *, filename: str = "file") -> Mapping[str, Any]:
        data, files = _upload_parts(content, mime_type, filename)
        return self._client.request_multipart(
            _media_endpoint(self._client.config.phone_number_id),
            data=data,
            files=files,
        )

    def upload_file(self, path: str, *, mime_type: Optional[str] = None) -> Mapping[str, Any]:
        filename, content, resolved_mime = _read_file(path, mime_type)
        return self.upload(content, resolved_mime, filename=filename)

    def get_url(self, media_id: str) -> MediaUrl:
        return MediaUrl.from_response(self._client.request_json("GET", media_id))

    def download(self, media_id: str) -> MediaDownload:
        info = self.get_url(media_id)
        content = self._client.request_bytes(info.url)
        return MediaDownload(content=content, mime_type=info.mime_type, sha256=info.sha256, file_size=info.file_size)

    def delete(self, media_id: str) -> Mapping[str, Any]:
        return self._client.request_json("DELETE", media_id)


class AsyncMediaService:
    def __init__(self, whatsapp_client: "AsyncWhatsAppClient") -> None:
        self._client = whatsapp_client

    async def upload(self, content: bytes, mime_type: str, *, filename: str = "file") -> Mapping[str, Any]:
        data, files = _upload_parts(content, mime_type, filename)
        return await self._client.request_multipart(
            _media_endpoint(self._client.config.phone_number_id),
            data=data,
            files=files,
        )

    async def upload_file(self, path: str, *, mime_type: Optional[str] = None) -> Mapping[str, Any]:
        filename, content, resolved_mime = _read_file(path, mime_type)
        return await self.upload(content, resolved_mime, filename=filename)

    async def get_url(self, media_id: str) -> MediaUrl:
        return MediaUrl.from_response(await self._client.request_json("GET", media_id))

    async def download(self, media_id: str) -> MediaDownload:
        info = await self.get_url(media_id)
        content = await self._client.request_bytes(info.url)
        return MediaDownload(content=content, mime_type=info.mime_type, sha256=info.sha256, file_size=info.file_size)

    async def delete(self, media_id: str) -> Mapping[str, Any]:
        return await self._client.request_json("DELETE", media_id)
