from typing import Any, Dict, Mapping, Optional

import httpx

from .config import DEFAULT_API_VERSION, DEFAULT_BASE_URL
from .exceptions import RATE_LIMIT_STATUS_CODE, WhatsAppError
from .log import get_logger
from .metadata import get_sdk_metadata

logger = get_logger(__name__)


def _as_optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        try:
            return int(stripped)
        except ValueError:
            return None
    return None


def _as_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return str(value)


def parse_retry_after(value: Optional[str]) -> Optional[int]:
    seconds = _as_optional_int(value)
    if seconds is None or seconds < 0:
        return None
    return seconds


def error_from_response(response: httpx.Response) -> WhatsAppError:
    try:
        body = response.json()
    except ValueError:
        body = {}
    error = body.get("error") if isinstance(body, Mapping) else None
    if not isinstance(error, Mapping):
        error = {}
    message = _as_optional_str(error.get("message")) or f"HTTP {response.status_code}: {response.reason_phrase}"
    trace_id = _as_optional_str(error.get("fbtrace_id"))
    if response.status_code == RATE_LIMIT_STATUS_CODE:
        return WhatsAppError.rate_limit(
            message,
            retry_after_seconds=parse_retry_after(response.headers.get("retry-after")),
            trace_id=trace_id,
        )
    return WhatsAppError.api(
        message,
        status_code=response.status_code,
        error_code=_as_optional_int(error.get("code")) or 0,
        error_subcode=_as_optional_int(error.get("error_subcode")),
        trace_id=trace_id,
    )


def _decode_json_object(response: httpx.Response) -> Dict[str, Any]:
    try:
        data = response.json()
    except ValueError as exc:
        raise WhatsAppError.network("response body is not valid json", cause=exc) from exc
    if not isinstance(data, dict):
        raise WhatsAppError.network("response body is not a json object")
    return data


def _check_response(method: str, url: str, response: httpx.Response) -> None:
    if response.status_code < 400:
        return
    error = error_from_response(response)
    logger.warning(
        "%s %s failed with status %s (error_code=%s, trace_id=%s)",
        method,
        url,
        response.status_code,
        error.error_code,
        error.trace_id,
    )
    raise error


class _TransportBase:
    def __init__(
        self,
        *,
        access_token: str,
        base_url: str = DEFAULT_BASE_URL,
        api_version: str = DEFAULT_API_VERSION,
        timeout_seconds: float = 30.0,
    ) -> None:
        self._access_token = access_token
        self._base_url = base_url.rstrip("/")
        self._api_version = api_version.strip("/")
        self._timeout_seconds = timeout_seconds

    @property
    def timeout_seconds(self) -> float:
        return self._timeout_seconds

    def build_url(self, endpoint: str) -> str:
        return f"{self._base_url}/{self._api_version}/{endpoint.lstrip('/')}"

    def _headers(self, *, json_body: bool) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._access_token}",
            "User-Agent": get_sdk_metadata().user_agent,
        }
        if json_body:
            headers["Content-Type"] = "application/json"
        return headers

    def _timeout_error(self, exc: Exception) -> WhatsAppError:
        return WhatsAppError.network(f"request timeout after {self._timeout_seconds}s", cause=exc)


class JsonHttpClient(_TransportBase):
    def __init__(
        self,
        *,
        access_token: str,
        base_url: str = DEFAULT_BASE_URL,
        api_version: str = DEFAULT_API_VERSION,
        timeout_seconds: float = 30.0,
        session: Optional[httpx.Client] = None,
    ) -> None:
        super().__init__(
            access_token=access_token,
            base_url=base_url,
            api_version=api_version,
            timeout_seconds=timeout_seconds,
        )
        self._session = session or httpx.Client()

    def request_json(
        self,
        method: str,
        endpoint: str,
        *,
        payload: Optional[Mapping[str, object]] = None,
        params: Optional[Mapping[str, object]] = None,
    ) -> Dict[str, Any]:
        method_upper = method.upper()
        url = self.build_url(endpoint)
        send_body = method_upper != "GET" and payload is not None
        logger.debug("%s %s params=%s", method_upper, url, dict(params or {}))
        response = self._send(
            method_upper,
            url,
            headers=self._headers(json_body=send_body),
            params=dict(params or {}),
            json=dict(payload) if send_body and payload is not None else None,
        )
        _check_response(method_upper, url, response)
        return _decode_json_object(response)

    def request_multipart(
        self,
        endpoint: str,
        *,
        data: Mapping[str, str],
        files: Mapping[str, Any],
    ) -> Dict[str, Any]:
        url = self.build_url(endpoint)
        logger.debug("POST %s (multipart)", url)
        response = self._send(
            "POST",
            url,
            headers=self._headers(json_body=False),
            data=dict(data),
            files=dict(files),
        )
        _check_response("POST", url, response)
        return _decode_json_object(response)

    def request_bytes(self, url: str) -> bytes:
        logger.debug("GET %s (binary)", url)
        response = self._send("GET", url, headers=self._headers(json_body=False))
        _check_response("GET", url, response)
        return response.content

    def close(self) -> None:
        self._session.close()

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._session.request(method, url, timeout=self._timeout_seconds, **kwargs)
        except httpx.TimeoutException as exc:
            raise self._timeout_error(exc) from exc
        except httpx.HTTPError as exc:
            raise WhatsAppError.network("network request failed", cause=exc) from exc
        except Exception as exc:
            raise WhatsAppError.network("an unexpected error occurred", cause=exc) from exc


class AsyncJsonHttpClient(_TransportBase):
    def __init__(
        self,
        *,
        access_token: str,
        base_url: str = DEFAULT_BASE_URL,
        api_version: str = DEFAULT_API_VERSION,
        timeout_seconds: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        super().__init__(
            access_token=access_token,
            base_url=base_url,
            api_version=api_version,
            timeout_seconds=timeout_seconds,
        )
        self._client = client or httpx.AsyncClient()

    async def request_json(
        self,
        method: str,
        endpoint: str,
        *,
        payload: Optional[Mapping[str, object]] = None,
        params: Optional[Mapping[str, object]] = None,
    ) -> Dict[str, Any]:
        method_upper = method.upper()
        url = self.build_url(endpoint)
        send_body = method_upper != "GET" and payload is not None
        logger.debug("%s %s params=%s", method_upper, url, dict(params or {}))
        response = await self._send(
            method_upper,
            url,
            headers=self._headers(json_body=send_body),
            params=dict(params or {}),
            json=dict(payload) if send_body and payload is not None else None,
        )
        _check_response(method_upper, url, response)
        return _decode_json_object(response)

    async def request_multipart(
        self,
        endpoint: str,
        *,
        data: Mapping[str, str],
        files: Mapping[str, Any],
    ) -> Dict[str, Any]:
        url = self.build_url(endpoint)
        logger.debug("POST %s (multipart)", url)
        response = await self._send(
            "POST",
            url,
            headers=self._headers(json_body=False),
            data=dict(data),
            files=dict(files),
        )
        _check_response("POST", url, response)
        return _decode_json_object(response)

    async def request_bytes(self, url: str) -> bytes:
        logger.debug("GET %s (binary)", url)
        response = await self._send("GET", url, headers=self._headers(json_body=False))
        _check_response("GET", url, response)
        return response.content

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._client.request(method, url, timeout=self._timeout_seconds, **kwargs)
        except httpx.TimeoutException as exc:
            raise self._timeout_error(exc) from exc
        except httpx.HTTPError as exc:
            raise WhatsAppError.network("network request failed", cause=exc) from exc
        except Exception as exc:
            raise WhatsAppError.network("an unexpected error occurred", cause=exc) from exc
