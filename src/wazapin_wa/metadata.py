import platform
import sys
import threading
from dataclasses import dataclass
from importlib import metadata as importlib_metadata
from typing import Optional

DISTRIBUTION_NAME = "wazapin-wa"
_FALLBACK_VERSION = "0.0.0"


@dataclass(frozen=True)
class PlatformInfo:
    python_version: str
    platform: str
    arch: str


@dataclass(frozen=True)
class SDKMetadata:
    version: str
    user_agent: str
    platform: PlatformInfo


_cached_metadata: Optional[SDKMetadata] = None
_cache_lock = threading.Lock()


def get_sdk_version() -> str:
    try:
        return importlib_metadata.version(DISTRIBUTION_NAME)
    except importlib_metadata.PackageNotFoundError:
        return _FALLBACK_VERSION


def get_platform_info() -> PlatformInfo:
    return PlatformInfo(
        python_version=platform.python_version(),
        platform=sys.platform,
        arch=platform.machine() or "unknown",
    )


def build_user_agent(version: str, info: PlatformInfo) -> str:
    return f"wazapin-wa/{version} (Python/{info.python_version}; {info.platform}; {info.arch})"


def get_sdk_metadata() -> SDKMetadata:
    global _cached_metadata
    cached = _cached_metadata
    if cached is not None:
        return cached
    with _cache_lock:
        if _cached_metadata is None:
            version = get_sdk_version()
            info = get_platform_info()
            _cached_metadata = SDKMetadata(
                version=version,
                user_agent=build_user_agent(version, info),
                platform=info,
            )
        return _cached_metadata


def clear_metadata_cache() -> None:
    global _cached_metadata
    with _cache_lock:
        _cached_metadata = None
