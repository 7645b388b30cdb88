"""
Runtime platform probe.
"""

from __future__ import annotations

import platform as _platform
import sys

from .types import PlatformInfo

_MOBILE_PLATFORMS = {"android", "ios"}
_BROWSER_PLATFORMS = {"emscripten", "wasi"}


def get_platform_info() -> PlatformInfo:
    """Describe the runtime: mobile, browser, server interpreter, or unknown."""
    try:
        system = sys.platform
        if system in _MOBILE_PLATFORMS:
            return PlatformInfo(platform=system, version=_platform.release() or "unknown")
        if system in _BROWSER_PLATFORMS:
            return PlatformInfo(platform="web", version=_platform.python_version())
        return PlatformInfo(platform="python", version=_platform.python_version())
    except Exception:
        return PlatformInfo(platform="unknown", version="unknown")
