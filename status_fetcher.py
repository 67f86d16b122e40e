import logging
import time
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urljoin

import requests

from config import STATUS_TIMEOUT_SECONDS
from models import PlaybackStatus

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    error: bool
    status: Optional[PlaybackStatus] = None
    progress_ms: int = 0


def resolve_status_url(status_url, base_url=None):
    """Absolute status URL; a relative path is joined to `base_url`."""
    if status_url.startswith(("http://", "https://")) or not base_url:
        return status_url
    return urljoin(base_url.rstrip("/") + "/", status_url.lstrip("/"))


def request_base_url(headers, fallback_scheme="http"):
    """Base URL of the incoming request, honoring a proxy's X-Forwarded-Proto."""
    host = headers.get("Host")
    if not host:
        return None
    scheme = headers.get("X-Forwarded-Proto") or fallback_scheme
    # Proxies may append: "https, http"
    scheme = scheme.split(",")[0].strip()
    return f"{scheme}://{host}"


def fetch_currently_playing(url, session=None, clock=time.time, timeout=STATUS_TIMEOUT_SECONDS):
    """
    Fetch the current playback status and estimate where playback is now.

    Never raises for transport or body problems: any failure comes back as
    FetchResult(error=True). A playing track gets its progress corrected for
    the time between the upstream snapshot and now.
    """
    http = session or requests
    try:
        resp = http.get(url, timeout=timeout)
        resp.raise_for_status()
        status = PlaybackStatus.from_json(resp.json())
        progress_ms = status.corrected_elapsed_ms(clock() * 1000) if status.is_playing else 0
    except (requests.RequestException, ValueError, OverflowError) as e:
        log.warning("Status fetch from %s failed: %s", url, e)
        return FetchResult(error=True)

    return FetchResult(error=False, status=status, progress_ms=progress_ms)
