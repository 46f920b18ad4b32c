"""
HTTP helpers for fetching legacy pages and copying image assets.

The transform pipeline never touches the network; this module is used by
the batch driver in :mod:`blog_importer.import_tool` to download the page
HTML before a transform and the image assets returned by it afterwards.  A
simple rate limiter keeps the importer from hammering the legacy site, and a
generic retry wrapper handles transient network errors and server-side rate
limiting responses (429 or 5xx).

Usage example::

    from blog_importer.fetchers.http import fetch_html, download_asset

    cfg = {"timeout": 30, "user_agent": "blog-importer"}
    html = fetch_html(cfg, "https://www.splunk.com/en_us/blog/foo.html")
    download_asset(cfg, "https://www.splunk.com/content/dam/a.png", "output/content/dam/a.png")
"""

from __future__ import annotations

import os
import time
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Callable, Dict, Optional

import requests

###############################################################################
# Rate limiting and retry utilities
###############################################################################

class RateLimiter:
    """
    Simple time-based rate limiter.  Ensures that no more than ``rpm``
    requests are dispatched per minute.
    """

    def __init__(self, rpm: int = 120) -> None:
        self.rpm = max(1, rpm)
        self.interval = 60.0 / float(self.rpm)
        self._last = 0.0

    def wait(self, time_fn: Callable[[], float] = time.time, sleep_fn: Callable[[float], None] = time.sleep) -> None:
        now = time_fn()
        dt = now - self._last
        if dt < self.interval:
            sleep_fn(self.interval - dt)
        self._last = time_fn()


def request_headers(cfg: Dict[str, Any]) -> Dict[str, str]:
    """
    Construct the default headers sent to the legacy site.

    :param cfg: The ``http`` configuration section.
    :return: A dictionary of headers including the User-Agent.
    """
    return {
        "User-Agent": cfg.get("user_agent") or "blog-importer/0.1",
    }


def retry_after_seconds(value: Optional[str], now: Optional[datetime] = None) -> Optional[float]:
    """
    Seconds to wait according to a ``Retry-After`` header, given either as a
    number of seconds or as an HTTP date.  Returns ``None`` when the header
    is missing or unreadable.
    """
    if not value:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    return max(0.0, (when - now).total_seconds())


def with_retries(fn: Callable[[], requests.Response], *, max_attempts: int = 5, base_delay: float = 0.7) -> requests.Response:
    """
    Execute a function returning a ``requests.Response``, retrying on
    transient HTTP errors.  Retries are attempted on status codes 429
    (too many requests) and 5xx server errors.  Backoff is exponential.

    :param fn: A zero-argument callable that performs the HTTP request.
    :param max_attempts: Maximum number of attempts before giving up.
    :param base_delay: Base delay in seconds for exponential backoff.
    :return: The successful ``requests.Response``.
    :raises requests.HTTPError: if all attempts fail.
    """
    attempt = 0
    while True:
        try:
            resp = fn()
            resp.raise_for_status()
            return resp
        except requests.HTTPError as e:
            status = e.response.status_code
            if status not in (429, 500, 502, 503, 504) or attempt >= max_attempts - 1:
                raise
            # Use Retry-After header if provided, otherwise exponential backoff
            wait = retry_after_seconds(e.response.headers.get("Retry-After"))
            if wait is None:
                wait = base_delay * (2 ** attempt)
            time.sleep(wait)
            attempt += 1
        except requests.RequestException:
            if attempt >= max_attempts - 1:
                raise
            time.sleep(base_delay * (2 ** attempt))
            attempt += 1


_limiter = RateLimiter(120)


###############################################################################
# Page and asset helpers
###############################################################################

def fetch_html(cfg: Dict[str, Any], url: str) -> str:
    """
    Download the HTML of a legacy page.

    :param cfg: The ``http`` configuration section (``timeout``, ``user_agent``).
    :param url: The page URL.
    :return: The decoded response body.
    :raises requests.RequestException: after all retries have failed.
    """
    _limiter.wait()
    def do_request() -> requests.Response:
        return requests.get(url, headers=request_headers(cfg), timeout=cfg.get("timeout", 30))
    resp = with_retries(do_request)
    resp.encoding = resp.encoding or "utf-8"
    return resp.text


def download_asset(cfg: Dict[str, Any], source: str, dest: str) -> str:
    """
    Copy one image asset to ``dest``, creating parent directories.

    :param cfg: The ``http`` configuration section.
    :param source: Absolute URL of the asset.
    :param dest: Local file path to write.
    :return: ``dest``.
    :raises requests.RequestException: after all retries have failed.
    """
    _limiter.wait()
    def do_request() -> requests.Response:
        return requests.get(source, headers=request_headers(cfg), timeout=cfg.get("timeout", 30))
    resp = with_retries(do_request)
    os.makedirs(os.path.dirname(dest) or ".", exist_ok=True)
    with open(dest, "wb") as f:
        f.write(resp.content)
    return dest
