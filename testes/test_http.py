import os
import sys
from datetime import datetime, timezone

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
requests = pytest.importorskip("requests")

from blog_importer.fetchers.http import RateLimiter, request_headers, retry_after_seconds, with_retries


def _response(status, retry_after=None):
    resp = requests.Response()
    resp.status_code = status
    if retry_after is not None:
        resp.headers["Retry-After"] = retry_after
    return resp


def test_rate_limiter_sleeps_for_remaining_interval():
    slept = []
    limiter = RateLimiter(60)
    limiter.wait(time_fn=lambda: 0.5, sleep_fn=slept.append)
    assert slept == [0.5]


def test_retries_on_server_error():
    responses = [_response(503, retry_after="0"), _response(200)]
    resp = with_retries(lambda: responses.pop(0))
    assert resp.status_code == 200
    assert responses == []


def test_client_error_is_not_retried():
    calls = []

    def fn():
        calls.append(1)
        return _response(404)

    with pytest.raises(requests.HTTPError):
        with_retries(fn)
    assert len(calls) == 1


def test_user_agent_header():
    assert request_headers({"user_agent": "ua"}) == {"User-Agent": "ua"}
    assert request_headers({})["User-Agent"]


def test_retry_after_seconds_and_dates():
    now = datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
    assert retry_after_seconds("120") == 120.0
    assert retry_after_seconds("Mon, 01 Jan 2024 00:00:30 GMT", now=now) == 30.0
    assert retry_after_seconds("Sun, 31 Dec 2023 23:59:00 GMT", now=now) == 0.0
    assert retry_after_seconds("soon") is None
    assert retry_after_seconds(None) is None


def test_retries_with_http_date_retry_after():
    responses = [_response(429, retry_after="Mon, 01 Jan 2001 00:00:00 GMT"), _response(200)]
    resp = with_retries(lambda: responses.pop(0))
    assert resp.status_code == 200
