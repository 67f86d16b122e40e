import time

import pytest
import requests


class FakeResponse:
    def __init__(self, body=None, status_code=200, invalid_json=False):
        self.body = body
        self.status_code = status_code
        self.invalid_json = invalid_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self.invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self.body


class FakeSession:
    """Stands in for `requests`: records URLs and returns a canned response."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.response


def status_body(is_playing=True, **overrides):
    body = {
        "isPlaying": is_playing,
        "name": "Windowlicker",
        "artist": "Aphex Twin",
        "image": "https://i.scdn.co/image/cover",
        "url": "https://open.spotify.com/track/abc",
        "id": "abc",
        "duration_ms": 367000,
        "progress_ms": 10000,
        "timestamp": int(time.time() * 1000),
    }
    body.update(overrides)
    return body


@pytest.fixture
def fake_requests(monkeypatch):
    """Route module-level requests.get through a FakeSession."""
    session = FakeSession(FakeResponse(status_body()))
    monkeypatch.setattr(requests, "get", session.get)
    return session
