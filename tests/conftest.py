import io
import json
import threading
import time

import pytest
import requests


def _entry(url, height, width, thumbnail, source):
    inner = [None] * 23
    inner[2] = [thumbnail, 120, 90]
    inner[3] = [url, height, width]
    inner[22] = {"2003": [None, "title", source]}
    return [[{"444383007": [None, inner]}]]


def _page(entries):
    root = [None] * 56 + [[None, [[["unused"], [None, [entries]]]]]]
    payload = json.dumps(root)
    return (
        "<html><head><script>AF_initDataCallback({key: 'ds:0', data:[1, 2], "
        "sideChannel: {}});</script></head><body>"
        "<script nonce=\"x\">AF_initDataCallback({key: 'ds:1', hash: '2', data:"
        + payload
        + ", sideChannel: {}});</script></body></html>"
    )


@pytest.fixture
def make_entry():
    return _entry


@pytest.fixture
def make_page():
    return _page


class FakeRaw:
    def __init__(self, content):
        self._body = io.BytesIO(content)

    def read1(self, amt=-1, decode_content=None):
        return self._body.read1(amt)


class FakeResponse:
    def __init__(self, content, status=200):
        self.content = content
        self.status_code = status
        self.raw = FakeRaw(content)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    """Serves canned bodies by URL; exceptions in the map are raised.

    ``delay`` holds every request open for that many seconds, and ``peak``
    records the most requests that were in flight at once.
    """

    def __init__(self, responses, delay=0.0):
        self.responses = responses
        self.delay = delay
        self.calls = []
        self.closed = False
        self.active = 0
        self.peak = 0
        self._lock = threading.Lock()

    def get(self, url, timeout=None, stream=False):
        with self._lock:
            self.calls.append(url)
            self.active += 1
            self.peak = max(self.peak, self.active)
        try:
            if self.delay:
                time.sleep(self.delay)
            outcome = self.responses[url]
        finally:
            with self._lock:
                self.active -= 1
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, FakeResponse):
            return outcome
        return FakeResponse(outcome)

    def close(self):
        self.closed = True


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def fake_response():
    return FakeResponse
