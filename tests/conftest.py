"""Root test configuration: in-memory fakes for the platform and the network"""

import pytest


class FakeHost:
    """Image host recording every upload; each call gets a new URL."""

    def __init__(self, response: dict = None):
        self.calls: list[tuple[str, bytes]] = []
        self.response = response

    def upload_image(self, filename: str, data: bytes) -> dict:
        self.calls.append((filename, data))
        if self.response is not None:
            return self.response
        return {"url": f"https://mmbiz.example.com/img/{len(self.calls)}.png"}


class FakeResponse:
    def __init__(self, status_code: int = 200, content: bytes = b"", text: str = None):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self.content = content
        self.text = text if text is not None else content.decode("utf-8", errors="replace")


class FakeSession:
    """Stands in for requests.Session; replays queued responses and records requests."""

    def __init__(self, *responses: FakeResponse):
        self.responses = list(responses)
        self.requests: list[dict] = []

    def _next(self, **request) -> FakeResponse:
        self.requests.append(request)
        return self.responses.pop(0)

    def get(self, url, **kwargs):
        return self._next(method="GET", url=url, **kwargs)

    def post(self, url, **kwargs):
        return self._next(method="POST", url=url, **kwargs)

    def request(self, method, url, **kwargs):
        return self._next(method=method, url=url, **kwargs)


@pytest.fixture(name="host")
def host_fixture():
    return FakeHost()


@pytest.fixture(name="make_host")
def make_host_fixture():
    return FakeHost


@pytest.fixture(name="make_session")
def make_session_fixture():
    """Build a FakeSession from (status, body) pairs; str bodies are UTF-8 encoded."""
    def _make(*pairs):
        responses = [
            FakeResponse(status, body.encode("utf-8") if isinstance(body, str) else body)
            for status, body in pairs
        ]
        return FakeSession(*responses)
    return _make


@pytest.fixture(name="png_bytes")
def png_bytes_fixture():
    return b"\x89PNG\r\n\x1a\nfake-image-payload"
