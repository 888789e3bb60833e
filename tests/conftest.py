import sys, os, json
import pytest, pytest_asyncio, httpx, requests
from httpx import ASGITransport

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from qrscan.config import Settings
from qrscan.api_client import ScanApiClient
from qrscan.scan_service import ScanService
from qrscan.main import create_app

SECRET = "test-secret-key-0123456789-abcdefghij"


def make_response(status=200, payload=None, text=None):
    """Build a real requests.Response with a JSON (payload) or HTML (text) body."""
    resp = requests.Response()
    resp.status_code = status
    resp.encoding = "utf-8"
    if payload is not None:
        resp._content = json.dumps(payload).encode()
        resp.headers["Content-Type"] = "application/json; charset=utf-8"
    else:
        resp._content = (text or "").encode()
        resp.headers["Content-Type"] = "text/html"
    return resp


class FakeSession:
    """Stands in for requests.Session; replays queued responses or raises queued errors."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def post(self, url, **kwargs):
        return self.request("POST", url, **kwargs)


@pytest.fixture
def settings():
    return Settings(api_url="http://api.test", secret_key=SECRET)


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def service(settings, fake_session):
    api = ScanApiClient(settings.api_url, session=fake_session)
    return ScanService(settings, api=api)


@pytest_asyncio.fixture
async def client(settings, service):
    """Async test client bound to an app with a fake upstream session."""
    app = create_app(settings=settings, service=service)
    transport = ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
