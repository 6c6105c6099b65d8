import sys
from pathlib import Path

import pytest

# Ensure `leads_dashboard` is importable when running pytest from the project root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from leads_dashboard.core import config  # noqa: E402
from leads_dashboard.vendors import scrape_api  # noqa: E402


class DummyResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json body")
        return self._payload


class DummySession:
    def __init__(self):
        self.calls = []
        self.responses = []

    def queue(self, *responses):
        self.responses.extend(responses)

    def request(self, method, url, timeout=None, **kwargs):
        self.calls.append((method, url, kwargs, timeout))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture(autouse=True)
def api_env(monkeypatch):
    monkeypatch.setenv("SCRAPE_API_BASE_URL", "http://api.test")
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()


@pytest.fixture
def session(monkeypatch):
    dummy = DummySession()
    monkeypatch.setattr(scrape_api, "_SESSION", dummy)
    return dummy
