import os
import types
import warnings
from decimal import Decimal

# Module-level settings are built at import time: keep tests offline and keyless.
os.environ["OPENAI_API_KEY"] = ""
os.environ["AUTO_REFRESH"] = "false"
os.environ.setdefault("LOG_LEVEL", "debug")

import pytest
from starlette.testclient import TestClient

from dolarvzla.models import EUR_OFFICIAL, USD_OFFICIAL, USDT_MARKET, MarketSnapshot, SourceResult
from dolarvzla.settings import Settings

TEST_URLS = {
    "DOLARVZLA_URL": "https://dolarvzla.test/public/exchange-rate",
    "DOLARAPI_BASE_URL": "https://dolarapi.test/v1",
    "YADIO_URL": "https://yadio.test/rate/USD/VES",
}


@pytest.fixture(scope="session", autouse=True)
def _quiet_warnings():
    # FastAPI on_event deprecation is noise for these tests
    warnings.filterwarnings("ignore", category=DeprecationWarning, module=r"fastapi\..*")


def make_settings(**overrides) -> Settings:
    values = {"OPENAI_API_KEY": None, "AUTO_REFRESH": False, **TEST_URLS}
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture()
def settings():
    return make_settings()


@pytest.fixture()
def settings_with_key():
    return make_settings(OPENAI_API_KEY="sk-test")


def make_snapshot(usd="36.80", eur="40.10", usdt="55.56", label="Fuente: DolarVzla") -> MarketSnapshot:
    return MarketSnapshot(
        usd_official=USD_OFFICIAL.model_copy(update={"price": Decimal(usd)}),
        eur_official=EUR_OFFICIAL.model_copy(update={"price": Decimal(eur)}),
        usdt_market=USDT_MARKET.model_copy(update={"price": Decimal(usdt)}),
        last_update_label=label,
        attributions=[],
    )


@pytest.fixture()
def snapshot():
    return make_snapshot()


class FakeSource:
    """Official-rate source with a canned result and a call counter."""

    def __init__(self, name, result=None, exc=None):
        self.name = name
        self.result = result
        self.exc = exc
        self.calls = 0

    async def fetch(self):
        self.calls += 1
        if self.exc is not None:
            raise self.exc
        return self.result


def ok_source(name, usd="36.8", eur="40.1"):
    return FakeSource(name, SourceResult(usd=Decimal(usd), eur=Decimal(eur), origin_label=name))


class FakeResponses:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.exc is not None:
            raise self.exc
        return self.response


class FakeOpenAI:
    def __init__(self, response=None, exc=None):
        self.responses = FakeResponses(response, exc)


def fake_response(text, citations=()):
    annotations = [
        types.SimpleNamespace(type="url_citation", title=title, url=url) for title, url in citations
    ]
    part = types.SimpleNamespace(type="output_text", text=text, annotations=annotations)
    message = types.SimpleNamespace(type="message", content=[part])
    search_call = types.SimpleNamespace(type="web_search_call", status="completed")
    return types.SimpleNamespace(output_text=text, output=[search_call, message])


def factory_for(fake):
    """Client factory that always hands back `fake` and records how often it was used."""
    def _factory(_settings):
        _factory.calls += 1
        return fake
    _factory.calls = 0
    return _factory


@pytest.fixture(scope="session")
def app():
    from dolarvzla.main import app as fastapi_app
    return fastapi_app


@pytest.fixture()
def client(app):
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def make_settings_fn():
    return make_settings


@pytest.fixture()
def snapshot_factory():
    return make_snapshot


@pytest.fixture()
def sources():
    """Builders for fake official-rate sources."""
    return types.SimpleNamespace(
        ok=ok_source,
        failing=lambda name: FakeSource(name),
        raising=lambda name, exc: FakeSource(name, exc=exc),
    )


@pytest.fixture()
def openai_fake():
    """Build (fake_client, factory) pairs standing in for AsyncOpenAI."""
    def _build(text=None, citations=(), exc=None):
        response = fake_response(text, citations) if text is not None else None
        fake = FakeOpenAI(response=response, exc=exc)
        return fake, factory_for(fake)
    return _build
