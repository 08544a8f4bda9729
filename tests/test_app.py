import pytest
from httpx import ASGITransport, AsyncClient

from ytproxy.config.settings import Config, LoggingConfig
from ytproxy.i18n import i18n
from ytproxy.main import create_app
from ytproxy.services.ytdlp import YtDlpExtractor
from ytproxy.utils.locale import get_locale, safe_url_for_log


@pytest.mark.asyncio
async def test_only_two_endpoints_are_exposed(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        assert (await ac.get("/docs")).status_code == 404
        assert (await ac.get("/health")).status_code == 404
        assert (await ac.post("/formats")).status_code == 405


@pytest.mark.asyncio
async def test_request_id_header(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.get("/formats")
    assert response.headers["x-request-id"]


def test_default_extractor_is_ytdlp():
    app = create_app()
    assert isinstance(app.state.runtime.extractor, YtDlpExtractor)


def test_config_defaults():
    config = Config()
    assert config.server.port == 3000
    assert config.ytdlp.info_timeout is None


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("YTPROXY_SERVER__PORT", "8080")
    monkeypatch.setenv("YTPROXY_LOGGING__LEVEL", "debug")
    config = Config()
    assert config.server.port == 8080
    assert config.logging.level == "DEBUG"


def test_invalid_log_level():
    with pytest.raises(ValueError):
        LoggingConfig(level="LOUD")


@pytest.mark.parametrize("header, locale", [
    (None, "en"),
    ("ja-JP,ja;q=0.9,en;q=0.8", "ja"),
    ("fr-FR,en-US;q=0.8", "en"),
    ("de", "en"),
    ("en;q=0.5,ja;q=0.9", "ja"),
])
def test_get_locale(header, locale):
    assert get_locale(header) == locale


def test_i18n_falls_back_to_default_locale():
    assert i18n.get("log.download_finished", locale="ja") == "Download finished"
    assert i18n.get("error.no_such_key") == "error.no_such_key"


def test_safe_url_for_log_drops_query():
    assert safe_url_for_log("https://www.youtube.com/watch?v=abc") == "https://www.youtube.com/watch"
