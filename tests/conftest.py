import pytest

from textconv.settings import get_settings


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    for name in ("TEXTCONV_DEFAULT_LINE_ENDING", "TEXTCONV_DEFAULT_BOM", "TEXTCONV_CHUNK_SIZE"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
