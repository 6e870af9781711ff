# Tests for client configuration and URL persistence.
# Created: 2026-10-19

import json
import stat

import httpx
import pytest

from filedrop.client.config import (
    DEFAULT_SERVER_URL,
    SERVER_URL_ENV,
    ClientConfig,
    JsonFileUrlStore,
    MemoryUrlStore,
    normalize_url,
)
from filedrop.client.errors import ServerConnectionError


@pytest.fixture(autouse=True)
def no_env_url(monkeypatch):
    monkeypatch.delenv(SERVER_URL_ENV, raising=False)


def _answering_transport(status_code=200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json={"message": "File transfer server running"})

    return httpx.MockTransport(handler)


def _unreachable_transport():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return httpx.MockTransport(handler)


class TestNormalizeUrl:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("http://192.168.1.20:3001", "http://192.168.1.20:3001"),
            ("http://192.168.1.20:3001/", "http://192.168.1.20:3001"),
            ("  https://files.local//  ", "https://files.local"),
            ("192.168.1.20:3001", "http://192.168.1.20:3001"),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_url(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   "])
    def test_empty(self, raw):
        with pytest.raises(ValueError):
            normalize_url(raw)


class TestJsonFileUrlStore:
    def test_missing_file(self, tmp_path):
        assert JsonFileUrlStore(tmp_path / "client.json").load() is None

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "client.json"
        store = JsonFileUrlStore(path)
        store.save("http://10.0.0.2:3001")
        assert JsonFileUrlStore(path).load() == "http://10.0.0.2:3001"
        assert json.loads(path.read_text()) == {"serverUrl": "http://10.0.0.2:3001"}

    def test_file_is_owner_only(self, tmp_path):
        path = tmp_path / "client.json"
        JsonFileUrlStore(path).save("http://10.0.0.2:3001")
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_clear(self, tmp_path):
        path = tmp_path / "client.json"
        store = JsonFileUrlStore(path)
        store.save("http://10.0.0.2:3001")
        store.clear()
        assert not path.exists()
        assert store.load() is None
        store.clear()

    @pytest.mark.parametrize(
        "content", ["{not json", "[]", '{"serverUrl": 3}', '{"serverUrl": ""}']
    )
    def test_bad_content(self, tmp_path, content):
        path = tmp_path / "client.json"
        path.write_text(content)
        assert JsonFileUrlStore(path).load() is None

    def test_default_path_in_config_dir(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FILEDROP_CONFIG_DIR", str(tmp_path / "cfg"))
        assert JsonFileUrlStore().path == tmp_path / "cfg" / "client.json"


class TestBaseUrl:
    def test_default(self):
        assert ClientConfig(MemoryUrlStore()).base_url == DEFAULT_SERVER_URL

    def test_saved_beats_default(self):
        config = ClientConfig(MemoryUrlStore("http://10.0.0.2:3001/"))
        assert config.base_url == "http://10.0.0.2:3001"

    def test_env_beats_saved(self, monkeypatch):
        monkeypatch.setenv(SERVER_URL_ENV, "192.168.0.9:4000")
        config = ClientConfig(MemoryUrlStore("http://10.0.0.2:3001"))
        assert config.base_url == "http://192.168.0.9:4000"


class TestTestConnection:
    async def test_answering_server(self):
        config = ClientConfig(MemoryUrlStore(), transport=_answering_transport())
        assert await config.test_connection("http://10.0.0.2:3001") is True

    async def test_error_status(self):
        config = ClientConfig(MemoryUrlStore(), transport=_answering_transport(500))
        assert await config.test_connection("http://10.0.0.2:3001") is False

    async def test_unreachable(self):
        config = ClientConfig(MemoryUrlStore(), transport=_unreachable_transport())
        assert await config.test_connection() is False


class TestSave:
    async def test_save_persists_after_successful_test(self):
        store = MemoryUrlStore()
        config = ClientConfig(store, transport=_answering_transport())
        saved = await config.save("10.0.0.2:3001/")
        assert saved == "http://10.0.0.2:3001"
        assert store.load() == "http://10.0.0.2:3001"
        assert config.base_url == "http://10.0.0.2:3001"

    async def test_failed_test_leaves_saved_url(self):
        store = MemoryUrlStore("http://10.0.0.2:3001")
        config = ClientConfig(store, transport=_unreachable_transport())
        with pytest.raises(ServerConnectionError, match="10.0.0.9"):
            await config.save("http://10.0.0.9:3001")
        assert store.load() == "http://10.0.0.2:3001"

    async def test_save_draft(self):
        config = ClientConfig(MemoryUrlStore(), transport=_answering_transport())
        config.edit("http://10.0.0.3:3001")
        assert config.draft == "http://10.0.0.3:3001"
        await config.save()
        assert config.draft is None
        assert config.base_url == "http://10.0.0.3:3001"

    async def test_nothing_to_save(self):
        config = ClientConfig(MemoryUrlStore(), transport=_answering_transport())
        with pytest.raises(ValueError):
            await config.save()

    def test_cancel_discards_draft(self):
        store = MemoryUrlStore("http://10.0.0.2:3001")
        config = ClientConfig(store)
        config.edit("http://10.0.0.3:3001")
        config.cancel()
        assert config.draft is None
        assert config.base_url == "http://10.0.0.2:3001"

    def test_reset(self):
        store = MemoryUrlStore("http://10.0.0.2:3001")
        config = ClientConfig(store)
        config.reset()
        assert store.load() is None
        assert config.base_url == DEFAULT_SERVER_URL
