import json

from wa_organizer.config import DEFAULT_API_ENDPOINT
from wa_organizer.settings import Settings, SettingsStore


def test_load_falls_back_to_defaults(tmp_path):
    store = SettingsStore(tmp_path / "settings.json", defaults=Settings(api_key="env-key"))
    settings = store.load()
    assert settings.api_key == "env-key"
    assert settings.api_endpoint == DEFAULT_API_ENDPOINT


def test_save_then_load(tmp_path):
    path = tmp_path / "nested" / "settings.json"
    store = SettingsStore(path)
    store.save(Settings(api_key="abc", api_endpoint="https://example.test/v1"))

    assert json.loads(path.read_text(encoding="utf-8")) == {
        "gemini_api_key": "abc",
        "gemini_api_endpoint": "https://example.test/v1",
    }
    assert SettingsStore(path).load() == Settings(api_key="abc", api_endpoint="https://example.test/v1")


def test_missing_key_uses_default_per_field(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"gemini_api_key": "stored"}), encoding="utf-8")
    settings = SettingsStore(path, defaults=Settings(api_key="x", api_endpoint="https://default")).load()
    assert settings == Settings(api_key="stored", api_endpoint="https://default")


def test_empty_stored_value_is_kept(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"gemini_api_key": ""}), encoding="utf-8")
    assert SettingsStore(path, defaults=Settings(api_key="x")).load().api_key == ""


def test_corrupt_file_falls_back(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    assert SettingsStore(path, defaults=Settings(api_key="x")).load().api_key == "x"


def test_save_keeps_unrelated_keys(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")
    SettingsStore(path).save(Settings(api_key="k"))
    assert json.loads(path.read_text(encoding="utf-8"))["theme"] == "dark"


def test_missing_fields():
    assert Settings(api_key=" ", api_endpoint="").missing_fields() == ["api_key", "api_endpoint"]
    assert Settings(api_key="k").missing_fields() == []
