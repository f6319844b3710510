import pytest
from pydantic import ValidationError

from lingochain.config.settings import Settings


def test_yaml_config_file(monkeypatch, tmp_path):
    cfg = tmp_path / "lingochain.yaml"
    cfg.write_text("port: 4000\nstorage_key: otherChats\n", encoding="utf-8")
    monkeypatch.setenv("LINGOCHAIN_CONFIG_FILE", str(cfg))
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.delenv("STORAGE_KEY", raising=False)
    s = Settings()
    assert s.port == 4000
    assert s.storage_key == "otherChats"


def test_env_overrides_yaml(monkeypatch, tmp_path):
    cfg = tmp_path / "lingochain.yaml"
    cfg.write_text("port: 4000\n", encoding="utf-8")
    monkeypatch.setenv("LINGOCHAIN_CONFIG_FILE", str(cfg))
    monkeypatch.setenv("PORT", "5000")
    assert Settings().port == 5000


def test_short_api_key_rejected():
    with pytest.raises(ValidationError):
        Settings(anthropic_api_key="short")
