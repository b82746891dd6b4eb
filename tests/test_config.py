import pytest

from config import MissingCredentialError, get_api_key, load_config


def test_default_config_declares_both_models():
    config = load_config()
    models = config["inference"]["models"]
    assert models["churn"] != models["portfolio"]
    assert config["inference"]["retry"]["max_retries"] == 0


def test_empty_config_file_loads_as_empty_dict(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config(path) == {}


def test_api_key_from_configured_variable(monkeypatch):
    monkeypatch.setenv("CHURN_KEY", " secret ")
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    assert get_api_key({"inference": {"api_key_env": "CHURN_KEY"}}) == "secret"


def test_api_key_falls_back_to_gemini_variable(monkeypatch):
    monkeypatch.delenv("API_KEY", raising=False)
    monkeypatch.setenv("GEMINI_API_KEY", "fallback")
    assert get_api_key({}) == "fallback"


def test_missing_api_key_raises(monkeypatch):
    monkeypatch.setenv("API_KEY", "   ")
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    with pytest.raises(MissingCredentialError):
        get_api_key({})
