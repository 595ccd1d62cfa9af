"""
Tests for Settings and get_settings().
"""

from code_highlighter.config import DEFAULT_COLOR, DEFAULT_PALETTE, Settings, get_settings


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.default_color == DEFAULT_COLOR
    assert settings.colors == DEFAULT_PALETTE
    assert settings.state_key == "highlights"
    assert settings.log_file is None
    assert settings.cors_origins == []


def test_blank_default_color_falls_back():
    assert Settings(_env_file=None, default_color="  ").default_color == DEFAULT_COLOR


def test_empty_palette_falls_back_to_default_color():
    assert Settings(_env_file=None, colors=["", " "]).colors == [DEFAULT_COLOR]


def test_environment_prefix(monkeypatch):
    monkeypatch.setenv("CODE_HIGHLIGHTER_DEFAULT_COLOR", "#00FF0066")
    monkeypatch.setenv("CODE_HIGHLIGHTER_COLORS", '["#123456", "#654321"]')
    monkeypatch.setenv("CODE_HIGHLIGHTER_PORT", "9001")
    monkeypatch.setenv("CODE_HIGHLIGHTER_CORS_ORIGINS", '["http://localhost:5173"]')

    settings = Settings(_env_file=None)

    assert settings.default_color == "#00FF0066"
    assert settings.colors == ["#123456", "#654321"]
    assert settings.port == 9001
    assert settings.cors_origins == ["http://localhost:5173"]


def test_get_settings_is_cached(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()
