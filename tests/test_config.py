import pytest

from taggg.config import AppSettings, get_settings
from taggg.engine import TagEngine


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep a developer's .env and TAGGG_* variables out of these tests"""
    monkeypatch.chdir(tmp_path)
    for name in ("TAGGG_DB_URL", "TAGGG_DB_RESOURCE_TABLE", "TAGGG_DB_RELATION_TABLE",
                 "TAGGG_FETCH_LIMIT", "TAGGG_FETCH_OFFSET", "TAGGG_LOG_LEVEL",
                 "TAGGG_REFETCH_ON_CONFLICT"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = AppSettings()
    
    assert settings.database.url == "sqlite:///taggg.db"
    assert settings.database.resource_table == "res"
    assert settings.database.relation_table == "rel"
    assert settings.refetch_on_conflict is True
    assert settings.fetch.limit == 0
    assert settings.log_level == "WARNING"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("TAGGG_DB_URL", "sqlite:///other.db")
    monkeypatch.setenv("TAGGG_DB_RESOURCE_TABLE", "resources")
    monkeypatch.setenv("TAGGG_FETCH_LIMIT", "25")
    monkeypatch.setenv("TAGGG_REFETCH_ON_CONFLICT", "false")
    monkeypatch.setenv("TAGGG_LOG_LEVEL", "DEBUG")
    
    settings = get_settings()
    
    assert settings.database.url == "sqlite:///other.db"
    assert settings.database.resource_table == "resources"
    assert settings.fetch.limit == 25
    assert settings.refetch_on_conflict is False
    assert settings.log_level == "DEBUG"


def test_settings_singleton():
    assert get_settings() is get_settings()


def test_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("TAGGG_DB_RELATION_TABLE=tags\n", encoding="utf-8")
    
    assert get_settings().database.relation_table == "tags"


def test_engine_from_settings(monkeypatch, tmp_path):
    monkeypatch.setenv("TAGGG_DB_URL", f"sqlite:///{tmp_path / 'configured.db'}")
    monkeypatch.setenv("TAGGG_DB_RELATION_TABLE", "tags")
    monkeypatch.setenv("TAGGG_REFETCH_ON_CONFLICT", "0")
    monkeypatch.setenv("TAGGG_FETCH_LIMIT", "1")
    
    tags = TagEngine.from_settings()
    try:
        tags.init().write(1, "dc:title", "Hello", 1)
        
        assert tags.tables.relations.name == "tags"
        assert tags.resolver.refetch_on_conflict is False
        assert tags.exists(1, "dc:title", "Hello", 1)
        assert len(tags.fetch()) == 1
    finally:
        tags.close()
    
    assert (tmp_path / "configured.db").exists()
