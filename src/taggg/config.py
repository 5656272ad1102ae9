from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal


class DatabaseSettings(BaseSettings):
    """Relational store configuration"""
    url: str = Field(default="sqlite:///taggg.db", description="SQLAlchemy database URL")
    echo: bool = Field(default=False, description="Echo SQL statements")
    resource_table: str = Field(default="res", description="Resource table name")
    relation_table: str = Field(default="rel", description="Relation table name")
    
    model_config = SettingsConfigDict(
        env_prefix='TAGGG_DB_',
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'
    )


class FetchSettings(BaseSettings):
    """Defaults for resource reporting queries"""
    limit: int = Field(default=0, ge=0, description="Max rows returned (0 = no limit)")
    offset: int = Field(default=0, ge=0, description="Rows skipped before returning")
    
    model_config = SettingsConfigDict(
        env_prefix='TAGGG_FETCH_',
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'
    )


class AppSettings(BaseSettings):
    """Application settings"""
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level"
    )
    refetch_on_conflict: bool = Field(
        default=True,
        description="Re-fetch a resource once when its insert was ignored as a duplicate"
    )
    
    # Component settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    fetch: FetchSettings = Field(default_factory=FetchSettings)
    
    model_config = SettingsConfigDict(
        env_prefix='TAGGG_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore'
    )


# Singleton instance
_settings: AppSettings | None = None


def get_settings() -> AppSettings:
    """Get application settings (singleton)"""
    global _settings
    if _settings is None:
        _settings = AppSettings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment"""
    global _settings
    _settings = None
