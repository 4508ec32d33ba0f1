"""Configuration management using Pydantic Settings"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Vault API Configuration ===
    obsidian_base_url: str = Field(
        default="https://127.0.0.1:27124",
        description="Base URL of the Obsidian Local REST API"
    )
    obsidian_api_key: str = Field(
        default="",
        description="Bearer token for the Local REST API"
    )
    verify_ssl: bool = Field(
        default=False,
        description="Verify TLS certificates (the REST API ships a self-signed one)"
    )
    request_timeout: float = Field(
        default=10.0,
        description="Per-request timeout in seconds for every vault call"
    )

    # === Index / Search Configuration ===
    files_cache_ttl: float = Field(
        default=60.0,
        description="Seconds a cached vault file list stays fresh"
    )
    note_extension: str = Field(
        default=".md",
        description="Extension of files scanned by content search"
    )
    find_max_results: int = Field(default=10, description="Default find_files result cap")
    search_max_results: int = Field(default=100, description="Default search result cap")

    # === Trash Configuration ===
    trash_folder: str = Field(
        default=".trash-http-mcp",
        description="Vault folder receiving soft-deleted files"
    )

    # === Server Configuration ===
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)
    log_level: str = Field(default="INFO")


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create settings singleton"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Force reload settings"""
    global _settings
    _settings = Settings()
    return _settings
