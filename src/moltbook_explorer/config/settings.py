"""
Configuration settings for moltbook explorer.

This module handles environment variable loading and configuration management
using Pydantic for validation and type safety.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Explorer configuration settings.

    All settings can be overridden via environment variables prefixed
    with ``MOLTBOOK_``.
    """

    # Corpus location
    data_dir: str = Field(
        default="data",
        description="Directory holding the JSON record files"
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="text",
        description="Logging format (json or text)"
    )
    debug_mode: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_file: str = Field(
        default="logs/moltbook_explorer.log",
        description="Rotated log file used outside debug mode"
    )

    # Query defaults
    top_items_limit: int = Field(
        default=10,
        ge=0,
        description="Default number of entries returned by rankings"
    )
    histogram_bins: int = Field(
        default=10,
        ge=1,
        description="Default number of histogram buckets"
    )
    similar_posts_limit: int = Field(
        default=10,
        ge=0,
        description="Default number of neighbours returned by similarity lookup"
    )
    edge_threshold_percent: float = Field(
        default=10.0,
        ge=0,
        description="Default normalized edge weight threshold for graphs"
    )
    max_bridge_authors: int = Field(
        default=20,
        ge=0,
        description="Maximum number of bridge authors in the author/community graph"
    )
    results_page_size: int = Field(
        default=500,
        ge=0,
        description="Maximum number of rows returned by the sorted result listing"
    )

    model_config = SettingsConfigDict(
        env_prefix="MOLTBOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Configured settings instance
    """
    return Settings()
