"""
Engine Configuration

Uses pydantic-settings for environment variable loading with validation.
Drop geometry, row capacity and history depth are all tunable here.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Engine settings loaded from environment variables.

    Environment variables can be set directly or via .env file,
    e.g. FORMCANVAS_ROW_CAPACITY=4.
    """

    model_config = SettingsConfigDict(
        env_prefix="FORMCANVAS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================
    environment: Literal["development", "testing", "production"] = Field(
        default="development",
        description="Runtime environment"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    log_level: str = Field(
        default="INFO",
        description="Root log level used by the CLI"
    )

    # ==========================================================================
    # Drop Zones
    # ==========================================================================
    horizontal_edge: float = Field(
        default=0.2,
        gt=0.0,
        lt=0.5,
        description="Width fraction of the left/right edge zones"
    )

    vertical_edge: float = Field(
        default=0.3,
        gt=0.0,
        lt=0.5,
        description="Height fraction of the top/bottom edge zones"
    )

    # ==========================================================================
    # Layout
    # ==========================================================================
    row_capacity: int = Field(
        default=4,
        ge=2,
        description="Maximum number of components a row may hold"
    )

    default_component_type: str = Field(
        default="text_input",
        description="Component type used when an unknown type is requested"
    )

    check_invariants: bool = Field(
        default=True,
        description="Verify tree invariants after every committed drop"
    )

    max_nesting_depth: int = Field(
        default=32,
        ge=2,
        description="Deepest component nesting accepted on import"
    )

    # ==========================================================================
    # History
    # ==========================================================================
    history_capacity: int = Field(
        default=50,
        ge=1,
        description="Maximum number of snapshots kept for undo/redo"
    )

    # ==========================================================================
    # Documents
    # ==========================================================================
    document_version: str = Field(
        default="2.1-multipage",
        description="Version tag written into exported documents"
    )

    default_template_name: str = Field(
        default="Untitled Form",
        description="Template name for new editing sessions"
    )

    # ==========================================================================
    # Computed Properties
    # ==========================================================================
    @computed_field
    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @computed_field
    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
