"""
Configuration management for Teamate.

Uses Pydantic Settings for type-safe configuration with environment variable support.
Only the command-line layer reads these settings; the matching core receives an
explicit MatchingConfig.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from teamate.utils.constants import (
    DEFAULT_ASSIGNMENT_STRATEGY,
    DEFAULT_CONFIDENCE_THRESHOLDS,
    DEFAULT_FRQ_WEIGHT,
    DEFAULT_QUANT_WEIGHT,
    DEFAULT_SCORE_MAX,
    DEFAULT_SCORE_MIN,
)

if TYPE_CHECKING:
    from teamate.data.models import MatchingConfig


# Base paths
ROOT_DIR = Path(__file__).parent.parent.parent
DATA_DIR = ROOT_DIR / "data"


class VectorStoreSettings(BaseSettings):
    """Vector database configuration for participant embeddings."""

    model_config = SettingsConfigDict(env_prefix="VECTOR_")

    provider: Literal["chromadb", "memory"] = "chromadb"
    persist_directory: Path = DATA_DIR / "vectors"
    collection_name: str = "participants"

    # Remote chroma server; persistent local client when host is unset
    host: Optional[str] = None
    port: int = 8000

    # Records with a different embedding length are excluded at retrieval
    expected_dimension: Optional[int] = None


class MatchingSettings(BaseSettings):
    """Default matching parameters used by the CLI."""

    model_config = SettingsConfigDict(env_prefix="MATCH_")

    frq_weight: float = DEFAULT_FRQ_WEIGHT
    quant_weight: float = DEFAULT_QUANT_WEIGHT
    score_min: float = DEFAULT_SCORE_MIN
    score_max: float = DEFAULT_SCORE_MAX
    high_threshold: float = DEFAULT_CONFIDENCE_THRESHOLDS["high"]
    medium_threshold: float = DEFAULT_CONFIDENCE_THRESHOLDS["medium"]
    strategy: Literal["scipy", "hungarian"] = DEFAULT_ASSIGNMENT_STRATEGY

    def to_config(self) -> "MatchingConfig":
        """Build a MatchingConfig from these settings."""
        from teamate.data.models import MatchingConfig

        score_range = {"min": self.score_min, "max": self.score_max}
        return MatchingConfig(
            frq_weight=self.frq_weight,
            quant_weight=self.quant_weight,
            score_ranges={"q1": score_range, "q2": score_range, "q3": score_range},
            confidence_thresholds={
                "high": self.high_threshold,
                "medium": self.medium_threshold,
            },
        )


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: str = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"
    file_output: bool = True
    file_path: Path = ROOT_DIR / "logs" / "teamate.log"
    rotation: str = "10 MB"
    retention: str = "30 days"
    console_output: bool = True


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    name: str = "Teamate"
    version: str = "0.1.0"
    description: str = "Optimal one-to-one matching of two participant cohorts"
    debug: bool = False

    # Environment
    environment: Literal["development", "production", "testing"] = "development"

    # Nested settings
    vector_store: VectorStoreSettings = Field(default_factory=VectorStoreSettings)
    matching: MatchingSettings = Field(default_factory=MatchingSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# Global settings instance (singleton pattern)
_settings: AppSettings | None = None


def get_settings() -> AppSettings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings()
    return _settings
