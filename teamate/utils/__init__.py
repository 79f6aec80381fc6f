"""
Utility modules for Teamate.

This package contains shared utilities used across the application:
- config: Configuration management
- logger: Logging infrastructure
- constants: Application-wide constants
"""

from teamate.utils.config import (
    AppSettings,
    LoggingSettings,
    MatchingSettings,
    VectorStoreSettings,
    get_settings,
    ROOT_DIR,
    DATA_DIR,
)
from teamate.utils.constants import (
    APP_NAME,
    APP_DISPLAY_NAME,
    VERSION,
    Cohort,
    ConfidenceLevel,
    PipelinePhase,
)
from teamate.utils.logger import (
    setup_logging,
    get_logger,
    audit_log,
    LoggerMixin,
)

__all__ = [
    # Config
    "AppSettings",
    "LoggingSettings",
    "MatchingSettings",
    "VectorStoreSettings",
    "get_settings",
    "ROOT_DIR",
    "DATA_DIR",
    # Constants
    "APP_NAME",
    "APP_DISPLAY_NAME",
    "VERSION",
    "Cohort",
    "ConfidenceLevel",
    "PipelinePhase",
    # Logger
    "setup_logging",
    "get_logger",
    "audit_log",
    "LoggerMixin",
]
