"""
Configuration settings for Upload Analytics
Environment variables and application configuration
"""

import os
from typing import List
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


class Settings:
    """Application settings with environment variable support"""

    # Server Configuration
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development").lower()

    # Upload Configuration
    MAX_UPLOAD_SIZE_MB: int = int(os.getenv("MAX_UPLOAD_SIZE_MB", "50"))
    ALLOWED_EXTENSIONS: List[str] = [
        ext.strip().lower()
        for ext in os.getenv("ALLOWED_EXTENSIONS", ".csv,.xls,.xlsx").split(",")
    ]

    # Chart Generation Configuration
    MAX_NUMERIC_CHARTS: int = int(os.getenv("MAX_NUMERIC_CHARTS", "4"))
    HISTOGRAM_BINS: int = int(os.getenv("HISTOGRAM_BINS", "10"))
    PIE_RANGES: int = int(os.getenv("PIE_RANGES", "5"))
    BAR_CHART_MAX_ITEMS: int = int(os.getenv("BAR_CHART_MAX_ITEMS", "20"))
    DEFAULT_CHART_TYPE: str = os.getenv("DEFAULT_CHART_TYPE", "auto")
    DEFAULT_COLOR_SCHEME: str = os.getenv("DEFAULT_COLOR_SCHEME", "blue")
    DEFAULT_ANIMATION_DURATION: int = int(os.getenv("DEFAULT_ANIMATION_DURATION", "750"))

    # Statistics & Report Configuration
    MAX_STATISTICS_COLUMNS: int = int(os.getenv("MAX_STATISTICS_COLUMNS", "6"))
    REPORT_SAMPLE_SIZE: int = int(os.getenv("REPORT_SAMPLE_SIZE", "100"))
    PREVIEW_ROWS: int = int(os.getenv("PREVIEW_ROWS", "10"))
    PREVIEW_COLUMNS: int = int(os.getenv("PREVIEW_COLUMNS", "8"))

    # Session Configuration
    SESSION_TTL: int = int(os.getenv("SESSION_TTL", "3600"))  # 1 hour
    MAX_SESSIONS: int = int(os.getenv("MAX_SESSIONS", "100"))

    # Security Configuration
    ALLOWED_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    ]

    # Logging Configuration
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    ENABLE_FILE_LOGGING: bool = os.getenv("ENABLE_FILE_LOGGING", "False").lower() == "true"
    LOG_FILE_PATH: str = os.getenv("LOG_FILE_PATH", "logs/app.log")
    ENABLE_DETAILED_LOGGING: bool = os.getenv("ENABLE_DETAILED_LOGGING", "False").lower() == "true"

    def __init__(self):
        """Initialize settings and validate configuration"""
        self._validate_settings()
        self._log_configuration()

    def _validate_settings(self):
        """Validate critical configuration settings"""

        # Validate port range
        if not (1 <= self.PORT <= 65535):
            raise ValueError(f"Invalid port number: {self.PORT}")

        if self.MAX_UPLOAD_SIZE_MB < 1:
            raise ValueError("MAX_UPLOAD_SIZE_MB must be at least 1")

        if not self.ALLOWED_EXTENSIONS:
            raise ValueError("ALLOWED_EXTENSIONS is required")

        for name in ("HISTOGRAM_BINS", "PIE_RANGES", "BAR_CHART_MAX_ITEMS"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1")

        if self.DEFAULT_ANIMATION_DURATION < 0:
            raise ValueError("DEFAULT_ANIMATION_DURATION cannot be negative")

        if self.MAX_NUMERIC_CHARTS < 1:
            logger.warning("⚠️ MAX_NUMERIC_CHARTS is below 1 - no per-column charts will be planned")

        if self.REPORT_SAMPLE_SIZE > 1000:
            logger.warning("⚠️ REPORT_SAMPLE_SIZE is very high - exported reports may get large")

        if self.MAX_SESSIONS < 10:
            logger.warning("⚠️ MAX_SESSIONS is very low - active sessions may be evicted early")

    def _log_configuration(self):
        """Log current configuration for debugging"""
        if self.DEBUG:
            logger.info("📋 Current Configuration:")
            logger.info(f"   Environment: {self.ENVIRONMENT}")
            logger.info(f"   Upload limit: {self.MAX_UPLOAD_SIZE_MB}MB ({', '.join(self.ALLOWED_EXTENSIONS)})")
            logger.info(f"   Chart defaults: {self.DEFAULT_CHART_TYPE} / {self.DEFAULT_COLOR_SCHEME}")
            logger.info(f"   Sessions: max {self.MAX_SESSIONS}, ttl {self.SESSION_TTL}s")
            logger.info(f"   Debug Mode: {self.DEBUG}")

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @staticmethod
    def get_current_timestamp() -> str:
        """Get current timestamp in ISO format"""
        return datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z"

    def get_session_config(self) -> dict:
        """Get session store configuration"""
        return {
            "ttl": self.SESSION_TTL,
            "max_sessions": self.MAX_SESSIONS
        }


# Environment-specific configurations
class DevelopmentSettings(Settings):
    """Development environment settings"""
    DEBUG = True
    LOG_LEVEL = "DEBUG"
    ENABLE_DETAILED_LOGGING = True


class ProductionSettings(Settings):
    """Production environment settings"""
    DEBUG = False
    LOG_LEVEL = "INFO"
    ENABLE_FILE_LOGGING = True


class TestingSettings(Settings):
    """Testing environment settings"""
    ENVIRONMENT = "testing"
    MAX_SESSIONS = 10
    SESSION_TTL = 60


def get_settings():
    """Get settings based on environment"""
    env = os.getenv("ENVIRONMENT", "development").lower()

    if env == "production":
        return ProductionSettings()
    elif env == "testing":
        return TestingSettings()
    else:
        return DevelopmentSettings()


# Global settings instance
settings = get_settings()
