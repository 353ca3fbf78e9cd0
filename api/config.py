"""
API configuration settings.
"""

from enum import Enum
from typing import Optional

from pydantic import validator
from pydantic_settings import BaseSettings


class TestLoginMode(str, Enum):
    """Whether the test login helper route is exposed."""
    # Not a test case despite the name
    __test__ = False

    ENABLED = "enabled"
    DISABLED = "disabled"


class APIConfig(BaseSettings):
    """API configuration settings."""

    # API Settings
    api_title: str = "Book Library API"
    api_version: str = "1.0.0"
    api_description: str = "A minimal REST API for managing a personal collection of books"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # Security Settings
    secret_key: str = "your-secret-key-change-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30

    # Test login helper, only the literal "true" turns it on
    enable_test_login: TestLoginMode = TestLoginMode.DISABLED

    # CORS Settings
    cors_origins: list = ["*"]  # Configure appropriately for production
    cors_allow_credentials: bool = True
    cors_allow_methods: list = ["*"]
    cors_allow_headers: list = ["*"]

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"
    log_file: Optional[str] = None

    model_config = {
        "env_file": ".env",
        "extra": "ignore"  # Ignore extra fields from .env
    }

    @validator('enable_test_login', pre=True)
    def resolve_test_login(cls, v):
        """Map the raw flag onto a mode; anything but "true" is disabled."""
        if isinstance(v, TestLoginMode):
            return v
        if v is True or v == "true":
            return TestLoginMode.ENABLED
        return TestLoginMode.DISABLED

    @validator('log_level')
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'log_level must be one of: {valid_levels}')
        return v.upper()

    @validator('log_format')
    def validate_log_format(cls, v):
        """Ensure log format is valid."""
        valid_formats = ['json', 'console']
        if v.lower() not in valid_formats:
            raise ValueError(f'log_format must be one of: {valid_formats}')
        return v.lower()

    @validator('access_token_expire_minutes')
    def validate_token_lifetime(cls, v):
        """Ensure tokens live for a positive amount of time."""
        if v < 1:
            raise ValueError('access_token_expire_minutes must be at least 1')
        return v

    @property
    def test_login_enabled(self) -> bool:
        """Check if the test login helper should be exposed."""
        return self.enable_test_login is TestLoginMode.ENABLED


# Global config instance
config = APIConfig()
