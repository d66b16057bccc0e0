"""
Test configuration settings using in-memory SQLite and the logging notifier.
"""

from typing import Optional

from config.settings import Settings, DatabaseSettings, NotificationSettings


class TestDatabaseSettings(DatabaseSettings):
    """Test database configuration using SQLite."""

    url: str = "sqlite:///:memory:"
    echo: bool = False
    pool_size: int = 1
    max_overflow: int = 0


class TestNotificationSettings(NotificationSettings):
    """Test notification configuration - gateway disabled."""

    gateway_url: Optional[str] = None
    api_key: str = "test-notification-key"
    timeout: int = 1


class TestSettings(Settings):
    """Test application settings."""

    environment: str = "test"
    debug: bool = True
    log_level: str = "DEBUG"

    database: TestDatabaseSettings = TestDatabaseSettings()
    notification: TestNotificationSettings = TestNotificationSettings()


# Test settings instance
test_settings = TestSettings()
