"""
Configuration management using Pydantic Settings.
Handles environment variables and application configuration.
"""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings


class DatabaseSettings(BaseSettings):
    """Database configuration settings."""

    url: str = Field(
        default="sqlite:///./scamshield.db",
        description="Database URL (PostgreSQL in production, SQLite for local dev)"
    )

    echo: bool = Field(
        default=False,
        description="Enable SQLAlchemy query logging"
    )
    pool_size: int = Field(
        default=10,
        description="Database connection pool size"
    )
    max_overflow: int = Field(
        default=20,
        description="Maximum overflow connections"
    )
    pool_timeout: int = Field(
        default=30,
        description="Connection pool timeout in seconds"
    )
    pool_recycle: int = Field(
        default=3600,
        description="Connection pool recycle time in seconds"
    )

    class Config:
        env_prefix = "DATABASE_"


class DetectionSettings(BaseSettings):
    """Scam detection tuning."""

    max_message_length: int = Field(
        default=10000,
        description="Longest message accepted for analysis"
    )
    match_limit: int = Field(
        default=50,
        description="Maximum number of corpus patterns returned per message"
    )
    relevance_threshold: float = Field(
        default=0.5,
        description="Share of a message's distinct terms a pattern must contain to be a relevance match"
    )
    relevance_limit: int = Field(
        default=2,
        description="Most relevance matches kept per message, best TF-IDF similarity first"
    )
    scam_threshold: int = Field(
        default=70,
        description="Risk scores strictly above this value are classified as scams"
    )

    class Config:
        env_prefix = "DETECTION_"


class AlertSettings(BaseSettings):
    """Family alert escalation settings."""

    daily_limit: int = Field(
        default=5,
        description="Maximum alerts sent to one family member per calendar day"
    )
    escalation_threshold: int = Field(
        default=70,
        description="Risk score above which callers escalate to family contacts"
    )
    alert_type: str = "HIGH_RISK_SCAM"
    signature: str = "- SageSure India ScamShield"

    class Config:
        env_prefix = "ALERTS_"


class NotificationSettings(BaseSettings):
    """Outbound notification gateway settings."""

    gateway_url: Optional[str] = Field(
        default=None,
        description="Notification gateway endpoint; messages are only logged when unset"
    )
    api_key: str = "test-key"
    sender_id: str = "SGSURE"
    timeout: int = Field(
        default=10,
        description="Gateway request timeout in seconds"
    )

    class Config:
        env_prefix = "NOTIFICATION_"


class Settings(BaseSettings):
    """Main application settings."""

    # Application metadata
    app_name: str = "ScamShield Core"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "production"
    log_level: str = "INFO"
    log_mask_contacts: bool = True

    # Database settings
    database: DatabaseSettings = DatabaseSettings()

    # Detection settings
    detection: DetectionSettings = DetectionSettings()

    # Family alert settings
    alerts: AlertSettings = AlertSettings()

    # Notification gateway settings
    notification: NotificationSettings = NotificationSettings()

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"


# Global settings instance
settings = Settings()
