"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings


class MoneyboxConfig(BaseSettings):
    """Moneybox ledger configuration"""

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text

    # Notification configuration
    notification_backend: str = "log"  # log or storage

    class Config:
        env_prefix = "MONEYBOX_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = MoneyboxConfig()


def get_config() -> MoneyboxConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> MoneyboxConfig:
    """Reload configuration from environment"""
    global config
    config = MoneyboxConfig()
    return config
