"""
Configuration management for the loyalty history service.
"""
import os
from dotenv import load_dotenv

load_dotenv()


def _database_url(default: str = '') -> str:
    """Read DATABASE_URL, normalizing the legacy postgres:// scheme."""
    url = os.getenv('DATABASE_URL', default)
    if url.startswith('postgres://'):
        # SQLAlchemy requires postgresql:// not postgres://
        url = url.replace('postgres://', 'postgresql://', 1)
    return url


def _split_origins(value: str) -> list:
    return [origin.strip() for origin in value.split(',') if origin.strip()]


class BaseConfig:
    """Base configuration."""
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Browser clients allowed to call the API
    CORS_ORIGINS = _split_origins(
        os.getenv('CORS_ORIGINS', 'http://localhost:3000,http://localhost:5173')
    )

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FILE = os.getenv('LOG_FILE')


class DevelopmentConfig(BaseConfig):
    """Development configuration."""
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = _database_url('sqlite:///loyalty_history_dev.db')


class ProductionConfig(BaseConfig):
    """Production configuration."""
    DEBUG = False

    SQLALCHEMY_DATABASE_URI = _database_url()

    # One pool per process, shared by every request handler
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_size': 10,
        'pool_recycle': 300,
        'pool_pre_ping': True,  # Verify connections before using
    }

    @classmethod
    def validate_database_url(cls) -> str:
        """
        Validate DATABASE_URL in production environment.

        Raises:
            RuntimeError: If DATABASE_URL is missing
        """
        if not cls.SQLALCHEMY_DATABASE_URI:
            raise RuntimeError(
                "CRITICAL: DATABASE_URL environment variable is not set!\n"
                "Production deployments MUST point at the history database."
            )
        return cls.SQLALCHEMY_DATABASE_URI


class TestingConfig(BaseConfig):
    """Testing configuration."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    LOG_FILE = None


config_map = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig
}


def get_config(config_name: str = 'development'):
    """Get configuration class by name."""
    return config_map.get(config_name, DevelopmentConfig)


def validate_config(config_name: str = 'development') -> None:
    """
    Validate configuration before app startup.

    Args:
        config_name: The configuration environment name

    Raises:
        RuntimeError: If validation fails in production
    """
    if config_name == 'production':
        ProductionConfig.validate_database_url()
