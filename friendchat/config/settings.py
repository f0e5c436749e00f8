"""Application configuration settings"""

import os
from dotenv import load_dotenv

load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}


class Config:
    # General
    TESTING = os.getenv("TESTING", "false").lower() in _TRUTHY
    DEBUG = os.getenv("DEBUG", "false").lower() in _TRUTHY
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_PATH = os.getenv("LOG_PATH") or None
    LOG_FORMAT = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s",
    )

    # Auth
    SERVICE_AUTH_SECRET = os.getenv("SERVICE_AUTH_SECRET", "")
    SERVICE_AUTH_ISSUER = os.getenv("SERVICE_AUTH_ISSUER", "friendchat-auth")
    SERVICE_AUTH_AUDIENCE = os.getenv("SERVICE_AUTH_AUDIENCE", "friendchat-api")

    # MongoDB document store
    MONGO_URI: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    MONGO_DB: str = os.getenv("MONGO_DB", "chat_app")
    MONGO_SERVER_SELECTION_TIMEOUT_MS: int = int(
        os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "5000")
    )

    # Redis conversation cache
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    REDIS_CACHE_ENABLED: bool = (
        os.getenv("REDIS_CACHE_ENABLED", "false").lower() in _TRUTHY
    )
    REDIS_CACHE_TTL: int = int(os.getenv("REDIS_CACHE_TTL", "3600"))
    # Conversations longer than this are served from MongoDB only
    REDIS_CACHE_MAX_MESSAGES: int = int(os.getenv("REDIS_CACHE_MAX_MESSAGES", "500"))

    # Attachments
    ATTACHMENT_BACKEND: str = os.getenv("ATTACHMENT_BACKEND", "local")
    UPLOAD_BASE = os.getenv("UPLOAD_BASE", "uploads")
    UPLOAD_PUBLIC_URL = os.getenv("UPLOAD_PUBLIC_URL", "/uploads")
    MAX_ATTACHMENT_MB = float(os.getenv("MAX_ATTACHMENT_MB", "10"))
    UPLOAD_TIMEOUT_SECONDS = float(os.getenv("UPLOAD_TIMEOUT_SECONDS", "30"))
    CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME", "")
    CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY", "")
    CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET", "")
    ATTACHMENT_FOLDER = os.getenv("ATTACHMENT_FOLDER", "chat_app_files")

    # Delivery
    LIVE_PUSH_TIMEOUT_SECONDS = float(os.getenv("LIVE_PUSH_TIMEOUT_SECONDS", "2"))
    REQUIRE_MESSAGE_CONTENT = (
        os.getenv("REQUIRE_MESSAGE_CONTENT", "true").lower() in _TRUTHY
    )

    # Rate limiting
    RATELIMIT_ENABLED = os.getenv("RATELIMIT_ENABLED", "true").lower() in _TRUTHY
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    SEND_RATE_LIMIT = os.getenv("SEND_RATE_LIMIT", "60/minute")


class DevelopmentConfig(Config):
    """Development configuration"""

    DEBUG = True


class TestingConfig(Config):
    """Testing configuration"""

    TESTING = True
    RATELIMIT_ENABLED = False


class ProductionConfig(Config):
    """Production configuration"""

    pass


# Configuration dictionary
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env=None):
    """Get configuration based on environment"""
    if env is None:
        env = os.getenv("APP_ENV", "development")
    return config.get(env, config["default"])
