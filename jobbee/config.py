# jobbee/config.py
import os
from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return str(value).strip().lower() in ("1", "true", "yes", "on")


class Config:
    # Environment ("development" adds stack traces to error responses)
    ENVIRONMENT = os.getenv('ENVIRONMENT', 'production')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # DB
    MONGODB_URI = os.getenv('MONGODB_URI', 'mongodb://localhost:27017')
    DATABASE_NAME = os.getenv('DATABASE_NAME', "jobbee")

    # Collections
    USERS_COLLECTION = "users"
    JOBS_COLLECTION = "jobs"

    # Auth
    JWT_SECRET = os.getenv('JWT_SECRET', 'change-me')
    JWT_ALGORITHM = os.getenv('JWT_ALGORITHM', 'HS256')
    JWT_EXPIRES_MINUTES = int(os.getenv('JWT_EXPIRES_MINUTES', 7 * 24 * 60))
    COOKIE_EXPIRES_TIME = int(os.getenv('COOKIE_EXPIRES_TIME', 7))  # days
    RESET_TOKEN_EXPIRES_MINUTES = 30

    # Geocoding
    GEOCODER_PROVIDER = os.getenv('GEOCODER_PROVIDER', 'mapquest')
    GEOCODER_API_KEY = os.getenv('GEOCODER_API_KEY', '')
    GEOCODER_TIMEOUT = float(os.getenv('GEOCODER_TIMEOUT', 8))

    # Mail
    SMTP_HOST = os.getenv('SMTP_HOST', '')
    SMTP_PORT = int(os.getenv('SMTP_PORT', 587))
    SMTP_USER = os.getenv('SMTP_USER', '')
    SMTP_PASSWORD = os.getenv('SMTP_PASSWORD', '')
    SMTP_FROM = os.getenv('SMTP_FROM', 'noreply@jobbee.com')
    SMTP_USE_TLS = _as_bool(os.getenv('SMTP_USE_TLS', 'false'))

    # Uploads
    UPLOAD_PATH = os.getenv('UPLOAD_PATH', "./public/uploads")
    MAX_FILE_SIZE = int(os.getenv('MAX_FILE_SIZE', 2 * 1024 * 1024))

    # Listing
    DEFAULT_PAGE_LIMIT = 10
    MAX_PAGE_LIMIT = int(os.getenv('MAX_PAGE_LIMIT', 100))

    # HTTP
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*').split(',')
    RATE_LIMIT = os.getenv('RATE_LIMIT', '100/10minutes')
    RATE_LIMIT_ENABLED = _as_bool(os.getenv('RATE_LIMIT_ENABLED', 'true'))

    @classmethod
    def is_development(cls) -> bool:
        return cls.ENVIRONMENT.strip().lower() == 'development'
