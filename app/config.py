from dotenv import load_dotenv
load_dotenv()  # Load environment variables from .env file

import os


class Config:
    """Base configuration class."""
    APP_NAME = os.getenv("APP_NAME", "ecommerce")
    API_VERSION_NUMBER = os.getenv("API_VERSION_NUMBER", "0.6.0")

    SECRET_KEY = os.getenv("SECRET_KEY", "your_default_secret_key")
    DEBUG = os.getenv("FLASK_DEBUG", "False") == "True"
    TESTING = False

    MONGO_URI = os.getenv("MONGO_URI", "mongodb://127.0.0.1:27017/ecommerce")
    DB_NAME = os.getenv("DB_NAME", "ecommerce")
    PORT = int(os.getenv("PORT", 8080))

    # ========================================
    # AUTHENTICATION
    # ========================================
    TOKEN_EXPIRY_TIME = int(os.getenv("TOKEN_EXPIRY_TIME", 60 * 60 * 24))  # seconds
    BCRYPT_LOG_ROUNDS = int(os.getenv("BCRYPT_LOG_ROUNDS", 10))
    RATELIMIT_ENABLED = os.getenv("RATELIMIT_ENABLED", "True") == "True"
    AUTHENTICATE_RATE_LIMIT = os.getenv("AUTHENTICATE_RATE_LIMIT", "10 per minute")

    # ========================================
    # FILE UPLOADS
    # ========================================
    # full path to file server root directory
    FILE_SERVER_ROOT = os.getenv("FILE_SERVER_ROOT", "/usr/local")
    # uploads live under the file server root so that stored paths stay relative
    UPLOAD_ROOT_DIR = os.getenv("UPLOAD_ROOT_DIR", "/usr/local/uploads")

    UPLOAD_MAX_FIELD_NAME_SIZE = int(os.getenv("UPLOAD_MAX_FIELD_NAME_SIZE", 50))  # bytes
    UPLOAD_MAX_FIELD_SIZE = int(os.getenv("UPLOAD_MAX_FIELD_SIZE", 1024))  # bytes
    UPLOAD_MAX_FIELDS = int(os.getenv("UPLOAD_MAX_FIELDS", 1))  # non-file fields
    UPLOAD_MAX_FILE_SIZE = int(os.getenv("UPLOAD_MAX_FILE_SIZE", 3 * 1024 * 1024))  # bytes
    UPLOAD_MAX_FILES_PER_REQUEST = int(os.getenv("UPLOAD_MAX_FILES_PER_REQUEST", 1))
    UPLOAD_MAX_HEADER_PAIRS = int(os.getenv("UPLOAD_MAX_HEADER_PAIRS", 2000))
    # request bodies above UPLOAD_MAX_FILE_SIZE + this are refused (413) before parsing
    UPLOAD_BODY_HEADROOM = int(os.getenv("UPLOAD_BODY_HEADROOM", 64 * 1024))  # bytes
    MAX_PRODUCT_IMAGE_GALLERY_SIZE = int(os.getenv("MAX_PRODUCT_IMAGE_GALLERY_SIZE", 5))

    # ========================================
    # PAGINATION
    # ========================================
    DEFAULT_PAGINATION_LIMIT = int(os.getenv("DEFAULT_PAGINATION_LIMIT", 10))
    MAX_PAGINATION_LIMIT = int(os.getenv("MAX_PAGINATION_LIMIT", 100))

    # ========================================
    # MAIL CONFIGURATION
    # ========================================
    EMAIL_PROVIDER = os.getenv("EMAIL_PROVIDER", "smtp")
    SENDER_EMAIL = os.getenv("SENDER_EMAIL", "")
    MAIL_NAME = os.getenv("MAIL_NAME", "Ecommerce")
    SMTP_HOST = os.getenv("SMTP_HOST", "localhost")
    SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USERNAME = os.getenv("SMTP_USERNAME")
    SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
    SMTP_USE_TLS = os.getenv("SMTP_USE_TLS", "true").lower() == "true"
    MAILGUN_API_KEY = os.getenv("MAILGUN_API_KEY")
    MAILGUN_DOMAIN = os.getenv("MAILGUN_DOMAIN")
    MAILGUN_API_HOST = os.getenv("MAILGUN_API_HOST", "api.mailgun.net")


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    MONGO_URI = os.getenv("TEST_MONGO_URI", "mongodb://localhost:27017/testdb")
    DB_NAME = "testdb"
    BCRYPT_LOG_ROUNDS = 4
    RATELIMIT_ENABLED = False


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    MONGO_URI = os.getenv("PROD_MONGO_URI", Config.MONGO_URI)


CONFIG_BY_ENV = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def load_config(app, overrides=None):
    load_dotenv()
    app_mode = os.getenv("APP_ENV", "development")
    app.config.from_object(CONFIG_BY_ENV.get(app_mode, DevelopmentConfig))

    if overrides:
        app.config.update(overrides)

    if "MAX_CONTENT_LENGTH" not in (overrides or {}):
        app.config["MAX_CONTENT_LENGTH"] = (
            app.config["UPLOAD_MAX_FILE_SIZE"] + app.config["UPLOAD_BODY_HEADROOM"]
        )

    app.config["ALLOWED_ORIGINS"] = [
        origin for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",") if origin
    ]
