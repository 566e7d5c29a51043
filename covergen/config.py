import os


def _env_bool(name: str, default: str = "false") -> bool:
    return (os.getenv(name, default) or default).lower() == "true"


class BaseConfig:
    # Secrets (env in prod; dev/test may use defaults)
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-not-secure")
    WTF_CSRF_SECRET_KEY = SECRET_KEY

    # Database (env in prod; dev/test may use default)
    try:
        from dotenv import dotenv_values
        _ENV_FALLBACK = dotenv_values(".env")
    except Exception:
        _ENV_FALLBACK = {}
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL") or _ENV_FALLBACK.get("DATABASE_URL") or "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Logging / misc
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Cookies: secure-by-default
    SESSION_COOKIE_HTTPONLY = True
    REMEMBER_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"

    # Flask-Limiter default: off globally; prefer per-route limits
    RATELIMIT_DEFAULT = None

    APP_BASE_URL = os.getenv("APP_BASE_URL", "http://localhost:5000")

    # --- Polar (Billing) ---
    POLAR_ACCESS_TOKEN = os.getenv("POLAR_ACCESS_TOKEN")
    POLAR_WEBHOOK_SECRET = os.getenv("POLAR_WEBHOOK_SECRET")
    # "sandbox" | "production"
    POLAR_SERVER = os.getenv("POLAR_SERVER", "sandbox")
    POLAR_TIMEOUT_SECONDS = float(os.getenv("POLAR_TIMEOUT_SECONDS", "10"))

    # Price IDs (per environment via env vars)
    POLAR_PRICE_PRO_MONTHLY = os.getenv("POLAR_PRICE_PRO_MONTHLY")
    POLAR_PRICE_PRO_YEARLY = os.getenv("POLAR_PRICE_PRO_YEARLY")

    # Webhook replay window (seconds); a delivery exactly on the edge is accepted
    WEBHOOK_TOLERANCE_SECONDS = int(os.getenv("WEBHOOK_TOLERANCE_SECONDS", "300"))
    # When true, failing to write the audit row aborts the webhook with a 500
    WEBHOOK_AUDIT_REQUIRED = _env_bool("WEBHOOK_AUDIT_REQUIRED")

    # Free tier: generations per calendar month
    FREE_MONTHLY_QUOTA = int(os.getenv("FREE_MONTHLY_QUOTA", "2"))


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG")
    SESSION_COOKIE_SECURE = False
    REMEMBER_COOKIE_SECURE = False


class ProductionConfig(BaseConfig):
    DEBUG = False
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "WARNING")
    SESSION_COOKIE_SECURE = True
    REMEMBER_COOKIE_SECURE = True
    SESSION_COOKIE_SAMESITE = os.environ.get("SESSION_COOKIE_SAMESITE", "Lax")
    POLAR_SERVER = os.getenv("POLAR_SERVER", "production")


class TestingConfig(BaseConfig):
    TESTING = True
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.environ.get("TEST_DATABASE_URL", "sqlite:///:memory:")
    SESSION_COOKIE_SECURE = False
    REMEMBER_COOKIE_SECURE = False
    WTF_CSRF_ENABLED = False
    RATELIMIT_ENABLED = False


_ENV_MAP = {
    "development": DevelopmentConfig,
    "staging": ProductionConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}


def get_config():
    env = os.environ.get("APP_ENV", "development").lower()
    return _ENV_MAP.get(env, DevelopmentConfig)
