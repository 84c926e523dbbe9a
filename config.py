import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./liturgi.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")

    ENVIRONMENT = data.get("ENVIRONMENT", "development")
    APP_URL = data.get("APP_URL", "http://localhost:3000")

    # Sessions
    SESSION_COOKIE_NAME = data.get("SESSION_COOKIE_NAME", "liturgi_session")
    SESSION_TTL_DAYS = int(data.get("SESSION_TTL_DAYS", 7))
    COOKIE_SECURE = bool(data.get("COOKIE_SECURE", ENVIRONMENT == "production"))

    # Rate limiting: "memory" is only correct for a single process
    CACHE_BACKEND = data.get("CACHE_BACKEND", "memory")
    REDIS_URL = data.get("REDIS_URL", "redis://localhost:6379/0")
    TRUST_PROXY_HEADERS = bool(data.get("TRUST_PROXY_HEADERS", False))
    LOGIN_MAX_ATTEMPTS = int(data.get("LOGIN_MAX_ATTEMPTS", 5))
    LOGIN_WINDOW_SECONDS = int(data.get("LOGIN_WINDOW_SECONDS", 15 * 60))
    REGISTER_MAX_ATTEMPTS = int(data.get("REGISTER_MAX_ATTEMPTS", 3))
    REGISTER_WINDOW_SECONDS = int(data.get("REGISTER_WINDOW_SECONDS", 60 * 60))

    # Argon2id cost parameters
    ARGON2_MEMORY_COST = int(data.get("ARGON2_MEMORY_COST", 65536))
    ARGON2_TIME_COST = int(data.get("ARGON2_TIME_COST", 3))
    ARGON2_PARALLELISM = int(data.get("ARGON2_PARALLELISM", 4))

    # Token lifetimes
    INVITE_TTL_DAYS = int(data.get("INVITE_TTL_DAYS", 7))
    PASSWORD_RESET_TTL_MINUTES = int(data.get("PASSWORD_RESET_TTL_MINUTES", 60))
    EMAIL_VERIFICATION_TTL_HOURS = int(data.get("EMAIL_VERIFICATION_TTL_HOURS", 24))
    ACCOUNT_RETENTION_DAYS = int(data.get("ACCOUNT_RETENTION_DAYS", 90))

    # Plans
    TRIAL_DAYS = int(data.get("TRIAL_DAYS", 30))
    TRIAL_PLAN_LIMITS = data.get(
        "TRIAL_PLAN_LIMITS", {"people": 100, "groups": 10, "servicePlans": 10}
    )

    ADMIN_API_KEY = data.get("ADMIN_API_KEY", "test-admin-key-12345")
