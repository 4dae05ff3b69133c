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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./tillflow.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))

    # Sessions
    SESSION_COOKIE_NAME = data.get("SESSION_COOKIE_NAME", "pos_session")
    SESSION_COOKIE_SECURE = bool(data.get("SESSION_COOKIE_SECURE", False))
    SESSION_TTL_DAYS = int(data.get("SESSION_TTL_DAYS", 7))

    # Access denial: "auto" answers JSON under API_PREFIX and redirects elsewhere
    LOGIN_PATH = data.get("LOGIN_PATH", "/login")
    DEFAULT_LANDING_PATH = data.get("DEFAULT_LANDING_PATH", "/pos")
    DENIAL_MODE = data.get("DENIAL_MODE", "auto")

    TWO_FACTOR_ISSUER = data.get("TWO_FACTOR_ISSUER", "TillFlow")

    # Maintenance sweep
    AUDIT_RETENTION_MONTHS = int(data.get("AUDIT_RETENTION_MONTHS", 6))
    MAINTENANCE_TIMEOUT_SECONDS = float(data.get("MAINTENANCE_TIMEOUT_SECONDS", 10))

    # Login throttle
    LOGIN_THROTTLE_WINDOW_SECONDS = int(data.get("LOGIN_THROTTLE_WINDOW_SECONDS", 900))
    LOGIN_THROTTLE_MAX_ATTEMPTS = int(data.get("LOGIN_THROTTLE_MAX_ATTEMPTS", 8))
    LOGIN_THROTTLE_LOCKOUT_SECONDS = int(data.get("LOGIN_THROTTLE_LOCKOUT_SECONDS", 900))

    CSRF_PROTECTION = bool(data.get("CSRF_PROTECTION", True))
    HSTS_ENABLED = bool(data.get("HSTS_ENABLED", True))

    # Honour X-Forwarded-For / X-Real-IP only behind a proxy that sets them
    TRUST_PROXY_HEADERS = bool(data.get("TRUST_PROXY_HEADERS", False))

    # Password reset email; delivery is skipped with a warning when SMTP_HOST is unset
    APP_BASE_URL = data.get("APP_BASE_URL", "http://localhost:8000")
    PASSWORD_RESET_TTL_MINUTES = int(data.get("PASSWORD_RESET_TTL_MINUTES", 60))
    SMTP_HOST = data.get("SMTP_HOST")
    SMTP_PORT = int(data.get("SMTP_PORT", 587))
    SMTP_USER = data.get("SMTP_USER")
    SMTP_PASSWORD = data.get("SMTP_PASSWORD")
    SMTP_USE_TLS = bool(data.get("SMTP_USE_TLS", True))
    MAIL_FROM = data.get("MAIL_FROM", "TillFlow <noreply@tillflow.example>")
