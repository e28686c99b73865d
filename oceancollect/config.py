import os


class Config:
    # Security
    SECRET_KEY = os.getenv("SECRET_KEY", "dev_secret_key_change_in_production")
    SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "false").lower() == "true"

    # Database (Supabase / PostgreSQL em produção, SQLite local)
    DATABASE_URL = os.getenv("DATABASE_URL")

    # Logs
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Preferência de exibição das listas (list / card)
    VIEW_MODE_COOKIE_MAX_AGE = int(os.getenv("VIEW_MODE_COOKIE_MAX_AGE", str(365 * 24 * 3600)))

    # Rate limiting
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_ENABLED = os.getenv("RATELIMIT_ENABLED", "true").lower() == "true"
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "1000 per day;200 per hour")
    RATELIMIT_LOGIN = os.getenv("RATELIMIT_LOGIN", "20 per minute")


config = Config()
