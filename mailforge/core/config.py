import os
from dotenv import load_dotenv

load_dotenv(override=True)

class Config:
    """
    Base configuration for the Mailforge builders.
    Projects should provide database paths via environment variables.
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY')

    # Get DB_DIR from environment, or use a default if not set
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))

    # Database paths - use environment variables or fallback to DB_DIR
    BUILDER_DB = os.getenv('BUILDER_DB', os.path.join(DB_DIR, "builder.db"))
    LOG_DB = os.getenv('LOG_DB', os.path.join(DB_DIR, "app_logs.db"))

    # Table names
    CAMPAIGNS_TABLE = "campaigns"
    AUTOMATIONS_TABLE = "automations"
    LANDING_PAGES_TABLE = "landing_pages"
    TEMPLATES_TABLE = "templates"

    # Record store backend: 'sqlite' (local BUILDER_DB) or 'http' (hosted backend)
    RECORD_STORE = os.getenv('RECORD_STORE', 'sqlite')
    RECORD_STORE_URL = os.getenv('RECORD_STORE_URL', '')
    RECORD_STORE_API_KEY = os.getenv('RECORD_STORE_API_KEY')
    RECORD_STORE_TIMEOUT = int(os.getenv('RECORD_STORE_TIMEOUT', '15'))

    # Comma separated list, '*' allows any origin
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')


def get_config_value(key, default=None):
    """Get config value: app.config > Config class > env var."""
    try:
        from flask import current_app
        val = current_app.config.get(key)
        if val is not None:
            return val
    except RuntimeError:
        pass
    if hasattr(Config, key):
        val = getattr(Config, key)
        if val is not None:
            return val
    return os.getenv(key, default)
