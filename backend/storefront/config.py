# backend/storefront/config.py
from __future__ import annotations
import os

from sqlalchemy.engine import make_url


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # Datasource settings. Normally supplied by the instance properties file
    # (instance/storefront.cfg or $STOREFRONT_SETTINGS); env vars are the fallback.
    DATASOURCE_URL = os.environ.get(
        "DATASOURCE_URL",
        "sqlite:///storefront.sqlite3",  # default local location
    )
    DATASOURCE_USERNAME = os.environ.get("DATASOURCE_USERNAME")
    DATASOURCE_PASSWORD = os.environ.get("DATASOURCE_PASSWORD")

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Bearer token lifetime
    SESSION_TTL_HOURS = int(os.environ.get("SESSION_TTL_HOURS", "24"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    CORS_ALLOWED_ORIGINS = {
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:8080",
        "http://127.0.0.1:8080",
    }

    PLACEHOLDER_IMAGE_URL = "https://placehold.co/300x300/e0e0e0/333333?text=No+Image"


def build_database_uri(url: str, username: str | None = None, password: str | None = None) -> str:
    """
    Compose the SQLAlchemy URI from the datasource settings.

    Credentials from the properties file win over any embedded in the URL.
    """
    parsed = make_url(url)
    if username:
        parsed = parsed.set(username=username)
    if password:
        parsed = parsed.set(password=password)
    return parsed.render_as_string(hide_password=False)
