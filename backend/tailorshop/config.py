"""Application settings and configuration helpers."""
from __future__ import annotations

import os
from functools import lru_cache
from typing import List
from dotenv import load_dotenv, find_dotenv


class Settings:
    """Runtime configuration loaded from environment variables.

    Defaults are suitable for local development. Production should set
    explicit values via environment variables and Secret Manager.
    """

    APP_NAME: str = "Tailor Shop API"
    API_PREFIX: str = "/api"

    # CORS
    CORS_ORIGINS: List[str]

    # Store selection
    STORE_BACKEND: str
    STORE_FALLBACK_MEMORY: bool
    SEED_SAMPLE_DATA: bool

    # GCP
    GCP_PROJECT: str
    FIRESTORE_DATABASE_ID: str

    # Collections
    BILLS_COLLECTION: str
    WORKFLOW_COLLECTION: str
    SETTINGS_COLLECTION: str

    # Listing
    DEFAULT_PAGE_SIZE: int
    MAX_PAGE_SIZE: int
    RECENT_BILLS_LIMIT: int

    # Logging
    LOG_LEVEL: str

    def __init__(self) -> None:
        # Load .env once (supports parent directories)
        load_dotenv(find_dotenv(), override=False)
        self.CORS_ORIGINS = self._get_list("CORS_ORIGINS", default="*")

        self.STORE_BACKEND = os.getenv("STORE_BACKEND", "firestore").strip().lower()
        self.STORE_FALLBACK_MEMORY = os.getenv("STORE_FALLBACK_MEMORY", "true").lower() == "true"
        self.SEED_SAMPLE_DATA = os.getenv("SEED_SAMPLE_DATA", "true").lower() == "true"

        self.GCP_PROJECT = os.getenv("GCP_PROJECT", os.getenv("GOOGLE_CLOUD_PROJECT", ""))
        self.FIRESTORE_DATABASE_ID = os.getenv("FIRESTORE_DATABASE_ID", "(default)")

        self.BILLS_COLLECTION = os.getenv("BILLS_COLLECTION", "bills")
        self.WORKFLOW_COLLECTION = os.getenv("WORKFLOW_COLLECTION", "workflow")
        self.SETTINGS_COLLECTION = os.getenv("SETTINGS_COLLECTION", "settings")

        self.DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
        self.MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "100"))
        self.RECENT_BILLS_LIMIT = int(os.getenv("RECENT_BILLS_LIMIT", "5"))

        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    @staticmethod
    def _get_list(name: str, default: str = "") -> List[str]:
        raw = os.getenv(name, default)
        return [item.strip() for item in raw.split(",") if item.strip()] or ["*"]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()
