"""
Application configuration.

All configuration is loaded from environment variables.
Sequence codes and their number formats live here too, so a
deployment can renumber documents without a code change.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "ERP Ledger"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///./erp_ledger.db"
    )

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv(
        "LOG_FORMAT",
        "json" if ENVIRONMENT == "production" else "console",
    )

    # Sequences
    TRANSACTION_SEQUENCE_CODE: str = os.getenv("TRANSACTION_SEQUENCE_CODE", "TRANS")
    TRANSACTION_SEQUENCE_PREFIX: str = os.getenv("TRANSACTION_SEQUENCE_PREFIX", "T")
    TRANSACTION_SEQUENCE_SUFFIX: str = os.getenv("TRANSACTION_SEQUENCE_SUFFIX", "S")

    LEDGER_ENTRY_SEQUENCE_CODE: str = os.getenv("LEDGER_ENTRY_SEQUENCE_CODE", "LEDGER")
    LEDGER_ENTRY_SEQUENCE_PREFIX: str = os.getenv("LEDGER_ENTRY_SEQUENCE_PREFIX", "LE")
    LEDGER_ENTRY_SEQUENCE_SUFFIX: str = os.getenv("LEDGER_ENTRY_SEQUENCE_SUFFIX", "")

    BATCH_SEQUENCE_CODE: str = os.getenv("BATCH_SEQUENCE_CODE", "BATCH")
    BATCH_SEQUENCE_PREFIX: str = os.getenv("BATCH_SEQUENCE_PREFIX", "B")
    BATCH_SEQUENCE_SUFFIX: str = os.getenv("BATCH_SEQUENCE_SUFFIX", "S")

    SEQUENCE_PADDING_LENGTH: int = int(os.getenv("SEQUENCE_PADDING_LENGTH", "4"))

    # Actor recorded on activity generated by the posting engine
    SYSTEM_ACTOR: str = os.getenv("SYSTEM_ACTOR", "system")


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    Using lru_cache means the Settings object is created once
    and reused for all subsequent calls.
    """
    return Settings()
