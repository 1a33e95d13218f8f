"""
Configuration management for the Betting Ledger.
Loads settings from .env file and provides defaults.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings loaded from environment variables."""

    # SQLite database holding the persisted store document
    DB_PATH: str = os.getenv("DB_PATH", str(Path(__file__).resolve().parent.parent / "data" / "betting.db"))

    # Key the store document is saved under
    STORE_KEY: str = os.getenv("STORE_KEY", "betting-store")

    # Wallet balance for a fresh (or reset) store
    INITIAL_BALANCE: float = float(os.getenv("INITIAL_BALANCE", "100.0"))

    # Synthetic delay (seconds) around the demo event load
    LOAD_EVENTS_DELAY: float = float(os.getenv("LOAD_EVENTS_DELAY", "0.5"))

    # Number of demo events generated by load_events
    DEMO_EVENT_COUNT: int = int(os.getenv("DEMO_EVENT_COUNT", "30"))

    # Persist after every committed mutation
    AUTOSAVE: bool = _env_flag("AUTOSAVE", "true")

    # Use caller-supplied odds instead of re-deriving them from the event
    TRUST_CALLER_ODDS: bool = _env_flag("TRUST_CALLER_ODDS", "false")

    # Reject backward event status transitions (live -> upcoming etc.)
    STRICT_EVENT_TRANSITIONS: bool = _env_flag("STRICT_EVENT_TRANSITIONS", "false")

    # Server
    HOST: str = os.getenv("HOST", "127.0.0.1")
    PORT: int = int(os.getenv("PORT", "8000"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
