"""
Entry point for the Betting Ledger API.

Run with:
    python run.py          # local dev (auto-reload on)
    RELOAD=false python run.py
"""

import os

import uvicorn

from betting_ledger.config import settings

if __name__ == "__main__":
    reload = os.getenv("RELOAD", "true").lower() in ("1", "true", "yes")
    uvicorn.run(
        "betting_ledger.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=reload,
    )
