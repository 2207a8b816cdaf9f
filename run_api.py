"""
Run the MessHub REST API.

Usage:
    python run_api.py

Environment variables (all optional, also read from .env):
    APP_ENV                     "development", "production" or "test" (default: development)
    DB_PATH                     SQLite database file path (default: messhub.db)
    JWT_SECRET                  Secret key for signing JWT tokens (change in production!)
    JWT_EXPIRY_DAYS             Token lifetime in days (default: 30)
    AUTH_COOKIE_NAME            Name of the auth cookie (default: token)
    TRUST_CLIENT_PRICES         "false" re-prices order lines from the catalog
    ENFORCE_STATUS_TRANSITIONS  "false" allows any order status change
    LOG_LEVEL                   Logging level (default: INFO)
    CORS_ORIGINS                Comma-separated allowed origins (default: *)
"""

import sys
from pathlib import Path

# Ensure src/ is importable without an editable install
sys.path.insert(0, str(Path(__file__).parent / "src"))

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "messhub.adapters.rest.app:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
