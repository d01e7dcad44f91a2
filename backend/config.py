"""
config.py
---------
Central configuration for the GuideConnect backend.
All settings are loaded from environment variables, never hard-coded.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the backend directory (if it exists) so env vars in that file
# are picked up by os.getenv() below.  Won't override vars already set in the shell.
_env_path = Path(__file__).parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path)

# ── Storage backend ───────────────────────────────────────────────────────────
# "in_memory" keeps everything in process-local dicts (dev + tests).
# "postgres"  uses the psycopg2 pool in db/pool.py; apply db/schema.sql first.
STORE_BACKEND: str = os.getenv("STORE_BACKEND", "in_memory")

# ── PostgreSQL ────────────────────────────────────────────────────────────────
# Schema defined in db/schema.sql
# Apply with: python -m scripts.run_migrations
POSTGRES_HOST: str     = os.getenv("POSTGRES_HOST",     "localhost")
POSTGRES_PORT: int     = int(os.getenv("POSTGRES_PORT", "5432"))
POSTGRES_DB: str       = os.getenv("POSTGRES_DB",       "guideconnect")
POSTGRES_USER: str     = os.getenv("POSTGRES_USER",     "guideconnect_user")
POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "guideconnect_pass")
POSTGRES_MIN_CONN: int = int(os.getenv("POSTGRES_MIN_CONN", "1"))
POSTGRES_MAX_CONN: int = int(os.getenv("POSTGRES_MAX_CONN", "10"))

# ── Logging ───────────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# File for the JSONL connection audit trail. Empty string = disabled.
AUDIT_LOG_PATH: str = os.getenv("AUDIT_LOG_PATH", "")

# ── Connections ───────────────────────────────────────────────────────────────
# How many read + compare-and-swap rounds respond()/withdraw() attempt before
# reporting AlreadyFinalized to the caller.
CONNECTION_CAS_MAX_ATTEMPTS: int = int(os.getenv("CONNECTION_CAS_MAX_ATTEMPTS", "3"))

# ── Nearby search ─────────────────────────────────────────────────────────────
NEARBY_DEFAULT_RADIUS_KM: float = float(os.getenv("NEARBY_DEFAULT_RADIUS_KM", "10.0"))

# ── HTTP ──────────────────────────────────────────────────────────────────────
# Comma-separated list; "*" allows any origin (development only).
CORS_ALLOW_ORIGINS: list[str] = [
    o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()
]
