#!/usr/bin/env python
"""
scripts/run_migrations.py
--------------------------
Applies db/schema.sql to the configured Postgres database.

Usage:
    cd backend && python -m scripts.run_migrations [--dry-run]

Exit codes:
    0 — migrations applied successfully (or dry-run completed)
    1 — connection failed or SQL error

Environment variables (all have defaults — override as needed):
    POSTGRES_HOST, POSTGRES_PORT, POSTGRES_DB, POSTGRES_USER, POSTGRES_PASSWORD
    (read through db.pool.connect_kwargs, shared with the API)

Notes:
    - All statements run in a single transaction: all-or-nothing.
    - Re-running is idempotent: every CREATE uses IF NOT EXISTS.
"""

from __future__ import annotations

import argparse
import logging
import pathlib
import re
import sys

import psycopg2

import config
from db.pool import connect_kwargs

logger = logging.getLogger("migrations")

_SQL_FILE = pathlib.Path(config.__file__).resolve().parent / "db" / "schema.sql"


def _read_sql(path: pathlib.Path = _SQL_FILE) -> str:
    if not path.exists():
        raise FileNotFoundError(f"SQL file not found: {path}")
    return path.read_text(encoding="utf-8")


def strip_comments(sql: str) -> str:
    """Remove /* ... */ block comments and -- line comments."""
    sql = re.sub(r"/\*.*?\*/", "", sql, flags=re.DOTALL)
    sql = re.sub(r"--[^\n]*", "", sql)
    return sql


def split_statements(sql: str) -> list[str]:
    """Split on semicolons; return non-empty statements."""
    return [s.strip() for s in sql.split(";") if s.strip()]


def run(dry_run: bool = False, sql_file: pathlib.Path = _SQL_FILE) -> int:
    """Apply every statement; return how many were executed (or listed, for a dry run)."""
    statements = split_statements(strip_comments(_read_sql(sql_file)))

    logger.info("SQL file   : %s", sql_file)
    logger.info("Statements : %d", len(statements))
    logger.info("Target DB  : %s @ %s:%s", config.POSTGRES_DB, config.POSTGRES_HOST, config.POSTGRES_PORT)

    if dry_run:
        logger.info("DRY-RUN — no changes applied.")
        for i, stmt in enumerate(statements, 1):
            logger.info("  [%03d] %s...", i, stmt[:80].replace("\n", " "))
        return len(statements)

    conn = psycopg2.connect(**connect_kwargs())
    conn.autocommit = False
    try:
        with conn.cursor() as cur:
            for i, stmt in enumerate(statements, 1):
                try:
                    cur.execute(stmt)
                except psycopg2.Error as exc:
                    logger.error("Statement %d failed: %s", i, exc.pgerror or exc)
                    raise
                logger.info("  [ok] %s", stmt[:60].replace("\n", " "))
        conn.commit()
        logger.info("Done — %d statements applied.", len(statements))
    except Exception:
        conn.rollback()
        logger.error("ROLLED BACK due to error.")
        raise
    finally:
        conn.close()
    return len(statements)


if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL.upper(), format="[migrations] %(message)s")
    parser = argparse.ArgumentParser(description="Apply Postgres schema migrations.")
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Print statements without executing them.",
    )
    args = parser.parse_args()
    try:
        run(dry_run=args.dry_run)
    except Exception as exc:
        logger.error("ERROR: %s", exc)
        sys.exit(1)
