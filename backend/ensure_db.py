"""Create the PostgreSQL database named in settings if it does not exist.

SQLite URLs need no setup and are skipped.
"""

from __future__ import annotations

import sys

import psycopg2
from psycopg2 import sql
from psycopg2.extensions import ISOLATION_LEVEL_AUTOCOMMIT
from sqlalchemy.engine import make_url

from app.config import settings


def _target() -> tuple[str, dict] | None:
    url = make_url(settings.get_database_url())
    if not url.drivername.startswith("postgresql"):
        return None
    conn_params = {
        "host": url.host or "localhost",
        "port": url.port or 5432,
        "user": url.username or "postgres",
        "password": url.password or "postgres",
    }
    return url.database or settings.db_name, conn_params


def main() -> int:
    target = _target()
    if target is None:
        print("ensure_db: not a PostgreSQL URL, nothing to do")
        return 0
    db_name, conn_params = target

    try:
        conn = psycopg2.connect(database="postgres", **conn_params)
    except psycopg2.OperationalError as e:
        print(f"ensure_db: cannot connect to PostgreSQL: {e}", file=sys.stderr)
        return 0  # non-fatal so app can still start

    conn.set_isolation_level(ISOLATION_LEVEL_AUTOCOMMIT)
    cur = conn.cursor()
    try:
        cur.execute("SELECT 1 FROM pg_database WHERE datname = %s", (db_name,))
        if cur.fetchone():
            return 0
        cur.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(db_name)))
        print(f"ensure_db: created database '{db_name}'")
    except psycopg2.Error as e:
        print(f"ensure_db: failed to create database: {e}", file=sys.stderr)
        return 1
    finally:
        cur.close()
        conn.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
