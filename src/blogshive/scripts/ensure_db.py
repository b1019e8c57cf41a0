"""Utility script to prepare the configured database.

For PostgreSQL URLs the database itself is created first if missing; the
schema is then created from the ORM metadata.
"""
from __future__ import annotations

import argparse
import logging
import sys
from urllib.parse import urlsplit, urlunsplit

import psycopg
from psycopg import sql
from sqlalchemy import create_engine

from blogshive.core.logging import configure_logging
from blogshive.core.settings import settings
from blogshive.db.session import Base

logger = logging.getLogger("blogshive.scripts.ensure_db")


def normalize_to_psycopg(uri: str) -> str:
    """Return a Postgres URI suitable for psycopg.connect().

    Strips quotes and whitespace and turns SQLAlchemy schemes
    (postgresql+driver) into plain "postgresql".
    """
    uri = (uri or "").strip()
    if len(uri) >= 2 and uri[0] == uri[-1] and uri[0] in "'\"":
        uri = uri[1:-1]
    if not uri:
        raise ValueError("DATABASE_URL is empty")

    parts = urlsplit(uri)
    scheme = parts.scheme
    if scheme.startswith("postgresql+"):
        scheme = "postgresql"
    return urlunsplit((scheme, parts.netloc, parts.path, parts.query, parts.fragment))


def ensure_postgres_database(db_url: str) -> None:
    """Create the target Postgres database through the maintenance database."""
    parts = urlsplit(normalize_to_psycopg(db_url))
    target_db = parts.path.lstrip("/") or "postgres"
    admin_url = urlunsplit(("postgresql", parts.netloc, "/postgres", parts.query, parts.fragment))

    with psycopg.connect(admin_url, autocommit=True) as conn, conn.cursor() as cur:
        cur.execute("SELECT 1 FROM pg_database WHERE datname = %s", (target_db,))
        if cur.fetchone() is None:
            cur.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(target_db)))
            logger.info("Created database %s", target_db)
        else:
            logger.info("Database %s already exists", target_db)


def ensure_schema(db_url: str, drop: bool = False) -> None:
    """Create every table, optionally dropping the existing ones first."""
    engine = create_engine(db_url)
    try:
        if drop:
            Base.metadata.drop_all(bind=engine)
            logger.info("Dropped all tables")
        Base.metadata.create_all(bind=engine)
        logger.info("Schema is up to date (%d tables)", len(Base.metadata.tables))
    finally:
        engine.dispose()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Ensure or reset the configured database")
    parser.add_argument(
        "--drop",
        action="store_true",
        help="Drop all tables before creating them again.",
    )
    parser.add_argument(
        "--url",
        default=None,
        help="Override database URL (defaults to effective settings URL)",
    )
    args = parser.parse_args(argv)
    configure_logging()

    db_url = args.url or settings.effective_database_url
    try:
        if db_url.startswith("postgresql"):
            ensure_postgres_database(db_url)
        ensure_schema(db_url, drop=args.drop)
    except Exception as exc:
        logger.error("ensure_db failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
