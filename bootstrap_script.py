from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence
from urllib.parse import quote_plus

from dotenv import load_dotenv
import psycopg
from psycopg import Connection


LOGGER = logging.getLogger(__name__)
MIGRATIONS_DIR = Path(__file__).with_name("migrations")
CONNECTION_VARIABLES = ("DB_USER", "DB_PASSWORD", "DB_HOST", "DB_PORT", "DB_NAME")

CREATE_LEDGER_SQL = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    migration_id TEXT PRIMARY KEY,
    applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""
LIST_LEDGER_SQL = "SELECT migration_id FROM schema_migrations ORDER BY migration_id;"
RECORD_LEDGER_SQL = (
    "INSERT INTO schema_migrations (migration_id) VALUES (%s) "
    "ON CONFLICT (migration_id) DO NOTHING;"
)


def load_configuration() -> str:
    """Resolve the Postgres DSN of the Supabase database.

    ``DATABASE_URL`` wins when set. Otherwise the DSN is assembled from
    ``DB_USER``, ``DB_PASSWORD``, ``DB_HOST``, ``DB_PORT`` and ``DB_NAME``.

    Returns:
        A Postgres connection URL (DSN) string.

    Raises:
        RuntimeError: If neither form of configuration is complete.
    """

    load_dotenv()
    database_url = os.getenv("DATABASE_URL")
    if database_url:
        return database_url

    values = {name: os.getenv(name) for name in CONNECTION_VARIABLES}
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise RuntimeError(
            "Set DATABASE_URL or all of "
            + ", ".join(CONNECTION_VARIABLES)
            + f" (missing: {', '.join(missing)})."
        )

    return (
        f"postgresql://{quote_plus(values['DB_USER'])}:{quote_plus(values['DB_PASSWORD'])}"
        f"@{values['DB_HOST']}:{values['DB_PORT']}/{values['DB_NAME']}"
    )


def build_conninfo(db_url: str) -> str:
    """Rewrite the legacy ``postgres://`` scheme, which psycopg rejects."""

    if db_url.startswith("postgres://"):
        return db_url.replace("postgres://", "postgresql://", 1)
    return db_url


def ensure_schema_migrations_table(connection: Connection[Any]) -> None:
    connection.execute(CREATE_LEDGER_SQL)


def fetch_applied_migrations(connection: Connection[Any]) -> set[str]:
    return {migration_id for (migration_id,) in connection.execute(LIST_LEDGER_SQL)}


def discover_migrations(directory: Path) -> Sequence[Path]:
    """Ordered ``*.sql`` files of a directory; the numeric prefix sets the order."""

    return sorted(path for path in directory.iterdir() if path.suffix == ".sql")


def pending_migrations(migrations: Iterable[Path], applied: set[str]) -> list[Path]:
    return [migration for migration in migrations if migration.name not in applied]


def run_migration(connection: Connection[Any], migration_path: Path) -> bool:
    """Run one migration file and record it in the ledger atomically.

    Returns:
        False when the file holds no SQL, in which case nothing is recorded.
    """

    statements = migration_path.read_text(encoding="utf-8").strip()
    if not statements:
        LOGGER.info("Migration %s is empty, nothing to run", migration_path.name)
        return False

    with connection.transaction():
        connection.execute(statements)  # type: ignore[arg-type]
        connection.execute(RECORD_LEDGER_SQL, (migration_path.name,))
    return True


def apply_pending_migrations(
    connection: Connection[Any], migrations: Iterable[Path], dry_run: bool = False
) -> list[str]:
    """Apply the hotel schema migrations that have not run yet.

    Args:
        connection: Active Postgres connection.
        migrations: Migration file paths, in execution order.
        dry_run: Only report what would be applied.

    Returns:
        Filenames of the migrations applied (or, on a dry run, pending).

    Raises:
        RuntimeError: If a migration fails. Earlier migrations stay applied.
    """

    ensure_schema_migrations_table(connection)
    applied = fetch_applied_migrations(connection)
    pending = pending_migrations(migrations, applied)
    if dry_run:
        return [migration.name for migration in pending]

    newly_applied: list[str] = []
    for migration in pending:
        LOGGER.info("Applying migration %s", migration.name)
        try:
            ran = run_migration(connection, migration)
        except psycopg.Error as exc:
            LOGGER.error("Failed to apply migration %s", migration.name)
            raise RuntimeError(f"Migration {migration.name} failed") from exc
        if ran:
            newly_applied.append(migration.name)
    return newly_applied


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Apply the Hotel Booking database migrations.")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="list pending migrations without applying them",
    )
    parser.add_argument(
        "--migrations-dir",
        type=Path,
        default=MIGRATIONS_DIR,
        help="directory holding the ordered .sql files",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point that orchestrates configuration loading and migrations."""

    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    conninfo = build_conninfo(load_configuration())
    migrations = discover_migrations(args.migrations_dir)
    if not migrations:
        LOGGER.info("No migrations found under %s", args.migrations_dir)
        return

    LOGGER.info("Connecting to Supabase database.")
    with psycopg.connect(conninfo) as connection:
        applied = apply_pending_migrations(connection, migrations, dry_run=args.dry_run)
        if args.dry_run:
            LOGGER.info("Pending migrations: %s", ", ".join(applied) or "none")
        elif applied:
            LOGGER.info("Applied migrations: %s", ", ".join(applied))
        else:
            LOGGER.info("Database schema already up to date.")


if __name__ == "__main__":
    main()
