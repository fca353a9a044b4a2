"""
Migration: Add the archived field to the bookmarks table.

Databases created before archiving existed have a bookmarks table without
an archived column. This migration adds it with a default of 0 so every
existing bookmark stays active. Running it against an up-to-date database
does nothing.
"""
import logging
from pathlib import Path

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError

logger = logging.getLogger(__name__)

TABLE = "bookmarks"
COLUMN = "archived"


def has_archived_column(engine: Engine) -> bool:
    """Check whether the bookmarks table already has the archived column."""
    columns = {column["name"] for column in inspect(engine).get_columns(TABLE)}
    return COLUMN in columns


def migrate(engine: Engine) -> bool:
    """
    Add the archived column to the bookmarks table if it is missing.

    Args:
        engine: Engine bound to a database whose bookmarks table exists

    Returns:
        True if the column was added, False if it was already present

    Raises:
        OperationalError: if the column could not be added and is still missing
    """
    if has_archived_column(engine):
        logger.debug("'%s' column already exists", COLUMN)
        return False

    try:
        with engine.begin() as conn:
            conn.execute(text(
                f"ALTER TABLE {TABLE} ADD COLUMN {COLUMN} BOOLEAN NOT NULL DEFAULT 0"
            ))
    except OperationalError:
        # Another process may have added it between the check and the ALTER
        if has_archived_column(engine):
            logger.debug("'%s' column added concurrently", COLUMN)
            return False
        raise

    logger.info("Added '%s' column to %s", COLUMN, TABLE)
    return True


if __name__ == "__main__":
    import sys

    if len(sys.argv) < 2:
        print("Usage: python -m bm.migrations.add_archived <db_path>")
        sys.exit(1)

    db_path = sys.argv[1]
    if not Path(db_path).exists():
        print(f"Error: Database file '{db_path}' not found")
        sys.exit(1)

    engine = create_engine(f"sqlite:///{db_path}")
    try:
        if migrate(engine):
            print(f"✓ Added '{COLUMN}' column")
        else:
            print(f"- '{COLUMN}' column already exists")
    finally:
        engine.dispose()
