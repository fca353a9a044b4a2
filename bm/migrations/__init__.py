"""
Additive schema migrations, applied in order when a database is opened.
"""
from bm.migrations import add_archived

MIGRATIONS = [add_archived]


def apply_all(engine) -> None:
    """Run every migration against the engine; each one is idempotent."""
    for migration in MIGRATIONS:
        migration.migrate(engine)
