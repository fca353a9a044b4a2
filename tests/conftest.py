import pytest
import tempfile
import os
import sqlite3


@pytest.fixture
def temp_db():
    """Create a temporary database file path."""
    with tempfile.TemporaryDirectory(prefix="bm_test_db_") as tmpdir:
        yield os.path.join(tmpdir, "test.sqlite")


@pytest.fixture
def empty_database(temp_db):
    """Create an empty test database and return Database instance."""
    from bm.db import Database

    db = Database(temp_db)
    yield db
    db.close()


@pytest.fixture
def populated_database(temp_db):
    """Create a populated test database with active and archived bookmarks."""
    from bm.db import Database

    db = Database(temp_db)
    db.add("python", "https://docs.python.org", tags=["Programming", "Docs"])
    db.add("github", "https://github.com", tags=["dev", "git"])
    db.add("example", "https://example.com")
    db.add("old", "https://example.com/old", tags=["legacy"], archived=True)
    yield db
    db.close()


@pytest.fixture
def clean_bm_env(monkeypatch, tmp_path):
    """
    Fixture to create a clean bm environment without affecting real config.

    Removes BM_ environment variables, sets HOME to a temp directory and
    changes into tmp_path.
    """
    for key in list(os.environ.keys()):
        if key.startswith("BM_"):
            monkeypatch.delenv(key, raising=False)

    mock_home = tmp_path / "home"
    mock_home.mkdir()
    monkeypatch.setenv("HOME", str(mock_home))
    monkeypatch.chdir(tmp_path)

    return tmp_path


# ============ Test Helpers ============

def count_rows(db_path, table, name=None):
    """Count rows in a table directly, bypassing the repository."""
    conn = sqlite3.connect(db_path)
    try:
        if name is None:
            return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
        return conn.execute(
            f"SELECT COUNT(*) FROM {table} WHERE name = ?", (name,)
        ).fetchone()[0]
    finally:
        conn.close()


@pytest.fixture
def rows():
    """
    Fixture exposing count_rows.

    Usage:
        def test_something(rows, temp_db):
            assert rows(temp_db, "tags", "python") == 2
    """
    return count_rows
