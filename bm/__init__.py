"""
bm - a minimal bookmark manager

Named URL records with optional tags and an archived flag, stored in a
single SQLite file.

Example Usage:
    >>> from bm import Database
    >>> with Database("bm.sqlite") as db:
    ...     db.add("python", "https://python.org", tags=["Docs"])
    ...     db.update("python", archived=True)
    ...     db.list(include_archived=True)
"""

__version__ = "0.3.0"

# Core database API
from bm.db import Database

# Configuration
from bm.config import BmConfig, get_config, init_config

# Models
from bm.models import Bookmark, Tag

# Errors
from bm.exceptions import (
    BookmarkError,
    DuplicateName,
    NotFound,
    NoFieldsToUpdate,
    StorageError,
    RollbackError,
)

__all__ = [
    # Database
    "Database",
    # Config
    "BmConfig",
    "get_config",
    "init_config",
    # Models
    "Bookmark",
    "Tag",
    # Errors
    "BookmarkError",
    "DuplicateName",
    "NotFound",
    "NoFieldsToUpdate",
    "StorageError",
    "RollbackError",
]
