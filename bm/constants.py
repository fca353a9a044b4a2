"""
Constants for bm.

Defaults shared by the repository, the config system and the CLI.
"""

# Storage
DEFAULT_DATABASE = "./bm.sqlite"
MEMORY_DATABASE = ":memory:"

# SQLite extended result codes for constraint failures
# https://www.sqlite.org/rescode.html
SQLITE_CONSTRAINT_PRIMARYKEY = 1555
SQLITE_CONSTRAINT_UNIQUE = 2067

# Listing
DEFAULT_SEPARATOR = "|"
OUTPUT_FORMATS = ("plain", "table")

# CLI exit codes
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130
