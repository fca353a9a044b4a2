"""
Partial-update clause builder.

Collects only the columns a caller actually supplied and turns them into a
single UPDATE statement against the bookmarks table.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from sqlalchemy import update
from sqlalchemy.sql.dml import Update

from bm.exceptions import NoFieldsToUpdate
from bm.models import Bookmark

# Columns a partial update may assign; the name is the row identity.
UPDATABLE_COLUMNS = ("url", "archived")


@dataclass
class UpdateClause:
    """
    Ordered (column, value) assignments for one bookmark.

    Example:
        >>> clause = UpdateClause.from_fields("G", url="https://g2.com")
        >>> clause.assignments
        {'url': 'https://g2.com'}
    """
    name: str
    assignments: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_fields(
        cls,
        name: str,
        url: Optional[str] = None,
        archived: Optional[bool] = None
    ) -> "UpdateClause":
        """
        Build a clause from optional fields.

        Args:
            name: Bookmark to update
            url: New URL; None or empty leaves it unchanged
            archived: New archived flag; None leaves it unchanged
        """
        clause = cls(name)
        if url:
            clause.set("url", url)
        if archived is not None:
            clause.set("archived", bool(archived))
        return clause

    def set(self, column: str, value: Any) -> "UpdateClause":
        if column not in UPDATABLE_COLUMNS:
            raise ValueError(f"Column cannot be updated: {column}")
        self.assignments[column] = value
        return self

    def __bool__(self) -> bool:
        return bool(self.assignments)

    def require_changes(self) -> "UpdateClause":
        """Raise NoFieldsToUpdate if nothing was assigned."""
        if not self.assignments:
            raise NoFieldsToUpdate(self.name)
        return self

    def statement(self) -> Update:
        """UPDATE statement applying the assignments to the named row."""
        self.require_changes()
        return (
            update(Bookmark)
            .where(Bookmark.name == self.name)
            .values(**self.assignments)
            .execution_options(synchronize_session=False)
        )
