"""
Database interface for bm.

Provides the bookmark repository: one SQLite file, one connection held for
the lifetime of the object, and one transaction per operation so a bookmark
and its tag rows always change together.
"""
import logging
from pathlib import Path
from typing import Optional, List, Iterable, Generator
from contextlib import contextmanager

from sqlalchemy import create_engine, select, insert, delete, event
from sqlalchemy.orm import Session, sessionmaker, selectinload
from sqlalchemy.pool import StaticPool
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from bm.constants import (
    DEFAULT_DATABASE, MEMORY_DATABASE,
    SQLITE_CONSTRAINT_PRIMARYKEY, SQLITE_CONSTRAINT_UNIQUE,
)
from bm.exceptions import DuplicateName, NotFound, StorageError, RollbackError
from bm.migrations import apply_all
from bm.models import Base, Bookmark, Tag
from bm.tag_utils import normalize_tags
from bm.updates import UpdateClause

logger = logging.getLogger(__name__)

_DUPLICATE_KEY_CODES = (SQLITE_CONSTRAINT_PRIMARYKEY, SQLITE_CONSTRAINT_UNIQUE)


def is_duplicate_key(error: IntegrityError) -> bool:
    """Check whether an IntegrityError is a primary key or unique violation."""
    return getattr(error.orig, "sqlite_errorcode", None) in _DUPLICATE_KEY_CODES


class Database:
    """
    Bookmark repository backed by a single SQLite file.

    Example:
        >>> with Database("bm.sqlite") as db:
        ...     db.add("G", "https://g.com", tags=["Search", "Web"])
        ...     db.update("G", url="https://g2.com")
        ...     bookmarks = db.list()
    """

    def __init__(self, path: str = DEFAULT_DATABASE, echo: bool = False):
        """
        Open the database, creating the schema and applying migrations.

        Args:
            path: Database file path, or ":memory:" for a private in-memory store
            echo: Log every SQL statement (SQLAlchemy echo)

        Raises:
            StorageError: if the file cannot be opened or the schema set up
        """
        if path == MEMORY_DATABASE:
            self.path = None
            self.url = "sqlite://"
        else:
            self.path = Path(path)
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageError(f"Cannot create directory for {self.path}: {e}") from e
            self.url = f"sqlite:///{self.path}"

        # StaticPool keeps exactly one connection for the repository's lifetime
        self.engine = create_engine(
            self.url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=echo
        )
        event.listen(self.engine, "connect", self._configure_sqlite)

        self.Session = sessionmaker(bind=self.engine, autoflush=False)

        try:
            Base.metadata.create_all(self.engine)
            apply_all(self.engine)
        except SQLAlchemyError as e:
            self.engine.dispose()
            raise StorageError(f"Cannot open database {path}: {getattr(e, 'orig', None) or e}") from e

        logger.debug("Opened database %s", self.url)

    @staticmethod
    def _configure_sqlite(dbapi_conn, connection_record):
        """Enable foreign keys so deleting a bookmark cascades to its tags."""
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Release the connection. Failures are logged, not raised."""
        try:
            self.engine.dispose()
        except Exception as e:
            logger.warning("Error closing database connection: %s", e)

    @contextmanager
    def session(self, expire_on_commit: bool = True) -> Generator[Session, None, None]:
        """
        Context manager for one atomic unit of work.

        Commits on success. On any error the transaction is rolled back
        before the error propagates; SQLAlchemy errors surface as StorageError.

        Args:
            expire_on_commit: If False, objects won't expire after commit (useful for detached access)

        Yields:
            SQLAlchemy session
        """
        session = self.Session()
        session.expire_on_commit = expire_on_commit
        try:
            yield session
            session.commit()
        except Exception as e:
            self._rollback(session, e)
            if isinstance(e, SQLAlchemyError):
                raise StorageError(str(getattr(e, "orig", None) or e)) from e
            raise
        finally:
            session.close()

    @staticmethod
    def _rollback(session: Session, error: BaseException) -> None:
        try:
            session.rollback()
        except SQLAlchemyError as rollback_error:
            logger.warning("Rollback failed after %r: %s", error, rollback_error)
            raise RollbackError(error, rollback_error) from error

    def add(
        self,
        name: str,
        url: str,
        tags: Optional[Iterable[str]] = None,
        archived: bool = False
    ) -> Bookmark:
        """
        Add a bookmark and its tags.

        Args:
            name: Unique bookmark name
            url: The URL to bookmark
            tags: Tags to attach; lowercased, repeats collapse to one
            archived: Create the bookmark already archived

        Returns:
            The created bookmark (detached)

        Raises:
            ValueError: if name or url is empty
            DuplicateName: if a bookmark with this name exists
            StorageError: on any other storage failure; nothing is persisted
        """
        if not name:
            raise ValueError("Bookmark name must not be empty")
        if not url:
            raise ValueError("Bookmark URL must not be empty")

        tag_names = normalize_tags(tags)

        with self.session(expire_on_commit=False) as session:
            bookmark = Bookmark(name=name, url=url, archived=bool(archived), tags=[])
            session.add(bookmark)
            try:
                session.flush()
            except IntegrityError as e:
                if is_duplicate_key(e):
                    raise DuplicateName(name) from e
                raise

            bookmark.tags.extend(Tag(name=name, tag=tag) for tag in tag_names)
            session.flush()

            logger.debug("Added bookmark %r with %d tag(s)", name, len(tag_names))
            return bookmark

    def get(self, name: str) -> Optional[Bookmark]:
        """
        Get a bookmark by name.

        Returns:
            Bookmark instance or None
        """
        with self.session(expire_on_commit=False) as session:
            query = (
                select(Bookmark)
                .options(selectinload(Bookmark.tags))
                .where(Bookmark.name == name)
            )
            return session.execute(query).scalar_one_or_none()

    def delete(self, name: str) -> None:
        """
        Delete a bookmark and all of its tags.

        Raises:
            NotFound: if no bookmark has this name; nothing is modified
            StorageError: on storage failure
        """
        with self.session() as session:
            result = session.execute(
                delete(Bookmark)
                .where(Bookmark.name == name)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFound(name)

            # Cascade already removed them unless the file predates foreign keys
            session.execute(
                delete(Tag)
                .where(Tag.name == name)
                .execution_options(synchronize_session=False)
            )
            logger.debug("Deleted bookmark %r", name)

    def update(
        self,
        name: str,
        url: Optional[str] = None,
        tags: Optional[Iterable[str]] = None,
        archived: Optional[bool] = None
    ) -> None:
        """
        Update only the supplied fields of a bookmark.

        Args:
            name: Bookmark to update
            url: New URL; None or "" leaves it unchanged
            tags: Replacement tag set; None or empty leaves tags unchanged
            archived: New archived flag; None leaves it unchanged

        Raises:
            NoFieldsToUpdate: if neither url nor archived is supplied
            NotFound: if no bookmark has this name
            StorageError: on storage failure; nothing is modified
        """
        clause = UpdateClause.from_fields(name, url=url, archived=archived).require_changes()
        tag_names = normalize_tags(tags)

        with self.session() as session:
            result = session.execute(clause.statement())
            if result.rowcount == 0:
                raise NotFound(name)

            if tag_names:
                session.execute(
                    delete(Tag)
                    .where(Tag.name == name)
                    .execution_options(synchronize_session=False)
                )
                session.execute(insert(Tag), [{"name": name, "tag": tag} for tag in tag_names])

            logger.debug(
                "Updated bookmark %r: %s%s",
                name,
                ", ".join(clause.assignments),
                f", tags={tag_names}" if tag_names else ""
            )

    def list(self, include_archived: bool = False) -> List[Bookmark]:
        """
        List bookmarks with their tags.

        Args:
            include_archived: If True, include archived bookmarks

        Returns:
            List of bookmarks (detached); order is unspecified
        """
        with self.session(expire_on_commit=False) as session:
            query = select(Bookmark).options(selectinload(Bookmark.tags))

            if not include_archived:
                query = query.where(Bookmark.archived == False)

            return list(session.execute(query).scalars())
