"""
SQLAlchemy models for bm.

This module defines the on-disk schema: a bookmarks table keyed by name and
a tags table holding one row per (bookmark name, tag) pair.
"""
from typing import Optional, List, Set
from sqlalchemy import (
    Text, Boolean, ForeignKey, CheckConstraint, text
)
from sqlalchemy.orm import (
    DeclarativeBase, relationship, Mapped, mapped_column
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class Bookmark(Base):
    """
    Bookmark model representing a named URL.

    Attributes:
        name: Primary key, caller supplied and case-sensitive
        url: The bookmarked URL
        archived: Whether the bookmark is hidden from default listings
        tags: Tag rows owned by this bookmark
    """
    __tablename__ = 'bookmarks'

    name: Mapped[str] = mapped_column(Text, primary_key=True)
    url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    archived: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("0")
    )

    tags: Mapped[List["Tag"]] = relationship(
        "Tag",
        back_populates="bookmark",
        cascade="all, delete-orphan",
        passive_deletes=True,  # Rely on ON DELETE CASCADE
        lazy="selectin"
    )

    @property
    def tag_names(self) -> Set[str]:
        """Tag set of this bookmark (unordered)."""
        return {tag.tag for tag in self.tags}

    def __repr__(self):
        return f"<Bookmark(name='{self.name}', url='{(self.url or '')[:50]}', archived={self.archived})>"


class Tag(Base):
    """
    Tag row attached to exactly one bookmark.

    The composite primary key keeps a bookmark's tag set free of repeats.
    """
    __tablename__ = 'tags'

    name: Mapped[str] = mapped_column(
        Text,
        ForeignKey('bookmarks.name', ondelete='CASCADE'),
        primary_key=True
    )
    tag: Mapped[str] = mapped_column(Text, primary_key=True)

    bookmark: Mapped["Bookmark"] = relationship("Bookmark", back_populates="tags")

    __table_args__ = (
        CheckConstraint("length(tag) > 0", name="ck_tags_tag_not_empty"),
    )

    def __repr__(self):
        return f"<Tag(name='{self.name}', tag='{self.tag}')>"
