"""
Database models for Bookshelf (authoritative ORM definitions).

This module defines the SQLAlchemy Base with a naming convention for stable
constraint names and exposes `target_metadata` for table creation.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKeyConstraint,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    UniqueConstraint,
    Uuid,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# Naming convention for deterministic constraint/index names
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all database models with type checking support."""

    metadata = MetaData(naming_convention=naming_convention)


class Authors(Base):
    __tablename__ = "authors"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="authors_pkey"),
        UniqueConstraint("name", name="authors_name_key"),
        CheckConstraint("length(name) > 0", name="authors_name_not_empty"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    born: Mapped[int | None] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), server_default=text("CURRENT_TIMESTAMP")
    )

    # No back-populated collection: book counts are computed by query.


class Books(Base):
    __tablename__ = "books"
    __table_args__ = (
        ForeignKeyConstraint(
            ["author_id"],
            ["authors.id"],
            name="books_author_id_fkey",
        ),
        PrimaryKeyConstraint("id", name="books_pkey"),
        CheckConstraint("length(title) > 0", name="books_title_not_empty"),
        Index("idx_books_author", "author_id"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    published: Mapped[int] = mapped_column(Integer, nullable=False)
    author_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), server_default=text("CURRENT_TIMESTAMP")
    )

    author: Mapped["Authors"] = relationship("Authors")
    genre_rows: Mapped[list["BookGenres"]] = relationship(
        "BookGenres",
        uselist=True,
        back_populates="book",
        order_by="BookGenres.position",
        cascade="all, delete-orphan",
    )

    @property
    def genres(self) -> list[str]:
        return [row.genre for row in self.genre_rows]


class BookGenres(Base):
    __tablename__ = "book_genres"
    __table_args__ = (
        ForeignKeyConstraint(
            ["book_id"],
            ["books.id"],
            ondelete="CASCADE",
            name="book_genres_book_id_fkey",
        ),
        PrimaryKeyConstraint("book_id", "position", name="book_genres_pkey"),
        UniqueConstraint("book_id", "genre", name="book_genres_book_id_genre_key"),
        CheckConstraint("length(genre) > 0", name="book_genres_genre_not_empty"),
        Index("idx_book_genres_genre", "genre"),
    )

    book_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    genre: Mapped[str] = mapped_column(String(100), nullable=False)

    book: Mapped["Books"] = relationship("Books", back_populates="genre_rows")


class Users(Base):
    __tablename__ = "users"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="users_pkey"),
        UniqueConstraint("username", name="users_username_key"),
        CheckConstraint("length(username) > 0", name="users_username_not_empty"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    favorite_genre: Mapped[str] = mapped_column(String(100), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), server_default=text("CURRENT_TIMESTAMP")
    )


target_metadata = Base.metadata

__all__ = ["Base", "Authors", "Books", "BookGenres", "Users", "target_metadata"]
