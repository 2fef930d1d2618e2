"""
SQLAlchemy ORM models.

The same schema runs on PostgreSQL (production) and SQLite (tests, local
runs), so only portable column types are used. Every child row cascades on
delete of its parent; the migration DDL declares the same foreign keys.

Relationships are declared here so services can navigate films → genres /
directors / MPA without writing raw joins everywhere.
"""
from enum import Enum as PyEnum

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Column,
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
)
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import DeclarativeBase, relationship


# ── Base ──────────────────────────────────────────────────────────────────────

class Base(DeclarativeBase):
    pass


# ── Enums ─────────────────────────────────────────────────────────────────────

class FriendshipStatus(str, PyEnum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"


class EventType(str, PyEnum):
    LIKE = "LIKE"
    REVIEW = "REVIEW"
    FRIEND = "FRIEND"


class OperationType(str, PyEnum):
    ADD = "ADD"
    REMOVE = "REMOVE"
    UPDATE = "UPDATE"


# ── Association tables ────────────────────────────────────────────────────────

film_genres = Table(
    "film_genres",
    Base.metadata,
    Column("film_id", Integer, ForeignKey("films.id", ondelete="CASCADE"), primary_key=True),
    Column("genre_id", Integer, ForeignKey("genres.id", ondelete="CASCADE"), primary_key=True),
)

film_directors = Table(
    "film_directors",
    Base.metadata,
    Column("film_id", Integer, ForeignKey("films.id", ondelete="CASCADE"), primary_key=True),
    Column("director_id", Integer, ForeignKey("directors.id", ondelete="CASCADE"), primary_key=True),
)


# ── Reference data ────────────────────────────────────────────────────────────

class MpaRating(Base):
    """Fixed content classification (G, PG, ...). Seeded by migration 0001."""
    __tablename__ = "mpa_ratings"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(16), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<MpaRating id={self.id} name={self.name!r}>"


class Genre(Base):
    """Fixed film tag. Seeded by migration 0001."""
    __tablename__ = "genres"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(64), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Genre id={self.id} name={self.name!r}>"


class Director(Base):
    __tablename__ = "directors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<Director id={self.id} name={self.name!r}>"


# ── Models ────────────────────────────────────────────────────────────────────

class User(Base):
    """
    Registered user.

    name falls back to login when blank; validators.py fills it in before
    the row is written, so the column is never empty.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False)
    login = Column(String(64), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    birthday = Column(Date, nullable=False)

    def __repr__(self) -> str:
        return f"<User id={self.id} login={self.login!r}>"


class Film(Base):
    __tablename__ = "films"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(String(200), nullable=True)
    release_date = Column(Date, nullable=False)
    duration = Column(Integer, nullable=False)
    mpa_id = Column(
        Integer,
        ForeignKey("mpa_ratings.id", ondelete="SET NULL"),
        nullable=True,
    )

    __table_args__ = (
        CheckConstraint("duration > 0", name="chk_film_duration_positive"),
        CheckConstraint("release_date >= '1895-12-28'", name="chk_film_release_date"),
    )

    # Relationships
    mpa = relationship("MpaRating")
    genres = relationship("Genre", secondary=film_genres, order_by="Genre.id")
    directors = relationship("Director", secondary=film_directors, order_by="Director.id")

    def __repr__(self) -> str:
        return f"<Film id={self.id} name={self.name!r} release={self.release_date}>"


class FilmLike(Base):
    """One like per user per film."""
    __tablename__ = "film_likes"

    film_id = Column(
        Integer,
        ForeignKey("films.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )

    __table_args__ = (
        # Recommendations scan likes by user first
        Index("idx_film_likes_user", "user_id", "film_id"),
    )


class Friendship(Base):
    """
    Directed friendship edge: user → friend with a confirmation status.

    The requester's edge is CONFIRMED, the target's reciprocal edge starts
    PENDING. Two users are mutual friends only when both edges are CONFIRMED.
    """
    __tablename__ = "friendships"

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    friend_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    status = Column(
        SAEnum(FriendshipStatus, name="friendship_status"),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Friendship {self.user_id} → {self.friend_id} {self.status}>"


class Review(Base):
    """
    A user's review of a film.

    The usefulness score is not stored: it is likes minus dislikes, counted
    whenever a review is read.
    """
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    film_id = Column(
        Integer,
        ForeignKey("films.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content = Column(Text, nullable=False)
    is_positive = Column(Boolean, nullable=False)

    __table_args__ = (
        CheckConstraint("length(content) <= 5000", name="chk_review_content_len"),
    )

    def __repr__(self) -> str:
        return f"<Review id={self.id} film={self.film_id} user={self.user_id}>"


class ReviewLike(Base):
    """One like per user per review."""
    __tablename__ = "review_likes"

    review_id = Column(
        Integer,
        ForeignKey("reviews.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )


class ReviewDislike(Base):
    """One dislike per user per review. Independent of ReviewLike."""
    __tablename__ = "review_dislikes"

    review_id = Column(
        Integer,
        ForeignKey("reviews.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )


class FeedEvent(Base):
    """
    Append-only activity log entry. Never updated or deleted by the service;
    rows only disappear through the user cascade.
    """
    __tablename__ = "feed_events"

    event_id = Column(Integer, primary_key=True, autoincrement=True)
    # Epoch milliseconds
    timestamp = Column(BigInteger, nullable=False)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    event_type = Column(SAEnum(EventType, name="feed_event_type"), nullable=False)
    operation = Column(SAEnum(OperationType, name="feed_operation"), nullable=False)
    entity_id = Column(Integer, nullable=False)

    __table_args__ = (
        Index("idx_feed_events_user", "user_id", "event_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<FeedEvent {self.event_id} user={self.user_id} "
            f"{self.event_type}/{self.operation} entity={self.entity_id}>"
        )
