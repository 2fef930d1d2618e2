"""Initial schema — catalog, users, friendships, likes, reviews, feed

Revision ID: 0001
Revises: —
Create Date: 2026-10-19 00:00:00
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

friendship_status = sa.Enum("PENDING", "CONFIRMED", name="friendship_status")
feed_event_type = sa.Enum("LIKE", "REVIEW", "FRIEND", name="feed_event_type")
feed_operation = sa.Enum("ADD", "REMOVE", "UPDATE", name="feed_operation")


def upgrade() -> None:
    # ── Reference data ────────────────────────────────────────────────────────
    mpa_ratings = op.create_table(
        "mpa_ratings",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("name", sa.String(16), nullable=False, unique=True),
    )
    genres = op.create_table(
        "genres",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("name", sa.String(64), nullable=False, unique=True),
    )
    op.create_table(
        "directors",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
    )

    # ── users ─────────────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("login", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("birthday", sa.Date, nullable=False),
    )
    op.create_index("ix_users_login", "users", ["login"])

    # ── films ─────────────────────────────────────────────────────────────────
    op.create_table(
        "films",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.String(200), nullable=True),
        sa.Column("release_date", sa.Date, nullable=False),
        sa.Column("duration", sa.Integer, nullable=False),
        sa.Column("mpa_id", sa.Integer,
                  sa.ForeignKey("mpa_ratings.id", ondelete="SET NULL"), nullable=True),
        sa.CheckConstraint("duration > 0", name="chk_film_duration_positive"),
        sa.CheckConstraint("release_date >= '1895-12-28'", name="chk_film_release_date"),
    )
    op.create_index("ix_films_name", "films", ["name"])

    op.create_table(
        "film_genres",
        sa.Column("film_id", sa.Integer,
                  sa.ForeignKey("films.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("genre_id", sa.Integer,
                  sa.ForeignKey("genres.id", ondelete="CASCADE"), primary_key=True),
    )
    op.create_table(
        "film_directors",
        sa.Column("film_id", sa.Integer,
                  sa.ForeignKey("films.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("director_id", sa.Integer,
                  sa.ForeignKey("directors.id", ondelete="CASCADE"), primary_key=True),
    )

    # ── film_likes ────────────────────────────────────────────────────────────
    op.create_table(
        "film_likes",
        sa.Column("film_id", sa.Integer,
                  sa.ForeignKey("films.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("user_id", sa.Integer,
                  sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    )
    op.create_index("idx_film_likes_user", "film_likes", ["user_id", "film_id"])

    # ── friendships ───────────────────────────────────────────────────────────
    op.create_table(
        "friendships",
        sa.Column("user_id", sa.Integer,
                  sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("friend_id", sa.Integer,
                  sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("status", friendship_status, nullable=False),
    )

    # ── reviews ───────────────────────────────────────────────────────────────
    op.create_table(
        "reviews",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("film_id", sa.Integer,
                  sa.ForeignKey("films.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer,
                  sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("is_positive", sa.Boolean, nullable=False),
        sa.CheckConstraint("length(content) <= 5000", name="chk_review_content_len"),
    )
    op.create_index("ix_reviews_film_id", "reviews", ["film_id"])
    op.create_index("ix_reviews_user_id", "reviews", ["user_id"])

    for table in ("review_likes", "review_dislikes"):
        op.create_table(
            table,
            sa.Column("review_id", sa.Integer,
                      sa.ForeignKey("reviews.id", ondelete="CASCADE"), primary_key=True),
            sa.Column("user_id", sa.Integer,
                      sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        )

    # ── feed_events ───────────────────────────────────────────────────────────
    op.create_table(
        "feed_events",
        sa.Column("event_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("timestamp", sa.BigInteger, nullable=False),
        sa.Column("user_id", sa.Integer,
                  sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("event_type", feed_event_type, nullable=False),
        sa.Column("operation", feed_operation, nullable=False),
        sa.Column("entity_id", sa.Integer, nullable=False),
    )
    op.create_index("idx_feed_events_user", "feed_events", ["user_id", "event_id"])

    # ── Seed rows ─────────────────────────────────────────────────────────────
    # Ids are part of the API contract; keep them in step with
    # cinegraph.services.reference_service.
    op.bulk_insert(
        mpa_ratings,
        [
            {"id": 1, "name": "G"},
            {"id": 2, "name": "PG"},
            {"id": 3, "name": "PG-13"},
            {"id": 4, "name": "R"},
            {"id": 5, "name": "NC-17"},
        ],
    )
    op.bulk_insert(
        genres,
        [
            {"id": 1, "name": "Comedy"},
            {"id": 2, "name": "Drama"},
            {"id": 3, "name": "Animation"},
            {"id": 4, "name": "Thriller"},
            {"id": 5, "name": "Documentary"},
            {"id": 6, "name": "Action"},
        ],
    )


def downgrade() -> None:
    op.drop_index("idx_feed_events_user", table_name="feed_events")
    op.drop_table("feed_events")
    op.drop_table("review_dislikes")
    op.drop_table("review_likes")
    op.drop_index("ix_reviews_user_id", table_name="reviews")
    op.drop_index("ix_reviews_film_id", table_name="reviews")
    op.drop_table("reviews")
    op.drop_table("friendships")
    op.drop_index("idx_film_likes_user", table_name="film_likes")
    op.drop_table("film_likes")
    op.drop_table("film_directors")
    op.drop_table("film_genres")
    op.drop_index("ix_films_name", table_name="films")
    op.drop_table("films")
    op.drop_index("ix_users_login", table_name="users")
    op.drop_table("users")
    op.drop_table("directors")
    op.drop_table("genres")
    op.drop_table("mpa_ratings")

    bind = op.get_bind()
    for enum_type in (feed_operation, feed_event_type, friendship_status):
        enum_type.drop(bind, checkfirst=True)
