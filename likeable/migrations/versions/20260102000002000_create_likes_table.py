"""create likes table

Creates the likes table with a single compound unique constraint over
(liker_id, likeable, likeable_id) plus the lookup indexes:

- idx_likeable (likeable, likeable_id, liked_at): likes on a target, newest first
- idx_liker_id (liker_id): likes of one user
- idx_anonymous_like (ip_address, user_agent): anonymous lookups

MySQL declares the indexes inline in CREATE TABLE, Postgres and SQLite
create them afterwards. The resulting indexes are the same.

Revision ID: 20260102000002000
Revises:
Create Date: 2026-01-02 00:00:02

"""
from typing import Sequence

from alembic import op


# revision identifiers, used by Alembic.
revision: str = "20260102000002000"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


CREATE_LIKES_TABLE = {
    "postgresql": """
        CREATE TABLE IF NOT EXISTS likes (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            liker_id VARCHAR(64),
            liked_id VARCHAR(64),
            likeable_id VARCHAR(64) NOT NULL,
            likeable VARCHAR(255) NOT NULL,
            ip_address VARCHAR(255),
            user_agent TEXT,
            liked_at TIMESTAMP(0) WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP(0) WITH TIME ZONE,
            created_at TIMESTAMP(0) WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP,
            CONSTRAINT likes_liker_id_likeable_likeable_id_key UNIQUE (liker_id, likeable, likeable_id)
        )
    """,
    "mysql": """
        CREATE TABLE IF NOT EXISTS likes (
            id CHAR(36) PRIMARY KEY,
            liker_id VARCHAR(64),
            liked_id VARCHAR(64),
            likeable_id VARCHAR(64) NOT NULL,
            likeable VARCHAR(255) NOT NULL,
            ip_address VARCHAR(255),
            user_agent TEXT,
            liked_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP NULL,
            created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
            UNIQUE KEY unique_like (liker_id, likeable, likeable_id),
            INDEX idx_likeable (likeable, likeable_id, liked_at),
            INDEX idx_liker_id (liker_id),
            INDEX idx_anonymous_like (ip_address, user_agent(255))
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci
    """,
    "sqlite": """
        CREATE TABLE IF NOT EXISTS likes (
            id TEXT PRIMARY KEY,
            liker_id TEXT,
            liked_id TEXT,
            likeable_id TEXT NOT NULL,
            likeable TEXT NOT NULL,
            ip_address TEXT,
            user_agent TEXT,
            liked_at TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at TEXT,
            created_at TEXT NOT NULL DEFAULT (datetime('now')),
            UNIQUE (liker_id, likeable, likeable_id)
        )
    """,
}

# Created as separate statements where CREATE TABLE cannot declare them
LIKES_INDEXES = {
    "idx_likeable": ["likeable", "likeable_id", "liked_at"],
    "idx_liker_id": ["liker_id"],
    "idx_anonymous_like": ["ip_address", "user_agent"],
}


def _dialect() -> str:
    dialect = op.get_context().dialect.name
    if dialect not in CREATE_LIKES_TABLE:
        raise NotImplementedError(f"likes migrations do not support the {dialect} dialect")
    return dialect


def upgrade() -> None:
    dialect = _dialect()
    op.execute(CREATE_LIKES_TABLE[dialect])

    if dialect in ("postgresql", "sqlite"):
        for name, columns in LIKES_INDEXES.items():
            op.create_index(name, "likes", columns, if_not_exists=True)


def downgrade() -> None:
    dialect = _dialect()

    # Missing indexes must not fail the rollback. On MySQL they go with the table.
    if dialect in ("postgresql", "sqlite"):
        for name in LIKES_INDEXES:
            op.drop_index(name, table_name="likes", if_exists=True)

    op.execute("DROP TABLE IF EXISTS likes")
