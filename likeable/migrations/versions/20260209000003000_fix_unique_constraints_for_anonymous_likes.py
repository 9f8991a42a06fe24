"""fix unique constraints for anonymous likes

The compound unique constraint over (liker_id, likeable, likeable_id) never
fires for anonymous likes because liker_id is NULL, so one fingerprint
could like the same target without limit. Replace it with two partial
unique indexes:

- unique_authenticated_like (liker_id, likeable, likeable_id) WHERE liker_id IS NOT NULL
- unique_anonymous_like (ip_address, user_agent, likeable, likeable_id) WHERE liker_id IS NULL

MySQL has no partial indexes. There the anonymous index takes liker_id as a
trailing column instead, which does not partition on NULL-ness: MySQL
treats NULLs as distinct, so anonymous duplicates are not rejected by it.
This is a known limitation of the dialect.

Downgrade restores the compound constraint on Postgres and MySQL. SQLite
only drops the new indexes: it never lost the table-level constraint (an
autoindex that cannot be dropped without rebuilding the table).

Revision ID: 20260209000003000
Revises: 20260102000002000
Create Date: 2026-02-09 00:00:03

"""
from typing import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "20260209000003000"
down_revision: str | Sequence[str] | None = "20260102000002000"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


PG_COMPOUND_CONSTRAINT = "likes_liker_id_likeable_likeable_id_key"
MYSQL_COMPOUND_INDEX = "unique_like"

AUTHENTICATED_COLUMNS = ["liker_id", "likeable", "likeable_id"]
ANONYMOUS_COLUMNS = ["ip_address", "user_agent", "likeable", "likeable_id"]

AUTHENTICATED_PREDICATE = "liker_id IS NOT NULL"
ANONYMOUS_PREDICATE = "liker_id IS NULL"

# Prefix lengths keep the MySQL key under InnoDB's 3072 byte limit with utf8mb4
MYSQL_PREFIX_LENGTHS = {"ip_address": 45, "user_agent": 255}


def _create_partial_indexes(dialect: str) -> None:
    where = f"{dialect}_where"
    op.create_index(
        "unique_authenticated_like",
        "likes",
        AUTHENTICATED_COLUMNS,
        unique=True,
        if_not_exists=True,
        **{where: sa.text(AUTHENTICATED_PREDICATE)},
    )
    op.create_index(
        "unique_anonymous_like",
        "likes",
        ANONYMOUS_COLUMNS,
        unique=True,
        if_not_exists=True,
        **{where: sa.text(ANONYMOUS_PREDICATE)},
    )


def upgrade() -> None:
    dialect = op.get_context().dialect.name

    if dialect == "postgresql":
        op.execute(f"ALTER TABLE likes DROP CONSTRAINT IF EXISTS {PG_COMPOUND_CONSTRAINT}")
        _create_partial_indexes(dialect)
    elif dialect == "sqlite":
        _create_partial_indexes(dialect)
    elif dialect == "mysql":
        op.drop_index(MYSQL_COMPOUND_INDEX, table_name="likes")
        op.create_index(
            "unique_authenticated_like",
            "likes",
            AUTHENTICATED_COLUMNS,
            unique=True,
        )
        op.create_index(
            "unique_anonymous_like",
            "likes",
            ANONYMOUS_COLUMNS + ["liker_id"],
            unique=True,
            mysql_length=MYSQL_PREFIX_LENGTHS,
        )
    else:
        raise NotImplementedError(f"likes migrations do not support the {dialect} dialect")


def downgrade() -> None:
    dialect = op.get_context().dialect.name

    if dialect == "postgresql":
        op.drop_index("unique_authenticated_like", table_name="likes", if_exists=True)
        op.drop_index("unique_anonymous_like", table_name="likes", if_exists=True)
        op.create_unique_constraint(PG_COMPOUND_CONSTRAINT, "likes", AUTHENTICATED_COLUMNS)
    elif dialect == "sqlite":
        op.drop_index("unique_authenticated_like", table_name="likes", if_exists=True)
        op.drop_index("unique_anonymous_like", table_name="likes", if_exists=True)
    elif dialect == "mysql":
        op.drop_index("unique_authenticated_like", table_name="likes")
        op.drop_index("unique_anonymous_like", table_name="likes")
        op.create_index(MYSQL_COMPOUND_INDEX, "likes", AUTHENTICATED_COLUMNS, unique=True)
    else:
        raise NotImplementedError(f"likes migrations do not support the {dialect} dialect")
