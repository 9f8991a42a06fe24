from datetime import datetime

from sqlalchemy import DateTime, String, Text, TypeDecorator, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from . import Base


class GUID(TypeDecorator):
    """Native UUID on Postgres, CHAR(36)/TEXT elsewhere, always a str in Python"""
    impl = String(36)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(UUID(as_uuid=False))
        return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else str(value)


class Like(Base):
    """One row per registered like.

    The table, its indexes and its uniqueness rules are owned by the
    migrations in ``likeable.migrations``; ``Base.metadata.create_all`` is
    never used for it.
    """
    __tablename__ = "likes"

    id: Mapped[str] = mapped_column(GUID(), primary_key=True)

    # Authenticated actor, null for anonymous likes
    liker_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    # Target person, only set when likeable == "user"
    liked_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    likeable_id: Mapped[str] = mapped_column(String(64), nullable=False)
    likeable: Mapped[str] = mapped_column(String(255), nullable=False)

    # Anonymous fingerprint
    ip_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True)

    liked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __mapper_args__ = {"eager_defaults": True}

    @property
    def is_anonymous(self) -> bool:
        return self.liker_id is None
