"""SQLAlchemy ORM models."""

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from core.config import settings


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ProfileItemModel(Base):
    """Profile record in a single-table layout.

    ``pk``/``sk`` form the primary key (``USER#<id>`` / ``PROFILE``).
    ``gsi1pk``/``gsi1sk`` (``EMAIL#<email>`` / ``USER#<id>``) are stored on the
    same row so the email index can never drift from the record.
    Attribute columns are unbounded text; timestamps are ISO-8601 strings.
    """

    __tablename__ = settings.table_name

    pk: Mapped[str] = mapped_column(Text, primary_key=True)
    sk: Mapped[str] = mapped_column(String(100), primary_key=True)
    gsi1pk: Mapped[str] = mapped_column(Text, nullable=False)
    gsi1sk: Mapped[str] = mapped_column(Text, nullable=False)

    user_id: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False, default="")
    given_name: Mapped[str] = mapped_column(Text, nullable=False)
    family_name: Mapped[str] = mapped_column(Text, nullable=False)
    bio: Mapped[str] = mapped_column(Text, nullable=False, default="")
    avatar_url: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[str] = mapped_column(String(40), nullable=False)
    updated_at: Mapped[str] = mapped_column(String(40), nullable=False)

    __table_args__ = (Index(f"ix_{settings.table_name}_gsi1", "gsi1pk", "gsi1sk"),)
