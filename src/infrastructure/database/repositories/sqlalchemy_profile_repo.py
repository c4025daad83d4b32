"""SQLAlchemy implementation of Profile repository."""

from datetime import datetime
from typing import Any

import structlog
from sqlalchemy import select, text
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import StoreUnavailableError
from domain.entities.profile import Profile, email_index_key, format_timestamp, profile_key
from infrastructure.database.models import ProfileItemModel

logger = structlog.get_logger()

_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}

# Driver connect failures (refused, DNS, timeout) surface as OSError, not
# SQLAlchemyError.
STORE_ERRORS = (SQLAlchemyError, OSError)

# Columns left untouched when a write hits an existing row.
_PRESERVED_ON_CONFLICT = ("pk", "sk", "created_at")


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: str) -> Profile | None:
        """Get the profile stored under the user's primary key."""
        key = profile_key(user_id)
        stmt = select(ProfileItemModel).where(
            ProfileItemModel.pk == key.partition,
            ProfileItemModel.sk == key.sort,
        ).execution_options(populate_existing=True)
        try:
            result = await self._session.execute(stmt)
        except STORE_ERRORS as exc:
            raise self._unavailable("get", exc) from exc
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_email(self, email: str) -> list[Profile]:
        """Get profiles through the email index."""
        partition = email_index_key(email, "").partition
        stmt = (
            select(ProfileItemModel)
            .where(ProfileItemModel.gsi1pk == partition)
            .order_by(ProfileItemModel.gsi1sk)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self._session.execute(stmt)
        except STORE_ERRORS as exc:
            raise self._unavailable("get_by_email", exc) from exc
        return [self._to_entity(model) for model in result.scalars()]

    async def put(self, profile: Profile) -> Profile:
        """
        Create or fully replace a profile in one statement.

        Index key columns are recomputed from the profile and written in the
        same row. An existing row keeps its stored created_at.
        """
        values = self._to_row(profile)
        dialect = self._session.bind.dialect.name if self._session.bind else ""
        insert = _UPSERT_INSERTS.get(dialect)

        try:
            if insert is None:
                await self._session.merge(ProfileItemModel(**values))
                await self._session.flush()
            else:
                stmt = insert(ProfileItemModel).values(**values)
                stmt = stmt.on_conflict_do_update(
                    index_elements=[ProfileItemModel.pk, ProfileItemModel.sk],
                    set_={
                        name: stmt.excluded[name]
                        for name in values
                        if name not in _PRESERVED_ON_CONFLICT
                    },
                )
                await self._session.execute(stmt)
        except STORE_ERRORS as exc:
            raise self._unavailable("put", exc) from exc

        return profile

    async def ping(self) -> None:
        """Round-trip to the store without touching any record."""
        try:
            await self._session.execute(text("SELECT 1"))
        except STORE_ERRORS as exc:
            raise self._unavailable("ping", exc) from exc

    @staticmethod
    def _unavailable(operation: str, exc: Exception) -> StoreUnavailableError:
        logger.error(
            "store_unavailable",
            operation=operation,
            error=str(exc),
            error_type=type(exc).__name__,
            exc_info=exc,
        )
        return StoreUnavailableError()

    @staticmethod
    def _to_row(profile: Profile) -> dict[str, Any]:
        """Map entity to a full row, key columns included."""
        key = profile_key(profile.user_id)
        index_key = email_index_key(profile.email, profile.user_id)
        return {
            "pk": key.partition,
            "sk": key.sort,
            "gsi1pk": index_key.partition,
            "gsi1sk": index_key.sort,
            "user_id": profile.user_id,
            "email": profile.email,
            "given_name": profile.given_name,
            "family_name": profile.family_name,
            "bio": profile.bio,
            "avatar_url": profile.avatar_url,
            "created_at": format_timestamp(profile.created_at),
            "updated_at": format_timestamp(profile.updated_at),
        }

    @staticmethod
    def _to_entity(model: ProfileItemModel) -> Profile:
        """Map ORM model to domain entity, dropping key columns."""
        return Profile(
            user_id=model.user_id,
            email=model.email,
            given_name=model.given_name,
            family_name=model.family_name,
            bio=model.bio,
            avatar_url=model.avatar_url,
            created_at=datetime.fromisoformat(model.created_at),
            updated_at=datetime.fromisoformat(model.updated_at),
        )
