"""Integration tests for the SQLAlchemy profile store (in-memory SQLite)."""

from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest
from sqlalchemy import Text, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from core.exceptions import StoreUnavailableError
from domain.entities.profile import Profile
from infrastructure.database.models import ProfileItemModel
from infrastructure.database.session import build_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

T0 = datetime(2026, 3, 1, 12, 0, 0, 123000, tzinfo=timezone.utc)


def _profile(**overrides) -> Profile:
    fields = dict(
        user_id="u1",
        email="a@x.com",
        given_name="Jane",
        family_name="Doe",
        created_at=T0,
        updated_at=T0,
    )
    fields.update(overrides)
    return Profile(**fields)


async def _put(uow_factory: Callable[[], SQLAlchemyUnitOfWork], profile: Profile) -> None:
    async with uow_factory() as uow:
        await uow.profiles.put(profile)
        await uow.commit()


class TestPutAndGet:
    @pytest.mark.asyncio
    async def test_get_returns_none_for_unknown_user(self, uow_factory):
        async with uow_factory() as uow:
            assert await uow.profiles.get("nobody") is None

    @pytest.mark.asyncio
    async def test_round_trip_preserves_fields(self, uow_factory):
        await _put(uow_factory, _profile(bio="hi", avatar_url="https://example.com/a.png"))

        async with uow_factory() as uow:
            stored = await uow.profiles.get("u1")

        assert stored == _profile(bio="hi", avatar_url="https://example.com/a.png")

    @pytest.mark.asyncio
    async def test_row_carries_primary_and_index_keys(
        self, uow_factory, session_factory: async_sessionmaker[AsyncSession]
    ):
        await _put(uow_factory, _profile())

        async with session_factory() as session:
            row = (await session.execute(select(ProfileItemModel))).scalar_one()

        assert (row.pk, row.sk) == ("USER#u1", "PROFILE")
        assert (row.gsi1pk, row.gsi1sk) == ("EMAIL#a@x.com", "USER#u1")
        assert row.created_at == "2026-03-01T12:00:00.123Z"

    @pytest.mark.asyncio
    async def test_second_write_replaces_instead_of_duplicating(
        self, uow_factory, session_factory: async_sessionmaker[AsyncSession]
    ):
        await _put(uow_factory, _profile(bio="first"))
        await _put(uow_factory, _profile(given_name="Janet", updated_at=T0 + timedelta(hours=1)))

        async with session_factory() as session:
            rows = (await session.execute(select(ProfileItemModel))).scalars().all()

        assert len(rows) == 1
        assert rows[0].given_name == "Janet"
        assert rows[0].bio == ""

    @pytest.mark.asyncio
    async def test_conflicting_write_keeps_stored_created_at(self, uow_factory):
        await _put(uow_factory, _profile())
        later = T0 + timedelta(days=2)
        await _put(uow_factory, _profile(created_at=later, updated_at=later))

        async with uow_factory() as uow:
            stored = await uow.profiles.get("u1")

        assert stored is not None
        assert stored.created_at == T0
        assert stored.updated_at == later

    @pytest.mark.asyncio
    async def test_uncommitted_write_is_discarded(self, uow_factory):
        async with uow_factory() as uow:
            await uow.profiles.put(_profile())

        async with uow_factory() as uow:
            assert await uow.profiles.get("u1") is None

    @pytest.mark.asyncio
    async def test_long_attribute_values_round_trip(self, uow_factory):
        long_name = "J" * 300
        long_url = "https://example.com/" + "a" * 3000
        await _put(uow_factory, _profile(given_name=long_name, avatar_url=long_url))

        async with uow_factory() as uow:
            stored = await uow.profiles.get("u1")

        assert stored is not None
        assert stored.given_name == long_name
        assert stored.avatar_url == long_url

    def test_attribute_columns_have_no_length_limit(self):
        columns = ProfileItemModel.__table__.c
        for name in (
            "pk",
            "gsi1pk",
            "gsi1sk",
            "user_id",
            "email",
            "given_name",
            "family_name",
            "bio",
            "avatar_url",
        ):
            assert isinstance(columns[name].type, Text), name
            assert getattr(columns[name].type, "length", None) is None, name


class TestEmailIndex:
    @pytest.mark.asyncio
    async def test_finds_profile_by_email(self, uow_factory):
        await _put(uow_factory, _profile())
        await _put(uow_factory, _profile(user_id="u2", email="b@x.com"))

        async with uow_factory() as uow:
            found = await uow.profiles.get_by_email("a@x.com")

        assert [p.user_id for p in found] == ["u1"]

    @pytest.mark.asyncio
    async def test_index_follows_email_change(self, uow_factory):
        await _put(uow_factory, _profile())
        await _put(uow_factory, _profile(email="new@x.com"))

        async with uow_factory() as uow:
            assert await uow.profiles.get_by_email("a@x.com") == []
            found = await uow.profiles.get_by_email("new@x.com")

        assert [p.user_id for p in found] == ["u1"]


class TestStoreFailures:
    @pytest.fixture
    async def broken_uow_factory(self):
        # No schema: every statement fails
        engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
        factory = build_session_factory(engine)
        yield lambda: SQLAlchemyUnitOfWork(factory)
        await engine.dispose()

    @pytest.mark.asyncio
    async def test_get_raises_store_unavailable(self, broken_uow_factory):
        async with broken_uow_factory() as uow:
            with pytest.raises(StoreUnavailableError) as exc_info:
                await uow.profiles.get("u1")

        assert exc_info.value.status_code == 500
        assert exc_info.value.__cause__ is not None

    @pytest.mark.asyncio
    async def test_put_raises_store_unavailable(self, broken_uow_factory):
        with pytest.raises(StoreUnavailableError):
            async with broken_uow_factory() as uow:
                await uow.profiles.put(_profile())

    @pytest.mark.asyncio
    async def test_ping_succeeds_on_healthy_store(self, uow_factory):
        async with uow_factory() as uow:
            await uow.profiles.ping()

    @pytest.mark.asyncio
    async def test_unreachable_store_raises_store_unavailable(self, unreachable_uow_factory):
        async with unreachable_uow_factory() as uow:
            with pytest.raises(StoreUnavailableError) as exc_info:
                await uow.profiles.get("u1")

        assert isinstance(exc_info.value.__cause__, OSError)
        assert exc_info.value.message == "Internal server error"

    @pytest.mark.asyncio
    async def test_unreachable_store_fails_ping(self, unreachable_uow_factory):
        async with unreachable_uow_factory() as uow:
            with pytest.raises(StoreUnavailableError):
                await uow.profiles.ping()
