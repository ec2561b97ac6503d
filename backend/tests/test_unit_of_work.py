"""
Projectdesk Backend — Unit of Work Tests
==========================================

What we test:
    ✅ begin() while active raises TransactionError (no nesting)
    ✅ commit()/rollback() while idle are no-ops
    ✅ Writes require an active transaction
    ✅ reader() shares the transaction's session only while it is active
    ✅ Closing with an active transaction rolls it back
    ✅ Role names are unique in storage; a failed savepoint leaves the outer
       transaction usable
    ✅ owned_transaction() owns or joins
"""

import pytest

from projectdesk import database
from projectdesk.exceptions import ConflictError, TransactionError
from projectdesk.models import Role
from projectdesk.repositories import role_repository
from projectdesk.services.ensure import owned_transaction
from projectdesk.unit_of_work import UnitOfWork


class TestTransactionControl:

    @pytest.mark.asyncio
    async def test_begin_twice_raises(self, uow):
        await uow.begin()
        with pytest.raises(TransactionError):
            await uow.begin()
        assert uow.has_active_transaction
        await uow.rollback()

    @pytest.mark.asyncio
    async def test_transaction_error_is_a_conflict(self, uow):
        await uow.begin()
        with pytest.raises(ConflictError):
            await uow.begin()
        await uow.rollback()

    @pytest.mark.asyncio
    async def test_commit_and_rollback_when_idle_do_nothing(self, uow):
        await uow.commit()
        await uow.rollback()
        assert not uow.has_active_transaction

    @pytest.mark.asyncio
    async def test_session_requires_active_transaction(self, uow):
        with pytest.raises(TransactionError):
            uow.session

    @pytest.mark.asyncio
    async def test_commit_persists_and_returns_to_idle(self, uow, count_rows):
        await uow.begin()
        await role_repository.insert(uow.session, Role(name="Developer"))
        await uow.commit()

        assert not uow.has_active_transaction
        assert await count_rows(Role, name="Developer") == 1

    @pytest.mark.asyncio
    async def test_rollback_discards_writes(self, uow, count_rows):
        await uow.begin()
        await role_repository.insert(uow.session, Role(name="Developer"))
        await uow.rollback()

        assert not uow.has_active_transaction
        assert await count_rows(Role) == 0

    @pytest.mark.asyncio
    async def test_reader_sees_pending_rows_inside_transaction(self, uow):
        await uow.begin()
        await role_repository.insert(uow.session, Role(name="Designer"))

        async with uow.reader() as session:
            assert session is uow.session
            assert await role_repository.find_by_name(session, "Designer") is not None

        await uow.rollback()

        async with uow.reader() as session:
            assert await role_repository.find_by_name(session, "Designer") is None

    @pytest.mark.asyncio
    async def test_duplicate_role_name_is_rejected_by_storage(self, uow, count_rows):
        await uow.begin()
        await role_repository.insert(uow.session, Role(name="Developer"))
        with pytest.raises(ConflictError):
            await role_repository.insert(uow.session, Role(name="Developer"))
        await uow.rollback()

        assert await count_rows(Role) == 0

    @pytest.mark.asyncio
    async def test_failed_savepoint_keeps_outer_transaction(self, uow, count_rows):
        await uow.begin()
        await role_repository.insert(uow.session, Role(name="Developer"))

        with pytest.raises(ConflictError):
            async with uow.savepoint():
                await role_repository.insert(uow.session, Role(name="Developer"))

        assert uow.has_active_transaction
        await role_repository.insert(uow.session, Role(name="Designer"))
        await uow.commit()

        assert await count_rows(Role, name="Developer") == 1
        assert await count_rows(Role, name="Designer") == 1

    @pytest.mark.asyncio
    async def test_close_rolls_back_active_transaction(self, db, count_rows):
        unit = UnitOfWork(database.async_session_factory)
        await unit.begin()
        await role_repository.insert(unit.session, Role(name="Developer"))
        await unit.close()

        assert not unit.has_active_transaction
        assert await count_rows(Role) == 0
        with pytest.raises(TransactionError):
            await unit.begin()


class TestOwnedTransaction:

    @pytest.mark.asyncio
    async def test_owns_when_idle(self, uow, count_rows):
        async with owned_transaction(uow, "test") as owned:
            assert owned
            await role_repository.insert(uow.session, Role(name="Developer"))

        assert not uow.has_active_transaction
        assert await count_rows(Role) == 1

    @pytest.mark.asyncio
    async def test_joined_scope_never_commits(self, uow, count_rows):
        await uow.begin()
        async with owned_transaction(uow, "test") as owned:
            assert not owned
            await role_repository.insert(uow.session, Role(name="Developer"))

        assert uow.has_active_transaction
        await uow.rollback()
        assert await count_rows(Role) == 0

    @pytest.mark.asyncio
    async def test_owner_rolls_back_on_error(self, uow, count_rows):
        with pytest.raises(RuntimeError, match="boom"):
            async with owned_transaction(uow, "test"):
                await role_repository.insert(uow.session, Role(name="Developer"))
                raise RuntimeError("boom")

        assert not uow.has_active_transaction
        assert await count_rows(Role) == 0

    @pytest.mark.asyncio
    async def test_joined_scope_leaves_rollback_to_owner(self, uow):
        await uow.begin()
        with pytest.raises(RuntimeError):
            async with owned_transaction(uow, "test"):
                raise RuntimeError("boom")

        assert uow.has_active_transaction
        await uow.rollback()
