# tests/unit/test_executor.py
"""TransactionExecutor: atomic commit/rollback and per-account serialization."""

import asyncio

import pytest
from solders.pubkey import Pubkey
from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_common.errors import InvalidPriceError
from src.rc_runtime.executor import TransactionExecutor
from src.rc_token.infrastructure.db_models import TokenMintORM
from src.rc_token.infrastructure.ledger import TokenLedger


def _addr() -> str:
    return str(Pubkey.new_unique())


@pytest.fixture
def executor(session_factory) -> TransactionExecutor:
    return TransactionExecutor(session_factory)


class TestAtomicity:
    async def test_commit(self, executor) -> None:
        ledger, mint = TokenLedger(), _addr()
        await executor.run("create", [mint], lambda db: ledger.create_mint(db, mint, None, 0))
        assert (await executor.read(lambda db: ledger.get_mint(db, mint))).address == mint

    async def test_app_error_rolls_back(self, executor) -> None:
        ledger, mint = TokenLedger(), _addr()

        async def body(db: AsyncSession) -> None:
            await ledger.create_mint(db, mint, None, 0)
            raise InvalidPriceError(0)

        with pytest.raises(InvalidPriceError):
            await executor.run("create", [mint], body)

        assert await executor.read(lambda db: db.get(TokenMintORM, mint)) is None

    async def test_unexpected_error_rolls_back(self, executor) -> None:
        ledger, mint = TokenLedger(), _addr()

        async def body(db: AsyncSession) -> None:
            await ledger.create_mint(db, mint, None, 0)
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await executor.run("create", [mint], body)
        assert await executor.read(lambda db: db.get(TokenMintORM, mint)) is None


class TestSerialization:
    async def test_shared_account_runs_in_admission_order(self, executor) -> None:
        shared = _addr()
        events: list[str] = []

        def body(name: str):
            async def run(db: AsyncSession) -> None:
                events.append(f"{name}-start")
                await asyncio.sleep(0.01)
                events.append(f"{name}-end")

            return run

        await asyncio.gather(
            executor.run("a", [shared, _addr()], body("a")),
            executor.run("b", [_addr(), shared], body("b")),
        )
        assert events == ["a-start", "a-end", "b-start", "b-end"]

    async def test_locks_released_after_distinct_instructions(self, executor) -> None:
        async def noop(db: AsyncSession) -> None:
            return None

        for i in range(5):
            await executor.run(f"op-{i}", [_addr(), _addr()], noop)
        assert executor._account_locks == {}
        assert executor._lock_users == {}

    async def test_lock_kept_while_waiter_queued(self, executor) -> None:
        shared = _addr()
        first_started = asyncio.Event()
        release = asyncio.Event()

        async def holder(db: AsyncSession) -> None:
            first_started.set()
            await release.wait()

        async def noop(db: AsyncSession) -> None:
            return None

        first = asyncio.create_task(executor.run("first", [shared], holder))
        await first_started.wait()
        second = asyncio.create_task(executor.run("second", [shared], noop))
        await asyncio.sleep(0)
        assert executor._lock_users[shared] == 2

        release.set()
        await asyncio.gather(first, second)
        assert shared not in executor._account_locks

    async def test_lock_released_on_rollback(self, executor) -> None:
        account = _addr()

        async def body(db: AsyncSession) -> None:
            raise InvalidPriceError(0)

        with pytest.raises(InvalidPriceError):
            await executor.run("fail", [account], body)
        assert account not in executor._account_locks
