"""TransactionExecutor — runs one instruction as one atomic unit of work.

Every instruction declares the accounts it writes. The executor holds an
in-process lock per account (acquired in sorted order, so two instructions
can never wait on each other) for the whole database transaction. Two
instructions sharing any declared account therefore run one after the other,
in the order they were admitted; disjoint instructions run concurrently. A
lock lives only while some instruction holds or waits on it.

Any exception rolls back everything the instruction wrote.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from contextlib import AsyncExitStack, asynccontextmanager
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.rc_common.database import async_session_factory
from src.rc_common.errors import AppError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TransactionExecutor:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None) -> None:
        self._session_factory = session_factory or async_session_factory
        self._account_locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}  # holders + waiters per account

    async def run(
        self,
        instruction: str,
        writable: Iterable[str],
        body: Callable[[AsyncSession], Awaitable[T]],
    ) -> T:
        accounts = sorted(set(writable))
        async with AsyncExitStack() as stack:
            for account in accounts:
                await stack.enter_async_context(self._account_lock(account))
            async with self._session_factory() as db:
                try:
                    async with db.begin():
                        result = await body(db)
                except AppError as exc:
                    logger.info(
                        "Instruction %s rolled back: [%d] %s", instruction, exc.code, exc.message
                    )
                    raise
                except Exception:
                    logger.exception("Instruction %s failed unexpectedly", instruction)
                    raise
        logger.debug("Instruction %s committed (%d accounts locked)", instruction, len(accounts))
        return result

    @asynccontextmanager
    async def _account_lock(self, account: str) -> AsyncIterator[None]:
        """Hold the account's lock; the entry is dropped once nobody uses it."""
        lock = self._account_locks.setdefault(account, asyncio.Lock())
        self._lock_users[account] = self._lock_users.get(account, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[account] -= 1
            if self._lock_users[account] == 0:
                del self._lock_users[account]
                del self._account_locks[account]

    async def read(self, body: Callable[[AsyncSession], Awaitable[T]]) -> T:
        """Run a read-only callable in its own session, without account locks."""
        async with self._session_factory() as db:
            return await body(db)
