"""Repository Protocol — dependency inversion for testability."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_listing.domain.models import Listing


class ListingRepositoryProtocol(Protocol):
    async def get_latest(self, db: AsyncSession, address: str) -> Listing | None: ...

    async def get_active(self, db: AsyncSession, address: str) -> Listing | None: ...

    async def save(self, db: AsyncSession, listing: Listing) -> Listing: ...

    async def update(self, db: AsyncSession, listing: Listing) -> Listing: ...

    async def list_by_reward_center(
        self, db: AsyncSession, reward_center: str, state: str | None, limit: int
    ) -> list[Listing]: ...
