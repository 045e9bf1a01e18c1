"""Repository Protocol — dependency inversion for testability."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_offer.domain.models import Offer


class OfferRepositoryProtocol(Protocol):
    async def get_latest(self, db: AsyncSession, address: str) -> Offer | None: ...

    async def get_active(self, db: AsyncSession, address: str) -> Offer | None: ...

    async def save(self, db: AsyncSession, offer: Offer) -> Offer: ...

    async def update(self, db: AsyncSession, offer: Offer) -> Offer: ...

    async def list_by_reward_center(
        self, db: AsyncSession, reward_center: str, state: str | None, limit: int
    ) -> list[Offer]: ...
