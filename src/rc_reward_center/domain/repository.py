"""Repository Protocol — dependency inversion for testability."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_reward_center.domain.models import RewardCenter
from src.rc_rewards.domain.rules import RewardRules


class RewardCenterRepositoryProtocol(Protocol):
    async def get_by_address(self, db: AsyncSession, address: str) -> RewardCenter | None: ...

    async def save(self, db: AsyncSession, reward_center: RewardCenter) -> RewardCenter: ...

    async def update_rules(
        self, db: AsyncSession, address: str, rules: RewardRules
    ) -> RewardCenter: ...
