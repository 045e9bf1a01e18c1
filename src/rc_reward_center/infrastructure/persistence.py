"""RewardCenterRepository — concrete implementation of RewardCenterRepositoryProtocol.

Transaction ownership: the CALLER (TransactionExecutor) starts and commits
the transaction.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_common.datetime_utils import as_utc, utc_now
from src.rc_common.enums import PayoutOperation
from src.rc_common.errors import RecordNotFoundError
from src.rc_reward_center.domain.models import RewardCenter
from src.rc_reward_center.infrastructure.db_models import RewardCenterORM
from src.rc_rewards.domain.rules import RewardRules


def _orm_to_reward_center(row: RewardCenterORM) -> RewardCenter:
    return RewardCenter(
        address=row.address,
        auction_house=row.auction_house,
        token_mint=row.token_mint,
        treasury=row.treasury,
        reward_rules=RewardRules(
            mathematical_operand=PayoutOperation(row.mathematical_operand),
            payout_numeral=row.payout_numeral,
            seller_reward_payout_basis_points=row.seller_reward_payout_basis_points,
        ),
        bump=row.bump,
        discriminator=row.discriminator,
        schema_version=row.schema_version,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


class RewardCenterRepository:
    async def get_by_address(self, db: AsyncSession, address: str) -> RewardCenter | None:
        row = await db.get(RewardCenterORM, address)
        return _orm_to_reward_center(row) if row else None

    async def save(self, db: AsyncSession, reward_center: RewardCenter) -> RewardCenter:
        now = utc_now()
        rules = reward_center.reward_rules
        row = RewardCenterORM(
            address=reward_center.address,
            discriminator=reward_center.discriminator,
            schema_version=reward_center.schema_version,
            auction_house=reward_center.auction_house,
            token_mint=reward_center.token_mint,
            treasury=reward_center.treasury,
            mathematical_operand=rules.mathematical_operand.value,
            payout_numeral=rules.payout_numeral,
            seller_reward_payout_basis_points=rules.seller_reward_payout_basis_points,
            bump=reward_center.bump,
            created_at=now,
            updated_at=now,
        )
        db.add(row)
        await db.flush()
        return _orm_to_reward_center(row)

    async def update_rules(
        self, db: AsyncSession, address: str, rules: RewardRules
    ) -> RewardCenter:
        row = await db.get(RewardCenterORM, address)
        if row is None:
            raise RecordNotFoundError("RewardCenter", address)
        row.mathematical_operand = rules.mathematical_operand.value
        row.payout_numeral = rules.payout_numeral
        row.seller_reward_payout_basis_points = rules.seller_reward_payout_basis_points
        row.updated_at = utc_now()
        await db.flush()
        return _orm_to_reward_center(row)
