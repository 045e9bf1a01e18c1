"""OfferRepository — concrete implementation of OfferRepositoryProtocol.

Same row discipline as listings: ACCEPTED and CANCELED rows are final.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_common.datetime_utils import as_utc, utc_now
from src.rc_common.enums import OfferState
from src.rc_common.errors import InternalError
from src.rc_common.id_generator import generate_id
from src.rc_offer.domain.models import Offer
from src.rc_offer.infrastructure.db_models import OfferORM


def _orm_to_offer(row: OfferORM) -> Offer:
    return Offer(
        id=row.id,
        address=row.address,
        reward_center=row.reward_center,
        buyer=row.buyer,
        metadata=row.metadata_address,
        token_mint=row.token_mint,
        token_account=row.token_account,
        trade_state=row.trade_state,
        price=row.price,
        token_size=row.token_size,
        bump=row.bump,
        state=row.state,
        discriminator=row.discriminator,
        schema_version=row.schema_version,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
        canceled_at=as_utc(row.canceled_at),
        accepted_at=as_utc(row.accepted_at),
    )


class OfferRepository:
    async def get_latest(self, db: AsyncSession, address: str) -> Offer | None:
        result = await db.execute(
            select(OfferORM)
            .where(OfferORM.address == address)
            .order_by(OfferORM.created_at.desc(), OfferORM.id.desc())
            .limit(1)
        )
        row = result.scalar_one_or_none()
        return _orm_to_offer(row) if row else None

    async def get_active(self, db: AsyncSession, address: str) -> Offer | None:
        result = await db.execute(
            select(OfferORM).where(
                OfferORM.address == address,
                OfferORM.state == OfferState.ACTIVE.value,
            )
        )
        row = result.scalar_one_or_none()
        return _orm_to_offer(row) if row else None

    async def save(self, db: AsyncSession, offer: Offer) -> Offer:
        now = utc_now()
        row = OfferORM(
            id=offer.id or generate_id(),
            address=offer.address,
            discriminator=offer.discriminator,
            schema_version=offer.schema_version,
            reward_center=offer.reward_center,
            buyer=offer.buyer,
            metadata_address=offer.metadata,
            token_mint=offer.token_mint,
            token_account=offer.token_account,
            trade_state=offer.trade_state,
            price=offer.price,
            token_size=offer.token_size,
            bump=offer.bump,
            state=offer.state,
            created_at=now,
            updated_at=now,
        )
        db.add(row)
        await db.flush()
        return _orm_to_offer(row)

    async def update(self, db: AsyncSession, offer: Offer) -> Offer:
        row = await db.get(OfferORM, offer.id)
        if row is None:
            raise InternalError(f"Offer row {offer.id} vanished mid-transaction")
        if row.state != OfferState.ACTIVE.value:
            raise InternalError(f"Refusing to rewrite terminal offer row {offer.id}")
        row.state = offer.state
        row.canceled_at = offer.canceled_at
        row.accepted_at = offer.accepted_at
        row.updated_at = utc_now()
        await db.flush()
        return _orm_to_offer(row)

    async def list_by_reward_center(
        self, db: AsyncSession, reward_center: str, state: str | None, limit: int
    ) -> list[Offer]:
        stmt = select(OfferORM).where(OfferORM.reward_center == reward_center)
        if state is not None:
            stmt = stmt.where(OfferORM.state == state)
        stmt = stmt.order_by(OfferORM.created_at.desc(), OfferORM.id.desc()).limit(limit)
        result = await db.execute(stmt)
        return [_orm_to_offer(row) for row in result.scalars().all()]
