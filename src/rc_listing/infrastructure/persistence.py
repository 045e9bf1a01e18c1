"""ListingRepository — concrete implementation of ListingRepositoryProtocol.

Terminal rows (SOLD, CANCELED) are never written again; `update` refuses to
touch them.

Transaction ownership: the CALLER (TransactionExecutor) starts and commits
the transaction.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_common.datetime_utils import as_utc, utc_now
from src.rc_common.enums import ListingState
from src.rc_common.errors import InternalError
from src.rc_common.id_generator import generate_id
from src.rc_listing.domain.models import Listing
from src.rc_listing.infrastructure.db_models import ListingORM


def _orm_to_listing(row: ListingORM) -> Listing:
    return Listing(
        id=row.id,
        address=row.address,
        reward_center=row.reward_center,
        seller=row.seller,
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
        purchased_at=as_utc(row.purchased_at),
    )


class ListingRepository:
    async def get_latest(self, db: AsyncSession, address: str) -> Listing | None:
        result = await db.execute(
            select(ListingORM)
            .where(ListingORM.address == address)
            .order_by(ListingORM.created_at.desc(), ListingORM.id.desc())
            .limit(1)
        )
        row = result.scalar_one_or_none()
        return _orm_to_listing(row) if row else None

    async def get_active(self, db: AsyncSession, address: str) -> Listing | None:
        result = await db.execute(
            select(ListingORM).where(
                ListingORM.address == address,
                ListingORM.state == ListingState.ACTIVE.value,
            )
        )
        row = result.scalar_one_or_none()
        return _orm_to_listing(row) if row else None

    async def save(self, db: AsyncSession, listing: Listing) -> Listing:
        now = utc_now()
        row = ListingORM(
            id=listing.id or generate_id(),
            address=listing.address,
            discriminator=listing.discriminator,
            schema_version=listing.schema_version,
            reward_center=listing.reward_center,
            seller=listing.seller,
            metadata_address=listing.metadata,
            token_mint=listing.token_mint,
            token_account=listing.token_account,
            trade_state=listing.trade_state,
            price=listing.price,
            token_size=listing.token_size,
            bump=listing.bump,
            state=listing.state,
            created_at=now,
            updated_at=now,
        )
        db.add(row)
        await db.flush()
        return _orm_to_listing(row)

    async def update(self, db: AsyncSession, listing: Listing) -> Listing:
        row = await db.get(ListingORM, listing.id)
        if row is None:
            raise InternalError(f"Listing row {listing.id} vanished mid-transaction")
        if row.state != ListingState.ACTIVE.value:
            raise InternalError(f"Refusing to rewrite terminal listing row {listing.id}")
        row.price = listing.price
        row.trade_state = listing.trade_state
        row.state = listing.state
        row.canceled_at = listing.canceled_at
        row.purchased_at = listing.purchased_at
        row.updated_at = utc_now()
        await db.flush()
        return _orm_to_listing(row)

    async def list_by_reward_center(
        self, db: AsyncSession, reward_center: str, state: str | None, limit: int
    ) -> list[Listing]:
        stmt = select(ListingORM).where(ListingORM.reward_center == reward_center)
        if state is not None:
            stmt = stmt.where(ListingORM.state == state)
        stmt = stmt.order_by(ListingORM.created_at.desc(), ListingORM.id.desc()).limit(limit)
        result = await db.execute(stmt)
        return [_orm_to_listing(row) for row in result.scalars().all()]
