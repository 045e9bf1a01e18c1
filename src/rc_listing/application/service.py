"""ListingService — create, update and close listings.

The escrowed price held by the auction house and Listing.price are kept equal
at all times: a price change re-issues the seller escrow.
"""

import logging
from dataclasses import replace

from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_auction_house.domain.adapter import AuctionHouseAdapterProtocol
from src.rc_auction_house.domain.models import EscrowHandle
from src.rc_auction_house.infrastructure.simulated import SimulatedAuctionHouse
from src.rc_common.datetime_utils import utc_now
from src.rc_common.enums import ListingState
from src.rc_common.errors import (
    DuplicateActiveListingError,
    InternalError,
    InvalidPriceError,
    InvalidTokenSizeError,
    ListingNotActiveError,
    RecordNotFoundError,
)
from src.rc_common.id_generator import generate_id
from src.rc_common.pda import assert_address, find_listing_address, find_metadata_address
from src.rc_common.signers import require_signer
from src.rc_listing.application.schemas import (
    CloseListingAccounts,
    CreateListingAccounts,
    CreateListingParams,
    ListingListResponse,
    ListingResponse,
    UpdateListingAccounts,
    UpdateListingParams,
)
from src.rc_listing.domain.models import Listing
from src.rc_listing.domain.repository import ListingRepositoryProtocol
from src.rc_listing.infrastructure.persistence import ListingRepository
from src.rc_reward_center.application.service import RewardCenterService
from src.rc_reward_center.domain.models import RewardCenter

logger = logging.getLogger(__name__)


class ListingService:
    def __init__(
        self,
        repo: ListingRepositoryProtocol | None = None,
        reward_centers: RewardCenterService | None = None,
        adapter: AuctionHouseAdapterProtocol | None = None,
    ) -> None:
        self._repo: ListingRepositoryProtocol = repo or ListingRepository()
        self._reward_centers = reward_centers or RewardCenterService()
        self._adapter: AuctionHouseAdapterProtocol = adapter or SimulatedAuctionHouse()

    async def load(self, db: AsyncSession, address: str, reward_center: RewardCenter) -> Listing:
        """Fetch the current row at `address` and verify it belongs to `reward_center`."""
        listing = await self._repo.get_latest(db, address)
        if listing is None:
            raise RecordNotFoundError("Listing", address)
        assert_address("listing.reward_center", reward_center.address, listing.reward_center)
        expected, _ = find_listing_address(listing.seller, listing.metadata, reward_center.address)
        assert_address("listing", expected, address)
        return listing

    async def escrow_of(self, db: AsyncSession, listing: Listing) -> EscrowHandle:
        handle = await self._adapter.get_escrow(db, listing.trade_state)
        if handle is None or handle.price != listing.price:
            raise InternalError(
                f"Escrow {listing.trade_state} out of sync with listing {listing.address}"
            )
        return handle

    async def create_listing(
        self,
        db: AsyncSession,
        wallet: str,
        accounts: CreateListingAccounts,
        params: CreateListingParams,
    ) -> Listing:
        reward_center = await self._reward_centers.load(db, accounts.reward_center)
        if params.price == 0:
            raise InvalidPriceError(params.price)
        if params.token_size == 0:
            raise InvalidTokenSizeError(params.token_size)
        assert_address("metadata", find_metadata_address(accounts.token_mint), accounts.metadata)
        address, bump = find_listing_address(wallet, accounts.metadata, reward_center.address)
        assert_address("listing", address, accounts.listing)

        if await self._repo.get_active(db, address) is not None:
            raise DuplicateActiveListingError(address)

        handle = await self._adapter.sell(
            db,
            reward_center.auction_house,
            wallet,
            accounts.token_account,
            accounts.token_mint,
            params.price,
            params.token_size,
            reward_center.authority,
        )
        listing = await self._repo.save(
            db,
            Listing(
                id=generate_id(),
                address=address,
                reward_center=reward_center.address,
                seller=wallet,
                metadata=accounts.metadata,
                token_mint=accounts.token_mint,
                token_account=accounts.token_account,
                trade_state=handle.trade_state,
                price=params.price,
                token_size=params.token_size,
                bump=bump,
            ),
        )
        logger.info("Listing %s created by %s at price %d", address, wallet, params.price)
        return listing

    async def update_listing(
        self,
        db: AsyncSession,
        wallet: str,
        accounts: UpdateListingAccounts,
        params: UpdateListingParams,
    ) -> Listing:
        reward_center = await self._reward_centers.load(db, accounts.reward_center)
        listing = await self._load_active_for_seller(db, wallet, accounts.listing, reward_center)
        if params.new_price == 0:
            raise InvalidPriceError(params.new_price)
        if params.new_price == listing.price:
            return listing

        old_handle = await self.escrow_of(db, listing)
        await self._adapter.cancel_sale(db, old_handle, reward_center.authority)
        new_handle = await self._adapter.sell(
            db,
            reward_center.auction_house,
            listing.seller,
            listing.token_account,
            listing.token_mint,
            params.new_price,
            listing.token_size,
            reward_center.authority,
        )
        updated = await self._repo.update(
            db, replace(listing, price=params.new_price, trade_state=new_handle.trade_state)
        )
        logger.info(
            "Listing %s repriced %d -> %d", listing.address, listing.price, params.new_price
        )
        return updated

    async def close_listing(
        self, db: AsyncSession, wallet: str, accounts: CloseListingAccounts
    ) -> Listing:
        reward_center = await self._reward_centers.load(db, accounts.reward_center)
        listing = await self._load_active_for_seller(db, wallet, accounts.listing, reward_center)

        handle = await self.escrow_of(db, listing)
        await self._adapter.cancel_sale(db, handle, reward_center.authority)
        closed = await self._repo.update(
            db,
            replace(listing, state=ListingState.CANCELED.value, canceled_at=utc_now()),
        )
        logger.info("Listing %s canceled by %s", listing.address, wallet)
        return closed

    async def _load_active_for_seller(
        self, db: AsyncSession, wallet: str, address: str, reward_center: RewardCenter
    ) -> Listing:
        listing = await self.load(db, address, reward_center)
        require_signer("listing seller", listing.seller, wallet)
        if not listing.is_active:
            raise ListingNotActiveError(listing.address, listing.state)
        return listing

    async def mark_sold(self, db: AsyncSession, listing: Listing) -> Listing:
        return await self._repo.update(
            db, replace(listing, state=ListingState.SOLD.value, purchased_at=utc_now())
        )

    # --- queries ---

    async def get_listing(self, db: AsyncSession, address: str) -> ListingResponse:
        listing = await self._repo.get_latest(db, address)
        if listing is None:
            raise RecordNotFoundError("Listing", address)
        return ListingResponse.from_domain(listing)

    async def list_listings(
        self, db: AsyncSession, reward_center: str, state: str | None, limit: int
    ) -> ListingListResponse:
        listings = await self._repo.list_by_reward_center(db, reward_center, state, limit)
        return ListingListResponse(items=[ListingResponse.from_domain(x) for x in listings])
