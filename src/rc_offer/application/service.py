"""OfferService — create and close offers.

A price change on an offer is close + create; there is no in-place amendment.
"""

import logging
from dataclasses import replace

from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_auction_house.domain.adapter import AuctionHouseAdapterProtocol
from src.rc_auction_house.domain.models import EscrowHandle
from src.rc_auction_house.infrastructure.simulated import SimulatedAuctionHouse
from src.rc_common.datetime_utils import utc_now
from src.rc_common.enums import OfferState
from src.rc_common.errors import (
    DuplicateActiveOfferError,
    InternalError,
    InvalidPriceError,
    InvalidTokenSizeError,
    OfferNotActiveError,
    RecordNotFoundError,
)
from src.rc_common.id_generator import generate_id
from src.rc_common.pda import assert_address, find_metadata_address, find_offer_address
from src.rc_common.signers import require_signer
from src.rc_offer.application.schemas import (
    CloseOfferAccounts,
    CreateOfferAccounts,
    CreateOfferParams,
    OfferListResponse,
    OfferResponse,
)
from src.rc_offer.domain.models import Offer
from src.rc_offer.domain.repository import OfferRepositoryProtocol
from src.rc_offer.infrastructure.persistence import OfferRepository
from src.rc_reward_center.application.service import RewardCenterService
from src.rc_reward_center.domain.models import RewardCenter

logger = logging.getLogger(__name__)


class OfferService:
    def __init__(
        self,
        repo: OfferRepositoryProtocol | None = None,
        reward_centers: RewardCenterService | None = None,
        adapter: AuctionHouseAdapterProtocol | None = None,
    ) -> None:
        self._repo: OfferRepositoryProtocol = repo or OfferRepository()
        self._reward_centers = reward_centers or RewardCenterService()
        self._adapter: AuctionHouseAdapterProtocol = adapter or SimulatedAuctionHouse()

    async def load(self, db: AsyncSession, address: str, reward_center: RewardCenter) -> Offer:
        offer = await self._repo.get_latest(db, address)
        if offer is None:
            raise RecordNotFoundError("Offer", address)
        assert_address("offer.reward_center", reward_center.address, offer.reward_center)
        expected, _ = find_offer_address(offer.buyer, offer.metadata, reward_center.address)
        assert_address("offer", expected, address)
        return offer

    async def escrow_of(self, db: AsyncSession, offer: Offer) -> EscrowHandle:
        handle = await self._adapter.get_escrow(db, offer.trade_state)
        if handle is None or handle.price != offer.price:
            raise InternalError(
                f"Escrow {offer.trade_state} out of sync with offer {offer.address}"
            )
        return handle

    async def create_offer(
        self,
        db: AsyncSession,
        wallet: str,
        accounts: CreateOfferAccounts,
        params: CreateOfferParams,
    ) -> Offer:
        reward_center = await self._reward_centers.load(db, accounts.reward_center)
        if params.price == 0:
            raise InvalidPriceError(params.price)
        if params.token_size == 0:
            raise InvalidTokenSizeError(params.token_size)
        assert_address("metadata", find_metadata_address(accounts.token_mint), accounts.metadata)
        address, bump = find_offer_address(wallet, accounts.metadata, reward_center.address)
        assert_address("offer", address, accounts.offer)

        if await self._repo.get_active(db, address) is not None:
            raise DuplicateActiveOfferError(address)

        handle = await self._adapter.bid(
            db,
            reward_center.auction_house,
            wallet,
            accounts.token_account,
            accounts.token_mint,
            params.price,
            params.token_size,
            reward_center.authority,
        )
        offer = await self._repo.save(
            db,
            Offer(
                id=generate_id(),
                address=address,
                reward_center=reward_center.address,
                buyer=wallet,
                metadata=accounts.metadata,
                token_mint=accounts.token_mint,
                token_account=accounts.token_account,
                trade_state=handle.trade_state,
                price=params.price,
                token_size=params.token_size,
                bump=bump,
            ),
        )
        logger.info("Offer %s created by %s at price %d", address, wallet, params.price)
        return offer

    async def close_offer(
        self, db: AsyncSession, wallet: str, accounts: CloseOfferAccounts
    ) -> Offer:
        reward_center = await self._reward_centers.load(db, accounts.reward_center)
        offer = await self.load(db, accounts.offer, reward_center)
        require_signer("offer buyer", offer.buyer, wallet)
        if not offer.is_active:
            raise OfferNotActiveError(offer.address, offer.state)

        handle = await self.escrow_of(db, offer)
        await self._adapter.cancel_bid(db, handle, reward_center.authority)
        closed = await self._repo.update(
            db, replace(offer, state=OfferState.CANCELED.value, canceled_at=utc_now())
        )
        logger.info("Offer %s canceled by %s, %d refunded", offer.address, wallet, offer.price)
        return closed

    async def mark_accepted(self, db: AsyncSession, offer: Offer) -> Offer:
        return await self._repo.update(
            db, replace(offer, state=OfferState.ACCEPTED.value, accepted_at=utc_now())
        )

    # --- queries ---

    async def get_offer(self, db: AsyncSession, address: str) -> OfferResponse:
        offer = await self._repo.get_latest(db, address)
        if offer is None:
            raise RecordNotFoundError("Offer", address)
        return OfferResponse.from_domain(offer)

    async def list_offers(
        self, db: AsyncSession, reward_center: str, state: str | None, limit: int
    ) -> OfferListResponse:
        offers = await self._repo.list_by_reward_center(db, reward_center, state, limit)
        return OfferListResponse(items=[OfferResponse.from_domain(x) for x in offers])
