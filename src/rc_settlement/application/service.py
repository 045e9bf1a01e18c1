"""SettlementService — buy_listing / accept_offer.

Both entry points converge on `_settle`:
  1. execute the sale through the auction house (NFT and payment move)
  2. listing -> SOLD, offer (if any) -> ACCEPTED
  3. compute rewards from the price actually paid
  4. pay rewards from the treasury, degraded proportionally when short

Everything runs in the caller's transaction. A failure at or before step 1
leaves no trace; steps 3-4 cannot fail for lack of treasury funds.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_auction_house.domain.adapter import AuctionHouseAdapterProtocol
from src.rc_auction_house.domain.models import EscrowHandle
from src.rc_auction_house.infrastructure.simulated import SimulatedAuctionHouse
from src.rc_common.errors import (
    ListingNotActiveError,
    OfferNotActiveError,
    PriceMismatchError,
    RecordMismatchError,
)
from src.rc_common.pda import assert_address, find_associated_token_address
from src.rc_common.signers import require_signer
from src.rc_listing.application.schemas import ListingResponse
from src.rc_listing.application.service import ListingService
from src.rc_listing.domain.models import Listing
from src.rc_offer.application.schemas import OfferResponse
from src.rc_offer.application.service import OfferService
from src.rc_offer.domain.models import Offer
from src.rc_reward_center.application.service import RewardCenterService
from src.rc_reward_center.domain.models import RewardCenter
from src.rc_rewards.domain.rules import compute_reward
from src.rc_settlement.application.schemas import (
    AcceptOfferAccounts,
    BuyListingAccounts,
    SettlementResult,
)
from src.rc_settlement.domain.disbursement import plan_disbursement
from src.rc_token.domain.repository import TokenLedgerProtocol
from src.rc_token.infrastructure.ledger import TokenLedger

logger = logging.getLogger(__name__)


class SettlementService:
    def __init__(
        self,
        reward_centers: RewardCenterService | None = None,
        listings: ListingService | None = None,
        offers: OfferService | None = None,
        ledger: TokenLedgerProtocol | None = None,
        adapter: AuctionHouseAdapterProtocol | None = None,
    ) -> None:
        self._ledger: TokenLedgerProtocol = ledger or TokenLedger()
        self._adapter: AuctionHouseAdapterProtocol = adapter or SimulatedAuctionHouse(
            self._ledger
        )
        self._reward_centers = reward_centers or RewardCenterService(
            ledger=self._ledger, adapter=self._adapter
        )
        self._listings = listings or ListingService(
            reward_centers=self._reward_centers, adapter=self._adapter
        )
        self._offers = offers or OfferService(
            reward_centers=self._reward_centers, adapter=self._adapter
        )

    async def buy_listing(
        self, db: AsyncSession, wallet: str, accounts: BuyListingAccounts
    ) -> SettlementResult:
        """Buy a listing outright at its current price."""
        reward_center = await self._reward_centers.load(db, accounts.reward_center)
        assert_address("treasury", reward_center.treasury, accounts.treasury)
        listing = await self._listings.load(db, accounts.listing, reward_center)
        if not listing.is_active:
            raise ListingNotActiveError(listing.address, listing.state)
        self._check_reward_accounts(reward_center, wallet, listing.seller, accounts)

        sell_handle = await self._listings.escrow_of(db, listing)
        bid_handle = await self._adapter.bid(
            db,
            reward_center.auction_house,
            wallet,
            listing.token_account,
            listing.token_mint,
            listing.price,
            listing.token_size,
            reward_center.authority,
            public=True,
        )
        return await self._settle(db, reward_center, listing, None, wallet, sell_handle, bid_handle)

    async def accept_offer(
        self, db: AsyncSession, wallet: str, accounts: AcceptOfferAccounts
    ) -> SettlementResult:
        """Seller accepts a standing offer against their active listing."""
        reward_center = await self._reward_centers.load(db, accounts.reward_center)
        assert_address("treasury", reward_center.treasury, accounts.treasury)
        listing = await self._listings.load(db, accounts.listing, reward_center)
        offer = await self._offers.load(db, accounts.offer, reward_center)
        require_signer("listing seller", listing.seller, wallet)
        if not listing.is_active:
            raise ListingNotActiveError(listing.address, listing.state)
        if not offer.is_active:
            raise OfferNotActiveError(offer.address, offer.state)

        if listing.metadata != offer.metadata:
            raise RecordMismatchError(f"metadata {listing.metadata} != {offer.metadata}")
        if listing.token_account != offer.token_account:
            raise RecordMismatchError(
                f"token account {listing.token_account} != {offer.token_account}"
            )
        if listing.token_size != offer.token_size:
            raise RecordMismatchError(f"token size {listing.token_size} != {offer.token_size}")
        if listing.price != offer.price:
            raise PriceMismatchError(listing.price, offer.price)
        self._check_reward_accounts(reward_center, offer.buyer, listing.seller, accounts)

        sell_handle = await self._listings.escrow_of(db, listing)
        bid_handle = await self._offers.escrow_of(db, offer)
        return await self._settle(
            db, reward_center, listing, offer, offer.buyer, sell_handle, bid_handle
        )

    async def _settle(
        self,
        db: AsyncSession,
        reward_center: RewardCenter,
        listing: Listing,
        offer: Offer | None,
        buyer: str,
        sell_handle: EscrowHandle,
        bid_handle: EscrowHandle,
    ) -> SettlementResult:
        receipt = await self._adapter.execute_sale(
            db, sell_handle, bid_handle, reward_center.authority
        )
        sold = await self._listings.mark_sold(db, listing)
        accepted = await self._offers.mark_accepted(db, offer) if offer is not None else None

        buyer_reward, seller_reward = compute_reward(receipt.price_paid, reward_center.reward_rules)
        available = await self._reward_centers.disbursable_balance(db, reward_center)
        plan = plan_disbursement(buyer_reward, seller_reward, available)
        if plan.total < buyer_reward + seller_reward:
            logger.warning(
                "Treasury %s short: owed %d+%d, paying %d+%d",
                reward_center.treasury,
                buyer_reward,
                seller_reward,
                plan.buyer_amount,
                plan.seller_amount,
            )

        for owner, amount in ((buyer, plan.buyer_amount), (listing.seller, plan.seller_amount)):
            if amount == 0:
                continue
            destination = await self._ledger.get_or_create_associated_account(
                db, owner, reward_center.token_mint
            )
            await self._ledger.transfer(
                db,
                reward_center.treasury,
                destination.address,
                amount,
                reward_center.authority.address,
            )

        logger.info(
            "Settled listing %s: price=%d buyer=%s rewards buyer=%d seller=%d",
            listing.address,
            receipt.price_paid,
            buyer,
            plan.buyer_amount,
            plan.seller_amount,
        )
        return SettlementResult(
            listing=ListingResponse.from_domain(sold),
            offer=OfferResponse.from_domain(accepted) if accepted is not None else None,
            price_paid=receipt.price_paid,
            fee_paid=receipt.fee_paid,
            seller_proceeds=receipt.seller_proceeds,
            buyer_token_account=receipt.buyer_token_account,
            buyer_reward_computed=buyer_reward,
            seller_reward_computed=seller_reward,
            buyer_reward_paid=plan.buyer_amount,
            seller_reward_paid=plan.seller_amount,
        )

    @staticmethod
    def _check_reward_accounts(
        reward_center: RewardCenter,
        buyer: str,
        seller: str,
        accounts: BuyListingAccounts | AcceptOfferAccounts,
    ) -> None:
        assert_address(
            "buyer_reward_token_account",
            find_associated_token_address(buyer, reward_center.token_mint),
            accounts.buyer_reward_token_account,
        )
        assert_address(
            "seller_reward_token_account",
            find_associated_token_address(seller, reward_center.token_mint),
            accounts.seller_reward_token_account,
        )
