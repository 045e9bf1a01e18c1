"""RewardCenterProgram — the program's instruction set.

Each instruction authenticates `wallet` (the transaction signer), declares its
writable accounts and runs through the TransactionExecutor. The services
underneath share one ledger and one auction house adapter.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_auction_house.domain.adapter import AuctionHouseAdapterProtocol
from src.rc_auction_house.infrastructure.simulated import SimulatedAuctionHouse
from src.rc_listing.application.schemas import (
    CloseListingAccounts,
    CreateListingAccounts,
    CreateListingParams,
    UpdateListingAccounts,
    UpdateListingParams,
)
from src.rc_listing.application.service import ListingService
from src.rc_listing.domain.models import Listing
from src.rc_offer.application.schemas import (
    CloseOfferAccounts,
    CreateOfferAccounts,
    CreateOfferParams,
)
from src.rc_offer.application.service import OfferService
from src.rc_offer.domain.models import Offer
from src.rc_reward_center.application.schemas import (
    CreateRewardCenterAccounts,
    CreateRewardCenterParams,
    EditRewardCenterAccounts,
    EditRewardCenterParams,
    WithdrawRewardCenterFundsAccounts,
    WithdrawRewardCenterFundsParams,
)
from src.rc_reward_center.application.service import RewardCenterService
from src.rc_reward_center.domain.models import RewardCenter
from src.rc_runtime.executor import TransactionExecutor
from src.rc_settlement.application.schemas import (
    AcceptOfferAccounts,
    BuyListingAccounts,
    SettlementResult,
)
from src.rc_settlement.application.service import SettlementService
from src.rc_token.domain.repository import TokenLedgerProtocol
from src.rc_token.infrastructure.ledger import TokenLedger


class RewardCenterProgram:
    def __init__(
        self,
        executor: TransactionExecutor | None = None,
        ledger: TokenLedgerProtocol | None = None,
        adapter: AuctionHouseAdapterProtocol | None = None,
        reserve_floor: int | None = None,
    ) -> None:
        self.executor = executor or TransactionExecutor()
        self.ledger: TokenLedgerProtocol = ledger or TokenLedger()
        self.adapter: AuctionHouseAdapterProtocol = adapter or SimulatedAuctionHouse(self.ledger)
        self.reward_centers = RewardCenterService(
            ledger=self.ledger, adapter=self.adapter, reserve_floor=reserve_floor
        )
        self.listings = ListingService(reward_centers=self.reward_centers, adapter=self.adapter)
        self.offers = OfferService(reward_centers=self.reward_centers, adapter=self.adapter)
        self.settlement = SettlementService(
            reward_centers=self.reward_centers,
            listings=self.listings,
            offers=self.offers,
            ledger=self.ledger,
            adapter=self.adapter,
        )

    # --- reward center ---

    async def create_reward_center(
        self,
        wallet: str,
        accounts: CreateRewardCenterAccounts,
        params: CreateRewardCenterParams,
    ) -> RewardCenter:
        async def body(db: AsyncSession) -> RewardCenter:
            return await self.reward_centers.create_reward_center(db, wallet, accounts, params)

        return await self.executor.run(
            "create_reward_center",
            [wallet, accounts.auction_house, accounts.reward_center, accounts.treasury],
            body,
        )

    async def edit_reward_center(
        self,
        wallet: str,
        accounts: EditRewardCenterAccounts,
        params: EditRewardCenterParams,
    ) -> RewardCenter:
        async def body(db: AsyncSession) -> RewardCenter:
            return await self.reward_centers.edit_reward_center(db, wallet, accounts, params)

        return await self.executor.run(
            "edit_reward_center", [wallet, accounts.reward_center], body
        )

    async def withdraw_reward_center_funds(
        self,
        wallet: str,
        accounts: WithdrawRewardCenterFundsAccounts,
        params: WithdrawRewardCenterFundsParams,
    ) -> int:
        async def body(db: AsyncSession) -> int:
            return await self.reward_centers.withdraw_reward_center_funds(
                db, wallet, accounts, params
            )

        return await self.executor.run(
            "withdraw_reward_center_funds",
            [wallet, accounts.reward_center, accounts.treasury, accounts.destination],
            body,
        )

    # --- listings ---

    async def create_listing(
        self, wallet: str, accounts: CreateListingAccounts, params: CreateListingParams
    ) -> Listing:
        async def body(db: AsyncSession) -> Listing:
            return await self.listings.create_listing(db, wallet, accounts, params)

        return await self.executor.run(
            "create_listing", [wallet, accounts.listing, accounts.token_account], body
        )

    async def update_listing(
        self, wallet: str, accounts: UpdateListingAccounts, params: UpdateListingParams
    ) -> Listing:
        async def body(db: AsyncSession) -> Listing:
            return await self.listings.update_listing(db, wallet, accounts, params)

        return await self.executor.run("update_listing", [wallet, accounts.listing], body)

    async def close_listing(self, wallet: str, accounts: CloseListingAccounts) -> Listing:
        async def body(db: AsyncSession) -> Listing:
            return await self.listings.close_listing(db, wallet, accounts)

        return await self.executor.run("close_listing", [wallet, accounts.listing], body)

    # --- offers ---

    async def create_offer(
        self, wallet: str, accounts: CreateOfferAccounts, params: CreateOfferParams
    ) -> Offer:
        async def body(db: AsyncSession) -> Offer:
            return await self.offers.create_offer(db, wallet, accounts, params)

        return await self.executor.run("create_offer", [wallet, accounts.offer], body)

    async def close_offer(self, wallet: str, accounts: CloseOfferAccounts) -> Offer:
        async def body(db: AsyncSession) -> Offer:
            return await self.offers.close_offer(db, wallet, accounts)

        return await self.executor.run("close_offer", [wallet, accounts.offer], body)

    # --- settlement ---

    async def buy_listing(self, wallet: str, accounts: BuyListingAccounts) -> SettlementResult:
        async def body(db: AsyncSession) -> SettlementResult:
            return await self.settlement.buy_listing(db, wallet, accounts)

        return await self.executor.run(
            "buy_listing",
            [
                wallet,
                accounts.reward_center,
                accounts.listing,
                accounts.treasury,
                accounts.buyer_reward_token_account,
                accounts.seller_reward_token_account,
            ],
            body,
        )

    async def accept_offer(self, wallet: str, accounts: AcceptOfferAccounts) -> SettlementResult:
        async def body(db: AsyncSession) -> SettlementResult:
            return await self.settlement.accept_offer(db, wallet, accounts)

        return await self.executor.run(
            "accept_offer",
            [
                wallet,
                accounts.reward_center,
                accounts.listing,
                accounts.offer,
                accounts.treasury,
                accounts.buyer_reward_token_account,
                accounts.seller_reward_token_account,
            ],
            body,
        )
