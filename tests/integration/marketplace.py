"""Marketplace test harness.

`build_marketplace` creates a complete marketplace in a fresh database and
returns a Marketplace with balance readers and account builders for every
instruction.
"""

from dataclasses import dataclass

from solders.pubkey import Pubkey
from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_auction_house.infrastructure.simulated import SimulatedAuctionHouse
from src.rc_common.enums import PayoutOperation
from src.rc_common.pda import (
    NATIVE_MINT,
    find_associated_token_address,
    find_auction_house_address,
    find_listing_address,
    find_metadata_address,
    find_offer_address,
    find_reward_center_address,
)
from src.rc_listing.application.schemas import (
    CloseListingAccounts,
    CreateListingAccounts,
    UpdateListingAccounts,
)
from src.rc_offer.application.schemas import CloseOfferAccounts, CreateOfferAccounts
from src.rc_reward_center.application.schemas import (
    CreateRewardCenterAccounts,
    CreateRewardCenterParams,
    RewardRulesSchema,
)
from src.rc_runtime.executor import TransactionExecutor
from src.rc_runtime.program import RewardCenterProgram
from src.rc_settlement.application.schemas import AcceptOfferAccounts, BuyListingAccounts
from src.rc_token.infrastructure.ledger import TokenLedger

SELLER_FEE_BPS = 200
TREASURY_FUNDING = 1_000_000
BUYER_FUNDING = 1_000_000


def new_address() -> str:
    return str(Pubkey.new_unique())


@dataclass
class Marketplace:
    program: RewardCenterProgram
    ledger: TokenLedger
    adapter: SimulatedAuctionHouse
    authority: str
    seller: str
    buyer: str
    auction_house: str
    reward_mint: str
    reward_center: str
    treasury: str
    nft_mint: str
    metadata: str
    seller_nft_account: str

    async def read(self, fn):
        return await self.program.executor.read(fn)

    async def balance(self, address: str) -> int:
        return await self.read(lambda db: self.ledger.balance(db, address))

    async def treasury_balance(self) -> int:
        return await self.balance(self.treasury)

    async def payment_balance(self, owner: str) -> int:
        return await self.balance(find_associated_token_address(owner, NATIVE_MINT))

    async def reward_balance(self, owner: str) -> int:
        address = find_associated_token_address(owner, self.reward_mint)
        account = await self.read(lambda db: self.ledger.get_account(db, address))
        return account.amount if account else 0

    async def fund_buyer(self, buyer: str, amount: int = BUYER_FUNDING) -> None:
        async def body(db: AsyncSession) -> None:
            account = await self.ledger.get_or_create_associated_account(db, buyer, NATIVE_MINT)
            await self.ledger.mint_to(db, NATIVE_MINT, account.address, amount, self.authority)

        await self.program.executor.run("fund_buyer", [buyer], body)

    # --- account builders ---

    def listing_address(self, seller: str | None = None) -> str:
        return find_listing_address(seller or self.seller, self.metadata, self.reward_center)[0]

    def offer_address(self, buyer: str | None = None) -> str:
        return find_offer_address(buyer or self.buyer, self.metadata, self.reward_center)[0]

    def create_listing_accounts(self) -> CreateListingAccounts:
        return CreateListingAccounts(
            reward_center=self.reward_center,
            metadata=self.metadata,
            token_mint=self.nft_mint,
            token_account=self.seller_nft_account,
            listing=self.listing_address(),
        )

    def update_listing_accounts(self) -> UpdateListingAccounts:
        return UpdateListingAccounts(
            reward_center=self.reward_center, listing=self.listing_address()
        )

    def close_listing_accounts(self) -> CloseListingAccounts:
        return CloseListingAccounts(
            reward_center=self.reward_center, listing=self.listing_address()
        )

    def create_offer_accounts(self, buyer: str | None = None) -> CreateOfferAccounts:
        return CreateOfferAccounts(
            reward_center=self.reward_center,
            metadata=self.metadata,
            token_mint=self.nft_mint,
            token_account=self.seller_nft_account,
            offer=self.offer_address(buyer),
        )

    def close_offer_accounts(self, buyer: str | None = None) -> CloseOfferAccounts:
        return CloseOfferAccounts(reward_center=self.reward_center, offer=self.offer_address(buyer))

    def buy_listing_accounts(self, buyer: str | None = None) -> BuyListingAccounts:
        buyer = buyer or self.buyer
        return BuyListingAccounts(
            reward_center=self.reward_center,
            listing=self.listing_address(),
            treasury=self.treasury,
            buyer_reward_token_account=find_associated_token_address(buyer, self.reward_mint),
            seller_reward_token_account=find_associated_token_address(
                self.seller, self.reward_mint
            ),
        )

    def accept_offer_accounts(self, buyer: str | None = None) -> AcceptOfferAccounts:
        buyer = buyer or self.buyer
        return AcceptOfferAccounts(
            reward_center=self.reward_center,
            listing=self.listing_address(),
            offer=self.offer_address(buyer),
            treasury=self.treasury,
            buyer_reward_token_account=find_associated_token_address(buyer, self.reward_mint),
            seller_reward_token_account=find_associated_token_address(
                self.seller, self.reward_mint
            ),
        )


async def build_marketplace(
    session_factory,
    rules: RewardRulesSchema | None = None,
    treasury_funding: int = TREASURY_FUNDING,
    reserve_floor: int = 0,
) -> Marketplace:
    ledger = TokenLedger()
    adapter = SimulatedAuctionHouse(ledger)
    program = RewardCenterProgram(
        TransactionExecutor(session_factory),
        ledger=ledger,
        adapter=adapter,
        reserve_floor=reserve_floor,
    )
    authority, seller, buyer = new_address(), new_address(), new_address()
    reward_mint, nft_mint = new_address(), new_address()
    auction_house, _ = find_auction_house_address(authority, NATIVE_MINT)
    reward_center, _ = find_reward_center_address(auction_house)
    treasury = find_associated_token_address(reward_center, reward_mint)

    async def setup(db: AsyncSession) -> str:
        await ledger.create_mint(db, NATIVE_MINT, authority, 9)
        await ledger.create_mint(db, reward_mint, authority, 0)
        await ledger.create_mint(db, nft_mint, authority, 0)
        await adapter.create_auction_house(db, authority, NATIVE_MINT, SELLER_FEE_BPS)
        nft_account = await ledger.get_or_create_associated_account(db, seller, nft_mint)
        await ledger.mint_to(db, nft_mint, nft_account.address, 1, authority)
        return nft_account.address

    seller_nft_account = await program.executor.run("setup", [authority], setup)

    await program.create_reward_center(
        authority,
        CreateRewardCenterAccounts(
            auction_house=auction_house,
            token_mint=reward_mint,
            reward_center=reward_center,
            treasury=treasury,
        ),
        CreateRewardCenterParams(
            reward_rules=rules
            or RewardRulesSchema(
                mathematical_operand=PayoutOperation.DIVIDE,
                payout_numeral=5,
                seller_reward_payout_basis_points=1000,
            )
        ),
    )

    market = Marketplace(
        program=program,
        ledger=ledger,
        adapter=adapter,
        authority=authority,
        seller=seller,
        buyer=buyer,
        auction_house=auction_house,
        reward_mint=reward_mint,
        reward_center=reward_center,
        treasury=treasury,
        nft_mint=nft_mint,
        metadata=find_metadata_address(nft_mint),
        seller_nft_account=seller_nft_account,
    )
    if treasury_funding:
        await program.executor.run(
            "fund_treasury",
            [treasury],
            lambda db: ledger.mint_to(db, reward_mint, treasury, treasury_funding, authority),
        )
    await market.fund_buyer(buyer)
    return market
