"""Auction house capability interface.

The reward center orchestrates the marketplace's escrow primitives but never
implements them. Every mutating capability requires the reward center's
ProgramAuthority, which must match the auctioneer delegated on the auction
house. Failures surface as AdapterError and are propagated unchanged.

Contract: execute_sale is atomic; it fails without any partial transfer if
either escrow is inactive or the two sides do not match.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_auction_house.domain.models import AuctionHouse, EscrowHandle, SettlementReceipt
from src.rc_common.pda import ProgramAuthority


class AuctionHouseAdapterProtocol(Protocol):
    async def get_auction_house(self, db: AsyncSession, address: str) -> AuctionHouse: ...

    async def delegate_auctioneer(
        self, db: AsyncSession, auction_house: str, authority: str, auctioneer: str
    ) -> AuctionHouse: ...

    async def sell(
        self,
        db: AsyncSession,
        auction_house: str,
        seller: str,
        token_account: str,
        token_mint: str,
        price: int,
        token_size: int,
        authority: ProgramAuthority,
    ) -> EscrowHandle: ...

    async def cancel_sale(
        self, db: AsyncSession, handle: EscrowHandle, authority: ProgramAuthority
    ) -> None: ...

    async def bid(
        self,
        db: AsyncSession,
        auction_house: str,
        buyer: str,
        token_account: str,
        token_mint: str,
        price: int,
        token_size: int,
        authority: ProgramAuthority,
        public: bool = False,
    ) -> EscrowHandle: ...

    async def cancel_bid(
        self, db: AsyncSession, handle: EscrowHandle, authority: ProgramAuthority
    ) -> None: ...

    async def get_escrow(self, db: AsyncSession, trade_state: str) -> EscrowHandle | None: ...

    async def execute_sale(
        self,
        db: AsyncSession,
        sell_handle: EscrowHandle,
        bid_handle: EscrowHandle,
        authority: ProgramAuthority,
    ) -> SettlementReceipt: ...

    async def withdraw_from_treasury(
        self, db: AsyncSession, auction_house: str, authority: str, amount: int
    ) -> int: ...
