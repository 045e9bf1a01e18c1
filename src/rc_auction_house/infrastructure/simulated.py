"""SimulatedAuctionHouse — AuctionHouseAdapterProtocol over the token ledger.

Follows the marketplace's escrow model:
  * sell  — the seller's NFT account is delegated to the program-as-signer
            PDA and a seller trade state is recorded;
  * bid   — the bid price moves from the buyer's payment account into the
            buyer's escrow payment PDA and a buyer trade state is recorded
            (a public bid, as placed by buy_listing, leaves the NFT account
            out of its trade state address);
  * execute_sale — the fee goes to the auction house treasury, the rest to
            the seller, and the NFT to the buyer's associated token account.

All writes go through the caller's session, so a later failure in the same
instruction rolls the escrow back together with the reward center records.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_auction_house.domain.models import AuctionHouse, EscrowHandle, SettlementReceipt
from src.rc_auction_house.infrastructure.db_models import AuctionHouseORM, TradeStateORM
from src.rc_common.enums import TradeSide
from src.rc_common.errors import AdapterError, AppError
from src.rc_common.pda import (
    ProgramAuthority,
    find_associated_token_address,
    find_auction_house_address,
    find_auction_house_treasury_address,
    find_escrow_payment_address,
    find_program_as_signer_address,
    find_trade_state_address,
)
from src.rc_common.u64 import apply_basis_points
from src.rc_token.domain.repository import TokenLedgerProtocol
from src.rc_token.infrastructure.ledger import TokenLedger

logger = logging.getLogger(__name__)


@contextmanager
def _rejections(operation: str) -> Iterator[None]:
    """Surface every failure inside the auction house as AdapterError."""
    try:
        yield
    except AdapterError:
        raise
    except AppError as exc:
        raise AdapterError(f"{operation}: {exc.message}") from exc


def _orm_to_auction_house(row: AuctionHouseORM) -> AuctionHouse:
    return AuctionHouse(
        address=row.address,
        authority=row.authority,
        treasury_mint=row.treasury_mint,
        treasury=row.treasury,
        seller_fee_basis_points=row.seller_fee_basis_points,
        auctioneer=row.auctioneer,
    )


def _orm_to_handle(row: TradeStateORM) -> EscrowHandle:
    return EscrowHandle(
        trade_state=row.address,
        auction_house=row.auction_house,
        side=row.side,
        wallet=row.wallet,
        token_account=row.token_account,
        token_mint=row.token_mint,
        price=row.price,
        token_size=row.token_size,
    )


class SimulatedAuctionHouse:
    def __init__(self, ledger: TokenLedgerProtocol | None = None) -> None:
        self._ledger: TokenLedgerProtocol = ledger or TokenLedger()
        self._program_as_signer = find_program_as_signer_address()

    async def create_auction_house(
        self,
        db: AsyncSession,
        authority: str,
        treasury_mint: str,
        seller_fee_basis_points: int,
    ) -> AuctionHouse:
        address, _ = find_auction_house_address(authority, treasury_mint)
        if await db.get(AuctionHouseORM, address) is not None:
            raise AdapterError(f"auction house already exists: {address}")
        treasury = find_auction_house_treasury_address(address)
        with _rejections("create_auction_house"):
            await self._ledger.create_account(db, treasury, treasury_mint, address)
        row = AuctionHouseORM(
            address=address,
            authority=authority,
            treasury_mint=treasury_mint,
            treasury=treasury,
            seller_fee_basis_points=seller_fee_basis_points,
            auctioneer=None,
        )
        db.add(row)
        await db.flush()
        logger.info("Created auction house %s (authority=%s)", address, authority)
        return _orm_to_auction_house(row)

    async def get_auction_house(self, db: AsyncSession, address: str) -> AuctionHouse:
        return _orm_to_auction_house(await self._load_auction_house(db, address))

    async def find_auction_house(self, db: AsyncSession, address: str) -> AuctionHouse | None:
        row = await db.get(AuctionHouseORM, address)
        return _orm_to_auction_house(row) if row else None

    async def delegate_auctioneer(
        self, db: AsyncSession, auction_house: str, authority: str, auctioneer: str
    ) -> AuctionHouse:
        row = await self._load_auction_house(db, auction_house)
        if row.authority != authority:
            raise AdapterError(f"{authority} is not the authority of {auction_house}")
        row.auctioneer = auctioneer
        await db.flush()
        return _orm_to_auction_house(row)

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
    ) -> EscrowHandle:
        ah = await self._load_auction_house(db, auction_house)
        self._check_auctioneer(ah, authority)
        with _rejections("sell"):
            account = await self._ledger.get_account(db, token_account)
            if account is None or account.owner != seller or account.mint != token_mint:
                raise AdapterError(f"{token_account} is not {seller}'s account for {token_mint}")
            if account.amount < token_size:
                raise AdapterError(f"{token_account} holds {account.amount} < {token_size}")
            await self._ledger.approve(
                db, token_account, self._program_as_signer, token_size, seller
            )
        row = await self._open_trade_state(
            db, ah, TradeSide.SELL, seller, token_account, token_mint, price, token_size
        )
        return _orm_to_handle(row)

    async def cancel_sale(
        self, db: AsyncSession, handle: EscrowHandle, authority: ProgramAuthority
    ) -> None:
        ah = await self._load_auction_house(db, handle.auction_house)
        self._check_auctioneer(ah, authority)
        row = await self._load_active_trade_state(db, handle, TradeSide.SELL)
        with _rejections("cancel_sale"):
            await self._ledger.revoke(db, handle.token_account, handle.wallet)
        row.active = False
        await db.flush()

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
    ) -> EscrowHandle:
        ah = await self._load_auction_house(db, auction_house)
        self._check_auctioneer(ah, authority)
        escrow = find_escrow_payment_address(ah.address, buyer)
        with _rejections("bid"):
            target = await self._ledger.get_account(db, token_account)
            if target is None or target.mint != token_mint:
                raise AdapterError(f"{token_account} does not hold {token_mint}")
            if await self._ledger.get_account(db, escrow) is None:
                await self._ledger.create_account(db, escrow, ah.treasury_mint, ah.address)
            payment = find_associated_token_address(buyer, ah.treasury_mint)
            await self._ledger.transfer(db, payment, escrow, price, buyer)
        row = await self._open_trade_state(
            db, ah, TradeSide.BUY, buyer, token_account, token_mint, price, token_size, public
        )
        return _orm_to_handle(row)

    async def cancel_bid(
        self, db: AsyncSession, handle: EscrowHandle, authority: ProgramAuthority
    ) -> None:
        ah = await self._load_auction_house(db, handle.auction_house)
        self._check_auctioneer(ah, authority)
        row = await self._load_active_trade_state(db, handle, TradeSide.BUY)
        escrow = find_escrow_payment_address(ah.address, handle.wallet)
        payment = find_associated_token_address(handle.wallet, ah.treasury_mint)
        with _rejections("cancel_bid"):
            await self._ledger.transfer(db, escrow, payment, handle.price, ah.address)
        row.active = False
        await db.flush()

    async def get_escrow(self, db: AsyncSession, trade_state: str) -> EscrowHandle | None:
        row = await db.get(TradeStateORM, trade_state)
        if row is None or not row.active:
            return None
        return _orm_to_handle(row)

    async def execute_sale(
        self,
        db: AsyncSession,
        sell_handle: EscrowHandle,
        bid_handle: EscrowHandle,
        authority: ProgramAuthority,
    ) -> SettlementReceipt:
        ah = await self._load_auction_house(db, sell_handle.auction_house)
        self._check_auctioneer(ah, authority)
        sell_row = await self._load_active_trade_state(db, sell_handle, TradeSide.SELL)
        bid_row = await self._load_active_trade_state(db, bid_handle, TradeSide.BUY)

        if bid_row.auction_house != sell_row.auction_house:
            raise AdapterError("trade states belong to different auction houses")
        if (bid_row.token_mint, bid_row.token_account) != (
            sell_row.token_mint,
            sell_row.token_account,
        ):
            raise AdapterError("bid and sale target different tokens")
        if bid_row.token_size != sell_row.token_size:
            raise AdapterError("bid and sale token sizes differ")
        if bid_row.price != sell_row.price:
            raise AdapterError(f"bid price {bid_row.price} != sale price {sell_row.price}")

        price = sell_row.price
        fee = apply_basis_points(price, ah.seller_fee_basis_points)
        proceeds = price - fee
        escrow = find_escrow_payment_address(ah.address, bid_row.wallet)

        with _rejections("execute_sale"):
            if fee:
                await self._ledger.transfer(db, escrow, ah.treasury, fee, ah.address)
            seller_payment = await self._ledger.get_or_create_associated_account(
                db, sell_row.wallet, ah.treasury_mint
            )
            await self._ledger.transfer(db, escrow, seller_payment.address, proceeds, ah.address)
            buyer_nft = await self._ledger.get_or_create_associated_account(
                db, bid_row.wallet, sell_row.token_mint
            )
            await self._ledger.transfer(
                db,
                sell_row.token_account,
                buyer_nft.address,
                sell_row.token_size,
                self._program_as_signer,
            )

        sell_row.active = False
        bid_row.active = False
        await db.flush()
        logger.info(
            "Executed sale %s -> %s price=%d fee=%d", sell_row.wallet, bid_row.wallet, price, fee
        )
        return SettlementReceipt(
            price_paid=price,
            fee_paid=fee,
            seller_proceeds=proceeds,
            buyer_token_account=buyer_nft.address,
        )

    async def withdraw_from_treasury(
        self, db: AsyncSession, auction_house: str, authority: str, amount: int
    ) -> int:
        row = await self._load_auction_house(db, auction_house)
        if row.authority != authority:
            raise AdapterError(f"{authority} is not the authority of {auction_house}")
        with _rejections("withdraw_from_treasury"):
            destination = await self._ledger.get_or_create_associated_account(
                db, authority, row.treasury_mint
            )
            await self._ledger.transfer(db, row.treasury, destination.address, amount, row.address)
        logger.info("Withdrew %d from auction house %s treasury", amount, auction_house)
        return amount

    # --- internals ---

    async def _load_auction_house(self, db: AsyncSession, address: str) -> AuctionHouseORM:
        row = await db.get(AuctionHouseORM, address)
        if row is None:
            raise AdapterError(f"auction house not found: {address}")
        return row

    def _check_auctioneer(self, ah: AuctionHouseORM, authority: ProgramAuthority) -> None:
        try:
            signer = authority.address
        except ValueError as exc:
            raise AdapterError(f"invalid program authority seeds: {exc}") from exc
        if ah.auctioneer is None or signer != ah.auctioneer:
            raise AdapterError(f"{signer} is not the delegated auctioneer of {ah.address}")

    async def _open_trade_state(
        self,
        db: AsyncSession,
        ah: AuctionHouseORM,
        side: TradeSide,
        wallet: str,
        token_account: str,
        token_mint: str,
        price: int,
        token_size: int,
        public: bool = False,
    ) -> TradeStateORM:
        address = find_trade_state_address(
            wallet,
            ah.address,
            None if public else token_account,
            ah.treasury_mint,
            token_mint,
            price,
            token_size,
        )
        row = await db.get(TradeStateORM, address)
        if row is not None and row.active:
            raise AdapterError(f"trade state already active: {address}")
        if row is None:
            row = TradeStateORM(
                address=address,
                auction_house=ah.address,
                side=side.value,
                wallet=wallet,
                token_account=token_account,
                token_mint=token_mint,
                price=price,
                token_size=token_size,
                active=True,
            )
            db.add(row)
        else:
            row.active = True
        await db.flush()
        return row

    async def _load_active_trade_state(
        self, db: AsyncSession, handle: EscrowHandle, side: TradeSide
    ) -> TradeStateORM:
        row = await db.get(TradeStateORM, handle.trade_state)
        if row is None or not row.active:
            raise AdapterError(f"trade state is not active: {handle.trade_state}")
        if row.side != side.value:
            raise AdapterError(f"trade state {handle.trade_state} is not a {side.value} escrow")
        return row
