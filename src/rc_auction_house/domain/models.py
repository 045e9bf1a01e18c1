"""Auction house domain models — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass


@dataclass
class AuctionHouse:
    address: str
    authority: str
    treasury_mint: str
    treasury: str                    # fee account, owned by the auction house
    seller_fee_basis_points: int
    auctioneer: str | None = None    # delegated program authority, if any


@dataclass(frozen=True)
class EscrowHandle:
    """Reference to one side's escrow: a seller or buyer trade state."""

    trade_state: str
    auction_house: str
    side: str                        # TradeSide value
    wallet: str
    token_account: str               # the NFT account being sold / bid on
    token_mint: str
    price: int
    token_size: int


@dataclass(frozen=True)
class SettlementReceipt:
    price_paid: int
    fee_paid: int
    seller_proceeds: int
    buyer_token_account: str
