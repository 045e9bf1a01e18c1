"""SQLAlchemy ORM models for the simulated auction house."""

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.rc_common.database import U64, Base


class AuctionHouseORM(Base):
    __tablename__ = "auction_houses"

    address: Mapped[str] = mapped_column(String(44), primary_key=True)
    authority: Mapped[str] = mapped_column(String(44), nullable=False)
    treasury_mint: Mapped[str] = mapped_column(String(44), nullable=False)
    treasury: Mapped[str] = mapped_column(String(44), nullable=False)
    seller_fee_basis_points: Mapped[int] = mapped_column(Integer, nullable=False)
    auctioneer: Mapped[str | None] = mapped_column(String(44), nullable=True)


class TradeStateORM(Base):
    __tablename__ = "trade_states"

    address: Mapped[str] = mapped_column(String(44), primary_key=True)
    auction_house: Mapped[str] = mapped_column(String(44), nullable=False)
    side: Mapped[str] = mapped_column(String(4), nullable=False)
    wallet: Mapped[str] = mapped_column(String(44), nullable=False)
    token_account: Mapped[str] = mapped_column(String(44), nullable=False)
    token_mint: Mapped[str] = mapped_column(String(44), nullable=False)
    price: Mapped[int] = mapped_column(U64, nullable=False)
    token_size: Mapped[int] = mapped_column(U64, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
