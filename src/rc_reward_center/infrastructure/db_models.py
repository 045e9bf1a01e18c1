"""SQLAlchemy ORM model for the reward_centers table."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, SmallInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from src.rc_common.database import U64, Base


class RewardCenterORM(Base):
    __tablename__ = "reward_centers"
    __table_args__ = (
        CheckConstraint(
            "seller_reward_payout_basis_points BETWEEN 0 AND 10000",
            name="ck_reward_centers_bps",
        ),
        CheckConstraint(
            "mathematical_operand IN ('DIVIDE', 'MULTIPLY')",
            name="ck_reward_centers_operand",
        ),
    )

    address: Mapped[str] = mapped_column(String(44), primary_key=True)
    discriminator: Mapped[str] = mapped_column(String(32), nullable=False)
    schema_version: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    auction_house: Mapped[str] = mapped_column(String(44), nullable=False, unique=True)
    token_mint: Mapped[str] = mapped_column(String(44), nullable=False)
    treasury: Mapped[str] = mapped_column(String(44), nullable=False)
    mathematical_operand: Mapped[str] = mapped_column(String(10), nullable=False)
    payout_numeral: Mapped[int] = mapped_column(U64, nullable=False)
    seller_reward_payout_basis_points: Mapped[int] = mapped_column(Integer, nullable=False)
    bump: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
