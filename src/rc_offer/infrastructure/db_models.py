"""SQLAlchemy ORM model for the offers table."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Index, SmallInteger, String, text
from sqlalchemy.orm import Mapped, mapped_column

from src.rc_common.database import U64, Base


class OfferORM(Base):
    __tablename__ = "offers"
    __table_args__ = (
        CheckConstraint("state IN ('ACTIVE', 'ACCEPTED', 'CANCELED')", name="ck_offers_state"),
        Index(
            "uq_offers_active_address",
            "address",
            unique=True,
            postgresql_where=text("state = 'ACTIVE'"),
            sqlite_where=text("state = 'ACTIVE'"),
        ),
        Index("idx_offers_reward_center_state", "reward_center", "state"),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    address: Mapped[str] = mapped_column(String(44), nullable=False, index=True)
    discriminator: Mapped[str] = mapped_column(String(32), nullable=False)
    schema_version: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    reward_center: Mapped[str] = mapped_column(String(44), nullable=False)
    buyer: Mapped[str] = mapped_column(String(44), nullable=False)
    metadata_address: Mapped[str] = mapped_column("metadata", String(44), nullable=False)
    token_mint: Mapped[str] = mapped_column(String(44), nullable=False)
    token_account: Mapped[str] = mapped_column(String(44), nullable=False)
    trade_state: Mapped[str] = mapped_column(String(44), nullable=False)
    price: Mapped[int] = mapped_column(U64, nullable=False)
    token_size: Mapped[int] = mapped_column(U64, nullable=False)
    bump: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    state: Mapped[str] = mapped_column(String(10), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    canceled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    accepted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
