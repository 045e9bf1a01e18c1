"""SQLAlchemy ORM models for token mints and token accounts."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.rc_common.database import U64, Base


class TokenMintORM(Base):
    __tablename__ = "token_mints"

    address: Mapped[str] = mapped_column(String(44), primary_key=True)
    mint_authority: Mapped[str | None] = mapped_column(String(44), nullable=True)
    decimals: Mapped[int] = mapped_column(Integer, nullable=False)
    supply: Mapped[int] = mapped_column(U64, nullable=False, default=0)


class TokenAccountORM(Base):
    __tablename__ = "token_accounts"

    address: Mapped[str] = mapped_column(String(44), primary_key=True)
    mint: Mapped[str] = mapped_column(String(44), nullable=False, index=True)
    owner: Mapped[str] = mapped_column(String(44), nullable=False, index=True)
    amount: Mapped[int] = mapped_column(U64, nullable=False, default=0)
    delegate: Mapped[str | None] = mapped_column(String(44), nullable=True)
    delegated_amount: Mapped[int] = mapped_column(U64, nullable=False, default=0)
