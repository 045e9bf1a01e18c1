"""Token domain models — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass


@dataclass
class TokenMint:
    address: str
    mint_authority: str | None
    decimals: int
    supply: int = 0


@dataclass
class TokenAccount:
    address: str
    mint: str
    owner: str
    amount: int = 0
    delegate: str | None = None
    delegated_amount: int = 0
