"""Token ledger Protocol — the fungible-token capability the program relies on.

Covers reward tokens, auction-house payment tokens and NFTs (supply 1, 0
decimals) alike. Unit tests inject a mock that conforms to this Protocol.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_token.domain.models import TokenAccount, TokenMint


class TokenLedgerProtocol(Protocol):
    async def create_mint(
        self, db: AsyncSession, address: str, mint_authority: str | None, decimals: int
    ) -> TokenMint: ...

    async def get_mint(self, db: AsyncSession, address: str) -> TokenMint: ...

    async def create_account(
        self, db: AsyncSession, address: str, mint: str, owner: str
    ) -> TokenAccount: ...

    async def get_account(self, db: AsyncSession, address: str) -> TokenAccount | None: ...

    async def get_or_create_associated_account(
        self, db: AsyncSession, owner: str, mint: str
    ) -> TokenAccount: ...

    async def balance(self, db: AsyncSession, address: str) -> int: ...

    async def mint_to(
        self, db: AsyncSession, mint: str, destination: str, amount: int, authority: str
    ) -> TokenAccount: ...

    async def transfer(
        self,
        db: AsyncSession,
        source: str,
        destination: str,
        amount: int,
        authority: str,
    ) -> tuple[TokenAccount, TokenAccount]: ...

    async def approve(
        self, db: AsyncSession, account: str, delegate: str, amount: int, owner: str
    ) -> TokenAccount: ...

    async def revoke(self, db: AsyncSession, account: str, owner: str) -> TokenAccount: ...
