"""TokenLedger — concrete implementation of TokenLedgerProtocol.

Balances are read and written inside the caller's transaction. Rows that get
modified are loaded FOR UPDATE, so two instructions crediting the same account
serialize in the database even when they declared different lock sets.

Transaction ownership: the CALLER starts and commits the transaction.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_common.errors import (
    AddressMismatchError,
    InsufficientFundsError,
    InternalError,
    InvalidAmountError,
    RecordExistsError,
    RecordNotFoundError,
    SignerMismatchError,
)
from src.rc_common.pda import find_associated_token_address
from src.rc_common.u64 import U64_MAX, is_u64
from src.rc_token.domain.models import TokenAccount, TokenMint
from src.rc_token.infrastructure.db_models import TokenAccountORM, TokenMintORM

logger = logging.getLogger(__name__)


def _orm_to_mint(row: TokenMintORM) -> TokenMint:
    return TokenMint(
        address=row.address,
        mint_authority=row.mint_authority,
        decimals=row.decimals,
        supply=row.supply,
    )


def _orm_to_account(row: TokenAccountORM) -> TokenAccount:
    return TokenAccount(
        address=row.address,
        mint=row.mint,
        owner=row.owner,
        amount=row.amount,
        delegate=row.delegate,
        delegated_amount=row.delegated_amount,
    )


def _check_amount(amount: int) -> None:
    if not is_u64(amount):
        raise InvalidAmountError(amount)


class TokenLedger:
    """Concrete ledger — SPL-token semantics over the record store."""

    async def create_mint(
        self, db: AsyncSession, address: str, mint_authority: str | None, decimals: int
    ) -> TokenMint:
        if await db.get(TokenMintORM, address) is not None:
            raise RecordExistsError("Mint", address)
        row = TokenMintORM(
            address=address, mint_authority=mint_authority, decimals=decimals, supply=0
        )
        db.add(row)
        await db.flush()
        return _orm_to_mint(row)

    async def get_mint(self, db: AsyncSession, address: str) -> TokenMint:
        row = await db.get(TokenMintORM, address)
        if row is None:
            raise RecordNotFoundError("Mint", address)
        return _orm_to_mint(row)

    async def create_account(
        self, db: AsyncSession, address: str, mint: str, owner: str
    ) -> TokenAccount:
        await self.get_mint(db, mint)
        if await db.get(TokenAccountORM, address) is not None:
            raise RecordExistsError("TokenAccount", address)
        row = TokenAccountORM(
            address=address, mint=mint, owner=owner, amount=0, delegate=None, delegated_amount=0
        )
        db.add(row)
        await db.flush()
        return _orm_to_account(row)

    async def get_account(self, db: AsyncSession, address: str) -> TokenAccount | None:
        row = await db.get(TokenAccountORM, address)
        return _orm_to_account(row) if row else None

    async def get_or_create_associated_account(
        self, db: AsyncSession, owner: str, mint: str
    ) -> TokenAccount:
        address = find_associated_token_address(owner, mint)
        existing = await self.get_account(db, address)
        if existing is not None:
            return existing
        return await self.create_account(db, address, mint, owner)

    async def balance(self, db: AsyncSession, address: str) -> int:
        return (await self._load_account(db, address)).amount

    async def mint_to(
        self, db: AsyncSession, mint: str, destination: str, amount: int, authority: str
    ) -> TokenAccount:
        _check_amount(amount)
        mint_row = await db.get(TokenMintORM, mint, with_for_update=True)
        if mint_row is None:
            raise RecordNotFoundError("Mint", mint)
        if mint_row.mint_authority != authority:
            raise SignerMismatchError("mint authority", str(mint_row.mint_authority), authority)
        dest = await self._load_account(db, destination)
        if dest.mint != mint:
            raise AddressMismatchError("destination mint", mint, dest.mint)
        if dest.amount + amount > U64_MAX or mint_row.supply + amount > U64_MAX:
            raise InternalError(f"Mint overflow on {destination}")
        dest.amount += amount
        mint_row.supply += amount
        await db.flush()
        return _orm_to_account(dest)

    async def transfer(
        self,
        db: AsyncSession,
        source: str,
        destination: str,
        amount: int,
        authority: str,
    ) -> tuple[TokenAccount, TokenAccount]:
        """Move `amount` from source to destination.

        `authority` must be the source owner, or its delegate within the
        delegated amount.
        """
        _check_amount(amount)
        src = await self._load_account(db, source)
        dest = await self._load_account(db, destination)
        if src.mint != dest.mint:
            raise AddressMismatchError("destination mint", src.mint, dest.mint)
        if src.amount < amount:
            raise InsufficientFundsError(amount, src.amount)

        if authority != src.owner:
            if authority != src.delegate:
                raise SignerMismatchError("token account owner", src.owner, authority)
            if src.delegated_amount < amount:
                raise InsufficientFundsError(amount, src.delegated_amount)
            src.delegated_amount -= amount
            if src.delegated_amount == 0:
                src.delegate = None

        if source != destination:
            if dest.amount + amount > U64_MAX:
                raise InternalError(f"Balance overflow on {destination}")
            src.amount -= amount
            dest.amount += amount
        await db.flush()
        logger.debug("Transfer %d %s: %s -> %s", amount, src.mint, source, destination)
        return _orm_to_account(src), _orm_to_account(dest)

    async def approve(
        self, db: AsyncSession, account: str, delegate: str, amount: int, owner: str
    ) -> TokenAccount:
        _check_amount(amount)
        row = await self._load_account(db, account)
        if row.owner != owner:
            raise SignerMismatchError("token account owner", row.owner, owner)
        row.delegate = delegate
        row.delegated_amount = amount
        await db.flush()
        return _orm_to_account(row)

    async def revoke(self, db: AsyncSession, account: str, owner: str) -> TokenAccount:
        row = await self._load_account(db, account)
        if row.owner != owner:
            raise SignerMismatchError("token account owner", row.owner, owner)
        row.delegate = None
        row.delegated_amount = 0
        await db.flush()
        return _orm_to_account(row)

    async def _load_account(self, db: AsyncSession, address: str) -> TokenAccountORM:
        row = await db.get(TokenAccountORM, address, with_for_update=True)
        if row is None:
            raise RecordNotFoundError("TokenAccount", address)
        return row
