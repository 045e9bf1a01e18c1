"""002: create token_mints and token_accounts tables

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE token_mints (
            address             VARCHAR(44)     PRIMARY KEY,
            mint_authority      VARCHAR(44),
            decimals            INT             NOT NULL,
            supply              VARCHAR(20)     NOT NULL DEFAULT '0',
            CONSTRAINT ck_token_mints_decimals  CHECK (decimals BETWEEN 0 AND 255),
            CONSTRAINT ck_token_mints_supply    CHECK (fn_is_u64(supply))
        );
    """)
    op.execute("""
        CREATE TABLE token_accounts (
            address             VARCHAR(44)     PRIMARY KEY,
            mint                VARCHAR(44)     NOT NULL REFERENCES token_mints (address),
            owner               VARCHAR(44)     NOT NULL,
            amount              VARCHAR(20)     NOT NULL DEFAULT '0',
            delegate            VARCHAR(44),
            delegated_amount    VARCHAR(20)     NOT NULL DEFAULT '0',
            CONSTRAINT ck_token_accounts_amount     CHECK (fn_is_u64(amount)),
            CONSTRAINT ck_token_accounts_delegated  CHECK (fn_is_u64(delegated_amount))
        );
    """)
    op.execute("CREATE INDEX ix_token_accounts_mint ON token_accounts (mint);")
    op.execute("CREATE INDEX ix_token_accounts_owner ON token_accounts (owner);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS token_accounts CASCADE;")
    op.execute("DROP TABLE IF EXISTS token_mints CASCADE;")
