"""003: create auction_houses and trade_states tables

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE auction_houses (
            address                 VARCHAR(44)     PRIMARY KEY,
            authority               VARCHAR(44)     NOT NULL,
            treasury_mint           VARCHAR(44)     NOT NULL,
            treasury                VARCHAR(44)     NOT NULL,
            seller_fee_basis_points INT             NOT NULL,
            auctioneer              VARCHAR(44),
            CONSTRAINT ck_auction_houses_fee_bps CHECK (seller_fee_basis_points BETWEEN 0 AND 10000)
        );
    """)
    op.execute("""
        CREATE TABLE trade_states (
            address             VARCHAR(44)     PRIMARY KEY,
            auction_house       VARCHAR(44)     NOT NULL REFERENCES auction_houses (address),
            side                VARCHAR(4)      NOT NULL,
            wallet              VARCHAR(44)     NOT NULL,
            token_account       VARCHAR(44)     NOT NULL,
            token_mint          VARCHAR(44)     NOT NULL,
            price               VARCHAR(20)     NOT NULL,
            token_size          VARCHAR(20)     NOT NULL,
            active              BOOLEAN         NOT NULL DEFAULT TRUE,
            CONSTRAINT ck_trade_states_side     CHECK (side IN ('SELL', 'BUY')),
            CONSTRAINT ck_trade_states_price    CHECK (fn_is_u64(price)),
            CONSTRAINT ck_trade_states_size     CHECK (fn_is_u64(token_size))
        );
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS trade_states CASCADE;")
    op.execute("DROP TABLE IF EXISTS auction_houses CASCADE;")
