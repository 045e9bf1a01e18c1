"""004: create reward_centers table

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE reward_centers (
            address                             VARCHAR(44)     PRIMARY KEY,
            discriminator                       VARCHAR(32)     NOT NULL,
            schema_version                      SMALLINT        NOT NULL,
            auction_house                       VARCHAR(44)     NOT NULL,
            token_mint                          VARCHAR(44)     NOT NULL REFERENCES token_mints (address),
            treasury                            VARCHAR(44)     NOT NULL,
            mathematical_operand                VARCHAR(10)     NOT NULL,
            payout_numeral                      VARCHAR(20)     NOT NULL,
            seller_reward_payout_basis_points   INT             NOT NULL,
            bump                                SMALLINT        NOT NULL,
            created_at                          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at                          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_reward_centers_auction_house UNIQUE (auction_house),
            CONSTRAINT ck_reward_centers_bps        CHECK (seller_reward_payout_basis_points BETWEEN 0 AND 10000),
            CONSTRAINT ck_reward_centers_operand    CHECK (mathematical_operand IN ('DIVIDE', 'MULTIPLY')),
            CONSTRAINT ck_reward_centers_numeral    CHECK (fn_is_u64(payout_numeral) AND payout_numeral <> '0')
        );
    """)
    op.execute(
        "COMMENT ON TABLE reward_centers IS 'One reward overlay per auction house; rules read at settlement time';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS reward_centers CASCADE;")
