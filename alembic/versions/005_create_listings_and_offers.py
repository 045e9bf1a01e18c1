"""005: create listings and offers tables

Revision ID: 005
Revises: 004
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE listings (
            id                  VARCHAR(26)     PRIMARY KEY,
            address             VARCHAR(44)     NOT NULL,
            discriminator       VARCHAR(32)     NOT NULL,
            schema_version      SMALLINT        NOT NULL,
            reward_center       VARCHAR(44)     NOT NULL REFERENCES reward_centers (address),
            seller              VARCHAR(44)     NOT NULL,
            metadata            VARCHAR(44)     NOT NULL,
            token_mint          VARCHAR(44)     NOT NULL,
            token_account       VARCHAR(44)     NOT NULL,
            trade_state         VARCHAR(44)     NOT NULL,
            price               VARCHAR(20)     NOT NULL,
            token_size          VARCHAR(20)     NOT NULL,
            bump                SMALLINT        NOT NULL,
            state               VARCHAR(10)     NOT NULL DEFAULT 'ACTIVE',
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            canceled_at         TIMESTAMPTZ,
            purchased_at        TIMESTAMPTZ,
            CONSTRAINT ck_listings_state    CHECK (state IN ('ACTIVE', 'SOLD', 'CANCELED')),
            CONSTRAINT ck_listings_price    CHECK (fn_is_u64(price) AND price <> '0'),
            CONSTRAINT ck_listings_size     CHECK (fn_is_u64(token_size) AND token_size <> '0')
        );
    """)
    op.execute("CREATE INDEX ix_listings_address ON listings (address);")
    op.execute("""
        CREATE UNIQUE INDEX uq_listings_active_address
        ON listings (address)
        WHERE state = 'ACTIVE';
    """)
    op.execute("CREATE INDEX idx_listings_reward_center_state ON listings (reward_center, state);")

    op.execute("""
        CREATE TABLE offers (
            id                  VARCHAR(26)     PRIMARY KEY,
            address             VARCHAR(44)     NOT NULL,
            discriminator       VARCHAR(32)     NOT NULL,
            schema_version      SMALLINT        NOT NULL,
            reward_center       VARCHAR(44)     NOT NULL REFERENCES reward_centers (address),
            buyer               VARCHAR(44)     NOT NULL,
            metadata            VARCHAR(44)     NOT NULL,
            token_mint          VARCHAR(44)     NOT NULL,
            token_account       VARCHAR(44)     NOT NULL,
            trade_state         VARCHAR(44)     NOT NULL,
            price               VARCHAR(20)     NOT NULL,
            token_size          VARCHAR(20)     NOT NULL,
            bump                SMALLINT        NOT NULL,
            state               VARCHAR(10)     NOT NULL DEFAULT 'ACTIVE',
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            canceled_at         TIMESTAMPTZ,
            accepted_at         TIMESTAMPTZ,
            CONSTRAINT ck_offers_state  CHECK (state IN ('ACTIVE', 'ACCEPTED', 'CANCELED')),
            CONSTRAINT ck_offers_price  CHECK (fn_is_u64(price) AND price <> '0'),
            CONSTRAINT ck_offers_size   CHECK (fn_is_u64(token_size) AND token_size <> '0')
        );
    """)
    op.execute("CREATE INDEX ix_offers_address ON offers (address);")
    op.execute("""
        CREATE UNIQUE INDEX uq_offers_active_address
        ON offers (address)
        WHERE state = 'ACTIVE';
    """)
    op.execute("CREATE INDEX idx_offers_reward_center_state ON offers (reward_center, state);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS offers CASCADE;")
    op.execute("DROP TABLE IF EXISTS listings CASCADE;")
