"""001: create common functions

Revision ID: 001
Revises: 
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # u64 columns are VARCHAR(20) decimal text; this guards their shape
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_is_u64(v VARCHAR)
        RETURNS BOOLEAN AS $$
        BEGIN
            RETURN v ~ '^[0-9]{1,20}$' AND v::NUMERIC <= 18446744073709551615;
        END;
        $$ LANGUAGE plpgsql IMMUTABLE;
    """)


def downgrade() -> None:
    op.execute("DROP FUNCTION IF EXISTS fn_is_u64(VARCHAR);")
