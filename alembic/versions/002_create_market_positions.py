"""002: create market_positions table

Revision ID: 002
Revises: 001
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # net_quantity / net_value have no >= 0 CHECK: a negative net position is
    # stored on purpose so the anomaly can be found later.
    op.execute("""
        CREATE TABLE market_positions (
            id               VARCHAR(150)  PRIMARY KEY,
            user_address     VARCHAR(42)   NOT NULL,
            market_address   VARCHAR(42)   NOT NULL,
            outcome_index    INT           NOT NULL,
            quantity_bought  NUMERIC(78,0) NOT NULL DEFAULT 0,
            quantity_sold    NUMERIC(78,0) NOT NULL DEFAULT 0,
            net_quantity     NUMERIC(78,0) NOT NULL DEFAULT 0,
            value_bought     NUMERIC(78,0) NOT NULL DEFAULT 0,
            value_sold       NUMERIC(78,0) NOT NULL DEFAULT 0,
            net_value        NUMERIC(78,0) NOT NULL DEFAULT 0,
            created_at       TIMESTAMPTZ   NOT NULL DEFAULT NOW(),
            updated_at       TIMESTAMPTZ   NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_market_positions_identity
                UNIQUE (user_address, market_address, outcome_index),
            CONSTRAINT ck_market_positions_outcome_gte_0 CHECK (outcome_index >= 0),
            CONSTRAINT ck_market_positions_net_quantity
                CHECK (net_quantity = quantity_bought - quantity_sold),
            CONSTRAINT ck_market_positions_net_value
                CHECK (net_value = value_bought - value_sold)
        );
    """)
    op.execute("CREATE INDEX idx_market_positions_user ON market_positions (user_address);")
    op.execute("CREATE INDEX idx_market_positions_market ON market_positions (market_address);")
    op.execute(
        "COMMENT ON TABLE market_positions IS "
        "'Per user / market / outcome ledger derived from on-chain events';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS market_positions CASCADE;")
