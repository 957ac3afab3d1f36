"""001: create indexer metadata tables (markets, conditions, transactions)

Written by the market / condition / trade indexers, read-only for the
position engine.

Revision ID: 001
Revises:
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE fixed_product_market_makers (
            id                  VARCHAR(42)    PRIMARY KEY,
            outcome_slot_count  INT            NOT NULL,
            condition_ids       VARCHAR(66)[]  NOT NULL DEFAULT '{}',
            CONSTRAINT ck_fpmm_outcome_slots_gt_0 CHECK (outcome_slot_count > 0)
        );
    """)
    op.execute("""
        CREATE TABLE conditions (
            id                  VARCHAR(66)     PRIMARY KEY,
            outcome_slot_count  INT             NOT NULL,
            payout_numerators   NUMERIC(78,0)[] NULL,
            payout_denominator  NUMERIC(78,0)   NULL,
            CONSTRAINT ck_conditions_outcome_slots_gt_0 CHECK (outcome_slot_count > 0),
            CONSTRAINT ck_conditions_payout_denominator_gt_0
                CHECK (payout_denominator IS NULL OR payout_denominator > 0)
        );
    """)
    op.execute("""
        CREATE TABLE transactions (
            id                     VARCHAR(66)   PRIMARY KEY,
            user_address           VARCHAR(42)   NOT NULL,
            market_address         VARCHAR(42)   NOT NULL,
            outcome_index          INT           NOT NULL,
            trade_type             VARCHAR(4)    NOT NULL,
            outcome_tokens_amount  NUMERIC(78,0) NOT NULL,
            trade_amount           NUMERIC(78,0) NOT NULL,
            CONSTRAINT ck_transactions_trade_type CHECK (trade_type IN ('Buy', 'Sell'))
        );
    """)
    op.execute("CREATE INDEX idx_transactions_market ON transactions (market_address);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS transactions CASCADE;")
    op.execute("DROP TABLE IF EXISTS conditions CASCADE;")
    op.execute("DROP TABLE IF EXISTS fixed_product_market_makers CASCADE;")
