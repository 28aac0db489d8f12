"""003: create shipping_rates and payment_surcharge_rules tables

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
    # category_id NULL is the store-wide default rate.
    op.execute("""
        CREATE TABLE shipping_rates (
            id                      BIGSERIAL       PRIMARY KEY,
            category_id             VARCHAR(64)     REFERENCES categories (id),
            fee_per_order           BIGINT          NOT NULL,
            free_shipping_threshold BIGINT,
            is_active               BOOLEAN         NOT NULL DEFAULT TRUE,
            created_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_shipping_rates_fee_gte_0 CHECK (fee_per_order >= 0),
            CONSTRAINT ck_shipping_rates_threshold_gte_0 CHECK (
                free_shipping_threshold IS NULL OR free_shipping_threshold >= 0
            )
        );
    """)
    # At most one active rate per category and one active default.
    op.execute("""
        CREATE UNIQUE INDEX uq_shipping_rates_active_category
        ON shipping_rates (category_id)
        WHERE is_active AND category_id IS NOT NULL;
    """)
    op.execute("""
        CREATE UNIQUE INDEX uq_shipping_rates_active_default
        ON shipping_rates ((category_id IS NULL))
        WHERE is_active AND category_id IS NULL;
    """)
    op.execute("""
        CREATE TRIGGER trg_shipping_rates_updated_at
            BEFORE UPDATE ON shipping_rates
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)

    op.execute("""
        CREATE TABLE payment_surcharge_rules (
            method          VARCHAR(30)     PRIMARY KEY,
            fee_model       VARCHAR(20)     NOT NULL,
            rate_bps        INT             NOT NULL DEFAULT 0,
            fixed_amount    BIGINT          NOT NULL DEFAULT 0,
            bearer          VARCHAR(20)     NOT NULL DEFAULT 'customer',
            is_enabled      BOOLEAN         NOT NULL DEFAULT TRUE,
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_surcharge_method CHECK (
                method IN ('card', 'bank_transfer', 'cash_on_delivery')
            ),
            CONSTRAINT ck_surcharge_fee_model CHECK (fee_model IN ('percentage', 'fixed')),
            CONSTRAINT ck_surcharge_bearer CHECK (bearer IN ('customer', 'merchant')),
            CONSTRAINT ck_surcharge_rate_bps CHECK (rate_bps BETWEEN 0 AND 10000),
            CONSTRAINT ck_surcharge_fixed_gte_0 CHECK (fixed_amount >= 0)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_payment_surcharge_rules_updated_at
            BEFORE UPDATE ON payment_surcharge_rules
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS payment_surcharge_rules CASCADE;")
    op.execute("DROP TABLE IF EXISTS shipping_rates CASCADE;")
