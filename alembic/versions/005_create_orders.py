"""005: create orders and order_lines tables

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
        CREATE TABLE orders (
            id                  VARCHAR(64)     PRIMARY KEY,
            order_number        VARCHAR(40)     NOT NULL,
            customer_id         VARCHAR(64)     NOT NULL,
            payment_method      VARCHAR(30)     NOT NULL,
            subtotal_amount     BIGINT          NOT NULL,
            shipping_fee        BIGINT          NOT NULL,
            surcharge_amount    BIGINT          NOT NULL DEFAULT 0,
            total_amount        BIGINT          NOT NULL,
            shipping_address    VARCHAR(500)    NOT NULL,
            recipient_name      VARCHAR(100)    NOT NULL,
            contact_phone       VARCHAR(30),
            notes               TEXT,
            status              VARCHAR(20)     NOT NULL DEFAULT 'PENDING',
            paid_at             TIMESTAMPTZ,
            cancelled_at        TIMESTAMPTZ,
            cancelled_by        VARCHAR(20),
            cancel_reason       VARCHAR(500),
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_orders_order_number   UNIQUE (order_number),
            CONSTRAINT ck_orders_amounts_gte_0  CHECK (
                subtotal_amount >= 0 AND shipping_fee >= 0 AND surcharge_amount >= 0
            ),
            CONSTRAINT ck_orders_total          CHECK (
                total_amount = subtotal_amount + shipping_fee + surcharge_amount
            ),
            CONSTRAINT ck_orders_payment_method CHECK (
                payment_method IN ('card', 'bank_transfer', 'cash_on_delivery')
            ),
            CONSTRAINT ck_orders_status         CHECK (
                status IN ('PENDING', 'PROCESSING', 'BACKORDERED',
                           'SHIPPED', 'COMPLETED', 'CANCELLED')
            ),
            CONSTRAINT ck_orders_cancelled_by   CHECK (
                cancelled_by IS NULL OR cancelled_by IN ('CUSTOMER', 'ADMIN')
            ),
            CONSTRAINT ck_orders_cancel_stamp   CHECK (
                (status = 'CANCELLED') = (cancelled_at IS NOT NULL)
            )
        );
    """)
    op.execute("CREATE INDEX idx_orders_customer ON orders (customer_id, created_at DESC);")
    op.execute("CREATE INDEX idx_orders_status ON orders (status, created_at DESC);")
    op.execute("""
        CREATE TRIGGER trg_orders_updated_at
            BEFORE UPDATE ON orders
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)

    # Lines are snapshots: name and unit price as charged, never updated.
    op.execute("""
        CREATE TABLE order_lines (
            id              VARCHAR(64)     PRIMARY KEY,
            order_id        VARCHAR(64)     NOT NULL REFERENCES orders (id) ON DELETE CASCADE,
            product_id      VARCHAR(64)     NOT NULL REFERENCES products (id),
            product_name    VARCHAR(200)    NOT NULL,
            unit_price      BIGINT          NOT NULL,
            quantity        INT             NOT NULL,
            line_subtotal   BIGINT          NOT NULL,
            CONSTRAINT ck_order_lines_quantity  CHECK (quantity > 0),
            CONSTRAINT ck_order_lines_price     CHECK (unit_price >= 0),
            CONSTRAINT ck_order_lines_subtotal  CHECK (line_subtotal = unit_price * quantity)
        );
    """)
    op.execute("CREATE INDEX idx_order_lines_order ON order_lines (order_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS order_lines CASCADE;")
    op.execute("DROP TABLE IF EXISTS orders CASCADE;")
