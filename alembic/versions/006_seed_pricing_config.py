"""006: seed default pricing configuration

Revision ID: 006
Revises: 005
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Store-wide default shipping rate: ¥500, free from ¥5,000
    op.execute("""
        INSERT INTO shipping_rates (category_id, fee_per_order, free_shipping_threshold, is_active)
        VALUES (NULL, 500, 5000, TRUE);
    """)
    # Card 3.6% absorbed by the merchant; COD ¥330 paid by the customer
    op.execute("""
        INSERT INTO payment_surcharge_rules (method, fee_model, rate_bps, fixed_amount, bearer)
        VALUES
            ('card',             'percentage', 360, 0,   'merchant'),
            ('bank_transfer',    'fixed',      0,   0,   'customer'),
            ('cash_on_delivery', 'fixed',      0,   330, 'customer');
    """)


def downgrade() -> None:
    op.execute("DELETE FROM payment_surcharge_rules;")
    op.execute("DELETE FROM shipping_rates WHERE category_id IS NULL;")
