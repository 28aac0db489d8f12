"""Domain models for sf_catalog — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass


@dataclass
class Product:
    id: str
    name: str
    price: int  # yen
    stock: int
    category_id: str | None
    is_active: bool = True
    is_digital: bool = False  # category_type == DIGITAL, excluded from shipping


@dataclass(frozen=True)
class CategoryRate:
    """Shipping rate of one category; category_id None is the store-wide default."""

    category_id: str | None
    fee_per_order: int
    free_shipping_threshold: int | None
    is_active: bool = True

    @property
    def is_default(self) -> bool:
        return self.category_id is None


@dataclass(frozen=True)
class PaymentSurchargeRule:
    method: str  # card / bank_transfer / cash_on_delivery
    fee_model: str  # percentage / fixed
    rate_bps: int = 0  # used when fee_model == percentage (360 = 3.6%)
    fixed_amount: int = 0  # used when fee_model == fixed
    bearer: str = "customer"  # customer / merchant
    is_enabled: bool = True


# Built-in rules applied when payment settings were never configured.
DEFAULT_SURCHARGE_RULES: dict[str, PaymentSurchargeRule] = {
    "card": PaymentSurchargeRule(
        method="card", fee_model="percentage", rate_bps=360, bearer="merchant"
    ),
    "bank_transfer": PaymentSurchargeRule(
        method="bank_transfer", fee_model="fixed", fixed_amount=0, bearer="customer"
    ),
    "cash_on_delivery": PaymentSurchargeRule(
        method="cash_on_delivery", fee_model="fixed", fixed_amount=330, bearer="customer"
    ),
}

# Names still sent by older storefront clients.
PAYMENT_METHOD_ALIASES = {
    "cod": "cash_on_delivery",
    "stripe": "card",
}


def normalize_payment_method(value: object) -> object:
    """Lower-case and de-alias a payment method; non-strings pass through for pydantic."""
    if isinstance(value, str):
        key = value.strip().lower()
        return PAYMENT_METHOD_ALIASES.get(key, key)
    return value
