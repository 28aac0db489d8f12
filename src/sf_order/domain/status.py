"""Order status state machine.

    PENDING ──► PROCESSING ◄──► BACKORDERED
       │            │               │
       └────────────┴───────┬───────┘
                            ▼
               SHIPPED | COMPLETED | CANCELLED   (terminal)

Status never moves back to PENDING and terminal statuses never change.
"""
from src.sf_common.enums import OrderStatus
from src.sf_common.errors import InvalidOrderStatusError

_FORWARD = frozenset(
    {
        OrderStatus.PROCESSING,
        OrderStatus.BACKORDERED,
        OrderStatus.SHIPPED,
        OrderStatus.COMPLETED,
        OrderStatus.CANCELLED,
    }
)

ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: _FORWARD,
    OrderStatus.PROCESSING: _FORWARD - {OrderStatus.PROCESSING},
    OrderStatus.BACKORDERED: _FORWARD - {OrderStatus.BACKORDERED},
    OrderStatus.SHIPPED: frozenset(),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def parse_status(value: str) -> OrderStatus:
    """Validate a status literal against the allow-list."""
    try:
        return OrderStatus(value)
    except ValueError:
        raise InvalidOrderStatusError(value) from None


def can_transition(current: str, target: str) -> bool:
    return OrderStatus(target) in ALLOWED_TRANSITIONS[OrderStatus(current)]
