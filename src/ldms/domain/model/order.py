"""Order aggregate: one placement decision against a deal.

An Order captures the deal's final price at placement time; later price
edits on the deal never alter an existing order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from ldms.domain.exceptions import ValidationError
from ldms.domain.model.deal import Deal
from ldms.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


# confirmed -> cancelled is administrative; nothing ever returns to pending.
_ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.REJECTED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.CANCELLED}),
    OrderStatus.REJECTED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def can_transition(current: OrderStatus, new: OrderStatus) -> bool:
    return new in _ALLOWED_TRANSITIONS[current]


@dataclass
class Order:
    """Aggregate root for deal orders.

    Use ``Order.place()`` for new orders.  The ``__init__`` is kept plain so
    the repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    deal_id: int
    user_id: str
    quantity: Quantity
    total_price: Money  # locked at placement time
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    idempotency_key: str | None = None

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def place(
        deal: Deal,
        user_id: str,
        quantity: Quantity,
        now: datetime,
        idempotency_key: str | None = None,
    ) -> Order:
        """Build a pending order against *deal*, snapshotting its price."""
        if deal.id is None:
            raise ValidationError("Cannot order against an unsaved deal")
        _check_user_id(user_id)
        if idempotency_key is not None and not idempotency_key.strip():
            raise ValidationError("Idempotency key cannot be blank")

        return Order(
            id=None,
            deal_id=deal.id,
            user_id=user_id.strip(),
            quantity=quantity,
            total_price=deal.price_for(quantity),  # <-- price snapshot
            created_at=now,
            idempotency_key=idempotency_key,
        )

    # --- State transitions ----------------------------------------------------

    def confirm(self) -> None:
        """Transition PENDING -> CONFIRMED (units already decremented)."""
        self._transition(OrderStatus.CONFIRMED)

    def reject(self) -> None:
        """Transition PENDING -> REJECTED."""
        self._transition(OrderStatus.REJECTED)

    def cancel(self) -> None:
        """Transition CONFIRMED -> CANCELLED.

        Restocking the deal is the caller's job and must accompany this.
        """
        self._transition(OrderStatus.CANCELLED)

    @property
    def is_terminal(self) -> bool:
        return self.status is not OrderStatus.PENDING

    # --- Internal helpers -----------------------------------------------------

    def _transition(self, new: OrderStatus) -> None:
        if not can_transition(self.status, new):
            raise ValidationError(
                f"Cannot move order from {self.status.value} to {new.value}"
            )
        self.status = new


def _check_user_id(user_id: object) -> None:
    if not isinstance(user_id, str) or not user_id.strip():
        raise ValidationError("User ID is required")
