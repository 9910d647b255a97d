"""Domain service: Inventory Controller.

Commits an order against a deal's remaining units and expiry.  The
controller takes no lock of its own: the race for the last units is
settled by the store's conditional decrement, so the outcome is the same
whether the competing requests run in one process or on many instances.

The decrement and the order insert are two store calls.  If the insert
fails after the decrement succeeded, the units are put back before the
error reaches the caller, so a caller only ever sees a committed order or
an attempt that left no trace.
"""

from __future__ import annotations

import logging

from ldms.domain.clock import Clock
from ldms.domain.exceptions import (
    DealExpiredError,
    DuplicateRequestError,
    EntityNotFoundError,
    InsufficientInventoryError,
    InternalInconsistencyError,
    StoreUnavailableError,
    ValidationError,
)
from ldms.domain.model.order import Order
from ldms.domain.model.value_objects import Quantity
from ldms.domain.repository.deal_repository import DealRepository
from ldms.domain.repository.order_repository import OrderRepository
from ldms.domain.service.restock import restock_units

logger = logging.getLogger(__name__)


class InventoryController:

    def __init__(
        self,
        deal_repo: DealRepository,
        order_repo: OrderRepository,
        clock: Clock,
    ) -> None:
        self._deal_repo = deal_repo
        self._order_repo = order_repo
        self._clock = clock

    def place_order(
        self,
        deal_id: int,
        user_id: str,
        quantity: int,
        idempotency_key: str | None = None,
    ) -> Order:
        """Sell *quantity* units of a deal to *user_id*.

        Steps:
        1. Validate input (no store call on bad input).
        2. Replay: return the existing order for a known idempotency key.
        3. Load the deal and check its expiry against the clock.
        4. Conditionally decrement ``available_units`` in the store.
        5. Persist a confirmed order; restore the units if that fails.

        Rejected attempts are not persisted, only logged.
        """
        qty = Quantity(quantity)
        if not isinstance(user_id, str) or not user_id.strip():
            raise ValidationError("User ID is required")

        if idempotency_key is not None:
            existing = self._order_repo.get_by_idempotency_key(idempotency_key)
            if existing is not None:
                return self._replay(existing, deal_id, user_id, qty)

        deal = self._deal_repo.get_by_id(deal_id)
        if deal is None:
            raise EntityNotFoundError(f"Deal #{deal_id} not found")

        now = self._clock.now()
        if not deal.is_active(now):
            raise DealExpiredError(
                f"Deal #{deal_id} expired at {deal.expiry_time.isoformat()}"
            )

        # Price is snapshotted from the deal as read above, before the
        # decrement; a later price edit does not leak into this order.
        order = Order.place(deal, user_id, qty, now, idempotency_key)

        result = self._deal_repo.decrement_available_units(deal_id, qty.value)
        if not result.success:
            logger.info(
                "[deal=%s] rejected user=%s qty=%s (remaining=%s)",
                deal_id, order.user_id, qty.value, result.remaining,
            )
            raise InsufficientInventoryError(deal_id, qty.value, result.remaining)

        order.confirm()
        try:
            saved = self._order_repo.add(order)
        except DuplicateRequestError:
            # Lost a race against a request carrying the same key.
            self._restore_units(deal_id, qty.value)
            winner = self._order_repo.get_by_idempotency_key(idempotency_key)
            if winner is None:
                raise
            return self._replay(winner, deal_id, user_id, qty)
        except BaseException:
            logger.warning(
                "[deal=%s] order persistence failed after decrement; "
                "restoring %s unit(s)",
                deal_id, qty.value,
            )
            self._restore_units(deal_id, qty.value)
            raise

        logger.info(
            "[deal=%s] [order=%s] confirmed user=%s qty=%s total=%s (remaining=%s)",
            deal_id, saved.id, saved.user_id, qty.value, saved.total_price,
            result.remaining,
        )
        return saved

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _replay(existing: Order, deal_id: int, user_id: str, qty: Quantity) -> Order:
        """Return *existing* if it matches the replayed request."""
        if (
            existing.deal_id != deal_id
            or existing.user_id != user_id.strip()
            or existing.quantity != qty
        ):
            raise ValidationError(
                f"Idempotency key '{existing.idempotency_key}' was already used "
                f"for a different order (#{existing.id})"
            )
        logger.info("[order=%s] replayed idempotent request", existing.id)
        return existing

    def _restore_units(self, deal_id: int, quantity: int) -> None:
        """Compensate a successful decrement whose order was not recorded."""
        cause: StoreUnavailableError | None = None
        try:
            restored = restock_units(self._deal_repo, deal_id, quantity)
        except StoreUnavailableError as exc:
            restored, cause = False, exc
        if restored:
            logger.warning("[deal=%s] restored %s unit(s)", deal_id, quantity)
            return

        logger.critical(
            "[deal=%s] could not restore %s unit(s) after a failed order insert; "
            "inventory is short by that amount",
            deal_id, quantity,
        )
        error = InternalInconsistencyError(
            f"Deal #{deal_id}: {quantity} unit(s) decremented without a "
            f"confirmed order and could not be restored"
        )
        if cause is not None:
            raise error from cause
        raise error
