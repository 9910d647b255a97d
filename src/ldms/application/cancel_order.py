"""Application service: Cancel Order use case.

Cancelling a confirmed order hands its units back to the deal so that
units sold always equals the sum of confirmed quantities.  The status
swap is conditional, so two concurrent cancels restock only once.
"""

from __future__ import annotations

import logging

from ldms.application.dto import OrderDTO
from ldms.application.mapping import order_to_dto
from ldms.domain.exceptions import (
    EntityNotFoundError,
    InternalInconsistencyError,
    StoreUnavailableError,
    ValidationError,
)
from ldms.domain.model.order import OrderStatus
from ldms.domain.repository.deal_repository import DealRepository
from ldms.domain.repository.order_repository import OrderRepository
from ldms.domain.service.restock import restock_units

logger = logging.getLogger(__name__)


class CancelOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        deal_repo: DealRepository,
    ) -> None:
        self._order_repo = order_repo
        self._deal_repo = deal_repo

    def handle(self, order_id: int) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")

        # Validates the transition on the snapshot.
        order.cancel()

        swapped = self._order_repo.update_status(
            order_id, OrderStatus.CANCELLED, expected=OrderStatus.CONFIRMED
        )
        if not swapped:
            raise ValidationError(f"Order #{order_id} is no longer confirmed")

        qty = order.quantity.value
        cause: StoreUnavailableError | None = None
        try:
            restocked = restock_units(self._deal_repo, order.deal_id, qty)
        except StoreUnavailableError as exc:
            restocked, cause = False, exc
        except BaseException:
            self._revert(order_id, order.deal_id)
            raise

        if not restocked:
            reverted = self._revert(order_id, order.deal_id)
            logger.critical(
                "[order=%s] [deal=%s] restock of %s unit(s) failed; "
                "cancellation %s",
                order_id, order.deal_id, qty,
                "reverted" if reverted else "could not be reverted",
            )
            error = InternalInconsistencyError(
                f"Order #{order_id}: deal #{order.deal_id} refused or timed "
                f"out on {qty} returned unit(s)"
            )
            if cause is not None:
                raise error from cause
            raise error

        logger.info(
            "[order=%s] [deal=%s] cancelled, %s unit(s) restocked",
            order_id, order.deal_id, qty,
        )
        return order_to_dto(order)

    def _revert(self, order_id: int, deal_id: int) -> bool:
        """Put a cancelled-but-not-restocked order back to CONFIRMED."""
        try:
            return self._order_repo.update_status(
                order_id, OrderStatus.CONFIRMED, expected=OrderStatus.CANCELLED
            )
        except StoreUnavailableError:
            logger.critical(
                "[order=%s] [deal=%s] could not revert cancellation; "
                "order is cancelled without restock",
                order_id, deal_id,
            )
            return False
