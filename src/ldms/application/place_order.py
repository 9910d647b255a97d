"""Application service: Place Order use case.

Thin wrapper over the Inventory Controller that hands back a DTO.
"""

from __future__ import annotations

from ldms.application.dto import OrderDTO
from ldms.application.mapping import order_to_dto
from ldms.domain.clock import Clock
from ldms.domain.repository.deal_repository import DealRepository
from ldms.domain.repository.order_repository import OrderRepository
from ldms.domain.service.inventory_controller import InventoryController


class PlaceOrderHandler:

    def __init__(
        self,
        deal_repo: DealRepository,
        order_repo: OrderRepository,
        clock: Clock,
    ) -> None:
        self._controller = InventoryController(deal_repo, order_repo, clock)

    def handle(
        self,
        deal_id: int,
        user_id: str,
        quantity: int,
        idempotency_key: str | None = None,
    ) -> OrderDTO:
        order = self._controller.place_order(
            deal_id=deal_id,
            user_id=user_id,
            quantity=quantity,
            idempotency_key=idempotency_key,
        )
        return order_to_dto(order)
