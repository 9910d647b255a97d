"""Domain -> DTO mapping shared by the handlers."""

from __future__ import annotations

from datetime import datetime

from ldms.application.dto import DealDTO, OrderDTO
from ldms.domain.model.deal import Deal
from ldms.domain.model.order import Order

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S UTC"


def deal_to_dto(deal: Deal, now: datetime) -> DealDTO:
    return DealDTO(
        id=deal.id,  # type: ignore[arg-type]
        name=deal.name,
        actual_price=str(deal.actual_price),
        final_price=str(deal.final_price),
        total_units=deal.total_units,
        available_units=deal.available_units,
        units_sold=deal.units_sold,
        expiry_time=deal.expiry_time.strftime(TIMESTAMP_FORMAT),
        is_active=deal.is_active(now),
    )


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        deal_id=order.deal_id,
        user_id=order.user_id,
        quantity=order.quantity.value,
        total_price=str(order.total_price),
        status=order.status.value,
        created_at=order.created_at.strftime(TIMESTAMP_FORMAT),
        idempotency_key=order.idempotency_key,
    )
