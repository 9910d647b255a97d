"""SQLAlchemy-backed implementation of OrderRepository."""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from ldms.domain.exceptions import DuplicateRequestError, ValidationError
from ldms.domain.model.order import Order, OrderStatus
from ldms.domain.model.value_objects import Money, Quantity
from ldms.domain.repository.order_repository import OrderRepository
from ldms.infrastructure.persistence.database import (
    from_store_time,
    to_store_time,
    translate_store_errors,
)
from ldms.infrastructure.persistence.tables import OrderRecord


class SqlOrderRepository(OrderRepository):

    def __init__(self, sessions: sessionmaker[Session]) -> None:
        self._sessions = sessions

    # --- OrderRepository interface --------------------------------------------

    @translate_store_errors
    def add(self, order: Order) -> Order:
        record = self._to_record(order)
        try:
            with self._sessions.begin() as session:
                session.add(record)
                session.flush()
                return self._to_domain(record)
        except IntegrityError as exc:
            key = order.idempotency_key
            if key is not None and self.get_by_idempotency_key(key) is not None:
                raise DuplicateRequestError(key) from exc
            raise ValidationError(
                f"Order for deal #{order.deal_id} rejected by store "
                f"constraints: {exc.orig}"
            ) from exc

    @translate_store_errors
    def get_by_id(self, order_id: int) -> Order | None:
        with self._sessions() as session:
            record = session.get(OrderRecord, order_id)
            return self._to_domain(record) if record is not None else None

    @translate_store_errors
    def get_by_idempotency_key(self, key: str) -> Order | None:
        with self._sessions() as session:
            record = session.scalars(
                select(OrderRecord).where(OrderRecord.idempotency_key == key)
            ).one_or_none()
            return self._to_domain(record) if record is not None else None

    @translate_store_errors
    def list_by_deal(self, deal_id: int) -> list[Order]:
        with self._sessions() as session:
            records = session.scalars(
                select(OrderRecord)
                .where(OrderRecord.deal_id == deal_id)
                .order_by(OrderRecord.id)
            )
            return [self._to_domain(r) for r in records]

    @translate_store_errors
    def update_status(
        self,
        order_id: int,
        status: OrderStatus,
        expected: OrderStatus | None = None,
    ) -> bool:
        stmt = update(OrderRecord).where(OrderRecord.id == order_id)
        if expected is not None:
            stmt = stmt.where(OrderRecord.status == expected.value)
        with self._sessions.begin() as session:
            result = session.execute(
                stmt.values(status=status.value)
                .execution_options(synchronize_session=False)
            )
            updated = result.rowcount == 1
        return updated

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_record(order: Order) -> OrderRecord:
        return OrderRecord(
            deal_id=order.deal_id,
            user_id=order.user_id,
            quantity=order.quantity.value,
            total_price=order.total_price.amount,
            status=order.status.value,
            created_at=to_store_time(order.created_at),
            idempotency_key=order.idempotency_key,
        )

    @staticmethod
    def _to_domain(record: OrderRecord) -> Order:
        return Order(
            id=record.id,
            deal_id=record.deal_id,
            user_id=record.user_id,
            quantity=Quantity(record.quantity),
            total_price=Money.of(record.total_price),
            status=OrderStatus(record.status),
            created_at=from_store_time(record.created_at),
            idempotency_key=record.idempotency_key,
        )
