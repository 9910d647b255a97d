"""SQLAlchemy-backed implementation of DealRepository.

``available_units`` is only ever changed by single conditional UPDATE
statements; the row is never read into Python, adjusted, and written
back on the order path.
"""

from __future__ import annotations

from collections.abc import Mapping

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from ldms.domain.exceptions import EntityNotFoundError, ValidationError
from ldms.domain.model.deal import Deal
from ldms.domain.model.value_objects import Money
from ldms.domain.repository.deal_repository import DealRepository, DecrementResult
from ldms.infrastructure.persistence.database import (
    from_store_time,
    to_store_time,
    translate_store_errors,
)
from ldms.infrastructure.persistence.tables import DealRecord


class SqlDealRepository(DealRepository):

    def __init__(self, sessions: sessionmaker[Session]) -> None:
        self._sessions = sessions

    # --- DealRepository interface ---------------------------------------------

    @translate_store_errors
    def add(self, deal: Deal) -> Deal:
        record = DealRecord(
            name=deal.name,
            actual_price=deal.actual_price.amount,
            final_price=deal.final_price.amount,
            total_units=deal.total_units,
            available_units=deal.available_units,
            expiry_time=to_store_time(deal.expiry_time),
        )
        with self._sessions.begin() as session:
            session.add(record)
            session.flush()
            return self._to_domain(record)

    @translate_store_errors
    def get_by_id(self, deal_id: int) -> Deal | None:
        with self._sessions() as session:
            record = session.get(DealRecord, deal_id)
            return self._to_domain(record) if record is not None else None

    @translate_store_errors
    def list_all(self) -> list[Deal]:
        with self._sessions() as session:
            records = session.scalars(select(DealRecord).order_by(DealRecord.id))
            return [self._to_domain(r) for r in records]

    @translate_store_errors
    def update_fields(self, deal_id: int, fields: Mapping[str, object]) -> Deal:
        try:
            with self._sessions.begin() as session:
                record = session.scalars(
                    select(DealRecord)
                    .where(DealRecord.id == deal_id)
                    .with_for_update()
                ).one_or_none()
                if record is None:
                    raise EntityNotFoundError(f"Deal #{deal_id} not found")

                # Row is locked: the change is applied to live counts.
                updated = self._to_domain(record).with_changes(fields)
                record.name = updated.name
                record.actual_price = updated.actual_price.amount
                record.final_price = updated.final_price.amount
                record.total_units = updated.total_units
                record.available_units = updated.available_units
                session.flush()
                return updated
        except IntegrityError as exc:
            raise ValidationError(
                f"Deal #{deal_id} update rejected by store constraints: {exc.orig}"
            ) from exc

    @translate_store_errors
    def decrement_available_units(self, deal_id: int, quantity: int) -> DecrementResult:
        _check_positive(quantity)
        with self._sessions.begin() as session:
            result = session.execute(
                update(DealRecord)
                .where(
                    DealRecord.id == deal_id,
                    DealRecord.available_units >= quantity,
                )
                .values(available_units=DealRecord.available_units - quantity)
                .execution_options(synchronize_session=False)
            )
            success = result.rowcount == 1
            remaining = session.scalar(
                select(DealRecord.available_units).where(DealRecord.id == deal_id)
            )
        if remaining is None:
            raise EntityNotFoundError(f"Deal #{deal_id} not found")
        return DecrementResult(success=success, remaining=remaining)

    @translate_store_errors
    def increment_available_units(self, deal_id: int, quantity: int) -> bool:
        _check_positive(quantity)
        with self._sessions.begin() as session:
            result = session.execute(
                update(DealRecord)
                .where(
                    DealRecord.id == deal_id,
                    DealRecord.available_units + quantity <= DealRecord.total_units,
                )
                .values(available_units=DealRecord.available_units + quantity)
                .execution_options(synchronize_session=False)
            )
            restored = result.rowcount == 1
        return restored

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_domain(record: DealRecord) -> Deal:
        return Deal(
            id=record.id,
            name=record.name,
            actual_price=Money.of(record.actual_price),
            final_price=Money.of(record.final_price),
            total_units=record.total_units,
            available_units=record.available_units,
            expiry_time=from_store_time(record.expiry_time),
        )


def _check_positive(quantity: int) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError(f"Unit adjustment must be a positive integer, got {quantity!r}")
