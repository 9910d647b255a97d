"""In-memory fakes for testing.

These implement the same abstract interfaces as the SQL repositories,
including the conditional-update contract: every counter change happens
under one lock, the way a single UPDATE statement would run in the store.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime, timedelta, timezone

from ldms.domain.clock import Clock
from ldms.domain.exceptions import (
    DuplicateRequestError,
    EntityNotFoundError,
    StoreUnavailableError,
)
from ldms.domain.model.deal import Deal
from ldms.domain.model.order import Order, OrderStatus
from ldms.domain.repository.deal_repository import DealRepository, DecrementResult
from ldms.domain.repository.order_repository import OrderRepository

T0 = datetime(2024, 11, 29, 9, 0, tzinfo=timezone.utc)


class FakeClock(Clock):

    def __init__(self, now: datetime = T0) -> None:
        self._now = now

    def now(self) -> datetime:
        return self._now

    def advance(self, **kwargs: float) -> None:
        self._now += timedelta(**kwargs)


class FakeDealRepository(DealRepository):

    def __init__(self, deals: list[Deal] | None = None) -> None:
        self._lock = threading.Lock()
        self._store: dict[int, Deal] = {}
        self._next_id = 1
        self.increment_failures = 0
        self.refuse_increments = False
        for d in deals or []:
            self.add(d)

    def add(self, deal: Deal) -> Deal:
        with self._lock:
            saved = replace(deal, id=deal.id if deal.id is not None else self._next_id)
            self._next_id = max(self._next_id, saved.id) + 1
            self._store[saved.id] = saved
            return replace(saved)

    def get_by_id(self, deal_id: int) -> Deal | None:
        with self._lock:
            deal = self._store.get(deal_id)
            return replace(deal) if deal is not None else None

    def list_all(self) -> list[Deal]:
        with self._lock:
            return [replace(d) for d in sorted(self._store.values(), key=lambda d: d.id)]

    def update_fields(self, deal_id: int, fields: Mapping[str, object]) -> Deal:
        with self._lock:
            deal = self._store.get(deal_id)
            if deal is None:
                raise EntityNotFoundError(f"Deal #{deal_id} not found")
            updated = deal.with_changes(fields)
            self._store[deal_id] = updated
            return replace(updated)

    def decrement_available_units(self, deal_id: int, quantity: int) -> DecrementResult:
        with self._lock:
            deal = self._store.get(deal_id)
            if deal is None:
                raise EntityNotFoundError(f"Deal #{deal_id} not found")
            if deal.available_units < quantity:
                return DecrementResult(success=False, remaining=deal.available_units)
            deal.available_units -= quantity
            return DecrementResult(success=True, remaining=deal.available_units)

    def increment_available_units(self, deal_id: int, quantity: int) -> bool:
        with self._lock:
            if self.increment_failures > 0:
                self.increment_failures -= 1
                raise StoreUnavailableError("simulated timeout on increment")
            deal = self._store.get(deal_id)
            if self.refuse_increments or deal is None:
                return False
            if deal.available_units + quantity > deal.total_units:
                return False
            deal.available_units += quantity
            return True


class FakeOrderRepository(OrderRepository):

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._store: dict[int, Order] = {}
        self._next_id = 1
        self.add_failures: list[BaseException] = []

    def fail_next_add(self, exc: BaseException) -> None:
        """Make the next ``add`` raise *exc* instead of persisting."""
        self.add_failures.append(exc)

    def add(self, order: Order) -> Order:
        with self._lock:
            if self.add_failures:
                raise self.add_failures.pop(0)
            key = order.idempotency_key
            if key is not None and any(
                o.idempotency_key == key for o in self._store.values()
            ):
                raise DuplicateRequestError(key)
            saved = replace(order, id=self._next_id)
            self._next_id += 1
            self._store[saved.id] = saved
            return replace(saved)

    def get_by_id(self, order_id: int) -> Order | None:
        with self._lock:
            order = self._store.get(order_id)
            return replace(order) if order is not None else None

    def get_by_idempotency_key(self, key: str) -> Order | None:
        with self._lock:
            for order in self._store.values():
                if order.idempotency_key == key:
                    return replace(order)
            return None

    def list_by_deal(self, deal_id: int) -> list[Order]:
        with self._lock:
            return [
                replace(o)
                for o in sorted(self._store.values(), key=lambda o: o.id)
                if o.deal_id == deal_id
            ]

    def update_status(
        self,
        order_id: int,
        status: OrderStatus,
        expected: OrderStatus | None = None,
    ) -> bool:
        with self._lock:
            order = self._store.get(order_id)
            if order is None:
                return False
            if expected is not None and order.status is not expected:
                return False
            order.status = status
            return True
