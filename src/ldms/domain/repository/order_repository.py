"""Abstract store for the Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ldms.domain.model.order import Order, OrderStatus


class OrderRepository(ABC):

    @abstractmethod
    def add(self, order: Order) -> Order:
        """Persist a new order and return it with its store-assigned ID.

        Raises DuplicateRequestError if ``order.idempotency_key`` is taken.
        """

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def get_by_idempotency_key(self, key: str) -> Order | None:
        """Return the order placed under *key*, or None."""

    @abstractmethod
    def list_by_deal(self, deal_id: int) -> list[Order]:
        """Return every order recorded against a deal, oldest first."""

    @abstractmethod
    def update_status(
        self,
        order_id: int,
        status: OrderStatus,
        expected: OrderStatus | None = None,
    ) -> bool:
        """Set an order's status.

        With *expected*, the write only happens if the stored status still
        equals it.  Returns False if nothing was updated.
        """
