"""Abstract store for the Deal aggregate.

Defined in the domain layer so the domain never depends on
infrastructure.  The store owns ``available_units``: every mutation of
that counter goes through one of its conditional updates, which must run
as a single indivisible statement against the backing store.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass

from ldms.domain.model.deal import Deal


@dataclass(frozen=True)
class DecrementResult:
    """Outcome of a conditional decrement.

    ``remaining`` is the counter after the update on success, or the value
    that made the update refuse on failure.
    """

    success: bool
    remaining: int


class DealRepository(ABC):

    @abstractmethod
    def add(self, deal: Deal) -> Deal:
        """Persist a new deal and return it with its store-assigned ID."""

    @abstractmethod
    def get_by_id(self, deal_id: int) -> Deal | None:
        """Return a deal by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Deal]:
        """Return every deal, oldest first."""

    @abstractmethod
    def update_fields(self, deal_id: int, fields: Mapping[str, object]) -> Deal:
        """Apply an administrative change and return the updated deal.

        ``fields`` follows ``Deal.with_changes`` semantics and is applied
        against the row as it is at update time, not as it was read.
        Raises EntityNotFoundError for an unknown ID and ValidationError if
        the change would break a unit or price invariant.
        """

    @abstractmethod
    def decrement_available_units(self, deal_id: int, quantity: int) -> DecrementResult:
        """Subtract *quantity* only if at least that many units remain."""

    @abstractmethod
    def increment_available_units(self, deal_id: int, quantity: int) -> bool:
        """Add back *quantity* units, refusing to exceed ``total_units``.

        Returns False when the deal is missing or the add would overflow.
        """
