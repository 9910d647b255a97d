"""Deal aggregate: a fixed-inventory discounted offer with an expiry.

The store owns the authoritative ``available_units`` counter; a Deal
instance is a snapshot of the row at the time it was read.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from ldms.domain.clock import DEFAULT_DEAL_WINDOW
from ldms.domain.exceptions import ValidationError
from ldms.domain.model.value_objects import Money, Quantity

# Fields an administrative update may touch.  ``expiry_time`` is absent on
# purpose: expiry is a one-way transition.
MUTABLE_FIELDS = frozenset(
    {"name", "actual_price", "final_price", "total_units", "available_units"}
)


@dataclass
class Deal:
    """Aggregate root for lightning deals.

    Invariants:
    - ``final_price <= actual_price``
    - ``0 <= available_units <= total_units``

    Use ``Deal.create()`` for new deals.  The ``__init__`` does not
    re-validate so repositories can reconstitute persisted rows cheaply.
    """

    id: int | None
    name: str
    actual_price: Money
    final_price: Money
    total_units: int
    available_units: int
    expiry_time: datetime

    # --- Factory (used for NEW deals only) ------------------------------------

    @staticmethod
    def create(
        name: str,
        actual_price: Money,
        final_price: Money,
        total_units: int,
        now: datetime,
        window: timedelta = DEFAULT_DEAL_WINDOW,
    ) -> Deal:
        """Create a new deal with its full inventory and a closing time."""
        if window <= timedelta(0):
            raise ValidationError("Deal window must be positive")
        _check_name(name)
        _check_prices(actual_price, final_price)
        _check_units(total_units, total_units)

        return Deal(
            id=None,
            name=name.strip(),
            actual_price=actual_price,
            final_price=final_price,
            total_units=total_units,
            available_units=total_units,
            expiry_time=now + window,
        )

    # --- Queries --------------------------------------------------------------

    def is_active(self, now: datetime) -> bool:
        return now < self.expiry_time

    @property
    def units_sold(self) -> int:
        return self.total_units - self.available_units

    def price_for(self, quantity: Quantity) -> Money:
        """Total price of *quantity* units at the current final price."""
        return self.final_price * quantity.value

    # --- Administrative changes -----------------------------------------------

    def with_changes(self, changes: Mapping[str, object]) -> Deal:
        """Return a copy with *changes* applied, enforcing every invariant.

        A new ``total_units`` shifts ``available_units`` by the same delta,
        so units already sold stay sold.  An explicit ``available_units`` is
        applied afterwards and must land within ``[0, total_units]``.
        """
        unknown = set(changes) - MUTABLE_FIELDS
        if unknown:
            raise ValidationError(
                f"Cannot update field(s): {', '.join(sorted(unknown))}"
            )

        name = changes.get("name", self.name)
        _check_name(name)
        actual_price = changes.get("actual_price", self.actual_price)
        final_price = changes.get("final_price", self.final_price)
        _check_prices(actual_price, final_price)

        total = self.total_units
        available = self.available_units
        if "total_units" in changes:
            new_total = changes["total_units"]
            _check_count("Total units", new_total)
            if new_total < self.units_sold:
                raise ValidationError(
                    f"Total units cannot drop below the {self.units_sold} "
                    f"already sold (got {new_total})"
                )
            available += new_total - total
            total = new_total
        if "available_units" in changes:
            available = changes["available_units"]
        _check_units(total, available)

        return replace(
            self,
            name=name.strip(),
            actual_price=actual_price,
            final_price=final_price,
            total_units=total,
            available_units=available,
        )


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _check_name(name: object) -> None:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Deal name is required")


def _check_prices(actual_price: object, final_price: object) -> None:
    if not isinstance(actual_price, Money) or not isinstance(final_price, Money):
        raise ValidationError("Deal prices must be Money values")
    if final_price > actual_price:
        raise ValidationError(
            f"Final price {final_price} cannot exceed actual price {actual_price}"
        )


def _check_count(label: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{label} must be an integer, got {value!r}")
    if value < 0:
        raise ValidationError(f"{label} cannot be negative, got {value}")


def _check_units(total: object, available: object) -> None:
    _check_count("Total units", total)
    _check_count("Available units", available)
    if available > total:
        raise ValidationError(
            f"Available units ({available}) cannot exceed total units ({total})"
        )
