"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the request layer and the application layer
without exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DealChanges:
    """Input: an administrative update.  ``None`` means "leave as is"."""

    name: str | None = None
    actual_price: str | None = None
    final_price: str | None = None
    total_units: int | None = None
    available_units: int | None = None


@dataclass(frozen=True)
class DealDTO:
    """Output: a deal as shown to the caller."""

    id: int
    name: str
    actual_price: str  # formatted, e.g. "$100.00"
    final_price: str
    total_units: int
    available_units: int
    units_sold: int
    expiry_time: str
    is_active: bool


@dataclass(frozen=True)
class OrderDTO:
    """Output: an order as shown to the caller."""

    id: int
    deal_id: int
    user_id: str
    quantity: int
    total_price: str
    status: str
    created_at: str
    idempotency_key: str | None = None
