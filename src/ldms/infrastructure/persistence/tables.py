"""Relational schema for deals and orders (SQLAlchemy declarative).

The CHECK constraints repeat the domain invariants so the store itself
refuses a row that breaks them, whatever client wrote it.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class DealRecord(Base):
    __tablename__ = "deals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    actual_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    final_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total_units: Mapped[int] = mapped_column(Integer, nullable=False)
    available_units: Mapped[int] = mapped_column(Integer, nullable=False)
    # Stored as naive UTC; SQLite has no timezone-aware type.
    expiry_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (
        CheckConstraint("final_price >= 0", name="ck_deals_final_price_nonneg"),
        CheckConstraint("final_price <= actual_price", name="ck_deals_price_order"),
        CheckConstraint("available_units >= 0", name="ck_deals_available_nonneg"),
        CheckConstraint(
            "available_units <= total_units", name="ck_deals_available_le_total"
        ),
    )

    def __repr__(self) -> str:
        return f"<DealRecord #{self.id} {self.available_units}/{self.total_units}>"


class OrderRecord(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    deal_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("deals.id"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    idempotency_key: Mapped[Optional[str]] = mapped_column(
        String(128), nullable=True, unique=True
    )

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_orders_quantity_pos"),
        Index("ix_orders_deal_id", "deal_id"),
    )

    def __repr__(self) -> str:
        return f"<OrderRecord #{self.id} deal={self.deal_id} {self.status}>"
