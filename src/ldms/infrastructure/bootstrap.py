"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from dataclasses import dataclass

from ldms.domain.clock import Clock, SystemClock
from ldms.infrastructure.config import Settings
from ldms.infrastructure.persistence.database import (
    create_store_engine,
    session_factory,
)
from ldms.infrastructure.persistence.sql_deal_repository import SqlDealRepository
from ldms.infrastructure.persistence.sql_order_repository import SqlOrderRepository


@dataclass(frozen=True)
class Container:
    settings: Settings
    deal_repo: SqlDealRepository
    order_repo: SqlOrderRepository
    clock: Clock


def build(settings: Settings | None = None, clock: Clock | None = None) -> Container:
    settings = settings or Settings.from_env()
    engine = create_store_engine(settings.database_url, settings.store_timeout)
    sessions = session_factory(engine)
    return Container(
        settings=settings,
        deal_repo=SqlDealRepository(sessions),
        order_repo=SqlOrderRepository(sessions),
        clock=clock or SystemClock(),
    )
