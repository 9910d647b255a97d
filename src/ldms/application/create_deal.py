"""Application service: Create Deal use case."""

from __future__ import annotations

import logging
from datetime import timedelta

from ldms.application.dto import DealDTO
from ldms.application.mapping import deal_to_dto
from ldms.domain.clock import DEFAULT_DEAL_WINDOW, Clock
from ldms.domain.model.deal import Deal
from ldms.domain.model.value_objects import Money
from ldms.domain.repository.deal_repository import DealRepository

logger = logging.getLogger(__name__)


class CreateDealHandler:

    def __init__(
        self,
        deal_repo: DealRepository,
        clock: Clock,
        window: timedelta = DEFAULT_DEAL_WINDOW,
    ) -> None:
        self._deal_repo = deal_repo
        self._clock = clock
        self._window = window

    def handle(
        self,
        name: str,
        actual_price: str,
        final_price: str,
        total_units: int,
    ) -> DealDTO:
        """Open a new deal with all units available until now + window."""
        now = self._clock.now()
        deal = Deal.create(
            name=name,
            actual_price=Money.of(actual_price),
            final_price=Money.of(final_price),
            total_units=total_units,
            now=now,
            window=self._window,
        )
        saved = self._deal_repo.add(deal)
        logger.info(
            "[deal=%s] created '%s' units=%s final=%s expires=%s",
            saved.id, saved.name, saved.total_units, saved.final_price,
            saved.expiry_time.isoformat(),
        )
        return deal_to_dto(saved, now)
