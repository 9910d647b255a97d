"""Application service: Update Deal use case.

Display fields and prices may change freely within the price invariant.
Unit counts are guarded: ``available_units`` stays within
``[0, total_units]`` and ``total_units`` never drops below the units
already sold.  Existing orders keep the price they were placed at.
"""

from __future__ import annotations

import logging

from ldms.application.dto import DealChanges, DealDTO
from ldms.application.mapping import deal_to_dto
from ldms.domain.clock import Clock
from ldms.domain.exceptions import EntityNotFoundError, ValidationError
from ldms.domain.model.value_objects import Money
from ldms.domain.repository.deal_repository import DealRepository

logger = logging.getLogger(__name__)


class UpdateDealHandler:

    def __init__(self, deal_repo: DealRepository, clock: Clock) -> None:
        self._deal_repo = deal_repo
        self._clock = clock

    def handle(self, deal_id: int, changes: DealChanges) -> DealDTO:
        fields = self._to_fields(changes)
        if not fields:
            raise ValidationError("No fields to update")

        deal = self._deal_repo.get_by_id(deal_id)
        if deal is None:
            raise EntityNotFoundError(f"Deal #{deal_id} not found")

        # Fail fast on the snapshot; the store re-checks against the live row.
        deal.with_changes(fields)
        updated = self._deal_repo.update_fields(deal_id, fields)

        logger.info("[deal=%s] updated %s", deal_id, ", ".join(sorted(fields)))
        return deal_to_dto(updated, self._clock.now())

    @staticmethod
    def _to_fields(changes: DealChanges) -> dict[str, object]:
        fields: dict[str, object] = {}
        if changes.name is not None:
            fields["name"] = changes.name
        if changes.actual_price is not None:
            fields["actual_price"] = Money.of(changes.actual_price)
        if changes.final_price is not None:
            fields["final_price"] = Money.of(changes.final_price)
        if changes.total_units is not None:
            fields["total_units"] = changes.total_units
        if changes.available_units is not None:
            fields["available_units"] = changes.available_units
        return fields
