"""Application service: Show / List Deals use cases (queries)."""

from __future__ import annotations

from ldms.application.dto import DealDTO
from ldms.application.mapping import deal_to_dto
from ldms.domain.clock import Clock
from ldms.domain.exceptions import EntityNotFoundError
from ldms.domain.repository.deal_repository import DealRepository


class ShowDealHandler:

    def __init__(self, deal_repo: DealRepository, clock: Clock) -> None:
        self._deal_repo = deal_repo
        self._clock = clock

    def handle(self, deal_id: int) -> DealDTO:
        deal = self._deal_repo.get_by_id(deal_id)
        if deal is None:
            raise EntityNotFoundError(f"Deal #{deal_id} not found")
        return deal_to_dto(deal, self._clock.now())


class ListDealsHandler:

    def __init__(self, deal_repo: DealRepository, clock: Clock) -> None:
        self._deal_repo = deal_repo
        self._clock = clock

    def handle(self) -> list[DealDTO]:
        now = self._clock.now()
        return [deal_to_dto(deal, now) for deal in self._deal_repo.list_all()]
