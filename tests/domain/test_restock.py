"""Tests for the shared restock helper."""

import pytest

from ldms.domain.exceptions import StoreUnavailableError
from ldms.domain.model.deal import Deal
from ldms.domain.model.value_objects import Money
from ldms.domain.service.restock import RESTORE_ATTEMPTS, restock_units
from tests.fakes import T0, FakeDealRepository


def _setup(sold=2):
    deal_repo = FakeDealRepository(
        [Deal.create("Mixer", Money.of("60"), Money.of("45"), 5, T0)]
    )
    deal_repo.decrement_available_units(1, sold)
    return deal_repo


class TestRestockUnits:

    def test_restocks(self):
        deal_repo = _setup(sold=2)
        assert restock_units(deal_repo, 1, 2) is True
        assert deal_repo.get_by_id(1).available_units == 5

    def test_retries_until_the_store_answers(self):
        deal_repo = _setup(sold=2)
        deal_repo.increment_failures = RESTORE_ATTEMPTS - 1

        assert restock_units(deal_repo, 1, 2) is True
        assert deal_repo.increment_failures == 0

    def test_raises_last_timeout_after_all_attempts(self):
        deal_repo = _setup(sold=2)
        deal_repo.increment_failures = RESTORE_ATTEMPTS + 1

        with pytest.raises(StoreUnavailableError):
            restock_units(deal_repo, 1, 2)

        assert deal_repo.increment_failures == 1
        assert deal_repo.get_by_id(1).available_units == 3

    def test_refusal_is_not_retried(self):
        deal_repo = _setup(sold=1)
        assert restock_units(deal_repo, 1, 2) is False
        assert deal_repo.get_by_id(1).available_units == 4
