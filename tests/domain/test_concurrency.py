"""Concurrent placements racing for the last units of a deal."""

import threading
from concurrent.futures import ThreadPoolExecutor

from ldms.domain.exceptions import InsufficientInventoryError
from ldms.domain.model.deal import Deal
from ldms.domain.model.order import OrderStatus
from ldms.domain.model.value_objects import Money
from ldms.domain.service.inventory_controller import InventoryController
from tests.fakes import T0, FakeClock, FakeDealRepository, FakeOrderRepository


def _race(total_units: int, requests: list[int]):
    """Fire every request at once; return (confirmed, rejected, deal_repo, order_repo)."""
    deal = Deal.create("Console", Money.of("500"), Money.of("399"), total_units, T0)
    deal_repo = FakeDealRepository([deal])
    order_repo = FakeOrderRepository()
    controller = InventoryController(deal_repo, order_repo, FakeClock())
    start = threading.Barrier(len(requests))

    def place(i: int, qty: int):
        start.wait()
        try:
            return controller.place_order(1, f"user-{i}", qty)
        except InsufficientInventoryError as exc:
            return exc

    with ThreadPoolExecutor(max_workers=len(requests)) as pool:
        results = list(pool.map(place, range(len(requests)), requests))

    confirmed = [r for r in results if not isinstance(r, Exception)]
    rejected = [r for r in results if isinstance(r, InsufficientInventoryError)]
    return confirmed, rejected, deal_repo, order_repo


class TestLastUnitsRace:

    def test_ten_buyers_for_five_units(self):
        confirmed, rejected, deal_repo, order_repo = _race(5, [1] * 10)

        assert len(confirmed) == 5
        assert len(rejected) == 5
        assert deal_repo.get_by_id(1).available_units == 0
        assert len(order_repo.list_by_deal(1)) == 5

    def test_no_unnecessary_rejection(self):
        # 4 x 2 units against 8: everyone fits, nobody may be turned away.
        confirmed, rejected, deal_repo, _ = _race(8, [2] * 4)

        assert len(confirmed) == 4
        assert rejected == []
        assert deal_repo.get_by_id(1).available_units == 0

    def test_mixed_quantities_never_oversell(self):
        confirmed, _, deal_repo, order_repo = _race(7, [3, 3, 3, 2, 2, 1, 1])

        sold = sum(o.quantity.value for o in confirmed)
        deal = deal_repo.get_by_id(1)
        assert sold <= 7
        assert deal.total_units - deal.available_units == sold
        assert all(o.status == OrderStatus.CONFIRMED for o in order_repo.list_by_deal(1))
