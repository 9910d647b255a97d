"""Unit tests for the Order aggregate and its status machine."""

import pytest

from ldms.domain.exceptions import ValidationError
from ldms.domain.model.deal import Deal
from ldms.domain.model.order import Order, OrderStatus, can_transition
from ldms.domain.model.value_objects import Money, Quantity
from tests.fakes import T0


def _deal(total=10) -> Deal:
    deal = Deal.create("Kettle", Money.of("100"), Money.of("80"), total, T0)
    deal.id = 7
    return deal


def _order() -> Order:
    return Order.place(_deal(), "alice", Quantity(3), T0)


class TestOrderPlace:

    def test_new_order_is_pending(self):
        order = _order()
        assert order.status == OrderStatus.PENDING
        assert order.id is None
        assert order.deal_id == 7
        assert order.created_at == T0

    def test_total_price_snapshot(self):
        assert _order().total_price == Money.of("240")

    def test_price_change_after_placement_does_not_affect_order(self):
        deal = _deal()
        order = Order.place(deal, "alice", Quantity(2), T0)
        deal.final_price = Money.of("10")
        assert order.total_price == Money.of("160")

    def test_quantity_above_total_units_is_left_to_the_store(self):
        order = Order.place(_deal(total=10), "alice", Quantity(11), T0)
        assert order.total_price == Money.of("880")

    def test_blank_user_rejected(self):
        with pytest.raises(ValidationError, match="User ID is required"):
            Order.place(_deal(), "  ", Quantity(1), T0)

    def test_unsaved_deal_rejected(self):
        deal = _deal()
        deal.id = None
        with pytest.raises(ValidationError, match="unsaved deal"):
            Order.place(deal, "alice", Quantity(1), T0)

    def test_blank_idempotency_key_rejected(self):
        with pytest.raises(ValidationError, match="Idempotency key"):
            Order.place(_deal(), "alice", Quantity(1), T0, idempotency_key=" ")


class TestOrderTransitions:

    def test_pending_to_confirmed(self):
        order = _order()
        order.confirm()
        assert order.status == OrderStatus.CONFIRMED
        assert order.is_terminal

    def test_pending_to_rejected(self):
        order = _order()
        order.reject()
        assert order.status == OrderStatus.REJECTED

    def test_confirmed_to_cancelled(self):
        order = _order()
        order.confirm()
        order.cancel()
        assert order.status == OrderStatus.CANCELLED

    def test_pending_cannot_be_cancelled(self):
        with pytest.raises(ValidationError, match="from pending to cancelled"):
            _order().cancel()

    def test_rejected_is_final(self):
        order = _order()
        order.reject()
        with pytest.raises(ValidationError):
            order.confirm()

    def test_cancelled_cannot_be_cancelled_again(self):
        order = _order()
        order.confirm()
        order.cancel()
        with pytest.raises(ValidationError, match="from cancelled to cancelled"):
            order.cancel()

    @pytest.mark.parametrize("status", list(OrderStatus))
    def test_nothing_returns_to_pending(self, status):
        assert not can_transition(status, OrderStatus.PENDING)
