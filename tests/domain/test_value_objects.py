"""Unit tests for Money and Quantity."""

from decimal import Decimal

import pytest

from ldms.domain.exceptions import ValidationError
from ldms.domain.model.value_objects import Money, Quantity


class TestMoney:

    def test_of_parses_strings_and_ints(self):
        assert Money.of("25.99").amount == Decimal("25.99")
        assert Money.of(10).amount == Decimal("10.00")

    def test_of_rounds_half_up_to_cents(self):
        assert Money.of("19.995").amount == Decimal("20.00")

    @pytest.mark.parametrize("raw", ["ten dollars", "Infinity", "-1"])
    def test_of_rejects_bad_input(self, raw):
        with pytest.raises(ValidationError):
            Money.of(raw)

    def test_float_amount_rejected(self):
        with pytest.raises(ValidationError, match="must be a Decimal"):
            Money(1.5)

    def test_price_times_units(self):
        assert Money.of("80") * 3 == Money.of("240")

    def test_multiplying_by_float_rejected(self):
        with pytest.raises(TypeError):
            Money.of("80") * 1.5

    def test_greater_than(self):
        assert Money.of("10") > Money.of("5")
        assert not Money.of("5") > Money.of("5")

    def test_str(self):
        assert str(Money.of("9.5")) == "$9.50"


class TestQuantity:

    def test_positive(self):
        assert Quantity(3).value == 3

    @pytest.mark.parametrize("value", [0, -1])
    def test_non_positive_rejected(self, value):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(value)

    @pytest.mark.parametrize("value", [1.0, "2", True])
    def test_non_integer_rejected(self, value):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity(value)
