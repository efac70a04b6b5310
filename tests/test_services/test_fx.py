"""Tests for currency conversion."""
import math

import pytest

from zakat_engine.services.errors import ValidationError
from zakat_engine.services.fx import convert_amount, format_amount


class TestConvertAmount:
    """Tests for convert_amount function."""

    def test_multiplies_by_rate(self):
        """100 EUR at 1.1 is 110 in the base currency."""
        assert convert_amount(100, 1.1) == pytest.approx(110.0)

    def test_identity_rate(self):
        """A rate of 1 leaves the amount unchanged."""
        assert convert_amount(250.5, 1.0) == 250.5

    def test_zero_amount(self):
        """Zero converts to zero."""
        assert convert_amount(0, 3.67) == 0.0

    def test_result_is_unrounded(self):
        """Conversion keeps full precision."""
        assert convert_amount(1, 1 / 3) == pytest.approx(0.333333333333)
        assert convert_amount(1, 1 / 3) != round(1 / 3, 2)

    @pytest.mark.parametrize('amount,rate', [
        (-1, 1.0),
        (1, -0.5),
        (math.nan, 1.0),
        (1, math.inf),
        ('100', 1.0),
        (None, 1.0),
        (True, 1.0),
    ])
    def test_rejects_invalid_input(self, amount, rate):
        """Negative, non-finite and non-numeric input is rejected."""
        with pytest.raises(ValidationError):
            convert_amount(amount, rate)

    def test_validation_error_is_value_error(self):
        """Callers catching ValueError still see validation failures."""
        with pytest.raises(ValueError):
            convert_amount(-5, 1.0)


class TestFormatAmount:
    """Tests for format_amount function."""

    def test_rounds_to_two_places(self):
        assert format_amount(10.456) == 10.46

    def test_custom_places(self):
        assert format_amount(1.23456, places=4) == 1.2346
