"""
Тесты для Financial — Discounting, Weighted Averages & Percentages

Проверяемые инварианты:
1. pv: period < 1 → cashflow без изменений
2. npv: период = позиция, rate = 0 → простая сумма
3. weighted_avg: равные веса → mean, LengthMismatch
4. pct / pct_change: DivisionByZero при нулевом знаменателе
5. pct_change_array: previous == 0 → 0 (graceful), ключи сдвинуты на один
"""

import pytest
from structlog.testing import capture_logs

from src.core.math.errors import (
    DivisionByZeroError,
    InvalidOperandError,
    LengthMismatchError,
)
from src.core.math.financial import (
    npv,
    pct,
    pct_change,
    pct_change_array,
    pv,
    weighted_avg,
)
from src.core.math.statistics import mean


# =============================================================================
# ТЕСТЫ: Present Value
# =============================================================================


class TestPV:
    """Тесты pv."""

    def test_period_zero_returns_cashflow(self):
        assert pv(100, "0.1", 0) == "100.0000000000"
        assert pv(100, 0.1) == "100.0000000000"

    def test_fractional_period_below_one_returns_cashflow(self):
        assert pv(100, "0.1", "0.5") == "100.0000000000"

    def test_period_just_below_one_not_discounted(self):
        """Период сравнивается с 1 без округления до scale."""
        assert pv(100, "1", "0.99999999999") == "100.0000000000"
        assert pv(100, "1", 1) == "50.0000000000"

    def test_single_period(self):
        assert pv(110, "0.1", 1) == "100.0000000000"

    def test_two_periods(self):
        assert pv(121, "0.1", 2) == "100.0000000000"

    def test_zero_rate(self):
        assert pv(100, 0, 5) == "100.0000000000"

    def test_float_rate_no_binary_error(self):
        """float-ставка 0.1 интерпретируется как ровно 0.1."""
        assert pv("133.1", 0.1, 3) == "100.0000000000"

    def test_rate_minus_one_raises(self):
        with pytest.raises(DivisionByZeroError):
            pv(100, -1, 1)


class TestNPV:
    """Тесты npv."""

    def test_zero_rate_is_raw_sum(self):
        assert npv([100, 100], 0) == "200.0000000000"

    def test_break_even(self):
        assert npv([-100, 110], "0.1") == "0.0000000000"

    def test_period_is_position(self):
        assert npv([0, 0, 121], "0.1") == "100.0000000000"

    def test_mapping_keys_do_not_affect_periods(self):
        assert npv({"y2024": -100, "y2025": 110}, "0.1") == "0.0000000000"

    def test_empty(self):
        assert npv([], "0.1") == "0.0000000000"

    def test_small_cashflows_accumulate(self):
        assert npv(["0.00000000004"] * 10, 0) == "0.0000000004"

    def test_non_numeric_cashflow_raises(self):
        with pytest.raises(InvalidOperandError):
            npv([100, "abc"], "0.1")


# =============================================================================
# ТЕСТЫ: Weighted Average
# =============================================================================


class TestWeightedAvg:
    """Тесты weighted_avg."""

    def test_equal_weights_equal_mean(self):
        assert weighted_avg([1, 2, 3], [1, 1, 1]) == mean([1, 2, 3])

    def test_unequal_weights(self):
        assert weighted_avg([10, 20], [3, 1]) == "12.5000000000"

    def test_keyed_weights(self):
        assert weighted_avg({"a": 10, "b": 20}, {"b": 1, "a": 3}) == "12.5000000000"

    def test_fractional_weights(self):
        assert weighted_avg([100, 200], ["0.25", "0.75"]) == "175.0000000000"

    def test_length_mismatch(self):
        with pytest.raises(LengthMismatchError) as exc_info:
            weighted_avg([1, 2], [1])

        assert (exc_info.value.left, exc_info.value.right) == (2, 1)

    def test_zero_weight_sum_raises(self):
        with pytest.raises(DivisionByZeroError):
            weighted_avg([1, 2], [1, -1])


# =============================================================================
# ТЕСТЫ: Percentages
# =============================================================================


class TestPct:
    """Тесты pct и pct_change."""

    def test_pct(self):
        assert pct(50, 200) == "0.2500000000"
        assert pct(1, 3) == "0.3333333333"

    def test_pct_zero_total_raises(self):
        with pytest.raises(DivisionByZeroError):
            pct(50, 0)

    def test_pct_change(self):
        assert pct_change(110, 100) == "0.1000000000"
        assert pct_change(90, 100) == "-0.1000000000"

    def test_pct_change_zero_previous_raises(self):
        """Скалярный pct_change не имеет graceful fallback."""
        with pytest.raises(DivisionByZeroError):
            pct_change(5, 0)


class TestPctChangeArray:
    """Тесты pct_change_array."""

    def test_sequence(self):
        assert pct_change_array([10, 20, 15]) == {1: "1.0000000000", 2: "-0.2500000000"}

    def test_zero_previous_is_zero(self):
        """previous == 0 → 0, без исключения."""
        assert pct_change_array([0, 5]) == {1: "0.0000000000"}

    def test_zero_previous_in_middle(self):
        assert pct_change_array([10, 0, 5, 10]) == {
            1: "-1.0000000000",
            2: "0.0000000000",
            3: "1.0000000000",
        }

    def test_keys_shifted_by_one(self):
        result = pct_change_array({"2019": 100, "2020": 110, "2021": 99})
        assert result == {"2020": "0.1000000000", "2021": "-0.1000000000"}

    @pytest.mark.parametrize("values", [[], [7]])
    def test_too_short(self, values):
        assert pct_change_array(values) == {}

    def test_non_numeric_raises(self):
        with pytest.raises(InvalidOperandError):
            pct_change_array(["x", 1])

    def test_zero_previous_logged(self):
        with capture_logs() as logs:
            pct_change_array({"a": 0, "b": 1})

        assert {"event": "pct_change_zero_previous", "log_level": "debug", "key": "b"} in logs
