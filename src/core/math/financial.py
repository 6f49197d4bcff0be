"""
Financial — Discounting, Weighted Averages & Percentages

Модуль реализует финансовые формулы поверх decimal-примитивов:
- pv / npv (дисконтирование по единой ставке)
- weighted_avg
- pct / pct_change / pct_change_array

ФОРМУЛЫ:
    pv(cf, r, t)      = cf                      если t < 1
                      = cf / (1 + r)^t          иначе
    npv(cfs, r)       = Σ pv(cf_t, r, t)        t: позиция 0, 1, 2, ...
    weighted_avg(v,w) = Σ v_i * w_i / Σ w_i
    pct(p, total)     = p / total
    pct_change(c, p)  = (c - p) / p

GRACEFUL DEGRADATION:
    pct_change_array: если previous == 0, результат для позиции = 0
    (скалярный pct_change в этом случае бросает DivisionByZeroError).
"""

from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

import structlog

from src.core.math.decimal_arithmetic import (
    Numeric,
    add,
    div,
    keyed_items,
    materialize,
    normalize,
    pow,
    resolve_scale,
    sub,
    sum_numeric,
    to_decimal,
    working_scale,
)
from src.core.math.errors import LengthMismatchError
from src.core.math.statistics import sumxy

logger = structlog.get_logger(__name__)

Collection = Union[Mapping, Iterable]


# =============================================================================
# ДИСКОНТИРОВАНИЕ
# =============================================================================


def pv(cashflow: Numeric, rate: Numeric, period: Numeric = 0, scale: Optional[int] = None) -> str:
    """
    Present value денежного потока.

    Args:
        cashflow: Сумма денежного потока
        rate: Ставка дисконтирования за период (например, 0.1 для 10%)
        period: Номер периода (0: сейчас, 1: через один период, ...)
        scale: Дробные разряды результата

    Returns:
        cashflow если period < 1, иначе cashflow / (1 + rate)^period

    Raises:
        DivisionByZeroError: Если (1 + rate)^period == 0 (rate == -1)

    Examples:
        >>> pv(100, "0.1", 0)
        '100.0000000000'
        >>> pv(121, "0.1", 2)
        '100.0000000000'
    """
    s = resolve_scale(scale)

    # Сравнение точное: период 0.99999999999 ещё не дисконтируется
    if to_decimal(period) < 1:
        return normalize(cashflow, scale=s)

    w = working_scale(s)
    return div(cashflow, pow(add(1, rate, scale=w), period, scale=w), scale=s)


def npv(cashflows: Collection, rate: Numeric, scale: Optional[int] = None) -> str:
    """
    Net present value последовательности денежных потоков.

    Период каждого потока равен его позиции в коллекции (0-based), ключи
    Mapping на дисконтирование не влияют.

    Raises:
        InvalidOperandError: Если денежный поток не числовой

    Examples:
        >>> npv([100, 100], 0)
        '200.0000000000'
        >>> npv([-100, 110], "0.1")
        '0.0000000000'
    """
    s = resolve_scale(scale)
    w = working_scale(s)
    total = normalize(0, scale=w)

    for period, (_, cashflow) in enumerate(keyed_items(cashflows)):
        total = add(total, pv(cashflow, rate, period, scale=w), scale=w)

    return normalize(total, scale=s)


# =============================================================================
# ВЗВЕШЕННОЕ СРЕДНЕЕ
# =============================================================================


def weighted_avg(values: Collection, weights: Collection, scale: Optional[int] = None) -> str:
    """
    Взвешенное среднее Σ v_i * w_i / Σ w_i.

    Веса сопоставляются значениям по ключу (для списков по позиции).

    Raises:
        LengthMismatchError: Если количество значений и весов различается
        DivisionByZeroError: Если сумма весов равна нулю

    Examples:
        >>> weighted_avg([1, 2, 3], [1, 1, 1])
        '2.0000000000'
        >>> weighted_avg([10, 20], [3, 1])
        '12.5000000000'
    """
    s = resolve_scale(scale)
    values = materialize(values)
    weights = materialize(weights)

    if len(values) != len(weights):
        raise LengthMismatchError(len(values), len(weights))

    w = working_scale(s)
    total_weight, _ = sum_numeric(weights, scale=w)
    return div(sumxy(values, weights, scale=w), total_weight, scale=s)


# =============================================================================
# ПРОЦЕНТЫ
# =============================================================================


def pct(portion: Numeric, total: Numeric, scale: Optional[int] = None) -> str:
    """
    Доля portion от total.

    Например: операционная маржа = pct(operating_income, revenue).

    Raises:
        DivisionByZeroError: Если total == 0

    Examples:
        >>> pct(50, 200)
        '0.2500000000'
    """
    return div(portion, total, scale=resolve_scale(scale))


def pct_change(current: Numeric, previous: Numeric, scale: Optional[int] = None) -> str:
    """
    Относительное изменение от previous к current.

    Raises:
        DivisionByZeroError: Если previous == 0

    Examples:
        >>> pct_change(110, 100)
        '0.1000000000'
    """
    s = resolve_scale(scale)
    return div(sub(current, previous, scale=working_scale(s)), previous, scale=s)


def pct_change_array(values: Collection, scale: Optional[int] = None) -> dict[Any, str]:
    """
    Последовательность относительных изменений.

    Args:
        values: Значения в порядке от старых к новым (list или Mapping)
        scale: Дробные разряды результата

    Returns:
        {key_i: pct_change(value_i, value_{i-1})} для i >= 1.
        Ключ первого элемента в результат не входит. Если previous == 0,
        результат для позиции равен 0 (без ошибки).

    Raises:
        InvalidOperandError: Если элемент не числовой

    Examples:
        >>> pct_change_array([10, 20, 15])
        {1: '1.0000000000', 2: '-0.2500000000'}
        >>> pct_change_array({"q1": 0, "q2": 5})
        {'q2': '0.0000000000'}
    """
    s = resolve_scale(scale)
    items = keyed_items(values)
    changes: dict[Any, str] = {}

    for (_, previous), (key, current) in zip(items, items[1:]):
        if to_decimal(previous).is_zero():
            logger.debug("pct_change_zero_previous", key=key)
            changes[key] = normalize(0, scale=s)
            continue
        changes[key] = pct_change(current, previous, scale=s)

    return changes
