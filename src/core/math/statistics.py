"""
Statistics — Descriptive Statistics over Decimal Collections

Модуль реализует описательную статистику поверх decimal-примитивов:
- mean / median
- sumxy (сумма попарных произведений) и sos (сумма квадратов)
- variance / stddev (population и sample)
- covariance / correlation

Все вычисления выполняются ТОЛЬКО через примитивы decimal_arithmetic,
native операторы над числами не используются.

ФОРМУЛЫ:
    mean        = Σ x_i / n
    sumxy       = Σ x_i * y_i            (только ключи, присутствующие в x и y)
    sos         = Σ (x_i - ref_i)²       (ref: нет / скаляр / коллекция)
    var_pop     = covariance(x, x)
    var_sample  = sos(x, mean(x)) / (n - 1)
    stddev      = sqrt(variance)
    covariance  = sumxy(x, y) / n - mean(x) * mean(y)
    correlation = covariance(x, y) / (stddev(x) * stddev(y))

n: количество ЧИСЛОВЫХ элементов (см. count_numeric).

ТОЧНОСТЬ:
    Промежуточные суммы, средние и разности считаются на working_scale(s),
    до `s` разрядов округляется только результат функции. Иначе разность
    sumxy / n - mean² для постоянного ряда могла бы уйти в минус.

КЛЮЧИ:
    Mapping выравнивается по ключам, прочие коллекции по позиции.
    Ключи, отсутствующие во второй коллекции (или со значением None),
    пропускаются без ошибки.
"""

from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

import structlog

from src.core.math.decimal_arithmetic import (
    add,
    compare,
    count_numeric,
    div,
    is_keyed_collection,
    is_numeric,
    keyed_items,
    materialize,
    mul,
    normalize,
    pow,
    resolve_scale,
    sqrt,
    sub,
    sum_numeric,
    to_decimal,
    working_scale,
)
from src.core.math.errors import EmptyInputError, InsufficientDataError

logger = structlog.get_logger(__name__)

Collection = Union[Mapping, Iterable]


# =============================================================================
# СРЕДНИЕ
# =============================================================================


def mean(values: Collection, scale: Optional[int] = None) -> str:
    """
    Среднее арифметическое.

    Args:
        values: Коллекция значений (нечисловые элементы пропускаются)
        scale: Дробные разряды результата (default: из контекста)

    Returns:
        Σ x_i / n

    Raises:
        EmptyInputError: Если в коллекции нет числовых элементов

    Examples:
        >>> mean([1, 2, 3, 4])
        '2.5000000000'
    """
    s = resolve_scale(scale)
    total, count = sum_numeric(values, scale=working_scale(s))

    if count == 0:
        raise EmptyInputError("mean requires at least one numeric value")

    return div(total, count, scale=s)


def median(values: Collection, scale: Optional[int] = None) -> Optional[str]:
    """
    Медиана.

    Значения сортируются по возрастанию (нечисловые пропускаются):
    - n нечётное → элемент на позиции n // 2
    - n чётное → среднее элементов на позициях n // 2 - 1 и n // 2

    Returns:
        Медиана или None для пустой коллекции

    Examples:
        >>> median([5, 1, 3])
        '3.0000000000'
        >>> median([4, 1, 3, 2])
        '2.5000000000'
    """
    s = resolve_scale(scale)
    ordered = sorted(to_decimal(value) for _, value in keyed_items(values) if is_numeric(value))
    n = len(ordered)

    if n == 0:
        return None

    middle = n // 2
    if n % 2 == 1:
        return normalize(ordered[middle], scale=s)

    return div(add(ordered[middle - 1], ordered[middle], scale=working_scale(s)), 2, scale=s)


# =============================================================================
# СУММЫ ПРОИЗВЕДЕНИЙ И КВАДРАТОВ
# =============================================================================


def sumxy(x_values: Collection, y_values: Collection, scale: Optional[int] = None) -> str:
    """
    Сумма попарных произведений Σ x_i * y_i.

    Пары выравниваются по ключу, не по позиции. Ключ из x без пары в y
    (или с нечисловым значением с любой стороны) пропускается.

    Examples:
        >>> sumxy([1, 2, 3], [4, 5, 6])
        '32.0000000000'
        >>> sumxy({"a": 2, "b": 3}, {"b": 10})
        '30.0000000000'
    """
    s = resolve_scale(scale)
    w = working_scale(s)
    partner = dict(keyed_items(y_values))
    total = normalize(0, scale=w)

    for key, x in keyed_items(x_values):
        y = partner.get(key)
        if y is None or not is_numeric(x) or not is_numeric(y):
            logger.debug("unpaired_key_skipped", key=key)
            continue
        total = add(total, mul(x, y, scale=w), scale=w)

    return normalize(total, scale=s)


def sos(values: Collection, other: Any = None, scale: Optional[int] = None) -> str:
    """
    Сумма квадратов.

    Args:
        values: Коллекция значений
        other: Опорное значение:
            - None: Σ x_i²
            - скаляр: Σ (x_i - other)² (explained / regression SS)
            - коллекция: Σ (x_i - other_i)² по общим ключам (residual SS)
        scale: Дробные разряды результата

    Raises:
        InvalidOperandError: Если скаляр `other` не числовой

    Examples:
        >>> sos([1, 2, 3])
        '14.0000000000'
        >>> sos([1, 2, 3], 2)
        '2.0000000000'
        >>> sos([1, 2, 3], [1, 1])
        '1.0000000000'
    """
    s = resolve_scale(scale)
    w = working_scale(s)
    total = normalize(0, scale=w)

    if other is None:
        for key, value in keyed_items(values):
            if not is_numeric(value):
                logger.debug("non_numeric_skipped", key=key, value=repr(value))
                continue
            total = add(total, pow(value, 2, scale=w), scale=w)
        return normalize(total, scale=s)

    if is_keyed_collection(other):
        reference = dict(keyed_items(other))
    else:
        reference = None
        other = to_decimal(other)

    for key, value in keyed_items(values):
        ref = other if reference is None else reference.get(key)
        if ref is None or not is_numeric(value) or not is_numeric(ref):
            logger.debug("unpaired_key_skipped", key=key)
            continue
        total = add(total, pow(sub(value, ref, scale=w), 2, scale=w), scale=w)

    return normalize(total, scale=s)


# =============================================================================
# ДИСПЕРСИЯ И СТАНДАРТНОЕ ОТКЛОНЕНИЕ
# =============================================================================


def variance(values: Collection, is_sample: bool = False, scale: Optional[int] = None) -> str:
    """
    Дисперсия.

    Args:
        values: Коллекция значений
        is_sample: True: выборочная (делитель n - 1), False: генеральная (n)
        scale: Дробные разряды результата

    Returns:
        sample:     sos(values, mean(values)) / (n - 1)
        population: covariance(values, values)

    Raises:
        InsufficientDataError: sample при n <= 1
        EmptyInputError: population при n == 0

    Examples:
        >>> variance([2, 4, 4, 4, 5, 5, 7, 9])
        '4.0000000000'
        >>> variance([1, 2, 3, 4], is_sample=True)
        '1.6666666667'
    """
    s = resolve_scale(scale)
    values = materialize(values)

    if not is_sample:
        return covariance(values, values, scale=s)

    count = count_numeric(values)
    if count <= 1:
        raise InsufficientDataError(2, count, "sample variance")

    w = working_scale(s)
    return div(sos(values, mean(values, scale=w), scale=w), count - 1, scale=s)


def stddev(values: Collection, is_sample: bool = False, scale: Optional[int] = None) -> str:
    """
    Стандартное отклонение sqrt(variance).

    Требует минимум 2 числовых элемента и для population, и для sample.

    Корень извлекается из дисперсии на working_scale(s). Отрицательный
    остаток округления (меньше 10^-working_scale по модулю) считается нулём.

    Raises:
        InsufficientDataError: Если n < 2

    Examples:
        >>> stddev([2, 4, 4, 4, 5, 5, 7, 9])
        '2.0000000000'
        >>> stddev(["0.33333333335", "0.33333333335"])
        '0.0000000000'
    """
    s = resolve_scale(scale)
    w = working_scale(s)
    values = materialize(values)

    count = count_numeric(values)
    if count < 2:
        raise InsufficientDataError(2, count, "standard deviation")

    var = variance(values, is_sample, scale=w)
    if compare(var, 0, scale=w) < 0:
        logger.debug("negative_variance_residue", variance=var)
        var = normalize(0, scale=w)

    return sqrt(var, scale=s)


# =============================================================================
# КОВАРИАЦИЯ И КОРРЕЛЯЦИЯ
# =============================================================================


def covariance(x_values: Collection, y_values: Collection, scale: Optional[int] = None) -> str:
    """
    Ковариация (генеральная).

    covariance = sumxy(x, y) / n_x - mean(x) * mean(y)

    Коллекции разной длины НЕ являются ошибкой: sumxy учитывает только
    общие ключи, средние считаются по каждой коллекции отдельно.

    Raises:
        EmptyInputError: Если x или y не содержат числовых элементов

    Examples:
        >>> covariance([1, 2, 3], [1, 2, 3])
        '0.6666666667'
        >>> covariance(["0.33333333335", "0.33333333335"], ["0.33333333335", "0.33333333335"])
        '0.0000000000'
    """
    s = resolve_scale(scale)
    w = working_scale(s)
    x_values = materialize(x_values)
    y_values = materialize(y_values)

    count = count_numeric(x_values)
    if count == 0:
        raise EmptyInputError("covariance requires at least one numeric value")

    result = sub(
        div(sumxy(x_values, y_values, scale=w), count, scale=w),
        mul(mean(x_values, scale=w), mean(y_values, scale=w), scale=w),
        scale=w,
    )
    return normalize(result, scale=s)


def correlation(x_values: Collection, y_values: Collection, scale: Optional[int] = None) -> str:
    """
    Коэффициент корреляции Пирсона.

    correlation = covariance(x, y) / (stddev(x) * stddev(y))

    ВНИМАНИЕ: в знаменателе генеральные (population) отклонения, а не
    выборочные sample_stddev из классической записи формулы. С выборочными
    correlation(x, x) равнялась бы (n - 1) / n; с генеральными
    correlation(x, x) == 1, как у коэффициента Пирсона.

    Raises:
        InsufficientDataError: Если в x или y меньше 2 числовых элементов
        DivisionByZeroError: Если stddev(x) или stddev(y) равно нулю

    Examples:
        >>> correlation([2, 4, 4, 4, 5, 5, 7, 9], [2, 4, 4, 4, 5, 5, 7, 9])
        '1.0000000000'
    """
    s = resolve_scale(scale)
    w = working_scale(s)
    x_values = materialize(x_values)
    y_values = materialize(y_values)

    denominator = mul(stddev(x_values, scale=w), stddev(y_values, scale=w), scale=w)
    return div(covariance(x_values, y_values, scale=w), denominator, scale=s)


# =============================================================================
# ALIASES
# =============================================================================

avg = mean
covar = covariance
stdev = stddev
correl = correlation
