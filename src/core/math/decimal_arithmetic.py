"""
Decimal Arithmetic — Precision-Preserving Primitives

Модуль реализует арифметику произвольной точности поверх decimal.Decimal:
- add / sub / mul / div / pow / sqrt / compare
- распознавание и конверсия числовых операндов
- агрегации sum_numeric / count_numeric по коллекциям

Каждый примитив принимает числа или числовые строки и возвращает строку
в fixed-point нотации ровно с `scale` дробными разрядами.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Native float никогда не участвует в вычислениях (float → str → Decimal)
2. Рабочая точность достаточна для точного результата до `scale` разрядов
3. Округление выполняется один раз, на последнем разряде `scale`
4. div(a, 0) → DivisionByZeroError, sqrt(x < 0) → DomainError
5. Нечисловые элементы коллекций пропускаются в sum/count без ошибки
"""

import decimal
from collections.abc import Iterable, Mapping, Sequence
from decimal import Decimal
from typing import Any, Final, Optional, Union

import structlog

from src.core.config import MIN_SCALE
from src.core.domain.context import get_context
from src.core.math.errors import (
    DivisionByZeroError,
    DomainError,
    InvalidOperandError,
    InvalidScaleError,
)

logger = structlog.get_logger(__name__)

Numeric = Union[int, float, str, Decimal]

# Дополнительные разряды рабочей точности сверх целевого scale
GUARD_DIGITS: Final[int] = 10

_ZERO: Final[Decimal] = Decimal(0)
_ONE: Final[Decimal] = Decimal(1)


# =============================================================================
# SCALE И РАБОЧИЙ КОНТЕКСТ
# =============================================================================


def resolve_scale(scale: Optional[int] = None) -> int:
    """
    Scale для конкретного вызова.

    Args:
        scale: Явный scale или None (берётся из процессного контекста)

    Returns:
        Эффективный scale

    Raises:
        InvalidScaleError: Если scale не целое число или меньше MIN_SCALE
    """
    if scale is None:
        return get_context().scale

    if isinstance(scale, bool) or not isinstance(scale, int):
        raise InvalidScaleError(f"scale must be an integer, got {scale!r}")

    if scale < MIN_SCALE:
        raise InvalidScaleError(f"scale must be >= {MIN_SCALE}, got {scale}")

    return scale


def working_scale(scale: int) -> int:
    """
    Scale промежуточных результатов агрегатов.

    Суммы, средние и разности внутри формул считаются с GUARD_DIGITS
    дополнительными разрядами; до `scale` округляется только итог.

    Examples:
        >>> working_scale(10)
        20
    """
    return scale + GUARD_DIGITS


def _working_context(precision: int) -> decimal.Context:
    return decimal.Context(
        prec=max(precision, 1),
        rounding=decimal.ROUND_HALF_EVEN,
        Emax=decimal.MAX_EMAX,
        Emin=decimal.MIN_EMIN,
        traps=[decimal.InvalidOperation, decimal.DivisionByZero, decimal.Overflow],
    )


def _finalize(value: Decimal, scale: int) -> str:
    """Округление до `scale` разрядов и сериализация в fixed-point строку."""
    quantum = _ONE.scaleb(-scale)
    ctx = _working_context(max(value.adjusted(), 0) + scale + GUARD_DIGITS)
    ctx.rounding = get_context().rounding

    result = value.quantize(quantum, context=ctx)

    # -0.000… → 0.000…
    if result.is_zero():
        result = result.copy_abs()

    return format(result, "f")


# =============================================================================
# РАСПОЗНАВАНИЕ И КОНВЕРСИЯ ОПЕРАНДОВ
# =============================================================================


def _parse(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, int):
        parsed = Decimal(value)
    elif isinstance(value, float):
        # str(float) даёт кратчайшее представление: 0.1 → "0.1"
        parsed = Decimal(str(value))
    elif isinstance(value, str):
        try:
            parsed = Decimal(value.strip())
        except decimal.InvalidOperation:
            return None
    else:
        return None

    if not parsed.is_finite():
        return None

    return parsed


def is_numeric(value: Any) -> bool:
    """
    Проверка, конвертируется ли значение в конечный decimal.

    Examples:
        >>> is_numeric("1.5")
        True
        >>> is_numeric("abc")
        False
        >>> is_numeric(True)
        False
        >>> is_numeric(float("nan"))
        False
    """
    return _parse(value) is not None


def to_decimal(value: Any) -> Decimal:
    """
    Конверсия операнда в Decimal без потери точности.

    Raises:
        InvalidOperandError: Если значение не числовое (включая bool, None, NaN, Inf)
    """
    parsed = _parse(value)
    if parsed is None:
        raise InvalidOperandError(value)
    return parsed


def normalize(value: Numeric, scale: Optional[int] = None) -> str:
    """
    Приведение значения к decimal-строке с `scale` разрядами.

    Examples:
        >>> normalize(100)
        '100.0000000000'
        >>> normalize("-0")
        '0.0000000000'
    """
    return _finalize(to_decimal(value), resolve_scale(scale))


# =============================================================================
# АРИФМЕТИЧЕСКИЕ ПРИМИТИВЫ
# =============================================================================


def add(a: Numeric, b: Numeric, scale: Optional[int] = None) -> str:
    """
    Сложение a + b.

    Examples:
        >>> add("0.1", "0.2")
        '0.3000000000'
    """
    s = resolve_scale(scale)
    x, y = to_decimal(a), to_decimal(b)

    # Точная сумма: от старшего разряда до младшего дробного
    precision = max(x.adjusted(), y.adjusted(), 0) - min(x.as_tuple().exponent, y.as_tuple().exponent, 0) + 2
    return _finalize(_working_context(precision).add(x, y), s)


def sub(a: Numeric, b: Numeric, scale: Optional[int] = None) -> str:
    """
    Вычитание a - b.

    Examples:
        >>> sub("0.3", "0.1")
        '0.2000000000'
    """
    s = resolve_scale(scale)
    x, y = to_decimal(a), to_decimal(b)

    precision = max(x.adjusted(), y.adjusted(), 0) - min(x.as_tuple().exponent, y.as_tuple().exponent, 0) + 2
    return _finalize(_working_context(precision).subtract(x, y), s)


def mul(a: Numeric, b: Numeric, scale: Optional[int] = None) -> str:
    """
    Умножение a * b.

    Examples:
        >>> mul("1.5", "2")
        '3.0000000000'
    """
    s = resolve_scale(scale)
    x, y = to_decimal(a), to_decimal(b)

    # Произведение точно помещается в сумму длин коэффициентов
    precision = len(x.as_tuple().digits) + len(y.as_tuple().digits) + 2
    return _finalize(_working_context(precision).multiply(x, y), s)


def div(a: Numeric, b: Numeric, scale: Optional[int] = None) -> str:
    """
    Деление a / b.

    Raises:
        DivisionByZeroError: Если b == 0

    Examples:
        >>> div(1, 3)
        '0.3333333333'
        >>> div(2, 3)
        '0.6666666667'
    """
    s = resolve_scale(scale)
    x, y = to_decimal(a), to_decimal(b)

    if y.is_zero():
        raise DivisionByZeroError(f"Division by zero: {a!r} / {b!r}")

    return _finalize(_divide(x, y, s), s)


def _divide(x: Decimal, y: Decimal, scale: int) -> Decimal:
    precision = max(x.adjusted() - y.adjusted() + 1, 0) + scale + GUARD_DIGITS
    return _working_context(precision).divide(x, y)


def pow(a: Numeric, n: Numeric, scale: Optional[int] = None) -> str:
    """
    Возведение в степень a ** n.

    Целая степень вычисляется точно (отрицательная: 1 / a ** |n|).
    Нецелая степень допускается только для a >= 0.

    Raises:
        DivisionByZeroError: 0 в отрицательной степени
        DomainError: Нецелая степень отрицательного основания

    Examples:
        >>> pow("1.1", 2)
        '1.2100000000'
        >>> pow(2, -2)
        '0.2500000000'
    """
    s = resolve_scale(scale)
    base, exponent = to_decimal(a), to_decimal(n)

    if exponent.is_zero():
        return _finalize(_ONE, s)

    if base.is_zero():
        if exponent < 0:
            raise DivisionByZeroError(f"Zero raised to negative power {n!r}")
        return _finalize(_ZERO, s)

    if exponent == exponent.to_integral_value():
        k = int(exponent)
        magnitude = abs(k)
        exact = _working_context(len(base.as_tuple().digits) * magnitude + 2).power(base, magnitude)
        if k < 0:
            exact = _divide(_ONE, exact, s)
        return _finalize(exact, s)

    if base < 0:
        raise DomainError(f"Non-integral power {n!r} of negative base {a!r}")

    # Порядок результата ~ n * порядок основания
    magnitude = int(abs(exponent) * (abs(base.adjusted()) + 1))
    return _finalize(_working_context(magnitude + s + GUARD_DIGITS).power(base, exponent), s)


def sqrt(a: Numeric, scale: Optional[int] = None) -> str:
    """
    Квадратный корень.

    Raises:
        DomainError: Если a < 0

    Examples:
        >>> sqrt(2)
        '1.4142135624'
    """
    s = resolve_scale(scale)
    x = to_decimal(a)

    if x < 0:
        raise DomainError(f"Square root of negative value {a!r}")

    precision = max(x.adjusted() // 2 + 1, 0) + s + GUARD_DIGITS
    return _finalize(x.sqrt(context=_working_context(precision)), s)


def compare(a: Numeric, b: Numeric, scale: Optional[int] = None) -> int:
    """
    Сравнение a и b с точностью до `scale` разрядов.

    Returns:
        -1 если a < b
         0 если a == b (после округления до scale)
        +1 если a > b

    Examples:
        >>> compare(1, 2)
        -1
        >>> compare("1.00000000001", 1)
        0
    """
    s = resolve_scale(scale)
    x = Decimal(_finalize(to_decimal(a), s))
    y = Decimal(_finalize(to_decimal(b), s))

    if x < y:
        return -1
    elif x > y:
        return 1
    return 0


# =============================================================================
# КОЛЛЕКЦИИ
# =============================================================================


def keyed_items(collection: Union[Mapping, Iterable]) -> list[tuple[Any, Any]]:
    """
    Пары (ключ, значение) упорядоченной коллекции.

    Mapping: по своим ключам, любой другой iterable: по позиции (0, 1, ...).

    Raises:
        TypeError: Если передана строка/bytes вместо коллекции
    """
    if isinstance(collection, (str, bytes)):
        raise TypeError(f"Expected a collection of values, got {type(collection).__name__}")

    if isinstance(collection, Mapping):
        return list(collection.items())

    return list(enumerate(collection))


def materialize(collection: Union[Mapping, Iterable]) -> Union[Mapping, Sequence]:
    """Mapping/Sequence без изменений, одноразовый iterable → list."""
    if isinstance(collection, (str, bytes)):
        raise TypeError(f"Expected a collection of values, got {type(collection).__name__}")

    if isinstance(collection, (Mapping, Sequence)):
        return collection

    return list(collection)


def is_keyed_collection(value: Any) -> bool:
    """True для Mapping и не-строковых iterable."""
    if isinstance(value, (str, bytes)):
        return False
    return isinstance(value, (Mapping, Iterable))


def sum_numeric(collection: Union[Mapping, Iterable], scale: Optional[int] = None) -> tuple[str, int]:
    """
    Сумма и количество числовых элементов коллекции.

    ВНИМАНИЕ: нечисловые элементы ("abc", None, bool, NaN) молча пропускаются
    и не входят ни в сумму, ни в количество.

    Частичные суммы накапливаются на working_scale(scale), поэтому малые
    слагаемые не теряются до финального округления.

    Returns:
        (sum, count); для пустой коллекции ("0.0000000000", 0)

    Examples:
        >>> sum_numeric([1, "2", "abc", None])
        ('3.0000000000', 2)
        >>> sum_numeric(["0.00000000004"] * 10)
        ('0.0000000004', 10)
    """
    s = resolve_scale(scale)
    w = working_scale(s)
    total = _finalize(_ZERO, w)
    count = 0

    for key, value in keyed_items(collection):
        if not is_numeric(value):
            logger.debug("non_numeric_skipped", key=key, value=repr(value))
            continue
        total = add(total, value, scale=w)
        count += 1

    return normalize(total, scale=s), count


def count_numeric(collection: Union[Mapping, Iterable]) -> int:
    """
    Количество числовых элементов коллекции (нечисловые пропускаются).

    Examples:
        >>> count_numeric([1, "x", 2.5])
        2
    """
    count = 0
    for key, value in keyed_items(collection):
        if is_numeric(value):
            count += 1
        else:
            logger.debug("non_numeric_skipped", key=key, value=repr(value))
    return count
