"""
Errors — Таксономия ошибок decimal-вычислений

Все ошибки наследуются от DecimalStatsError и одновременно от соответствующего
builtin-исключения, чтобы вызывающий код мог ловить их как ValueError /
ZeroDivisionError / TypeError без импорта этого модуля.

ПОЛИТИКА РАСПРОСТРАНЕНИЯ:
1. Ошибки примитивов пропагируют без изменений через все формулы
2. Формулы не перехватывают ошибки нижнего уровня
3. Исключение: pct_change_array (previous == 0 → "0")
"""


class DecimalStatsError(Exception):
    """Базовая ошибка библиотеки."""

    pass


# =============================================================================
# ОШИБКИ ВХОДНЫХ ДАННЫХ
# =============================================================================


class EmptyInputError(DecimalStatsError, ValueError):
    """Операция требует хотя бы один элемент, получено ноль."""

    pass


class InsufficientDataError(DecimalStatsError, ValueError):
    """
    Операция требует минимальное количество элементов.

    Например: sample variance требует count >= 2.
    """

    def __init__(self, required: int, actual: int, operation: str):
        self.required = required
        self.actual = actual
        self.operation = operation
        super().__init__(
            f"{operation} requires at least {required} numeric values, got {actual}"
        )


class LengthMismatchError(DecimalStatsError, ValueError):
    """Две коллекции должны соответствовать поэлементно, но длины разные."""

    def __init__(self, left: int, right: int):
        self.left = left
        self.right = right
        super().__init__(f"Collections must have the same length, got {left} and {right}")


class InvalidOperandError(DecimalStatsError, TypeError):
    """Операнд примитива не конвертируется в decimal."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Operand is not numeric: {value!r}")


class InvalidScaleError(DecimalStatsError, ValueError):
    """Scale ниже минимально допустимого."""

    pass


# =============================================================================
# АРИФМЕТИЧЕСКИЕ ОШИБКИ
# =============================================================================


class DivisionByZeroError(DecimalStatsError, ZeroDivisionError):
    """
    Знаменатель точно равен нулю, graceful fallback не определён.

    Источники: div(), и через него pct, pct_change, correlation.
    """

    pass


class DomainError(DecimalStatsError, ValueError):
    """
    Операнд вне области определения.

    sqrt(x) при x < 0, нецелая степень отрицательного основания.
    """

    pass
