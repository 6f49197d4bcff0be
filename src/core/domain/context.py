"""
MathContext — Контекст decimal-вычислений

Immutable Pydantic модель: scale и режим округления, общие для всех
примитивов. Процессный контекст строится один раз из MathSettings и далее
только читается, поэтому функции безопасно вызывать из нескольких потоков.
"""

from functools import lru_cache

from pydantic import BaseModel, Field, field_validator

from src.core.config import (
    DEFAULT_ROUNDING,
    DEFAULT_SCALE,
    MIN_SCALE,
    ROUNDING_MODES,
    MathSettings,
    get_settings,
)


class MathContext(BaseModel):
    """
    Контекст вычислений.

    Immutable модель (frozen=True): контекст задаётся при инициализации
    процесса и не мутируется между вызовами.
    """

    scale: int = Field(default=DEFAULT_SCALE, ge=MIN_SCALE, description="Дробные разряды результата")
    rounding: str = Field(default=DEFAULT_ROUNDING, description="Режим округления (decimal.ROUND_*)")

    model_config = {"frozen": True}

    @field_validator("rounding")
    @classmethod
    def validate_rounding(cls, v: str) -> str:
        if v not in ROUNDING_MODES:
            raise ValueError(f"Unknown rounding mode {v!r}")
        return v

    @classmethod
    def from_settings(cls, settings: MathSettings) -> "MathContext":
        return cls(scale=settings.scale, rounding=settings.rounding)


@lru_cache
def get_context() -> MathContext:
    """Процессный контекст (строится один раз из настроек)."""
    return MathContext.from_settings(get_settings())
