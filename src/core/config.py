"""
Configuration — Process-wide настройки decimal-арифметики

Настройки читаются один раз из окружения (prefix DECIMAL_STATS_) или .env
и далее не изменяются. Все вычисления берут scale/rounding отсюда, если
вызывающий код не передал scale явно.
"""

import decimal
from functools import lru_cache
from typing import Final

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Минимальное количество дробных разрядов любого результата
MIN_SCALE: Final[int] = 10

# Scale по умолчанию
DEFAULT_SCALE: Final[int] = 10

DEFAULT_ROUNDING: Final[str] = decimal.ROUND_HALF_UP

ROUNDING_MODES: Final[frozenset[str]] = frozenset(
    {
        decimal.ROUND_CEILING,
        decimal.ROUND_DOWN,
        decimal.ROUND_FLOOR,
        decimal.ROUND_HALF_DOWN,
        decimal.ROUND_HALF_EVEN,
        decimal.ROUND_HALF_UP,
        decimal.ROUND_UP,
        decimal.ROUND_05UP,
    }
)


class MathSettings(BaseSettings):
    """Настройки арифметики, загружаемые из переменных окружения."""

    model_config = SettingsConfigDict(
        env_prefix="DECIMAL_STATS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    scale: int = Field(
        default=DEFAULT_SCALE,
        ge=MIN_SCALE,
        description="Количество дробных разрядов результата",
    )
    rounding: str = Field(
        default=DEFAULT_ROUNDING,
        description="Режим округления последнего разряда (имя из модуля decimal)",
    )

    @field_validator("rounding")
    @classmethod
    def validate_rounding(cls, v: str) -> str:
        mode = v.strip().upper()
        if mode not in ROUNDING_MODES:
            raise ValueError(f"Unknown rounding mode {v!r}, expected one of {sorted(ROUNDING_MODES)}")
        return mode


@lru_cache
def get_settings() -> MathSettings:
    """Get cached settings instance."""
    return MathSettings()
