"""
Тесты для MathSettings и MathContext

Проверяет:
1. Значения по умолчанию (scale = 10, ROUND_HALF_UP)
2. Загрузку из переменных окружения DECIMAL_STATS_*
3. Валидацию scale и режима округления
4. Immutability контекста (frozen=True)
5. Кэширование процессного контекста
"""

import decimal

import pytest
from pydantic import ValidationError

from src.core.config import MIN_SCALE, MathSettings, get_settings
from src.core.domain.context import MathContext, get_context


class TestMathSettings:
    """Тесты для MathSettings"""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DECIMAL_STATS_SCALE", raising=False)
        monkeypatch.delenv("DECIMAL_STATS_ROUNDING", raising=False)

        settings = MathSettings()

        assert settings.scale == 10
        assert settings.rounding == decimal.ROUND_HALF_UP

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("DECIMAL_STATS_SCALE", "18")
        monkeypatch.setenv("DECIMAL_STATS_ROUNDING", "round_down")

        settings = MathSettings()

        assert settings.scale == 18
        assert settings.rounding == decimal.ROUND_DOWN

    def test_scale_below_minimum_rejected(self):
        with pytest.raises(ValidationError):
            MathSettings(scale=MIN_SCALE - 1)

    def test_unknown_rounding_rejected(self):
        with pytest.raises(ValidationError, match="Unknown rounding mode"):
            MathSettings(rounding="ROUND_RANDOM")

    def test_get_settings_cached(self):
        assert get_settings() is get_settings()


class TestMathContext:
    """Тесты для MathContext"""

    def test_defaults(self):
        context = MathContext()

        assert context.scale == 10
        assert context.rounding == decimal.ROUND_HALF_UP

    def test_from_settings(self):
        settings = MathSettings(scale=14, rounding="ROUND_HALF_EVEN")

        context = MathContext.from_settings(settings)

        assert context.scale == 14
        assert context.rounding == decimal.ROUND_HALF_EVEN

    def test_frozen(self):
        """Контекст неизменяем после создания"""
        context = MathContext()

        with pytest.raises(ValidationError):
            context.scale = 20

    def test_scale_below_minimum_rejected(self):
        with pytest.raises(ValidationError):
            MathContext(scale=4)

    def test_unknown_rounding_rejected(self):
        with pytest.raises(ValidationError):
            MathContext(rounding="round_half_up")

    def test_process_context_cached(self):
        """Процессный контекст строится один раз"""
        assert get_context() is get_context()
