"""
Precision Adapter — публичные точки входа Beta-функций

Каждая функция:
1. Валидирует аргументы публичного типа (float)
2. Расширяет их до рабочего типа (WORKING_DTYPE)
3. Делегирует в beta_core / shape_reduction
4. Сужает результат до float с насыщением до ±PUBLIC_MAX вместо Inf

Публичный API:
    beta(a, b)               B(a, b)
    ln_beta(a, b)            ln B(a, b)
    beta_cdf(x, a, b)        I_x(a, b) ∈ [0, 1]
    beta_sf(x, a, b)         1 - I_x(a, b) = I_{1-x}(b, a)
    beta_pdf(x, a, b)        x^(a-1) (1-x)^(b-1) / B(a, b)
    incomplete_beta(x, a, b) B_x(a, b) (нерегуляризованный интеграл)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Inf никогда не возвращается: overflow → ±PUBLIC_MAX (lossy, но определено)
2. beta_cdf(0, a, b) == 0, beta_cdf(1, a, b) == 1
3. Состояние между вызовами отсутствует (reentrant)
"""

import logging
from typing import Optional

import numpy as np

from src.core.domain.engine_config import DEFAULT_ENGINE_CONFIG, EngineConfig
from src.core.domain.shape_region import IntegralFamily
from src.core.math import beta_core
from src.core.math.gamma_provider import DEFAULT_GAMMA_PROVIDER, GammaProvider
from src.core.math.numerical_safeguards import (
    PUBLIC_MAX,
    Scalar,
    WORKING_DTYPE,
    clamp,
    saturate,
    validate_finite,
    validate_shape,
    validate_unit_interval,
)
from src.core.math.shape_reduction import reduce_incomplete_beta

logger = logging.getLogger(__name__)

_ZERO = WORKING_DTYPE(0)
_ONE = WORKING_DTYPE(1)
_PUBLIC_MAX_WORKING = WORKING_DTYPE(PUBLIC_MAX)


# =============================================================================
# WIDEN / NARROW
# =============================================================================


def widen(value: float) -> Scalar:
    """Расширение публичного float до рабочего типа (без потерь)."""
    return WORKING_DTYPE(value)


def narrow(value: Scalar) -> float:
    """
    Сужение значения рабочего типа до float с насыщением.

    |value| > PUBLIC_MAX (включая Inf) → ±PUBLIC_MAX. NaN не изменяется.

    Examples:
        >>> narrow(WORKING_DTYPE(0.25))
        0.25
        >>> narrow(WORKING_DTYPE(np.inf)) == PUBLIC_MAX
        True
    """
    saturated = saturate(value, _PUBLIC_MAX_WORKING)
    if saturated is not value:
        logger.warning("Value %s exceeds public float range, saturated to %s", value, saturated)
    return float(saturated)


def _resolve(config: Optional[EngineConfig], provider: Optional[GammaProvider]):
    if config is None:
        config = DEFAULT_ENGINE_CONFIG
    if provider is None:
        provider = DEFAULT_GAMMA_PROVIDER
    return config, provider


def _validate_shapes(a: float, b: float) -> None:
    validate_shape(a, "a")
    validate_shape(b, "b")


# =============================================================================
# BETA FUNCTION
# =============================================================================


def beta(a: float, b: float, *, provider: Optional[GammaProvider] = None) -> float:
    """
    Beta-функция B(a, b) = Γ(a) Γ(b) / Γ(a + b).

    Args:
        a: Shape-параметр a > 0
        b: Shape-параметр b > 0
        provider: Поставщик Gamma-функции (default: scipy.special)

    Returns:
        B(a, b); при переполнении — PUBLIC_MAX

    Raises:
        InvalidArgument: если a ≤ 0, b ≤ 0 или NaN/Inf

    Examples:
        >>> abs(beta(2.0, 3.0) - 1.0 / 12.0) < 1e-15
        True
    """
    _validate_shapes(a, b)
    _, provider = _resolve(None, provider)
    return narrow(beta_core.beta(widen(a), widen(b), provider))


def ln_beta(a: float, b: float, *, provider: Optional[GammaProvider] = None) -> float:
    """
    Логарифм Beta-функции ln B(a, b).

    Конечен там, где B(a, b) выходит за диапазон float.

    Raises:
        InvalidArgument: если a ≤ 0, b ≤ 0 или NaN/Inf
    """
    _validate_shapes(a, b)
    _, provider = _resolve(None, provider)
    return narrow(beta_core.ln_beta(widen(a), widen(b), provider))


# =============================================================================
# INCOMPLETE BETA
# =============================================================================


def beta_cdf(
    x: float,
    a: float,
    b: float,
    *,
    config: Optional[EngineConfig] = None,
    provider: Optional[GammaProvider] = None,
) -> float:
    """
    Функция распределения Beta(a, b): регуляризованная неполная
    Beta-функция I_x(a, b).

    Args:
        x: Точка вычисления в [0, 1]
        a: Shape-параметр a > 0
        b: Shape-параметр b > 0
        config: Лимиты и политика x вне [0, 1]
        provider: Поставщик Gamma-функции

    Returns:
        I_x(a, b) ∈ [0, 1]; x ≤ 0 → 0, x ≥ 1 → 1

    Raises:
        InvalidArgument: если a ≤ 0, b ≤ 0, аргумент NaN/Inf, или x вне [0, 1]
            при config.clamp_x_to_unit_interval=False
        NumericNonConvergence: если continued fraction не сошлась

    Examples:
        >>> abs(beta_cdf(0.5, 2.0, 2.0) - 0.5) < 1e-15
        True
        >>> beta_cdf(0.3, 1.0, 1.0)
        0.3
    """
    _validate_shapes(a, b)
    config, provider = _resolve(config, provider)

    validate_finite(x, "x")
    if not config.clamp_x_to_unit_interval:
        validate_unit_interval(x, "x")

    if x <= 0:
        return 0.0
    if x >= 1:
        return 1.0

    value = reduce_incomplete_beta(
        widen(x), widen(a), widen(b), IntegralFamily.REGULARIZED, config, provider
    )
    return narrow(clamp(value, _ZERO, _ONE))


def beta_sf(
    x: float,
    a: float,
    b: float,
    *,
    config: Optional[EngineConfig] = None,
    provider: Optional[GammaProvider] = None,
) -> float:
    """
    Survival function Beta(a, b): 1 - I_x(a, b), вычисленная как I_{1-x}(b, a).

    Не теряет точность в верхнем хвосте, где I_x(a, b) ≈ 1.

    Raises:
        InvalidArgument: аналогично beta_cdf
    """
    _validate_shapes(a, b)
    config, provider = _resolve(config, provider)

    validate_finite(x, "x")
    if not config.clamp_x_to_unit_interval:
        validate_unit_interval(x, "x")

    if x <= 0:
        return 1.0
    if x >= 1:
        return 0.0

    value = reduce_incomplete_beta(
        _ONE - widen(x), widen(b), widen(a), IntegralFamily.REGULARIZED, config, provider
    )
    return narrow(clamp(value, _ZERO, _ONE))


def incomplete_beta(
    x: float,
    a: float,
    b: float,
    *,
    config: Optional[EngineConfig] = None,
    provider: Optional[GammaProvider] = None,
) -> float:
    """
    Нерегуляризованная неполная Beta-функция B_x(a, b) = ∫₀ˣ t^(a-1) (1-t)^(b-1) dt.

    B_1(a, b) == B(a, b).

    Raises:
        InvalidArgument: если a ≤ 0, b ≤ 0, x вне [0, 1] или NaN/Inf
        NumericNonConvergence: если continued fraction не сошлась

    Examples:
        >>> abs(incomplete_beta(0.5, 1.0, 1.0) - 0.5) < 1e-15
        True
    """
    _validate_shapes(a, b)
    validate_unit_interval(x, "x")
    config, provider = _resolve(config, provider)

    value = reduce_incomplete_beta(
        widen(x), widen(a), widen(b), IntegralFamily.UNREGULARIZED, config, provider
    )
    return narrow(value)


# =============================================================================
# DENSITY
# =============================================================================


def _x_log_y(k: Scalar, y: Scalar) -> Scalar:
    """k ln y с соглашением 0 ln 0 = 0."""
    if k == 0:
        return _ZERO
    if y == 0:
        return WORKING_DTYPE(-np.inf) if k > 0 else WORKING_DTYPE(np.inf)
    return k * np.log(y)


def beta_pdf(x: float, a: float, b: float, *, provider: Optional[GammaProvider] = None) -> float:
    """
    Плотность Beta(a, b): x^(a-1) (1-x)^(b-1) / B(a, b), в log-space.

    На границах с a < 1 (или b < 1) плотность бесконечна и насыщается
    до PUBLIC_MAX.

    Raises:
        InvalidArgument: если a ≤ 0, b ≤ 0, x вне [0, 1] или NaN/Inf

    Examples:
        >>> beta_pdf(0.5, 1.0, 1.0)
        1.0
    """
    _validate_shapes(a, b)
    validate_unit_interval(x, "x")
    _, provider = _resolve(None, provider)

    x_w, a_w, b_w = widen(x), widen(a), widen(b)
    ln_kernel = _x_log_y(a_w - 1, x_w) + _x_log_y(b_w - 1, _ONE - x_w)
    return narrow(np.exp(ln_kernel - beta_core.ln_beta(a_w, b_w, provider)))
