"""
Beta Core — B(a, b) и ln B(a, b) в рабочей точности

Формулы:
    B(a, b) = Γ(a) Γ(b) / Γ(a + b)

    a + b ≤ max_arg:  B = Γ(a) / (Γ(a + b) / Γ(b))
    a + b > max_arg:  ln B = ln Γ(a) + ln Γ(b) - ln Γ(a + b)

Порядок операций в direct ratio не формирует ни Γ(a) Γ(b), ни Γ(a + b)
по отдельности в знаменателе, которые могли бы переполниться до деления.

В log-space ветви сумма ln Γ теряет почти все разряды при больших a, b
(слагаемые порядка (a + b) ln(a + b), ядро gammaln работает в float64).
Поэтому при max(a, b) ≥ STIRLING_MIN_ARG разности ln Γ берутся из
асимптотики Стирлинга в рабочем типе, где крупные члены сокращаются
аналитически:
    ln Γ(z) = (z - 1/2) ln z - z + ln(2π)/2 + δ(z)

    ln Γ(b) - ln Γ(a + b) = a - a ln(a + b) - (b - 1/2) ln(1 + a/b) + δ(b) - δ(a + b)
    ln B(a, b) = ln(2π)/2 - a ln(1 + b/a) - b ln(1 + a/b)
                 + (ln(a + b) - ln a - ln b)/2 + δ(a) + δ(b) - δ(a + b)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. a > 0, b > 0 (иначе InvalidArgument)
2. B(a, b) == B(b, a)
3. exp(ln B) > WORKING_MAX → насыщение до WORKING_MAX
4. Если Γ отдельного аргумента переполняется при a + b ≤ max_arg,
   используется log-space ветвь
"""

import logging
from typing import Final, Optional

import numpy as np

from src.core.math.gamma_provider import DEFAULT_GAMMA_PROVIDER, GammaProvider
from src.core.math.numerical_safeguards import (
    LN_WORKING_MAX,
    WORKING_DTYPE,
    WORKING_MAX,
    Scalar,
    is_valid_float,
    validate_shape,
)

logger = logging.getLogger(__name__)

# Нижняя граница аргумента асимптотики Стирлинга: остаток ряда δ(z)
# после восьми членов меньше 2e-18 при z ≥ 10
STIRLING_MIN_ARG: Final[float] = 10.0

_HALF = WORKING_DTYPE(0.5)
_HALF_LN_2PI: Final = np.log(2 * np.arccos(WORKING_DTYPE(-1))) / 2

# B_{2k} / (2k (2k - 1)), k = 1..8
_STIRLING_COEFFICIENTS: Final = tuple(
    WORKING_DTYPE(num) / WORKING_DTYPE(den)
    for num, den in (
        (1, 12),
        (-1, 360),
        (1, 1260),
        (-1, 1680),
        (1, 1188),
        (-691, 360360),
        (1, 156),
        (-3617, 122400),
    )
)


def _gamma_ratio(a: Scalar, b: Scalar, provider: GammaProvider) -> Optional[Scalar]:
    """Γ(a) / (Γ(a + b) / Γ(b)) или None, если Γ(a) или Γ(b) не конечна."""
    gamma_a = provider.gamma(a)
    gamma_b = provider.gamma(b)

    if not (is_valid_float(gamma_a) and is_valid_float(gamma_b)):
        return None

    return gamma_a / (provider.gamma(a + b) / gamma_b)


def _stirling_correction(z: Scalar) -> Scalar:
    """δ(z) = ln Γ(z) - (z - 1/2) ln z + z - ln(2π)/2 при z ≥ STIRLING_MIN_ARG."""
    t = 1 / (z * z)
    acc = _STIRLING_COEFFICIENTS[-1]
    for coefficient in reversed(_STIRLING_COEFFICIENTS[:-1]):
        acc = acc * t + coefficient
    return acc / z


def _ln_gamma_difference(a: Scalar, b: Scalar) -> Scalar:
    """ln Γ(b) - ln Γ(a + b) при b ≥ STIRLING_MIN_ARG, любом a > 0."""
    total = a + b
    return (
        a
        - a * np.log(total)
        - (b - _HALF) * np.log1p(a / b)
        + _stirling_correction(b)
        - _stirling_correction(total)
    )


def _ln_beta_stirling(a: Scalar, b: Scalar) -> Scalar:
    """ln B(a, b) при a, b ≥ STIRLING_MIN_ARG."""
    total = a + b
    return (
        _HALF_LN_2PI
        - a * np.log1p(b / a)
        - b * np.log1p(a / b)
        + (np.log(total) - np.log(a) - np.log(b)) / 2
        + _stirling_correction(a)
        + _stirling_correction(b)
        - _stirling_correction(total)
    )


def _ln_beta_log_space(a: Scalar, b: Scalar, provider: GammaProvider) -> Scalar:
    small, large = (a, b) if a <= b else (b, a)

    if large < STIRLING_MIN_ARG:
        return provider.ln_gamma(a) + provider.ln_gamma(b) - provider.ln_gamma(a + b)

    if small < STIRLING_MIN_ARG:
        return provider.ln_gamma(small) + _ln_gamma_difference(small, large)

    return _ln_beta_stirling(small, large)


def beta(a: Scalar, b: Scalar, provider: GammaProvider = DEFAULT_GAMMA_PROVIDER) -> Scalar:
    """
    Beta-функция B(a, b) в рабочем типе.

    Args:
        a: Shape-параметр a > 0
        b: Shape-параметр b > 0
        provider: Поставщик Gamma-функции

    Returns:
        B(a, b), насыщенная до WORKING_MAX при переполнении

    Raises:
        InvalidArgument: если a ≤ 0, b ≤ 0 или NaN/Inf

    Examples:
        >>> float(beta(2.0, 3.0))  # 1/12
        0.08333333333333333
    """
    validate_shape(a, "a")
    validate_shape(b, "b")
    a = WORKING_DTYPE(a)
    b = WORKING_DTYPE(b)

    if a + b <= provider.max_arg():
        ratio = _gamma_ratio(a, b, provider)
        if ratio is not None:
            return ratio
        logger.debug("Gamma overflow in direct ratio for a=%s, b=%s; using log-space", a, b)

    ln_value = _ln_beta_log_space(a, b, provider)

    if ln_value > LN_WORKING_MAX:
        logger.warning("B(%s, %s) exceeds working range, saturated", a, b)
        return WORKING_MAX

    return np.exp(ln_value)


def ln_beta(a: Scalar, b: Scalar, provider: GammaProvider = DEFAULT_GAMMA_PROVIDER) -> Scalar:
    """
    Натуральный логарифм Beta-функции ln B(a, b) в рабочем типе.

    Не формирует B(a, b) при a + b > max_arg, поэтому конечна
    там, где сама B(a, b) уходит в underflow/overflow.

    Raises:
        InvalidArgument: если a ≤ 0, b ≤ 0 или NaN/Inf

    Examples:
        >>> float(ln_beta(1.0, 1.0))
        0.0
    """
    validate_shape(a, "a")
    validate_shape(b, "b")
    a = WORKING_DTYPE(a)
    b = WORKING_DTYPE(b)

    if a == 1 and b == 1:
        return WORKING_DTYPE(0)

    if a + b <= provider.max_arg():
        ratio = _gamma_ratio(a, b, provider)
        if ratio is not None:
            return np.log(ratio)

    return _ln_beta_log_space(a, b, provider)
