"""
Numerical Safeguards — Working Precision & Argument Guards

Модуль задаёт численную среду всех вычислений Beta-функций:
- Рабочий (working) тип повышенной точности и его константы
- Публичный (public) тип и порог насыщения
- Порог сходимости continued fraction
- Валидация shape-параметров и точки вычисления x
- Насыщение (saturation) вместо распространения Inf

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Все константы read-only на время жизни процесса (Final)
2. a > 0 и b > 0 проверяются на каждом публичном вызове
3. Inf никогда не возвращается наружу: значение насыщается до max finite
4. Все операции детерминированы и воспроизводимы
"""

import math
import sys
from typing import Final, Optional, Union

import numpy as np

from src.core.math.exceptions import InvalidArgument

# =============================================================================
# WORKING PRECISION
# =============================================================================

# Внутренний тип повышенной точности (80-bit extended на x86 Linux).
# На платформах, где long double совпадает с double, диапазон тот же,
# все остальные константы выводятся из finfo и остаются согласованными.
WORKING_DTYPE: Final = np.longdouble

_WORKING_FINFO: Final = np.finfo(WORKING_DTYPE)

# Машинный epsilon рабочего типа
WORKING_EPS: Final = _WORKING_FINFO.eps

# Порог сходимости continued fraction: 10 × machine epsilon рабочего типа
CONVERGENCE_EPS: Final = WORKING_DTYPE(10) * WORKING_EPS

# Максимальное конечное значение рабочего типа и его логарифм.
# LN_WORKING_MAX: порог выбора между exp(ln B) и насыщением.
WORKING_MAX: Final = _WORKING_FINFO.max
LN_WORKING_MAX: Final = np.log(WORKING_MAX)

# Нижняя граница знаменателя continued fraction (modified Lentz):
# |B_n| < LENTZ_TINY заменяется на LENTZ_TINY, деление на 0 исключено
LENTZ_TINY: Final = WORKING_DTYPE(1e-30)

# Скаляр вычислений: Python float на входе или numpy scalar рабочего типа
Scalar = Union[float, np.floating]

# =============================================================================
# PUBLIC PRECISION
# =============================================================================

# Публичный тип: IEEE double (Python float)
PUBLIC_MAX: Final[float] = sys.float_info.max
LN_PUBLIC_MAX: Final[float] = math.log(PUBLIC_MAX)

# Толерантности сравнения float (используются в cross-check тестах и
# при сравнении direct/log-space ветвей)
EPS_FLOAT_COMPARE_REL: Final[float] = 1e-9
EPS_FLOAT_COMPARE_ABS: Final[float] = 1e-12


# =============================================================================
# ПРОВЕРКИ ЗНАЧЕНИЙ
# =============================================================================


def is_valid_float(value: Scalar) -> bool:
    """
    Проверка, является ли значение конечным (не NaN, не Inf).

    Работает и для Python float, и для numpy-скаляров рабочего типа.

    Examples:
        >>> is_valid_float(1.0)
        True
        >>> is_valid_float(float('nan'))
        False
    """
    return bool(np.isfinite(value))


def clamp(value: Scalar, min_value: Optional[Scalar] = None, max_value: Optional[Scalar] = None) -> Scalar:
    """
    Ограничение значения в заданном диапазоне.

    Тип значения сохраняется (longdouble остаётся longdouble).

    Examples:
        >>> clamp(1.5, 0.0, 1.0)
        1.0
        >>> clamp(-1e-19, 0.0, 1.0)
        0.0
    """
    result = value

    if min_value is not None and result < min_value:
        result = min_value

    if max_value is not None and result > max_value:
        result = max_value

    return result


def saturate(value: Scalar, max_value: Scalar) -> Scalar:
    """
    Насыщение по модулю: |value| ≤ max_value, Inf → ±max_value.

    NaN не изменяется (сравнения с NaN ложны).

    Args:
        value: Исходное значение
        max_value: Максимальное конечное значение целевого типа

    Returns:
        value если |value| ≤ max_value, иначе ±max_value

    Examples:
        >>> saturate(float('inf'), 1e308)
        1e+308
        >>> saturate(-float('inf'), 1e308)
        -1e+308
        >>> saturate(2.0, 1e308)
        2.0
    """
    if value > max_value:
        return max_value
    if value < -max_value:
        return -max_value
    return value


# =============================================================================
# ВАЛИДАЦИЯ АРГУМЕНТОВ
# =============================================================================


def validate_finite(value: Scalar, name: str) -> None:
    """
    Валидация, что значение конечное.

    Raises:
        InvalidArgument: Если value NaN/Inf
    """
    if not is_valid_float(value):
        raise InvalidArgument(f"{name} must be a valid float (not NaN/Inf), got {value}")


def validate_shape(value: Scalar, name: str) -> None:
    """
    Валидация shape-параметра Beta-функции: конечный и строго положительный.

    Args:
        value: Проверяемое значение (a или b)
        name: Имя параметра (для сообщения об ошибке)

    Raises:
        InvalidArgument: Если value ≤ 0 или NaN/Inf
    """
    validate_finite(value, name)

    if value <= 0:
        raise InvalidArgument(f"{name} must be positive, got {value}")


def validate_unit_interval(value: Scalar, name: str) -> None:
    """
    Валидация, что значение лежит в [0, 1].

    Raises:
        InvalidArgument: Если value вне [0, 1] или NaN/Inf
    """
    validate_finite(value, name)

    if value < 0 or value > 1:
        raise InvalidArgument(f"{name} must be in [0, 1], got {value}")
