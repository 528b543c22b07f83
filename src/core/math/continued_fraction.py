"""
Continued Fraction — ядро вычисления регуляризованной неполной Beta-функции

Область применимости: a > 1, b > 1, 0 ≤ x ≤ (a - 1) / (a + b - 2).

ФОРМУЛЫ:
    I_x(a, b) = x^a (1-x)^b / (a B(a, b)) × 1 / (1 + d1 / (1 + d2 / (1 + ...)))

    d_{2m+1} = -(a + m)(a + b + m) x / ((a + 2m)(a + 2m + 1))
    d_{2m}   =  m (b - m) x / ((a + 2m - 1)(a + 2m))

Рекуррентность по паре convergents (A_{n-1}, A_n), (B_{n-1}, B_n):
    A_{n+1} = A_n + d_{n+1} A_{n-1}
    B_{n+1} = B_n + d_{n+1} B_{n-1}

После каждого шага все четыре члена делятся на B_{n+1} (ratio не меняется,
B_n = 1, дрейф к overflow/underflow подавлен). Знаменатель с
|B_{n+1}| < LENTZ_TINY заменяется на LENTZ_TINY (modified Lentz).

Сходимость: аппроксиманты, снятые на шагах k ≡ 1 и k ≡ 3 (mod 4)
(f_less и f_greater), удовлетворяют
    2 |f_greater - f_less| ≤ CONVERGENCE_EPS |f_greater + f_less|

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. x = 0 → 0 без итераций
2. Число итераций ограничено config.max_iterations (NumericNonConvergence)
3. Неконечный аппроксимант или результат → NumericNonConvergence
4. Состояние convergents не покидает модуль
"""

import itertools
import logging
from typing import Iterator, NamedTuple

import numpy as np

from src.core.domain.engine_config import DEFAULT_ENGINE_CONFIG, EngineConfig
from src.core.math.beta_core import ln_beta
from src.core.math.exceptions import InvalidArgument, NumericNonConvergence
from src.core.math.gamma_provider import DEFAULT_GAMMA_PROVIDER, GammaProvider
from src.core.math.numerical_safeguards import (
    CONVERGENCE_EPS,
    LENTZ_TINY,
    WORKING_DTYPE,
    Scalar,
    is_valid_float,
)

logger = logging.getLogger(__name__)

_ZERO = WORKING_DTYPE(0)
_ONE = WORKING_DTYPE(1)


class _Convergents(NamedTuple):
    num_prev: float
    num_cur: float
    den_prev: float
    den_cur: float


def _coefficients(x: Scalar, a: Scalar, b: Scalar) -> Iterator[Scalar]:
    """Бесконечная последовательность d1, d2, d3, ... (odd/even чередуются)."""
    for m in itertools.count():
        am = a + m
        aj = a + 2 * m
        yield -am * (am + b) * x / ((aj + 1) * aj)

        m_next = m + 1
        aj = a + 2 * m_next
        yield m_next * (b - m_next) * x / ((aj - 1) * aj)


def _advance(state: _Convergents, d: Scalar) -> tuple[_Convergents, Scalar]:
    """Один шаг рекуррентности с нормировкой B = 1. Возвращает (state, A/B)."""
    num = state.num_cur + d * state.num_prev
    den = state.den_cur + d * state.den_prev

    if abs(den) < LENTZ_TINY:
        den = LENTZ_TINY

    approximant = num / den
    state = _Convergents(state.num_cur / den, approximant, state.den_cur / den, _ONE)
    return state, approximant


def _converged(f_less: Scalar, f_greater: Scalar) -> bool:
    return 2 * abs(f_greater - f_less) <= CONVERGENCE_EPS * abs(f_greater + f_less)


def _non_convergence(reason: str, x: Scalar, a: Scalar, b: Scalar, iterations: int) -> NumericNonConvergence:
    return NumericNonConvergence(
        f"Continued fraction {reason} for x={float(x)}, a={float(a)}, b={float(b)}",
        a=float(a),
        b=float(b),
        x=float(x),
        iterations=iterations,
    )


def continued_fraction(
    x: Scalar,
    a: Scalar,
    b: Scalar,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
    provider: GammaProvider = DEFAULT_GAMMA_PROVIDER,
) -> Scalar:
    """
    Регуляризованная неполная Beta-функция I_x(a, b) через continued fraction.

    Args:
        x: Точка вычисления, 0 ≤ x ≤ (a - 1) / (a + b - 2)
        a: Shape-параметр a > 1
        b: Shape-параметр b > 1
        config: Лимит итераций
        provider: Поставщик Gamma-функции для нормировки ln B(a, b)

    Returns:
        I_x(a, b) в рабочем типе

    Raises:
        InvalidArgument: если (x, a, b) вне области применимости
        NumericNonConvergence: если за config.max_iterations итераций
            критерий сходимости не выполнен, или аппроксимант не конечен

    Examples:
        >>> float(continued_fraction(0.5, 2.0, 2.0))
        0.5
    """
    x = WORKING_DTYPE(x)
    a = WORKING_DTYPE(a)
    b = WORKING_DTYPE(b)

    if not (a > 1 and b > 1):
        raise InvalidArgument(f"continued fraction requires a > 1 and b > 1, got a={a}, b={b}")

    # Абсолютный допуск покрывает округление 1 - x при вызове для верхнего хвоста
    if x < 0 or x > (a - 1) / (a + b - 2) + CONVERGENCE_EPS:
        raise InvalidArgument(
            f"continued fraction requires 0 <= x <= (a-1)/(a+b-2), got x={x}, a={a}, b={b}"
        )

    if x == 0:
        return _ZERO

    # Начальное состояние после нулевого шага: A_0/B_0 = 1
    state = _Convergents(_ZERO, _ONE, _ONE, _ONE)
    approximant = _ONE
    f_less = _ONE
    f_greater = _ZERO
    k = 1
    iterations = 0

    for step, d in enumerate(_coefficients(x, a, b), start=1):
        if step % 2 == 1:
            if iterations >= config.max_iterations:
                raise _non_convergence(f"did not converge in {iterations} iterations", x, a, b, iterations)
            iterations += 1

        state, approximant = _advance(state, d)
        if not is_valid_float(approximant):
            raise _non_convergence(f"approximant overflowed at iteration {iterations}", x, a, b, iterations)

        k = (k + 1) & 3
        if k == 1:
            f_less = approximant
        elif k == 3:
            f_greater = approximant

        if step % 2 == 0 and _converged(f_less, f_greater):
            break

    logger.debug("Continued fraction converged in %d iterations (x=%s, a=%s, b=%s)", iterations, x, a, b)

    if not approximant > 0:
        raise _non_convergence(f"produced non-positive approximant {approximant}", x, a, b, iterations)

    ln_value = a * np.log(x) + b * np.log1p(-x) + np.log(approximant)
    result = np.exp(ln_value - np.log(a) - ln_beta(a, b, provider))

    if not is_valid_float(result):
        raise _non_convergence(f"produced non-finite result {result}", x, a, b, iterations)

    return result
