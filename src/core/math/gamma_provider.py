"""
Gamma Provider — Gamma(x), ln Gamma(x) и порог переполнения

Внешний коллаборатор BetaCore. Контракт:
- gamma(x): Γ(x) для x > 0 в рабочем типе (может вернуть Inf при overflow)
- ln_gamma(x): ln Γ(x) для x > 0, конечна на всём домене
- max_arg(): наибольший аргумент, для которого gamma(x) не переполняется

BetaCore опирается на этот контракт: при a + b > max_arg() вычисления
уходят в log-space через ln_gamma.

Для 0 < x < 1 используется ln Γ(x) = ln Γ(1 + x) - ln x: gammaln
в scipy переполняется на субнормальных x, а ln x в рабочем типе конечен.
"""

from dataclasses import dataclass
from typing import Final, Protocol

import numpy as np
from scipy import special

from src.core.math.numerical_safeguards import WORKING_DTYPE, Scalar

# Gamma-ядро scipy работает в float64: Γ(171.62...) ≈ DBL_MAX.
# Берётся целый консервативный порог.
GAMMA_MAX_ARG: Final[float] = 171.0


class GammaProvider(Protocol):
    """Интерфейс поставщика Gamma-функции."""

    def gamma(self, x: Scalar) -> Scalar: ...

    def ln_gamma(self, x: Scalar) -> Scalar: ...

    def max_arg(self) -> float: ...


@dataclass(frozen=True)
class ScipyGammaProvider:
    """
    Gamma-функция на базе scipy.special (float64 ядра).

    Аргументы сужаются до float64 перед вызовом ufunc (scipy не имеет
    long double loops), результат расширяется обратно в рабочий тип.

    Attributes:
        max_arg_value: Порог переключения BetaCore на log-space.
            Можно понизить, чтобы принудительно использовать log-space ветвь.
    """

    max_arg_value: float = GAMMA_MAX_ARG

    def gamma(self, x: Scalar) -> Scalar:
        return WORKING_DTYPE(special.gamma(float(x)))

    def ln_gamma(self, x: Scalar) -> Scalar:
        if x < 1:
            shifted = WORKING_DTYPE(special.gammaln(1.0 + float(x)))
            return shifted - np.log(WORKING_DTYPE(x))
        return WORKING_DTYPE(special.gammaln(float(x)))

    def max_arg(self) -> float:
        return self.max_arg_value


DEFAULT_GAMMA_PROVIDER: Final = ScipyGammaProvider()
