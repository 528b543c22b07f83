"""
Shape Reduction — редукция (a, b) к области continued fraction

Два параллельных семейства формул:
    F(x, a, b) = I_x(a, b)   (REGULARIZED, Beta CDF)
    G(x, a, b) = B_x(a, b)   (UNREGULARIZED, неполный Beta-интеграл)

Регион              | F (regularized)                         | G (unregularized)
--------------------|-----------------------------------------|------------------------------------
CF_LOWER_TAIL       | CF(x, a, b)                             | B(a,b) CF(x, a, b)
CF_UPPER_TAIL       | 1 - CF(1-x, b, a)                       | B(a,b) (1 - CF(1-x, b, a))
BOTH_BELOW_ONE      | (a F(a+1, b) + b F(a, b+1)) / (a + b)   | G(a+1, b) + G(a, b+1)
A_EQUALS_ONE        | 1 - (1-x)^b / (b B(a,b))                | (1 - (1-x)^b) / b
B_EQUALS_ONE        | x^a / (a B(a,b))                        | x^a / a
A_BELOW_ONE         | F(a+1, b) + x^a (1-x)^b / (a B(a,b))    | ((a+b) G(a+1, b) + x^a (1-x)^b) / a
B_BELOW_ONE         | F(a, b+1) - x^a (1-x)^b / (b B(a,b))    | ((a+b) G(a, b+1) - x^a (1-x)^b) / b

Каждый обработчик региона возвращает константу и список взвешенных
дочерних вычислений. Редукция выполняется явным стеком (без рекурсии):
каждый шаг строго увеличивает параметр < 1, глубина ограничена
config.max_reduction_depth.
"""

import logging
from typing import Callable, NamedTuple

import numpy as np

from src.core.domain.engine_config import DEFAULT_ENGINE_CONFIG, EngineConfig
from src.core.domain.shape_region import (
    IntegralFamily,
    ReductionTerm,
    ShapeRegion,
    classify_region,
)
from src.core.math.beta_core import beta, ln_beta
from src.core.math.continued_fraction import continued_fraction
from src.core.math.exceptions import ReductionDepthExceeded
from src.core.math.gamma_provider import DEFAULT_GAMMA_PROVIDER, GammaProvider
from src.core.math.numerical_safeguards import WORKING_DTYPE, Scalar

logger = logging.getLogger(__name__)

_ZERO = WORKING_DTYPE(0)
_ONE = WORKING_DTYPE(1)


# =============================================================================
# TYPES
# =============================================================================


class _Context(NamedTuple):
    x: Scalar
    config: EngineConfig
    provider: GammaProvider


class ReductionStep(NamedTuple):
    """Результат обработчика региона: constant + Σ weight × F(x, a', b')."""

    constant: Scalar
    children: tuple = ()


RegionHandler = Callable[[_Context, Scalar, Scalar], ReductionStep]


# =============================================================================
# HELPERS
# =============================================================================


def _boundary_term(x: Scalar, a: Scalar, b: Scalar, ln_scale: Scalar) -> Scalar:
    """exp(a ln x + b ln(1-x) - ln_scale); 0 на границах x = 0 и x = 1."""
    if x <= 0 or x >= 1:
        return _ZERO
    return np.exp(a * np.log(x) + b * np.log1p(-x) - ln_scale)


def _cf(ctx: _Context, x: Scalar, a: Scalar, b: Scalar) -> Scalar:
    return continued_fraction(x, a, b, config=ctx.config, provider=ctx.provider)


# =============================================================================
# REGULARIZED FAMILY: I_x(a, b)
# =============================================================================


def _regularized_cf_lower(ctx: _Context, a: Scalar, b: Scalar) -> ReductionStep:
    return ReductionStep(_cf(ctx, ctx.x, a, b))


def _regularized_cf_upper(ctx: _Context, a: Scalar, b: Scalar) -> ReductionStep:
    return ReductionStep(_ONE - _cf(ctx, _ONE - ctx.x, b, a))


def _regularized_both_below_one(ctx: _Context, a: Scalar, b: Scalar) -> ReductionStep:
    total = a + b
    return ReductionStep(_ZERO, ((a / total, a + 1, b), (b / total, a, b + 1)))


def _regularized_a_equals_one(ctx: _Context, a: Scalar, b: Scalar) -> ReductionStep:
    return ReductionStep(_ONE - np.power(_ONE - ctx.x, b) / (b * beta(a, b, ctx.provider)))


def _regularized_b_equals_one(ctx: _Context, a: Scalar, b: Scalar) -> ReductionStep:
    return ReductionStep(np.power(ctx.x, a) / (a * beta(a, b, ctx.provider)))


def _regularized_a_below_one(ctx: _Context, a: Scalar, b: Scalar) -> ReductionStep:
    term = _boundary_term(ctx.x, a, b, np.log(a) + ln_beta(a, b, ctx.provider))
    return ReductionStep(term, ((_ONE, a + 1, b),))


def _regularized_b_below_one(ctx: _Context, a: Scalar, b: Scalar) -> ReductionStep:
    term = _boundary_term(ctx.x, a, b, np.log(b) + ln_beta(a, b, ctx.provider))
    return ReductionStep(-term, ((_ONE, a, b + 1),))


# =============================================================================
# UNREGULARIZED FAMILY: B_x(a, b)
# =============================================================================


def _unregularized_cf_lower(ctx: _Context, a: Scalar, b: Scalar) -> ReductionStep:
    return ReductionStep(beta(a, b, ctx.provider) * _cf(ctx, ctx.x, a, b))


def _unregularized_cf_upper(ctx: _Context, a: Scalar, b: Scalar) -> ReductionStep:
    return ReductionStep(beta(a, b, ctx.provider) * (_ONE - _cf(ctx, _ONE - ctx.x, b, a)))


def _unregularized_both_below_one(ctx: _Context, a: Scalar, b: Scalar) -> ReductionStep:
    return ReductionStep(_ZERO, ((_ONE, a + 1, b), (_ONE, a, b + 1)))


def _unregularized_a_equals_one(ctx: _Context, a: Scalar, b: Scalar) -> ReductionStep:
    return ReductionStep((_ONE - np.power(_ONE - ctx.x, b)) / b)


def _unregularized_b_equals_one(ctx: _Context, a: Scalar, b: Scalar) -> ReductionStep:
    return ReductionStep(np.power(ctx.x, a) / a)


def _unregularized_a_below_one(ctx: _Context, a: Scalar, b: Scalar) -> ReductionStep:
    term = _boundary_term(ctx.x, a, b, np.log(a))
    return ReductionStep(term, (((a + b) / a, a + 1, b),))


def _unregularized_b_below_one(ctx: _Context, a: Scalar, b: Scalar) -> ReductionStep:
    term = _boundary_term(ctx.x, a, b, np.log(b))
    return ReductionStep(-term, (((a + b) / b, a, b + 1),))


# =============================================================================
# DISPATCH TABLES
# =============================================================================

REGION_HANDLERS: dict[IntegralFamily, dict[ShapeRegion, RegionHandler]] = {
    IntegralFamily.REGULARIZED: {
        ShapeRegion.CF_LOWER_TAIL: _regularized_cf_lower,
        ShapeRegion.CF_UPPER_TAIL: _regularized_cf_upper,
        ShapeRegion.BOTH_BELOW_ONE: _regularized_both_below_one,
        ShapeRegion.A_EQUALS_ONE: _regularized_a_equals_one,
        ShapeRegion.B_EQUALS_ONE: _regularized_b_equals_one,
        ShapeRegion.A_BELOW_ONE: _regularized_a_below_one,
        ShapeRegion.B_BELOW_ONE: _regularized_b_below_one,
    },
    IntegralFamily.UNREGULARIZED: {
        ShapeRegion.CF_LOWER_TAIL: _unregularized_cf_lower,
        ShapeRegion.CF_UPPER_TAIL: _unregularized_cf_upper,
        ShapeRegion.BOTH_BELOW_ONE: _unregularized_both_below_one,
        ShapeRegion.A_EQUALS_ONE: _unregularized_a_equals_one,
        ShapeRegion.B_EQUALS_ONE: _unregularized_b_equals_one,
        ShapeRegion.A_BELOW_ONE: _unregularized_a_below_one,
        ShapeRegion.B_BELOW_ONE: _unregularized_b_below_one,
    },
}


# =============================================================================
# REDUCTION LOOP
# =============================================================================


def reduce_incomplete_beta(
    x: Scalar,
    a: Scalar,
    b: Scalar,
    family: IntegralFamily,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
    provider: GammaProvider = DEFAULT_GAMMA_PROVIDER,
) -> Scalar:
    """
    Вычисление F(x, a, b) или G(x, a, b) редукцией shape-параметров.

    Args:
        x: Точка вычисления в рабочем типе
        a: Shape-параметр a > 0
        b: Shape-параметр b > 0
        family: REGULARIZED (I_x) или UNREGULARIZED (B_x)
        config: Лимиты итераций и глубины редукции
        provider: Поставщик Gamma-функции

    Returns:
        Значение в рабочем типе

    Raises:
        ReductionDepthExceeded: если глубина редукции > config.max_reduction_depth
        NumericNonConvergence: если continued fraction не сошлась

    Examples:
        >>> float(reduce_incomplete_beta(0.3, 1.0, 1.0, IntegralFamily.REGULARIZED))
        0.3
    """
    handlers = REGION_HANDLERS[family]
    ctx = _Context(WORKING_DTYPE(x), config, provider)

    total = _ZERO
    stack = [ReductionTerm(_ONE, WORKING_DTYPE(a), WORKING_DTYPE(b), 0)]

    while stack:
        term = stack.pop()

        if term.depth > config.max_reduction_depth:
            raise ReductionDepthExceeded(
                f"Shape reduction exceeded max depth {config.max_reduction_depth} "
                f"at a={float(term.a)}, b={float(term.b)}",
                a=float(a),
                b=float(b),
                x=float(x),
                iterations=term.depth,
            )

        region = classify_region(ctx.x, term.a, term.b)
        logger.debug("Reduction depth %d: a=%s, b=%s -> %s", term.depth, term.a, term.b, region.value)

        step = handlers[region](ctx, term.a, term.b)
        total += term.weight * step.constant

        for weight, child_a, child_b in step.children:
            stack.append(ReductionTerm(term.weight * weight, child_a, child_b, term.depth + 1))

    return total
