"""
Тесты для Precision Adapter — публичные точки входа

Проверяемые свойства:
1. B(a, b) == B(b, a)
2. beta_cdf(0, a, b) == 0, beta_cdf(1, a, b) == 1
3. beta_cdf монотонно не убывает по x
4. incomplete_beta(1, a, b) ≈ beta(a, b)
5. beta_cdf(x, 1, 1) == x
6. Известные значения: B(2, 3) = 1/12, beta_cdf(0.5, 2, 2) = 0.5
7. Насыщение до PUBLIC_MAX вместо Inf
8. Валидация аргументов и политика x вне [0, 1]
9. Большие shape-параметры у моды: точное значение или NumericNonConvergence
10. Субнормальные shape-параметры
"""

import math

import mpmath as mp
import numpy as np
import pytest

from src.core.domain.engine_config import EngineConfig
from src.core.math.exceptions import InvalidArgument, NumericNonConvergence
from src.core.math.gamma_provider import ScipyGammaProvider
from src.core.math.numerical_safeguards import (
    EPS_FLOAT_COMPARE_REL,
    LN_WORKING_MAX,
    PUBLIC_MAX,
    WORKING_DTYPE,
    WORKING_EPS,
)
from src.core.math.precision_adapter import (
    beta,
    beta_cdf,
    beta_pdf,
    beta_sf,
    incomplete_beta,
    ln_beta,
    narrow,
    widen,
)

mp.mp.dps = 40

# Точность у моды при a, b ~ 1e8: ошибка показателя экспоненты ~ (a + b) eps
LARGE_SHAPE_REL = 1e-9 if WORKING_EPS < 1e-18 else 1e-6

SHAPES = [
    (0.5, 0.5),
    (0.2, 0.9),
    (1.0, 1.0),
    (1.0, 3.0),
    (3.0, 1.0),
    (0.3, 2.5),
    (2.5, 0.3),
    (2.0, 2.0),
    (2.0, 5.0),
    (10.5, 20.25),
    (120.0, 80.0),
]


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def unit_grid():
    """Равномерная сетка на [0, 1]."""
    return [i / 100 for i in range(101)]


# =============================================================================
# ТЕСТЫ: widen / narrow
# =============================================================================


class TestWidenNarrow:
    """Расширение и сужение точности."""

    def test_widen_returns_working_type(self):
        assert isinstance(widen(0.1), WORKING_DTYPE)

    def test_round_trip_exact(self):
        assert narrow(widen(0.1)) == 0.1

    def test_narrow_returns_python_float(self):
        assert type(narrow(WORKING_DTYPE(2))) is float

    def test_positive_infinity_saturates(self):
        assert narrow(WORKING_DTYPE(np.inf)) == PUBLIC_MAX

    def test_negative_infinity_saturates(self):
        assert narrow(WORKING_DTYPE(-np.inf)) == -PUBLIC_MAX

    def test_nan_passes_through(self):
        assert math.isnan(narrow(WORKING_DTYPE(np.nan)))

    def test_saturation_logged(self, caplog):
        with caplog.at_level("WARNING", logger="src.core.math.precision_adapter"):
            narrow(WORKING_DTYPE(np.inf))
        assert "saturated" in caplog.text


# =============================================================================
# ТЕСТЫ: beta / ln_beta
# =============================================================================


class TestPublicBeta:
    """Публичные beta и ln_beta."""

    def test_known_value(self):
        """B(2, 3) = 1/12 ≈ 0.08333333"""
        assert beta(2.0, 3.0) == pytest.approx(0.08333333333333333, rel=1e-15)

    @pytest.mark.parametrize("a,b", SHAPES)
    def test_symmetry(self, a, b):
        assert beta(a, b) == pytest.approx(beta(b, a), rel=EPS_FLOAT_COMPARE_REL)

    def test_returns_float(self):
        assert type(beta(2.0, 3.0)) is float
        assert type(ln_beta(2.0, 3.0)) is float

    def test_overflow_saturates(self):
        """B(1e-320, 1) = 1e320 > DBL_MAX → PUBLIC_MAX, не Inf"""
        assert beta(1e-320, 1.0) == PUBLIC_MAX

    def test_ln_beta_finite_where_beta_saturates(self):
        assert ln_beta(1e-320, 1.0) == pytest.approx(320 * math.log(10), rel=1e-9)

    @pytest.mark.parametrize("a,b", [(3.0, 4.0), (25.0, 30.0), (60.0, 70.0)])
    def test_branch_continuity(self, a, b):
        """Direct ratio и log-space совпадают там, где обе ветви вычислимы"""
        log_space = ScipyGammaProvider(max_arg_value=1.0)
        assert beta(a, b, provider=log_space) == pytest.approx(beta(a, b), rel=EPS_FLOAT_COMPARE_REL)
        assert ln_beta(a, b, provider=log_space) == pytest.approx(ln_beta(a, b), rel=EPS_FLOAT_COMPARE_REL)

    @pytest.mark.parametrize("func", [beta, ln_beta])
    @pytest.mark.parametrize("a,b", [(0.0, 1.0), (1.0, -2.0), (float("nan"), 1.0), (1.0, float("inf"))])
    def test_invalid_shapes(self, func, a, b):
        with pytest.raises(InvalidArgument):
            func(a, b)


# =============================================================================
# ТЕСТЫ: beta_cdf
# =============================================================================


class TestBetaCdf:
    """Публичная beta_cdf."""

    @pytest.mark.parametrize("a,b", SHAPES)
    def test_boundaries(self, a, b):
        assert beta_cdf(0.0, a, b) == 0.0
        assert beta_cdf(1.0, a, b) == 1.0

    @pytest.mark.parametrize("a,b", SHAPES)
    def test_monotone_non_decreasing(self, a, b, unit_grid):
        values = [beta_cdf(x, a, b) for x in unit_grid]
        for previous, current in zip(values, values[1:]):
            assert current >= previous - 1e-15

    @pytest.mark.parametrize("a,b", SHAPES)
    def test_in_unit_interval(self, a, b, unit_grid):
        for x in unit_grid:
            assert 0.0 <= beta_cdf(x, a, b) <= 1.0

    @pytest.mark.parametrize("x", [0.0, 0.1, 0.3, 0.5, 0.77, 1.0])
    def test_uniform_is_identity(self, x):
        """beta_cdf(x, 1, 1) == x"""
        assert beta_cdf(x, 1.0, 1.0) == pytest.approx(x, rel=1e-15, abs=1e-15)

    def test_uniform_known_value(self):
        assert beta_cdf(0.3, 1.0, 1.0) == pytest.approx(0.3)

    def test_symmetric_median(self):
        """beta_cdf(0.5, 2, 2) = 0.5"""
        assert beta_cdf(0.5, 2.0, 2.0) == pytest.approx(0.5, rel=1e-14)

    @pytest.mark.parametrize("a,b", SHAPES)
    @pytest.mark.parametrize("x", [0.02, 0.4, 0.85])
    def test_matches_reference(self, x, a, b):
        expected = float(mp.betainc(a, b, 0, x, regularized=True))
        assert beta_cdf(x, a, b) == pytest.approx(expected, rel=EPS_FLOAT_COMPARE_REL, abs=1e-300)

    def test_large_shapes(self):
        expected = float(mp.betainc(500, 500, 0, 0.48, regularized=True))
        assert beta_cdf(0.48, 500.0, 500.0) == pytest.approx(expected, rel=EPS_FLOAT_COMPARE_REL)

    @pytest.mark.parametrize("x", [-0.1, 1.1, float("nan"), float("inf")])
    def test_out_of_range_rejected_by_default(self, x):
        with pytest.raises(InvalidArgument):
            beta_cdf(x, 2.0, 3.0)

    def test_out_of_range_clamped_when_configured(self):
        config = EngineConfig(clamp_x_to_unit_interval=True)
        assert beta_cdf(-0.5, 2.0, 3.0, config=config) == 0.0
        assert beta_cdf(1.5, 2.0, 3.0, config=config) == 1.0

    def test_nan_rejected_even_when_clamping(self):
        config = EngineConfig(clamp_x_to_unit_interval=True)
        with pytest.raises(InvalidArgument):
            beta_cdf(float("nan"), 2.0, 3.0, config=config)

    @pytest.mark.parametrize("a,b", [(0.0, 1.0), (1.0, 0.0), (-3.0, 2.0)])
    def test_invalid_shapes(self, a, b):
        with pytest.raises(InvalidArgument):
            beta_cdf(0.5, a, b)

    def test_non_convergence_propagates(self):
        config = EngineConfig(max_iterations=1)
        with pytest.raises(NumericNonConvergence):
            beta_cdf(0.3, 50.0, 80.0, config=config)


def _cdf_or_none(x, a, b):
    """beta_cdf либо None, если continued fraction сообщила о несходимости."""
    try:
        return beta_cdf(x, a, b)
    except NumericNonConvergence:
        return None


class TestBetaCdfExtremeShapes:
    """Большие shape-параметры у моды и субнормальные shape-параметры."""

    @pytest.mark.parametrize("a", [1e4, 1e6, 2e7, 5e7, 1e8])
    def test_symmetric_mode_is_median(self, a):
        """I_0.5(a, a) = 0.5; никогда не 0 или 1 после clamp"""
        value = _cdf_or_none(0.5, a, a)
        if value is not None:
            assert value == pytest.approx(0.5, rel=LARGE_SHAPE_REL)

    @pytest.mark.parametrize(
        "x,a,b,expected",
        [
            (0.25, 1e8, 3e8, 0.5000076776477681),
            (0.49999, 1e8, 1e8, 0.38864871),
        ],
    )
    def test_near_mode_reference(self, x, a, b, expected):
        value = _cdf_or_none(x, a, b)
        if value is not None:
            assert 0.0 < value < 1.0
            assert value == pytest.approx(expected, rel=max(LARGE_SHAPE_REL, 1e-7))

    @pytest.mark.parametrize("a,b", [(1e4, 3e4), (1e6, 3e6), (3e6, 1e6)])
    def test_asymmetric_mode_strictly_inside(self, a, b):
        """У моды I_x(a, b) = 0.5 + O(1/sqrt(a + b)), не насыщается в 0 или 1"""
        value = _cdf_or_none((a - 1) / (a + b - 2), a, b)
        if value is not None:
            assert abs(value - 0.5) < 1e-2

    def test_subnormal_a_with_unit_b(self):
        """I_x(a, 1) = x^a → 1 при a → 0"""
        if LN_WORKING_MAX > 740:
            assert beta_cdf(0.5, 1e-320, 1.0) == pytest.approx(1.0, rel=1e-15)

    def test_subnormal_b(self):
        """I_x(a, b) → 0 при b → 0"""
        assert beta_cdf(0.5, 2.0, 1e-320) == pytest.approx(0.0, abs=1e-15)

    def test_subnormal_ln_beta_pair(self):
        """ln B(e, e) = ln(2/e) + O(e)"""
        assert ln_beta(1e-310, 1e-310) == pytest.approx(math.log(2.0) + 310 * math.log(10), rel=1e-9)


# =============================================================================
# ТЕСТЫ: beta_sf
# =============================================================================


class TestBetaSf:
    """Survival function."""

    def test_boundaries(self):
        assert beta_sf(0.0, 2.0, 3.0) == 1.0
        assert beta_sf(1.0, 2.0, 3.0) == 0.0

    @pytest.mark.parametrize("a,b", SHAPES)
    @pytest.mark.parametrize("x", [0.1, 0.5, 0.9])
    def test_complements_cdf(self, x, a, b):
        assert beta_sf(x, a, b) + beta_cdf(x, a, b) == pytest.approx(1.0, rel=1e-12)

    def test_upper_tail_precision(self):
        """sf сохраняет точность там, где 1 - cdf теряет все разряды"""
        expected = float(mp.betainc(50, 2, 0, 1 - mp.mpf(0.9), regularized=True))
        assert expected > 0
        assert beta_sf(0.9, 2.0, 50.0) == pytest.approx(expected, rel=EPS_FLOAT_COMPARE_REL)
        assert 1.0 - beta_cdf(0.9, 2.0, 50.0) == 0.0


# =============================================================================
# ТЕСТЫ: incomplete_beta
# =============================================================================


class TestIncompleteBeta:
    """Нерегуляризованная неполная Beta-функция."""

    @pytest.mark.parametrize("a,b", SHAPES)
    def test_full_integral_is_beta(self, a, b):
        """incomplete_beta(1, a, b) ≈ beta(a, b)"""
        assert incomplete_beta(1.0, a, b) == pytest.approx(beta(a, b), rel=EPS_FLOAT_COMPARE_REL)

    @pytest.mark.parametrize("a,b", SHAPES)
    def test_zero_point(self, a, b):
        assert incomplete_beta(0.0, a, b) == 0.0

    @pytest.mark.parametrize("a,b", SHAPES)
    @pytest.mark.parametrize("x", [0.02, 0.4, 0.85])
    def test_matches_reference(self, x, a, b):
        expected = float(mp.betainc(a, b, 0, x))
        assert incomplete_beta(x, a, b) == pytest.approx(expected, rel=EPS_FLOAT_COMPARE_REL, abs=1e-300)

    @pytest.mark.parametrize("x", [-0.1, 1.1, float("nan")])
    def test_out_of_range_rejected(self, x):
        with pytest.raises(InvalidArgument):
            incomplete_beta(x, 2.0, 3.0)

    def test_uniform(self):
        assert incomplete_beta(0.25, 1.0, 1.0) == pytest.approx(0.25, rel=1e-15)


# =============================================================================
# ТЕСТЫ: beta_pdf
# =============================================================================


class TestBetaPdf:
    """Плотность Beta(a, b)."""

    def test_uniform_density(self):
        assert beta_pdf(0.5, 1.0, 1.0) == 1.0

    def test_known_value(self):
        """pdf(0.3; 2, 3) = 0.3 × 0.7² × 12 = 1.764"""
        assert beta_pdf(0.3, 2.0, 3.0) == pytest.approx(1.764, rel=1e-13)

    def test_boundary_zero_density(self):
        assert beta_pdf(0.0, 2.0, 3.0) == 0.0
        assert beta_pdf(1.0, 2.0, 3.0) == 0.0

    def test_boundary_finite_density(self):
        """a = 1: pdf(0; 1, b) = b"""
        assert beta_pdf(0.0, 1.0, 4.0) == pytest.approx(4.0, rel=1e-14)

    def test_boundary_singularity_saturates(self):
        assert beta_pdf(0.0, 0.5, 0.5) == PUBLIC_MAX
        assert beta_pdf(1.0, 0.5, 0.5) == PUBLIC_MAX

    def test_integrates_to_cdf_increment(self):
        """Производная CDF ≈ pdf (центральная разность)"""
        h = 1e-6
        derivative = (beta_cdf(0.4 + h, 2.5, 3.5) - beta_cdf(0.4 - h, 2.5, 3.5)) / (2 * h)
        assert derivative == pytest.approx(beta_pdf(0.4, 2.5, 3.5), rel=1e-6)

    def test_out_of_range_rejected(self):
        with pytest.raises(InvalidArgument):
            beta_pdf(1.5, 2.0, 3.0)
