"""
EngineConfig — конфигурация движка неполной Beta-функции

Immutable Pydantic модель с лимитами итераций и политикой обработки x.
Численные константы рабочего типа (CONVERGENCE_EPS, LN_WORKING_MAX) сюда
не входят: они фиксированы в src.core.math.numerical_safeguards.
"""

from pydantic import BaseModel, Field


# =============================================================================
# DEFAULTS
# =============================================================================

# Лимит итераций continued fraction (одна итерация = пара odd/even шагов).
# Для a, b ~ 1e6 сходимость наступает за O(sqrt(max(a, b))) итераций.
MAX_ITERATIONS_DEFAULT = 10_000

# Лимит глубины редукции shape-параметров. Каждый шаг увеличивает параметр
# < 1 на единицу, поэтому достаточно глубины 2; запас покрывает округления.
MAX_REDUCTION_DEPTH_DEFAULT = 16


# =============================================================================
# MODEL
# =============================================================================


class EngineConfig(BaseModel):
    """Конфигурация вычисления неполной Beta-функции.

    Содержит:
    - max_iterations: потолок итераций continued fraction
    - max_reduction_depth: потолок глубины редукции (a, b)
    - clamp_x_to_unit_interval: политика для x вне [0, 1] в beta_cdf
    """

    max_iterations: int = Field(
        default=MAX_ITERATIONS_DEFAULT,
        gt=0,
        description="Максимум итераций continued fraction до NumericNonConvergence",
    )
    max_reduction_depth: int = Field(
        default=MAX_REDUCTION_DEPTH_DEFAULT,
        ge=0,
        description="Максимальная глубина редукции до ReductionDepthExceeded",
    )
    clamp_x_to_unit_interval: bool = Field(
        default=False,
        description="True: beta_cdf(x<0)=0, beta_cdf(x>1)=1; False: InvalidArgument",
    )

    model_config = {"frozen": True}


DEFAULT_ENGINE_CONFIG = EngineConfig()
