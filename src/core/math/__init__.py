"""
Core math modules — Beta function library

Численные алгоритмы Beta-функций с гарантией стабильности.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    # Working / public precision constants
    CONVERGENCE_EPS,
    EPS_FLOAT_COMPARE_ABS,
    EPS_FLOAT_COMPARE_REL,
    LENTZ_TINY,
    LN_PUBLIC_MAX,
    LN_WORKING_MAX,
    PUBLIC_MAX,
    WORKING_DTYPE,
    WORKING_EPS,
    WORKING_MAX,
    Scalar,
    # Utilities
    clamp,
    is_valid_float,
    saturate,
    # Validation
    validate_finite,
    validate_shape,
    validate_unit_interval,
)

# Exceptions
from src.core.math.exceptions import (
    BetaFunctionError,
    InvalidArgument,
    NumericNonConvergence,
    ReductionDepthExceeded,
)

# Gamma Provider
from src.core.math.gamma_provider import (
    DEFAULT_GAMMA_PROVIDER,
    GAMMA_MAX_ARG,
    GammaProvider,
    ScipyGammaProvider,
)

# Engine (working precision)
from src.core.math.continued_fraction import continued_fraction
from src.core.math.shape_reduction import REGION_HANDLERS, reduce_incomplete_beta

# Public API (public precision)
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

__all__ = [
    # Numerical Safeguards — Constants
    "CONVERGENCE_EPS",
    "EPS_FLOAT_COMPARE_ABS",
    "EPS_FLOAT_COMPARE_REL",
    "LENTZ_TINY",
    "LN_PUBLIC_MAX",
    "LN_WORKING_MAX",
    "PUBLIC_MAX",
    "WORKING_DTYPE",
    "WORKING_EPS",
    "WORKING_MAX",
    "Scalar",
    # Numerical Safeguards — Utilities
    "clamp",
    "is_valid_float",
    "saturate",
    # Numerical Safeguards — Validation
    "validate_finite",
    "validate_shape",
    "validate_unit_interval",
    # Exceptions
    "BetaFunctionError",
    "InvalidArgument",
    "NumericNonConvergence",
    "ReductionDepthExceeded",
    # Gamma Provider
    "DEFAULT_GAMMA_PROVIDER",
    "GAMMA_MAX_ARG",
    "GammaProvider",
    "ScipyGammaProvider",
    # Engine
    "REGION_HANDLERS",
    "continued_fraction",
    "reduce_incomplete_beta",
    # Public API
    "beta",
    "beta_cdf",
    "beta_pdf",
    "beta_sf",
    "incomplete_beta",
    "ln_beta",
    "narrow",
    "widen",
]
