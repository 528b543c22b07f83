"""
Domain models and value objects.

Contains engine configuration and shape-region classification types.
"""

from src.core.domain.engine_config import (
    DEFAULT_ENGINE_CONFIG,
    MAX_ITERATIONS_DEFAULT,
    MAX_REDUCTION_DEPTH_DEFAULT,
    EngineConfig,
)
from src.core.domain.shape_region import (
    IntegralFamily,
    ReductionTerm,
    ShapeRegion,
    classify_region,
)

__all__ = [
    # Engine config
    "DEFAULT_ENGINE_CONFIG",
    "MAX_ITERATIONS_DEFAULT",
    "MAX_REDUCTION_DEPTH_DEFAULT",
    "EngineConfig",
    # Shape regions
    "IntegralFamily",
    "ReductionTerm",
    "ShapeRegion",
    "classify_region",
]
