"""Shape Region — классификация (x, a, b) для редукции неполной Beta-функции

Семь взаимоисключающих регионов покрывают весь домен a > 0, b > 0:
- CF_LOWER_TAIL / CF_UPPER_TAIL: a > 1, b > 1 (continued fraction)
- BOTH_BELOW_ONE: a < 1, b < 1
- A_EQUALS_ONE / B_EQUALS_ONE: closed form
- A_BELOW_ONE / B_BELOW_ONE: ровно один параметр < 1
"""

from enum import Enum
from typing import NamedTuple


# =============================================================================
# ENUMS
# =============================================================================


class ShapeRegion(str, Enum):
    """Регион домена (x, a, b).

    Порядок членов совпадает с приоритетом классификации.
    """

    CF_LOWER_TAIL = "CF_LOWER_TAIL"
    CF_UPPER_TAIL = "CF_UPPER_TAIL"
    BOTH_BELOW_ONE = "BOTH_BELOW_ONE"
    A_EQUALS_ONE = "A_EQUALS_ONE"
    B_EQUALS_ONE = "B_EQUALS_ONE"
    A_BELOW_ONE = "A_BELOW_ONE"
    B_BELOW_ONE = "B_BELOW_ONE"


class IntegralFamily(str, Enum):
    """Семейство формул редукции.

    REGULARIZED — I_x(a, b) (Beta CDF)
    UNREGULARIZED — B_x(a, b) = ∫₀ˣ t^(a-1) (1-t)^(b-1) dt
    """

    REGULARIZED = "REGULARIZED"
    UNREGULARIZED = "UNREGULARIZED"


# =============================================================================
# TYPES
# =============================================================================


class ReductionTerm(NamedTuple):
    """Отложенное вычисление weight × F(x, a, b) на стеке редукции."""

    weight: float  # скаляр рабочего типа
    a: float
    b: float
    depth: int


def classify_region(x: float, a: float, b: float) -> ShapeRegion:
    """
    Классификация (x, a, b) в ровно один ShapeRegion.

    a = b = 1 попадает в A_EQUALS_ONE; a < 1, b = 1 — в B_EQUALS_ONE.

    Examples:
        >>> classify_region(0.2, 2.0, 3.0)
        <ShapeRegion.CF_LOWER_TAIL: 'CF_LOWER_TAIL'>
        >>> classify_region(0.5, 1.0, 1.0)
        <ShapeRegion.A_EQUALS_ONE: 'A_EQUALS_ONE'>
    """
    if a > 1 and b > 1:
        if x <= (a - 1) / (a + b - 2):
            return ShapeRegion.CF_LOWER_TAIL
        return ShapeRegion.CF_UPPER_TAIL

    if a < 1 and b < 1:
        return ShapeRegion.BOTH_BELOW_ONE

    if a == 1:
        return ShapeRegion.A_EQUALS_ONE

    if b == 1:
        return ShapeRegion.B_EQUALS_ONE

    if a < 1:
        return ShapeRegion.A_BELOW_ONE

    # Оставшийся случай: a > 1, b < 1
    return ShapeRegion.B_BELOW_ONE
