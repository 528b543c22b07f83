"""
Exceptions — ошибки вычисления Beta-функций

Иерархия:
    BetaFunctionError
    ├── InvalidArgument          (ValueError: нарушение preconditions)
    └── NumericNonConvergence    (ArithmeticError: итерация не сошлась)
        └── ReductionDepthExceeded

Overflow НЕ является ошибкой: значения, превышающие диапазон типа,
насыщаются до максимального конечного значения (см. precision_adapter.narrow).
"""


class BetaFunctionError(Exception):
    """Базовый класс всех ошибок модуля Beta-функций."""
    pass


class InvalidArgument(BetaFunctionError, ValueError):
    """
    Нарушение preconditions аргументов.

    Возникает если:
    - a ≤ 0 или b ≤ 0
    - любой аргумент NaN/Inf
    - x вне [0, 1] (для beta_cdf без clamp_x_to_unit_interval)
    """
    pass


class NumericNonConvergence(BetaFunctionError, ArithmeticError):
    """
    Continued fraction не достигла критерия сходимости за max_iterations.

    Атрибуты сохраняют входы для воспроизведения инцидента.
    """

    def __init__(self, message: str, a: float, b: float, x: float, iterations: int):
        super().__init__(message)
        self.a = a
        self.b = b
        self.x = x
        self.iterations = iterations


class ReductionDepthExceeded(NumericNonConvergence):
    """Редукция shape-параметров превысила max_reduction_depth."""
    pass
