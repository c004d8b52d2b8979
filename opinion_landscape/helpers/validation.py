"""Argument checks applied at the public function boundary.

Degenerate-but-valid input (too few points, missing scores) is never an
error. Only contract violations raise, and they raise InvalidArgumentError.
"""

import math
import numbers


class InvalidArgumentError(ValueError):
    """Raised when a caller passes input that violates the engine's contract."""
    pass


def require_finite(value, name):
    """Return value as a float, raising if it is not a finite real number."""
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{name} must be a number, got bool")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"{name} must be a number, got {value!r}") from e
    if not math.isfinite(number):
        raise InvalidArgumentError(f"{name} must be finite, got {value!r}")
    return number


def require_group_count(num_groups):
    """Return num_groups as an int; numpy integer scalars are accepted."""
    if isinstance(num_groups, bool) or not isinstance(num_groups, numbers.Integral):
        raise InvalidArgumentError(
            f"num_groups must be an int, got {type(num_groups).__name__}"
        )
    if num_groups < 0:
        raise InvalidArgumentError(f"num_groups must be >= 0, got {num_groups}")
    return int(num_groups)
