"""hydronet.core.validation

Базовые проверки, чтобы ловить невозможные значения как можно раньше.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from numpy.typing import NDArray


def ensure_non_negative(value: float, name: str) -> None:
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")


def ensure_positive(value: float, name: str) -> None:
    if value <= 0:
        raise ValueError(f"{name} must be > 0, got {value}")


def ensure_finite(value: float, name: str) -> None:
    if not np.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value}")


def ensure_proportions(
    proportions: Sequence[float],
    n_outputs: int,
    *,
    check_sum: bool = False,
    tol: float = 1e-9,
) -> NDArray[np.float64]:
    """Validate multisplit proportions and return them as a float64 vector.

    The length must match the number of outputs and every entry must be a
    finite value >= 0. The sum is checked only when ``check_sum`` is set.
    """

    arr = np.asarray(proportions, dtype=np.float64).reshape(-1)
    if arr.shape[0] != n_outputs:
        raise ValueError(f"expected {n_outputs} proportions, got {arr.shape[0]}")
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"proportions must be finite, got {arr.tolist()}")
    if np.any(arr < 0.0):
        raise ValueError(f"proportions must be >= 0, got {arr.tolist()}")
    if check_sum and not proportions_sum_to_one(arr, tol=tol):
        raise ValueError(f"proportions must sum to 1.0, got {float(arr.sum())}")
    return arr


def proportions_sum_to_one(proportions: Sequence[float], tol: float = 1e-9) -> bool:
    return bool(np.isclose(float(np.sum(proportions)), 1.0, rtol=0.0, atol=tol))
