"""hydronet.core.types

Базовые типы и константы гидравлической сети.

NO_FLOW: маркер «поток ещё не вычислен» (NaN), как во входе Source
и выходе Sink.
"""

from __future__ import annotations

import math
from typing import Literal, Sequence, Union


NO_FLOW: float = float("nan")

ElementKind = Literal["Source", "Tap", "Split", "Multisplit", "Sink"]

# Один выход -> float, Split/Multisplit -> последовательность по индексам выходов.
FlowValue = Union[float, Sequence[float]]


def is_no_flow(value: float) -> bool:
    return math.isnan(float(value))
