"""Разветвители потока: Split (T-элемент, 2 выхода) и Multisplit (N выходов).

Split делит вход поровну: out[0] = out[1] = 0.5 * in.
Multisplit делит по пропорциям: out[i] = in * proportions[i].
Условие sum(proportions) == 1 на совести вызывающего. Если оно не
выполнено, выходы просто не сохраняют поток (здесь это не исправляется).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

import logging

import numpy as np
from numpy.typing import NDArray

from hydronet.core.validation import ensure_positive, ensure_proportions
from hydronet.elements.base import Element

if TYPE_CHECKING:
    from hydronet.observers import SimulationObserver


logger = logging.getLogger(__name__)

EQUAL_SHARE: float = 0.5


class Split(Element):
    """Two-way splitter sending half of its input to each output."""

    kind = "Split"

    def __init__(self, name: str) -> None:
        super().__init__(name, n_outputs=2)

    def get_out_flow(self, index: int = 0) -> float:
        self._check_index(index)
        return self._in_flow * EQUAL_SHARE

    @property
    def label(self) -> str:
        # Multisplit reports itself as "Split" too
        return "Split"

    def report(self, observer: SimulationObserver) -> None:
        observer.notify_flow(self.label, self.name, self._in_flow, list(self.out_flows))

    def delete(self) -> bool:
        """Splice the splitter out of the tree.

        Fails (returns False, topology untouched) when more than one output is
        connected: two branches cannot be merged into the single upstream slot.
        """

        if self.connected_outputs() > 1:
            logger.debug("%s '%s' has %d connected outputs; not deleted", self.kind, self.name, self.connected_outputs())
            return False
        survivor = next((e for e in self._downstream if e is not None), None)
        self._splice(survivor)
        return True


class Multisplit(Split):
    """N-way splitter distributing its input by configured proportions."""

    kind = "Multisplit"

    def __init__(self, name: str, n_outputs: int) -> None:
        ensure_positive(n_outputs, "n_outputs")
        Element.__init__(self, name, n_outputs=int(n_outputs))
        self._proportions: NDArray[np.float64] = np.zeros(int(n_outputs), dtype=np.float64)

    @property
    def proportions(self) -> NDArray[np.float64]:
        return self._proportions.copy()

    def set_proportions(self, *proportions: float | Sequence[float]) -> None:
        """Define the share of the input flow sent to each output.

        Accepts either separate values or one sequence; the count must match
        the number of outputs.
        """

        if len(proportions) == 1 and isinstance(proportions[0], (Sequence, np.ndarray)):
            values = proportions[0]
        else:
            values = proportions
        self._proportions = ensure_proportions(values, self.n_outputs)

    def get_out_flow(self, index: int = 0) -> float:
        self._check_index(index)
        return float(self._in_flow * self._proportions[index])

    @property
    def out_flows(self) -> tuple[float, ...]:
        return tuple(float(v) for v in self._in_flow * self._proportions)

    def __repr__(self) -> str:
        return (
            f"Multisplit(name={self.name!r}, n_outputs={self.n_outputs}, "
            f"proportions={self._proportions.tolist()}, in={self._in_flow})"
        )
