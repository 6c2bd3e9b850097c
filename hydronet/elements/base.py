"""Общий контракт элементов гидросети.

Каждый вариант (Source, Tap, Split, Multisplit, Sink) реализует один и тот же
набор операций, поэтому Network может обходить элементы единообразно.
Операции, которые варианту не свойственны (например, connect у Sink),
переопределены в самом варианте явно как no-op, а не унаследованы молча.

Соглашения:
- у элемента фиксированное число выходов (слотов), слоты могут быть пустыми;
- upstream: не владеющая ссылка, владеет элементами только Network;
- поток «ещё не вычислен» = NO_FLOW (NaN).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar, Optional, Tuple

import logging

from hydronet.core.errors import TopologyError
from hydronet.core.types import NO_FLOW, ElementKind, is_no_flow
from hydronet.core.validation import ensure_finite, ensure_non_negative

if TYPE_CHECKING:
    from hydronet.observers import SimulationObserver


logger = logging.getLogger(__name__)


class Element(ABC):
    """Base class of every flow-handling element."""

    kind: ClassVar[ElementKind]

    def __init__(self, name: str, n_outputs: int) -> None:
        if not name:
            raise ValueError("element name must be a non-empty string")
        self._name = str(name)
        self._in_flow: float = NO_FLOW
        self._upstream: Optional[Element] = None
        self._downstream: list[Optional[Element]] = [None] * int(n_outputs)
        self._max_flow: Optional[float] = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def n_outputs(self) -> int:
        return len(self._downstream)

    # --- flows ---

    def set_flow(self, flow: float) -> None:
        """Set the input flow; outputs are derived from it on demand."""

        self._in_flow = float(flow)

    def get_flow(self) -> float:
        return self._in_flow

    @abstractmethod
    def get_out_flow(self, index: int = 0) -> float:
        ...

    @property
    def out_flows(self) -> Tuple[float, ...]:
        return tuple(self.get_out_flow(i) for i in range(self.n_outputs))

    # --- topology ---

    @property
    def upstream(self) -> Optional[Element]:
        return self._upstream

    def get_upstream(self) -> Optional[Element]:
        return self._upstream

    def set_upstream(self, elem: Optional[Element]) -> None:
        self._upstream = elem

    def get_downstream(self, index: int = 0) -> Optional[Element]:
        self._check_index(index)
        return self._downstream[index]

    def set_downstream(self, elem: Optional[Element], index: int = 0) -> None:
        self._check_index(index)
        self._downstream[index] = elem

    @property
    def outputs(self) -> Tuple[Optional[Element], ...]:
        return tuple(self._downstream)

    def connected_outputs(self) -> int:
        return sum(1 for e in self._downstream if e is not None)

    def index_of(self, elem: Element) -> int:
        for i, e in enumerate(self._downstream):
            if e is elem:
                return i
        return -1

    def connect(self, elem: Element, index: int = 0) -> None:
        """Place ``elem`` downstream of this element on output ``index``."""

        self._check_index(index)
        replaced = self._downstream[index]
        if replaced is not None and replaced is not elem:
            replaced.set_upstream(None)
        prev = elem.upstream
        if prev is not None:
            slot = prev.index_of(elem)
            if slot >= 0:
                prev.set_downstream(None, slot)
        self._downstream[index] = elem
        elem.set_flow(self.get_out_flow(index))
        elem.set_upstream(self)

    def _check_index(self, index: int) -> None:
        if not (0 <= index < self.n_outputs):
            raise TopologyError(
                f"{self.kind} '{self.name}' has {self.n_outputs} output(s), got index {index}"
            )

    # --- propagation ---

    def _pull_input(self) -> None:
        up = self._upstream
        if up is None:
            self.set_flow(NO_FLOW)
            return
        slot = up.index_of(self)
        if slot < 0:
            logger.debug("%s '%s' is not connected on any output of '%s'", self.kind, self.name, up.name)
            self.set_flow(NO_FLOW)
            return
        self.set_flow(up.get_out_flow(slot))

    def _propagate_downstream(self) -> None:
        for e in self._downstream:
            if e is not None:
                e.set_tree_flow()

    def set_tree_flow(self) -> None:
        """Recompute this element from its upstream, then recurse downstream."""

        self._pull_input()
        self._propagate_downstream()

    # --- reporting ---

    @abstractmethod
    def report(self, observer: SimulationObserver) -> None:
        ...

    @property
    def label(self) -> str:
        """Kind label sent to observers."""

        return self.kind

    def report_error(self, observer: SimulationObserver) -> None:
        observer.notify_flow_error(self.label, self.name, self._in_flow, self.max_flow_value)

    # --- deletion ---

    @abstractmethod
    def delete(self) -> bool:
        ...

    def _splice(self, survivor: Optional[Element]) -> None:
        """Attach ``survivor`` to the slot this element occupies upstream.

        With no survivor the upstream slot is cleared instead.
        """

        up = self._upstream
        slot = up.index_of(self) if up is not None else -1
        if up is not None and slot >= 0:
            if survivor is not None:
                up.connect(survivor, slot)
            else:
                up.set_downstream(None, slot)
        elif survivor is not None:
            survivor.set_upstream(None)

        logger.debug(
            "spliced out %s '%s' (upstream=%s, survivor=%s)",
            self.kind,
            self.name,
            up.name if up is not None else None,
            survivor.name if survivor is not None else None,
        )
        self._upstream = None
        self._downstream = [None] * self.n_outputs

    # --- max flow ---

    @property
    def max_flow(self) -> Optional[float]:
        return self._max_flow

    @property
    def max_flow_value(self) -> float:
        """Threshold as reported to observers (NO_FLOW when unset)."""

        return NO_FLOW if self._max_flow is None else self._max_flow

    def set_max_flow(self, max_flow: Optional[float]) -> None:
        if max_flow is None:
            self._max_flow = None
            return
        ensure_finite(max_flow, "max_flow")
        ensure_non_negative(max_flow, "max_flow")
        self._max_flow = float(max_flow)

    def max_flow_check(self) -> bool:
        if self._max_flow is None or is_no_flow(self._in_flow):
            return True
        return self._in_flow <= self._max_flow

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, in={self._in_flow}, out={list(self.out_flows)})"
