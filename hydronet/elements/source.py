from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import logging

from hydronet.core.types import NO_FLOW
from hydronet.elements.base import Element

if TYPE_CHECKING:
    from hydronet.observers import SimulationObserver


logger = logging.getLogger(__name__)


class Source(Element):
    """Root of a tree: emits the configured flow on its single output.

    A source has no upstream and no input flow; ``set_flow``/``get_flow``
    work on the configured output flow.
    """

    kind = "Source"

    def __init__(self, name: str) -> None:
        super().__init__(name, n_outputs=1)
        self._flow: float = NO_FLOW

    def set_flow(self, flow: float) -> None:
        self._flow = float(flow)

    def get_flow(self) -> float:
        return self._flow

    def get_out_flow(self, index: int = 0) -> float:
        self._check_index(index)
        return self._flow

    def set_upstream(self, elem: Optional[Element]) -> None:
        # источник всегда корень
        if elem is not None:
            logger.debug("ignoring upstream '%s' for source '%s'", elem.name, self.name)

    def connect(self, elem: Element, index: int = 0) -> None:
        super().connect(elem, index)
        self.set_tree_flow()

    def set_tree_flow(self) -> None:
        self._propagate_downstream()

    def report(self, observer: SimulationObserver) -> None:
        observer.notify_flow(self.kind, self.name, NO_FLOW, self._flow)

    def report_error(self, observer: SimulationObserver) -> None:
        # источники не проверяются по max flow
        return None

    def max_flow_check(self) -> bool:
        return True

    def delete(self) -> bool:
        saved = self._flow
        self._flow = NO_FLOW
        self.set_tree_flow()
        self._flow = saved

        downstream = self._downstream[0]
        if downstream is not None:
            downstream.set_upstream(None)
        self._downstream[0] = None
        return True
