from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import logging

from hydronet.core.types import NO_FLOW
from hydronet.elements.base import Element

if TYPE_CHECKING:
    from hydronet.observers import SimulationObserver


logger = logging.getLogger(__name__)


class Sink(Element):
    """Terminal element: records its input flow, has no outputs."""

    kind = "Sink"

    def __init__(self, name: str) -> None:
        super().__init__(name, n_outputs=0)

    def get_out_flow(self, index: int = 0) -> float:
        return NO_FLOW

    def get_downstream(self, index: int = 0) -> Optional[Element]:
        return None

    def set_downstream(self, elem: Optional[Element], index: int = 0) -> None:
        return None

    def connect(self, elem: Element, index: int = 0) -> None:
        # у стока нет выходов: подключение ничего не меняет
        logger.debug("sink '%s' cannot feed '%s'; connect ignored", self.name, elem.name)

    def report(self, observer: SimulationObserver) -> None:
        observer.notify_flow(self.kind, self.name, self._in_flow, NO_FLOW)

    def delete(self) -> bool:
        self._splice(None)
        return True
