from __future__ import annotations

from typing import TYPE_CHECKING

from hydronet.elements.base import Element

if TYPE_CHECKING:
    from hydronet.observers import SimulationObserver


class Tap(Element):
    """Valve that passes its input flow when open and blocks it when closed."""

    kind = "Tap"

    def __init__(self, name: str, is_open: bool = False) -> None:
        super().__init__(name, n_outputs=1)
        self._open = bool(is_open)

    @property
    def is_open(self) -> bool:
        return self._open

    def set_open(self, is_open: bool) -> None:
        self._open = bool(is_open)

    def get_out_flow(self, index: int = 0) -> float:
        self._check_index(index)
        return self._in_flow if self._open else 0.0

    def report(self, observer: SimulationObserver) -> None:
        observer.notify_flow(self.kind, self.name, self._in_flow, self.get_out_flow())

    def delete(self) -> bool:
        self._splice(self._downstream[0])
        return True

    def __repr__(self) -> str:
        return f"Tap(name={self.name!r}, open={self._open}, in={self._in_flow})"
