"""Fluent-билдер гидросети.

Пример:

    net = (
        Network.build()
        .add_source("S").with_flow(10.0)
        .link_to_split("X")
        .with_outputs()
            .link_to_sink("A")
        .then()
            .link_to_tap("T").open()
            .link_to_sink("B")
        .done()
        .complete()
    )

Состояние навигации хранится в одном объекте NavigationState:
- tail: последний элемент корневой цепочки (at-root / inside-linear-chain);
- стек BranchFrame(parent, index, tail): по одному на каждый открытый
  with_outputs() (inside-branch(parent, index)).

Переходы:
- with_outputs(): push BranchFrame(parent=точка вставки, index=0);
- then(): index += 1 у верхнего фрейма, tail ветки сбрасывается;
- done(): pop; точкой вставки становится родитель объемлющей ветки
  (или ничего на верхнем уровне).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import logging

from hydronet.config import DEFAULT_SIMULATION_CONFIG, SimulationConfig
from hydronet.core.errors import BuilderStateError, UnsupportedOperationError
from hydronet.core.validation import ensure_proportions
from hydronet.elements import Element, Multisplit, Sink, Source, Split, Tap
from hydronet.network import Network


logger = logging.getLogger(__name__)


@dataclass
class BranchFrame:
    parent: Split
    index: int = 0
    tail: Optional[Element] = None


@dataclass
class NavigationState:
    tail: Optional[Element] = None
    frames: List[BranchFrame] = field(default_factory=list)

    @property
    def in_branch(self) -> bool:
        return bool(self.frames)

    def insertion_point(self) -> Optional[Element]:
        if self.frames:
            top = self.frames[-1]
            return top.tail if top.tail is not None else top.parent
        return self.tail

    def advance(self, elem: Element) -> None:
        if self.frames:
            self.frames[-1].tail = elem
        else:
            self.tail = elem


class Builder:
    """Builds a Network step by step through chained calls."""

    def __init__(self, config: SimulationConfig | None = None) -> None:
        self.config = config or DEFAULT_SIMULATION_CONFIG
        self._network = Network(config=self.config)
        self.state = NavigationState()

    # --- helpers ---

    def _current(self, operation: str) -> Element:
        point = self.state.insertion_point()
        if point is None:
            raise BuilderStateError(f"{operation}(): no current element, start with add_source()")
        return point

    def _link(self, elem: Element) -> Builder:
        operation = f"link_to_{elem.kind.lower()}"
        point = self._current(operation)
        if isinstance(point, Sink):
            raise UnsupportedOperationError(operation, point.kind, point.name)
        frames = self.state.frames
        frame = frames[-1] if frames and frames[-1].tail is None else None
        if frame is not None and frame.parent.get_downstream(frame.index) is not None:
            raise BuilderStateError(
                f"output {frame.index} of {frame.parent.kind} '{frame.parent.name}' "
                "is already connected, call then() or done()"
            )

        self._network.add_element(elem)
        if frame is not None:
            frame.parent.connect(elem, frame.index)
        else:
            point.connect(elem)

        logger.debug("linked %s '%s' after '%s'", elem.kind, elem.name, point.name)
        self.state.advance(elem)
        return self

    # --- elements ---

    def add_source(self, name: str) -> Builder:
        if self.state.in_branch:
            raise BuilderStateError("add_source(): close open branches with done() first")
        src = Source(name)
        self._network.add_element(src)
        self.state.tail = src
        return self

    def link_to_tap(self, name: str) -> Builder:
        return self._link(Tap(name))

    def link_to_sink(self, name: str) -> Builder:
        return self._link(Sink(name))

    def link_to_split(self, name: str) -> Builder:
        return self._link(Split(name))

    def link_to_multisplit(self, name: str, n_outputs: int) -> Builder:
        return self._link(Multisplit(name, n_outputs))

    # --- branch navigation ---

    def with_outputs(self) -> Builder:
        point = self._current("with_outputs")
        if not isinstance(point, Split):
            raise UnsupportedOperationError("with_outputs", point.kind, point.name)
        self.state.frames.append(BranchFrame(parent=point))
        return self

    def then(self) -> Builder:
        if not self.state.frames:
            raise BuilderStateError("then(): no open branch, call with_outputs() first")
        frame = self.state.frames[-1]
        if frame.index + 1 >= frame.parent.n_outputs:
            raise BuilderStateError(
                f"then(): {frame.parent.kind} '{frame.parent.name}' has only {frame.parent.n_outputs} outputs"
            )
        frame.index += 1
        frame.tail = None
        return self

    def done(self) -> Builder:
        if not self.state.frames:
            raise BuilderStateError("done(): no open branch, call with_outputs() first")
        self.state.frames.pop()
        if self.state.frames:
            self.state.frames[-1].tail = None
        else:
            self.state.tail = None
        return self

    # --- configuration of the current element ---

    def with_flow(self, flow: float) -> Builder:
        self._current("with_flow").set_flow(flow)
        return self

    def open(self) -> Builder:
        return self._set_tap("open", True)

    def closed(self) -> Builder:
        return self._set_tap("closed", False)

    def _set_tap(self, operation: str, is_open: bool) -> Builder:
        point = self._current(operation)
        if not isinstance(point, Tap):
            raise UnsupportedOperationError(operation, point.kind, point.name)
        point.set_open(is_open)
        return self

    def with_proportions(self, proportions: Sequence[float]) -> Builder:
        point = self._current("with_proportions")
        if not isinstance(point, Multisplit):
            raise UnsupportedOperationError("with_proportions", point.kind, point.name)
        if self.config.strict_proportions:
            ensure_proportions(
                proportions, point.n_outputs, check_sum=True, tol=self.config.proportion_tolerance
            )
        point.set_proportions(proportions)
        return self

    with_propotions = with_proportions

    def max_flow(self, max_flow: float) -> Builder:
        self._current("max_flow").set_max_flow(max_flow)
        return self

    def complete(self) -> Network:
        if self.state.frames:
            logger.warning("complete() called with %d open branch(es)", len(self.state.frames))
        return self._network
