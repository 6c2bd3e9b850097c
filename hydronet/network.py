"""Контейнер гидросети.

Network владеет всеми элементами (упорядоченный по добавлению словарь
name -> Element). Элементы ссылаются друг на друга напрямую, но живут в сети,
пока их не удалят через delete_element().

simulate():
1) set_tree_flow() на каждом Source;
2) report() на каждом элементе в порядке добавления (не в порядке обхода дерева);
3) при включённой проверке: report_error() для не-Source, нарушивших max flow.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Tuple

import logging

from hydronet.config import DEFAULT_SIMULATION_CONFIG, SimulationConfig
from hydronet.core.errors import DuplicateElementError
from hydronet.core.validation import proportions_sum_to_one
from hydronet.elements import Element, Multisplit, Source

if TYPE_CHECKING:
    from hydronet.builder import Builder
    from hydronet.observers import SimulationObserver


logger = logging.getLogger(__name__)


class Network:
    def __init__(self, config: SimulationConfig | None = None) -> None:
        self.config = config or DEFAULT_SIMULATION_CONFIG
        self._elements: Dict[str, Element] = {}

    @classmethod
    def build(cls, config: SimulationConfig | None = None) -> Builder:
        """Fluent builder producing a new network."""

        from hydronet.builder import Builder

        return Builder(config=config)

    # --- registry ---

    def add_element(self, elem: Element) -> None:
        if elem.name in self._elements:
            raise DuplicateElementError(f"element '{elem.name}' already exists in the network")
        self._elements[elem.name] = elem

    def size(self) -> int:
        return len(self._elements)

    def __len__(self) -> int:
        return len(self._elements)

    def __contains__(self, name: object) -> bool:
        return name in self._elements

    def __iter__(self) -> Iterator[Element]:
        return iter(tuple(self._elements.values()))

    def get_elements(self) -> Tuple[Element, ...]:
        return tuple(self._elements.values())

    def get_element(self, name: str) -> Optional[Element]:
        return self._elements.get(name)

    def sources(self) -> List[Source]:
        return [e for e in self._elements.values() if isinstance(e, Source)]

    # --- simulation ---

    def simulate(self, observer: SimulationObserver, enable_max_flow_check: bool | None = None) -> None:
        check = self.config.check_max_flow if enable_max_flow_check is None else bool(enable_max_flow_check)

        for src in self.sources():
            src.set_tree_flow()

        n_errors = 0
        for elem in self._elements.values():
            elem.report(observer)
            if check and not isinstance(elem, Source) and not elem.max_flow_check():
                elem.report_error(observer)
                n_errors += 1

        logger.debug("simulated %d element(s), %d max flow violation(s)", len(self._elements), n_errors)

    # --- topology mutation ---

    def delete_element(self, name: str) -> bool:
        elem = self._elements.get(name)
        if elem is None:
            logger.warning("cannot delete '%s': no such element", name)
            return False

        if not elem.delete():
            logger.warning("%s '%s' was not deleted: more than one output is connected", elem.kind, name)
            return False

        del self._elements[name]
        logger.info("deleted %s '%s'", elem.kind, name)
        return True

    # --- checks ---

    def validate(self) -> List[str]:
        """Return a list of topology problems (empty when the network is a valid forest)."""

        issues: List[str] = []
        members = {id(e) for e in self._elements.values()}

        for elem in self._elements.values():
            up = elem.upstream
            if up is None:
                if not isinstance(elem, Source):
                    issues.append(f"{elem.kind} '{elem.name}' has no upstream and is not a source")
            else:
                if id(up) not in members:
                    issues.append(f"{elem.kind} '{elem.name}' has upstream '{up.name}' outside the network")
                if up.index_of(elem) < 0:
                    issues.append(f"{elem.kind} '{elem.name}' is not an output of its upstream '{up.name}'")

            for i, child in enumerate(elem.outputs):
                if child is None:
                    continue
                if id(child) not in members:
                    issues.append(f"{elem.kind} '{elem.name}' output {i} '{child.name}' is outside the network")
                if child.upstream is not elem:
                    issues.append(f"{elem.kind} '{elem.name}' output {i} '{child.name}' points to another upstream")

            if isinstance(elem, Multisplit) and not proportions_sum_to_one(
                elem.proportions, tol=self.config.proportion_tolerance
            ):
                issues.append(
                    f"Multisplit '{elem.name}' proportions sum to {float(elem.proportions.sum())}, expected 1.0"
                )

        seen: set[int] = set()
        for src in self.sources():
            stack: List[Element] = [src]
            while stack:
                e = stack.pop()
                if id(e) in seen:
                    issues.append(f"{e.kind} '{e.name}' is reachable more than once")
                    continue
                seen.add(id(e))
                stack.extend(c for c in e.outputs if c is not None)

        # cycles and detached subtrees
        for elem in self._elements.values():
            if id(elem) not in seen and elem.upstream is not None:
                issues.append(f"{elem.kind} '{elem.name}' is not reachable from any source")

        return issues

    def __repr__(self) -> str:
        return f"Network(size={len(self._elements)})"
