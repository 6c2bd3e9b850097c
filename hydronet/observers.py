"""Наблюдатели симуляции.

`SimulationObserver` это единственная внешняя граница движка. Network.simulate()
вызывает notify_flow() для каждого элемента (в порядке добавления в сеть)
и notify_flow_error() для элементов, не прошедших проверку max flow.

Готовые реализации:
- RecordingObserver: копит уведомления, отдаёт их списком или pandas.DataFrame;
- LoggingObserver: пишет уведомления в logging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Tuple

import logging

import pandas as pd

from hydronet.core.types import FlowValue


class SimulationObserver(Protocol):
    def notify_flow(self, kind: str, name: str, in_flow: float, out_flow: FlowValue) -> None:  # pragma: no cover
        ...

    def notify_flow_error(self, kind: str, name: str, in_flow: float, max_flow: float) -> None:  # pragma: no cover
        ...


@dataclass(frozen=True)
class FlowRecord:
    kind: str
    name: str
    in_flow: float
    out_flow: Tuple[float, ...]

    @property
    def total_out_flow(self) -> float:
        return float(sum(self.out_flow))


@dataclass(frozen=True)
class FlowErrorRecord:
    kind: str
    name: str
    in_flow: float
    max_flow: float


def _as_tuple(out_flow: FlowValue) -> Tuple[float, ...]:
    if isinstance(out_flow, (int, float)):
        return (float(out_flow),)
    return tuple(float(v) for v in out_flow)


@dataclass
class RecordingObserver:
    """Keeps every notification in call order."""

    flows: List[FlowRecord] = field(default_factory=list)
    errors: List[FlowErrorRecord] = field(default_factory=list)

    def notify_flow(self, kind: str, name: str, in_flow: float, out_flow: FlowValue) -> None:
        self.flows.append(FlowRecord(kind, name, float(in_flow), _as_tuple(out_flow)))

    def notify_flow_error(self, kind: str, name: str, in_flow: float, max_flow: float) -> None:
        self.errors.append(FlowErrorRecord(kind, name, float(in_flow), float(max_flow)))

    def flow_of(self, name: str) -> Optional[FlowRecord]:
        """Latest flow record for ``name`` (None if never reported)."""

        for rec in reversed(self.flows):
            if rec.name == name:
                return rec
        return None

    def error_names(self) -> List[str]:
        return [e.name for e in self.errors]

    def clear(self) -> None:
        self.flows.clear()
        self.errors.clear()

    def to_frame(self) -> pd.DataFrame:
        """One row per flow notification; outputs spread over out_0..out_{n-1}."""

        width = max((len(r.out_flow) for r in self.flows), default=0)
        rows = []
        for r in self.flows:
            row = {"kind": r.kind, "name": r.name, "in_flow": r.in_flow}
            for i in range(width):
                row[f"out_{i}"] = r.out_flow[i] if i < len(r.out_flow) else float("nan")
            rows.append(row)
        columns = ["kind", "name", "in_flow", *[f"out_{i}" for i in range(width)]]
        return pd.DataFrame(rows, columns=columns)

    def errors_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [e.__dict__ for e in self.errors],
            columns=["kind", "name", "in_flow", "max_flow"],
        )


class LoggingObserver:
    def __init__(self, logger: logging.Logger | None = None, level: int = logging.INFO) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self.level = level

    def notify_flow(self, kind: str, name: str, in_flow: float, out_flow: FlowValue) -> None:
        self.logger.log(self.level, "%s %s: in=%.3f out=%s", kind, name, in_flow, list(_as_tuple(out_flow)))

    def notify_flow_error(self, kind: str, name: str, in_flow: float, max_flow: float) -> None:
        self.logger.warning("%s %s: in=%.3f exceeds max flow %.3f", kind, name, in_flow, max_flow)
