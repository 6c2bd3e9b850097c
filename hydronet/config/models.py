from __future__ import annotations

from dataclasses import dataclass

from hydronet.core.validation import ensure_positive


@dataclass(frozen=True)
class SimulationConfig:
    # simulate() без явного флага проверяет пороги только если включено здесь
    check_max_flow: bool = False

    # допуск для sum(proportions) == 1.0 у Multisplit
    proportion_tolerance: float = 1e-9

    # True -> Builder отклоняет пропорции, сумма которых не равна 1
    strict_proportions: bool = False

    def __post_init__(self) -> None:
        ensure_positive(self.proportion_tolerance, "proportion_tolerance")


DEFAULT_SIMULATION_CONFIG = SimulationConfig()
