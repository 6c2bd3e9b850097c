"""Конфиги гидросети.

Все конфиги: frozen dataclass'ы из `hydronet.config.models`.
"""

from __future__ import annotations

from .models import (  # noqa: F401
    DEFAULT_SIMULATION_CONFIG,
    SimulationConfig,
)

__all__ = [
    "SimulationConfig",
    "DEFAULT_SIMULATION_CONFIG",
]
