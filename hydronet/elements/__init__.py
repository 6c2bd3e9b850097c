"""Элементы гидросети: Source, Tap, Split, Multisplit, Sink."""

from __future__ import annotations

from .base import Element
from .sink import Sink
from .source import Source
from .split import Multisplit, Split
from .tap import Tap

__all__ = [
    "Element",
    "Source",
    "Tap",
    "Split",
    "Multisplit",
    "Sink",
]
