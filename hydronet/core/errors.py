"""hydronet.core.errors

Иерархия ошибок. Симуляция сама по себе не бросает исключений для доменных
ситуаций (неудачное удаление, превышение порога): эти случаи идут через
возвращаемое значение или observer.
"""

from __future__ import annotations


class HydraulicError(Exception):
    pass


class TopologyError(HydraulicError, ValueError):
    """Invalid slot index or inconsistent registration."""


class DuplicateElementError(TopologyError):
    pass


class UnsupportedOperationError(HydraulicError, TypeError):
    """A variant-specific operation was requested on another variant."""

    def __init__(self, operation: str, kind: str, name: str) -> None:
        super().__init__(f"{operation}() is not supported by {kind} '{name}'")
        self.operation = operation
        self.kind = kind
        self.name = name


class BuilderStateError(HydraulicError, RuntimeError):
    pass
