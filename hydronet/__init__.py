"""hydronet package.

Важно: пакет не должен иметь побочных эффектов при импорте.
Поэтому здесь нет eager-import'ов модулей сети/билдера.

Импортируй нужное напрямую:
- from hydronet.network import Network
- from hydronet.builder import Builder
- from hydronet.observers import RecordingObserver
"""

from __future__ import annotations

__all__: list[str] = []
