"""Pytest configuration.

Goal: make `import hydronet` work reliably when running tests without installing
package (editable install).

This repo uses a flat layout (hydronet/ at repo root). Some environments run
pytest with a working directory where repo root isn't on sys.path, leading to
`ModuleNotFoundError: hydronet`.

This conftest ensures repo root is on sys.path and provides shared topologies.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))


from hydronet.network import Network  # noqa: E402
from hydronet.observers import RecordingObserver  # noqa: E402


@pytest.fixture()
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture()
def chain() -> Network:
    """S(10) -> T(open) -> A"""

    return (
        Network.build()
        .add_source("S").with_flow(10.0)
        .link_to_tap("T").open()
        .link_to_sink("A")
        .complete()
    )


@pytest.fixture()
def tee() -> Network:
    """S(10) -> X -> {A, B}"""

    return (
        Network.build()
        .add_source("S").with_flow(10.0)
        .link_to_split("X")
        .with_outputs()
        .link_to_sink("A")
        .then()
        .link_to_sink("B")
        .done()
        .complete()
    )
