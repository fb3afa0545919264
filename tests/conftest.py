"""Shared fixtures for flowchart editor tests."""

import itertools
import os
from typing import Callable, Iterator

import pytest

from treebuilder.config.settings import Settings, get_settings
from treebuilder.editor.events import HitKind, HitTarget
from treebuilder.editor.session import FlowchartEditor
from treebuilder.flowchart.model import Flowchart


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer TREEBUILDER_* variables out of the tests."""
    for key in list(os.environ):
        if key.startswith("TREEBUILDER_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
def sequential_ids() -> Callable[[], str]:
    """Deterministic id factory: id_1, id_2, ..."""
    counter: Iterator[int] = itertools.count(1)
    return lambda: f"id_{next(counter)}"


@pytest.fixture
def flowchart(sequential_ids: Callable[[], str]) -> Flowchart:
    return Flowchart(id_factory=sequential_ids)


@pytest.fixture
def editor(settings: Settings, flowchart: Flowchart) -> FlowchartEditor:
    return FlowchartEditor(settings, flowchart)


def node_hit(node_id: str) -> HitTarget:
    return HitTarget(kind=HitKind.NODE, target_id=node_id)


def handle_hit(node_id: str) -> HitTarget:
    return HitTarget(kind=HitKind.HANDLE, target_id=node_id)


def edge_hit(edge_id: str) -> HitTarget:
    return HitTarget(kind=HitKind.EDGE, target_id=edge_id)


def canvas_hit() -> HitTarget:
    return HitTarget(kind=HitKind.CANVAS)
