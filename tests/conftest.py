"""Shared test fixtures for all test modules."""

import pytest

from pagesmith.models.node import ContainerNode, LeafNode, Page


def _leaf(node_id: str, type: str = "paragraph", **props) -> LeafNode:
    return LeafNode(id=node_id, type=type, props=props)


def _container(node_id: str, *children: LeafNode, type: str = "section", **props) -> ContainerNode:
    return ContainerNode(id=node_id, type=type, props=props, children=children)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """
    Point HOME at a temp directory and drop PAGESMITH_* overrides.

    Keeps log files, config lookups and the default page path out of the
    real home directory.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "PAGESMITH_LOG_LEVEL",
        "PAGESMITH_STORAGE_PAGE_PATH",
        "PAGESMITH_STORAGE_EXPORT_NAME",
        "PAGESMITH_EDITOR_TEMPLATE",
    ):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def abcd_page() -> Page:
    """Four top-level paragraphs A, B, C, D."""
    return Page(tuple(_leaf(node_id, text=node_id) for node_id in "ABCD"))


@pytest.fixture
def nested_page() -> Page:
    """Heading, a section holding X and Y, and a two-column holding L and R."""
    return Page((
        _leaf("H", "heading", text="Title", level=1, align="left"),
        _container("S", _leaf("X", text="x"), _leaf("Y", text="y"), paddingY="py-12"),
        _container("T", _leaf("L", text="left"), _leaf("R", text="right"), type="two-column", gap="gap-8"),
    ))
