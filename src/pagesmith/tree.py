"""Identity lookup over the two-level page tree."""

from collections import Counter
from dataclasses import dataclass
from typing import Iterator, Optional

from pagesmith.models.node import AnyNode, ContainerNode, Page


@dataclass(frozen=True)
class NodeLocation:
    """Where a node sits in a page.

    Attributes:
        node: The node found
        index: Position within its owning sequence
        parent: Owning container (None for top-level nodes)
        parent_index: Top-level position of the owning container
    """

    node: AnyNode
    index: int
    parent: Optional[ContainerNode] = None
    parent_index: Optional[int] = None

    @property
    def is_top_level(self) -> bool:
        return self.parent is None

    def siblings(self, page: Page) -> tuple[AnyNode, ...]:
        """Return the sequence this node was found in."""
        if self.parent is None:
            return page.nodes
        return self.parent.children


def find_by_id(page: Page, node_id: str) -> Optional[NodeLocation]:
    """Find a node by id.

    Searches the top-level sequence first, then one level into each
    container's children, and returns the first match.

    Args:
        page: Page to search
        node_id: Id to look for

    Returns:
        NodeLocation if found, None otherwise
    """
    for index, node in enumerate(page.nodes):
        if node.id == node_id:
            return NodeLocation(node=node, index=index)

    for parent_index, node in enumerate(page.nodes):
        if not isinstance(node, ContainerNode):
            continue
        for index, child in enumerate(node.children):
            if child.id == node_id:
                return NodeLocation(
                    node=child, index=index, parent=node, parent_index=parent_index
                )

    return None


def find_top_level(page: Page, node_id: str) -> Optional[int]:
    """Return the top-level index of ``node_id``, or None."""
    for index, node in enumerate(page.nodes):
        if node.id == node_id:
            return index
    return None


def iter_nodes(page: Page) -> Iterator[tuple[AnyNode, Optional[ContainerNode]]]:
    """Yield ``(node, parent)`` pairs, each container before its children."""
    for node in page.nodes:
        yield node, None
        if isinstance(node, ContainerNode):
            for child in node.children:
                yield child, node


def collect_ids(page: Page) -> set[str]:
    """Return every node id in the page, top-level and nested."""
    return {node.id for node, _parent in iter_nodes(page)}


def subtree_ids(node: AnyNode) -> list[str]:
    """Return the ids of ``node`` and all of its children."""
    ids = [node.id]
    if isinstance(node, ContainerNode):
        ids.extend(child.id for child in node.children)
    return ids


def find_duplicate_ids(page: Page) -> list[str]:
    """Return ids that occur more than once (sorted). Empty for a valid page."""
    counts = Counter(node.id for node, _parent in iter_nodes(page))
    return sorted(node_id for node_id, count in counts.items() if count > 1)
