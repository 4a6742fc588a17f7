"""Mutation engine for the page tree.

Every operation is a pure function: it takes a Page and returns a Page. The
input is never modified. When an operation cannot be applied (unknown id,
parent that is not a container, a container that would be nested, ...)
the *same* Page object is returned, so callers can detect a no-op with
``new is old``. Subtrees untouched by an operation are shared between the
old and the new page.
"""

import copy
import math
from typing import Any, Mapping, Optional

import structlog

from pagesmith.models.node import AnyNode, ContainerNode, LeafNode, Page
from pagesmith.tree import collect_ids, find_by_id, find_top_level, subtree_ids
from pagesmith.utils.ids import generate_unique_node_id

logger = structlog.get_logger()

MIN_CUSTOM_WIDTH = 120


def _ignored(page: Page, operation: str, reason: str, **context: Any) -> Page:
    logger.debug("mutation_ignored", operation=operation, reason=reason, **context)
    return page


def _find_container(page: Page, parent_id: str) -> Optional[int]:
    index = find_top_level(page, parent_id)
    if index is None or not isinstance(page[index], ContainerNode):
        return None
    return index


def _with_children(container: ContainerNode, children) -> ContainerNode:
    return container.model_copy(update={"children": tuple(children)})


def insert_node(
    page: Page,
    index: int,
    node: AnyNode,
    parent_id: Optional[str] = None,
) -> Page:
    """Insert a node at the top level or into a container.

    Args:
        page: Current page
        index: Top-level position, clamped to [0, len(page)]; ignored when
               ``parent_id`` is given
        node: Node to insert (typically fresh from the catalog)
        parent_id: Container to append to; insertion into a container is
                   always at the end

    Returns:
        New page, or ``page`` itself if the insert was not possible
    """
    taken = collect_ids(page)
    clashes = [node_id for node_id in subtree_ids(node) if node_id in taken]
    if clashes:
        return _ignored(page, "insert", "id_in_use", node_id=node.id, clashes=clashes)

    if parent_id is None:
        position = max(0, min(index, len(page)))
        nodes = list(page.nodes)
        nodes.insert(position, node)
        logger.debug("node_inserted", node_id=node.id, type=node.type, index=position)
        return page.replace(nodes)

    parent_index = _find_container(page, parent_id)
    if parent_index is None:
        return _ignored(page, "insert", "parent_not_found", node_id=node.id, parent_id=parent_id)
    if not isinstance(node, LeafNode):
        return _ignored(page, "insert", "nested_container", node_id=node.id, parent_id=parent_id)

    parent = page[parent_index]
    nodes = list(page.nodes)
    nodes[parent_index] = _with_children(parent, [*parent.children, node])
    logger.debug(
        "node_inserted",
        node_id=node.id,
        type=node.type,
        parent_id=parent_id,
        index=len(parent.children),
    )
    return page.replace(nodes)


def move_node(
    page: Page,
    node_id: str,
    index: int,
    parent_id: Optional[str] = None,
) -> Page:
    """Move a top-level node to a new position or into a container.

    ``index`` is a drop-target index in the *current* sequence: dropping
    between the 3rd and 4th node is index 3 regardless of where the moved
    node sits. Removing the node first shifts every later index down by one,
    so the insertion index is decremented when the node started before it.

        [A, B, C, D] -- move A to 3 --> [B, C, A, D]

    Nested nodes are not movable. Moving into a container appends to its
    children and only works for leaf nodes.

    Args:
        page: Current page
        node_id: Id of the top-level node to move
        index: Drop-target index; ignored when ``parent_id`` is given
        parent_id: Container to append the node to

    Returns:
        New page, or ``page`` itself if the move was not possible
    """
    from_index = find_top_level(page, node_id)
    if from_index is None:
        return _ignored(page, "move", "node_not_found", node_id=node_id)

    moved = page[from_index]
    nodes = list(page.nodes)

    if parent_id is None:
        target = index - 1 if from_index < index else index
        del nodes[from_index]
        target = max(0, min(target, len(nodes)))
        nodes.insert(target, moved)
        if target == from_index:
            return _ignored(page, "move", "same_position", node_id=node_id, index=index)
        logger.debug("node_moved", node_id=node_id, from_index=from_index, to_index=target)
        return page.replace(nodes)

    if parent_id == node_id:
        return _ignored(page, "move", "into_itself", node_id=node_id)
    parent_index = _find_container(page, parent_id)
    if parent_index is None:
        return _ignored(page, "move", "parent_not_found", node_id=node_id, parent_id=parent_id)
    if not isinstance(moved, LeafNode):
        return _ignored(page, "move", "nested_container", node_id=node_id, parent_id=parent_id)

    parent = nodes[parent_index]
    nodes[parent_index] = _with_children(parent, [*parent.children, moved])
    del nodes[from_index]
    logger.debug("node_reparented", node_id=node_id, parent_id=parent_id)
    return page.replace(nodes)


def _fresh_copy(node: AnyNode, taken: set[str]) -> AnyNode:
    """Deep-copy ``node`` with fresh ids for it and every child."""
    new_id = generate_unique_node_id(taken)
    taken.add(new_id)
    if isinstance(node, LeafNode):
        return node.model_copy(update={"id": new_id}, deep=True)

    children = []
    for child in node.children:
        child_id = generate_unique_node_id(taken)
        taken.add(child_id)
        children.append(child.model_copy(update={"id": child_id}, deep=True))
    return node.model_copy(
        update={"id": new_id, "props": copy.deepcopy(node.props), "children": tuple(children)}
    )


def duplicate_node(page: Page, node_id: str) -> Page:
    """Insert a deep copy of a node right after the original.

    The copy and each of its children get ids that do not occur anywhere in
    the page, so duplicating a duplicate never collides. Works for top-level
    nodes and for children of a container.

    Returns:
        New page, or ``page`` itself if ``node_id`` was not found
    """
    location = find_by_id(page, node_id)
    if location is None:
        return _ignored(page, "duplicate", "node_not_found", node_id=node_id)

    clone = _fresh_copy(location.node, collect_ids(page))
    nodes = list(page.nodes)

    if location.parent is None:
        nodes.insert(location.index + 1, clone)
    else:
        children = list(location.parent.children)
        children.insert(location.index + 1, clone)
        nodes[location.parent_index] = _with_children(location.parent, children)

    logger.debug("node_duplicated", node_id=node_id, copy_id=clone.id)
    return page.replace(nodes)


def delete_node(page: Page, node_id: str, nested: bool = False) -> Page:
    """Remove a node from the page.

    By default only top-level nodes are removed (a container takes its
    children with it). With ``nested=True`` children of a container can be
    removed as well.

    Returns:
        New page, or ``page`` itself if ``node_id`` was not found
    """
    location = find_by_id(page, node_id)
    if location is None:
        return _ignored(page, "delete", "node_not_found", node_id=node_id, nested=nested)
    if not location.is_top_level and not nested:
        return _ignored(page, "delete", "nested_node", node_id=node_id, parent_id=location.parent.id)

    nodes = list(page.nodes)
    if location.parent is None:
        del nodes[location.index]
    else:
        children = [c for i, c in enumerate(location.parent.children) if i != location.index]
        nodes[location.parent_index] = _with_children(location.parent, children)

    logger.debug("node_deleted", node_id=node_id, nested=not location.is_top_level)
    return page.replace(nodes)


def patch_props(page: Page, node_id: str, patch: Mapping[str, Any]) -> Page:
    """Overlay ``patch`` onto a node's props.

    The merge is shallow: keys in ``patch`` replace existing values, other
    keys are kept. Record-valued props (e.g. schedule ``items``) are replaced
    whole, never merged.

        {"text": "hi", "color": "#fff"} + {"color": "#000"}
            -> {"text": "hi", "color": "#000"}

    Returns:
        New page, or ``page`` itself if ``node_id`` was not found
    """
    location = find_by_id(page, node_id)
    if location is None:
        return _ignored(page, "patch", "node_not_found", node_id=node_id)

    props = {**location.node.props, **copy.deepcopy(dict(patch))}
    patched = location.node.model_copy(update={"props": props})

    nodes = list(page.nodes)
    if location.parent is None:
        nodes[location.index] = patched
    else:
        children = list(location.parent.children)
        children[location.index] = patched
        nodes[location.parent_index] = _with_children(location.parent, children)

    logger.debug("props_patched", node_id=node_id, keys=sorted(patch))
    return page.replace(nodes)


def shift_node(page: Page, node_id: str, offset: int) -> Page:
    """Swap a top-level node with its neighbour.

    Args:
        page: Current page
        node_id: Top-level node to shift
        offset: -1 to move up, 1 to move down

    Returns:
        New page, or ``page`` itself at the edges or if not found
    """
    index = find_top_level(page, node_id)
    if index is None:
        return _ignored(page, "shift", "node_not_found", node_id=node_id)

    other = index + offset
    if offset not in (-1, 1) or not 0 <= other < len(page):
        return _ignored(page, "shift", "out_of_range", node_id=node_id, offset=offset)

    nodes = list(page.nodes)
    nodes[index], nodes[other] = nodes[other], nodes[index]
    logger.debug("node_shifted", node_id=node_id, from_index=index, to_index=other)
    return page.replace(nodes)


def resize_node(page: Page, node_id: str, width: float) -> Page:
    """Give a top-level node a custom pixel width (at least 120px).

    Non-finite widths (NaN, infinity) are ignored.
    """
    if find_top_level(page, node_id) is None:
        return _ignored(page, "resize", "node_not_found", node_id=node_id)
    if not math.isfinite(width):
        return _ignored(page, "resize", "invalid_width", node_id=node_id, width=width)
    custom_width = max(MIN_CUSTOM_WIDTH, round(width))
    return patch_props(page, node_id, {"width": "custom", "customWidth": custom_width})
