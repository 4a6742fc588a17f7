"""pagesmith - compose event pages from typed content blocks.

A page is an ordered list of blocks (sections, headings, images,
schedules, ...). Container blocks hold one level of children. Pages are
immutable values; the mutation engine returns a new page for every change.

Example:
    >>> from pagesmith import create_block, insert_node, Page
    >>> page = insert_node(Page.empty(), 0, create_block("heading"))
    >>> page[0].props["text"]
    'Untitled Heading'
    >>> Page.from_json(page.to_json()) == page
    True
"""

from pagesmith.catalog import BLOCK_SPECS, BlockSpec, create_block, spec_for
from pagesmith.editor import PageEditor
from pagesmith.models.node import ContainerNode, LeafNode, Page
from pagesmith.mutations import (
    delete_node,
    duplicate_node,
    insert_node,
    move_node,
    patch_props,
    resize_node,
    shift_node,
)
from pagesmith.tree import NodeLocation, collect_ids, find_by_id

__version__ = "0.1.0"

__all__ = [
    "BLOCK_SPECS",
    "BlockSpec",
    "ContainerNode",
    "LeafNode",
    "NodeLocation",
    "Page",
    "PageEditor",
    "collect_ids",
    "create_block",
    "delete_node",
    "duplicate_node",
    "find_by_id",
    "insert_node",
    "move_node",
    "patch_props",
    "resize_node",
    "shift_node",
    "spec_for",
]
