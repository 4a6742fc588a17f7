"""Editor session: the current page plus the selection pointer.

Intents are applied strictly one at a time, in the order they arrive.
"""

from typing import Optional

import structlog

from pagesmith import mutations
from pagesmith.catalog import create_block
from pagesmith.models.intents import (
    DeleteNode,
    DuplicateNode,
    InsertBlock,
    Intent,
    MoveNode,
    PatchProps,
    ResizeNode,
    SelectNode,
    ShiftNode,
)
from pagesmith.models.node import AnyNode, Page
from pagesmith.tree import find_by_id

logger = structlog.get_logger()


class PageEditor:
    """Holds the page being edited and which node is selected.

    The page is replaced, never modified: every accepted intent swaps in the
    new Page returned by the mutation engine.

    Selection rules:
    - inserting a node selects it
    - deleting the selected node (or the container holding it) clears the
      selection
    - loading a page clears the selection

    Example:
        >>> editor = PageEditor()
        >>> editor.apply(InsertBlock(block_type="heading", index=0))
        True
        >>> editor.selected_node.type
        'heading'
    """

    def __init__(self, page: Optional[Page] = None) -> None:
        self.page: Page = page if page is not None else Page.empty()
        self.selected_id: Optional[str] = None

    @property
    def selected_node(self) -> Optional[AnyNode]:
        """The selected node, or None if nothing (resolvable) is selected."""
        if self.selected_id is None:
            return None
        location = find_by_id(self.page, self.selected_id)
        return location.node if location else None

    def load(self, page: Page) -> None:
        """Replace the page wholesale and clear the selection."""
        self.page = page
        self.selected_id = None
        logger.info("page_loaded", nodes=len(page))

    def select(self, node_id: Optional[str]) -> bool:
        """Select a node (None clears). Unknown ids are ignored."""
        if node_id is not None and find_by_id(self.page, node_id) is None:
            logger.debug("selection_ignored", node_id=node_id)
            return False
        changed = node_id != self.selected_id
        self.selected_id = node_id
        return changed

    def insert_block(self, block_type: str, index: int = 0, parent_id: Optional[str] = None) -> bool:
        node = create_block(block_type)
        if node is None:
            return False
        return self.insert(node, index, parent_id)

    def insert(self, node: AnyNode, index: int = 0, parent_id: Optional[str] = None) -> bool:
        updated = mutations.insert_node(self.page, index, node, parent_id)
        if updated is self.page:
            return False
        self.page = updated
        self.selected_id = node.id
        return True

    def move(self, node_id: str, index: int, parent_id: Optional[str] = None) -> bool:
        return self._commit(mutations.move_node(self.page, node_id, index, parent_id))

    def duplicate(self, node_id: str) -> bool:
        return self._commit(mutations.duplicate_node(self.page, node_id))

    def delete(self, node_id: str, nested: bool = False) -> bool:
        if not self._commit(mutations.delete_node(self.page, node_id, nested)):
            return False
        if self.selected_id is not None and find_by_id(self.page, self.selected_id) is None:
            logger.debug("selection_cleared", node_id=self.selected_id)
            self.selected_id = None
        return True

    def patch(self, node_id: str, patch: dict) -> bool:
        return self._commit(mutations.patch_props(self.page, node_id, patch))

    def shift(self, node_id: str, offset: int) -> bool:
        return self._commit(mutations.shift_node(self.page, node_id, offset))

    def resize(self, node_id: str, width: float) -> bool:
        return self._commit(mutations.resize_node(self.page, node_id, width))

    def apply(self, intent: Intent) -> bool:
        """Apply one intent.

        Returns:
            True if the page or selection changed, False for a silent no-op
        """
        if isinstance(intent, InsertBlock):
            return self.insert_block(intent.block_type, intent.index, intent.parent_id)
        if isinstance(intent, MoveNode):
            return self.move(intent.node_id, intent.index, intent.parent_id)
        if isinstance(intent, DuplicateNode):
            return self.duplicate(intent.node_id)
        if isinstance(intent, DeleteNode):
            return self.delete(intent.node_id, intent.nested)
        if isinstance(intent, PatchProps):
            return self.patch(intent.node_id, intent.patch)
        if isinstance(intent, ShiftNode):
            return self.shift(intent.node_id, intent.offset)
        if isinstance(intent, ResizeNode):
            return self.resize(intent.node_id, intent.width)
        if isinstance(intent, SelectNode):
            return self.select(intent.node_id)
        raise TypeError(f"Unsupported intent: {intent!r}")

    def _commit(self, updated: Page) -> bool:
        if updated is self.page:
            return False
        self.page = updated
        return True
