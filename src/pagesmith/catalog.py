"""Block catalog - registry of the block types offered in the palette.

Each BlockSpec knows the canonical default props (and, for containers, default
children) of its type and produces fresh nodes from them.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Optional

import structlog

from pagesmith.models.node import AnyNode, BlockType, ContainerNode, LeafNode, CONTAINER_TYPES
from pagesmith.utils.ids import generate_node_id

logger = structlog.get_logger()


@dataclass(frozen=True)
class BlockSpec:
    """Palette entry for one block type.

    Attributes:
        type: Block type tag
        title: Palette label
        defaults: Default props for a new node
        default_children: (type, props) pairs for a container's initial children
        description: Optional palette hint
    """

    type: BlockType
    title: str
    defaults: dict[str, Any]
    default_children: tuple[tuple[str, dict[str, Any]], ...] = ()
    description: Optional[str] = None

    @property
    def is_container(self) -> bool:
        return self.type in CONTAINER_TYPES

    def create_default(self) -> AnyNode:
        """Produce a new node of this type with a fresh id.

        Props are deep-copied from the spec, so two nodes never share a
        mutable sub-object (e.g. the schedule's item list).
        """
        props = copy.deepcopy(self.defaults)
        if not self.is_container:
            return LeafNode(id=generate_node_id(), type=self.type, props=props)

        children = tuple(
            LeafNode(id=generate_node_id(), type=child_type, props=copy.deepcopy(child_props))
            for child_type, child_props in self.default_children
        )
        return ContainerNode(id=generate_node_id(), type=self.type, props=props, children=children)


BLOCK_SPECS: tuple[BlockSpec, ...] = (
    BlockSpec(
        type="section",
        title="Section",
        description="Full-width container",
        defaults={
            "paddingY": "py-12",
            "background": "bg-white",
            "align": "items-start",
        },
    ),
    BlockSpec(
        type="heading",
        title="Heading",
        defaults={"text": "Untitled Heading", "level": 2, "align": "left"},
    ),
    BlockSpec(
        type="paragraph",
        title="Paragraph",
        defaults={
            "text": "Write something inspiring about your event.",
            "align": "left",
        },
    ),
    BlockSpec(
        type="button",
        title="Button",
        defaults={"label": "Register Now", "href": "#"},
    ),
    BlockSpec(
        type="image",
        title="Image",
        defaults={"src": "/placeholder.svg", "alt": "Image"},
    ),
    BlockSpec(
        type="two-column",
        title="Two Columns",
        defaults={"gap": "gap-8"},
        default_children=(
            ("paragraph", {"text": "Left column content", "align": "left"}),
            ("paragraph", {"text": "Right column content", "align": "left"}),
        ),
    ),
    BlockSpec(
        type="schedule",
        title="Schedule",
        defaults={
            "items": [
                {"time": "09:00", "title": "Opening Ceremony", "location": "Auditorium"},
                {"time": "10:30", "title": "Tech Talk: AI Campus", "location": "Hall A"},
                {"time": "13:00", "title": "Hackathon Kickoff", "location": "Lab 2"},
            ],
        },
    ),
    BlockSpec(
        type="speaker",
        title="Speaker",
        defaults={"name": "Guest Name", "role": "Keynote", "photo": "/placeholder.svg"},
    ),
)

_SPECS_BY_TYPE: dict[str, BlockSpec] = {spec.type: spec for spec in BLOCK_SPECS}


def spec_for(block_type: str) -> Optional[BlockSpec]:
    """Look up the spec for a block type.

    Args:
        block_type: Block type tag (e.g. "heading")

    Returns:
        BlockSpec if known, None otherwise
    """
    return _SPECS_BY_TYPE.get(block_type)


def create_block(block_type: str) -> Optional[AnyNode]:
    """Produce a fresh default node of ``block_type``, or None if unknown."""
    spec = spec_for(block_type)
    if spec is None:
        logger.debug("unknown_block_type", block_type=block_type)
        return None
    return spec.create_default()
