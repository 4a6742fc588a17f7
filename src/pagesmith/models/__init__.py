"""Pydantic data models for pagesmith."""

from pagesmith.models.node import (
    AnyNode,
    BlockType,
    BLOCK_TYPES,
    CONTAINER_TYPES,
    ContainerNode,
    LeafNode,
    Node,
    Page,
)
