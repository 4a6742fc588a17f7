"""Mutation intents - requests produced by the input layer.

Intents are plain data. ``PageEditor.apply`` turns them into calls on the
mutation engine. A script of intents (YAML or JSON list) is validated with
``parse_intents``.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter


class InsertBlock(BaseModel):
    """Drop a new block from the palette."""

    kind: Literal["insert_block"] = "insert_block"

    block_type: str = Field(
        ...,
        description="Catalog type tag; unknown tags are ignored, not rejected"
    )

    index: int = Field(
        default=0,
        description="Top-level drop index (ignored when parent_id is set)"
    )

    parent_id: Optional[str] = Field(
        default=None,
        description="Container to append the new block to"
    )

    model_config = {"frozen": True}


class MoveNode(BaseModel):
    """Drag an existing top-level node to a drop index or into a container."""

    kind: Literal["move"] = "move"
    node_id: str
    index: int = 0
    parent_id: Optional[str] = None

    model_config = {"frozen": True}


class DuplicateNode(BaseModel):
    kind: Literal["duplicate"] = "duplicate"
    node_id: str

    model_config = {"frozen": True}


class DeleteNode(BaseModel):
    kind: Literal["delete"] = "delete"
    node_id: str
    nested: bool = Field(
        default=False,
        description="Also allow deleting a child of a container"
    )

    model_config = {"frozen": True}


class PatchProps(BaseModel):
    """Property editor change or inline text edit commit."""

    kind: Literal["patch"] = "patch"
    node_id: str
    patch: dict[str, Any]

    model_config = {"frozen": True}


class ShiftNode(BaseModel):
    """Layers panel up/down button."""

    kind: Literal["shift"] = "shift"
    node_id: str
    offset: Literal[-1, 1]

    model_config = {"frozen": True}


class ResizeNode(BaseModel):
    """Canvas resize handle release."""

    kind: Literal["resize"] = "resize"
    node_id: str
    width: float = Field(..., allow_inf_nan=False, description="Requested width in pixels")

    model_config = {"frozen": True}


class SelectNode(BaseModel):
    """Explicit selection change (null clears the selection)."""

    kind: Literal["select"] = "select"
    node_id: Optional[str] = None

    model_config = {"frozen": True}


Intent = Annotated[
    Union[
        InsertBlock,
        MoveNode,
        DuplicateNode,
        DeleteNode,
        PatchProps,
        ShiftNode,
        ResizeNode,
        SelectNode,
    ],
    Field(discriminator="kind"),
]

_intent_list_adapter = TypeAdapter(list[Intent])


def parse_intents(data: Any) -> list[Intent]:
    """Validate a list of raw intent mappings.

    Args:
        data: Parsed YAML/JSON (a list of mappings, each with a ``kind`` key)

    Returns:
        List of intent models, in order

    Raises:
        pydantic.ValidationError: If any entry is malformed

    Example:
        >>> parse_intents([{"kind": "delete", "node_id": "n_1"}])
        [DeleteNode(kind='delete', node_id='n_1', nested=False)]
    """
    return _intent_list_adapter.validate_python(data)
