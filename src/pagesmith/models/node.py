"""Node and Page models for the page tree.

A page is an ordered sequence of top-level nodes. Container nodes
(``section``, ``two-column``) own an ordered sequence of leaf nodes; leaf
nodes have no children at all. Nesting is therefore capped at two levels by
the types themselves.

Models are frozen: mutations build new values (see ``pagesmith.mutations``)
and unchanged subtrees are shared between the old and the new page.
"""

from typing import Annotated, Any, Iterator, Literal, Union, get_args

from pydantic import BaseModel, Field, RootModel


BlockType = Literal[
    "section",
    "heading",
    "paragraph",
    "button",
    "image",
    "two-column",
    "schedule",
    "speaker",
]

ContainerType = Literal["section", "two-column"]
LeafType = Literal["heading", "paragraph", "button", "image", "schedule", "speaker"]

CONTAINER_TYPES: frozenset[str] = frozenset({"section", "two-column"})
BLOCK_TYPES: tuple[str, ...] = get_args(BlockType)


class LeafNode(BaseModel):
    """Content block without children (heading, paragraph, image, ...)."""

    id: str = Field(..., min_length=1, description="Unique node identifier")

    type: LeafType = Field(..., description="Block type tag")

    props: dict[str, Any] = Field(
        default_factory=dict,
        description="Type-dependent properties (never node references)"
    )

    model_config = {"frozen": True, "extra": "forbid"}

    @property
    def is_container(self) -> bool:
        return False


class ContainerNode(BaseModel):
    """Block owning an ordered sequence of leaf children.

    ``two-column`` conventionally has two children (left, right) but any
    number is accepted; missing slots render as empty.
    """

    id: str = Field(..., min_length=1, description="Unique node identifier")

    type: ContainerType = Field(..., description="Block type tag")

    props: dict[str, Any] = Field(
        default_factory=dict,
        description="Type-dependent properties (never node references)"
    )

    children: tuple[LeafNode, ...] = Field(
        default_factory=tuple,
        description="Ordered child blocks (one level only)"
    )

    model_config = {"frozen": True, "extra": "forbid"}

    @property
    def is_container(self) -> bool:
        return True


AnyNode = Union[ContainerNode, LeafNode]

Node = Annotated[AnyNode, Field(discriminator="type")]


class Page(RootModel[tuple[Node, ...]]):
    """Ordered sequence of top-level nodes.

    Serializes to (and validates from) a JSON array of node objects:

        [{"id": "...", "type": "section", "props": {...}, "children": [...]}]
    """

    root: tuple[Node, ...] = ()

    model_config = {"frozen": True}

    @property
    def nodes(self) -> tuple[AnyNode, ...]:
        return self.root

    def __len__(self) -> int:
        return len(self.root)

    def __iter__(self) -> Iterator[AnyNode]:  # type: ignore[override]
        return iter(self.root)

    def __getitem__(self, index: int) -> AnyNode:
        return self.root[index]

    def replace(self, nodes) -> "Page":
        """Return a new page holding ``nodes`` (no re-validation)."""
        return Page.model_construct(tuple(nodes))

    def to_json(self, indent: int | None = None) -> str:
        """Serialize to the persisted JSON form.

        Leaf nodes carry no ``children`` key; containers always do.
        """
        return self.model_dump_json(indent=indent)

    @classmethod
    def from_json(cls, data: str | bytes) -> "Page":
        """Parse and validate the persisted JSON form.

        Raises:
            pydantic.ValidationError: If the document does not match the model
        """
        return cls.model_validate_json(data)

    @classmethod
    def empty(cls) -> "Page":
        return cls(())
