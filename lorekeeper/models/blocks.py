"""
Block node models for Lorekeeper.

This module defines the tagged union of outline blocks. Every variant shares
an id, a content string and an ordered tuple of children; the ``type`` tag
selects the variant and therefore which extra fields exist.
"""

import uuid
from typing import Annotated, Any, Dict, Literal, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel


BlockType = Literal[
    "h1", "h2", "h3", "paragraph", "quote", "code", "li", "hr", "image", "callout", "reference"
]

HEADING_TYPES = ("h1", "h2", "h3")


def generate_block_id() -> str:
    """Return a fresh block identifier."""
    return str(uuid.uuid4())


class _BaseBlock(BaseModel):
    """
    Fields shared by all block variants.

    Blocks are frozen: a change always produces a new instance, which lets
    snapshots share untouched subtrees.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(
        default_factory=generate_block_id,
        description="Opaque identifier, unique across the whole tree"
    )

    content: str = Field(
        default="",
        description="Free-text payload of the block"
    )

    collapsed: bool = Field(
        default=False,
        description="Whether the block's children are folded in the editor"
    )

    children: Tuple["BlockNode", ...] = Field(
        default=(),
        description="Ordered child blocks; order is document order"
    )


class HeadingBlock(_BaseBlock):
    """A level 1-3 heading. Headings are the usual containers for children."""

    type: Literal["h1", "h2", "h3"] = "h1"

    @property
    def level(self) -> int:
        return int(self.type[1])


class ParagraphBlock(_BaseBlock):
    type: Literal["paragraph"] = "paragraph"


class QuoteBlock(_BaseBlock):
    type: Literal["quote"] = "quote"


class CodeBlock(_BaseBlock):
    type: Literal["code"] = "code"


class ListItemBlock(_BaseBlock):
    """A bullet, numbered or task list item."""

    type: Literal["li"] = "li"

    list_style: Literal["bullet", "number", "task"] = Field(
        default="bullet",
        description="Marker style used for display and serialization"
    )

    checked: bool = Field(
        default=False,
        description="Completion state, meaningful for task items only"
    )

    @field_validator("list_style", mode="before")
    @classmethod
    def _accept_numbered(cls, value: Any) -> Any:
        # The editor UI sends "numbered" in some places.
        if value == "numbered":
            return "number"
        return value


class RuleBlock(_BaseBlock):
    type: Literal["hr"] = "hr"


class ImageBlock(_BaseBlock):
    type: Literal["image"] = "image"
    src: str = ""
    alt: str = ""


class CalloutBlock(_BaseBlock):
    type: Literal["callout"] = "callout"
    variant: Literal["info", "warning", "danger", "success"] = "info"


class ReferenceBlock(_BaseBlock):
    """A pointer to another entry, with an optional note."""

    type: Literal["reference"] = "reference"

    entry_id: str = Field(
        default="",
        description="Identifier of the referenced entry"
    )

    note: Optional[str] = Field(
        default=None,
        description="Optional annotation shown next to the reference"
    )


BlockNode = Annotated[
    Union[
        HeadingBlock,
        ParagraphBlock,
        QuoteBlock,
        CodeBlock,
        ListItemBlock,
        RuleBlock,
        ImageBlock,
        CalloutBlock,
        ReferenceBlock,
    ],
    Field(discriminator="type"),
]

BLOCK_VARIANTS = (
    HeadingBlock,
    ParagraphBlock,
    QuoteBlock,
    CodeBlock,
    ListItemBlock,
    RuleBlock,
    ImageBlock,
    CalloutBlock,
    ReferenceBlock,
)

# Enable forward references for the self-referencing children field
for _variant in (_BaseBlock,) + BLOCK_VARIANTS:
    _variant.model_rebuild()

_BLOCK_ADAPTER = TypeAdapter(BlockNode)

# Maps camelCase aliases to field names, across all variants
_FIELD_BY_ALIAS: Dict[str, str] = {
    info.alias: name
    for variant in BLOCK_VARIANTS
    for name, info in variant.model_fields.items()
    if info.alias
}


def normalize_field_names(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Translate camelCase keys (``listStyle``) to field names (``list_style``)."""
    return {_FIELD_BY_ALIAS.get(key, key): value for key, value in fields.items()}


def parse_block(data: Union["BlockNode", Mapping[str, Any]]) -> "BlockNode":
    """
    Validate a mapping (or pass through a block) as a block node.

    Args:
        data: A block instance or a mapping with at least a ``type`` key

    Returns:
        The matching block variant

    Raises:
        pydantic.ValidationError: If the type is unknown or a field is invalid
    """
    if isinstance(data, BLOCK_VARIANTS):
        return data
    return _BLOCK_ADAPTER.validate_python(dict(data))


def default_root_block(id_factory=generate_block_id) -> HeadingBlock:
    """The empty heading a document falls back to when it has no blocks."""
    return HeadingBlock(id=id_factory(), type="h1", content="")
