"""Generic tree nodes used to render hierarchical CMS data."""

from enum import Enum
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TreeNode(BaseModel):
    """A display node with an ordered list of children.

    ``type`` is a caller-defined tag (usually a member of one of the
    per-domain node type enums) and drives formatter dispatch. Extra
    attributes such as ``duration`` may be attached and are kept.

    ``id`` is not unique within a forest: grouping and detail nodes use ids
    derived from their parent. Use the flattened ``path`` as a key.
    """

    model_config = ConfigDict(extra="allow")

    id: int
    name: str
    type: str
    children: List["TreeNode"] = Field(default_factory=list)

    @field_validator("type", mode="before")
    @classmethod
    def enum_to_value(cls, v: Any) -> Any:
        if isinstance(v, Enum):
            return v.value
        return v


class FlatTreeNode(BaseModel):
    """A tree node projected into a depth-first listing."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: int
    name: str
    type: str
    depth: int = Field(..., ge=0)
    is_last: bool = Field(..., alias="isLast")
    path: str
