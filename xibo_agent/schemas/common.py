"""Result envelopes shared by every tool."""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from xibo_agent.schemas.tree import FlatTreeNode


class Envelope(BaseModel):
    """Base for the success/failure result union."""

    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        """Dump with wire (camelCase) keys, leaving out empty optional keys.

        ``data`` is kept when it was given explicitly, even as ``None``.
        """
        dumped = self.model_dump(mode="json", by_alias=True)
        return {
            key: value
            for key, value in dumped.items()
            if value is not None or (key == "data" and "data" in self.model_fields_set)
        }


class SuccessResponse(Envelope):
    """Successful tool result."""

    success: Literal[True] = True
    data: Any = None
    message: Optional[str] = None


class TreeViewResponse(SuccessResponse):
    """Successful list result with a rendered tree view attached."""

    tree: List[FlatTreeNode]
    tree_view_text: str = Field(..., alias="treeViewText")


class ErrorResponse(Envelope):
    """Failed tool result."""

    success: Literal[False] = False
    message: str
    error: Any = None
    error_data: Any = Field(None, alias="errorData")


ToolResult = Union[SuccessResponse, TreeViewResponse, ErrorResponse]


class XiboModel(BaseModel):
    """Base for CMS entities; fields the CMS adds beyond the declared ones are kept."""

    model_config = ConfigDict(extra="allow")


class Tag(XiboModel):
    """Tag link attached to layouts, displays, playlists and media."""

    tag: Optional[str] = None
    tagId: int
    value: Optional[str] = None


class Permission(XiboModel):
    """Permission entry on an entity."""

    permissionId: Optional[int] = None
    entityId: int
    groupId: int
    objectId: int
    isUser: Optional[int] = None
    entity: Optional[str] = None
    objectIdString: Optional[str] = None
    group: Optional[str] = None
    view: int
    edit: int
    delete: int
    modifyPermissions: Optional[int] = None
