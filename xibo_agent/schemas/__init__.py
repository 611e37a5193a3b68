"""Pydantic schemas for the Xibo agent toolset."""

from xibo_agent.schemas.common import (
    ErrorResponse,
    SuccessResponse,
    ToolResult,
    TreeViewResponse,
)
from xibo_agent.schemas.tree import FlatTreeNode, TreeNode

__all__ = [
    "ErrorResponse",
    "SuccessResponse",
    "ToolResult",
    "TreeViewResponse",
    "FlatTreeNode",
    "TreeNode",
]
