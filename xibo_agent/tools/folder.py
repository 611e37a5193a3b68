"""Folder tools."""

from enum import Enum
from typing import Any, List

import structlog

from xibo_agent.core.tree_view import create_tree_view_response
from xibo_agent.schemas.common import SuccessResponse
from xibo_agent.schemas.folder import AddFolderInput, Folder, GetFoldersInput
from xibo_agent.schemas.tree import TreeNode
from xibo_agent.tools.base import XiboTool, query_params, validate_response

logger = structlog.get_logger(__name__)


class FolderNodeType(str, Enum):
    FOLDER = "folder"
    FOLDER_ID = "folder-id"
    TYPE = "type"
    PARENT_ID = "parent-id"
    IS_ROOT = "is-root"
    PERMISSIONS_FOLDER_ID = "permissions-folder-id"
    FOLDER_ID_ALT = "folder-id-alt"
    FOLDER_NAME = "folder-name"


def format_folder_node(node: TreeNode) -> str:
    if node.type == FolderNodeType.FOLDER:
        return f"📁 {node.name}"
    return node.name


def _folder_node(folder: Folder) -> TreeNode:
    fid = folder.id
    node = TreeNode(
        id=fid,
        name=folder.text,
        type=FolderNodeType.FOLDER,
        children=[
            TreeNode(id=fid * 10 + 1, name=f"ID: {fid}", type=FolderNodeType.FOLDER_ID),
            TreeNode(id=fid * 10 + 2, name=f"Type: {folder.type or 'N/A'}", type=FolderNodeType.TYPE),
            TreeNode(
                id=fid * 10 + 3,
                name=f"Parent ID: {folder.parentId if folder.parentId is not None else 'N/A'}",
                type=FolderNodeType.PARENT_ID,
            ),
            TreeNode(
                id=fid * 10 + 4,
                name=f"isRoot: {folder.isRoot if folder.isRoot is not None else 'N/A'}",
                type=FolderNodeType.IS_ROOT,
            ),
        ],
    )

    if folder.permissionsFolderId is not None:
        node.children.append(
            TreeNode(
                id=fid * 10 + 5,
                name=f"Permissions Folder ID: {folder.permissionsFolderId}",
                type=FolderNodeType.PERMISSIONS_FOLDER_ID,
            )
        )
    if folder.folderId is not None:
        node.children.append(
            TreeNode(
                id=fid * 10 + 6,
                name=f"Folder ID (alt): {folder.folderId}",
                type=FolderNodeType.FOLDER_ID_ALT,
            )
        )
    if folder.folderName:
        node.children.append(
            TreeNode(
                id=fid * 10 + 7,
                name=f"Folder Name: {folder.folderName}",
                type=FolderNodeType.FOLDER_NAME,
            )
        )

    for child in folder.children or []:
        node.children.append(_folder_node(child))
    return node


def build_folder_tree(folders: Any) -> List[TreeNode]:
    """Recursive folder forest; each folder lists its details before sub-folders."""
    if not isinstance(folders, list):
        logger.warning("folder_tree_input_not_list", type=type(folders).__name__)
        return []
    return [_folder_node(folder) for folder in folders]


class GetFoldersTool(XiboTool):
    id = "get-folders"
    description = "Retrieve the folder hierarchy from the Xibo CMS"
    input_model = GetFoldersInput

    async def run(self, params: GetFoldersInput) -> SuccessResponse:
        raw = await self.cms.get("folders", params=query_params(params))
        folders = validate_response(List[Folder], raw, "Folder list")

        logger.info("get_folders_complete", count=len(folders), tree_view=params.treeView)
        if params.treeView:
            return create_tree_view_response(
                folders, build_folder_tree(folders), format_folder_node
            )
        return SuccessResponse(data=folders)


class AddFolderTool(XiboTool):
    id = "add-folder"
    description = "Create a new folder in the Xibo CMS"
    input_model = AddFolderInput

    async def run(self, params: AddFolderInput) -> SuccessResponse:
        raw = await self.cms.post("folders", data=query_params(params))
        folder = validate_response(Folder, raw, "Add folder")

        logger.info("folder_added", folder_id=folder.id, parent_id=params.parentId)
        return SuccessResponse(data=folder, message=f"Folder '{folder.text}' created.")
