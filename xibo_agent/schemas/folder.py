"""Pydantic schemas for folder tools."""

from typing import List, Optional, Union

from pydantic import BaseModel, Field

from xibo_agent.schemas.common import XiboModel


class Folder(XiboModel):
    """A folder node; the CMS nests sub-folders under ``children``."""

    id: int
    type: Optional[str] = None
    text: str
    parentId: Optional[Union[int, str]] = None
    isRoot: Optional[int] = None
    children: Optional[List["Folder"]] = None
    permissionsFolderId: Optional[int] = None
    folderId: Optional[int] = None
    folderName: Optional[str] = None


class GetFoldersInput(BaseModel):
    """Input schema for get-folders."""

    folderId: Optional[int] = Field(None, description="Show only this folder")
    gridView: Optional[int] = Field(
        None, ge=0, le=1, description="Return a flat grid instead of the nested tree"
    )
    folderName: Optional[str] = Field(None, description="Filter folders by name")
    exactFolderName: Optional[int] = Field(
        None, ge=0, le=1, description="Require an exact name match"
    )
    treeView: bool = Field(False, description="Also return the folders as a tree view")


class AddFolderInput(BaseModel):
    """Input schema for add-folder."""

    text: str = Field(..., min_length=1, description="Name of the new folder")
    parentId: Optional[int] = Field(None, description="Parent folder ID")
