"""Pydantic schemas for display tools."""

from typing import List, Optional

from pydantic import BaseModel, Field

from xibo_agent.schemas.common import Tag, XiboModel


class Display(XiboModel):
    """A display (player) registered with the CMS."""

    displayId: int
    display: str
    description: Optional[str] = None
    displayGroupId: Optional[int] = None
    displayProfileId: Optional[int] = None
    defaultLayoutId: Optional[int] = None
    licensed: Optional[int] = None
    license: Optional[str] = None
    loggedIn: Optional[int] = None
    lastAccessed: Optional[int] = None
    clientAddress: Optional[str] = None
    macAddress: Optional[str] = None
    clientType: Optional[str] = None
    clientVersion: Optional[str] = None
    clientCode: Optional[int] = None
    mediaInventoryStatus: Optional[int] = None
    currentLayoutId: Optional[int] = None
    folderId: Optional[int] = None
    tags: Optional[List[Tag]] = None


class GetDisplaysInput(BaseModel):
    """Input schema for get-displays."""

    displayId: Optional[int] = Field(None, description="Filter by display ID")
    displayGroupId: Optional[int] = Field(None, description="Filter by display group ID")
    display: Optional[str] = Field(None, description="Filter by display name")
    tags: Optional[str] = Field(None, description="Filter by comma separated tags")
    macAddress: Optional[str] = None
    hardwareKey: Optional[str] = None
    clientVersion: Optional[str] = None
    clientType: Optional[str] = Field(None, description="android, windows, linux, lg, sssp")
    embed: Optional[str] = Field(
        None, description="Embed related data: displayGroups,overrideConfig"
    )
    authorised: Optional[int] = Field(None, ge=0, le=1)
    displayProfileId: Optional[int] = None
    mediaInventoryStatus: Optional[int] = Field(
        None, description="1 = up to date, 2 = downloading, 3 = out of date"
    )
    loggedIn: Optional[int] = Field(None, ge=0, le=1)
    lastAccessed: Optional[str] = Field(None, description="Last accessed date filter")
    folderId: Optional[int] = None
