"""Pydantic schemas for layout tools."""

from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from xibo_agent.schemas.common import Permission, Tag, XiboModel

Number = Union[int, float]


class RegionOption(XiboModel):
    regionId: Optional[int] = None
    option: Optional[str] = None
    value: Optional[str] = None


class WidgetOption(XiboModel):
    widgetId: Optional[int] = None
    type: Optional[str] = None
    option: Optional[str] = None
    value: Any = None


class Widget(XiboModel):
    """A widget inside a region playlist."""

    widgetId: int
    playlistId: int
    ownerId: Optional[int] = None
    type: Optional[str] = None
    duration: Number
    displayOrder: Optional[int] = None
    useDuration: Optional[int] = None
    calculatedDuration: Optional[Number] = None
    widgetOptions: Optional[List[WidgetOption]] = None
    mediaIds: Optional[List[int]] = None
    permissions: Optional[List[Permission]] = None


class Playlist(XiboModel):
    """A region playlist embedded in a layout."""

    playlistId: int
    ownerId: Optional[int] = None
    name: Optional[str] = None
    regionId: Optional[int] = None
    isDynamic: Optional[int] = None
    duration: Optional[Number] = None
    tags: Optional[List[Tag]] = None
    widgets: Optional[List[Widget]] = None


class Region(XiboModel):
    """A region of a layout."""

    regionId: int
    layoutId: int
    ownerId: Optional[int] = None
    type: Optional[str] = None
    name: Optional[str] = None
    width: Number
    height: Number
    top: Number
    left: Number
    zIndex: int
    duration: Optional[Number] = None
    isDrawer: Optional[int] = None
    regionOptions: Optional[List[RegionOption]] = None
    permissions: Optional[List[Permission]] = None
    regionPlaylist: Optional[Playlist] = None


class Layout(XiboModel):
    """A layout as returned by GET /layout."""

    layoutId: int
    ownerId: int
    campaignId: Optional[int] = None
    parentId: Optional[int] = None
    publishedStatusId: Optional[int] = None
    publishedStatus: Optional[str] = None
    publishedDate: Optional[str] = None
    backgroundImageId: Optional[int] = None
    schemaVersion: Optional[int] = None
    layout: Optional[str] = None
    description: Optional[str] = None
    backgroundColor: Optional[str] = None
    createdDt: Optional[str] = None
    modifiedDt: Optional[str] = None
    status: Optional[int] = None
    retired: Optional[int] = None
    width: Number
    height: Number
    orientation: Optional[str] = None
    duration: Number
    enableStat: Optional[int] = None
    code: Optional[str] = None
    folderId: Optional[int] = None
    regions: Optional[List[Region]] = None
    tags: Optional[List[Tag]] = None


class GetLayoutsInput(BaseModel):
    """Input schema for get-layouts."""

    layoutId: Optional[int] = Field(None, description="Filter by layout ID")
    parentId: Optional[int] = Field(None, description="Filter by parent (draft) ID")
    showDrafts: Optional[int] = Field(None, ge=0, le=1, description="Include drafts")
    layout: Optional[str] = Field(None, description="Filter by partial layout name")
    userId: Optional[int] = Field(None, description="Filter by owner user ID")
    retired: Optional[int] = Field(None, ge=0, le=1, description="Filter by retired flag")
    tags: Optional[str] = Field(None, description="Filter by comma separated tags")
    exactTags: Optional[int] = Field(None, ge=0, le=1, description="Match tags exactly")
    logicalOperator: Optional[Literal["AND", "OR"]] = None
    ownerUserGroupId: Optional[int] = None
    publishedStatusId: Optional[int] = Field(
        None, description="1 = published, 2 = draft"
    )
    embed: Optional[str] = Field(
        None, description="Embed related data: regions,playlists,widgets,tags,permissions"
    )
    campaignId: Optional[int] = None
    folderId: Optional[int] = None
    treeView: bool = Field(False, description="Also return the layouts as a tree view")


class PublishLayoutInput(BaseModel):
    """Input schema for publish-layout."""

    layoutId: int = Field(..., description="ID of the layout to publish")
    publishNow: Optional[int] = Field(
        None, ge=0, le=1, description="Publish immediately (0 or 1)"
    )
    publishDate: Optional[str] = Field(
        None, description="Date/time to publish at, ISO 8601"
    )
