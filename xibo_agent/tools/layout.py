"""Layout tools and the layout tree view."""

import json
from enum import Enum
from typing import Any, Dict, List

import structlog

from xibo_agent.core.json_parser import parse_json_strings
from xibo_agent.core.tree_view import create_tree_view_response
from xibo_agent.schemas.common import SuccessResponse, Tag
from xibo_agent.schemas.layout import (
    GetLayoutsInput,
    Layout,
    PublishLayoutInput,
    Region,
    Widget,
)
from xibo_agent.schemas.tree import TreeNode
from xibo_agent.tools.base import XiboTool, query_params, validate_response

logger = structlog.get_logger(__name__)


class LayoutNodeType(str, Enum):
    LAYOUT = "layout"
    INFO = "info"
    DIMENSIONS = "dimensions"
    STATUS = "status"
    CREATED = "created"
    MODIFIED = "modified"
    PUBLISHED = "published"
    PROPERTIES = "properties"
    OWNER = "owner"
    BACKGROUND = "background"
    ORIENTATION = "orientation"
    DURATION = "duration"
    REGIONS = "regions"
    REGION = "region"
    REGION_PROPS = "region-props"
    POSITION = "position"
    ZINDEX = "zindex"
    REGION_OPTIONS = "region-options"
    OPTION = "option"
    PLAYLIST = "playlist"
    PLAYLIST_PROPS = "playlist-props"
    DYNAMIC = "dynamic"
    WIDGETS = "widgets"
    WIDGET = "widget"
    WIDGET_PROPS = "widget-props"
    ORDER = "order"
    WIDGET_OPTIONS = "widget-options"
    MEDIA = "media"
    MEDIA_ID = "media-id"
    TAGS = "tags"
    TAG = "tag"
    TAG_VALUE = "tag-value"


LAYOUT_LABELS: Dict[str, str] = {
    LayoutNodeType.LAYOUT: "📄 Layout: {name}",
    LayoutNodeType.INFO: "ℹ️ {name}",
    LayoutNodeType.PROPERTIES: "🔧 {name}",
    LayoutNodeType.REGIONS: "🖼️ {name}",
    LayoutNodeType.PLAYLIST: "📋 {name}",
    LayoutNodeType.WIDGETS: "🔧 {name}",
    LayoutNodeType.TAGS: "🏷️ {name}",
}


def format_layout_node(node: TreeNode) -> str:
    return LAYOUT_LABELS.get(node.type, "{name}").format(name=node.name)


def _option_value(value: Any) -> str:
    """Single-line text for an option value; containers are shown as JSON."""
    if isinstance(value, (dict, list)):
        text = json.dumps(value, ensure_ascii=False)
    elif value is None:
        text = ""
    else:
        text = str(value)
    return text.replace("\n", " ")


# Detail and grouping ids are derived from the owning entity id and may
# collide with real ids; key on the flattened path instead.
def _leaf(node_type: LayoutNodeType, node_id: int, name: str) -> TreeNode:
    return TreeNode(id=node_id, name=name, type=node_type)


def _widget_node(widget: Widget) -> TreeNode:
    wid = widget.widgetId
    node = TreeNode(
        id=wid,
        name=f"{widget.type or 'Widget'} ({wid})",
        type=LayoutNodeType.WIDGET,
        duration=widget.duration,
        children=[
            TreeNode(
                id=wid * 10,
                name="Properties",
                type=LayoutNodeType.WIDGET_PROPS,
                children=[
                    _leaf(LayoutNodeType.DURATION, wid * 10 + 1, f"Duration: {widget.duration}s"),
                    _leaf(LayoutNodeType.ORDER, wid * 10 + 2, f"Display Order: {widget.displayOrder}"),
                ],
            )
        ],
    )

    if widget.widgetOptions:
        node.children.append(
            TreeNode(
                id=wid * 100,
                name="Options",
                type=LayoutNodeType.WIDGET_OPTIONS,
                children=[
                    _leaf(
                        LayoutNodeType.OPTION,
                        wid * 100 + idx,
                        f"{opt.option}: {_option_value(opt.value)}",
                    )
                    for idx, opt in enumerate(widget.widgetOptions)
                ],
            )
        )

    if widget.mediaIds:
        node.children.append(
            TreeNode(
                id=wid * 1000,
                name="Media",
                type=LayoutNodeType.MEDIA,
                children=[
                    _leaf(LayoutNodeType.MEDIA_ID, wid * 1000 + idx, f"Media ID: {media_id}")
                    for idx, media_id in enumerate(widget.mediaIds)
                ],
            )
        )

    return node


def _region_node(region: Region) -> TreeNode:
    rid = region.regionId
    node = TreeNode(id=rid, name=region.name or f"Region {rid}", type=LayoutNodeType.REGION)

    if region.regionOptions:
        node.children.append(
            TreeNode(
                id=rid * 100,
                name="Options",
                type=LayoutNodeType.REGION_OPTIONS,
                children=[
                    _leaf(LayoutNodeType.OPTION, rid * 100 + idx, f"{opt.option}: {opt.value}")
                    for idx, opt in enumerate(region.regionOptions)
                ],
            )
        )

    node.children.append(
        TreeNode(
            id=rid * 10,
            name="Properties",
            type=LayoutNodeType.REGION_PROPS,
            children=[
                _leaf(LayoutNodeType.DIMENSIONS, rid * 10 + 1, f"Size: {region.width}x{region.height}"),
                _leaf(LayoutNodeType.POSITION, rid * 10 + 2, f"Position: ({region.left},{region.top})"),
                _leaf(LayoutNodeType.ZINDEX, rid * 10 + 3, f"Z-Index: {region.zIndex}"),
            ],
        )
    )

    playlist = region.regionPlaylist
    if playlist is not None:
        pid = playlist.playlistId
        playlist_node = TreeNode(
            id=pid,
            name=playlist.name or f"Playlist {pid}",
            type=LayoutNodeType.PLAYLIST,
            children=[
                TreeNode(
                    id=pid * 10,
                    name="Properties",
                    type=LayoutNodeType.PLAYLIST_PROPS,
                    children=[
                        _leaf(LayoutNodeType.DURATION, pid * 10 + 1, f"Duration: {playlist.duration}s"),
                        _leaf(
                            LayoutNodeType.DYNAMIC,
                            pid * 10 + 2,
                            f"Dynamic: {'Yes' if playlist.isDynamic else 'No'}",
                        ),
                    ],
                )
            ],
        )
        if playlist.widgets:
            playlist_node.children.append(
                TreeNode(
                    id=pid * 100,
                    name="Widgets",
                    type=LayoutNodeType.WIDGETS,
                    children=[_widget_node(widget) for widget in playlist.widgets],
                )
            )
        node.children.append(playlist_node)

    return node


def _tag_node(tag: Tag) -> TreeNode:
    node = TreeNode(id=tag.tagId, name=tag.tag or f"Tag {tag.tagId}", type=LayoutNodeType.TAG)
    if tag.value:
        node.children.append(
            _leaf(LayoutNodeType.TAG_VALUE, tag.tagId * 10, f"Value: {tag.value}")
        )
    return node


def _layout_node(layout: Layout) -> TreeNode:
    lid = layout.layoutId

    info = TreeNode(
        id=-lid,
        name="Information",
        type=LayoutNodeType.INFO,
        children=[
            _leaf(LayoutNodeType.DIMENSIONS, -lid * 10 - 1, f"Size: {layout.width}x{layout.height}"),
            _leaf(LayoutNodeType.STATUS, -lid * 10 - 2, f"Status: {layout.publishedStatus or 'Unknown'}"),
        ],
    )
    if layout.createdDt:
        info.children.append(_leaf(LayoutNodeType.CREATED, -lid * 10 - 3, f"Created: {layout.createdDt}"))
    if layout.modifiedDt:
        info.children.append(_leaf(LayoutNodeType.MODIFIED, -lid * 10 - 4, f"Modified: {layout.modifiedDt}"))
    if layout.publishedDate:
        info.children.append(
            _leaf(LayoutNodeType.PUBLISHED, -lid * 10 - 5, f"Published: {layout.publishedDate}")
        )

    properties = TreeNode(
        id=-lid * 100,
        name="Properties",
        type=LayoutNodeType.PROPERTIES,
        children=[
            _leaf(LayoutNodeType.OWNER, -lid * 100 - 1, f"Owner ID: {layout.ownerId}"),
            _leaf(LayoutNodeType.BACKGROUND, -lid * 100 - 2, f"Background: {layout.backgroundColor or 'None'}"),
            _leaf(
                LayoutNodeType.ORIENTATION,
                -lid * 100 - 3,
                f"Orientation: {layout.orientation or 'Not specified'}",
            ),
            _leaf(LayoutNodeType.DURATION, -lid * 100 - 4, f"Duration: {layout.duration}s"),
        ],
    )

    node = TreeNode(
        id=lid,
        name=layout.layout or f"Layout {lid}",
        type=LayoutNodeType.LAYOUT,
        children=[info, properties],
    )

    if layout.regions:
        node.children.append(
            TreeNode(
                id=-lid * 1000,
                name="Regions",
                type=LayoutNodeType.REGIONS,
                children=[_region_node(region) for region in layout.regions],
            )
        )

    if layout.tags:
        node.children.append(
            TreeNode(
                id=-lid * 10000,
                name="Tags",
                type=LayoutNodeType.TAGS,
                children=[_tag_node(tag) for tag in layout.tags],
            )
        )

    return node


def build_layout_tree(layouts: Any) -> List[TreeNode]:
    """One root per layout: information, properties, regions and tags."""
    if not isinstance(layouts, list):
        logger.warning("layout_tree_input_not_list", type=type(layouts).__name__)
        return []
    return [_layout_node(layout) for layout in layouts]


class GetLayoutsTool(XiboTool):
    id = "get-layouts"
    description = "Search layouts in the Xibo CMS, optionally with embedded regions and widgets"
    input_model = GetLayoutsInput

    async def run(self, params: GetLayoutsInput) -> SuccessResponse:
        raw = await self.cms.get("layout", params=query_params(params))
        layouts = validate_response(List[Layout], raw, "Layout list")

        # Widget option values often carry JSON encoded as strings
        for layout in layouts:
            for region in layout.regions or []:
                if region.regionPlaylist is None:
                    continue
                for widget in region.regionPlaylist.widgets or []:
                    for option in widget.widgetOptions or []:
                        option.value = parse_json_strings(option.value)

        logger.info("get_layouts_complete", count=len(layouts), tree_view=params.treeView)
        if params.treeView:
            return create_tree_view_response(
                layouts, build_layout_tree(layouts), format_layout_node
            )
        return SuccessResponse(data=layouts)


class PublishLayoutTool(XiboTool):
    id = "publish-layout"
    description = "Publish a draft layout in the Xibo CMS, now or at a given date"
    input_model = PublishLayoutInput

    async def run(self, params: PublishLayoutInput) -> SuccessResponse:
        raw = await self.cms.put(
            f"layout/publish/{params.layoutId}",
            data=query_params(params, "layoutId"),
        )

        logger.info("layout_published", layout_id=params.layoutId)
        if raw is None:
            return SuccessResponse(message=f"Layout {params.layoutId} published.")

        layout = validate_response(Layout, raw, "Publish layout")
        return SuccessResponse(data=layout)
