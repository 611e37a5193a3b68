"""Notification tools."""

from enum import Enum
from typing import Any, Dict, List

import structlog

from xibo_agent.core.tree_view import create_tree_view_response
from xibo_agent.schemas.common import SuccessResponse
from xibo_agent.schemas.notification import GetNotificationsInput, Notification
from xibo_agent.schemas.tree import TreeNode
from xibo_agent.tools.base import XiboTool, query_params, validate_response

logger = structlog.get_logger(__name__)


class NotificationNodeType(str, Enum):
    NOTIFICATION = "notification"
    CATEGORY = "category"
    USER_GROUP = "user-group"
    DISPLAY_GROUP = "display-group"


NOTIFICATION_ICONS: Dict[str, str] = {
    NotificationNodeType.NOTIFICATION: "🔔",
    NotificationNodeType.CATEGORY: "📁",
    NotificationNodeType.USER_GROUP: "👥",
    NotificationNodeType.DISPLAY_GROUP: "🖥️",
}


def format_notification_node(node: TreeNode) -> str:
    icon = NOTIFICATION_ICONS.get(node.type)
    return f"{icon} {node.name}" if icon else node.name


def _notification_node(notification: Notification) -> TreeNode:
    nid = notification.notificationId
    node = TreeNode(id=nid, name=notification.subject, type=NotificationNodeType.NOTIFICATION)

    if notification.userGroups:
        node.children.append(
            TreeNode(
                id=-nid * 10 - 1,
                name="User Groups",
                type=NotificationNodeType.CATEGORY,
                children=[
                    TreeNode(id=g.groupId, name=g.group, type=NotificationNodeType.USER_GROUP)
                    for g in notification.userGroups
                ],
            )
        )

    if notification.displayGroups:
        node.children.append(
            TreeNode(
                id=-nid * 10 - 2,
                name="Display Groups",
                type=NotificationNodeType.CATEGORY,
                children=[
                    TreeNode(
                        id=g.displayGroupId,
                        name=g.displayGroup,
                        type=NotificationNodeType.DISPLAY_GROUP,
                    )
                    for g in notification.displayGroups
                ],
            )
        )

    return node


def build_notification_tree(notifications: Any) -> List[TreeNode]:
    if not isinstance(notifications, list):
        logger.warning("notification_tree_input_not_list", type=type(notifications).__name__)
        return []
    return [_notification_node(n) for n in notifications]


class GetNotificationsTool(XiboTool):
    id = "get-notifications"
    description = "Retrieve notifications from the Xibo CMS"
    input_model = GetNotificationsInput

    async def run(self, params: GetNotificationsInput) -> SuccessResponse:
        raw = await self.cms.get("notification", params=query_params(params))
        notifications = validate_response(List[Notification], raw, "Notification list")

        logger.info(
            "get_notifications_complete",
            count=len(notifications),
            tree_view=params.treeView,
        )
        if params.treeView:
            return create_tree_view_response(
                notifications,
                build_notification_tree(notifications),
                format_notification_node,
            )
        return SuccessResponse(data=notifications)
