"""User tools, including the tree views of users and the current user."""

import base64
from enum import Enum
from typing import Dict, List

import structlog

from xibo_agent.core.errors import XiboToolError
from xibo_agent.core.tree_view import create_tree_view_response
from xibo_agent.schemas.common import SuccessResponse
from xibo_agent.schemas.tree import TreeNode
from xibo_agent.schemas.user import (
    ChangePasswordInput,
    EditUserInput,
    GetUserMeInput,
    GetUsersInput,
    User,
)
from xibo_agent.tools.base import XiboTool, query_params, validate_response

logger = structlog.get_logger(__name__)


class UserNodeType(str, Enum):
    USER = "user"
    CATEGORY = "category"
    GROUP = "group"
    PERMISSION = "permission"


USER_ICONS: Dict[str, str] = {
    UserNodeType.USER: "👤",
    UserNodeType.CATEGORY: "📁",
    UserNodeType.GROUP: "👥",
    UserNodeType.PERMISSION: "🔑",
}

# Synthetic ids for the per-user grouping nodes
GROUPS_NODE_ID = -1
PERMISSIONS_NODE_ID = -2


def format_user_node(node: TreeNode) -> str:
    icon = USER_ICONS.get(node.type)
    return f"{icon} {node.name}" if icon else node.name


def _user_node(user: User, include_permissions: bool) -> TreeNode:
    node = TreeNode(id=user.userId, name=user.userName, type=UserNodeType.USER)

    if user.groups:
        node.children.append(
            TreeNode(
                id=GROUPS_NODE_ID,
                name="Groups",
                type=UserNodeType.CATEGORY,
                children=[
                    TreeNode(id=group.groupId, name=group.group, type=UserNodeType.GROUP)
                    for group in user.groups
                ],
            )
        )

    if include_permissions and user.permissions:
        node.children.append(
            TreeNode(
                id=PERMISSIONS_NODE_ID,
                name="Permissions",
                type=UserNodeType.CATEGORY,
                children=[
                    TreeNode(
                        id=permission.permissionId or 0,
                        name=f"{permission.entity} (ID: {permission.objectId})",
                        type=UserNodeType.PERMISSION,
                    )
                    for permission in user.permissions
                ],
            )
        )

    return node


def build_user_me_tree(user: User) -> List[TreeNode]:
    """Single-root tree of the current user with groups and permissions."""
    return [_user_node(user, include_permissions=True)]


def build_users_tree(users: List[User]) -> List[TreeNode]:
    """One root per user with its group memberships."""
    return [_user_node(user, include_permissions=False) for user in users]


def _b64(value: str) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


class GetUsersTool(XiboTool):
    id = "get-users"
    description = "Search users in the Xibo CMS, optionally as a tree view"
    input_model = GetUsersInput

    async def fetch(self, params: GetUsersInput) -> List[User]:
        raw = await self.cms.get("user", params=query_params(params))
        return validate_response(List[User], raw, "User list")

    async def run(self, params: GetUsersInput) -> SuccessResponse:
        users = await self.fetch(params)
        logger.info("get_users_complete", count=len(users), tree_view=params.treeView)

        if params.treeView:
            return create_tree_view_response(users, build_users_tree(users), format_user_node)
        return SuccessResponse(data=users)


class GetUserMeTool(XiboTool):
    id = "get-user-me"
    description = "Retrieve the authenticated user's information from the Xibo CMS"
    input_model = GetUserMeInput

    async def run(self, params: GetUserMeInput) -> SuccessResponse:
        raw = await self.cms.get("user/me", params=query_params(params))
        user = validate_response(User, raw, "Current user")

        logger.info("get_user_me_complete", user_id=user.userId)
        if params.treeView:
            return create_tree_view_response(user, build_user_me_tree(user), format_user_node)
        return SuccessResponse(data=user)


class EditUserTool(XiboTool):
    id = "edit-user"
    description = "Edit an existing user in the Xibo CMS"
    input_model = EditUserInput

    async def update(self, params: EditUserInput) -> User:
        if params.newPassword and params.newPassword != params.retypeNewPassword:
            raise XiboToolError("Passwords do not match.")

        data = query_params(params, "userId", "newPassword", "retypeNewPassword")
        if params.newPassword and params.retypeNewPassword:
            data["newPassword"] = _b64(params.newPassword)
            data["retypeNewPassword"] = _b64(params.retypeNewPassword)

        raw = await self.cms.put(f"user/{params.userId}", data=data)
        user = validate_response(User, raw, "Edit user")

        logger.info("user_edited", user_id=params.userId)
        return user

    async def run(self, params: EditUserInput) -> SuccessResponse:
        return SuccessResponse(data=await self.update(params))


class ChangePasswordTool(XiboTool):
    """Change a user's password.

    Reads the user first so the edit call carries the fields the CMS
    requires, then edits it. The two calls are not transactional.
    """

    id = "change-password"
    description = "Change the password of a specified user"
    input_model = ChangePasswordInput

    def __init__(self, get_users: GetUsersTool, edit_user: EditUserTool):
        super().__init__(get_users.cms)
        self.get_users = get_users
        self.edit_user = edit_user

    async def run(self, params: ChangePasswordInput) -> SuccessResponse:
        if params.newPassword != params.retypeNewPassword:
            raise XiboToolError("Passwords do not match.")

        logger.info("change_password_started", user_id=params.userId)

        try:
            users = await self.get_users.fetch(GetUsersInput(userId=params.userId))
        except XiboToolError as e:
            raise XiboToolError(
                f"Failed to get user data for ID {params.userId}. Reason: {e.message}",
                error=e.error,
                error_data=e.error_data,
            ) from e

        if not users:
            raise XiboToolError(
                f"User with ID {params.userId} not found in the response data."
            )

        user = users[0]
        edited = await self.edit_user.update(
            EditUserInput(
                userId=user.userId,
                userName=user.userName,
                userTypeId=user.userTypeId,
                homePageId=user.homePageId,
                newUserWizard=0,
                hideNavigation=0,
                newPassword=params.newPassword,
                retypeNewPassword=params.retypeNewPassword,
            )
        )

        logger.info("change_password_complete", user_id=params.userId)
        return SuccessResponse(data=edited)
