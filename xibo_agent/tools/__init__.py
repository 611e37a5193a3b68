"""Agent-callable Xibo CMS tools."""

from typing import Dict, List, Optional

from xibo_agent.services.cms import XiboCMSClient
from xibo_agent.services.image_history import ImageHistoryStore
from xibo_agent.tools.base import XiboTool
from xibo_agent.tools.command import (
    AddCommandTool,
    DeleteCommandTool,
    EditCommandTool,
    GetCommandsTool,
)
from xibo_agent.tools.display import GetDisplaysTool
from xibo_agent.tools.folder import AddFolderTool, GetFoldersTool
from xibo_agent.tools.history import GetImageHistoryTool
from xibo_agent.tools.layout import GetLayoutsTool, PublishLayoutTool
from xibo_agent.tools.notification import GetNotificationsTool
from xibo_agent.tools.user import (
    ChangePasswordTool,
    EditUserTool,
    GetUserMeTool,
    GetUsersTool,
)


def build_tools(
    cms: XiboCMSClient,
    history_store: Optional[ImageHistoryStore] = None,
) -> Dict[str, XiboTool]:
    """Instantiate every tool against one CMS client, keyed by tool id."""
    get_users = GetUsersTool(cms)
    edit_user = EditUserTool(cms)

    tools: List[XiboTool] = [
        GetCommandsTool(cms),
        AddCommandTool(cms),
        EditCommandTool(cms),
        DeleteCommandTool(cms),
        get_users,
        GetUserMeTool(cms),
        edit_user,
        ChangePasswordTool(get_users, edit_user),
        GetLayoutsTool(cms),
        PublishLayoutTool(cms),
        GetFoldersTool(cms),
        AddFolderTool(cms),
        GetDisplaysTool(cms),
        GetNotificationsTool(cms),
    ]
    if history_store is not None:
        tools.append(GetImageHistoryTool(history_store))

    return {tool.id: tool for tool in tools}


__all__ = ["XiboTool", "build_tools"]
