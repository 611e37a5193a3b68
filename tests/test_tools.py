"""Tests for the Xibo tools and their result envelopes."""

import base64
from urllib.parse import parse_qs

import httpx
import pytest

from xibo_agent.config import Settings
from xibo_agent.core.errors import XiboToolError
from xibo_agent.schemas.user import ChangePasswordInput
from xibo_agent.services.cms import XiboCMSClient
from xibo_agent.tools import build_tools
from xibo_agent.tools.command import (
    AddCommandTool,
    DeleteCommandTool,
    EditCommandTool,
    GetCommandsTool,
)
from xibo_agent.tools.display import GetDisplaysTool
from xibo_agent.tools.folder import AddFolderTool, GetFoldersTool, build_folder_tree
from xibo_agent.tools.layout import GetLayoutsTool, PublishLayoutTool, build_layout_tree
from xibo_agent.tools.notification import GetNotificationsTool
from xibo_agent.tools.user import (
    ChangePasswordTool,
    EditUserTool,
    GetUserMeTool,
    GetUsersTool,
)


def form(request: httpx.Request) -> dict:
    return {key: values[0] for key, values in parse_qs(request.content.decode()).items()}


class TestToolContract:
    """Failures are returned as envelopes, never raised."""

    async def test_not_found(self, cms_client, fake_cms):
        """A 404 becomes a failure with the status in the message."""
        fake_cms.json("GET", "/api/command", {"message": "Not Found"}, status_code=404)

        result = await GetCommandsTool(cms_client).execute({})

        assert result["success"] is False
        assert "404" in result["message"]
        assert result["errorData"] == {"message": "Not Found"}

    async def test_response_missing_required_field(self, cms_client, fake_cms, sample_command):
        """A payload missing a required number fails validation."""
        del sample_command["commandId"]
        fake_cms.json("GET", "/api/command", [sample_command])

        result = await GetCommandsTool(cms_client).execute()

        assert result["success"] is False
        assert "validation failed" in result["message"]
        assert result["error"][0]["loc"] == [0, "commandId"]
        assert result["errorData"] == [sample_command]

    async def test_invalid_input(self, cms_client, fake_cms):
        """Bad arguments are reported without calling the CMS."""
        result = await DeleteCommandTool(cms_client).execute({"commandId": "abc"})

        assert result["success"] is False
        assert result["message"] == "Invalid input for delete-command"
        assert result["error"][0]["loc"] == ["commandId"]
        assert fake_cms.requests == []

    async def test_missing_cms_url(self, fake_cms):
        client = XiboCMSClient(Settings(cms_url=""), transport=fake_cms.transport)

        result = await GetDisplaysTool(client).execute({})

        assert result == {"success": False, "message": "CMS URL is not configured"}

    async def test_unexpected_error(self, cms_client, fake_cms):
        """Transport failures are normalized into name and message."""

        def boom(request):
            raise httpx.ConnectError("connection refused")

        fake_cms.add("GET", "/api/display", boom)

        result = await GetDisplaysTool(cms_client).execute({})

        assert result["success"] is False
        assert result["message"] == "Unexpected error occurred in get-displays"
        assert result["error"]["name"] == "ConnectError"

    def test_definition(self, test_settings):
        definition = GetCommandsTool(XiboCMSClient(test_settings)).definition()
        assert definition["name"] == "get-commands"
        assert "commandId" in definition["inputSchema"]["properties"]

    def test_build_tools(self, test_settings, history_store):
        tools = build_tools(XiboCMSClient(test_settings), history_store)
        assert set(tools) == {
            "get-commands",
            "add-command",
            "edit-command",
            "delete-command",
            "get-users",
            "get-user-me",
            "edit-user",
            "change-password",
            "get-layouts",
            "publish-layout",
            "get-folders",
            "add-folder",
            "get-displays",
            "get-notifications",
            "get-image-history",
        }


class TestCommandTools:
    """Tests for command tools."""

    async def test_get_commands(self, cms_client, fake_cms, sample_command):
        fake_cms.json("GET", "/api/command", [sample_command])

        result = await GetCommandsTool(cms_client).execute({"code": "reboot"})

        assert result["success"] is True
        assert result["data"][0]["command"] == "Reboot"
        assert fake_cms.requests[0].url.params["code"] == "reboot"

    async def test_add_command(self, cms_client, fake_cms, sample_command):
        fake_cms.json("POST", "/api/command", sample_command, status_code=201)

        result = await AddCommandTool(cms_client).execute({"command": "Reboot", "code": "reboot"})

        assert result["success"] is True
        assert form(fake_cms.requests[0]) == {"command": "Reboot", "code": "reboot"}

    async def test_edit_command(self, cms_client, fake_cms, sample_command):
        fake_cms.json("PUT", "/api/command/1", sample_command)

        result = await EditCommandTool(cms_client).execute(
            {"commandId": 1, "command": "Reboot", "description": "new"}
        )

        assert result["success"] is True
        assert form(fake_cms.requests[0]) == {"command": "Reboot", "description": "new"}

    async def test_delete_command(self, cms_client, fake_cms):
        fake_cms.add("DELETE", "/api/command/4", httpx.Response(204))

        result = await DeleteCommandTool(cms_client).execute({"commandId": 4})

        assert result == {"success": True, "message": "Command 4 deleted successfully."}


class TestUserTools:
    """Tests for user tools."""

    async def test_get_users_tree(self, cms_client, fake_cms, sample_user):
        fake_cms.json("GET", "/api/user", [sample_user])

        result = await GetUsersTool(cms_client).execute({"treeView": True})

        assert result["success"] is True
        assert [n["path"] for n in result["tree"]] == [
            "alice",
            "alice > Groups",
            "alice > Groups > Editors",
            "alice > Groups > Schedulers",
        ]
        assert "👤 alice" in result["treeViewText"]
        assert "treeView" not in fake_cms.requests[0].url.params

    async def test_get_users_without_tree(self, cms_client, fake_cms, sample_user):
        fake_cms.json("GET", "/api/user", [sample_user])

        result = await GetUsersTool(cms_client).execute({})

        assert "tree" not in result
        assert "treeViewText" not in result

    async def test_get_user_me_tree(self, cms_client, fake_cms, sample_user):
        fake_cms.json("GET", "/api/user/me", sample_user)

        result = await GetUserMeTool(cms_client).execute({"treeView": True})

        names = [n["name"] for n in result["tree"] if n["depth"] == 1]
        assert names == ["Groups", "Permissions"]
        assert result["tree"][-1]["name"] == "Layout (ID: 42)"
        assert result["data"]["userName"] == "alice"

    async def test_edit_user_password_mismatch(self, cms_client, fake_cms):
        result = await EditUserTool(cms_client).execute(
            {"userId": 7, "newPassword": "a", "retypeNewPassword": "b"}
        )

        assert result == {"success": False, "message": "Passwords do not match."}
        assert fake_cms.requests == []

    async def test_edit_user_encodes_passwords(self, cms_client, fake_cms, sample_user):
        fake_cms.json("PUT", "/api/user/7", sample_user)

        result = await EditUserTool(cms_client).execute(
            {"userId": 7, "newPassword": "s3cret", "retypeNewPassword": "s3cret"}
        )

        assert result["success"] is True
        sent = form(fake_cms.requests[0])
        assert base64.b64decode(sent["newPassword"]) == b"s3cret"
        assert sent["newPassword"] == sent["retypeNewPassword"]
        assert "userId" not in sent


class TestChangePasswordTool:
    """Tests for the get-then-edit password change."""

    @pytest.fixture
    def tool(self, cms_client):
        return ChangePasswordTool(GetUsersTool(cms_client), EditUserTool(cms_client))

    async def test_mismatch_makes_no_calls(self, tool, fake_cms):
        result = await tool.execute({"userId": 7, "newPassword": "a", "retypeNewPassword": "b"})

        assert result == {"success": False, "message": "Passwords do not match."}
        assert fake_cms.requests == []

    async def test_mismatch_raised_from_run(self, tool):
        """Mismatches are reported through the execute boundary like other failures."""
        params = ChangePasswordInput(userId=7, newPassword="a", retypeNewPassword="b")

        with pytest.raises(XiboToolError, match="Passwords do not match."):
            await tool.run(params)

    async def test_changes_password(self, tool, fake_cms, sample_user):
        fake_cms.json("GET", "/api/user", [sample_user])
        fake_cms.json("PUT", "/api/user/7", sample_user)

        result = await tool.execute({"userId": 7, "newPassword": "pw", "retypeNewPassword": "pw"})

        assert result["success"] is True
        get_request, put_request = fake_cms.requests
        assert get_request.url.params["userId"] == "7"
        sent = form(put_request)
        assert sent["userName"] == "alice"
        assert sent["userTypeId"] == "3"
        assert sent["homePageId"] == "icondashboard.view"
        assert sent["newUserWizard"] == "0"
        assert sent["hideNavigation"] == "0"

    async def test_user_not_found(self, tool, fake_cms):
        fake_cms.json("GET", "/api/user", [])

        result = await tool.execute({"userId": 99, "newPassword": "pw", "retypeNewPassword": "pw"})

        assert result["success"] is False
        assert "99" in result["message"]
        assert len(fake_cms.requests) == 1

    async def test_lookup_failure(self, tool, fake_cms):
        fake_cms.json("GET", "/api/user", {"message": "Forbidden"}, status_code=403)

        result = await tool.execute({"userId": 7, "newPassword": "pw", "retypeNewPassword": "pw"})

        assert result["success"] is False
        assert result["message"].startswith("Failed to get user data for ID 7. Reason:")
        assert "403" in result["message"]


class TestLayoutTools:
    """Tests for layout tools and the layout tree."""

    async def test_get_layouts_tree(self, cms_client, fake_cms, sample_layout):
        fake_cms.json("GET", "/api/layout", [sample_layout])

        result = await GetLayoutsTool(cms_client).execute(
            {"embed": "regions,playlists,widgets", "treeView": True}
        )

        assert result["success"] is True
        widget = next(n for n in result["tree"] if n["type"] == "widget")
        assert widget["name"] == "video (21)"
        assert widget["duration"] == 10
        assert widget["path"] == "Lobby > Regions > Main > Main playlist > Widgets > video (21)"
        assert "📄 Layout: Lobby" in result["treeViewText"]
        assert fake_cms.requests[0].url.params["embed"] == "regions,playlists,widgets"

    async def test_widget_option_json_parsed(self, cms_client, fake_cms, sample_layout):
        fake_cms.json("GET", "/api/layout", [sample_layout])

        result = await GetLayoutsTool(cms_client).execute({})

        widget = result["data"][0]["regions"][0]["regionPlaylist"]["widgets"][0]
        assert widget["widgetOptions"][0]["value"] == {"loop": True}

    def test_layout_tree_without_regions(self, sample_layout):
        """Missing collections produce no child nodes."""
        from xibo_agent.schemas.layout import Layout

        del sample_layout["regions"]
        sample_layout["tags"] = None
        tree = build_layout_tree([Layout.model_validate(sample_layout)])

        assert [child.name for child in tree[0].children] == ["Information", "Properties"]

    def test_layout_tree_non_list(self):
        assert build_layout_tree({"layoutId": 1}) == []

    async def test_null_collections_treated_as_empty(self, cms_client, fake_cms, sample_layout):
        """Null nested lists from the CMS produce no child nodes and no error."""
        region = sample_layout["regions"][0]
        region["regionOptions"] = None
        region["permissions"] = None
        widget = region["regionPlaylist"]["widgets"][0]
        widget["widgetOptions"] = None
        widget["mediaIds"] = None
        region["regionPlaylist"]["tags"] = None
        fake_cms.json("GET", "/api/layout", [sample_layout])

        result = await GetLayoutsTool(cms_client).execute({"treeView": True})

        assert result["success"] is True
        types = {n["type"] for n in result["tree"]}
        assert "region-options" not in types
        assert "widget-options" not in types
        assert "media" not in types
        assert "widget" in types

    async def test_null_widget_list(self, cms_client, fake_cms, sample_layout):
        sample_layout["regions"][0]["regionPlaylist"]["widgets"] = None
        fake_cms.json("GET", "/api/layout", [sample_layout])

        result = await GetLayoutsTool(cms_client).execute({"treeView": True})

        assert result["success"] is True
        assert not any(n["type"] == "widgets" for n in result["tree"])

    def test_derived_ids_may_repeat_but_paths_differ(self, sample_layout):
        """Region 2 and widget 2 both own a properties node with id 20."""
        from xibo_agent.core.tree_view import flatten_tree
        from xibo_agent.schemas.layout import Layout

        region = sample_layout["regions"][0]
        region["regionId"] = 2
        region["regionPlaylist"]["widgets"][0]["widgetId"] = 2
        flat = flatten_tree(build_layout_tree([Layout.model_validate(sample_layout)]))

        props = [n for n in flat if n.id == 20]
        assert len(props) == 2
        assert len({n.path for n in props}) == 2

    async def test_publish_layout(self, cms_client, fake_cms):
        fake_cms.add("PUT", "/api/layout/publish/5", httpx.Response(204))

        result = await PublishLayoutTool(cms_client).execute({"layoutId": 5, "publishNow": 1})

        assert result == {"success": True, "message": "Layout 5 published."}
        assert form(fake_cms.requests[0]) == {"publishNow": "1"}


class TestFolderTools:
    """Tests for folder tools."""

    @pytest.fixture
    def folders(self):
        return [
            {
                "id": 1,
                "type": "root",
                "text": "Root",
                "parentId": None,
                "isRoot": 1,
                "children": [{"id": 2, "text": "Media", "parentId": 1, "isRoot": 0}],
            }
        ]

    async def test_get_folders_tree(self, cms_client, fake_cms, folders):
        fake_cms.json("GET", "/api/folders", folders)

        result = await GetFoldersTool(cms_client).execute({"treeView": True})

        assert result["success"] is True
        assert result["tree"][0]["name"] == "Root"
        media = next(n for n in result["tree"] if n["name"] == "Media")
        assert media["depth"] == 1
        assert media["isLast"] is True
        assert "📁 Media" in result["treeViewText"]

    def test_folder_details_before_children(self):
        from xibo_agent.schemas.folder import Folder

        tree = build_folder_tree([Folder(id=1, text="Root", children=[Folder(id=2, text="Sub")])])
        names = [child.name for child in tree[0].children]
        assert names == ["ID: 1", "Type: N/A", "Parent ID: N/A", "isRoot: N/A", "Sub"]

    async def test_add_folder(self, cms_client, fake_cms):
        fake_cms.json("POST", "/api/folders", {"id": 3, "text": "Promo", "parentId": 1})

        result = await AddFolderTool(cms_client).execute({"text": "Promo", "parentId": 1})

        assert result["success"] is True
        assert result["data"]["id"] == 3
        assert form(fake_cms.requests[0]) == {"text": "Promo", "parentId": "1"}


class TestNotificationTools:
    """Tests for notification tools."""

    async def test_get_notifications_tree(self, cms_client, fake_cms):
        fake_cms.json(
            "GET",
            "/api/notification",
            [
                {
                    "notificationId": 4,
                    "subject": "Maintenance",
                    "userGroups": [{"groupId": 1, "group": "Admins"}],
                    "displayGroups": [{"displayGroupId": 8, "displayGroup": "Lobby screens"}],
                }
            ],
        )

        result = await GetNotificationsTool(cms_client).execute({"treeView": True})

        assert [n["path"] for n in result["tree"]] == [
            "Maintenance",
            "Maintenance > User Groups",
            "Maintenance > User Groups > Admins",
            "Maintenance > Display Groups",
            "Maintenance > Display Groups > Lobby screens",
        ]
