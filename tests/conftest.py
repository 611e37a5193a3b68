"""Pytest configuration and fixtures."""

import os
from typing import Any, Callable, Dict, List, Tuple, Union

import httpx
import pytest

# Set test environment before importing the package
os.environ["ENV"] = "test"
os.environ["CMS_URL"] = "http://cms.test"
os.environ["XIBO_CLIENT_ID"] = "test-client"
os.environ["XIBO_CLIENT_SECRET"] = "test-secret"
os.environ["LOG_LEVEL"] = "WARNING"

from xibo_agent.config import Settings  # noqa: E402
from xibo_agent.services.cms import XiboCMSClient  # noqa: E402
from xibo_agent.services.image_history import ImageHistoryStore  # noqa: E402

TOKEN_PATH = "/api/authorize/access_token"

Route = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeCMS:
    """In-memory stand-in for the Xibo CMS behind an ``httpx.MockTransport``.

    Routes are keyed by ``(method, path)``. The token endpoint is answered
    automatically; every other request is recorded in ``requests``.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Route] = {}
        self.requests: List[httpx.Request] = []
        self.token_requests = 0

    def add(self, method: str, path: str, route: Route):
        self.routes[(method.upper(), path)] = route

    def json(self, method: str, path: str, body: Any, status_code: int = 200):
        self.add(method, path, httpx.Response(status_code, json=body))

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == TOKEN_PATH:
            self.token_requests += 1
            return httpx.Response(
                200,
                json={"access_token": f"token-{self.token_requests}", "expires_in": 3600},
            )

        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if callable(route):
            return route(request)
        return route

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing at the fake CMS and a temporary generated dir."""
    return Settings(
        env="test",
        cms_url="http://cms.test",
        xibo_client_id="test-client",
        xibo_client_secret="test-secret",
        generated_dir=tmp_path / "generated",
        image_base_url="http://images.test/getImage",
    )


@pytest.fixture
def fake_cms() -> FakeCMS:
    return FakeCMS()


@pytest.fixture
async def cms_client(test_settings: Settings, fake_cms: FakeCMS):
    """CMS client whose HTTP traffic goes to ``fake_cms``."""
    client = XiboCMSClient(test_settings, transport=fake_cms.transport)
    yield client
    await client.close()


@pytest.fixture
def history_store(test_settings: Settings) -> ImageHistoryStore:
    return ImageHistoryStore.from_settings(test_settings)


@pytest.fixture
def sample_command() -> Dict[str, Any]:
    return {
        "commandId": 1,
        "command": "Reboot",
        "code": "reboot",
        "description": "Reboot the player",
        "userId": 1,
        "commandString": None,
        "validationString": None,
    }


@pytest.fixture
def sample_user() -> Dict[str, Any]:
    return {
        "userId": 7,
        "userName": "alice",
        "userTypeId": 3,
        "email": "alice@example.com",
        "homePageId": "icondashboard.view",
        "groups": [
            {"groupId": 11, "group": "Editors"},
            {"groupId": 12, "group": "Schedulers"},
        ],
        "permissions": [
            {
                "permissionId": 100,
                "entityId": 1,
                "groupId": 11,
                "objectId": 42,
                "entity": "Layout",
                "view": 1,
                "edit": 1,
                "delete": 0,
            }
        ],
    }


@pytest.fixture
def sample_layout() -> Dict[str, Any]:
    return {
        "layoutId": 5,
        "ownerId": 1,
        "layout": "Lobby",
        "publishedStatus": "Published",
        "width": 1920,
        "height": 1080,
        "duration": 30,
        "regions": [
            {
                "regionId": 9,
                "layoutId": 5,
                "name": "Main",
                "width": 1920,
                "height": 1080,
                "top": 0,
                "left": 0,
                "zIndex": 1,
                "regionOptions": [],
                "regionPlaylist": {
                    "playlistId": 3,
                    "name": "Main playlist",
                    "isDynamic": 0,
                    "duration": 10,
                    "widgets": [
                        {
                            "widgetId": 21,
                            "playlistId": 3,
                            "type": "video",
                            "duration": 10,
                            "displayOrder": 1,
                            "widgetOptions": [
                                {"option": "config", "value": '{"loop": true}'},
                            ],
                            "mediaIds": [77],
                        }
                    ],
                },
            }
        ],
        "tags": [{"tagId": 2, "tag": "lobby", "value": None}],
    }
