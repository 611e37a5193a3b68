"""Service layer for the Xibo agent toolset."""

from xibo_agent.services.auth import XiboAuthService
from xibo_agent.services.cms import XiboCMSClient
from xibo_agent.services.image_history import GeneratorNotFoundError, ImageHistoryStore

__all__ = [
    "XiboAuthService",
    "XiboCMSClient",
    "GeneratorNotFoundError",
    "ImageHistoryStore",
]
