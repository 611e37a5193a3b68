"""Pydantic schemas for notification tools."""

from typing import List, Optional

from pydantic import BaseModel, Field

from xibo_agent.schemas.common import XiboModel


class NotificationUserGroup(XiboModel):
    groupId: int
    group: str
    isUserSpecific: Optional[int] = None
    isEveryone: Optional[int] = None
    description: Optional[str] = None


class NotificationDisplayGroup(XiboModel):
    displayGroupId: int
    displayGroup: str
    description: Optional[str] = None
    isDisplaySpecific: Optional[int] = None


class Notification(XiboModel):
    """A CMS notification."""

    notificationId: int
    subject: str
    body: Optional[str] = None
    createDt: Optional[int] = None
    releaseDt: Optional[int] = None
    isEmail: Optional[int] = None
    isInterrupt: Optional[int] = None
    isSystem: Optional[int] = None
    userId: Optional[int] = None
    filename: Optional[str] = None
    originalFileName: Optional[str] = None
    nonusers: Optional[str] = None
    userGroups: Optional[List[NotificationUserGroup]] = None
    displayGroups: Optional[List[NotificationDisplayGroup]] = None


class GetNotificationsInput(BaseModel):
    """Input schema for get-notifications."""

    notificationId: Optional[int] = Field(None, description="Filter by notification ID")
    subject: Optional[str] = Field(None, description="Filter by subject")
    embed: Optional[str] = Field(
        None, description="Embed related data: userGroups,displayGroups"
    )
    treeView: bool = Field(
        False, description="Also return the notifications as a tree view"
    )
