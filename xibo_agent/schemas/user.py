"""Pydantic schemas for user tools."""

from typing import List, Optional, Union

from pydantic import BaseModel, Field

from xibo_agent.schemas.common import Permission, XiboModel


class UserGroup(XiboModel):
    """A user group membership."""

    groupId: int
    group: str
    isUserGroup: Optional[int] = None
    isEveryone: Optional[int] = None
    libraryQuota: Optional[int] = None
    description: Optional[str] = None


class User(XiboModel):
    """A CMS user."""

    userId: int
    userName: str
    userTypeId: int
    userType: Optional[str] = None
    groupId: Optional[int] = None
    group: Optional[str] = None
    loggedIn: Optional[int] = None
    lastAccessed: Optional[str] = None
    email: Optional[str] = None
    homePageId: Optional[Union[int, str]] = None
    homePage: Optional[str] = None
    homeFolderId: Optional[int] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    phone: Optional[str] = None
    ref1: Optional[str] = None
    ref2: Optional[str] = None
    ref3: Optional[str] = None
    ref4: Optional[str] = None
    ref5: Optional[str] = None
    libraryQuota: Optional[int] = None
    retired: Optional[int] = None
    isPasswordChangeRequired: Optional[int] = None
    permissions: Optional[List[Permission]] = None
    groups: Optional[List[UserGroup]] = None


class GetUsersInput(BaseModel):
    """Input schema for get-users."""

    userId: Optional[int] = Field(None, description="Filter by user ID")
    userName: Optional[str] = Field(None, description="Filter by user name")
    userTypeId: Optional[int] = Field(None, description="Filter by user type ID")
    retired: Optional[int] = Field(None, ge=0, le=1, description="Filter by retired flag")
    treeView: bool = Field(False, description="Also return the users as a tree view")


class GetUserMeInput(BaseModel):
    """Input schema for get-user-me."""

    embed: Optional[str] = Field(
        None, description='Embed related data, e.g. "permissions,groups"'
    )
    treeView: bool = Field(False, description="Also return the user as a tree view")


class EditUserInput(BaseModel):
    """Input schema for edit-user."""

    userId: int = Field(..., description="The ID of the user to edit")
    userName: Optional[str] = None
    userTypeId: Optional[int] = None
    homePageId: Optional[Union[int, str]] = Field(
        None, description="The homepage to use for this user"
    )
    newUserWizard: Optional[int] = Field(None, ge=0, le=1)
    hideNavigation: Optional[int] = Field(None, ge=0, le=1)
    email: Optional[str] = None
    libraryQuota: Optional[int] = Field(None, description="Library quota in kilobytes")
    newPassword: Optional[str] = Field(
        None, description="New password, must be repeated in retypeNewPassword"
    )
    retypeNewPassword: Optional[str] = None
    retired: Optional[int] = Field(None, ge=0, le=1)
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    phone: Optional[str] = None
    ref1: Optional[str] = None
    ref2: Optional[str] = None
    ref3: Optional[str] = None
    ref4: Optional[str] = None
    ref5: Optional[str] = None
    isPasswordChangeRequired: Optional[int] = Field(None, ge=0, le=1)


class ChangePasswordInput(BaseModel):
    """Input schema for change-password."""

    userId: int = Field(..., description="The ID of the user whose password changes")
    newPassword: str = Field(..., min_length=1, description="The new password")
    retypeNewPassword: str = Field(..., min_length=1, description="The new password again")

