"""Pydantic schemas for command tools."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

from xibo_agent.schemas.common import XiboModel


class Command(XiboModel):
    """A command as returned by GET /command."""

    commandId: int = Field(..., description="The unique identifier for the command")
    command: str = Field(..., description="The name of the command")
    code: str = Field(..., description="Code used to reference the command")
    description: Optional[str] = None
    userId: int = Field(..., description="The ID of the user who created the command")
    commandString: Optional[str] = None
    validationString: Optional[str] = None
    displayProfileId: Optional[int] = None
    commandStringDisplayProfile: Optional[str] = None
    validationStringDisplayProfile: Optional[str] = None
    availableOn: Optional[str] = None
    createAlertOn: Optional[str] = None
    createAlertOnDisplayProfile: Optional[str] = None
    groupsWithPermissions: Optional[str] = None


class GetCommandsInput(BaseModel):
    """Input schema for get-commands."""

    commandId: Optional[int] = Field(None, description="Filter by command ID")
    command: Optional[str] = Field(None, description="Filter by command name")
    code: Optional[str] = Field(None, description="Filter by command code")
    useRegexForName: Optional[int] = Field(
        None, ge=0, le=1, description="Use regex for the name filter (0 or 1)"
    )
    useRegexForCode: Optional[int] = Field(
        None, ge=0, le=1, description="Use regex for the code filter (0 or 1)"
    )
    logicalOperatorName: Optional[Literal["AND", "OR"]] = Field(
        None, description="Logical operator for multiple name terms"
    )
    logicalOperatorCode: Optional[Literal["AND", "OR"]] = Field(
        None, description="Logical operator for multiple code terms"
    )


class AddCommandInput(BaseModel):
    """Input schema for add-command."""

    command: str = Field(..., min_length=1, description="The command name")
    code: str = Field(..., min_length=1, description="A unique code for this command")
    description: Optional[str] = Field(None, description="Description of the command")
    commandString: Optional[str] = Field(None, description="Command string sent to players")
    validationString: Optional[str] = Field(
        None, description="Regular expression validating the command output"
    )
    availableOn: Optional[str] = Field(
        None, description="Comma separated player types this command is available on"
    )
    createAlertOn: Optional[Literal["success", "failure", "always", "never"]] = Field(
        None, description="When to create an alert for this command"
    )


class EditCommandInput(BaseModel):
    """Input schema for edit-command."""

    commandId: int = Field(..., description="The ID of the command to edit")
    command: str = Field(..., min_length=1, description="The command name")
    description: Optional[str] = None
    commandString: Optional[str] = None
    validationString: Optional[str] = None
    availableOn: Optional[str] = None
    createAlertOn: Optional[Literal["success", "failure", "always", "never"]] = None


class DeleteCommandInput(BaseModel):
    """Input schema for delete-command."""

    commandId: int = Field(..., description="The ID of the command to delete")
