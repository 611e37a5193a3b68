"""Command tools: list, add, edit and delete player commands."""

from typing import List

import structlog

from xibo_agent.schemas.command import (
    AddCommandInput,
    Command,
    DeleteCommandInput,
    EditCommandInput,
    GetCommandsInput,
)
from xibo_agent.schemas.common import SuccessResponse
from xibo_agent.tools.base import XiboTool, query_params, validate_response

logger = structlog.get_logger(__name__)


class GetCommandsTool(XiboTool):
    id = "get-commands"
    description = "Search and retrieve commands from the Xibo CMS"
    input_model = GetCommandsInput

    async def run(self, params: GetCommandsInput) -> SuccessResponse:
        raw = await self.cms.get("command", params=query_params(params))
        commands = validate_response(List[Command], raw, "Command list")

        logger.info("get_commands_complete", count=len(commands))
        return SuccessResponse(data=commands)


class AddCommandTool(XiboTool):
    id = "add-command"
    description = "Add a new command to the Xibo CMS"
    input_model = AddCommandInput

    async def run(self, params: AddCommandInput) -> SuccessResponse:
        raw = await self.cms.post("command", data=query_params(params))
        command = validate_response(Command, raw, "Add command")

        logger.info("command_added", command_id=command.commandId, code=command.code)
        return SuccessResponse(data=command)


class EditCommandTool(XiboTool):
    id = "edit-command"
    description = "Edit an existing command in the Xibo CMS"
    input_model = EditCommandInput

    async def run(self, params: EditCommandInput) -> SuccessResponse:
        raw = await self.cms.put(
            f"command/{params.commandId}",
            data=query_params(params, "commandId"),
        )
        command = validate_response(Command, raw, "Edit command")

        logger.info("command_edited", command_id=command.commandId)
        return SuccessResponse(data=command)


class DeleteCommandTool(XiboTool):
    id = "delete-command"
    description = "Delete a command from the Xibo CMS by its ID"
    input_model = DeleteCommandInput

    async def run(self, params: DeleteCommandInput) -> SuccessResponse:
        await self.cms.delete(f"command/{params.commandId}")

        message = f"Command {params.commandId} deleted successfully."
        logger.info("command_deleted", command_id=params.commandId)
        return SuccessResponse(message=message)
