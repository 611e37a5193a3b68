"""Read access to the generated image history."""

import structlog

from xibo_agent.schemas.common import ErrorResponse, SuccessResponse, ToolResult
from xibo_agent.schemas.history import GetImageHistoryInput
from xibo_agent.services.image_history import GeneratorNotFoundError, ImageHistoryStore
from xibo_agent.tools.base import XiboTool

logger = structlog.get_logger(__name__)


class GetImageHistoryTool(XiboTool):
    id = "get-image-history"
    description = "Return the history of generated images, for one generator or all of them"
    input_model = GetImageHistoryInput

    def __init__(self, store: ImageHistoryStore):
        super().__init__()
        self.store = store

    async def run(self, params: GetImageHistoryInput) -> ToolResult:
        if params.generatorId is None:
            history = self.store.get_all_history()
        else:
            try:
                history = {params.generatorId: self.store.get_history(params.generatorId)}
            except GeneratorNotFoundError as e:
                logger.warning("image_history_not_found", generator_id=params.generatorId)
                return ErrorResponse(message=str(e))

        return SuccessResponse(data={"history": history})
