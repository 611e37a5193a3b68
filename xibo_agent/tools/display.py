"""Display tools."""

from typing import List

import structlog

from xibo_agent.schemas.common import SuccessResponse
from xibo_agent.schemas.display import Display, GetDisplaysInput
from xibo_agent.tools.base import XiboTool, query_params, validate_response

logger = structlog.get_logger(__name__)


class GetDisplaysTool(XiboTool):
    id = "get-displays"
    description = "Search displays registered with the Xibo CMS"
    input_model = GetDisplaysInput

    async def run(self, params: GetDisplaysInput) -> SuccessResponse:
        raw = await self.cms.get("display", params=query_params(params))
        displays = validate_response(List[Display], raw, "Display list")

        logger.info("get_displays_complete", count=len(displays))
        return SuccessResponse(data=displays)
