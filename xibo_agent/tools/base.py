"""Base class and helpers shared by every Xibo tool.

A tool validates its arguments, runs against the CMS and always answers with
a result envelope. ``XiboTool.execute`` is the only place where exceptions are
turned into failure envelopes; ``run`` implementations simply raise.
"""

import json
from functools import lru_cache
from typing import Any, Dict, List, Optional, Type, TypeVar

import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError

from xibo_agent.core.errors import (
    ResponseValidationError,
    XiboToolError,
    process_error,
)
from xibo_agent.schemas.common import Envelope, ErrorResponse
from xibo_agent.services.cms import XiboCMSClient

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def validation_diagnostics(error: ValidationError) -> List[Dict[str, Any]]:
    """JSON-safe list of pydantic validation errors."""
    return json.loads(error.json(include_url=False))


@lru_cache(maxsize=None)
def _adapter(model_type: Any) -> TypeAdapter:
    return TypeAdapter(model_type)


def validate_response(model_type: Type[T], data: Any, label: str) -> T:
    """Validate a CMS response body.

    Raises:
        ResponseValidationError: If ``data`` does not match ``model_type``
    """
    try:
        return _adapter(model_type).validate_python(data)
    except ValidationError as e:
        raise ResponseValidationError(
            f"{label} response validation failed",
            errors=validation_diagnostics(e),
            data=data,
        )


def query_params(params: BaseModel, *exclude: str) -> Dict[str, Any]:
    """Provided input fields as query/form values, minus tool-only flags."""
    return params.model_dump(exclude_none=True, exclude=set(exclude) | {"treeView"})


class XiboTool:
    """A single agent-callable operation against the Xibo CMS."""

    id: str = ""
    description: str = ""
    input_model: Type[BaseModel] = BaseModel

    def __init__(self, cms: Optional[XiboCMSClient] = None):
        self.cms = cms

    @property
    def input_schema(self) -> Dict[str, Any]:
        return self.input_model.model_json_schema()

    def definition(self) -> Dict[str, Any]:
        """Tool description in MCP format."""
        return {
            "name": self.id,
            "description": self.description,
            "inputSchema": self.input_schema,
        }

    async def run(self, params: BaseModel) -> Envelope:
        raise NotImplementedError

    async def execute(self, arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Validate arguments, run the tool and return the result envelope as a dict.

        Never raises: every failure becomes ``{"success": False, ...}``.
        """
        try:
            params = self.input_model.model_validate(arguments or {})
        except ValidationError as e:
            logger.warning("tool_input_invalid", tool=self.id, error=str(e))
            return ErrorResponse(
                message=f"Invalid input for {self.id}",
                error=validation_diagnostics(e),
            ).to_dict()

        try:
            result = await self.run(params)
        except XiboToolError as e:
            logger.error("tool_failed", tool=self.id, error=e.message)
            return ErrorResponse(
                message=e.message,
                error=e.error,
                error_data=e.error_data,
            ).to_dict()
        except Exception as e:
            logger.error("tool_unexpected_error", tool=self.id, error=str(e))
            return ErrorResponse(
                message=f"Unexpected error occurred in {self.id}",
                error=process_error(e),
            ).to_dict()

        return result.to_dict()
