"""Error types and error-body helpers for Xibo CMS tools."""

import json
import re
from typing import Any, Dict, List, Optional
from urllib.parse import unquote


class XiboToolError(Exception):
    """Base class for failures reported through the tool result envelope."""

    def __init__(
        self,
        message: str,
        error: Any = None,
        error_data: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.error = error
        self.error_data = error_data


class CMSConfigurationError(XiboToolError):
    """Raised before any network call when the CMS connection is not configured."""


class CMSRequestError(XiboToolError):
    """Raised when the CMS answers with a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_data: Any = None,
    ):
        super().__init__(message, error_data=error_data)
        self.status_code = status_code


class ResponseValidationError(XiboToolError):
    """Raised when a CMS response body does not match the expected model."""

    def __init__(
        self,
        message: str,
        errors: Optional[List[Dict[str, Any]]] = None,
        data: Any = None,
    ):
        super().__init__(message, error=errors, error_data=data)


_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _unquote_message(message: str) -> str:
    """Percent-decode a message, or return it unchanged if any escape is malformed."""
    if _MALFORMED_ESCAPE.search(message):
        return message
    try:
        return unquote(message, errors="strict")
    except UnicodeDecodeError:
        return message


def decode_error_message(body: Any) -> Any:
    """Percent-decode the ``message`` field of a CMS error body.

    Xibo sometimes returns JSON errors whose ``message`` is URL-encoded.
    Strings are returned as strings and dicts as dicts; anything that is
    not a JSON object with a string ``message`` comes back unchanged.
    """
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str):
            return {**body, "message": _unquote_message(message)}
        return body

    if not isinstance(body, str):
        return body

    try:
        parsed = json.loads(body)
    except ValueError:
        return body

    if isinstance(parsed, dict) and isinstance(parsed.get("message"), str):
        parsed["message"] = _unquote_message(parsed["message"])
        return json.dumps(parsed)

    return body


def process_error(error: Any) -> Dict[str, str]:
    """Turn any raised object into a serializable ``{name, message}`` dict."""
    if isinstance(error, BaseException):
        return {
            "name": type(error).__name__,
            "message": str(error),
        }
    return {
        "name": "UnknownError",
        "message": error if isinstance(error, str) else json.dumps(error, default=str),
    }
