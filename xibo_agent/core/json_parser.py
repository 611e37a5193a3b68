"""Recursive parsing of JSON embedded in string fields."""

import json
import re
from typing import Any

_FENCED_JSON = re.compile(r"```(?:json)?\n([\s\S]*?)\n```")


def parse_json_strings(obj: Any) -> Any:
    """Return ``obj`` with every JSON-looking string replaced by its parsed value.

    Lists and dicts are walked recursively. A string is parsed when, after
    stripping an optional markdown code fence, it starts with ``[`` or ``{``.
    Strings that fail to parse are kept as they are.
    """
    if isinstance(obj, list):
        return [parse_json_strings(item) for item in obj]

    if isinstance(obj, dict):
        return {key: parse_json_strings(value) for key, value in obj.items()}

    if isinstance(obj, str):
        candidate = obj.strip()
        match = _FENCED_JSON.search(candidate)
        if match:
            candidate = match.group(1).strip()

        if candidate.startswith(("[", "{")):
            try:
                return parse_json_strings(json.loads(candidate))
            except ValueError:
                return obj

    return obj
