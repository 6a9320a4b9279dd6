"""Parser for tool calls and tool arguments issued by the model."""

import json
import logging
from typing import Any

from waypoint.tools.models import ToolCallRequest

logger = logging.getLogger(__name__)


def _field(obj: Any, name: str, default: Any = None) -> Any:
    """Read a field from either a dict or an attribute-style object."""
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


class ToolCallParser:
    """Parses tool calls from model replies in OpenAI function-calling format.

    LiteLLM normalizes every provider to this shape:
    {
        "id": "call_123",
        "type": "function",
        "function": {"name": "read_file", "arguments": "{\"path\": \"a.txt\"}"}
    }
    Both dicts and LiteLLM response objects are accepted.
    """

    @staticmethod
    def parse_tool_calls(raw_calls: Any) -> list[ToolCallRequest]:
        """Parse raw tool calls into requests, preserving their order.

        Args:
            raw_calls: List of tool calls from the provider, or None

        Returns:
            List of ToolCallRequest objects (invalid entries are skipped)
        """
        requests: list[ToolCallRequest] = []
        if not raw_calls:
            return requests

        for raw in raw_calls:
            function = _field(raw, "function")
            call_id = _field(raw, "id")
            name = _field(function, "name") if function is not None else None

            if not call_id or not name:
                logger.warning(f"Invalid tool call in model reply: {raw}")
                continue

            arguments = _field(function, "arguments")
            if arguments is None:
                arguments = "{}"
            elif not isinstance(arguments, str):
                # Some providers hand back already-decoded arguments
                arguments = json.dumps(arguments)

            requests.append(
                ToolCallRequest(id=str(call_id), tool_name=str(name), raw_arguments=arguments)
            )

        return requests

    @staticmethod
    def parse_arguments(raw_arguments: str | None) -> dict[str, Any]:
        """Parse serialized arguments as a flat string-keyed map.

        Malformed JSON and non-object payloads yield an empty map; the tool
        itself reports any missing required field.

        Args:
            raw_arguments: JSON text from the model

        Returns:
            Argument map (possibly empty)
        """
        if not raw_arguments or not raw_arguments.strip():
            return {}

        try:
            parsed = json.loads(raw_arguments)
        except json.JSONDecodeError:
            logger.warning(f"Malformed tool arguments, treating as empty: {raw_arguments[:200]}")
            return {}

        if not isinstance(parsed, dict):
            logger.warning(f"Tool arguments are not an object, treating as empty: {type(parsed)}")
            return {}

        return {str(key): value for key, value in parsed.items()}
