"""
Model client for Waypoint.

The orchestration loop talks to the model through the ModelClient
protocol. LiteLLMClient is the default implementation and covers every
provider LiteLLM supports (OpenAI, Anthropic, Ollama, ...).
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, Sequence

import litellm
from litellm import acompletion

from waypoint.providers.exceptions import wrap_error
from waypoint.providers.models import Message, ModelReply, TokenUsage
from waypoint.tools.models import ToolDefinition
from waypoint.tools.parser import ToolCallParser

if TYPE_CHECKING:
    from waypoint.config.schema import ProviderConfig

logger = logging.getLogger(__name__)

# Drop parameters a provider does not support instead of failing
litellm.drop_params = True


def serialize_messages(messages: Sequence[Message]) -> list[dict[str, Any]]:
    """
    Convert a conversation into LiteLLM message dicts.

    Every tool call listed on an assistant message must be answered by a tool
    message. Calls dropped after an approval-gated call in the same batch
    have no answer, so they are left out of the request.
    """
    answered = {msg.tool_call_id for msg in messages if msg.tool_call_id}
    payload = []
    for msg in messages:
        data = msg.to_dict()
        if msg.tool_calls:
            calls = [call for call in data["tool_calls"] if call["id"] in answered]
            if calls:
                data["tool_calls"] = calls
            else:
                del data["tool_calls"]
        payload.append(data)
    return payload


@dataclass
class CompletionOptions:
    """Per-request options passed to the model client."""

    model: str | None = None
    temperature: float = 0.7
    max_tokens: int | None = None
    extra: dict[str, Any] = field(default_factory=dict)


class ModelClient(Protocol):
    """Anything that can complete a conversation with optional tools."""

    async def complete(
        self,
        messages: Sequence[Message],
        tool_definitions: Sequence[ToolDefinition],
        options: CompletionOptions,
    ) -> ModelReply:
        ...


class LiteLLMClient:
    """
    Model client backed by LiteLLM.

    Tool definitions are sent in OpenAI function-calling format; replies are
    normalized into ModelReply with tool calls in emission order.
    """

    def __init__(
        self,
        default_model: str = "openai/gpt-4o-mini",
        aliases: dict[str, str] | None = None,
        api_base: str | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            default_model: Model used when a request names none.
            aliases: Short names mapped to full model identifiers.
            api_base: Optional custom endpoint.
        """
        self.default_model = default_model
        self.aliases = dict(aliases or {})
        self.api_base = api_base

    @classmethod
    def from_config(cls, config: "ProviderConfig") -> "LiteLLMClient":
        """Build from the providers section of the configuration."""
        return cls(
            default_model=config.default,
            aliases=config.aliases,
            api_base=config.api_base,
        )

    def resolve_model(self, model: str | None) -> str:
        """
        Resolve model name from alias or default.

        Args:
            model: Model name, alias, or None for default.

        Returns:
            The fully resolved model identifier.
        """
        if model is None or model == "default":
            return self.default_model

        if model in self.aliases:
            resolved = self.aliases[model]
            logger.debug(f"Resolved alias '{model}' to '{resolved}'")
            return resolved

        return model

    @staticmethod
    def _extract_provider(model: str) -> str:
        if "/" in model:
            return model.split("/")[0]
        return "unknown"

    async def complete(
        self,
        messages: Sequence[Message],
        tool_definitions: Sequence[ToolDefinition],
        options: CompletionOptions,
    ) -> ModelReply:
        """
        Send a completion request.

        Args:
            messages: Full conversation, system prompt first.
            tool_definitions: Tools the model may call (may be empty).
            options: Model and sampling options.

        Returns:
            Normalized reply.

        Raises:
            ProviderError: If the provider call fails.
        """
        model = self.resolve_model(options.model)
        logger.info(f"Completing with model: {model} ({len(tool_definitions)} tools)")

        request_kwargs: dict[str, Any] = {
            "model": model,
            "messages": serialize_messages(messages),
            "temperature": options.temperature,
            **options.extra,
        }
        if options.max_tokens:
            request_kwargs["max_tokens"] = options.max_tokens
        if tool_definitions:
            request_kwargs["tools"] = [definition.to_openai() for definition in tool_definitions]
        if self.api_base:
            request_kwargs["api_base"] = self.api_base

        try:
            response = await acompletion(**request_kwargs)
        except Exception as e:
            logger.warning(f"Completion failed for {model}: {e}")
            raise wrap_error(e, self._extract_provider(model)) from e

        return self._parse_response(response, model)

    @staticmethod
    def _parse_response(response: Any, model: str) -> ModelReply:
        """Parse a LiteLLM response into a ModelReply."""
        choice = response.choices[0]
        message = choice.message

        usage = None
        raw_usage = getattr(response, "usage", None)
        if raw_usage is not None:
            usage = TokenUsage(
                prompt_tokens=getattr(raw_usage, "prompt_tokens", 0) or 0,
                completion_tokens=getattr(raw_usage, "completion_tokens", 0) or 0,
                total_tokens=getattr(raw_usage, "total_tokens", 0) or 0,
            )

        return ModelReply(
            content=message.content or "",
            tool_calls=tuple(ToolCallParser.parse_tool_calls(getattr(message, "tool_calls", None))),
            usage=usage,
            model=getattr(response, "model", None) or model,
            finish_reason=choice.finish_reason,
        )
