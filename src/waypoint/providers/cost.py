"""
Cost tracking for Waypoint.

Accumulates token usage and derived cost across every run of a logical
session. Prices come from an injected price table.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from waypoint.providers.models import ModelPrice, ModelUsage, SessionStats, TokenUsage

if TYPE_CHECKING:
    from waypoint.config.schema import PricingConfig

logger = logging.getLogger(__name__)

# Applied to models missing from every table, per million tokens
DEFAULT_PRICE = ModelPrice.per_million(0.10, 0.10)


class PriceTable(Protocol):
    """Lookup of per-token prices by model name."""

    def price_of(self, model: str) -> ModelPrice:
        ...


class StaticPriceTable:
    """Price table backed by a fixed mapping of per-million prices."""

    def __init__(
        self,
        prices: dict[str, ModelPrice] | None = None,
        default: ModelPrice = DEFAULT_PRICE,
    ) -> None:
        """
        Initialize the table.

        Args:
            prices: Per-token prices keyed by model name.
            default: Price used for models not in the table.
        """
        self._prices = dict(prices or {})
        self.default = default

    @classmethod
    def from_config(cls, config: "PricingConfig") -> "StaticPriceTable":
        """Build from the pricing section of the configuration."""
        prices = {
            model: ModelPrice.per_million(entry.input, entry.output)
            for model, entry in config.models.items()
        }
        default = ModelPrice.per_million(config.default.input, config.default.output)
        return cls(prices, default)

    def price_of(self, model: str) -> ModelPrice:
        return self._prices.get(model, self.default)


class LiteLLMPriceTable:
    """Price table backed by LiteLLM's bundled model cost map."""

    def __init__(self, fallback: PriceTable | None = None) -> None:
        self.fallback = fallback or StaticPriceTable()

    def price_of(self, model: str) -> ModelPrice:
        try:
            import litellm

            entry = litellm.model_cost.get(model)
            if entry is None and "/" in model:
                entry = litellm.model_cost.get(model.split("/", 1)[1])
            if entry:
                return ModelPrice(
                    input_per_token=float(entry.get("input_cost_per_token") or 0.0),
                    output_per_token=float(entry.get("output_cost_per_token") or 0.0),
                )
        except Exception as e:
            logger.warning(f"Could not read LiteLLM pricing for {model}: {e}")

        return self.fallback.price_of(model)


@dataclass(frozen=True)
class ResponseUsage:
    """Usage and cost of the most recent completion."""

    model: str
    usage: TokenUsage
    cost: float


class SessionAccumulator:
    """
    Tracks token usage and costs for a session.

    Counters only ever add; reset() is the single way to clear them.
    """

    def __init__(self, price_table: PriceTable | None = None) -> None:
        """Initialize the accumulator."""
        self.price_table = price_table or StaticPriceTable()
        self._stats = SessionStats()
        self._by_model: dict[str, ModelUsage] = {}
        self._last: ResponseUsage | None = None

    def calculate_cost(self, usage: TokenUsage, model: str) -> float:
        """Cost in USD of one completion."""
        price = self.price_table.price_of(model)
        return (
            usage.prompt_tokens * price.input_per_token
            + usage.completion_tokens * price.output_per_token
        )

    def record(self, usage: TokenUsage, model: str) -> float:
        """
        Record actual usage after a completion.

        Args:
            usage: Token usage reported by the model client.
            model: The model that produced it.

        Returns:
            The cost added to the session.
        """
        cost = self.calculate_cost(usage, model)

        self._stats.prompt_tokens += usage.prompt_tokens
        self._stats.completion_tokens += usage.completion_tokens
        self._stats.total_tokens += usage.prompt_tokens + usage.completion_tokens
        self._stats.total_cost += cost
        self._stats.message_count += 1

        if model not in self._by_model:
            self._by_model[model] = ModelUsage(model=model)
        self._by_model[model].add(usage, cost)
        self._last = ResponseUsage(model=model, usage=usage, cost=cost)

        logger.debug(
            f"Recorded usage for {model}: "
            f"{usage.prompt_tokens} in, {usage.completion_tokens} out, ${cost:.6f}"
        )
        return cost

    @property
    def stats(self) -> SessionStats:
        """Snapshot of the cumulative statistics."""
        return self._stats.copy()

    @property
    def last_response(self) -> ResponseUsage | None:
        """Usage of the most recent completion, if any."""
        return self._last

    def get_model_usage(self, model: str) -> ModelUsage | None:
        """Usage for a specific model, or None if it was not used."""
        usage = self._by_model.get(model)
        return ModelUsage(**vars(usage)) if usage else None

    @property
    def models(self) -> list[str]:
        """Models used in this session, in first-use order."""
        return list(self._by_model)

    def reset(self) -> None:
        """Reset session tracking. Only called on explicit user request."""
        self._stats = SessionStats()
        self._by_model.clear()
        self._last = None
        logger.info("Session statistics reset")
