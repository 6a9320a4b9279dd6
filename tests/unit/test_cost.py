"""Tests for session usage and cost accumulation."""

from unittest.mock import patch

import pytest

from waypoint.config.schema import PricingConfig
from waypoint.providers.cost import (
    DEFAULT_PRICE,
    LiteLLMPriceTable,
    SessionAccumulator,
    StaticPriceTable,
)
from waypoint.providers.models import ModelPrice, TokenUsage


@pytest.fixture
def price_table() -> StaticPriceTable:
    return StaticPriceTable(
        {"openai/gpt-4o-mini": ModelPrice.per_million(0.15, 0.60)},
        default=ModelPrice.per_million(1.0, 2.0),
    )


class TestTokenUsage:
    """Tests for TokenUsage."""

    def test_total_derived(self):
        assert TokenUsage(prompt_tokens=10, completion_tokens=5).total_tokens == 15

    def test_addition(self):
        total = TokenUsage(10, 5) + TokenUsage(1, 2)
        assert (total.prompt_tokens, total.completion_tokens, total.total_tokens) == (11, 7, 18)


class TestStaticPriceTable:
    """Tests for StaticPriceTable."""

    def test_known_and_default(self, price_table):
        assert price_table.price_of("openai/gpt-4o-mini").input_per_token == pytest.approx(0.15e-6)
        assert price_table.price_of("mystery").output_per_token == pytest.approx(2.0e-6)

    def test_from_config(self):
        config = PricingConfig.model_validate(
            {"default": {"input": 1, "output": 1}, "models": {"m": {"input": 3, "output": 4}}}
        )

        table = StaticPriceTable.from_config(config)

        assert table.price_of("m") == ModelPrice.per_million(3, 4)
        assert table.price_of("other") == ModelPrice.per_million(1, 1)


class TestLiteLLMPriceTable:
    """Tests for LiteLLMPriceTable."""

    def test_uses_litellm_cost_map(self):
        costs = {"gpt-4o": {"input_cost_per_token": 2.5e-6, "output_cost_per_token": 1e-5}}
        with patch("litellm.model_cost", costs):
            price = LiteLLMPriceTable().price_of("openai/gpt-4o")

        assert price.input_per_token == pytest.approx(2.5e-6)
        assert price.output_per_token == pytest.approx(1e-5)

    def test_falls_back_for_unknown_models(self, price_table):
        with patch("litellm.model_cost", {}):
            price = LiteLLMPriceTable(fallback=price_table).price_of("local/llama")

        assert price == price_table.default


class TestSessionAccumulator:
    """Tests for SessionAccumulator."""

    def test_empty(self):
        stats = SessionAccumulator().stats
        assert stats.total_tokens == 0
        assert stats.total_cost == 0.0
        assert stats.message_count == 0

    def test_record_accumulates(self, price_table):
        acc = SessionAccumulator(price_table)

        cost = acc.record(TokenUsage(1_000_000, 1_000_000), "openai/gpt-4o-mini")
        acc.record(TokenUsage(1_000_000, 0), "mystery")

        assert cost == pytest.approx(0.75)
        stats = acc.stats
        assert stats.prompt_tokens == 2_000_000
        assert stats.completion_tokens == 1_000_000
        assert stats.total_tokens == 3_000_000
        assert stats.total_cost == pytest.approx(1.75)
        assert stats.message_count == 2
        assert acc.models == ["openai/gpt-4o-mini", "mystery"]
        assert acc.get_model_usage("mystery").request_count == 1
        assert acc.last_response.model == "mystery"

    def test_default_price_for_unpriced_models(self):
        acc = SessionAccumulator()

        cost = acc.record(TokenUsage(1000, 1000), "anything")

        assert cost == pytest.approx(2000 * DEFAULT_PRICE.input_per_token)

    def test_stats_snapshot_is_detached(self):
        acc = SessionAccumulator()
        snapshot = acc.stats
        snapshot.total_tokens = 999

        assert acc.stats.total_tokens == 0

    def test_counters_only_grow_until_reset(self):
        acc = SessionAccumulator()
        acc.record(TokenUsage(10, 10), "m")
        before = acc.stats.total_tokens
        acc.record(TokenUsage(0, 0), "m")

        assert acc.stats.total_tokens == before

        acc.reset()
        assert acc.stats.total_tokens == 0
        assert acc.models == []
        assert acc.last_response is None
