"""Web search tool backed by the Brave Search API."""

import logging
from typing import Any, Optional

import httpx

from waypoint.tools.base import Tool, ToolExecutionError
from waypoint.tools.models import ToolParameter

logger = logging.getLogger(__name__)

BRAVE_SEARCH_URL = "https://api.search.brave.com/res/v1/web/search"

DEFAULT_COUNT = 5
HARD_MAX_COUNT = 10


class WebSearchTool(Tool):
    """Search the web for current information."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        max_results: int = HARD_MAX_COUNT,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the tool.

        Args:
            api_key: Brave Search subscription token
            max_results: Upper bound on requested results (at most 10)
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        self.api_key = api_key
        self.max_results = max(1, min(max_results, HARD_MAX_COUNT))
        self.timeout = timeout
        self._transport = transport
        super().__init__()

    @property
    def name(self) -> str:
        """Tool name."""
        return "web_search"

    @property
    def description(self) -> str:
        """Tool description."""
        return (
            "Search the web for current information. Use for finding documentation, "
            "news, tutorials, or any information that might be more current than your "
            "training data."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        """Tool parameters."""
        return [
            ToolParameter(
                name="query",
                type="string",
                description="The search query",
                required=True,
            ),
            ToolParameter(
                name="count",
                type="integer",
                description=f"Number of results to return (default {DEFAULT_COUNT}, max {HARD_MAX_COUNT})",
                required=False,
            ),
        ]

    def clamp_count(self, raw: Any) -> int:
        """Coerce the requested count into [1, max_results]."""
        if raw is None or raw == "":
            count = DEFAULT_COUNT
        else:
            try:
                count = int(raw)
            except (TypeError, ValueError):
                count = DEFAULT_COUNT
        return max(1, min(count, self.max_results))

    @staticmethod
    def format_results(query: str, results: list[dict[str, Any]]) -> str:
        """Render results as a numbered list."""
        if not results:
            return "No search results found"

        formatted = []
        for index, result in enumerate(results, start=1):
            age = f" ({result['age']})" if result.get("age") else ""
            formatted.append(
                f"{index}. **{result['title']}**\n"
                f"   URL: {result['url']}\n"
                f"   {result.get('description', '')}{age}"
            )
        return f'Web search results for "{query}":\n\n' + "\n\n".join(formatted)

    async def execute(self, **kwargs) -> str:
        """Run a web search.

        Args:
            query: Search terms
            count: Number of results wanted

        Returns:
            Formatted results
        """
        query = str(kwargs["query"])
        count = self.clamp_count(kwargs.get("count"))

        if not self.api_key:
            raise ToolExecutionError(
                "Brave Search API key not configured. Set BRAVE_API_KEY environment variable."
            )

        logger.info(f"Web search: '{query}' ({count} results)")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(
                    BRAVE_SEARCH_URL,
                    params={"q": query, "count": count},
                    headers={
                        "Accept": "application/json",
                        "X-Subscription-Token": self.api_key,
                    },
                )
        except httpx.TimeoutException as e:
            raise ToolExecutionError(f"Web search timed out after {self.timeout}s: {e}") from e
        except httpx.RequestError as e:
            raise ToolExecutionError(f"Request failed: {e}") from e

        if response.status_code >= 400:
            raise ToolExecutionError(f"HTTP {response.status_code}: {response.text[:200]}")

        try:
            payload = response.json()
        except ValueError as e:
            raise ToolExecutionError(f"Invalid response from search API: {e}") from e

        results = [
            {
                "title": item["title"],
                "url": item["url"],
                "description": item.get("description") or "",
                "age": item.get("age"),
            }
            for item in (payload.get("web") or {}).get("results") or []
            if isinstance(item, dict) and item.get("title") and item.get("url")
        ]
        return self.format_results(query, results[:count])
