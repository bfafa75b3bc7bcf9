"""Web search providers returning ranked ``SearchResult`` lists."""

from typing import Any, List, Optional

from langchain_tavily import TavilySearch
from openai import OpenAI

from doccy.api.models import SearchResult
from doccy.core.logging import get_logger

logger = get_logger(__name__)


class WebSearchError(RuntimeError):
    """Raised when the search provider returns no usable results."""


class WebSearch:
    """Query a web search provider.

    Two providers are supported:

    - ``tavily``: Tavily search through ``langchain_tavily``; returns the ranked
      result list with title, url and content.
    - ``openai``: OpenAI Responses API with the ``web_search_preview`` tool;
      returns a single model-written summary.

    Args:
        provider: ``"tavily"`` or ``"openai"``.
        max_results: Number of results requested from Tavily.
        tavily_api_key: Tavily API key (``tavily`` provider).
        openai_api_key: OpenAI API key (``openai`` provider).
        tool: Optional pre-built tool exposing ``invoke({"query": ...})``; used
            in place of constructing a ``TavilySearch``.
    """

    def __init__(
        self,
        provider: str = "tavily",
        max_results: int = 5,
        tavily_api_key: str = "",
        openai_api_key: str = "",
        tool: Optional[Any] = None,
    ):
        self.provider = provider
        self.max_results = max_results
        self.tavily_api_key = tavily_api_key
        self.openai_api_key = openai_api_key
        self._tool = tool

    def _tavily(self):
        if self._tool is None:
            # falls back to the TAVILY_API_KEY environment variable
            credentials = {"tavily_api_key": self.tavily_api_key} if self.tavily_api_key else {}
            self._tool = TavilySearch(
                max_results=self.max_results,
                include_answer=False,
                include_raw_content=False,
                include_images=False,
                **credentials,
            )
        return self._tool

    def search(self, query: str) -> List[SearchResult]:
        """Run ``query`` and return ranked results.

        Raises:
            WebSearchError: If the provider reports an error or finds nothing.
        """
        if self.provider == "openai":
            return self._search_openai(query)

        raw = self._tavily().invoke({"query": query})
        if isinstance(raw, dict) and raw.get("error"):
            raise WebSearchError(f"Tavily search failed: {raw['error']}")
        items = raw.get("results", []) if isinstance(raw, dict) else []
        if not items:
            raise WebSearchError(f"No web results for {query!r}")

        return [
            SearchResult(
                title=item.get("title") or "",
                url=item.get("url") or "",
                snippet=item.get("content") or "",
            )
            for item in items[: self.max_results]
        ]

    def _search_openai(self, query: str) -> List[SearchResult]:
        client = OpenAI(api_key=self.openai_api_key or None)
        response = client.responses.create(
            model="gpt-4o-mini",
            tools=[{"type": "web_search_preview"}],
            input=query,
        )
        if not response.output_text:
            raise WebSearchError(f"No web results for {query!r}")
        return [SearchResult(title="OpenAI web search", url="", snippet=response.output_text)]


def format_search_results(results: List[SearchResult]) -> str:
    return "\n\n".join(
        f"{i + 1}) {result.title}\nurl: {result.url}\n{result.snippet}"
        for i, result in enumerate(results)
    )
