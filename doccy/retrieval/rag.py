"""Retrieval-augmented context for the information handler."""

from typing import Protocol, Sequence

from llama_index.core.schema import NodeWithScore

from doccy.core.logging import get_logger

logger = get_logger(__name__)

NO_RESULTS = "no_results"


class Retriever(Protocol):
    def retrieve(self, query: str) -> Sequence[NodeWithScore]: ...


def fetch_rag_content(prompt: str, retriever: Retriever) -> str:
    """Fetch the nearest chunks for ``prompt`` and format them as numbered sources.

    Args:
        prompt: The user's question, used as the similarity query.
        retriever: Any retriever exposing ``retrieve(query)`` (e.g. from
            :meth:`EmbeddingStore.as_retriever`).

    Returns:
        str: ``"[Source i: name]\\n<text>"`` blocks separated by ``---`` rules,
        or :data:`NO_RESULTS` when nothing was retrieved.
    """
    results = retriever.retrieve(prompt)
    logger.info("Retrieved %d chunk(s)", len(results))

    if len(results) == 0:
        return NO_RESULTS

    return "\n\n---\n\n".join(
        f"[Source {i + 1}: {(result.node.metadata or {}).get('source_name') or 'Unknown'}]\n"
        f"{result.node.get_content()}"
        for i, result in enumerate(results)
    )
