from doccy.retrieval.rag import NO_RESULTS, fetch_rag_content

__all__ = ["NO_RESULTS", "fetch_rag_content"]
