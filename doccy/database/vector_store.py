"""Append-only embedding store backed by a persisted LlamaIndex vector index."""

import os
from typing import Iterable, List, Optional, Tuple

from llama_index.core import StorageContext, VectorStoreIndex, load_index_from_storage
from llama_index.core.base.embeddings.base import BaseEmbedding
from llama_index.core.schema import NodeWithScore, TextNode

from doccy.api.models import VectorEntry
from doccy.core.logging import get_logger

logger = get_logger(__name__)


def load_vector_index(persist_dir: str, embedding: BaseEmbedding) -> VectorStoreIndex:
    """Restore the index persisted in ``persist_dir``, or start an empty one.

    Args:
        persist_dir: Filesystem directory where the index is persisted.
        embedding: Embedding model used to embed queries at retrieval time.

    Returns:
        VectorStoreIndex: The restored (or new, empty) index.
    """
    if os.path.exists(os.path.join(persist_dir, "docstore.json")):
        storage_context = StorageContext.from_defaults(persist_dir=persist_dir)
        return load_index_from_storage(storage_context=storage_context, embed_model=embedding)
    return VectorStoreIndex(nodes=[], embed_model=embedding)


def _docstore_stamp(persist_dir: str) -> Optional[Tuple[int, int]]:
    try:
        stat = os.stat(os.path.join(persist_dir, "docstore.json"))
    except FileNotFoundError:
        return None
    return stat.st_mtime_ns, stat.st_size


def entry_to_node(entry: VectorEntry) -> TextNode:
    return TextNode(
        text=entry.content,
        embedding=list(entry.embedding),
        metadata={
            "source_name": entry.source_name,
            "source_id": entry.source_id,
            "chunk_index": entry.chunk_index,
            "mimeType": entry.mime_type,
            "created_at": entry.created_at.isoformat(),
        },
        excluded_embed_metadata_keys=["source_id", "chunk_index", "mimeType", "created_at"],
        excluded_llm_metadata_keys=["source_id", "chunk_index", "mimeType", "created_at"],
    )


class EmbeddingStore:
    """Persisted store of :class:`VectorEntry` chunks.

    Entries are inserted with their precomputed embeddings and never updated.
    The persisted index is reloaded when another process (e.g. the indexer)
    has written to ``persist_dir`` since it was last read.

    Args:
        persist_dir: Directory the index is persisted to after every insert.
            ``None`` keeps the index in memory only.
        embedding: Embedding model used for queries.
    """

    def __init__(self, persist_dir: Optional[str], embedding: BaseEmbedding):
        self.persist_dir = persist_dir
        self.embedding = embedding
        self._stamp: Optional[Tuple[int, int]] = None
        if persist_dir:
            self._stamp = _docstore_stamp(persist_dir)
            self.index = load_vector_index(persist_dir, embedding)
        else:
            self.index = VectorStoreIndex(nodes=[], embed_model=embedding)

    def refresh(self) -> bool:
        """Reload the index if its persisted copy changed on disk.

        Returns:
            bool: Whether the index was reloaded.
        """
        if not self.persist_dir:
            return False
        stamp = _docstore_stamp(self.persist_dir)
        if stamp is None or stamp == self._stamp:
            return False
        logger.info("Reloading vector index from %s", self.persist_dir)
        self.index = load_vector_index(self.persist_dir, self.embedding)
        self._stamp = stamp
        return True

    def add_entries(self, entries: Iterable[VectorEntry]) -> List[str]:
        """Append ``entries`` and persist the index.

        Returns:
            list[str]: The ids of the inserted nodes.
        """
        nodes = [entry_to_node(entry) for entry in entries]
        if not nodes:
            return []
        self.refresh()
        self.index.insert_nodes(nodes)
        if self.persist_dir:
            self.index.storage_context.persist(persist_dir=self.persist_dir)
            self._stamp = _docstore_stamp(self.persist_dir)
        logger.info("Stored %d embedding(s)", len(nodes))
        return [node.node_id for node in nodes]

    def as_retriever(self, top_k: int = 7) -> "StoreRetriever":
        return StoreRetriever(self, top_k)


class StoreRetriever:
    """Retriever over an :class:`EmbeddingStore` that picks up newly indexed chunks."""

    def __init__(self, store: EmbeddingStore, top_k: int = 7):
        self.store = store
        self.top_k = top_k

    def retrieve(self, query: str) -> List[NodeWithScore]:
        self.store.refresh()
        return self.store.index.as_retriever(similarity_top_k=self.top_k).retrieve(query)
