"""Chunk, embed and store Drive documents."""

from typing import List

from langchain_core.documents import Document
from langchain_text_splitters import RecursiveCharacterTextSplitter
from llama_index.core.base.embeddings.base import BaseEmbedding

from doccy.api.models import GOOGLE_DOC, GOOGLE_SHEET, GOOGLE_SLIDES, DriveItem, VectorEntry
from doccy.core.logging import get_logger
from doccy.database.vector_store import EmbeddingStore
from doccy.ingest.gdrive import DriveConnector

logger = get_logger(__name__)

CHUNK_SIZE = 1000
CHUNK_OVERLAP = 150
SEPARATORS = ["\n\n", "\n", ". ", " ", ""]


def split_item(item: DriveItem) -> List[Document]:
    doc = Document(
        page_content=item.content or "",
        metadata={"source_name": item.name, "source_id": item.id, "mimeType": item.mime_type},
    )
    splitter = RecursiveCharacterTextSplitter(
        chunk_size=CHUNK_SIZE,
        chunk_overlap=CHUNK_OVERLAP,
        separators=SEPARATORS,
    )
    return splitter.split_documents([doc])


def embed_drive_item(item: DriveItem, store: EmbeddingStore, embed_model: BaseEmbedding) -> List[VectorEntry]:
    """Split ``item`` into chunks, embed them and append them to ``store``.

    Returns:
        list[VectorEntry]: One entry per chunk, in document order.
    """
    chunks = split_item(item)
    if not chunks:
        return []

    vectors = embed_model.get_text_embedding_batch([chunk.page_content for chunk in chunks])
    mime_type = item.mime_type if item.mime_type in (GOOGLE_DOC, GOOGLE_SHEET, GOOGLE_SLIDES) else "others"

    entries = [
        VectorEntry(
            content=chunk.page_content,
            source_name=item.name or "",
            source_id=item.id or "",
            chunk_index=i,
            mime_type=mime_type,
            embedding=vectors[i],
        )
        for i, chunk in enumerate(chunks)
    ]
    store.add_entries(entries)
    logger.info("Embedded %s into %d chunk(s)", item.name, len(entries))
    return entries


def index_drive(
    connector: DriveConnector,
    store: EmbeddingStore,
    embed_model: BaseEmbedding,
    folder_id: str,
) -> int:
    """Embed every Doc and Sheet under ``folder_id``.

    An item that fails to embed is logged and skipped.

    Returns:
        int: Total number of chunks stored.
    """
    total = 0
    for item in connector.list_folder(folder_id):
        try:
            total += len(embed_drive_item(item, store, embed_model))
        except Exception:
            logger.exception("Failed to embed %s (%s)", item.name, item.id)
    return total
