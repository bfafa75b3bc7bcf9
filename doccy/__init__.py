"""
Doccy: a Discord persona that answers from Google Drive documents, the web,
or just vibes.

Contents
--------
- api
    The intent-routed agent pipeline, prompts, schemas and the FastAPI surface.
- bot
    The Discord client.
- database
    Settings, the chat log (SQLAlchemy) and the embedding store (LlamaIndex).
- ingest
    Google Drive listing, text extraction, chunking and embedding.
- retrieval
    RAG context formatting and web search.
"""

__version__ = "0.1.0"
