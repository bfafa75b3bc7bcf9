"""Startup wiring shared by the bot, the HTTP app and the CLI."""

from functools import lru_cache

from llama_index.embeddings.openai import OpenAIEmbedding

from doccy.api.agent_pipeline import DoccyPipeline
from doccy.database.config.config import settings
from doccy.database.core.connection import Database
from doccy.database.daos.chat_message_dao import ChatMessageDao
from doccy.database.vector_store import EmbeddingStore


@lru_cache(maxsize=1)
def get_database() -> Database:
    database = Database(settings.DATABASE_URL)
    database.create_all()
    return database


def get_chat_history_dao() -> ChatMessageDao:
    return ChatMessageDao(get_database())


def get_embedding_model() -> OpenAIEmbedding:
    return OpenAIEmbedding(model=settings.EMBEDDING_MODEL, api_key=settings.OPENAI_API_KEY or None)


@lru_cache(maxsize=1)
def get_embedding_store() -> EmbeddingStore:
    return EmbeddingStore(settings.VECTOR_INDEX_DIR, get_embedding_model())


@lru_cache(maxsize=1)
def get_pipeline() -> DoccyPipeline:
    return DoccyPipeline.from_settings(
        chat_history_dao=get_chat_history_dao(),
        retriever=get_embedding_store().as_retriever(top_k=settings.RAG_TOP_K),
    )
