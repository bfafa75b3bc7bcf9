"""FastAPI application setup for Doccy."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from doccy.api.agent_pipeline import DoccyPipeline
from doccy.api.fast_api import router
from doccy.database.daos.chat_message_dao import ChatMessageDao


def create_app(
    pipeline: Optional[DoccyPipeline] = None,
    chat_history_dao: Optional[ChatMessageDao] = None,
) -> FastAPI:
    """Build the app; missing collaborators are wired from settings on startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        from doccy.api import dependencies as deps

        app.state.chat_history_dao = chat_history_dao or deps.get_chat_history_dao()
        app.state.pipeline = pipeline or deps.get_pipeline()
        yield

    app = FastAPI(title="Doccy", version="0.1.0", lifespan=lifespan)
    app.include_router(router)
    return app
