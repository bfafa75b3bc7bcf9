"""CLI entrypoint for Doccy."""

from __future__ import annotations

from typing import Optional

import typer

from doccy.core.logging import configure_logging
from doccy.database.config.config import settings

app = typer.Typer(name="doccy", help="Doccy, the sentient filing cabinet")


@app.callback()
def main(log_level: str = typer.Option(settings.LOG_LEVEL, "--log-level", help="Root log level")) -> None:
    configure_logging(log_level.upper())


@app.command()
def bot() -> None:
    """Run the Discord bot."""
    from doccy.api import dependencies as deps
    from doccy.bot.discord_bot import run_bot

    if not settings.DISCORD_TOKEN:
        typer.echo("DISCORD_TOKEN is not set", err=True)
        raise typer.Exit(code=1)
    run_bot(
        settings.DISCORD_TOKEN,
        pipeline=deps.get_pipeline(),
        chat_history_dao=deps.get_chat_history_dao(),
        trigger_keyword=settings.TRIGGER_KEYWORD,
    )


@app.command()
def index(
    folder_id: Optional[str] = typer.Option(None, "--folder-id", help="Drive folder to index"),
) -> None:
    """Embed every Google Doc and Sheet under a Drive folder."""
    from doccy.api import dependencies as deps
    from doccy.ingest.embed import index_drive
    from doccy.ingest.gdrive import DriveConnector

    folder = folder_id or settings.DRIVE_FOLDER_ID
    if not folder:
        typer.echo("No folder id given and DRIVE_FOLDER_ID is not set", err=True)
        raise typer.Exit(code=1)
    connector = DriveConnector.from_service_account(settings.GOOGLE_SERVICE_ACCOUNT_FILE)
    total = index_drive(connector, deps.get_embedding_store(), deps.get_embedding_model(), folder)
    typer.echo(f"Stored {total} chunk(s)")


@app.command()
def ask(prompt: str = typer.Argument(..., help="Prompt text")) -> None:
    """Run one prompt through the pipeline and print the result."""
    from doccy.api import dependencies as deps

    result = deps.get_pipeline().run_agent(prompt)
    typer.echo(f"[{result.intent.value}] {result.response}")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    from doccy.api.app import create_app

    uvicorn.run(create_app(), host=host, port=port)


if __name__ == "__main__":
    app()
