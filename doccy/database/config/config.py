from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """
    Application configuration settings loaded from environment variables
    or a `.env` file. Provides strongly typed access to environment values.
    """

    DISCORD_TOKEN: str = ""
    """Token used by the Discord client to log in."""

    TRIGGER_KEYWORD: str = "doccy"
    """Keyword that makes the bot answer a channel message (case-insensitive)."""

    OPENAI_API_KEY: str = ""
    """OpenAI API key for chat completions and embeddings."""

    CLASSIFIER_MODEL: str = "gpt-4.1-nano"
    """Chat model used to classify the user's intent."""

    INFORMATION_MODEL: str = "gpt-4.1-nano"
    """Chat model used to answer from the document archive."""

    WEB_SEARCH_MODEL: str = "gpt-4.1-nano"
    """Chat model used to answer from web search results."""

    CONVERSATION_MODEL: str = "gpt-5-mini"
    """Chat model used for general banter."""

    EMBEDDING_MODEL: str = "text-embedding-3-large"
    """OpenAI embedding model used at ingestion and query time."""

    TAVILY_API_KEY: str = ""
    """API key for Tavily API integration."""

    WEB_SEARCH_PROVIDER: str = "tavily"
    """Web search backend, either `tavily` or `openai` (Responses API web_search_preview)."""

    WEB_SEARCH_MAX_RESULTS: int = 5
    """Number of ranked results requested from the search provider."""

    DATABASE_URL: str = "sqlite:///doccy.db"
    """SQLAlchemy URL of the chat history database."""

    CHAT_HISTORY_LIMIT: int = 100
    """Number of most recent chat messages given to the model as context."""

    VECTOR_INDEX_DIR: str = "./vector_index"
    """Directory where the embedding index is persisted."""

    RAG_TOP_K: int = 7
    """Number of chunks retrieved for an information request."""

    DRIVE_FOLDER_ID: str = ""
    """Root Google Drive folder that is indexed."""

    GOOGLE_SERVICE_ACCOUNT_FILE: str = "./service-account.json"
    """Path to the Google service account key file."""

    SYSTEM_PROMPT_PATH: str = "system_prompt.md"
    """Persona prompt file used by the information handler."""

    LOG_LEVEL: str = "INFO"
    """Root log level."""

    class Config:
        """
        Configuration for Pydantic settings. Loads values from `.env` file by default.
        """
        env_file = ".env"
        extra = "ignore"


# Singleton instance of Settings, ready to be imported across the app
settings = Settings()
"""Defines a Settings object that contains the contents of the .env file"""
