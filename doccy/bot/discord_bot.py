"""
Discord front end for Doccy.

The bot answers a channel message when it mentions the trigger keyword or when
it replies to one of the bot's own messages. It first posts a ``thinking...``
placeholder, runs the agent pipeline in a worker thread, then edits the
placeholder with the reply.

Setup:
  1. Create a bot at https://discord.com/developers/applications
  2. Enable Message Content Intent under Bot > Privileged Gateway Intents
  3. Set ``DISCORD_TOKEN`` in the environment or ``.env``
"""

import asyncio
from typing import Literal, Optional

import discord

from doccy.api.agent_pipeline import DoccyPipeline
from doccy.api.models import ChatMessage
from doccy.core.logging import get_logger
from doccy.database.daos.chat_message_dao import ChatMessageDao

logger = get_logger(__name__)

THINKING_MESSAGE = "thinking..."
ERROR_MESSAGE = "an error has occurred :("


def is_triggered(content: str, keyword: str) -> bool:
    return keyword.lower() in content.lower()


def to_chat_message(message: discord.Message, role: Literal["user", "bot"] = "user") -> ChatMessage:
    author = message.author
    return ChatMessage(
        role=role,
        user_id=str(author.id),
        user_name=author.name,
        display_name=getattr(author, "display_name", None) or author.name,
        message_content=message.content,
    )


class DoccyClient(discord.Client):
    """Discord client that routes triggered messages through the pipeline.

    Args:
        pipeline: The agent pipeline producing replies.
        chat_history_dao: Where user and bot messages are appended.
        trigger_keyword: Case-insensitive word that makes the bot answer.
    """

    def __init__(
        self,
        pipeline: DoccyPipeline,
        chat_history_dao: ChatMessageDao,
        trigger_keyword: str = "doccy",
        **options,
    ):
        intents = discord.Intents.default()
        intents.guilds = True
        intents.guild_messages = True
        intents.message_content = True
        super().__init__(intents=intents, **options)
        self.pipeline = pipeline
        self.chat_history_dao = chat_history_dao
        self.trigger_keyword = trigger_keyword

    async def on_ready(self):
        logger.info("Ready! Logged in as %s", self.user)

    async def is_reply_to_me(self, message: discord.Message) -> bool:
        reference = message.reference
        if reference is None or reference.message_id is None:
            return False
        try:
            replied: Optional[discord.Message] = reference.resolved
            if not isinstance(replied, discord.Message):
                replied = await message.channel.fetch_message(reference.message_id)
        except discord.DiscordException:
            logger.warning("Could not fetch replied message %s", reference.message_id)
            return False
        return self.user is not None and replied.author.id == self.user.id

    async def on_message(self, message: discord.Message):
        if message.author.bot:
            return

        guild = message.guild.name if message.guild else "DM"
        logger.info("[%s | #%s] %s: %s", guild, message.channel.id, message.author, message.content)

        if await self.is_reply_to_me(message):
            await self.reply(message)
            return

        if is_triggered(message.content, self.trigger_keyword):
            await self.reply(message, log_prompt=True)

    async def reply(self, message: discord.Message, log_prompt: bool = False):
        """Answer ``message`` by editing a placeholder.

        The prompt is logged only after the pipeline has read the history, so
        it is not sent to the model twice.
        """
        thinking = await message.reply(THINKING_MESSAGE)
        display_name = getattr(message.author, "display_name", None) or message.author.name
        response = await asyncio.to_thread(
            self.pipeline.handle_prompt, f"{display_name} {message.content}"
        )
        if log_prompt:
            await self.add_to_chat_history(message, role="user")
        edited = await thinking.edit(content=response or ERROR_MESSAGE)
        await self.add_to_chat_history(edited or thinking, role="bot")

    async def add_to_chat_history(self, message: discord.Message, role: Literal["user", "bot"]):
        await asyncio.to_thread(self.chat_history_dao.create_message, to_chat_message(message, role))


def run_bot(token: str, pipeline: DoccyPipeline, chat_history_dao: ChatMessageDao, trigger_keyword: str = "doccy"):
    """Start the Discord client and block until it disconnects."""
    client = DoccyClient(pipeline, chat_history_dao, trigger_keyword=trigger_keyword)
    client.run(token, log_handler=None)
