"""Telegram implementation of the game ``Presenter``."""

import logging

from telegram import Bot
from telegram.constants import ParseMode
from telegram.error import BadRequest, TelegramError

from ..games.presenter import Presenter, PresenterError
from ..formatting import strip_html

logger = logging.getLogger("blitz.telegram.presenter")


class TelegramPresenter(Presenter):
    """Sends, edits and deletes game messages through a ``telegram.Bot``."""

    def __init__(self, bot: Bot):
        self._bot = bot

    async def send(self, chat_id: int, text: str, rich: bool = False) -> int:
        if not rich:
            msg = await self._bot.send_message(chat_id=chat_id, text=text)
            return msg.message_id
        try:
            msg = await self._bot.send_message(chat_id=chat_id, text=text, parse_mode=ParseMode.HTML)
        except BadRequest as e:
            # HTML parse failed: retry as plain text
            logger.warning(f"HTML send failed in chat {chat_id}, retrying plain: {e}")
            msg = await self._bot.send_message(chat_id=chat_id, text=strip_html(text))
        return msg.message_id

    async def edit(self, chat_id: int, handle: int, text: str, rich: bool = False) -> int:
        try:
            await self._bot.edit_message_text(
                text=text,
                chat_id=chat_id,
                message_id=handle,
                parse_mode=ParseMode.HTML if rich else None,
            )
        except BadRequest as e:
            if "message is not modified" in e.message.lower():
                return handle
            raise PresenterError(e.message) from e
        except TelegramError as e:
            raise PresenterError(e.message) from e
        return handle

    async def _delete(self, chat_id: int, handle: int) -> None:
        await self._bot.delete_message(chat_id=chat_id, message_id=handle)
