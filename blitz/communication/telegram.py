"""Telegram channel adapter: prefix command router and command handlers."""

import asyncio
import logging
import os
import time
from typing import Awaitable, Callable, Optional

from telegram import Bot, BotCommand, ReactionTypeEmoji, ReplyParameters, Update
from telegram.constants import ChatAction
from telegram.ext import Application, CommandHandler, ContextTypes, MessageHandler, filters

from ..config import BlitzSettings
from ..games import GameStore, TicTacToeEngine
from ..media import image, tiktok, youtube
from .commands import ParsedCommand, build_menu_text, parse_command
from .errors import classify_error
from .presenter import TelegramPresenter

logger = logging.getLogger("blitz.telegram")

CommandFunc = Callable[[Update, ContextTypes.DEFAULT_TYPE, ParsedCommand], Awaitable[None]]


class _TypingIndicator:
    """Keeps sending 'typing' action every 4s until cancelled.

    Usage:
        async with _TypingIndicator(bot, chat_id):
            await long_running_work()

    Auto-stops after max_duration seconds even if the wrapped coroutine
    hangs (e.g. a stalled download). Default = 10 minutes.
    """

    def __init__(self, bot: Bot, chat_id: int, action: str = ChatAction.TYPING,
                 interval: float = 4.0, max_duration: float = 600.0):
        self._bot = bot
        self._chat_id = chat_id
        self._action = action
        self._interval = interval
        self._max_duration = max_duration
        self._task: Optional[asyncio.Task] = None

    async def _loop(self):
        start = time.monotonic()
        try:
            while True:
                if time.monotonic() - start > self._max_duration:
                    logger.warning(f"Typing indicator timeout ({self._max_duration}s) for chat {self._chat_id}")
                    break
                await self._bot.send_chat_action(self._chat_id, self._action)
                await asyncio.sleep(self._interval)
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.debug(f"Typing indicator stopped for chat {self._chat_id}: {e}")

    async def __aenter__(self):
        self._task = asyncio.create_task(self._loop())
        return self

    async def __aexit__(self, *exc):
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass


def _display_name(update: Update) -> str:
    user = update.effective_user
    return user.username or user.first_name or str(user.id)


class TelegramChannel:
    """Telegram bot adapter for Blitz."""

    def __init__(self, settings: BlitzSettings):
        self.settings = settings
        self.prefix = settings.command_prefix
        self.app: Optional[Application] = None
        self.games: Optional[TicTacToeEngine] = None
        self._commands: dict[str, CommandFunc] = {
            "start": self._cmd_start,
            "ping": self._cmd_ping,
            "menu": self._cmd_menu,
            "donate": self._cmd_donate,
            "ytmp3": self._cmd_youtube,
            "ytmp4": self._cmd_youtube,
            "play": self._cmd_play,
            "tiktok": self._cmd_tiktok,
            "upscale": self._cmd_upscale,
            "ttt": self._cmd_ttt,
        }

    def _register_handlers(self):
        """Register all Telegram handlers on self.app."""
        # Slash commands Telegram clients send on their own (the "Start" button)
        self.app.add_handler(CommandHandler("start", self._slash_start))
        self.app.add_handler(CommandHandler("menu", self._slash_menu))
        # Prefix commands
        self.app.add_handler(MessageHandler(filters.TEXT, self._handle_message))
        # Error handler
        self.app.add_error_handler(self._handle_error)

    async def start(self):
        """Start the Telegram bot."""
        self.app = (
            Application.builder()
            .token(self.settings.telegram_bot_token)
            .concurrent_updates(256)
            .build()
        )
        if self.games is None:
            self.games = TicTacToeEngine(
                TelegramPresenter(self.app.bot),
                GameStore(idle_timeout=self.settings.ttt_idle_timeout),
                prefix=self.prefix,
            )

        self._register_handlers()

        logger.info(f"{self.settings.bot_name} is starting up...")
        await self.app.initialize()
        await self.app.start()
        await self.app.updater.start_polling(
            drop_pending_updates=True,
            allowed_updates=["message"],
        )

        # Register bot commands menu (the "/" button in Telegram)
        try:
            await self.app.bot.set_my_commands([
                BotCommand("start", "Check if the bot is online"),
                BotCommand("menu", "Show the command menu"),
            ])
        except Exception as e:
            logger.warning(f"Failed to register bot commands: {e}")

        logger.info(f"{self.settings.bot_name} is now fully initialized and listening for commands.")

    async def stop(self):
        """Stop the Telegram bot."""
        if self.app:
            await self.app.updater.stop()
            await self.app.stop()
            await self.app.shutdown()
            logger.info("Telegram bot stopped.")

    # ── Router ───────────────────────────────────────────────

    async def _handle_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Route prefixed text commands to their handlers."""
        if not update.message or not update.message.text:
            return

        parsed = parse_command(update.message.text, self.prefix)
        if parsed is None:
            return

        chat = update.effective_chat
        logger.info(f"[{chat.type}] {_display_name(update)} ({update.effective_user.id}): {parsed.name} {parsed.rest[:100]}")

        try:
            await context.bot.send_chat_action(chat.id, ChatAction.TYPING)
        except Exception as e:
            logger.debug(f"Could not send typing action: {e}")

        handler = self._commands.get(parsed.canonical)
        if handler is None:
            await context.bot.send_message(
                chat.id,
                f"Unknown command: {self.prefix}{parsed.name}\nType {self.prefix}menu to see available commands.",
            )
            return

        try:
            await handler(update, context, parsed)
        except Exception as e:
            logger.error(f"Error processing command '{parsed.name}': {type(e).__name__}: {e}", exc_info=True)
            try:
                await context.bot.send_message(chat.id, classify_error(e))
            except Exception as send_error:
                logger.error(f"Failed to report error to chat {chat.id}: {send_error}")

    async def _slash_start(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        await self._cmd_start(update, context, ParsedCommand("start"))

    async def _slash_menu(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        await self._cmd_menu(update, context, ParsedCommand("menu"))

    # ── Simple commands ──────────────────────────────────────

    async def _cmd_start(self, update: Update, context: ContextTypes.DEFAULT_TYPE, cmd: ParsedCommand):
        await context.bot.send_message(
            update.effective_chat.id,
            f"Hey there! {self.settings.bot_name} is online and ready to roll! ⚡\n"
            f"Type {self.prefix}menu to see what I can do.",
        )

    async def _cmd_ping(self, update: Update, context: ContextTypes.DEFAULT_TYPE, cmd: ParsedCommand):
        started = time.monotonic()
        chat_id = update.effective_chat.id
        message_id = update.message.message_id
        # Reacting isn't critical for ping; send_reaction logs and moves on
        await self.send_reaction(context.bot, chat_id, message_id, "⚡")
        latency = int((time.monotonic() - started) * 1000)
        await context.bot.send_message(
            chat_id,
            f"Pong! {latency}ms",
            reply_parameters=ReplyParameters(message_id=message_id),
        )

    async def _cmd_menu(self, update: Update, context: ContextTypes.DEFAULT_TYPE, cmd: ParsedCommand):
        await context.bot.send_message(
            update.effective_chat.id,
            build_menu_text(self.settings.bot_name, self.prefix),
        )

    async def _cmd_donate(self, update: Update, context: ContextTypes.DEFAULT_TYPE, cmd: ParsedCommand):
        await context.bot.send_message(update.effective_chat.id, self.settings.owner_opay_info)

    # ── Media commands ───────────────────────────────────────

    async def _cmd_youtube(self, update: Update, context: ContextTypes.DEFAULT_TYPE, cmd: ParsedCommand):
        """ytmp3 / ytmp4 <link>: download audio or video."""
        chat_id = update.effective_chat.id
        command = cmd.name
        if not cmd.args or not youtube.is_youtube_url(cmd.args[0]):
            await context.bot.send_message(
                chat_id,
                f"Please provide a valid YouTube link.\n"
                f"Example: {self.prefix}{command} https://www.youtube.com/watch?v=dQw4w9WgXcQ",
            )
            return

        kind = "audio" if cmd.canonical == "ytmp3" else "video"
        info = await youtube.fetch_info(cmd.args[0])
        await context.bot.send_message(
            chat_id,
            f"Downloading \"{info.title}\" ({kind})... This might take a moment.",
        )
        await self._download_and_send(context.bot, chat_id, info, kind)

    async def _cmd_play(self, update: Update, context: ContextTypes.DEFAULT_TYPE, cmd: ParsedCommand):
        """play <song name>: search YouTube and send the first hit's audio."""
        chat_id = update.effective_chat.id
        if not cmd.args:
            await context.bot.send_message(
                chat_id,
                f"Please provide a song name to search.\n"
                f"Example: {self.prefix}play Never Gonna Give You Up",
            )
            return

        query = cmd.rest
        await context.bot.send_message(chat_id, f"Searching for \"{query}\" on YouTube...")
        async with _TypingIndicator(context.bot, chat_id):
            video = await youtube.search_first(query)
        if video is None:
            await context.bot.send_message(chat_id, f"Sorry, I couldn't find any songs matching \"{query}\".")
            return

        await context.bot.send_message(
            chat_id,
            f"Found: {video.title}\nDuration: {video.timestamp}\nDownloading audio... Please wait.",
        )
        await self._download_and_send(context.bot, chat_id, video, "audio")

    async def _download_and_send(self, bot: Bot, chat_id: int, video: youtube.VideoInfo, kind: str):
        media = None
        action = ChatAction.UPLOAD_VOICE if kind == "audio" else ChatAction.UPLOAD_VIDEO
        try:
            async with _TypingIndicator(bot, chat_id, action=action):
                media = await youtube.download(
                    video.url, kind, self.settings.scratch_dir, self.settings.max_upload_bytes,
                )
                with open(media.path, "rb") as f:
                    if kind == "audio":
                        await bot.send_audio(
                            chat_id,
                            audio=f,
                            caption=video.title,
                            title=video.title,
                            duration=media.duration,
                            filename=media.filename,
                            write_timeout=120,
                        )
                    else:
                        await bot.send_video(
                            chat_id,
                            video=f,
                            caption=video.title,
                            duration=media.duration,
                            filename=media.filename,
                            supports_streaming=True,
                            write_timeout=120,
                        )
            logger.info(f"Sent {kind} '{video.title}' to {chat_id}")
        finally:
            if media and os.path.exists(media.path):
                try:
                    os.remove(media.path)
                except OSError as e:
                    logger.warning(f"Error cleaning up file {media.path}: {e}")

    async def _cmd_tiktok(self, update: Update, context: ContextTypes.DEFAULT_TYPE, cmd: ParsedCommand):
        chat_id = update.effective_chat.id
        if not cmd.args:
            await context.bot.send_message(
                chat_id,
                f"Please provide a TikTok video link.\nExample: {self.prefix}tiktok [link]",
            )
            return

        await context.bot.send_message(chat_id, "Attempting to download TikTok video (experimental)...")
        async with _TypingIndicator(context.bot, chat_id, action=ChatAction.UPLOAD_VIDEO):
            video = await tiktok.fetch_tiktok(
                cmd.args[0],
                api_url=self.settings.tiktok_api_url,
                timeout=self.settings.tiktok_timeout,
            )
            await context.bot.send_video(chat_id, video=video.play_url, caption=video.title)

    async def _cmd_upscale(self, update: Update, context: ContextTypes.DEFAULT_TYPE, cmd: ParsedCommand):
        """upscale (as a reply to a photo): basic 2x Lanczos resize."""
        chat_id = update.effective_chat.id
        replied = update.message.reply_to_message
        if not replied or not replied.photo:
            await context.bot.send_message(chat_id, "Please reply to an image to use the upscale command.")
            return

        await context.bot.send_message(
            chat_id,
            "Enhancing image (basic resize)... Please wait. This is NOT an AI upscale like Remini.",
        )
        async with _TypingIndicator(context.bot, chat_id, action=ChatAction.UPLOAD_PHOTO):
            # Largest size is last
            tg_file = await replied.photo[-1].get_file()
            photo_bytes = await tg_file.download_as_bytearray()
            if not photo_bytes:
                await context.bot.send_message(chat_id, "Error downloading image for upscaling.")
                return
            result = await asyncio.to_thread(image.upscale, bytes(photo_bytes))
            await context.bot.send_photo(chat_id, photo=result, caption="Image Enhanced (Basic 2x Resize)")

    # ── Game ─────────────────────────────────────────────────

    async def _cmd_ttt(self, update: Update, context: ContextTypes.DEFAULT_TYPE, cmd: ParsedCommand):
        await self.games.handle_command(
            update.effective_chat.id,
            update.effective_user.id,
            _display_name(update),
            cmd.args,
        )

    # ── Helpers ──────────────────────────────────────────────

    async def send_reaction(self, bot: Bot, chat_id: int, message_id: int, emoji: str) -> bool:
        """Send a reaction to a message.

        Returns:
            True if successful, False otherwise
        """
        try:
            await bot.set_message_reaction(
                chat_id=chat_id,
                message_id=message_id,
                reaction=[ReactionTypeEmoji(emoji=emoji)],
            )
            return True
        except Exception as e:
            logger.warning(f"Could not react to message {message_id} in chat {chat_id}: {e}")
            return False

    async def _handle_error(self, update: object, context: ContextTypes.DEFAULT_TYPE):
        """Handle errors in update processing."""
        error = context.error
        if update:
            logger.error(f"Telegram error processing update {type(update).__name__}: {type(error).__name__}: {error}", exc_info=error)
        else:
            logger.error(f"Polling error: {type(error).__name__}: {error}", exc_info=error)
