"""Presenter contract: how the game engine talks to the chat transport."""

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger("blitz.games.presenter")


class PresenterError(Exception):
    """A send/edit could not be carried out by the transport."""


class Presenter(ABC):
    """Renders engine output as chat messages.

    ``send`` and ``edit`` return an opaque message handle the engine keeps
    so later updates can edit the same message in place. ``edit`` raises
    ``PresenterError`` when the message can no longer be edited.

    Deletion is fire-and-forget: ``delete_quietly`` never raises, whatever
    the transport does. Implementations only provide ``_delete``.
    """

    @abstractmethod
    async def send(self, chat_id: int, text: str, rich: bool = False) -> int:
        ...

    @abstractmethod
    async def edit(self, chat_id: int, handle: int, text: str, rich: bool = False) -> int:
        ...

    @abstractmethod
    async def _delete(self, chat_id: int, handle: int) -> None:
        ...

    async def delete_quietly(self, chat_id: int, handle: int) -> None:
        """Delete a message. Errors are discarded by contract."""
        try:
            await self._delete(chat_id, handle)
        except Exception as e:
            logger.debug(f"Ignoring failed delete of message {handle} in chat {chat_id}: {e}")
