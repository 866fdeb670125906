"""Pytest configuration and shared fixtures."""

import asyncio

import pytest

from blitz.games import GameStore, Presenter, PresenterError, TicTacToeEngine


class FakePresenter(Presenter):
    """Records every presenter call; handles count up from 101."""

    def __init__(self):
        self.sent: list[tuple[int, str, bool, int]] = []
        self.edited: list[tuple[int, int, str, bool]] = []
        self.deleted: list[tuple[int, int]] = []
        self.fail_edit = False
        self.fail_delete = False
        self.yield_on_render = False
        self._next_handle = 100

    async def send(self, chat_id, text, rich=False):
        if self.yield_on_render:
            await asyncio.sleep(0)
        self._next_handle += 1
        self.sent.append((chat_id, text, rich, self._next_handle))
        return self._next_handle

    async def edit(self, chat_id, handle, text, rich=False):
        if self.yield_on_render:
            await asyncio.sleep(0)
        if self.fail_edit:
            raise PresenterError("Message can't be edited")
        self.edited.append((chat_id, handle, text, rich))
        return handle

    async def _delete(self, chat_id, handle):
        if self.fail_delete:
            raise RuntimeError("Message to delete not found")
        self.deleted.append((chat_id, handle))

    @property
    def last_text(self) -> str:
        return self.sent[-1][1]


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def presenter():
    return FakePresenter()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def engine(presenter):
    """Fresh engine and game table per test."""
    return TicTacToeEngine(presenter, GameStore())
