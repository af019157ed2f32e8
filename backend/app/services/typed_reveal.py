"""Typed reveal — presents guidance text one character per tick."""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable

from app.config import settings

logger = logging.getLogger(__name__)


class TypedReveal:
    """Lazy async sequence of ever-longer prefixes of ``text``.

    Iterating yields ``text[:1]``, ``text[:2]`` … ``text`` with one tick
    between frames. ``cancel()`` ends the sequence early; ``reset()`` rewinds
    it so it can be played again.
    """

    def __init__(self, text: str, tick_seconds: float):
        self.text = text
        self.tick_seconds = tick_seconds
        self._position = 0
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._position >= len(self.text)

    @property
    def current(self) -> str:
        return self.text[:self._position]

    def cancel(self):
        self._cancelled = True

    def reset(self):
        self._position = 0
        self._cancelled = False

    def __aiter__(self) -> AsyncIterator[str]:
        return self._frames()

    async def _frames(self) -> AsyncIterator[str]:
        while not self._cancelled and self._position < len(self.text):
            await asyncio.sleep(self.tick_seconds)
            if self._cancelled:
                return
            self._position += 1
            yield self.text[:self._position]


class TypedRevealEmitter:
    """Owns the single reveal shown on one surface.

    Starting a reveal cancels whichever one is still running, so a step
    change can never leave an old reveal typing underneath the new one.
    """

    def __init__(self, tick_ms: int | None = None):
        tick_ms = settings.reveal_tick_ms if tick_ms is None else tick_ms
        self.tick_seconds = tick_ms / 1000
        self.displayed = ""
        self._active: TypedReveal | None = None
        self._task: asyncio.Task | None = None

    @property
    def active(self) -> TypedReveal | None:
        return self._active

    @property
    def is_typing(self) -> bool:
        return self._task is not None and not self._task.done()

    def reveal(self, text: str) -> TypedReveal:
        """Cancel any running reveal and return a fresh one for ``text``."""
        self.cancel()
        self._active = TypedReveal(text, self.tick_seconds)
        return self._active

    def play(self, text: str, on_frame: Callable[[str], None] | None = None) -> asyncio.Task:
        """Start revealing ``text`` in the background.

        Each frame is written to ``displayed`` and passed to ``on_frame``.
        The returned task resolves to the last frame shown.
        """
        reveal = self.reveal(text)
        self.displayed = ""
        self._task = asyncio.create_task(self._drive(reveal, on_frame))
        return self._task

    async def _drive(self, reveal: TypedReveal, on_frame: Callable[[str], None] | None) -> str:
        async for frame in reveal:
            self.displayed = frame
            if on_frame is not None:
                on_frame(frame)
        return reveal.current

    def cancel(self):
        if self._active is not None:
            self._active.cancel()
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
