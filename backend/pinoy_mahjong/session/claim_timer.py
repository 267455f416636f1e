"""
Wall-clock timer for the claim window that follows each discard.

The window runs in two stages: humans get the first `human_advantage_seconds`
to themselves, then AI claims are evaluated. If no AI claim closes the window
it stays open for the rest of `claim_window_seconds` and then expires.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

from pinoy_mahjong.logic.exceptions import GameRuleError, GameStateInvariantError

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from pinoy_mahjong.logic.settings import GameSettings
    from pinoy_mahjong.logic.state import ClaimWindow


class ClaimWindowTimer:
    """
    Drive one claim window at a time.

    on_ai_evaluation returns True when it closed the window (an AI claim was
    applied), which skips the expiry stage.
    """

    def __init__(self, claim_window_seconds: float, human_advantage_seconds: float) -> None:
        self._claim_window_seconds = claim_window_seconds
        self._human_advantage_seconds = min(human_advantage_seconds, claim_window_seconds)
        self._active_task: asyncio.Task[None] | None = None
        self.window: ClaimWindow | None = None

    @classmethod
    def from_settings(cls, settings: GameSettings) -> ClaimWindowTimer:
        return cls(settings.claim_window_seconds, settings.human_advantage_seconds)

    @property
    def active(self) -> bool:
        return self._active_task is not None and not self._active_task.done()

    def start(
        self,
        window: ClaimWindow | None,
        on_ai_evaluation: Callable[[], Awaitable[bool]],
        on_expire: Callable[[], Awaitable[None]],
    ) -> None:
        """Start timing window, replacing any window still running."""
        self.cancel()
        self.window = window
        self._active_task = asyncio.create_task(self._run(on_ai_evaluation, on_expire))

    def cancel(self) -> None:
        """
        Cancel the running window.

        Called from inside one of the timer's own callbacks it only detaches
        the task, so the callback is not aborted halfway.
        """
        task = self._active_task
        self._active_task = None
        self.window = None
        if task is None or task.done():
            return
        if task is asyncio.current_task():
            return
        task.cancel()

    async def _run(
        self,
        on_ai_evaluation: Callable[[], Awaitable[bool]],
        on_expire: Callable[[], Awaitable[None]],
    ) -> None:
        try:
            await asyncio.sleep(self._human_advantage_seconds)
            if await on_ai_evaluation():
                return
            await asyncio.sleep(self._claim_window_seconds - self._human_advantage_seconds)
            await on_expire()
        except asyncio.CancelledError:
            pass
        except (GameRuleError, GameStateInvariantError, RuntimeError, ValueError):
            logger.exception("claim window callback failed")
