"""
Async game service: every live game keyed by id, one lock per game.

All mutations of a game (player actions, AI turns and claim timer callbacks)
run under that game's asyncio.Lock, so a game only ever sees one action at a
time. After each action the service plays AI turns until a human has to act
and keeps a ClaimWindowTimer running while a claim window is open.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import structlog

from pinoy_mahjong.logic.enums import ClaimType, GameAction, TurnPhase
from pinoy_mahjong.logic.exceptions import GameNotFoundError, InvalidActionError, InvalidClaimError
from pinoy_mahjong.logic.settings import GameSettings
from pinoy_mahjong.logic.state import Claim
from pinoy_mahjong.session.claim_timer import ClaimWindowTimer
from pinoy_mahjong.session.game import MahjongGame
from pinoy_mahjong.shared.logging import bind_game_context
from pinoy_mahjong.shared.settings import EngineSettings

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pinoy_mahjong.logic.tiles import Tile
    from pinoy_mahjong.logic.types import GameView, SeatConfig

logger = structlog.get_logger()


def game_settings_from(settings: EngineSettings) -> GameSettings:
    """Build per-game rules from the environment configuration."""
    return GameSettings(
        claim_window_seconds=settings.claim_window_seconds,
        human_advantage_seconds=settings.human_advantage_seconds,
        strict_validation=settings.strict_validation,
        end_on_wall_exhaustion=settings.end_on_wall_exhaustion,
        stake=settings.stake,
    )


class MahjongGameService:
    def __init__(self, settings: EngineSettings | None = None) -> None:
        self._settings = settings or EngineSettings()
        self._games: dict[str, MahjongGame] = {}
        self._game_locks: dict[str, asyncio.Lock] = {}  # game_id -> Lock
        self._claim_timers: dict[str, ClaimWindowTimer] = {}
        self._passes: dict[str, set[int]] = {}  # game_id -> human seats that passed on the live discard

    def _get_game_lock(self, game_id: str) -> asyncio.Lock | None:
        return self._game_locks.get(game_id)

    def get_game(self, game_id: str) -> MahjongGame | None:
        return self._games.get(game_id)

    @property
    def game_count(self) -> int:
        return len(self._games)

    def get_view(self, game_id: str, seat: int) -> GameView:
        game = self._games.get(game_id)
        if game is None:
            raise GameNotFoundError(game_id)
        return game.get_view(seat)

    async def start_game(
        self,
        seats: Sequence[SeatConfig],
        *,
        seed: str | None = None,
        settings: GameSettings | None = None,
    ) -> str:
        """Create and register a game, playing AI turns up to the first human decision."""
        if len(self._games) >= self._settings.max_games:
            raise InvalidActionError(f"game limit reached ({self._settings.max_games})")

        game = MahjongGame.create(seats, seed=seed, settings=settings or game_settings_from(self._settings))
        game_id = game.game_id
        self._games[game_id] = game
        self._game_locks[game_id] = asyncio.Lock()
        self._claim_timers[game_id] = ClaimWindowTimer.from_settings(game.settings)
        self._passes[game_id] = set()

        bind_game_context(game_id)
        logger.info(
            "game started",
            dealer=game.state.dealer,
            rng_version=game.state.rng_version,
            ai_seats=sorted(game.ai_controller.ai_player_seats),
        )
        async with self._game_locks[game_id]:
            self._advance(game)
        return game_id

    async def handle_action(
        self,
        game_id: str,
        seat: int,
        action: GameAction,
        data: dict[str, Any] | None = None,
    ) -> GameView:
        """
        Apply one player action and return the acting seat's view.

        Rule violations surface as GameRuleError subclasses and leave the game
        unchanged.
        """
        game = self._games.get(game_id)
        lock = self._get_game_lock(game_id)
        if game is None or lock is None:
            raise GameNotFoundError(game_id)

        data = data or {}
        bind_game_context(game_id, seat=seat)
        async with lock:
            if action == GameAction.DRAW:
                game.draw(seat)
            elif action == GameAction.DISCARD:
                game.discard(seat, str(data.get("tile_id", "")))
            elif action == GameAction.CLAIM:
                claim = self._build_claim(game, seat, data)
                game.claim(claim)
                self._claim_timers[game_id].cancel()
            elif action == GameAction.DECLARE_WIN:
                game.declare_win(seat)
            elif action == GameAction.PASS:
                self._record_pass(game, seat)
            else:
                raise InvalidActionError(f"unknown action {action!r}")

            logger.info("action handled", action=action, phase=game.state.phase)
            self._advance(game)
            return game.get_view(seat)

    def _build_claim(self, game: MahjongGame, seat: int, data: dict[str, Any]) -> Claim:
        """Turn request data into a Claim; chow runs are given as tile ids."""
        try:
            claim_type = ClaimType(data.get("type"))
        except ValueError as e:
            raise InvalidClaimError(f"unknown claim type {data.get('type')!r}") from e

        tile_ids = data.get("tile_ids")
        if not tile_ids:
            return Claim(type=claim_type, seat=seat)

        state = game.state
        available: dict[str, Tile] = {t.id: t for t in state.players[seat].hand}
        if state.last_discard is not None:
            available[state.last_discard.id] = state.last_discard
        missing = [tile_id for tile_id in tile_ids if tile_id not in available]
        if missing:
            raise InvalidClaimError(f"tiles not available to seat {seat}: {', '.join(missing)}")
        return Claim(type=claim_type, seat=seat, tiles=tuple(available[tile_id] for tile_id in tile_ids))

    def _record_pass(self, game: MahjongGame, seat: int) -> None:
        """Record a human pass; once every human who could claim has passed the window closes."""
        state = game.state
        if state.phase != TurnPhase.CLAIM_RESOLUTION:
            raise InvalidActionError("no claim window is open")
        if seat == state.last_discard_player:
            raise InvalidActionError("the discarder cannot pass on their own discard")

        passes = self._passes[game.game_id]
        passes.add(seat)
        if passes.issuperset(self._eligible_humans(game)):
            self._claim_timers[game.game_id].cancel()
            game.close_claim_window()

    def _eligible_humans(self, game: MahjongGame) -> set[int]:
        return {seat for seat in game.human_seats() if seat != game.state.last_discard_player}

    def _advance(self, game: MahjongGame) -> None:
        """
        Play AI turns until a human must act, starting a claim timer when a window opens.

        Also stops when the wall ran out and the game waits for end_in_stalemate().
        """
        timer = self._claim_timers[game.game_id]
        while not game.is_finished:
            state = game.state
            if state.phase == TurnPhase.CLAIM_RESOLUTION:
                if not self._eligible_humans(game):
                    # only AI seats can claim: no timing needed
                    game.close_claim_window()
                    continue
                if not (timer.active and timer.window == state.claim_window):
                    self._start_claim_timer(game)
                return
            if game.awaits_wall_decision:
                logger.info("wall exhausted, waiting for stalemate", seat=state.current_player)
                return
            if not game.is_ai_seat(state.current_player):
                return
            game.play_ai_turn()

        timer.cancel()
        logger.info("game finished", winner=game.state.winner, win_type=game.state.win_type, scores=game.state.scores)

    def _start_claim_timer(self, game: MahjongGame) -> None:
        game_id = game.game_id
        self._passes[game_id] = set()
        self._claim_timers[game_id].start(
            game.state.claim_window,
            on_ai_evaluation=lambda gid=game_id: self._on_human_advantage_expired(gid),
            on_expire=lambda gid=game_id: self._on_claim_window_expired(gid),
        )

    async def _on_human_advantage_expired(self, game_id: str) -> bool:
        lock = self._get_game_lock(game_id)
        if lock is None:
            return True
        async with lock:
            game = self._games.get(game_id)
            if game is None or game.state.phase != TurnPhase.CLAIM_RESOLUTION:
                return True
            bind_game_context(game_id)
            claim = game.evaluate_ai_claims()
            if claim is None:
                return False
            logger.info("ai claim applied", seat=claim.seat, claim=claim.type)
            self._advance(game)
            return True

    async def _on_claim_window_expired(self, game_id: str) -> None:
        lock = self._get_game_lock(game_id)
        if lock is None:
            return
        async with lock:
            game = self._games.get(game_id)
            if game is None or game.state.phase != TurnPhase.CLAIM_RESOLUTION:
                return
            bind_game_context(game_id)
            self._claim_timers[game_id].cancel()
            game.close_claim_window()
            self._advance(game)

    async def end_in_stalemate(self, game_id: str) -> None:
        """End a game whose wall ran out, for games played without the stalemate rule."""
        game = self._games.get(game_id)
        lock = self._get_game_lock(game_id)
        if game is None or lock is None:
            raise GameNotFoundError(game_id)
        bind_game_context(game_id)
        async with lock:
            game.end_in_stalemate()
            self._advance(game)

    async def close_game(self, game_id: str) -> None:
        """Stop the game's timer and forget it."""
        lock = self._get_game_lock(game_id)
        if lock is None:
            return
        async with lock:
            timer = self._claim_timers.pop(game_id, None)
            if timer is not None:
                timer.cancel()
            self._games.pop(game_id, None)
            self._passes.pop(game_id, None)
            self._game_locks.pop(game_id, None)
        logger.info("game closed", game_id=game_id)
