"""
Game controller: one GameState plus the rules around who may do what.

The engine in pinoy_mahjong.logic answers illegal calls with False/None.
MahjongGame checks turn ownership and phase first and turns every refusal
into a GameRuleError, then validates the state after each action.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from pinoy_mahjong.logic.ai_player import AIPlayer
from pinoy_mahjong.logic.ai_player_controller import AIPlayerController
from pinoy_mahjong.logic.call_resolution import is_valid_claim, process_claim, resolve_claims
from pinoy_mahjong.logic.enums import AIAction, ClaimType, TurnPhase
from pinoy_mahjong.logic.exceptions import (
    GameFinishedError,
    InvalidActionError,
    InvalidClaimError,
    InvalidDiscardError,
    InvalidWinError,
    NotYourTurnError,
)
from pinoy_mahjong.logic.rng import AI_DOMAIN, TileRng
from pinoy_mahjong.logic.settings import GameSettings, validate_settings
from pinoy_mahjong.logic.state import Claim, get_player_view
from pinoy_mahjong.logic.turn import (
    advance_turn,
    declare_win,
    discard_tile,
    draw_tile,
    end_in_stalemate,
    initialize_game,
    is_wall_exhausted,
)
from pinoy_mahjong.logic.validation import check_game_state

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pinoy_mahjong.logic.state import GameState
    from pinoy_mahjong.logic.tiles import Tile
    from pinoy_mahjong.logic.types import AIDecision, GameView, SeatConfig

logger = structlog.get_logger()


class MahjongGame:
    def __init__(self, state: GameState, ai_controller: AIPlayerController) -> None:
        self._state = state
        self._ai = ai_controller

    @classmethod
    def create(
        cls,
        seats: Sequence[SeatConfig],
        *,
        seed: str | None = None,
        settings: GameSettings | None = None,
    ) -> MahjongGame:
        """
        Deal a new game.

        Every AI seat gets its own random stream derived from the game seed,
        so a seeded game replays identically.
        """
        settings = settings or GameSettings()
        validate_settings(settings)
        state = initialize_game(seats, seed=seed, settings=settings)
        ai_players = {
            seat: AIPlayer(config.ai_difficulty, rng=TileRng.from_seed(state.seed, AI_DOMAIN + str(seat).encode()))
            for seat, config in enumerate(seats)
            if config.is_ai
        }
        game = cls(state, AIPlayerController(ai_players))
        game._check()
        return game

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def game_id(self) -> str:
        return self._state.id

    @property
    def settings(self) -> GameSettings:
        return self._state.settings

    @property
    def is_finished(self) -> bool:
        return self._state.is_finished

    @property
    def ai_controller(self) -> AIPlayerController:
        return self._ai

    def is_ai_seat(self, seat: int) -> bool:
        return self._ai.is_ai_player(seat)

    def human_seats(self) -> list[int]:
        return [p.seat for p in self._state.players if not self._ai.is_ai_player(p.seat)]

    def _check(self) -> None:
        check_game_state(self._state, strict=self.settings.strict_validation)

    def _ensure_playing(self) -> None:
        if self._state.is_finished:
            raise GameFinishedError(f"game {self._state.id} is finished")

    def _ensure_turn(self, seat: int) -> None:
        if seat != self._state.current_player:
            raise NotYourTurnError(seat=seat, current_player=self._state.current_player)

    @property
    def awaits_wall_decision(self) -> bool:
        """The seat to draw faces an empty wall and the game waits for end_in_stalemate()."""
        state = self._state
        if state.is_finished or self.settings.end_on_wall_exhaustion:
            return False
        return state.phase == TurnPhase.DRAW and is_wall_exhausted(state)

    def draw(self, seat: int) -> Tile | None:
        """
        Draw for the seat to act.

        Returns None when the wall is exhausted: the game then ends in a
        stalemate, or with end_on_wall_exhaustion off it waits for
        end_in_stalemate(). A drawn tile may complete the hand and finish the game.
        """
        self._ensure_playing()
        self._ensure_turn(seat)
        state = self._state
        if state.phase != TurnPhase.DRAW:
            raise InvalidActionError(f"cannot draw during the {state.phase.value} phase")

        if is_wall_exhausted(state):
            if not self.settings.end_on_wall_exhaustion:
                raise InvalidActionError("the wall is exhausted")
            self.end_in_stalemate()
            return None

        tile = draw_tile(state, seat)
        if tile is None:
            if not is_wall_exhausted(state):
                raise InvalidActionError(f"seat {seat} cannot draw")
            # only bonus tiles were left; they stay exposed
            if self.settings.end_on_wall_exhaustion:
                self.end_in_stalemate()
            else:
                self._check()
            return None
        self._check()
        return tile

    def end_in_stalemate(self) -> None:
        """End the game without a winner; only allowed once the wall is empty."""
        self._ensure_playing()
        if not end_in_stalemate(self._state):
            raise InvalidActionError("the wall is not exhausted")
        self._check()

    def discard(self, seat: int, tile_id: str) -> Tile:
        self._ensure_playing()
        self._ensure_turn(seat)
        state = self._state
        if state.phase != TurnPhase.DISCARD:
            raise InvalidDiscardError(f"cannot discard during the {state.phase.value} phase")
        tile = state.players[seat].find_tile(tile_id)
        if tile is None or not discard_tile(state, seat, tile):
            raise InvalidDiscardError(f"tile {tile_id} is not in seat {seat}'s hand")
        self._check()
        return tile

    def claim(self, claim: Claim) -> None:
        """Apply a claim on the live discard immediately."""
        self._ensure_playing()
        if not is_valid_claim(self._state, claim):
            raise InvalidClaimError(f"seat {claim.seat} cannot {claim.type.value} the current discard")
        process_claim(self._state, claim)
        self._check()

    def declare_win(self, seat: int) -> None:
        self._ensure_playing()
        self._ensure_turn(seat)
        if not declare_win(self._state, seat):
            raise InvalidWinError(f"seat {seat} does not hold a winning hand")
        self._check()

    def evaluate_ai_claims(self) -> Claim | None:
        """
        Let the AI seats claim the live discard once the human advantage is over.

        Returns the applied claim, or None when every AI passes.
        """
        if self.is_finished or self._state.phase != TurnPhase.CLAIM_RESOLUTION:
            return None
        best = self._ai.evaluate_claims(self._state)
        if best is None:
            return None
        process_claim(self._state, best)
        self._check()
        return best

    def close_claim_window(self, human_claims: Sequence[Claim] = ()) -> Claim | None:
        """
        Close the claim window.

        Human and AI claims are arbitrated together and the best one applied;
        without a valid claim the turn passes to the next seat.
        """
        self._ensure_playing()
        if self._state.phase != TurnPhase.CLAIM_RESOLUTION:
            raise InvalidActionError("no claim window is open")
        claims = [*human_claims, *self._ai.collect_claims(self._state)]
        applied = resolve_claims(self._state, claims)
        if applied is None:
            advance_turn(self._state)
        self._check()
        return applied

    def play_ai_turn(self) -> list[AIDecision]:
        """
        Play the current seat's turn while it belongs to an AI.

        Stops once the AI has discarded (the claim window is then open), the
        game finished or the wall ran out with no stalemate rule. Returns the decisions taken, in order.
        """
        decisions: list[AIDecision] = []
        state = self._state
        while not state.is_finished and self._ai.is_ai_player(state.current_player):
            seat = state.current_player
            if state.phase not in (TurnPhase.DRAW, TurnPhase.DISCARD):
                break
            if self.awaits_wall_decision:
                break
            decision = self._ai.get_turn_action(seat, state)
            if decision is None:
                break
            decisions.append(decision)

            if decision.action == AIAction.WIN:
                if state.phase == TurnPhase.DISCARD:
                    self.declare_win(seat)
                else:
                    self.claim(Claim(type=ClaimType.WIN, seat=seat))
            elif decision.action == AIAction.DISCARD and decision.tile is not None:
                self.discard(seat, decision.tile.id)
                break
            else:
                self.draw(seat)

        if decisions:
            logger.debug(
                "ai turn played",
                game_id=state.id,
                actions=[d.action for d in decisions],
                phase=state.phase,
            )
        return decisions

    def get_view(self, seat: int) -> GameView:
        return get_player_view(self._state, seat)
