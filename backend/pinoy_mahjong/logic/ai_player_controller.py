"""
AI player controller as a pure decision-maker.

Provides AI player identification, turn decisions and the centralized claim
evaluation run when a claim window's human advantage expires. Orchestration is
handled by MahjongGame.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pinoy_mahjong.logic.call_resolution import pick_best_claim
from pinoy_mahjong.logic.enums import ClaimType
from pinoy_mahjong.logic.state import Claim

if TYPE_CHECKING:
    from pinoy_mahjong.logic.ai_player import AIPlayer
    from pinoy_mahjong.logic.state import GameState
    from pinoy_mahjong.logic.types import AIDecision


class AIPlayerController:
    """
    Decision-maker for AI players.

    Provides methods to check AI player identity and get AI player decisions
    for turn actions and claims. Does not orchestrate game flow.
    """

    def __init__(self, ai_players: dict[int, AIPlayer]) -> None:
        self._ai_players = ai_players

    def _get_ai_player(self, seat: int) -> AIPlayer | None:
        return self._ai_players.get(seat)

    def is_ai_player(self, seat: int) -> bool:
        """Check if a seat is occupied by an AI player."""
        return seat in self._ai_players

    def add_ai_player(self, seat: int, ai_player: AIPlayer) -> None:
        """Register an AI player at a seat."""
        self._ai_players[seat] = ai_player

    def remove_ai_player(self, seat: int) -> None:
        self._ai_players.pop(seat, None)

    @property
    def ai_player_seats(self) -> set[int]:
        """Return the set of seats occupied by AI players."""
        return set(self._ai_players.keys())

    def get_turn_action(self, seat: int, state: GameState) -> AIDecision | None:
        """
        Get the AI player's turn decision.

        Returns None if seat is not an AI player.
        """
        ai_player = self._get_ai_player(seat)
        if ai_player is None:
            return None
        return ai_player.make_decision(state, seat)

    def get_claim(self, seat: int, state: GameState) -> Claim | None:
        """
        Get the highest-priority claim the AI player wants on the live discard.

        Returns None if the seat is not an AI player or it passes.
        """
        ai_player = self._get_ai_player(seat)
        if ai_player is None:
            return None

        if ai_player.should_call_win(state, seat):
            return Claim(type=ClaimType.WIN, seat=seat)
        if ai_player.should_call_kong(state, seat):
            return Claim(type=ClaimType.KONG, seat=seat)
        if ai_player.should_call_pung(state, seat):
            return Claim(type=ClaimType.PUNG, seat=seat)
        run = ai_player.should_call_chow(state, seat)
        if run is not None:
            return Claim(type=ClaimType.CHOW, seat=seat, tiles=tuple(run))
        return None

    def collect_claims(self, state: GameState) -> list[Claim]:
        """One claim per AI seat that wants the live discard, in seat order."""
        claims = (self.get_claim(seat, state) for seat in sorted(self._ai_players))
        return [c for c in claims if c is not None]

    def evaluate_claims(self, state: GameState) -> Claim | None:
        """Return the AI claim that would take the discard, or None if every AI passes."""
        return pick_best_claim(state, self.collect_claims(state))
