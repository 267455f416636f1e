"""
Pydantic models for data that crosses component boundaries.

Contains seat configuration, AI decisions, win evaluation results, and the
per-seat views handed to clients.
"""

from pydantic import BaseModel, ConfigDict, Field

from pinoy_mahjong.logic.enums import (
    AIAction,
    AIDifficulty,
    AmbitionType,
    GameStatus,
    HandType,
    MeldType,
    TurnPhase,
)
from pinoy_mahjong.logic.tiles import Tile


class SeatConfig(BaseModel):
    """Configuration for a single seat in a game."""

    name: str
    is_ai: bool = False
    ai_difficulty: AIDifficulty = AIDifficulty.MEDIUM


class WinCondition(BaseModel):
    """
    Result of evaluating a hand for a win.

    `breakdown` maps a display label ("Basic Win", "Siete Pares", ...) to the
    payout it contributed; `total_payout` is their sum.
    """

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    hand_type: HandType = HandType.NONE
    ambitions: tuple[AmbitionType, ...] = ()
    total_payout: float = 0.0
    breakdown: dict[str, float] = Field(default_factory=dict)


INVALID_WIN = WinCondition(is_valid=False)


class AIDecision(BaseModel):
    """AI player's chosen action for its turn."""

    model_config = ConfigDict(frozen=True)

    action: AIAction
    tile: Tile | None = None


class MeldView(BaseModel):
    type: MeldType
    tiles: list[Tile]
    is_concealed: bool
    claimed_from: int | None = None


class PlayerView(BaseModel):
    """
    Player information visible to a given seat.

    `hand` is only populated for the viewing seat; everyone sees `hand_size`.
    """

    seat: int
    name: str
    is_ai: bool
    is_dealer: bool
    score: float
    hand_size: int
    hand: list[Tile] | None = None
    melds: list[MeldView]
    flowers: list[Tile]
    discards: list[Tile]


class GameView(BaseModel):
    """Complete game view for a specific seat."""

    game_id: str
    seat: int
    current_player: int
    dealer: int
    phase: TurnPhase
    status: GameStatus
    wall_count: int
    last_discard: Tile | None = None
    last_discard_player: int | None = None
    players: list[PlayerView]
    winner: int | None = None
    win_type: str | None = None
