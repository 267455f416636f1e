"""
Game state models for Filipino Mahjong.

GameState is the single mutable aggregate of a game. Engine operations take it
by reference, validate first and then mutate it in place, so an operation
either fully applies or leaves the state untouched.
"""

from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, Field

from pinoy_mahjong.logic.enums import AmbitionType, ClaimType, GameStatus, TurnPhase, Wind
from pinoy_mahjong.logic.melds import Meld
from pinoy_mahjong.logic.settings import GameSettings
from pinoy_mahjong.logic.tiles import Tile
from pinoy_mahjong.logic.types import GameView, MeldView, PlayerView

NUM_PLAYERS = 4


class Player(BaseModel):
    """A seat at the table and everything it owns."""

    seat: int = Field(ge=0, lt=NUM_PLAYERS)
    name: str
    is_ai: bool = False

    hand: list[Tile] = Field(default_factory=list)
    melds: list[Meld] = Field(default_factory=list)
    flowers: list[Tile] = Field(default_factory=list)  # bonus tiles set aside, never re-enter play
    discards: list[Tile] = Field(default_factory=list)  # append-only history
    is_dealer: bool = False

    def find_tile(self, tile_id: str) -> Tile | None:
        """Return the tile with this id from the hand, or None."""
        return next((t for t in self.hand if t.id == tile_id), None)

    def remove_tiles(self, tiles: list[Tile]) -> None:
        """Remove exactly these tiles (by id) from the hand."""
        ids = {t.id for t in tiles}
        self.hand = [t for t in self.hand if t.id not in ids]

    @property
    def meld_tile_count(self) -> int:
        return sum(len(m.tiles) for m in self.melds)


class ClaimWindow(BaseModel):
    """Timing metadata for the period after a discard; enforced by the caller."""

    model_config = ConfigDict(frozen=True)

    started_at: float
    duration_seconds: float
    human_advantage_seconds: float


class AmbitionRecord(BaseModel):
    """One entry in the append-only ambition ledger."""

    model_config = ConfigDict(frozen=True)

    id: str
    seat: int
    type: AmbitionType
    payout: float
    is_instant: bool
    timestamp: float


class WinningHand(BaseModel):
    """Snapshot of the winner's tiles at the moment of the win."""

    model_config = ConfigDict(frozen=True)

    tiles: tuple[Tile, ...]
    melds: tuple[Meld, ...]
    flowers: tuple[Tile, ...]


class Claim(BaseModel):
    """
    A claim on the live discard.

    For chow, `tiles` may carry the three chosen tiles (discard included) when
    the claimant picked one of several runs; otherwise the first run is used.
    """

    model_config = ConfigDict(frozen=True)

    type: ClaimType
    seat: int = Field(ge=0, lt=NUM_PLAYERS)
    tiles: tuple[Tile, ...] | None = None


class GameState(BaseModel):
    """
    The whole table: players, wall, discards, turn tracking and results.
    """

    id: str = Field(default_factory=lambda: f"game-{uuid.uuid4().hex}")
    seed: str = ""
    rng_version: str = ""  # generator the seed was expanded with; a seed only replays under the same one
    settings: GameSettings = Field(default_factory=GameSettings)

    players: list[Player] = Field(default_factory=list)

    # turn tracking
    current_player: int = 0
    dealer: int = 0
    round: int = 1
    wind: Wind = Wind.EAST
    phase: TurnPhase = TurnPhase.DRAW
    has_drawn_this_turn: bool = False  # claims are closed once the active seat has drawn
    skipped_player: int | None = None  # one-shot rotation skip after an out-of-turn claim

    # tiles
    wall: list[Tile] = Field(default_factory=list)  # draw pile, taken from the front
    discard_pile: list[Tile] = Field(default_factory=list)
    last_discard: Tile | None = None
    last_discard_player: int | None = None
    last_drawn_tile: Tile | None = None  # drawn or claimed this turn; the winning tile of a declared win
    claim_window: ClaimWindow | None = None

    # scoring and results
    ambitions: list[AmbitionRecord] = Field(default_factory=list)
    scores: list[float] = Field(default_factory=lambda: [0.0] * NUM_PLAYERS)
    status: GameStatus = GameStatus.PLAYING
    winner: int | None = None
    win_type: str | None = None
    winning_tile: Tile | None = None
    winning_hand: WinningHand | None = None

    @property
    def is_finished(self) -> bool:
        return self.status == GameStatus.FINISHED


def get_player_view(state: GameState, seat: int) -> GameView:
    """
    Return the table as one seat is allowed to see it.

    Visible to everyone: melds, flowers, discards, hand sizes, wall count,
    turn and result fields. Only the viewing seat sees its own hand.
    """
    players_view = [
        PlayerView(
            seat=p.seat,
            name=p.name,
            is_ai=p.is_ai,
            is_dealer=p.is_dealer,
            score=state.scores[p.seat],
            hand_size=len(p.hand),
            hand=list(p.hand) if p.seat == seat else None,
            melds=[
                MeldView(
                    type=m.type,
                    tiles=list(m.tiles),
                    is_concealed=m.is_concealed,
                    claimed_from=m.claimed_from,
                )
                for m in p.melds
            ],
            flowers=list(p.flowers),
            discards=list(p.discards),
        )
        for p in state.players
    ]

    return GameView(
        game_id=state.id,
        seat=seat,
        current_player=state.current_player,
        dealer=state.dealer,
        phase=state.phase,
        status=state.status,
        wall_count=len(state.wall),
        last_discard=state.last_discard,
        last_discard_player=state.last_discard_player,
        players=players_view,
        winner=state.winner,
        win_type=state.win_type,
    )
