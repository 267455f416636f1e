"""
AI player decision making for Filipino Mahjong.

Discards are chosen by a keep-score heuristic: every tile in hand is scored
for how useful it is to keep and the lowest-scoring tile goes. When the hand is
close to winning the scoring switches to a conservative mode that protects
near-complete groups.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from pinoy_mahjong.logic.call_resolution import is_valid_claim
from pinoy_mahjong.logic.enums import AIAction, AIDifficulty, ClaimType, TurnPhase
from pinoy_mahjong.logic.melds import TILES_FOR_SET, get_all_possible_sequences
from pinoy_mahjong.logic.state import Claim
from pinoy_mahjong.logic.tiles import (
    MIDDLE_VALUES,
    NUMBERED_SUITS,
    NumberedTile,
    is_honor,
    is_terminal,
    tiles_match,
)
from pinoy_mahjong.logic.types import AIDecision
from pinoy_mahjong.logic.win import SETS_IN_STANDARD_HAND, TILES_FOR_PAIR, is_winning_hand

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pinoy_mahjong.logic.rng import TileRng
    from pinoy_mahjong.logic.state import GameState, Player
    from pinoy_mahjong.logic.tiles import Tile

CONSERVATIVE_THRESHOLD = 2  # tiles away from a win at which discards turn conservative

HONOR_BASE_SCORE = 10
SUITED_BASE_SCORE = 20
TRIPLET_KEEP_BONUS = 50
PAIR_KEEP_BONUS = 25
BOTH_NEIGHBOURS_BONUS = 30
NEIGHBOUR_BONUS = 15
GAP_NEIGHBOUR_BONUS = 10
TERMINAL_PENALTY = 5
MIDDLE_BONUS = 5
DISCARDED_COPY_PENALTY = 5

CONSERVATIVE_BASE_SCORE = 50
PAIRS_PARTNER_BONUS = 100
PAIRS_ISOLATED_PENALTY = 20
STANDARD_TRIPLET_BONUS = 150
STANDARD_PAIR_BONUS = 75
SEQUENCE_WEIGHT = 2

SIETE_PARES_PAIRS = 7


class DifficultyProfile(BaseModel):
    """Per-difficulty tuning: chance of a random discard instead of the scored one."""

    model_config = ConfigDict(frozen=True)

    discard_randomness: float


DIFFICULTY_PROFILES: dict[AIDifficulty, DifficultyProfile] = {
    AIDifficulty.EASY: DifficultyProfile(discard_randomness=0.3),
    AIDifficulty.MEDIUM: DifficultyProfile(discard_randomness=0.2),
    AIDifficulty.HARD: DifficultyProfile(discard_randomness=0.1),
    AIDifficulty.EXPERT: DifficultyProfile(discard_randomness=0.05),
}

RANDOMNESS_RESOLUTION = 1000


class WinningPotential(BaseModel):
    """Estimated shortfall to a win and the strategy that gives it."""

    model_config = ConfigDict(frozen=True)

    tiles_away: int
    strategy: str  # "pairs" or "standard"


def sequence_potential(tile: Tile, others: Sequence[Tile]) -> int:
    """
    Score how well tile fits runs with the other tiles of its suit.

    Both neighbours present adds 30, any neighbour 15, a one-gap neighbour 10;
    the bonuses stack.
    """
    if not isinstance(tile, NumberedTile):
        return 0
    values = {t.value for t in others if isinstance(t, NumberedTile) and t.suit == tile.suit}
    lower, higher = tile.value - 1 in values, tile.value + 1 in values
    potential = 0
    if lower and higher:
        potential += BOTH_NEIGHBOURS_BONUS
    if lower or higher:
        potential += NEIGHBOUR_BONUS
    if tile.value - 2 in values or tile.value + 2 in values:
        potential += GAP_NEIGHBOUR_BONUS
    return potential


def _kind_counts(hand: Sequence[Tile]) -> Counter:
    return Counter(t.kind for t in hand)


def pairs_shortfall(hand: Sequence[Tile]) -> int:
    """Estimate tiles needed for Siete Pares; four of a kind counts as two pairs."""
    pairs = singles = triples = 0
    for count in _kind_counts(hand).values():
        if count == 1:
            singles += 1
        elif count == TILES_FOR_PAIR:
            pairs += 1
        elif count == TILES_FOR_SET:
            triples += 1
        else:
            pairs += 2
    needed_pairs = max(0, SIETE_PARES_PAIRS - pairs)
    needed_triples = max(0, 1 - triples)
    return max(0, needed_pairs + needed_triples - min(singles, needed_pairs))


def _count_runs(values: list[int]) -> int:
    runs = 0
    i = 0
    while i <= len(values) - TILES_FOR_SET:
        if values[i + 1] == values[i] + 1 and values[i + 2] == values[i] + 2:
            runs += 1
            i += TILES_FOR_SET
        else:
            i += 1
    return runs


def standard_shortfall(hand: Sequence[Tile], meld_count: int) -> int:
    """Estimate missing sets and pair for a standard win."""
    sets = pairs = 0
    for count in _kind_counts(hand).values():
        if count >= TILES_FOR_SET:
            sets += 1
        elif count == TILES_FOR_PAIR:
            pairs += 1
    for suit in NUMBERED_SUITS:
        values = sorted(t.value for t in hand if isinstance(t, NumberedTile) and t.suit == suit)
        sets += _count_runs(values)
    return max(0, SETS_IN_STANDARD_HAND - meld_count - sets) + max(0, 1 - pairs)


def analyze_winning_potential(player: Player) -> WinningPotential:
    """Take the closer of the seven-pairs and five-sets estimates."""
    pairs_away = pairs_shortfall(player.hand)
    standard_away = standard_shortfall(player.hand, len(player.melds))
    if pairs_away <= standard_away:
        return WinningPotential(tiles_away=pairs_away, strategy="pairs")
    return WinningPotential(tiles_away=standard_away, strategy="standard")


def keep_score(tile: Tile, player: Player, state: GameState) -> int:
    """Score how valuable tile is to keep; the lowest score is discarded."""
    others = [t for t in player.hand if t.id != tile.id]
    score = HONOR_BASE_SCORE if is_honor(tile) else SUITED_BASE_SCORE

    matches = sum(1 for t in others if tiles_match(t, tile))
    if matches >= TILES_FOR_PAIR:
        score += TRIPLET_KEEP_BONUS
    elif matches == 1:
        score += PAIR_KEEP_BONUS

    score += sequence_potential(tile, others)

    if is_terminal(tile):
        score -= TERMINAL_PENALTY
    if isinstance(tile, NumberedTile) and tile.value in MIDDLE_VALUES:
        score += MIDDLE_BONUS

    discarded = sum(1 for p in state.players for t in p.discards if tiles_match(t, tile))
    score -= discarded * DISCARDED_COPY_PENALTY
    return score


def conservative_keep_score(tile: Tile, player: Player, potential: WinningPotential) -> int:
    """Keep-score used near a win: breaking a near-complete group costs heavily."""
    others = [t for t in player.hand if t.id != tile.id]
    matches = sum(1 for t in others if tiles_match(t, tile))
    score = CONSERVATIVE_BASE_SCORE

    if potential.strategy == "pairs":
        if matches == 1:
            score += PAIRS_PARTNER_BONUS
        elif matches == 0:
            score -= PAIRS_ISOLATED_PENALTY
        return score

    score += sequence_potential(tile, others) * SEQUENCE_WEIGHT
    if matches >= TILES_FOR_PAIR:
        score += STANDARD_TRIPLET_BONUS
    elif matches == 1:
        score += STANDARD_PAIR_BONUS
    return score


class AIPlayer:
    """
    Heuristic AI player.

    Claim decisions (should_call_*) follow the always-claim policy: win, kong
    and pung whenever legal, chow whenever a run exists. Pass a TileRng to let
    the difficulty's randomness pick an occasional random discard.
    """

    def __init__(self, difficulty: AIDifficulty = AIDifficulty.EXPERT, rng: TileRng | None = None) -> None:
        self.difficulty = difficulty
        self.profile = DIFFICULTY_PROFILES[difficulty]
        self._rng = rng

    def should_call_win(self, state: GameState, seat: int) -> bool:
        return is_valid_claim(state, Claim(type=ClaimType.WIN, seat=seat))

    def should_call_kong(self, state: GameState, seat: int) -> bool:
        return is_valid_claim(state, Claim(type=ClaimType.KONG, seat=seat))

    def should_call_pung(self, state: GameState, seat: int) -> bool:
        return is_valid_claim(state, Claim(type=ClaimType.PUNG, seat=seat))

    def should_call_chow(self, state: GameState, seat: int) -> list[Tile] | None:
        """Return the run to claim with (discard included), or None to pass."""
        discard = state.last_discard
        if discard is None or not is_valid_claim(state, Claim(type=ClaimType.CHOW, seat=seat)):
            return None
        options = get_all_possible_sequences(state.players[seat].hand, discard)
        return options[0] if options else None

    def select_discard(self, state: GameState, seat: int) -> Tile:
        """Pick the tile with the lowest keep-score (first one on ties)."""
        player = state.players[seat]
        if not player.hand:
            raise ValueError("cannot select discard from empty hand")

        if self._rng is not None:
            roll = self._rng.below(RANDOMNESS_RESOLUTION)
            if roll < self.profile.discard_randomness * RANDOMNESS_RESOLUTION:
                return player.hand[self._rng.below(len(player.hand))]

        potential = analyze_winning_potential(player)
        if potential.tiles_away <= CONSERVATIVE_THRESHOLD:
            return min(player.hand, key=lambda t: conservative_keep_score(t, player, potential))
        return min(player.hand, key=lambda t: keep_score(t, player, state))

    def make_decision(self, state: GameState, seat: int) -> AIDecision:
        """
        Decide the seat's next action.

        win: the current hand wins in the seat's discard phase, or the live
        discard can be claimed for a win; discard: it is the seat's discard
        phase; draw: anything else.
        """
        player = state.players[seat]
        own_discard_phase = state.phase == TurnPhase.DISCARD and state.current_player == seat

        if own_discard_phase:
            if is_winning_hand(player.hand, player.melds, player.flowers).is_valid:
                return AIDecision(action=AIAction.WIN)
            return AIDecision(action=AIAction.DISCARD, tile=self.select_discard(state, seat))

        if self.should_call_win(state, seat):
            return AIDecision(action=AIAction.WIN, tile=state.last_discard)

        return AIDecision(action=AIAction.DRAW)
