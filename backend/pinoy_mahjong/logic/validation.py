"""
Consistency checks for a GameState.

validate_game_state() only reports; check_game_state() decides what a report
means: log-and-continue for live games, fail fast in strict mode.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

import structlog

from pinoy_mahjong.logic.enums import TurnPhase
from pinoy_mahjong.logic.exceptions import GameStateInvariantError
from pinoy_mahjong.logic.state import NUM_PLAYERS
from pinoy_mahjong.logic.tiles import NUM_TILES
from pinoy_mahjong.logic.turn import effective_hand_size
from pinoy_mahjong.logic.wall import INITIAL_HAND_SIZE

if TYPE_CHECKING:
    from pinoy_mahjong.logic.state import GameState
    from pinoy_mahjong.logic.tiles import Tile

logger = structlog.get_logger()


def all_tiles_in_play(state: GameState) -> list[Tile]:
    """Every tile the state accounts for: wall, discard pile, hands, flowers and melds."""
    tiles: list[Tile] = [*state.wall, *state.discard_pile]
    for player in state.players:
        tiles.extend(player.hand)
        tiles.extend(player.flowers)
        for meld in player.melds:
            tiles.extend(meld.tiles)
    return tiles


def validate_game_state(state: GameState) -> list[str]:
    """
    Return human-readable diagnostics; an empty list means the state is sound.

    Checks tile conservation, id uniqueness, bonus tiles in hands, a single
    dealer and per-seat hand sizes (skipped once the game is finished).
    """
    errors: list[str] = []

    if len(state.players) != NUM_PLAYERS:
        errors.append(f"{len(state.players)} players (expected {NUM_PLAYERS})")

    tiles = all_tiles_in_play(state)
    if len(tiles) != NUM_TILES:
        errors.append(f"Total tiles: {len(tiles)} (expected {NUM_TILES})")

    duplicates = sorted(tile_id for tile_id, count in Counter(t.id for t in tiles).items() if count > 1)
    if duplicates:
        errors.append(f"Duplicate tile ids: {', '.join(duplicates)}")

    dealers = [p.seat for p in state.players if p.is_dealer]
    if len(dealers) != 1 or dealers[0] != state.dealer:
        errors.append(f"Dealer flags {dealers} do not match dealer seat {state.dealer}")

    for player in state.players:
        bonus = [t.id for t in player.hand if t.is_bonus]
        if bonus:
            errors.append(f"Player {player.name} holds bonus tiles in hand: {', '.join(bonus)}")

    if state.is_finished:
        return errors

    for player in state.players:
        is_active = player.seat == state.current_player and state.phase == TurnPhase.DISCARD
        expected = INITIAL_HAND_SIZE + 1 if is_active else INITIAL_HAND_SIZE
        size = effective_hand_size(player)
        if size != expected:
            errors.append(f"Player {player.name} has {size} tiles counting melds (expected {expected})")

    return errors


def check_game_state(state: GameState, *, strict: bool = False) -> list[str]:
    """
    Validate state, logging any problems.

    In strict mode problems raise GameStateInvariantError instead of being
    returned.
    """
    errors = validate_game_state(state)
    if errors:
        logger.warning("game state validation failed", game_id=state.id, errors=errors)
        if strict:
            raise GameStateInvariantError(errors)
    return errors
