"""
Wall creation, dealing and drawing.

The wall is one shuffled sequence of all 144 tiles, flowers and seasons
included. Tiles are drawn from the front; a bonus tile drawn anywhere (deal,
turn draw, kong replacement) is set aside in the player's flowers and the draw
continues until a regular tile arrives or the wall runs out.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from pinoy_mahjong.logic.rng import TileRng
from pinoy_mahjong.logic.tiles import NUM_TILES, create_tile_set, shuffle_tiles

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pinoy_mahjong.logic.state import GameState, Player
    from pinoy_mahjong.logic.tiles import Tile

logger = structlog.get_logger()

INITIAL_HAND_SIZE = 16
DEAL_ROUNDS = 4
TILES_PER_DEAL = 4


def create_wall(seed: str) -> list[Tile]:
    """Build the shuffled wall for a game seed."""
    return shuffle_tiles(create_tile_set(), TileRng.from_seed(seed))


def create_wall_from_tiles(tiles: Sequence[Tile]) -> list[Tile]:
    """
    Build a wall from an explicit tile order.

    The order is kept as given. Raises ValueError unless the tiles are a full
    set of 144 distinct ids.
    """
    if len(tiles) != NUM_TILES:
        raise ValueError(f"wall needs exactly {NUM_TILES} tiles, got {len(tiles)}")
    if len({t.id for t in tiles}) != NUM_TILES:
        raise ValueError("wall tiles must have unique ids")
    return list(tiles)


def draw_from_wall(state: GameState, player: Player) -> Tile | None:
    """
    Draw the next regular tile for player, exposing bonus tiles on the way.

    Returns None when the wall empties before a regular tile is found; any
    bonus tiles drawn until then stay with the player.
    """
    while state.wall:
        tile = state.wall.pop(0)
        if tile.is_bonus:
            player.flowers.append(tile)
            logger.debug("bonus tile exposed", seat=player.seat, tile=tile.id)
            continue
        player.hand.append(tile)
        return tile
    return None


def replace_bonus_tiles(state: GameState, player: Player) -> None:
    """
    Set aside every bonus tile in hand and draw until 16 regular tiles are held.

    Stops early if the wall runs out.
    """
    bonus = [t for t in player.hand if t.is_bonus]
    if bonus:
        player.flowers.extend(bonus)
        player.remove_tiles(bonus)

    while len(player.hand) < INITIAL_HAND_SIZE:
        if draw_from_wall(state, player) is None:
            break


def deal_initial_hands(state: GameState) -> None:
    """
    Deal 16 tiles to each seat and replace bonus tiles.

    Four rounds of four tiles go round the table starting at the dealer, then
    each seat in the same order swaps its bonus tiles for regular ones.
    """
    num_players = len(state.players)
    order = [(state.dealer + offset) % num_players for offset in range(num_players)]

    for _ in range(DEAL_ROUNDS):
        for seat in order:
            dealt, state.wall = state.wall[:TILES_PER_DEAL], state.wall[TILES_PER_DEAL:]
            state.players[seat].hand.extend(dealt)

    for seat in order:
        replace_bonus_tiles(state, state.players[seat])
