"""
Meld model and meld-shape helpers (chow, pung, kong).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, model_validator

from pinoy_mahjong.logic.enums import KONG_MELD_TYPES, MeldType
from pinoy_mahjong.logic.tiles import NumberedTile, Tile, tiles_match

if TYPE_CHECKING:
    from collections.abc import Sequence

TILES_FOR_SET = 3
TILES_FOR_QUAD = 4

# tiles a claimant must already hold for each claim
TILES_FOR_PUNG_CLAIM = 2
TILES_FOR_KONG_CLAIM = 3


def is_valid_sequence(tiles: Sequence[Tile]) -> bool:
    """Check if tiles are three consecutive values of one numbered suit."""
    if len(tiles) != TILES_FOR_SET:
        return False
    if not all(isinstance(t, NumberedTile) for t in tiles):
        return False
    if len({t.suit for t in tiles}) != 1:
        return False
    values = sorted(t.value for t in tiles)  # type: ignore[union-attr]
    return values[1] == values[0] + 1 and values[2] == values[1] + 1


def _all_match(tiles: Sequence[Tile]) -> bool:
    return all(tiles_match(t, tiles[0]) for t in tiles[1:])


def is_valid_triplet(tiles: Sequence[Tile]) -> bool:
    """Check if tiles are three matching tiles."""
    return len(tiles) == TILES_FOR_SET and _all_match(tiles)


def is_valid_quad(tiles: Sequence[Tile]) -> bool:
    """Check if tiles are four matching tiles."""
    return len(tiles) == TILES_FOR_QUAD and _all_match(tiles)


class Meld(BaseModel):
    """
    An exposed or concealed set owned by one player.

    The tile list must satisfy the shape of the meld type; construction fails
    otherwise.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    type: MeldType
    tiles: tuple[Tile, ...]
    is_concealed: bool = False
    claimed_from: int | None = None  # seat of the discarder

    @model_validator(mode="after")
    def _check_shape(self) -> Meld:
        if any(t.is_bonus for t in self.tiles):
            raise ValueError("bonus tiles cannot form a meld")
        if self.type == MeldType.CHOW:
            valid = is_valid_sequence(self.tiles)
        elif self.type == MeldType.PUNG:
            valid = is_valid_triplet(self.tiles)
        else:
            valid = is_valid_quad(self.tiles)
        if not valid:
            raise ValueError(f"tiles do not form a {self.type.value}")
        return self

    @property
    def is_kong(self) -> bool:
        return self.type in KONG_MELD_TYPES


def count_matching(hand: Sequence[Tile], tile: Tile) -> int:
    """Count tiles in hand of the same kind as tile."""
    return sum(1 for t in hand if tiles_match(t, tile))


def find_matching(hand: Sequence[Tile], tile: Tile, limit: int) -> list[Tile]:
    """Return the first `limit` tiles in hand that match tile."""
    return [t for t in hand if tiles_match(t, tile)][:limit]


def get_all_possible_sequences(hand: Sequence[Tile], discard: Tile) -> list[list[Tile]]:
    """
    Find every run the hand can complete with the discarded tile.

    The discard may be the low, middle or high member. Each option is ordered
    by value and includes the discard, so callers can offer a choice when
    more than one run fits.
    """
    if not isinstance(discard, NumberedTile):
        return []

    same_suit: dict[int, Tile] = {}
    for tile in hand:
        if isinstance(tile, NumberedTile) and tile.suit == discard.suit:
            same_suit.setdefault(tile.value, tile)

    value = discard.value
    sequences: list[list[Tile]] = []

    # (offset of the lowest member relative to the discard) for low, middle, high
    for low_offset in (0, -1, -2):
        low = value + low_offset
        needed = [v for v in (low, low + 1, low + 2) if v != value]
        if all(v in same_suit for v in needed):
            run = [discard, *(same_suit[v] for v in needed)]
            sequences.append(sorted(run, key=lambda t: t.value))  # type: ignore[union-attr]

    return sequences


def sequence_matches_option(chosen: Sequence[Tile], options: Sequence[Sequence[Tile]]) -> bool:
    """Check that a chosen run has the same kinds as one of the options."""
    chosen_kinds = sorted(t.kind for t in chosen)  # type: ignore[type-var]
    return any(sorted(t.kind for t in option) == chosen_kinds for option in options)  # type: ignore[type-var]
