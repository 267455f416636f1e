"""
Tile catalog for Filipino Mahjong: tile models, the 144-tile set, and helpers.

Tiles are a tagged union keyed by suit. Each variant carries only the field
that identifies it, so a wind tile with a numeric value cannot be built.

Tile kinds are also addressable by a 42-slot index, used for count arrays:
  circles: 0-8, bamboos: 9-17, characters: 18-26
  winds: 27-30 (E, S, W, N), dragons: 31-33 (red, green, white)
  flowers: 34-37, seasons: 38-41
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

from pinoy_mahjong.logic.enums import (
    BONUS_SUITS,
    HONOR_SUITS,
    NUMBERED_SUITS,
    Dragon,
    Flower,
    Season,
    Suit,
    Wind,
)
from pinoy_mahjong.logic.rng import TileRng, generate_seed

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

NUM_TILES = 144
NUM_TILE_KINDS = 42
COPIES_PER_TILE = 4
TILES_PER_SUIT = 9
MIN_VALUE = 1
MAX_VALUE = 9

WIND_INDEX_START = 27
DRAGON_INDEX_START = 31
FLOWER_INDEX_START = 34
SEASON_INDEX_START = 38
NUMBERED_INDEX_END = WIND_INDEX_START - 1

MIDDLE_VALUES = frozenset({4, 5, 6})
TERMINAL_VALUES = frozenset({MIN_VALUE, MAX_VALUE})

_WIND_ORDER = list(Wind)
_DRAGON_ORDER = list(Dragon)
_FLOWER_ORDER = list(Flower)
_SEASON_ORDER = list(Season)


class _TileBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_bonus(self) -> bool:
        """Flowers and seasons never enter a hand; they are set aside on draw."""
        return self.suit in BONUS_SUITS  # type: ignore[attr-defined]


class NumberedTile(_TileBase):
    suit: Literal[Suit.CIRCLES, Suit.BAMBOOS, Suit.CHARACTERS]
    value: int = Field(ge=MIN_VALUE, le=MAX_VALUE)

    @property
    def kind(self) -> tuple[Suit, int]:
        return (self.suit, self.value)


class WindTile(_TileBase):
    suit: Literal[Suit.WINDS] = Suit.WINDS
    wind: Wind

    @property
    def kind(self) -> tuple[Suit, Wind]:
        return (self.suit, self.wind)


class DragonTile(_TileBase):
    suit: Literal[Suit.DRAGONS] = Suit.DRAGONS
    dragon: Dragon

    @property
    def kind(self) -> tuple[Suit, Dragon]:
        return (self.suit, self.dragon)


class FlowerTile(_TileBase):
    suit: Literal[Suit.FLOWERS] = Suit.FLOWERS
    flower: Flower

    @property
    def kind(self) -> tuple[Suit, Flower]:
        return (self.suit, self.flower)


class SeasonTile(_TileBase):
    suit: Literal[Suit.SEASONS] = Suit.SEASONS
    season: Season

    @property
    def kind(self) -> tuple[Suit, Season]:
        return (self.suit, self.season)


Tile = Annotated[
    NumberedTile | WindTile | DragonTile | FlowerTile | SeasonTile,
    Field(discriminator="suit"),
]


def create_tile_set() -> list[Tile]:
    """
    Create the complete 144-tile Filipino set in catalog order.

    108 suited tiles (3 suits x 9 values x 4 copies), 16 winds, 12 dragons,
    and one each of the 4 flowers and 4 seasons.
    """
    tiles: list[Tile] = []

    for suit in NUMBERED_SUITS:
        for value in range(MIN_VALUE, MAX_VALUE + 1):
            tiles.extend(
                NumberedTile(id=f"{suit.value}-{value}-{copy}", suit=suit, value=value)
                for copy in range(COPIES_PER_TILE)
            )

    for wind in Wind:
        tiles.extend(WindTile(id=f"wind-{wind.value}-{copy}", wind=wind) for copy in range(COPIES_PER_TILE))

    for dragon in Dragon:
        tiles.extend(
            DragonTile(id=f"dragon-{dragon.value}-{copy}", dragon=dragon) for copy in range(COPIES_PER_TILE)
        )

    tiles.extend(FlowerTile(id=f"flower-{flower.value}", flower=flower) for flower in Flower)
    tiles.extend(SeasonTile(id=f"season-{season.value}", season=season) for season in Season)

    return tiles


def shuffle_tiles(tiles: Sequence[Tile], rng: TileRng | None = None) -> list[Tile]:
    """
    Return a uniformly random permutation of tiles.

    Pass a seeded TileRng for a reproducible order; without one a fresh
    cryptographic seed is used.
    """
    if rng is None:
        rng = TileRng.from_seed(generate_seed())
    return rng.shuffle(tiles)


def tiles_match(tile_a: Tile, tile_b: Tile) -> bool:
    """Check if two tiles are the same type, ignoring their ids."""
    return tile_a.kind == tile_b.kind


def tile_to_index(tile: Tile) -> int:
    """Convert a tile to its 42-slot kind index."""
    if isinstance(tile, NumberedTile):
        return NUMBERED_SUITS.index(tile.suit) * TILES_PER_SUIT + tile.value - 1
    if isinstance(tile, WindTile):
        return WIND_INDEX_START + _WIND_ORDER.index(tile.wind)
    if isinstance(tile, DragonTile):
        return DRAGON_INDEX_START + _DRAGON_ORDER.index(tile.dragon)
    if isinstance(tile, FlowerTile):
        return FLOWER_INDEX_START + _FLOWER_ORDER.index(tile.flower)
    return SEASON_INDEX_START + _SEASON_ORDER.index(tile.season)


def hand_to_counts(tiles: Iterable[Tile]) -> list[int]:
    """
    Convert tiles to a 42-slot count array.

    Each slot holds how many tiles of that kind are present.
    """
    counts = [0] * NUM_TILE_KINDS
    for tile in tiles:
        counts[tile_to_index(tile)] += 1
    return counts


def is_numbered_index(index: int) -> bool:
    return 0 <= index <= NUMBERED_INDEX_END


def index_value(index: int) -> int:
    """Face value (1-9) of a numbered kind index."""
    return index % TILES_PER_SUIT + 1


def can_start_run(index: int) -> bool:
    """Check if a kind index can be the lowest member of a three-tile run."""
    return is_numbered_index(index) and index_value(index) <= MAX_VALUE - 2


def is_numbered(tile: Tile) -> bool:
    return isinstance(tile, NumberedTile)


def is_honor(tile: Tile) -> bool:
    """Check if tile is a wind or dragon."""
    return tile.suit in HONOR_SUITS


def is_terminal(tile: Tile) -> bool:
    """Check if tile is a 1 or 9 of a numbered suit."""
    return isinstance(tile, NumberedTile) and tile.value in TERMINAL_VALUES


def sort_tiles(tiles: Iterable[Tile]) -> list[Tile]:
    """
    Sort tiles for display: suit order, then value/wind/dragon order.

    The sort is stable, so copies of one kind keep their relative order.
    """
    return sorted(tiles, key=tile_to_index)


def get_tile_display_name(tile: Tile) -> str:
    """Human-readable tile name, e.g. "5 Circles" or "East Wind"."""
    if isinstance(tile, NumberedTile):
        return f"{tile.value} {tile.suit.value.capitalize()}"
    if isinstance(tile, WindTile):
        return f"{tile.wind.value.capitalize()} Wind"
    if isinstance(tile, DragonTile):
        return f"{tile.dragon.value.capitalize()} Dragon"
    if isinstance(tile, FlowerTile):
        return f"{tile.flower.value.capitalize()} Flower"
    return f"{tile.season.value.capitalize()} Season"
