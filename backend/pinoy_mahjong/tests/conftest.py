from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from pinoy_mahjong.logic.enums import Dragon, GameStatus, MeldType, Suit, TurnPhase, Wind
from pinoy_mahjong.logic.melds import Meld
from pinoy_mahjong.logic.settings import GameSettings
from pinoy_mahjong.logic.state import GameState, Player
from pinoy_mahjong.logic.tiles import DragonTile, NumberedTile, WindTile, create_tile_set
from pinoy_mahjong.logic.types import SeatConfig

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pinoy_mahjong.logic.tiles import Tile

# ============================================================================
# Tile Builders
# ============================================================================

_WIND_LETTERS = {"E": Wind.EAST, "S": Wind.SOUTH, "W": Wind.WEST, "N": Wind.NORTH}
_DRAGON_LETTERS = {"R": Dragon.RED, "G": Dragon.GREEN, "W": Dragon.WHITE}


def make_tiles(
    *,
    circles: str = "",
    bamboos: str = "",
    characters: str = "",
    winds: str = "",
    dragons: str = "",
    used: Counter | None = None,
) -> list[Tile]:
    """
    Build tiles from a compact notation: digits for numbered suits, ESWN for
    winds, RGW for dragons.

    Ids follow the real tile set (`circles-5-0`, `wind-east-1`) and repeat
    kinds get the next copy number. Pass the same `used` counter to several
    calls to keep ids unique across them.
    """
    used = used if used is not None else Counter()
    tiles: list[Tile] = []

    def next_copy(prefix: str) -> int:
        copy = used[prefix]
        used[prefix] += 1
        return copy

    for suit, values in ((Suit.CIRCLES, circles), (Suit.BAMBOOS, bamboos), (Suit.CHARACTERS, characters)):
        for char in values:
            prefix = f"{suit.value}-{char}"
            tiles.append(NumberedTile(id=f"{prefix}-{next_copy(prefix)}", suit=suit, value=int(char)))
    for char in winds:
        wind = _WIND_LETTERS[char]
        prefix = f"wind-{wind.value}"
        tiles.append(WindTile(id=f"{prefix}-{next_copy(prefix)}", wind=wind))
    for char in dragons:
        dragon = _DRAGON_LETTERS[char]
        prefix = f"dragon-{dragon.value}"
        tiles.append(DragonTile(id=f"{prefix}-{next_copy(prefix)}", dragon=dragon))
    return tiles


def make_tile(**kwargs: str) -> Tile:
    """Build a single tile, e.g. make_tile(circles="5")."""
    return make_tiles(**kwargs)[0]


def remaining_tiles(used: Sequence[Tile]) -> list[Tile]:
    """The full tile set minus the given tiles (matched by id), in catalog order."""
    ids = {t.id for t in used}
    return [t for t in create_tile_set() if t.id not in ids]


def make_meld(
    meld_type: MeldType,
    tiles: Sequence[Tile],
    *,
    seat: int = 0,
    index: int = 0,
    claimed_from: int | None = None,
    is_concealed: bool = False,
) -> Meld:
    return Meld(
        id=f"meld-{seat}-{index}",
        type=meld_type,
        tiles=tuple(tiles),
        is_concealed=is_concealed,
        claimed_from=claimed_from,
    )


# ============================================================================
# State Builders
# ============================================================================


def create_player(
    seat: int = 0,
    name: str | None = None,
    *,
    hand: Sequence[Tile] | None = None,
    melds: Sequence[Meld] | None = None,
    flowers: Sequence[Tile] | None = None,
    discards: Sequence[Tile] | None = None,
    is_ai: bool = False,
    is_dealer: bool = False,
) -> Player:
    """Create a Player with sensible defaults for testing."""
    return Player(
        seat=seat,
        name=name if name is not None else f"Player{seat}",
        is_ai=is_ai,
        hand=list(hand) if hand is not None else [],
        melds=list(melds) if melds is not None else [],
        flowers=list(flowers) if flowers is not None else [],
        discards=list(discards) if discards is not None else [],
        is_dealer=is_dealer,
    )


def create_game_state(
    players: Sequence[Player] | None = None,
    *,
    current_player: int = 0,
    dealer: int = 0,
    phase: TurnPhase = TurnPhase.DISCARD,
    wall: Sequence[Tile] | None = None,
    discard_pile: Sequence[Tile] | None = None,
    last_discard: Tile | None = None,
    last_discard_player: int | None = None,
    has_drawn_this_turn: bool = False,
    skipped_player: int | None = None,
    settings: GameSettings | None = None,
    status: GameStatus = GameStatus.PLAYING,
) -> GameState:
    """
    Create a GameState with sensible defaults for testing.

    Missing players are filled with empty-handed seats; the dealer flag is set
    on the dealer seat.
    """
    seats = {p.seat: p for p in players or []}
    all_players = [seats.get(seat) or create_player(seat) for seat in range(4)]
    for player in all_players:
        player.is_dealer = player.seat == dealer
    return GameState(
        id="game-test",
        seed="test-seed",
        settings=settings or GameSettings(),
        players=all_players,
        current_player=current_player,
        dealer=dealer,
        phase=phase,
        wall=list(wall) if wall is not None else [],
        discard_pile=list(discard_pile) if discard_pile is not None else [],
        last_discard=last_discard,
        last_discard_player=last_discard_player,
        has_drawn_this_turn=has_drawn_this_turn,
        skipped_player=skipped_player,
        status=status,
    )


def create_claim_state(
    discard: Tile,
    *,
    discarder: int = 0,
    hands: dict[int, Sequence[Tile]] | None = None,
    wall: Sequence[Tile] | None = None,
) -> GameState:
    """
    A state right after `discarder` discarded `discard`: claim window open,
    discard on the pile and still live.
    """
    hands = hands or {}
    players = [create_player(seat, hand=hands.get(seat, [])) for seat in range(4)]
    players[discarder].discards.append(discard)
    return create_game_state(
        players,
        current_player=discarder,
        phase=TurnPhase.CLAIM_RESOLUTION,
        wall=wall if wall is not None else make_tiles(characters="99"),
        discard_pile=[discard],
        last_discard=discard,
        last_discard_player=discarder,
    )


def seat_configs(humans: int = 0, *, names: Sequence[str] | None = None) -> list[SeatConfig]:
    """Four seats: the first `humans` are human, the rest AI."""
    names = names or ["Alice", "Bob", "Carmen", "Diego"]
    return [SeatConfig(name=name, is_ai=seat >= humans) for seat, name in enumerate(names)]


# ============================================================================
# Winning hands
# ============================================================================

# five triplets plus a pair, no melds: 17 tiles
STANDARD_HAND = {"circles": "111222333", "bamboos": "444555", "characters": "11"}
# seven pairs plus a triplet: 17 tiles
SIETE_PARES_HAND = {"circles": "115599", "bamboos": "2288", "characters": "3377", "winds": "EEE"}
