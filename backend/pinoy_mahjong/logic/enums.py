"""
String enum definitions for Filipino Mahjong game concepts.
"""

from enum import Enum


class Suit(str, Enum):
    """Tile suits, declared in display sort order."""

    CIRCLES = "circles"
    BAMBOOS = "bamboos"
    CHARACTERS = "characters"
    WINDS = "winds"
    DRAGONS = "dragons"
    FLOWERS = "flowers"
    SEASONS = "seasons"


NUMBERED_SUITS: tuple[Suit, ...] = (Suit.CIRCLES, Suit.BAMBOOS, Suit.CHARACTERS)
HONOR_SUITS: tuple[Suit, ...] = (Suit.WINDS, Suit.DRAGONS)
BONUS_SUITS: tuple[Suit, ...] = (Suit.FLOWERS, Suit.SEASONS)


class Wind(str, Enum):
    """Wind tiles, declared in display sort order."""

    EAST = "east"
    SOUTH = "south"
    WEST = "west"
    NORTH = "north"


class Dragon(str, Enum):
    """Dragon tiles, declared in display sort order."""

    RED = "red"
    GREEN = "green"
    WHITE = "white"


class Flower(str, Enum):
    PLUM = "plum"
    ORCHID = "orchid"
    CHRYSANTHEMUM = "chrysanthemum"
    BAMBOO = "bamboo"


class Season(str, Enum):
    SPRING = "spring"
    SUMMER = "summer"
    AUTUMN = "autumn"
    WINTER = "winter"


class MeldType(str, Enum):
    """Types of melds a player can own."""

    CHOW = "chow"
    PUNG = "pung"
    KONG = "kong"
    SECRET_KONG = "secret_kong"
    SAGASA = "sagasa"  # promoted kong


KONG_MELD_TYPES: frozenset[MeldType] = frozenset({MeldType.KONG, MeldType.SECRET_KONG, MeldType.SAGASA})


class ClaimType(str, Enum):
    """Claims that can be made on a live discard."""

    CHOW = "chow"
    PUNG = "pung"
    KONG = "kong"
    WIN = "win"


# priority order for claims on a single discard: win > kong > pung > chow
CLAIM_PRIORITY: dict[ClaimType, int] = {
    ClaimType.WIN: 0,
    ClaimType.KONG: 1,
    ClaimType.PUNG: 2,
    ClaimType.CHOW: 3,
}


class TurnPhase(str, Enum):
    """Phase of the turn state machine."""

    DRAW = "draw"
    DISCARD = "discard"
    CLAIM_RESOLUTION = "claimResolution"
    FINISHED = "finished"


class GameStatus(str, Enum):
    PLAYING = "playing"
    FINISHED = "finished"


class HandType(str, Enum):
    """Winning hand shapes reported by the hand evaluator."""

    NONE = ""
    STANDARD = "Standard Win"
    SIETE_PARES = "Siete Pares"


STALEMATE_WIN_TYPE = "Stalemate"


class AmbitionType(str, Enum):
    """Bonus scoring conditions recorded in the ambition ledger."""

    KANG = "kang"  # exposed kong
    SECRET = "secret"  # concealed kong
    SAGASA = "sagasa"  # promoted kong
    THIRTEEN_FLOWERS = "thirteen_flowers"
    NO_FLOWERS_START = "no_flowers_start"
    TODAS = "todas"  # basic win
    ESCALERA = "escalera"  # 1-9 straight
    SIETE_PARES = "siete_pares"
    NO_FLOWERS_END = "no_flowers_end"
    ALL_UP = "all_up"  # concealed hand
    ALL_DOWN = "all_down"
    ALL_CHOW = "all_chow"
    ALL_PUNG = "all_pung"
    SINGLE = "single"  # difficult wait
    BISAKLAT = "bisaklat"  # dealer wins on the initial hand


# ambitions settled the moment they happen rather than at the end of the game
INSTANT_AMBITIONS: frozenset[AmbitionType] = frozenset(
    {
        AmbitionType.KANG,
        AmbitionType.SECRET,
        AmbitionType.SAGASA,
        AmbitionType.THIRTEEN_FLOWERS,
        AmbitionType.NO_FLOWERS_START,
    }
)


class AIAction(str, Enum):
    """Turn actions an AI player can choose."""

    DRAW = "draw"
    DISCARD = "discard"
    WIN = "win"


class AIDifficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"


class GameAction(str, Enum):
    """Actions dispatched from a client to the game service."""

    DRAW = "draw"
    DISCARD = "discard"
    CLAIM = "claim"
    DECLARE_WIN = "declare_win"
    PASS = "pass"  # noqa: S105
