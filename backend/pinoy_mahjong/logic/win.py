"""
Hand evaluation: winning shapes and win-time ambitions.

A winning hand totals 17 tiles (hand plus meld tiles) and is either
  - Standard: 5 sets (claimed melds count toward the five) plus one pair, or
  - Siete Pares: 7 pairs plus one trio (a triplet or a run), fully concealed.

Both shapes are searched over a 42-slot count array rather than tile lists, so
copies of one kind are interchangeable and no tile object is ever spliced.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from pinoy_mahjong.logic.enums import AmbitionType, HandType, MeldType
from pinoy_mahjong.logic.melds import TILES_FOR_SET
from pinoy_mahjong.logic.tiles import (
    MAX_VALUE,
    NumberedTile,
    can_start_run,
    hand_to_counts,
)
from pinoy_mahjong.logic.types import INVALID_WIN, WinCondition

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pinoy_mahjong.logic.melds import Meld
    from pinoy_mahjong.logic.tiles import Tile

WINNING_TILE_COUNT = 17
SETS_IN_STANDARD_HAND = 5
MIN_CHOWS_FOR_ESCALERA = 3
TILES_FOR_PAIR = 2

BASIC_WIN_PAYOUT = 1.0
SIETE_PARES_BONUS = 0.5
ESCALERA_BONUS = 0.5
NO_FLOWERS_BONUS = 0.25
ALL_UP_BONUS = 0.25

_FULL_STRAIGHT = list(range(1, MAX_VALUE + 1))


class HandDecomposition(BaseModel):
    """
    One way to split a concealed hand into sets and a pair.

    Groups are expressed as kind indices: a triplet is (i, i, i), a run is
    (i, i + 1, i + 2).
    """

    model_config = ConfigDict(frozen=True)

    sets: tuple[tuple[int, int, int], ...]
    pair: int


def _decompose(counts: list[int], sets_needed: int, pair: int | None) -> HandDecomposition | None:
    # the lowest remaining kind must belong to some group, so only groups
    # starting there are tried
    index = next((i for i, c in enumerate(counts) if c), None)
    if index is None:
        if sets_needed == 0 and pair is not None:
            return HandDecomposition(sets=(), pair=pair)
        return None

    if sets_needed > 0 and counts[index] >= TILES_FOR_SET:
        counts[index] -= 3
        found = _decompose(counts, sets_needed - 1, pair)
        counts[index] += 3
        if found is not None:
            return found.model_copy(update={"sets": ((index, index, index), *found.sets)})

    if sets_needed > 0 and can_start_run(index) and counts[index + 1] and counts[index + 2]:
        for offset in range(3):
            counts[index + offset] -= 1
        found = _decompose(counts, sets_needed - 1, pair)
        for offset in range(3):
            counts[index + offset] += 1
        if found is not None:
            return found.model_copy(update={"sets": ((index, index + 1, index + 2), *found.sets)})

    if pair is None and counts[index] >= TILES_FOR_PAIR:
        counts[index] -= 2
        found = _decompose(counts, sets_needed, index)
        counts[index] += 2
        if found is not None:
            return found

    return None


def find_standard_decomposition(hand: Sequence[Tile], meld_count: int) -> HandDecomposition | None:
    """
    Split the concealed hand into `5 - meld_count` sets plus one pair.

    Returns None when no exact decomposition exists.
    """
    sets_needed = SETS_IN_STANDARD_HAND - meld_count
    if sets_needed < 0 or len(hand) != sets_needed * TILES_FOR_SET + 2:
        return None
    return _decompose(hand_to_counts(hand), sets_needed, None)


def is_siete_pares(hand: Sequence[Tile]) -> bool:
    """
    Check for seven pairs plus one trio in a 17-tile concealed hand.

    Four of a kind counts as two pairs. The trio may be any triplet or any run,
    so every candidate trio is removed in turn and the rest must pair off.
    """
    if len(hand) != WINNING_TILE_COUNT:
        return False

    counts = hand_to_counts(hand)
    for index, count in enumerate(counts):
        if count >= TILES_FOR_SET:
            counts[index] -= 3
            paired = all(c % 2 == 0 for c in counts)
            counts[index] += 3
            if paired:
                return True
        if count and can_start_run(index) and counts[index + 1] and counts[index + 2]:
            for offset in range(3):
                counts[index + offset] -= 1
            paired = all(c % 2 == 0 for c in counts)
            for offset in range(3):
                counts[index + offset] += 1
            if paired:
                return True
    return False


def is_escalera(melds: Sequence[Meld]) -> bool:
    """Check if at least three chow melds of one suit cover exactly 1 through 9."""
    chows = [m for m in melds if m.type == MeldType.CHOW]
    if len(chows) < MIN_CHOWS_FOR_ESCALERA:
        return False

    values_by_suit: dict[str, list[int]] = {}
    for chow in chows:
        for tile in chow.tiles:
            if isinstance(tile, NumberedTile):
                values_by_suit.setdefault(tile.suit, []).append(tile.value)

    return any(sorted(values) == _FULL_STRAIGHT for values in values_by_suit.values())


def is_winning_hand(hand: Sequence[Tile], melds: Sequence[Meld], flowers: Sequence[Tile]) -> WinCondition:
    """
    Evaluate hand + melds + flowers for a win.

    Never raises: an invalid hand yields WinCondition(is_valid=False).
    Siete Pares is checked first and pays a flat 1.5; a standard win pays 1.0
    plus Escalera, No Flowers and All Up bonuses.
    """
    total_tiles = len(hand) + sum(len(m.tiles) for m in melds)
    if total_tiles != WINNING_TILE_COUNT:
        return INVALID_WIN

    if not melds and is_siete_pares(hand):
        return WinCondition(
            is_valid=True,
            hand_type=HandType.SIETE_PARES,
            ambitions=(AmbitionType.TODAS, AmbitionType.SIETE_PARES),
            total_payout=BASIC_WIN_PAYOUT + SIETE_PARES_BONUS,
            breakdown={"Basic Win": BASIC_WIN_PAYOUT, "Siete Pares": SIETE_PARES_BONUS},
        )

    if find_standard_decomposition(hand, len(melds)) is None:
        return INVALID_WIN

    ambitions = [AmbitionType.TODAS]
    breakdown = {"Basic Win": BASIC_WIN_PAYOUT}

    if is_escalera(melds):
        ambitions.append(AmbitionType.ESCALERA)
        breakdown["Escalera"] = ESCALERA_BONUS

    if not flowers:
        ambitions.append(AmbitionType.NO_FLOWERS_END)
        breakdown["No Flowers"] = NO_FLOWERS_BONUS

    if melds and all(m.is_concealed for m in melds):
        ambitions.append(AmbitionType.ALL_UP)
        breakdown["All Up"] = ALL_UP_BONUS

    return WinCondition(
        is_valid=True,
        hand_type=HandType.STANDARD,
        ambitions=tuple(ambitions),
        total_payout=sum(breakdown.values()),
        breakdown=breakdown,
    )
