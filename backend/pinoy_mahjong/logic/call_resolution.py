"""
Claim resolution on the live discard: chow, pung, kong and win.

Claims are validated in a fixed order (open claim window on a live discard,
not the discarder, no draw yet this turn, then the claim-specific rule) and
applied atomically. When several seats claim one discard, priority is
win > kong > pung > chow, with ties going to the seat closest
counter-clockwise from the discarder.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from pinoy_mahjong.logic.enums import CLAIM_PRIORITY, AmbitionType, ClaimType, MeldType, TurnPhase
from pinoy_mahjong.logic.melds import (
    TILES_FOR_KONG_CLAIM,
    TILES_FOR_PUNG_CLAIM,
    Meld,
    count_matching,
    find_matching,
    get_all_possible_sequences,
    sequence_matches_option,
)
from pinoy_mahjong.logic.scoring import record_ambition
from pinoy_mahjong.logic.turn import end_in_stalemate, finish_with_win
from pinoy_mahjong.logic.wall import draw_from_wall
from pinoy_mahjong.logic.win import is_winning_hand

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pinoy_mahjong.logic.state import Claim, GameState, Player
    from pinoy_mahjong.logic.tiles import Tile

logger = structlog.get_logger()


def _chow_tiles(player: Player, discard: Tile, chosen: Sequence[Tile] | None) -> list[Tile] | None:
    """
    Pick the run a chow claim will form, discard included.

    A chosen run is mapped onto the matching option so the consumed tiles are
    always ones actually held; without a choice the first option is used.
    """
    options = get_all_possible_sequences(player.hand, discard)
    if not options:
        return None
    if chosen is None:
        return options[0]
    if not any(t.id == discard.id for t in chosen):
        return None
    if not sequence_matches_option(chosen, options):
        return None
    chosen_kinds = sorted(t.kind for t in chosen)  # type: ignore[type-var]
    return next(o for o in options if sorted(t.kind for t in o) == chosen_kinds)  # type: ignore[type-var]


def is_valid_claim(state: GameState, claim: Claim) -> bool:
    """Check whether claim may be applied to the live discard right now."""
    if state.is_finished or state.phase != TurnPhase.CLAIM_RESOLUTION:
        return False
    if state.last_discard is None or state.last_discard_player is None:
        return False
    if claim.seat == state.last_discard_player:
        return False
    if state.has_drawn_this_turn:
        return False

    player = state.players[claim.seat]
    discard = state.last_discard

    if claim.type == ClaimType.CHOW:
        if claim.seat != (state.last_discard_player + 1) % len(state.players):
            return False
        return _chow_tiles(player, discard, claim.tiles) is not None

    if claim.type == ClaimType.PUNG:
        return count_matching(player.hand, discard) >= TILES_FOR_PUNG_CLAIM

    if claim.type == ClaimType.KONG:
        # the replacement draw must be possible
        return count_matching(player.hand, discard) >= TILES_FOR_KONG_CLAIM and bool(state.wall)

    return is_winning_hand([*player.hand, discard], player.melds, player.flowers).is_valid


def _take_discard(state: GameState, discard: Tile) -> None:
    state.discard_pile = [t for t in state.discard_pile if t.id != discard.id]


def _redirect_turn(state: GameState, claimant: int, discarder: int) -> None:
    """Hand the turn to the claimant and set the one-shot skip marker."""
    rotation = (discarder + 1) % len(state.players)
    state.skipped_player = None if claimant == rotation else rotation
    state.current_player = claimant
    state.phase = TurnPhase.DISCARD
    state.has_drawn_this_turn = True
    state.last_discard = None
    state.claim_window = None


def process_claim(state: GameState, claim: Claim) -> bool:
    """
    Validate and apply a claim.

    Returns False without mutation when the claim is not valid, including a
    second claim on a discard that has already been taken.
    """
    if not is_valid_claim(state, claim):
        return False

    player = state.players[claim.seat]
    discard = state.last_discard
    discarder = state.last_discard_player
    if discard is None or discarder is None:
        return False

    if claim.type == ClaimType.WIN:
        hand_tiles = [*player.hand, discard]
        win = is_winning_hand(hand_tiles, player.melds, player.flowers)
        _take_discard(state, discard)
        player.hand.append(discard)
        finish_with_win(state, claim.seat, win, discard, hand_tiles)
        return True

    if claim.type == ClaimType.CHOW:
        run = _chow_tiles(player, discard, claim.tiles)
        if run is None:
            return False
        consumed = [t for t in run if t.id != discard.id]
        meld_type, meld_tiles = MeldType.CHOW, run
    elif claim.type == ClaimType.PUNG:
        consumed = find_matching(player.hand, discard, TILES_FOR_PUNG_CLAIM)
        meld_type, meld_tiles = MeldType.PUNG, [discard, *consumed]
    else:
        consumed = find_matching(player.hand, discard, TILES_FOR_KONG_CLAIM)
        meld_type, meld_tiles = MeldType.KONG, [discard, *consumed]

    meld = Meld(
        id=f"meld-{claim.seat}-{len(player.melds)}",
        type=meld_type,
        tiles=tuple(meld_tiles),
        is_concealed=False,
        claimed_from=discarder,
    )

    _take_discard(state, discard)
    player.remove_tiles(consumed)
    player.melds.append(meld)
    _redirect_turn(state, claim.seat, discarder)
    # the claimed tile counts as the turn's draw until a kong replacement
    state.last_drawn_tile = discard

    if meld_type == MeldType.KONG:
        replacement = draw_from_wall(state, player)
        state.last_drawn_tile = replacement
        record_ambition(state, claim.seat, AmbitionType.KANG)
        if replacement is None:
            # only bonus tiles were left to draw
            end_in_stalemate(state)

    logger.info(
        "claim applied",
        game_id=state.id,
        seat=claim.seat,
        claim=claim.type.value,
        discarder=discarder,
        skipped=state.skipped_player,
    )
    return True


def _seat_distance(state: GameState, seat: int) -> int:
    discarder = state.last_discard_player or 0
    return (seat - discarder) % len(state.players)


def pick_best_claim(state: GameState, claims: Sequence[Claim]) -> Claim | None:
    """
    Pick the claim that takes the discard among all valid ones.

    Priority: win > kong > pung > chow. Ties go to the seat closest
    counter-clockwise from the discarder.
    """
    valid = [c for c in claims if is_valid_claim(state, c)]
    if not valid:
        return None
    return min(valid, key=lambda c: (CLAIM_PRIORITY[c.type], _seat_distance(state, c.seat)))


def resolve_claims(state: GameState, claims: Sequence[Claim]) -> Claim | None:
    """Apply the best valid claim and return it, or None when none applies."""
    best = pick_best_claim(state, claims)
    if best is None:
        return None
    process_claim(state, best)
    return best
