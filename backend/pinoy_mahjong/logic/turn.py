"""
Turn and phase state machine.

    draw -> discard -> claimResolution -> draw (next seat)
    claimResolution -> discard (claimant, after a chow, pung or kong claim)
    any -> finished (win or stalemate)

Every function validates before it mutates: an illegal call returns
False/None and leaves the state exactly as it was. Turn ownership is not
checked here; the session layer enforces who may act.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import structlog

from pinoy_mahjong.logic.enums import STALEMATE_WIN_TYPE, AmbitionType, GameStatus, TurnPhase
from pinoy_mahjong.logic.rng import RNG_VERSION, choose_dealer, generate_seed
from pinoy_mahjong.logic.scoring import record_ambition, settle_win
from pinoy_mahjong.logic.settings import GameSettings
from pinoy_mahjong.logic.state import NUM_PLAYERS, ClaimWindow, GameState, Player, WinningHand
from pinoy_mahjong.logic.wall import create_wall, deal_initial_hands, draw_from_wall
from pinoy_mahjong.logic.win import WINNING_TILE_COUNT, is_winning_hand

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pinoy_mahjong.logic.tiles import Tile
    from pinoy_mahjong.logic.types import SeatConfig, WinCondition

logger = structlog.get_logger()

TILES_PER_MELD_SLOT = 3  # a meld stands in for three hand tiles, kongs included


def effective_hand_size(player: Player) -> int:
    """Hand tiles plus three per meld; 16 at rest, 17 while deciding a discard."""
    return len(player.hand) + TILES_PER_MELD_SLOT * len(player.melds)


def initialize_game(
    players: Sequence[SeatConfig],
    *,
    seed: str | None = None,
    settings: GameSettings | None = None,
) -> GameState:
    """
    Create a dealt game ready for the dealer's first discard.

    The wall and dealer both derive from the seed (a fresh one when omitted).
    After the deal the dealer draws the 17th tile, which may already win.
    """
    if len(players) != NUM_PLAYERS:
        raise ValueError(f"a game needs exactly {NUM_PLAYERS} players, got {len(players)}")

    seed = seed or generate_seed()
    dealer = choose_dealer(seed, NUM_PLAYERS)

    state = GameState(
        seed=seed,
        rng_version=RNG_VERSION,
        settings=settings or GameSettings(),
        players=[
            Player(seat=seat, name=config.name, is_ai=config.is_ai, is_dealer=seat == dealer)
            for seat, config in enumerate(players)
        ],
        current_player=dealer,
        dealer=dealer,
        wall=create_wall(seed),
    )

    deal_initial_hands(state)

    for player in state.players:
        if not player.flowers:
            record_ambition(state, player.seat, AmbitionType.NO_FLOWERS_START)

    draw_tile(state, dealer)
    if state.winner == dealer:
        record_ambition(state, dealer, AmbitionType.BISAKLAT)

    logger.info("game initialized", game_id=state.id, dealer=dealer, wall=len(state.wall))
    return state


def finish_with_win(
    state: GameState,
    seat: int,
    win: WinCondition,
    winning_tile: Tile | None,
    hand_tiles: Sequence[Tile],
) -> None:
    """End the game with seat as winner, snapshot the hand and settle the win."""
    player = state.players[seat]
    state.status = GameStatus.FINISHED
    state.phase = TurnPhase.FINISHED
    state.winner = seat
    state.win_type = win.hand_type.value
    state.winning_tile = winning_tile
    state.winning_hand = WinningHand(
        tiles=tuple(hand_tiles),
        melds=tuple(player.melds),
        flowers=tuple(player.flowers),
    )
    state.claim_window = None
    settle_win(state, seat, win)
    logger.info(
        "game won",
        game_id=state.id,
        seat=seat,
        win_type=state.win_type,
        payout=win.total_payout,
    )


def draw_tile(state: GameState, seat: int) -> Tile | None:
    """
    Draw the next regular tile for seat.

    Returns None without touching the wall when the game is over, the seat
    already holds 17 tiles or the wall is empty. Bonus tiles drawn on the way
    are exposed. A hand that wins with the drawn tile ends the game.
    """
    if state.is_finished:
        return None
    player = state.players[seat]
    if effective_hand_size(player) >= WINNING_TILE_COUNT:
        logger.warning("draw rejected: hand full", game_id=state.id, seat=seat, hand=len(player.hand))
        return None
    if not state.wall:
        return None

    tile = draw_from_wall(state, player)
    if tile is None:
        logger.info("wall ran out while drawing", game_id=state.id, seat=seat)
        return None

    state.last_drawn_tile = tile
    state.phase = TurnPhase.DISCARD
    state.has_drawn_this_turn = True

    win = is_winning_hand(player.hand, player.melds, player.flowers)
    if win.is_valid:
        finish_with_win(state, seat, win, tile, player.hand)

    return tile


def discard_tile(state: GameState, seat: int, tile: Tile) -> bool:
    """
    Discard a tile (matched by id) and open the claim window.

    The turn does not advance: the discarder stays current until advance_turn()
    runs or a claim redirects play.
    """
    if state.is_finished:
        return False
    player = state.players[seat]
    held = player.find_tile(tile.id)
    if held is None:
        logger.warning("discard rejected: tile not in hand", game_id=state.id, seat=seat, tile=tile.id)
        return False

    player.remove_tiles([held])
    player.discards.append(held)
    state.discard_pile.append(held)
    state.last_discard = held
    state.last_discard_player = seat
    state.last_drawn_tile = None
    state.phase = TurnPhase.CLAIM_RESOLUTION
    state.has_drawn_this_turn = False
    state.claim_window = ClaimWindow(
        started_at=time.time(),
        duration_seconds=state.settings.claim_window_seconds,
        human_advantage_seconds=state.settings.human_advantage_seconds,
    )
    return True


def advance_turn(state: GameState) -> bool:
    """
    Close an unclaimed discard and pass the turn on.

    The one-shot skip marker, if it names the next seat, bypasses that seat
    once; the marker is cleared after any advance.
    """
    if state.is_finished or state.phase != TurnPhase.CLAIM_RESOLUTION:
        return False

    num_players = len(state.players)
    next_player = (state.current_player + 1) % num_players
    if state.skipped_player is not None and next_player == state.skipped_player:
        logger.debug("seat skipped after claim", game_id=state.id, seat=next_player)
        next_player = (next_player + 1) % num_players

    state.claim_window = None
    state.skipped_player = None
    state.last_discard = None
    state.current_player = next_player
    state.phase = TurnPhase.DRAW
    state.has_drawn_this_turn = False
    return True


def declare_win(state: GameState, seat: int) -> bool:
    """
    Declare a win on the seat's current 17-tile hand.

    Used when a claim (chow, pung) completes a hand without a draw; the draw
    path already detects self-drawn wins by itself.
    """
    if state.is_finished or state.phase != TurnPhase.DISCARD or state.current_player != seat:
        return False
    player = state.players[seat]
    win = is_winning_hand(player.hand, player.melds, player.flowers)
    if not win.is_valid:
        return False
    finish_with_win(state, seat, win, state.last_drawn_tile, player.hand)
    return True


def is_wall_exhausted(state: GameState) -> bool:
    return not state.wall


def end_in_stalemate(state: GameState) -> bool:
    """
    Finish the game without a winner once the wall is empty.

    No payout is made; ambitions already settled stand.
    """
    if state.is_finished or not is_wall_exhausted(state):
        return False
    state.status = GameStatus.FINISHED
    state.phase = TurnPhase.FINISHED
    state.win_type = STALEMATE_WIN_TYPE
    state.claim_window = None
    state.last_discard = None
    logger.info("game ended in stalemate", game_id=state.id)
    return True
