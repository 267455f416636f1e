"""
Ambition ledger and score settlement.

Every ambition recorded for a seat is paid by each of the other three seats,
so scores always sum to zero. Instant ambitions (kongs, flower bonuses) settle
when they happen; win ambitions settle when the game ends in a win.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import structlog

from pinoy_mahjong.logic.enums import INSTANT_AMBITIONS, AmbitionType
from pinoy_mahjong.logic.state import AmbitionRecord

if TYPE_CHECKING:
    from pinoy_mahjong.logic.state import GameState
    from pinoy_mahjong.logic.types import WinCondition

logger = structlog.get_logger()

AMBITION_PAYOUTS: dict[AmbitionType, float] = {
    AmbitionType.KANG: 0.25,
    AmbitionType.SECRET: 0.5,
    AmbitionType.SAGASA: 0.5,
    AmbitionType.THIRTEEN_FLOWERS: 0.25,
    AmbitionType.NO_FLOWERS_START: 0.25,
    AmbitionType.TODAS: 1.0,
    AmbitionType.ESCALERA: 0.5,
    AmbitionType.SIETE_PARES: 0.5,
    AmbitionType.NO_FLOWERS_END: 0.25,
    AmbitionType.ALL_UP: 0.25,
    AmbitionType.ALL_DOWN: 0.25,
    AmbitionType.ALL_CHOW: 0.25,
    AmbitionType.ALL_PUNG: 0.25,
    AmbitionType.SINGLE: 0.25,
    AmbitionType.BISAKLAT: 1.0,
}


def get_ambition_payout(ambition: AmbitionType) -> float:
    return AMBITION_PAYOUTS.get(ambition, 0.0)


def _apply_payment(state: GameState, seat: int, amount: float) -> None:
    for other in range(len(state.scores)):
        if other == seat:
            continue
        state.scores[other] -= amount
        state.scores[seat] += amount


def record_ambition(state: GameState, seat: int, ambition: AmbitionType) -> AmbitionRecord:
    """
    Append an ambition to the ledger and settle it.

    The payout is the table value times the game stake, collected from every other seat.
    """
    payout = get_ambition_payout(ambition) * state.settings.stake
    record = AmbitionRecord(
        id=f"ambition-{len(state.ambitions)}",
        seat=seat,
        type=ambition,
        payout=payout,
        is_instant=ambition in INSTANT_AMBITIONS,
        timestamp=time.time(),
    )
    state.ambitions.append(record)
    _apply_payment(state, seat, payout)
    logger.info("ambition recorded", seat=seat, ambition=ambition.value, payout=payout)
    return record


def settle_win(state: GameState, seat: int, win: WinCondition) -> list[AmbitionRecord]:
    """Record and settle every ambition of a confirmed win."""
    return [record_ambition(state, seat, ambition) for ambition in win.ambitions]


def ambitions_for_seat(state: GameState, seat: int) -> list[AmbitionRecord]:
    return [a for a in state.ambitions if a.seat == seat]
