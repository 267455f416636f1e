"""Typed domain exceptions for game rule violations.

Engine primitives (turn.py, call_resolution.py) report illegal operations
through bool/None returns. The orchestration layer raises these exceptions
when a primitive refuses an action, so callers get one consistent
catch-and-convert point.
"""


class GameRuleError(Exception):
    """Base exception for game rule violations."""


class InvalidDiscardError(GameRuleError):
    """Tile cannot be discarded (not in hand, wrong phase)."""


class InvalidClaimError(GameRuleError):
    """Claim on the live discard is not legal."""


class InvalidWinError(GameRuleError):
    """Win declaration conditions not met."""


class InvalidActionError(GameRuleError):
    """Action is not valid in the current game state."""


class NotYourTurnError(GameRuleError):
    """A seat tried to act while another seat holds the turn."""

    def __init__(self, *, seat: int, current_player: int) -> None:
        self.seat = seat
        self.current_player = current_player
        super().__init__(f"seat {seat} acted out of turn (current player is seat {current_player})")


class GameFinishedError(GameRuleError):
    """Any mutation attempted after the game has finished."""


class UnsupportedSettingsError(GameRuleError):
    """Game settings contain values the engine does not support."""


class GameStateInvariantError(Exception):
    """Game state failed its consistency checks.

    Attributes:
        errors: Human-readable diagnostics from validate_game_state.

    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("; ".join(errors))


class GameNotFoundError(LookupError):
    """No live game is registered under the given id."""

    def __init__(self, game_id: str) -> None:
        self.game_id = game_id
        super().__init__(f"game {game_id} not found")
