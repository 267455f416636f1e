"""Tests for the domain exception hierarchy."""

import pytest

from pinoy_mahjong.logic.exceptions import (
    GameFinishedError,
    GameNotFoundError,
    GameRuleError,
    GameStateInvariantError,
    InvalidActionError,
    InvalidClaimError,
    InvalidDiscardError,
    InvalidWinError,
    NotYourTurnError,
    UnsupportedSettingsError,
)


class TestGameRuleErrorHierarchy:
    @pytest.mark.parametrize(
        "error_type",
        [
            InvalidDiscardError,
            InvalidClaimError,
            InvalidWinError,
            InvalidActionError,
            GameFinishedError,
            UnsupportedSettingsError,
        ],
    )
    def test_rule_errors_share_a_base(self, error_type):
        assert issubclass(error_type, GameRuleError)

    def test_invariant_error_is_not_a_rule_error(self):
        assert not issubclass(GameStateInvariantError, GameRuleError)

    def test_game_not_found_is_a_lookup_error(self):
        err = GameNotFoundError("game-x")
        assert isinstance(err, LookupError)
        assert err.game_id == "game-x"
        assert str(err) == "game game-x not found"


class TestNotYourTurnError:
    def test_stores_seats(self):
        err = NotYourTurnError(seat=2, current_player=0)
        assert err.seat == 2
        assert err.current_player == 0
        assert str(err) == "seat 2 acted out of turn (current player is seat 0)"

    def test_requires_keyword_arguments(self):
        with pytest.raises(TypeError):
            NotYourTurnError(2, 0)  # type: ignore[misc]


class TestGameStateInvariantError:
    def test_joins_errors(self):
        err = GameStateInvariantError(["a", "b"])
        assert err.errors == ["a", "b"]
        assert str(err) == "a; b"
