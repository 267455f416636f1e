"""
Game rule and timing settings.

GameSettings is frozen and travels with a MahjongGame. validate_settings()
rejects combinations the engine does not implement before a game starts.
"""

from pydantic import BaseModel, ConfigDict, Field

from pinoy_mahjong.logic.exceptions import UnsupportedSettingsError

SUPPORTED_NUM_PLAYERS = 4


class GameSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    num_players: int = SUPPORTED_NUM_PLAYERS

    # claim window after each discard: humans get the first part to themselves
    claim_window_seconds: float = Field(default=8.0, gt=0)
    human_advantage_seconds: float = Field(default=6.0, ge=0)

    # fail fast on state invariant violations instead of logging them
    strict_validation: bool = False
    # finish the game as a stalemate once the seat to act cannot draw
    end_on_wall_exhaustion: bool = True

    # base stake multiplied into every ambition payout when settling scores
    stake: float = Field(default=1.0, gt=0)


def validate_settings(settings: GameSettings) -> None:
    """
    Raise UnsupportedSettingsError for settings the engine cannot honor.

    All problems are collected and reported in one message.
    """
    problems: list[str] = []
    if settings.num_players != SUPPORTED_NUM_PLAYERS:
        problems.append(f"num_players={settings.num_players} (only {SUPPORTED_NUM_PLAYERS} is supported)")
    if settings.human_advantage_seconds > settings.claim_window_seconds:
        problems.append(
            f"human_advantage_seconds={settings.human_advantage_seconds} "
            f"exceeds claim_window_seconds={settings.claim_window_seconds}"
        )
    if problems:
        raise UnsupportedSettingsError("unsupported settings: " + ", ".join(problems))
