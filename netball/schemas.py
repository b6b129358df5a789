"""Pydantic schemas for games, rosters, statistics and scores."""

import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .constants import (
    COMPLETED_STATUSES,
    STAT_COUNTERS,
    STATISTICS_STATUSES,
    GameStatus,
    Position,
)
from .utils import coerce_counter


class Player(BaseModel):
    """Club player available for selection."""

    model_config = ConfigDict(extra='forbid')

    id: int
    display_name: str = Field(..., min_length=1)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    position_preferences: list[Position] = Field(default_factory=list)
    active: bool = True


class Game(BaseModel):
    """A scheduled game between a home team and an optional away team.

    A missing ``away_team_id`` means either an opponent-only fixture or a BYE.
    ``status_allows_statistics`` follows the status when not given explicitly.
    """

    model_config = ConfigDict(extra='forbid')

    id: int
    home_team_id: int
    away_team_id: Optional[int] = None
    home_club_id: Optional[int] = None
    away_club_id: Optional[int] = None
    season_id: Optional[int] = None
    date: Optional[datetime.date] = None
    round: Optional[str] = None
    status: GameStatus = GameStatus.UPCOMING
    status_allows_statistics: Optional[bool] = None
    is_bye: bool = False

    @field_validator('round', mode='before')
    @classmethod
    def round_as_text(cls, v):
        """Rounds are labels ('5', 'SF', 'GF'); accept bare numbers."""
        if v is None:
            return v
        return str(v)

    @model_validator(mode='after')
    def default_statistics_flag(self):
        if self.status_allows_statistics is None:
            self.status_allows_statistics = self.status in STATISTICS_STATUSES
        return self

    @property
    def is_completed(self) -> bool:
        return self.status in COMPLETED_STATUSES

    @property
    def statistics_allowed(self) -> bool:
        return bool(self.status_allows_statistics)

    @property
    def is_bye_game(self) -> bool:
        return self.is_bye or self.status == GameStatus.BYE

    @property
    def is_abandoned(self) -> bool:
        return self.status == GameStatus.ABANDONED

    def involves(self, team_id: int) -> bool:
        return team_id in (self.home_team_id, self.away_team_id)

    def opponent_team_id(self, team_id: int) -> Optional[int]:
        """Team on the other side from ``team_id`` (None if not playing or no away team)."""
        if self.home_team_id == team_id:
            return self.away_team_id
        if self.away_team_id == team_id:
            return self.home_team_id
        return None


class RosterEntry(BaseModel):
    """Player assigned to a position for one quarter of a game."""

    model_config = ConfigDict(extra='forbid')

    game_id: int
    team_id: int
    quarter: int = Field(..., ge=1, le=4)
    position: Position
    player_id: Optional[int] = None

    @property
    def key(self) -> tuple[int, int, int, Position]:
        return (self.game_id, self.team_id, self.quarter, self.position)


class StatRecord(BaseModel):
    """Raw counters for one player at one position in one quarter.

    Counter inputs are coerced: unparseable values become 0 and negatives
    clamp to 0, so a bad entry never rejects the whole record.
    """

    model_config = ConfigDict(extra='forbid')

    game_id: int
    team_id: int
    player_id: int
    quarter: int = Field(..., ge=1, le=4)
    position: Position
    goals_for: int = 0
    goals_against: int = 0
    missed_goals: int = 0
    rebounds: int = 0
    intercepts: int = 0
    bad_pass: int = 0
    handling_error: int = 0
    pick_up: int = 0
    infringement: int = 0
    rating: Optional[int] = Field(None, ge=0, le=10)

    @field_validator(*STAT_COUNTERS, mode='before')
    @classmethod
    def coerce_counters(cls, v):
        return coerce_counter(v)

    @property
    def key(self) -> tuple[int, int, int, int, Position]:
        return (self.game_id, self.team_id, self.player_id, self.quarter, self.position)

    def counters(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in STAT_COUNTERS}


class ScoreRecord(BaseModel):
    """Official goals scored by one team in one quarter."""

    model_config = ConfigDict(extra='forbid')

    game_id: int
    team_id: int
    quarter: int = Field(..., ge=1, le=4)
    score: int = Field(..., ge=0)

    @property
    def key(self) -> tuple[int, int, int]:
        return (self.game_id, self.team_id, self.quarter)


class SeasonSnapshot(BaseModel):
    """Complete season export consumed by the report tooling."""

    model_config = ConfigDict(extra='forbid')

    players: list[Player] = Field(default_factory=list)
    games: list[Game] = Field(default_factory=list)
    rosters: list[RosterEntry] = Field(default_factory=list)
    stats: list[StatRecord] = Field(default_factory=list)
    scores: list[ScoreRecord] = Field(default_factory=list)


class AnalyticsConfig(BaseModel):
    """Analytics configuration settings."""

    model_config = ConfigDict(extra='forbid')

    cache_ttl_seconds: int = Field(300, ge=0)
    recent_form_limit: int = Field(5, ge=1, le=50)
    reconciliation_strategy: str = Field(
        'home-priority', pattern=r'^(home-priority|away-priority|higher|lower|average)$'
    )
    log_level: str = Field('INFO', pattern=r'^(DEBUG|INFO|WARNING|ERROR)$')
