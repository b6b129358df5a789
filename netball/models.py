"""Derived view models produced by the aggregation engine."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from .constants import Position, PositionGroup
from .positions import PositionTable, resolve_table
from .schemas import StatRecord


@dataclass(frozen=True)
class QuarterScore:
    """Goals for and against in one quarter, from one team's perspective."""
    quarter: int
    team_score: int = 0
    opponent_score: int = 0


@dataclass(frozen=True)
class GameResult:
    """Quarter breakdown and final result of a single game."""
    game_id: int
    quarter_scores: List[QuarterScore]
    team_total: int
    opponent_total: int
    result: str  # 'win' | 'loss' | 'draw'


@dataclass
class SeasonTotals:
    total_goals_for: int = 0
    total_goals_against: int = 0
    games_with_stats: int = 0
    avg_for: float = 0.0
    avg_against: float = 0.0


@dataclass
class PositionBreakdown:
    """Goal totals and averages for the scoring and defending circles.

    ``totals`` holds goals_for for GS/GA and goals_against for GD/GK.
    Splits are percentages within a unit and default to 50/50 when the
    unit recorded nothing.
    """
    totals: Dict[Position, int] = field(default_factory=dict)
    averages: Dict[Position, float] = field(default_factory=dict)
    attack_total: float = 0.0
    defense_total: float = 0.0
    attack_split: Dict[Position, float] = field(default_factory=dict)
    defense_split: Dict[Position, float] = field(default_factory=dict)
    games_with_position_stats: int = 0


@dataclass
class WinRate:
    wins: int = 0
    losses: int = 0
    draws: int = 0
    total_games: int = 0
    win_rate: float = 0.0


@dataclass(frozen=True)
class QuarterAverage:
    quarter: int
    avg_for: float = 0.0
    avg_against: float = 0.0
    games: int = 0


@dataclass
class QuarterPositionBreakdown:
    """Official quarter score distributed across the four circle positions."""
    quarter: int
    goals: Dict[Position, float] = field(default_factory=dict)
    goals_for: int = 0
    goals_against: int = 0
    data_quality: int = 0  # games with position stats for this quarter
    used_fallback: bool = False


@dataclass
class PlayerGamePerformance:
    game_id: int
    date: Optional[str] = None
    opponent_team_id: Optional[int] = None
    counters: Dict[str, int] = field(default_factory=dict)
    positions_played: List[Position] = field(default_factory=list)
    quarters_played: int = 0


@dataclass
class PlayerSeasonStats:
    player_id: int
    total_games: int = 0
    counters: Dict[str, int] = field(default_factory=dict)
    quarters_by_position: Dict[Position, int] = field(default_factory=dict)
    game_performances: List[PlayerGamePerformance] = field(default_factory=list)


# Position-specific statistics. Each variant only carries the counters that
# mean something for its court unit.


@dataclass(frozen=True)
class AttackStats:
    position: Position
    goals_for: int = 0
    missed_goals: int = 0
    rebounds: int = 0
    intercepts: int = 0
    bad_pass: int = 0
    handling_error: int = 0
    infringement: int = 0
    group: PositionGroup = PositionGroup.ATTACK


@dataclass(frozen=True)
class MidStats:
    position: Position
    intercepts: int = 0
    bad_pass: int = 0
    handling_error: int = 0
    pick_up: int = 0
    infringement: int = 0
    group: PositionGroup = PositionGroup.MID


@dataclass(frozen=True)
class DefenseStats:
    position: Position
    goals_against: int = 0
    rebounds: int = 0
    intercepts: int = 0
    bad_pass: int = 0
    handling_error: int = 0
    pick_up: int = 0
    infringement: int = 0
    group: PositionGroup = PositionGroup.DEFENSE


PositionStats = Union[AttackStats, MidStats, DefenseStats]

_VARIANTS = {
    PositionGroup.ATTACK: AttackStats,
    PositionGroup.MID: MidStats,
    PositionGroup.DEFENSE: DefenseStats,
}


def position_stats(record: StatRecord, table: Optional[PositionTable] = None) -> PositionStats:
    """Narrow a raw stat record to the variant for its position's unit."""
    table = resolve_table(table)
    group = table.group_of(record.position)
    values = {name: getattr(record, name) for name in table.counters[group]}
    return _VARIANTS[group](position=record.position, **values)
