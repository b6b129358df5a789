from .constants import (
    QUARTERS,
    STAT_COUNTERS,
    GameStatus,
    Position,
    PositionGroup,
)
from .positions import PositionTable
from .schemas import (
    AnalyticsConfig,
    Game,
    Player,
    RosterEntry,
    ScoreRecord,
    SeasonSnapshot,
    StatRecord,
)
from .models import (
    AttackStats,
    DefenseStats,
    GameResult,
    MidStats,
    PlayerSeasonStats,
    PositionBreakdown,
    PositionStats,
    QuarterAverage,
    QuarterPositionBreakdown,
    QuarterScore,
    SeasonTotals,
    WinRate,
    position_stats,
)
from .roster import RosterTable
from .stat_store import StatStore, sorted_for_display
from .score_store import ScoreStore
from .scoring import (
    compute_club_win_rate,
    compute_game_result,
    compute_quarter_scores,
    compute_season_totals,
    compute_win_rate,
)
from .analytics import (
    compute_position_breakdown,
    compute_quarter_averages,
    player_season_stats,
    quarter_position_breakdowns,
)
from .game_filters import (
    filter_historical_opponent_games,
    is_record_eligible,
    is_season_game,
    is_statistics_eligible,
    recent_form,
    upcoming_games,
)
from .lineup import (
    LineupEditor,
    assign_to_position,
    bench_players,
    clear_all,
    empty_lineup,
    return_to_bench,
)
from .cache import QueryCache
from .frames import player_totals_frame, stats_frame
from .snapshot import SeasonData, build_team_report, load_snapshot, save_team_report

__all__ = [
    # Constants
    'QUARTERS',
    'STAT_COUNTERS',
    'GameStatus',
    'Position',
    'PositionGroup',
    'PositionTable',
    # Records
    'AnalyticsConfig',
    'Game',
    'Player',
    'RosterEntry',
    'ScoreRecord',
    'SeasonSnapshot',
    'StatRecord',
    # Derived models
    'AttackStats',
    'DefenseStats',
    'GameResult',
    'MidStats',
    'PlayerSeasonStats',
    'PositionBreakdown',
    'PositionStats',
    'QuarterAverage',
    'QuarterPositionBreakdown',
    'QuarterScore',
    'SeasonTotals',
    'WinRate',
    'position_stats',
    # Stores
    'RosterTable',
    'StatStore',
    'ScoreStore',
    'sorted_for_display',
    # Aggregation
    'compute_club_win_rate',
    'compute_game_result',
    'compute_quarter_scores',
    'compute_season_totals',
    'compute_win_rate',
    'compute_position_breakdown',
    'compute_quarter_averages',
    'player_season_stats',
    'quarter_position_breakdowns',
    # Game filters
    'filter_historical_opponent_games',
    'is_record_eligible',
    'is_season_game',
    'is_statistics_eligible',
    'recent_form',
    'upcoming_games',
    # Lineup editor
    'LineupEditor',
    'assign_to_position',
    'bench_players',
    'clear_all',
    'empty_lineup',
    'return_to_bench',
    # Reporting
    'QueryCache',
    'player_totals_frame',
    'stats_frame',
    'SeasonData',
    'build_team_report',
    'load_snapshot',
    'save_team_report',
]
