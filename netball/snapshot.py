"""Season snapshots: load an exported season and build a team report from it.

A snapshot file holds every player, game, roster row, stat record and score
record of a season. The report combines the aggregation functions into one
JSON-ready dict.
"""

import itertools
import logging
from collections import defaultdict
from dataclasses import asdict
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from .analytics import (
    compute_position_breakdown,
    compute_quarter_averages,
    quarter_position_breakdowns,
)
from .cache import QueryCache
from .config import get_reconciliation_strategy, get_recent_form_limit
from .constants import PositionGroup
from .frames import player_totals_frame
from .game_filters import (
    games_for_team,
    recent_form,
    record_eligible_games,
    statistics_eligible_games,
    upcoming_games,
)
from .positions import PositionTable, resolve_table
from .schemas import RosterEntry, SeasonSnapshot, StatRecord
from .score_store import ScoreStore
from .scoring import compute_game_result, compute_season_totals, compute_win_rate
from .stat_store import StatStore
from .utils import load_json, save_json
from .validators import (
    get_reconciled_score,
    get_score_discrepancy_warning,
    validate_all_stats,
    validate_inter_club_scores,
    validate_roster_entries,
)

logger = logging.getLogger('netball.snapshot')

_data_versions = itertools.count(1)


class SeasonData:
    """A loaded snapshot with its records indexed for aggregation."""

    def __init__(self, snapshot: SeasonSnapshot):
        # Distinguishes cached results of different loads in a shared QueryCache
        self.version = next(_data_versions)
        self.snapshot = snapshot
        self.games = list(snapshot.games)
        self.players = {p.id: p for p in snapshot.players}
        self.stat_store = StatStore(snapshot.stats)
        self.score_store = ScoreStore(snapshot.scores)

        rosters: dict[int, list[RosterEntry]] = defaultdict(list)
        for entry in snapshot.rosters:
            rosters[entry.game_id].append(entry)
        self.rosters_by_game = dict(rosters)

    @property
    def stats_by_game(self) -> dict[int, list[StatRecord]]:
        return self.stat_store.stats_by_game()

    @property
    def scores_by_game(self):
        return self.score_store.scores_by_game()


def load_snapshot(path: Path | str) -> SeasonData:
    """
    Load and index a season snapshot file.

    Duplicate roster rows and stat records are reported as warnings; the
    stores keep the last record for each key.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file doesn't match the snapshot schema
    """
    snapshot = load_json(path, schema=SeasonSnapshot)
    logger.info(
        f'Loaded snapshot {path}: {len(snapshot.games)} games, '
        f'{len(snapshot.stats)} stat records, {len(snapshot.scores)} score records'
    )

    for message in validate_roster_entries(snapshot.rosters):
        logger.warning(message)
    errors, warnings = validate_all_stats(snapshot.stats)
    for message in errors:
        logger.warning(message)
    for message in warnings:
        logger.debug(message)

    return SeasonData(snapshot)


def _plain(value: Any) -> Any:
    """Convert enums (including dict keys) to their values for JSON output."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {_plain(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def _table_key(table: PositionTable) -> tuple:
    return (table.order, tuple(table.groups.items()), tuple(table.counters.items()))


def _unit_goals(stats: list[StatRecord], team_id: int, table: PositionTable) -> dict[str, int]:
    """A team's own recorded goals for (attack) and against (defense)."""
    goals_for = sum(
        s.goals_for for s in stats if s.team_id == team_id and table.is_attack(s.position)
    )
    goals_against = sum(
        s.goals_against for s in stats if s.team_id == team_id and table.is_defense(s.position)
    )
    return {'goals_for': goals_for, 'goals_against': goals_against}


def inter_club_checks(
    data: SeasonData, team_id: int, table: Optional[PositionTable] = None
) -> list[dict]:
    """
    Cross-check recorded goals for games where both sides keep statistics.

    Only games involving ``team_id`` with stat records from both teams are
    checked.
    """
    table = resolve_table(table)
    strategy = get_reconciliation_strategy()
    stats_by_game = data.stats_by_game
    checks = []

    for game in statistics_eligible_games(games_for_team(data.games, team_id)):
        if game.away_team_id is None:
            continue
        stats = stats_by_game.get(game.id) or []
        recording_teams = {s.team_id for s in stats}
        if not {game.home_team_id, game.away_team_id} <= recording_teams:
            continue

        home = _unit_goals(stats, game.home_team_id, table)
        away = _unit_goals(stats, game.away_team_id, table)
        result = validate_inter_club_scores(home, away)
        home_score, away_score, method = get_reconciled_score(home, away, strategy)
        warning = get_score_discrepancy_warning(result)
        if warning:
            logger.warning(f'Game {game.id}: {warning}')
        checks.append(
            {
                'game_id': game.id,
                **result,
                'reconciled_home': home_score,
                'reconciled_away': away_score,
                'method': method,
            }
        )

    return checks


def build_team_report(
    data: SeasonData,
    team_id: int,
    club_id: Optional[int] = None,
    cache: Optional[QueryCache] = None,
    table: Optional[PositionTable] = None,
) -> dict[str, Any]:
    """
    Build the season report for one team.

    Args:
        data: Loaded season data
        team_id: Team to report on
        club_id: Optional club scope for the win/loss record
        cache: Optional query cache; repeated reports reuse cached sections.
            Entries are scoped to this SeasonData and position table, so one
            cache can serve several snapshots
        table: Position table

    Returns:
        JSON-ready dict with games, season totals, position breakdown,
        quarter analysis, win rate, form, fixtures and player totals
    """
    table = resolve_table(table)
    if cache is None:
        cache = QueryCache()
    scope = {'snapshot': data.version, 'positions': _table_key(table)}
    stats_by_game = data.stats_by_game
    scores_by_game = data.scores_by_game
    team_games = games_for_team(data.games, team_id)

    games = []
    for game in record_eligible_games(team_games):
        result = compute_game_result(
            game,
            scores_by_game.get(game.id) or [],
            stats_by_game.get(game.id) or [],
            team_id,
            table,
        )
        games.append(
            {
                'game_id': game.id,
                'date': game.date.isoformat() if game.date else None,
                'round': game.round,
                'status': game.status.value,
                'opponent_team_id': game.opponent_team_id(team_id),
                **asdict(result),
            }
        )

    totals = cache.get_or_load(
        'season_totals',
        team_id,
        lambda: compute_season_totals(data.games, scores_by_game, stats_by_game, team_id),
        **scope,
    )
    breakdown = cache.get_or_load(
        'position_breakdown',
        team_id,
        lambda: compute_position_breakdown(data.games, stats_by_game, team_id, table),
        **scope,
    )
    win_rate = cache.get_or_load(
        'win_rate',
        team_id,
        lambda: compute_win_rate(
            data.games, team_id, club_id, scores_by_game, stats_by_game, table
        ),
        club_id=club_id,
        **scope,
    )
    quarter_averages = compute_quarter_averages(data.games, scores_by_game, team_id)
    quarter_breakdowns = quarter_position_breakdowns(
        data.games, stats_by_game, scores_by_game, team_id, table
    )

    team_stats = [s for stats in stats_by_game.values() for s in stats if s.team_id == team_id]
    player_totals = player_totals_frame(team_stats).to_dicts()
    for row in player_totals:
        player = data.players.get(row['player_id'])
        row['display_name'] = player.display_name if player else None

    report = {
        'team_id': team_id,
        'club_id': club_id,
        'generated_at': datetime.now(timezone.utc).isoformat(),
        'games': games,
        'season_totals': asdict(totals),
        'position_breakdown': asdict(breakdown),
        'circle_positions': {
            'attack': table.positions_in(PositionGroup.ATTACK),
            'defense': table.positions_in(PositionGroup.DEFENSE),
        },
        'quarter_averages': [asdict(q) for q in quarter_averages],
        'quarter_position_breakdowns': [asdict(q) for q in quarter_breakdowns],
        'win_rate': asdict(win_rate),
        'recent_form': [g.id for g in recent_form(team_games, get_recent_form_limit())],
        'upcoming': [g.id for g in upcoming_games(team_games)],
        'inter_club_checks': inter_club_checks(data, team_id, table),
        'player_totals': player_totals,
    }
    return _plain(report)


def save_team_report(path: Path | str, report: dict[str, Any]) -> None:
    save_json(path, report)
    logger.info(f'Report saved to {path}')
