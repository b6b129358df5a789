"""Score aggregation: quarter scores, game results, season totals and win rates.

All functions are pure. Missing records produce zeros, never exceptions.
"""

import logging
from collections import defaultdict
from typing import Mapping, Optional, Sequence

from .constants import FORFEIT_GOALS, QUARTERS, GameStatus
from .game_filters import is_record_eligible, is_season_game
from .models import GameResult, QuarterScore, SeasonTotals, WinRate
from .positions import PositionTable, resolve_table
from .schemas import Game, ScoreRecord, StatRecord

logger = logging.getLogger('netball.scoring')


def forfeit_quarter_scores(won: bool) -> list[QuarterScore]:
    """Fixed forfeit result: 10-0 (or 0-10) in the first quarter, nil-all after."""
    first = (
        QuarterScore(1, FORFEIT_GOALS, 0) if won else QuarterScore(1, 0, FORFEIT_GOALS)
    )
    return [first] + [QuarterScore(q) for q in QUARTERS[1:]]


def compute_quarter_scores(
    game: Game,
    scores: Sequence[ScoreRecord],
    stats: Sequence[StatRecord],
    team_id: Optional[int] = None,
    table: Optional[PositionTable] = None,
) -> list[QuarterScore]:
    """
    Goals for and against in each of the four quarters.

    Forfeits short-circuit to the fixed forfeit result and no records are
    read. Otherwise each side of each quarter comes from exactly one source:

    - team side: the team's official score, else goals_for summed over the
      team's attacking positions
    - opponent side: the other team's official score, else goals_against
      summed over the team's defending positions

    Args:
        game: Game being scored
        scores: Official score records (rows for other games are ignored)
        stats: Stat records (rows for other games are ignored)
        team_id: Perspective team (default: home team)
        table: Position table

    Returns:
        Four QuarterScore entries, quarters 1-4
    """
    if game.status == GameStatus.FORFEIT_WIN:
        return forfeit_quarter_scores(won=True)
    if game.status == GameStatus.FORFEIT_LOSS:
        return forfeit_quarter_scores(won=False)

    table = resolve_table(table)
    if team_id is None:
        team_id = game.home_team_id

    team_official: dict[int, int] = {}
    opponent_official: dict[int, int] = defaultdict(int)
    for record in scores:
        if record.game_id != game.id:
            continue
        if record.team_id == team_id:
            team_official[record.quarter] = record.score
        else:
            opponent_official[record.quarter] += record.score

    team_stats = [s for s in stats if s.game_id == game.id and s.team_id == team_id]

    quarter_scores = []
    for quarter in QUARTERS:
        if quarter in team_official:
            team_score = team_official[quarter]
        else:
            team_score = sum(
                s.goals_for
                for s in team_stats
                if s.quarter == quarter and table.is_attack(s.position)
            )

        if quarter in opponent_official:
            opponent_score = opponent_official[quarter]
        else:
            opponent_score = sum(
                s.goals_against
                for s in team_stats
                if s.quarter == quarter and table.is_defense(s.position)
            )

        quarter_scores.append(QuarterScore(quarter, team_score, opponent_score))

    return quarter_scores


def _result_label(team_total: int, opponent_total: int) -> str:
    if team_total > opponent_total:
        return 'win'
    if team_total < opponent_total:
        return 'loss'
    return 'draw'


def compute_game_result(
    game: Game,
    scores: Sequence[ScoreRecord],
    stats: Sequence[StatRecord],
    team_id: Optional[int] = None,
    table: Optional[PositionTable] = None,
) -> GameResult:
    """Quarter breakdown, totals and win/loss/draw for one game."""
    quarters = compute_quarter_scores(game, scores, stats, team_id, table)
    team_total = sum(q.team_score for q in quarters)
    opponent_total = sum(q.opponent_score for q in quarters)
    return GameResult(
        game_id=game.id,
        quarter_scores=quarters,
        team_total=team_total,
        opponent_total=opponent_total,
        result=_result_label(team_total, opponent_total),
    )


def compute_season_totals(
    games: Sequence[Game],
    scores_by_game: Mapping[int, Sequence[ScoreRecord]],
    stats_by_game: Optional[Mapping[int, Sequence[StatRecord]]],
    team_id: int,
) -> SeasonTotals:
    """
    Season goals for/against from official scores.

    Only games with status ``completed`` that allow statistics, are neither
    BYEs nor abandoned, and involve the team are read. Score rows for ``team_id`` count as goals for, every other
    row as goals against. ``stats_by_game`` is accepted so callers can hand
    the same snapshot maps to every aggregation; season totals read official
    scores only.

    Returns:
        SeasonTotals; averages are 0 when no game has scores. Check
        ``games_with_stats`` to tell "no data" from a real zero.
    """
    totals = SeasonTotals()

    for game in games:
        if not is_season_game(game) or not game.involves(team_id):
            continue

        game_scores = scores_by_game.get(game.id) or []
        for record in game_scores:
            if record.team_id == team_id:
                totals.total_goals_for += record.score
            else:
                totals.total_goals_against += record.score

        if game_scores:
            totals.games_with_stats += 1

    if totals.games_with_stats > 0:
        totals.avg_for = totals.total_goals_for / totals.games_with_stats
        totals.avg_against = totals.total_goals_against / totals.games_with_stats

    return totals


def _game_outcome(
    game: Game,
    team_id: int,
    scores_by_game: Mapping[int, Sequence[ScoreRecord]],
    stats_by_game: Mapping[int, Sequence[StatRecord]],
    table: PositionTable,
) -> str:
    # The forfeit label decides the result even if recorded scores disagree
    if game.status == GameStatus.FORFEIT_WIN:
        return 'win'
    if game.status == GameStatus.FORFEIT_LOSS:
        return 'loss'
    result = compute_game_result(
        game,
        scores_by_game.get(game.id) or [],
        stats_by_game.get(game.id) or [],
        team_id,
        table,
    )
    return result.result


def _tally(outcomes: list[str]) -> WinRate:
    rate = WinRate(
        wins=outcomes.count('win'),
        losses=outcomes.count('loss'),
        draws=outcomes.count('draw'),
        total_games=len(outcomes),
    )
    if rate.total_games > 0:
        rate.win_rate = rate.wins / rate.total_games * 100
    return rate


def compute_win_rate(
    games: Sequence[Game],
    team_id: int,
    club_id: Optional[int] = None,
    scores_by_game: Optional[Mapping[int, Sequence[ScoreRecord]]] = None,
    stats_by_game: Optional[Mapping[int, Sequence[StatRecord]]] = None,
    table: Optional[PositionTable] = None,
) -> WinRate:
    """
    Win/loss/draw record for a team.

    Completed games involving the team count (BYEs and abandoned games never
    do). When ``club_id`` is given, only games that club took part in count.
    Forfeit games follow their status label; all others compare the summed
    quarter scores.

    Args:
        games: Candidate games
        team_id: Team whose record is wanted
        club_id: Optional club scope
        scores_by_game: Official scores keyed by game id
        stats_by_game: Stat records keyed by game id (fallback source)
        table: Position table

    Returns:
        WinRate with counts and win percentage (0 when no games)
    """
    table = resolve_table(table)
    scores_by_game = scores_by_game or {}
    stats_by_game = stats_by_game or {}

    outcomes = []
    for game in games:
        if not is_record_eligible(game) or not game.involves(team_id):
            continue
        if club_id is not None and club_id not in (game.home_club_id, game.away_club_id):
            continue
        outcomes.append(_game_outcome(game, team_id, scores_by_game, stats_by_game, table))

    return _tally(outcomes)


def compute_club_win_rate(
    games: Sequence[Game],
    club_id: int,
    scores_by_game: Optional[Mapping[int, Sequence[ScoreRecord]]] = None,
    stats_by_game: Optional[Mapping[int, Sequence[StatRecord]]] = None,
    table: Optional[PositionTable] = None,
) -> WinRate:
    """
    Win/loss/draw record across every team of a club.

    Each game is judged from the side belonging to the club. Games between two
    of the club's own teams are skipped since the club both wins and loses them.
    """
    table = resolve_table(table)
    scores_by_game = scores_by_game or {}
    stats_by_game = stats_by_game or {}

    outcomes = []
    for game in games:
        if not is_record_eligible(game):
            continue
        home_ours = game.home_club_id == club_id
        away_ours = game.away_club_id == club_id
        if home_ours and away_ours:
            logger.debug(f'Skipping inter-club game {game.id} for club {club_id}')
            continue
        if home_ours:
            team_id = game.home_team_id
        elif away_ours and game.away_team_id is not None:
            team_id = game.away_team_id
        else:
            continue
        outcomes.append(_game_outcome(game, team_id, scores_by_game, stats_by_game, table))

    return _tally(outcomes)
