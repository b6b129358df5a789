"""Game filtering shared by every aggregation.

Predicates are the building blocks; the list helpers combine them the same
way everywhere so that dashboards, records and statistics agree on which
games count.
"""

import datetime
from typing import Iterable, Optional

from .constants import GameStatus
from .schemas import Game


def is_statistics_eligible(game: Game) -> bool:
    """Completed, statistics allowed, not a BYE and not abandoned."""
    return (
        game.is_completed
        and game.statistics_allowed
        and not game.is_bye_game
        and not game.is_abandoned
    )


def is_season_game(game: Game) -> bool:
    """Played to a result on court: status completed (not a forfeit) and statistics-eligible."""
    return game.status == GameStatus.COMPLETED and is_statistics_eligible(game)


def is_record_eligible(game: Game) -> bool:
    """Counts toward win/loss records. Includes forfeits, excludes BYEs and abandoned games."""
    return game.is_completed and not game.is_bye_game and not game.is_abandoned


def completed_games(games: Iterable[Game]) -> list[Game]:
    return [g for g in games if is_record_eligible(g)]


def statistics_eligible_games(games: Iterable[Game]) -> list[Game]:
    return [g for g in games if is_statistics_eligible(g)]


def record_eligible_games(games: Iterable[Game]) -> list[Game]:
    return [g for g in games if is_record_eligible(g)]


def upcoming_games(games: Iterable[Game]) -> list[Game]:
    """Not yet completed, not a BYE, with a date; soonest first."""
    upcoming = [g for g in games if not g.is_completed and not g.is_bye_game and g.date]
    return sorted(upcoming, key=lambda g: (g.date, g.id))


def recent_form(games: Iterable[Game], limit: int = 5) -> list[Game]:
    """Most recent completed games, newest first."""
    ordered = sorted(
        completed_games(games),
        key=lambda g: (g.date or datetime.date.min, g.id),
        reverse=True,
    )
    return ordered[:limit]


def games_for_team(games: Iterable[Game], team_id: int) -> list[Game]:
    return [g for g in games if g.involves(team_id)]


def games_for_club(games: Iterable[Game], club_id: int) -> list[Game]:
    return [g for g in games if club_id in (g.home_club_id, g.away_club_id)]


def games_for_season(games: Iterable[Game], season_id: Optional[int]) -> list[Game]:
    """Games of one season; ``None`` keeps everything."""
    if season_id is None:
        return list(games)
    return [g for g in games if g.season_id == season_id]


def filter_historical_opponent_games(
    all_games: Iterable[Game],
    team_id: int,
    opponent_team_id: int,
    exclude_game_id: Optional[int] = None,
) -> list[Game]:
    """
    Previous completed games between a team and a specific opponent.

    Args:
        all_games: Games to search
        team_id: Team whose history is wanted
        opponent_team_id: Opponent team id
        exclude_game_id: Game currently being analysed, left out of the result

    Returns:
        Statistics-eligible games where the other side is ``opponent_team_id``,
        in input order
    """
    return [
        g
        for g in all_games
        if g.id != exclude_game_id
        and g.is_completed
        and g.statistics_allowed
        and g.opponent_team_id(team_id) == opponent_team_id
    ]
