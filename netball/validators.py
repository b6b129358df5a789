"""Validation functions for lineups, roster entries, stat records and scores."""

from collections import Counter
from typing import Iterable, Mapping, Optional

from .constants import RECONCILIATION_STRATEGIES, STAT_COUNTERS, Position
from .positions import PositionTable, resolve_table
from .schemas import Player, RosterEntry, StatRecord


def validate_lineup(
    lineup: Mapping[Position, Optional[Player]],
    available: Optional[Iterable[Player]] = None,
    table: Optional[PositionTable] = None,
) -> list[str]:
    """
    Validate a lineup before it is written to the roster.

    Checks:
    - Every court position is present
    - No player holds two positions
    - All players are available (when ``available`` is given)

    Returns:
        List of validation error messages (empty if valid)
    """
    table = resolve_table(table)
    errors = []

    missing = [p.value for p in table.order if p not in lineup]
    if missing:
        errors.append(f'Lineup is missing positions: {", ".join(missing)}')

    counts = Counter(p.id for p in lineup.values() if p is not None)
    duplicates = sorted(pid for pid, n in counts.items() if n > 1)
    if duplicates:
        errors.append(f'Lineup has players in more than one position: {duplicates}')

    if available is not None:
        available_ids = {p.id for p in available}
        for position, player in lineup.items():
            if player is not None and player.id not in available_ids:
                errors.append(
                    f'{player.display_name} ({Position(position).value}) is not available'
                )

    return errors


def validate_roster_entries(entries: Iterable[RosterEntry]) -> list[str]:
    """
    Validate stored roster rows.

    Checks:
    - At most one row per (game, team, quarter, position)
    - No player on court twice in the same quarter

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []
    entries = list(entries)

    key_counts = Counter(e.key for e in entries)
    for (game_id, team_id, quarter, position), count in sorted(key_counts.items()):
        if count > 1:
            errors.append(
                f'Game {game_id} team {team_id} Q{quarter} has {count} entries for {position.value}'
            )

    player_counts = Counter(
        (e.game_id, e.team_id, e.quarter, e.player_id) for e in entries if e.player_id is not None
    )
    for (game_id, team_id, quarter, player_id), count in sorted(player_counts.items()):
        if count > 1:
            errors.append(
                f'Game {game_id} team {team_id} Q{quarter} has player {player_id} in {count} positions'
            )

    return errors


def validate_stat_record(record: StatRecord, table: Optional[PositionTable] = None) -> list[str]:
    """
    Flag counters recorded for a position they don't apply to.

    A goals_against on GS, for example, is almost always a mis-entry.

    Returns:
        List of warning messages (empty if no issues)
    """
    table = resolve_table(table)
    meaningful = set(table.counters_for(record.position))
    warnings = []
    for name in STAT_COUNTERS:
        value = getattr(record, name)
        if value and name not in meaningful:
            warnings.append(
                f'Game {record.game_id} Q{record.quarter} {record.position.value} '
                f'has {name}={value}, which does not apply to that position'
            )
    return warnings


def validate_all_stats(
    stats: Iterable[StatRecord], table: Optional[PositionTable] = None
) -> tuple[list[str], list[str]]:
    """
    Validate every stat record of a snapshot.

    Returns:
        Tuple of (errors, warnings)
        - errors: duplicate records for the same key
        - warnings: counters outside the position's unit
    """
    table = resolve_table(table)
    errors: list[str] = []
    warnings: list[str] = []

    stats = list(stats)
    for key, count in Counter(s.key for s in stats).items():
        if count > 1:
            game_id, team_id, player_id, quarter, position = key
            errors.append(
                f'Game {game_id} team {team_id} player {player_id} Q{quarter} '
                f'{position.value} has {count} stat records'
            )

    for record in stats:
        warnings.extend(validate_stat_record(record, table))

    return errors, warnings


def validate_inter_club_scores(
    home_stats: Mapping[str, int], away_stats: Mapping[str, int]
) -> dict:
    """
    Cross-check both clubs' recorded goals for a game between two of our teams.

    Home goals for should equal away goals against, and vice versa.

    Args:
        home_stats: {'goals_for': int, 'goals_against': int} recorded by the home team
        away_stats: Same for the away team

    Returns:
        Dict with home_discrepancy, away_discrepancy and is_valid
    """
    home_discrepancy = home_stats.get('goals_for', 0) - away_stats.get('goals_against', 0)
    away_discrepancy = away_stats.get('goals_for', 0) - home_stats.get('goals_against', 0)
    return {
        'home_discrepancy': home_discrepancy,
        'away_discrepancy': away_discrepancy,
        'is_valid': home_discrepancy == 0 and away_discrepancy == 0,
    }


def get_reconciled_score(
    home_stats: Mapping[str, int],
    away_stats: Mapping[str, int],
    strategy: str = 'home-priority',
) -> tuple[int, int, str]:
    """
    Settle on one score when both teams' records disagree.

    Strategies:
        home-priority: trust the home team's record
        away-priority: trust the away team's record
        higher / lower: take the higher / lower value per side
        average: round the mean per side (half up)

    Returns:
        Tuple of (home_score, away_score, method)

    Raises:
        ValueError: On an unknown strategy
    """
    if strategy not in RECONCILIATION_STRATEGIES:
        raise ValueError(f'Unknown reconciliation strategy: {strategy}')

    home_for = home_stats.get('goals_for', 0)
    home_against = home_stats.get('goals_against', 0)
    away_for = away_stats.get('goals_for', 0)
    away_against = away_stats.get('goals_against', 0)

    if validate_inter_club_scores(home_stats, away_stats)['is_valid']:
        return home_for, away_for, 'exact-match'

    if strategy == 'home-priority':
        return home_for, home_against, 'home-team-priority'
    if strategy == 'away-priority':
        return away_against, away_for, 'away-team-priority'
    if strategy == 'higher':
        return max(home_for, away_against), max(away_for, home_against), 'higher-value'
    if strategy == 'lower':
        return min(home_for, away_against), min(away_for, home_against), 'lower-value'

    home = (home_for + away_against + 1) // 2
    away = (away_for + home_against + 1) // 2
    return home, away, 'averaged'


def get_score_discrepancy_warning(result: dict) -> Optional[str]:
    """Human-readable warning for a failed inter-club check, None if it passed."""
    if result['is_valid']:
        return None
    return (
        f'Score mismatch detected: home discrepancy {result["home_discrepancy"]}, '
        f'away discrepancy {result["away_discrepancy"]}'
    )
