"""Position and player analytics built on stat and score records.

Circle analytics only look at the four shooting-circle positions: goals_for
for the attacking pair and goals_against for the defending pair. Mid-court
positions never contribute goals here.
"""

import math
from collections import defaultdict
from typing import Iterable, Mapping, Optional, Sequence

from .constants import QUARTERS, STAT_COUNTERS, Position, PositionGroup
from .game_filters import is_season_game, is_statistics_eligible
from .models import (
    PlayerGamePerformance,
    PlayerSeasonStats,
    PositionBreakdown,
    QuarterAverage,
    QuarterPositionBreakdown,
)
from .positions import PositionTable, resolve_table
from .schemas import Game, RosterEntry, ScoreRecord, StatRecord
from .scoring import compute_quarter_scores


def _circle_goals(stat: StatRecord, table: PositionTable) -> Optional[int]:
    """Goals a circle position is accountable for, None for mid-court."""
    group = table.group_of(stat.position)
    if group == PositionGroup.ATTACK:
        return stat.goals_for
    if group == PositionGroup.DEFENSE:
        return stat.goals_against
    return None


def _split(totals: Mapping[Position, float], positions: Sequence[Position]) -> dict[Position, float]:
    """Percentage of a unit's total per position; an empty unit splits evenly."""
    unit_total = sum(totals[p] for p in positions)
    if unit_total == 0:
        return {p: 100 / len(positions) for p in positions}
    return {p: totals[p] / unit_total * 100 for p in positions}


def compute_position_breakdown(
    games: Sequence[Game],
    stats_by_game: Mapping[int, Sequence[StatRecord]],
    team_id: int,
    table: Optional[PositionTable] = None,
) -> PositionBreakdown:
    """
    Goals scored by GS/GA and conceded through GD/GK over a season.

    Only completed games that allow statistics are read. A game counts toward
    ``games_with_position_stats`` when the team has at least one circle row in
    it; averages divide by that count.

    Example:
        breakdown = compute_position_breakdown(games, stats_by_game, team_id=3)
        breakdown.attack_total   # GS avg + GA avg per game
        breakdown.attack_split   # {GS: 62.5, GA: 37.5}
    """
    table = resolve_table(table)
    attack = table.positions_in(PositionGroup.ATTACK)
    defense = table.positions_in(PositionGroup.DEFENSE)

    breakdown = PositionBreakdown(totals={p: 0 for p in attack + defense})

    for game in games:
        if not is_season_game(game):
            continue
        contributed = False
        for stat in stats_by_game.get(game.id) or []:
            if stat.team_id != team_id:
                continue
            goals = _circle_goals(stat, table)
            if goals is None:
                continue
            breakdown.totals[stat.position] += goals
            contributed = True
        if contributed:
            breakdown.games_with_position_stats += 1

    games_counted = breakdown.games_with_position_stats
    breakdown.averages = {
        p: (total / games_counted if games_counted else 0.0)
        for p, total in breakdown.totals.items()
    }
    breakdown.attack_total = sum(breakdown.averages[p] for p in attack)
    breakdown.defense_total = sum(breakdown.averages[p] for p in defense)
    breakdown.attack_split = _split(breakdown.totals, attack)
    breakdown.defense_split = _split(breakdown.totals, defense)
    return breakdown


def compute_quarter_averages(
    games: Sequence[Game],
    scores_by_game: Mapping[int, Sequence[ScoreRecord]],
    team_id: int,
) -> list[QuarterAverage]:
    """Average official goals for/against per quarter over games that have scores."""
    sums_for: dict[int, int] = defaultdict(int)
    sums_against: dict[int, int] = defaultdict(int)
    counted = 0

    for game in games:
        if not is_season_game(game) or not game.involves(team_id):
            continue
        game_scores = scores_by_game.get(game.id) or []
        if not game_scores:
            continue
        counted += 1
        for quarter in compute_quarter_scores(game, game_scores, [], team_id):
            sums_for[quarter.quarter] += quarter.team_score
            sums_against[quarter.quarter] += quarter.opponent_score

    return [
        QuarterAverage(
            quarter=q,
            avg_for=sums_for[q] / counted if counted else 0.0,
            avg_against=sums_against[q] / counted if counted else 0.0,
            games=counted,
        )
        for q in QUARTERS
    ]


def _round1(value: float) -> float:
    # Half-up rounding to one decimal place
    return math.floor(value * 10 + 0.5) / 10


def _shares(goals: Mapping[Position, float], positions: Sequence[Position]) -> Optional[dict]:
    unit_total = sum(goals.get(p, 0) for p in positions)
    if unit_total <= 0:
        return None
    return {p: goals.get(p, 0) / unit_total for p in positions}


def _distribute(
    target: int, shares: Mapping[Position, float], positions: Sequence[Position]
) -> dict[Position, float]:
    """Split ``target`` by shares, nudging the largest value so the unit sums exactly."""
    values = {p: _round1(target * shares[p]) for p in positions}
    diff = _round1(target - sum(values.values()))
    if diff != 0 and abs(diff) < 0.11:
        largest = max(positions, key=lambda p: values[p])
        values[largest] = _round1(values[largest] + diff)
    return values


def quarter_position_breakdowns(
    games: Sequence[Game],
    stats_by_game: Mapping[int, Sequence[StatRecord]],
    scores_by_game: Mapping[int, Sequence[ScoreRecord]],
    team_id: int,
    table: Optional[PositionTable] = None,
) -> list[QuarterPositionBreakdown]:
    """
    Attribute each quarter's official goals to the circle positions.

    Official quarter totals (summed over the season) are split between GS/GA
    and between GK/GD using the shares recorded in stat rows for that quarter.
    Quarters without stat rows use season-wide shares (``used_fallback``), and
    units with no recorded goals at all split evenly.

    Returns:
        One breakdown per quarter with values rounded to one decimal place
    """
    table = resolve_table(table)
    attack = table.positions_in(PositionGroup.ATTACK)
    defense = table.positions_in(PositionGroup.DEFENSE)
    circle = attack + defense

    per_quarter: dict[int, list[dict[Position, int]]] = defaultdict(list)
    official_for: dict[int, int] = defaultdict(int)
    official_against: dict[int, int] = defaultdict(int)
    season_goals: dict[Position, int] = defaultdict(int)

    for game in games:
        if not is_season_game(game) or not game.involves(team_id):
            continue

        game_scores = scores_by_game.get(game.id) or []
        if game_scores:
            for quarter in compute_quarter_scores(game, game_scores, [], team_id, table):
                official_for[quarter.quarter] += quarter.team_score
                official_against[quarter.quarter] += quarter.opponent_score

        quarter_goals: dict[int, dict[Position, int]] = {}
        for stat in stats_by_game.get(game.id) or []:
            if stat.team_id != team_id:
                continue
            goals = _circle_goals(stat, table)
            if goals is None:
                continue
            slot = quarter_goals.setdefault(stat.quarter, {p: 0 for p in circle})
            slot[stat.position] += goals
            season_goals[stat.position] += goals
        for quarter, goals in quarter_goals.items():
            per_quarter[quarter].append(goals)

    even_attack = {p: 1 / len(attack) for p in attack}
    even_defense = {p: 1 / len(defense) for p in defense}
    season_attack = _shares(season_goals, attack) or even_attack
    season_defense = _shares(season_goals, defense) or even_defense

    breakdowns = []
    for quarter in QUARTERS:
        samples = per_quarter.get(quarter, [])
        attack_shares, defense_shares = season_attack, season_defense
        if samples:
            summed: dict[Position, int] = defaultdict(int)
            for goals in samples:
                for position, value in goals.items():
                    summed[position] += value
            attack_shares = _shares(summed, attack) or season_attack
            defense_shares = _shares(summed, defense) or season_defense

        goals_for = official_for.get(quarter, 0)
        goals_against = official_against.get(quarter, 0)
        distributed = {
            **_distribute(goals_for, attack_shares, attack),
            **_distribute(goals_against, defense_shares, defense),
        }
        breakdowns.append(
            QuarterPositionBreakdown(
                quarter=quarter,
                goals=distributed,
                goals_for=goals_for,
                goals_against=goals_against,
                data_quality=len(samples),
                used_fallback=not samples,
            )
        )

    return breakdowns


def player_season_stats(
    player_id: int,
    stats_by_game: Mapping[int, Sequence[StatRecord]],
    rosters_by_game: Mapping[int, Sequence[RosterEntry]],
    games: Optional[Iterable[Game]] = None,
) -> PlayerSeasonStats:
    """
    Season statistics for one player, attributed through the roster.

    A stat row belongs to the player when the roster puts the player at that
    row's position in that quarter for the same team. Games the player was
    rostered in count toward ``total_games`` even without stat rows.

    Args:
        player_id: Player id
        stats_by_game: Stat records keyed by game id
        rosters_by_game: Roster entries keyed by game id
        games: Optional games; when given, only statistics-eligible games are
            read and performances carry the game date and opponent

    Returns:
        PlayerSeasonStats with counter totals, quarters per position and
        per-game performances ordered by game id
    """
    games_by_id = None
    if games is not None:
        games_by_id = {g.id: g for g in games if is_statistics_eligible(g)}

    result = PlayerSeasonStats(
        player_id=player_id,
        counters={name: 0 for name in STAT_COUNTERS},
        quarters_by_position={p: 0 for p in Position},
    )

    for game_id in sorted(rosters_by_game):
        if games_by_id is not None and game_id not in games_by_id:
            continue

        slots = {
            (entry.team_id, entry.quarter): entry.position
            for entry in rosters_by_game[game_id]
            if entry.player_id == player_id
        }
        if not slots:
            continue

        game = games_by_id.get(game_id) if games_by_id else None
        team_ids = {team for team, _ in slots}
        performance = PlayerGamePerformance(
            game_id=game_id,
            date=game.date.isoformat() if game and game.date else None,
            opponent_team_id=game.opponent_team_id(next(iter(team_ids))) if game else None,
            counters={name: 0 for name in STAT_COUNTERS},
            quarters_played=len(slots),
        )
        for position in slots.values():
            result.quarters_by_position[position] += 1
            if position not in performance.positions_played:
                performance.positions_played.append(position)

        for stat in stats_by_game.get(game_id) or []:
            if slots.get((stat.team_id, stat.quarter)) != stat.position:
                continue
            for name in STAT_COUNTERS:
                value = getattr(stat, name)
                performance.counters[name] += value
                result.counters[name] += value

        result.game_performances.append(performance)

    result.total_games = len(result.game_performances)
    return result
