"""Polars tables of stat records for reporting."""

from typing import Iterable

import polars as pl

from .constants import STAT_COUNTERS
from .schemas import StatRecord

STATS_SCHEMA = {
    'game_id': pl.Int64,
    'team_id': pl.Int64,
    'player_id': pl.Int64,
    'quarter': pl.Int64,
    'position': pl.Utf8,
    **{name: pl.Int64 for name in STAT_COUNTERS},
}


def stats_frame(stats: Iterable[StatRecord]) -> pl.DataFrame:
    """One row per stat record, positions as their short codes."""
    rows = [
        {
            'game_id': s.game_id,
            'team_id': s.team_id,
            'player_id': s.player_id,
            'quarter': s.quarter,
            'position': s.position.value,
            **s.counters(),
        }
        for s in stats
    ]
    return pl.DataFrame(rows, schema=STATS_SCHEMA)


def player_totals_frame(stats: Iterable[StatRecord]) -> pl.DataFrame:
    """
    Counter totals per player.

    Returns:
        DataFrame with player_id, games, quarters and one column per counter,
        sorted by goals_for (descending) then player_id
    """
    frame = stats_frame(stats)
    return (
        frame.group_by('player_id')
        .agg(
            pl.col('game_id').n_unique().alias('games'),
            pl.struct('game_id', 'quarter').n_unique().alias('quarters'),
            *[pl.col(name).sum() for name in STAT_COUNTERS],
        )
        .sort(['goals_for', 'player_id'], descending=[True, False])
    )
