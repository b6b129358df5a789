"""In-memory store of per-position, per-quarter statistic records."""

import logging
from collections import defaultdict
from typing import Any, Iterable, Mapping, Optional

from .constants import STAT_COUNTERS, Position
from .positions import PositionTable, resolve_table
from .schemas import StatRecord

logger = logging.getLogger('netball.stat_store')

StatKey = tuple[int, int, int, int, Position]


class StatStore:
    """
    Statistic records keyed by (game, team, player, quarter, position).

    Saving the same key again replaces the record; deletes remove whole
    records only.
    """

    def __init__(self, records: Optional[Iterable[StatRecord]] = None):
        self._records: dict[StatKey, StatRecord] = {}
        if records:
            self.load(records)

    def load(self, records: Iterable[StatRecord]) -> int:
        """Bulk-load existing records. Later duplicates win."""
        count = 0
        for record in records:
            self._records[record.key] = record
            count += 1
        logger.debug(f'Loaded {count} stat records')
        return count

    def upsert_stat(
        self,
        game_id: int,
        team_id: int,
        player_id: int,
        quarter: int,
        position: Position | str,
        counters: Optional[Mapping[str, Any]] = None,
        rating: Optional[int] = None,
    ) -> StatRecord:
        """
        Create or replace the stat record for one player/quarter/position.

        Args:
            game_id: Game id
            team_id: Team the player was playing for
            player_id: Player id
            quarter: Quarter number (1-4)
            position: Court position
            counters: Raw counter values keyed by counter name. Omitted counters
                are 0 and unparseable values are coerced to 0.
            rating: Optional 0-10 performance rating

        Returns:
            The stored StatRecord

        Raises:
            ValueError: On an unknown counter name, invalid quarter or position
        """
        counters = dict(counters or {})
        unknown = set(counters) - set(STAT_COUNTERS)
        if unknown:
            raise ValueError(f'Unknown stat counters: {", ".join(sorted(unknown))}')

        record = StatRecord(
            game_id=game_id,
            team_id=team_id,
            player_id=player_id,
            quarter=quarter,
            position=position,
            rating=rating,
            **counters,
        )
        replaced = record.key in self._records
        self._records[record.key] = record
        logger.debug(f'{"Updated" if replaced else "Created"} stat {record.key}')
        return record

    def get_stat(
        self, game_id: int, team_id: int, player_id: int, quarter: int, position: Position | str
    ) -> Optional[StatRecord]:
        return self._records.get((game_id, team_id, player_id, quarter, Position(position)))

    def delete_stat(
        self, game_id: int, team_id: int, player_id: int, quarter: int, position: Position | str
    ) -> bool:
        """Delete one whole record. Returns False if it did not exist."""
        key = (game_id, team_id, player_id, quarter, Position(position))
        return self._records.pop(key, None) is not None

    def delete_game(self, game_id: int) -> int:
        """Remove every record of a game. Returns the number removed."""
        keys = [k for k in self._records if k[0] == game_id]
        for key in keys:
            del self._records[key]
        if keys:
            logger.info(f'Deleted {len(keys)} stat records for game {game_id}')
        return len(keys)

    def list_stats(self, game_id: int) -> list[StatRecord]:
        """All records for a game. No ordering is guaranteed."""
        return [r for r in self._records.values() if r.game_id == game_id]

    def stats_by_game(self) -> dict[int, list[StatRecord]]:
        grouped: dict[int, list[StatRecord]] = defaultdict(list)
        for record in self._records.values():
            grouped[record.game_id].append(record)
        return dict(grouped)

    def __len__(self) -> int:
        return len(self._records)


def sorted_for_display(
    stats: Iterable[StatRecord], table: Optional[PositionTable] = None
) -> list[StatRecord]:
    """Order records by quarter, then court position."""
    table = resolve_table(table)
    return sorted(stats, key=lambda s: (s.quarter, table.order_index(s.position)))
