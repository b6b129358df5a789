"""Quarter-by-quarter position assignments for one team in one game."""

import logging
from typing import Iterable, Mapping, Optional

from .constants import QUARTERS, Position
from .positions import PositionTable, resolve_table
from .schemas import Player, RosterEntry

logger = logging.getLogger('netball.roster')


def _check_quarter(quarter: int) -> None:
    if quarter not in QUARTERS:
        raise ValueError(f'Quarter must be 1-4, got {quarter}')


class RosterTable:
    """
    Position assignment table for a game and team.

    Holds at most one entry per (quarter, position). Duplicate players within a
    quarter are not checked here; the lineup editor guarantees that before
    writing.
    """

    def __init__(self, game_id: int, team_id: int, table: Optional[PositionTable] = None):
        self.game_id = game_id
        self.team_id = team_id
        self.table = resolve_table(table)
        self._entries: dict[tuple[int, Position], RosterEntry] = {}

    @classmethod
    def from_entries(
        cls,
        game_id: int,
        team_id: int,
        entries: Iterable[RosterEntry],
        table: Optional[PositionTable] = None,
    ) -> 'RosterTable':
        """Build a table from stored rows, ignoring rows for other games or teams."""
        roster = cls(game_id, team_id, table)
        for entry in entries:
            if entry.game_id != game_id or entry.team_id != team_id:
                continue
            roster._entries[(entry.quarter, entry.position)] = entry
        return roster

    def get_assignment(self, quarter: int) -> dict[Position, Optional[int]]:
        """
        Player id at every position for one quarter.

        Args:
            quarter: Quarter number (1-4)

        Returns:
            Dict with all positions in court order; unfilled positions map to None
        """
        _check_quarter(quarter)
        assignment: dict[Position, Optional[int]] = {}
        for position in self.table.order:
            entry = self._entries.get((quarter, position))
            assignment[position] = entry.player_id if entry else None
        return assignment

    def set_assignment(
        self, quarter: int, position: Position | str, player_id: Optional[int]
    ) -> RosterEntry:
        """Insert or replace the entry for (quarter, position)."""
        _check_quarter(quarter)
        entry = RosterEntry(
            game_id=self.game_id,
            team_id=self.team_id,
            quarter=quarter,
            position=Position(position),
            player_id=player_id,
        )
        self._entries[(quarter, entry.position)] = entry
        logger.debug(
            f'Game {self.game_id} team {self.team_id} Q{quarter} {entry.position.value} -> {player_id}'
        )
        return entry

    def apply_lineup(
        self, quarter: int, lineup: Mapping[Position, Optional[Player]]
    ) -> list[RosterEntry]:
        """Write a lineup editor result for one quarter."""
        written = []
        for position in self.table.order:
            player = lineup.get(position)
            written.append(self.set_assignment(quarter, position, player.id if player else None))
        return written

    def entries(self) -> list[RosterEntry]:
        """All rows sorted by quarter then court order."""
        return sorted(
            self._entries.values(),
            key=lambda e: (e.quarter, self.table.order_index(e.position)),
        )

    def positions_for_player(self, player_id: int) -> dict[int, Position]:
        """Quarter -> position for every quarter the player was on court."""
        return {
            quarter: position
            for (quarter, position), entry in sorted(self._entries.items())
            if entry.player_id == player_id
        }

    def __len__(self) -> int:
        return len(self._entries)
