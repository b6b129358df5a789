"""Lineup editor: place players on court positions with swap-on-conflict.

A lineup maps every court position to a player or None. The bench is never
stored; it is whatever available players are not on court. Every operation
returns a new lineup and leaves its input untouched.
"""

import logging
from typing import Iterable, Mapping, Optional

from .constants import Position
from .positions import PositionTable, resolve_table
from .schemas import Player, RosterEntry

logger = logging.getLogger('netball.lineup')

Lineup = dict[Position, Optional[Player]]


def empty_lineup(table: Optional[PositionTable] = None) -> Lineup:
    """Lineup with every position unfilled."""
    return {position: None for position in resolve_table(table).order}


def _normalized(current: Mapping[Position, Optional[Player]], table: PositionTable) -> Lineup:
    return {position: current.get(position) for position in table.order}


def position_of(
    current: Mapping[Position, Optional[Player]], player_id: int
) -> Optional[Position]:
    """Position currently held by a player, None if benched."""
    for position, player in current.items():
        if player is not None and player.id == player_id:
            return Position(position)
    return None


def assign_to_position(
    current: Mapping[Position, Optional[Player]],
    position: Position | str,
    player: Player,
    table: Optional[PositionTable] = None,
) -> Lineup:
    """
    Put a player on a position.

    - Player already there: nothing changes.
    - Player moving from another position onto an occupied one: the two swap.
    - Player moving onto an empty position: their old position empties.
    - Player coming from the bench: the occupant, if any, goes to the bench.

    Roster membership is the caller's concern.
    """
    table = resolve_table(table)
    position = Position(position)
    lineup = _normalized(current, table)

    old_position = position_of(lineup, player.id)
    if old_position == position:
        return lineup

    displaced = lineup[position]
    lineup[position] = player
    if old_position is not None:
        lineup[old_position] = displaced

    logger.debug(
        f'{player.display_name} -> {position.value}'
        + (f' (swapped with {displaced.display_name})' if displaced and old_position else '')
    )
    return lineup


def return_to_bench(
    current: Mapping[Position, Optional[Player]],
    position: Position | str,
    table: Optional[PositionTable] = None,
) -> Lineup:
    """Clear a position; its player becomes part of the bench."""
    lineup = _normalized(current, resolve_table(table))
    lineup[Position(position)] = None
    return lineup


def clear_all(table: Optional[PositionTable] = None) -> Lineup:
    return empty_lineup(table)


def bench_players(
    available: Iterable[Player], current: Mapping[Position, Optional[Player]]
) -> list[Player]:
    """Available players not on court, in the order given."""
    on_court = {p.id for p in current.values() if p is not None}
    return [p for p in available if p.id not in on_court]


class LineupEditor:
    """
    Holds one lineup and the players available to fill it.

    Each operation swaps in a complete new lineup, so readers never see a
    half-applied change.

    Example:
        editor = LineupEditor(players)
        editor.assign(Position.GS, players[0])
        editor.bench   # everyone else
    """

    def __init__(
        self,
        available_players: Iterable[Player],
        lineup: Optional[Mapping[Position, Optional[Player]]] = None,
        table: Optional[PositionTable] = None,
    ):
        self.table = resolve_table(table)
        self.available_players = list(available_players)
        self.lineup: Lineup = _normalized(lineup or {}, self.table)

    @property
    def bench(self) -> list[Player]:
        return bench_players(self.available_players, self.lineup)

    @property
    def positions_filled(self) -> int:
        return sum(1 for player in self.lineup.values() if player is not None)

    def assign(self, position: Position | str, player: Player) -> Lineup:
        self.lineup = assign_to_position(self.lineup, position, player, self.table)
        return self.lineup

    def bench_position(self, position: Position | str) -> Lineup:
        self.lineup = return_to_bench(self.lineup, position, self.table)
        return self.lineup

    def clear(self) -> Lineup:
        self.lineup = clear_all(self.table)
        return self.lineup

    def to_roster_entries(self, game_id: int, team_id: int, quarter: int) -> list[RosterEntry]:
        """Rows to persist this lineup for one quarter."""
        return [
            RosterEntry(
                game_id=game_id,
                team_id=team_id,
                quarter=quarter,
                position=position,
                player_id=player.id if player else None,
            )
            for position, player in self.lineup.items()
        ]
