"""Immutable court position table.

Aggregation functions take a ``PositionTable`` argument instead of reading
position lists from module globals. Callers that don't care pass nothing and
get ``PositionTable.standard()``.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

from .constants import GROUP_COUNTERS, Position, PositionGroup


@dataclass(frozen=True)
class PositionTable:
    """Court order, unit membership and meaningful counters per unit."""

    order: tuple[Position, ...]
    groups: Mapping[Position, PositionGroup]
    counters: Mapping[PositionGroup, tuple[str, ...]]

    @classmethod
    def standard(cls) -> 'PositionTable':
        """Build the seven-position netball table."""
        groups = {
            Position.GS: PositionGroup.ATTACK,
            Position.GA: PositionGroup.ATTACK,
            Position.WA: PositionGroup.MID,
            Position.C: PositionGroup.MID,
            Position.WD: PositionGroup.MID,
            Position.GD: PositionGroup.DEFENSE,
            Position.GK: PositionGroup.DEFENSE,
        }
        return cls(
            order=tuple(Position),
            groups=MappingProxyType(groups),
            counters=MappingProxyType(dict(GROUP_COUNTERS)),
        )

    def group_of(self, position: Position | str) -> PositionGroup:
        return self.groups[Position(position)]

    def positions_in(self, group: PositionGroup) -> tuple[Position, ...]:
        """Positions of a unit, in court order."""
        return tuple(p for p in self.order if self.groups[p] == group)

    def counters_for(self, position: Position | str) -> tuple[str, ...]:
        return self.counters[self.group_of(position)]

    def order_index(self, position: Position | str) -> int:
        return self.order.index(Position(position))

    def is_attack(self, position: Position | str) -> bool:
        return self.group_of(position) == PositionGroup.ATTACK

    def is_defense(self, position: Position | str) -> bool:
        return self.group_of(position) == PositionGroup.DEFENSE


def resolve_table(table: Optional[PositionTable]) -> PositionTable:
    """Return the given table, or a fresh standard one."""
    return table if table is not None else PositionTable.standard()
