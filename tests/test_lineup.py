"""Unit tests for the lineup editor."""

from collections import Counter

import pytest

from netball.constants import Position
from netball.lineup import (
    LineupEditor,
    assign_to_position,
    bench_players,
    clear_all,
    empty_lineup,
    position_of,
    return_to_bench,
)
from netball.schemas import Player


@pytest.fixture
def players():
    return [
        Player(id=1, display_name='Pia'),
        Player(id=2, display_name='Quinn'),
        Player(id=3, display_name='Rosa'),
        Player(id=4, display_name='Sian'),
    ]


def on_court_ids(lineup):
    return [p.id for p in lineup.values() if p is not None]


class TestAssignToPosition:
    """Tests for swap-on-conflict assignment."""

    def test_swap_between_positions(self, players):
        """Test moving P from WD onto Q at GS swaps them."""
        p, q = players[0], players[1]
        current = {**empty_lineup(), Position.WD: p, Position.GS: q}
        updated = assign_to_position(current, Position.GS, p)
        assert updated[Position.GS] == p
        assert updated[Position.WD] == q

    def test_same_position_is_noop(self, players):
        """Test assigning a player to the position they hold changes nothing."""
        current = assign_to_position(empty_lineup(), 'C', players[0])
        again = assign_to_position(current, 'C', players[0])
        assert again == current

    def test_move_to_empty_position_vacates_old(self, players):
        """Test moving onto an empty position leaves the old one empty."""
        current = assign_to_position(empty_lineup(), Position.WD, players[0])
        updated = assign_to_position(current, Position.GA, players[0])
        assert updated[Position.GA] == players[0]
        assert updated[Position.WD] is None

    def test_from_bench_displaces_occupant(self, players):
        """Test a bench player sends the occupant to the bench."""
        current = assign_to_position(empty_lineup(), Position.GS, players[1])
        updated = assign_to_position(current, Position.GS, players[2])
        assert updated[Position.GS] == players[2]
        assert position_of(updated, players[1].id) is None

    def test_input_not_mutated(self, players):
        """Test the current lineup is left untouched."""
        current = empty_lineup()
        assign_to_position(current, Position.GK, players[0])
        assert current[Position.GK] is None

    def test_never_duplicates_players(self, players):
        """Test no sequence of assignments puts a player on court twice."""
        lineup = empty_lineup()
        moves = [
            (Position.GS, 0), (Position.GA, 1), (Position.GS, 1), (Position.C, 0),
            (Position.GA, 2), (Position.C, 2), (Position.GK, 3), (Position.GS, 3),
            (Position.GK, 0), (Position.GK, 0),
        ]
        for position, index in moves:
            lineup = assign_to_position(lineup, position, players[index])
            counts = Counter(on_court_ids(lineup))
            assert all(n == 1 for n in counts.values())
            assert len(lineup) == 7


class TestBench:
    """Tests for bench handling."""

    def test_return_to_bench(self, players):
        """Test clearing a position puts its player back on the bench."""
        lineup = assign_to_position(empty_lineup(), Position.C, players[0])
        lineup = return_to_bench(lineup, Position.C)
        assert lineup[Position.C] is None
        assert players[0] in bench_players(players, lineup)

    def test_clear_all(self):
        """Test clear_all empties every position."""
        lineup = clear_all()
        assert list(lineup) == list(Position)
        assert all(p is None for p in lineup.values())

    def test_bench_keeps_given_order(self, players):
        """Test the bench lists off-court players in availability order."""
        lineup = assign_to_position(empty_lineup(), Position.WA, players[1])
        assert [p.id for p in bench_players(players, lineup)] == [1, 3, 4]


class TestLineupEditor:
    """Tests for the stateful editor wrapper."""

    def test_assign_and_bench(self, players):
        """Test the editor tracks filled positions and the bench."""
        editor = LineupEditor(players)
        editor.assign(Position.GS, players[0])
        editor.assign(Position.GK, players[1])
        assert editor.positions_filled == 2
        assert [p.id for p in editor.bench] == [3, 4]

        editor.bench_position(Position.GS)
        assert editor.positions_filled == 1

        editor.clear()
        assert editor.positions_filled == 0

    def test_to_roster_entries(self, players):
        """Test exporting a lineup produces one row per position."""
        editor = LineupEditor(players)
        editor.assign('GA', players[3])
        entries = editor.to_roster_entries(game_id=5, team_id=2, quarter=3)
        assert len(entries) == 7
        by_position = {e.position: e.player_id for e in entries}
        assert by_position[Position.GA] == 4
        assert by_position[Position.GS] is None
        assert all(e.quarter == 3 and e.game_id == 5 for e in entries)
