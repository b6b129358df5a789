"""Unit tests for validation functions."""

import pytest

from netball.constants import Position
from netball.lineup import empty_lineup
from netball.schemas import Player, RosterEntry, StatRecord
from netball.validators import (
    get_reconciled_score,
    get_score_discrepancy_warning,
    validate_all_stats,
    validate_inter_club_scores,
    validate_lineup,
    validate_roster_entries,
    validate_stat_record,
)


def stat(position, player_id=1, **counters):
    return StatRecord(
        game_id=1, team_id=1, player_id=player_id, quarter=1, position=position, **counters
    )


class TestLineupValidation:
    """Tests for lineup validation."""

    def test_valid_lineup(self):
        """Test a lineup with distinct players passes."""
        lineup = empty_lineup()
        lineup[Position.GS] = Player(id=1, display_name='Pia')
        lineup[Position.GK] = Player(id=2, display_name='Quinn')
        assert validate_lineup(lineup) == []

    def test_duplicate_player(self):
        """Test a player in two positions is reported."""
        pia = Player(id=1, display_name='Pia')
        lineup = {**empty_lineup(), Position.GS: pia, Position.GA: pia}
        errors = validate_lineup(lineup)
        assert len(errors) == 1
        assert 'more than one position' in errors[0]

    def test_missing_positions(self):
        """Test a lineup without every position is reported."""
        errors = validate_lineup({Position.GS: None})
        assert 'missing positions' in errors[0]
        assert 'GK' in errors[0]

    def test_unavailable_player(self):
        """Test players outside the available list are reported."""
        lineup = {**empty_lineup(), Position.C: Player(id=9, display_name='Zara')}
        errors = validate_lineup(lineup, available=[Player(id=1, display_name='Pia')])
        assert errors == ['Zara (C) is not available']


class TestRosterEntryValidation:
    """Tests for stored roster rows."""

    def test_duplicate_position_and_player(self):
        """Test duplicate position rows and doubled-up players are both reported."""
        entries = [
            RosterEntry(game_id=1, team_id=1, quarter=1, position='GS', player_id=7),
            RosterEntry(game_id=1, team_id=1, quarter=1, position='GS', player_id=8),
            RosterEntry(game_id=1, team_id=1, quarter=1, position='GA', player_id=8),
        ]
        errors = validate_roster_entries(entries)
        assert len(errors) == 2
        assert 'entries for GS' in errors[0]
        assert 'player 8 in 2 positions' in errors[1]

    def test_empty_positions_are_fine(self):
        """Test several unfilled positions don't count as a repeated player."""
        entries = [
            RosterEntry(game_id=1, team_id=1, quarter=1, position='GS'),
            RosterEntry(game_id=1, team_id=1, quarter=1, position='GA'),
        ]
        assert validate_roster_entries(entries) == []


class TestStatValidation:
    """Tests for stat record checks."""

    def test_counter_outside_unit(self):
        """Test goals_against on GS is flagged."""
        warnings = validate_stat_record(stat('GS', goals_for=5, goals_against=2))
        assert len(warnings) == 1
        assert 'goals_against=2' in warnings[0]

    def test_mid_court_pick_up_ok(self):
        """Test a meaningful counter raises no warning."""
        assert validate_stat_record(stat('C', pick_up=3, intercepts=1)) == []

    def test_validate_all_stats(self):
        """Test duplicates are errors and misplaced counters are warnings."""
        stats = [
            stat('GK', goals_against=3),
            stat('GK', goals_against=4),
            stat('WA', player_id=2, goals_for=1),
        ]
        errors, warnings = validate_all_stats(stats)
        assert len(errors) == 1
        assert '2 stat records' in errors[0]
        assert len(warnings) == 1
        assert 'WA' in warnings[0]


class TestInterClubScores:
    """Tests for cross-checking both clubs' records of a game."""

    def test_matching_scores(self):
        """Test consistent records validate and reconcile as an exact match."""
        home = {'goals_for': 10, 'goals_against': 8}
        away = {'goals_for': 8, 'goals_against': 10}
        result = validate_inter_club_scores(home, away)
        assert result['is_valid'] is True
        assert get_score_discrepancy_warning(result) is None
        assert get_reconciled_score(home, away) == (10, 8, 'exact-match')

    @pytest.mark.parametrize(
        'strategy,expected',
        [
            ('home-priority', (10, 8, 'home-team-priority')),
            ('away-priority', (11, 8, 'away-team-priority')),
            ('higher', (11, 8, 'higher-value')),
            ('lower', (10, 8, 'lower-value')),
            ('average', (11, 8, 'averaged')),
        ],
    )
    def test_reconciliation_strategies(self, strategy, expected):
        """Test each strategy settles a one-goal mismatch."""
        home = {'goals_for': 10, 'goals_against': 8}
        away = {'goals_for': 8, 'goals_against': 11}
        assert get_reconciled_score(home, away, strategy) == expected

    def test_mismatch_warning(self):
        """Test a mismatch produces a warning with both discrepancies."""
        result = validate_inter_club_scores(
            {'goals_for': 10, 'goals_against': 8}, {'goals_for': 9, 'goals_against': 11}
        )
        assert result['home_discrepancy'] == -1
        assert result['away_discrepancy'] == 1
        assert 'home discrepancy -1' in get_score_discrepancy_warning(result)

    def test_unknown_strategy(self):
        """Test an unknown strategy raises."""
        with pytest.raises(ValueError, match='Unknown reconciliation strategy'):
            get_reconciled_score({'goals_for': 1}, {'goals_against': 2}, 'coin-toss')
