"""Integration tests for end-to-end workflows."""

import json
import sys
from types import MappingProxyType

import pytest

import season_report
from netball import config
from netball.cache import QueryCache
from netball.config import clear_config_cache, get_config
from netball.constants import Position, PositionGroup
from netball.positions import PositionTable
from netball.lineup import LineupEditor
from netball.logging_config import get_logger, setup_logging
from netball.roster import RosterTable
from netball.schemas import Player
from netball.snapshot import build_team_report, load_snapshot, save_team_report

TEAM = 1
OPPONENT = 2


@pytest.fixture
def snapshot_path(tmp_path):
    """Write a small season snapshot file."""
    snapshot = {
        'players': [
            {'id': 7, 'display_name': 'Pia'},
            {'id': 8, 'display_name': 'Quinn'},
        ],
        'games': [
            {
                'id': 1, 'home_team_id': TEAM, 'away_team_id': OPPONENT,
                'home_club_id': 1, 'away_club_id': 1, 'date': '2025-04-05',
                'round': 1, 'status': 'completed',
            },
            {
                'id': 2, 'home_team_id': OPPONENT, 'away_team_id': TEAM,
                'date': '2025-04-12', 'round': 2, 'status': 'forfeit-win',
            },
            {
                'id': 3, 'home_team_id': TEAM, 'date': '2025-04-19',
                'round': 3, 'status': 'bye', 'is_bye': True,
            },
            {
                'id': 4, 'home_team_id': TEAM, 'away_team_id': 5,
                'date': '2025-04-26', 'round': 4, 'status': 'upcoming',
            },
        ],
        'rosters': [
            {'game_id': 1, 'team_id': TEAM, 'quarter': 1, 'position': 'GS', 'player_id': 7},
            {'game_id': 1, 'team_id': TEAM, 'quarter': 1, 'position': 'GK', 'player_id': 8},
        ],
        'stats': [
            {'game_id': 1, 'team_id': TEAM, 'player_id': 7, 'quarter': 1,
             'position': 'GS', 'goals_for': 9},
            {'game_id': 1, 'team_id': TEAM, 'player_id': 8, 'quarter': 1,
             'position': 'GK', 'goals_against': 'abc'},
            {'game_id': 1, 'team_id': OPPONENT, 'player_id': 20, 'quarter': 1,
             'position': 'GS', 'goals_for': 4},
            {'game_id': 1, 'team_id': OPPONENT, 'player_id': 21, 'quarter': 1,
             'position': 'GK', 'goals_against': 9},
        ],
        'scores': [
            {'game_id': 1, 'team_id': TEAM, 'quarter': 1, 'score': 9},
            {'game_id': 1, 'team_id': OPPONENT, 'quarter': 1, 'score': 4},
        ],
    }
    path = tmp_path / 'season.json'
    with open(path, 'w') as f:
        json.dump(snapshot, f)
    return path


@pytest.fixture
def default_config(monkeypatch, tmp_path):
    """Point the config loader at a missing file so defaults apply."""
    monkeypatch.setattr(config, 'CONFIG_PATH', tmp_path / 'missing.json')
    clear_config_cache()
    yield
    clear_config_cache()


class TestSnapshotReport:
    """Tests for loading a snapshot and building a team report."""

    def test_load_snapshot(self, snapshot_path):
        """Test records are loaded and bad counters coerced."""
        data = load_snapshot(snapshot_path)
        assert len(data.games) == 4
        assert len(data.stat_store) == 4
        gk = data.stat_store.get_stat(1, TEAM, 8, 1, 'GK')
        assert gk.goals_against == 0

    def test_invalid_snapshot(self, tmp_path):
        """Test a snapshot with a negative score is rejected."""
        path = tmp_path / 'bad.json'
        path.write_text(json.dumps(
            {'scores': [{'game_id': 1, 'team_id': 1, 'quarter': 1, 'score': -3}]}
        ))
        with pytest.raises(ValueError, match='Schema validation failed'):
            load_snapshot(path)

    def test_team_report(self, snapshot_path, default_config):
        """Test the report combines results, totals and records."""
        data = load_snapshot(snapshot_path)
        report = build_team_report(data, TEAM)

        assert [g['game_id'] for g in report['games']] == [1, 2]
        assert report['games'][0]['result'] == 'win'
        assert report['games'][1]['quarter_scores'][0] == {
            'quarter': 1, 'team_score': 10, 'opponent_score': 0,
        }
        assert report['season_totals']['total_goals_for'] == 9
        assert report['season_totals']['games_with_stats'] == 1
        assert report['win_rate']['wins'] == 2
        assert report['win_rate']['total_games'] == 2
        assert report['position_breakdown']['totals'] == {'GS': 9, 'GA': 0, 'GD': 0, 'GK': 0}
        assert report['recent_form'] == [2, 1]
        assert report['upcoming'] == [4]
        assert report['player_totals'][0]['display_name'] == 'Pia'

        check = report['inter_club_checks'][0]
        assert check['game_id'] == 1
        assert check['is_valid'] is False
        assert check['method'] == 'home-team-priority'

    def test_report_uses_cache(self, snapshot_path, default_config):
        """Test a shared cache serves repeated reports."""
        data = load_snapshot(snapshot_path)
        cache = QueryCache(ttl_seconds=60)
        build_team_report(data, TEAM, cache=cache)
        build_team_report(data, TEAM, cache=cache)
        assert cache.stats()['hits'] == 3

    def test_shared_cache_across_snapshots(self, snapshot_path, tmp_path, default_config):
        """Test a cache shared by two loads doesn't serve one snapshot's results for the other."""
        cache = QueryCache(ttl_seconds=60)
        first = build_team_report(load_snapshot(snapshot_path), TEAM, cache=cache)

        with open(snapshot_path) as f:
            snapshot = json.load(f)
        snapshot['scores'] = [{'game_id': 1, 'team_id': TEAM, 'quarter': 1, 'score': 15}]
        changed_path = tmp_path / 'changed.json'
        with open(changed_path, 'w') as f:
            json.dump(snapshot, f)

        second = build_team_report(load_snapshot(changed_path), TEAM, cache=cache)
        assert first['season_totals']['total_goals_for'] == 9
        assert second['season_totals']['total_goals_for'] == 15
        assert cache.stats()['hits'] == 0

    def test_cache_scoped_to_position_table(self, snapshot_path, default_config):
        """Test reports built with a different position table are cached separately."""
        data = load_snapshot(snapshot_path)
        standard = PositionTable.standard()
        groups = dict(standard.groups)
        groups[Position.GA] = PositionGroup.MID
        custom = PositionTable(
            order=standard.order,
            groups=MappingProxyType(groups),
            counters=standard.counters,
        )
        cache = QueryCache(ttl_seconds=60)
        build_team_report(data, TEAM, cache=cache)
        build_team_report(data, TEAM, cache=cache, table=custom)
        assert cache.stats()['hits'] == 0
        build_team_report(data, TEAM, cache=cache, table=PositionTable.standard())
        assert cache.stats()['hits'] == 3

    def test_save_report(self, snapshot_path, tmp_path, default_config):
        """Test the saved report is plain JSON."""
        report = build_team_report(load_snapshot(snapshot_path), TEAM)
        output = tmp_path / 'out' / 'report.json'
        save_team_report(output, report)
        with open(output) as f:
            saved = json.load(f)
        assert saved['team_id'] == TEAM
        assert saved['circle_positions'] == {'attack': ['GS', 'GA'], 'defense': ['GD', 'GK']}


class TestLineupToRoster:
    """Tests for writing editor lineups into the roster table."""

    def test_apply_lineup(self):
        """Test an edited lineup is stored for one quarter."""
        players = [Player(id=7, display_name='Pia'), Player(id=8, display_name='Quinn')]
        editor = LineupEditor(players)
        editor.assign('WD', players[0])
        editor.assign('GS', players[1])
        editor.assign('GS', players[0])

        roster = RosterTable(game_id=1, team_id=TEAM)
        roster.apply_lineup(2, editor.lineup)
        assignment = roster.get_assignment(2)
        assert assignment['GS'] == 7
        assert assignment['WD'] == 8
        assert len(roster) == 7


class TestConfigAndLogging:
    """Tests for configuration loading and logging setup."""

    def test_defaults_when_missing(self, default_config):
        """Test a missing config file yields defaults."""
        cfg = get_config()
        assert cfg.cache_ttl_seconds == 300
        assert cfg.reconciliation_strategy == 'home-priority'

    def test_invalid_config(self, monkeypatch, tmp_path):
        """Test an invalid strategy in the config file raises."""
        path = tmp_path / 'config.json'
        path.write_text(json.dumps({'reconciliation_strategy': 'coin-toss'}))
        monkeypatch.setattr(config, 'CONFIG_PATH', path)
        clear_config_cache()
        try:
            with pytest.raises(ValueError):
                get_config()
        finally:
            clear_config_cache()

    def test_config_is_cached(self, default_config):
        """Test repeated calls return the same object."""
        assert get_config() is get_config()

    def test_setup_logging_writes_file(self, tmp_path):
        """Test file logging creates a timestamped log."""
        logger = setup_logging(log_dir=tmp_path / 'logs', level='DEBUG', log_to_console=False)
        get_logger('snapshot').debug('hello')
        for handler in logger.handlers:
            handler.flush()
        logs = list((tmp_path / 'logs').glob('netball_*.log'))
        assert len(logs) == 1
        assert 'hello' in logs[0].read_text()
        for handler in logger.handlers:
            handler.close()
        logger.handlers = []


class TestCli:
    """Tests for the season report command."""

    def test_main_writes_report(self, snapshot_path, tmp_path, monkeypatch, capsys, default_config):
        """Test the CLI prints a summary and saves the report."""
        output = tmp_path / 'team_1.json'
        monkeypatch.setattr(
            sys, 'argv',
            ['season_report.py', '--snapshot', str(snapshot_path), '--team', '1',
             '--output', str(output)],
        )
        season_report.main()
        out = capsys.readouterr().out
        assert 'TEAM 1 GAMES' in out
        assert '2W 0L 0D' in out
        assert output.exists()

    def test_missing_snapshot_exits(self, tmp_path, monkeypatch, default_config):
        """Test a missing snapshot exits with status 1."""
        monkeypatch.setattr(
            sys, 'argv',
            ['season_report.py', '--snapshot', str(tmp_path / 'nope.json'), '--team', '1'],
        )
        with pytest.raises(SystemExit) as exc:
            season_report.main()
        assert exc.value.code == 1
