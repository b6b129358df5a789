#!/usr/bin/env python3
"""
Netball Season Report CLI

Builds a team's season report from an exported season snapshot.

Usage:
    python season_report.py --snapshot data/season_2025.json --team 3
    python season_report.py --snapshot data/season_2025.json --team 3 --club 1 --output reports/team_3.json
"""

import argparse
import logging
import sys
from pathlib import Path

from netball import build_team_report, load_snapshot, save_team_report
from netball.config import get_cache_ttl, get_log_level
from netball.cache import QueryCache
from netball.logging_config import setup_logging


def print_report(report: dict) -> None:
    """Print the human-readable summary of a report."""
    print("\n" + "=" * 60)
    print(f"TEAM {report['team_id']} GAMES")
    print("=" * 60)
    for game in report['games']:
        quarters = "  ".join(
            f"Q{q['quarter']} {q['team_score']}-{q['opponent_score']}"
            for q in game['quarter_scores']
        )
        opponent = game['opponent_team_id'] if game['opponent_team_id'] is not None else "-"
        print(
            f"  Game {game['game_id']} vs {opponent}: "
            f"{game['team_total']}-{game['opponent_total']} {game['result'].upper()}  [{quarters}]"
        )

    totals = report['season_totals']
    print("\nSeason totals")
    print(
        f"  For {totals['total_goals_for']} / Against {totals['total_goals_against']} "
        f"over {totals['games_with_stats']} games "
        f"(avg {totals['avg_for']:.1f} - {totals['avg_against']:.1f})"
    )

    breakdown = report['position_breakdown']
    print("\nCircle breakdown (per game)")
    for position, average in breakdown['averages'].items():
        print(f"  {position}: {average:.1f}")
    print(
        f"  Attack {breakdown['attack_total']:.1f} / Defense {breakdown['defense_total']:.1f}"
    )

    record = report['win_rate']
    print("\nRecord")
    print(
        f"  {record['wins']}W {record['losses']}L {record['draws']}D "
        f"({record['win_rate']:.1f}% of {record['total_games']})"
    )


def main():
    parser = argparse.ArgumentParser(description="Netball team season report")
    parser.add_argument(
        "--snapshot", "-s",
        required=True,
        help="Path to the season snapshot JSON",
    )
    parser.add_argument(
        "--team", "-t",
        type=int,
        required=True,
        help="Team id to report on",
    )
    parser.add_argument(
        "--club", "-c",
        type=int,
        default=None,
        help="Only count games this club played in",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Output path for the report JSON (defaults to reports/team_{ID}.json)",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress detailed output",
    )

    args = parser.parse_args()

    setup_logging(
        level=logging.WARNING if args.quiet else get_log_level(),
        log_to_file=False,
    )

    snapshot_path = Path(args.snapshot)
    if not snapshot_path.exists():
        print(f"Snapshot file not found: {snapshot_path}")
        sys.exit(1)

    output_path = Path(args.output) if args.output else Path("reports") / f"team_{args.team}.json"

    try:
        data = load_snapshot(snapshot_path)
    except ValueError as e:
        print(f"Invalid snapshot: {e}")
        sys.exit(1)

    report = build_team_report(
        data, args.team, club_id=args.club, cache=QueryCache(ttl_seconds=get_cache_ttl())
    )

    if not args.quiet:
        print_report(report)

    save_team_report(output_path, report)
    print(f"\nReport saved to {output_path}")


if __name__ == "__main__":
    main()
