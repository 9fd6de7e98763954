"""
Compute CLI: rebuild ratings, leaderboards and event tables from CSV exports.

Singles and teams histories are folded separately and produce one
leaderboard each. The event catalog and faction statistics cover both.

Usage examples:
  standings-compute --players players.csv --singles singles.csv --output-dir out
  standings-compute --singles singles.csv --teams teams.csv --output-dir out
      --event "Gash Hammer Gaming July RTT" --event-date 2025-07-12
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

import polars as pl

from standings import __version__
from standings.analysis import faction_stats, recompute_all
from standings.core.config import PipelineConfig, RatingConfig
from standings.core.logging import (
    get_logger,
    log_dataframe_stats,
    log_timing,
    setup_logging,
)
from standings.core.parser import (
    deduplicate_matches,
    normalize_matches,
    parse_date,
    parse_players,
)
from standings.core.records import MatchRecord, Player
from standings.core.sentry import init_sentry
from standings.postprocess import build_leaderboard
from standings.tournaments import (
    build_event_catalog,
    catalog_dataframe,
    group_events,
    place_event,
)

logger = get_logger("standings.cli.compute")


def _read_csv(path: str) -> pl.DataFrame:
    # Every column as text; the normalizer does the parsing
    df = pl.read_csv(path, infer_schema=False)
    log_dataframe_stats(logger, df, Path(path).name)
    return df


def _load_matches(path: str, is_team_match: bool) -> list[MatchRecord]:
    records, report = normalize_matches(
        _read_csv(path), is_team_match=is_team_match
    )
    records, duplicates = deduplicate_matches(records)
    logger.info(
        "%s: %s, %d duplicates", Path(path).name, report, duplicates
    )
    return records


def _select_event(
    matches: list[MatchRecord], name: str, event_date: Optional[str]
) -> list[MatchRecord]:
    wanted_date = parse_date(event_date) if event_date else None
    if event_date and wanted_date is None:
        raise ValueError(f"Unparseable --event-date: {event_date!r}")

    candidates = [
        (key, event_matches)
        for key, event_matches in group_events(matches).items()
        if key[1] == name and (wanted_date is None or key[0] == wanted_date)
    ]
    if not candidates:
        raise ValueError(f"No matches found for event {name!r}")
    # Newest instance when the name recurs and no date was given
    candidates.sort(key=lambda item: (item[0][0] is not None, item[0][0]))
    return candidates[-1][1]


def _write_leaderboard(
    label: str,
    matches: list[MatchRecord],
    roster: Optional[dict[str, Player]],
    config: PipelineConfig,
    out_dir: Path,
) -> None:
    with log_timing(logger, f"{label} rating fold"):
        result = recompute_all(matches, roster, config.rating)
    leaderboard = build_leaderboard(result, roster, config.leaderboard)
    path = out_dir / f"{label}_leaderboard.csv"
    leaderboard.to_dataframe().write_csv(path)
    logger.info("Wrote %d %s leaderboard rows -> %s", len(leaderboard), label, path)


def run(args: argparse.Namespace) -> None:
    config = PipelineConfig()
    if args.league_rules:
        config.rating = RatingConfig.league()

    out_dir = Path(args.output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    roster = parse_players(_read_csv(args.players)) if args.players else None

    singles = _load_matches(args.singles, False) if args.singles else []
    teams = _load_matches(args.teams, True) if args.teams else []

    if args.singles:
        _write_leaderboard("singles", singles, roster, config, out_dir)
    if args.teams:
        _write_leaderboard("teams", teams, roster, config, out_dir)

    everything = singles + teams
    catalog = build_event_catalog(
        everything, team_game_total=config.placement.team_game_total
    )
    catalog_dataframe(catalog).write_csv(out_dir / "events.csv")
    logger.info("Wrote %d events -> %s", len(catalog), out_dir / "events.csv")

    factions = faction_stats(everything, consolidate=config.consolidate_factions)
    factions.write_csv(out_dir / "factions.csv")
    logger.info("Wrote %d factions -> %s", factions.height, out_dir / "factions.csv")

    if args.event:
        event_matches = _select_event(everything, args.event, args.event_date)
        placement = place_event(event_matches, config.placement, roster)
        placement.to_dataframe().write_csv(out_dir / "placements.csv")
        logger.info(
            "Placed %d %s for %s",
            len(placement),
            "teams" if placement.is_team_event else "players",
            args.event,
        )


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Recompute league ratings and write leaderboard/event tables"
    )
    parser.add_argument(
        "--players",
        type=str,
        default=None,
        help="Roster CSV (id, name, state, country)",
    )
    parser.add_argument(
        "--singles",
        type=str,
        default=None,
        help="Singles match history CSV",
    )
    parser.add_argument(
        "--teams",
        type=str,
        default=None,
        help="Teams match history CSV",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="data/standings",
        help="Directory for output CSVs (default: data/standings)",
    )
    parser.add_argument(
        "--event",
        type=str,
        default=None,
        help="Also write placements.csv for this event name",
    )
    parser.add_argument(
        "--event-date",
        type=str,
        default=None,
        help="Date of the --event instance (default: newest)",
    )
    parser.add_argument(
        "--league-rules",
        action="store_true",
        help="Clamp rating changes and apply the bye penalty",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    args = parser.parse_args(argv)

    if not (args.singles or args.teams):
        parser.error("at least one of --singles or --teams is required")

    setup_logging(args.log_level, format_style="detailed")
    init_sentry(context="standings_compute", release=__version__)

    try:
        run(args)
    except (OSError, ValueError, pl.exceptions.PolarsError) as e:
        logger.error("standings-compute failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
