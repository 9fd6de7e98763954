"""Faction win/loss/draw statistics across the match history."""

from __future__ import annotations

from typing import Iterable

import polars as pl

from standings.core.parser import deduplicate_matches
from standings.core.records import MatchRecord, MatchResult

# Sub-factions and common misspellings reported under their parent faction
FACTION_ALIASES: dict[str, str] = {
    "Ultramarines": "Space Marines (Astartes)",
    "Salamanders": "Space Marines (Astartes)",
    "Iron Hands": "Space Marines (Astartes)",
    "Farsight Enclaves": "T'au Empire",
    "Steel Legion": "Astra Militarum",
    "Hive Fleet Leviathan": "Tyranids",
    "Hive Fleet Hydra": "Tyranids",
    "Hive Fleet Hyrda": "Tyranids",
    "Forces of the Hive Mind": "Tyranids",
    "Maynarkh": "Necrons",
    "Deathwing": "Dark Angels",
    "Iron Warriors": "Chaos Space Marines",
    "Alpha Legion": "Chaos Space Marines",
    "Khorne Daemons": "Chaos Daemons",
    "Adeptus Titanticus": "Adeptus Titanicus",
}

_ALIASES_LOWER = {key.lower(): value for key, value in FACTION_ALIASES.items()}


def normalize_faction(name: str) -> str:
    """Parent faction for ``name``; unknown names are returned unchanged.

    Examples:
        >>> normalize_faction("hive fleet leviathan")
        'Tyranids'
        >>> normalize_faction("Orks")
        'Orks'
    """
    if name in FACTION_ALIASES:
        return FACTION_ALIASES[name]
    return _ALIASES_LOWER.get(name.strip().lower(), name)


def _count(result: MatchResult) -> pl.Expr:
    return (pl.col("result") == result.value).sum().cast(pl.Int64)


def faction_stats(
    matches: Iterable[MatchRecord], consolidate: bool = True
) -> pl.DataFrame:
    """
    Per-faction record with win, loss and draw rates in percent.

    Each side of every match counts once for the faction it played;
    repeated rows of the same game are counted once.

    Parameters
    ----------
    matches : Iterable[MatchRecord]
        Canonical match records
    consolidate : bool
        Report sub-factions under their parent faction

    Returns
    -------
    pl.DataFrame
        Columns faction, wins, losses, draws, games, win_rate, loss_rate,
        draw_rate sorted by win rate then games, both descending
    """
    factions: list[str] = []
    results: list[str] = []
    unique, _ = deduplicate_matches(matches)
    for match in unique:
        for faction, own, opponent in (
            (match.player1_faction, match.score1, match.score2),
            (match.player2_faction, match.score2, match.score1),
        ):
            factions.append(normalize_faction(faction) if consolidate else faction)
            results.append(MatchResult.from_scores(own, opponent).value)

    long = pl.DataFrame(
        {"faction": factions, "result": results},
        schema={"faction": pl.Utf8, "result": pl.Utf8},
    )
    stats = long.group_by("faction").agg(
        _count(MatchResult.WIN).alias("wins"),
        _count(MatchResult.LOSS).alias("losses"),
        _count(MatchResult.DRAW).alias("draws"),
        pl.len().cast(pl.Int64).alias("games"),
    )
    rates = [
        (pl.col(column) / pl.col("games") * 100.0).round(1).alias(rate)
        for column, rate in (
            ("wins", "win_rate"),
            ("losses", "loss_rate"),
            ("draws", "draw_rate"),
        )
    ]
    return stats.with_columns(rates).sort(
        ["win_rate", "games", "faction"], descending=[True, True, False]
    )
