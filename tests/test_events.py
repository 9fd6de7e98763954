from datetime import date

from standings.core.records import MatchRecord, MatchType
from standings.tournaments.events import (
    build_event_catalog,
    catalog_dataframe,
    event_date_code,
    event_size_label,
    events_won,
    filter_events,
    group_events,
    slugify,
)


def _game(p1, p2, s1, s2, event, day, round_number=1, team1=None, team2=None):
    return MatchRecord(
        date=day,
        player1_id=p1,
        player2_id=p2,
        score1=s1,
        score2=s2,
        player1_faction="Orks",
        player2_faction="Necrons",
        event_name=event,
        round_number=round_number,
        is_team_match=team1 is not None,
        team1_id=team1,
        team2_id=team2,
    )


def _history():
    june = date(2025, 6, 7)
    july = date(2025, 7, 12)
    august = date(2025, 8, 2)
    games = [
        _game("x", "y", 80, 40, "RTT Cup", june, 1),
        _game("x", "z", 70, 60, "RTT Cup", june, 2),
        _game("y", "z", 50, 45, "RTT Cup", june, 3),
    ]
    games += [
        _game("y", "x", 75, 35, "Winter GT", july, n) for n in range(1, 5)
    ]
    games += [
        _game("x1", "y1", 12, 8, "Teams Cup", august, 1, "T1", "T2"),
        _game("y2", "x2", 9, 11, "Teams Cup", august, 1, "T2", "T1"),
    ]
    # Same name, different date: a separate instance
    games.append(_game("z", "y", 60, 20, "RTT Cup", date(2024, 6, 8), 1))
    return games


def test_event_size_labels():
    assert event_size_label(0) == ""
    assert event_size_label(1) == "RTT"
    assert event_size_label(3) == "RTT"
    assert event_size_label(4) == "GT"
    assert event_size_label(5) == "GT"
    assert event_size_label(6) == "Super Major"
    assert event_size_label(9) == "Super Major"


def test_slugify_and_date_code():
    assert slugify("Gash Hammer Gaming July RTT") == "gash-hammer-gaming-july-rtt"
    assert slugify("  Kill Team: Open! ") == "kill-team-open"
    assert event_date_code(date(2025, 7, 5)) == "050725"
    assert event_date_code(None) == ""


def test_group_events_by_date_and_name():
    groups = group_events(_history())
    assert list(groups) == [
        (date(2025, 6, 7), "RTT Cup"),
        (date(2025, 7, 12), "Winter GT"),
        (date(2025, 8, 2), "Teams Cup"),
        (date(2024, 6, 8), "RTT Cup"),
    ]
    assert len(groups[(date(2025, 6, 7), "RTT Cup")]) == 3


def test_catalog_newest_first_with_types():
    catalog = build_event_catalog(_history())
    assert [(s.name, s.date) for s in catalog] == [
        ("Teams Cup", date(2025, 8, 2)),
        ("Winter GT", date(2025, 7, 12)),
        ("RTT Cup", date(2025, 6, 7)),
        ("RTT Cup", date(2024, 6, 8)),
    ]
    teams, gt, rtt, _ = catalog
    assert teams.match_type is MatchType.TEAMS
    assert gt.match_type is MatchType.SINGLES
    assert gt.event_type == "GT"
    assert rtt.event_type == "RTT"
    assert rtt.round_count == 3
    assert rtt.event_id == "rtt-cup/070625"


def test_catalog_skips_undated_matches():
    games = [_game("a", "b", 1, 0, "Garage Night", None)]
    assert build_event_catalog(games) == []


def test_filter_events():
    catalog = build_event_catalog(_history())
    assert [s.name for s in filter_events(catalog, match_type="Teams")] == [
        "Teams Cup"
    ]
    assert [s.name for s in filter_events(catalog, event_type="GT")] == [
        "Winter GT"
    ]
    assert len(filter_events(catalog, search="rtt")) == 2
    assert filter_events(catalog, match_type="Singles", search="teams") == []


def test_catalog_dataframe():
    df = catalog_dataframe(build_event_catalog(_history()))
    assert df.height == 4
    assert df["event_type"].to_list() == ["RTT", "GT", "RTT", "RTT"]
    assert df.columns[:3] == ["date", "name", "event_id"]


def test_events_won_singles_and_teams():
    history = _history()
    assert events_won("x", history) == [(date(2025, 6, 7), "RTT Cup")]
    assert events_won("y", history) == [(date(2025, 7, 12), "Winter GT")]
    assert events_won("z", history) == [(date(2024, 6, 8), "RTT Cup")]
    # Team T1 wins 23-17 within the draw margin, so it is a drawn round
    # and T1 tops the table on points
    assert events_won("x2", history) == [(date(2025, 8, 2), "Teams Cup")]
    assert events_won("y1", history) == []
    assert events_won("nobody", history) == []


def test_repeated_rows_do_not_inflate_catalog():
    history = _history()
    catalog = build_event_catalog(history + history[:2])
    rtt = next(s for s in catalog if s.date == date(2025, 6, 7))
    assert rtt.match_count == 3
    assert events_won("x", history + history[:2]) == [
        (date(2025, 6, 7), "RTT Cup")
    ]
