"""Per-symbol views and settlement alignment."""

from conftest import H, NOW, fact

from CORE.alignment import align, build_symbol_views, candidate_targets, project_at


def test_views_require_two_qualifying_sources():
    table = {
        "Binance": {"BTCUSDT": fact(), "ETHUSDT": fact("ETHUSDT")},
        "OKX": {"BTCUSDT": fact()},
    }
    views = build_symbol_views(table, now_ms=NOW)
    assert [v.symbol for v in views] == ["BTCUSDT"]
    assert [s for s, _ in views[0].legs] == ["Binance", "OKX"]


def test_invalid_and_past_facts_do_not_qualify():
    table = {
        "Binance": {"BTCUSDT": fact(), "ETHUSDT": fact("ETHUSDT")},
        "OKX": {"BTCUSDT": fact(price=0.0), "ETHUSDT": fact("ETHUSDT", next_ms=NOW)},
        "Gate": {"BTCUSDT": fact(next_ms=0)},
    }
    assert build_symbol_views(table, now_ms=NOW) == []


def test_candidate_targets_are_distinct_and_ascending():
    table = {
        "A": {"X": fact("X", next_ms=NOW + 8 * H)},
        "B": {"X": fact("X", next_ms=NOW + H)},
        "C": {"X": fact("X", next_ms=NOW + 8 * H)},
    }
    (view,) = build_symbol_views(table, now_ms=NOW)
    assert candidate_targets(view) == [NOW + H, NOW + 8 * H]


def test_unsettled_leg_is_kept_with_zero():
    table = {
        "A": {"X": fact("X", rate=0.002, interval=1, next_ms=NOW + H)},
        "B": {"X": fact("X", rate=-0.001, interval=8, next_ms=NOW + 8 * H)},
    }
    (view,) = build_symbol_views(table, now_ms=NOW)
    by_target = dict(align(view, now_ms=NOW))

    early = {p.source: p for p in by_target[NOW + H]}
    assert early["A"].settlements == 1
    assert early["B"].settlements == 0
    assert early["B"].accumulated_rate == 0.0

    late = {p.source: p for p in by_target[NOW + 8 * H]}
    assert late["A"].settlements == 8
    assert late["A"].accumulated_rate == 0.002 * 8
    assert late["B"].settlements == 1
    assert late["B"].accumulated_rate == -0.001


def test_align_skips_instants_not_in_future():
    table = {
        "A": {"X": fact("X", next_ms=NOW + H)},
        "B": {"X": fact("X", next_ms=NOW + 2 * H)},
    }
    (view,) = build_symbol_views(table, now_ms=NOW)
    targets = [t for t, _ in align(view, now_ms=NOW + H)]
    assert targets == [NOW + 2 * H]


def test_project_at_covers_every_leg():
    table = {
        "A": {"X": fact("X", next_ms=NOW + H)},
        "B": {"X": fact("X", next_ms=NOW + 2 * H)},
        "C": {"X": fact("X", next_ms=NOW + 3 * H)},
    }
    (view,) = build_symbol_views(table, now_ms=NOW)
    assert sorted(p.source for p in project_at(view, NOW + H)) == ["A", "B", "C"]
