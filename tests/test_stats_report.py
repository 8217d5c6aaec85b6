from __future__ import annotations

from rich.console import Console

from adapters.stats_report import build_stats_table, print_stats


def _snapshot() -> dict:
    return {
        "stats": {"received": 4, "rejections": {"duplicate": 2, "race": 0}},
        "circuit_breaker": {"is_open": False},
        "reconnect_window_active": True,
    }


def test_table_flattens_sections_and_hides_zero_rejections() -> None:
    table = build_stats_table(_snapshot())
    # received, rejections.duplicate, is_open, reconnect_window_active
    assert table.row_count == 4


def test_print_stats_renders_names() -> None:
    console = Console(record=True, width=120)
    print_stats(_snapshot(), console=console)
    output = console.export_text()

    assert "stats.received" in output
    assert "stats.rejections.duplicate" in output
    assert "race" not in output
    assert "reconnect_window_active" in output
