"""Terminal rendering of the processor's stats snapshot."""

from __future__ import annotations

from typing import Any, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text


def _format_value(value: Any) -> Text:
    if isinstance(value, bool):
        return Text("yes" if value else "no", style="red" if value else "green")
    return Text(str(value))


def build_stats_table(snapshot: dict, title: str = "Relay stats") -> Table:
    """Flatten the nested snapshot into a two-column table."""

    table = Table(title=title, show_lines=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    for section, values in snapshot.items():
        if not isinstance(values, dict):
            table.add_row(section, _format_value(values))
            continue
        for name, value in values.items():
            if isinstance(value, dict):
                # Rejections: only show reasons that actually happened.
                for reason, count in value.items():
                    if count:
                        table.add_row(f"{section}.{name}.{reason}", _format_value(count))
                continue
            table.add_row(f"{section}.{name}", _format_value(value))
    return table


def print_stats(snapshot: dict, console: Optional[Console] = None) -> None:
    (console or Console()).print(build_stats_table(snapshot))
