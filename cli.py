#!/usr/bin/env python3
"""
Registry report viewer.

Usage:
    python cli.py generated-registry.json
    python cli.py generated-registry.json --track v1 --missing
"""

import argparse
import json
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from registrygen.report import load_report


def select_entries(
    registry: dict, track: str | None, missing: bool
) -> list[tuple[str, dict]]:
    """Entries filtered by support of one track (or all of them)."""
    rows = []
    for plugin_id in sorted(registry):
        entry = registry[plugin_id]
        if track:
            supported = entry.get("supports", {}).get(track, False)
            if supported == missing:
                continue
        rows.append((plugin_id, entry))
    return rows


def _cell(git_track: dict) -> str:
    version = git_track.get("version") or "-"
    branch = git_track.get("branch")
    return f"{version} ({branch})" if branch else version


def main(argv=None):
    parser = argparse.ArgumentParser(description="Show a generated registry report")
    parser.add_argument("report", type=Path, help="generated-registry.json")
    parser.add_argument("--track", choices=["v0", "v1"], help="Filter by track")
    parser.add_argument(
        "--missing",
        action="store_true",
        help="With --track, list plugins that do NOT support it",
    )
    args = parser.parse_args(argv)

    console = Console()

    try:
        data = load_report(args.report)
    except (OSError, json.JSONDecodeError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        return 1

    registry = data["registry"]
    rows = select_entries(registry, args.track, args.missing)

    table = Table(title=f"Registry ({data.get('generatedAt', 'unknown date')})")
    table.add_column("Plugin", style="cyan")
    table.add_column("v0")
    table.add_column("v1")
    table.add_column("npm")

    for plugin_id, entry in rows:
        git = entry.get("git", {})
        supports = entry.get("supports", {})
        table.add_row(
            plugin_id,
            _cell(git.get("v0", {})) if supports.get("v0") else "[red]✗[/red]",
            _cell(git.get("v1", {})) if supports.get("v1") else "[red]✗[/red]",
            entry.get("npm", {}).get("repo", "-"),
        )

    console.print(table)

    v0_count = sum(1 for e in registry.values() if e.get("supports", {}).get("v0"))
    v1_count = sum(1 for e in registry.values() if e.get("supports", {}).get("v1"))
    console.print(
        f"\n[bold]{len(registry)}[/bold] plugins • "
        f"v0: [green]{v0_count}[/green] • v1: [green]{v1_count}[/green]"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
