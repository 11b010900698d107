import json
from pathlib import Path

from .models import RegistryEntry, RegistryReport


def build_report(entries: dict[str, RegistryEntry]) -> RegistryReport:
    """Report with entries ordered by plugin id."""
    return RegistryReport(registry={k: entries[k] for k in sorted(entries)})


def save_report(report: RegistryReport, output_path: Path):
    """Write the whole report; an existing file is replaced, never appended."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(report.to_json() + "\n", encoding="utf-8")


def load_report(report_path: Path) -> dict:
    """Load a generated report as plain JSON."""
    with open(report_path, encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict) or not isinstance(data.get("registry"), dict):
        raise ValueError(f"{report_path} is not a generated registry report")
    return data
