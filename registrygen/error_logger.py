from datetime import datetime, timezone
from pathlib import Path
from typing import Any
import json

ERROR_TYPES = ("branches_failed", "tags_failed", "manifest_failed", "npm_failed")


class ErrorLogger:
    """
    Fetch failures of one generation run.

    Each run owns the whole log: `save()` replaces whatever an earlier run
    left behind, the same way the report itself is rewritten.
    """

    def __init__(self, log_path: Path):
        self.log_path = log_path
        self.errors = []

    def log_error(
        self,
        source: str,
        error_type: str,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        """Record a fetch failure; the run carries on without that signal."""
        self.errors.append(
            {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "source": source,
                "error_type": error_type,
                "message": message,
                "details": details or {},
            }
        )

    def count(self, error_type: str) -> int:
        return sum(1 for e in self.errors if e["error_type"] == error_type)

    def counts(self) -> dict[str, int]:
        """Returns: {error_type: n} for every type seen this run"""
        seen = {e["error_type"] for e in self.errors}
        ordered = [t for t in ERROR_TYPES if t in seen]
        ordered += sorted(seen - set(ERROR_TYPES))
        return {t: self.count(t) for t in ordered}

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def save(self):
        """
        Write this run's failures, replacing any previous log.

        A clean run removes a stale log so it can't be mistaken for a
        failure of the current run. Raises OSError if the path is unwritable.
        """
        if not self.errors:
            self.log_path.unlink(missing_ok=True)
            return

        self.log_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "counts": self.counts(),
            "errors": self.errors,
        }
        tmp_path = self.log_path.with_name(self.log_path.name + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        tmp_path.replace(self.log_path)

        print(f"\n⚠️  Logged {len(self.errors)} errors to {self.log_path}")
