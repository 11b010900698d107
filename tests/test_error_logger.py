"""Tests for the per-run fetch error log."""

import json

from registrygen.error_logger import ErrorLogger


def test_save_without_errors_writes_nothing(tmp_path):
    logger = ErrorLogger(tmp_path / "errors.json")
    logger.save()

    assert not logger.has_errors()
    assert not (tmp_path / "errors.json").exists()


def test_save_replaces_unreadable_log(tmp_path):
    """A corrupt or foreign log from an earlier run is overwritten, not merged."""
    log_path = tmp_path / "errors.json"
    log_path.write_text('{"previous": "run"')

    logger = ErrorLogger(log_path)
    logger.log_error("o/r", "tags_failed", "HTTP 500", {"owner": "o", "repo": "r"})
    logger.log_error("@elizaos/p", "npm_failed", "timeout")
    logger.log_error("o/r", "tags_failed", "HTTP 502")
    logger.save()

    data = json.loads(log_path.read_text())
    assert data["counts"] == {"tags_failed": 2, "npm_failed": 1}
    assert [e["source"] for e in data["errors"]] == ["o/r", "@elizaos/p", "o/r"]
    assert data["errors"][0]["details"] == {"owner": "o", "repo": "r"}
    assert not (tmp_path / "errors.json.tmp").exists()


def test_clean_run_removes_stale_log(tmp_path):
    log_path = tmp_path / "errors.json"
    log_path.write_text(json.dumps([{"source": "old"}]))

    ErrorLogger(log_path).save()

    assert not log_path.exists()


def test_counts_follow_known_order():
    logger = ErrorLogger(None)
    logger.log_error("x", "npm_failed", "m")
    logger.log_error("x", "custom", "m")
    logger.log_error("x", "branches_failed", "m")

    assert list(logger.counts()) == ["branches_failed", "npm_failed", "custom"]
    assert logger.count("manifest_failed") == 0
