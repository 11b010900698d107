"""Tests for loading and filtering the registry index."""

import json
import tempfile
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
import requests

from registrygen.registry_index import (
    RegistryIndexError,
    fetch_registry_index,
    filter_registry,
    guess_npm_name,
    load_registry_index,
    parse_git_ref,
)


def test_parse_git_ref():
    ref = parse_git_ref("github:elizaos-plugins/plugin-solana")
    assert ref.owner == "elizaos-plugins"
    assert ref.repo == "plugin-solana"
    assert ref.full_name == "elizaos-plugins/plugin-solana"


def test_parse_git_ref_rejects_malformed():
    for bad in [
        "elizaos-plugins/plugin-solana",
        "gitlab:owner/repo",
        "github:owner",
        "github:/repo",
        "github:owner/",
        "github:owner/repo/extra",
        "",
        None,
    ]:
        assert parse_git_ref(bad) is None


def test_filter_registry_drops_invalid_entries():
    """Empty keys, non-strings and bad references never reach classification."""
    raw = {
        "@elizaos-plugins/plugin-a": "github:elizaos-plugins/plugin-a",
        "": "github:owner/repo",
        "@elizaos-plugins/plugin-b": "not-a-ref",
        "@elizaos-plugins/plugin-c": {"repo": "github:owner/c"},
        "@elizaos-plugins/plugin-d": "github:owner/plugin-d",
    }
    assert filter_registry(raw) == {
        "@elizaos-plugins/plugin-a": "github:elizaos-plugins/plugin-a",
        "@elizaos-plugins/plugin-d": "github:owner/plugin-d",
    }


def test_load_registry_index():
    with tempfile.TemporaryDirectory() as tmpdir:
        index_path = Path(tmpdir) / "index.json"
        index_path.write_text(
            json.dumps(
                {
                    "@elizaos-plugins/plugin-a": "github:elizaos-plugins/plugin-a",
                    "@elizaos-plugins/broken": "github:nope",
                }
            )
        )

        plugins = load_registry_index(index_path)

        assert plugins == {
            "@elizaos-plugins/plugin-a": "github:elizaos-plugins/plugin-a"
        }


def test_load_registry_index_errors(tmp_path):
    """Missing, malformed or non-object files are fatal input errors."""
    with pytest.raises(RegistryIndexError):
        load_registry_index(tmp_path / "missing.json")

    bad_json = tmp_path / "bad.json"
    bad_json.write_text("{not json")
    with pytest.raises(RegistryIndexError):
        load_registry_index(bad_json)

    a_list = tmp_path / "list.json"
    a_list.write_text('["github:owner/repo"]')
    with pytest.raises(RegistryIndexError):
        load_registry_index(a_list)


def test_fetch_registry_index():
    response = Mock()
    response.json.return_value = {
        "@elizaos-plugins/plugin-a": "github:elizaos-plugins/plugin-a",
        "comment": "see README",
    }
    with patch("registrygen.registry_index.requests.get", return_value=response):
        plugins = fetch_registry_index("https://example.com/index.json")

    response.raise_for_status.assert_called_once()
    assert list(plugins) == ["@elizaos-plugins/plugin-a"]


def test_fetch_registry_index_failure():
    with patch(
        "registrygen.registry_index.requests.get",
        side_effect=requests.ConnectionError("down"),
    ):
        with pytest.raises(RegistryIndexError):
            fetch_registry_index("https://example.com/index.json")


def test_guess_npm_name():
    assert guess_npm_name("@elizaos-plugins/plugin-x") == "@elizaos/plugin-x"
    assert guess_npm_name("@other/plugin-x") == "@other/plugin-x"
    assert guess_npm_name("@a/x", scope_from="@a/", scope_to="@b/") == "@b/x"
