import json
import re
from dataclasses import dataclass
from pathlib import Path

import requests

GIT_REF_PATTERN = re.compile(r"^github:([A-Za-z0-9_.-]+)/([A-Za-z0-9_.-]+)$")


class RegistryIndexError(Exception):
    """Registry index could not be read or is not a JSON object."""


@dataclass(frozen=True)
class GitRef:
    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


def parse_git_ref(git_ref: str) -> GitRef | None:
    """Parse 'github:owner/repo'; anything else returns None."""
    if not isinstance(git_ref, str):
        return None
    match = GIT_REF_PATTERN.match(git_ref.strip())
    if not match:
        return None
    return GitRef(owner=match.group(1), repo=match.group(2))


def filter_registry(raw: dict) -> dict[str, str]:
    """
    Returns: {plugin_id: 'github:owner/repo'}

    Example:
        {'@elizaos-plugins/plugin-solana': 'github:elizaos-plugins/plugin-solana'}

    Drops entries with an empty key, a non-string value, or a value that is
    not a github reference.
    """
    result = {}
    for plugin_id, git_ref in raw.items():
        if not plugin_id or not plugin_id.strip():
            continue
        if parse_git_ref(git_ref) is None:
            continue
        result[plugin_id] = git_ref.strip()
    return result


def _require_object(data, source: str) -> dict:
    if not isinstance(data, dict):
        raise RegistryIndexError(f"{source}: expected a JSON object")
    return data


def load_registry_index(index_path: Path) -> dict[str, str]:
    """Read the local index.json and return its valid entries."""
    try:
        with open(index_path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise RegistryIndexError(f"Failed to read {index_path}: {e}") from e

    return filter_registry(_require_object(data, str(index_path)))


def fetch_registry_index(url: str, timeout: float = 30.0) -> dict[str, str]:
    """Download a published index.json and return its valid entries."""
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
        data = resp.json()
    except (requests.RequestException, ValueError) as e:
        raise RegistryIndexError(f"Failed to fetch {url}: {e}") from e

    return filter_registry(_require_object(data, url))


def guess_npm_name(
    plugin_id: str,
    scope_from: str = "@elizaos-plugins/",
    scope_to: str = "@elizaos/",
) -> str:
    """'@elizaos-plugins/plugin-x' is published on npm as '@elizaos/plugin-x'."""
    if plugin_id.startswith(scope_from):
        return scope_to + plugin_id[len(scope_from) :]
    return plugin_id
