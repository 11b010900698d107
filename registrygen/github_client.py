import base64
import json

import httpx

from .error_logger import ErrorLogger
from .manifest import BranchManifest, parse_package_json


class GitHubClient:
    """
    Read-only GitHub REST calls used by the generator.

    Every method degrades to an empty result on failure and records the
    failure in the error logger; none of them raise for HTTP problems.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        error_logger: ErrorLogger,
        core_package: str = "@elizaos/core",
    ):
        self.client = client
        self.error_logger = error_logger
        self.core_package = core_package

    async def list_branches(self, owner: str, repo: str) -> list[str]:
        """All branch names, following the Link header across pages."""
        names = []
        try:
            resp = await self.client.get(
                f"/repos/{owner}/{repo}/branches", params={"per_page": 100}
            )
            while True:
                resp.raise_for_status()
                names.extend(b["name"] for b in resp.json())

                next_url = resp.links.get("next", {}).get("url")
                if not next_url:
                    return names
                resp = await self.client.get(next_url)
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            self._log(owner, repo, "branches_failed", e)
            return []

    async def list_tags(self, owner: str, repo: str) -> list[str]:
        """Up to 100 most recent tag names."""
        try:
            resp = await self.client.get(
                f"/repos/{owner}/{repo}/tags", params={"per_page": 100}
            )
            resp.raise_for_status()
            return [t["name"] for t in resp.json()]
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            self._log(owner, repo, "tags_failed", e)
            return []

    async def fetch_manifest(
        self, owner: str, repo: str, branch: str
    ) -> BranchManifest | None:
        """Fetch package.json at `branch` via the contents API."""
        try:
            resp = await self.client.get(
                f"/repos/{owner}/{repo}/contents/package.json",
                params={"ref": branch},
            )
            if resp.status_code == 404:
                # No package.json on this branch is not a failure
                return None
            resp.raise_for_status()

            data = resp.json()
            if not isinstance(data, dict) or "content" not in data:
                return None

            payload = json.loads(base64.b64decode(data["content"]).decode("utf-8"))
            return parse_package_json(payload, branch, self.core_package)

        except (httpx.HTTPError, ValueError, TypeError) as e:
            self._log(owner, repo, "manifest_failed", e, branch=branch)
            return None

    def _log(self, owner: str, repo: str, error_type: str, error, **details):
        print(f"  Warning: {error_type} for {owner}/{repo}: {error}")
        self.error_logger.log_error(
            source=f"{owner}/{repo}",
            error_type=error_type,
            message=str(error),
            details={"owner": owner, "repo": repo, **details},
        )
