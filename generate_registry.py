#!/usr/bin/env python3
"""
Plugin registry generator.
Checks every plugin in index.json against GitHub and npm and writes a
report of which major versions (v0, v1) each plugin supports.

Usage:
    GITHUB_TOKEN=... uv run generate_registry.py [--index index.json]
"""

import argparse
import asyncio
import os
from pathlib import Path

from pydantic import ValidationError
from tqdm import tqdm

from registrygen.config import GeneratorConfig
from registrygen.error_logger import ErrorLogger
from registrygen.github_client import GitHubClient
from registrygen.manifest import candidate_branches, manifest_signals
from registrygen.models import NpmInfo, RegistryEntry, RegistryReport
from registrygen.npm_client import NpmClient
from registrygen.registry_index import (
    RegistryIndexError,
    fetch_registry_index,
    guess_npm_name,
    load_registry_index,
    parse_git_ref,
)
from registrygen.report import build_report, save_report
from registrygen.retry import build_client
from registrygen.support import reconcile
from registrygen.versions import select_tracks


class RegistryGeneration:
    def __init__(
        self,
        github: GitHubClient,
        npm: NpmClient,
        config: GeneratorConfig,
    ):
        self.github = github
        self.npm = npm
        self.config = config

    async def process_plugin(self, plugin_id: str, git_ref: str) -> RegistryEntry:
        """Gather all signals for one plugin and classify it."""
        ref = parse_git_ref(git_ref)
        if ref is None:
            raise ValueError(f"Invalid git reference: {git_ref}")

        npm_name = guess_npm_name(
            plugin_id, self.config.npm_scope_from, self.config.npm_scope_to
        )

        branches, tags, npm_versions = await asyncio.gather(
            self.github.list_branches(ref.owner, ref.repo),
            self.github.list_tags(ref.owner, ref.repo),
            self.npm.fetch_versions(npm_name),
        )

        candidates = candidate_branches(branches)
        manifests = await asyncio.gather(
            *(self.github.fetch_manifest(ref.owner, ref.repo, b) for b in candidates)
        )

        signals = manifest_signals([m for m in manifests if m is not None])
        git_tracks = select_tracks(tags)
        npm_tracks = select_tracks(npm_versions)
        verdict = reconcile(signals, git_tracks, npm_tracks)

        print(
            f"  ✓ {plugin_id} → v0:{verdict.v0.supported} v1:{verdict.v1.supported}"
        )

        return RegistryEntry.from_verdict(
            verdict,
            repo=ref.full_name,
            npm=NpmInfo(repo=npm_name, **npm_tracks),
        )

    async def _process_safely(
        self, plugin_id: str, git_ref: str
    ) -> tuple[str, RegistryEntry | None]:
        try:
            return plugin_id, await self.process_plugin(plugin_id, git_ref)
        except Exception as e:
            print(f"  ✗ {plugin_id} - error: {e}")
            return plugin_id, None

    async def generate(self, plugins: dict[str, str]) -> RegistryReport:
        """Process plugins in batches, pausing between batches."""
        items = sorted(plugins.items())
        size = self.config.batch_size
        batches = [items[i : i + size] for i in range(0, len(items), size)]

        entries = {}
        for index, batch in enumerate(tqdm(batches, desc="Batches")):
            results = await asyncio.gather(
                *(self._process_safely(pid, ref) for pid, ref in batch)
            )
            for plugin_id, entry in results:
                if entry is not None:
                    entries[plugin_id] = entry

            if index < len(batches) - 1 and self.config.batch_delay > 0:
                await asyncio.sleep(self.config.batch_delay)

        return build_report(entries)


async def run_generation(
    plugins: dict[str, str],
    github_token: str,
    config: GeneratorConfig,
    error_logger: ErrorLogger,
) -> RegistryReport:
    """Build the HTTP clients and run the generator over `plugins`."""
    github_headers = {
        "Authorization": f"token {github_token}",
        "Accept": "application/vnd.github+json",
    }
    async with (
        build_client(config.github_api_url, config, github_headers) as gh_client,
        build_client(config.npm_registry_url, config) as npm_client,
    ):
        generation = RegistryGeneration(
            github=GitHubClient(gh_client, error_logger, config.core_package),
            npm=NpmClient(npm_client, error_logger),
            config=config,
        )
        return await generation.generate(plugins)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Generate the plugin registry support report"
    )
    parser.add_argument(
        "--index",
        type=Path,
        default=Path("index.json"),
        help="Local registry index (default: index.json)",
    )
    parser.add_argument(
        "--index-url", help="Fetch the registry index from a URL instead"
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("generated-registry.json"),
        help="Report path (default: generated-registry.json)",
    )
    parser.add_argument(
        "--errors",
        type=Path,
        help="Error log path (default: errors.json next to the report)",
    )
    # Unset options fall back to GeneratorConfig's own defaults
    parser.add_argument("--batch-size", type=int)
    parser.add_argument("--batch-delay", type=float)
    parser.add_argument("--max-retries", type=int)

    args = parser.parse_args(argv)

    from dotenv import load_dotenv

    load_dotenv()

    github_token = os.environ.get("GITHUB_TOKEN")
    if not github_token:
        print("Error: GITHUB_TOKEN environment variable not set")
        print("  Get a token at: https://github.com/settings/tokens")
        return 1

    try:
        overrides = {
            "batch_size": args.batch_size,
            "batch_delay": args.batch_delay,
            "max_retries": args.max_retries,
        }
        config = GeneratorConfig(
            **{k: v for k, v in overrides.items() if v is not None}
        )
    except ValidationError as e:
        print(f"Error: invalid options\n{e}")
        return 1

    print("=" * 60)
    print("Plugin Registry Generation")
    print("=" * 60)

    print("\n[1/3] Loading registry index...")
    try:
        if args.index_url:
            plugins = fetch_registry_index(args.index_url, timeout=config.timeout)
        else:
            plugins = load_registry_index(args.index)
    except RegistryIndexError as e:
        print(f"✗ {e}")
        return 1
    print(f"  Found {len(plugins)} plugins")

    error_log_path = args.errors or args.output.parent / "errors.json"
    error_logger = ErrorLogger(error_log_path)

    print("\n[2/3] Checking GitHub and npm...")
    try:
        report = asyncio.run(
            run_generation(plugins, github_token, config, error_logger)
        )
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130

    print("\n[3/3] Writing report...")
    try:
        save_report(report, args.output)
    except OSError as e:
        print(f"✗ Failed to write {args.output}: {e}")
        return 1
    try:
        error_logger.save()
    except OSError as e:
        # The report is complete; a lost error log doesn't fail the run
        print(f"  Warning: could not write {error_logger.log_path}: {e}")

    print("\n" + "=" * 60)
    print(f"✓ Registry generated: {args.output}")
    print(f"  Generated {len(report.registry)} entries")
    if error_logger.has_errors():
        for error_type, n in error_logger.counts().items():
            print(f"  {error_type}: {n}")
        print(f"  Errors logged to: {error_logger.log_path}")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    exit(main())
