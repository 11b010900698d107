from dataclasses import dataclass
from typing import Any

import semantic_version

from .versions import parse_version

# Probe order matters: the first positive branch wins for each major
CANDIDATE_BRANCHES = ("main", "master", "0.x", "1.x")

V0_PROBE = semantic_version.Version("0.9.0")
V1_PROBE = semantic_version.Version("1.0.0")


@dataclass(frozen=True)
class BranchManifest:
    declared_version: str
    core_dependency_range: str | None
    branch_name: str


@dataclass(frozen=True)
class ManifestCheck:
    supports_v0: bool = False
    supports_v1: bool = False


@dataclass(frozen=True)
class ManifestSignals:
    v0_branch: str | None = None
    v1_branch: str | None = None

    @property
    def supports_v0(self) -> bool:
        return self.v0_branch is not None

    @property
    def supports_v1(self) -> bool:
        return self.v1_branch is not None


def candidate_branches(existing: list[str]) -> list[str]:
    """Candidate branches that actually exist on the remote, in probe order."""
    existing = set(existing)
    return [b for b in CANDIDATE_BRANCHES if b in existing]


def parse_package_json(
    payload: dict[str, Any], branch: str, core_package: str
) -> BranchManifest | None:
    """
    Build a BranchManifest from a decoded package.json.

    The core range is taken from `dependencies` first, then
    `peerDependencies`. Returns None when the payload has no usable version.
    """
    if not isinstance(payload, dict):
        return None

    version = payload.get("version")
    if not isinstance(version, str):
        return None

    core_range = None
    for section in ("dependencies", "peerDependencies"):
        deps = payload.get(section)
        if isinstance(deps, dict) and isinstance(deps.get(core_package), str):
            core_range = deps[core_package]
            break

    return BranchManifest(
        declared_version=version,
        core_dependency_range=core_range,
        branch_name=branch,
    )


def _satisfies(probe: semantic_version.Version, range_expr: str) -> bool:
    try:
        return semantic_version.NpmSpec(range_expr).match(probe)
    except ValueError:
        # workspace:*, git urls, tags like "latest"
        return False


def check_manifest(manifest: BranchManifest) -> ManifestCheck:
    """
    Cross-check a manifest's own version against its core dependency range.

    A caret range alone can span both majors, so a track only counts when
    the package's declared major agrees with the probe that satisfies the
    range. Missing range or unparsable version gives no signal.
    """
    if not manifest.core_dependency_range:
        return ManifestCheck()

    declared = parse_version(manifest.declared_version)
    if declared is None:
        return ManifestCheck()

    range_expr = manifest.core_dependency_range
    return ManifestCheck(
        supports_v0=declared.major == 0 and _satisfies(V0_PROBE, range_expr),
        supports_v1=declared.major >= 1 and _satisfies(V1_PROBE, range_expr),
    )


def manifest_signals(manifests: list[BranchManifest]) -> ManifestSignals:
    """Combine per-branch checks; first positive branch in probe order wins."""
    order = {name: i for i, name in enumerate(CANDIDATE_BRANCHES)}
    ordered = sorted(
        manifests, key=lambda m: order.get(m.branch_name, len(CANDIDATE_BRANCHES))
    )

    v0_branch = None
    v1_branch = None
    for manifest in ordered:
        check = check_manifest(manifest)
        if check.supports_v0 and v0_branch is None:
            v0_branch = manifest.branch_name
        if check.supports_v1 and v1_branch is None:
            v1_branch = manifest.branch_name

    return ManifestSignals(v0_branch=v0_branch, v1_branch=v1_branch)
