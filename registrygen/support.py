"""
Reconcile manifest, git-tag and npm signals into one verdict per plugin.

Priority is manifest > git tag > npm. The manifest only ever contributes a
branch and a support flag; the version comes from git tags, with npm as the
fallback when tag data is missing (for example after an API failure).
"""

from .manifest import ManifestSignals
from .models import SupportVerdict, TrackSupport
from .versions import TRACKS


def reconcile(
    manifest: ManifestSignals,
    git_tracks: dict[str, str | None],
    npm_tracks: dict[str, str | None],
) -> SupportVerdict:
    branches = {"v0": manifest.v0_branch, "v1": manifest.v1_branch}

    tracks = {}
    for track in TRACKS:
        git_version = git_tracks.get(track)
        npm_version = npm_tracks.get(track)
        branch = branches[track]

        tracks[track] = TrackSupport(
            version=git_version or npm_version or None,
            branch=branch,
            supported=bool(branch or git_version or npm_version),
        )

    return SupportVerdict(**tracks)
