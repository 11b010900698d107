import semantic_version

TRACKS = {"v0": 0, "v1": 1}


def parse_version(raw: str) -> semantic_version.Version | None:
    """
    Normalize a tag name or npm version string.

    Leading '=' / 'v' prefixes are stripped the way `semver.clean` does it,
    so "v1.2.3" and "=1.2.3" both parse as 1.2.3. Anything that is not a
    strict major.minor.patch version returns None.
    """
    if not isinstance(raw, str):
        return None

    cleaned = raw.strip().lstrip("=v").strip()
    if not cleaned.isascii():
        # semantic_version's \d would accept non-ASCII digits
        return None
    try:
        return semantic_version.Version(cleaned)
    except ValueError:
        return None


def select_latest(raw_versions, major: int) -> str | None:
    """
    Pick the latest version of one major track from a single source.

    Stable releases win over prereleases of the same major; among the
    remaining candidates the highest by semver precedence is returned in
    its original (unnormalized) form.
    """
    candidates = []
    for raw in raw_versions:
        version = parse_version(raw)
        if version is None or version.major != major:
            continue
        candidates.append((version, raw))

    if not candidates:
        return None

    stable = [c for c in candidates if not c[0].prerelease]
    pool = stable or candidates

    # max() keeps the first of equal-precedence versions (e.g. differing builds)
    return max(pool, key=lambda c: c[0])[1]


def select_tracks(raw_versions) -> dict[str, str | None]:
    """Returns: {'v0': str | None, 'v1': str | None}"""
    raw_versions = list(raw_versions)
    return {
        track: select_latest(raw_versions, major) for track, major in TRACKS.items()
    }
