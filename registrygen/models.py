from datetime import datetime, timezone

from pydantic import BaseModel, Field


class TrackSupport(BaseModel):
    version: str | None = None
    branch: str | None = None
    supported: bool = False


class SupportVerdict(BaseModel):
    v0: TrackSupport = Field(default_factory=TrackSupport)
    v1: TrackSupport = Field(default_factory=TrackSupport)


class GitTrack(BaseModel):
    version: str | None = None
    branch: str | None = None


class GitInfo(BaseModel):
    repo: str = Field(..., description="owner/repo on GitHub")
    v0: GitTrack = Field(default_factory=GitTrack)
    v1: GitTrack = Field(default_factory=GitTrack)


class NpmInfo(BaseModel):
    repo: str = Field(..., description="npm package name that was looked up")
    v0: str | None = None
    v1: str | None = None


class Supports(BaseModel):
    v0: bool = False
    v1: bool = False


class RegistryEntry(BaseModel):
    git: GitInfo
    npm: NpmInfo
    supports: Supports

    @classmethod
    def from_verdict(
        cls, verdict: SupportVerdict, repo: str, npm: NpmInfo
    ) -> "RegistryEntry":
        return cls(
            git=GitInfo(
                repo=repo,
                v0=GitTrack(version=verdict.v0.version, branch=verdict.v0.branch),
                v1=GitTrack(version=verdict.v1.version, branch=verdict.v1.branch),
            ),
            npm=npm,
            supports=Supports(v0=verdict.v0.supported, v1=verdict.v1.supported),
        )


class RegistryReport(BaseModel):
    generated_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        serialization_alias="generatedAt",
    )
    registry: dict[str, RegistryEntry] = Field(default_factory=dict)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)
