from pydantic import BaseModel, Field


class GeneratorConfig(BaseModel):
    """Knobs for the fetch orchestration; passed explicitly, never global."""

    batch_size: int = Field(10, ge=1, le=100, description="Plugins per batch")
    batch_delay: float = Field(
        1.0, ge=0, description="Seconds to wait between batches"
    )
    max_retries: int = Field(3, ge=0, le=10, description="Retries per request")
    backoff_base: float = Field(1.0, ge=0, description="Backoff base in seconds")
    max_backoff: float = Field(30.0, ge=0, description="Upper bound for a delay")
    timeout: float = Field(30.0, gt=0, description="HTTP timeout in seconds")

    core_package: str = Field(
        "@elizaos/core", description="Shared core library in package.json"
    )
    npm_scope_from: str = Field(
        "@elizaos-plugins/", description="Scope used by registry identifiers"
    )
    npm_scope_to: str = Field("@elizaos/", description="Scope published on npm")

    github_api_url: str = "https://api.github.com"
    npm_registry_url: str = "https://registry.npmjs.org"
