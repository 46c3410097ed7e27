from pydantic import BaseModel, Field, field_validator

DEFAULT_EXCLUDED_PREFIXES = [
    "/api",
    "/_next/static",
    "/_next/image",
    "/assets",
    "/static",
    "/favicon.ico",
]


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class RedirectRules(BaseModel):
    collection: str = "redirects"
    cache_duration_seconds: float = Field(default=60.0, gt=0)
    fetch_timeout_seconds: float = Field(default=5.0, gt=0)
    excluded_prefixes: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDED_PREFIXES))
    skip_static_files: bool = True

    @field_validator("excluded_prefixes")
    @classmethod
    def prefixes_are_absolute(cls, value: list[str]) -> list[str]:
        for prefix in value:
            if not prefix.startswith("/"):
                raise ValueError(f"excluded prefix must start with '/': {prefix!r}")
        return value


class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)


class Rules(BaseModel):
    project: ProjectRules
    redirects: RedirectRules = Field(default_factory=RedirectRules)
    ops: OpsRules = Field(default_factory=OpsRules)
