"""Process configuration loaded from environment variables.

Environment variables:
    OWNER: GitHub organisation holding the phenotype repositories
    AUTH_TOKEN: Token with repo and delete_repo scopes for that organisation
    USER_NAME / USER_EMAIL: Committer identity for every write
    PORT: Port for the uvicorn entrypoint
    PHENOFLOW_STORE_TIMEOUT: Per-call timeout (seconds) for GitHub requests
    PHENOFLOW_KEEP_REPOSITORIES: Comma list never removed by DELETE /phenotypes/all
    PHENOFLOW_STATIC_PHENOTYPES: JSON file consumed by POST /initialise
    PHENOFLOW_GITHUB_API_URL: API base URL (GitHub Enterprise or tests)

Settings are fixed at startup. Without OWNER/AUTH_TOKEN the service falls
back to an in-memory store (local dev).
"""

import os
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_KEEP_REPOSITORIES = ("phenoflow-server",)


def _split_list(raw: Optional[str], default: tuple[str, ...]) -> list[str]:
    if raw is None:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Settings:
    """Service settings."""

    owner: str = ""
    auth_token: str = ""
    user_name: str = "phenoflow"
    user_email: str = "phenoflow@localhost"
    port: int = 8000
    store_timeout: float = 30.0
    keep_repositories: list[str] = field(
        default_factory=lambda: list(DEFAULT_KEEP_REPOSITORIES)
    )
    static_phenotypes_path: str = ""
    github_api_url: str = "https://api.github.com"

    @property
    def github_enabled(self) -> bool:
        return bool(self.owner and self.auth_token)

    @property
    def committer(self) -> dict[str, str]:
        return {"name": self.user_name, "email": self.user_email}

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the current environment."""
        return cls(
            owner=os.environ.get("OWNER", ""),
            auth_token=os.environ.get("AUTH_TOKEN", ""),
            user_name=os.environ.get("USER_NAME", "phenoflow"),
            user_email=os.environ.get("USER_EMAIL", "phenoflow@localhost"),
            port=int(os.environ.get("PORT", "8000")),
            store_timeout=float(os.environ.get("PHENOFLOW_STORE_TIMEOUT", "30")),
            keep_repositories=_split_list(
                os.environ.get("PHENOFLOW_KEEP_REPOSITORIES"),
                DEFAULT_KEEP_REPOSITORIES,
            ),
            static_phenotypes_path=os.environ.get("PHENOFLOW_STATIC_PHENOTYPES", ""),
            github_api_url=os.environ.get(
                "PHENOFLOW_GITHUB_API_URL", "https://api.github.com"
            ),
        )


# Singleton instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the global Settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Drop cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
