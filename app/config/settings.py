from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Jira Cloud site, e.g. https://your-team.atlassian.net
    jira_base_url: str = "https://your-domain.atlassian.net"
    # Total request timeout for Jira calls (connect timeout is fixed at 5s)
    jira_timeout_seconds: float = 30.0

    # Issue queried when the caller omits issueKey (legacy panel behaviour)
    default_issue_key: str = "KC-24"
    # Reject requests without issueKey instead of falling back to the default
    require_issue_key: bool = False

    # Application
    debug: bool = False
    cors_origins: list[str] = ["http://localhost:3000"]


settings = Settings()
