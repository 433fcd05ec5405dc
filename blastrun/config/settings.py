from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    blast_provider: str = "ncbi"
    blast_base_url: str = "https://blast.ncbi.nlm.nih.gov/Blast.cgi"
    blast_program: str = "blastn"
    blast_database: str = "nr"
    blast_expect: str = "1e-10"
    blast_tool_name: str = "blastrun"
    blast_email: str = ""
    blast_proxy_url: str | None = None
    blast_timeout_seconds: int = 30

    max_poll_attempts: int = Field(default=20, ge=1)
    poll_backoff_seconds: float = Field(default=1.0, ge=0.0)
    max_concurrent_searches: int = Field(default=4, ge=1)
