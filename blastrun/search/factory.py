from blastrun.config.settings import Settings
from blastrun.search.client_base import BaseBlastClient
from blastrun.search.example_client_adapter import ExampleBlastClient
from blastrun.search.ncbi_client_adapter import NcbiBlastClientAdapter


class BlastClientFactory:
    """Creates the configured remote BLAST client adapter."""

    PROVIDERS: tuple[str, ...] = ("example", "ncbi")

    @classmethod
    def create(cls, settings: Settings) -> BaseBlastClient:
        """Create a client adapter from application settings."""
        provider = settings.blast_provider.lower()
        if provider == "example":
            return ExampleBlastClient()
        if provider == "ncbi":
            return NcbiBlastClientAdapter(
                base_url=settings.blast_base_url,
                timeout_seconds=settings.blast_timeout_seconds,
                tool=settings.blast_tool_name,
                email=settings.blast_email,
                proxy_url=settings.blast_proxy_url,
            )
        raise ValueError(
            f"Unknown BLAST provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
