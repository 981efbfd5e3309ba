from metastrip.config.settings import Settings
from metastrip.remote.base import BaseMetadataService
from metastrip.remote.example_client_adapter import ExampleMetadataService
from metastrip.remote.http_client_adapter import HttpMetadataService


class MetadataServiceFactory:
    """Creates the configured remote service adapter."""

    PROVIDERS = ("http", "example")

    @classmethod
    def create(cls, settings: Settings) -> BaseMetadataService:
        provider = settings.remote_provider.lower()
        if provider == "example":
            return ExampleMetadataService()
        if provider == "http":
            return HttpMetadataService(
                base_url=settings.remote_base_url,
                timeout_seconds=settings.remote_timeout_seconds,
            )
        raise ValueError(
            f"Unknown remote provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
