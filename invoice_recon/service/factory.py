from invoice_recon.config.settings import Settings
from invoice_recon.service.client_base import BaseJobServiceClient
from invoice_recon.service.example_client import ExampleJobServiceClient
from invoice_recon.service.http_client import HttpJobServiceClient


class JobServiceClientFactory:
    """Creates the configured processing-service client."""

    @classmethod
    def create(cls, settings: Settings) -> BaseJobServiceClient:
        kind = settings.service_client.lower()
        if kind == "example":
            return ExampleJobServiceClient()
        if kind == "http":
            return HttpJobServiceClient(
                base_url=settings.service_base_url,
                timeout_seconds=settings.http_timeout_seconds,
            )
        raise ValueError(
            f"Unknown service client '{kind}'. Choose from: ['example', 'http']"
        )
