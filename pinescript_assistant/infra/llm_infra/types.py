"""Protocol definitions for provider clients."""

from typing import Protocol, runtime_checkable

from pinescript_assistant.config.models import ProviderConfig


@runtime_checkable
class ProviderClient(Protocol):
    """Asynchronous text-generation backend.

    Implementations raise ``ProviderError`` on failure.
    """

    name: str

    async def send(self, prompt: str, config: ProviderConfig) -> str:
        """Send a prompt and return the raw model output."""
        ...
