"""Text generation providers for rye."""

from rye.exceptions import ProviderError

from .anthropic import AnthropicProvider
from .base import Provider

PROVIDERS = {
    AnthropicProvider.NAME: AnthropicProvider,
}


def get_provider(name, **kwargs):
    """Instantiate the provider registered as ``name``."""
    provider_class = PROVIDERS.get((name or "").lower())
    if not provider_class:
        available = ", ".join(sorted(PROVIDERS))
        raise ProviderError(f"Unknown provider '{name}'. Available providers: {available}")
    return provider_class(**kwargs)


__all__ = [
    "AnthropicProvider",
    "PROVIDERS",
    "Provider",
    "get_provider",
]
