from .fallback import FallbackGenerator
from .registry import DEFAULT_PROVIDERS, ProviderRegistry

__all__ = ["DEFAULT_PROVIDERS", "FallbackGenerator", "ProviderRegistry"]
