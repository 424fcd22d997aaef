"""
Text-to-Image Provider Factory (__init__.py)

This module serves as the primary factory for creating ImageGenerator instances.
It transparently selects the correct concrete ImageGenerator subclass (e.g., OpenAIImageGenerator,
StabilityImageGenerator) based on the requested provider name or alias.
"""
from typing import List

from imagegen.AimlApiImageGenerator import AimlApiImageGenerator
from imagegen.GenerationRequest import GenerationRequest
from imagegen.ImageGenerator import ImageGenerator
from imagegen.OpenAIImageGenerator import OpenAIImageGenerator
from imagegen.ProviderError import ConfigurationError
from imagegen.StabilityImageGenerator import StabilityImageGenerator

GENERATORS = [OpenAIImageGenerator, StabilityImageGenerator, AimlApiImageGenerator]


def generator_class(provider_name: str) -> type:
    """
    Finds the ImageGenerator subclass serving a provider name or alias (case-insensitive).

    Raises:
        ConfigurationError: If no generator serves the provider.
    """
    for generator in GENERATORS:
        if generator.PROFILE.matches(provider_name):
            return generator
    raise ConfigurationError(
        f"Unknown provider: {provider_name}. Supported providers: {', '.join(list_providers())}")


def of(provider_name: str, api_key: str = None, **kwargs) -> ImageGenerator:
    """
    Factory function to instantiate the correct ImageGenerator subclass based on the provider name.

    Args:
        provider_name: Provider name or alias (e.g. 'openai', 'dall-e', 'stability', 'sd').
        api_key: API key for the provider. The provider's environment variable is used if None.
        **kwargs: Arbitrary keyword arguments passed directly to the constructor
                  of the selected ImageGenerator subclass (client, logger).

    Returns:
        An instantiated object of the correct ImageGenerator subclass.

    Raises:
        ConfigurationError: If the provider is unknown or no API key is available.
    """
    return generator_class(provider_name)(api_key, **kwargs)


def list_providers() -> List[str]:
    """Returns the canonical names of all supported providers."""
    return [generator.PROFILE.name for generator in GENERATORS]


from imagegen.Dispatcher import Dispatcher  # noqa: E402
