"""
Runs one generation end to end: pick the provider, validate the key, generate
the image and save it.
"""
import logging
from pathlib import Path
from typing import Union

import httpx

import imagegen
from imagegen.GenerationRequest import GenerationRequest
from imagegen.ImageMaterializer import ImageMaterializer
from imagegen.ProviderError import (ConfigurationError, ImageGenerationError, KeyValidationError,
                                    ProviderError)


class Dispatcher:
    """
    Sequences a single invocation and reports success or failure.

    Every error is terminal: it is logged with whatever remediation hints apply
    and run() returns False. Nothing is retried.
    """

    def __init__(self, api_key: str, output_path: Union[str, Path] = "generated_image.png",
                 client: httpx.Client = None, logger: logging.Logger = None):
        """
        Args:
            api_key: API key for the selected provider. Empty falls back to the provider's environment variable.
            output_path: Where the image is written.
            client: Shared httpx client. One is created (and closed) per run when omitted.
            logger: Logger receiving progress and diagnostics.
        """
        self.api_key = api_key
        self.output_path = Path(output_path)
        self.client = client
        self.logger = logger or logging.getLogger(__name__)

    def run(self, provider_name: str, request: GenerationRequest) -> bool:
        """
        Generates the requested image with the named provider.

        Args:
            provider_name: Provider name or alias, case-insensitive.
            request: What to generate. A blank model selects the provider default.

        Returns:
            True if the image was written to the output path, False otherwise.
        """
        try:
            generator_class = imagegen.generator_class(provider_name)
        except ConfigurationError as e:
            self.logger.error(str(e))
            return False

        profile = generator_class.PROFILE
        if not request.model or not request.model.strip():
            request = request.with_model(profile.default_model)
        self.logger.info(f"Using provider: {profile.name}, model: {request.model}, "
                         f"size: {request.size or 'default'}")

        client = self.client if self.client is not None else httpx.Client()
        try:
            generator = generator_class(self.api_key, client=client, logger=self.logger)
            if not generator.validate_key():
                raise KeyValidationError(
                    f"{profile.name} API key validation failed. Please check your API key and try again.")

            result = generator.generate(request)
            ImageMaterializer(client=client, logger=self.logger).materialize(result, self.output_path)
        except ProviderError as e:
            self.logger.error(str(e))
            for line in e.guidance(profile):
                self.logger.error(line)
            return False
        except ImageGenerationError as e:
            self.logger.error(str(e))
            return False
        finally:
            if self.client is None:
                client.close()

        self.logger.info(f"Image generated successfully! Saved to: {self.output_path}")
        return True
