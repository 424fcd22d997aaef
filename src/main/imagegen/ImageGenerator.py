"""
Abstract base class for image generation providers.
"""
import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

import httpx

from imagegen.GenerationRequest import GenerationRequest
from imagegen.ImageResponse import ImageResponse
from imagegen.ProviderError import (ConfigurationError, NetworkError, NoImageDataError, ProviderError)
from imagegen.ProviderProfile import ProviderProfile

CONNECT_TIMEOUT = 30.0
WRITE_TIMEOUT = 60.0


def make_timeout(read_timeout: float) -> httpx.Timeout:
    """Builds the per-call timeout: 30s connect, 60s write, provider-specific read."""
    return httpx.Timeout(WRITE_TIMEOUT, connect=CONNECT_TIMEOUT, read=read_timeout)


class ImageGenerator(ABC):
    """
    Abstract class for accessing image generation providers.

    This class provides a standardized interface for interacting with different image
    generation providers (OpenAI, Stability AI, AIML API). It owns the HTTP transport,
    the key validation probe and the error classification; concrete subclasses only
    describe their wire format through a ProviderProfile and three hooks.
    """

    PROFILE: ProviderProfile = None

    def __init__(self, api_key: str = None, client: httpx.Client = None, logger: logging.Logger = None):
        """
        Initializes the generator.

        Args:
            api_key: The provider API key. Searches the profile's environment variable if None.
            client: Shared httpx client. A private one is created when omitted.
            logger: Logger receiving progress and diagnostics.

        Raises:
            ConfigurationError: If the API key is not found.
        """
        self.logger = logger or logging.getLogger(self.__class__.__module__)
        self.api_key = api_key if api_key else os.environ.get(self.PROFILE.api_key_env, None)
        if not self.api_key:
            raise ConfigurationError(
                f"{self.PROFILE.name} API key not provided (pass one or set {self.PROFILE.api_key_env})")

        self._owns_client = client is None
        self.client = client if client is not None else httpx.Client()
        self.timeout = make_timeout(self.PROFILE.read_timeout)

    def close(self):
        """Closes the HTTP client if this generator created it."""
        if self._owns_client:
            self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    # ------------------------------------------------------------------
    # Provider hooks

    @abstractmethod
    def _generation_url(self, request: GenerationRequest) -> str:
        """Returns the endpoint receiving the generation POST."""
        pass

    @abstractmethod
    def _build_payload(self, request: GenerationRequest) -> dict:
        """Serializes the request into the provider's JSON schema."""
        pass

    @abstractmethod
    def _parse_response(self, result: dict) -> ImageResponse:
        """
        Extracts the image from a successful response body.

        Raises:
            LookupError, TypeError or ValueError when the body has no usable image.
        """
        pass

    def _on_key_valid(self, response: httpx.Response):
        """Called with the probe response after a successful key validation."""
        pass

    # ------------------------------------------------------------------

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def get_model_name(self, model: str = "") -> str:
        """
        Returns the canonical model name for a requested model.

        A blank name selects the provider default, aliases map to their canonical
        name and anything else is passed through unchanged.
        """
        if not model or not model.strip():
            return self.PROFILE.default_model
        model = model.strip()
        aliases = self.model_aliases()
        if model in aliases:
            return aliases[model]
        if model not in self.PROFILE.models:
            self.logger.debug(f"Model {model} is not a known {self.PROFILE.name} model, sending it as is")
        return model

    def validate_key(self) -> bool:
        """
        Checks the API key against the provider.

        Providers without a probe endpoint always return True: the key is then only
        checked by the generation call itself, so True is a weak guarantee there.

        Returns:
            True if the key is accepted (or cannot be checked up front), False otherwise.
        """
        profile = self.PROFILE
        if profile.key_probe_path is None:
            self.logger.info(f"{profile.name} has no validation endpoint; "
                             f"the API key will be checked by the generation request")
            return True

        self.logger.info(f"Validating {profile.name} API key...")
        try:
            response = self.client.get(
                f"{profile.base_url}{profile.key_probe_path}",
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            self.logger.error(f"Error validating API key: {e}")
            self.logger.error("Please check your internet connection and API key format.")
            return False

        if response.is_success:
            self.logger.info("API key is valid")
            self._on_key_valid(response)
            return True

        error = ProviderError(response.status_code, response.text, provider=profile.name)
        self.logger.error(f"API key validation failed with code: {response.status_code}")
        self.logger.error(f"Response: {response.text}")
        for line in error.guidance(profile):
            self.logger.error(line)
        return False

    def generate(self, request: GenerationRequest) -> ImageResponse:
        """
        Generates an image for the request.

        Args:
            request: The generation request. A blank model selects the provider default.

        Returns:
            RemoteImage or InlineImage, depending on the provider.

        Raises:
            ProviderError: The provider answered with a non-success status.
            NoImageDataError: The provider succeeded but sent no usable image.
            NetworkError: The provider could not be reached in time.
        """
        profile = self.PROFILE
        request = request.with_model(self.get_model_name(request.model))
        url = self._generation_url(request)
        payload = self._build_payload(request)
        payload.update(request.provider_options)

        self.logger.info(f"Sending request to {profile.name} API (model: {request.model})...")
        self.logger.debug(f"Request URL: {url}")
        self.logger.debug(f"Request body: {json.dumps(payload)}")

        try:
            response = self.client.post(url, headers=self._headers(), json=payload, timeout=self.timeout)
        except httpx.HTTPError as e:
            raise NetworkError(f"Error contacting {profile.name} at {url}: {e}") from e

        if not response.is_success:
            self.logger.debug(f"Response headers: {dict(response.headers)}")
            raise ProviderError(response.status_code, response.text, provider=profile.name)

        self.logger.debug(f"Response body: {response.text[:500]}")
        try:
            result = response.json()
            image = self._parse_response(result)
            if image.kind != profile.response_shape:
                raise ValueError(f"expected a {profile.response_shape} result, got {image.kind}")
        except (ValueError, LookupError, TypeError, AttributeError) as e:
            raise NoImageDataError(response.status_code, response.text, provider=profile.name,
                                   reason=f"no image data received ({e})") from e

        if image.revised_prompt:
            self.logger.info(f"Revised prompt: {image.revised_prompt}")
        return image

    @classmethod
    def model_aliases(cls) -> Dict[str, str]:
        return cls._alias2model(cls.PROFILE.models)

    @classmethod
    def get_supported_models(cls) -> List[str]:
        """Returns list of supported models (including aliases)."""
        return list(cls.PROFILE.models.keys()) + list(cls.model_aliases().keys())

    @classmethod
    def get_provider_names(cls) -> List[str]:
        """Returns the lower-cased provider name and its aliases."""
        return cls.PROFILE.names()

    @staticmethod
    def _alias2model(models: Dict[str, list]) -> Dict[str, str]:
        """Helper to create a mapping from model aliases to canonical model names."""
        a2m = dict()
        for model, aliases in models.items():
            for alias in aliases:
                a2m[alias] = model
        return a2m

    @staticmethod
    def _first(items: Optional[list], what: str):
        """Returns the first element of a response list, raising LookupError when empty."""
        if not items:
            raise LookupError(f"empty {what} list")
        return items[0]
