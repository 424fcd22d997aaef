"""
Error types raised while generating and saving images.

Every failure is terminal for an invocation: nothing here is retried. The
dispatcher turns these into log messages and a failed run.
"""
from enum import Enum
from typing import List, Optional


class ErrorKind(Enum):
    """Classification of a failed provider response."""
    INVALID_KEY = "invalid_key"
    INSUFFICIENT_CREDITS = "insufficient_credits"
    RATE_LIMITED = "rate_limited"
    AUTHENTICATION_FAILED = "authentication_failed"
    UNKNOWN = "unknown"


# Body markers checked, in order, on a 400 response
_BAD_REQUEST_MARKERS = [
    ("insufficient_credits", ErrorKind.INSUFFICIENT_CREDITS),
    ("billing_hard_limit_reached", ErrorKind.INSUFFICIENT_CREDITS),
    ("invalid_api_key", ErrorKind.INVALID_KEY),
]


def classify(status_code: int, body: Optional[str]) -> ErrorKind:
    """
    Classifies a non-success HTTP response.

    The status code is inspected first; only a 400 looks further into the body
    for provider-specific markers.

    Args:
        status_code: HTTP status of the response.
        body: Raw response text (may be None or empty).

    Returns:
        The matching ErrorKind, UNKNOWN when nothing matches.
    """
    if status_code == 400:
        text = body or ""
        for marker, kind in _BAD_REQUEST_MARKERS:
            if marker in text:
                return kind
        return ErrorKind.UNKNOWN
    if status_code in (401, 403):
        return ErrorKind.AUTHENTICATION_FAILED
    if status_code == 429:
        return ErrorKind.RATE_LIMITED
    return ErrorKind.UNKNOWN


class ImageGenerationError(Exception):
    """Base class for every error reported by imagegen."""
    pass


class ConfigurationError(ImageGenerationError):
    """Unknown provider, missing API key or another unusable setting."""
    pass


class KeyValidationError(ImageGenerationError):
    """The provider rejected the API key during the validation probe."""
    pass


class NetworkError(ImageGenerationError):
    """Connection failure or timeout talking to a remote host."""
    pass


class MaterializationError(ImageGenerationError):
    """The image bytes could not be obtained, decoded or written to disk."""
    pass


class ProviderError(ImageGenerationError):
    """
    A provider answered the generation request with an error.

    Attributes:
        status_code: HTTP status returned by the provider.
        body: Raw response body.
        classification: ErrorKind derived from status and body.
        provider: Canonical provider name, if known.
    """

    def __init__(self, status_code: int, body: str, classification: ErrorKind = None, provider: str = None):
        self.status_code = status_code
        self.body = body or ""
        self.classification = classification if classification is not None else classify(status_code, body)
        self.provider = provider
        super().__init__(self._describe())

    def _describe(self) -> str:
        name = self.provider or "provider"
        return f"{name} request failed with HTTP {self.status_code} ({self.classification.value}): {self.body}"

    def guidance(self, profile=None) -> List[str]:
        """
        Returns human-readable remediation hints for this error.

        Args:
            profile: Optional ProviderProfile used to point at the provider's pages.
        """
        keys_url = getattr(profile, "keys_url", None)
        billing_url = getattr(profile, "billing_url", None)
        account_url = getattr(profile, "account_url", None)
        kind = self.classification

        if kind == ErrorKind.INSUFFICIENT_CREDITS:
            lines = ["INSUFFICIENT CREDITS: the account cannot pay for this request."]
            if billing_url:
                lines.append(f"Check your balance or billing at: {billing_url}")
            lines.append("Purchase more credits, raise the spending limit or use a different API key.")
            return lines
        if kind == ErrorKind.INVALID_KEY:
            lines = ["INVALID API KEY: the provided API key is not valid."]
            if keys_url:
                lines.append(f"Check or regenerate your API key at: {keys_url}")
            return lines
        if kind == ErrorKind.AUTHENTICATION_FAILED:
            lines = ["AUTHENTICATION ERROR: the API key is invalid, expired or lacks access."]
            if keys_url:
                lines.append(f"Get a fresh API key from: {keys_url}")
            if account_url:
                lines.append(f"Check your account status at: {account_url}")
            return lines
        if kind == ErrorKind.RATE_LIMITED:
            return ["RATE LIMIT EXCEEDED: too many requests. Please wait and try again."]
        return [f"UNKNOWN ERROR: HTTP {self.status_code}"]


class NoImageDataError(ProviderError):
    """The provider reported success but returned no usable image."""

    def __init__(self, status_code: int, body: str, provider: str = None, reason: str = "no image data received"):
        self.reason = reason
        super().__init__(status_code, body, ErrorKind.UNKNOWN, provider)

    def _describe(self) -> str:
        name = self.provider or "provider"
        return f"{name} returned HTTP {self.status_code} but {self.reason}"

    def guidance(self, profile=None) -> List[str]:
        return ["No image data received from API. Try a different prompt or model."]
