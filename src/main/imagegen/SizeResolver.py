"""
Maps size tokens such as "512x512" to (width, height) pairs.

Unknown tokens never fail a request: they fall back to the provider's default
size and a warning is logged.
"""
import logging
from typing import Tuple

# Tokens every provider accepts
COMMON_SIZES = {
    "256x256": (256, 256),
    "512x512": (512, 512),
    "1024x1024": (1024, 1024),
    "1024x768": (1024, 768),
    "768x1024": (768, 1024),
}

DEFAULT_SIZE = (1024, 1024)


def _parse_token(token: str) -> Tuple[int, int]:
    width, height = token.split("x")
    return int(width), int(height)


def supported_sizes(profile=None) -> dict:
    """Returns the token -> (width, height) table for a provider."""
    sizes = dict(COMMON_SIZES)
    if profile is not None:
        for token in profile.size_tokens:
            sizes[token] = _parse_token(token)
    return sizes


def resolve(token: str, profile=None, logger: logging.Logger = None) -> Tuple[int, int]:
    """
    Resolves a size token for a provider.

    Args:
        token: Size token such as "1024x768". Matching ignores case and surrounding spaces.
        profile: Optional ProviderProfile adding tokens and supplying the fallback.
        logger: Logger receiving the fallback warning.

    Returns:
        (width, height) for a recognized token, otherwise the provider's default size.
    """
    logger = logger or logging.getLogger(__name__)
    fallback = profile.default_size if profile is not None else DEFAULT_SIZE
    normalized = (token or "").strip().lower()

    if not normalized:
        return fallback

    size = supported_sizes(profile).get(normalized)
    if size is None:
        logger.warning(f"Unknown size format: {token}, using default {format_size(fallback)}")
        return fallback
    return size


def resolve_token(token: str, profile=None, logger: logging.Logger = None) -> str:
    """Same as resolve(), returned as a "WxH" token."""
    return format_size(resolve(token, profile, logger))


def format_size(size: Tuple[int, int]) -> str:
    return f"{size[0]}x{size[1]}"
