"""
Immutable description of a single text-to-image request.
"""
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping


@dataclass(frozen=True)
class GenerationRequest:
    """
    Provider-independent input of one generation call.

    Attributes:
        prompt: Text description of the image.
        size: Raw size token such as "1024x1024". Empty means the provider default.
        model: Model name or alias. Empty means the provider default.
        provider_options: Extra payload fields merged over the provider's defaults.
    """
    prompt: str
    size: str = ""
    model: str = ""
    provider_options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.prompt or not self.prompt.strip():
            raise ValueError("Prompt must not be empty")
        # Freeze the options so the request cannot change after construction
        object.__setattr__(self, "provider_options", MappingProxyType(dict(self.provider_options or {})))

    def with_model(self, model: str) -> "GenerationRequest":
        """Returns a copy of this request using the given model."""
        return replace(self, model=model)
