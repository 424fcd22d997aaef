"""
Static metadata describing one image-generation provider.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class ProviderProfile:
    """
    Read-only description of a provider family.

    Attributes:
        name: Canonical provider name.
        aliases: Other names accepted for this provider (compared case-insensitively).
        base_url: API root, without a trailing slash.
        default_model: Model used when the request does not name one.
        models: Canonical model name -> list of aliases.
        size_tokens: Size tokens this provider accepts on top of the common set.
        default_size: Fallback (width, height) for unrecognized size tokens.
        response_shape: "url" or "base64".
        read_timeout: Seconds to wait for the generation response.
        key_probe_path: Path of an authenticated GET used to validate keys, or None.
        api_key_env: Environment variable holding the API key.
        keys_url: Where to manage API keys.
        billing_url: Where to check credits or billing.
        account_url: Where to check the account status.
    """
    name: str
    base_url: str
    default_model: str
    default_size: Tuple[int, int]
    response_shape: str
    api_key_env: str
    aliases: List[str] = field(default_factory=list)
    models: Dict[str, List[str]] = field(default_factory=dict)
    size_tokens: List[str] = field(default_factory=list)
    read_timeout: float = 60.0
    key_probe_path: Optional[str] = None
    keys_url: Optional[str] = None
    billing_url: Optional[str] = None
    account_url: Optional[str] = None

    def names(self) -> List[str]:
        """Returns the canonical name followed by every alias, lower-cased."""
        return [self.name.lower()] + [alias.lower() for alias in self.aliases]

    def matches(self, provider_name: str) -> bool:
        """Checks whether the given provider name refers to this profile."""
        return bool(provider_name) and provider_name.strip().lower() in self.names()
