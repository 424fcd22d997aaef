import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class KeyManager:
    def __init__(self, keys_file_path: Path):
        """
        Initializes the key manager with a JSON file mapping provider names to API keys.
        """
        self.keys_file = Path(keys_file_path)
        self.keys = {}
        self.load_keys()

    def load_keys(self):
        """
        Loads keys from the JSON file.
        Provider names are stored lower-cased; a missing or unreadable file yields no keys.
        """
        saved_keys = {}
        if self.keys_file.exists():
            try:
                with open(self.keys_file, 'r', encoding='utf-8') as f:
                    saved_keys = json.load(f)
            except (json.JSONDecodeError, OSError) as e:
                logger.warning(f"Could not read keys file {self.keys_file}: {e}")
                saved_keys = {}

        if not isinstance(saved_keys, dict):
            logger.warning(f"Keys file {self.keys_file} does not contain a JSON object")
            saved_keys = {}

        self.keys = {str(provider).lower(): str(key) for provider, key in saved_keys.items() if key}
        return self.keys

    def get_key(self, *providers) -> str:
        """Gets the key of the first provider name (or alias) that has one."""
        for provider in providers:
            key = self.keys.get((provider or '').lower())
            if key:
                return key
        return ""
