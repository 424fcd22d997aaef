import configparser
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# Keys of a provider section that are not forwarded as provider options
_PROVIDER_SETTINGS = ('model', 'size')


class ConfigManager:
    def __init__(self, config_file=None):
        self.config_file = Path(config_file) if config_file else Path("config.ini")
        self.config = configparser.ConfigParser(interpolation=None)
        self._load_config()

    def _set_defaults(self):
        """Sets in-memory defaults for a clean config object."""
        self.config['General'] = {
            'provider': 'stable-diffusion',
            'output_path': 'generated_image.png',
            'keys_file': 'api_keys.json',
            'logging': 'info'
        }

    def _load_config(self):
        """
        Load the config file. If it doesn't exist, use in-memory defaults.
        If it's corrupt, load in-memory defaults.
        """
        if not self.config_file.exists():
            logger.debug(f"Config file not found at {self.config_file}. Using defaults.")
            self._set_defaults()
            return

        try:
            self.config.read(self.config_file, encoding='utf-8')
            # Check if it's empty or corrupt
            if not self.config.sections():
                raise configparser.Error("Config file is empty or corrupt.")
        except configparser.Error as e:
            logger.warning(f"Error reading config file {self.config_file}: {e}. Loading in-memory defaults.")
            # Clear the corrupt config and load defaults
            self.config = configparser.ConfigParser(interpolation=None)
            self._set_defaults()

    @staticmethod
    def _coerce(value: str):
        # Try to convert to float or int, otherwise keep as string
        try:
            if '.' in value:
                return float(value)
            return int(value)
        except ValueError:
            return value

    def get_provider(self) -> str:
        return self.config.get('General', 'provider', fallback='stable-diffusion')

    def get_output_path(self) -> str:
        return self.config.get('General', 'output_path', fallback='generated_image.png')

    def get_keys_file_path(self) -> str:
        return self.config.get('General', 'keys_file', fallback='api_keys.json')

    def _provider_section(self, provider: str):
        """Finds the section of a provider, ignoring case."""
        for section in self.config.sections():
            if section.lower() == (provider or '').lower():
                return section
        return None

    def get_provider_setting(self, provider: str, key: str, fallback: str = '') -> str:
        """Returns a setting such as 'model' or 'size' from the [provider] section."""
        section = self._provider_section(provider)
        if section is None:
            return fallback
        return self.config.get(section, key, fallback=fallback)

    def get_provider_options(self, provider: str) -> dict:
        """
        Returns extra payload options for a provider,
        reading every key of the section [provider] except model and size.
        """
        section = self._provider_section(provider)
        if section is None:
            return {}
        return {
            key: self._coerce(value)
            for key, value in self.config.items(section)
            if key not in _PROVIDER_SETTINGS
        }

    def get_log_level(self) -> str:
        """
        Returns the log level from the [General] section.
        Defaults to 'info' if not specified or invalid.
        Valid values: debug, info, warning, error
        """
        level = self.config.get('General', 'logging', fallback='info').lower()
        valid_levels = ['debug', 'info', 'warning', 'error']
        if level in valid_levels:
            return level
        return 'info'
