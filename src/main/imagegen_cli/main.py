"""
imagegen command line: generate one image from a text prompt and save it.

    imagegen -p "a cat" -k $KEY -r openai -s 1024x1792 -o cat.png
"""
import argparse
import json
import logging
import sys
from pathlib import Path

import imagegen
from imagegen import Dispatcher, GenerationRequest
from imagegen.ProviderError import ConfigurationError
from imagegen_cli.config_manager import ConfigManager
from imagegen_cli.key_manager import KeyManager

logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """Reports usage errors with exit code 1, the only failure code of this tool."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog="imagegen", description="Generate an image from a text prompt.")
    parser.add_argument("-p", "--prompt", help="Text prompt for image generation")
    parser.add_argument("-k", "--api-key", default="",
                        help="API key for the selected provider (defaults to the keys file, then the environment)")
    parser.add_argument("-r", "--provider",
                        help=f"Image generation provider ({', '.join(imagegen.list_providers())} or an alias)")
    parser.add_argument("-s", "--size",
                        help="Image size (256x256, 512x512, 1024x1024, 1024x768, 768x1024)")
    parser.add_argument("-o", "--output-path", help="Output file path (default: generated_image.png)")
    parser.add_argument("-m", "--model", default="", help="Model to use (blank for the provider default)")
    parser.add_argument("-O", "--option", action="append", default=[], metavar="KEY=VALUE",
                        help="Extra provider request field, repeatable (e.g. -O steps=50)")
    parser.add_argument("--properties", default="config.ini", help="Properties file (default: config.ini)")
    parser.add_argument("--log-level", choices=["debug", "info", "warning", "error"],
                        help="Logging level (overrides the properties file)")
    parser.add_argument("--list-models", action="store_true",
                        help="List the known models of the selected provider and exit")
    return parser


def setup_logging(log_level_str: str):
    """Setup logging based on configuration."""
    # Map string level to logging constant
    level_map = {
        'debug': logging.DEBUG,
        'info': logging.INFO,
        'warning': logging.WARNING,
        'error': logging.ERROR
    }
    log_level = level_map.get(log_level_str, logging.INFO)

    # Configure root logger
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    logger.debug(f"Logging initialized at level: {log_level_str.upper()}")


def parse_options(options) -> dict:
    """
    Parses KEY=VALUE strings. Values are decoded as JSON when possible (numbers,
    booleans, lists), otherwise kept as text.

    Raises:
        ConfigurationError: If an entry has no '='.
    """
    parsed = {}
    for option in options:
        key, sep, value = option.partition("=")
        if not sep or not key.strip():
            raise ConfigurationError(f"Invalid option '{option}', expected KEY=VALUE")
        try:
            parsed[key.strip()] = json.loads(value)
        except ValueError:
            parsed[key.strip()] = value
    return parsed


def provider_names(provider: str) -> list:
    """Returns the canonical name and aliases of a provider, or just the given name if unknown."""
    try:
        return imagegen.generator_class(provider).get_provider_names()
    except ConfigurationError:
        return [provider]


def resolve_api_key(api_key: str, provider: str, config: ConfigManager) -> str:
    """
    Returns the API key to use: the command-line value, else the keys file entry
    for the provider (or one of its aliases). An empty result lets the generator
    fall back to the provider's environment variable.
    """
    if api_key:
        return api_key
    names = provider_names(provider)
    return KeyManager(Path(config.get_keys_file_path())).get_key(*names)


def list_models(provider: str) -> int:
    try:
        generator = imagegen.generator_class(provider)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1
    profile = generator.PROFILE
    print(f"Models for {profile.name} (default: {profile.default_model}):")
    for model, aliases in profile.models.items():
        suffix = f" (aliases: {', '.join(aliases)})" if aliases else ""
        print(f"  {model}{suffix}")
    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = ConfigManager(args.properties)
    setup_logging(args.log_level or config.get_log_level())

    provider = args.provider or config.get_provider()
    if args.list_models:
        return list_models(provider)
    if not args.prompt or not args.prompt.strip():
        parser.error("the following arguments are required: -p/--prompt")

    output_path = args.output_path or config.get_output_path()
    # Config sections use the canonical provider name
    section = provider_names(provider)[0]
    size = args.size or config.get_provider_setting(section, 'size')
    model = args.model or config.get_provider_setting(section, 'model')

    try:
        options = config.get_provider_options(section)
        options.update(parse_options(args.option))
        request = GenerationRequest(prompt=args.prompt, size=size, model=model, provider_options=options)
    except (ConfigurationError, ValueError) as e:
        logger.error(f"Error: {e}")
        return 1

    logger.info(f"Starting image generation with prompt: {request.prompt}")
    api_key = resolve_api_key(args.api_key, provider, config)
    if Dispatcher(api_key, output_path).run(provider, request):
        return 0
    logger.error("Failed to generate image")
    return 1


if __name__ == "__main__":
    sys.exit(main())
