"""Application configuration module for the translation tool."""
import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import jsonschema
from dotenv import load_dotenv

from ddtr.errors import ConfigurationError, OutputDirectoryError
from ddtr.languages import LanguageCode, parse_language_codes
from ddtr.logging_config import setup_logger

DEFAULT_CONFIG_FILENAME = '.ddtr.json'
CONFIG_FILE_ENV_VAR = 'DDTR_CONFIG_FILE'
APP_ID_ENV_VAR = 'BAIDU_APP_ID'
APP_KEY_ENV_VAR = 'BAIDU_APP_KEY'

DEFAULT_MAX_CONCURRENT_API_CALLS = 1
DEFAULT_REQUEST_INTERVAL = 1.0
DEFAULT_LOG_FILE_PATH = 'logs/ddtr.log'

# Written by `ddtr init`. Loading fails until the blank credentials
# are filled in.
DEFAULT_CONFIG_TEMPLATE: Dict[str, Any] = {
    "apiId": "",
    "apiKey": "",
    "outputDir": "./src/main/resources/messages",
    "baseFilename": "pluginBundle",
    "defaultFilename": "pluginBundle",
    "defaultLanguage": "zh",
    "targetLanguages": ["en", "hk", "ja", "ko"],
    "maxConcurrentApiCalls": DEFAULT_MAX_CONCURRENT_API_CALLS,
    "requestInterval": DEFAULT_REQUEST_INTERVAL,
}

CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "apiId": {"type": "string"},
        "apiKey": {"type": "string"},
        "outputDir": {"type": "string", "minLength": 1},
        "baseFilename": {"type": "string", "minLength": 1},
        "defaultFilename": {"type": "string", "minLength": 1},
        "defaultLanguage": {"type": "string", "minLength": 1},
        "targetLanguages": {"type": "array", "items": {"type": "string"}},
        "maxConcurrentApiCalls": {"type": "integer", "minimum": 1},
        "requestInterval": {"type": "number", "exclusiveMinimum": 0},
        "logging": {
            "type": "object",
            "properties": {
                "log_level": {"type": "string"},
                "log_file_path": {"type": "string"},
                "log_to_console": {"type": "boolean"},
            },
        },
    },
    "required": [
        "apiId",
        "apiKey",
        "outputDir",
        "baseFilename",
        "defaultLanguage",
        "targetLanguages",
    ],
}


@dataclass(frozen=True)
class AppConfig:
    """Immutable snapshot of the operator's settings for one run."""
    # Credentials
    api_id: str
    api_key: str

    # Output files
    output_dir: str
    base_filename: str
    default_filename: str

    # Language configuration
    default_language: LanguageCode
    target_languages: Tuple[LanguageCode, ...]

    # Request pacing
    max_concurrent_api_calls: int = DEFAULT_MAX_CONCURRENT_API_CALLS
    request_interval: float = DEFAULT_REQUEST_INTERVAL

    # Logging
    log_level: str = 'INFO'
    log_file_path: str = DEFAULT_LOG_FILE_PATH
    log_to_console: bool = True


def resolve_config_path(config_path: Optional[str] = None) -> str:
    """Return the absolute config path: explicit argument, then environment, then the working directory."""
    if not config_path:
        config_path = os.environ.get(CONFIG_FILE_ENV_VAR) or DEFAULT_CONFIG_FILENAME
    return os.path.abspath(config_path)


def _load_dotenv_files(base_dir: str) -> None:
    """Load a .env file from the working directory, if present."""
    dotenv_path = os.path.join(base_dir, '.env')
    if os.path.exists(dotenv_path):
        load_dotenv(dotenv_path)


def _load_json_config(config_file: str) -> Dict[str, Any]:
    """
    Read and schema-check the JSON configuration file.

    Raises:
        ConfigurationError: If the file is missing, unreadable, not valid JSON
            or does not match CONFIG_SCHEMA.
    """
    if not os.path.exists(config_file):
        raise ConfigurationError(
            f"Configuration file '{config_file}' not found. Run 'ddtr init' to create one."
        )

    try:
        with open(config_file, 'r', encoding='utf-8') as config_file_stream:
            config = json.load(config_file_stream)
    except json.JSONDecodeError as json_exc:
        raise ConfigurationError(f"Invalid JSON in configuration file '{config_file}': {json_exc}") from json_exc
    except (OSError, IOError) as io_exc:
        raise ConfigurationError(f"Could not read configuration file '{config_file}': {io_exc}") from io_exc

    try:
        jsonschema.validate(instance=config, schema=CONFIG_SCHEMA)
    except jsonschema.ValidationError as schema_exc:
        location = '.'.join(str(part) for part in schema_exc.absolute_path) or '<root>'
        raise ConfigurationError(
            f"Invalid configuration file '{config_file}' at {location}: {schema_exc.message}"
        ) from schema_exc

    return config


def _setup_logger_from_config(config: Dict[str, Any]) -> logging.Logger:
    """Set up logger based on configuration."""
    log_config = config.get('logging', {})
    return setup_logger(
        log_config.get('log_level', 'INFO'),
        log_config.get('log_file_path', DEFAULT_LOG_FILE_PATH),
        log_config.get('log_to_console', True),
    )


def _resolve_output_dir(output_dir: str, base_dir: str) -> str:
    """Resolve a relative output directory against ``base_dir`` and make sure it exists."""
    absolute_path = os.path.abspath(os.path.join(base_dir, output_dir))
    if not os.path.isdir(absolute_path):
        raise OutputDirectoryError(absolute_path)
    return absolute_path


def _resolve_credentials(config: Dict[str, Any]) -> Tuple[str, str]:
    """Credentials from the environment take precedence over the file."""
    api_id = os.environ.get(APP_ID_ENV_VAR) or config['apiId']
    api_key = os.environ.get(APP_KEY_ENV_VAR) or config['apiKey']
    if not api_id or not api_key:
        raise ConfigurationError(
            f"Missing API credentials: set 'apiId'/'apiKey' in the configuration file "
            f"or the {APP_ID_ENV_VAR}/{APP_KEY_ENV_VAR} environment variables."
        )
    return api_id, api_key


def load_app_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load application configuration from the JSON file and environment variables.

    Relative paths in the file (such as ``outputDir``) are resolved against the
    current working directory.

    Args:
        config_path (Optional[str]): Path to the configuration file. Defaults to
            ``$DDTR_CONFIG_FILE`` or ``./.ddtr.json``.

    Returns:
        AppConfig: The loaded application configuration.

    Raises:
        ConfigurationError: On any invalid or missing setting. Unknown language
            codes raise UnknownLanguageError, a missing output directory raises
            OutputDirectoryError.
    """
    working_dir = os.getcwd()
    _load_dotenv_files(working_dir)

    config_file = resolve_config_path(config_path)
    config = _load_json_config(config_file)

    logger = _setup_logger_from_config(config)
    logger.info("Loaded configuration from: %s", config_file)

    default_language = LanguageCode.from_code(config['defaultLanguage'])
    target_languages = tuple(parse_language_codes(config['targetLanguages']))
    if not target_languages:
        logger.warning("No target languages configured; only the default file will be written.")

    output_dir = _resolve_output_dir(config['outputDir'], working_dir)
    api_id, api_key = _resolve_credentials(config)

    log_config = config.get('logging', {})
    return AppConfig(
        api_id=api_id,
        api_key=api_key,
        output_dir=output_dir,
        base_filename=config['baseFilename'],
        default_filename=config.get('defaultFilename', config['baseFilename']),
        default_language=default_language,
        target_languages=target_languages,
        max_concurrent_api_calls=config.get('maxConcurrentApiCalls', DEFAULT_MAX_CONCURRENT_API_CALLS),
        request_interval=float(config.get('requestInterval', DEFAULT_REQUEST_INTERVAL)),
        log_level=log_config.get('log_level', 'INFO').upper(),
        log_file_path=log_config.get('log_file_path', DEFAULT_LOG_FILE_PATH),
        log_to_console=log_config.get('log_to_console', True),
    )


def write_default_config(config_path: Optional[str] = None, force: bool = False) -> str:
    """
    Scaffold a configuration file with default settings.

    Args:
        config_path (Optional[str]): Where to write the file. Defaults to the
            same location ``load_app_config`` reads from.
        force (bool): Overwrite an existing file.

    Returns:
        str: The absolute path of the written file.

    Raises:
        ConfigurationError: If the file exists and ``force`` is False, or it cannot be written.
    """
    config_file = resolve_config_path(config_path)
    if os.path.exists(config_file) and not force:
        raise ConfigurationError(
            f"Configuration file '{config_file}' already exists. Use --force to overwrite it."
        )
    try:
        with open(config_file, 'w', encoding='utf-8') as f:
            json.dump(DEFAULT_CONFIG_TEMPLATE, f, ensure_ascii=False, indent=4)
            f.write('\n')
    except (OSError, IOError) as io_exc:
        raise ConfigurationError(f"Could not write configuration file '{config_file}': {io_exc}") from io_exc
    return config_file
