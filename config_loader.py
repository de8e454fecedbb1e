"""Configuration loader with YAML support, .env loading and environment substitution."""

import copy
import os
import re
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv


class ConfigurationError(ValueError):
    """Raised when required configuration is missing or invalid."""
    pass


DEFAULT_CONFIG: Dict[str, Any] = {
    'notion': {
        'base_url': 'https://api.notion.com/v1',
        'api_version': '2022-06-28',
        'token': None,
        'root_page_id': None,
    },
    'export': {
        'content_directory': 'src/content/posts',
        'images_directory': 'public/images/notion',
        'image_url_prefix': '/images/notion',
        'description_length': 150,
        'max_image_redirects': 5,
        'bookmark_cards': False,
    },
    'sync': {
        'detect_changes': True,
        'report_path': None,
    },
    'advanced': {
        'request_timeout': None,
    },
}

# Environment variables that fill unset configuration values.
ENV_FALLBACKS = {
    'notion.token': 'NOTION_TOKEN',
    'notion.root_page_id': 'NOTION_ROOT_PAGE_ID',
}


class ConfigLoader:
    """Handles loading and validation of configuration."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([A-Za-z_][A-Za-z0-9_]*)\}')

    @classmethod
    def load(cls, config_path: Optional[str] = None, env_file: Optional[str] = '.env') -> Dict[str, Any]:
        """
        Build the effective configuration.

        The ``.env`` file is read first without overriding variables that are
        already set, then the optional YAML file is merged over the defaults,
        then ``NOTION_TOKEN``/``NOTION_ROOT_PAGE_ID`` fill whatever is still unset.

        Args:
            config_path: Optional path to a YAML configuration file
            env_file: Optional path to a key=value environment file

        Returns:
            Configuration dictionary

        Raises:
            FileNotFoundError: If an explicit config file doesn't exist
            ConfigurationError: If the YAML file is invalid or not a mapping
        """
        if env_file and os.path.isfile(env_file):
            load_dotenv(env_file, override=False)

        config = copy.deepcopy(DEFAULT_CONFIG)

        if config_path:
            if not os.path.exists(config_path):
                raise FileNotFoundError(f"Configuration file not found: {config_path}")

            with open(config_path, 'r', encoding='utf-8') as f:
                try:
                    file_data = yaml.safe_load(f) or {}
                except yaml.YAMLError as e:
                    raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

            if not isinstance(file_data, dict):
                raise ConfigurationError("Configuration file must contain a dictionary")

            config = _deep_merge(config, cls._substitute_env_vars_recursive(file_data))

        for path, env_name in ENV_FALLBACKS.items():
            if not get_nested(config, path):
                env_value = os.getenv(env_name)
                if env_value:
                    set_nested(config, path, env_value.strip())

        return config

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> None:
        """
        Validate configuration for required fields and correct values.

        Raises:
            ConfigurationError: If validation fails
        """
        cls._validate_required_field(config, 'notion.token', 'NOTION_TOKEN')
        cls._validate_required_field(config, 'notion.root_page_id', 'NOTION_ROOT_PAGE_ID')

        for path in ('export.content_directory', 'export.images_directory'):
            cls._validate_required_field(config, path)

        prefix = get_nested(config, 'export.image_url_prefix', '')
        if not isinstance(prefix, str) or not prefix.startswith('/'):
            raise ConfigurationError("export.image_url_prefix must be a site path starting with /")

        description_length = get_nested(config, 'export.description_length', 150)
        if not isinstance(description_length, int) or description_length < 1:
            raise ConfigurationError("export.description_length must be a positive integer")

        max_redirects = get_nested(config, 'export.max_image_redirects', 5)
        if not isinstance(max_redirects, int) or max_redirects < 0:
            raise ConfigurationError("export.max_image_redirects must be a non-negative integer")

        timeout = get_nested(config, 'advanced.request_timeout')
        if timeout is not None and (not isinstance(timeout, (int, float)) or timeout <= 0):
            raise ConfigurationError("advanced.request_timeout must be a positive number or null")

    @classmethod
    def merge_with_args(cls, config: Dict[str, Any], args) -> Dict[str, Any]:
        """
        Merge configuration with CLI arguments. CLI arguments take precedence.
        """
        merged = copy.deepcopy(config)

        if getattr(args, 'root_page_id', None):
            set_nested(merged, 'notion.root_page_id', args.root_page_id)

        if getattr(args, 'output_dir', None):
            set_nested(merged, 'export.content_directory', args.output_dir)

        if getattr(args, 'images_dir', None):
            set_nested(merged, 'export.images_directory', args.images_dir)

        if getattr(args, 'report', None):
            set_nested(merged, 'sync.report_path', args.report)

        if getattr(args, 'bookmark_cards', None) is not None:
            set_nested(merged, 'export.bookmark_cards', args.bookmark_cards)

        return merged

    @classmethod
    def _substitute_env_vars_recursive(cls, data: Any) -> Any:
        """Recursively substitute environment variables in data structure."""
        if isinstance(data, dict):
            return {key: cls._substitute_env_vars_recursive(value) for key, value in data.items()}
        elif isinstance(data, list):
            return [cls._substitute_env_vars_recursive(item) for item in data]
        elif isinstance(data, str):
            return cls._substitute_env_vars(data)
        else:
            return data

    @classmethod
    def _substitute_env_vars(cls, value: str) -> str:
        """Substitute environment variables in a string value."""
        def replace_match(match):
            env_value = os.getenv(match.group(1))
            return env_value if env_value is not None else match.group(0)

        return cls.ENV_VAR_PATTERN.sub(replace_match, value)

    @staticmethod
    def _validate_required_field(config: dict, field: str, env_name: Optional[str] = None) -> None:
        """Validate that a required field exists and has a value."""
        value = get_nested(config, field)
        if value is None or value == '':
            hint = f" (set the {env_name} environment variable)" if env_name else ""
            raise ConfigurationError(f"Missing required configuration: {field}{hint}")

        if isinstance(value, str) and '${' in value:
            match = ConfigLoader.ENV_VAR_PATTERN.search(value)
            var_name = match.group(1) if match else value
            raise ConfigurationError(
                f"Configuration field '{field}' contains unsubstituted environment variable: {value}. "
                f"Please set the {var_name} environment variable or provide a value in config file."
            )


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def get_nested(config: dict, path: str, default: Any = None) -> Any:
    """Safely retrieve nested configuration values using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "notion.root_page_id")
        default: Default value if path doesn't exist

    Returns:
        Value at the nested path or default
    """
    value = config

    for key in path.split('.'):
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value


def set_nested(config: dict, path: str, value: Any) -> None:
    """Set a nested configuration value, creating intermediate sections."""
    keys = path.split('.')
    section = config
    for key in keys[:-1]:
        section = section.setdefault(key, {})
    section[keys[-1]] = value


__all__ = ['ConfigLoader', 'ConfigurationError', 'DEFAULT_CONFIG', 'get_nested', 'set_nested']
