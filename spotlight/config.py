"""
Configuration management for Spotlight
"""

import copy
import logging
import os
import re
from pathlib import Path
from typing import Dict, Any, Optional, Union

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"


def _expand_env_vars(obj: Union[Dict, Any]) -> Union[Dict, Any]:
    """
    Recursively expand environment variables in config values.
    Supports ${VAR_NAME} syntax.
    """
    if isinstance(obj, dict):
        return {key: _expand_env_vars(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        pattern = r'\$\{([^}]+)\}'

        def replace_var(match):
            var_name = match.group(1)
            return os.getenv(var_name, match.group(0))  # Return original if not found
        return re.sub(pattern, replace_var, obj)
    else:
        return obj


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file

    Values from the file are merged over the defaults, so a partial file
    only needs the keys it changes.

    Args:
        config_path: Path to config file. If None, uses the bundled config.yaml

    Returns:
        Configuration dictionary
    """
    config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        logger.warning(f"Config file not found: {config_path}. Using defaults.")
        return get_default_config()

    try:
        with open(config_path, 'r') as f:
            loaded = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to load config from {config_path}: {e}")
        return get_default_config()

    if not isinstance(loaded, dict):
        logger.error(f"Config file {config_path} does not contain a mapping. Using defaults.")
        return get_default_config()

    logger.debug(f"Loaded configuration from {config_path}")
    return _merge(get_default_config(), _expand_env_vars(loaded))


def get_default_config() -> Dict[str, Any]:
    """
    Get default configuration values

    Returns:
        Default configuration dictionary
    """
    return {
        'mask': {
            'factor': 0.8,
            'preview_factor': 0.3,
        },
        'outline': {
            'color': [255, 0, 0, 255],
            'line_width': 2,
        },
        'viewport': {
            'fraction': 0.9,
        },
        'output': {
            'filename': 'edited-image.png',
            'format': 'PNG',
            'jpeg_quality': 95,
        },
        'persistence': {
            'url': None,
            'timeout': 10,
        },
        'logging': {
            'level': 'INFO',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        },
    }


def validate_config(config: Dict[str, Any]) -> None:
    """
    Check value ranges that would otherwise fail deep inside an edit.

    Raises:
        ValueError: On the first invalid value found
    """
    for key in ('mask.factor', 'mask.preview_factor', 'viewport.fraction'):
        value = get_config_value(config, key)
        if value is None or not 0.0 <= float(value) <= 1.0:
            raise ValueError(f"'{key}' must be within [0, 1], got {value}")

    timeout = get_config_value(config, 'persistence.timeout')
    if timeout is None or float(timeout) <= 0:
        raise ValueError(f"'persistence.timeout' must be positive, got {timeout}")

    color = get_config_value(config, 'outline.color')
    if not isinstance(color, (list, tuple)) or len(color) != 4:
        raise ValueError(f"'outline.color' must be an RGBA list, got {color}")



def get_config_value(config: Dict[str, Any], key_path: str, default: Any = None) -> Any:
    """Look up a nested value by dotted path, e.g. ``'mask.factor'``."""
    node = config
    for key in key_path.split('.'):
        if not isinstance(node, dict) or key not in node:
            return default
        node = node[key]
    return node
