#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import yaml

from .exit_codes import ConfigError

logger = logging.getLogger("gbulk")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. GBULK_CONFIG environment variable
    2. ~/.gbulk/ directory
    """
    if 'GBULK_CONFIG' in os.environ:
        return Path(os.environ['GBULK_CONFIG']).expanduser()

    gbulk_dir = Path.home() / '.gbulk'
    for filename in CONFIG_FILENAMES:
        path = gbulk_dir / filename
        if path.exists():
            return path

    return gbulk_dir / 'config.json'


def get_default_config():
    """Get default configuration."""
    return {
        "general": {
            "directory": ".",
            "max_workers": 0  # 0 = one worker per repository
        },
        "discovery": {
            "exclude_directories": ["node_modules"]
        },
        "pull": {
            "fallback_branches": ["develop", "main", "master"],
            "remote": "origin",
            "auto_confirm": False
        },
        "submodules": {
            "default_branch": "main"
        },
        "git": {
            "timeout": 0  # seconds, 0 = no timeout
        },
        "logging": {
            "level": "WARNING",
            "format": "%(levelname)s: %(message)s"
        }
    }


def _read_config_file(config_path):
    suffix = config_path.suffix.lower()
    if suffix == '.toml':
        with open(config_path, 'rb') as f:
            return tomllib.load(f)
    if suffix in ('.yaml', '.yml'):
        with open(config_path, 'r') as f:
            return yaml.safe_load(f) or {}
    with open(config_path, 'r') as f:
        return json.load(f)


def load_config():
    """Load configuration from file.

    Raises:
        ConfigError: if GBULK_CONFIG names a missing file, or the
            configuration file cannot be parsed.
    """
    config_path = get_config_path()
    config = get_default_config()

    if 'GBULK_CONFIG' in os.environ and not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    if config_path.exists():
        try:
            file_config = _read_config_file(config_path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"Error loading config from {config_path}: {e}") from e

        if not isinstance(file_config, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")

        logger.debug(f"Loaded config from {config_path}")
        config = merge_configs(config, file_config)

    config = apply_env_overrides(config)

    return config


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: GBULK_SECTION_KEY
    For example: GBULK_PULL_AUTO_CONFIRM=true
    """
    env_prefix = "GBULK_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == 'GBULK_CONFIG':
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        if value.lower() in ('true', 'yes', 'on'):
            typed_value = True
        elif value.lower() in ('false', 'no', 'off'):
            typed_value = False
        elif value.isdigit():
            typed_value = int(value)
        else:
            typed_value = value

        current_level = config
        i = 0
        while i < len(key_parts):
            # Longest config key that is a prefix of the remaining parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i : i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if not matched_key:
                break

            if i + best_match_len == len(key_parts):
                if isinstance(current_level[matched_key], list) and isinstance(typed_value, str):
                    typed_value = [v.strip() for v in typed_value.split(',') if v.strip()]
                current_level[matched_key] = typed_value
                break

            if not isinstance(current_level[matched_key], dict):
                break
            current_level = current_level[matched_key]
            i += best_match_len

    return config


def configure_logging(config, debug=False):
    """Configure the root logger from the 'logging' config section."""
    log_config = config.get('logging', {})
    level_name = 'DEBUG' if debug else str(log_config.get('level', 'WARNING')).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format=log_config.get('format', "%(levelname)s: %(message)s"),
        handlers=[
            logging.StreamHandler(sys.stderr)
        ],
        force=True
    )
