"""
Configuration: defaults, optional JSON file, .env and environment overrides
"""
import copy
import json
import logging
import os

import dotenv

logger = logging.getLogger('rewards_viewer.config')

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

DEFAULT_CONFIG = {
    "rpc": {
        "url": "https://starknet-sepolia.public.blastapi.io/rpc/v0_7",
        "timeout": 30,
    },
    "web": {
        "host": "0.0.0.0",
        "port": 8080,
    },
    "cache": {
        "class_hash_ttl_seconds": 3600,
    },
    "logging": {
        "dir": os.path.join(PROJECT_ROOT, "logs"),
        "file": "rewards_viewer.log",
        "max_size_mb": 10,
        "backup_count": 5,
        "level": "INFO",
    },
}

# env var -> (section, key, type)
ENV_OVERRIDES = {
    "STARKNET_RPC_URL": ("rpc", "url", str),
    "RPC_TIMEOUT": ("rpc", "timeout", int),
    "WEB_HOST": ("web", "host", str),
    "WEB_PORT": ("web", "port", int),
    "CLASS_HASH_TTL_SECONDS": ("cache", "class_hash_ttl_seconds", int),
    "LOG_DIR": ("logging", "dir", str),
    "LOG_LEVEL": ("logging", "level", str),
}


def merge_config(base, override):
    """Recursively merge override into a copy of base"""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_from_env(config):
    """Override configuration from environment variables."""
    for env_name, (section, key, cast) in ENV_OVERRIDES.items():
        raw = os.getenv(env_name)
        if not raw:
            continue
        try:
            config.setdefault(section, {})[key] = cast(raw)
        except ValueError:
            logger.warning(f"Ignoring invalid value for {env_name}: {raw!r}")
    return config


def load_config(config_path=None, dotenv_path=None):
    """
    Build the configuration.

    Parameters:
    config_path (str): Optional JSON file merged over the defaults
    dotenv_path (str): .env file to load (default: project root .env, if present)

    Returns:
    dict: Configuration with rpc, web, cache and logging sections
    """
    dotenv_path = dotenv_path or os.path.join(PROJECT_ROOT, '.env')
    if os.path.exists(dotenv_path):
        dotenv.load_dotenv(dotenv_path)
        logger.info(f"Loaded environment variables from {dotenv_path}")

    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path:
        with open(config_path, 'r') as f:
            config = merge_config(config, json.load(f))
        logger.info(f"Configuration loaded from {config_path}")

    return _load_from_env(config)
