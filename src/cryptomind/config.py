"""
Configuration loading
Settings come from a JSON file (wallet_config.json) with environment overrides
"""

import os
import json
import logging
from dataclasses import dataclass, asdict
from typing import Dict, Optional

from .constants import (
    DEFAULT_CONFIG_PATH, DEFAULT_GEMINI_MODEL, PLACEHOLDER_VALUES,
    DEFAULT_TRANSACTION_LIMIT, DEFAULT_AI_LABEL_LIMIT
)

logger = logging.getLogger(__name__)

# Environment variable -> config key
ENV_OVERRIDES = {
    'ETHERSCAN_API_KEY': 'etherscan_api_key',
    'GEMINI_API_KEY': 'gemini_api_key',
    'GEMINI_MODEL': 'gemini_model',
}


def _clean_secret(value: Optional[str]) -> Optional[str]:
    """Treat blanks and template placeholders as unset"""
    if not value:
        return None
    value = str(value).strip()
    if not value or value in PLACEHOLDER_VALUES:
        return None
    return value


@dataclass
class Config:
    etherscan_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    chain_id: int = 1
    transaction_limit: int = DEFAULT_TRANSACTION_LIMIT
    ai_label_limit: int = DEFAULT_AI_LABEL_LIMIT

    @classmethod
    def from_dict(cls, data: Dict) -> 'Config':
        config = cls()
        config.etherscan_api_key = _clean_secret(data.get('etherscan_api_key'))
        config.gemini_api_key = _clean_secret(data.get('gemini_api_key'))
        config.gemini_model = data.get('gemini_model') or DEFAULT_GEMINI_MODEL
        for key in ('chain_id', 'transaction_limit', 'ai_label_limit'):
            if data.get(key) is None:
                continue
            try:
                setattr(config, key, int(data[key]))
            except (TypeError, ValueError):
                logger.warning(f"Ignoring invalid {key} in config: {data[key]!r}")
        return config

    def to_dict(self, mask_secrets: bool = False) -> Dict:
        data = asdict(self)
        if mask_secrets:
            for key in ('etherscan_api_key', 'gemini_api_key'):
                if data[key]:
                    data[key] = f"...{data[key][-4:]}"
        return data


def get_config_path() -> str:
    return os.environ.get('CRYPTOMIND_CONFIG', DEFAULT_CONFIG_PATH)


def read_config_file(config_path: Optional[str] = None) -> Dict:
    """Read the raw JSON config, returning {} when missing or malformed"""
    config_path = config_path or get_config_path()
    if not os.path.exists(config_path):
        return {}
    try:
        with open(config_path, 'r') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Error loading config from {config_path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.error(f"Config file {config_path} must contain a JSON object")
        return {}
    return data


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from file, then apply environment overrides.

    Args:
        config_path: Path to the JSON config (default: $CRYPTOMIND_CONFIG or wallet_config.json)
    """
    data = read_config_file(config_path)
    for env_name, key in ENV_OVERRIDES.items():
        if os.environ.get(env_name):
            data[key] = os.environ[env_name]
    return Config.from_dict(data)


def save_config(updates: Dict, config_path: Optional[str] = None) -> Config:
    """Merge updates into the JSON config file and return the new config"""
    config_path = config_path or get_config_path()
    data = read_config_file(config_path)
    data.update(updates)
    with open(config_path, 'w') as f:
        f.write(json.dumps(data, indent=4))
    logger.info(f"Saved configuration to {config_path}")
    return Config.from_dict(data)
