#!/usr/bin/env python3
"""
Configuration management for leveltutor.
Stores user preferences (content folder, edit target) in a local JSON file.
"""

import os
import json
from pathlib import Path
from typing import Optional, Dict, Any


DEFAULTS: Dict[str, Any] = {
    'content_dir': 'content',
    'tutorial_path': 'tutorial.txt',
}


def get_config_dir() -> Path:
    """Get the leveltutor config directory ($LEVELTUTOR_HOME or ~/.leveltutor)"""
    override = os.environ.get('LEVELTUTOR_HOME')
    config_dir = Path(override) if override else Path.home() / '.leveltutor'
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_path() -> Path:
    """Get the config file path"""
    return get_config_dir() / 'config.json'


def load_config() -> Dict[str, Any]:
    """Load configuration from file"""
    config_path = get_config_path()
    if config_path.exists():
        try:
            with open(config_path, 'r') as f:
                config = json.load(f)
        except (json.JSONDecodeError, IOError):
            return {}
        return config if isinstance(config, dict) else {}
    return {}


def save_config(config: Dict[str, Any]) -> None:
    """Save configuration to file"""
    config_path = get_config_path()
    with open(config_path, 'w') as f:
        json.dump(config, f, indent=2)


def get_config_value(key: str, default: Any = None) -> Any:
    """Get a specific config value"""
    config = load_config()
    return config.get(key, default)


def set_config_value(key: str, value: Any) -> None:
    """Set a specific config value"""
    config = load_config()
    config[key] = value
    save_config(config)


def resolve_settings(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Merge settings in priority order.

    1. Built-in defaults
    2. Values from the config file
    3. Non-None overrides (usually CLI flags)
    """
    settings = {key: get_config_value(key, default) for key, default in DEFAULTS.items()}
    for key, value in (overrides or {}).items():
        if value is not None:
            settings[key] = value
    return settings
