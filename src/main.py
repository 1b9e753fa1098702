"""
Main application for Swipe Counter.

Loads layered configuration, restores the saved counters and serves the
gesture/counter HTTP API.

Usage:
    python src/main.py --config config/config.yaml

Arguments:
    --config: Path to configuration file
    --host: Override web.host
    --port: Override web.port
"""

import argparse
import logging
import os
import sys
from typing import Any, Dict, Optional, Tuple

import uvicorn
import yaml

from models.config import Config
from ops.logging import setup_logging
from runtime.context import build_context
from storage.persistence import BACKENDS
from web.app import create_app


VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base and return base."""
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
    return base


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration with layering:
    - `config/default.yaml` (checked in)
    - `config/config.yaml` (local overrides)
    - plus any explicitly provided `--config` path (treated as overrides)
    """
    try:
        base_path = os.path.join(os.path.dirname(config_path), "default.yaml")
        base_cfg: Dict[str, Any] = {}
        if os.path.exists(base_path):
            with open(base_path, "r") as f:
                base_cfg = yaml.safe_load(f) or {}

        local_overrides_path = os.path.join(os.path.dirname(config_path), "config.yaml")
        local_cfg: Dict[str, Any] = {}
        if os.path.exists(local_overrides_path):
            with open(local_overrides_path, "r") as f:
                local_cfg = yaml.safe_load(f) or {}

        merged = _deep_merge(base_cfg, local_cfg)

        # Finally apply explicit config_path if it's not the local override file itself
        if os.path.exists(config_path) and os.path.abspath(config_path) != os.path.abspath(local_overrides_path):
            with open(config_path, "r") as f:
                explicit_cfg = yaml.safe_load(f) or {}
            merged = _deep_merge(merged, explicit_cfg)

        return merged
    except (OSError, yaml.YAMLError) as e:
        logging.error(f"Failed to load configuration: {e}")
        sys.exit(1)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration file structure and values.

    Args:
        config: Configuration dictionary

    Returns:
        Tuple of (is_valid, error_message)
    """
    # Required top-level sections
    required_sections = ['gestures', 'steps', 'storage', 'log_path', 'log_level']
    for section in required_sections:
        if section not in config:
            return False, f"Missing required configuration section: {section}"

    # Gesture thresholds: all optional, all positive numbers
    gestures = config.get('gestures') or {}
    for key in ('tap_threshold', 'tap_max_duration_ms', 'swipe_threshold',
                'hint_threshold', 'switch_distance', 'switch_velocity'):
        if key in gestures and (not _is_number(gestures[key]) or gestures[key] <= 0):
            return False, f"gestures.{key} must be a positive number"
    if _is_number(gestures.get('hint_threshold')) and _is_number(gestures.get('swipe_threshold')):
        if gestures['hint_threshold'] > gestures['swipe_threshold']:
            return False, "gestures.hint_threshold must not exceed gestures.swipe_threshold"

    # Step scaling
    steps = config.get('steps') or {}
    if 'base' in steps and (not _is_number(steps['base']) or steps['base'] <= 0):
        return False, "steps.base must be a positive number"
    if 'growth_rate' in steps and (not _is_number(steps['growth_rate']) or steps['growth_rate'] < 1):
        return False, "steps.growth_rate must be a number >= 1"
    if 'threshold' in steps and (not _is_number(steps['threshold']) or steps['threshold'] <= 0):
        return False, "steps.threshold must be a positive number"

    # Optional feedback settings
    feedback = config.get('feedback') or {}
    if 'clear_after_ms' in feedback:
        if not _is_number(feedback['clear_after_ms']) or feedback['clear_after_ms'] <= 0:
            return False, "feedback.clear_after_ms must be a positive number"

    # Optional counter defaults
    counters = config.get('counters') or {}
    if 'default_target' in counters:
        target = counters['default_target']
        if isinstance(target, bool) or not isinstance(target, int) or target <= 0:
            return False, "counters.default_target must be a positive integer"

    # Validate storage settings
    storage = config.get('storage') or {}
    backend = storage.get('backend', 'sqlite')
    if backend not in BACKENDS:
        return False, f"storage.backend must be one of: {', '.join(BACKENDS)}"
    if backend != 'memory':
        if 'path' not in storage:
            return False, "Missing storage.path"
        if not isinstance(storage['path'], str) or not storage['path']:
            return False, "storage.path must be a non-empty string"
    if 'background' in storage and not isinstance(storage['background'], bool):
        return False, "storage.background must be a boolean"

    # Optional web settings
    web = config.get('web') or {}
    if 'port' in web:
        port = web['port']
        if isinstance(port, bool) or not isinstance(port, int) or not (0 < port < 65536):
            return False, "web.port must be an integer between 1 and 65535"

    # Validate log settings
    if config['log_level'] not in VALID_LOG_LEVELS:
        return False, f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}"
    if not isinstance(config['log_path'], str):
        return False, "log_path must be a string"

    return True, None


def apply_overrides(config: Config, host: Optional[str] = None, port: Optional[int] = None) -> Config:
    """Apply --host/--port over the loaded config; None leaves a value unchanged."""
    if host is not None:
        config.web.host = host
    if port is not None:
        config.web.port = port
    return config


def main():
    """Main application function."""
    parser = argparse.ArgumentParser(description='Swipe Counter - gesture-driven counters')
    parser.add_argument('--config', type=str, default='config/config.yaml',
                        help='Path to configuration file')
    parser.add_argument('--host', type=str, default=None,
                        help='Override web.host')
    parser.add_argument('--port', type=int, default=None,
                        help='Override web.port')
    args = parser.parse_args()

    raw_config = load_config(args.config)

    is_valid, error_msg = validate_config(raw_config)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error_msg}")
        sys.exit(1)

    config = apply_overrides(Config.from_dict(raw_config), host=args.host, port=args.port)

    setup_logging(config.log_path, config.log_level)
    logging.info("Starting Swipe Counter")

    ctx = build_context(config)
    try:
        uvicorn.run(
            create_app(ctx),
            host=config.web.host,
            port=config.web.port,
            log_level=config.log_level.lower(),
        )
    except KeyboardInterrupt:
        logging.info("Interrupted by user")
    finally:
        ctx.close()
        logging.info("Swipe Counter stopped")


if __name__ == "__main__":
    main()
