"""Configuration loading and validation."""

import codecs
import logging
import sys
from pathlib import Path
from typing import Any, Dict

try:
    import yaml
    HAS_YAML = True
except ImportError:
    HAS_YAML = False

CONFIG_FILENAME = ".subdelay.yaml"

# Valid configuration keys and their expected Python types.
_VALID_KEYS: Dict[str, type] = {
    "encoding": str,
    "backup": bool,
    "dry_run": bool,
}


def validate_config(config: Dict[str, Any]) -> None:
    """Validate *config* dict against known keys and types.

    Calls ``sys.exit(1)`` with a human-readable message on the first set of
    errors found so that the user sees all problems at once.
    """
    errors = []

    if not isinstance(config, dict):
        errors.append(f"config must be a mapping, got {type(config).__name__}")
        config = {}

    for key, value in config.items():
        if key not in _VALID_KEYS:
            errors.append(
                f"Unknown key '{key}'. Valid keys: {', '.join(sorted(_VALID_KEYS))}"
            )
            continue

        expected = _VALID_KEYS[key]
        if not isinstance(value, expected):
            errors.append(
                f"'{key}' must be {expected.__name__}, got {type(value).__name__}"
            )

    # Value-level checks (only when the type already passed).
    encoding = config.get("encoding")
    if isinstance(encoding, str):
        try:
            codecs.lookup(encoding)
        except LookupError:
            errors.append(f"'encoding' is not a known text encoding: '{encoding}'")

    if errors:
        print("Configuration error(s):", file=sys.stderr)
        for err in errors:
            print(f"  - {err}", file=sys.stderr)
        sys.exit(1)


def load_config() -> Dict[str, Any]:
    """Load and validate configuration from the first existing config file.

    Searches:
      1. ``~/.subdelay.yaml``
      2. ``.subdelay.yaml`` (current working directory)

    Returns an empty dict when no config file is found.
    """
    config_locations = [
        Path.home() / CONFIG_FILENAME,
        Path(CONFIG_FILENAME),
    ]

    for config_file in config_locations:
        if not config_file.exists():
            continue

        if not HAS_YAML:
            logging.warning(
                "YAML library not installed, config file ignored. "
                "Install with: pip install pyyaml"
            )
            break

        try:
            with open(config_file) as fh:
                config = yaml.safe_load(fh) or {}
            validate_config(config)  # exits on error
            logging.debug(f"Loaded configuration from: {config_file}")
            return config
        except SystemExit:
            raise
        except Exception as exc:
            logging.warning(f"Could not load config from {config_file}: {exc}")
        break

    return {}
