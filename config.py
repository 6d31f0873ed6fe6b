# config.py
from __future__ import annotations
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional

import yaml

from logger import LOG_FILE, log
from provisioning.errors import ConfigError

CONFIG_PATH = Path("/etc/provision-wizard/config.yaml")
CATALOG_PATH = "/etc/provision-wizard/catalog.yaml"
SPOOL_DIR = "/var/spool/provision-wizard"

# env var -> config key
ENV_OVERRIDES = {
    "PROVISION_WIZARD_CATALOG": "catalog_path",
    "PROVISION_WIZARD_SPOOL": "spool_dir",
    "PROVISION_WIZARD_LOG": "log_file",
    "PROVISION_WIZARD_CACHE_TTL": "resource_cache_ttl",
    "PROVISION_WIZARD_MAX_ATTEMPTS": "max_submit_attempts",
}


@dataclass(frozen=True)
class WizardConfig:
    catalog_path: str = CATALOG_PATH
    spool_dir: str = SPOOL_DIR
    log_file: str = LOG_FILE
    resource_cache_ttl: float = 300.0
    max_submit_attempts: int = 3


def _coerce(key: str, value):
    default = getattr(WizardConfig, key)
    try:
        if isinstance(default, float):
            value = float(value)
        elif isinstance(default, int):
            value = int(value)
        else:
            value = str(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Config value {key}={value!r} is not a valid {type(default).__name__}")
    if isinstance(value, (int, float)) and value < 0:
        raise ConfigError(f"Config value {key} must not be negative")
    if key == "max_submit_attempts" and value < 1:
        raise ConfigError(
            "Config value max_submit_attempts must be at least 1",
            "Set it to 1 to allow a single create attempt per review.",
        )
    return value


def load_config(path: Optional[str] = None, environ=None) -> WizardConfig:
    """Defaults, then the YAML file, then PROVISION_WIZARD_* environment variables."""
    environ = os.environ if environ is None else environ
    config_path = Path(path) if path else CONFIG_PATH
    values = {}

    if config_path.exists():
        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Unable to read config {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config {config_path} must be a mapping")
        known = {f.name for f in fields(WizardConfig)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(
                f"Unknown config keys in {config_path}: {', '.join(unknown)}",
                f"Valid keys: {', '.join(sorted(known))}",
            )
        values.update({k: _coerce(k, v) for k, v in data.items()})
        log.info("Loaded config from %s", config_path)
    elif path:
        raise ConfigError(f"Config file {config_path} not found")

    for env_key, key in ENV_OVERRIDES.items():
        if env_key in environ:
            values[key] = _coerce(key, environ[env_key])

    return replace(WizardConfig(), **values)
