# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/gpinstall/config/loader.py

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

import yaml
from pydantic import ValidationError

from gpinstall.errors import ConfigurationError
from .models import InstallConfig

log = logging.getLogger("gpinstall")

# config key -> environment variable used when the key is not set in YAML
ENV_DEFAULTS = {
    "master_hostname": "HOSTNAME",
    "temp_dir": "TEMPDIR",
    "gphome": "GPHOME",
}


def _load_yaml(path: Path) -> dict:
    """Load a YAML file, expanding ${ENV_VAR} references."""
    try:
        raw = path.read_text()
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
    expanded = os.path.expandvars(raw)
    data = yaml.safe_load(expanded) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return data


def load_config(
    path: Optional[str | Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> InstallConfig:
    """
    Build the run configuration.

    Values come from the optional YAML file first. Keys left unset there are
    taken from the environment (``HOSTNAME``, ``TEMPDIR``, ``GPHOME``). This is
    the only place the process environment is consulted; everything downstream
    receives the resulting ``InstallConfig``.
    """
    env = os.environ if environ is None else environ
    data: dict = {}
    if path is not None:
        data = _load_yaml(Path(path))
        log.debug("Loaded config from %s", path)

    for key, var in ENV_DEFAULTS.items():
        if data.get(key) in (None, ""):
            value = env.get(var)
            if value:
                data[key] = value

    if not data.get("master_hostname"):
        raise ConfigurationError(
            "The environment variable 'HOSTNAME' for master host is not set"
        )
    if not data.get("temp_dir"):
        raise ConfigurationError(
            "No temp directory configured: set 'temp_dir' or the TEMPDIR environment variable"
        )

    try:
        return InstallConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
