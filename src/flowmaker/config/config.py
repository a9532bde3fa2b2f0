"""Configuration loaded from ``configs/flowmaker.yml``."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Dict

import yaml

from flowmaker.utils.logging import get_logger


logger = get_logger(__name__)

BASE_DIR = Path(__file__).resolve().parents[3]
DEFAULT_CONFIG_PATH = BASE_DIR / "configs" / "flowmaker.yml"

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "catalog": {"path": "flows.csv"},
    "files": {"base_dir": "."},
    "logging": {"level": "INFO", "file": "logs/flowmaker.log"},
}


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: Path | str | None = None) -> dict:
    """Return the configuration at *path* merged over :data:`DEFAULTS`.

    A missing file gives the defaults unchanged. A file that is not a YAML
    mapping raises ``ValueError``.
    """

    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    try:
        with open(config_path, encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except FileNotFoundError:
        logger.info("config: %s not found, using defaults", config_path)
        return copy.deepcopy(DEFAULTS)
    if not isinstance(data, dict):
        raise ValueError(f"{config_path}: expected a mapping at the top level")
    return _merge(DEFAULTS, data)


def catalog_path(config: dict) -> Path:
    return Path(config["catalog"]["path"]).expanduser()


def files_dir(config: dict) -> Path:
    return Path(config["files"]["base_dir"]).expanduser()
