"""File I/O utilities for configuration files."""

import tomllib
from pathlib import Path

import yaml

from orgchart.utils.types import ConfigDict

type FilePath = str | Path


def load_toml_config(path: FilePath) -> dict:
    """Load a TOML configuration file using the stdlib parser."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_yaml_config(path: FilePath) -> dict:
    with open(path) as f:
        return yaml.safe_load(f) or {}


def load_config_file(path: FilePath) -> ConfigDict:
    """Load a TOML or YAML config file, picking the parser by suffix."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    match path.suffix.lower():
        case ".toml":
            return load_toml_config(path)
        case ".yaml" | ".yml":
            return load_yaml_config(path)
        case ext:
            raise ValueError(f"Unsupported config format: {ext or '(none)'}")
