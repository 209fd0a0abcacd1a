from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

import yaml

try:
    import tomllib as toml
except ImportError:
    import tomli as toml

from .errors import ConfigError
from .paths import is_within, normalize

DEFAULT_SOURCE = "src"
DEFAULT_TARGET = "tgt"
DEFAULT_GLOBAL_KEY = "files"
DEFAULT_PORT = 8080


@dataclass
class SiteConfig:
    source: Path
    target: Path
    global_key: str = DEFAULT_GLOBAL_KEY
    debug: bool = False
    clean: bool = False
    serve: bool = False
    port: int = DEFAULT_PORT

    def __post_init__(self) -> None:
        self.source = normalize(self.source)
        self.target = normalize(self.target)


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".toml":
        try:
            data = toml.loads(text)
        except toml.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in config file {path}: {exc}") from exc
    elif suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in config file {path}: {exc}") from exc
        if data is None:
            return {}
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a mapping: {path}")
    return data


def resolve_config(args: object) -> SiteConfig:
    config = SiteConfig(
        source=Path(getattr(args, "source", DEFAULT_SOURCE)),
        target=Path(getattr(args, "target", DEFAULT_TARGET)),
        global_key=(getattr(args, "global_key", DEFAULT_GLOBAL_KEY) or "").strip(),
        debug=bool(getattr(args, "debug", False)),
        clean=bool(getattr(args, "clean", False)),
        serve=bool(getattr(args, "serve", False)),
        port=int(getattr(args, "port", DEFAULT_PORT)),
    )
    validate_config(config)
    return config


def validate_config(config: SiteConfig) -> None:
    if not config.source.is_dir():
        raise ConfigError(f"Source directory not found: {config.source}")
    if is_within(config.target, config.source):
        raise ConfigError(f"Target directory {config.target} must not contain the source directory")
    if not config.global_key:
        raise ConfigError("Global key must not be empty")
