"""Client configuration loading and validation."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, replace
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from wpactrl.core.errors import ConfigLoadError, ConfigValidationError

LOGGER = logging.getLogger(__name__)

ENV_CTRL_DIR = "WPACTRL_CTRL_DIR"
ENV_INTERFACE = "WPACTRL_INTERFACE"


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class ClientConfig:
    ctrl_dir: str = "/var/run/wpa_supplicant"
    interface: str = "wlan0"
    cmd_timeout_s: float = 1.0
    event_queue_size: int = 100
    read_buffer_size: int = 4096
    poll_interval_s: float = 0.2


def default_config_path() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "wpactrl/config.yaml"


def _load_schema_validator() -> Any:
    schema_text = resources.files("wpactrl.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"Could not read config file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigValidationError(f"Config file {path} must contain a mapping at root")
    return loaded


def _build_config(doc: dict[str, Any], source: Path) -> ClientConfig:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    defaults = ClientConfig()
    return ClientConfig(
        ctrl_dir=str(doc.get("ctrl_dir", defaults.ctrl_dir)),
        interface=str(doc.get("interface", defaults.interface)),
        cmd_timeout_s=float(doc.get("cmd_timeout_s", defaults.cmd_timeout_s)),
        event_queue_size=int(doc.get("event_queue_size", defaults.event_queue_size)),
        read_buffer_size=int(doc.get("read_buffer_size", defaults.read_buffer_size)),
        poll_interval_s=float(doc.get("poll_interval_s", defaults.poll_interval_s)),
    )


def _apply_env(config: ClientConfig) -> ClientConfig:
    overrides: dict[str, Any] = {}
    if os.environ.get(ENV_CTRL_DIR):
        overrides["ctrl_dir"] = os.environ[ENV_CTRL_DIR]
    if os.environ.get(ENV_INTERFACE):
        overrides["interface"] = os.environ[ENV_INTERFACE]
    return replace(config, **overrides) if overrides else config


def load_config(path: str | Path | None = None) -> ClientConfig:
    """Load the client configuration.

    Without an explicit path the XDG config file is used when it exists;
    otherwise defaults apply. Environment variables override the file.
    """
    if path is not None:
        source = Path(path)
        config = _build_config(_read_yaml(source), source)
    else:
        source = default_config_path()
        if source.is_file():
            config = _build_config(_read_yaml(source), source)
        else:
            LOGGER.debug("No config file at %s, using defaults", source)
            config = ClientConfig()
    return _apply_env(config)
