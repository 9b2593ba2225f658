"""
Configuration for an ObjectModel.

Immutable settings with validation on construction.
Can be loaded from a YAML file:

    on_shadowed_builtin: warn     # or: error
    copy_values: true
    check_method_signatures: true
    log_level: INFO
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from gdom.errors import ConfigError

SHADOW_POLICIES = ("warn", "error")


@dataclass(frozen=True)
class ModelConfig:
    """
    Settings for an ObjectModel.

    Attributes:
        on_shadowed_builtin:
            "warn" emits ShadowedBuiltinWarning when a generic masks an
            incompatible built-in; "error" raises GenericConflictError.
        copy_values:
            Deep-copy mutable attribute values on construction and
            mutation so instances never alias caller data.
        check_method_signatures:
            Reject methods that cannot accept the generic's formal parameters.
        log_level:
            Level applied by configure_logging().
    """

    on_shadowed_builtin: str = "warn"
    copy_values: bool = True
    check_method_signatures: bool = True
    log_level: str = "WARNING"

    def __post_init__(self):
        if self.on_shadowed_builtin not in SHADOW_POLICIES:
            raise ConfigError(
                f"on_shadowed_builtin must be one of {SHADOW_POLICIES}, got {self.on_shadowed_builtin!r}"
            )
        for flag in ("copy_values", "check_method_signatures"):
            if not isinstance(getattr(self, flag), bool):
                raise ConfigError(f"{flag} must be a boolean")
        if not isinstance(logging.getLevelName(str(self.log_level).upper()), int):
            raise ConfigError(f"Unknown log level: {self.log_level!r}")


def config_from_dict(d: Optional[Dict[str, Any]]) -> ModelConfig:
    """Build a ModelConfig, rejecting keys it does not know."""
    d = d or {}
    if not isinstance(d, dict):
        raise ConfigError("Configuration must be a mapping")
    known = {f.name for f in fields(ModelConfig)}
    unknown = set(d) - known
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
    return ModelConfig(**d)


def load_config(path: Union[str, Path]) -> ModelConfig:
    """
    Load a ModelConfig from a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigError: If the content is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    return config_from_dict(data)


def configure_logging(level: Union[str, int, ModelConfig, None] = None) -> logging.Handler:
    """
    Attach a stream handler to the package logger.

    Args:
        level: A level name or number, or a ModelConfig whose log_level
            is used. Defaults to ModelConfig().log_level.

    Returns:
        The attached handler (for later removal).
    """
    if level is None:
        level = ModelConfig()
    if isinstance(level, ModelConfig):
        level = level.log_level
    logger = logging.getLogger("gdom")
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    return handler
