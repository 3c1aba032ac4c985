"""Configuration loading, parsing, and validation for otelsync."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

from otelsync.api.types import (
    Destination,
    GatewayConfig,
    LoggingConfig,
    OperatorConfig,
    ProcessorDeclaration,
    Signal,
    ValidationConfig,
)
from otelsync.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Pattern for environment variable substitution: ${VAR_NAME}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

# Environment variable for config path fallback
OTELSYNC_CONFIG_PATH_ENV = "OTELSYNC_CONFIG_PATH"


def _substitute_env_vars(value: str, strict: bool) -> str:
    """Substitute ${VAR_NAME} patterns with environment variable values.

    Args:
        value: String potentially containing ${VAR_NAME} patterns.
        strict: If True, raise ConfigurationError for missing env vars.

    Returns:
        String with environment variables substituted.

    Raises:
        ConfigurationError: If strict=True and an env var is not set.
    """

    def replace_match(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is None:
            if strict:
                raise ConfigurationError(
                    f"Environment variable '{var_name}' is not set"
                )
            logger.warning(
                "Environment variable '%s' not set, using empty string", var_name
            )
            return ""
        return env_value

    return ENV_VAR_PATTERN.sub(replace_match, value)


def _substitute_env_vars_recursive(data: Any, strict: bool) -> Any:
    """Recursively substitute environment variables in a data structure."""
    if isinstance(data, dict):
        return {k: _substitute_env_vars_recursive(v, strict) for k, v in data.items()}
    elif isinstance(data, list):
        return [_substitute_env_vars_recursive(item, strict) for item in data]
    elif isinstance(data, str):
        return _substitute_env_vars(data, strict)
    else:
        return data


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        with open(path) as f:
            raw_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if raw_data is None:
        return {}
    if not isinstance(raw_data, dict):
        raise ConfigurationError(f"Expected a mapping at the top of {path}")
    return raw_data


def _parse_gateway_config(data: dict[str, Any]) -> GatewayConfig:
    """Parse gateway configuration section."""
    defaults = GatewayConfig()
    pull_secrets = data.get("image_pull_secrets") or []
    if isinstance(pull_secrets, str):
        pull_secrets = [pull_secrets]
    return GatewayConfig(
        name=str(data.get("name") or defaults.name),
        image=str(data.get("image") or defaults.image),
        image_pull_secrets=[str(s) for s in pull_secrets],
    )


def _parse_validation_config(data: dict[str, Any]) -> ValidationConfig:
    """Parse validation configuration section."""
    mode = data.get("mode", "permissive")
    if mode not in ("strict", "permissive"):
        logger.warning("Unknown validation mode '%s', defaulting to permissive", mode)
        mode = "permissive"
    return ValidationConfig(mode=mode)


def _parse_logging_config(data: dict[str, Any]) -> LoggingConfig:
    """Parse logging configuration section."""
    return LoggingConfig(level=str(data.get("level", "INFO")).upper())


def _validate_config(config: OperatorConfig) -> list[str]:
    """Validate configuration and return list of error messages."""
    errors: list[str] = []

    if not config.namespace:
        errors.append("namespace is required")
    if not config.gateway.name:
        errors.append("gateway.name is required")
    if not config.gateway.image:
        errors.append("gateway.image is required")

    return errors


def resolve_config_path(config_path: str | Path | None) -> Path:
    """Resolve configuration file path from argument or environment.

    Raises:
        ConfigurationError: If no config path is provided and
                           OTELSYNC_CONFIG_PATH env var is not set.
    """
    if config_path is not None:
        return Path(config_path)

    env_path = os.environ.get(OTELSYNC_CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path)

    raise ConfigurationError(
        f"No configuration path provided. Either pass a config path "
        f"or set the {OTELSYNC_CONFIG_PATH_ENV} environment variable."
    )


def load_config(
    path: str | Path | None = None, strict: bool | None = None
) -> OperatorConfig:
    """Load and parse operator configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file, or None to use
            OTELSYNC_CONFIG_PATH.
        strict: Override validation mode. If None, use mode from config file.

    Returns:
        Parsed and validated OperatorConfig.

    Raises:
        ConfigurationError: If file doesn't exist, YAML is invalid,
                           or validation fails in strict mode.
    """
    raw_data = _read_yaml(resolve_config_path(path))

    # Determine validation mode early (needed for env var substitution)
    validation_data = raw_data.get("validation") or {}
    validation_mode = validation_data.get("mode", "permissive")
    is_strict = strict if strict is not None else (validation_mode == "strict")

    data = _substitute_env_vars_recursive(raw_data, strict=is_strict)

    config = OperatorConfig(
        namespace=str(data.get("namespace") or ""),
        gateway=_parse_gateway_config(data.get("gateway") or {}),
        validation=_parse_validation_config(data.get("validation") or {}),
        logging=_parse_logging_config(data.get("logging") or {}),
    )

    # Override validation mode if specified
    if strict is not None:
        config.validation.mode = "strict" if strict else "permissive"

    errors = _validate_config(config)
    if errors:
        if config.is_strict:
            raise ConfigurationError(
                f"Configuration validation failed: {'; '.join(errors)}"
            )
        for error in errors:
            logger.warning("Configuration problem ignored in permissive mode: %s", error)

    return config


def _parse_signals(raw: Any, owner: str) -> frozenset[Signal]:
    if raw is None:
        return frozenset()
    if isinstance(raw, str):
        raw = [raw]
    signals = set()
    for item in raw:
        try:
            signals.add(Signal(str(item).lower()))
        except ValueError:
            raise ConfigurationError(f"{owner}: unknown signal '{item}'") from None
    return frozenset(signals)


def _parse_destination(item: dict[str, Any], index: int) -> Destination:
    if not isinstance(item, dict):
        raise ConfigurationError(f"destinations[{index}] must be a mapping")
    name = item.get("name")
    dest_type = item.get("type")
    if not name or not dest_type:
        raise ConfigurationError(f"destinations[{index}]: name and type are required")
    data = item.get("data") or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"destination '{name}': data must be a mapping")
    return Destination(
        name=str(name),
        type=str(dest_type),
        # Destination fields are strings on the cluster record too; a null
        # value means the field is absent
        data={str(k): str(v) for k, v in data.items() if v is not None},
        signals=_parse_signals(item.get("signals"), f"destination '{name}'"),
    )


def _parse_processor(item: dict[str, Any], index: int) -> ProcessorDeclaration:
    if not isinstance(item, dict):
        raise ConfigurationError(f"processors[{index}] must be a mapping")
    try:
        order_hint = int(item.get("order_hint", 0))
    except (TypeError, ValueError):
        raise ConfigurationError(f"processors[{index}]: order_hint must be an integer") from None
    # Shape problems are reported by synthesis, which owns that contract
    return ProcessorDeclaration(
        name=str(item.get("name") or ""),
        type=str(item.get("type") or ""),
        signals=_parse_signals(item.get("signals"), f"processors[{index}]"),
        config=item.get("config") if item.get("config") is not None else {},
        order_hint=order_hint,
        disabled=bool(item.get("disabled", False)),
    )


def load_manifest(
    path: str | Path,
) -> tuple[list[Destination], list[ProcessorDeclaration]]:
    """Load destinations and processor declarations from a YAML manifest.

    Unlike load_config(), no ${VAR} substitution happens here: secret
    placeholders belong to the collector and must reach it untouched.

    Raises:
        ConfigurationError: If the file is unreadable or an entry is
                           missing its name/type or names an unknown signal.
    """
    data = _read_yaml(Path(path))

    raw_destinations = data.get("destinations") or []
    raw_processors = data.get("processors") or []
    if not isinstance(raw_destinations, list) or not isinstance(raw_processors, list):
        raise ConfigurationError("destinations and processors must be lists")

    destinations = [
        _parse_destination(item, i) for i, item in enumerate(raw_destinations)
    ]
    processors = [_parse_processor(item, i) for i, item in enumerate(raw_processors)]
    return destinations, processors
