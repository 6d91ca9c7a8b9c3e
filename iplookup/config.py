"""YAML configuration for the lookup client.

Example:

    retry:
      max_attempts: 4
      initial_timeout: 1.0
      backoff_factor: 2.0
      send_timeout: 1.0
"""

import math
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from .errors import ConfigError
from .transport.retry_policy import BackoffPolicy


@dataclass
class LookupConfig:
    """Settings for a lookup run."""
    retry: BackoffPolicy = field(default_factory=BackoffPolicy)

    def with_attempts(self, max_attempts: Optional[int]) -> "LookupConfig":
        """Copy with ``max_attempts`` overridden (None keeps the current value)."""
        if max_attempts is None:
            return self
        return LookupConfig(retry=replace(self.retry, max_attempts=max_attempts))


def load_config(file_path: Union[str, Path]) -> LookupConfig:
    """Load and validate a YAML config file.

    Args:
        file_path: Path to the YAML file.

    Returns:
        Validated LookupConfig.

    Raises:
        ConfigError: If the file is missing, malformed or invalid.
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise ConfigError(f"Config file not found: {file_path}")

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed YAML in {file_path}: {e}") from e

    if data is None:
        return LookupConfig()

    return parse_config_data(data, source=str(file_path))


def parse_config_data(data: Any, source: str = "<inline>") -> LookupConfig:
    """Build a LookupConfig from an already loaded mapping.

    Unknown keys are ignored.

    Raises:
        ConfigError: If the structure or any value is invalid.
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a YAML mapping, got {type(data).__name__} ({source})")

    retry_data = data.get("retry", {}) or {}
    if not isinstance(retry_data, dict):
        raise ConfigError(f"'retry' must be a mapping ({source})")

    known = {f.name for f in fields(BackoffPolicy)}
    retry = BackoffPolicy(**{k: v for k, v in retry_data.items() if k in known})

    errors = validate_policy(retry)
    if errors:
        raise ConfigError(f"Invalid config ({source}): " + "; ".join(errors))

    return LookupConfig(retry=retry)


def validate_policy(policy: BackoffPolicy) -> list[str]:
    """Check a backoff policy, returning one message per problem."""
    errors: list[str] = []

    if isinstance(policy.max_attempts, bool) or not isinstance(policy.max_attempts, int):
        errors.append(f"retry.max_attempts: must be an integer, got {policy.max_attempts!r}")
    elif policy.max_attempts < 1:
        errors.append(f"retry.max_attempts: must be at least 1, got {policy.max_attempts}")

    for name in ("initial_timeout", "backoff_factor", "send_timeout"):
        value = getattr(policy, name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            errors.append(f"retry.{name}: must be a number, got {value!r}")
        elif not math.isfinite(value):
            errors.append(f"retry.{name}: must be finite, got {value}")
        elif value <= 0:
            errors.append(f"retry.{name}: must be positive, got {value}")

    if not errors and policy.backoff_factor < 1:
        errors.append(
            f"retry.backoff_factor: must be at least 1, got {policy.backoff_factor}"
        )

    return errors
