"""Environment-driven configuration.

Values are read from the process environment when requested. The transforms
in ``openrtb_compat.core.convert_down`` and ``openrtb_compat.core.pod_expansion``
never read configuration; only the schema base model and logging setup do.
"""

import os
from typing import Literal

from pydantic import BaseModel, Field

_TRUTHY = {"1", "true", "yes", "on"}
_STRICT_ENVIRONMENTS = {"development", "dev"}


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {value!r}") from e


def get_pydantic_extra_mode() -> Literal["allow", "forbid"]:
    """Return the ``extra`` policy for all bid request models.

    - Development (ENVIRONMENT=development|dev): "forbid" so misspelled field
      names fail fast.
    - Everything else: "allow" so OpenRTB fields this package does not model
      survive a downgrade untouched.
    """
    environment = os.environ.get("ENVIRONMENT", "").strip().lower()
    if environment in _STRICT_ENVIRONMENTS:
        return "forbid"
    return "allow"


def get_log_level() -> str:
    return os.environ.get("OPENRTB_COMPAT_LOG_LEVEL", "INFO").strip().upper() or "INFO"


class LogSamplingConfig(BaseModel):
    """Log sampling knobs.

    Within each one-second tick the first ``initial`` records carrying the same
    message template are emitted, then only every ``thereafter``-th one.
    """

    enabled: bool = False
    initial: int = Field(default=100, ge=1)
    thereafter: int = Field(default=100, ge=1)


def get_log_sampling_config() -> LogSamplingConfig:
    return LogSamplingConfig(
        enabled=_env_flag("OPENRTB_COMPAT_LOG_SAMPLING_ENABLED"),
        initial=_env_int("OPENRTB_COMPAT_LOG_SAMPLING_INITIAL", 100),
        thereafter=_env_int("OPENRTB_COMPAT_LOG_SAMPLING_THEREAFTER", 100),
    )
