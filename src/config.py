"""Configuration for the payments engine."""

import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@dataclass
class EngineConfig:
    """Engine configuration."""

    log_level: str = "WARNING"
    decode_in_background: bool = True
    queue_maxsize: int = 10000
    queue_timeout: float = 0.1

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Create config from environment variables."""
        return cls(
            log_level=os.getenv("PAYMENTS_LOG_LEVEL", "WARNING").upper(),
            decode_in_background=_env_bool("PAYMENTS_DECODE_IN_BACKGROUND", True),
            queue_maxsize=int(os.getenv("PAYMENTS_QUEUE_MAXSIZE", "10000")),
            queue_timeout=float(os.getenv("PAYMENTS_QUEUE_TIMEOUT", "0.1")),
        )
