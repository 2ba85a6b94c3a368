"""Session configuration."""

import logging
import os
from dataclasses import dataclass, field, replace
from typing import Optional

logger = logging.getLogger(__name__)

ENV_PREFIX = "PLANFRAME_"

# Rows printed by DataFrame.show() when no count is given.
DEFAULT_SHOW_ROWS = 20

# Rows per batch produced by the engine.
DEFAULT_BATCH_SIZE = 8192

# Threads in the execution bridge. Each collect() occupies one worker while
# the engine's own pool does the work, so a few are enough.
DEFAULT_MAX_WORKERS = 4


def env_integer(key: str, default: Optional[int]) -> Optional[int]:
    value = os.environ.get(key)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Environment variable {key} must be an integer, got {value!r}")


def env_str(key: str, default: Optional[str]) -> Optional[str]:
    value = os.environ.get(key)
    return default if value is None or value == "" else value


def _default_partitions() -> int:
    return os.cpu_count() or 1


@dataclass(frozen=True)
class SessionConfig:
    """
    Settings for a Session and the engine it drives.

    Attributes:
        target_partitions: Parallelism of the engine's executor
        batch_size: Rows per produced record batch
        max_workers: Threads the execution bridge may park on the engine
        show_rows: Default row count for DataFrame.show()
        log_level: If set, applied to the "planframe" logger
    """

    target_partitions: int = field(default_factory=_default_partitions)
    batch_size: int = DEFAULT_BATCH_SIZE
    max_workers: int = DEFAULT_MAX_WORKERS
    show_rows: int = DEFAULT_SHOW_ROWS
    log_level: Optional[str] = None

    def __post_init__(self):
        for name in ("target_partitions", "batch_size", "max_workers"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if not isinstance(self.show_rows, int) or self.show_rows < 0:
            raise ValueError(
                f"show_rows must be a non-negative integer, got {self.show_rows!r}"
            )

    @classmethod
    def from_env(cls, **overrides) -> "SessionConfig":
        """
        Build a config from PLANFRAME_* environment variables.

        Recognized: PLANFRAME_TARGET_PARTITIONS, PLANFRAME_BATCH_SIZE,
        PLANFRAME_MAX_WORKERS, PLANFRAME_SHOW_ROWS, PLANFRAME_LOG_LEVEL.
        Keyword arguments win over the environment.
        """
        config = cls(
            target_partitions=env_integer(
                ENV_PREFIX + "TARGET_PARTITIONS", _default_partitions()
            ),
            batch_size=env_integer(ENV_PREFIX + "BATCH_SIZE", DEFAULT_BATCH_SIZE),
            max_workers=env_integer(ENV_PREFIX + "MAX_WORKERS", DEFAULT_MAX_WORKERS),
            show_rows=env_integer(ENV_PREFIX + "SHOW_ROWS", DEFAULT_SHOW_ROWS),
            log_level=env_str(ENV_PREFIX + "LOG_LEVEL", None),
        )
        return replace(config, **overrides) if overrides else config

    def apply_logging(self) -> None:
        if self.log_level is None:
            return
        level = logging.getLevelName(self.log_level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {self.log_level}")
        logging.getLogger("planframe").setLevel(level)
        logger.debug("planframe log level set to %s", self.log_level.upper())
