"""
magink/config.py

Configuration constants and data classes for magink.

Settings can be supplied:
1. Programmatically via MaginkConfig(...)
2. Environment variables: MAGINK_STORAGE_DIR, MAGINK_DEFAULT_ERA,
   MAGINK_ENABLE_METRICS
3. Defaults below
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, TYPE_CHECKING
import os
import logging

if TYPE_CHECKING:
    from .protocol.profiles import ProfileStore
    from .metrics import BadgeMetrics

logger = logging.getLogger("magink.config")


# Integer domains of the persisted record
U8_MAX = 2 ** 8 - 1                 # claim_era, badges_claimed
U32_MAX = 2 ** 32 - 1               # start_block, block numbers

# Era used when none is given (in blocks)
DEFAULT_ERA = 10

# Default on-disk location for FileBackend
DEFAULT_STORAGE_DIR = Path.home() / ".magink" / "profiles"

# Environment variables
ENV_STORAGE_DIR = "MAGINK_STORAGE_DIR"
ENV_DEFAULT_ERA = "MAGINK_DEFAULT_ERA"
ENV_ENABLE_METRICS = "MAGINK_ENABLE_METRICS"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class MaginkConfig:
    """Runtime settings for a profile store."""
    storage_dir: Optional[Path] = None   # None = in-memory backend
    default_era: int = DEFAULT_ERA
    enable_metrics: bool = True

    def __post_init__(self):
        if not 0 <= self.default_era <= U8_MAX:
            raise ValueError(
                f"default_era must be between 0 and {U8_MAX}, got {self.default_era}"
            )
        if self.storage_dir is not None:
            self.storage_dir = Path(self.storage_dir)

    @classmethod
    def from_env(cls) -> "MaginkConfig":
        """
        Build configuration from environment variables.

        Invalid values are logged and replaced by the defaults.
        """
        storage_dir = None
        env_dir = os.environ.get(ENV_STORAGE_DIR)
        if env_dir:
            storage_dir = Path(env_dir).expanduser()
            logger.info(f"Storage dir from env: {storage_dir}")

        default_era = DEFAULT_ERA
        env_era = os.environ.get(ENV_DEFAULT_ERA)
        if env_era:
            try:
                value = int(env_era)
                if not 0 <= value <= U8_MAX:
                    raise ValueError(f"out of range 0..{U8_MAX}")
                default_era = value
            except ValueError as e:
                logger.warning(f"Invalid {ENV_DEFAULT_ERA}={env_era!r}: {e}")

        enable_metrics = True
        env_metrics = os.environ.get(ENV_ENABLE_METRICS)
        if env_metrics:
            normalized = env_metrics.lower().strip()
            if normalized in _TRUE_VALUES:
                enable_metrics = True
            elif normalized in _FALSE_VALUES:
                enable_metrics = False
            else:
                logger.warning(f"Invalid {ENV_ENABLE_METRICS}={env_metrics!r}")

        return cls(
            storage_dir=storage_dir,
            default_era=default_era,
            enable_metrics=enable_metrics,
        )

    def to_dict(self) -> dict:
        """Export configuration as dictionary."""
        return {
            'storage_dir': str(self.storage_dir) if self.storage_dir else None,
            'default_era': self.default_era,
            'enable_metrics': self.enable_metrics,
        }


def create_store(
    config: MaginkConfig,
    current_tick: Callable[[], int],
    metrics: Optional["BadgeMetrics"] = None,
) -> "ProfileStore":
    """
    Build a ProfileStore for the given configuration.

    Args:
        config: Store settings
        current_tick: Host primitive returning the current block number
        metrics: Optional collector; created when enabled and not given

    Returns:
        ProfileStore backed by a FileBackend if storage_dir is set,
        otherwise by a MemoryBackend
    """
    from .protocol.profiles import ProfileStore
    from .protocol.storage import FileBackend, MemoryBackend
    from .metrics import BadgeMetrics

    if config.storage_dir is not None:
        backend = FileBackend(config.storage_dir)
    else:
        backend = MemoryBackend()

    if metrics is None and config.enable_metrics:
        metrics = BadgeMetrics()

    return ProfileStore(current_tick, backend=backend, metrics=metrics)
