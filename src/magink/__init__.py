"""
magink - Era-gated badge ledger

Each participant starts an era of N blocks; after the era has elapsed they
may claim one badge, which starts the next era.

Usage:
    from magink import Magink, BlockEnvironment

    env = BlockEnvironment()
    magink = Magink(env)

    magink.start(10)
    magink.get_remaining()      # 10
    env.advance_blocks(10)
    magink.claim()              # ClaimResult(success=True, ...)
    magink.get_badges()         # 1

Storage Usage:
    from magink import MaginkConfig, create_store

    config = MaginkConfig(storage_dir="/var/lib/magink")
    store = create_store(config, current_tick=env.block_number)
    magink = Magink(env, store=store)

Metrics Usage:
    prometheus_output = store.metrics.collect(profile_count=len(store))
"""

from .contract import Magink
from .environment import (
    Environment,
    BlockEnvironment,
    DefaultAccounts,
    default_accounts,
)
from .protocol import (
    Profile,
    ProfileStore,
    ClaimResult,
    ClaimError,
    ClaimRejected,
    MaginkError,
    ProfileBackend,
    MemoryBackend,
    FileBackend,
)
from .metrics import BadgeMetrics
from .config import (
    MaginkConfig,
    create_store,
    DEFAULT_ERA,
    U8_MAX,
    U32_MAX,
)

__version__ = "1.0.0"
__all__ = [
    # Core
    "Magink",
    "ProfileStore",
    "Profile",
    # Results & Errors
    "ClaimResult",
    "ClaimError",
    "ClaimRejected",
    "MaginkError",
    # Host
    "Environment",
    "BlockEnvironment",
    "DefaultAccounts",
    "default_accounts",
    # Storage
    "ProfileBackend",
    "MemoryBackend",
    "FileBackend",
    # Metrics
    "BadgeMetrics",
    # Config
    "MaginkConfig",
    "create_store",
    "DEFAULT_ERA",
    "U8_MAX",
    "U32_MAX",
]
