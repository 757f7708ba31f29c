"""
magink/contract.py

Caller-bound badge API.

Binds the caller identity and block number from a host Environment and
forwards to ProfileStore. Every "self" operation acts on the caller's own
profile; the *_for / get_account_profile queries read any identity.

Usage:
    from magink import Magink, BlockEnvironment

    env = BlockEnvironment()
    magink = Magink(env)

    magink.start(10)
    env.advance_blocks(10)
    result = magink.claim()
    if result:
        print(magink.get_badges())
"""

import logging
from typing import Optional, TYPE_CHECKING

from .environment import Environment
from .protocol.profiles import ClaimResult, Profile, ProfileStore

if TYPE_CHECKING:
    from .metrics import BadgeMetrics

logger = logging.getLogger("magink.contract")


class Magink:
    """Era-gated badge claiming for the caller of each call."""

    def __init__(
        self,
        env: Environment,
        store: Optional[ProfileStore] = None,
        metrics: Optional["BadgeMetrics"] = None,
    ):
        """
        Args:
            env: Host supplying block_number() and caller()
            store: Profile store to use; one reading env.block_number is
                created when omitted
            metrics: Collector for a newly created store
        """
        self.env = env
        if store is None:
            store = ProfileStore(env.block_number, metrics=metrics)
            logger.debug("Created in-memory profile store")
        self.store = store

    def start(self, era_duration: int) -> None:
        """(Re)start the claiming era for the caller."""
        self.store.start(self.env.caller(), era_duration)

    def claim(self) -> ClaimResult:
        """Claim the badge after the era."""
        return self.store.claim(self.env.caller())

    def get_remaining(self) -> int:
        """Returns the remaining blocks in the caller's era."""
        return self.store.get_remaining(self.env.caller())

    def get_remaining_for(self, account: str) -> int:
        """Returns the remaining blocks in the era for the given account."""
        return self.store.get_remaining_for(account)

    def get_profile(self) -> Optional[Profile]:
        return self.store.get_profile(self.env.caller())

    def get_account_profile(self, account: str) -> Optional[Profile]:
        return self.store.get_account_profile(account)

    def get_badges(self) -> int:
        return self.store.get_badges(self.env.caller())

    def get_badges_for(self, account: str) -> int:
        return self.store.get_badges_for(account)
