"""
magink/environment.py

Host primitives supplied to the contract layer.

A host provides the current block number and the identity of the caller of
the current call. BlockEnvironment is a deterministic in-process host: blocks
only advance when asked to, and the caller is whoever was last set.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from .config import U32_MAX

logger = logging.getLogger("magink.environment")


class Environment(ABC):
    """Host primitives required by Magink."""

    @abstractmethod
    def block_number(self) -> int:
        """Current block number (non-decreasing)."""
        pass

    @abstractmethod
    def caller(self) -> str:
        """Identity that initiated the current call."""
        pass


@dataclass(frozen=True)
class DefaultAccounts:
    """Well-known development accounts."""
    alice: str = "alice"
    bob: str = "bob"
    charlie: str = "charlie"
    dave: str = "dave"
    eve: str = "eve"
    ferdie: str = "ferdie"


def default_accounts() -> DefaultAccounts:
    return DefaultAccounts()


class BlockEnvironment(Environment):
    """
    Deterministic host with a manually advanced block counter.

    Usage:
        env = BlockEnvironment()
        contract = Magink(env)
        contract.start(10)
        env.advance_blocks(10)
        contract.claim()
    """

    def __init__(self, block: int = 0, caller: str = None):
        if not 0 <= block <= U32_MAX:
            raise ValueError(f"block must be between 0 and {U32_MAX}, got {block}")
        self._block = block
        self._caller = caller or default_accounts().alice

    def block_number(self) -> int:
        return self._block

    def caller(self) -> str:
        return self._caller

    def set_caller(self, caller: str) -> None:
        """Make caller the initiator of subsequent calls."""
        self._caller = caller

    def advance_block(self) -> int:
        """Advance by one block and return the new block number."""
        return self.advance_blocks(1)

    def advance_blocks(self, n: int) -> int:
        """Advance by n blocks and return the new block number."""
        if n < 0:
            raise ValueError("Block number cannot go backwards")
        if self._block + n > U32_MAX:
            raise ValueError(f"Block number would exceed {U32_MAX}")
        self._block += n
        logger.debug(f"Advanced to block {self._block}")
        return self._block
