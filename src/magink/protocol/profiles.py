"""
magink/protocol/profiles.py

Era-gated badge claiming.

Each participant starts an era of N blocks. Once N blocks have passed since
the era began, the participant may claim one badge; claiming increments the
badge count and immediately begins the next era of the same length.

State per identity:
    NoProfile --start--> Waiting --(blocks pass)--> Eligible --claim--> Waiting

start() is accepted from any state and resets the badge count to zero.

Usage:
    from magink.protocol.profiles import ProfileStore

    store = ProfileStore(current_tick=env.block_number)
    store.start("alice", 10)
    store.get_remaining("alice")      # 10
    result = store.claim("alice")     # ClaimResult(success=False, error=TOO_EARLY_TO_CLAIM)
"""

import logging
import threading
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

from ..config import U8_MAX, U32_MAX
from .storage import ProfileBackend, MemoryBackend

if TYPE_CHECKING:
    from ..metrics import BadgeMetrics

logger = logging.getLogger("magink.protocol.profiles")


# ============================================================================
# ERRORS
# ============================================================================

class ClaimError(Enum):
    """Reasons a claim is rejected."""
    TOO_EARLY_TO_CLAIM = "too_early_to_claim"   # era not yet elapsed
    USER_NOT_FOUND = "user_not_found"           # no start() for this identity
    BADGE_OVERFLOW = "badge_overflow"           # badge counter at U8_MAX


class MaginkError(Exception):
    """Base exception for magink."""


class ClaimRejected(MaginkError):
    """Raised by ClaimResult.raise_for_error() for a failed claim."""

    def __init__(self, error: ClaimError):
        self.error = error
        super().__init__(f"Claim rejected: {error.value}")


# ============================================================================
# DATA STRUCTURES
# ============================================================================

@dataclass
class Profile:
    """Per-identity era and badge record."""
    claim_era: int          # blocks to wait between claims
    start_block: int        # block at which the current era began
    badges_claimed: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Profile":
        """Build a profile from its persisted layout, validating ranges."""
        try:
            profile = cls(
                claim_era=int(data['claim_era']),
                start_block=int(data['start_block']),
                badges_claimed=int(data['badges_claimed']),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed profile record {data!r}: {e}") from e

        if not 0 <= profile.claim_era <= U8_MAX:
            raise ValueError(f"claim_era out of range: {profile.claim_era}")
        if not 0 <= profile.start_block <= U32_MAX:
            raise ValueError(f"start_block out of range: {profile.start_block}")
        if not 0 <= profile.badges_claimed <= U8_MAX:
            raise ValueError(f"badges_claimed out of range: {profile.badges_claimed}")
        return profile

    def remaining_at(self, block: int) -> int:
        """Blocks left in the era as seen from block, or 0 if it has elapsed."""
        elapsed = block - self.start_block
        if elapsed >= self.claim_era:
            return 0
        return self.claim_era - elapsed


@dataclass
class ClaimResult:
    """Outcome of a claim attempt."""
    success: bool
    error: Optional[ClaimError] = None
    profile: Optional[Profile] = None

    @classmethod
    def ok(cls, profile: Profile) -> "ClaimResult":
        return cls(success=True, profile=profile)

    @classmethod
    def fail(cls, error: ClaimError) -> "ClaimResult":
        return cls(success=False, error=error)

    def raise_for_error(self) -> None:
        """Raise ClaimRejected if the claim failed."""
        if not self.success:
            raise ClaimRejected(self.error)

    def __bool__(self) -> bool:
        return self.success


# ============================================================================
# PROFILE STORE
# ============================================================================

class ProfileStore:
    """
    Keyed collection of profiles with era-gated claiming.

    Identities are passed explicitly; the caller-bound API lives in
    magink.contract.Magink. The only shared state is the backend mapping.
    start() and claim() run their read-decide-write sequence under a lock.
    """

    def __init__(
        self,
        current_tick: Callable[[], int],
        backend: Optional[ProfileBackend] = None,
        metrics: Optional["BadgeMetrics"] = None,
    ):
        """
        Initialize the store.

        Args:
            current_tick: Host primitive returning the current block number
            backend: Persistence substrate (default: MemoryBackend)
            metrics: Optional collector for start/claim counters
        """
        self._current_tick = current_tick
        self.backend = backend if backend is not None else MemoryBackend()
        self.metrics = metrics
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # persistence helpers
    # ------------------------------------------------------------------

    def _load(self, identity: str) -> Optional[Profile]:
        record = self.backend.get(identity)
        if record is None:
            return None
        return Profile.from_dict(record)

    def _save(self, identity: str, profile: Profile) -> None:
        self.backend.insert(identity, profile.to_dict())

    def _tick(self) -> int:
        """Current block number, checked against the persisted u32 range."""
        block = self._current_tick()
        if (isinstance(block, bool) or not isinstance(block, int)
                or not 0 <= block <= U32_MAX):
            raise ValueError(f"Host block number out of range 0..{U32_MAX}: {block!r}")
        return block

    # ------------------------------------------------------------------
    # state transitions
    # ------------------------------------------------------------------

    def start(self, identity: str, era_duration: int) -> Profile:
        """
        (Re)start the claiming era for identity.

        Replaces any existing profile, resetting the badge count to zero.

        Args:
            identity: Participant starting the era
            era_duration: Era length in blocks (0..255); 0 makes the
                participant eligible immediately

        Returns:
            The newly written profile
        """
        if (isinstance(era_duration, bool) or not isinstance(era_duration, int)
                or not 0 <= era_duration <= U8_MAX):
            raise ValueError(
                f"era_duration must be an int between 0 and {U8_MAX}, got {era_duration!r}"
            )

        with self._lock:
            profile = Profile(
                claim_era=era_duration,
                start_block=self._tick(),
                badges_claimed=0,
            )
            self._save(identity, profile)

        if self.metrics:
            self.metrics.record_start()
        logger.info(
            f"Era started for {identity}: {era_duration} blocks "
            f"from block {profile.start_block}"
        )
        return profile

    def claim(self, identity: str) -> ClaimResult:
        """
        Claim a badge for identity once its era has elapsed.

        On success the badge count goes up by one and a new era of the same
        length begins at the current block. On failure nothing is written.

        Returns:
            ClaimResult; error is USER_NOT_FOUND, TOO_EARLY_TO_CLAIM or
            BADGE_OVERFLOW on failure
        """
        with self._lock:
            now = self._tick()
            profile = self._load(identity)

            if profile is None:
                error = ClaimError.USER_NOT_FOUND
            elif profile.remaining_at(now) != 0:
                error = ClaimError.TOO_EARLY_TO_CLAIM
            elif profile.badges_claimed >= U8_MAX:
                error = ClaimError.BADGE_OVERFLOW
            else:
                error = None
                profile.badges_claimed += 1
                profile.start_block = now
                self._save(identity, profile)

        if error is not None:
            if self.metrics:
                self.metrics.record_rejected(error)
            logger.debug(f"Claim rejected for {identity}: {error.value}")
            return ClaimResult.fail(error)

        if self.metrics:
            self.metrics.record_claim()
        logger.info(
            f"Badge claimed by {identity} at block {now} "
            f"(total: {profile.badges_claimed})"
        )
        return ClaimResult.ok(profile)

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------

    def get_remaining(self, identity: str) -> int:
        """Blocks until identity may claim; 0 if eligible or unknown."""
        profile = self._load(identity)
        if profile is None:
            return 0
        return profile.remaining_at(self._current_tick())

    def get_remaining_for(self, identity: str) -> int:
        """Blocks until any queried identity may claim. Read-only."""
        return self.get_remaining(identity)

    def is_eligible(self, identity: str) -> bool:
        """True if identity has a profile and its era has elapsed."""
        profile = self._load(identity)
        return profile is not None and profile.remaining_at(self._current_tick()) == 0

    def get_profile(self, identity: str) -> Optional[Profile]:
        return self._load(identity)

    def get_account_profile(self, identity: str) -> Optional[Profile]:
        return self._load(identity)

    def get_badges(self, identity: str) -> int:
        profile = self._load(identity)
        return profile.badges_claimed if profile else 0

    def get_badges_for(self, identity: str) -> int:
        return self.get_badges(identity)

    def identities(self) -> List[str]:
        """All identities that have started an era."""
        return self.backend.identities()

    def __len__(self) -> int:
        return len(self.backend)
