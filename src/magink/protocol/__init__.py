"""
magink/protocol/

Profile state machine and its persistence substrate.
"""

from .profiles import (
    Profile,
    ProfileStore,
    ClaimResult,
    ClaimError,
    ClaimRejected,
    MaginkError,
)
from .storage import ProfileBackend, MemoryBackend, FileBackend

__all__ = [
    "Profile",
    "ProfileStore",
    "ClaimResult",
    "ClaimError",
    "ClaimRejected",
    "MaginkError",
    "ProfileBackend",
    "MemoryBackend",
    "FileBackend",
]
