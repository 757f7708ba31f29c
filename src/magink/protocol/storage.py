"""
magink/protocol/storage.py

Keyed persistence substrate for profile records.

Backends store the persisted record layout as a plain dict:
    {"claim_era": int, "start_block": int, "badges_claimed": int}

Two backends are provided:
1. MemoryBackend - dict in process memory
2. FileBackend - one JSON file per identity, for crash recovery

Used by:
- ProfileStore - all profile reads and writes go through a backend
"""

import json
import logging
import hashlib
from pathlib import Path
from typing import Any, Dict, List, Optional
from abc import ABC, abstractmethod

from ..config import DEFAULT_STORAGE_DIR

logger = logging.getLogger("magink.protocol.storage")


# ============================================================================
# STORAGE BACKENDS
# ============================================================================

class ProfileBackend(ABC):
    """Abstract base class for profile storage backends."""

    @abstractmethod
    def get(self, identity: str) -> Optional[Dict[str, Any]]:
        """Get the record stored for identity, or None."""
        pass

    @abstractmethod
    def insert(self, identity: str, record: Dict[str, Any]) -> None:
        """Store record for identity, replacing any previous one."""
        pass

    @abstractmethod
    def identities(self) -> List[str]:
        """List all identities with a stored record."""
        pass

    def contains(self, identity: str) -> bool:
        """Check whether a record exists for identity."""
        return self.get(identity) is not None

    def __len__(self) -> int:
        return len(self.identities())


class MemoryBackend(ProfileBackend):
    """In-memory storage backend."""

    def __init__(self):
        self._data: Dict[str, Dict[str, Any]] = {}

    def get(self, identity: str) -> Optional[Dict[str, Any]]:
        record = self._data.get(identity)
        # Hand out copies so callers cannot alias stored state
        return dict(record) if record is not None else None

    def insert(self, identity: str, record: Dict[str, Any]) -> None:
        self._data[identity] = dict(record)

    def identities(self) -> List[str]:
        return list(self._data.keys())

    def __len__(self) -> int:
        return len(self._data)


class FileBackend(ProfileBackend):
    """
    Local file storage backend.

    Each identity maps to <storage_dir>/<sha256(identity)[:32]>.json holding
    {"identity": ..., "profile": {...}}. Writes go to a temporary file that is
    then renamed over the target, so a crash never leaves a half-written record.
    """

    def __init__(self, storage_dir: Path = None):
        self.storage_dir = Path(storage_dir) if storage_dir else DEFAULT_STORAGE_DIR
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def _identity_to_path(self, identity: str) -> Path:
        """Convert identity to file path."""
        # Hash to avoid filesystem issues with special chars
        hash_name = hashlib.sha256(identity.encode()).hexdigest()[:32]
        return self.storage_dir / f"{hash_name}.json"

    def _read(self, path: Path) -> Dict[str, Any]:
        try:
            with open(path, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read {path}: {e}")
            raise ValueError(f"Unreadable profile file {path}: {e}") from e
        if not isinstance(data, dict) or "identity" not in data or "profile" not in data:
            raise ValueError(f"Malformed profile file {path}")
        return data

    def get(self, identity: str) -> Optional[Dict[str, Any]]:
        path = self._identity_to_path(identity)
        if not path.exists():
            return None
        data = self._read(path)
        return data["profile"]

    def insert(self, identity: str, record: Dict[str, Any]) -> None:
        path = self._identity_to_path(identity)
        tmp_path = path.with_suffix(".tmp")
        payload = {"identity": identity, "profile": dict(record)}
        try:
            with open(tmp_path, "w") as f:
                json.dump(payload, f)
            tmp_path.replace(path)
        except OSError as e:
            logger.error(f"Failed to write profile for {identity}: {e}")
            raise

    def identities(self) -> List[str]:
        identities = []
        for path in sorted(self.storage_dir.glob("*.json")):
            identities.append(self._read(path)["identity"])
        return identities
