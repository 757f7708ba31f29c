"""
magink/tests/test_storage.py

Tests for profile storage backends.
"""

import json
import pytest

from magink.protocol.storage import MemoryBackend, FileBackend
from magink.protocol.profiles import ProfileStore, Profile


RECORD = {'claim_era': 10, 'start_block': 3, 'badges_claimed': 2}


class TestMemoryBackend:
    """Test MemoryBackend class."""

    @pytest.fixture
    def backend(self):
        return MemoryBackend()

    def test_insert_and_get(self, backend):
        backend.insert("alice", RECORD)
        assert backend.get("alice") == RECORD

    def test_get_nonexistent(self, backend):
        assert backend.get("nobody") is None
        assert backend.contains("nobody") is False

    def test_insert_replaces(self, backend):
        backend.insert("alice", RECORD)
        backend.insert("alice", {**RECORD, 'badges_claimed': 0})
        assert backend.get("alice")['badges_claimed'] == 0
        assert len(backend) == 1

    def test_returned_record_is_a_copy(self, backend):
        backend.insert("alice", RECORD)
        record = backend.get("alice")
        record['badges_claimed'] = 99
        assert backend.get("alice") == RECORD

    def test_identities(self, backend):
        backend.insert("alice", RECORD)
        backend.insert("bob", RECORD)
        assert sorted(backend.identities()) == ["alice", "bob"]


class TestFileBackend:
    """Test FileBackend class."""

    @pytest.fixture
    def backend(self, tmp_path):
        return FileBackend(tmp_path / "profiles")

    def test_creates_directory(self, tmp_path):
        FileBackend(tmp_path / "nested" / "dir")
        assert (tmp_path / "nested" / "dir").is_dir()

    def test_insert_and_get(self, backend):
        backend.insert("alice", RECORD)
        assert backend.get("alice") == RECORD

    def test_get_nonexistent(self, backend):
        assert backend.get("nobody") is None

    def test_special_characters_in_identity(self, backend):
        identity = "5GrwvaEF/../\\:*?"
        backend.insert(identity, RECORD)
        assert backend.get(identity) == RECORD
        assert backend.identities() == [identity]

    def test_persists_across_instances(self, tmp_path):
        FileBackend(tmp_path).insert("alice", RECORD)
        assert FileBackend(tmp_path).get("alice") == RECORD

    def test_no_temp_files_left(self, backend):
        backend.insert("alice", RECORD)
        assert list(backend.storage_dir.glob("*.tmp")) == []

    def test_corrupt_file_raises(self, backend):
        backend.insert("alice", RECORD)
        path = next(backend.storage_dir.glob("*.json"))
        path.write_text("{not json")
        with pytest.raises(ValueError):
            backend.get("alice")

    def test_malformed_payload_raises(self, backend):
        backend.insert("alice", RECORD)
        path = next(backend.storage_dir.glob("*.json"))
        path.write_text(json.dumps({"profile": RECORD}))
        with pytest.raises(ValueError):
            backend.get("alice")

    def test_len(self, backend):
        backend.insert("alice", RECORD)
        backend.insert("bob", RECORD)
        backend.insert("alice", RECORD)
        assert len(backend) == 2


class TestStoreWithFileBackend:
    """ProfileStore state survives a restart when backed by files."""

    def test_claim_survives_reload(self, tmp_path):
        block = [0]
        store = ProfileStore(lambda: block[0], backend=FileBackend(tmp_path))
        store.start("alice", 2)
        block[0] = 2
        assert store.claim("alice").success

        reloaded = ProfileStore(lambda: block[0], backend=FileBackend(tmp_path))
        assert reloaded.get_profile("alice") == Profile(
            claim_era=2, start_block=2, badges_claimed=1
        )
        assert reloaded.get_remaining("alice") == 2

    def test_out_of_range_record_rejected(self, tmp_path):
        backend = FileBackend(tmp_path)
        backend.insert("alice", {**RECORD, 'claim_era': 1000})
        store = ProfileStore(lambda: 0, backend=backend)
        with pytest.raises(ValueError):
            store.get_profile("alice")
