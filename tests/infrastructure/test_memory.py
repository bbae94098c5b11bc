"""Tests specific to the in-memory backend."""

import threading
from pathlib import Path

import pytest

from socialgraph.config.models import StoreConfig
from socialgraph.config.settings import SocialGraphSettings
from socialgraph.infrastructure.memory import MemoryGraphStore
from socialgraph.infrastructure.store import open_store


class TestMemoryGraphStore:
    def test_backend_name(self, memory_store: MemoryGraphStore) -> None:
        assert memory_store.backend == "memory"

    def test_instances_do_not_share_state(self) -> None:
        first, second = MemoryGraphStore(), MemoryGraphStore()
        with first.transaction() as txn:
            txn.insert_user("a", "alice", 30, "t")
        with second.transaction() as txn:
            assert txn.get_user("a") is None

    def test_uncommitted_copy_is_private(self, memory_store: MemoryGraphStore) -> None:
        with pytest.raises(ValueError), memory_store.transaction() as txn:
            txn.insert_user("a", "alice", 30, "t")
            raise ValueError
        with memory_store.transaction() as txn:
            assert txn.list_all_users() == []

    def test_concurrent_inserts_serialize(self, memory_store: MemoryGraphStore) -> None:
        def worker(n: int) -> None:
            for i in range(20):
                with memory_store.transaction() as txn:
                    txn.insert_user(f"{n}-{i}", f"u_{n}_{i}", 30, "t")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        with memory_store.transaction() as txn:
            assert len(txn.list_all_users()) == 80


class TestOpenStore:
    def test_memory_backend(self, tmp_path: Path) -> None:
        settings = SocialGraphSettings(
            project_root=tmp_path, store=StoreConfig(backend="memory")
        )
        assert isinstance(open_store(settings), MemoryGraphStore)

    def test_sqlite_backend_uses_db_path(self, tmp_path: Path) -> None:
        settings = SocialGraphSettings(project_root=tmp_path, store=StoreConfig(path="g.db"))
        store = open_store(settings)
        try:
            assert store.backend == "sqlite"
            assert (tmp_path / "g.db").exists()
        finally:
            store.close()
