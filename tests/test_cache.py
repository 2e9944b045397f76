import threading
import time
from unittest.mock import MagicMock

import pytest

from api_discovery_client.cache import DiscoveryCache


class TestDiscoveryCache:
    def test_loads_once(self):
        cache = DiscoveryCache()
        loader = MagicMock(return_value={"name": "plus"})
        first = cache.get_or_load(("plus", "v1"), loader)
        second = cache.get_or_load(("plus", "v1"), loader)
        assert first is second
        loader.assert_called_once()

    def test_failed_load_is_not_cached(self):
        cache = DiscoveryCache()
        loader = MagicMock(side_effect=[RuntimeError("boom"), {"name": "plus"}])
        with pytest.raises(RuntimeError):
            cache.get_or_load(("plus", "v1"), loader)
        assert ("plus", "v1") not in cache
        assert cache.get_or_load(("plus", "v1"), loader) == {"name": "plus"}

    def test_put_replaces_entry(self):
        cache = DiscoveryCache()
        cache.put(("a", "v1"), {"name": "a"})
        cache.put(("a", "v1"), {"name": "b"})
        assert cache.get(("a", "v1")) == {"name": "b"}

    def test_locks_are_dropped_once_stored(self):
        cache = DiscoveryCache()
        for version in ("v1", "v2", "v3"):
            cache.get_or_load(("plus", version), lambda: {"name": "plus"})
        cache.put(("analytics", "v3"), {"name": "analytics"})
        assert len(cache) == 4
        assert cache._locks == {}

    def test_clear(self):
        cache = DiscoveryCache()
        cache.put(("a", "v1"), {})
        cache.clear()
        assert len(cache) == 0
        assert cache.get(("a", "v1")) is None

    def test_concurrent_loads_converge(self):
        cache = DiscoveryCache()
        calls = []

        def loader():
            calls.append(1)
            time.sleep(0.05)
            return {"name": "plus", "call": len(calls)}

        results = []
        threads = [
            threading.Thread(target=lambda: results.append(cache.get_or_load(("plus", "v1"), loader)))
            for _ in range(8)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(calls) == 1
        assert all(r is results[0] for r in results)

    def test_unrelated_keys_load_in_parallel(self):
        cache = DiscoveryCache()
        started = threading.Event()
        release = threading.Event()

        def slow_loader():
            started.set()
            release.wait(timeout=5)
            return {"name": "slow"}

        worker = threading.Thread(target=lambda: cache.get_or_load(("slow", "v1"), slow_loader))
        worker.start()
        assert started.wait(timeout=5)
        # Another key is not blocked by the in-flight load
        assert cache.get_or_load(("fast", "v1"), lambda: {"name": "fast"}) == {"name": "fast"}
        release.set()
        worker.join()
        assert cache.get(("slow", "v1")) == {"name": "slow"}
