import threading
import time

import pytest

from sketchkit.concurrency import ConcurrentDeque, ConcurrentMap, ConcurrentQueue


def _later(delay, action):
    thread = threading.Thread(target=lambda: (time.sleep(delay), action()))
    thread.start()
    return thread


class TestConcurrentDeque:
    def test_push_and_pop_in_order(self):
        d = ConcurrentDeque()
        for item in ["a", "b", "c"]:
            assert d.push_back(item) is True
        assert [d.try_pop_front() for _ in range(3)] == ["a", "b", "c"]
        assert d.empty()

    def test_unique_push_rejects_duplicates(self):
        d = ConcurrentDeque()
        assert d.push_back("x", unique=True) is True
        assert d.push_back("x", unique=True) is False
        assert d.push_back("x") is True
        assert len(d) == 2

    def test_contains_and_erase(self):
        d = ConcurrentDeque()
        d.push_back("x")
        d.push_back("y")
        d.push_back("x")
        assert d.contains("x")
        assert d.erase("x") is True
        assert d.try_pop_front() == "y"
        assert d.try_pop_front() == "x"
        assert d.erase("x") is False

    def test_erase_all(self):
        d = ConcurrentDeque()
        for item in ["x", "y", "x", "z", "x"]:
            d.push_back(item)
        assert d.erase_all("x") is True
        assert not d.contains("x")
        assert [d.try_pop_front(), d.try_pop_front()] == ["y", "z"]

    def test_clear(self):
        d = ConcurrentDeque()
        d.push_back(1)
        d.clear()
        assert d.empty()

    def test_pop_from_empty_raises(self):
        with pytest.raises(IndexError):
            ConcurrentDeque().try_pop_front()

    def test_wait_times_out(self):
        with pytest.raises(TimeoutError):
            ConcurrentDeque().wait_and_pop_front(timeout=0.05)

    def test_wait_receives_item_from_other_thread(self):
        d = ConcurrentDeque()
        thread = _later(0.05, lambda: d.push_back("late"))
        assert d.wait_and_pop_front(timeout=5) == "late"
        thread.join()


class TestConcurrentMap:
    def test_push_get_and_contains(self):
        m = ConcurrentMap()
        m.push("k", 1)
        assert m.contains("k")
        assert m.get("k") == 1
        assert m.contains("k")

    def test_push_replaces(self):
        m = ConcurrentMap()
        m.push("k", 1)
        m.push("k", 2)
        assert m.get("k") == 2
        assert len(m) == 1

    def test_try_pop_removes(self):
        m = ConcurrentMap()
        m.push("k", "v")
        assert m.try_pop("k") == "v"
        assert m.empty()
        with pytest.raises(KeyError):
            m.try_pop("k")

    def test_get_missing_raises(self):
        with pytest.raises(KeyError):
            ConcurrentMap().get("nope")

    def test_erase_reports_presence(self):
        m = ConcurrentMap()
        m.push("k", None)
        assert m.erase("k") is True
        assert m.erase("k") is False

    def test_clear(self):
        m = ConcurrentMap()
        m.push("a", 1)
        m.push("b", 2)
        m.clear()
        assert m.empty()

    def test_wait_and_pop_specific_key(self):
        m = ConcurrentMap()

        def produce():
            m.push("other", 0)
            m.push("wanted", 42)

        thread = _later(0.05, produce)
        assert m.wait_and_pop("wanted", timeout=5) == 42
        thread.join()
        assert m.contains("other")
        assert not m.contains("wanted")

    def test_wait_and_pop_times_out(self):
        m = ConcurrentMap()
        m.push("other", 1)
        with pytest.raises(TimeoutError):
            m.wait_and_pop("wanted", timeout=0.05)


class TestConcurrentQueue:
    def test_fifo(self):
        q = ConcurrentQueue()
        for item in range(5):
            q.push(item)
        assert [q.try_pop() for _ in range(5)] == list(range(5))
        assert q.empty()

    def test_try_pop_empty_raises(self):
        with pytest.raises(IndexError):
            ConcurrentQueue().try_pop()

    def test_wait_and_pop_times_out(self):
        with pytest.raises(TimeoutError):
            ConcurrentQueue().wait_and_pop(timeout=0.05)

    def test_many_producers(self):
        q = ConcurrentQueue()
        threads = [
            threading.Thread(target=lambda base=base: [q.push(base + i) for i in range(100)])
            for base in (0, 1000, 2000)
        ]
        for thread in threads:
            thread.start()
        received = [q.wait_and_pop(timeout=5) for _ in range(300)]
        for thread in threads:
            thread.join()
        assert sorted(received) == sorted(
            [base + i for base in (0, 1000, 2000) for i in range(100)]
        )
        assert q.empty()