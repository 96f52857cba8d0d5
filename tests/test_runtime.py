import logging
import threading
import time

from osproto.runtime import (
    DrainOngoingSync,
    add_unless_any,
    find_by_condition,
    finish_loggers,
    initialize_loggers,
    pointers_match,
    remove_by_condition,
)


def _equal(item, comparison):
    return item == comparison


def _run(target):
    done = threading.Event()

    def body():
        target()
        done.set()

    thread = threading.Thread(target=body, daemon=True)
    thread.start()
    return thread, done


def test_draining_requests_counts_ongoing():
    sync = DrainOngoingSync()
    sync.wait_draining_requests()
    sync.wait_draining_requests()
    assert sync.ongoing_count == 2
    sync.signal_draining_requests()
    assert sync.ongoing_count == 1


def test_wait_ongoing_blocks_until_uses_finish():
    sync = DrainOngoingSync()
    sync.wait_draining_requests()
    thread, done = _run(sync.wait_ongoing)
    assert not done.wait(0.1)
    sync.signal_draining_requests()
    assert done.wait(2)
    thread.join(2)
    assert sync.drain_requests_count == 1
    sync.signal_ongoing()
    assert sync.drain_requests_count == 0


def test_users_wait_while_drain_requested():
    sync = DrainOngoingSync()
    sync.wait_ongoing()
    thread, done = _run(sync.wait_draining_requests)
    assert not done.wait(0.1)
    assert sync.ongoing_count == 0
    sync.signal_ongoing()
    assert done.wait(2)
    thread.join(2)
    assert sync.ongoing_count == 1


def test_locking_variant_holds_lock_until_unlocking():
    sync = DrainOngoingSync()
    sync.wait_ongoing_locking()
    thread, done = _run(sync.wait_draining_requests)
    time.sleep(0.05)
    assert not done.is_set()
    sync.signal_ongoing_unlocking()
    assert done.wait(2)
    thread.join(2)
    assert sync.drain_requests_count == 0
    assert sync.ongoing_count == 1


def test_initialize_and_finish_loggers(tmp_path):
    before = len(logging.getLogger("Kernel").handlers)
    loggers = initialize_loggers("Kernel", "kernel.log", str(tmp_path))
    try:
        assert set(loggers) == {"minimal", "module", "socket", "serialize"}
        assert loggers["module"].name == "Kernel"
        loggers["module"].info("hello from module")
        loggers["socket"].warning("socket trouble")
    finally:
        finish_loggers()
    assert "hello from module" in (tmp_path / "kernel.log").read_text(encoding="utf-8")
    assert "socket trouble" in (tmp_path / "socket.log").read_text(encoding="utf-8")
    assert (tmp_path / "minimal.log").exists()
    assert (tmp_path / "serialize.log").exists()
    assert len(logging.getLogger("Kernel").handlers) == before


def test_remove_by_condition_removes_first_match():
    items = [1, 2, 3, 2]
    assert remove_by_condition(items, _equal, 2) == 2
    assert items == [1, 3, 2]


def test_remove_by_condition_without_match():
    items = [1, 3]
    assert remove_by_condition(items, _equal, 2) is None
    assert items == [1, 3]


def test_add_unless_any():
    items = ["a"]
    assert add_unless_any(items, "b", _equal, "b") is True
    assert add_unless_any(items, "a", _equal, "a") is False
    assert items == ["a", "b"]


def test_find_by_condition():
    items = [{"name": "x"}, {"name": "y"}]
    found = find_by_condition(items, lambda item, name: item["name"] == name, "y")
    assert found is items[1]
    assert find_by_condition(items, lambda item, name: item["name"] == name, "z") is None


def test_pointers_match_is_identity():
    first = [1]
    assert pointers_match(first, first) is True
    assert pointers_match(first, [1]) is False