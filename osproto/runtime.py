"""Process-wide helpers: loggers, drain/ongoing synchronisation, list lookups."""

from __future__ import annotations

import logging
import os
import sys
import threading
from typing import Any, Callable, MutableSequence, Optional, Sequence

MINIMAL_LOG_PATHNAME = "minimal.log"
SOCKET_LOG_PATHNAME = "socket.log"
SERIALIZE_LOG_PATHNAME = "serialize.log"

MINIMAL_LOGGER_NAME = "osproto.minimal"
SOCKET_LOGGER_NAME = "osproto.socket"
SERIALIZE_LOGGER_NAME = "osproto.serialize"

# Lowest level, so that every record is kept, as with a trace level.
_TRACE_LEVEL = 1
_FORMAT = "[%(levelname)s] %(asctime)s %(name)s/(%(process)d:%(thread)d): %(message)s"

_installed: list[tuple[logging.Logger, logging.Handler]] = []


def _attach(logger: logging.Logger, path: str) -> None:
    formatter = logging.Formatter(_FORMAT)
    file_handler = logging.FileHandler(path, encoding="utf-8")
    console_handler = logging.StreamHandler(sys.stdout)
    for handler in (file_handler, console_handler):
        handler.setFormatter(formatter)
        handler.setLevel(_TRACE_LEVEL)
        logger.addHandler(handler)
        _installed.append((logger, handler))
    logger.setLevel(_TRACE_LEVEL)


def initialize_loggers(
    module_name: str, module_log_path: str, directory: str = "."
) -> dict[str, logging.Logger]:
    """Set up the minimal, module, socket and serialize loggers.

    Each writes to its own file under ``directory`` and to the console.
    """
    specs = {
        "minimal": (MINIMAL_LOGGER_NAME, MINIMAL_LOG_PATHNAME),
        "module": (module_name, module_log_path),
        "socket": (SOCKET_LOGGER_NAME, SOCKET_LOG_PATHNAME),
        "serialize": (SERIALIZE_LOGGER_NAME, SERIALIZE_LOG_PATHNAME),
    }
    loggers = {}
    for key, (name, filename) in specs.items():
        logger = logging.getLogger(name)
        _attach(logger, os.path.join(directory, filename))
        loggers[key] = logger
    return loggers


def finish_loggers() -> None:
    """Detach and close every handler installed by :func:`initialize_loggers`."""
    while _installed:
        logger, handler = _installed.pop()
        logger.removeHandler(handler)
        handler.close()


class DrainOngoingSync:
    """Coordinates ongoing users of a resource with requests to drain it.

    Users call ``wait_draining_requests`` before and ``signal_draining_requests``
    after using the resource; they wait while a drain is requested. A drainer
    calls ``wait_ongoing`` (or its locking variant) to wait until no use is
    ongoing, and ``signal_ongoing`` when done.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cond_drain_requests = threading.Condition(self._lock)
        self._cond_ongoing = threading.Condition(self._lock)
        self._drain_requests_count = 0
        self._ongoing_count = 0

    @property
    def drain_requests_count(self) -> int:
        return self._drain_requests_count

    @property
    def ongoing_count(self) -> int:
        return self._ongoing_count

    def wait_ongoing(self) -> None:
        """Request a drain and wait until no use is ongoing."""
        self.wait_ongoing_locking()
        self._lock.release()

    def signal_ongoing(self) -> None:
        """Withdraw a drain request and wake waiting users."""
        with self._lock:
            self._drain_requests_count -= 1
            self._cond_drain_requests.notify_all()

    def wait_ongoing_locking(self) -> None:
        """Like :meth:`wait_ongoing`, but return with the internal lock held."""
        self._lock.acquire()
        self._drain_requests_count += 1
        while self._ongoing_count:
            self._cond_ongoing.wait()

    def signal_ongoing_unlocking(self) -> None:
        """Release the lock held since :meth:`wait_ongoing_locking`, then signal."""
        self._lock.release()
        self.signal_ongoing()

    def wait_draining_requests(self) -> None:
        """Wait until no drain is requested, then register an ongoing use."""
        with self._lock:
            while self._drain_requests_count:
                self._cond_drain_requests.wait()
            self._ongoing_count += 1

    def signal_draining_requests(self) -> None:
        """Unregister an ongoing use and wake a waiting drainer."""
        with self._lock:
            self._ongoing_count -= 1
            self._cond_ongoing.notify()


Condition = Callable[[Any, Any], bool]


def remove_by_condition(
    items: MutableSequence[Any], condition: Condition, comparison: Any
) -> Optional[Any]:
    """Remove and return the first item matching ``comparison``, or None."""
    for index, item in enumerate(items):
        if condition(item, comparison):
            del items[index]
            return item
    return None


def add_unless_any(
    items: MutableSequence[Any], data: Any, condition: Condition, comparison: Any
) -> bool:
    """Append ``data`` unless an item matches ``comparison``; tell whether it was added."""
    if any(condition(item, comparison) for item in items):
        return False
    items.append(data)
    return True


def find_by_condition(
    items: Sequence[Any], condition: Condition, comparison: Any
) -> Optional[Any]:
    """Return the first item matching ``comparison``, or None."""
    return next((item for item in items if condition(item, comparison)), None)


def pointers_match(first: Any, second: Any) -> bool:
    """Tell whether both arguments are the very same object."""
    return first is second