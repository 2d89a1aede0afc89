"""Thread-safe lazy construction of shared resources.

Alert firings may arrive concurrently, so the tracker client shared by
every trigger call is built at most once behind a lock.
"""

import threading
from typing import Callable, Generic, Optional, TypeVar

from jirabridge.utils.logger import log_debug

T = TypeVar("T")


class LazyHandle(Generic[T]):
    """Build a value on first access and reuse it afterwards.

    The first caller to observe an empty handle runs the factory while
    holding the lock; concurrent callers block until it finishes and then
    receive the same instance. A factory that raises leaves the handle
    empty so the next call retries.
    """

    def __init__(self, factory: Callable[[], T], name: str = "resource"):
        self._factory = factory
        self._name = name
        self._value: Optional[T] = None
        self._lock = threading.Lock()

    def get(self) -> T:
        value = self._value
        if value is not None:
            return value

        with self._lock:
            if self._value is None:
                log_debug("Initializing shared handle", name=self._name)
                self._value = self._factory()
            return self._value
