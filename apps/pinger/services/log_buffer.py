from collections import deque
from typing import List

DEFAULT_CAPACITY = 100
DEFAULT_TAIL = 20


class LogBuffer:
    """
    Bounded record of recent activity messages, oldest first.

    Not thread-safe on its own: the scheduler only touches it while holding
    its state lock.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        self.capacity = capacity
        self._entries = deque()

    def append(self, message: str) -> None:
        self._entries.append(message)
        while len(self._entries) > self.capacity:
            self._entries.popleft()

    def tail(self, n: int = DEFAULT_TAIL) -> List[str]:
        """Last min(n, len) entries in insertion order, as a new list."""
        if n <= 0:
            return []
        entries = list(self._entries)
        return entries[-n:]

    def __len__(self):
        return len(self._entries)
