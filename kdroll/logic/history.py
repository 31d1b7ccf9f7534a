"""Rolling history with a maximum size and FIFO overflow."""
import math
import numbers
from collections import deque
from collections.abc import Iterator

from kdroll.config import settings
from kdroll.diagnostics import DiagnosticsService, InvalidCapacityEvent, diagnostics_service
from kdroll.logic.rng import MAX_SAFE_INTEGER


class BoundedHistory:
    """
    Ordered record of results capped at a maximum size.

    When a push would exceed the capacity the oldest entry is discarded
    first. The buffer is never exposed directly; ``snapshot()`` hands out an
    independent copy.
    """

    def __init__(
        self,
        capacity: int | None = None,
        diagnostics: DiagnosticsService | None = None,
    ):
        self._diagnostics = diagnostics or diagnostics_service
        initial = settings.default_max_history if capacity is None else capacity
        self._capacity = settings.default_max_history
        self._items: deque[float] = deque(maxlen=self._capacity)
        if initial != self._capacity:
            self.set_capacity(initial)

    def push(self, value: float) -> int:
        """Append one value, evicting the oldest if full. Returns the new length."""
        self._items.append(value)
        return len(self._items)

    def set_capacity(self, size: int) -> int:
        """
        Set the maximum size.

        Accepts non-negative safe integers (integral floats included).
        Shrinking keeps the most recent entries. Anything else leaves the
        capacity unchanged and emits an invalid_capacity diagnostic.

        Returns:
            The current capacity after the call.
        """
        capacity = _as_capacity(size)
        if capacity is None:
            self._diagnostics.emit_invalid_capacity(
                InvalidCapacityEvent(requested=repr(size), capacity=self._capacity)
            )
            return self._capacity

        if capacity != self._capacity:
            self._capacity = capacity
            self._items = deque(self._items, maxlen=capacity)
        return self._capacity

    def get_capacity(self) -> int:
        """Current maximum size."""
        return self._capacity

    def snapshot(self) -> list[float]:
        """Independent copy of the current contents, oldest first."""
        return list(self._items)

    def clear(self) -> None:
        """Remove every entry; the capacity is retained."""
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[float]:
        return iter(self.snapshot())


def _as_capacity(size: object) -> int | None:
    """Return ``size`` as a valid capacity, or None when it is not one."""
    if isinstance(size, bool) or not isinstance(size, numbers.Real):
        return None
    if isinstance(size, numbers.Integral):
        value = int(size)
    elif math.isfinite(size) and float(size).is_integer():
        value = int(size)
    else:
        return None
    if value < 0 or value > MAX_SAFE_INTEGER:
        return None
    return value
