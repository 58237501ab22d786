# Marketsync Signals
# Synchronous observer lists used to notify the inventory UI

from __future__ import annotations

from collections.abc import Callable
from typing import Any

Slot = Callable[..., Any]


class Connection:
    """Handle returned by Signal.connect, used to remove the slot again."""

    def __init__(self, signal: Signal, slot: Slot):
        self._signal: Signal | None = signal
        self._slot = slot

    @property
    def connected(self) -> bool:
        """Check if the slot is still registered."""
        return self._signal is not None and self._signal.is_connected(self._slot)

    def disconnect(self) -> None:
        """Remove the slot from its signal. Safe to call more than once."""
        if self._signal is not None:
            self._signal._remove(self._slot)
            self._signal = None


class Signal:
    """
    Ordered list of slots called synchronously on emit.

    Slots run on the calling thread, in connection order, after the
    mutation that triggered the emit has completed. Exceptions raised by a
    slot propagate to the emitter.
    """

    def __init__(self, name: str = ""):
        self.name = name
        self._slots: list[Slot] = []

    def __len__(self) -> int:
        return len(self._slots)

    def __repr__(self) -> str:
        return f"Signal({self.name!r}, slots={len(self._slots)})"

    def connect(self, slot: Slot) -> Connection:
        """
        Register a slot.

        Args:
            slot: Callable receiving the emitted arguments.

        Returns:
            Connection that can disconnect the slot.
        """
        self._slots.append(slot)
        return Connection(self, slot)

    def is_connected(self, slot: Slot) -> bool:
        # Equality, so a bound method matches a fresh reference to it
        return any(s == slot for s in self._slots)

    def emit(self, *args: Any) -> None:
        """Call every connected slot with the given arguments."""
        # Copy so slots may disconnect themselves while being called
        for slot in list(self._slots):
            slot(*args)

    def disconnect_all(self) -> None:
        self._slots.clear()

    def _remove(self, slot: Slot) -> None:
        for index, existing in enumerate(self._slots):
            if existing == slot:
                del self._slots[index]
                return
