# Marketsync Pending Requests
# Tracks folders with an outstanding remote call

from uuid import UUID


class PendingTracker:
    """
    Set of listing folders waiting for a reply from the marketplace.

    A folder is pending while exactly one remote call concerning it is
    outstanding. A second call for a pending folder is rejected, not queued.
    The refreshing flag marks the whole cache as waiting for a bulk refresh.
    """

    def __init__(self) -> None:
        self._pending: set[UUID] = set()
        self._refreshing = False

    def try_begin(self, folder_id: UUID) -> bool:
        """
        Mark a folder as pending.

        Returns:
            False, leaving the tracker unchanged, if the folder is already pending.
        """
        if folder_id in self._pending:
            return False
        self._pending.add(folder_id)
        return True

    def end(self, folder_id: UUID) -> None:
        self._pending.discard(folder_id)

    def is_pending(self, folder_id: UUID) -> bool:
        return folder_id in self._pending

    def set_refreshing(self, refreshing: bool) -> None:
        self._refreshing = refreshing

    def is_refreshing(self) -> bool:
        return self._refreshing

    @property
    def pending(self) -> frozenset[UUID]:
        """Snapshot of the pending folders."""
        return frozenset(self._pending)

    def clear(self) -> None:
        self._pending.clear()
        self._refreshing = False
