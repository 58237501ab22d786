# Marketsync Cache Writer
# Mutation role of the sync engine, handed only to reply handlers

from dataclasses import dataclass, field, replace
from typing import Any, Optional
from uuid import UUID

from marketsync.cache.pending import PendingTracker
from marketsync.cache.record import ListingTuple
from marketsync.cache.store import TupleCache
from marketsync.remote.payloads import ListingPayload
from marketsync.signals import Signal


@dataclass
class EngineSignals:
    """Notifications fired by the sync engine."""

    status_updated: Signal = field(default_factory=lambda: Signal("status_updated"))
    listings_refreshed: Signal = field(default_factory=lambda: Signal("listings_refreshed"))
    listing_changed: Signal = field(default_factory=lambda: Signal("listing_changed"))
    status_report: Signal = field(default_factory=lambda: Signal("status_report"))

    def disconnect_all(self) -> None:
        for signal in (self.status_updated, self.listings_refreshed, self.listing_changed, self.status_report):
            signal.disconnect_all()


class CacheWriter:
    """
    Write access to the tuple cache.

    Every write marks the stock counts dirty and fires listing_changed for
    the affected folder once the cache is consistent again.
    """

    def __init__(self, cache: TupleCache, tracker: PendingTracker, signals: EngineSignals):
        self._cache = cache
        self._tracker = tracker
        self._signals = signals
        self._dirty = False

    def get(self, folder_id: UUID) -> Optional[ListingTuple]:
        return self._cache.get(folder_id)

    def has(self, folder_id: UUID) -> bool:
        return folder_id in self._cache

    def is_pending(self, folder_id: UUID) -> bool:
        return self._tracker.is_pending(folder_id)

    def end_request(self, folder_id: UUID) -> None:
        self._tracker.end(folder_id)

    def end_refresh(self) -> None:
        self._tracker.set_refreshing(False)

    def put(self, record: ListingTuple) -> None:
        """
        Insert or replace a record.

        A listing id belongs to one folder: any other folder holding the
        same id loses it first.
        """
        owner = self._cache.find_by_listing_id(record.listing_id)
        if owner is not None and owner != record.listing_folder_id:
            stale = self._cache.get(owner)
            self._store(replace(stale, listing_id=None, is_active=False, edit_url=None))
        self._store(record)

    def _store(self, record: ListingTuple) -> None:
        self._cache.put(record)
        self.mark_dirty()
        self._signals.listing_changed.emit(record.listing_folder_id)

    def remove(self, folder_id: UUID) -> Optional[ListingTuple]:
        """Remove a record, returning it if it existed."""
        removed = self._cache.remove(folder_id)
        if removed is not None:
            self.mark_dirty()
            self._signals.listing_changed.emit(folder_id)
        return removed

    def apply_listing(self, folder_id: UUID, payload: ListingPayload) -> ListingTuple:
        """
        Store the server's view of a listing under folder_id.

        The server is authoritative for the version folder and the
        activation state; the listing id and edit URL fall back to the
        cached values when the reply leaves them out.
        """
        current = self._cache.get(folder_id)
        version_folder_id = payload.version_folder_id
        record = ListingTuple(
            listing_folder_id=folder_id,
            listing_id=payload.id if payload.id is not None else (current.listing_id if current else None),
            version_folder_id=version_folder_id,
            is_active=payload.is_listed and version_folder_id is not None,
            edit_url=payload.edit_url or (current.edit_url if current else None),
        )
        self.put(record)
        return record

    def report(self, code: int, body: Optional[dict[str, Any]] = None) -> None:
        self._signals.status_report.emit(code, body or {})

    def refreshed(self) -> None:
        self._signals.listings_refreshed.emit()

    def mark_dirty(self) -> None:
        self._dirty = True

    def take_dirty(self) -> bool:
        """Read and clear the dirty flag."""
        dirty = self._dirty
        self._dirty = False
        return dirty
