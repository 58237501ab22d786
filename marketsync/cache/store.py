# Marketsync Tuple Cache
# Session cache of listing tuples keyed by listing folder id

from collections.abc import Iterator
from typing import Optional
from uuid import UUID

from marketsync.cache.record import ListingTuple


class TupleCache:
    """
    Mapping of listing folder id to ListingTuple.

    Records are immutable, so lookups hand out the stored value without
    exposing anything a caller could mutate. Only the sync engine writes.
    """

    def __init__(self) -> None:
        self._items: dict[UUID, ListingTuple] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, folder_id: object) -> bool:
        return folder_id in self._items

    def __iter__(self) -> Iterator[ListingTuple]:
        return iter(list(self._items.values()))

    def get(self, folder_id: Optional[UUID]) -> Optional[ListingTuple]:
        """Get the record for a listing folder."""
        if folder_id is None:
            return None
        return self._items.get(folder_id)

    def put(self, record: ListingTuple) -> None:
        """Insert or replace a record."""
        self._items[record.listing_folder_id] = record

    def remove(self, folder_id: UUID) -> Optional[ListingTuple]:
        """Remove a record, returning it if it existed."""
        return self._items.pop(folder_id, None)

    def find_by_listing_id(self, listing_id: Optional[int]) -> Optional[UUID]:
        """Get the listing folder bound to a remote listing id."""
        if listing_id is None or listing_id <= 0:
            return None
        for record in self._items.values():
            if record.listing_id == listing_id:
                return record.listing_folder_id
        return None

    def find_by_version_folder(self, folder_id: Optional[UUID]) -> Optional[UUID]:
        """Get the listing folder whose version folder is folder_id."""
        if folder_id is None:
            return None
        for record in self._items.values():
            if record.version_folder_id == folder_id:
                return record.listing_folder_id
        return None

    def clear(self) -> None:
        self._items.clear()
