# Marketsync Reply Handlers
# Apply listings API replies back into the tuple cache

from collections.abc import Callable
from dataclasses import replace
from typing import Optional
from uuid import UUID

from marketsync.cache.record import ListingTuple
from marketsync.codes import SLMErrorCode
from marketsync.logger import MarketLogger
from marketsync.remote.client import RemoteResponse
from marketsync.remote.payloads import ListingPayload, PayloadError, parse_listing, parse_listings
from marketsync.sync.writer import CacheWriter


class ListingResponses:
    """
    Continuations for every listings API call.

    Each handler releases the folder's pending entry first, then either
    applies the server-confirmed fields or puts the cache back into its
    pre-call state and reports the failure. Replies that arrive after the
    engine was closed, or for a folder that is no longer cached, are dropped.
    """

    def __init__(self, writer: CacheWriter, logger: MarketLogger, is_alive: Callable[[], bool]):
        self._writer = writer
        self._logger = logger
        self._is_alive = is_alive

    def on_created(self, folder_id: UUID, response: RemoteResponse) -> None:
        if not self._begin(folder_id):
            return

        if not response.ok:
            self._writer.remove(folder_id)
            self._fail("Create listing", folder_id, response.status, response)
            return

        try:
            listings = parse_listings(response.body)
        except PayloadError as e:
            self._writer.remove(folder_id)
            self._malformed("Create listing", folder_id, response, e)
            return

        if listings:
            record = self._writer.apply_listing(folder_id, listings[0])
            self._logger.detail(f"Listing {record.listing_id} created for {folder_id}")
        else:
            self._logger.detail(f"Listing created for {folder_id}, no listing id yet")

    def on_updated(self, folder_id: UUID, snapshot: ListingTuple, response: RemoteResponse) -> None:
        if not self._begin(folder_id):
            return

        if not response.ok:
            self._writer.put(snapshot)
            self._fail("Update listing", folder_id, response.status, response)
            return

        try:
            listings = parse_listings(response.body)
        except PayloadError as e:
            self._writer.put(snapshot)
            self._malformed("Update listing", folder_id, response, e)
            return

        if listings:
            self._writer.apply_listing(folder_id, listings[0])
        self._logger.detail(f"Listing for {folder_id} updated")

    def on_associated(self, folder_id: UUID, listing_id: int, response: RemoteResponse) -> None:
        if not self._begin(folder_id):
            return

        if not response.ok:
            self._fail("Associate listing", folder_id, response.status, response)
            return

        try:
            listings = parse_listings(response.body)
        except PayloadError as e:
            self._malformed("Associate listing", folder_id, response, e)
            return

        if listings:
            payload = listings[0]
            if payload.id is None:
                payload = payload.model_copy(update={"id": listing_id})
            self._writer.apply_listing(folder_id, payload)
        else:
            current = self._writer.get(folder_id)
            if current is not None:
                self._writer.put(replace(current, listing_id=listing_id))
        self._logger.detail(f"Folder {folder_id} associated with listing {listing_id}")

    def on_listing(self, folder_id: UUID, response: RemoteResponse) -> None:
        if not self._begin(folder_id):
            return

        if response.status == SLMErrorCode.SLM_NOT_FOUND:
            # Gone on the server side
            self._writer.remove(folder_id)
            self._fail("Get listing", folder_id, response.status, response)
            return

        if not response.ok:
            self._fail("Get listing", folder_id, response.status, response)
            return

        try:
            payload = parse_listing(response.body)
        except PayloadError as e:
            self._malformed("Get listing", folder_id, response, e)
            return

        self._apply_read(folder_id, payload)

    def on_deleted(self, folder_id: UUID, response: RemoteResponse) -> None:
        if not self._begin(folder_id):
            return

        if response.ok or response.status == SLMErrorCode.SLM_NOT_FOUND:
            self._writer.remove(folder_id)
            self._logger.detail(f"Listing for {folder_id} deleted")
            return

        self._fail("Delete listing", folder_id, response.status, response)

    def on_listings(self, response: RemoteResponse) -> None:
        """Apply a bulk refresh reply."""
        self._writer.end_refresh()
        if not self._is_alive():
            return

        if not response.ok:
            self._fail("Get listings", None, response.status, response)
            self._writer.refreshed()
            return

        try:
            listings = parse_listings(response.body)
        except PayloadError as e:
            self._malformed("Get listings", None, response, e)
            self._writer.refreshed()
            return

        applied = 0
        for payload in listings:
            folder_id = payload.listing_folder_id
            # Folders with their own outstanding call settle on that reply
            if folder_id is None or self._writer.is_pending(folder_id):
                continue
            self._writer.apply_listing(folder_id, payload)
            applied += 1

        self._writer.mark_dirty()
        self._logger.detail(f"Refreshed {applied} of {len(listings)} listings")
        self._writer.refreshed()

    def _apply_read(self, folder_id: UUID, payload: ListingPayload) -> None:
        reported = payload.listing_folder_id
        if reported is not None and reported != folder_id:
            # The listing now points at another folder: move the record
            self._writer.remove(folder_id)
            self._writer.apply_listing(reported, payload)
            return
        self._writer.apply_listing(folder_id, payload)

    def _begin(self, folder_id: UUID) -> bool:
        self._writer.end_request(folder_id)
        if not self._is_alive() or not self._writer.has(folder_id):
            self._logger.detail(f"Dropping reply for {folder_id}")
            return False
        return True

    def _fail(self, operation: str, folder_id: Optional[UUID], code: int, response: RemoteResponse) -> None:
        subject = f"{operation} ({folder_id})" if folder_id else operation
        self._logger.remote_failure(subject, code, response.reason)
        self._writer.report(code, response.body)

    def _malformed(self, operation: str, folder_id: Optional[UUID], response: RemoteResponse, error: Exception) -> None:
        subject = f"{operation} ({folder_id})" if folder_id else operation
        code = SLMErrorCode.SLM_MALFORMED_PAYLOAD.value
        self._logger.remote_failure(subject, code, str(error))
        self._writer.report(code, response.body)
