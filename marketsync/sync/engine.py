# Marketsync Sync Engine
# Public command and query API over the listing tuple cache

from __future__ import annotations

from functools import partial
from typing import Optional, Protocol
from uuid import UUID

from marketsync.cache.pending import PendingTracker
from marketsync.cache.record import ListingTuple
from marketsync.cache.store import TupleCache
from marketsync.codes import MarketplaceStatus, SLMErrorCode
from marketsync.config.schema import MarketsyncConfig
from marketsync.logger import MarketLogger
from marketsync.remote import routes
from marketsync.remote.client import HttpMethod, RemoteClient, RemoteRequest, RemoteResponse, ResponseCallback
from marketsync.remote.payloads import listing_body
from marketsync.signals import Slot
from marketsync.sync.responses import ListingResponses
from marketsync.sync.writer import CacheWriter, EngineSignals


class FolderTree(Protocol):
    """Containment oracle of the local inventory."""

    def is_descendant_of(self, obj_id: UUID, ancestor_id: UUID) -> bool:
        """Check if obj_id is nested anywhere below ancestor_id."""
        ...


class SyncEngine:
    """
    Marketplace listings synchronization engine.

    Keeps the session cache of listing tuples, issues listings API calls
    through the remote client and applies their replies. Commands return
    False on a validation error, in which case nothing was sent and the
    cache is unchanged. At most one call per listing folder is outstanding.
    """

    def __init__(
        self,
        client: RemoteClient,
        config: Optional[MarketsyncConfig] = None,
        *,
        folder_tree: Optional[FolderTree] = None,
        logger: Optional[MarketLogger] = None,
    ):
        """
        Initialize sync engine.

        Args:
            client: Transport used for every listings API call.
            config: Marketsync configuration (defaults if not provided).
            folder_tree: Optional containment oracle for active folder queries.
            logger: Optional logger (creates one from the output config if not provided).
        """
        self.config = config or MarketsyncConfig()
        self.client = client
        self.folder_tree = folder_tree
        self.logger = logger or MarketLogger(verbose=self.config.output.verbose)
        self.signals = EngineSignals()

        self._cache = TupleCache()
        self._tracker = PendingTracker()
        self._status = MarketplaceStatus.NOT_INITIALIZED
        self._closed = False
        self._writer = CacheWriter(self._cache, self._tracker, self.signals)
        self._responses = ListingResponses(self._writer, self.logger, is_alive=lambda: not self._closed)

    def __enter__(self) -> SyncEngine:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Drop the session cache. Later replies are ignored and commands fail."""
        self._closed = True
        self._cache.clear()
        self._tracker.clear()
        self.signals.disconnect_all()

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Connection status and bulk refresh
    # ------------------------------------------------------------------

    def initialize_slm(self, on_status_updated: Optional[Slot] = None) -> bool:
        """
        Probe the merchant status, then refresh all listings if merchant.

        Args:
            on_status_updated: Optional slot connected to status_updated,
                once however often initialize_slm is called with it.

        Returns:
            False if a probe is already running or the request was rejected.
        """
        slots = self.signals.status_updated
        if on_status_updated is not None and not slots.is_connected(on_status_updated):
            slots.connect(on_status_updated)
        if self._closed or self._status == MarketplaceStatus.INITIALIZING:
            return False

        self._set_status(MarketplaceStatus.INITIALIZING)
        request = RemoteRequest(HttpMethod.GET, self.get_slm_connect_url(routes.MERCHANT_ROUTE))
        if not self._send(request, self._on_merchant):
            self._set_status(MarketplaceStatus.CONNECTION_FAILURE)
            return False
        return True

    def get_slm_status(self) -> MarketplaceStatus:
        return self._status

    def get_slm_listings(self) -> bool:
        """
        Refresh every listing from the service.

        Returns:
            False if a refresh is already running or the request was rejected.
        """
        if self._closed or self._tracker.is_refreshing():
            return False

        self._tracker.set_refreshing(True)
        request = RemoteRequest(HttpMethod.GET, self.get_slm_connect_url(routes.LISTINGS_ROUTE))
        if not self._send(request, self._responses.on_listings):
            self._tracker.set_refreshing(False)
            return False
        return True

    def get_slm_connect_url(self, route: str) -> str:
        return routes.slm_url(self.config.remote.base_url, route)

    def _set_status(self, status: MarketplaceStatus) -> None:
        if status != self._status:
            self._status = status
            self.logger.detail(f"Marketplace status: {status.label}")
            self.signals.status_updated.emit()

    def _on_merchant(self, response: RemoteResponse) -> None:
        if self._closed:
            return
        if response.status == SLMErrorCode.SLM_SUCCESS:
            self._set_status(MarketplaceStatus.MERCHANT)
            self.get_slm_listings()
        elif response.status == SLMErrorCode.SLM_NOT_FOUND:
            self._set_status(MarketplaceStatus.NOT_MERCHANT)
        else:
            self.logger.remote_failure("Merchant status", response.status, response.reason)
            self._set_status(MarketplaceStatus.CONNECTION_FAILURE)
            self._writer.report(response.status, response.body)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_listing(self, folder_id: UUID) -> bool:
        """
        Create a remote listing for a folder.

        A tentative inactive record without listing id is cached at once and
        removed again if the service rejects the creation.
        """
        if self._closed or folder_id in self._cache:
            return False
        if not self._tracker.try_begin(folder_id):
            return False

        if not self._create_slm_listing(folder_id):
            return False
        self._writer.put(ListingTuple(listing_folder_id=folder_id))
        return True

    def activate_listing(self, folder_id: UUID, activate: bool) -> bool:
        """
        Activate or deactivate a listing.

        Activation requires a version folder. The change is applied at once
        and rolled back if the service rejects it. Returns True without a
        remote call when the listing is already in the requested state, or
        when the folder has no remote listing yet (the change stays local).
        """
        record = self._live_record(folder_id)
        if record is None or self._tracker.is_pending(folder_id):
            return False
        if activate and record.version_folder_id is None:
            return False
        if record.is_active == activate:
            return True

        return self._apply_update(record, record.with_activation(activate))

    def set_version_folder(self, folder_id: UUID, version_id: Optional[UUID]) -> bool:
        """
        Set or clear the version folder of a listing.

        Clearing the version folder of an active listing deactivates it. The
        change is applied at once and rolled back if the service rejects it.
        A folder without remote listing only changes locally.
        """
        record = self._live_record(folder_id)
        if record is None or self._tracker.is_pending(folder_id):
            return False
        if version_id is not None and version_id == folder_id:
            return False
        if record.version_folder_id == version_id:
            return True

        return self._apply_update(record, record.with_version_folder(version_id))

    def associate_listing(self, folder_id: UUID, listing_id: int) -> bool:
        """
        Bind a folder to an existing remote listing.

        Fails if another folder already uses listing_id. The listing id and
        the version folder the service returns are stored on success only.
        """
        record = self._cache.get(folder_id)
        if self._closed or record is None or listing_id <= 0:
            return False
        owner = self._cache.find_by_listing_id(listing_id)
        if owner is not None and owner != folder_id:
            return False
        if owner == folder_id:
            return True
        if not self._tracker.try_begin(folder_id):
            return False

        return self._associate_slm_listing(folder_id, listing_id, record.version_folder_id)

    def clear_listing(self, folder_id: UUID) -> bool:
        """
        Delete the listing of a folder.

        The record is removed once the service confirms. A record that was
        never associated with a remote listing is removed at once.
        """
        record = self._cache.get(folder_id)
        if self._closed or record is None or self._tracker.is_pending(folder_id):
            return False
        if not record.is_associated:
            self._writer.remove(folder_id)
            return True
        if not self._tracker.try_begin(folder_id):
            return False

        return self._delete_slm_listing(folder_id, record.listing_id)

    def get_listing(self, folder_id: UUID) -> bool:
        """
        Re-read a listing from the service.

        A folder without remote listing has nothing to read; the call
        succeeds without a request.

        Returns:
            False if the folder is not listed or a call for it is pending.
        """
        record = self._live_record(folder_id)
        if record is None or self._tracker.is_pending(folder_id):
            return False
        if not record.is_associated:
            return True
        if not self._tracker.try_begin(folder_id):
            return False

        return self._get_slm_listing(folder_id, record.listing_id)

    def _live_record(self, folder_id: UUID) -> Optional[ListingTuple]:
        if self._closed:
            return None
        return self._cache.get(folder_id)

    def _apply_update(self, record: ListingTuple, updated: ListingTuple) -> bool:
        folder_id = record.listing_folder_id
        if not record.is_associated:
            self._writer.put(updated)
            return True
        if not self._tracker.try_begin(folder_id):
            return False
        if not self._update_slm_listing(updated, snapshot=record):
            return False
        self._writer.put(updated)
        return True

    # ------------------------------------------------------------------
    # Remote calls
    # ------------------------------------------------------------------

    def _create_slm_listing(self, folder_id: UUID) -> bool:
        request = RemoteRequest(
            HttpMethod.POST,
            self.get_slm_connect_url(routes.LISTINGS_ROUTE),
            listing_body(folder_id),
        )
        return self._send_for(folder_id, request, partial(self._responses.on_created, folder_id))

    def _get_slm_listing(self, folder_id: UUID, listing_id: int) -> bool:
        request = RemoteRequest(HttpMethod.GET, self.get_slm_connect_url(routes.listing_route(listing_id)))
        return self._send_for(folder_id, request, partial(self._responses.on_listing, folder_id))

    def _update_slm_listing(self, record: ListingTuple, *, snapshot: ListingTuple) -> bool:
        request = RemoteRequest(
            HttpMethod.PUT,
            self.get_slm_connect_url(routes.listing_route(record.listing_id)),
            listing_body(
                record.listing_folder_id,
                listing_id=record.listing_id,
                version_folder_id=record.version_folder_id,
                is_listed=record.is_active,
            ),
        )
        callback = partial(self._responses.on_updated, record.listing_folder_id, snapshot)
        return self._send_for(record.listing_folder_id, request, callback)

    def _associate_slm_listing(self, folder_id: UUID, listing_id: int, version_id: Optional[UUID]) -> bool:
        request = RemoteRequest(
            HttpMethod.PUT,
            self.get_slm_connect_url(routes.associate_route(listing_id)),
            listing_body(folder_id, listing_id=listing_id, version_folder_id=version_id),
        )
        return self._send_for(folder_id, request, partial(self._responses.on_associated, folder_id, listing_id))

    def _delete_slm_listing(self, folder_id: UUID, listing_id: int) -> bool:
        request = RemoteRequest(HttpMethod.DELETE, self.get_slm_connect_url(routes.listing_route(listing_id)))
        return self._send_for(folder_id, request, partial(self._responses.on_deleted, folder_id))

    def _send_for(self, folder_id: UUID, request: RemoteRequest, on_response: ResponseCallback) -> bool:
        """Send a call for a pending folder, releasing it if the client refuses."""
        if self._send(request, on_response):
            return True
        self._tracker.end(folder_id)
        return False

    def _send(self, request: RemoteRequest, on_response: ResponseCallback) -> bool:
        self.logger.detail(f"{request.method.value} {request.url}")
        if self.client.submit(request, on_response):
            return True
        self.logger.warning(f"Request rejected: {request.method.value} {request.url}")
        return False

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_empty(self) -> bool:
        return len(self._cache) == 0

    def listings(self) -> list[ListingTuple]:
        """Snapshot of every cached listing."""
        return list(self._cache)

    def get_record(self, folder_id: UUID) -> Optional[ListingTuple]:
        return self._cache.get(folder_id)

    def is_listed(self, folder_id: UUID) -> bool:
        """Check if folder_id is a listing folder."""
        return folder_id in self._cache

    def is_listed_and_active(self, folder_id: UUID) -> bool:
        """Check if folder_id is an active listing folder."""
        record = self._cache.get(folder_id)
        return record is not None and record.is_active

    def is_version_folder(self, folder_id: UUID) -> bool:
        """Check if folder_id is the version folder of some listing."""
        return self._cache.find_by_version_folder(folder_id) is not None

    def is_in_active_folder(self, obj_id: UUID) -> bool:
        """Check if obj_id is, or is buried in, the version folder of an active listing."""
        return self.get_active_folder(obj_id) is not None

    def get_active_folder(self, obj_id: UUID) -> Optional[UUID]:
        """
        Get the active version folder containing obj_id.

        Args:
            obj_id: Inventory object or folder id.

        Returns:
            Version folder id, or None if obj_id is not in an active listing.
        """
        for record in self._cache:
            version_id = record.version_folder_id
            if not record.is_active or version_id is None:
                continue
            if obj_id == version_id:
                return version_id
            if self.folder_tree is not None and self.folder_tree.is_descendant_of(obj_id, version_id):
                return version_id
        return None

    def is_updating(self, folder_id: Optional[UUID] = None) -> bool:
        """
        Check if we're waiting for the service.

        Args:
            folder_id: Listing folder, or None for the global bulk refresh.
        """
        if folder_id is None:
            return self._tracker.is_refreshing()
        return self._tracker.is_pending(folder_id)

    def get_activation_state(self, folder_id: UUID) -> bool:
        record = self._cache.get(folder_id)
        return record.is_active if record else False

    def get_listing_id(self, folder_id: UUID) -> Optional[int]:
        record = self._cache.get(folder_id)
        return record.listing_id if record else None

    def get_version_folder(self, folder_id: UUID) -> Optional[UUID]:
        record = self._cache.get(folder_id)
        return record.version_folder_id if record else None

    def get_listing_url(self, folder_id: UUID) -> Optional[str]:
        record = self._cache.get(folder_id)
        return record.edit_url if record else None

    def get_listing_folder(self, listing_id: int) -> Optional[UUID]:
        return self._cache.find_by_listing_id(listing_id)

    def pending_folders(self) -> frozenset[UUID]:
        return self._tracker.pending

    # ------------------------------------------------------------------
    # Stock count flag
    # ------------------------------------------------------------------

    def set_dirty_count(self) -> None:
        self._writer.mark_dirty()

    def check_dirty_count(self) -> bool:
        """Return True once after each change that may affect stock counts."""
        return self._writer.take_dirty()
