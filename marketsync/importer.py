# Marketsync Inventory Importer
# Status machine of the bulk inventory import job

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import partial
from typing import Optional

from marketsync.codes import (
    MarketplaceErrorCode,
    MarketplaceStatus,
    is_polling_import_code,
    is_terminal_import_code,
)
from marketsync.config.schema import MarketsyncConfig
from marketsync.logger import MarketLogger
from marketsync.remote import routes
from marketsync.remote.client import HttpMethod, RemoteClient, RemoteRequest, RemoteResponse
from marketsync.signals import Signal

# Probe replies meaning "reachable, but this account is no merchant"
_NOT_MERCHANT_CODES = frozenset(
    {
        MarketplaceErrorCode.IMPORT_AUTHENTICATION_ERROR.value,
        MarketplaceErrorCode.IMPORT_FORBIDDEN.value,
        MarketplaceErrorCode.IMPORT_NOT_FOUND.value,
    }
)

# Replies to the import POST meaning the job was accepted
_ACCEPTED_CODES = frozenset(
    {
        MarketplaceErrorCode.IMPORT_DONE.value,
        MarketplaceErrorCode.IMPORT_PROCESSING.value,
        MarketplaceErrorCode.IMPORT_REDIRECT.value,
    }
)


@dataclass
class ImporterSignals:
    """Notifications fired by the importer."""

    status_changed: Signal = field(default_factory=lambda: Signal("status_changed"))
    status_report: Signal = field(default_factory=lambda: Signal("status_report"))
    initialization_error: Signal = field(default_factory=lambda: Signal("initialization_error"))
    status_updated: Signal = field(default_factory=lambda: Signal("status_updated"))

    def disconnect_all(self) -> None:
        for signal in (self.status_changed, self.status_report, self.initialization_error, self.status_updated):
            signal.disconnect_all()


class InventoryImporter:
    """
    Tracks the bulk inventory import job of the marketplace.

    initialize() probes the merchant status; trigger_import() starts a job
    which update() then polls until the service reports a terminal code.
    reinitialize_and_trigger_import() is the recovery path from a
    connection failure and restarts an import once the probe succeeds.
    """

    def __init__(
        self,
        client: RemoteClient,
        config: Optional[MarketsyncConfig] = None,
        *,
        auto_trigger_import: Optional[bool] = None,
        clock: Callable[[], float] = time.monotonic,
        logger: Optional[MarketLogger] = None,
    ):
        """
        Initialize importer.

        Args:
            client: Transport used for the import API.
            config: Marketsync configuration (defaults if not provided).
            auto_trigger_import: Start an import once merchant status is
                confirmed. Defaults to the importer config.
            clock: Monotonic time source used to pace status polls.
            logger: Optional logger.
        """
        self.config = config or MarketsyncConfig()
        self.client = client
        self.clock = clock
        self.logger = logger or MarketLogger(verbose=self.config.output.verbose)
        self.signals = ImporterSignals()

        if auto_trigger_import is None:
            auto_trigger_import = self.config.importer.auto_trigger_import
        self.auto_trigger_import = auto_trigger_import

        self._status = MarketplaceStatus.NOT_INITIALIZED
        self._initialized = False
        self._import_in_progress = False
        self._request_outstanding = False
        self._last_poll: Optional[float] = None
        self._generation = 0
        self._closed = False

    @property
    def marketplace_status(self) -> MarketplaceStatus:
        return self._status

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def is_import_in_progress(self) -> bool:
        return self._import_in_progress

    @property
    def import_url(self) -> str:
        return routes.import_url(self.config.remote.import_url)

    def close(self) -> None:
        """Stop tracking. Later replies are ignored."""
        self._closed = True
        self._generation += 1
        self.signals.disconnect_all()

    def initialize(self) -> bool:
        """
        Probe the merchant status of the account.

        Returns:
            False if already initialized, a probe is running, or the request was rejected.
        """
        if self._closed or self._initialized or self._status == MarketplaceStatus.INITIALIZING:
            return False
        return self._probe()

    def reinitialize_and_trigger_import(self) -> bool:
        """Forget the current state, probe again and import once merchant."""
        if self._closed:
            return False

        # Replies to calls issued before this point are stale
        self._generation += 1
        self._request_outstanding = False
        self._initialized = False
        self.auto_trigger_import = True
        if self._import_in_progress:
            self._set_in_progress(False)
        return self._probe()

    def _probe(self) -> bool:
        self._set_status(MarketplaceStatus.INITIALIZING)
        request = RemoteRequest(HttpMethod.GET, self.import_url)
        if not self._submit(request, partial(self._on_probe, self._generation)):
            self._set_status(MarketplaceStatus.CONNECTION_FAILURE)
            return False
        return True

    def trigger_import(self) -> bool:
        """
        Start a bulk import job.

        Returns:
            False unless initialized with no import in progress.
        """
        if self._closed or not self._initialized or self._import_in_progress:
            return False

        self._last_poll = self.clock()
        self._set_in_progress(True)
        self._request_outstanding = True
        request = RemoteRequest(HttpMethod.POST, self.import_url)
        if not self._submit(request, partial(self._on_import_posted, self._generation)):
            self._request_outstanding = False
            self._set_in_progress(False)
            return False
        return True

    def update(self, now: Optional[float] = None) -> bool:
        """
        Periodic tick: poll the running job when the poll interval has passed.

        Args:
            now: Current time from the same clock; read from clock if None.

        Returns:
            True if a status poll was issued.
        """
        if self._closed or not self._import_in_progress or self._request_outstanding:
            return False

        if now is None:
            now = self.clock()
        if self._last_poll is not None and now - self._last_poll < self.config.importer.poll_interval:
            return False

        self._last_poll = now
        self._request_outstanding = True
        request = RemoteRequest(HttpMethod.GET, self.import_url)
        if not self._submit(request, partial(self._on_poll, self._generation)):
            self._request_outstanding = False
            return False
        return True

    def _on_probe(self, generation: int, response: RemoteResponse) -> None:
        if generation != self._generation:
            return

        code = response.status
        if code == MarketplaceErrorCode.IMPORT_DONE:
            self._initialized = True
            self._set_status(MarketplaceStatus.MERCHANT)
            if self.auto_trigger_import:
                self.auto_trigger_import = False
                self.trigger_import()
        elif code in _NOT_MERCHANT_CODES:
            self._set_status(MarketplaceStatus.NOT_MERCHANT)
        else:
            self.logger.remote_failure("Marketplace initialization", code, response.reason)
            self._set_status(MarketplaceStatus.CONNECTION_FAILURE)
            self.signals.initialization_error.emit(code, response.body)

    def _on_import_posted(self, generation: int, response: RemoteResponse) -> None:
        if generation != self._generation:
            return
        self._request_outstanding = False
        if not self._import_in_progress:
            return

        if response.status in _ACCEPTED_CODES:
            self.logger.detail(f"Import job accepted ({response.status})")
            return
        self._finish(response)

    def _on_poll(self, generation: int, response: RemoteResponse) -> None:
        if generation != self._generation:
            return
        self._request_outstanding = False
        if not self._import_in_progress:
            return

        code = response.status
        if is_terminal_import_code(code):
            self._finish(response)
        elif is_polling_import_code(code):
            self.logger.detail(f"Import job still running ({code})")
        else:
            # Transient: report and keep polling
            self.logger.remote_failure("Import status", code, response.reason)
            self.signals.status_report.emit(code, response.body)

    def _finish(self, response: RemoteResponse) -> None:
        code = response.status
        self._set_in_progress(False)
        if code == MarketplaceErrorCode.IMPORT_DONE:
            self.logger.success("Marketplace import done")
        else:
            self.logger.remote_failure("Marketplace import", code, response.reason)
        self.signals.status_report.emit(code, response.body)

    def _set_in_progress(self, in_progress: bool) -> None:
        self._import_in_progress = in_progress
        self.signals.status_changed.emit(in_progress)

    def _set_status(self, status: MarketplaceStatus) -> None:
        if status != self._status:
            self._status = status
            self.logger.detail(f"Marketplace status: {status.label}")
            self.signals.status_updated.emit()

    def _submit(self, request: RemoteRequest, on_response) -> bool:
        self.logger.detail(f"{request.method.value} {request.url}")
        if self.client.submit(request, on_response):
            return True
        self.logger.warning(f"Request rejected: {request.method.value} {request.url}")
        return False
