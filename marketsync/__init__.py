"""marketsync - marketplace listings synchronization.

Client-side cache of marketplace listings keyed by local inventory folder,
kept in sync with the remote marketplace service through non-blocking
calls, plus the status machine of the bulk inventory import job.
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "SyncEngine",
    "InventoryImporter",
    "ListingTuple",
    "MarketsyncConfig",
    "MarketplaceErrorCode",
    "MarketplaceStatus",
    "SLMErrorCode",
    "RemoteClient",
    "DeferredRemoteClient",
    "Signal",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name == "SyncEngine":
        from marketsync.sync.engine import SyncEngine

        return SyncEngine
    if name == "InventoryImporter":
        from marketsync.importer import InventoryImporter

        return InventoryImporter
    if name == "ListingTuple":
        from marketsync.cache.record import ListingTuple

        return ListingTuple
    if name == "MarketsyncConfig":
        from marketsync.config.schema import MarketsyncConfig

        return MarketsyncConfig
    if name in ("MarketplaceErrorCode", "MarketplaceStatus", "SLMErrorCode"):
        from marketsync import codes

        return getattr(codes, name)
    if name in ("RemoteClient", "DeferredRemoteClient"):
        from marketsync.remote import client

        return getattr(client, name)
    if name == "Signal":
        from marketsync.signals import Signal

        return Signal
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
