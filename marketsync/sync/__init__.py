# Marketsync Sync Module
# Listings synchronization engine and its reply handlers

from marketsync.sync.engine import FolderTree, SyncEngine
from marketsync.sync.responses import ListingResponses
from marketsync.sync.writer import CacheWriter, EngineSignals

__all__ = [
    # Engine
    "SyncEngine",
    "FolderTree",
    # Replies
    "ListingResponses",
    "CacheWriter",
    "EngineSignals",
]
