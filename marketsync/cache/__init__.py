# Marketsync Cache Module
# Listing tuples, the session cache and pending-request tracking

from marketsync.cache.pending import PendingTracker
from marketsync.cache.record import ListingTuple
from marketsync.cache.store import TupleCache

__all__ = [
    "ListingTuple",
    "TupleCache",
    "PendingTracker",
]
