# Marketsync Remote Module
# Transport boundary, routes and wire payloads

from marketsync.remote.client import (
    DeferredRemoteClient,
    HttpMethod,
    RemoteClient,
    RemoteRequest,
    RemoteResponse,
    ResponseCallback,
)
from marketsync.remote.payloads import (
    ListingPayload,
    PayloadError,
    listing_body,
    parse_listing,
    parse_listings,
)
from marketsync.remote.routes import import_url, slm_url

__all__ = [
    # Client
    "RemoteClient",
    "DeferredRemoteClient",
    "RemoteRequest",
    "RemoteResponse",
    "ResponseCallback",
    "HttpMethod",
    # Payloads
    "ListingPayload",
    "PayloadError",
    "parse_listings",
    "parse_listing",
    "listing_body",
    # Routes
    "slm_url",
    "import_url",
]
