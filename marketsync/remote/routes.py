# Marketsync Routes
# URL building for the listings and import APIs

MERCHANT_ROUTE = "merchant"
LISTINGS_ROUTE = "listings"
IMPORT_ROUTE = "inventory/import/"


def slm_url(base_url: str, route: str) -> str:
    """
    Join the listings API base URL and a route suffix.

    Args:
        base_url: API base, with or without trailing slash.
        route: Route suffix, with or without leading slash.

    Returns:
        Full URL.
    """
    return base_url.rstrip("/") + "/" + route.lstrip("/")


def listing_route(listing_id: int) -> str:
    return f"listing/{listing_id}"


def associate_route(listing_id: int) -> str:
    return f"associate_inventory/{listing_id}"


def import_url(import_base_url: str) -> str:
    """Get the URL of the bulk inventory import job."""
    return slm_url(import_base_url, IMPORT_ROUTE)
