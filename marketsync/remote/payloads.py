# Marketsync Payloads
# Pydantic models of the listings API wire format

from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field, ValidationError, field_validator

NULL_UUID = UUID(int=0)


class PayloadError(ValueError):
    """Raised when a reply body does not match the listings wire format."""


class InventoryInfo(BaseModel):
    """Inventory side of a listing: which local folders it is made of."""

    listing_folder_id: Optional[UUID] = Field(default=None, description="Listing folder id")
    version_folder_id: Optional[UUID] = Field(default=None, description="Published version folder id")

    @field_validator("listing_folder_id", "version_folder_id", mode="before")
    @classmethod
    def null_to_none(cls, v: Any) -> Any:
        """Read the null UUID and empty strings as absent."""
        if v in (None, ""):
            return None
        if isinstance(v, str) and UUID(v) == NULL_UUID:
            return None
        if isinstance(v, UUID) and v == NULL_UUID:
            return None
        return v


class ListingPayload(BaseModel):
    """One listing as described by the service."""

    id: Optional[int] = Field(default=None, description="Remote listing id")
    is_listed: bool = Field(default=False, description="Whether the listing is active")
    edit_url: Optional[str] = Field(default=None, description="Deep link to the listing editor")
    inventory_info: InventoryInfo = Field(default_factory=InventoryInfo)

    @field_validator("id")
    @classmethod
    def positive_id(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            return None
        return v

    @field_validator("edit_url")
    @classmethod
    def empty_url(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @property
    def listing_folder_id(self) -> Optional[UUID]:
        return self.inventory_info.listing_folder_id

    @property
    def version_folder_id(self) -> Optional[UUID]:
        return self.inventory_info.version_folder_id


class ListingsEnvelope(BaseModel):
    """Reply body of every listings route."""

    listings: list[ListingPayload] = Field(default_factory=list)


def parse_listings(body: Optional[dict[str, Any]]) -> list[ListingPayload]:
    """
    Parse a listings reply body.

    Args:
        body: Decoded JSON body.

    Returns:
        Listings in reply order.

    Raises:
        PayloadError: If the body is not a valid listings envelope.
    """
    if not isinstance(body, dict):
        raise PayloadError(f"Expected a JSON object, got {type(body).__name__}")
    try:
        envelope = ListingsEnvelope.model_validate(body)
    except ValidationError as e:
        messages = []
        for error in e.errors():
            loc = " -> ".join(str(l) for l in error["loc"])
            messages.append(f"{loc}: {error['msg']}")
        raise PayloadError("; ".join(messages)) from e
    return envelope.listings


def parse_listing(body: Optional[dict[str, Any]]) -> ListingPayload:
    """Parse a reply that must describe exactly one listing."""
    listings = parse_listings(body)
    if not listings:
        raise PayloadError("Reply contains no listing")
    return listings[0]


def listing_body(
    folder_id: UUID,
    *,
    listing_id: Optional[int] = None,
    version_folder_id: Optional[UUID] = None,
    is_listed: Optional[bool] = None,
) -> dict[str, Any]:
    """
    Build a request body for the create, update and associate routes.

    Args:
        folder_id: Listing folder id.
        listing_id: Remote listing id, if known.
        version_folder_id: Version folder id; None is sent as the null UUID.
        is_listed: Activation state, omitted when None.

    Returns:
        JSON-ready dict.
    """
    listing: dict[str, Any] = {}
    if listing_id is not None:
        listing["id"] = listing_id
    if is_listed is not None:
        listing["is_listed"] = is_listed
    listing["inventory_info"] = {
        "listing_folder_id": str(folder_id),
        "version_folder_id": str(version_folder_id or NULL_UUID),
    }
    return {"listing": listing}
