# Marketsync Listing Tuple
# Cached remote-facing state of one listing folder

from dataclasses import dataclass, replace
from typing import Optional
from uuid import UUID


@dataclass(frozen=True)
class ListingTuple:
    """
    What we know of one marketplace listing.

    The listing folder id is the local cache key. The remote service keys
    listings by listing_id instead, which stays None until the folder has
    been associated with a remote listing.
    """

    listing_folder_id: UUID
    listing_id: Optional[int] = None
    version_folder_id: Optional[UUID] = None
    is_active: bool = False
    edit_url: Optional[str] = None

    def __post_init__(self) -> None:
        if self.listing_id is not None and self.listing_id <= 0:
            object.__setattr__(self, "listing_id", None)
        if self.is_active and self.version_folder_id is None:
            raise ValueError(f"Listing {self.listing_folder_id} cannot be active without a version folder")

    @property
    def is_associated(self) -> bool:
        """Check if the remote service has assigned a listing id."""
        return self.listing_id is not None

    def with_version_folder(self, version_folder_id: Optional[UUID]) -> "ListingTuple":
        """Return a copy with a new version folder, deactivated if it was cleared."""
        is_active = self.is_active and version_folder_id is not None
        return replace(self, version_folder_id=version_folder_id, is_active=is_active)

    def with_activation(self, is_active: bool) -> "ListingTuple":
        """Return a copy with a new activation state."""
        return replace(self, is_active=is_active)
