# Marketsync Status Codes
# Numeric codes shared with the marketplace service

from enum import Enum


class MarketplaceErrorCode(int, Enum):
    """Result codes of the bulk inventory import job."""

    IMPORT_DONE = 200
    IMPORT_PROCESSING = 202
    IMPORT_REDIRECT = 302
    IMPORT_BAD_REQUEST = 400
    IMPORT_AUTHENTICATION_ERROR = 401
    IMPORT_FORBIDDEN = 403
    IMPORT_NOT_FOUND = 404
    IMPORT_DONE_WITH_ERRORS = 409
    IMPORT_JOB_FAILED = 410
    IMPORT_JOB_TIMEOUT = 499
    IMPORT_SERVER_SITE_DOWN = 500
    IMPORT_SERVER_API_DISABLED = 503

    @property
    def is_terminal(self) -> bool:
        """Check if the code ends a running import job."""
        return self in _TERMINAL_IMPORT_CODES

    @property
    def is_polling(self) -> bool:
        """Check if the job is still running and should be polled again."""
        return self in (MarketplaceErrorCode.IMPORT_PROCESSING, MarketplaceErrorCode.IMPORT_REDIRECT)


_TERMINAL_IMPORT_CODES = frozenset(
    {
        MarketplaceErrorCode.IMPORT_DONE,
        MarketplaceErrorCode.IMPORT_DONE_WITH_ERRORS,
        MarketplaceErrorCode.IMPORT_JOB_FAILED,
        MarketplaceErrorCode.IMPORT_JOB_TIMEOUT,
    }
)


class SLMErrorCode(int, Enum):
    """Result codes of the listings API."""

    SLM_SUCCESS = 200
    SLM_RECORD_CREATED = 201
    SLM_MALFORMED_PAYLOAD = 400
    SLM_NOT_FOUND = 404


class MarketplaceStatus(int, Enum):
    """Connection status of the marketplace, as shown to the user."""

    NOT_INITIALIZED = 0
    INITIALIZING = 1
    CONNECTION_FAILURE = 2
    MERCHANT = 3
    NOT_MERCHANT = 4

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").lower()


def is_terminal_import_code(code: int) -> bool:
    """Check if a raw numeric code ends a running import job."""
    return code in {c.value for c in _TERMINAL_IMPORT_CODES}


def is_polling_import_code(code: int) -> bool:
    """Check if a raw numeric code means the import job is still running."""
    return code in (MarketplaceErrorCode.IMPORT_PROCESSING.value, MarketplaceErrorCode.IMPORT_REDIRECT.value)


def describe_code(code: int) -> str:
    """
    Get a human-readable label for a numeric code.

    Listing API codes win over import codes where both tables share a value.

    Args:
        code: Numeric status code.

    Returns:
        Label such as "slm not found", or "HTTP <code>" if unknown.
    """
    for table in (SLMErrorCode, MarketplaceErrorCode):
        try:
            return table(code).name.replace("_", " ").lower()
        except ValueError:
            continue
    return f"HTTP {code}"
