# Marketsync Remote Client
# Non-blocking request submission at the transport boundary

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from marketsync.codes import MarketplaceErrorCode


class HttpMethod(str, Enum):
    """HTTP verbs used by the marketplace APIs."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


@dataclass(frozen=True)
class RemoteRequest:
    """A request handed to the transport."""

    method: HttpMethod
    url: str
    body: Optional[dict[str, Any]] = None


@dataclass
class RemoteResponse:
    """A reply delivered by the transport."""

    status: int
    body: dict[str, Any] = field(default_factory=dict)
    reason: str = ""

    @property
    def ok(self) -> bool:
        """Check if the status is a 2xx success."""
        return 200 <= self.status < 300


ResponseCallback = Callable[[RemoteResponse], None]


class RemoteClient(ABC):
    """
    Transport collaborator.

    Implementations must not block in submit: the continuation is called
    later, on the same scheduling context that submitted the request.
    """

    @abstractmethod
    def submit(self, request: RemoteRequest, on_response: ResponseCallback) -> bool:
        """
        Queue a request.

        Args:
            request: Request to send.
            on_response: Continuation receiving the reply.

        Returns:
            False if the request was rejected synchronously. The
            continuation is then never called.
        """


class DeferredRemoteClient(RemoteClient):
    """
    Cooperative single-threaded client.

    Requests are queued on submit and sent when the owning loop calls
    dispatch(), so replies are always delivered after the submitting call
    has returned.
    """

    def __init__(
        self,
        send: Callable[[RemoteRequest], RemoteResponse],
        *,
        max_queued: Optional[int] = None,
    ):
        """
        Initialize client.

        Args:
            send: Blocking function performing the actual exchange.
            max_queued: Optional limit on queued requests; submit rejects beyond it.
        """
        self._send = send
        self._max_queued = max_queued
        self._queue: deque[tuple[RemoteRequest, ResponseCallback]] = deque()

    @property
    def queued(self) -> int:
        return len(self._queue)

    def submit(self, request: RemoteRequest, on_response: ResponseCallback) -> bool:
        if self._max_queued is not None and len(self._queue) >= self._max_queued:
            return False
        self._queue.append((request, on_response))
        return True

    def dispatch(self, limit: Optional[int] = None) -> int:
        """
        Send queued requests and deliver their replies, oldest first.

        Requests submitted by a continuation are handled in the same call
        unless limit stops the loop first.

        Args:
            limit: Maximum number of requests to handle. None drains the queue.

        Returns:
            Number of replies delivered.
        """
        delivered = 0
        while self._queue and (limit is None or delivered < limit):
            request, on_response = self._queue.popleft()
            try:
                response = self._send(request)
            except Exception as e:
                response = RemoteResponse(
                    status=MarketplaceErrorCode.IMPORT_SERVER_SITE_DOWN.value,
                    reason=str(e),
                )
            on_response(response)
            delivered += 1
        return delivered
