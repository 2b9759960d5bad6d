"""HTTP transport protocols and deadline enforcement."""

from __future__ import annotations

import threading
from concurrent.futures import Future
from typing import Any, Callable, Mapping, Protocol, TypeVar

T = TypeVar("T")


class ResponseProtocol(Protocol):
    """Protocol describing the subset of ``requests.Response`` that we use."""

    status_code: int
    reason: str | None

    @property
    def text(self) -> str:  # pragma: no cover - interface declaration
        """Return the raw body text."""

    def json(self) -> Any:  # pragma: no cover - interface declaration
        """Return the decoded JSON payload."""


class TransportProtocol(Protocol):
    """Protocol describing the transport used by :class:`FetchPipeline`.

    ``requests.Session`` satisfies it; tests substitute lightweight stubs.
    """

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        json: Any = None,
        timeout: float | tuple[float, float] | None = None,
    ) -> ResponseProtocol:  # pragma: no cover - interface declaration
        """Perform an HTTP request and return a response object."""


def call_with_deadline(func: Callable[[], T], timeout_seconds: float) -> T:
    """Run ``func`` and wait at most ``timeout_seconds`` for its outcome.

    ``func`` runs on a daemon thread. When the deadline elapses the caller gets
    :class:`concurrent.futures.TimeoutError` and whatever ``func`` eventually
    produces is dropped with the orphaned future.
    """

    future: Future[T] = Future()

    def _runner() -> None:
        if not future.set_running_or_notify_cancel():  # pragma: no cover - never cancelled
            return
        try:
            future.set_result(func())
        except BaseException as exc:
            future.set_exception(exc)

    threading.Thread(target=_runner, name="windy-fetch", daemon=True).start()
    return future.result(timeout=timeout_seconds)


__all__ = ["ResponseProtocol", "TransportProtocol", "call_with_deadline"]
