"""Typed failures raised by the Windy client.

Every failure surfaced to callers is a :class:`WindyClientError` whose
``failure`` attribute is exactly one of four records, discriminated by
``failure.kind``:

``ValidationFailure``
    Malformed input such as out-of-range coordinates or a missing API key.
``ProviderRejected``
    The provider answered with a non-success status; carries the status code
    and the raw body text.
``TransportFailure``
    The deadline fired or the network layer failed; carries the cause.
``QuotaExceeded``
    The client-side request ceiling was reached; carries the reset instant.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Literal, Union


class FailureKind(str, Enum):
    """Discriminator for :data:`Failure` records."""

    VALIDATION = "validation"
    PROVIDER_REJECTED = "provider_rejected"
    TRANSPORT = "transport"
    QUOTA_EXCEEDED = "quota_exceeded"


@dataclass(frozen=True)
class ValidationFailure:
    message: str
    kind: Literal[FailureKind.VALIDATION] = field(default=FailureKind.VALIDATION, init=False)


@dataclass(frozen=True)
class ProviderRejected:
    message: str
    status_code: int
    body: str
    kind: Literal[FailureKind.PROVIDER_REJECTED] = field(
        default=FailureKind.PROVIDER_REJECTED, init=False
    )


@dataclass(frozen=True)
class TransportFailure:
    message: str
    cause: BaseException | None = None
    timed_out: bool = False
    kind: Literal[FailureKind.TRANSPORT] = field(default=FailureKind.TRANSPORT, init=False)


@dataclass(frozen=True)
class QuotaExceeded:
    message: str
    resets_at: datetime
    remaining: int = 0
    kind: Literal[FailureKind.QUOTA_EXCEEDED] = field(
        default=FailureKind.QUOTA_EXCEEDED, init=False
    )


Failure = Union[ValidationFailure, ProviderRejected, TransportFailure, QuotaExceeded]


class WindyClientError(RuntimeError):
    """Raised for every failure produced by the client."""

    def __init__(self, failure: Failure) -> None:
        super().__init__(failure.message)
        self.failure = failure

    @property
    def kind(self) -> FailureKind:
        return self.failure.kind

    @property
    def message(self) -> str:
        return self.failure.message


def validation_error(message: str) -> WindyClientError:
    """Return a :class:`WindyClientError` wrapping a validation failure."""

    return WindyClientError(ValidationFailure(message))


__all__ = [
    "Failure",
    "FailureKind",
    "ProviderRejected",
    "QuotaExceeded",
    "TransportFailure",
    "ValidationFailure",
    "WindyClientError",
    "validation_error",
]
