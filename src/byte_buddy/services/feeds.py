"""Snapshot feed abstractions shared by the mirrored stores."""

import logging
from collections.abc import Callable
from typing import Protocol, TypeVar

from byte_buddy.domain.errors import DecodeError, RemoteReadError

T = TypeVar("T")

SnapshotHandler = Callable[[list[T]], None]
ErrorHandler = Callable[[RemoteReadError], None]

_logger = logging.getLogger(__name__)


class Subscription(Protocol):
    """Handle to a live feed."""

    def cancel(self) -> None:
        """Stop delivery. Safe to call more than once."""


def decode_rows(
    rows: list[dict[str, object]],
    parse: Callable[[dict[str, object]], T],
    kind: str,
) -> list[T]:
    """Decode a snapshot, dropping rows that fail to parse."""
    decoded: list[T] = []
    for row in rows:
        try:
            decoded.append(parse(row))
        except DecodeError as exc:
            _logger.warning(
                "Dropping malformed %s document %s: %s", kind, row.get("id"), exc
            )
    return decoded
