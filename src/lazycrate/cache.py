"""Result storage for a scope.

:class:`CallSignatureCache` maps call signatures to the values produced by
real passes. It also tracks in-flight constructions so that concurrent calls
with the same signature can share one construction.
"""

import asyncio
import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .signature import CallSignature

_logger = logging.getLogger(__name__)

_MISSING = object()

ABANDONED = object()
"""Result given to waiters when the constructing caller was cancelled.

Waiters that receive it start their own construction.
"""


class CallSignatureCache:
    """Unbounded signature-to-value store owned by one scope.

    Entries are never evicted; a scope is expected to live as long as its
    registry is in use.
    """

    def __init__(self) -> None:
        self._values: Dict[CallSignature, Any] = {}
        self._in_flight: Dict[CallSignature, "asyncio.Future[Any]"] = {}

    def get(self, signature: CallSignature, default: Any = None) -> Any:
        return self._values.get(signature, default)

    def lookup(self, signature: CallSignature) -> Tuple[bool, Any]:
        """Return ``(hit, value)``; ``value`` is ``None`` on a miss.

        Distinguishes a cached ``None`` from a miss.
        """
        value = self._values.get(signature, _MISSING)
        if value is _MISSING:
            return False, None
        return True, value

    def put(self, signature: CallSignature, value: Any) -> None:
        self._values[signature] = value

    def items(self) -> List[Tuple[CallSignature, Any]]:
        return list(self._values.items())

    def clear(self) -> None:
        self._values.clear()

    def __contains__(self, signature: object) -> bool:
        return signature in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[CallSignature]:
        return iter(list(self._values))

    def pending(self, signature: CallSignature) -> Optional["asyncio.Future[Any]"]:
        """The in-flight construction for *signature*, if one is running."""
        return self._in_flight.get(signature)

    def begin(self, signature: CallSignature) -> "asyncio.Future[Any]":
        """Mark *signature* as under construction and return its future."""
        future = asyncio.get_running_loop().create_future()
        self._in_flight[signature] = future
        return future

    def complete(self, signature: CallSignature, value: Any) -> None:
        """Store *value* and release any callers waiting on the construction."""
        self._values[signature] = value
        future = self._in_flight.pop(signature, None)
        if future is not None and not future.done():
            future.set_result(value)

    def fail(self, signature: CallSignature, error: BaseException) -> None:
        """Release waiters with *error*; nothing is stored for *signature*.

        Waiters of a cancelled construction receive :data:`ABANDONED`, not
        the cancellation.
        """
        future = self._in_flight.pop(signature, None)
        if future is None or future.done():
            return
        if isinstance(error, asyncio.CancelledError):
            future.set_result(ABANDONED)
            return
        future.set_exception(error)
        # The failure is re-raised to the constructing caller; waiters are optional.
        future.exception()
        _logger.debug("Construction of %s failed: %s", signature, error)
