"""Call signatures used as cache keys.

A :class:`CallSignature` pairs a service key with a canonical, hashable
encoding of the call arguments. Positional order matters; keyword order does
not. Values keep their type so ``1``, ``1.0`` and ``True`` never collide.

Supported arguments: ``None``, ``bool``, ``int``, ``float``, ``str``,
``bytes``, lists, tuples, dicts, sets and frozensets of supported values, and
any other hashable object (encoded as itself). Anything else, including
self-referencing containers, raises :class:`~lazycrate.exceptions.SignatureError`.
"""

from dataclasses import dataclass
from typing import Any, Dict, Hashable, Optional, Set, Tuple

from .exceptions import SignatureError

_SCALARS = (type(None), bool, int, float, str, bytes)
_SEQUENCES = (list, tuple)
_SETS = (set, frozenset)


@dataclass(frozen=True)
class CallSignature:
    """Hashable identity of one accessor call.

    ``key`` is ``None`` for ad-hoc resolutions.
    """

    key: Optional[str]
    args: Tuple[Hashable, ...] = ()
    kwargs: Tuple[Tuple[str, Hashable], ...] = ()

    def __str__(self) -> str:
        if not self.args and not self.kwargs:
            return str(self.key)
        parts = [_render(a) for a in self.args]
        parts.extend(f"{name}={_render(value)}" for name, value in self.kwargs)
        return f"{self.key}({', '.join(parts)})"


def _render(encoded: Tuple[Any, ...]) -> str:
    kind, cls, payload = encoded
    if kind in ("scalar", "object"):
        return repr(payload)
    if kind == "map":
        return "{" + ", ".join(f"{_render(k)}: {_render(v)}" for k, v in payload) + "}"
    inner = ", ".join(_render(p) for p in payload)
    if kind == "set":
        return "{" + inner + "}" if payload else f"{cls.__name__}()"
    if cls is list:
        return f"[{inner}]"
    return f"({inner},)" if len(payload) == 1 else f"({inner})"


def _encode(value: Any, active: Set[int]) -> Tuple[Any, ...]:
    cls = type(value)
    if cls in _SCALARS:
        return ("scalar", cls, value)

    if cls in _SEQUENCES or cls in _SETS or cls is dict:
        marker = id(value)
        if marker in active:
            raise SignatureError(f"Cannot build a call signature from a self-referencing {cls.__name__}")
        active.add(marker)
        try:
            if cls is dict:
                items = [(_encode(k, active), _encode(v, active)) for k, v in value.items()]
                items.sort(key=lambda kv: repr(kv[0]))
                return ("map", cls, tuple(items))
            if cls in _SETS:
                return ("set", cls, tuple(sorted((_encode(m, active) for m in value), key=repr)))
            return ("seq", cls, tuple(_encode(v, active) for v in value))
        finally:
            active.discard(marker)

    try:
        hash(value)
    except TypeError:
        raise SignatureError(
            f"Cannot build a call signature from an unhashable {cls.__name__}; "
            "pass primitives, containers of primitives or hashable objects"
        ) from None
    return ("object", cls, value)


def canonicalize(
    key: Optional[str], args: Tuple[Any, ...] = (), kwargs: Optional[Dict[str, Any]] = None
) -> CallSignature:
    """Build the :class:`CallSignature` for one accessor call.

    Raises:
        SignatureError: If any argument cannot be encoded.
    """
    active: Set[int] = set()
    encoded_args = tuple(_encode(a, active) for a in args)
    encoded_kwargs = tuple(sorted((name, _encode(v, active)) for name, v in (kwargs or {}).items()))
    return CallSignature(key, encoded_args, encoded_kwargs)
