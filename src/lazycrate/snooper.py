"""Dependency discovery.

During the discovery pass a provider receives a *snooping container* instead
of its real dependencies. Every name read from it is recorded and answered
with :data:`UNRESOLVED`, a placeholder that survives nested structural reads
such as ``container.config.database.host``. Once the pass is over, the
recorded names are resolved through the scope into a :class:`SubContainer`.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Iterator, Mapping, Tuple

from .attributes import LazyNamespace, produced_names
from .constants import UNRESOLVED_REPR
from .exceptions import UndiscoveredDependencyError


class Unresolved:
    """Placeholder for a dependency that has not been resolved yet.

    Attribute access, item access, calls and ``await`` all return the
    placeholder itself. It is truthy, so reads guarded by a flag sibling
    are still discovered. It has no length and iterates as empty.
    """

    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __getattr__(self, name: str) -> "Unresolved":
        if name.startswith("__") and name.endswith("__"):
            raise AttributeError(name)
        return self

    def __getitem__(self, key: Any) -> "Unresolved":
        return self

    def __call__(self, *args: Any, **kwargs: Any) -> "Unresolved":
        return self

    def __await__(self) -> Iterator[Any]:
        return self
        yield  # pragma: no cover

    def __iter__(self) -> Iterator[Any]:
        return iter(())

    def __len__(self) -> int:
        return 0

    def __bool__(self) -> bool:
        return True

    def __repr__(self) -> str:
        return UNRESOLVED_REPR

    __str__ = __repr__

    def __reduce__(self):
        return (Unresolved, ())


UNRESOLVED = Unresolved()


class SubContainer(Mapping[str, Any]):
    """Read-only view of the dependencies discovered for one provider call.

    Values are reachable both as attributes and as items. Reading a key that
    was not recorded during discovery raises
    :class:`~lazycrate.exceptions.UndiscoveredDependencyError`.
    Providers should read dependencies only as attributes or items. During
    discovery the container is not a mapping, so ``get``, ``keys`` and the
    other mapping methods are recorded as dependency names. Keys that collide
    with those methods are only reachable as items here.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, Any]):
        object.__setattr__(self, "_values", dict(values))

    def __getitem__(self, key: str) -> Any:
        values = object.__getattribute__(self, "_values")
        try:
            return values[key]
        except KeyError:
            raise UndiscoveredDependencyError(key, tuple(values)) from None

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__") and name.endswith("__"):
            raise AttributeError(name)
        return self[name]

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("SubContainer is read-only")

    def __iter__(self) -> Iterator[str]:
        return iter(object.__getattribute__(self, "_values"))

    def __len__(self) -> int:
        return len(object.__getattribute__(self, "_values"))

    def __contains__(self, key: object) -> bool:
        return key in object.__getattribute__(self, "_values")

    def __repr__(self) -> str:
        keys = ", ".join(object.__getattribute__(self, "_values"))
        return f"SubContainer({keys})"


class SnoopingContainer(LazyNamespace):
    """Container handed to providers during the discovery pass.

    ``name in container`` records *name* and is always true, matching the
    attribute reads. Iteration yields nothing.
    """

    __slots__ = ()

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        self._lookup(name)
        return True

    def __iter__(self) -> Iterator[str]:
        return iter(())


Resolve = Callable[[Any], Awaitable[SubContainer]]


def new_snooper() -> Tuple[SnoopingContainer, Resolve]:
    """Create a snooping container and the function that resolves what it saw.

    Returns:
        ``(container, resolve)``. ``container`` records every distinct name
        read from it. ``await resolve(scope)`` calls each recorded key on
        *scope* with no arguments, concurrently, and returns the resulting
        :class:`SubContainer`. ``resolve`` may only be called once.
    """
    recorded: Dict[str, None] = {}
    state = {"resolved": False}

    def record(name: str) -> Unresolved:
        recorded[name] = None
        return UNRESOLVED

    async def resolve(scope: Any) -> SubContainer:
        if state["resolved"]:
            raise RuntimeError("Snooped dependencies have already been resolved")
        state["resolved"] = True
        keys = tuple(recorded)
        if not keys:
            return SubContainer({})
        values = await asyncio.gather(*(scope[k]() for k in keys))
        return SubContainer(dict(zip(keys, values)))

    return SnoopingContainer(record), resolve


def snooped_keys(container: LazyNamespace) -> Tuple[str, ...]:
    """Keys a snooping container has recorded so far."""
    return produced_names(container)
