"""The scope resolver.

A :class:`Scope` exposes one async accessor per registry key. Calling an
accessor resolves the service in two passes:

1. *Discovery*: the provider runs against a snooping container and an inert
   decorator, which records the sibling keys it reads.
2. *Real*: the recorded keys are resolved through this same scope, a
   :class:`~lazycrate.snooper.SubContainer` is built from them, and the
   provider runs again with the real decorator.

The value of the real pass is cached under the call signature, so each
distinct call constructs at most once for the lifetime of the scope.
"""

import asyncio
import contextvars
import inspect
import logging
import random
import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Mapping, Optional, Protocol, Tuple, Union

from .attributes import LazyNamespace
from .cache import ABANDONED, CallSignatureCache
from .config import ScopeOptions
from .constants import LOGGER
from .decorators import InvocationDecorator, discovery_decorator, real_decorator
from .exceptions import CircularDependencyError, InvalidRegistryError, ProviderNotFoundError
from .signature import CallSignature, canonicalize
from .snooper import new_snooper, snooped_keys

_logger = logging.getLogger(__name__)

_resolve_chain: contextvars.ContextVar[Tuple[CallSignature, ...]] = contextvars.ContextVar(
    "lazycrate_resolve_chain", default=()
)


@dataclass(frozen=True)
class InjectionContext:
    """What a provider receives on each pass.

    Attributes:
        key: The service key being resolved, or ``None`` for ad-hoc
            resolution.
        container: Static, zero-argument dependencies. A snooping container
            during discovery and a :class:`~lazycrate.snooper.SubContainer`
            during the real pass.
        scope: The owning scope, for dependencies that need call arguments.
        decorator: Produces the final value via ``decorator.invoke(factory)``.
    """

    key: Optional[str]
    container: Any
    scope: "Scope"
    decorator: InvocationDecorator


Provider = Callable[[InjectionContext], Union[Any, Awaitable[Any]]]


class ScopeObserver(Protocol):
    """Receives resolution events from a scope.

    Pass instances to ``create_scope(observers=[...])``.
    """

    def on_resolve(self, key: str, took_ms: float): ...
    def on_cache_hit(self, key: str): ...


@dataclass
class ScopeStats:
    scope_id: str
    created_at: float = field(default_factory=time.time)
    resolve_count: int = 0
    cache_hit_count: int = 0
    shared_count: int = 0


def _generate_scope_id() -> str:
    return f"s{time.time_ns():x}{random.randrange(1 << 16):04x}"


def describe_cycle(chain: Tuple[CallSignature, ...], current: CallSignature) -> str:
    lines: List[str] = []
    lines.append("Circular dependency detected.")
    lines.append("")
    lines.append("Resolution chain:")
    full = tuple(chain) + (current,)
    for idx, sig in enumerate(full, 1):
        mark = "  ❌" if idx == len(full) else ""
        lines.append(f"  {idx}. {sig}{mark}")
    lines.append("")
    lines.append("Hint: read one side of the cycle through `scope` inside the factory instead of `container`.")
    return "\n".join(lines)


async def instantiate(
    scope: "Scope",
    provider: Provider,
    key: Optional[str],
    args: Tuple[Any, ...] = (),
    kwargs: Optional[Dict[str, Any]] = None,
) -> Any:
    """Run the two-phase protocol for one provider call, without caching."""
    container, resolve = new_snooper()

    discovered = provider(InjectionContext(key, container, scope, discovery_decorator()))
    if inspect.isawaitable(discovered):
        await discovered

    if _logger.isEnabledFor(logging.DEBUG):
        _logger.debug("Discovered dependencies of %s: %s", key or "<ad-hoc>", list(snooped_keys(container)) or "none")

    sub_container = await resolve(scope)

    value = provider(InjectionContext(key, sub_container, scope, real_decorator(args, kwargs)))
    if inspect.isawaitable(value):
        value = await value
    return value


def _validate_registry(registry: Mapping[str, Provider]) -> Dict[str, Provider]:
    if not isinstance(registry, Mapping):
        raise InvalidRegistryError([f"registry must be a mapping, not {type(registry).__name__}"])
    errors: List[str] = []
    for k, provider in registry.items():
        if not isinstance(k, str):
            errors.append(f"key {k!r} is a {type(k).__name__}, expected str")
        elif not callable(provider):
            errors.append(f"provider for '{k}' is not callable ({type(provider).__name__})")
    if errors:
        raise InvalidRegistryError(errors)
    return dict(registry)


class Scope(LazyNamespace):
    """Cached resolution surface for a registry.

    ``scope.<key>`` (or ``scope["key"]``) is an async accessor::

        scope = create_scope({"prefix": lambda ctx: "42"})
        assert await scope.prefix() == "42"

    Calling an unregistered key raises
    :class:`~lazycrate.exceptions.ProviderNotFoundError` under the strict
    policy and resolves to ``None`` otherwise.

    Keys starting with an underscore are only reachable with item access.
    """

    __slots__ = ("_registry", "_cache", "_options", "_observers", "_stats")

    def __init__(
        self,
        registry: Mapping[str, Provider],
        options: Optional[ScopeOptions] = None,
        observers: Optional[List[ScopeObserver]] = None,
    ) -> None:
        super().__init__(self._accessor)
        object.__setattr__(self, "_registry", MappingProxyType(_validate_registry(registry)))
        object.__setattr__(self, "_cache", CallSignatureCache())
        object.__setattr__(self, "_options", options or ScopeOptions())
        object.__setattr__(self, "_observers", list(observers or []))
        object.__setattr__(self, "_stats", ScopeStats(scope_id=_generate_scope_id()))

    def _accessor(self, key: str) -> Callable[..., Awaitable[Any]]:
        async def accessor(*args: Any, **kwargs: Any) -> Any:
            return await self._call(key, args, kwargs)

        accessor.__name__ = key
        accessor.__qualname__ = f"Scope.{key}"
        return accessor

    def _log(self, msg: str, *args: Any) -> None:
        _logger.debug("[%s] " + msg, self._stats.scope_id[:8], *args)

    async def _call(self, key: str, args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> Any:
        signature = canonicalize(key, args, kwargs)
        cache = self._cache

        hit, cached = cache.lookup(signature)
        if hit:
            self._stats.cache_hit_count += 1
            for o in self._observers:
                o.on_cache_hit(key)
            self._log("cache hit for %s", signature)
            return cached

        chain = _resolve_chain.get()
        provider = self._registry.get(key)
        if provider is None:
            origin = chain[-1].key if chain else None
            if self._options.strict:
                raise ProviderNotFoundError(key, origin)
            # Permissive: a typo in a dependency name surfaces as None at use time.
            LOGGER.warning("No provider registered for '%s'; resolving to None", key)
            return None

        if self._options.detect_cycles and signature in chain:
            raise CircularDependencyError(chain, signature, details=describe_cycle(chain, signature))

        single_flight = self._options.single_flight
        if single_flight:
            pending = cache.pending(signature)
            if pending is not None:
                self._stats.shared_count += 1
                self._log("joining in-flight construction of %s", signature)
                shared = await asyncio.shield(pending)
                if shared is not ABANDONED:
                    return shared
                self._log("construction of %s was cancelled; retrying", signature)
                return await self._call(key, args, kwargs)
            cache.begin(signature)

        token = _resolve_chain.set(chain + (signature,))
        t0 = time.perf_counter()
        try:
            value = await instantiate(self, provider, key, args, kwargs)
        except BaseException as e:
            if single_flight:
                cache.fail(signature, e)
            raise
        finally:
            _resolve_chain.reset(token)

        took_ms = (time.perf_counter() - t0) * 1000
        if single_flight:
            cache.complete(signature, value)
        else:
            cache.put(signature, value)
        self._stats.resolve_count += 1
        for o in self._observers:
            o.on_resolve(key, took_ms)
        self._log("resolved %s in %.2f ms", signature, took_ms)
        return value

    def __contains__(self, key: object) -> bool:
        return key in self._registry

    def __iter__(self) -> Iterator[str]:
        return iter(self._registry)

    def __len__(self) -> int:
        return len(self._registry)

    def __repr__(self) -> str:
        return f"<Scope {self._stats.scope_id[:8]} keys={list(self._registry)}>"
