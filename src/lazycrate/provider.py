"""Top-level convenience wrapper around a scope."""

import time
from typing import Any, Dict, List, Mapping, Optional

from .config import ScopeOptions
from .scope import Provider, Scope, ScopeObserver, instantiate
from .service_proxy import ServiceProxy


class ScopeProvider:
    """Owns one :class:`~lazycrate.scope.Scope` and resolves ad-hoc providers against it.

    Args:
        registry: Mapping of service key to provider.
        options: Scope policies; defaults to :class:`~lazycrate.config.ScopeOptions`.
        observers: Objects notified on every resolution and cache hit.
    """

    def __init__(
        self,
        registry: Mapping[str, Provider],
        *,
        options: Optional[ScopeOptions] = None,
        observers: Optional[List[ScopeObserver]] = None,
    ) -> None:
        self._scope = Scope(registry, options=options, observers=observers)

    def scope(self) -> Scope:
        """Return the scope. It is created once and reused between calls."""
        return self._scope

    async def resolve(self, factory: Provider) -> Any:
        """Run *factory* through the two-phase protocol without caching its result.

        Useful for composing several services into a throwaway object::

            text = await provider.resolve(
                lambda ctx: ctx.decorator.invoke(lambda: f"{ctx.container.prefix}!")
            )

        The factory receives ``ctx.key is None`` and no call arguments. Its
        dependencies are cached in the scope as usual.
        """
        return await instantiate(self._scope, factory, None)

    def service(self, key: str, *args: Any, **kwargs: Any) -> ServiceProxy:
        """Method-style access to the service under *key*."""
        return ServiceProxy(self._scope, key, *args, **kwargs)

    def stats(self) -> Dict[str, Any]:
        st = self._scope._stats
        hits = st.cache_hit_count
        total = st.resolve_count + hits
        return {
            "scope_id": st.scope_id,
            "uptime_seconds": time.time() - st.created_at,
            "total_resolves": st.resolve_count,
            "cache_hits": hits,
            "shared_constructions": st.shared_count,
            "cache_hit_rate": (hits / total) if total > 0 else 0.0,
            "cached_signatures": len(self._scope._cache),
            "registered_keys": len(self._scope),
        }
