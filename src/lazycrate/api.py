from typing import List, Mapping, Optional

from .config import ScopeOptions
from .scope import Provider, Scope, ScopeObserver
from .provider import ScopeProvider


def create_scope(
    registry: Mapping[str, Provider],
    *,
    options: Optional[ScopeOptions] = None,
    observers: Optional[List[ScopeObserver]] = None,
) -> Scope:
    """Create the scope for *registry*.

    Raises:
        InvalidRegistryError: If a key is not a string or a provider is not callable.
    """
    return Scope(registry, options=options, observers=observers)


def create(
    registry: Mapping[str, Provider],
    *,
    options: Optional[ScopeOptions] = None,
    observers: Optional[List[ScopeObserver]] = None,
) -> ScopeProvider:
    return ScopeProvider(registry, options=options, observers=observers)


inject = create_scope
