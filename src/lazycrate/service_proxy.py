"""Method-style access to scoped services.

``ServiceProxy(scope, "joiner").join("Hello")`` resolves ``joiner`` through
the scope (cached as usual) and then calls its ``join`` method.
"""

import inspect
from typing import Any, Awaitable, Callable

from .exceptions import NotCallableMemberError


class ServiceProxy:
    """Forward method calls to a service that is resolved on first use.

    Args:
        scope: The scope that owns the service.
        key: The service key.
        *args: Call arguments for the service accessor.
        **kwargs: Keyword call arguments for the service accessor.

    Every attribute read returns an async callable. Calling it resolves the
    service, looks the member up and calls it, awaiting the result when it
    is awaitable.

    Raises:
        NotCallableMemberError: When the member exists but is not callable.
    """

    __slots__ = ("_scope", "_key", "_args", "_kwargs")

    def __init__(self, scope: Any, key: str, *args: Any, **kwargs: Any):
        object.__setattr__(self, "_scope", scope)
        object.__setattr__(self, "_key", key)
        object.__setattr__(self, "_args", args)
        object.__setattr__(self, "_kwargs", kwargs)

    async def _instance(self) -> Any:
        return await self._scope[self._key](*self._args, **self._kwargs)

    def __getattr__(self, name: str) -> Callable[..., Awaitable[Any]]:
        if name.startswith("__") and name.endswith("__"):
            raise AttributeError(name)

        async def call(*args: Any, **kwargs: Any) -> Any:
            instance = await self._instance()
            method = getattr(instance, name)
            if not callable(method):
                raise NotCallableMemberError(name, type(method).__name__)
            result = method(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
            return result

        call.__name__ = name
        return call

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("ServiceProxy is read-only")

    def __repr__(self) -> str:
        return f"<ServiceProxy {self._key}>"
