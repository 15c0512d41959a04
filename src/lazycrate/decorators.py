"""Invocation decorators handed to providers.

A provider produces its final value through ``ctx.decorator.invoke(factory)``.
During discovery the decorator never calls the factory; during the real pass
it calls the factory with the accessor's call arguments.
"""

import inspect
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from .snooper import UNRESOLVED


class InvocationMode(Enum):
    DISCOVERY = "discovery"
    REAL = "real"


class InvocationDecorator:
    """Controls whether a provider's factory actually runs.

    Attributes:
        mode: :attr:`InvocationMode.DISCOVERY` or :attr:`InvocationMode.REAL`.
        args: Positional call arguments forwarded to the factory.
        kwargs: Keyword call arguments forwarded to the factory.
    """

    __slots__ = ("mode", "args", "kwargs")

    def __init__(self, mode: InvocationMode, args: Tuple[Any, ...] = (), kwargs: Optional[Dict[str, Any]] = None):
        self.mode = mode
        self.args = tuple(args)
        self.kwargs = dict(kwargs or {})

    async def invoke(self, factory: Callable[..., Any]) -> Any:
        """Produce the provider's value from *factory*.

        Returns :data:`~lazycrate.snooper.UNRESOLVED` without calling
        *factory* in discovery mode. In real mode returns
        ``factory(*args, **kwargs)``, awaited when it is awaitable.
        """
        if self.mode is InvocationMode.DISCOVERY:
            return UNRESOLVED
        if self.mode is InvocationMode.REAL:
            result = factory(*self.args, **self.kwargs)
            if inspect.isawaitable(result):
                result = await result
            return result
        raise ValueError(f"Unknown invocation mode: {self.mode!r}")

    def __repr__(self) -> str:
        return f"InvocationDecorator(mode={self.mode.value}, args={self.args!r}, kwargs={self.kwargs!r})"


def discovery_decorator() -> InvocationDecorator:
    return InvocationDecorator(InvocationMode.DISCOVERY)


def real_decorator(args: Tuple[Any, ...] = (), kwargs: Optional[Dict[str, Any]] = None) -> InvocationDecorator:
    return InvocationDecorator(InvocationMode.REAL, args, kwargs)

