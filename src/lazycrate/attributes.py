"""Dynamic attribute resolution.

:class:`LazyNamespace` synthesizes a value the first time a name is read,
memoizes it, and serves later reads from the memo. The scope and the snooping
container are both built on it.
"""

from typing import Any, Callable, Dict, Iterator, Mapping, Tuple, Union

Producer = Callable[[str], Any]


def _is_dunder(name: str) -> bool:
    return len(name) > 4 and name.startswith("__") and name.endswith("__")


class LazyNamespace:
    """Object whose attributes are produced on first access.

    Args:
        producer: Either a callable taking the accessed name and returning the
            value, or a mapping of names to zero-argument callables. With a
            mapping, names outside it raise ``AttributeError``.

    Reading ``ns.name`` or ``ns["name"]`` returns the memoized value for
    ``name``, invoking the producer only on the first read. Dunder names never
    reach the producer.

    Awaiting a namespace is harmless: it produces nothing and resolves to the
    namespace itself::

        scope = create_scope(registry)
        assert (await scope) is scope
    """

    __slots__ = ("_producer", "_values")

    def __init__(self, producer: Union[Producer, Mapping[str, Callable[[], Any]]]):
        if isinstance(producer, Mapping):
            table = dict(producer)

            def produce(name: str) -> Any:
                try:
                    factory = table[name]
                except KeyError:
                    raise AttributeError(name) from None
                return factory()

            producer = produce
        elif not callable(producer):
            raise TypeError("LazyNamespace producer must be a callable or a mapping")
        object.__setattr__(self, "_producer", producer)
        object.__setattr__(self, "_values", {})

    def _lookup(self, name: str) -> Any:
        values: Dict[str, Any] = object.__getattribute__(self, "_values")
        if name in values:
            return values[name]
        value = object.__getattribute__(self, "_producer")(name)
        values[name] = value
        return value

    def __getattr__(self, name: str) -> Any:
        if _is_dunder(name):
            raise AttributeError(name)
        return self._lookup(name)

    def __getitem__(self, name: str) -> Any:
        if not isinstance(name, str):
            raise TypeError(f"Attribute names must be strings, not {type(name).__name__}")
        return self._lookup(name)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is read-only")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is read-only")

    def __await__(self) -> Iterator[Any]:
        return self
        yield  # pragma: no cover


def produced_names(namespace: LazyNamespace) -> Tuple[str, ...]:
    """Names a namespace has produced so far, in first-access order.

    A module-level function so that no method name shadows a produced name.
    """
    return tuple(object.__getattribute__(namespace, "_values"))
