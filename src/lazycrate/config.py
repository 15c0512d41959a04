"""Scope options."""

from dataclasses import dataclass, fields

from .exceptions import ConfigurationError


@dataclass(frozen=True)
class ScopeOptions:
    """Policies applied by a scope.

    Attributes:
        strict: Calling an unregistered key raises
            :class:`~lazycrate.exceptions.ProviderNotFoundError`. When
            ``False`` the call resolves to ``None`` instead.
        single_flight: Concurrent calls with the same signature share one
            construction. When ``False`` each concurrent miss constructs on
            its own and the last to finish owns the cache entry.
        detect_cycles: A call that needs its own signature raises
            :class:`~lazycrate.exceptions.CircularDependencyError`.

    Raises:
        ConfigurationError: If an option is not a ``bool``.
    """

    strict: bool = True
    single_flight: bool = True
    detect_cycles: bool = True

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, bool):
                raise ConfigurationError(f"Option '{f.name}' expects a bool, got {value!r}")
