"""Exception hierarchy for lazycrate.

All engine-specific exceptions inherit from :class:`LazyCrateError`, making it
easy to catch any lazycrate error with a single ``except LazyCrateError``
clause. Several of them also derive from the built-in exception a caller
would naturally expect (``LookupError``, ``TypeError``, ``AttributeError``).

Exceptions raised by providers themselves are never wrapped.
"""

from typing import Any, Optional, Sequence


class LazyCrateError(Exception):
    """Base exception for all lazycrate errors."""

    pass


class ProviderNotFoundError(LazyCrateError, LookupError):
    """Raised when a scope is asked for a key that has no registered provider.

    Only raised under the strict missing-key policy.

    Attributes:
        key: The service key that was not found.
        origin: The key of the provider that requested it, if any.
    """

    def __init__(self, key: Any, origin: Optional[Any] = None):
        origin_name = str(origin) if origin is not None else "scope"
        super().__init__(f"Provider for key '{key}' has not been registered (required by: '{origin_name}')")
        self.key = key
        self.origin = origin


class InvalidRegistryError(LazyCrateError, TypeError):
    """Raised when a registry contains non-string keys or non-callable providers.

    Attributes:
        errors: List of human-readable error descriptions.
    """

    def __init__(self, errors: Sequence[str]):
        super().__init__("Invalid registry:\n" + "\n".join(f"- {e}" for e in errors))
        self.errors = list(errors)


class UndiscoveredDependencyError(LazyCrateError, AttributeError, KeyError):
    """Raised when a provider reads a container key it did not read during discovery.

    Attributes:
        key: The key that was read.
        available: The keys recorded during the discovery pass.
    """

    def __init__(self, key: Any, available: Sequence[str] = ()):
        listing = ", ".join(available) if available else "none"
        super().__init__(
            f"Dependency '{key}' was not read during discovery (discovered: {listing}). "
            "Read it unconditionally from the container, or resolve it through the scope."
        )
        self.key = key
        self.available = tuple(available)

    def __str__(self) -> str:
        return str(self.args[0])


class CircularDependencyError(LazyCrateError):
    """Raised when resolving a call signature requires that same signature.

    Attributes:
        chain: The signatures being resolved when the cycle was found.
        key: The signature that closed the cycle.
        details: A multi-line, human-readable description of the chain.
    """

    def __init__(self, chain: Sequence[Any], key: Any, details: Optional[str] = None):
        path = " -> ".join(str(k) for k in (*chain, key))
        super().__init__(details or f"Circular dependency detected: {path}")
        self.chain = tuple(chain)
        self.key = key
        self.details = details


class SignatureError(LazyCrateError, TypeError):
    """Raised when call arguments cannot be turned into a stable cache signature."""

    def __init__(self, msg: str):
        super().__init__(msg)


class NotCallableMemberError(LazyCrateError, TypeError):
    """Raised when a method-style call targets a service member that is not callable.

    Attributes:
        name: The member name.
        kind: The type name of the member's actual value.
    """

    def __init__(self, name: str, kind: str):
        super().__init__(f"Member '{name}' is not a function ({kind})")
        self.name = name
        self.kind = kind


class ConfigurationError(LazyCrateError):
    """Raised when scope options are given invalid values."""

    def __init__(self, msg: str):
        super().__init__(msg)
