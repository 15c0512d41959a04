# lazycrate/__init__.py
from ._version import __version__

from .api import create, create_scope, inject
from .attributes import LazyNamespace
from .config import ScopeOptions
from .decorators import InvocationDecorator, InvocationMode, discovery_decorator, real_decorator
from .exceptions import (
    CircularDependencyError,
    ConfigurationError,
    InvalidRegistryError,
    LazyCrateError,
    NotCallableMemberError,
    ProviderNotFoundError,
    SignatureError,
    UndiscoveredDependencyError,
)
from .provider import ScopeProvider
from .scope import InjectionContext, Scope, ScopeObserver
from .service_proxy import ServiceProxy
from .signature import CallSignature, canonicalize
from .snooper import UNRESOLVED, SnoopingContainer, SubContainer, new_snooper

__all__ = [
    "__version__",
    "create",
    "create_scope",
    "inject",
    "Scope",
    "ScopeProvider",
    "ScopeObserver",
    "InjectionContext",
    "ScopeOptions",
    "InvocationDecorator",
    "InvocationMode",
    "discovery_decorator",
    "real_decorator",
    "LazyNamespace",
    "new_snooper",
    "SubContainer",
    "SnoopingContainer",
    "UNRESOLVED",
    "CallSignature",
    "canonicalize",
    "ServiceProxy",
    "LazyCrateError",
    "ProviderNotFoundError",
    "InvalidRegistryError",
    "UndiscoveredDependencyError",
    "CircularDependencyError",
    "SignatureError",
    "NotCallableMemberError",
    "ConfigurationError",
]
