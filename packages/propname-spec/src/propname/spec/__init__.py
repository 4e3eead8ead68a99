# Namespace package support
__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from .errors import (
    PropertyNameError,
    UnsupportedTargetError,
    UnsupportedElementShapeError,
    NonAccessorInvokedError,
    ProxyConstructionError,
    EmptyPathError,
    StaleChainError,
)
from .protocols import (
    AccessorRef,
    PathContextProtocol,
    ProxyFactoryProtocol,
    ProxySynthesizerProtocol,
    ResolutionProtocol,
    TypeResolverProtocol,
)

__all__ = [
    "PropertyNameError",
    "UnsupportedTargetError",
    "UnsupportedElementShapeError",
    "NonAccessorInvokedError",
    "ProxyConstructionError",
    "EmptyPathError",
    "StaleChainError",
    "AccessorRef",
    "PathContextProtocol",
    "ProxyFactoryProtocol",
    "ProxySynthesizerProtocol",
    "ResolutionProtocol",
    "TypeResolverProtocol",
]
