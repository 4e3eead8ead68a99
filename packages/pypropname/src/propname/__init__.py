# Namespace package support
__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from propname.spec import (
    PropertyNameError,
    UnsupportedTargetError,
    UnsupportedElementShapeError,
    NonAccessorInvokedError,
    ProxyConstructionError,
    EmptyPathError,
    StaleChainError,
)
from .builder import PropertyNames
from .runtime import names, of, any_, name, name_of, recording

__all__ = [
    "PropertyNames",
    "names",
    "of",
    "any_",
    "name",
    "name_of",
    "recording",
    "PropertyNameError",
    "UnsupportedTargetError",
    "UnsupportedElementShapeError",
    "NonAccessorInvokedError",
    "ProxyConstructionError",
    "EmptyPathError",
    "StaleChainError",
]
