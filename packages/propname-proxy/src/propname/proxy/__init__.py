__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from .shape import (
    AccessorKind,
    AccessorSpec,
    NamingPolicy,
    Navigation,
    NavKind,
    ShapeInspector,
    TargetType,
    is_final,
    is_stand_in,
    own_annotations,
    type_hints,
    unwrap_stand_in,
)
from .synth import ProxySynthesizer
from .registry import ProxyRegistry

__all__ = [
    "AccessorKind",
    "AccessorSpec",
    "NamingPolicy",
    "Navigation",
    "NavKind",
    "ShapeInspector",
    "TargetType",
    "is_final",
    "is_stand_in",
    "own_annotations",
    "type_hints",
    "unwrap_stand_in",
    "ProxySynthesizer",
    "ProxyRegistry",
]
