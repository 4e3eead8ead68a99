__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from .loader import (
    PropertyNameConfig,
    STALE_CHAIN_POLICIES,
    build_config,
    load_config_from_path,
    load_terminal_types,
)

__all__ = [
    "PropertyNameConfig",
    "STALE_CHAIN_POLICIES",
    "build_config",
    "load_config_from_path",
    "load_terminal_types",
]
