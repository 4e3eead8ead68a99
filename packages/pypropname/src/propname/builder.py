import functools
import logging
import types
from pathlib import Path
from typing import Any, ContextManager, Iterable, Optional

from propname.config import PropertyNameConfig, load_config_from_path, load_terminal_types
from propname.path import PathContext
from propname.proxy import NamingPolicy, ProxyRegistry, ProxySynthesizer, ShapeInspector
from propname.resolver import TypeResolver
from propname.spec import (
    AccessorRef,
    PathContextProtocol,
    PropertyNameError,
    StaleChainError,
    TypeResolverProtocol,
)

log = logging.getLogger(__name__)


def _name_cache_key(accessor: Any) -> Any:
    if isinstance(accessor, property):
        return accessor.fget
    if isinstance(accessor, functools.cached_property):
        return accessor.func
    if isinstance(accessor, types.MethodType):
        return accessor.__func__
    if isinstance(accessor, types.FunctionType):
        return accessor
    return None


class PropertyNames:
    """
    Derives refactoring-safe property paths from accessor references.

        names = PropertyNames()
        names.name(names.of(Contract.getCustomer).getLegalName())
        # -> "customer.legalName"

    Every collaborator can be injected; by default each builder owns its own
    registry and path context, so independent builders never share state.
    """

    def __init__(
        self,
        config: Optional[PropertyNameConfig] = None,
        registry: Optional[ProxyRegistry] = None,
        resolver: Optional[TypeResolverProtocol] = None,
        context: Optional[PathContextProtocol] = None,
    ):
        self.config = config or PropertyNameConfig()

        if registry is None:
            inspector = ShapeInspector(
                NamingPolicy(
                    tuple(self.config.getter_prefixes),
                    tuple(self.config.boolean_prefixes),
                ),
                load_terminal_types(self.config.terminal_types),
            )
            registry = ProxyRegistry(ProxySynthesizer(context or PathContext(), inspector))
        elif context is not None and context is not registry.context:
            raise ValueError("context must be the one the registry records into")

        self.registry = registry
        self.context: PathContextProtocol = registry.context
        self.resolver = resolver or TypeResolver(
            registry.synthesizer.inspector, registry.resolutions
        )

    @classmethod
    def from_path(cls, search_path: Path) -> "PropertyNames":
        return cls(config=load_config_from_path(search_path))

    def _begin_chain(self) -> None:
        pending = self.context.pending()
        if not pending:
            return

        stale = ".".join(pending)
        self.context.discard()
        if self.config.stale_chain == "raise":
            raise StaleChainError(stale)
        if self.config.stale_chain == "warn":
            log.warning(
                f"Discarding unread property path '{stale}'. "
                "Read each chain with name() before starting the next one."
            )

    def of(self, target: Any, owner: Optional[type] = None) -> Any:
        """
        Begins a chain. Given a class, returns its stand-in; given an accessor
        reference, performs the referenced access on the owner's stand-in and
        returns the result so the chain can continue.
        """
        self._begin_chain()
        if isinstance(target, type):
            return self.registry.proxy(target)

        resolution = self.resolver.resolve(target, owner)
        stand_in = self.registry.proxy(resolution.owner)
        try:
            return resolution.invoke(target, stand_in)
        except Exception:
            # A failed chain must not leak into the next one
            self.context.discard()
            raise

    def any_(self, collection: Iterable[Any]) -> Any:
        """Returns the element stand-in of a collection returned by a stand-in."""
        for element in collection:
            return element
        raise PropertyNameError(
            "any_() expects the single-element collection returned by a stand-in"
        )

    def name(self, last: Any = None) -> str:
        """Drains and returns the path recorded by the current chain."""
        return self.context.drain()

    def name_of(self, accessor: AccessorRef, owner: Optional[type] = None) -> str:
        """
        Single-step form of `name(of(accessor))`. The path is cached per
        accessor reference unless an explicit owner is given.
        """
        key = None
        if owner is None and self.config.cache_names:
            key = _name_cache_key(accessor)
        if key is not None:
            cached = self.registry.names.get(key)
            if cached is not None:
                return cached

        with self.context.scope():
            self.of(accessor, owner)
            path = self.context.drain()

        if key is not None:
            self.registry.names[key] = path
        return path

    def recording(self) -> ContextManager[PathContextProtocol]:
        """Binds a fresh path for the duration of a `with` block."""
        return self.context.scope()
