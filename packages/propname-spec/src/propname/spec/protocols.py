from typing import Any, Callable, ContextManager, Optional, Protocol, Tuple, Union

# An accessor reference is any callable taking the property owner as its only
# argument: an unbound method, a lambda, a property object or a bound method.
AccessorRef = Union[Callable[[Any], Any], property]


class PathContextProtocol(Protocol):
    """
    Defines the contract for the Path Accumulator.

    Each execution context (thread or asyncio task) sees its own pending path.
    """

    def append(self, name: str) -> None:
        """
        Extends the pending path of the current context by one segment.
        Example: append("customer"); append("city") -> "customer.city"
        """
        ...

    def pending(self) -> Tuple[str, ...]:
        """
        Returns the segments recorded so far without consuming them.
        """
        ...

    def drain(self) -> str:
        """
        Returns the dot-joined pending path and clears it.

        Raises:
            EmptyPathError: If nothing was recorded.
        """
        ...

    def discard(self) -> Tuple[str, ...]:
        """
        Clears the pending path and returns what was discarded.
        """
        ...

    def scope(self) -> ContextManager["PathContextProtocol"]:
        """
        Binds a fresh, empty path for the duration of a `with` block and
        restores the previous one afterwards.
        """
        ...


class ProxyFactoryProtocol(Protocol):
    """
    Defines the contract for the Proxy Cache / Instance Pool.
    """

    def proxy(self, target: type) -> Any:
        """
        Returns the cached stand-in instance for `target`, synthesizing it on
        first use.
        """
        ...

    def proxy_type(self, target: type) -> type:
        """
        Returns the cached stand-in class for `target`.
        """
        ...


class ProxySynthesizerProtocol(Protocol):
    """
    Defines the contract for the Proxy Synthesizer.
    """

    def synthesize(self, target: type, factory: ProxyFactoryProtocol) -> type:
        """
        Produces a subclass of `target` whose accessors record their property
        name and whose other public methods fail loudly. Child stand-ins are
        obtained from `factory`.
        """
        ...

    def is_navigable(self, target: Any) -> bool:
        """
        Returns True if a stand-in can be synthesized for `target`.
        """
        ...


class ResolutionProtocol(Protocol):
    owner: type
    member: Optional[str]

    def invoke(self, accessor: AccessorRef, stand_in: Any) -> Any:
        """
        Performs the referenced access on `stand_in`.
        """
        ...


class TypeResolverProtocol(Protocol):
    """
    Defines the contract for the Type Resolver.
    """

    def resolve(
        self, accessor: AccessorRef, owner: Optional[type] = None
    ) -> ResolutionProtocol:
        """
        Determines the most specific overridable type owning the accessor.

        Args:
            accessor: The accessor reference to inspect.
            owner: Optional explicit owner type that bypasses inference.

        Raises:
            UnsupportedTargetError: If the owner is `object`, sealed, or
                cannot be determined.
        """
        ...
