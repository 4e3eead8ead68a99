import logging
import types
from typing import Any, Callable, Dict, Optional

from propname.spec import (
    NonAccessorInvokedError,
    PathContextProtocol,
    ProxyConstructionError,
    ProxyFactoryProtocol,
    ProxySynthesizerProtocol,
    UnsupportedElementShapeError,
)

from .shape import (
    STAND_IN_ATTR,
    AccessorKind,
    AccessorSpec,
    NavKind,
    ShapeInspector,
    TargetType,
)

log = logging.getLogger(__name__)

STAND_IN_SUFFIX = "$StandIn"


def _stand_in_repr(self) -> str:
    cls = type(self)
    return f"{cls.__module__}.{cls.__qualname__}@{id(self):x}"


def _stand_in_eq(self, other: Any) -> bool:
    return self is other


def _stand_in_ne(self, other: Any) -> bool:
    return self is not other


def _stand_in_hash(self) -> int:
    return object.__hash__(self)


# Identity-based replacements for the root object protocol
IDENTITY_MEMBERS: Dict[str, Callable[..., Any]] = {
    "__repr__": _stand_in_repr,
    "__str__": _stand_in_repr,
    "__eq__": _stand_in_eq,
    "__ne__": _stand_in_ne,
    "__hash__": _stand_in_hash,
}


class ProxySynthesizer(ProxySynthesizerProtocol):
    """
    Builds stand-in subclasses whose accessors record their property name on
    a PathContext instead of computing a value.
    """

    def __init__(
        self,
        context: PathContextProtocol,
        inspector: Optional[ShapeInspector] = None,
    ):
        self.context = context
        self.inspector = inspector or ShapeInspector()

    def is_navigable(self, target: Any) -> bool:
        return self.inspector.is_navigable(target)

    def describe(self, target: type) -> TargetType:
        return self.inspector.describe(target)

    def synthesize(self, target: type, factory: ProxyFactoryProtocol) -> type:
        shape = self.describe(target)
        namespace: Dict[str, Any] = {}

        for spec in shape.accessors.values():
            namespace[spec.attribute] = self._make_accessor(shape, spec, factory)
        for attribute in shape.refused:
            namespace[attribute] = self._make_refusal(shape.cls, attribute)

        namespace.update(IDENTITY_MEMBERS)
        namespace[STAND_IN_ATTR] = target
        namespace["__module__"] = target.__module__
        namespace["__qualname__"] = f"{target.__qualname__}{STAND_IN_SUFFIX}"
        namespace["__doc__"] = f"Property name stand-in for {target.__qualname__}."

        try:
            stand_in = types.new_class(
                f"{target.__name__}{STAND_IN_SUFFIX}",
                (target,),
                exec_body=lambda ns: ns.update(namespace),
            )
            if getattr(stand_in, "__abstractmethods__", None):
                # Every abstract accessor is overridden; the rest must not block allocation
                stand_in.__abstractmethods__ = frozenset()
        except Exception as e:
            raise ProxyConstructionError(target, "synthesize") from e

        log.debug(
            f"Synthesized {stand_in.__qualname__} "
            f"({len(shape.accessors)} accessors, {len(shape.refused)} refused)"
        )
        return stand_in

    def _make_accessor(
        self, shape: TargetType, spec: AccessorSpec, factory: ProxyFactoryProtocol
    ) -> Any:
        record = self._make_recorder(shape.cls, spec, factory)
        if spec.kind is AccessorKind.METHOD:

            def accessor(self):
                return record(self)

            accessor.__name__ = spec.attribute
            accessor.__qualname__ = (
                f"{shape.cls.__qualname__}{STAND_IN_SUFFIX}.{spec.attribute}"
            )
            return accessor

        return property(record, doc=f"Records '{spec.property_name}'.")

    def _make_recorder(
        self, owner: type, spec: AccessorSpec, factory: ProxyFactoryProtocol
    ) -> Callable[[Any], Any]:
        context = self.context
        navigation = spec.navigation
        name = spec.property_name
        slot = spec.slot

        if navigation.kind is NavKind.UNRESOLVED:

            def record(stand_in):
                raise UnsupportedElementShapeError(
                    owner, spec.attribute, navigation.annotation
                )

        elif navigation.kind is NavKind.TERMINAL:
            default = navigation.default

            def record(stand_in):
                context.append(name)
                return default

        elif navigation.kind is NavKind.OBJECT:
            target = navigation.target

            def record(stand_in):
                context.append(name)
                slots = vars(stand_in)
                child = slots.get(slot)
                if child is None:
                    child = slots.setdefault(slot, factory.proxy(target))
                return child

        else:
            element = navigation.target
            container = navigation.container

            def record(stand_in):
                context.append(name)
                slots = vars(stand_in)
                child = slots.get(slot)
                if child is None:
                    child = slots.setdefault(
                        slot, container((factory.proxy(element),))
                    )
                return child

        return record

    def _make_refusal(self, owner: type, attribute: str) -> Callable[..., Any]:
        def refuse(self, *args, **kwargs):
            raise NonAccessorInvokedError(owner, attribute)

        refuse.__name__ = attribute
        refuse.__qualname__ = f"{owner.__qualname__}{STAND_IN_SUFFIX}.{attribute}"
        return refuse
