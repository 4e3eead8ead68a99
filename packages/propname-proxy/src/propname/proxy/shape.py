import datetime
import decimal
import enum
import fractions
import functools
import inspect
import logging
import numbers
import pathlib
import types
import typing
import uuid
from collections import abc
from dataclasses import InitVar, dataclass, field
from typing import (
    Any,
    ClassVar,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Mapping,
    Optional,
    Tuple,
    TypeVar,
    get_args,
    get_origin,
)

log = logging.getLogger(__name__)

# Stand-in classes carry their target under this attribute.
STAND_IN_ATTR = "__propname_target__"
SLOT_PREFIX = "_propname_slot_"

_Py_TPFLAGS_BASETYPE = 1 << 10
_MISSING = object()

BUILTIN_TERMINAL_TYPES: Tuple[type, ...] = (
    str,
    bytes,
    bytearray,
    memoryview,
    bool,
    numbers.Number,
    decimal.Decimal,
    fractions.Fraction,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    datetime.tzinfo,
    enum.Enum,
    uuid.UUID,
    pathlib.PurePath,
    type(None),
    type,
    # Closed collection and map kinds
    list,
    tuple,
    set,
    frozenset,
    dict,
    abc.Mapping,
    abc.Sequence,
    abc.Set,
)

# Declared collection shape -> container returned by the stand-in
COLLECTION_CONTAINERS: Dict[Any, type] = {
    list: list,
    abc.Sequence: list,
    abc.MutableSequence: list,
    abc.Collection: list,
    abc.Iterable: list,
    set: set,
    abc.Set: set,
    abc.MutableSet: set,
    frozenset: frozenset,
    tuple: tuple,
}

_DEFAULT_VALUES: Tuple[Tuple[type, Any], ...] = (
    (bool, False),
    (int, 0),
    (float, 0.0),
    (complex, 0j),
    (decimal.Decimal, decimal.Decimal(0)),
    (fractions.Fraction, fractions.Fraction(0)),
    (str, ""),
    (bytes, b""),
)

_UNION_ORIGINS = {typing.Union, getattr(types, "UnionType", typing.Union)}


def is_stand_in(cls: Any) -> bool:
    return isinstance(cls, type) and STAND_IN_ATTR in cls.__dict__


def unwrap_stand_in(cls: type) -> type:
    while is_stand_in(cls):
        cls = cls.__dict__[STAND_IN_ATTR]
    return cls


def is_final(member: Any) -> bool:
    if isinstance(member, property):
        member = member.fget
    elif isinstance(member, functools.cached_property):
        member = member.func
    return bool(getattr(member, "__final__", False))


def default_value(tp: Any) -> Any:
    """Zero value substituted for a terminal property."""
    if not isinstance(tp, type) or issubclass(tp, enum.Enum):
        return None
    for kind, value in _DEFAULT_VALUES:
        if issubclass(tp, kind):
            return value
    return None


def typevar_bindings(cls: type) -> Dict[Any, Any]:
    """
    Maps the type variables of generic base classes to the arguments `cls`
    binds them to, e.g. `class Address(AbstractEntity[int])` gives `{T: int}`.
    """
    bindings: Dict[Any, Any] = {}
    for klass in reversed(cls.__mro__):
        for base in klass.__dict__.get("__orig_bases__", ()):
            origin = get_origin(base)
            params = getattr(origin, "__parameters__", ())
            for param, arg in zip(params, get_args(base)):
                bindings[param] = arg
    return bindings


def own_annotations(obj: Any) -> Dict[str, Any]:
    try:
        return dict(inspect.get_annotations(obj))
    except TypeError:
        return {}
    except NameError:
        # Deferred annotations naming something that does not exist (yet)
        import annotationlib

        return dict(
            annotationlib.get_annotations(
                obj, format=annotationlib.Format.FORWARDREF
            )
        )


def type_hints(obj: Any) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(obj)
    except Exception as e:
        # Unresolvable forward references fall back to the raw annotations
        log.debug(f"Could not evaluate annotations of {obj!r}: {e}")
    return own_annotations(obj)


def _parameters(func: Any) -> List[inspect.Parameter]:
    try:
        return list(inspect.signature(func).parameters.values())
    except NameError:
        import annotationlib

        signature = inspect.signature(
            func, annotation_format=annotationlib.Format.FORWARDREF
        )
        return list(signature.parameters.values())


def class_hints(cls: type) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except Exception as e:
        log.debug(f"Could not evaluate annotations of {cls!r}: {e}")
    merged: Dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        merged.update(own_annotations(klass))
    return merged


class AccessorKind(enum.Enum):
    METHOD = "method"
    PROPERTY = "property"
    FIELD = "field"


class NavKind(enum.Enum):
    TERMINAL = "terminal"
    OBJECT = "object"
    COLLECTION = "collection"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class Navigation:
    kind: NavKind
    # OBJECT: the stand-in type; COLLECTION: the element type
    target: Optional[type] = None
    container: Optional[type] = None
    default: Any = None
    annotation: Any = None


@dataclass(frozen=True)
class AccessorSpec:
    attribute: str
    property_name: str
    kind: AccessorKind
    navigation: Navigation

    @property
    def slot(self) -> str:
        return f"{SLOT_PREFIX}{self.attribute}"


@dataclass(frozen=True)
class TargetType:
    cls: type
    accessors: Mapping[str, AccessorSpec] = field(default_factory=dict)
    refused: FrozenSet[str] = frozenset()

    def accessor(self, attribute: str) -> Optional[AccessorSpec]:
        return self.accessors.get(attribute)


@dataclass(frozen=True)
class NamingPolicy:
    """Getter naming convention: `get_x` / `getX` and `is_x` / `isX`."""

    getter_prefixes: Tuple[str, ...] = ("get",)
    boolean_prefixes: Tuple[str, ...] = ("is",)

    def _split(self, attribute: str) -> Optional[Tuple[str, str]]:
        prefixes = sorted(
            set(self.getter_prefixes) | set(self.boolean_prefixes),
            key=len,
            reverse=True,
        )
        for prefix in prefixes:
            if attribute.startswith(prefix) and len(attribute) > len(prefix):
                return prefix, attribute[len(prefix) :]
        return None

    def property_name(self, attribute: str) -> Optional[str]:
        split = self._split(attribute)
        if split is None:
            return None
        rest = split[1]
        if rest[0] == "_" and len(rest) > 1 and rest[1] != "_":
            # get_legal_name -> legal_name
            return rest[1:]
        if rest[0].isupper():
            # getLegalName -> legalName
            return rest[0].lower() + rest[1:]
        return None

    def is_boolean_getter(self, attribute: str) -> bool:
        split = self._split(attribute)
        return split is not None and split[0] in self.boolean_prefixes


class ShapeInspector:
    """
    Reads the structural shape of a class: which members are accessors, what
    they return, and which public methods must be refused on a stand-in.
    """

    def __init__(
        self,
        naming: Optional[NamingPolicy] = None,
        terminal_types: Iterable[type] = (),
    ):
        self.naming = naming or NamingPolicy()
        self.terminal_types: Tuple[type, ...] = BUILTIN_TERMINAL_TYPES + tuple(
            terminal_types
        )

    # --- Type predicates ---

    def is_overridable(self, cls: Any) -> bool:
        if not isinstance(cls, type):
            return False
        if not cls.__flags__ & _Py_TPFLAGS_BASETYPE:
            return False
        return not cls.__dict__.get("__final__", False)

    def is_terminal(self, cls: Any) -> bool:
        if not isinstance(cls, type):
            return True
        if issubclass(cls, self.terminal_types):
            return True
        return not self.is_overridable(cls)

    def is_navigable(self, cls: Any) -> bool:
        return isinstance(cls, type) and cls is not object and not self.is_terminal(cls)

    # --- Return type classification ---

    def unwrap(self, annotation: Any, bindings: Mapping[Any, Any]) -> Any:
        tp = annotation
        for _ in range(16):
            if isinstance(tp, TypeVar):
                if tp in bindings:
                    tp = bindings[tp]
                    continue
                return tp.__bound__ if tp.__bound__ is not None else tp
            if hasattr(tp, "__supertype__"):
                # typing.NewType
                tp = tp.__supertype__
                continue
            origin = get_origin(tp)
            if origin is typing.Annotated:
                tp = get_args(tp)[0]
                continue
            if origin in _UNION_ORIGINS:
                members = [a for a in get_args(tp) if a is not type(None)]
                if len(members) == 1:
                    tp = members[0]
                    continue
            return tp
        return tp

    def _element_of(self, origin: Any, args: Tuple[Any, ...]) -> Any:
        if origin is tuple:
            if len(args) == 2 and args[1] is Ellipsis:
                return args[0]
            if args and all(a == args[0] for a in args):
                return args[0]
            return _MISSING
        return args[0] if args else _MISSING

    def classify(self, annotation: Any, bindings: Mapping[Any, Any]) -> Navigation:
        tp = self.unwrap(annotation, bindings)
        if tp is _MISSING or tp is Any or isinstance(tp, (str, typing.ForwardRef)):
            return Navigation(NavKind.TERMINAL, annotation=annotation)

        origin = get_origin(tp)
        if origin in COLLECTION_CONTAINERS:
            element = self._element_of(origin, get_args(tp))
            if element is _MISSING:
                return Navigation(NavKind.UNRESOLVED, annotation=annotation)
            element = self.unwrap(element, bindings)
            if isinstance(element, TypeVar):
                return Navigation(NavKind.TERMINAL, annotation=annotation)
            element = get_origin(element) or element
            if not self.is_navigable(element):
                return Navigation(NavKind.TERMINAL, annotation=annotation)
            return Navigation(
                NavKind.COLLECTION,
                target=element,
                container=COLLECTION_CONTAINERS[origin],
                annotation=annotation,
            )
        if origin is not None:
            # User generics such as Box[int] navigate into Box
            tp = origin

        if tp in COLLECTION_CONTAINERS:
            # Bare list / set / Sequence: element type unknown
            return Navigation(NavKind.UNRESOLVED, annotation=annotation)
        if not self.is_navigable(tp):
            return Navigation(
                NavKind.TERMINAL, default=default_value(tp), annotation=annotation
            )
        return Navigation(NavKind.OBJECT, target=tp, annotation=annotation)

    # --- Member inspection ---

    def _accessor_method_name(
        self, attribute: str, func: Any, hints: Mapping[str, Any]
    ) -> Optional[str]:
        name = self.naming.property_name(attribute)
        if name is None:
            return None
        try:
            params = _parameters(func)
        except (TypeError, ValueError):
            return None
        if len(params) != 1 or params[0].kind not in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            return None

        returns = hints.get("return", _MISSING)
        if returns is None or returns is type(None):
            return None
        if self.naming.is_boolean_getter(attribute):
            unwrapped = self.unwrap(returns, {})
            if unwrapped is not _MISSING and unwrapped is not bool:
                return None
        return name

    def describe(self, cls: type) -> TargetType:
        bindings = typevar_bindings(cls)
        field_hints = class_hints(cls)
        accessors: Dict[str, AccessorSpec] = {}
        refused: List[str] = []
        seen = set()

        for klass in cls.__mro__:
            if klass is object or is_stand_in(klass):
                continue
            annotations = own_annotations(klass)
            names = list(klass.__dict__) + [
                a for a in annotations if a not in klass.__dict__
            ]

            for attribute in names:
                if attribute in seen:
                    continue
                seen.add(attribute)
                if attribute.startswith("_"):
                    # Private and dunder members are left untouched
                    continue

                value = klass.__dict__.get(attribute, _MISSING)
                spec: Optional[AccessorSpec] = None

                if isinstance(value, (staticmethod, classmethod)):
                    continue
                elif isinstance(value, property):
                    if value.fget is None:
                        continue
                    returns = type_hints(value.fget).get("return", _MISSING)
                    spec = AccessorSpec(
                        attribute,
                        attribute,
                        AccessorKind.PROPERTY,
                        self.classify(returns, bindings),
                    )
                elif isinstance(value, functools.cached_property):
                    returns = type_hints(value.func).get("return", _MISSING)
                    spec = AccessorSpec(
                        attribute,
                        attribute,
                        AccessorKind.PROPERTY,
                        self.classify(returns, bindings),
                    )
                elif inspect.isfunction(value):
                    hints = type_hints(value)
                    name = self._accessor_method_name(attribute, value, hints)
                    if name is None:
                        refused.append(attribute)
                        continue
                    spec = AccessorSpec(
                        attribute,
                        name,
                        AccessorKind.METHOD,
                        self.classify(hints.get("return", _MISSING), bindings),
                    )
                elif attribute in annotations:
                    annotation = field_hints.get(attribute, annotations[attribute])
                    if get_origin(annotation) is ClassVar or annotation is ClassVar:
                        continue
                    if isinstance(annotation, InitVar):
                        continue
                    spec = AccessorSpec(
                        attribute,
                        attribute,
                        AccessorKind.FIELD,
                        self.classify(annotation, bindings),
                    )
                else:
                    continue

                accessors[attribute] = spec

        log.debug(
            f"Described {cls.__qualname__}: "
            f"{len(accessors)} accessors, {len(refused)} refused methods"
        )
        return TargetType(cls, accessors, frozenset(refused))
