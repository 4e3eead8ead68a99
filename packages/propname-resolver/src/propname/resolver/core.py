import enum
import functools
import gc
import inspect
import logging
import sys
import types
from dataclasses import dataclass
from typing import Any, Iterator, List, MutableMapping, Optional, Tuple
from weakref import WeakKeyDictionary

from propname.proxy import ShapeInspector, is_final, own_annotations, type_hints, unwrap_stand_in
from propname.spec import AccessorRef, TypeResolverProtocol, UnsupportedTargetError

from .bytecode import embedded_types, first_attribute, first_parameter

log = logging.getLogger(__name__)

OBJECT_MEMBER_REASON = "Calling methods declared by object is unsupported"


class Dispatch(enum.Enum):
    # Call the accessor reference itself with the stand-in
    CALL = "call"
    # Read the member off the stand-in
    ATTRIBUTE = "attribute"
    # Call the member of the stand-in with no arguments
    METHOD = "method"


@dataclass(frozen=True)
class Resolution:
    owner: type
    member: Optional[str]
    dispatch: Dispatch = Dispatch.CALL

    def invoke(self, accessor: AccessorRef, stand_in: Any) -> Any:
        if self.dispatch is Dispatch.METHOD:
            return getattr(stand_in, self.member)()
        if self.dispatch is Dispatch.ATTRIBUTE:
            return getattr(stand_in, self.member)
        return accessor(stand_in)


def _wrapped_function(value: Any) -> Any:
    if isinstance(value, property):
        return value.fget
    if isinstance(value, functools.cached_property):
        return value.func
    if isinstance(value, (staticmethod, classmethod)):
        return value.__func__
    return value


def _find_in_namespace(cls: Any, func: Any) -> Optional[Tuple[type, str, Any]]:
    if not isinstance(cls, type):
        return None
    for key, value in cls.__dict__.items():
        if _wrapped_function(value) is func:
            return cls, key, value
    return None


def _classes_holding(func: Any) -> Iterator[type]:
    # Classes created in a local scope cannot be reached by qualified name;
    # find them through the garbage collector instead.
    holders = [func] + [
        r
        for r in gc.get_referrers(func)
        if isinstance(r, (property, functools.cached_property, staticmethod, classmethod))
    ]
    for holder in holders:
        for namespace in gc.get_referrers(holder):
            if not isinstance(namespace, dict):
                continue
            for cls in gc.get_referrers(namespace):
                if isinstance(cls, type):
                    yield cls


def declaration_of(func: types.FunctionType) -> Optional[Tuple[type, str, Any]]:
    """
    Finds the class whose namespace holds `func` (directly, or as the getter
    of a property) and returns `(class, attribute, raw namespace value)`.
    """
    parts = func.__qualname__.split(".")
    if len(parts) < 2 or parts[-1] == "<lambda>":
        return None

    if "<locals>" not in parts:
        obj: Any = sys.modules.get(func.__module__)
        for part in parts[:-1]:
            obj = getattr(obj, part, None)
            if obj is None:
                return None
        return _find_in_namespace(obj, func)

    for cls in _classes_holding(func):
        found = _find_in_namespace(cls, func)
        if found is not None:
            return found
    return None


def declares(cls: type, attribute: str) -> bool:
    for klass in cls.__mro__:
        if klass is object:
            return False
        if attribute in klass.__dict__ or attribute in own_annotations(klass):
            return True
    return False


def most_specific(candidates: List[type]) -> Optional[type]:
    for candidate in candidates:
        if all(issubclass(candidate, other) for other in candidates):
            return candidate
    return None


class TypeResolver(TypeResolverProtocol):
    """
    Turns an accessor reference into the class a stand-in must be built for.

    Resolutions are cached by code object, so every closure created from the
    same `lambda` or `def` is inspected once.
    """

    def __init__(
        self,
        inspector: Optional[ShapeInspector] = None,
        cache: Optional[MutableMapping[Any, Resolution]] = None,
    ):
        self.inspector = inspector or ShapeInspector()
        self.cache: MutableMapping[Any, Resolution] = (
            cache if cache is not None else WeakKeyDictionary()
        )

    def resolve(self, accessor: AccessorRef, owner: Optional[type] = None) -> Resolution:
        if owner is not None:
            owner = unwrap_stand_in(owner)

        if inspect.ismethod(accessor):
            return self._validate(self._resolve_bound(accessor, owner))

        func, dispatch = self._function_of(accessor)
        if owner is not None:
            return self._validate(self._infer(func, dispatch, owner))

        code = func.__code__
        resolution = self.cache.get(code)
        if resolution is None:
            resolution = self._validate(self._infer(func, dispatch, None))
            self.cache[code] = resolution
            log.debug(
                f"Resolved {func.__qualname__} to "
                f"{resolution.owner.__qualname__}.{resolution.member}"
            )
        return resolution

    # --- Accessor shapes ---

    def _function_of(self, accessor: Any) -> Tuple[types.FunctionType, Dispatch]:
        objclass = getattr(accessor, "__objclass__", None)
        if objclass is object:
            raise UnsupportedTargetError(accessor, OBJECT_MEMBER_REASON)
        if objclass is not None:
            raise UnsupportedTargetError(
                accessor, f"Cannot proxy {objclass!r}", getattr(accessor, "__name__", None)
            )

        if isinstance(accessor, (property, functools.cached_property)):
            func = _wrapped_function(accessor)
            if func is None:
                raise UnsupportedTargetError(accessor, "Property has no getter")
            return func, Dispatch.ATTRIBUTE

        if not isinstance(accessor, types.FunctionType):
            raise UnsupportedTargetError(
                accessor, f"Not an accessor reference: {accessor!r}"
            )
        return accessor, Dispatch.CALL

    def _resolve_bound(self, accessor: types.MethodType, owner: Optional[type]) -> Resolution:
        bound_to = accessor.__self__
        if isinstance(bound_to, type):
            raise UnsupportedTargetError(
                accessor, "Class methods are not accessors", accessor.__name__
            )
        return Resolution(
            owner or unwrap_stand_in(type(bound_to)), accessor.__name__, Dispatch.METHOD
        )

    # --- Inference ---

    def _parameter_hint(self, func: types.FunctionType) -> Optional[type]:
        param = first_parameter(func.__code__)
        if param is None:
            return None
        hint = self.inspector.unwrap(type_hints(func).get(param), {})
        hint = unwrap_stand_in(hint) if isinstance(hint, type) else hint
        return hint if isinstance(hint, type) else None

    def _infer(
        self, func: types.FunctionType, dispatch: Dispatch, owner: Optional[type]
    ) -> Resolution:
        declaration = declaration_of(func)
        if declaration is not None:
            return self._from_declaration(func, declaration, owner)

        member = first_attribute(func.__code__)
        if owner is not None:
            return Resolution(owner, member, dispatch)

        hint = self._parameter_hint(func)
        if hint is not None:
            return Resolution(hint, member, dispatch)

        if member is None:
            raise UnsupportedTargetError(
                func,
                f"Cannot infer the owner of {func.__qualname__}: it does not read "
                "an attribute of its first parameter. Annotate the parameter or "
                "pass owner=",
            )

        candidates = [
            t for t in embedded_types(func)
            if self.inspector.is_navigable(t) and declares(t, member)
        ]
        if not candidates:
            if member in vars(object):
                raise UnsupportedTargetError(func, OBJECT_MEMBER_REASON, member)
            raise UnsupportedTargetError(
                func,
                f"Cannot infer which class declares '{member}' for "
                f"{func.__qualname__}. Annotate the parameter or pass owner=",
                member,
            )

        chosen = most_specific(candidates)
        if chosen is None:
            names = ", ".join(sorted(c.__qualname__ for c in candidates))
            raise UnsupportedTargetError(
                func,
                f"'{member}' is declared by unrelated classes ({names}). "
                "Annotate the parameter or pass owner=",
                member,
            )
        return Resolution(chosen, member, dispatch)

    def _from_declaration(
        self,
        func: types.FunctionType,
        declaration: Tuple[type, str, Any],
        owner: Optional[type],
    ) -> Resolution:
        declaring, member, value = declaration
        if isinstance(value, (staticmethod, classmethod)):
            raise UnsupportedTargetError(
                func, f"{func.__qualname__} is a static or class method, not an accessor", member
            )
        if declaring is object:
            raise UnsupportedTargetError(func, OBJECT_MEMBER_REASON, member)

        if owner is not None:
            if not issubclass(owner, declaring):
                raise UnsupportedTargetError(
                    owner,
                    f"{owner.__qualname__} does not inherit '{member}' from "
                    f"{declaring.__qualname__}",
                    member,
                )
        else:
            # Types named in the member's own body never narrow the owner
            hint = self._parameter_hint(func)
            if hint is not None and issubclass(hint, declaring):
                owner = hint
            else:
                owner = declaring

        is_attribute = isinstance(value, (property, functools.cached_property))
        return Resolution(
            owner, member, Dispatch.ATTRIBUTE if is_attribute else Dispatch.METHOD
        )

    # --- Validation ---

    def _validate(self, resolution: Resolution) -> Resolution:
        owner, member = resolution.owner, resolution.member

        if member is not None:
            for klass in owner.__mro__:
                if member in klass.__dict__:
                    if klass is object:
                        raise UnsupportedTargetError(owner, OBJECT_MEMBER_REASON, member)
                    if is_final(klass.__dict__[member]):
                        raise UnsupportedTargetError(
                            owner,
                            f"'{klass.__qualname__}.{member}' is final and cannot be overridden",
                            member,
                        )
                    break

        if owner is object:
            raise UnsupportedTargetError(owner, OBJECT_MEMBER_REASON, member)
        if not self.inspector.is_navigable(owner):
            raise UnsupportedTargetError(owner, f"Cannot proxy {owner!r}", member)
        return resolution
