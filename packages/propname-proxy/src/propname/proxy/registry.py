import logging
import threading
from typing import Any, MutableMapping
from weakref import WeakKeyDictionary

from propname.spec import (
    PathContextProtocol,
    ProxyConstructionError,
    ProxyFactoryProtocol,
    UnsupportedTargetError,
)

from .shape import unwrap_stand_in
from .synth import ProxySynthesizer

log = logging.getLogger(__name__)


class ProxyRegistry(ProxyFactoryProtocol):
    """
    Owns every cache of the property name machinery:

    - target class -> stand-in class
    - target class -> stand-in instance
    - accessor code object -> resolved owner (filled by the TypeResolver)
    - accessor reference -> final path (filled by `name_of`)

    All tables are weakly keyed, so the registry never keeps a user class
    or accessor alive on its own.
    """

    def __init__(self, synthesizer: ProxySynthesizer):
        self.synthesizer = synthesizer
        self._lock = threading.RLock()
        self._types: MutableMapping[type, type] = WeakKeyDictionary()
        self._instances: MutableMapping[type, Any] = WeakKeyDictionary()
        self.resolutions: MutableMapping[Any, Any] = WeakKeyDictionary()
        self.names: MutableMapping[Any, str] = WeakKeyDictionary()

    @property
    def context(self) -> PathContextProtocol:
        return self.synthesizer.context

    def _check_navigable(self, target: type) -> None:
        if target is object:
            raise UnsupportedTargetError(
                target, "Calling methods declared by object is unsupported"
            )
        if not self.synthesizer.is_navigable(target):
            raise UnsupportedTargetError(target, f"Cannot proxy {target!r}")

    def _proxy_type_locked(self, target: type) -> type:
        stand_in = self._types.get(target)
        if stand_in is None:
            stand_in = self.synthesizer.synthesize(target, self)
            self._types[target] = stand_in
        return stand_in

    def proxy_type(self, target: type) -> type:
        target = unwrap_stand_in(target)
        stand_in = self._types.get(target)
        if stand_in is not None:
            return stand_in

        self._check_navigable(target)
        with self._lock:
            return self._proxy_type_locked(target)

    def proxy(self, target: type) -> Any:
        target = unwrap_stand_in(target)
        instance = self._instances.get(target)
        if instance is not None:
            return instance

        self._check_navigable(target)
        with self._lock:
            # Another thread may have published while we waited
            instance = self._instances.get(target)
            if instance is None:
                stand_in = self._proxy_type_locked(target)
                try:
                    instance = object.__new__(stand_in)
                except TypeError as e:
                    raise ProxyConstructionError(target) from e
                self._instances[target] = instance
                log.debug(f"Published stand-in for {target.__qualname__}")
        return instance

    def clear(self) -> None:
        with self._lock:
            self._types.clear()
            self._instances.clear()
            self.resolutions.clear()
            self.names.clear()

    def __len__(self) -> int:
        return len(self._instances)
