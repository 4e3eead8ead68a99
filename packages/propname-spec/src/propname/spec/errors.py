from typing import Any, Optional


class PropertyNameError(Exception):
    """Raised whenever generating a property name fails."""

    pass


class UnsupportedTargetError(PropertyNameError):
    def __init__(self, target: Any, reason: str, member: Optional[str] = None):
        self.target = target
        self.member = member
        self.reason = reason
        super().__init__(reason)


class UnsupportedElementShapeError(PropertyNameError):
    def __init__(self, owner: type, member: str, annotation: Any):
        self.owner = owner
        self.member = member
        self.annotation = annotation
        super().__init__(
            f"Unsupported collection element type for "
            f"'{owner.__qualname__}.{member}': {annotation!r}"
        )


class NonAccessorInvokedError(PropertyNameError):
    def __init__(self, owner: type, member: str):
        self.owner = owner
        self.member = member
        super().__init__(
            f"'{owner.__qualname__}.{member}' is not a readable property "
            "and cannot be called on a property name stand-in"
        )


class ProxyConstructionError(PropertyNameError):
    def __init__(self, target: type, stage: str = "instantiate"):
        self.target = target
        self.stage = stage
        super().__init__(f"Could not {stage} proxy for {target.__qualname__}")


class EmptyPathError(PropertyNameError):
    def __init__(self):
        super().__init__(
            "No property was recorded. "
            "Make sure the chain calls at least one public accessor."
        )


class StaleChainError(PropertyNameError):
    def __init__(self, pending: str):
        self.pending = pending
        super().__init__(
            f"A new property chain was started while '{pending}' was still unread"
        )
