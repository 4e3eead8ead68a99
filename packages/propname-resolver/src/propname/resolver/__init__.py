__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from .core import Dispatch, Resolution, TypeResolver
from .bytecode import embedded_types, first_attribute

__all__ = ["Dispatch", "Resolution", "TypeResolver", "embedded_types", "first_attribute"]
