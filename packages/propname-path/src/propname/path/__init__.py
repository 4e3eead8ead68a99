__path__ = __import__("pkgutil").extend_path(__path__, __name__)

from .context import PathContext

__all__ = ["PathContext"]
