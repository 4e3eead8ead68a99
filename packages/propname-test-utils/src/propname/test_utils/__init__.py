from .project import ProjectFactory
from . import models

__all__ = ["ProjectFactory", "models"]
