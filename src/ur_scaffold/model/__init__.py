"""Model subsystem -- named remote resources and their registry."""

from ur_scaffold.model.models import Model, QueryMapping, Scalar
from ur_scaffold.model.registry import ModelRegistry

__all__ = ["Model", "ModelRegistry", "QueryMapping", "Scalar"]
