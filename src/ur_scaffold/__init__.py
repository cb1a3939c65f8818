"""ur_scaffold -- client-side fetch and create coordination for REST resources.

A scaffold binds to a named model, fetches its collection over HTTP, merges
ad-hoc and paging query parameters, tracks loading/saving flags and runs
two-phase creates.

Public API::

    from ur_scaffold import ModelRegistry, ScaffoldProvider
    from ur_scaffold.transport import create_transport
    from ur_scaffold.loader import load_config_file
"""

from ur_scaffold.errors import (
    ConfigurationError,
    CreateCancelledError,
    CreateStateError,
    ModelNotFoundError,
    ScaffoldError,
    ScaffoldNotFoundError,
    TransportError,
)
from ur_scaffold.model import Model, ModelRegistry
from ur_scaffold.query import compose
from ur_scaffold.scaffold import CreateHandle, PaginatedScaffold, Scaffold, ScaffoldProvider

__all__ = [
    "ConfigurationError",
    "CreateCancelledError",
    "CreateHandle",
    "CreateStateError",
    "Model",
    "ModelNotFoundError",
    "ModelRegistry",
    "PaginatedScaffold",
    "Scaffold",
    "ScaffoldError",
    "ScaffoldNotFoundError",
    "ScaffoldProvider",
    "TransportError",
    "compose",
]
__version__ = "0.1.0"
