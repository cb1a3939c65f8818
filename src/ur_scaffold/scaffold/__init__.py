"""Scaffold subsystem -- fetch/create coordinators and their provider."""

from ur_scaffold.scaffold.deferred import CreateHandle, CreateState
from ur_scaffold.scaffold.models import PaginateOptions, ScaffoldOptions
from ur_scaffold.scaffold.pagination import PaginatedScaffold, PaginationState
from ur_scaffold.scaffold.provider import ScaffoldProvider
from ur_scaffold.scaffold.scaffold import Scaffold
from ur_scaffold.scaffold.state import UIState

__all__ = [
    "CreateHandle",
    "CreateState",
    "PaginateOptions",
    "PaginatedScaffold",
    "PaginationState",
    "Scaffold",
    "ScaffoldOptions",
    "ScaffoldProvider",
    "UIState",
]
