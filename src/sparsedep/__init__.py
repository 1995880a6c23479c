from .build import Build
from .dag import BuildGraph, is_reachable, run_graph
from .errors import (
    CircularDependencyDetected,
    ConfigurationError,
    ExecutableNotFound,
    MissingDependencyEdge,
    NoSearchPath,
    PreconditionFailure,
    StepFailure,
)
from .model import BuildNode, SparseCheckoutOptions
from .step_workflows.sparse_checkout import SparseCheckoutStep

__all__ = [
    "Build",
    "BuildGraph",
    "BuildNode",
    "CircularDependencyDetected",
    "ConfigurationError",
    "ExecutableNotFound",
    "MissingDependencyEdge",
    "NoSearchPath",
    "PreconditionFailure",
    "SparseCheckoutOptions",
    "SparseCheckoutStep",
    "StepFailure",
    "is_reachable",
    "run_graph",
]
