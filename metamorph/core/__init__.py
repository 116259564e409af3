from .lattice import Ancestry, Sign, TransformationType
from .registry import NameRegistry, MAX_ATTEMPTS
from .graph import (
    RelationalNode, FactNode, RelationalEdge, FactEdge,
    AnnotatedDependencyGraph, build,
)
from .propagate import propagate

__all__ = [
    "Ancestry", "Sign", "TransformationType",
    "NameRegistry", "MAX_ATTEMPTS",
    "RelationalNode", "FactNode", "RelationalEdge", "FactEdge",
    "AnnotatedDependencyGraph", "build",
    "propagate",
]
