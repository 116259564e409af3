"""
Transformation registry.

The orchestrator draws from TRANSFORMATIONS: kind -> class implementing
the MetamorphicTransformation interface. Adding a transformation means
writing the class and adding it here; nothing else dispatches on kinds.

NameRules and SelectOutputPredicate prepare a program once before the
random rounds start and are not part of the registry.
"""

from .base import MetamorphicTransformation
from .add_relational_node import AddRelationalNode
from .add_fact_node_and_edge import AddFactNodeAndEdge
from .name_rules import NameRules
from .select_output import SelectOutputPredicate


TRANSFORMATIONS = {
    AddRelationalNode.kind:  AddRelationalNode,
    AddFactNodeAndEdge.kind: AddFactNodeAndEdge,
}

__all__ = [
    "MetamorphicTransformation", "TRANSFORMATIONS",
    "AddRelationalNode", "AddFactNodeAndEdge",
    "NameRules", "SelectOutputPredicate",
]
