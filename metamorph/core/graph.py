"""
The Annotated Dependency Graph (ADG).

A directed multigraph with two kinds of nodes and two kinds of edges:

    RelationalNode  one per predicate; carries inverse stratum and ancestry
    FactNode        one per fact or import; a source of tuples

    RelationalEdge  body predicate -> head predicate, signed, one per
                    (body literal, head atom) pair of every rule
    FactEdge        fact node -> the relation it feeds

Parallel edges matter (two rules deriving q from p are two edges), so
the storage is a networkx MultiDiGraph. Nodes are addressed by integer
handles handed out in insertion order and never reused.
"""

from dataclasses import dataclass
from typing import Optional

import networkx as nx

from ..errors import PredicateNotFound, GraphInvariantViolation
from ..program.model import Fact, Rule, Import
from .lattice import Ancestry, Sign, TransformationType
from .registry import NameRegistry


@dataclass
class RelationalNode:
    tag: str
    inverse_stratum: Optional[int] = None
    ancestry: Ancestry = Ancestry.NONE

    def merge(self, incoming: Ancestry):
        """
        Fold an incoming ancestry signal into this node.

        Incoming signals are always POSITIVE or NEGATIVE; NONE or UNKNOWN
        arriving at a node that already has a concrete ancestry means the
        propagation itself is broken.
        """
        if self.ancestry is Ancestry.UNKNOWN:
            return
        if self.ancestry.is_concrete and not incoming.is_concrete:
            raise GraphInvariantViolation(
                f"Attempted to assign {incoming.name} ancestry to {self.tag} "
                f"(already {self.ancestry.name})"
            )
        self.ancestry = self.ancestry.join(incoming)

    def reset(self):
        self.inverse_stratum = None
        self.ancestry = Ancestry.NONE

    @property
    def name(self):
        stratum = "None" if self.inverse_stratum is None else self.inverse_stratum
        return f"({self.tag}, {stratum}, {self.ancestry.value})"


@dataclass
class FactNode:
    label: str

    @property
    def name(self):
        return f"({self.label})"


@dataclass(frozen=True)
class RelationalEdge:
    sign: Sign
    rule_name: Optional[str] = None
    rule_index: int = -1

    @property
    def name(self):
        if self.rule_name:
            return f"({self.rule_name}, {self.sign.value})"
        return f"({self.sign.value})"


@dataclass(frozen=True)
class FactEdge:

    @property
    def name(self):
        return "fact edge"


class AnnotatedDependencyGraph:

    def __init__(self, registry: Optional[NameRegistry] = None):
        self.graph = nx.MultiDiGraph()
        self.predicate_ids = {}
        self.output_predicate = None
        self.registry = registry if registry is not None else NameRegistry()
        self._next_handle = 0

    # -- construction --

    @classmethod
    def from_program(cls, program) -> "AnnotatedDependencyGraph":
        """Build the graph of a program: see the module docstring."""
        adg = cls(NameRegistry(constants=program.constants()))
        for tag in program.all_predicates():
            adg.add_relational_node(tag)

        for index, statement in enumerate(program.statements):
            if isinstance(statement, Fact):
                fact_node = adg.add_fact_node(statement.label)
                adg.add_fact_edge(fact_node, adg.handle_for(statement.predicate))
            elif isinstance(statement, Import):
                fact_node = adg.add_fact_node(str(statement.primary_argument))
                adg.add_fact_edge(fact_node, adg.handle_for(statement.predicate))
            elif isinstance(statement, Rule):
                for sign, atoms in ((Sign.POSITIVE, statement.body_positive()),
                                    (Sign.NEGATIVE, statement.body_negative())):
                    for body_atom in atoms:
                        for head_atom in statement.head:
                            adg.add_relational_edge(
                                adg.handle_for(body_atom.predicate),
                                adg.handle_for(head_atom.predicate),
                                sign, statement.name, index,
                            )
            # exports, outputs, parameters and declarations add nothing
        return adg

    def _new_handle(self) -> int:
        handle = self._next_handle
        self._next_handle += 1
        return handle

    def add_relational_node(self, tag: str) -> int:
        if tag in self.predicate_ids:
            raise GraphInvariantViolation(f"Relational node {tag} already exists")
        handle = self._new_handle()
        self.graph.add_node(handle, node=RelationalNode(tag))
        self.predicate_ids[tag] = handle
        self.registry.register_predicate(tag)
        return handle

    def add_fact_node(self, label: str) -> int:
        handle = self._new_handle()
        self.graph.add_node(handle, node=FactNode(label))
        return handle

    def add_fact_edge(self, fact_handle: int, rel_handle: int):
        if not isinstance(self.node_at(fact_handle), FactNode):
            raise GraphInvariantViolation(f"Fact edge must start at a fact node, not {fact_handle}")
        if self.graph.out_degree(fact_handle):
            raise GraphInvariantViolation(f"Fact node {fact_handle} already has a fact edge")
        self._relational(rel_handle)
        self.graph.add_edge(fact_handle, rel_handle, edge=FactEdge())

    def add_relational_edge(self, source: int, target: int, sign: Sign,
                            rule_name: Optional[str] = None, rule_index: int = -1):
        self._relational(source)
        self._relational(target)
        return self.graph.add_edge(
            source, target, edge=RelationalEdge(sign, rule_name, rule_index),
        )

    # -- lookup --

    def node_at(self, handle: int):
        try:
            return self.graph.nodes[handle]["node"]
        except KeyError:
            raise GraphInvariantViolation(f"No node with handle {handle}") from None

    def _relational(self, handle: int) -> RelationalNode:
        node = self.node_at(handle)
        if not isinstance(node, RelationalNode):
            raise GraphInvariantViolation(
                f"Expected relational node at {handle} but found fact node {node.name}"
            )
        return node

    def handle_for(self, tag: str) -> int:
        try:
            return self.predicate_ids[tag]
        except KeyError:
            raise PredicateNotFound(tag) from None

    def node_for(self, tag: str) -> RelationalNode:
        return self._relational(self.handle_for(tag))

    def predicates(self) -> list:
        return list(self.predicate_ids)

    def relational_nodes(self) -> list:
        return [data["node"] for _, data in self.graph.nodes(data=True)
                if isinstance(data["node"], RelationalNode)]

    def fact_nodes(self) -> list:
        return [data["node"] for _, data in self.graph.nodes(data=True)
                if isinstance(data["node"], FactNode)]

    def incoming_edges(self, handle: int) -> list:
        """(source handle, edge) pairs for every edge ending at handle."""
        return [(source, data["edge"])
                for source, _, data in self.graph.in_edges(handle, data=True)]

    def facts_of(self, tag: str) -> list:
        return [self.node_at(source) for source, edge in self.incoming_edges(self.handle_for(tag))
                if isinstance(edge, FactEdge)]

    # -- ancestry queries --

    def tags_with_ancestry(self, *ancestries) -> list:
        return [node.tag for node in self.relational_nodes() if node.ancestry in ancestries]

    def none_ancestry_tags(self) -> list:
        return self.tags_with_ancestry(Ancestry.NONE)

    def positive_ancestry_tags(self) -> list:
        return self.tags_with_ancestry(Ancestry.POSITIVE)

    def negative_ancestry_tags(self) -> list:
        return self.tags_with_ancestry(Ancestry.NEGATIVE)

    def leq_positive_ancestry_tags(self) -> list:
        return [node.tag for node in self.relational_nodes()
                if node.ancestry <= Ancestry.POSITIVE]

    def leq_negative_ancestry_tags(self) -> list:
        return [node.tag for node in self.relational_nodes()
                if node.ancestry <= Ancestry.NEGATIVE]

    def eligible_tags(self, transformation_type: TransformationType) -> list:
        """
        Relations a new fact may be attached to under transformation_type:

            EQUIVALENT   NONE
            CONTRACTIVE  NONE or NEGATIVE
            EXPANSIVE    NONE or POSITIVE
        """
        if transformation_type is TransformationType.EQUIVALENT:
            return self.none_ancestry_tags()
        if transformation_type is TransformationType.CONTRACTIVE:
            return self.leq_negative_ancestry_tags()
        return self.leq_positive_ancestry_tags()

    # -- propagation --

    def set_output(self, tag: str):
        self.handle_for(tag)
        if self.output_predicate is not None:
            raise GraphInvariantViolation(
                f"Output predicate already set to {self.output_predicate}, refusing {tag}"
            )
        self.output_predicate = tag

    def propagate(self, verbose: bool = True):
        from .propagate import propagate
        propagate(self, verbose=verbose)

    def __len__(self):
        return self.graph.number_of_nodes()

    def __repr__(self):
        return (f"AnnotatedDependencyGraph({len(self.predicate_ids)} relations, "
                f"{len(self) - len(self.predicate_ids)} facts, "
                f"{self.graph.number_of_edges()} edges)")


def build(program) -> AnnotatedDependencyGraph:
    return AnnotatedDependencyGraph.from_program(program)
