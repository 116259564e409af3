"""
metamorph: metamorphic test-case generation for stratified rule programs.

Builds an annotated dependency graph of a rule program, propagates
ancestry and inverse strata backwards from one output relation, and then
applies random mutations whose effect on that output is known in
advance: equivalent, contractive (output can only shrink) or expansive
(output can only grow).

Usage:
    python -m metamorph program.rls
    python -m metamorph program.rls --type expansive --rounds 10 --seed 7
    python -m metamorph program.rls --name "Sequence 2" --output-dir runs
"""

from .errors import (
    MetamorphError, PredicateNotFound, GraphInvariantViolation,
    NoEligibleMutationTarget, NameGenerationExhausted,
    ParseError, ValidationFailure, IOFailure,
)
from .core import (
    Ancestry, Sign, TransformationType, NameRegistry,
    RelationalNode, FactNode, RelationalEdge, FactEdge,
    AnnotatedDependencyGraph, build, propagate,
)
from .program import Program, ProgramCommit, parse_program, load_program, ValidationReport
from .transformations import (
    MetamorphicTransformation, TRANSFORMATIONS,
    AddRelationalNode, AddFactNodeAndEdge, NameRules, SelectOutputPredicate,
)
from .config import RunConfig
from .orchestrator import (
    RoundStatus, RoundOutcome, TransformationSequence,
    TransformationOrchestrator, prepare, run_sequence,
)
from .visualization import print_graph, print_outcomes, export_dot, dot_source, write_artifacts

__all__ = [
    "MetamorphError", "PredicateNotFound", "GraphInvariantViolation",
    "NoEligibleMutationTarget", "NameGenerationExhausted",
    "ParseError", "ValidationFailure", "IOFailure",
    "Ancestry", "Sign", "TransformationType", "NameRegistry",
    "RelationalNode", "FactNode", "RelationalEdge", "FactEdge",
    "AnnotatedDependencyGraph", "build", "propagate",
    "Program", "ProgramCommit", "parse_program", "load_program", "ValidationReport",
    "MetamorphicTransformation", "TRANSFORMATIONS",
    "AddRelationalNode", "AddFactNodeAndEdge", "NameRules", "SelectOutputPredicate",
    "RunConfig",
    "RoundStatus", "RoundOutcome", "TransformationSequence",
    "TransformationOrchestrator", "prepare", "run_sequence",
    "print_graph", "print_outcomes", "export_dot", "dot_source", "write_artifacts",
]
