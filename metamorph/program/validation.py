"""
Static validation of a list of statements.

A commit is accepted only if validate() finds nothing wrong:
    - every predicate is used with one arity
    - facts are ground
    - rules are safe: head variables and variables of negated literals
      occur in some positive body literal
    - exports and outputs refer to predicates the program knows
    - negation is stratified: no dependency cycle passes through a
      negated body literal
"""

from dataclasses import dataclass, field

import networkx as nx

from .model import (
    Variable, Fact, Rule, Import, Export, Output, Declaration,
)


@dataclass
class ValidationReport:
    errors: list = field(default_factory=list)

    @property
    def ok(self):
        return not self.errors

    def add(self, message: str):
        self.errors.append(message)

    def __str__(self):
        if self.ok:
            return "valid program"
        return "; ".join(self.errors)


def _check_arities(statements, report):
    arities = {}
    for statement in statements:
        if isinstance(statement, Fact):
            uses = [(statement.predicate, statement.arity)]
        elif isinstance(statement, Rule):
            atoms = list(statement.head) + [lit.atom for lit in statement.body]
            uses = [(atom.predicate, atom.arity) for atom in atoms]
        else:
            continue
        for predicate, arity in uses:
            known = arities.setdefault(predicate, arity)
            if known != arity:
                report.add(f"predicate {predicate} used with arity {known} and {arity}")
                arities[predicate] = arity


def _check_facts(statements, report):
    for statement in statements:
        if isinstance(statement, Fact):
            if any(isinstance(t, Variable) for t in statement.terms):
                report.add(f"fact is not ground: {statement}")


def _check_rule_safety(statements, report):
    for statement in statements:
        if not isinstance(statement, Rule):
            continue
        if not statement.head:
            report.add(f"rule without head: {statement}")
            continue
        bound = {v for atom in statement.body_positive() for v in atom.variables()}
        for atom in statement.head:
            for var in atom.variables():
                if var not in bound:
                    report.add(f"unsafe variable {var} in head of rule: {statement}")
        for atom in statement.body_negative():
            for var in atom.variables():
                if var not in bound:
                    report.add(f"unsafe variable {var} in negated literal of rule: {statement}")


def _check_references(statements, report):
    known = set()
    for statement in statements:
        if isinstance(statement, (Fact, Import, Declaration)):
            known.add(statement.predicate)
        elif isinstance(statement, Rule):
            known.update(atom.predicate for atom in statement.head)
            known.update(lit.predicate for lit in statement.body)
    for statement in statements:
        if isinstance(statement, (Export, Output)) and statement.predicate not in known:
            report.add(f"{type(statement).__name__.lower()} of unknown predicate {statement.predicate}")


def dependency_graph(statements) -> nx.DiGraph:
    """Predicate dependency graph: body predicate -> head predicate, flagged if negated."""
    graph = nx.DiGraph()
    for statement in statements:
        if not isinstance(statement, Rule):
            continue
        for lit in statement.body:
            for atom in statement.head:
                if graph.has_edge(lit.predicate, atom.predicate):
                    graph[lit.predicate][atom.predicate]["negative"] |= lit.negated
                else:
                    graph.add_edge(lit.predicate, atom.predicate, negative=lit.negated)
    return graph


def _check_stratification(statements, report):
    graph = dependency_graph(statements)
    component_of = {}
    for index, component in enumerate(nx.strongly_connected_components(graph)):
        for predicate in component:
            component_of[predicate] = index
    # edge order, not component order, so reports are reproducible
    for u, v, negative in graph.edges(data="negative"):
        if negative and component_of[u] == component_of[v]:
            report.add(f"negation cycle through {u} -> {v}: program is not stratifiable")


def validate(statements) -> ValidationReport:
    report = ValidationReport()
    _check_arities(statements, report)
    _check_facts(statements, report)
    _check_rule_safety(statements, report)
    _check_references(statements, report)
    _check_stratification(statements, report)
    return report
