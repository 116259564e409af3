"""
Tests for AddRelationalNode: a fresh, unused relation is declared in the
program and added to the graph, and nothing else changes.
"""

import random

from hypothesis import given, settings
from hypothesis import strategies as st

from metamorph.core.lattice import Ancestry, TransformationType
from metamorph.orchestrator import prepare
from metamorph.program.model import Declaration
from metamorph.program.parser import parse_program
from metamorph.transformations import AddRelationalNode


SOURCE = """
node(a) . node(b) . blocked(b) .
open(?X) :- node(?X), ~blocked(?X) .
@output open .
"""


# ── Helpers ──────────────────────────────────────────────────────────────────

def prepared(seed=0):
    rng = random.Random(seed)
    program, adg = prepare(parse_program(SOURCE), rng, verbose=False)
    return program, adg, rng


def annotation(adg):
    return {node.tag: (node.inverse_stratum, node.ancestry) for node in adg.relational_nodes()}


# ── Unit tests ───────────────────────────────────────────────────────────────

class TestAddRelationalNode:
    def test_always_constructible_as_equivalent(self):
        _, adg, rng = prepared()
        for intended in TransformationType:
            transformation = AddRelationalNode.try_construct(adg, rng, intended, verbose=False)
            assert transformation.realized_type is TransformationType.EQUIVALENT

    def test_adds_one_declared_predicate(self):
        program, adg, rng = prepared()
        before = program.all_predicates()
        new = AddRelationalNode.try_construct(adg, rng, TransformationType.CONTRACTIVE,
                                              verbose=False).apply(program)
        added = [p for p in new.all_predicates() if p not in before]
        assert len(added) == 1
        assert added[0].startswith("R_")
        assert new.declarations() == [Declaration(added[0])]

    def test_graph_gets_isolated_node(self):
        program, adg, rng = prepared()
        edges = adg.graph.number_of_edges()
        new = AddRelationalNode(adg, rng, verbose=False).apply(program)
        tag = new.declarations()[0].predicate
        node = adg.node_for(tag)
        assert node.ancestry is Ancestry.NONE
        assert node.inverse_stratum is None
        assert adg.graph.number_of_edges() == edges
        assert adg.registry.has_predicate(tag)

    def test_program_and_graph_agree(self):
        program, adg, rng = prepared()
        for _ in range(3):
            program = AddRelationalNode(adg, rng, verbose=False).apply(program)
        assert set(program.all_predicates()) == set(adg.predicates())

    def test_facts_rules_and_arities_unchanged(self):
        program, adg, rng = prepared()
        new = AddRelationalNode(adg, rng, verbose=False).apply(program)
        assert new.facts() == program.facts()
        assert new.rules() == program.rules()
        assert new.arities() == program.arities()

    def test_prints_new_name(self, capsys):
        program, adg, rng = prepared()
        AddRelationalNode(adg, rng, verbose=True).apply(program)
        assert "Added new relation of name R_" in capsys.readouterr().out


# ── Property-based tests ─────────────────────────────────────────────────────

class TestAddRelationalNodeProperties:

    @given(st.integers(min_value=0, max_value=2**32), st.integers(min_value=1, max_value=5))
    @settings(max_examples=30, deadline=None)
    def test_existing_annotation_preserved(self, seed, count):
        program, adg, rng = prepared(seed)
        before = annotation(adg)
        for _ in range(count):
            program = AddRelationalNode(adg, rng, verbose=False).apply(program)
        adg.propagate(verbose=False)
        after = annotation(adg)
        assert {tag: after[tag] for tag in before} == before
        assert len(after) == len(before) + count
