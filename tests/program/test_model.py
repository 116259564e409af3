"""
Tests for the program model and staged commits.
"""

import pytest

from metamorph.errors import ValidationFailure
from metamorph.program.model import (
    Variable, Constant, Atom, Literal, Fact, Rule, Export, Declaration, Program,
    render_value,
)
from metamorph.program.parser import parse_program


SOURCE = """\
node(a) .
node("b c") .
blocked(7) .
@import extra :- csv { resource = "extra.csv" } .
open(?X) :- node(?X), ~blocked(?X) .
@output open .
@parameter $limit = 3 .
"""


# ── Unit tests ───────────────────────────────────────────────────────────────

class TestRendering:
    def test_render_value(self):
        assert render_value("alice") == "alice"
        assert render_value("two words") == '"two words"'
        assert render_value("7") == '"7"'
        assert render_value(7) == "7"

    def test_rule_with_name(self):
        rule = Rule((Atom("h", (Variable("X"),)),), (Literal(Atom("b", (Variable("X"),)), True),), "r_2")
        assert str(rule) == "[r_2] h(?X) :- ~b(?X) ."

    def test_materialize_is_one_statement_per_line(self):
        program = parse_program(SOURCE)
        assert program.materialize() == (
            "node(a) .\n"
            'node("b c") .\n'
            "blocked(7) .\n"
            '@import extra :- csv { resource = "extra.csv" } .\n'
            "open(?X) :- node(?X), ~blocked(?X) .\n"
            "@output open .\n"
            "@parameter $limit = 3 .\n"
        )


class TestQueries:
    def test_all_predicates_in_first_appearance_order(self):
        assert parse_program(SOURCE).all_predicates() == ["node", "blocked", "extra", "open"]

    def test_derived_predicates(self):
        assert parse_program(SOURCE).derived_predicates() == ["open"]

    def test_arities(self):
        assert parse_program(SOURCE).arities() == {"node": 1, "blocked": 1, "open": 1}

    def test_constants_keep_type(self):
        program = parse_program('p(7) . p("7") . p(7) .')
        assert program.constants() == [7, "7"]

    def test_fact_label(self):
        assert Fact("edge", (Constant("a"), Constant(3))).label == "a, 3"

    def test_statement_views(self):
        program = parse_program(SOURCE)
        assert len(program.facts()) == 3
        assert len(program.rules()) == 1
        assert len(program.imports()) == 1
        assert len(program.outputs()) == 1
        assert len(program.parameters()) == 1
        assert program.exports() == [] and program.declarations() == []


class TestCommit:
    def test_keep_all_then_add(self):
        program = parse_program(SOURCE)
        commit = program.fork()
        commit.add_fact(Fact("node", (Constant("z"),)))
        new = commit.submit()
        assert len(new.facts()) == 4
        assert len(program.facts()) == 3

    def test_selective_keep(self):
        program = parse_program(SOURCE)
        commit = program.fork(keep_all=False)
        for statement in program.statements:
            if statement not in program.outputs():
                commit.keep(statement)
        commit.add_export(Export("open"))
        new = commit.submit()
        assert new.outputs() == []
        assert new.exports() == [Export("open")]

    def test_declaration_introduces_predicate(self):
        new = parse_program(SOURCE).fork()
        new.add_declaration(Declaration("R_1"))
        assert "R_1" in new.submit().all_predicates()

    def test_rejected_commit_leaves_base_untouched(self):
        program = parse_program(SOURCE)
        commit = program.fork()
        commit.add_fact(Fact("node", (Constant("a"), Constant("b"))))
        with pytest.raises(ValidationFailure) as excinfo:
            commit.submit()
        assert "arity" in str(excinfo.value.report)
        assert program == parse_program(SOURCE)

    def test_transform_calls_apply(self):
        class Drop:
            def apply(self, program):
                return Program(program.statements[:1])

        assert len(parse_program(SOURCE).transform(Drop()).statements) == 1
