"""
Tests for static validation of staged statements.
"""

from metamorph.program.model import Export, Output, Fact, Constant, Variable
from metamorph.program.parser import parse_program
from metamorph.program.validation import validate, dependency_graph, ValidationReport


# ── Helpers ──────────────────────────────────────────────────────────────────

def errors_of(text):
    return validate(parse_program(text).statements).errors


# ── Unit tests ───────────────────────────────────────────────────────────────

class TestAccepted:
    def test_stratified_program(self):
        assert errors_of("""
            node(a) . node(b) . blocked(b) .
            open(?X) :- node(?X), ~blocked(?X) .
            closed(?X) :- node(?X), ~open(?X) .
            @output closed .
        """) == []

    def test_positive_recursion(self):
        assert errors_of("""
            edge(a, b) .
            path(?X, ?Y) :- edge(?X, ?Y) .
            path(?X, ?Z) :- path(?X, ?Y), edge(?Y, ?Z) .
        """) == []

    def test_declared_predicate_can_be_exported(self):
        assert errors_of("@declare lonely . @export lonely :- csv {} .") == []

    def test_report_str(self):
        assert str(ValidationReport()) == "valid program"


class TestRejected:
    def test_arity_mismatch(self):
        errors = errors_of("p(a) . p(a, b) .")
        assert errors == ["predicate p used with arity 1 and 2"]

    def test_arity_mismatch_between_fact_and_rule(self):
        assert errors_of("p(a) . q(?X) :- p(?X, ?X) .")

    def test_non_ground_fact(self):
        statements = [Fact("p", (Constant("a"), Variable("X")))]
        assert validate(statements).errors == ["fact is not ground: p(a, ?X) ."]

    def test_unsafe_head_variable(self):
        errors = errors_of("p(a) . q(?X, ?Y) :- p(?X) .")
        assert len(errors) == 1
        assert "unsafe variable ?Y in head" in errors[0]

    def test_unsafe_negated_variable(self):
        errors = errors_of("p(a) . r(b) . q(?X) :- p(?X), ~r(?Y) .")
        assert "unsafe variable ?Y in negated literal" in errors[0]

    def test_export_of_unknown_predicate(self):
        statements = list(parse_program("p(a) .").statements) + [Export("nope")]
        assert validate(statements).errors == ["export of unknown predicate nope"]

    def test_output_of_unknown_predicate(self):
        statements = list(parse_program("p(a) .").statements) + [Output("nope")]
        assert validate(statements).errors == ["output of unknown predicate nope"]

    def test_negation_cycle(self):
        errors = errors_of("""
            node(a) .
            win(?X) :- node(?X), ~lose(?X) .
            lose(?X) :- node(?X), ~win(?X) .
        """)
        assert errors
        assert all("not stratifiable" in e for e in errors)

    def test_negative_self_loop(self):
        errors = errors_of("node(a) . p(?X) :- node(?X), ~p(?X) .")
        assert errors == ["negation cycle through p -> p: program is not stratifiable"]

    def test_several_errors_joined(self):
        report = validate(parse_program("p(a) . p(a, b) . q(?X) :- r(?Y) .").statements)
        assert not report.ok
        assert "; " in str(report)


class TestDependencyGraph:
    def test_negative_flag_sticks(self):
        graph = dependency_graph(parse_program(
            "h(?X) :- b(?X) . h(?X) :- c(?X), ~b(?X) ."
        ).statements)
        assert graph["b"]["h"]["negative"] is True
        assert graph["c"]["h"]["negative"] is False
