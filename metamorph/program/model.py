"""
Program model: terms, atoms, statements, Program, ProgramCommit.

This is the reference Program Model Adapter. The rest of metamorph only
reads a Program through the methods below and only changes one through
fork() -> ProgramCommit -> submit().

Terms:
    Variable("X")      ->  ?X
    Constant("alice")  ->  alice
    Constant("a b")    ->  "a b"
    Constant(42)       ->  42

Statements (one per line in the materialized text):
    Fact         edge(a, b) .
    Rule         [r_1] path(?X, ?Y) :- edge(?X, ?Y), ~blocked(?X) .
    Import       @import edge :- csv { resource = "edges.csv" } .
    Export       @export path :- csv {} .
    Output       @output path .
    Parameter    @parameter $limit = 10 .
    Declaration  @declare R_17 .

A Program is immutable; every edit produces a new one.
"""

from dataclasses import dataclass, field
from typing import Optional
import re

from ..errors import ValidationFailure


_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")


def render_value(value) -> str:
    """Render a constant value the way the parser reads it back."""
    if isinstance(value, int):
        return str(value)
    if _IDENTIFIER.match(value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


@dataclass(frozen=True)
class Variable:
    name: str

    def __str__(self):
        return f"?{self.name}"


@dataclass(frozen=True)
class Constant:
    value: object  # str or int

    def __str__(self):
        return render_value(self.value)


@dataclass(frozen=True)
class Atom:
    predicate: str
    terms: tuple = ()

    @property
    def arity(self):
        return len(self.terms)

    def variables(self) -> list:
        return [t for t in self.terms if isinstance(t, Variable)]

    def __str__(self):
        return f"{self.predicate}({', '.join(str(t) for t in self.terms)})"


@dataclass(frozen=True)
class Literal:
    atom: Atom
    negated: bool = False

    @property
    def predicate(self):
        return self.atom.predicate

    def __str__(self):
        return f"~{self.atom}" if self.negated else str(self.atom)


@dataclass(frozen=True)
class Fact:
    predicate: str
    terms: tuple = ()

    @property
    def arity(self):
        return len(self.terms)

    @property
    def label(self):
        """Argument values, used to name the fact's node in the graph."""
        return ", ".join(str(t) for t in self.terms)

    def __str__(self):
        return f"{self.predicate}({self.label}) ."


@dataclass(frozen=True)
class Rule:
    head: tuple
    body: tuple = ()
    name: Optional[str] = None

    def body_positive(self) -> list:
        return [lit.atom for lit in self.body if not lit.negated]

    def body_negative(self) -> list:
        return [lit.atom for lit in self.body if lit.negated]

    def renamed(self, name: str) -> "Rule":
        return Rule(self.head, self.body, name)

    def __str__(self):
        head = ", ".join(str(a) for a in self.head)
        text = f"{head} :- {', '.join(str(lit) for lit in self.body)} ."
        if self.name:
            text = f"[{self.name}] {text}"
        return text


def _render_parameters(parameters: tuple) -> str:
    if not parameters:
        return "{}"
    inner = ", ".join(f"{key} = {render_value(value)}" for key, value in parameters)
    return f"{{ {inner} }}"


@dataclass(frozen=True)
class Import:
    predicate: str
    format: str = "csv"
    parameters: tuple = ()  # ((key, value), ...)

    @property
    def primary_argument(self):
        """The first parameter value, normally the resource being read."""
        if not self.parameters:
            return self.format
        return self.parameters[0][1]

    def __str__(self):
        return f"@import {self.predicate} :- {self.format} {_render_parameters(self.parameters)} ."


@dataclass(frozen=True)
class Export:
    predicate: str
    format: str = "csv"
    parameters: tuple = ()

    def __str__(self):
        return f"@export {self.predicate} :- {self.format} {_render_parameters(self.parameters)} ."


@dataclass(frozen=True)
class Output:
    predicate: str

    def __str__(self):
        return f"@output {self.predicate} ."


@dataclass(frozen=True)
class Parameter:
    name: str
    value: object

    def __str__(self):
        return f"@parameter ${self.name} = {render_value(self.value)} ."


@dataclass(frozen=True)
class Declaration:
    """A predicate that exists without any fact or rule mentioning it."""
    predicate: str

    def __str__(self):
        return f"@declare {self.predicate} ."


@dataclass(frozen=True)
class Program:
    statements: tuple = ()

    def _of_type(self, kind) -> list:
        return [s for s in self.statements if isinstance(s, kind)]

    def facts(self) -> list:
        return self._of_type(Fact)

    def rules(self) -> list:
        return self._of_type(Rule)

    def imports(self) -> list:
        return self._of_type(Import)

    def exports(self) -> list:
        return self._of_type(Export)

    def outputs(self) -> list:
        return self._of_type(Output)

    def parameters(self) -> list:
        return self._of_type(Parameter)

    def declarations(self) -> list:
        return self._of_type(Declaration)

    def all_predicates(self) -> list:
        """Every predicate name, in order of first appearance."""
        seen = {}
        for statement in self.statements:
            if isinstance(statement, Rule):
                for atom in statement.head:
                    seen.setdefault(atom.predicate, None)
                for lit in statement.body:
                    seen.setdefault(lit.predicate, None)
            elif isinstance(statement, Parameter):
                continue
            else:
                seen.setdefault(statement.predicate, None)
        return list(seen)

    def derived_predicates(self) -> list:
        """Predicates that appear in some rule head."""
        seen = {}
        for rule in self.rules():
            for atom in rule.head:
                seen.setdefault(atom.predicate, None)
        return list(seen)

    def arities(self) -> dict:
        """predicate -> arity, for every predicate a fact or rule establishes."""
        arities = {}
        for statement in self.statements:
            if isinstance(statement, Fact):
                arities.setdefault(statement.predicate, statement.arity)
            elif isinstance(statement, Rule):
                for atom in list(statement.head) + [lit.atom for lit in statement.body]:
                    arities.setdefault(atom.predicate, atom.arity)
        return arities

    def constants(self) -> list:
        """Distinct constant values used in facts, in order of appearance."""
        seen = {}
        for fact in self.facts():
            for term in fact.terms:
                seen.setdefault((type(term.value), term.value), term.value)
        return list(seen.values())

    def fork(self, keep_all: bool = True) -> "ProgramCommit":
        return ProgramCommit(self, keep_all=keep_all)

    def transform(self, transformation) -> "Program":
        return transformation.apply(self)

    def materialize(self) -> str:
        return "".join(f"{statement}\n" for statement in self.statements)

    def __str__(self):
        return self.materialize()


@dataclass
class ProgramCommit:
    """
    A staged edit of a program.

    keep_all=True starts from every statement of the base program;
    keep_all=False starts empty and the caller keep()s what survives.
    submit() validates the staged statements and returns the new Program,
    or raises ValidationFailure without touching the base program.
    """
    base: Program
    keep_all: bool = True
    statements: list = field(default_factory=list)

    def __post_init__(self):
        if self.keep_all and not self.statements:
            self.statements = list(self.base.statements)

    def keep(self, statement):
        self.statements.append(statement)

    def add_fact(self, fact: Fact):
        self.statements.append(fact)

    def add_rule(self, rule: Rule):
        self.statements.append(rule)

    def add_import(self, statement: Import):
        self.statements.append(statement)

    def add_export(self, statement: Export):
        self.statements.append(statement)

    def add_output(self, statement: Output):
        self.statements.append(statement)

    def add_declaration(self, statement: Declaration):
        self.statements.append(statement)

    def submit(self) -> Program:
        from .validation import validate

        report = validate(self.statements)
        if not report.ok:
            raise ValidationFailure(report)
        return Program(tuple(self.statements))
