"""
Rule file parser: text -> Program.

A small recursive-descent parser over a regex tokenizer. It reads the
syntax documented in model.py, which is also exactly what
Program.materialize() writes, so parse(materialize(p)) == p.
"""

import re

from ..errors import ParseError, IOFailure
from .model import (
    Variable, Constant, Atom, Literal, Fact, Rule,
    Import, Export, Output, Parameter, Declaration, Program,
)


TOKEN_SPEC = [
    ("COMMENT",   r"%[^\n]*"),
    ("NEWLINE",   r"\n"),
    ("SKIP",      r"[ \t\r]+"),
    ("ARROW",     r":-"),
    ("DIRECTIVE", r"@[A-Za-z]+"),
    ("VARIABLE",  r"\?[A-Za-z_][A-Za-z0-9_]*"),
    ("PARAM",     r"\$[A-Za-z_][A-Za-z0-9_]*"),
    ("STRING",    r'"(?:[^"\\\n]|\\.)*"'),
    ("INTEGER",   r"-?[0-9]+"),
    ("IDENT",     r"[A-Za-z_][A-Za-z0-9_]*"),
    ("PUNCT",     r"[(),.{}=~\[\]]"),
    ("MISMATCH",  r"."),
]

TOKEN_RE = re.compile("|".join(f"(?P<{name}>{pattern})" for name, pattern in TOKEN_SPEC))


def tokenize(text: str) -> list:
    """Return a list of (kind, value, line) tuples."""
    tokens = []
    line = 1
    for match in TOKEN_RE.finditer(text):
        kind = match.lastgroup
        value = match.group()
        if kind == "NEWLINE":
            line += 1
        elif kind in ("SKIP", "COMMENT"):
            continue
        elif kind == "MISMATCH":
            raise ParseError(f"unexpected character {value!r}", line)
        else:
            tokens.append((kind, value, line))
    return tokens


def _unescape(literal: str) -> str:
    return re.sub(r"\\(.)", r"\1", literal[1:-1])


class _Parser:
    def __init__(self, tokens):
        self.tokens = tokens
        self.pos = 0

    # -- token helpers --

    def peek(self):
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return ("EOF", "", self.tokens[-1][2] if self.tokens else 0)

    def next(self):
        token = self.peek()
        self.pos += 1
        return token

    def at(self, value):
        return self.peek()[1] == value and self.peek()[0] in ("PUNCT", "ARROW")

    def expect(self, value):
        kind, text, line = self.next()
        if text != value or kind not in ("PUNCT", "ARROW"):
            raise ParseError(f"expected {value!r}, found {text or 'end of input'!r}", line)

    def expect_kind(self, kind):
        token = self.next()
        if token[0] != kind:
            raise ParseError(f"expected {kind.lower()}, found {token[1] or 'end of input'!r}", token[2])
        return token

    # -- grammar --

    def program(self) -> Program:
        statements = []
        while self.peek()[0] != "EOF":
            statements.append(self.statement())
        return Program(tuple(statements))

    def statement(self):
        kind, value, line = self.peek()
        if kind == "DIRECTIVE":
            return self.directive()
        name = None
        if self.at("["):
            self.next()
            name = self.expect_kind("IDENT")[1]
            self.expect("]")
        head = [self.atom()]
        while self.at(","):
            self.next()
            head.append(self.atom())
        if self.at(":-"):
            self.next()
            body = [self.literal()]
            while self.at(","):
                self.next()
                body.append(self.literal())
            self.expect(".")
            return Rule(tuple(head), tuple(body), name)
        self.expect(".")
        if name is not None or len(head) != 1:
            raise ParseError("facts are a single atom without a rule name", line)
        atom = head[0]
        return Fact(atom.predicate, atom.terms)

    def directive(self):
        _, value, line = self.next()
        if value == "@import" or value == "@export":
            predicate = self.expect_kind("IDENT")[1]
            self.expect(":-")
            fmt = self.expect_kind("IDENT")[1]
            parameters = self.parameter_map()
            self.expect(".")
            kind = Import if value == "@import" else Export
            return kind(predicate, fmt, parameters)
        if value == "@output":
            predicate = self.expect_kind("IDENT")[1]
            self.expect(".")
            return Output(predicate)
        if value == "@declare":
            predicate = self.expect_kind("IDENT")[1]
            self.expect(".")
            return Declaration(predicate)
        if value == "@parameter":
            name = self.expect_kind("PARAM")[1][1:]
            self.expect("=")
            parameter = Parameter(name, self.value())
            self.expect(".")
            return parameter
        raise ParseError(f"unknown directive {value}", line)

    def parameter_map(self) -> tuple:
        self.expect("{")
        pairs = []
        while not self.at("}"):
            key = self.expect_kind("IDENT")[1]
            self.expect("=")
            pairs.append((key, self.value()))
            if not self.at("}"):
                self.expect(",")
        self.expect("}")
        return tuple(pairs)

    def value(self):
        kind, text, line = self.next()
        if kind == "STRING":
            return _unescape(text)
        if kind == "INTEGER":
            return int(text)
        if kind == "IDENT":
            return text
        raise ParseError(f"expected a constant, found {text or 'end of input'!r}", line)

    def literal(self) -> Literal:
        negated = False
        if self.at("~"):
            self.next()
            negated = True
        return Literal(self.atom(), negated)

    def atom(self) -> Atom:
        predicate = self.expect_kind("IDENT")[1]
        terms = []
        if self.at("("):
            self.next()
            while not self.at(")"):
                terms.append(self.term())
                if not self.at(")"):
                    self.expect(",")
            self.expect(")")
        return Atom(predicate, tuple(terms))

    def term(self):
        kind, text, line = self.peek()
        if kind == "VARIABLE":
            self.next()
            return Variable(text[1:])
        return Constant(self.value())


def parse_program(text: str) -> Program:
    """Parse rule-file text. Raises ParseError with a line number."""
    return _Parser(tokenize(text)).program()


def load_program(path) -> Program:
    try:
        with open(path) as f:
            text = f.read()
    except OSError as e:
        raise IOFailure(f"cannot read rule file {path}: {e}") from e
    return parse_program(text)
