"""
Typed errors.

Everything raised on purpose derives from MetamorphError, so the CLI can
turn any of them into a diagnostic and a non-zero exit status. Only
NoEligibleMutationTarget is expected during a normal run: the orchestrator
catches it and moves on to another transformation kind.
"""


class MetamorphError(Exception):
    """Base class for all errors raised by metamorph."""


class PredicateNotFound(MetamorphError, KeyError):
    """A predicate tag is not known to the dependency graph."""

    def __init__(self, tag: str):
        super().__init__(tag)
        self.tag = tag

    def __str__(self):
        return f"Unknown predicate: {self.tag}"


class GraphInvariantViolation(MetamorphError):
    """The dependency graph reached a state that must never happen."""


class NoEligibleMutationTarget(MetamorphError):
    """No transformation could be constructed for the requested class."""


class NameGenerationExhausted(MetamorphError):
    """Fresh name search gave up after its retry budget."""


class ParseError(MetamorphError):
    """The rule file could not be parsed."""

    def __init__(self, message: str, line: int = 0):
        super().__init__(message)
        self.line = line

    def __str__(self):
        msg = super().__str__()
        return f"line {self.line}: {msg}" if self.line else msg


class ValidationFailure(MetamorphError):
    """A commit was rejected by static validation. Carries the report."""

    def __init__(self, report):
        super().__init__(str(report))
        self.report = report


class IOFailure(MetamorphError):
    """Writing or reading an artifact failed."""
