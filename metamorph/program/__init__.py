from .model import (
    Variable, Constant, Atom, Literal,
    Fact, Rule, Import, Export, Output, Parameter, Declaration,
    Program, ProgramCommit,
)
from .parser import parse_program, load_program
from .validation import ValidationReport, validate

__all__ = [
    "Variable", "Constant", "Atom", "Literal",
    "Fact", "Rule", "Import", "Export", "Output", "Parameter", "Declaration",
    "Program", "ProgramCommit",
    "parse_program", "load_program",
    "ValidationReport", "validate",
]
