"""
Choose the single output relation of a transformation sequence.

If the program exports or outputs anything, one of those relations is
picked at random; otherwise one of the derived (rule head) relations is.
All other export and output statements are dropped, the chosen relation
is exported as csv, and the graph learns it as its output predicate.
"""

from ..errors import PredicateNotFound
from ..program.model import Export, Output


class SelectOutputPredicate:

    def __init__(self, adg, rng, verbose=True):
        self.adg = adg
        self.rng = rng
        self.verbose = verbose

    def candidates(self, program) -> list:
        directives = {}
        for statement in program.statements:
            if isinstance(statement, (Export, Output)):
                directives.setdefault(statement.predicate, None)
        if directives:
            return list(directives)
        return program.derived_predicates()

    def apply(self, program):
        candidates = self.candidates(program)
        if not candidates:
            raise PredicateNotFound("<output>: program derives no predicate")
        chosen = self.rng.choice(candidates)
        if self.verbose:
            print(f"Using the randomly chosen output predicate of {len(candidates)}: {chosen}")

        commit = program.fork(keep_all=False)
        for statement in program.statements:
            if not isinstance(statement, (Export, Output)):
                commit.keep(statement)
        commit.add_export(Export(chosen, "csv"))
        new_program = commit.submit()

        self.adg.set_output(chosen)
        return new_program
